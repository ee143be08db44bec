"""
Financial Summarizer

DESIGN DECISION: The summary is DETERMINISTIC and pure.
It takes the raw accounts, transactions and categories of one dashboard
and derives every figure from them. Nothing is cached, nothing is
trusted from a stored balance, and nothing here talks to the AI.

The AI only ever sees what this module produces.

Sign conventions:
- A liability account's signed balance is authoritative. Card spending
  and loan principal are negative, so net worth is assets + the signed
  liability sum. The displayed liability figure is its absolute value.
- Transfers between owned accounts move balances but are not income
  or expenses.
"""

from collections import defaultdict
from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal
from typing import Optional

import structlog

from financify.models.finance import (
    Account,
    AccountType,
    Category,
    ChartSlice,
    FinancialSummary,
    Transaction,
)


ASSET_ACCOUNT_TYPES = frozenset({
    AccountType.BANK.value,
    AccountType.INVESTMENT.value,
    AccountType.CASH.value,
})
LIABILITY_ACCOUNT_TYPES = frozenset({
    AccountType.CREDIT_CARD.value,
    AccountType.LOAN.value,
})

CHART_PALETTE = (
    "#0088FE",
    "#00C49F",
    "#FFBB28",
    "#FF8042",
    "#8884d8",
    "#82ca9d",
)

UNCATEGORIZED = "Uncategorized"

logger = structlog.get_logger(__name__)


def palette_color(index: int, palette: tuple[str, ...] = CHART_PALETTE) -> str:
    """Colour for the n-th item, cycling through the palette."""
    return palette[index % len(palette)]


def start_of_month(now: Optional[datetime] = None) -> datetime:
    """
    First instant of the calendar month containing `now`, local time.

    Aware datetimes are converted to local time first so the result
    compares cleanly with normalized transaction dates.
    """
    now = now or datetime.now()
    if now.tzinfo is not None:
        now = now.astimezone().replace(tzinfo=None)
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def compute_account_balances(
    accounts: Iterable[Account],
    transactions: Iterable[Transaction],
) -> dict[str, Decimal]:
    """
    Balance of every account: the sum of its transactions' signed amounts.

    Transactions are bucketed by account id in one pass. Accounts with
    no transactions get a zero balance; transactions pointing at unknown
    accounts are ignored.
    """
    totals: dict[str, Decimal] = defaultdict(Decimal)
    for txn in transactions:
        totals[txn.account_id] += txn.amount
    return {acc.id: totals.get(acc.id, Decimal("0")) for acc in accounts}


def category_name_map(categories: Iterable[Category]) -> dict[str, str]:
    """Category id to display name."""
    names: dict[str, str] = {}
    for cat in categories:
        # First definition wins when ids repeat
        names.setdefault(cat.id, cat.name)
    return names


def _add_to_breakdown(
    breakdown: dict[str, ChartSlice],
    name: str,
    amount: Decimal,
) -> None:
    current = breakdown.get(name)
    if current is None:
        breakdown[name] = ChartSlice(
            name=name,
            value=amount,
            fill=palette_color(len(breakdown)),
        )
    else:
        current.value += amount


def summarize_finances(
    accounts: list[Account],
    transactions: list[Transaction],
    categories: list[Category],
    now: Optional[datetime] = None,
) -> FinancialSummary:
    """
    Aggregate one dashboard's records into a FinancialSummary.

    Args:
        accounts: All accounts of the dashboard (archived ones included).
        transactions: All transactions of the dashboard.
        categories: Categories used to label income and expenses.
        now: Evaluation instant. Defaults to the current local time.

    Returns:
        FinancialSummary with balance-sheet totals, month-to-date
        income/expenses and chart breakdowns.
    """
    balances = compute_account_balances(accounts, transactions)

    asset_accounts = [a for a in accounts if a.account_type in ASSET_ACCOUNT_TYPES]
    liability_accounts = [
        a for a in accounts if a.account_type in LIABILITY_ACCOUNT_TYPES
    ]

    assets = sum((balances[a.id] for a in asset_accounts), Decimal("0"))
    signed_liabilities = sum(
        (balances[a.id] for a in liability_accounts), Decimal("0")
    )

    period_start = start_of_month(now)
    category_names = category_name_map(categories)

    income = Decimal("0")
    expenses = Decimal("0")
    income_map: dict[str, ChartSlice] = {}
    expense_map: dict[str, ChartSlice] = {}

    for txn in transactions:
        if txn.date < period_start or txn.is_transfer:
            continue

        name = category_names.get(txn.category_id, UNCATEGORIZED)
        if txn.amount > 0:
            income += txn.amount
            _add_to_breakdown(income_map, name, txn.amount)
        elif txn.amount < 0:
            spent = abs(txn.amount)
            expenses += spent
            _add_to_breakdown(expense_map, name, spent)

    # Chart colours follow the account's position in the unfiltered list
    asset_data = [
        ChartSlice(name=acc.name, value=balances[acc.id], fill=palette_color(i))
        for i, acc in enumerate(asset_accounts)
        if balances[acc.id] > 0
    ]
    liability_data = [
        ChartSlice(name=acc.name, value=abs(balances[acc.id]), fill=palette_color(i))
        for i, acc in enumerate(liability_accounts)
        if balances[acc.id] != 0
    ]

    summary = FinancialSummary(
        assets=assets,
        liabilities=abs(signed_liabilities),
        net_worth=assets + signed_liabilities,
        income=income,
        expenses=expenses,
        cashflow=income - expenses,
        asset_data=asset_data,
        liability_data=liability_data,
        income_data=list(income_map.values()),
        expense_data=list(expense_map.values()),
        period_start=period_start,
    )

    logger.debug(
        "summary_computed",
        accounts=len(accounts),
        transactions=len(transactions),
        net_worth=str(summary.net_worth),
        cashflow=str(summary.cashflow),
    )
    return summary
