"""
Dashboard Breakdowns

Secondary, read-only views over the same raw records the summarizer uses:
- drill-down transaction lists behind each quadrant card
- spending split by need / want / must classification
- income vs. expense and category spending reports for a date range
- credit card utilization and spending
- live / closed loans with repayment progress

All functions are deterministic and never mutate their inputs.
"""

from collections import defaultdict
from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

import structlog
from pydantic import BaseModel, Field

from financify.models.finance import (
    Account,
    AccountType,
    Category,
    ChartSlice,
    Transaction,
)
from financify.summary.summarizer import (
    ASSET_ACCOUNT_TYPES,
    LIABILITY_ACCOUNT_TYPES,
    UNCATEGORIZED,
    category_name_map,
    start_of_month,
)


logger = structlog.get_logger(__name__)


class DrillDownKind(str, Enum):
    """Which quadrant card the user clicked."""
    INCOME = "income"
    EXPENSES = "expenses"
    ASSETS = "assets"
    LIABILITIES = "liabilities"
    TOTAL = "total"


CLASSIFICATION_COLORS = {
    "need": "#f97316",
    "want": "#8b5cf6",
    "must": "#ef4444",
    "unclassified": "#6b7280",
}
FALLBACK_CLASSIFICATION_COLOR = "#A8A29E"


class IncomeExpenseReport(BaseModel):
    """Totals for a reporting period."""

    start: datetime
    end: datetime
    income: Decimal
    expenses: Decimal

    @property
    def net(self) -> Decimal:
        return self.income - self.expenses


class CategorySpendingRow(BaseModel):
    """Spending for one category within a reporting period."""

    category: str
    amount: Decimal
    count: int


def _resolve_kind(kind) -> DrillDownKind:
    try:
        return DrillDownKind(kind)
    except ValueError:
        return DrillDownKind.TOTAL


def drill_down_transactions(
    kind,
    accounts: list[Account],
    transactions: list[Transaction],
    now: Optional[datetime] = None,
) -> list[Transaction]:
    """
    Transactions behind a quadrant card, newest first.

    - income / expenses: month-to-date, non-transfer, by sign
    - assets / liabilities: every transaction on those accounts
    - anything else: all transactions
    """
    kind = _resolve_kind(kind)

    if kind in (DrillDownKind.INCOME, DrillDownKind.EXPENSES):
        period_start = start_of_month(now)
        wants_income = kind == DrillDownKind.INCOME
        selected = [
            t for t in transactions
            if t.date >= period_start
            and not t.is_transfer
            and ((t.amount > 0) if wants_income else (t.amount < 0))
        ]
    elif kind == DrillDownKind.ASSETS:
        ids = {a.id for a in accounts if a.account_type in ASSET_ACCOUNT_TYPES}
        selected = [t for t in transactions if t.account_id in ids]
    elif kind == DrillDownKind.LIABILITIES:
        ids = {a.id for a in accounts if a.account_type in LIABILITY_ACCOUNT_TYPES}
        selected = [t for t in transactions if t.account_id in ids]
    else:
        selected = list(transactions)

    return sorted(selected, key=lambda t: t.date, reverse=True)


def spending_by_classification(
    transactions: Iterable[Transaction],
) -> list[ChartSlice]:
    """Non-transfer outflows summed per classification tag."""
    totals: dict[str, Decimal] = {}
    for txn in transactions:
        if txn.amount >= 0 or txn.is_transfer:
            continue
        key = txn.classification.value if txn.classification else "unclassified"
        totals[key] = totals.get(key, Decimal("0")) + abs(txn.amount)

    return [
        ChartSlice(
            name=name,
            value=value,
            fill=CLASSIFICATION_COLORS.get(name, FALLBACK_CLASSIFICATION_COLOR),
        )
        for name, value in totals.items()
    ]


def _in_period(txn: Transaction, start: datetime, end: datetime) -> bool:
    return start <= txn.date <= end


def income_expense_report(
    transactions: Iterable[Transaction],
    start: datetime,
    end: datetime,
) -> IncomeExpenseReport:
    """
    Income and expense totals for [start, end].

    Transfers are counted here, as the period reports always have.
    """
    income = Decimal("0")
    expenses = Decimal("0")
    for txn in transactions:
        if not _in_period(txn, start, end):
            continue
        if txn.amount > 0:
            income += txn.amount
        elif txn.amount < 0:
            expenses += abs(txn.amount)
    return IncomeExpenseReport(start=start, end=end, income=income, expenses=expenses)


def category_spending_report(
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
    start: datetime,
    end: datetime,
) -> list[CategorySpendingRow]:
    """Outflows per category for [start, end], largest first."""
    return _spending_rows(
        (
            t for t in transactions
            if t.amount < 0 and _in_period(t, start, end)
        ),
        category_name_map(categories),
    )


def _spending_rows(
    outflows: Iterable[Transaction],
    names: dict[str, str],
) -> list[CategorySpendingRow]:
    rows: dict[str, CategorySpendingRow] = {}
    for txn in outflows:
        name = names.get(txn.category_id, UNCATEGORIZED)
        row = rows.get(name)
        if row is None:
            rows[name] = CategorySpendingRow(
                category=name, amount=abs(txn.amount), count=1
            )
        else:
            row.amount += abs(txn.amount)
            row.count += 1

    return sorted(rows.values(), key=lambda r: r.amount, reverse=True)


# =============================================================================
# CREDIT CARDS AND DEBTS
# =============================================================================

HIGH_UTILIZATION_PERCENT = Decimal("40")
OPENING_BALANCE_DESCRIPTION = "Opening Balance"


class CreditCardReport(BaseModel):
    """Balance, utilization and spending of one credit card."""

    account: Account
    used: Decimal
    utilization: Decimal = Field(
        ...,
        description="Percent of the credit limit in use; 0 without a limit"
    )
    spending: Decimal
    spending_by_category: list[CategorySpendingRow] = Field(default_factory=list)

    @property
    def high_utilization(self) -> bool:
        return self.utilization > HIGH_UTILIZATION_PERCENT


class CreditCardAnalysis(BaseModel):
    """All credit cards of one dashboard."""

    cards: list[CreditCardReport] = Field(default_factory=list)
    total_spending: Decimal = Decimal("0")
    spending_by_category: list[CategorySpendingRow] = Field(default_factory=list)
    spending_by_classification: list[ChartSlice] = Field(default_factory=list)


def credit_card_analysis(
    accounts: Iterable[Account],
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
) -> CreditCardAnalysis:
    """
    Per-card balance, utilization and spending.

    Spending is non-transfer outflows. Category breakdowns only count
    outflows that carry a category id; an id with no matching category
    is reported as Uncategorized.
    """
    cards = [a for a in accounts if a.account_type == AccountType.CREDIT_CARD.value]
    card_ids = {a.id for a in cards}
    names = category_name_map(categories)

    by_card: dict[str, list[Transaction]] = defaultdict(list)
    for txn in transactions:
        if txn.account_id in card_ids:
            by_card[txn.account_id].append(txn)

    reports = []
    all_spending: list[Transaction] = []
    for card in cards:
        card_txns = by_card[card.id]
        used = abs(sum((t.amount for t in card_txns), Decimal("0")))
        spent = [t for t in card_txns if t.amount < 0 and not t.is_transfer]
        all_spending.extend(spent)

        utilization = Decimal("0")
        if card.credit_limit:
            utilization = used / card.credit_limit * 100

        reports.append(CreditCardReport(
            account=card,
            used=used,
            utilization=utilization,
            spending=sum((abs(t.amount) for t in spent), Decimal("0")),
            spending_by_category=_spending_rows(
                (t for t in spent if t.category_id), names
            ),
        ))

    return CreditCardAnalysis(
        cards=reports,
        total_spending=sum((r.spending for r in reports), Decimal("0")),
        spending_by_category=_spending_rows(
            (t for t in all_spending if t.category_id), names
        ),
        spending_by_classification=spending_by_classification(
            t for t in all_spending if t.classification
        ),
    )


class DebtReport(BaseModel):
    """Repayment progress of one loan."""

    account: Account
    balance: Decimal = Field(..., description="Signed balance; negative while owed")
    initial_amount: Decimal = Field(
        ...,
        description="Size of the opening-balance transaction, 0 if there is none"
    )
    amount_paid: Decimal
    progress: Decimal = Field(..., description="Percent of the initial amount repaid")
    is_overdue: bool = False

    @property
    def is_paid(self) -> bool:
        return self.balance >= 0


class DebtSummary(BaseModel):
    """Live and closed loans of one dashboard."""

    live: list[DebtReport] = Field(default_factory=list)
    closed: list[DebtReport] = Field(default_factory=list)
    total_outstanding: Decimal = Decimal("0")
    total_paid: Decimal = Decimal("0")


def _debt_report(
    account: Account,
    transactions: list[Transaction],
    now: datetime,
) -> DebtReport:
    balance = sum((t.amount for t in transactions), Decimal("0"))
    opening = next(
        (t for t in transactions if t.description == OPENING_BALANCE_DESCRIPTION),
        None,
    )
    initial_amount = abs(opening.amount) if opening else Decimal("0")

    amount_paid = Decimal("0")
    progress = Decimal("0")
    if initial_amount > 0:
        amount_paid = initial_amount - abs(balance)
        progress = amount_paid / initial_amount * 100

    return DebtReport(
        account=account,
        balance=balance,
        initial_amount=initial_amount,
        amount_paid=amount_paid,
        progress=progress,
        is_overdue=(
            balance < 0
            and account.due_date is not None
            and account.due_date < now
        ),
    )


def debt_summary(
    accounts: Iterable[Account],
    transactions: Iterable[Transaction],
    now: Optional[datetime] = None,
) -> DebtSummary:
    """
    Split loan accounts into live (balance < 0) and closed debts.

    Live debts are ordered by due date, undated ones first; closed
    debts by name. `total_paid` sums every loan transaction except the
    opening balance, so it is the net repayment across all loans.
    """
    now = now or datetime.now()
    loans = [a for a in accounts if a.account_type == AccountType.LOAN.value]
    loan_ids = {a.id for a in loans}

    by_loan: dict[str, list[Transaction]] = defaultdict(list)
    for txn in transactions:
        if txn.account_id in loan_ids:
            by_loan[txn.account_id].append(txn)

    summary = DebtSummary()
    for loan in loans:
        report = _debt_report(loan, by_loan[loan.id], now)
        if report.is_paid:
            summary.closed.append(report)
        else:
            summary.live.append(report)
            summary.total_outstanding += abs(report.balance)

        summary.total_paid += sum(
            (
                t.amount for t in by_loan[loan.id]
                if t.description != OPENING_BALANCE_DESCRIPTION
            ),
            Decimal("0"),
        )

    summary.live.sort(key=lambda r: r.account.due_date or datetime.min)
    summary.closed.sort(key=lambda r: r.account.name.lower())

    logger.debug(
        "debt_summary_computed",
        live=len(summary.live),
        closed=len(summary.closed),
    )
    return summary
