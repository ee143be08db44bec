"""Financial summary package."""

from financify.summary.breakdowns import (
    CategorySpendingRow,
    CreditCardAnalysis,
    CreditCardReport,
    DebtReport,
    DebtSummary,
    DrillDownKind,
    IncomeExpenseReport,
    category_spending_report,
    credit_card_analysis,
    debt_summary,
    drill_down_transactions,
    income_expense_report,
    spending_by_classification,
)
from financify.summary.summarizer import (
    ASSET_ACCOUNT_TYPES,
    CHART_PALETTE,
    LIABILITY_ACCOUNT_TYPES,
    UNCATEGORIZED,
    category_name_map,
    compute_account_balances,
    palette_color,
    start_of_month,
    summarize_finances,
)

__all__ = [
    "ASSET_ACCOUNT_TYPES",
    "CHART_PALETTE",
    "LIABILITY_ACCOUNT_TYPES",
    "UNCATEGORIZED",
    "CategorySpendingRow",
    "CreditCardAnalysis",
    "CreditCardReport",
    "DebtReport",
    "DebtSummary",
    "DrillDownKind",
    "IncomeExpenseReport",
    "category_name_map",
    "category_spending_report",
    "compute_account_balances",
    "credit_card_analysis",
    "debt_summary",
    "drill_down_transactions",
    "income_expense_report",
    "palette_color",
    "spending_by_classification",
    "start_of_month",
    "summarize_finances",
]
