"""
Core Finance Models for Financify

These models describe the raw records the dashboard works with
(accounts, transactions, categories) and the summary derived from them.

DESIGN DECISION: Field aliases follow the camelCase keys used by the
exported dashboard JSON, so a saved state file loads without any mapping
layer. Python code uses the snake_case names.

Raw records are immutable once loaded. The summary is recomputed from
scratch whenever it is needed; nothing here stores a running balance.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel


# =============================================================================
# ENUMS
# =============================================================================

class AccountType(str, Enum):
    """
    Account types known to the dashboard.

    Accounts may carry any other type string; those are treated as
    unrecognized and contribute to neither assets nor liabilities.
    """
    BANK = "Bank"
    CREDIT_CARD = "Credit Card"
    LOAN = "Loan"
    INVESTMENT = "Investment"
    CASH = "Cash"


class DebtType(str, Enum):
    """Debt sub-type for loan and credit accounts."""
    PERSONAL_LOAN = "Personal Loan"
    CREDIT_CARD = "Credit Card"
    HOME_LOAN = "Home Loan"
    AUTO_LOAN = "Auto Loan"
    STUDENT_LOAN = "Student Loan"
    OTHER = "Other"


class TransactionClassification(str, Enum):
    """Auxiliary spending tag. Not used by the summary arithmetic."""
    NEED = "need"
    WANT = "want"
    MUST = "must"


class DashboardType(str, Enum):
    """The two dashboards a user keeps."""
    PERSONAL = "personal"
    HOME = "home"


# =============================================================================
# RAW RECORDS
# =============================================================================

_RECORD_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    str_strip_whitespace=True,
    extra="ignore",
    frozen=True,
)


class SubCategory(BaseModel):
    """A sub-category under a category."""
    model_config = _RECORD_CONFIG

    id: str
    name: str


class Category(BaseModel):
    """
    A transaction category.

    Only `id` and `name` matter to the summary; the rest is display data.
    """
    model_config = _RECORD_CONFIG

    id: str = Field(..., min_length=1)
    name: str = Field(..., description="Display name used as aggregation key")
    icon: Optional[str] = None
    color: Optional[str] = None
    subcategories: list[SubCategory] = Field(default_factory=list)


class Account(BaseModel):
    """
    A bank, card, loan, investment or cash account.

    `account_type` is a plain string on purpose: unknown types must load
    and simply be left out of asset/liability totals.
    """
    model_config = _RECORD_CONFIG

    id: str = Field(..., min_length=1)
    name: str
    account_type: str = Field(
        ...,
        alias="type",
        description="One of AccountType values, or any unrecognized string"
    )
    notes: Optional[str] = None

    # Debt-specific fields
    interest_rate: Optional[float] = Field(
        default=None,
        description="Annual percentage rate"
    )
    installment: Optional[Decimal] = Field(
        default=None,
        description="Monthly payment amount"
    )
    due_date: Optional[datetime] = None
    debt_type: Optional[str] = None

    credit_limit: Optional[Decimal] = Field(default=None, ge=0)
    due_date_day: Optional[int] = Field(default=None, ge=1, le=31)
    is_archived: bool = False

    @field_validator(
        "interest_rate",
        "installment",
        "due_date",
        "credit_limit",
        "due_date_day",
        mode="wrap",
    )
    @classmethod
    def unreadable_detail_is_none(cls, v, handler):
        """
        Debt and card details are optional extras. A value that fails
        validation is dropped instead of rejecting the whole account.
        """
        try:
            return handler(v)
        except ValidationError:
            return None

    @field_validator("due_date")
    @classmethod
    def due_date_to_local_time(cls, v: Optional[datetime]) -> Optional[datetime]:
        if v is not None and v.tzinfo is not None:
            return v.astimezone().replace(tzinfo=None)
        return v


class Transaction(BaseModel):
    """
    A single signed money movement on one account.

    Positive amounts are inflows, negative amounts are outflows.
    Transfers between owned accounts carry `is_transfer=True`.
    """
    model_config = _RECORD_CONFIG

    id: str = Field(..., min_length=1)
    account_id: str = Field(..., description="Owning account identifier")
    date: datetime = Field(
        ...,
        description="Transaction instant, normalized to naive local time"
    )
    description: str = ""
    amount: Decimal = Field(
        ...,
        description="Signed amount: positive = inflow, negative = outflow"
    )
    category_id: Optional[str] = None
    sub_category_id: Optional[str] = None
    notes: Optional[str] = None
    is_transfer: bool = False
    tags: list[str] = Field(default_factory=list)
    classification: Optional[TransactionClassification] = None
    budget_id: Optional[str] = None

    @field_validator("date")
    @classmethod
    def normalize_to_local_time(cls, v: datetime) -> datetime:
        """Convert aware timestamps (e.g. ISO strings ending in Z) to local naive."""
        if v.tzinfo is not None:
            return v.astimezone().replace(tzinfo=None)
        return v

    @field_validator("classification", mode="wrap")
    @classmethod
    def unknown_classification_is_none(cls, v, handler):
        """Blank or unrecognized tags load as unclassified."""
        try:
            return handler(v)
        except ValidationError:
            return None


# =============================================================================
# DATASETS
# =============================================================================

class DashboardData(BaseModel):
    """All records of one dashboard (personal or home)."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    accounts: list[Account] = Field(default_factory=list)
    transactions: list[Transaction] = Field(default_factory=list)
    categories: list[Category] = Field(default_factory=list)


class UserFinances(BaseModel):
    """
    Both dashboards plus the display currency.

    Mirrors the exported application state; keys we do not use
    (theme, budgets, trash...) are ignored on load.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    currency: str = Field(
        default="USD",
        min_length=3,
        max_length=3,
        description="ISO 4217 currency code"
    )
    personal: DashboardData = Field(default_factory=DashboardData)
    home: DashboardData = Field(default_factory=DashboardData)

    @field_validator("currency")
    @classmethod
    def uppercase_currency(cls, v: str) -> str:
        return v.upper()

    def dashboard(self, kind: DashboardType) -> DashboardData:
        """Return the dataset for the given dashboard."""
        if DashboardType(kind) == DashboardType.HOME:
            return self.home
        return self.personal


# =============================================================================
# DERIVED SUMMARY
# =============================================================================

class ChartSlice(BaseModel):
    """One slice of a breakdown chart."""

    name: str
    value: Decimal
    fill: str = Field(..., description="Hex colour from the chart palette")


class FinancialSummary(BaseModel):
    """
    Aggregated figures for one dashboard.

    `liabilities` is a non-negative magnitude for display. `net_worth`
    is computed from the signed liability balances, so it equals
    `assets - liabilities` only when liability balances are non-positive.
    """

    assets: Decimal = Decimal("0")
    liabilities: Decimal = Decimal("0")
    net_worth: Decimal = Decimal("0")

    # Month-to-date
    income: Decimal = Decimal("0")
    expenses: Decimal = Decimal("0")
    cashflow: Decimal = Decimal("0")

    asset_data: list[ChartSlice] = Field(default_factory=list)
    liability_data: list[ChartSlice] = Field(default_factory=list)
    income_data: list[ChartSlice] = Field(default_factory=list)
    expense_data: list[ChartSlice] = Field(default_factory=list)

    period_start: Optional[datetime] = Field(
        default=None,
        description="First instant of the month used for income/expenses"
    )
