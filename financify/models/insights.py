"""
AI Insight Models

The request payload sent to the model and the structured analysis
it returns. Both use camelCase aliases because they travel as JSON
to and from the generative-language API.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from financify.models.finance import FinancialSummary


DEFAULT_DISCLAIMER = (
    "This is an AI-generated analysis and not professional financial advice. "
    "Please consult with a financial advisor for personalized guidance."
)


class ExpenseBreakdownItem(BaseModel):
    """Spending for one category in the current month."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    category: str
    amount: float


class FinancialData(BaseModel):
    """
    Summary-derived payload for the analysis request.

    Amounts are plain floats so the JSON the model sees has numbers,
    not quoted decimals.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    assets: float
    liabilities: float
    net_worth: float
    monthly_income: float
    monthly_expenses: float
    monthly_cashflow: float
    expense_breakdown: list[ExpenseBreakdownItem] = Field(default_factory=list)

    @classmethod
    def from_summary(cls, summary: FinancialSummary) -> "FinancialData":
        """Build the request payload from a computed summary."""
        return cls(
            assets=float(summary.assets),
            liabilities=float(summary.liabilities),
            net_worth=float(summary.net_worth),
            monthly_income=float(summary.income),
            monthly_expenses=float(summary.expenses),
            monthly_cashflow=float(summary.cashflow),
            expense_breakdown=[
                ExpenseBreakdownItem(category=s.name, amount=float(s.value))
                for s in summary.expense_data
            ],
        )

    def to_prompt_json(self) -> str:
        """Serialize with the camelCase keys the prompt expects."""
        return self.model_dump_json(by_alias=True, indent=2)


class FinancialAnalysis(BaseModel):
    """
    Structured analysis returned by the model.

    A missing or empty disclaimer is replaced with DEFAULT_DISCLAIMER;
    every other field is required.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    overview: str
    key_observations: list[str]
    actionable_advice: list[str]
    disclaimer: Optional[str] = None

    @model_validator(mode="after")
    def ensure_disclaimer(self) -> "FinancialAnalysis":
        if not self.disclaimer:
            self.disclaimer = DEFAULT_DISCLAIMER
        return self
