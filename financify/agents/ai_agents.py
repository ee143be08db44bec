"""
AI Agents for Financify

DESIGN DECISION: We use Google Gemini for two narrow jobs:
1. Turning a computed FinancialSummary into a short structured analysis
2. Answering free-text questions about the user's own data

CRITICAL BOUNDARIES:

1. INSIGHTS AGENT:
   - CAN: Comment on the numbers it is given
   - CANNOT: See raw transactions (it only gets the summary payload)
   - MUST: Return JSON matching FINANCIAL_ANALYSIS_SCHEMA

2. CHAT AGENT:
   - CAN: Answer questions from a pruned snapshot of the user's data
   - CANNOT: Invent numbers or transactions (system instruction)
   - MUST: Fail soft, with a canned reply instead of an exception

Neither agent retries. One user action, one request.
"""

import json
from typing import Any, Optional

import google.generativeai as genai
import structlog

from financify.config import GeminiSettings, get_settings
from financify.models.finance import DashboardData, UserFinances
from financify.models.insights import FinancialAnalysis, FinancialData


logger = structlog.get_logger(__name__)


ANALYST_SYSTEM_INSTRUCTION = (
    "You are a helpful financial analyst. You provide insights in JSON "
    "format based on the provided schema."
)

CHAT_SYSTEM_INSTRUCTION = """You are "Financify AI", a helpful and friendly financial assistant.
Your goal is to analyze the user's financial data and provide clear, concise, and actionable insights in a conversational tone.
The user will provide their financial data in JSON format along with a question.
Base your answers *only* on the data provided. Do not invent numbers or transactions.
Keep your answers brief and to the point.
If a question is vague, ask for clarification. If it's outside the scope of finance, politely decline to answer.
When providing amounts, use the currency symbol provided in the data.
"""

CHAT_ERROR_REPLY = (
    "Sorry, I encountered an error while processing your request. "
    "Please try again later."
)

FINANCIAL_ANALYSIS_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "overview": {
            "type": "STRING",
            "description": "A brief, one-sentence summary of the financial situation.",
        },
        "keyObservations": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": "A list of 2-3 important observations from the data.",
        },
        "actionableAdvice": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": "A list of 2-3 practical, actionable suggestions for improvement.",
        },
        "disclaimer": {
            "type": "STRING",
            "description": "A standard disclaimer that this is not professional financial advice.",
        },
    },
    "required": ["overview", "keyObservations", "actionableAdvice", "disclaimer"],
}


class AIServiceError(Exception):
    """
    The AI service could not produce a usable answer.

    The message is safe to show to the user.
    """
    pass


def _extract_json_object(text: str) -> dict:
    """Parse the outermost JSON object in a model response."""
    start = text.find("{")
    end = text.rfind("}") + 1
    if start < 0 or end <= start:
        raise ValueError("No JSON object in model response")
    return json.loads(text[start:end])


def _prune_dashboard(data: DashboardData, transaction_limit: int) -> dict[str, Any]:
    """Keep only the fields the chat model needs, and only recent transactions."""
    recent = data.transactions[-transaction_limit:] if transaction_limit else []
    return {
        "accounts": [
            {
                "id": acc.id,
                "name": acc.name,
                "type": acc.account_type,
                "isArchived": acc.is_archived,
                "creditLimit": (
                    float(acc.credit_limit) if acc.credit_limit is not None else None
                ),
            }
            for acc in data.accounts
        ],
        "transactions": [
            {
                "date": txn.date.isoformat(),
                "description": txn.description,
                "amount": float(txn.amount),
                "categoryId": txn.category_id,
                "classification": (
                    txn.classification.value if txn.classification else None
                ),
            }
            for txn in recent
        ],
        "categories": [{"id": c.id, "name": c.name} for c in data.categories],
    }


def build_chat_snapshot(
    finances: UserFinances,
    transaction_limit: int = 50,
) -> dict[str, Any]:
    """
    Reduced view of both dashboards for the chat prompt.

    Transactions are the last `transaction_limit` of each dataset,
    in stored order.
    """
    return {
        "currency": finances.currency,
        "personal": _prune_dashboard(finances.personal, transaction_limit),
        "home": _prune_dashboard(finances.home, transaction_limit),
    }


class InsightsAgent:
    """
    Produces a structured FinancialAnalysis from a summary payload.

    RESPONSIBILITIES:
    - Send the FinancialData JSON with a fixed response schema
    - Parse and validate the JSON that comes back
    - Fill in the default disclaimer when the model leaves it out

    Any transport or parse failure becomes an AIServiceError.
    """

    def __init__(
        self,
        settings: Optional[GeminiSettings] = None,
        model: Optional[Any] = None,
    ):
        self._settings = settings
        self._model = model
        if self._model is None:
            self._settings = settings or get_settings().gemini
            self._configure_genai()

    def _configure_genai(self):
        """Configure Google Generative AI."""
        genai.configure(api_key=self._settings.api_key)
        self._model = genai.GenerativeModel(
            model_name=self._settings.model_name,
            system_instruction=ANALYST_SYSTEM_INSTRUCTION,
            generation_config={
                "temperature": self._settings.temperature,
                "max_output_tokens": self._settings.max_tokens,
                "response_mime_type": "application/json",
                "response_schema": FINANCIAL_ANALYSIS_SCHEMA,
            },
        )

    @staticmethod
    def build_prompt(data: FinancialData) -> str:
        return f"""Analyze the following financial data and provide an overview, key observations, and actionable advice.
The user wants a simple, clear analysis of their financial health.
Data:
{data.to_prompt_json()}
"""

    async def get_financial_analysis(self, data: FinancialData) -> FinancialAnalysis:
        """
        Ask the model for an analysis of the given figures.

        Raises:
            AIServiceError: If the call fails or the reply is not valid JSON
                matching the schema.
        """
        prompt = self.build_prompt(data)

        try:
            response = await self._model.generate_content_async(prompt)
            payload = _extract_json_object(response.text.strip())
            analysis = FinancialAnalysis.model_validate(payload)
        except Exception as e:
            logger.error(
                "gemini_analysis_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise AIServiceError("Failed to get financial analysis from AI.") from e

        logger.info(
            "gemini_analysis_received",
            observations=len(analysis.key_observations),
            advice=len(analysis.actionable_advice),
        )
        return analysis


class ChatAgent:
    """
    Free-text financial assistant.

    BOUNDARIES:
    - Sees only the pruned snapshot from build_chat_snapshot
    - Returns the model's text verbatim
    - NEVER raises on transport failure; returns CHAT_ERROR_REPLY
    """

    def __init__(
        self,
        settings: Optional[GeminiSettings] = None,
        model: Optional[Any] = None,
        transaction_limit: int = 50,
    ):
        self._settings = settings
        self._model = model
        self._transaction_limit = transaction_limit
        if self._model is None:
            self._settings = settings or get_settings().gemini
            self._configure_genai()

    def _configure_genai(self):
        """Configure Google Generative AI."""
        genai.configure(api_key=self._settings.api_key)
        self._model = genai.GenerativeModel(
            model_name=self._settings.model_name,
            system_instruction=CHAT_SYSTEM_INSTRUCTION,
            generation_config={
                "temperature": self._settings.temperature,
                "max_output_tokens": self._settings.max_tokens,
            },
        )

    def build_prompt(self, question: str, finances: UserFinances) -> str:
        snapshot = build_chat_snapshot(finances, self._transaction_limit)
        data_string = json.dumps(snapshot, indent=2)
        return f"""
Here is my financial data:
```json
{data_string}
```

My question is: "{question}"
"""

    async def get_chat_response(
        self,
        question: str,
        finances: UserFinances,
    ) -> str:
        """Answer a question about the user's data."""
        prompt = self.build_prompt(question, finances)

        try:
            response = await self._model.generate_content_async(prompt)
            return response.text
        except Exception as e:
            logger.error(
                "gemini_chat_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            return CHAT_ERROR_REPLY
