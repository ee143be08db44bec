"""
Main Orchestrator for Financify

This module ties together all the components and defines the
end-to-end flows for:
1. Dashboard (data source -> records -> summary)
2. Insights (summary -> AI analysis -> panel state)
3. Chat (question -> AI answer -> message history)

DESIGN DECISION: The orchestrator enforces the boundaries:
- A failed AI call never raises into the UI; it becomes state
- A failed AI call never touches the computed summary
- Every step is audited

The UI only talks to these flows, never to the agents directly.
"""

from datetime import datetime
from typing import NamedTuple, Optional
from uuid import UUID

import structlog
from pydantic import BaseModel, Field

from financify.agents import AIServiceError, ChatAgent, InsightsAgent
from financify.audit import AuditLogger, create_correlation_id
from financify.config import AppSettings, get_settings
from financify.models.finance import (
    DashboardType,
    FinancialSummary,
    UserFinances,
)
from financify.models.insights import FinancialAnalysis, FinancialData
from financify.storage import (
    DashboardDataSource,
    DataSourceError,
    JsonFileDataSource,
    SampleDataSource,
)
from financify.summary import summarize_finances


logger = structlog.get_logger(__name__)


INSIGHTS_ERROR_MESSAGE = "Failed to get insights from the AI. Please try again later."

CHAT_GREETING = (
    "Hello! I'm your AI financial assistant. Ask me anything about your "
    "finances, like 'How much did I spend on food last month?' or "
    "'Summarize my credit card debt'."
)
CHAT_GREETING_AFTER_CLEAR = (
    "Hello! I'm your AI financial assistant. How can I help you today?"
)
CHAT_CONNECTION_ERROR = (
    "Sorry, I'm having trouble connecting right now. Please try again later."
)


# =============================================================================
# SESSION STATE
# =============================================================================

class InsightsState(BaseModel):
    """
    Result of one insights request.

    Exactly one of `insights` / `error` is set after a request.
    """

    insights: Optional[FinancialAnalysis] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.insights is not None


class ChatMessage(BaseModel):
    """One message in the chat history."""

    sender: str = Field(..., pattern="^(user|ai)$")
    text: str
    timestamp: datetime = Field(default_factory=datetime.now)


class ChatSession:
    """
    Chat history for one browser session.

    Always starts with the assistant's greeting.
    """

    def __init__(self):
        self.messages: list[ChatMessage] = [
            ChatMessage(sender="ai", text=CHAT_GREETING)
        ]

    def add(self, sender: str, text: str) -> ChatMessage:
        message = ChatMessage(sender=sender, text=text)
        self.messages.append(message)
        return message

    def clear(self) -> int:
        """Reset to a single greeting. Returns how many messages were dropped."""
        dropped = len(self.messages)
        self.messages = [ChatMessage(sender="ai", text=CHAT_GREETING_AFTER_CLEAR)]
        return dropped


# =============================================================================
# FLOWS
# =============================================================================

class DashboardService:
    """
    Loads the user's records and computes dashboard summaries.

    Loading can fail (bad file); summarizing cannot.
    """

    def __init__(
        self,
        data_source: Optional[DashboardDataSource] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._data_source = data_source or SampleDataSource()
        self._audit_logger = audit_logger

    @property
    def source_name(self) -> str:
        return self._data_source.name

    async def load_finances(self) -> UserFinances:
        """
        Load both dashboards from the configured source.

        Raises:
            DataSourceError: If the source cannot be read
        """
        try:
            finances = await self._data_source.load()
        except DataSourceError as e:
            if self._audit_logger:
                await self._audit_logger.log_data_load_failed(
                    source=self._data_source.name,
                    error_message=str(e),
                )
            raise

        if self._audit_logger:
            await self._audit_logger.log_data_loaded(
                source=self._data_source.name,
                account_count=(
                    len(finances.personal.accounts) + len(finances.home.accounts)
                ),
                transaction_count=(
                    len(finances.personal.transactions)
                    + len(finances.home.transactions)
                ),
            )
        return finances

    async def build_summary(
        self,
        finances: UserFinances,
        dashboard: DashboardType = DashboardType.PERSONAL,
        now: Optional[datetime] = None,
    ) -> FinancialSummary:
        """Summarize one dashboard as of `now`."""
        data = finances.dashboard(dashboard)
        summary = summarize_finances(
            data.accounts,
            data.transactions,
            data.categories,
            now=now,
        )

        if self._audit_logger:
            await self._audit_logger.log_summary_computed(
                dashboard=DashboardType(dashboard).value,
                net_worth=summary.net_worth,
                cashflow=summary.cashflow,
            )
        return summary


class InsightsFlow:
    """
    Orchestrates the AI insights request.

    Flow:
    1. Summary -> FinancialData payload
    2. Payload -> InsightsAgent (structured JSON)
    3. Result or error -> InsightsState

    NEVER raises. The UI renders whatever state comes back.
    """

    def __init__(
        self,
        insights_agent: Optional[InsightsAgent] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._insights_agent = insights_agent or InsightsAgent()
        self._audit_logger = audit_logger

    async def request_insights(
        self,
        summary: FinancialSummary,
        dashboard: str = DashboardType.PERSONAL.value,
        correlation_id: Optional[UUID] = None,
    ) -> InsightsState:
        correlation_id = correlation_id or create_correlation_id()

        if self._audit_logger:
            await self._audit_logger.log_insights_requested(
                dashboard=dashboard,
                correlation_id=correlation_id,
            )

        try:
            analysis = await self._insights_agent.get_financial_analysis(
                FinancialData.from_summary(summary)
            )
        except AIServiceError as e:
            if self._audit_logger:
                await self._audit_logger.log_external_service_error(
                    service="gemini",
                    error_message=str(e.__cause__ or e),
                    correlation_id=correlation_id,
                )
            return await self._failed(
                dashboard, str(e) or INSIGHTS_ERROR_MESSAGE, correlation_id
            )
        except Exception as e:
            logger.error(
                "insights_unexpected_error",
                error=str(e),
                error_type=type(e).__name__,
            )
            if self._audit_logger:
                await self._audit_logger.log_error(
                    error_type=type(e).__name__,
                    error_message=str(e),
                    details={"flow": "insights", "dashboard": dashboard},
                    correlation_id=correlation_id,
                )
            return await self._failed(
                dashboard, INSIGHTS_ERROR_MESSAGE, correlation_id
            )

        if self._audit_logger:
            await self._audit_logger.log_insights_generated(
                dashboard=dashboard,
                observation_count=len(analysis.key_observations),
                advice_count=len(analysis.actionable_advice),
                correlation_id=correlation_id,
            )
        return InsightsState(insights=analysis)

    async def _failed(
        self,
        dashboard: str,
        message: str,
        correlation_id: UUID,
    ) -> InsightsState:
        if self._audit_logger:
            await self._audit_logger.log_insights_failed(
                dashboard=dashboard,
                error_message=message,
                correlation_id=correlation_id,
            )
        return InsightsState(error=message)


class ChatFlow:
    """
    Orchestrates one chat turn.

    The user's message is appended before the call; the AI reply
    (or the connection error text) is appended after it.
    """

    def __init__(
        self,
        chat_agent: Optional[ChatAgent] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._chat_agent = chat_agent or ChatAgent(
            transaction_limit=get_settings().app.chat_transaction_limit
        )
        self._audit_logger = audit_logger

    async def send(
        self,
        session: ChatSession,
        question: str,
        finances: UserFinances,
        correlation_id: Optional[UUID] = None,
    ) -> Optional[ChatMessage]:
        """
        Ask a question and record both sides in the session.

        Returns the AI message, or None if the question was blank.
        """
        question = question.strip()
        if not question:
            return None

        correlation_id = correlation_id or create_correlation_id()
        session.add("user", question)

        if self._audit_logger:
            await self._audit_logger.log_chat_question(question, correlation_id)

        try:
            answer = await self._chat_agent.get_chat_response(question, finances)
        except Exception as e:
            logger.error(
                "chat_unexpected_error",
                error=str(e),
                error_type=type(e).__name__,
            )
            if self._audit_logger:
                await self._audit_logger.log_error(
                    error_type=type(e).__name__,
                    error_message=str(e),
                    details={"flow": "chat"},
                    correlation_id=correlation_id,
                )
                await self._audit_logger.log_chat_failed(str(e), correlation_id)
            return session.add("ai", CHAT_CONNECTION_ERROR)

        if self._audit_logger:
            await self._audit_logger.log_chat_response(answer, correlation_id)
        return session.add("ai", answer)

    async def clear(self, session: ChatSession) -> None:
        dropped = session.clear()
        if self._audit_logger:
            await self._audit_logger.log_chat_cleared(dropped)


# =============================================================================
# FACTORY
# =============================================================================

class AppComponents(NamedTuple):
    dashboard_service: DashboardService
    insights_flow: Optional[InsightsFlow]
    chat_flow: Optional[ChatFlow]
    audit_logger: AuditLogger


def create_data_source(app_settings: Optional[AppSettings] = None) -> DashboardDataSource:
    """JSON file when one is configured, built-in sample data otherwise."""
    app_settings = app_settings or get_settings().app
    if app_settings.data_file:
        return JsonFileDataSource(
            app_settings.data_file,
            default_currency=app_settings.currency,
        )
    return SampleDataSource()


def create_app_components(use_ai: bool = True) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        use_ai: Whether to initialize the Gemini agents.
                Set to False to run the dashboard without them.

    Returns:
        AppComponents. The AI flows are None when Gemini is not configured.
    """
    audit_logger = AuditLogger()
    dashboard_service = DashboardService(
        data_source=create_data_source(),
        audit_logger=audit_logger,
    )

    insights_flow = None
    chat_flow = None
    if use_ai:
        try:
            insights_flow = InsightsFlow(audit_logger=audit_logger)
            chat_flow = ChatFlow(audit_logger=audit_logger)
        except Exception as e:
            # Gemini not configured - dashboard still works
            logger.warning("ai_not_configured", error=str(e))
            insights_flow = None
            chat_flow = None

    return AppComponents(
        dashboard_service=dashboard_service,
        insights_flow=insights_flow,
        chat_flow=chat_flow,
        audit_logger=audit_logger,
    )
