"""
Audit Logger

DESIGN DECISION: Every AI call and every data load is logged.
This provides:
1. Traceability of what was asked of the model
2. Debugging capability when the AI call fails
3. A session history of user actions

The audit logger:
- Is async so flows can await it alongside the AI calls
- Never raises (a logging failure must not break the dashboard)
- Supports correlation IDs to tie a request to its outcome
"""

from collections import deque
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

import structlog

from financify.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


DEFAULT_HISTORY_LIMIT = 500


class AuditLogger:
    """
    Central audit logging service.

    Writes every event to the structured local log. The most recent
    `history_limit` events are also kept in memory so the UI can show
    them; older ones are dropped.
    """

    def __init__(
        self,
        keep_history: bool = True,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ):
        self._logger = structlog.get_logger("financify.audit")
        self._keep_history = keep_history
        self._history: deque[AuditEvent] = deque(maxlen=history_limit)

    @property
    def history(self) -> list[AuditEvent]:
        """Events logged in this session, oldest first."""
        return list(self._history)

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True if the event was written, False if logging failed.
        """
        try:
            log_dict = event.to_log_dict()

            if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # Log failure but don't raise
            self._logger.error(
                "audit_log_failed",
                error=str(e),
                event_id=str(event.event_id),
            )
            return False

        if self._keep_history:
            self._history.append(event)
        return True

    async def log_data_loaded(
        self,
        source: str,
        account_count: int,
        transaction_count: int,
    ) -> None:
        """Log a successful dashboard data load."""
        await self.log(AuditEventBuilder.data_loaded(
            source=source,
            account_count=account_count,
            transaction_count=transaction_count,
        ))

    async def log_data_load_failed(self, source: str, error_message: str) -> None:
        """Log a failed dashboard data load."""
        await self.log(AuditEventBuilder.data_load_failed(
            source=source,
            error_message=error_message,
        ))

    async def log_summary_computed(
        self,
        dashboard: str,
        net_worth: Decimal,
        cashflow: Decimal,
    ) -> None:
        await self.log(AuditEventBuilder.summary_computed(
            dashboard=dashboard,
            net_worth=str(net_worth),
            cashflow=str(cashflow),
        ))

    async def log_insights_requested(
        self,
        dashboard: str,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.insights_requested(
            dashboard=dashboard,
            correlation_id=correlation_id,
        ))

    async def log_insights_generated(
        self,
        dashboard: str,
        observation_count: int,
        advice_count: int,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.insights_generated(
            dashboard=dashboard,
            observation_count=observation_count,
            advice_count=advice_count,
            correlation_id=correlation_id,
        ))

    async def log_insights_failed(
        self,
        dashboard: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.insights_failed(
            dashboard=dashboard,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    async def log_chat_question(
        self,
        question: str,
        correlation_id: UUID,
    ) -> None:
        """Log a chat question. Only its length is recorded, not the text."""
        await self.log(AuditEventBuilder.chat_question_received(
            question_length=len(question),
            correlation_id=correlation_id,
        ))

    async def log_chat_response(
        self,
        response: str,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.chat_response_generated(
            response_length=len(response),
            correlation_id=correlation_id,
        ))

    async def log_chat_failed(
        self,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.chat_failed(
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    async def log_chat_cleared(self, message_count: int) -> None:
        await self.log(AuditEventBuilder.chat_history_cleared(message_count))

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        await self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))

    async def log_external_service_error(
        self,
        service: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log external service error."""
        await self.log(AuditEventBuilder.external_service_error(
            service=service,
            error_message=error_message,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a user action (e.g., an insights request)
    and pass it through all subsequent operations.
    """
    return uuid4()
