"""
Audit Models for Financify

Every call to the external AI service, and every data load, leaves an
audit event behind. This gives:
1. Traceability of what was sent to the model and when
2. Debugging information when the AI call fails
3. A record of user actions within a session

DESIGN DECISION: Audit events are emitted as structured log records only.
Nothing here is persisted; the dashboard has no storage of its own.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Data loading
    DATA_LOADED = "data_loaded"
    DATA_LOAD_FAILED = "data_load_failed"

    # Summary
    SUMMARY_COMPUTED = "summary_computed"

    # AI insights
    INSIGHTS_REQUESTED = "insights_requested"
    INSIGHTS_GENERATED = "insights_generated"
    INSIGHTS_FAILED = "insights_failed"

    # AI chat
    CHAT_QUESTION_RECEIVED = "chat_question_received"
    CHAT_RESPONSE_GENERATED = "chat_response_generated"
    CHAT_FAILED = "chat_failed"
    CHAT_HISTORY_CLEARED = "chat_history_cleared"

    # System events
    SYSTEM_ERROR = "system_error"
    EXTERNAL_SERVICE_ERROR = "external_service_error"


DESCRIPTION_MAX_LENGTH = 500


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """A single audit event."""

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Which dashboard, request or dataset this is about
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'dashboard', 'insights', 'chat')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="Identifier of the entity this event relates to"
    )

    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one insights request)"
    )

    description: str = Field(
        ...,
        max_length=DESCRIPTION_MAX_LENGTH,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    @field_validator("description", mode="before")
    @classmethod
    def truncate_description(cls, v):
        if isinstance(v, str) and len(v) > DESCRIPTION_MAX_LENGTH:
            return v[: DESCRIPTION_MAX_LENGTH - 3] + "..."
        return v

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.insights_requested("personal", correlation_id)
        event = AuditEventBuilder.chat_failed(error, correlation_id)
    """

    @staticmethod
    def data_loaded(
        source: str,
        account_count: int,
        transaction_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_LOADED,
            entity_type="dataset",
            entity_id=source,
            description="Dashboard data loaded",
            details={
                "account_count": account_count,
                "transaction_count": transaction_count,
            },
        )

    @staticmethod
    def data_load_failed(source: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_LOAD_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="dataset",
            entity_id=source,
            description="Could not load dashboard data",
            error_message=error_message,
        )

    @staticmethod
    def summary_computed(
        dashboard: str,
        net_worth: str,
        cashflow: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SUMMARY_COMPUTED,
            severity=AuditSeverity.DEBUG,
            entity_type="dashboard",
            entity_id=dashboard,
            description=f"Summary computed for {dashboard} dashboard",
            details={
                "net_worth": net_worth,
                "cashflow": cashflow,
            },
        )

    @staticmethod
    def insights_requested(
        dashboard: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INSIGHTS_REQUESTED,
            entity_type="insights",
            entity_id=dashboard,
            correlation_id=correlation_id,
            description="User requested AI financial insights",
            is_user_action=True,
        )

    @staticmethod
    def insights_generated(
        dashboard: str,
        observation_count: int,
        advice_count: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INSIGHTS_GENERATED,
            entity_type="insights",
            entity_id=dashboard,
            correlation_id=correlation_id,
            description="AI financial insights generated",
            details={
                "observation_count": observation_count,
                "advice_count": advice_count,
            },
        )

    @staticmethod
    def insights_failed(
        dashboard: str,
        error_message: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INSIGHTS_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="insights",
            entity_id=dashboard,
            correlation_id=correlation_id,
            description="AI financial insights could not be generated",
            error_message=error_message,
        )

    @staticmethod
    def chat_question_received(
        question_length: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CHAT_QUESTION_RECEIVED,
            entity_type="chat",
            correlation_id=correlation_id,
            description="User asked the AI assistant a question",
            details={"question_length": question_length},
            is_user_action=True,
        )

    @staticmethod
    def chat_response_generated(
        response_length: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CHAT_RESPONSE_GENERATED,
            entity_type="chat",
            correlation_id=correlation_id,
            description="AI assistant answered",
            details={"response_length": response_length},
        )

    @staticmethod
    def chat_failed(
        error_message: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CHAT_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="chat",
            correlation_id=correlation_id,
            description="AI assistant could not answer",
            error_message=error_message,
        )

    @staticmethod
    def chat_history_cleared(message_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CHAT_HISTORY_CLEARED,
            entity_type="chat",
            description="User cleared the chat history",
            details={"cleared_messages": message_count},
            is_user_action=True,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )

    @staticmethod
    def external_service_error(
        service: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXTERNAL_SERVICE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"External service error: {service}",
            error_message=error_message,
            details={
                "service": service,
            },
            correlation_id=correlation_id,
        )
