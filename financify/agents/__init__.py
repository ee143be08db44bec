"""AI Agents package."""

from financify.agents.ai_agents import (
    AIServiceError,
    CHAT_ERROR_REPLY,
    ChatAgent,
    FINANCIAL_ANALYSIS_SCHEMA,
    InsightsAgent,
    build_chat_snapshot,
)

__all__ = [
    "AIServiceError",
    "CHAT_ERROR_REPLY",
    "ChatAgent",
    "FINANCIAL_ANALYSIS_SCHEMA",
    "InsightsAgent",
    "build_chat_snapshot",
]
