"""
Data Models Package

This package contains all Pydantic models used in Financify.
Raw dashboard records, the derived summary, AI payloads and audit events.
"""

from financify.models.finance import (
    Account,
    AccountType,
    Category,
    ChartSlice,
    DashboardData,
    DashboardType,
    DebtType,
    FinancialSummary,
    SubCategory,
    Transaction,
    TransactionClassification,
    UserFinances,
)
from financify.models.insights import (
    DEFAULT_DISCLAIMER,
    ExpenseBreakdownItem,
    FinancialAnalysis,
    FinancialData,
)
from financify.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Finance models
    "Account",
    "AccountType",
    "Category",
    "ChartSlice",
    "DashboardData",
    "DashboardType",
    "DebtType",
    "FinancialSummary",
    "SubCategory",
    "Transaction",
    "TransactionClassification",
    "UserFinances",
    # Insight models
    "DEFAULT_DISCLAIMER",
    "ExpenseBreakdownItem",
    "FinancialAnalysis",
    "FinancialData",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
