"""
Data Models Package

This package contains all Pydantic models used in the Cash Flow Tracker.
All data flowing through the system must conform to these schemas.
"""

from cashflow.models.records import (
    INCOME_CATEGORIES,
    OBLIGATION_PAYMENT_CATEGORY,
    SPENDING_CATEGORIES,
    Asset,
    AssetType,
    Budget,
    BudgetPeriod,
    Frequency,
    Income,
    Obligation,
    ObligationStatus,
    ObligationType,
    Profile,
    Spending,
    SpendingKind,
    apply_changes,
)
from cashflow.models.views import (
    AssetValuation,
    BalancePoint,
    BudgetProgress,
    CategoryTotal,
    DailyActivity,
    ObligationOverview,
    ObligationProgress,
    PeriodTotals,
    ScheduledPayment,
    SpotPrices,
)
from cashflow.models.audit import (
    AUDIT_COLUMNS,
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Record models
    "INCOME_CATEGORIES",
    "OBLIGATION_PAYMENT_CATEGORY",
    "SPENDING_CATEGORIES",
    "Asset",
    "AssetType",
    "Budget",
    "BudgetPeriod",
    "Frequency",
    "Income",
    "Obligation",
    "ObligationStatus",
    "ObligationType",
    "Profile",
    "Spending",
    "SpendingKind",
    "apply_changes",
    # Derived views
    "AssetValuation",
    "BalancePoint",
    "BudgetProgress",
    "CategoryTotal",
    "DailyActivity",
    "ObligationOverview",
    "ObligationProgress",
    "PeriodTotals",
    "ScheduledPayment",
    "SpotPrices",
    # Audit models
    "AUDIT_COLUMNS",
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
