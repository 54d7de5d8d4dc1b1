"""
Data Models Package

This package contains all Pydantic models used in Placebi.
All data flowing through the system must conform to these schemas.
"""

from placebi.models.restaurant import (
    AppSnapshot,
    DailyExpense,
    DailyRevenue,
    ExpenseCategory,
    ExpenseLine,
    PaymentMethod,
    Restaurant,
    RestaurantType,
    RevenuePaymentMethod,
    new_id,
    utc_now,
)
from placebi.models.analytics import (
    FinancialKPIs,
    PaymentMethodBreakdown,
    PaymentMethodPrediction,
    Prediction,
    PredictionType,
    RevenueTimeSeriesPoint,
    TimeFilter,
)
from placebi.models.forms import (
    ExpenseFormData,
    ExpenseLineEntry,
    PaymentMethodEntry,
    RestaurantFormData,
    RevenueEntryMode,
    RevenueFormData,
    ValidationIssue,
    ValidationResult,
)
from placebi.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Domain models
    "AppSnapshot",
    "DailyExpense",
    "DailyRevenue",
    "ExpenseCategory",
    "ExpenseLine",
    "PaymentMethod",
    "Restaurant",
    "RestaurantType",
    "RevenuePaymentMethod",
    "new_id",
    "utc_now",
    # Analytics models
    "FinancialKPIs",
    "PaymentMethodBreakdown",
    "PaymentMethodPrediction",
    "Prediction",
    "PredictionType",
    "RevenueTimeSeriesPoint",
    "TimeFilter",
    # Form models
    "ExpenseFormData",
    "ExpenseLineEntry",
    "PaymentMethodEntry",
    "RestaurantFormData",
    "RevenueEntryMode",
    "RevenueFormData",
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
