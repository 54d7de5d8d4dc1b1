"""
Financial aggregation and prediction engine.

Everything here is a pure function of its arguments.
"""

from placebi.analytics.financials import (
    AnalyticsError,
    UnknownPaymentMethodError,
    calculate_kpis,
    calculate_payment_method_breakdown,
    generate_revenue_time_series,
    payment_method_totals,
)
from placebi.analytics.periods import (
    days_remaining_in_month,
    days_remaining_in_week,
    get_date_range,
)
from placebi.analytics.predictions import (
    MONTH_WINDOW_DAYS,
    WEEK_WINDOW_DAYS,
    predict_month_revenue,
    predict_week_revenue,
    trailing_window,
)

__all__ = [
    "AnalyticsError",
    "UnknownPaymentMethodError",
    "calculate_kpis",
    "calculate_payment_method_breakdown",
    "generate_revenue_time_series",
    "payment_method_totals",
    "days_remaining_in_month",
    "days_remaining_in_week",
    "get_date_range",
    "MONTH_WINDOW_DAYS",
    "WEEK_WINDOW_DAYS",
    "predict_month_revenue",
    "predict_week_revenue",
    "trailing_window",
]
