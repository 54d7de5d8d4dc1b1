"""
Analytics Models

Values computed by the analytics engine for the dashboard.
None of these are ever persisted; they are rebuilt on every render.
"""

import datetime as dt
from enum import Enum

from pydantic import BaseModel, Field

from placebi.models.restaurant import PaymentMethod


class TimeFilter(str, Enum):
    """Dashboard period selector."""
    TODAY = "today"
    THIS_WEEK = "this_week"
    THIS_MONTH = "this_month"
    CUSTOM = "custom"


class PredictionType(str, Enum):
    WEEK = "week"
    MONTH = "month"


class FinancialKPIs(BaseModel):
    """Headline figures for a period."""

    total_revenue: float = 0.0
    total_expenses: float = 0.0
    net_margin: float = 0.0
    net_margin_percentage: float = Field(
        default=0.0,
        description="net_margin / total_revenue * 100, or 0 without revenue"
    )


class PaymentMethodBreakdown(BaseModel):
    """One row of the payment-method pie: a method and its share of revenue."""

    method: PaymentMethod
    amount: float = 0.0
    percentage: float = 0.0


class RevenueTimeSeriesPoint(BaseModel):
    """One calendar day of the revenue/expense chart."""

    date: dt.date
    revenue: float = 0.0
    expenses: float = 0.0
    net_margin: float = 0.0


class PaymentMethodPrediction(BaseModel):
    method: PaymentMethod
    predicted_amount: float = 0.0


class Prediction(BaseModel):
    """
    Moving-average extrapolation to the end of the current week or month.

    This is NOT a forecast: no seasonality, no trend, no confidence.
    """

    type: PredictionType
    remaining_days: int = Field(
        ...,
        ge=0,
        description="Days the daily average was multiplied by"
    )
    predicted_revenue: float = 0.0
    predicted_expenses: float = 0.0
    predicted_net_margin: float = 0.0
    predicted_net_margin_percentage: float = 0.0
    payment_method_predictions: list[PaymentMethodPrediction] = Field(
        default_factory=list
    )
