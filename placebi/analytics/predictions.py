"""
Revenue / Expense Prediction

A simple moving average extrapolated to the end of the current week or
month. Deliberately naive: no seasonality, no trend, no confidence band.

How a prediction is built:
1. Trailing window: records dated on or after (now - N days),
   N = 7 for the week and 30 for the month, taken from the FULL history.
   A record counts from midnight of its day, so with a wall-clock "now"
   the day exactly N days back drops out once that midnight has passed.
   With a bare date as "now" the comparison is by calendar day.
2. Keep the first N of those in the order given. This is a plain slice,
   not "the N most recent": with the store's newest-first ordering the
   two coincide, with any other ordering they may not.
3. Average daily revenue and expenses over the window (0 if empty).
4. Multiply by the days left in the week / month.
5. Split predicted revenue across payment methods by each method's
   share of the window's payment-method totals.

"now" is injectable; it defaults to the local wall clock.
"""

from datetime import date, datetime, time, timedelta
from typing import Optional, Sequence, Union

from placebi.analytics.financials import payment_method_totals, percentage_of
from placebi.analytics.periods import (
    as_day,
    days_remaining_in_month,
    days_remaining_in_week,
)
from placebi.models.analytics import (
    PaymentMethodPrediction,
    Prediction,
    PredictionType,
)
from placebi.models.restaurant import DailyExpense, DailyRevenue


WEEK_WINDOW_DAYS = 7
MONTH_WINDOW_DAYS = 30


def predict_week_revenue(
    revenues: Sequence[DailyRevenue],
    expenses: Sequence[DailyExpense],
    now: Optional[Union[date, datetime]] = None,
) -> Prediction:
    """Extrapolate the last 7 days to the rest of the current week."""
    now = now or datetime.now()
    today = as_day(now)
    return _predict(
        PredictionType.WEEK,
        revenues,
        expenses,
        window_days=WEEK_WINDOW_DAYS,
        remaining_days=days_remaining_in_week(today),
        now=now,
    )


def predict_month_revenue(
    revenues: Sequence[DailyRevenue],
    expenses: Sequence[DailyExpense],
    now: Optional[Union[date, datetime]] = None,
) -> Prediction:
    """Extrapolate the last 30 days to the rest of the current month."""
    now = now or datetime.now()
    today = as_day(now)
    return _predict(
        PredictionType.MONTH,
        revenues,
        expenses,
        window_days=MONTH_WINDOW_DAYS,
        remaining_days=days_remaining_in_month(today),
        now=now,
    )


def trailing_window(
    records: Sequence,
    window_days: int,
    now: Union[date, datetime],
) -> list:
    """Records dated >= now - window_days, truncated to window_days entries."""
    cutoff = now - timedelta(days=window_days)
    if isinstance(cutoff, datetime):
        return [r for r in records if _day_start(r.date, cutoff) >= cutoff][:window_days]
    return [r for r in records if as_day(r.date) >= cutoff][:window_days]


def _day_start(day: date, like: datetime) -> datetime:
    return datetime.combine(as_day(day), time.min, tzinfo=like.tzinfo)


def _average_amount(records: list) -> float:
    if not records:
        return 0.0
    return sum(r.total_amount for r in records) / len(records)


def _predict(
    prediction_type: PredictionType,
    revenues: Sequence[DailyRevenue],
    expenses: Sequence[DailyExpense],
    window_days: int,
    remaining_days: int,
    now: Union[date, datetime],
) -> Prediction:
    revenue_window = trailing_window(revenues, window_days, now)
    expense_window = trailing_window(expenses, window_days, now)

    predicted_revenue = _average_amount(revenue_window) * remaining_days
    predicted_expenses = _average_amount(expense_window) * remaining_days
    predicted_net_margin = predicted_revenue - predicted_expenses

    # Shares come from the window, the scale from the predicted total
    method_totals = payment_method_totals(revenue_window)
    methods_sum = sum(method_totals.values())
    method_predictions = [
        PaymentMethodPrediction(
            method=method,
            predicted_amount=predicted_revenue * (amount / methods_sum if methods_sum > 0 else 0.0),
        )
        for method, amount in method_totals.items()
    ]

    return Prediction(
        type=prediction_type,
        remaining_days=remaining_days,
        predicted_revenue=predicted_revenue,
        predicted_expenses=predicted_expenses,
        predicted_net_margin=predicted_net_margin,
        predicted_net_margin_percentage=percentage_of(predicted_net_margin, predicted_revenue),
        payment_method_predictions=method_predictions,
    )
