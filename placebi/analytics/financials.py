"""
Financial Aggregation

Pure functions over caller-supplied snapshots of revenues and expenses.
They never touch the store or storage and never raise for empty input:
degenerate cases (no records, zero totals) produce zeroed output.

The one reportable failure is a payment method outside the known set.
Silently dropping it would make the breakdown disagree with the KPIs
without anyone noticing.
"""

from datetime import date, timedelta
from typing import Iterable

from placebi.analytics.periods import as_day
from placebi.models.analytics import (
    FinancialKPIs,
    PaymentMethodBreakdown,
    RevenueTimeSeriesPoint,
)
from placebi.models.restaurant import DailyExpense, DailyRevenue, PaymentMethod


class AnalyticsError(Exception):
    """Base exception for the analytics engine."""
    pass


class UnknownPaymentMethodError(AnalyticsError):
    """A revenue line names a payment method the engine does not know."""

    def __init__(self, method: object, revenue_id: str):
        super().__init__(
            f"Unknown payment method {method!r} in revenue {revenue_id}"
        )
        self.method = method
        self.revenue_id = revenue_id


def percentage_of(part: float, whole: float) -> float:
    """part / whole * 100, or 0 when whole is not positive."""
    return part / whole * 100 if whole > 0 else 0.0


def calculate_kpis(
    revenues: Iterable[DailyRevenue],
    expenses: Iterable[DailyExpense],
) -> FinancialKPIs:
    """Totals and net margin, from total_amount only."""
    total_revenue = sum(r.total_amount for r in revenues)
    total_expenses = sum(e.total_amount for e in expenses)
    net_margin = total_revenue - total_expenses

    return FinancialKPIs(
        total_revenue=total_revenue,
        total_expenses=total_expenses,
        net_margin=net_margin,
        net_margin_percentage=percentage_of(net_margin, total_revenue),
    )


def payment_method_totals(
    revenues: Iterable[DailyRevenue],
) -> dict[PaymentMethod, float]:
    """
    Sum of payment-method line amounts, per method.

    Every method is present (zero-filled), in canonical order.

    Raises:
        UnknownPaymentMethodError: A line carries an unrecognised method
    """
    totals = {method: 0.0 for method in PaymentMethod}

    for revenue in revenues:
        for line in revenue.payment_methods:
            try:
                method = PaymentMethod(line.method)
            except ValueError:
                raise UnknownPaymentMethodError(line.method, revenue.id) from None
            totals[method] += line.amount

    return totals


def calculate_payment_method_breakdown(
    revenues: Iterable[DailyRevenue],
) -> list[PaymentMethodBreakdown]:
    """Always three rows: wave, orange_money, cash."""
    totals = payment_method_totals(revenues)
    grand_total = sum(totals.values())

    return [
        PaymentMethodBreakdown(
            method=method,
            amount=amount,
            percentage=percentage_of(amount, grand_total),
        )
        for method, amount in totals.items()
    ]


def generate_revenue_time_series(
    revenues: Iterable[DailyRevenue],
    expenses: Iterable[DailyExpense],
    start: date,
    end: date,
) -> list[RevenueTimeSeriesPoint]:
    """
    One point per calendar day in [start, end], oldest first.

    Days without activity are zero points. Records dated outside the
    range are ignored, so callers should pass range-filtered input if
    the series is to agree with the KPIs. start > end yields [].
    """
    start, end = as_day(start), as_day(end)

    days: list[date] = []
    day = start
    while day <= end:
        days.append(day)
        day += timedelta(days=1)

    revenue_by_day = dict.fromkeys(days, 0.0)
    expenses_by_day = dict.fromkeys(days, 0.0)

    for revenue in revenues:
        key = as_day(revenue.date)
        if key in revenue_by_day:
            revenue_by_day[key] += revenue.total_amount

    for expense in expenses:
        key = as_day(expense.date)
        if key in expenses_by_day:
            expenses_by_day[key] += expense.total_amount

    return [
        RevenueTimeSeriesPoint(
            date=day,
            revenue=revenue_by_day[day],
            expenses=expenses_by_day[day],
            net_margin=revenue_by_day[day] - expenses_by_day[day],
        )
        for day in sorted(days)
    ]
