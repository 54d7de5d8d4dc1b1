"""Shared fixtures: a restaurant and record factories."""

from datetime import date

import pytest

from placebi.models.restaurant import (
    DailyExpense,
    DailyRevenue,
    ExpenseLine,
    PaymentMethod,
    Restaurant,
    RevenuePaymentMethod,
)


@pytest.fixture
def restaurant() -> Restaurant:
    return Restaurant(
        id="rest_test",
        name="Chez Fatou",
        location="Dakar",
        currency="XOF",
    )

@pytest.fixture
def make_revenue():
    """Build a DailyRevenue; payment lines default to one cash line for the total."""

    def _make(day: date, total: float, methods: dict | None = None, **kwargs) -> DailyRevenue:
        if methods is None:
            methods = {PaymentMethod.CASH: total}
        return DailyRevenue(
            restaurant_id="rest_test",
            date=day,
            total_amount=total,
            payment_methods=[
                RevenuePaymentMethod(method=method, amount=amount)
                for method, amount in methods.items()
            ],
            **kwargs,
        )

    return _make

@pytest.fixture
def make_expense():
    def _make(day: date, total: float, lines: dict | None = None, **kwargs) -> DailyExpense:
        return DailyExpense(
            restaurant_id="rest_test",
            date=day,
            total_amount=total,
            is_detailed=lines is not None,
            expense_lines=(
                [ExpenseLine(category=category, amount=amount) for category, amount in lines.items()]
                if lines is not None
                else None
            ),
            **kwargs,
        )

    return _make
