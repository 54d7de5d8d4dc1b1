"""
Tests for Placebi

Test strategy:
1. Unit tests for individual components (models, engine, validators)
2. Integration tests for flows (with in-memory or tmp_path storage)
3. No network, no real data directory
"""

import json
from datetime import date, datetime, timezone

import pytest
from pydantic import ValidationError

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
)
from placebi.models.forms import ValidationIssue, ValidationResult
from placebi.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestRestaurantModel:
    """Tests for the restaurant profile."""

    def test_restaurant_creation(self):
        """Test Restaurant model creation with defaults."""
        restaurant = Restaurant(name="Chez Fatou", location="Dakar")
        assert restaurant.type == RestaurantType.RESTAURANT
        assert restaurant.currency == "XOF"
        assert restaurant.id.startswith("rest_")
        assert restaurant.created_at.tzinfo is not None

    def test_restaurant_strips_whitespace(self):
        restaurant = Restaurant(name="  Chez Fatou  ", location=" Dakar ")
        assert restaurant.name == "Chez Fatou"
        assert restaurant.location == "Dakar"

    def test_currency_is_uppercased(self):
        restaurant = Restaurant(name="A", location="B", currency=" eur ")
        assert restaurant.currency == "EUR"

    def test_currency_must_be_three_letters(self):
        with pytest.raises(ValidationError):
            Restaurant(name="A", location="B", currency="EURO")

    def test_name_required(self):
        with pytest.raises(ValidationError):
            Restaurant(name="", location="Dakar")


class TestRecordModels:
    """Tests for DailyRevenue / DailyExpense."""

    def test_revenue_creation(self):
        """Test DailyRevenue model creation."""
        revenue = DailyRevenue(
            restaurant_id="rest_1",
            date=date(2024, 12, 1),
            total_amount=1000,
            payment_methods=[
                RevenuePaymentMethod(method=PaymentMethod.WAVE, amount=400),
                RevenuePaymentMethod(method=PaymentMethod.CASH, amount=600),
            ],
        )
        assert revenue.id.startswith("rev_")
        assert revenue.payment_methods_total == 1000
        assert revenue.notes is None

    def test_revenue_rejects_negative_amount(self):
        """Test that negative amounts are rejected."""
        with pytest.raises(ValidationError):
            DailyRevenue(restaurant_id="rest_1", date=date(2024, 12, 1), total_amount=-5)

    def test_payment_line_rejects_unknown_method(self):
        with pytest.raises(ValidationError):
            RevenuePaymentMethod(method="paypal", amount=10)

    def test_accepts_camel_case_input(self):
        revenue = DailyRevenue.model_validate({
            "restaurantId": "rest_1",
            "date": "2024-12-01",
            "totalAmount": 250,
            "paymentMethods": [{"id": "pm_1", "method": "orange_money", "amount": 250}],
        })
        assert revenue.restaurant_id == "rest_1"
        assert revenue.payment_methods[0].method == PaymentMethod.ORANGE_MONEY

    def test_legacy_timestamp_date_is_truncated(self):
        """A full ISO timestamp in `date` becomes its calendar day."""
        expense = DailyExpense.model_validate({
            "restaurantId": "rest_1",
            "date": "2024-12-01T00:00:00.000Z",
            "totalAmount": 90,
        })
        assert expense.date == date(2024, 12, 1)

    def test_datetime_date_is_truncated(self):
        revenue = DailyRevenue(
            restaurant_id="rest_1",
            date=datetime(2024, 12, 1, 18, 30),
            total_amount=10,
        )
        assert revenue.date == date(2024, 12, 1)
        assert type(revenue.date) is date

    def test_expense_lines_total(self):
        expense = DailyExpense(
            restaurant_id="rest_1",
            date=date(2024, 12, 1),
            total_amount=700,
            is_detailed=True,
            expense_lines=[
                ExpenseLine(category=ExpenseCategory.RENT, amount=500),
                ExpenseLine(category=ExpenseCategory.TRANSPORT, amount=200),
            ],
        )
        assert expense.lines_total == 700

    def test_simple_expense_has_no_lines(self):
        expense = DailyExpense(restaurant_id="rest_1", date=date(2024, 12, 1), total_amount=50)
        assert expense.expense_lines is None
        assert expense.lines_total == 0


class TestAppSnapshot:
    """Tests for the persisted blob."""

    def test_blob_layout(self, restaurant, make_revenue, make_expense):
        snapshot = AppSnapshot(
            restaurant=restaurant,
            revenues=[make_revenue(date(2024, 12, 1), 1000)],
            expenses=[make_expense(date(2024, 12, 1), 400)],
        )
        data = json.loads(snapshot.to_blob())

        assert set(data) == {"restaurant", "revenues", "expenses"}
        assert data["revenues"][0]["totalAmount"] == 1000
        assert data["revenues"][0]["date"] == "2024-12-01"
        assert data["revenues"][0]["paymentMethods"][0]["method"] == "cash"
        assert isinstance(data["restaurant"]["createdAt"], str)
        assert data["expenses"][0]["isDetailed"] is False

    def test_round_trip_restores_dates(self, restaurant, make_revenue, make_expense):
        """Reloading a blob yields an equal snapshot with real date values."""
        original = AppSnapshot(
            restaurant=restaurant,
            revenues=[make_revenue(date(2024, 12, 2), 1500.5, {PaymentMethod.WAVE: 1500.5})],
            expenses=[make_expense(date(2024, 12, 2), 300, {ExpenseCategory.RENT: 300})],
        )
        restored = AppSnapshot.from_blob(original.to_blob())

        assert restored == original
        assert isinstance(restored.revenues[0].date, date)
        assert isinstance(restored.revenues[0].created_at, datetime)
        assert isinstance(restored.expenses[0].updated_at, datetime)
        assert isinstance(restored.restaurant.created_at, datetime)

    def test_empty_snapshot(self):
        restored = AppSnapshot.from_blob(AppSnapshot().to_blob())
        assert restored.restaurant is None
        assert restored.revenues == []
        assert restored.expenses == []


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        event = AuditEvent(
            event_type=AuditEventType.REVENUE_ADDED,
            description="Revenue recorded",
        )
        assert event.severity == AuditSeverity.INFO
        assert event.timestamp.tzinfo == timezone.utc

    def test_audit_event_to_log_dict(self):
        event = AuditEventBuilder.record_added("expense", "exp_1", "2024-12-01", 400)
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "expense_added"
        assert log_dict["entity_id"] == "exp_1"
        assert log_dict["details"]["total_amount"] == 400

    def test_save_failure_is_critical(self):
        event = AuditEventBuilder.state_save_failed("disk full")
        assert event.severity == AuditSeverity.CRITICAL
        assert event.error_message == "disk full"


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_validation_result_has_errors(self):
        result = ValidationResult(
            form="revenue",
            issues=[
                ValidationIssue(
                    field="total_amount",
                    issue_type="missing",
                    message="Total amount required",
                    severity="error",
                ),
                ValidationIssue(
                    field="total_amount",
                    issue_type="other",
                    message="Second message",
                    severity="error",
                ),
            ],
        )
        assert result.has_errors is True
        assert result.is_valid is False
        assert result.error_count == 2
        assert result.errors_by_field() == {"total_amount": "Total amount required"}

    def test_validation_result_warnings_only(self):
        """Test that warnings don't count as errors."""
        result = ValidationResult(
            form="expense",
            issues=[
                ValidationIssue(
                    field="date",
                    issue_type="future_date",
                    message="Date in future",
                    severity="warning",
                ),
            ],
        )
        assert result.is_valid is True
        assert result.error_count == 0
        assert len(result.warnings) == 1


class TestEnums:
    def test_payment_method_order(self):
        assert [m.value for m in PaymentMethod] == ["wave", "orange_money", "cash"]

    def test_expense_categories(self):
        expected = [
            "rent", "salaries", "ingredients", "utilities",
            "transport", "marketing", "others",
        ]
        assert [c.value for c in ExpenseCategory] == expected


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
