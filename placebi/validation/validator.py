"""
Entry Form Validation

DESIGN DECISION: Validation reports, it never fixes. Each check adds a
ValidationIssue for one form field:

- ERRORS block the submission (missing or non-positive amounts, blank
  names). Nothing reaches the store.
- WARNINGS are shown next to the form but do not block (a total that
  disagrees with its lines, a date in the future, an absurd amount).

IMPORTANT: This is the only place amounts are checked for presence and
positivity. The analytics engine trusts whatever the store holds.
"""

import re
from datetime import date
from typing import Optional

from placebi.config import AppSettings, get_settings
from placebi.models.forms import (
    ExpenseFormData,
    RestaurantFormData,
    RevenueEntryMode,
    RevenueFormData,
    ValidationIssue,
    ValidationResult,
)


CURRENCY_CODE = re.compile(r"^[A-Za-z]{3}$")

# Totals within this distance of their line sum are considered equal
AMOUNT_TOLERANCE = 0.005


class EntryValidator:
    """Validates setup, revenue and expense form submissions."""

    def __init__(self, settings: Optional[AppSettings] = None):
        self._settings = settings or get_settings().app

    def validate_restaurant(self, form: RestaurantFormData) -> ValidationResult:
        """Name and location are required; currency must look like a code."""
        issues = []

        if not form.name.strip():
            issues.append(_error("name", "missing", "Restaurant name is required"))

        if not form.location.strip():
            issues.append(_error("location", "missing", "Location is required"))

        currency = form.currency.strip()
        if not CURRENCY_CODE.match(currency):
            issues.append(_error(
                "currency",
                "invalid_format",
                f"Currency must be a three-letter code, got '{form.currency}'",
            ))
        elif currency.upper() not in self._settings.supported_currencies_list:
            issues.append(_warning(
                "currency",
                "unsupported",
                f"{currency.upper()} is not one of the usual currencies",
            ))

        return ValidationResult(form="setup", issues=issues)

    def validate_revenue(self, form: RevenueFormData) -> ValidationResult:
        """
        GLOBAL mode: the payment-method amounts must add up to more than 0.
        DETAILED mode: an explicit positive total and at least one positive line.
        """
        issues = []

        if any((pm.amount or 0) < 0 for pm in form.payment_methods):
            issues.append(_error(
                "payment_methods",
                "invalid_value",
                "Payment method amounts cannot be negative",
            ))

        lines_total = form.payment_methods_total

        if form.mode == RevenueEntryMode.GLOBAL:
            if lines_total <= 0:
                issues.append(_error(
                    "payment_methods",
                    "invalid_value",
                    "The payment method total must be greater than 0",
                ))
            entered_total = lines_total
        else:
            if form.total_amount is None or form.total_amount <= 0:
                issues.append(_error(
                    "total_amount",
                    "missing",
                    "The total amount is required",
                ))
            if not any((pm.amount or 0) > 0 for pm in form.payment_methods):
                issues.append(_error(
                    "payment_methods",
                    "missing",
                    "At least one line with an amount is required",
                ))
            entered_total = form.total_amount or 0
            if (
                entered_total > 0
                and lines_total > 0
                and abs(entered_total - lines_total) > AMOUNT_TOLERANCE
            ):
                issues.append(_warning(
                    "total_amount",
                    "inconsistent",
                    f"Total ({entered_total:,.0f}) differs from the sum of lines ({lines_total:,.0f})",
                ))

        issues.extend(self._check_common(form.date, entered_total))
        return ValidationResult(form="revenue", issues=issues)

    def validate_expense(self, form: ExpenseFormData) -> ValidationResult:
        """
        Simple mode: a positive total.
        Detailed mode: at least one line, at least one of them positive.
        """
        issues = []

        if not form.is_detailed:
            if form.total_amount is None or form.total_amount <= 0:
                issues.append(_error(
                    "total_amount",
                    "missing",
                    "The total amount is required",
                ))
            entered_total = form.total_amount or 0
        else:
            if not form.expense_lines:
                issues.append(_error(
                    "expense_lines",
                    "missing",
                    "At least one expense line is required",
                ))
            elif not any((line.amount or 0) > 0 for line in form.expense_lines):
                issues.append(_error(
                    "expense_lines",
                    "missing",
                    "At least one line with an amount is required",
                ))
            if any((line.amount or 0) < 0 for line in form.expense_lines):
                issues.append(_error(
                    "expense_lines",
                    "invalid_value",
                    "Expense amounts cannot be negative",
                ))

            entered_total = form.expense_lines_total
            if (
                form.total_amount
                and entered_total > 0
                and abs(form.total_amount - entered_total) > AMOUNT_TOLERANCE
            ):
                issues.append(_warning(
                    "total_amount",
                    "inconsistent",
                    f"Entered total ({form.total_amount:,.0f}) will be replaced "
                    f"by the sum of lines ({entered_total:,.0f})",
                ))

        issues.extend(self._check_common(form.date, entered_total))
        return ValidationResult(form="expense", issues=issues)

    def _check_common(self, entry_date: date, total: float) -> list[ValidationIssue]:
        """Sanity checks shared by revenue and expense entries."""
        issues = []

        if entry_date > date.today():
            issues.append(_warning(
                "date",
                "future_date",
                f"Date ({entry_date.isoformat()}) is in the future",
            ))

        if total > self._settings.max_entry_amount:
            issues.append(_warning(
                "total_amount",
                "suspicious_value",
                f"Amount ({total:,.0f}) seems unusually high",
            ))

        return issues


def _error(field: str, issue_type: str, message: str) -> ValidationIssue:
    return ValidationIssue(field=field, issue_type=issue_type, message=message, severity="error")


def _warning(field: str, issue_type: str, message: str) -> ValidationIssue:
    return ValidationIssue(field=field, issue_type=issue_type, message=message, severity="warning")
