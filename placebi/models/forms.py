"""
Form and Validation Models

Form models carry RAW user input from the entry pages. They are
deliberately loose (no positivity constraints) so that bad input can
be reported field by field by the validator instead of failing
construction with a single exception.
"""

import datetime as dt
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from placebi.models.restaurant import (
    ExpenseCategory,
    PaymentMethod,
    RestaurantType,
)


class RevenueEntryMode(str, Enum):
    """
    How revenue is entered.

    GLOBAL: one amount per payment method, total is their sum.
    DETAILED: an explicit total plus free-form lines.
    """
    GLOBAL = "global"
    DETAILED = "detailed"


# =============================================================================
# FORM PAYLOADS
# =============================================================================

class RestaurantFormData(BaseModel):
    """Setup wizard / settings form."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = ""
    location: str = ""
    type: RestaurantType = RestaurantType.RESTAURANT
    currency: str = "XOF"


class PaymentMethodEntry(BaseModel):
    method: PaymentMethod
    amount: float = 0.0


def _default_payment_rows() -> list[PaymentMethodEntry]:
    return [PaymentMethodEntry(method=method) for method in PaymentMethod]


class RevenueFormData(BaseModel):
    """Revenue entry form."""
    model_config = ConfigDict(str_strip_whitespace=True)

    date: dt.date = Field(default_factory=dt.date.today)
    mode: RevenueEntryMode = RevenueEntryMode.GLOBAL
    total_amount: Optional[float] = None
    payment_methods: list[PaymentMethodEntry] = Field(
        default_factory=_default_payment_rows
    )
    notes: Optional[str] = None

    @property
    def payment_methods_total(self) -> float:
        return sum(pm.amount or 0 for pm in self.payment_methods)


class ExpenseLineEntry(BaseModel):
    category: ExpenseCategory = ExpenseCategory.INGREDIENTS
    amount: float = 0.0


class ExpenseFormData(BaseModel):
    """Expense entry form."""
    model_config = ConfigDict(str_strip_whitespace=True)

    date: dt.date = Field(default_factory=dt.date.today)
    total_amount: Optional[float] = None
    is_detailed: bool = False
    expense_lines: list[ExpenseLineEntry] = Field(
        default_factory=lambda: [ExpenseLineEntry()]
    )
    notes: Optional[str] = None

    @property
    def expense_lines_total(self) -> float:
        return sum(line.amount or 0 for line in self.expense_lines)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Form field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'inconsistent')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """
    Result of validating one form submission.

    Errors block the submission, warnings are shown but do not.
    """

    form: str = Field(
        ...,
        description="Which form was validated (setup, revenue, expense)"
    )
    validated_at: dt.datetime = Field(
        default_factory=lambda: dt.datetime.now(dt.timezone.utc)
    )
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == "warning"]

    def errors_by_field(self) -> dict[str, str]:
        """First error message per field, for inline display."""
        errors: dict[str, str] = {}
        for issue in self.issues:
            if issue.severity == "error":
                errors.setdefault(issue.field, issue.message)
        return errors
