"""
Core Data Models for Placebi

These models define the schemas for everything the state store holds
and persists. They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Round-trip through the persisted JSON blob unchanged
4. Stay plain values: no back-references, no cycles

DESIGN DECISION: Python attributes are snake_case, the wire format is
camelCase. Both spellings are accepted on input so blobs written by
older versions of the app load as-is.
"""

import datetime as dt
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def utc_now() -> dt.datetime:
    """Timezone-aware timestamp used for created_at / updated_at."""
    return dt.datetime.now(dt.timezone.utc)


def new_id(prefix: str) -> str:
    """Generate a record id such as ``rev_3f2a...``."""
    return f"{prefix}_{uuid4().hex}"


class WireModel(BaseModel):
    """Base for every persisted model: camelCase on the wire."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class RestaurantType(str, Enum):
    """Kind of establishment chosen during setup."""
    RESTAURANT = "restaurant"
    FAST_FOOD = "fast_food"
    CAFE = "cafe"
    BAR = "bar"
    OTHER = "other"


class PaymentMethod(str, Enum):
    """
    How a customer paid.

    CRITICAL: Declaration order is the canonical order of every
    per-method breakdown and prediction.
    """
    WAVE = "wave"
    ORANGE_MONEY = "orange_money"
    CASH = "cash"


class ExpenseCategory(str, Enum):
    """Expense categories offered by the detailed expense form."""
    RENT = "rent"
    SALARIES = "salaries"
    INGREDIENTS = "ingredients"
    UTILITIES = "utilities"
    TRANSPORT = "transport"
    MARKETING = "marketing"
    OTHERS = "others"


# =============================================================================
# RESTAURANT
# =============================================================================

class Restaurant(WireModel):
    """
    The restaurant profile.

    Singleton per installation: created once by the setup wizard and
    destroyed only by a full reset.
    """

    id: str = Field(default_factory=lambda: new_id("rest"))
    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Restaurant name"
    )
    location: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="City or neighbourhood"
    )
    type: RestaurantType = Field(
        default=RestaurantType.RESTAURANT,
        description="Kind of establishment"
    )
    currency: str = Field(
        default="XOF",
        pattern="^[A-Z]{3}$",
        description="ISO-like currency code used for display"
    )
    created_at: dt.datetime = Field(default_factory=utc_now)
    updated_at: dt.datetime = Field(default_factory=utc_now)

    @field_validator("currency", mode="before")
    @classmethod
    def normalize_currency(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v


# =============================================================================
# REVENUE
# =============================================================================

class RevenuePaymentMethod(WireModel):
    """One payment-method line of a daily revenue."""

    id: str = Field(default_factory=lambda: new_id("pm"))
    method: PaymentMethod
    amount: float = Field(..., ge=0)


class DailyRevenue(WireModel):
    """
    Revenue recorded for one calendar day.

    NOTE: total_amount is expected to equal the sum of payment_methods,
    but nothing downstream enforces it. KPIs read total_amount, the
    payment-method breakdown reads the lines.
    """

    id: str = Field(default_factory=lambda: new_id("rev"))
    restaurant_id: str
    date: dt.date = Field(
        ...,
        description="Business day the revenue belongs to"
    )
    total_amount: float = Field(..., ge=0)
    payment_methods: list[RevenuePaymentMethod] = Field(default_factory=list)
    notes: Optional[str] = Field(default=None, max_length=1000)
    created_at: dt.datetime = Field(default_factory=utc_now)
    updated_at: dt.datetime = Field(default_factory=utc_now)

    @field_validator("date", mode="before")
    @classmethod
    def truncate_to_day(cls, v):
        return _to_calendar_day(v)

    @property
    def payment_methods_total(self) -> float:
        return sum(pm.amount for pm in self.payment_methods)


# =============================================================================
# EXPENSE
# =============================================================================

class ExpenseLine(WireModel):
    """One categorised line of a detailed expense."""

    id: str = Field(default_factory=lambda: new_id("exp_line"))
    category: ExpenseCategory
    amount: float = Field(..., ge=0)


class DailyExpense(WireModel):
    """
    Expenses recorded for one calendar day.

    Simple expenses carry only total_amount. Detailed ones also carry
    expense_lines; the same total/lines divergence caveat as
    DailyRevenue applies.
    """

    id: str = Field(default_factory=lambda: new_id("exp"))
    restaurant_id: str
    date: dt.date = Field(
        ...,
        description="Business day the expense belongs to"
    )
    total_amount: float = Field(..., ge=0)
    is_detailed: bool = False
    expense_lines: Optional[list[ExpenseLine]] = None
    notes: Optional[str] = Field(default=None, max_length=1000)
    created_at: dt.datetime = Field(default_factory=utc_now)
    updated_at: dt.datetime = Field(default_factory=utc_now)

    @field_validator("date", mode="before")
    @classmethod
    def truncate_to_day(cls, v):
        return _to_calendar_day(v)

    @property
    def lines_total(self) -> float:
        return sum(line.amount for line in self.expense_lines or [])


# =============================================================================
# PERSISTED STATE
# =============================================================================

class AppSnapshot(WireModel):
    """
    Everything the state store persists, as one blob.

    Layout on the wire:
        {"restaurant": {...} | null, "revenues": [...], "expenses": [...]}
    """

    restaurant: Optional[Restaurant] = None
    revenues: list[DailyRevenue] = Field(default_factory=list)
    expenses: list[DailyExpense] = Field(default_factory=list)

    def to_blob(self) -> str:
        """Serialize to the JSON blob (camelCase keys, ISO-8601 dates)."""
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_blob(cls, blob: str | bytes) -> "AppSnapshot":
        """Rebuild a snapshot, turning every ISO string back into a date value."""
        return cls.model_validate_json(blob)


def _to_calendar_day(v):
    # Older blobs stored full timestamps ("2024-12-01T00:00:00.000Z")
    if isinstance(v, dt.datetime):
        return v.date()
    if isinstance(v, str) and len(v) > 10:
        return v[:10]
    return v
