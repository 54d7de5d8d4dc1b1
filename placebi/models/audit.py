"""
Audit Models for Placebi

Every state mutation and every persistence outcome produces an audit
event. Events are written to the structured log; they are not part of
the persisted state blob.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Profile
    RESTAURANT_SET = "restaurant_set"

    # Revenue history
    REVENUE_ADDED = "revenue_added"
    REVENUE_UPDATED = "revenue_updated"
    REVENUE_DELETED = "revenue_deleted"

    # Expense history
    EXPENSE_ADDED = "expense_added"
    EXPENSE_UPDATED = "expense_updated"
    EXPENSE_DELETED = "expense_deleted"

    # Whole store
    STORE_RESET = "store_reset"

    # Persistence
    STATE_LOADED = "state_loaded"
    STATE_LOAD_FAILED = "state_load_failed"
    STATE_SAVED = "state_saved"
    STATE_SAVE_FAILED = "state_save_failed"

    # Entry forms
    ENTRY_REJECTED = "entry_rejected"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """A single audit event."""

    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'revenue', 'expense', 'state')"
    )
    entity_id: Optional[str] = None

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.record_added("revenue", revenue.id, ...)
        event = AuditEventBuilder.state_save_failed(str(error))
    """

    _ADDED = {
        "revenue": AuditEventType.REVENUE_ADDED,
        "expense": AuditEventType.EXPENSE_ADDED,
    }
    _UPDATED = {
        "revenue": AuditEventType.REVENUE_UPDATED,
        "expense": AuditEventType.EXPENSE_UPDATED,
    }
    _DELETED = {
        "revenue": AuditEventType.REVENUE_DELETED,
        "expense": AuditEventType.EXPENSE_DELETED,
    }

    @staticmethod
    def restaurant_set(restaurant_id: str, name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RESTAURANT_SET,
            entity_type="restaurant",
            entity_id=restaurant_id,
            description=f"Restaurant profile set: {name}",
            details={"name": name},
        )

    @staticmethod
    def record_added(
        kind: str,
        record_id: str,
        day: str,
        amount: float,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventBuilder._ADDED[kind],
            entity_type=kind,
            entity_id=record_id,
            description=f"{kind.capitalize()} of {amount:,.0f} recorded for {day}",
            details={"date": day, "total_amount": amount},
        )

    @staticmethod
    def record_updated(kind: str, record_id: str, fields: list[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventBuilder._UPDATED[kind],
            entity_type=kind,
            entity_id=record_id,
            description=f"{kind.capitalize()} updated",
            details={"fields": fields},
        )

    @staticmethod
    def record_deleted(kind: str, record_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventBuilder._DELETED[kind],
            severity=AuditSeverity.WARNING,
            entity_type=kind,
            entity_id=record_id,
            description=f"{kind.capitalize()} deleted",
        )

    @staticmethod
    def store_reset(revenue_count: int, expense_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORE_RESET,
            severity=AuditSeverity.WARNING,
            entity_type="state",
            description="All data cleared by user",
            details={
                "revenues_removed": revenue_count,
                "expenses_removed": expense_count,
            },
        )

    @staticmethod
    def state_loaded(found: bool, revenue_count: int, expense_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_LOADED,
            entity_type="state",
            description="Persisted state restored" if found else "No persisted state, starting empty",
            details={
                "found": found,
                "revenues": revenue_count,
                "expenses": expense_count,
            },
        )

    @staticmethod
    def state_load_failed(error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_LOAD_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="state",
            description="Persisted state unreadable, starting empty",
            error_message=error_message,
        )

    @staticmethod
    def state_saved(revenue_count: int, expense_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_SAVED,
            severity=AuditSeverity.DEBUG,
            entity_type="state",
            description="State persisted",
            details={"revenues": revenue_count, "expenses": expense_count},
        )

    @staticmethod
    def state_save_failed(error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_SAVE_FAILED,
            severity=AuditSeverity.CRITICAL,
            entity_type="state",
            description="State could not be persisted; changes exist only in memory",
            error_message=error_message,
        )

    @staticmethod
    def entry_rejected(form: str, issues: list[dict]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type=form,
            description=f"{form.capitalize()} entry rejected: {len(issues)} issue(s)",
            details={"issues": issues},
        )
