"""
Audit Logger

DESIGN DECISION: Every mutation of the state store is logged.
This provides:
1. Traceability of what was entered and when
2. Debugging capability when totals look wrong
3. A visible trail when persistence fails

The audit logger:
- Is synchronous, like the store it observes
- Never raises: a logging failure must not lose a user's entry
- Writes structured JSON through structlog
"""

import logging
import sys

import structlog

from placebi.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route structlog output to stderr at the given level."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
    )


class AuditLogger:
    """
    Central audit logging service.

    Every event goes to the structured local log at the level matching
    its severity.
    """

    def __init__(self, logger_name: str = "placebi.audit"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns False if the event could not be written.
        """
        log_dict = event.to_log_dict()

        try:
            if event.severity == AuditSeverity.CRITICAL:
                self._logger.critical("audit_event", **log_dict)
            elif event.severity == AuditSeverity.ERROR:
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # Last resort: stdlib logging still works even if a processor broke
            logging.getLogger(__name__).error("audit log write failed: %s", e)
            return False

        return True

    def log_restaurant_set(self, restaurant_id: str, name: str) -> None:
        self.log(AuditEventBuilder.restaurant_set(restaurant_id, name))

    def log_record_added(
        self,
        kind: str,
        record_id: str,
        day: str,
        amount: float,
    ) -> None:
        """Log a new revenue or expense."""
        self.log(AuditEventBuilder.record_added(kind, record_id, day, amount))

    def log_record_updated(self, kind: str, record_id: str, fields: list[str]) -> None:
        self.log(AuditEventBuilder.record_updated(kind, record_id, fields))

    def log_record_deleted(self, kind: str, record_id: str) -> None:
        self.log(AuditEventBuilder.record_deleted(kind, record_id))

    def log_store_reset(self, revenue_count: int, expense_count: int) -> None:
        self.log(AuditEventBuilder.store_reset(revenue_count, expense_count))

    def log_state_loaded(self, found: bool, revenue_count: int, expense_count: int) -> None:
        self.log(AuditEventBuilder.state_loaded(found, revenue_count, expense_count))

    def log_state_load_failed(self, error_message: str) -> None:
        self.log(AuditEventBuilder.state_load_failed(error_message))

    def log_state_saved(self, revenue_count: int, expense_count: int) -> None:
        self.log(AuditEventBuilder.state_saved(revenue_count, expense_count))

    def log_state_save_failed(self, error_message: str) -> None:
        """Log a failed write. The UI is expected to surface it too."""
        self.log(AuditEventBuilder.state_save_failed(error_message))

    def log_entry_rejected(self, form: str, issues: list[dict]) -> None:
        self.log(AuditEventBuilder.entry_rejected(form, issues))
