"""Audit logging package."""

from placebi.audit.logger import AuditLogger, configure_logging

__all__ = ["AuditLogger", "configure_logging"]
