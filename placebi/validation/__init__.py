"""Entry validation package."""

from placebi.validation.validator import EntryValidator

__all__ = ["EntryValidator"]
