"""
Abstract Storage Interface

DESIGN DECISION: The state store persists through an abstract interface.
This allows us to:
1. Keep the blob on local disk today
2. Use in-memory storage for testing
3. Swap in a different key-value backend later
4. Keep the store and the analytics engine decoupled from I/O

The contract is intentionally tiny: the whole application state is
one blob under one key. There are no partial writes and no queries.
"""

from abc import ABC, abstractmethod
from typing import Optional

from placebi.models.restaurant import AppSnapshot


class StateStorageInterface(ABC):
    """
    Abstract interface for the persisted application state.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def load(self) -> Optional[AppSnapshot]:
        """
        Read the persisted snapshot.

        Returns:
            The snapshot, or None if nothing has been saved yet

        Raises:
            StorageReadError: If the backend cannot be read
            CorruptStateError: If a blob exists but cannot be decoded
        """
        pass

    @abstractmethod
    def save(self, snapshot: AppSnapshot) -> bool:
        """
        Persist the snapshot, replacing any previous one.

        The write must be complete when this returns.

        Returns:
            True if saved successfully

        Raises:
            StorageWriteError: If the write fails
        """
        pass

    @abstractmethod
    def describe(self) -> str:
        """Human-readable location of the blob, for the settings page."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """The backend could not be read."""
    pass


class StorageWriteError(StorageError):
    """The backend could not be written."""
    pass


class CorruptStateError(StorageReadError):
    """A blob exists but is not a valid snapshot."""

    def __init__(self, message: str, quarantined_to: Optional[str] = None):
        # quarantined_to is None when the blob could not be moved aside
        super().__init__(message)
        self.quarantined_to = quarantined_to
