"""
In-Memory Storage Implementation

A key-value map of serialized blobs. Used by tests, and as the fallback
when file storage cannot be configured. Blobs are stored serialized so
every save/load goes through the same JSON round-trip as on disk.
"""

from typing import Optional

from pydantic import ValidationError

from placebi.models.restaurant import AppSnapshot
from placebi.services.storage.interface import (
    CorruptStateError,
    StateStorageInterface,
)


class InMemoryStateStorage(StateStorageInterface):
    """Volatile storage; lost when the process exits."""

    def __init__(self, storage_key: str = "placebi-storage"):
        self._key = storage_key
        self._blobs: dict[str, str] = {}

    @property
    def raw_blob(self) -> Optional[str]:
        """The serialized blob as last written, for inspection."""
        return self._blobs.get(self._key)

    @property
    def quarantined_blob(self) -> Optional[str]:
        """The last blob that failed to decode, if any."""
        return self._blobs.get(f"{self._key}.corrupt")

    def put_raw_blob(self, blob: str) -> None:
        """Seed the storage with an arbitrary blob (e.g. from an older version)."""
        self._blobs[self._key] = blob

    def describe(self) -> str:
        return f"memory://{self._key}"

    def load(self) -> Optional[AppSnapshot]:
        blob = self._blobs.get(self._key)
        if blob is None:
            return None
        try:
            return AppSnapshot.from_blob(blob)
        except ValidationError as e:
            quarantine_key = f"{self._key}.corrupt"
            self._blobs[quarantine_key] = self._blobs.pop(self._key)
            raise CorruptStateError(
                f"State blob is invalid: {e.error_count()} error(s)",
                quarantined_to=f"memory://{quarantine_key}",
            ) from e

    def save(self, snapshot: AppSnapshot) -> bool:
        self._blobs[self._key] = snapshot.to_blob()
        return True
