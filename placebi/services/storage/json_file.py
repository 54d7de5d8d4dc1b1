"""
JSON File Storage Implementation

DESIGN DECISION: The state is one JSON document on local disk, the
desktop equivalent of a browser's localStorage entry:
1. No database setup required
2. The file is human readable and easy to back up
3. A single writer (one user) means no locking is needed

TRADEOFFS:
- Every save rewrites the whole blob (fine for a few thousand records)
- No history: a reset is final

Writes go to a temp file that atomically replaces the blob, so a crash
mid-write leaves the previous state intact.
"""

import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from tenacity import (
    RetryError,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from placebi.config import get_settings
from placebi.models.restaurant import AppSnapshot
from placebi.services.storage.interface import (
    CorruptStateError,
    StateStorageInterface,
    StorageReadError,
    StorageWriteError,
)


class JsonFileStateStorage(StateStorageInterface):
    """
    Persists the application state as ``<data_dir>/<storage_key>.json``.
    """

    def __init__(
        self,
        path: Optional[Path] = None,
        write_retries: Optional[int] = None,
    ):
        """
        Initialize file storage.

        Args:
            path: Blob location. Defaults to the configured data_dir/storage_key.
            write_retries: Attempts per save. Defaults to the configured value.
        """
        settings = get_settings().storage
        self._path = Path(path) if path is not None else settings.blob_path
        self._write_retries = write_retries or settings.write_retries

    @property
    def path(self) -> Path:
        return self._path

    def describe(self) -> str:
        return str(self._path.resolve())

    def load(self) -> Optional[AppSnapshot]:
        """Read and decode the blob; a missing file means a fresh install."""
        if not self._path.exists():
            return None

        try:
            blob = self._path.read_bytes()
        except OSError as e:
            raise StorageReadError(f"Could not read {self._path}: {e}") from e

        try:
            return AppSnapshot.from_blob(blob)
        except ValidationError as e:
            quarantined = self._quarantine()
            raise CorruptStateError(
                f"State blob at {self._path} is invalid: {e.error_count()} error(s)",
                quarantined_to=str(quarantined) if quarantined else None,
            ) from e

    def save(self, snapshot: AppSnapshot) -> bool:
        """Write the blob, retrying transient OS errors."""
        blob = snapshot.to_blob()

        try:
            for attempt in Retrying(
                stop=stop_after_attempt(self._write_retries),
                wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
                retry=retry_if_exception_type(OSError),
                reraise=True,
            ):
                with attempt:
                    self._write_atomic(blob)
        except (OSError, RetryError) as e:
            raise StorageWriteError(f"Could not write {self._path}: {e}") from e

        return True

    def _write_atomic(self, blob: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent,
            prefix=f".{self._path.stem}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(blob)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self._path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def _quarantine(self) -> Optional[Path]:
        """Move an undecodable blob aside so the next save cannot overwrite it."""
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S")
        target = self._path.with_name(f"{self._path.stem}.corrupt-{stamp}.json")
        try:
            os.replace(self._path, target)
        except OSError:
            return None
        return target
