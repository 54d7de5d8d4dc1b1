"""
Storage Services Package

Provides the abstract interface and concrete implementations for the
persisted application state. The default backend is a JSON file on
local disk; an in-memory backend exists for tests and fallbacks.
"""

from placebi.services.storage.interface import (
    CorruptStateError,
    StateStorageInterface,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from placebi.services.storage.json_file import JsonFileStateStorage
from placebi.services.storage.memory import InMemoryStateStorage

__all__ = [
    # Interfaces
    "StateStorageInterface",
    # Exceptions
    "CorruptStateError",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Implementations
    "InMemoryStateStorage",
    "JsonFileStateStorage",
]
