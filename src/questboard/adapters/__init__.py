"""Adapters - I/O implementations of ports."""

from .errors import StoreError
from .json_store import JsonFileTaskStore
from .firestore import FirestoreTaskRepository
from .clock import SystemClock, FixedClock

__all__ = [
    "StoreError",
    "JsonFileTaskStore",
    "FirestoreTaskRepository",
    "SystemClock",
    "FixedClock",
]
