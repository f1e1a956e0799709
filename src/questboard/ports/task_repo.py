"""Task repository interface."""

from datetime import date
from typing import Protocol


class TaskRepository(Protocol):
    """Interface for loading and updating task records in any backend."""

    def fetch_records(self) -> list[dict]:
        """Fetch all task records as plain dicts."""
        ...

    def mark_completed(self, task_id: str, on: date) -> None:
        """Mark a task completed on the given date."""
        ...

    def mark_incomplete(self, task_id: str) -> None:
        """Clear a task's completion."""
        ...

    def add_record(self, record: dict) -> None:
        """Store a new task record."""
        ...
