"""File-based task storage adapter."""

import json
import logging
from datetime import date
from pathlib import Path

from .errors import StoreError

logger = logging.getLogger(__name__)


class JsonFileTaskStore:
    """
    JSON file task storage.

    Implements TaskRepository protocol. The file holds a JSON array of task
    records; a missing file is an empty store.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def _read(self) -> list:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text())
        except json.JSONDecodeError as e:
            raise StoreError(f"Invalid JSON in {self.path}: {e}") from e
        if not isinstance(data, list):
            raise StoreError(f"{self.path} must contain a JSON array of tasks")
        return data

    def _write(self, records: list) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(records, indent=2, default=str))

    def fetch_records(self) -> list[dict]:
        """Fetch all task records. Non-object entries are passed through for diagnostics."""
        return self._read()

    def _set_completion(self, task_id: str, completed: bool, on: date | None) -> None:
        records = self._read()
        for record in records:
            if isinstance(record, dict) and str(record.get("id")) == task_id:
                record["completed"] = completed
                record["completedDate"] = on.isoformat() if on else None
                break
        else:
            raise StoreError(f"No task with id {task_id!r} in {self.path}")

        self._write(records)

    def mark_completed(self, task_id: str, on: date) -> None:
        """Mark a task completed on the given date."""
        self._set_completion(task_id, True, on)
        logger.info(f"Marked task {task_id} completed")

    def mark_incomplete(self, task_id: str) -> None:
        """Clear a task's completion."""
        self._set_completion(task_id, False, None)
        logger.info(f"Reopened task {task_id}")

    def add_record(self, record: dict) -> None:
        """Append a task record."""
        records = self._read()
        records.append(record)
        self._write(records)
