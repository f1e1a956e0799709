"""Pure task domain logic - no I/O dependencies."""

import logging
import re
from dataclasses import dataclass, replace
from datetime import date, datetime
from enum import Enum

logger = logging.getLogger(__name__)

_FINNISH_DATE = re.compile(r"^(\d{1,2})\.(\d{1,2})\.(\d{4})$")


class MalformedTaskError(ValueError):
    """Raised when a task record lacks required fields."""

    pass


class TaskType(Enum):
    """Kind of to-do item."""

    HOMEWORK = "homework"
    CHORE = "chore"
    EXAM = "exam"
    TASK = "task"


@dataclass(frozen=True)
class Task:
    """A to-do item as seen by the categorization engine."""

    id: str
    description: str
    type: TaskType
    subject: str | None = None
    date_added: date | None = None
    due_date: date | None = None
    completed: bool = False
    completed_date: date | None = None

    @property
    def is_exam(self) -> bool:
        return self.type is TaskType.EXAM

    @property
    def is_homework(self) -> bool:
        return self.type is TaskType.HOMEWORK

    def days_until_due(self, as_of: date) -> int | None:
        """Days until due date (negative if overdue)."""
        if not self.due_date:
            return None
        return (self.due_date - as_of).days

    def age_days(self, as_of: date) -> int | None:
        """Days since the task was added."""
        if not self.date_added:
            return None
        return (as_of - self.date_added).days

    def complete(self, on: date) -> "Task":
        return replace(self, completed=True, completed_date=on)

    def reopen(self) -> "Task":
        return replace(self, completed=False, completed_date=None)


def parse_date(value) -> date | None:
    """
    Parse a date from a record field.

    Accepts date/datetime objects, ISO dates, ISO datetimes and
    DD.MM.YYYY. Anything else resolves to None.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        logger.debug(f"Ignoring non-string date value: {value!r}")
        return None

    text = value.strip()
    match = _FINNISH_DATE.match(text)
    try:
        if match:
            day, month, year = (int(g) for g in match.groups())
            return date(year, month, day)
        return date.fromisoformat(text.split("T")[0])
    except ValueError:
        logger.debug(f"Unparseable date: {value!r}")
        return None


def _field(data: dict, *keys: str):
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def parse_task(data: dict) -> Task:
    """
    Create a Task from a stored record.

    camelCase keys are preferred, snake_case variants are accepted.
    Raises MalformedTaskError when id or type is missing or invalid.
    """
    if not isinstance(data, dict):
        raise MalformedTaskError(f"record is not a mapping: {type(data).__name__}")

    task_id = data.get("id")
    if task_id is None or str(task_id).strip() == "":
        raise MalformedTaskError("missing id")

    raw_type = data.get("type")
    if not raw_type:
        raise MalformedTaskError("missing type")
    try:
        task_type = TaskType(str(raw_type).strip().lower())
    except ValueError:
        raise MalformedTaskError(f"unknown type {raw_type!r}") from None

    subject = _field(data, "subject", "class")
    if subject is not None:
        subject = str(subject).strip() or None

    completed = bool(data.get("completed", False))
    completed_date = parse_date(_field(data, "completedDate", "completed_date"))
    if not completed:
        completed_date = None

    return Task(
        id=str(task_id),
        description=str(_field(data, "description", "title") or ""),
        type=task_type,
        subject=subject,
        date_added=parse_date(_field(data, "dateAdded", "date_added")),
        due_date=parse_date(_field(data, "dueDate", "due_date")),
        completed=completed,
        completed_date=completed_date,
    )


def validate_task(task: Task) -> Task:
    """Check a Task built in code against the same rules as parse_task."""
    if not task.id or not str(task.id).strip():
        raise MalformedTaskError("missing id")
    if not isinstance(task.type, TaskType):
        raise MalformedTaskError(f"unknown type {task.type!r}")
    return task


def task_to_record(task: Task) -> dict:
    """Serialize a Task back into the camelCase record shape."""
    return {
        "id": task.id,
        "description": task.description,
        "subject": task.subject,
        "type": task.type.value,
        "dateAdded": task.date_added.isoformat() if task.date_added else None,
        "dueDate": task.due_date.isoformat() if task.due_date else None,
        "completed": task.completed,
        "completedDate": task.completed_date.isoformat() if task.completed_date else None,
    }
