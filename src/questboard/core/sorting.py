"""Per-bucket ordering applied after partitioning."""

from datetime import date

from .rules import ContainerLabel
from .tasks import Task

EPOCH = date(1970, 1, 1)
FAR_FUTURE = date(3000, 1, 1)


def archive_key(task: Task) -> date:
    return task.completed_date or task.due_date or EPOCH


def due_key(task: Task) -> date:
    return task.due_date or FAR_FUTURE


def added_key(task: Task) -> date:
    return task.date_added or task.due_date or EPOCH


# (key, newest first)
SORT_POLICY: dict[ContainerLabel, tuple] = {
    ContainerLabel.ARCHIVE: (archive_key, True),
    ContainerLabel.FUTURE: (due_key, False),
    ContainerLabel.TODAY: (added_key, False),
    ContainerLabel.TOMORROW: (added_key, False),
    ContainerLabel.EXAM: (due_key, False),
}


def sort_bucket(label: ContainerLabel, tasks: list[Task]) -> list[Task]:
    """
    Order one bucket. Stable: tasks with equal keys keep their input order.

    Returns a new list; the input is not modified.
    """
    key, newest_first = SORT_POLICY[label]
    return sorted(tasks, key=key, reverse=newest_first)
