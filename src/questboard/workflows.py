"""Shared workflow layer between the CLI and the watcher.

Wires configuration, adapters and the functional core together. Each
function loads what it needs, runs the pure logic and returns plain results.
"""

import logging
from datetime import date, datetime

from .adapters.clock import SystemClock
from .adapters.errors import StoreError
from .adapters.firestore import FirestoreTaskRepository
from .adapters.json_store import JsonFileTaskStore
from .config import Config
from .core.context import EvaluationContext, build_context
from .core.evaluator import Partition, categorize, find_stale
from .core.schedule import LookupCache, SubjectSchedule, schedule_due_date
from .core.tasks import Task, TaskType, parse_task, task_to_record
from .ports.clock import Clock
from .ports.task_repo import TaskRepository

logger = logging.getLogger(__name__)


def get_repository(config: Config) -> TaskRepository:
    """Pick the task store configured by TASK_STORE."""
    if config.task_store == "firestore":
        return FirestoreTaskRepository(
            project_id=config.firestore_project_id,
            api_key=config.firestore_api_key,
            collection=config.firestore_collection,
        )
    if config.task_store != "file":
        logger.warning(f"Unknown TASK_STORE {config.task_store!r}, using file store")
    return JsonFileTaskStore(config.tasks_path)


def get_clock(config: Config) -> Clock:
    return SystemClock(config.timezone)


def context_for(
    config: Config,
    schedule: SubjectSchedule,
    now: datetime,
) -> EvaluationContext:
    return build_context(schedule, now, archive_threshold_days=config.archive_threshold_days)


def evaluate_board(
    repo: TaskRepository,
    schedule: SubjectSchedule,
    context: EvaluationContext,
    cache: LookupCache | None = None,
) -> Partition:
    """Load task records and categorize them."""
    records = repo.fetch_records()
    partition = categorize(records, context, schedule=schedule, cache=cache)
    for skipped in partition.skipped:
        logger.info(f"Skipped record #{skipped.index} ({skipped.record_id}): {skipped.reason}")
    return partition


def archive_stale(
    repo: TaskRepository,
    context: EvaluationContext,
    dry_run: bool = False,
) -> list[str]:
    """Mark incomplete tasks past the archive threshold as completed."""
    stale_ids = find_stale(repo.fetch_records(), context)
    if dry_run:
        return stale_ids
    for task_id in stale_ids:
        repo.mark_completed(task_id, context.today)
    logger.info(f"Archived {len(stale_ids)} stale tasks")
    return stale_ids


def _find_task(repo: TaskRepository, task_id: str) -> Task:
    for record in repo.fetch_records():
        if isinstance(record, dict) and str(record.get("id")) == task_id:
            return parse_task(record)
    raise StoreError(f"No task with id {task_id!r}")


def complete_task(repo: TaskRepository, task_id: str, on: date) -> Task:
    """Mark an existing task completed on the given date."""
    task = _find_task(repo, task_id).complete(on)
    repo.mark_completed(task.id, task.completed_date)
    return task


def reopen_task(repo: TaskRepository, task_id: str) -> Task:
    """Move a completed task back onto the board."""
    task = _find_task(repo, task_id).reopen()
    repo.mark_incomplete(task.id)
    return task


def add_task(
    repo: TaskRepository,
    schedule: SubjectSchedule,
    task_id: str,
    description: str,
    task_type: TaskType,
    subject: str | None = None,
    due_date: date | None = None,
    added: date | None = None,
) -> dict:
    """
    Create a task record.

    Homework without an explicit due date is due at the subject's next
    class after today.
    """
    added = added or date.today()
    if due_date is None and task_type is TaskType.HOMEWORK:
        due_date = schedule_due_date(subject, schedule, added)

    record = {
        "id": task_id,
        "description": description,
        "subject": subject,
        "type": task_type.value,
        "dateAdded": added.isoformat(),
        "dueDate": due_date.isoformat() if due_date else None,
        "completed": False,
        "completedDate": None,
    }
    # Round-trip through the parser so bad input fails before it is stored
    record = task_to_record(parse_task(record))
    repo.add_record(record)
    return record
