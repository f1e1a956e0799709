"""
Categorization evaluator - partitions a task list into display buckets.

Pure function of (records, context). Each valid task lands in exactly one
bucket, chosen by the first matching rule in PRIORITY order; tasks no rule
claims fall through to Future. Bad records are reported, not raised.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from . import predicates as P
from .context import EvaluationContext
from .rules import DEFAULT_LABEL, PRIORITY, ContainerLabel, RuleSet, compile_rules
from .schedule import LookupCache, NextOccurrence, SubjectSchedule, cached_next_occurrence
from .sorting import sort_bucket
from .tasks import MalformedTaskError, Task, parse_task, validate_task

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SkippedRecord:
    """A record left out of the partition, with the reason why."""

    index: int
    record_id: str | None
    reason: str


@dataclass(frozen=True)
class LabeledTask:
    """A task annotated with its bucket and next class, for display."""

    task: Task
    label: ContainerLabel
    next_class: NextOccurrence | None = None


@dataclass
class Partition:
    """Ordered bucket contents for one evaluation pass."""

    today: list[str] = field(default_factory=list)
    tomorrow: list[str] = field(default_factory=list)
    future: list[str] = field(default_factory=list)
    archive: list[str] = field(default_factory=list)
    exam: list[str] = field(default_factory=list)
    entries: list[LabeledTask] = field(default_factory=list)
    skipped: list[SkippedRecord] = field(default_factory=list)

    def ids(self, label: ContainerLabel) -> list[str]:
        return getattr(self, label.value)

    def tasks_in(self, label: ContainerLabel) -> list[LabeledTask]:
        """Labeled tasks of one bucket, in bucket order."""
        by_id = {e.task.id: e for e in self.entries}
        return [by_id[task_id] for task_id in self.ids(label)]

    def label_of(self, task_id: str) -> ContainerLabel | None:
        for entry in self.entries:
            if entry.task.id == task_id:
                return entry.label
        return None

    def counts(self) -> dict[str, int]:
        counts = {label.value: len(self.ids(label)) for label in ContainerLabel}
        counts["total"] = sum(counts.values())
        return counts

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {label.value: list(self.ids(label)) for label in ContainerLabel}
        data["skipped"] = [
            {"index": s.index, "id": s.record_id, "reason": s.reason} for s in self.skipped
        ]
        return data


def _record_id(record: Any) -> str | None:
    if isinstance(record, Task):
        return record.id or None
    if isinstance(record, dict) and record.get("id") is not None:
        return str(record["id"])
    return None


def load_tasks(records: Iterable[Task | dict]) -> tuple[list[Task], list[SkippedRecord]]:
    """
    Parse and validate records, collecting diagnostics for bad ones.

    The first record with a given id wins; later duplicates are skipped.
    """
    tasks: list[Task] = []
    skipped: list[SkippedRecord] = []
    seen: set[str] = set()

    for index, record in enumerate(records):
        try:
            task = validate_task(record) if isinstance(record, Task) else parse_task(record)
        except MalformedTaskError as e:
            skipped.append(SkippedRecord(index, _record_id(record), str(e)))
            logger.warning(f"Skipping task record #{index}: {e}")
            continue

        if task.id in seen:
            skipped.append(SkippedRecord(index, task.id, "duplicate id"))
            logger.warning(f"Skipping task record #{index}: duplicate id {task.id!r}")
            continue

        seen.add(task.id)
        tasks.append(task)

    return tasks, skipped


def classify(task: Task, rules: RuleSet) -> ContainerLabel:
    """Bucket for a single task under the fixed priority order."""
    for label, rule in rules.in_priority_order():
        if rule(task, rules.context):
            return label
    return DEFAULT_LABEL


def categorize(
    records: Iterable[Task | dict],
    context: EvaluationContext,
    schedule: SubjectSchedule | None = None,
    rules: RuleSet | None = None,
    cache: LookupCache | None = None,
) -> Partition:
    """
    Partition records into ordered buckets.

    Args:
        records: Task objects or raw task records
        context: Snapshot of now, today's and tomorrow's subjects
        schedule: When given, entries carry the subject's next class
        rules: Precompiled rules; recompiled if they belong to another context
        cache: Caller-owned lookup cache; a fresh one is used per call otherwise

    Returns:
        Partition with id lists per bucket, labeled entries and skipped records
    """
    if rules is None or not rules.is_current_for(context):
        rules = compile_rules(context)
    if cache is None:
        cache = LookupCache()

    tasks, skipped = load_tasks(records)

    buckets: dict[ContainerLabel, list[Task]] = {label: [] for label in PRIORITY}
    labels: dict[str, ContainerLabel] = {}
    for task in tasks:
        label = classify(task, rules)
        buckets[label].append(task)
        labels[task.id] = label

    partition = Partition(skipped=skipped)
    for label in PRIORITY:
        ordered = sort_bucket(label, buckets[label])
        partition.ids(label).extend(t.id for t in ordered)
        for task in ordered:
            next_class = None
            if schedule is not None and task.subject:
                next_class = cached_next_occurrence(task.subject, schedule, context.weekday, cache)
            partition.entries.append(LabeledTask(task, labels[task.id], next_class))

    logger.debug(f"Categorized {len(tasks)} tasks, skipped {len(skipped)}: {partition.counts()}")
    return partition


def find_stale(records: Iterable[Task | dict], context: EvaluationContext) -> list[str]:
    """Ids of incomplete tasks older than the archive threshold."""
    tasks, _ = load_tasks(records)
    stale = P.all_of([P.is_not_completed, P.is_stale(context.archive_threshold_days)])
    return [t.id for t in tasks if stale(t, context)]
