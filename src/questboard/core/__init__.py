"""Functional core - pure business logic with no I/O."""

from .tasks import Task, TaskType, MalformedTaskError, parse_task, parse_date
from .schedule import (
    Weekday,
    SubjectSchedule,
    NextOccurrence,
    LookupCache,
    next_occurrence,
    next_occurrence_after,
    occurs_on,
    subjects_on,
)
from .context import EvaluationContext, TimeOfDay, build_context
from .rules import ContainerLabel, RuleSet, compile_rules
from .evaluator import Partition, LabeledTask, SkippedRecord, categorize, find_stale
from .sorting import sort_bucket

__all__ = [
    # Tasks
    "Task",
    "TaskType",
    "MalformedTaskError",
    "parse_task",
    "parse_date",
    # Schedule
    "Weekday",
    "SubjectSchedule",
    "NextOccurrence",
    "LookupCache",
    "next_occurrence",
    "next_occurrence_after",
    "occurs_on",
    "subjects_on",
    # Context
    "EvaluationContext",
    "TimeOfDay",
    "build_context",
    # Rules
    "ContainerLabel",
    "RuleSet",
    "compile_rules",
    # Evaluation
    "Partition",
    "LabeledTask",
    "SkippedRecord",
    "categorize",
    "find_stale",
    "sort_bucket",
]
