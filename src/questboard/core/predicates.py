"""
Predicate library for bucket rules.

A predicate is a pure function ``(task, context) -> bool``. Primitives never
raise on missing data: a task without a due date or subject simply does not
match, except has_no_due_date which is defined by that absence.
"""

from typing import Callable, Iterable, Literal

from .context import EvaluationContext
from .tasks import Task

Predicate = Callable[[Task, EvaluationContext], bool]


# Due date

def is_due_today(task: Task, ctx: EvaluationContext) -> bool:
    return task.due_date is not None and task.due_date == ctx.today


def is_due_tomorrow(task: Task, ctx: EvaluationContext) -> bool:
    return task.due_date is not None and task.due_date == ctx.tomorrow


def is_due_day_after_tomorrow(task: Task, ctx: EvaluationContext) -> bool:
    return task.due_date is not None and task.due_date == ctx.day_after_tomorrow


def is_overdue(task: Task, ctx: EvaluationContext) -> bool:
    """Due strictly before today."""
    return task.due_date is not None and task.due_date < ctx.today


def is_due_future(task: Task, ctx: EvaluationContext) -> bool:
    """Due on or after the day after tomorrow."""
    return task.due_date is not None and task.due_date >= ctx.day_after_tomorrow


def has_no_due_date(task: Task, ctx: EvaluationContext) -> bool:
    return task.due_date is None


# Status

def is_completed(task: Task, ctx: EvaluationContext) -> bool:
    return bool(task.completed)


def is_not_completed(task: Task, ctx: EvaluationContext) -> bool:
    return not task.completed


def is_stale(threshold_days: int) -> Predicate:
    """Added more than threshold_days ago. Tasks without an added date never are."""

    def predicate(task: Task, ctx: EvaluationContext) -> bool:
        age = task.age_days(ctx.today)
        return age is not None and age > threshold_days

    return predicate


# Type

def is_exam(task: Task, ctx: EvaluationContext) -> bool:
    return task.is_exam


def is_homework(task: Task, ctx: EvaluationContext) -> bool:
    return task.is_homework


# Subject

def has_subject_in(subjects: Iterable[str]) -> Predicate:
    """Task subject is one of the given names (case-insensitive)."""
    names = frozenset(s.strip().lower() for s in subjects if s)

    def predicate(task: Task, ctx: EvaluationContext) -> bool:
        if not task.subject or not names:
            return False
        return task.subject.strip().lower() in names

    return predicate


def for_todays_classes(task: Task, ctx: EvaluationContext) -> bool:
    return bool(task.subject) and task.subject.strip().lower() in ctx.today_subjects


def for_tomorrows_classes(task: Task, ctx: EvaluationContext) -> bool:
    return bool(task.subject) and task.subject.strip().lower() in ctx.tomorrow_subjects


def occurs_today_or_tomorrow(
    branch: Literal["today", "tomorrow"] | None = None,
) -> Predicate:
    """
    Task's subject has a class today or tomorrow.

    ``branch`` narrows the check to a single day; None accepts either.
    """
    if branch not in (None, "today", "tomorrow"):
        raise ValueError(f"Unknown branch: {branch!r}")

    def predicate(task: Task, ctx: EvaluationContext) -> bool:
        if branch == "today":
            return for_todays_classes(task, ctx)
        if branch == "tomorrow":
            return for_tomorrows_classes(task, ctx)
        return for_todays_classes(task, ctx) or for_tomorrows_classes(task, ctx)

    return predicate


# Combinators

def all_of(predicates: Iterable[Predicate]) -> Predicate:
    """Logical AND. True for an empty list."""
    preds = tuple(predicates)

    def predicate(task: Task, ctx: EvaluationContext) -> bool:
        return all(p(task, ctx) for p in preds)

    return predicate


def any_of(predicates: Iterable[Predicate]) -> Predicate:
    """Logical OR. False for an empty list."""
    preds = tuple(predicates)

    def predicate(task: Task, ctx: EvaluationContext) -> bool:
        return any(p(task, ctx) for p in preds)

    return predicate


def negate(pred: Predicate) -> Predicate:
    def predicate(task: Task, ctx: EvaluationContext) -> bool:
        return not pred(task, ctx)

    return predicate