"""
Container rules - which tasks belong in which bucket.

Each bucket gets one predicate composed from the predicate library and
closed over an EvaluationContext. compile_rules() is the single source of
truth for bucket membership; the evaluator only decides precedence.
"""

from dataclasses import dataclass
from enum import Enum

from . import predicates as P
from .context import EvaluationContext, TimeOfDay
from .predicates import Predicate


class ContainerLabel(Enum):
    """Display bucket a task lands in for one evaluation pass."""

    TODAY = "today"
    TOMORROW = "tomorrow"
    FUTURE = "future"
    ARCHIVE = "archive"
    EXAM = "exam"


# Evaluation order: the first rule that matches claims the task.
PRIORITY: tuple[ContainerLabel, ...] = (
    ContainerLabel.ARCHIVE,
    ContainerLabel.EXAM,
    ContainerLabel.TODAY,
    ContainerLabel.TOMORROW,
    ContainerLabel.FUTURE,
)

DEFAULT_LABEL = ContainerLabel.FUTURE

_TITLES = {
    TimeOfDay.MORNING: ("Today's Tasks", "No tasks due today. Well done!"),
    TimeOfDay.AFTERNOON: (
        "Tasks for Tomorrow's Classes",
        "No tasks due for tomorrow's classes",
    ),
}


def _focus_rule(due: Predicate, classes: Predicate) -> Predicate:
    """Due on the focus day, or homework for a class meeting that day."""
    return P.any_of([
        P.all_of([due, P.is_not_completed]),
        P.all_of([
            classes,
            P.is_not_completed,
            P.negate(P.is_overdue),
            P.negate(P.is_exam),
        ]),
    ])


def current_rule(ctx: EvaluationContext) -> Predicate:
    """
    Today bucket.

    Mornings focus on today's due dates and classes; afternoons switch to
    preparing for tomorrow.
    """
    if ctx.is_morning:
        return _focus_rule(P.is_due_today, P.occurs_today_or_tomorrow("today"))
    return _focus_rule(P.is_due_tomorrow, P.occurs_today_or_tomorrow("tomorrow"))


def tomorrow_rule(ctx: EvaluationContext) -> Predicate:
    """
    Tomorrow bucket: one day past whatever the Today bucket focuses on.

    In the afternoon the class branch only picks up homework; chores and
    tasks for classes two days out stay in Future.
    """
    if ctx.is_morning:
        return _focus_rule(P.is_due_tomorrow, P.occurs_today_or_tomorrow("tomorrow"))
    return _focus_rule(
        P.is_due_day_after_tomorrow,
        P.all_of([P.is_homework, P.has_subject_in(ctx.day_after_subjects)]),
    )


def future_rule(ctx: EvaluationContext, current: Predicate | None = None) -> Predicate:
    current = current or current_rule(ctx)
    return P.all_of([
        P.is_not_completed,
        P.negate(current),
        P.any_of([
            P.is_due_future,
            P.all_of([P.has_no_due_date, P.negate(P.is_exam)]),
        ]),
    ])


def archive_rule(ctx: EvaluationContext) -> Predicate:
    """Completed, overdue, or older than the archive threshold."""
    return P.any_of([
        P.is_completed,
        P.all_of([P.is_overdue, P.is_not_completed]),
        P.is_stale(ctx.archive_threshold_days),
    ])


def exam_rule(ctx: EvaluationContext) -> Predicate:
    return P.all_of([P.is_exam, P.is_not_completed, P.negate(P.is_overdue)])


@dataclass(frozen=True)
class RuleSet:
    """Compiled bucket predicates for one context."""

    context: EvaluationContext
    today: Predicate
    tomorrow: Predicate
    future: Predicate
    archive: Predicate
    exam: Predicate

    def for_label(self, label: ContainerLabel) -> Predicate:
        return getattr(self, label.value)

    def in_priority_order(self) -> list[tuple[ContainerLabel, Predicate]]:
        return [(label, self.for_label(label)) for label in PRIORITY]

    def is_current_for(self, ctx: EvaluationContext) -> bool:
        """Can these rules be reused for ctx without recompiling?"""
        return self.context.rule_key == ctx.rule_key

    def matches(self, label: ContainerLabel, task) -> bool:
        return self.for_label(label)(task, self.context)

    @property
    def title(self) -> str:
        return _TITLES[self.context.time_of_day][0]

    @property
    def empty_message(self) -> str:
        return _TITLES[self.context.time_of_day][1]


def compile_rules(ctx: EvaluationContext) -> RuleSet:
    current = current_rule(ctx)
    return RuleSet(
        context=ctx,
        today=current,
        tomorrow=tomorrow_rule(ctx),
        future=future_rule(ctx, current),
        archive=archive_rule(ctx),
        exam=exam_rule(ctx),
    )


def apply_rule(tasks, rule: Predicate, ctx: EvaluationContext) -> list:
    """Filter tasks with a single bucket rule, ignoring precedence."""
    return [t for t in tasks if rule(t, ctx)]
