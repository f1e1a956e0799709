"""Evaluation context - the immutable snapshot one categorization pass runs against."""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable

from .schedule import SubjectSchedule, Weekday, subjects_on

NOON_HOUR = 12
DEFAULT_ARCHIVE_THRESHOLD_DAYS = 14


class TimeOfDay(Enum):
    """Morning until noon, afternoon after."""

    MORNING = "morning"
    AFTERNOON = "afternoon"

    @classmethod
    def at(cls, moment: datetime) -> "TimeOfDay":
        return cls.MORNING if moment.hour < NOON_HOUR else cls.AFTERNOON


def _normalize(subjects: Iterable[str]) -> frozenset[str]:
    return frozenset(s.strip().lower() for s in subjects if s and s.strip())


@dataclass(frozen=True)
class EvaluationContext:
    """
    Snapshot of "now" for one evaluation pass.

    Subject sets hold lowercased names. Build one with build_context() or
    directly in tests.
    """

    now: datetime
    today_subjects: frozenset[str] = frozenset()
    tomorrow_subjects: frozenset[str] = frozenset()
    archive_threshold_days: int = DEFAULT_ARCHIVE_THRESHOLD_DAYS
    day_after_subjects: frozenset[str] = field(default=frozenset())

    def __post_init__(self) -> None:
        # Accept any iterable of names and store them normalized
        object.__setattr__(self, "today_subjects", _normalize(self.today_subjects))
        object.__setattr__(self, "tomorrow_subjects", _normalize(self.tomorrow_subjects))
        object.__setattr__(self, "day_after_subjects", _normalize(self.day_after_subjects))

    @property
    def time_of_day(self) -> TimeOfDay:
        return TimeOfDay.at(self.now)

    @property
    def is_morning(self) -> bool:
        return self.time_of_day is TimeOfDay.MORNING

    @property
    def today(self) -> date:
        return self.now.date()

    @property
    def tomorrow(self) -> date:
        return self.today + timedelta(days=1)

    @property
    def day_after_tomorrow(self) -> date:
        return self.today + timedelta(days=2)

    @property
    def weekday(self) -> Weekday:
        return Weekday.from_date(self.today)

    @property
    def rule_key(self) -> tuple[date, TimeOfDay, frozenset, frozenset, frozenset, int]:
        """Everything compiled rules depend on; equal keys share rules."""
        return (
            self.today,
            self.time_of_day,
            self.today_subjects,
            self.tomorrow_subjects,
            self.day_after_subjects,
            self.archive_threshold_days,
        )


def build_context(
    schedule: SubjectSchedule,
    now: datetime,
    archive_threshold_days: int = DEFAULT_ARCHIVE_THRESHOLD_DAYS,
) -> EvaluationContext:
    """Derive the context for a moment in time from the weekly schedule."""
    today = now.date()
    return EvaluationContext(
        now=now,
        today_subjects=subjects_on(schedule, Weekday.from_date(today)),
        tomorrow_subjects=subjects_on(schedule, Weekday.from_date(today + timedelta(days=1))),
        day_after_subjects=subjects_on(schedule, Weekday.from_date(today + timedelta(days=2))),
        archive_threshold_days=archive_threshold_days,
    )
