"""Pure subject schedule logic - no I/O dependencies."""

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import IntEnum
from typing import Iterable, Mapping

logger = logging.getLogger(__name__)


class Weekday(IntEnum):
    """Day of the week, Monday=1 through Sunday=7."""

    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6
    SUNDAY = 7

    @property
    def day_name(self) -> str:
        return self.name.capitalize()

    @classmethod
    def from_date(cls, d: date) -> "Weekday":
        """The single conversion point from calendar dates to Weekday."""
        return cls(d.isoweekday())

    @classmethod
    def parse(cls, value: "int | str | Weekday") -> "Weekday":
        """Parse a weekday number (1-7) or an English day name."""
        if isinstance(value, int):
            return cls(value)
        text = str(value).strip()
        if text.isdigit():
            return cls(int(text))
        try:
            return cls[text.upper()]
        except KeyError:
            raise ValueError(f"Unknown weekday: {value!r}") from None


# Built-in weekly timetable, used when no schedule is configured.
DEFAULT_SCHEDULE: dict[str, list[int]] = {
    "Math": [1, 2, 3, 4],
    "Eco": [1, 4],
    "Crafts": [1],
    "PE": [1, 2, 3],
    "Finnish": [2, 3, 4, 5],
    "History": [2],
    "Music": [2],
    "English": [3, 4],
    "Ethics": [3],
    "Art": [5],
    "Civics": [5],
    "Digi": [5],
}


@dataclass(frozen=True)
class SubjectSchedule:
    """Fixed weekly mapping of subject name to the weekdays it meets."""

    days: Mapping[str, frozenset[Weekday]] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Iterable[int | str]]) -> "SubjectSchedule":
        """
        Build a schedule from ``{subject: [weekday, ...]}``.

        Weekdays may be numbers (1=Monday) or day names. Subjects with no
        weekdays are left out, so they count as unscheduled.
        """
        days: dict[str, frozenset[Weekday]] = {}
        for subject, weekdays in data.items():
            parsed = frozenset(Weekday.parse(d) for d in weekdays)
            if not parsed:
                logger.debug(f"Dropping subject {subject!r} with no class days")
                continue
            days[subject] = parsed
        return cls(days=days)

    @classmethod
    def default(cls) -> "SubjectSchedule":
        return cls.from_mapping(DEFAULT_SCHEDULE)

    def weekdays_for(self, subject: str | None) -> frozenset[Weekday]:
        """Weekdays for a subject (case-insensitive), empty if unscheduled."""
        if not subject:
            return frozenset()
        wanted = subject.strip().lower()
        for name, weekdays in self.days.items():
            if name.lower() == wanted:
                return weekdays
        return frozenset()

    def subjects(self) -> list[str]:
        return sorted(self.days, key=str.lower)

    def to_dict(self) -> dict[str, list[int]]:
        return {name: sorted(int(d) for d in weekdays) for name, weekdays in self.days.items()}


@dataclass(frozen=True)
class NextOccurrence:
    """Result of a next-class lookup. All fields are None when not found."""

    found: bool
    days_until: int | None = None
    next_weekday: Weekday | None = None
    day_name: str | None = None

    @classmethod
    def not_found(cls) -> "NextOccurrence":
        return cls(found=False)


class LookupCache:
    """
    Memo for schedule lookups.

    Owned by the caller (or created for a single evaluation pass), never
    shared process-wide. Keys include the schedule identity, so one cache
    can safely serve several schedules.
    """

    def __init__(self) -> None:
        self._entries: dict[tuple, object] = {}
        self.hits = 0
        self.misses = 0

    def get_or_compute(self, key: tuple, compute):
        if key in self._entries:
            self.hits += 1
            return self._entries[key]
        self.misses += 1
        value = compute()
        self._entries[key] = value
        return value

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


def occurs_on(subject: str | None, schedule: SubjectSchedule, weekday: Weekday) -> bool:
    """Does the subject meet on the given weekday?"""
    return Weekday(weekday) in schedule.weekdays_for(subject)


def next_occurrence_after(
    subject: str | None,
    schedule: SubjectSchedule,
    today: Weekday,
) -> NextOccurrence:
    """
    Next distinct class day strictly after today.

    Wraps to the earliest class day of next week when the subject has no
    class later this week. Unscheduled subjects return ``found=False``.
    """
    weekdays = sorted(schedule.weekdays_for(subject))
    if not weekdays:
        return NextOccurrence.not_found()

    today = Weekday(today)
    for day in weekdays:
        if day > today:
            return NextOccurrence(
                found=True,
                days_until=day - today,
                next_weekday=day,
                day_name=day.day_name,
            )

    first = weekdays[0]
    return NextOccurrence(
        found=True,
        days_until=7 - today + first,
        next_weekday=first,
        day_name=first.day_name,
    )


def next_occurrence(
    subject: str | None,
    schedule: SubjectSchedule,
    today: Weekday,
) -> NextOccurrence:
    """Next class day counting today: a subject meeting today gives 0."""
    today = Weekday(today)
    if occurs_on(subject, schedule, today):
        return NextOccurrence(
            found=True,
            days_until=0,
            next_weekday=today,
            day_name=today.day_name,
        )
    return next_occurrence_after(subject, schedule, today)


def cached_next_occurrence(
    subject: str | None,
    schedule: SubjectSchedule,
    today: Weekday,
    cache: LookupCache | None,
) -> NextOccurrence:
    """next_occurrence through an optional caller-owned cache."""
    if cache is None:
        return next_occurrence(subject, schedule, today)
    key = ("next", id(schedule), (subject or "").strip().lower(), int(today))
    return cache.get_or_compute(key, lambda: next_occurrence(subject, schedule, today))


def subjects_on(schedule: SubjectSchedule, weekday: Weekday) -> frozenset[str]:
    """Lowercased names of all subjects meeting on a weekday."""
    weekday = Weekday(weekday)
    return frozenset(name.lower() for name, days in schedule.days.items() if weekday in days)


def schedule_due_date(
    subject: str | None,
    schedule: SubjectSchedule,
    added: date,
) -> date | None:
    """Due date for homework: the first class day after it was assigned."""
    occurrence = next_occurrence_after(subject, schedule, Weekday.from_date(added))
    if not occurrence.found:
        return None
    return added + timedelta(days=occurrence.days_until)


def describe_next_class(occurrence: NextOccurrence) -> str:
    """Human-readable next class, e.g. "Today" or "Friday (in 3 days)"."""
    if not occurrence.found:
        return "Not scheduled"
    if occurrence.days_until == 0:
        return "Today"
    if occurrence.days_until == 1:
        return "Tomorrow"
    return f"{occurrence.day_name} (in {occurrence.days_until} days)"
