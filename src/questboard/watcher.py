"""Keeps a board up to date as data changes and time passes."""

import logging
import threading
from typing import Callable

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .adapters.errors import StoreError
from .core.context import DEFAULT_ARCHIVE_THRESHOLD_DAYS, build_context
from .core.evaluator import Partition, categorize
from .core.rules import RuleSet, compile_rules
from .core.schedule import LookupCache, SubjectSchedule
from .ports.clock import Clock
from .ports.task_repo import TaskRepository

logger = logging.getLogger(__name__)


class BoardWatcher:
    """
    Re-evaluates the board on load, on task changes and on a timer.

    The timer catches noon and midnight transitions that no data change
    would trigger. Evaluations are numbered; a result that finishes after a
    newer one has been published is dropped.
    """

    def __init__(
        self,
        repo: TaskRepository,
        schedule: SubjectSchedule,
        clock: Clock,
        publish: Callable[[Partition], None],
        archive_threshold_days: int = DEFAULT_ARCHIVE_THRESHOLD_DAYS,
        refresh_minutes: int = 10,
        scheduler: BackgroundScheduler | None = None,
    ):
        self.repo = repo
        self.schedule = schedule
        self.clock = clock
        self.publish = publish
        self.archive_threshold_days = archive_threshold_days
        self.refresh_minutes = refresh_minutes
        self._scheduler = scheduler or BackgroundScheduler()
        self._lock = threading.Lock()
        self._generation = 0
        self._published_generation = 0
        self._rules: RuleSet | None = None
        self._cache = LookupCache()
        self._last: Partition | None = None

    @property
    def last_partition(self) -> Partition | None:
        return self._last

    def _rules_for(self, ctx) -> RuleSet:
        if self._rules is None or not self._rules.is_current_for(ctx):
            if self._rules is not None and self._rules.context.time_of_day != ctx.time_of_day:
                logger.info(f"Time transition: switching to {ctx.time_of_day.value} mode")
            self._rules = compile_rules(ctx)
        return self._rules

    def refresh(self, reason: str = "manual") -> Partition | None:
        """
        Evaluate the board now and publish the result.

        Returns the partition, or None when a newer evaluation won the race.
        """
        with self._lock:
            self._generation += 1
            generation = self._generation
            schedule = self.schedule
            ctx = build_context(schedule, self.clock.now(), self.archive_threshold_days)
            rules = self._rules_for(ctx)
            cache = self._cache

        records = self.repo.fetch_records()
        partition = categorize(records, ctx, schedule=schedule, rules=rules, cache=cache)

        with self._lock:
            if generation < self._published_generation:
                logger.debug(f"Dropping stale evaluation #{generation} ({reason})")
                return None
            self._published_generation = generation
            self._last = partition
            logger.debug(f"Publishing evaluation #{generation} ({reason}): {partition.counts()}")
            self.publish(partition)
        return partition

    def notify_changed(self) -> Partition | None:
        """Call after adding, completing or editing a task."""
        return self.refresh("task change")

    def set_schedule(self, schedule: SubjectSchedule) -> Partition | None:
        """Swap in an edited schedule and re-evaluate."""
        with self._lock:
            self.schedule = schedule
            self._rules = None
            self._cache.clear()
        return self.refresh("schedule change")

    def _tick(self) -> None:
        try:
            self.refresh("timer")
        except StoreError as e:
            logger.error(f"Periodic refresh failed: {e}")

    def start(self) -> Partition | None:
        """Run the initial evaluation and start the refresh timer."""
        partition = self.refresh("initial load")
        self._scheduler.add_job(
            self._tick,
            IntervalTrigger(minutes=self.refresh_minutes),
            id="board_refresh",
            replace_existing=True,
        )
        self._scheduler.start()
        logger.info(f"Watcher started, refreshing every {self.refresh_minutes} min")
        return partition

    def stop(self) -> None:
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            logger.info("Watcher stopped")
