"""Tests for per-bucket ordering."""

from datetime import date

from questboard.core.rules import ContainerLabel
from questboard.core.sorting import sort_bucket
from questboard.core.tasks import Task, TaskType


def make_task(task_id, **fields):
    return Task(id=task_id, description=task_id, type=TaskType.HOMEWORK, **fields)


class TestSortBucket:
    def test_archive_prefers_completed_date(self):
        tasks = [
            make_task("a", completed=True, completed_date=date(2025, 1, 2), due_date=date(2025, 1, 20)),
            make_task("b", completed=True, completed_date=date(2025, 1, 10)),
            make_task("c", due_date=date(2025, 1, 5)),
        ]
        result = sort_bucket(ContainerLabel.ARCHIVE, tasks)
        assert [t.id for t in result] == ["b", "c", "a"]

    def test_today_by_added_then_due(self):
        tasks = [
            make_task("late", date_added=date(2025, 1, 14)),
            make_task("undated"),
            make_task("early", date_added=date(2025, 1, 10)),
            make_task("due-only", due_date=date(2025, 1, 12)),
        ]
        result = sort_bucket(ContainerLabel.TODAY, tasks)
        assert [t.id for t in result] == ["undated", "early", "due-only", "late"]

    def test_exam_by_due_date(self):
        tasks = [
            make_task("second", due_date=date(2025, 2, 1)),
            make_task("first", due_date=date(2025, 1, 20)),
        ]
        assert [t.id for t in sort_bucket(ContainerLabel.EXAM, tasks)] == ["first", "second"]

    def test_stable_for_equal_keys(self):
        tasks = [make_task(str(i), due_date=date(2025, 1, 20)) for i in range(5)]
        for label in ContainerLabel:
            assert [t.id for t in sort_bucket(label, tasks)] == ["0", "1", "2", "3", "4"]

    def test_input_not_modified(self):
        tasks = [make_task("b", due_date=date(2025, 1, 21)), make_task("a", due_date=date(2025, 1, 20))]
        sort_bucket(ContainerLabel.FUTURE, tasks)
        assert [t.id for t in tasks] == ["b", "a"]
