"""Tests for the task model and record parsing."""

from datetime import date, datetime

import pytest

from questboard.core.tasks import (
    MalformedTaskError,
    Task,
    TaskType,
    parse_date,
    parse_task,
    task_to_record,
    validate_task,
)


class TestParseDate:
    def test_iso_date(self):
        assert parse_date("2025-01-20") == date(2025, 1, 20)

    def test_iso_datetime(self):
        assert parse_date("2025-01-20T10:00:00.000+0000") == date(2025, 1, 20)

    def test_finnish_format(self):
        assert parse_date("5.2.2025") == date(2025, 2, 5)
        assert parse_date("05.02.2025") == date(2025, 2, 5)

    def test_date_and_datetime_objects(self):
        assert parse_date(date(2025, 1, 1)) == date(2025, 1, 1)
        assert parse_date(datetime(2025, 1, 1, 8, 30)) == date(2025, 1, 1)

    @pytest.mark.parametrize("value", [None, "", "next friday", "2025-13-01", "31.02.2025", 12345])
    def test_unparseable_is_none(self, value):
        assert parse_date(value) is None


class TestParseTask:
    def test_camel_case_record(self):
        task = parse_task(
            {
                "id": "t1",
                "description": "Read chapter 3",
                "subject": "Math",
                "type": "homework",
                "dateAdded": "2025-01-10",
                "dueDate": "2025-01-16",
                "completed": False,
            }
        )
        assert task == Task(
            id="t1",
            description="Read chapter 3",
            type=TaskType.HOMEWORK,
            subject="Math",
            date_added=date(2025, 1, 10),
            due_date=date(2025, 1, 16),
        )

    def test_snake_case_fallbacks(self):
        task = parse_task(
            {
                "id": 42,
                "title": "Vocabulary quiz",
                "class": "English",
                "type": "EXAM",
                "date_added": "2025-01-10",
                "due_date": "16.01.2025",
            }
        )
        assert task.id == "42"
        assert task.description == "Vocabulary quiz"
        assert task.subject == "English"
        assert task.type is TaskType.EXAM
        assert task.due_date == date(2025, 1, 16)

    def test_missing_optional_fields(self):
        task = parse_task({"id": "c1", "type": "chore"})
        assert task.subject is None
        assert task.due_date is None
        assert task.date_added is None
        assert task.completed is False

    def test_blank_subject_is_none(self):
        assert parse_task({"id": "c1", "type": "chore", "subject": "  "}).subject is None

    def test_bad_dates_become_none(self):
        task = parse_task({"id": "t1", "type": "task", "dueDate": "someday"})
        assert task.due_date is None

    def test_completed_date_dropped_when_not_completed(self):
        task = parse_task(
            {"id": "t1", "type": "task", "completed": False, "completedDate": "2025-01-10"}
        )
        assert task.completed_date is None

    def test_completed_with_date(self):
        task = parse_task(
            {"id": "t1", "type": "task", "completed": True, "completedDate": "2025-01-10"}
        )
        assert task.completed is True
        assert task.completed_date == date(2025, 1, 10)

    @pytest.mark.parametrize(
        "record, reason",
        [
            ({"type": "homework"}, "missing id"),
            ({"id": "  ", "type": "homework"}, "missing id"),
            ({"id": "t1"}, "missing type"),
            ({"id": "t1", "type": "quest"}, "unknown type"),
        ],
    )
    def test_malformed_records(self, record, reason):
        with pytest.raises(MalformedTaskError, match=reason):
            parse_task(record)

    def test_non_mapping_record(self):
        with pytest.raises(MalformedTaskError):
            parse_task(["id", "t1"])


class TestTask:
    def test_complete_and_reopen_keep_invariant(self):
        task = Task(id="t1", description="x", type=TaskType.TASK)
        done = task.complete(date(2025, 1, 15))
        assert done.completed is True
        assert done.completed_date == date(2025, 1, 15)
        assert task.completed is False

        reopened = done.reopen()
        assert reopened.completed is False
        assert reopened.completed_date is None

    def test_days_until_due_and_age(self):
        task = Task(
            id="t1",
            description="x",
            type=TaskType.TASK,
            date_added=date(2025, 1, 1),
            due_date=date(2025, 1, 20),
        )
        assert task.days_until_due(date(2025, 1, 15)) == 5
        assert task.age_days(date(2025, 1, 15)) == 14

    def test_validate_task_rejects_empty_id(self):
        with pytest.raises(MalformedTaskError):
            validate_task(Task(id="", description="x", type=TaskType.TASK))

    def test_task_to_record(self):
        task = Task(id="t1", description="x", type=TaskType.EXAM, due_date=date(2025, 1, 20))
        record = task_to_record(task)
        assert record["type"] == "exam"
        assert record["dueDate"] == "2025-01-20"
        assert parse_task(record) == task
