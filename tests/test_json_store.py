"""Tests for the JSON file task store."""

import json
from datetime import date

import pytest

from questboard.adapters.errors import StoreError
from questboard.adapters.json_store import JsonFileTaskStore


@pytest.fixture
def tasks_file(tmp_path):
    path = tmp_path / "tasks.json"
    path.write_text(
        json.dumps(
            [
                {"id": "t1", "description": "Read", "type": "homework", "completed": False},
                {"id": 2, "description": "Dishes", "type": "chore", "completed": False},
            ]
        )
    )
    return path


class TestJsonFileTaskStore:
    def test_missing_file_is_empty(self, tmp_path):
        assert JsonFileTaskStore(tmp_path / "none.json").fetch_records() == []

    def test_fetch_records(self, tasks_file):
        records = JsonFileTaskStore(tasks_file).fetch_records()
        assert [r["id"] for r in records] == ["t1", 2]

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "tasks.json"
        path.write_text("{not json")
        with pytest.raises(StoreError, match="Invalid JSON"):
            JsonFileTaskStore(path).fetch_records()

    def test_not_an_array(self, tmp_path):
        path = tmp_path / "tasks.json"
        path.write_text('{"id": "t1"}')
        with pytest.raises(StoreError, match="JSON array"):
            JsonFileTaskStore(path).fetch_records()

    def test_mark_completed(self, tasks_file):
        store = JsonFileTaskStore(tasks_file)
        store.mark_completed("2", date(2025, 1, 15))

        saved = json.loads(tasks_file.read_text())
        assert saved[1]["completed"] is True
        assert saved[1]["completedDate"] == "2025-01-15"
        assert saved[0]["completed"] is False

    def test_mark_completed_unknown_id(self, tasks_file):
        with pytest.raises(StoreError, match="No task"):
            JsonFileTaskStore(tasks_file).mark_completed("zzz", date(2025, 1, 15))

    def test_mark_incomplete(self, tasks_file):
        store = JsonFileTaskStore(tasks_file)
        store.mark_completed("t1", date(2025, 1, 15))
        store.mark_incomplete("t1")

        saved = json.loads(tasks_file.read_text())
        assert saved[0]["completed"] is False
        assert saved[0]["completedDate"] is None

    def test_mark_incomplete_unknown_id(self, tasks_file):
        with pytest.raises(StoreError, match="No task"):
            JsonFileTaskStore(tasks_file).mark_incomplete("zzz")

    def test_add_record_creates_file(self, tmp_path):
        path = tmp_path / "data" / "tasks.json"
        store = JsonFileTaskStore(path)
        store.add_record({"id": "new", "type": "task"})
        store.add_record({"id": "newer", "type": "task"})
        assert [r["id"] for r in json.loads(path.read_text())] == ["new", "newer"]
