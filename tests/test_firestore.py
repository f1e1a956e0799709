"""Tests for the Firestore REST adapter."""

from datetime import date
from unittest.mock import MagicMock

import pytest
import requests

from questboard.adapters.errors import StoreError
from questboard.adapters.firestore import (
    FirestoreTaskRepository,
    decode_value,
    document_to_record,
    encode_value,
)


def make_response(payload=None, status_code=200, text=""):
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text
    resp.json.return_value = payload or {}
    return resp


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def repo(session):
    return FirestoreTaskRepository("kids-board", api_key="k", session=session)


DOCUMENT = {
    "name": "projects/kids-board/databases/(default)/documents/tasks/abc123",
    "fields": {
        "description": {"stringValue": "Read chapter 3"},
        "subject": {"stringValue": "Math"},
        "type": {"stringValue": "homework"},
        "completed": {"booleanValue": False},
        "dueDate": {"timestampValue": "2025-01-16T00:00:00Z"},
        "points": {"integerValue": "3"},
    },
}


class TestValueConversion:
    def test_decode_scalars(self):
        assert decode_value({"nullValue": None}) is None
        assert decode_value({"integerValue": "7"}) == 7
        assert decode_value({"doubleValue": 1.5}) == 1.5

    def test_decode_nested(self):
        value = {"arrayValue": {"values": [{"mapValue": {"fields": {"a": {"booleanValue": True}}}}]}}
        assert decode_value(value) == [{"a": True}]

    def test_encode(self):
        assert encode_value(True) == {"booleanValue": True}
        assert encode_value(3) == {"integerValue": "3"}
        assert encode_value(date(2025, 1, 15)) == {"stringValue": "2025-01-15"}
        assert encode_value(None) == {"nullValue": None}

    def test_document_id_from_name(self):
        record = document_to_record(DOCUMENT)
        assert record["id"] == "abc123"
        assert record["subject"] == "Math"
        assert record["points"] == 3

    def test_id_field_wins_over_name(self):
        doc = {"name": ".../tasks/abc123", "fields": {"id": {"stringValue": "t1"}}}
        assert document_to_record(doc)["id"] == "t1"


class TestFirestoreTaskRepository:
    def test_requires_project_id(self):
        with pytest.raises(StoreError):
            FirestoreTaskRepository("")

    def test_fetch_paginates(self, repo, session):
        session.request.side_effect = [
            make_response({"documents": [DOCUMENT], "nextPageToken": "p2"}),
            make_response({"documents": [{"name": ".../tasks/x2", "fields": {}}]}),
        ]

        records = repo.fetch_records()

        assert [r["id"] for r in records] == ["abc123", "x2"]
        assert session.request.call_count == 2
        first_params = session.request.call_args_list[0].kwargs["params"]
        second_params = session.request.call_args_list[1].kwargs["params"]
        assert first_params == {"pageSize": 300, "key": "k"}
        assert second_params["pageToken"] == "p2"

    def test_empty_collection(self, repo, session):
        session.request.return_value = make_response({})
        assert repo.fetch_records() == []

    def test_http_error(self, repo, session):
        session.request.return_value = make_response(status_code=403, text="denied")
        with pytest.raises(StoreError, match="403"):
            repo.fetch_records()

    def test_network_error(self, repo, session):
        session.request.side_effect = requests.ConnectionError("offline")
        with pytest.raises(StoreError, match="offline"):
            repo.fetch_records()

    def test_mark_completed_patches_two_fields(self, repo, session):
        session.request.return_value = make_response({})

        repo.mark_completed("abc123", date(2025, 1, 15))

        args, kwargs = session.request.call_args
        assert args[0] == "PATCH"
        assert args[1].endswith("/documents/tasks/abc123")
        assert kwargs["params"]["updateMask.fieldPaths"] == ["completed", "completedDate"]
        assert kwargs["params"]["currentDocument.exists"] == "true"
        assert kwargs["json"]["fields"]["completedDate"] == {"stringValue": "2025-01-15"}
        assert kwargs["timeout"] == 30

    def test_mark_completed_missing_document(self, repo, session):
        session.request.return_value = make_response(status_code=404, text="No document to update")

        with pytest.raises(StoreError, match="No task with id 'typo-id'") as exc_info:
            repo.mark_completed("typo-id", date(2025, 1, 15))
        assert exc_info.value.status_code == 404

    def test_mark_completed_other_errors_pass_through(self, repo, session):
        session.request.return_value = make_response(status_code=500, text="backend down")
        with pytest.raises(StoreError, match="500"):
            repo.mark_completed("abc123", date(2025, 1, 15))

    def test_mark_incomplete_clears_date(self, repo, session):
        session.request.return_value = make_response({})

        repo.mark_incomplete("abc123")

        args, kwargs = session.request.call_args
        assert args[0] == "PATCH"
        assert kwargs["params"]["currentDocument.exists"] == "true"
        assert kwargs["json"]["fields"] == {
            "completed": {"booleanValue": False},
            "completedDate": {"nullValue": None},
        }

    def test_add_record(self, repo, session):
        session.request.return_value = make_response({})

        repo.add_record({"id": "n1", "type": "chore", "completed": False})

        args, kwargs = session.request.call_args
        assert args[0] == "POST"
        assert kwargs["params"] == {"documentId": "n1", "key": "k"}
        assert "id" not in kwargs["json"]["fields"]
        assert kwargs["json"]["fields"]["completed"] == {"booleanValue": False}
