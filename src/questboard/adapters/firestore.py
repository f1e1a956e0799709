"""Firestore REST adapter - HTTP client for task records."""

import logging
from datetime import date

import requests

from .errors import StoreError

logger = logging.getLogger(__name__)

API_BASE = "https://firestore.googleapis.com/v1"
PAGE_SIZE = 300


def decode_value(value: dict):
    """Convert a Firestore typed value into a plain Python value."""
    if "nullValue" in value:
        return None
    if "stringValue" in value:
        return value["stringValue"]
    if "booleanValue" in value:
        return value["booleanValue"]
    if "integerValue" in value:
        return int(value["integerValue"])
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "timestampValue" in value:
        return value["timestampValue"]
    if "arrayValue" in value:
        return [decode_value(v) for v in value["arrayValue"].get("values", [])]
    if "mapValue" in value:
        return decode_fields(value["mapValue"].get("fields", {}))
    logger.debug(f"Unsupported Firestore value: {value}")
    return None


def decode_fields(fields: dict) -> dict:
    return {key: decode_value(v) for key, v in fields.items()}


def encode_value(value) -> dict:
    """Convert a plain Python value into a Firestore typed value."""
    if value is None:
        return {"nullValue": None}
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, date):
        return {"stringValue": value.isoformat()}
    if isinstance(value, (list, tuple)):
        return {"arrayValue": {"values": [encode_value(v) for v in value]}}
    if isinstance(value, dict):
        return {"mapValue": {"fields": {k: encode_value(v) for k, v in value.items()}}}
    return {"stringValue": str(value)}


def document_to_record(document: dict) -> dict:
    """Flatten a Firestore document, taking the id from its resource name."""
    record = decode_fields(document.get("fields", {}))
    if record.get("id") in (None, ""):
        record["id"] = document.get("name", "").rsplit("/", 1)[-1] or None
    return record


class FirestoreTaskRepository:
    """
    Firestore REST adapter.

    Implements TaskRepository protocol. Lists a collection page by page and
    patches single documents. No business logic - just I/O.
    """

    def __init__(
        self,
        project_id: str,
        api_key: str = "",
        collection: str = "tasks",
        session: requests.Session | None = None,
        timeout: float = 30,
    ):
        if not project_id:
            raise StoreError("FIRESTORE_PROJECT_ID not configured")
        self.project_id = project_id
        self.api_key = api_key
        self.collection = collection
        self.timeout = timeout
        self._session = session or requests.Session()

    @property
    def _collection_url(self) -> str:
        return f"{API_BASE}/projects/{self.project_id}/databases/(default)/documents/{self.collection}"

    def _params(self, **extra) -> dict:
        params = dict(extra)
        if self.api_key:
            params["key"] = self.api_key
        return params

    def _request(self, method: str, url: str, **kwargs) -> dict:
        try:
            resp = self._session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise StoreError(f"Firestore request failed: {e}") from e

        if resp.status_code != 200:
            raise StoreError(
                f"Firestore {method} failed ({resp.status_code}): {resp.text}",
                resp.status_code,
            )
        return resp.json()

    def fetch_records(self) -> list[dict]:
        """Fetch every document in the collection."""
        records = []
        page_token = None

        while True:
            params = self._params(pageSize=PAGE_SIZE)
            if page_token:
                params["pageToken"] = page_token
            data = self._request("GET", self._collection_url, params=params)

            for document in data.get("documents", []):
                records.append(document_to_record(document))

            page_token = data.get("nextPageToken")
            if not page_token:
                break

        logger.debug(f"Fetched {len(records)} task records from Firestore")
        return records

    def _set_completion(self, task_id: str, completed: bool, on: date | None) -> None:
        # PATCH would create a missing document without the exists precondition
        params = self._params(
            **{
                "updateMask.fieldPaths": ["completed", "completedDate"],
                "currentDocument.exists": "true",
            }
        )
        try:
            self._request(
                "PATCH",
                f"{self._collection_url}/{task_id}",
                params=params,
                json={
                    "fields": {
                        "completed": encode_value(completed),
                        "completedDate": encode_value(on),
                    }
                },
            )
        except StoreError as e:
            if e.status_code == 404:
                raise StoreError(f"No task with id {task_id!r} in {self.collection}", 404) from e
            raise

    def mark_completed(self, task_id: str, on: date) -> None:
        """Set completed and completedDate on one existing document."""
        self._set_completion(task_id, True, on)
        logger.info(f"Marked task {task_id} completed")

    def mark_incomplete(self, task_id: str) -> None:
        """Clear completed and completedDate on one existing document."""
        self._set_completion(task_id, False, None)
        logger.info(f"Reopened task {task_id}")

    def add_record(self, record: dict) -> None:
        """Create a document named after the record id."""
        fields = {k: encode_value(v) for k, v in record.items() if k != "id"}
        self._request(
            "POST",
            self._collection_url,
            params=self._params(documentId=record["id"]),
            json={"fields": fields},
        )
