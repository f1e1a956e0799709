"""Configuration management for Quest Board."""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from .core.schedule import DEFAULT_SCHEDULE, SubjectSchedule

logger = logging.getLogger(__name__)

QUESTBOARD_HOME = Path(os.environ.get("QUESTBOARD_HOME", Path.home() / "questboard"))
CONFIG_FILE = QUESTBOARD_HOME / "config" / "questboard.conf"
DATA_DIR = QUESTBOARD_HOME / "data"


@dataclass
class Config:
    """Quest Board configuration."""

    timezone: str = "Europe/Helsinki"
    archive_threshold_days: int = 14
    refresh_minutes: int = 10
    # Task store: "file" or "firestore"
    task_store: str = "file"
    tasks_file: str = ""
    firestore_project_id: str = ""
    firestore_api_key: str = ""
    firestore_collection: str = "tasks"
    # {"Math": [1, 2], "English": ["Wednesday"]}
    subject_schedule: dict[str, list] = field(default_factory=dict)
    schedule_file: str = ""

    @property
    def tasks_path(self) -> Path:
        if self.tasks_file:
            return Path(self.tasks_file).expanduser()
        return DATA_DIR / "tasks.json"


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from an unquoted value."""
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def _parse_int(key: str, value: str, default: int) -> int:
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Invalid integer for {key.upper()}: {value!r}, using {default}")
        return default


def _parse_schedule_json(text: str, source: str) -> dict[str, list] | None:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning(f"Failed to parse schedule from {source}: {e}")
        return None
    if not isinstance(data, dict):
        logger.warning(f"Schedule in {source} must be a JSON object")
        return None
    return data


def load_config(config_file: Path | None = None) -> Config:
    """Load configuration from questboard.conf."""
    config = Config()
    config_file = config_file or CONFIG_FILE

    if not config_file.exists():
        return config

    for line in config_file.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = value.strip()

        # JSON values keep their own quotes
        if key != "subject_schedule":
            value = _unquote(value)

        match key:
            case "timezone":
                config.timezone = value
            case "archive_threshold_days":
                config.archive_threshold_days = _parse_int(key, value, config.archive_threshold_days)
            case "refresh_minutes":
                config.refresh_minutes = _parse_int(key, value, config.refresh_minutes)
            case "task_store":
                config.task_store = value.lower()
            case "tasks_file":
                config.tasks_file = value
            case "firestore_project_id":
                config.firestore_project_id = value
            case "firestore_api_key":
                config.firestore_api_key = value
            case "firestore_collection":
                config.firestore_collection = value
            case "subject_schedule":
                data = _parse_schedule_json(value, "SUBJECT_SCHEDULE")
                if data is not None:
                    config.subject_schedule = data
            case "schedule_file":
                config.schedule_file = value
            case _:
                logger.debug(f"Ignoring unknown config key: {key}")

    return config


def load_schedule(config: Config) -> SubjectSchedule:
    """
    Resolve the weekly subject schedule.

    SCHEDULE_FILE wins over an inline SUBJECT_SCHEDULE; the built-in
    timetable is used when neither is usable.
    """
    data = None
    if config.schedule_file:
        path = Path(config.schedule_file).expanduser()
        if path.exists():
            data = _parse_schedule_json(path.read_text(), str(path))
        else:
            logger.warning(f"Schedule file not found: {path}")
    if data is None and config.subject_schedule:
        data = config.subject_schedule
    if data is None:
        data = DEFAULT_SCHEDULE

    try:
        return SubjectSchedule.from_mapping(data)
    except (ValueError, TypeError) as e:
        logger.warning(f"Invalid subject schedule ({e}), using built-in timetable")
        return SubjectSchedule.default()
