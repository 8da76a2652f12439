"""Central configuration, constants, and tracker connection settings."""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

# =============================================================================
# Storage Settings
# =============================================================================
DEFAULT_DATA_FILE = Path("data") / "tasks.json"
DATA_FILE_ENV = "TASK_TRACKER_DATA_FILE"

# Optional IANA zone used as the "local" wall clock; None = system zone
TIMEZONE: str | None = os.environ.get("TASK_TRACKER_TIMEZONE") or None

LOG_LEVEL_ENV = "TASK_TRACKER_LOG_LEVEL"

# =============================================================================
# Task Status Configuration
# =============================================================================
STATUS_PENDING = "pending"
STATUS_IN_PROGRESS = "in-progress"
STATUS_COMPLETED = "completed"

STATUS_DISPLAY_ORDER: Sequence[str] = (
    STATUS_PENDING,
    STATUS_IN_PROGRESS,
    STATUS_COMPLETED,
)

# Keys should be lowercase for case-insensitive matching
STATUS_ALIASES: dict[str, str] = {
    "pending": STATUS_PENDING,
    "todo": STATUS_PENDING,
    "to do": STATUS_PENDING,
    "open": STATUS_PENDING,
    "in-progress": STATUS_IN_PROGRESS,
    "in progress": STATUS_IN_PROGRESS,
    "in_progress": STATUS_IN_PROGRESS,
    "inprogress": STATUS_IN_PROGRESS,
    "working": STATUS_IN_PROGRESS,
    "completed": STATUS_COMPLETED,
    "complete": STATUS_COMPLETED,
    "done": STATUS_COMPLETED,
    "closed": STATUS_COMPLETED,
}

# =============================================================================
# Priority Configuration
# =============================================================================
PRIORITY_MAPPING: dict[str, int] = {
    "high": 3,
    "medium": 2,
    "low": 1,
}
UNKNOWN_PRIORITY_RANK = 0

PRIORITY_ALIASES: dict[str, str] = {
    "high": "high",
    "urgent": "high",
    "critical": "high",
    "medium": "medium",
    "normal": "medium",
    "low": "low",
    "3": "high",
    "2": "medium",
    "1": "low",
}

DEFAULT_STATUS = STATUS_PENDING
DEFAULT_PRIORITY = "medium"

# =============================================================================
# Reminder Settings
# =============================================================================
UPCOMING_WINDOW_HOURS = 24

# =============================================================================
# Jira Integration
# =============================================================================
JIRA_REST_PREFIX = "/rest/api/3"
DEFAULT_REMOTE_TIMEOUT = 15.0  # seconds per remote call
DEFAULT_REMOTE_ATTEMPTS = 2  # coordinator attempts for retryable failures
WORKLOG_DEFAULT_COMMENT = "Time logged from Task Tracker"
WORKLOG_UPDATE_DEFAULT_COMMENT = "Time updated from Task Tracker"
ISSUE_FIELDS = ("summary", "status", "project")

# Table columns shown by the Streamlit pages (overridable via columns.yaml)
DISPLAY_ORDER_TASK_LIST: Sequence[str] = (
    "title",
    "status",
    "priority",
    "due",
    "time_spent_display",
    "Jira",
    "description",
)

DISPLAY_ORDER_ENTRIES: Sequence[str] = (
    "date",
    "title",
    "minutes",
    "notes",
)


def _mask_account(value: str) -> str:
    if not value:
        return ""
    return value[:3] + "***"


@dataclass(slots=True)
class TrackerSettings:
    """Connection settings for the external issue tracker."""

    base_url: str = ""
    email: str = ""
    api_token: str = ""
    timeout: float = DEFAULT_REMOTE_TIMEOUT

    def __post_init__(self) -> None:
        self.base_url = (self.base_url or "").strip().rstrip("/")
        self.email = (self.email or "").strip()
        self.api_token = (self.api_token or "").strip()

    @property
    def configured(self) -> bool:
        return bool(self.base_url and self.email and self.api_token)

    @property
    def masked_email(self) -> str:
        return _mask_account(self.email)

    @classmethod
    def from_mapping(cls, source: Mapping[str, object]) -> TrackerSettings:
        """Build settings from an env-style mapping (``os.environ`` or secrets)."""
        timeout_raw = source.get("JIRA_TIMEOUT_SECONDS")
        try:
            timeout = float(timeout_raw) if timeout_raw not in (None, "") else DEFAULT_REMOTE_TIMEOUT
        except (TypeError, ValueError):
            timeout = DEFAULT_REMOTE_TIMEOUT
        return cls(
            base_url=str(source.get("JIRA_BASE_URL") or ""),
            email=str(source.get("JIRA_EMAIL") or ""),
            api_token=str(source.get("JIRA_API_TOKEN") or ""),
            timeout=timeout,
        )

    @classmethod
    def from_env(cls) -> TrackerSettings:
        return cls.from_mapping(os.environ)


def data_file_from_env() -> Path:
    raw = os.environ.get(DATA_FILE_ENV)
    return Path(raw) if raw else DEFAULT_DATA_FILE
