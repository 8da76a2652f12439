"""Mapping between persisted task records, raw input fields, Jira JSON and models."""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from datetime import date, datetime, time
from typing import Any

import pandas as pd

from .clock import to_local_naive
from .config import DEFAULT_PRIORITY, DEFAULT_STATUS
from .errors import ValidationError
from .models import IssueType, RemoteIssue, Task, TaskPatch, TimeEntry
from .status import coerce_priority, coerce_status, normalize_priority, normalize_status

# Accepted input keys (persisted camelCase and Pythonic snake_case) -> model field
FIELD_ALIASES: dict[str, str] = {
    "title": "title",
    "description": "description",
    "targetDate": "target_date",
    "target_date": "target_date",
    "targetTime": "target_time",
    "target_time": "target_time",
    "status": "status",
    "priority": "priority",
    "jiraIssueKey": "jira_issue_key",
    "jira_issue_key": "jira_issue_key",
}

# Server-owned fields; callers may send them back (e.g. a full task dict) but they are ignored
IGNORED_FIELDS = frozenset(
    {
        "id",
        "createdAt",
        "created_at",
        "updatedAt",
        "updated_at",
        "timeSpent",
        "time_spent",
    }
)

_TIME_FORMATS = ("%H:%M", "%H:%M:%S")


# ------------------ Scalar parsing ------------------
def parse_timestamp(value: Any, *, strict: bool = False) -> datetime | None:
    """Parse a date or date-time into naive local wall-clock time.

    Date-only input yields midnight. Offsets (``Z``/``+02:00``) are converted
    to the local zone. Returns None for empty input; unparsable input returns
    None, or raises ``ValidationError`` when ``strict``.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, datetime):
        return to_local_naive(value)
    if isinstance(value, date):
        return datetime.combine(value, time())
    if not isinstance(value, str):
        if strict:
            raise ValidationError(f"Invalid date: {value!r}")
        return None
    text = value.strip()
    try:
        ts = pd.to_datetime(text, errors="coerce")
    except (ValueError, OverflowError):
        ts = pd.NaT
    if ts is None or pd.isna(ts):
        # pandas cannot represent years past 2262; plain ISO input still parses
        try:
            return to_local_naive(datetime.fromisoformat(text))
        except ValueError:
            if strict:
                raise ValidationError(f"Invalid date: {value!r}") from None
            return None
    return to_local_naive(ts.to_pydatetime())


def parse_time_of_day(value: Any, *, strict: bool = False) -> time | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, time):
        return value.replace(microsecond=0, tzinfo=None)
    text = str(value).strip()
    for fmt in _TIME_FORMATS:
        try:
            return datetime.strptime(text, fmt).time()
        except ValueError:
            continue
    if strict:
        raise ValidationError(f"Invalid time of day: {value!r}")
    return None


def parse_utc(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    ts = pd.to_datetime(value, utc=True, errors="coerce")
    if ts is None or pd.isna(ts):
        return None
    return ts.to_pydatetime()


def format_timestamp(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.isoformat(timespec="seconds")


def format_time_of_day(value: time | None) -> str | None:
    if value is None:
        return None
    if value.second:
        return value.strftime("%H:%M:%S")
    return value.strftime("%H:%M")


def parse_minutes(value: Any) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"Invalid minutes: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid minutes: {value!r}") from exc


# ------------------ Input fields ------------------
def _canonical_items(data: Mapping[str, Any]):
    for raw_key, value in data.items():
        if raw_key in IGNORED_FIELDS:
            continue
        name = FIELD_ALIASES.get(raw_key)
        if name is not None:
            yield name, value


def _clean_value(name: str, value: Any) -> Any:
    if name == "title":
        text = str(value or "").strip()
        if not text:
            raise ValidationError("Title is required")
        return text
    if name == "description":
        return str(value or "")
    if name == "target_date":
        return parse_timestamp(value, strict=True)
    if name == "target_time":
        return parse_time_of_day(value, strict=True)
    if name == "status":
        return normalize_status(value)
    if name == "priority":
        return normalize_priority(value)
    if name == "jira_issue_key":
        text = str(value or "").strip()
        return text or None
    raise ValidationError(f"Unsupported field: {name}")


def clean_fields(data: Mapping[str, Any]) -> dict[str, Any]:
    """Validate raw input fields and return model-ready values keyed by field name."""
    return {name: _clean_value(name, value) for name, value in _canonical_items(data)}


def patch_from_mapping(data: Mapping[str, Any]) -> TaskPatch:
    return TaskPatch(**clean_fields(data))


def build_task(cleaned: Mapping[str, Any], created_at: datetime, task_id: str | None = None) -> Task:
    """New task from already-cleaned fields, applying creation defaults."""
    title = cleaned.get("title")
    if not title:
        raise ValidationError("Title is required")
    return Task(
        id=task_id or uuid.uuid4().hex,
        title=title,
        description=cleaned.get("description") or "",
        target_date=cleaned.get("target_date"),
        target_time=cleaned.get("target_time"),
        status=cleaned.get("status") or DEFAULT_STATUS,
        priority=cleaned.get("priority") or DEFAULT_PRIORITY,
        time_spent=0,
        time_entries=(),
        jira_issue_key=cleaned.get("jira_issue_key"),
        created_at=created_at,
        updated_at=created_at,
    )


# ------------------ Persisted records ------------------
def entry_to_record(entry: TimeEntry) -> dict[str, Any]:
    return {
        "id": entry.id,
        "minutes": entry.minutes,
        "date": format_timestamp(entry.date),
        "notes": entry.notes,
    }


def entry_from_record(raw: Mapping[str, Any], fallback_date: datetime) -> TimeEntry:
    try:
        minutes = int(raw.get("minutes") or 0)
    except (TypeError, ValueError):
        minutes = 0
    return TimeEntry(
        id=str(raw.get("id") or ""),
        minutes=minutes,
        date=parse_timestamp(raw.get("date")) or fallback_date,
        notes=str(raw.get("notes") or ""),
    )


def task_to_record(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "targetDate": format_timestamp(task.target_date),
        "targetTime": format_time_of_day(task.target_time),
        "status": str(task.status),
        "priority": str(task.priority),
        "timeSpent": task.time_spent,
        "timeEntries": [entry_to_record(e) for e in task.time_entries],
        "jiraIssueKey": task.jira_issue_key,
        "createdAt": task.created_at.isoformat() if task.created_at else None,
        "updatedAt": task.updated_at.isoformat() if task.updated_at else None,
    }


def task_from_record(raw: Mapping[str, Any]) -> Task:
    """Load a stored record, tolerating fields written by older versions.

    ``time_spent`` is re-derived from the entries so the ledger invariant holds
    even for hand-edited documents.
    """
    created_at = parse_utc(raw.get("createdAt"))
    fallback_date = to_local_naive(created_at) if created_at else datetime(1970, 1, 1)
    entries = tuple(entry_from_record(e, fallback_date) for e in raw.get("timeEntries") or [] if isinstance(e, Mapping))
    return Task(
        id=str(raw.get("id")),
        title=str(raw.get("title") or ""),
        description=str(raw.get("description") or ""),
        target_date=parse_timestamp(raw.get("targetDate")),
        target_time=parse_time_of_day(raw.get("targetTime")),
        status=coerce_status(raw.get("status")),
        priority=coerce_priority(raw.get("priority")),
        time_spent=sum(e.minutes for e in entries),
        time_entries=entries,
        jira_issue_key=raw.get("jiraIssueKey") or None,
        created_at=created_at,
        updated_at=parse_utc(raw.get("updatedAt")) or created_at,
    )


# ------------------ Jira payloads ------------------
def issue_from_raw(raw: Mapping[str, Any]) -> RemoteIssue:
    fields = raw.get("fields") or {}
    return RemoteIssue(
        key=str(raw.get("key") or ""),
        summary=fields.get("summary"),
        status=(fields.get("status") or {}).get("name") if fields.get("status") else None,
        project_key=(fields.get("project") or {}).get("key") if fields.get("project") else None,
        issue_id=str(raw["id"]) if raw.get("id") is not None else None,
    )


def issue_types_from_raw(raw_project: Mapping[str, Any]) -> list[IssueType]:
    out: list[IssueType] = []
    for item in raw_project.get("issueTypes") or []:
        if not isinstance(item, Mapping) or item.get("id") is None:
            continue
        out.append(
            IssueType(
                id=str(item["id"]),
                name=item.get("name"),
                subtask=item.get("subtask") is True,
            )
        )
    return out


def adf_document(text: str | None) -> dict[str, Any]:
    """Wrap plain text as a single-paragraph Atlassian Document Format body."""
    return {
        "type": "doc",
        "version": 1,
        "content": [
            {
                "type": "paragraph",
                "content": [{"type": "text", "text": text or ""}],
            }
        ],
    }
