"""Domain data models for tasks, time entries, and remote issue references."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from datetime import datetime, time
from enum import StrEnum
from typing import Any

from .errors import TrackerError


class TaskStatus(StrEnum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True, slots=True)
class TimeEntry:
    id: str
    minutes: int
    date: datetime
    notes: str = ""


@dataclass(slots=True)
class Task:
    id: str
    title: str
    description: str = ""
    target_date: datetime | None = None
    target_time: time | None = None
    status: str = TaskStatus.PENDING
    priority: str = TaskPriority.MEDIUM
    time_spent: int = 0
    time_entries: tuple[TimeEntry, ...] = ()
    jira_issue_key: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_linked(self) -> bool:
        return bool(self.jira_issue_key)

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    @property
    def due_moment(self) -> datetime | None:
        """``target_date``'s day combined with ``target_time`` when set.

        Without a time override the target date's own time applies (midnight for
        date-only input). Sub-second precision is dropped.
        """
        if self.target_date is None:
            return None
        if self.target_time is not None:
            moment = datetime.combine(self.target_date.date(), self.target_time)
        else:
            moment = self.target_date
        return moment.replace(microsecond=0, tzinfo=None)


class _Unset:
    _instance: _Unset | None = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


@dataclass(slots=True)
class TaskPatch:
    """Per-field update; ``UNSET`` fields are left untouched.

    ``id``, timestamps and ledger fields are deliberately absent: they can only
    change through the store (identity), the service (timestamps) or the
    time ledger (entries and running total).
    """

    title: Any = UNSET
    description: Any = UNSET
    target_date: Any = UNSET
    target_time: Any = UNSET
    status: Any = UNSET
    priority: Any = UNSET
    jira_issue_key: Any = UNSET

    def changes(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not UNSET}

    def is_empty(self) -> bool:
        return not self.changes()

    def apply(self, task: Task, updated_at: datetime) -> Task:
        return replace(task, **self.changes(), updated_at=updated_at)


@dataclass(slots=True)
class RemoteIssue:
    key: str
    summary: str | None
    status: str | None
    project_key: str | None
    issue_id: str | None = None


@dataclass(slots=True)
class IssueType:
    id: str
    name: str | None
    subtask: bool = False


@dataclass(slots=True)
class SubtaskResult:
    issue_key: str
    issue_id: str | None
    url: str


@dataclass(slots=True)
class Reminders:
    overdue: list[Task] = field(default_factory=list)
    upcoming: list[Task] = field(default_factory=list)


@dataclass(slots=True)
class TrackerConfigStatus:
    configured: bool
    base_url: str
    email: str


@dataclass(slots=True)
class Outcome:
    """Typed result returned by every operation on the service boundary."""

    ok: bool
    value: Any = None
    error: TrackerError | None = None

    @classmethod
    def success(cls, value: Any = None) -> Outcome:
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: TrackerError) -> Outcome:
        return cls(ok=False, error=error)

    @property
    def error_kind(self) -> str | None:
        return type(self.error).__name__ if self.error is not None else None

    @property
    def message(self) -> str:
        return self.error.message if self.error is not None else ""
