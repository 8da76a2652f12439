"""Sync workflows between the local task store and Jira.

Local state is the source of truth. Creating a task from a new Jira subtask is
all-or-nothing (a remote failure leaves no local task behind); logging time is
local-first and mirrors to Jira best-effort, reporting a degraded success when
only the local half worked. Store calls and remote calls are strictly
sequential, so the store lock is never held across a network round trip.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from datetime import datetime
from enum import StrEnum
from typing import Any

from .clock import utc_now
from .config import DEFAULT_REMOTE_ATTEMPTS
from .errors import ConfigurationError, RemoteError, TrackerError, ValidationError
from .jira_client import JiraGateway
from .ledger import TimeLedger
from .mappers import build_task, clean_fields
from .models import RemoteIssue, SubtaskResult, Task
from .store import TaskStore

logger = logging.getLogger(__name__)


class SyncStatus(StrEnum):
    SYNCED = "synced"
    NOT_LINKED = "not-linked"
    SKIPPED = "skipped"
    FAILED = "failed"


class LinkStage(StrEnum):
    VALIDATE = "validate"
    PARENT = "parent"
    SUBTASK = "subtask"
    LOCAL = "local"


@dataclass(slots=True)
class TimeLogOutcome:
    ok: bool
    task: Task | None = None
    sync_status: SyncStatus | None = None
    worklog_id: str | None = None
    error: TrackerError | None = None
    remote_error: TrackerError | None = None

    @property
    def degraded(self) -> bool:
        return self.ok and self.sync_status is SyncStatus.FAILED

    @property
    def message(self) -> str:
        if not self.ok:
            return self.error.message if self.error else "Failed to log time"
        if self.degraded:
            detail = self.remote_error.message if self.remote_error else "unknown error"
            return f"Time logged locally, but Jira sync failed: {detail}"
        if self.sync_status is SyncStatus.SYNCED:
            return f"Time logged and synced to {self.task.jira_issue_key}"
        return "Time logged"


@dataclass(slots=True)
class LinkOutcome:
    ok: bool
    task: Task | None = None
    subtask: SubtaskResult | None = None
    issue: RemoteIssue | None = None
    error: TrackerError | None = None
    stage: LinkStage | None = None

    @property
    def message(self) -> str:
        if self.ok:
            key = self.task.jira_issue_key if self.task else None
            return f"Task linked to Jira: {key}" if key else "Task created"
        return self.error.message if self.error else "Jira link failed"


class SyncCoordinator:
    def __init__(
        self,
        store: TaskStore,
        ledger: TimeLedger,
        gateway: JiraGateway | None = None,
        *,
        clock: Callable[[], datetime] = utc_now,
        remote_attempts: int = DEFAULT_REMOTE_ATTEMPTS,
    ):
        self.store = store
        self.ledger = ledger
        self.gateway = gateway
        self._clock = clock
        self.remote_attempts = max(1, int(remote_attempts))

    # ------------------ Remote helpers ------------------
    @property
    def tracker_available(self) -> bool:
        return self.gateway is not None and self.gateway.configured

    def require_gateway(self) -> JiraGateway:
        if self.gateway is None:
            raise ConfigurationError("Jira integration is not available")
        return self.gateway

    def read_remote(self, func: Callable[..., Any], *args, **kwargs) -> Any:
        """Run an idempotent remote read, retrying retryable failures (timeouts)."""
        attempt = 1
        while True:
            try:
                return func(*args, **kwargs)
            except RemoteError as exc:
                if not exc.retryable or attempt >= self.remote_attempts:
                    raise
                logger.info("Retrying %s after %s (attempt %s)", getattr(func, "__name__", func), exc.message, attempt + 1)
                attempt += 1

    # ------------------ Link-and-create ------------------
    def create_linked_task(
        self,
        fields: Mapping[str, Any],
        parent_key: str | None = None,
        create_remote: bool = True,
    ) -> LinkOutcome:
        """Create a local task, optionally backed by a new Jira subtask.

        Steps: validate local fields, validate the parent issue (when a key is
        given), create the subtask (when opted in), create the local task.
        Any failure before the last step returns without touching the store.
        """
        try:
            cleaned = clean_fields(fields)
            if not cleaned.get("title"):
                raise ValidationError("Title is required")
        except TrackerError as exc:
            return LinkOutcome(ok=False, error=exc, stage=LinkStage.VALIDATE)

        parent_key = (parent_key or "").strip()
        if create_remote and not parent_key:
            return LinkOutcome(
                ok=False,
                error=ValidationError("Parent issue key is required to create a Jira subtask"),
                stage=LinkStage.VALIDATE,
            )

        parent: RemoteIssue | None = None
        # local-only tasks skip parent validation when no tracker is configured
        if parent_key and (create_remote or self.tracker_available):
            try:
                parent = self.read_remote(self.require_gateway().fetch_issue, parent_key)
            except TrackerError as exc:
                logger.warning("Parent issue %s rejected: %s", parent_key, exc.message)
                return LinkOutcome(ok=False, error=exc, stage=LinkStage.PARENT)

        subtask: SubtaskResult | None = None
        if create_remote:
            try:
                subtask = self.require_gateway().create_subtask(
                    parent_key, cleaned["title"], cleaned.get("description", "")
                )
            except TrackerError as exc:
                logger.warning("Subtask creation under %s failed: %s", parent_key, exc.message)
                return LinkOutcome(ok=False, issue=parent, error=exc, stage=LinkStage.SUBTASK)
            cleaned["jira_issue_key"] = subtask.issue_key
        else:
            cleaned["jira_issue_key"] = None

        try:
            task = self.store.add(build_task(cleaned, self._clock()))
        except TrackerError as exc:
            if subtask is not None:
                logger.error("Jira subtask %s created but local task was not saved: %s", subtask.issue_key, exc.message)
            return LinkOutcome(ok=False, subtask=subtask, issue=parent, error=exc, stage=LinkStage.LOCAL)
        return LinkOutcome(ok=True, task=task, subtask=subtask, issue=parent)

    def link_existing_task(self, task_id: str, parent_key: str) -> LinkOutcome:
        """Create a Jira subtask from an existing local task and store its key."""
        try:
            task = self.store.get(task_id)
        except TrackerError as exc:
            return LinkOutcome(ok=False, error=exc, stage=LinkStage.LOCAL)
        if not (parent_key or "").strip():
            return LinkOutcome(
                ok=False, error=ValidationError("Parent issue key is required"), stage=LinkStage.VALIDATE
            )
        try:
            subtask = self.require_gateway().create_subtask(parent_key.strip(), task.title, task.description)
        except TrackerError as exc:
            logger.warning("Subtask creation for task %s failed: %s", task_id, exc.message)
            return LinkOutcome(ok=False, task=task, error=exc, stage=LinkStage.SUBTASK)
        return self._store_key(task_id, subtask.issue_key, subtask=subtask)

    def link_task_to_issue(self, task_id: str, issue_key: str) -> LinkOutcome:
        """Point an existing local task at an existing Jira issue."""
        try:
            self.store.get(task_id)
        except TrackerError as exc:
            return LinkOutcome(ok=False, error=exc, stage=LinkStage.LOCAL)
        try:
            issue = self.read_remote(self.require_gateway().fetch_issue, issue_key)
        except TrackerError as exc:
            return LinkOutcome(ok=False, error=exc, stage=LinkStage.PARENT)
        return self._store_key(task_id, issue.key, issue=issue)

    def unlink_task(self, task_id: str) -> LinkOutcome:
        return self._store_key(task_id, None)

    def _store_key(
        self,
        task_id: str,
        issue_key: str | None,
        *,
        subtask: SubtaskResult | None = None,
        issue: RemoteIssue | None = None,
    ) -> LinkOutcome:
        try:
            task = self.store.replace(
                task_id, lambda t: replace(t, jira_issue_key=issue_key, updated_at=self._clock())
            )
        except TrackerError as exc:
            if subtask is not None:
                logger.error("Jira subtask %s created but task %s was not updated: %s", subtask.issue_key, task_id, exc.message)
            return LinkOutcome(ok=False, subtask=subtask, issue=issue, error=exc, stage=LinkStage.LOCAL)
        return LinkOutcome(ok=True, task=task, subtask=subtask, issue=issue)

    # ------------------ Time-log-and-sync ------------------
    def log_time(
        self,
        task_id: str,
        minutes: Any,
        notes: str | None = "",
        date: Any = None,
    ) -> TimeLogOutcome:
        """Append a local entry, then mirror it to the linked Jira issue.

        The local append is authoritative and is never rolled back; a remote
        failure yields ``ok=True`` with ``sync_status=FAILED``. Non-positive
        entries are recorded locally but not sent to Jira.
        """
        try:
            task = self.ledger.append_entry(task_id, minutes, notes, date)
        except TrackerError as exc:
            return TimeLogOutcome(ok=False, error=exc)

        if not task.is_linked:
            return TimeLogOutcome(ok=True, task=task, sync_status=SyncStatus.NOT_LINKED)
        entry = task.time_entries[-1]
        if entry.minutes <= 0:
            return TimeLogOutcome(ok=True, task=task, sync_status=SyncStatus.SKIPPED)

        try:
            # worklog POSTs are not idempotent: no retry
            worklog_id = self.require_gateway().log_work(
                task.jira_issue_key,
                entry.minutes * 60,
                comment=entry.notes or None,
                started=entry.date,
            )
        except TrackerError as exc:
            logger.warning(
                "Logged %s min on task %s locally; Jira sync to %s failed: %s",
                entry.minutes,
                task.id,
                task.jira_issue_key,
                exc.message,
            )
            return TimeLogOutcome(ok=True, task=task, sync_status=SyncStatus.FAILED, remote_error=exc)
        return TimeLogOutcome(ok=True, task=task, sync_status=SyncStatus.SYNCED, worklog_id=worklog_id)
