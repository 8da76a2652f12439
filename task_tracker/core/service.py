"""TaskService: the operation surface over the store, ledger, views and Jira.

Every method returns a typed outcome; ``TrackerError`` never escapes. Task
CRUD, reminders and views come back as ``Outcome``; the sync workflows return
their richer ``TimeLogOutcome`` / ``LinkOutcome``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from functools import wraps
from datetime import date as date_type
from datetime import datetime
from typing import Any

from task_tracker.analytics.reminders import classify_reminders, tasks_on_date
from task_tracker.analytics.views import TaskFilter, TaskSort, compose_view
from task_tracker.features.dashboard.context import build_dashboard_context

from .clock import local_now, utc_now
from .config import TrackerSettings, data_file_from_env
from .errors import TrackerError, ValidationError
from .jira_client import JiraGateway
from .ledger import TimeLedger
from .mappers import build_task, clean_fields, parse_minutes, patch_from_mapping
from .models import Outcome, Task, TrackerConfigStatus
from .store import JsonTaskStore, TaskStore
from .sync import LinkOutcome, SyncCoordinator, TimeLogOutcome

logger = logging.getLogger(__name__)


def _guarded(func: Callable[..., Any]) -> Callable[..., Outcome]:
    """Run ``func`` and fold its result or ``TrackerError`` into an ``Outcome``."""

    @wraps(func)
    def wrapper(self, *args, **kwargs) -> Outcome:
        try:
            return Outcome.success(func(self, *args, **kwargs))
        except TrackerError as exc:
            logger.info("%s failed: %s: %s", func.__name__, type(exc).__name__, exc.message)
            return Outcome.failure(exc)

    return wrapper


class TaskService:
    def __init__(
        self,
        store: TaskStore,
        gateway: JiraGateway | None = None,
        *,
        clock: Callable[[], datetime] = utc_now,
        local_clock: Callable[[], datetime] = local_now,
    ):
        self.store = store
        self.gateway = gateway
        self._clock = clock
        self._local_clock = local_clock
        self.ledger = TimeLedger(store, clock=clock, local_clock=local_clock)
        self.sync = SyncCoordinator(store, self.ledger, gateway, clock=clock)

    @classmethod
    def from_env(cls, settings: TrackerSettings | None = None) -> TaskService:
        settings = settings or TrackerSettings.from_env()
        store = JsonTaskStore(data_file_from_env())
        if not settings.configured:
            logger.warning(
                "Jira integration not configured. Set JIRA_BASE_URL, JIRA_EMAIL, and JIRA_API_TOKEN to enable."
            )
        return cls(store, JiraGateway(settings))

    # ------------------ Task CRUD ------------------
    @_guarded
    def list_tasks(self) -> list[Task]:
        return self.store.list()

    @_guarded
    def get_task(self, task_id: str) -> Task:
        return self.store.get(task_id)

    @_guarded
    def create_task(self, fields: Mapping[str, Any]) -> Task:
        """Create a task; ``id``, timestamps and ledger fields are server-assigned."""
        return self.store.add(build_task(clean_fields(fields), self._clock()))

    @_guarded
    def update_task(self, task_id: str, fields: Mapping[str, Any]) -> Task:
        """Merge only the supplied fields; attempts to change ``id`` are ignored."""
        patch = patch_from_mapping(fields)
        return self.store.replace(task_id, lambda t: patch.apply(t, self._clock()))

    @_guarded
    def delete_task(self, task_id: str) -> str:
        self.store.delete(task_id)
        return task_id

    @_guarded
    def append_time_entry(self, task_id: str, minutes: Any, notes: str | None = "", date: Any = None) -> Task:
        return self.ledger.append_entry(task_id, minutes, notes, date)

    # ------------------ Derived views ------------------
    @_guarded
    def get_reminders(self, now: datetime | None = None):
        return classify_reminders(self.store.list(), now or self._local_clock())

    @_guarded
    def get_tasks_on_date(self, day: str | date_type) -> list[Task]:
        if not str(day or "").strip():
            raise ValidationError("Date is required")
        return tasks_on_date(self.store.list(), day)

    @_guarded
    def get_view(
        self,
        task_filter: str = TaskFilter.ALL,
        task_sort: str = TaskSort.DATE,
        now: datetime | None = None,
    ) -> list[Task]:
        try:
            mode, order = TaskFilter(task_filter), TaskSort(task_sort)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
        return compose_view(self.store.list(), mode, order, now or self._local_clock())

    @_guarded
    def get_dashboard(self, now: datetime | None = None):
        return build_dashboard_context(self.store.list(), now or self._local_clock())

    # ------------------ Jira ------------------
    def get_tracker_config_status(self) -> Outcome:
        if self.gateway is None:
            return Outcome.success(TrackerConfigStatus(configured=False, base_url="", email=""))
        return Outcome.success(self.gateway.config_status())

    @_guarded
    def get_remote_issue(self, issue_key: str):
        return self.sync.read_remote(self.sync.require_gateway().fetch_issue, issue_key)

    @_guarded
    def create_remote_subtask(self, parent_key: str, title: str, description: str | None = ""):
        if not (parent_key or "").strip() or not (title or "").strip():
            raise ValidationError("Parent issue key and title are required")
        return self.sync.require_gateway().create_subtask(parent_key.strip(), title, description)

    @_guarded
    def log_remote_work(
        self,
        issue_key: str,
        minutes: Any,
        comment: str | None = None,
        started: datetime | None = None,
    ) -> str:
        amount = parse_minutes(minutes)
        if not (issue_key or "").strip() or amount <= 0:
            raise ValidationError("Issue key and time spent are required")
        return self.sync.require_gateway().log_work(issue_key.strip(), amount * 60, comment, started)

    @_guarded
    def update_remote_worklog(
        self,
        issue_key: str,
        worklog_id: str,
        minutes: Any,
        comment: str | None = None,
    ) -> str:
        amount = parse_minutes(minutes)
        if amount <= 0:
            raise ValidationError("Time spent must be positive")
        return self.sync.require_gateway().update_worklog(issue_key, worklog_id, amount * 60, comment)

    # ------------------ Sync workflows ------------------
    def log_time(self, task_id: str, minutes: Any, notes: str | None = "", date: Any = None) -> TimeLogOutcome:
        return self.sync.log_time(task_id, minutes, notes, date)

    def create_linked_task(
        self,
        fields: Mapping[str, Any],
        parent_key: str | None = None,
        create_remote: bool = True,
    ) -> LinkOutcome:
        return self.sync.create_linked_task(fields, parent_key, create_remote)

    def link_existing_task(self, task_id: str, parent_key: str) -> LinkOutcome:
        return self.sync.link_existing_task(task_id, parent_key)

    def link_task_to_issue(self, task_id: str, issue_key: str) -> LinkOutcome:
        return self.sync.link_task_to_issue(task_id, issue_key)

    def unlink_task(self, task_id: str) -> LinkOutcome:
        return self.sync.unlink_task(task_id)
