"""Pure helpers to build the Dashboard page context (no Streamlit)."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

import pandas as pd

from task_tracker.analytics.reminders import classify_reminders, reference_time, tasks_on_date
from task_tracker.analytics.time_tracking import minutes_on, time_by_day, total_minutes
from task_tracker.analytics.views import TaskSort, compose_view
from task_tracker.core.models import Task, TaskStatus


@dataclass(slots=True)
class DashboardContext:
    """Context data for the Dashboard page."""

    now: datetime
    today: list[Task] = field(default_factory=list)
    overdue: list[Task] = field(default_factory=list)
    upcoming: list[Task] = field(default_factory=list)
    completed: list[Task] = field(default_factory=list)
    # Summary metrics
    total_tasks: int = 0
    pending_count: int = 0
    in_progress_count: int = 0
    completed_count: int = 0
    linked_count: int = 0
    total_minutes: int = 0
    minutes_today: int = 0
    # Chart input
    daily_minutes: pd.DataFrame = field(default_factory=pd.DataFrame)
    status_distribution: dict[str, int] = field(default_factory=dict)


def build_dashboard_context(
    tasks: Iterable[Task],
    now: datetime | None = None,
    history_days: int = 14,
) -> DashboardContext:
    """Build context for the Dashboard page.

    Parameters
    ----------
    tasks : iterable of Task
        Current task snapshot.
    now : datetime, optional
        Reference instant; defaults to the local clock.
    history_days : int
        Number of trailing days (including today) in ``daily_minutes``.

    Returns
    -------
    DashboardContext
        Assembled context data for the page.
    """
    items = list(tasks)
    ref = reference_time(now)
    today = ref.date()
    reminders = classify_reminders(items, ref)

    status_distribution = {str(s): 0 for s in TaskStatus}
    for t in items:
        status_distribution[str(t.status)] = status_distribution.get(str(t.status), 0) + 1

    start = (pd.Timestamp(today) - pd.Timedelta(days=max(history_days, 1) - 1)).date()
    return DashboardContext(
        now=ref,
        today=compose_view(tasks_on_date(items, today), task_sort=TaskSort.DATE, now=ref),
        overdue=reminders.overdue,
        upcoming=reminders.upcoming,
        completed=[t for t in items if t.status == TaskStatus.COMPLETED],
        total_tasks=len(items),
        pending_count=status_distribution.get(TaskStatus.PENDING, 0),
        in_progress_count=status_distribution.get(TaskStatus.IN_PROGRESS, 0),
        completed_count=status_distribution.get(TaskStatus.COMPLETED, 0),
        linked_count=sum(1 for t in items if t.is_linked),
        total_minutes=total_minutes(items),
        minutes_today=minutes_on(items, today),
        daily_minutes=time_by_day(items, start, today),
        status_distribution=status_distribution,
    )
