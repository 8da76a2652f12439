"""Reminder classification (overdue / upcoming) and per-date task selection."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, timedelta

from task_tracker.core.clock import local_now, to_local_naive
from task_tracker.core.config import UPCOMING_WINDOW_HOURS
from task_tracker.core.mappers import format_timestamp
from task_tracker.core.models import Reminders, Task
from task_tracker.core.status import is_completed_status


def due_moment(task: Task) -> datetime | None:
    return task.due_moment


def reference_time(now: datetime | None) -> datetime:
    if now is None:
        return local_now()
    return to_local_naive(now)


def is_overdue(task: Task, now: datetime | None = None) -> bool:
    if is_completed_status(task.status):
        return False
    due = due_moment(task)
    return due is not None and due < reference_time(now)


def classify_reminders(tasks: Iterable[Task], now: datetime | None = None) -> Reminders:
    """Partition open dated tasks into overdue (< now) and upcoming ([now, now+24h]).

    Both window bounds are inclusive for ``upcoming``. Completed and undated
    tasks appear in neither list. Input order is preserved within each list.
    """
    ref = reference_time(now)
    horizon = ref + timedelta(hours=UPCOMING_WINDOW_HOURS)
    out = Reminders()
    for task in tasks:
        if is_completed_status(task.status):
            continue
        due = due_moment(task)
        if due is None:
            continue
        if due < ref:
            out.overdue.append(task)
        elif due <= horizon:
            out.upcoming.append(task)
    return out


def tasks_on_date(tasks: Iterable[Task], day: str | date) -> list[Task]:
    """Tasks whose stored target date matches ``day``.

    A string is matched as a literal prefix of the stored ``targetDate``
    (``YYYY-MM-DDTHH:MM:SS``), so ``"2024-01"`` selects a whole month. A
    ``date`` compares calendar days. Time zones are not consulted; callers
    pass dates in the same local convention the store uses.
    """
    if isinstance(day, datetime):
        day = day.date()
    out: list[Task] = []
    for task in tasks:
        if task.target_date is None:
            continue
        if isinstance(day, date):
            matched = task.target_date.date() == day
        else:
            prefix = str(day).strip()
            matched = bool(prefix) and format_timestamp(task.target_date).startswith(prefix)
        if matched:
            out.append(task)
    return out
