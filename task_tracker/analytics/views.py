"""Filtered and sorted task projections (list view, calendar grouping)."""

from __future__ import annotations

import calendar
from collections.abc import Iterable
from datetime import date, datetime
from enum import StrEnum

import pandas as pd

from task_tracker.analytics.reminders import due_moment, reference_time
from task_tracker.core.models import Task, TaskStatus
from task_tracker.core.status import priority_rank


class TaskFilter(StrEnum):
    ALL = "all"
    PENDING = "pending"
    COMPLETED = "completed"
    OVERDUE = "overdue"


class TaskSort(StrEnum):
    DATE = "date"
    PRIORITY = "priority"
    TITLE = "title"


TASK_FRAME_COLUMNS = (
    "id",
    "title",
    "description",
    "status",
    "priority",
    "priority_rank",
    "due",
    "time_spent",
    "jira_issue_key",
    "position",
    "task",
)


def tasks_to_dataframe(tasks: Iterable[Task]) -> pd.DataFrame:
    """Tabular projection; ``task`` keeps the model object, ``position`` the input order."""
    rows = []
    for position, t in enumerate(tasks):
        rows.append(
            {
                "id": t.id,
                "title": t.title,
                "description": t.description,
                "status": str(t.status),
                "priority": str(t.priority),
                "priority_rank": priority_rank(t.priority),
                "due": due_moment(t),
                "time_spent": t.time_spent,
                "jira_issue_key": t.jira_issue_key,
                "position": position,
                "task": t,
            }
        )
    df = pd.DataFrame(rows, columns=list(TASK_FRAME_COLUMNS))
    df["due"] = pd.to_datetime(df["due"], errors="coerce")
    return df


def filter_tasks(df: pd.DataFrame, task_filter: str | TaskFilter, now: datetime | None = None) -> pd.DataFrame:
    if df.empty:
        return df
    mode = TaskFilter(task_filter)
    if mode is TaskFilter.ALL:
        return df.copy()
    if mode is TaskFilter.PENDING:
        return df[df["status"] == TaskStatus.PENDING].copy()
    if mode is TaskFilter.COMPLETED:
        return df[df["status"] == TaskStatus.COMPLETED].copy()
    ref = pd.Timestamp(reference_time(now))
    open_mask = df["status"] != TaskStatus.COMPLETED
    return df[open_mask & df["due"].notna() & (df["due"] < ref)].copy()


def sort_tasks(df: pd.DataFrame, task_sort: str | TaskSort) -> pd.DataFrame:
    """Stable sort on a single key column so ties keep insertion order."""
    if df.empty:
        return df
    mode = TaskSort(task_sort)
    if mode is TaskSort.DATE:
        return df.sort_values(by="due", ascending=True, kind="stable", na_position="last")
    if mode is TaskSort.PRIORITY:
        ranked = df.assign(_neg_rank=-df["priority_rank"])
        return ranked.sort_values(by="_neg_rank", kind="stable").drop(columns="_neg_rank")
    return df.sort_values(by="title", ascending=True, kind="stable")


def compose_view(
    tasks: Iterable[Task],
    task_filter: str | TaskFilter = TaskFilter.ALL,
    task_sort: str | TaskSort = TaskSort.DATE,
    now: datetime | None = None,
) -> list[Task]:
    """Filter first, then sort; returns model objects and never touches the store."""
    df = tasks_to_dataframe(tasks)
    view = sort_tasks(filter_tasks(df, task_filter, now), task_sort)
    return list(view["task"]) if not view.empty else []


def group_by_date(tasks: Iterable[Task]) -> dict[date, list[Task]]:
    """Calendar layout: dated tasks keyed by target day, days ascending."""
    grouped: dict[date, list[Task]] = {}
    for task in tasks:
        if task.target_date is None:
            continue
        grouped.setdefault(task.target_date.date(), []).append(task)
    return dict(sorted(grouped.items()))


def month_overview(tasks: Iterable[Task], year: int, month: int) -> pd.DataFrame:
    """Per-day task counts for one month (every day present, zero-filled)."""
    days = [date(year, month, d) for d in range(1, calendar.monthrange(year, month)[1] + 1)]
    counts = {day: {"total": 0, "completed": 0} for day in days}
    for day, day_tasks in group_by_date(tasks).items():
        if day in counts:
            counts[day]["total"] = len(day_tasks)
            counts[day]["completed"] = sum(1 for t in day_tasks if t.status == TaskStatus.COMPLETED)
    out = pd.DataFrame(
        [{"date": day, "total": c["total"], "completed": c["completed"]} for day, c in counts.items()]
    )
    out["open"] = out["total"] - out["completed"]
    return out
