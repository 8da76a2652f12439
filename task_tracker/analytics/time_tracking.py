"""Time-entry aggregation (pure functions)."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

import pandas as pd

from task_tracker.core.models import Task

ENTRY_COLUMNS = ("task_id", "title", "entry_id", "date", "day", "minutes", "notes", "jira_issue_key")


def format_minutes(minutes: int | float | None) -> str:
    """Display form used across the UI: ``"1h 30m"``."""
    total = int(minutes or 0)
    sign = "-" if total < 0 else ""
    total = abs(total)
    return f"{sign}{total // 60}h {total % 60}m"


def total_minutes(tasks: Iterable[Task]) -> int:
    return sum(t.time_spent for t in tasks)


def ledger_drift(task: Task) -> int:
    """``time_spent`` minus the entry sum; 0 when the ledger invariant holds."""
    return task.time_spent - sum(e.minutes for e in task.time_entries)


def entries_dataframe(tasks: Iterable[Task]) -> pd.DataFrame:
    rows = []
    for task in tasks:
        for entry in task.time_entries:
            rows.append(
                {
                    "task_id": task.id,
                    "title": task.title,
                    "entry_id": entry.id,
                    "date": entry.date,
                    "day": entry.date.date(),
                    "minutes": entry.minutes,
                    "notes": entry.notes,
                    "jira_issue_key": task.jira_issue_key,
                }
            )
    df = pd.DataFrame(rows, columns=list(ENTRY_COLUMNS))
    df["minutes"] = pd.to_numeric(df["minutes"], errors="coerce").fillna(0).astype(int)
    return df


def time_by_day(
    tasks: Iterable[Task],
    start: date | None = None,
    end: date | None = None,
) -> pd.DataFrame:
    """Minutes tracked per calendar day of the entry date (inclusive bounds)."""
    df = entries_dataframe(tasks)
    if df.empty:
        return pd.DataFrame(columns=["day", "minutes"])
    if start is not None:
        df = df[df["day"] >= start]
    if end is not None:
        df = df[df["day"] <= end]
    if df.empty:
        return pd.DataFrame(columns=["day", "minutes"])
    return df.groupby("day", as_index=False).agg(minutes=("minutes", "sum")).sort_values(by="day")


def time_by_task(tasks: Iterable[Task]) -> pd.DataFrame:
    """Per-task totals, largest first; tasks without entries are omitted."""
    rows = [
        {
            "task_id": t.id,
            "title": t.title,
            "minutes": t.time_spent,
            "entries": len(t.time_entries),
            "jira_issue_key": t.jira_issue_key,
        }
        for t in tasks
        if t.time_entries
    ]
    if not rows:
        return pd.DataFrame(columns=["task_id", "title", "minutes", "entries", "jira_issue_key"])
    out = pd.DataFrame(rows)
    return out.sort_values(by="minutes", ascending=False, kind="stable").reset_index(drop=True)


def minutes_on(tasks: Iterable[Task], day: date) -> int:
    return sum(e.minutes for t in tasks for e in t.time_entries if e.date.date() == day)
