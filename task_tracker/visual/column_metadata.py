"""Central column metadata and helpers for table rendering."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import streamlit as st

# Mapping of raw column keys to (label, help text, format key)
# format key: "int" -> integer, "datetime" -> local timestamp, None -> default text column
COLUMN_METADATA: dict[str, tuple[str, str, str | None]] = {
    "title": ("Title", "Task title.", None),
    "description": ("Description", "Free-form task notes.", None),
    "status": ("Status", "pending, in-progress or completed.", None),
    "priority": ("Priority", "high, medium or low.", None),
    "due": ("Due", "Target date combined with the optional target time.", "datetime"),
    "time_spent": ("Minutes", "Total minutes logged on the task.", "int"),
    "time_spent_display": ("Time Spent", "Total time logged on the task.", None),
    "date": ("Logged At", "When the time entry was recorded.", "datetime"),
    "minutes": ("Minutes", "Minutes recorded by the entry.", "int"),
    "minutes_display": ("Time", "Time recorded by the entry.", None),
    "notes": ("Notes", "Notes attached to the time entry.", None),
    "jira_issue_key": ("Issue Key", "Linked Jira issue key.", None),
}


def apply_column_metadata(
    columns: Iterable[str],
    existing: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Return a column_config dictionary with human labels and hover help."""

    config: dict[str, Any] = dict(existing or {})
    for col in columns:
        if col in config:
            continue
        meta = COLUMN_METADATA.get(col)
        if not meta:
            continue
        label, help_text, fmt = meta
        if fmt == "int":
            config[col] = st.column_config.NumberColumn(label, help=help_text, format="%d")
        elif fmt == "datetime":
            config[col] = st.column_config.DatetimeColumn(label, help=help_text, format="YYYY-MM-DD HH:mm")
        else:
            config[col] = st.column_config.Column(label, help=help_text)
    return config
