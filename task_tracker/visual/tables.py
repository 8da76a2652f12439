"""Reusable table helpers for Streamlit rendering."""

from __future__ import annotations

from collections.abc import Iterable

import pandas as pd
import streamlit as st

from task_tracker.analytics.time_tracking import entries_dataframe, format_minutes
from task_tracker.analytics.views import tasks_to_dataframe
from task_tracker.core.column_config import get_columns
from task_tracker.core.models import Task


def add_issue_link(df: pd.DataFrame, server: str, key_col: str = "jira_issue_key", label: str = "Jira"):
    if df.empty or key_col not in df.columns:
        return df, {}
    out = df.copy()
    base = (server or "").rstrip("/")

    def _url(key) -> str:
        if key is None or pd.isna(key) or not str(key).strip():
            return ""
        return f"{base}/browse/{str(key).strip()}" if base else ""

    out[label] = out[key_col].apply(_url)
    cfg = {
        label: st.column_config.LinkColumn(
            label,
            display_text=r"browse/(.*)$",
            help="Open in Jira",
            width="small",
        )
    }
    return out, cfg


def _select_columns(table: pd.DataFrame, set_name: str, link_label: str) -> list[str]:
    display_cols = [col for col in get_columns(set_name) if col in table.columns]
    if link_label in table.columns and link_label not in display_cols:
        display_cols.insert(0, link_label)
    if not display_cols:
        display_cols = [col for col in table.columns if col not in ("task", "position")]
    return display_cols


def prepare_task_table(
    tasks: Iterable[Task],
    server: str,
) -> tuple[pd.DataFrame, list[str], dict[str, object]]:
    df = tasks_to_dataframe(tasks)
    if df.empty:
        return df, [], {}
    df["time_spent_display"] = df["time_spent"].apply(format_minutes)
    table, cfg = add_issue_link(df, server)
    return table, _select_columns(table, "task_list", "Jira"), cfg


def prepare_entries_table(
    tasks: Iterable[Task],
    server: str,
) -> tuple[pd.DataFrame, list[str], dict[str, object]]:
    df = entries_dataframe(tasks)
    if df.empty:
        return df, [], {}
    df = df.sort_values(by="date", ascending=False, kind="stable")
    df["minutes_display"] = df["minutes"].apply(format_minutes)
    table, cfg = add_issue_link(df, server)
    return table, _select_columns(table, "entries", "Jira"), cfg
