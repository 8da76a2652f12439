"""Tests for table preparation and chart builders (no Streamlit runtime needed)."""

from datetime import date, datetime

import pandas as pd

from task_tracker.core.models import Task, TimeEntry
from task_tracker.visual.charts import minutes_per_day_chart, status_donut
from task_tracker.visual.tables import prepare_entries_table, prepare_task_table


def _sample_tasks():
    return [
        Task(
            id="a",
            title="Linked",
            jira_issue_key="PROJ-3",
            time_spent=90,
            time_entries=(TimeEntry(id="e1", minutes=90, date=datetime(2024, 1, 9, 10, 0)),),
        ),
        Task(id="b", title="Local"),
    ]


def test_prepare_task_table_links_and_durations():
    table, cols, cfg = prepare_task_table(_sample_tasks(), "https://example.atlassian.net/")
    assert cols[0] == "Jira"
    assert "Jira" in cfg
    assert list(table["Jira"]) == ["https://example.atlassian.net/browse/PROJ-3", ""]
    assert list(table["time_spent_display"]) == ["1h 30m", "0h 0m"]
    assert "task" not in cols


def test_prepare_task_table_without_server_has_blank_links():
    table, _, _ = prepare_task_table(_sample_tasks(), "")
    assert set(table["Jira"]) == {""}


def test_prepare_entries_table():
    table, cols, _ = prepare_entries_table(_sample_tasks(), "https://example.atlassian.net")
    assert len(table) == 1
    assert "minutes_display" in cols
    assert table.iloc[0]["minutes_display"] == "1h 30m"
    empty, empty_cols, _ = prepare_entries_table([Task(id="x", title="x")], "")
    assert empty.empty and empty_cols == []


def test_minutes_per_day_chart_zero_fills():
    daily = pd.DataFrame({"day": [date(2024, 1, 9)], "minutes": [90]})
    chart, chart_df = minutes_per_day_chart(daily, date(2024, 1, 7), date(2024, 1, 10))
    assert chart is not None
    assert list(chart_df["minutes"]) == [0, 0, 90, 0]
    _, empty_df = minutes_per_day_chart(pd.DataFrame(columns=["day", "minutes"]), date(2024, 1, 7), date(2024, 1, 8))
    assert list(empty_df["minutes"]) == [0, 0]


def test_status_donut():
    assert status_donut({"pending": 0}) is None
    assert status_donut({"pending": 2, "completed": 1}) is not None
