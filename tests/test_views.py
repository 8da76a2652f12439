"""Tests for filtered and sorted task views."""

from datetime import date, datetime

from task_tracker.analytics.views import (
    TaskFilter,
    TaskSort,
    compose_view,
    group_by_date,
    month_overview,
    tasks_to_dataframe,
)
from task_tracker.core.models import Task

NOW = datetime(2024, 1, 10, 12, 0)


def _sample_tasks():
    return [
        Task(id="1", title="beta", target_date=datetime(2024, 1, 12), priority="low"),
        Task(id="2", title="Alpha", priority="high"),
        Task(id="3", title="alpha", target_date=datetime(2024, 1, 5), priority="medium"),
        Task(id="4", title="gamma", target_date=datetime(2024, 1, 5), priority="weird", status="completed"),
        Task(id="5", title="delta", target_date=datetime(2024, 1, 8), priority="high", status="in-progress"),
    ]


def _ids(tasks):
    return [t.id for t in tasks]


def test_sort_by_date_undated_last_ties_stable():
    assert _ids(compose_view(_sample_tasks(), TaskFilter.ALL, TaskSort.DATE, NOW)) == ["3", "4", "5", "1", "2"]


def test_sort_by_priority_unknown_lowest():
    assert _ids(compose_view(_sample_tasks(), "all", "priority", NOW)) == ["2", "5", "3", "1", "4"]


def test_sort_by_title_is_case_sensitive():
    assert _ids(compose_view(_sample_tasks(), "all", "title", NOW)) == ["2", "3", "1", "5", "4"]


def test_filters():
    tasks = _sample_tasks()
    assert _ids(compose_view(tasks, "pending", "date", NOW)) == ["3", "1", "2"]
    assert _ids(compose_view(tasks, "completed", "date", NOW)) == ["4"]
    # overdue: open, dated, due before now
    assert _ids(compose_view(tasks, "overdue", "date", NOW)) == ["3", "5"]


def test_view_on_empty_input():
    assert compose_view([], "overdue", "priority", NOW) == []


def test_view_does_not_mutate_input():
    tasks = _sample_tasks()
    compose_view(tasks, "all", "title", NOW)
    assert _ids(tasks) == ["1", "2", "3", "4", "5"]


def test_dataframe_projection():
    df = tasks_to_dataframe(_sample_tasks())
    assert list(df["priority_rank"]) == [1, 3, 2, 0, 3]
    assert df["due"].isna().sum() == 1


def test_group_by_date_and_month_overview():
    tasks = _sample_tasks()
    grouped = group_by_date(tasks)
    assert list(grouped.keys()) == [date(2024, 1, 5), date(2024, 1, 8), date(2024, 1, 12)]
    assert _ids(grouped[date(2024, 1, 5)]) == ["3", "4"]

    overview = month_overview(tasks, 2024, 1)
    assert len(overview) == 31
    row = overview[overview["date"] == date(2024, 1, 5)].iloc[0]
    assert (row["total"], row["completed"], row["open"]) == (2, 1, 1)
