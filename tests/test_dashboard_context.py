from datetime import date, datetime

from task_tracker.core.models import Task, TimeEntry
from task_tracker.features.dashboard import build_dashboard_context

NOW = datetime(2024, 1, 10, 8, 0)


def _sample_tasks():
    return [
        Task(
            id="a",
            title="Morning sync",
            target_date=datetime(2024, 1, 10, 9, 0),
            jira_issue_key="PROJ-1",
            time_spent=40,
            time_entries=(
                TimeEntry(id="e1", minutes=25, date=datetime(2024, 1, 10, 7, 0)),
                TimeEntry(id="e2", minutes=15, date=datetime(2024, 1, 8, 16, 0)),
            ),
        ),
        Task(id="b", title="Old bug", target_date=datetime(2024, 1, 3), status="in-progress"),
        Task(id="c", title="Shipped", target_date=datetime(2024, 1, 10, 6, 0), status="completed"),
        Task(id="d", title="Backlog"),
    ]


def test_dashboard_context_basic():
    ctx = build_dashboard_context(_sample_tasks(), NOW)
    assert [t.id for t in ctx.today] == ["c", "a"]
    assert [t.id for t in ctx.overdue] == ["b"]
    assert [t.id for t in ctx.upcoming] == ["a"]
    assert [t.id for t in ctx.completed] == ["c"]
    assert (ctx.total_tasks, ctx.pending_count, ctx.in_progress_count, ctx.completed_count) == (4, 2, 1, 1)
    assert ctx.linked_count == 1
    assert ctx.total_minutes == 40
    assert ctx.minutes_today == 25
    assert list(ctx.daily_minutes["day"]) == [date(2024, 1, 8), date(2024, 1, 10)]


def test_dashboard_context_empty():
    ctx = build_dashboard_context([], NOW)
    assert ctx.total_tasks == 0
    assert ctx.today == [] and ctx.overdue == []
    assert ctx.daily_minutes.empty
    assert ctx.status_distribution == {"pending": 0, "in-progress": 0, "completed": 0}
