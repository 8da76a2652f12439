"""Dashboard page: today's tasks, reminders and tracked time."""

from __future__ import annotations

import streamlit as st

from task_tracker.analytics.time_tracking import format_minutes
from task_tracker.app import current_service, jira_server, register_page
from task_tracker.visual.charts import minutes_per_day_chart, status_donut
from task_tracker.visual.column_metadata import apply_column_metadata
from task_tracker.visual.tables import prepare_task_table


def _task_table(tasks, server: str, empty_text: str):
    if not tasks:
        st.caption(empty_text)
        return
    table, cols, cfg = prepare_task_table(tasks, server)
    st.dataframe(table[cols], hide_index=True, column_config=apply_column_metadata(cols, cfg))


@register_page("Dashboard")
def dashboard_page():
    st.title("Dashboard")
    service = current_service()
    if service is None:
        return
    result = service.get_dashboard()
    if not result.ok:
        st.error(result.message)
        return
    ctx = result.value
    server = jira_server()

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Open Tasks", ctx.pending_count + ctx.in_progress_count)
    c2.metric("Overdue", len(ctx.overdue))
    c3.metric("Logged Today", format_minutes(ctx.minutes_today))
    c4.metric("Total Logged", format_minutes(ctx.total_minutes))

    if ctx.overdue:
        st.error(f"{len(ctx.overdue)} overdue task(s)")
    _task_table(ctx.overdue, server, "Nothing overdue.")

    st.subheader("Due in the next 24 hours")
    _task_table(ctx.upcoming, server, "No upcoming deadlines.")

    st.subheader(f"Today ({ctx.now:%Y-%m-%d})")
    _task_table(ctx.today, server, "No tasks scheduled for today.")

    st.markdown("---")
    left, right = st.columns([3, 1])
    with left:
        start = ctx.daily_minutes["day"].min() if not ctx.daily_minutes.empty else ctx.now.date()
        chart, _ = minutes_per_day_chart(ctx.daily_minutes, min(start, ctx.now.date()), ctx.now.date())
        st.altair_chart(chart, use_container_width=True)
    with right:
        donut = status_donut(ctx.status_distribution)
        if donut is not None:
            st.altair_chart(donut, use_container_width=True)
