"""Calendar page: month overview and the tasks due on a chosen day."""

from __future__ import annotations

from datetime import datetime

import streamlit as st

from task_tracker.analytics.views import month_overview
from task_tracker.app import current_service, jira_server, register_page
from task_tracker.visual.column_metadata import apply_column_metadata
from task_tracker.visual.tables import prepare_task_table


@register_page("Calendar")
def calendar_page():
    st.title("Calendar")
    service = current_service()
    if service is None:
        return
    day = st.date_input("Day", value=datetime.now().date())

    listed = service.list_tasks()
    if not listed.ok:
        st.error(listed.message)
        return
    overview = month_overview(listed.value, day.year, day.month)
    st.caption(f"{day:%B %Y}")
    st.bar_chart(overview.set_index("date")[["completed", "open"]], height=200)

    result = service.get_tasks_on_date(day.isoformat())
    if not result.ok:
        st.error(result.message)
        return
    st.subheader(f"Tasks on {day.isoformat()}")
    if not result.value:
        st.info("No tasks scheduled for this day.")
        return
    table, cols, cfg = prepare_task_table(result.value, jira_server())
    st.dataframe(table[cols], hide_index=True, column_config=apply_column_metadata(cols, cfg))
