"""Tasks page: list view with filters, task editing and time tracking."""

from __future__ import annotations

from datetime import datetime

import streamlit as st

from task_tracker.analytics.time_tracking import format_minutes
from task_tracker.analytics.views import TaskFilter, TaskSort
from task_tracker.app import current_service, jira_server, register_page
from task_tracker.core.config import STATUS_DISPLAY_ORDER
from task_tracker.core.models import TaskPriority
from task_tracker.core.sync import SyncStatus
from task_tracker.visual.column_metadata import apply_column_metadata
from task_tracker.visual.tables import prepare_entries_table, prepare_task_table


def _task_fields(prefix: str, task=None) -> dict:
    title = st.text_input("Title", value=task.title if task else "", key=f"{prefix}_title")
    description = st.text_area("Description", value=task.description if task else "", key=f"{prefix}_desc")
    c1, c2, c3, c4 = st.columns(4)
    has_date = c1.checkbox("Has target date", value=bool(task and task.target_date), key=f"{prefix}_has_date")
    target_date = c2.date_input(
        "Target date",
        value=(task.target_date.date() if task and task.target_date else datetime.now().date()),
        key=f"{prefix}_date",
        disabled=not has_date,
    )
    target_time = c3.time_input(
        "Target time",
        value=task.target_time if task and task.target_time else None,
        key=f"{prefix}_time",
        disabled=not has_date,
    )
    statuses = list(STATUS_DISPLAY_ORDER)
    priorities = [str(p) for p in TaskPriority]
    status = c4.selectbox(
        "Status",
        statuses,
        index=statuses.index(str(task.status)) if task and str(task.status) in statuses else 0,
        key=f"{prefix}_status",
    )
    priority = st.selectbox(
        "Priority",
        priorities,
        index=priorities.index(str(task.priority)) if task and str(task.priority) in priorities else 1,
        key=f"{prefix}_priority",
    )
    return {
        "title": title,
        "description": description,
        "targetDate": target_date.isoformat() if has_date else None,
        "targetTime": target_time.strftime("%H:%M") if has_date and target_time else None,
        "status": status,
        "priority": priority,
    }


def _create_section(service):
    with st.expander("New task", expanded=False):
        fields = _task_fields("new")
        link = st.checkbox("Create as Jira subtask", key="new_link", disabled=not jira_server())
        parent = st.text_input("Parent issue key", key="new_parent", disabled=not link)
        if st.button("Create Task", type="primary"):
            if link:
                outcome = service.create_linked_task(fields, parent, create_remote=True)
            else:
                outcome = service.create_task(fields)
            if outcome.ok:
                st.success(outcome.message or "Task created")
            else:
                st.error(outcome.message)


def _time_section(service, task):
    st.markdown(f"**Time spent:** {format_minutes(task.time_spent)} across {len(task.time_entries)} entr(y/ies)")
    c1, c2 = st.columns([1, 3])
    minutes = c1.number_input("Minutes", min_value=0, value=30, step=5, key=f"minutes_{task.id}")
    notes = c2.text_input("Notes", key=f"notes_{task.id}")
    if st.button("Log Time", key=f"log_{task.id}"):
        if minutes <= 0:
            st.error("Please enter a valid time in minutes")
            return
        outcome = service.log_time(task.id, int(minutes), notes)
        if not outcome.ok:
            st.error(outcome.message)
        elif outcome.sync_status is SyncStatus.FAILED:
            st.warning(outcome.message)
        else:
            st.success(outcome.message)


def _jira_section(service, task):
    if task.is_linked:
        st.caption(f"Linked to {task.jira_issue_key}")
        if st.button("Unlink", key=f"unlink_{task.id}"):
            outcome = service.unlink_task(task.id)
            if outcome.ok:
                st.success("Task unlinked")
            else:
                st.error(outcome.message)
        return
    if not jira_server():
        st.caption("Configure Jira to link this task.")
        return
    key = st.text_input("Issue key", key=f"issue_{task.id}")
    c1, c2 = st.columns(2)
    if c1.button("Create subtask under issue", key=f"sub_{task.id}"):
        outcome = service.link_existing_task(task.id, key)
        (st.success if outcome.ok else st.error)(outcome.message)
    if c2.button("Link to existing issue", key=f"link_{task.id}"):
        outcome = service.link_task_to_issue(task.id, key)
        (st.success if outcome.ok else st.error)(outcome.message)


def _detail_section(service, tasks):
    if not tasks:
        return
    labels = {f"{t.title} ({t.id[:8]})": t for t in tasks}
    choice = st.selectbox("Select task", list(labels.keys()))
    task = labels[choice]
    tab_edit, tab_time, tab_jira = st.tabs(["Edit", "Time", "Jira"])
    with tab_edit:
        fields = _task_fields(f"edit_{task.id}", task)
        c1, c2 = st.columns(2)
        if c1.button("Save", key=f"save_{task.id}", type="primary"):
            outcome = service.update_task(task.id, fields)
            (st.success if outcome.ok else st.error)("Task updated" if outcome.ok else outcome.message)
        if c2.button("Delete", key=f"delete_{task.id}"):
            outcome = service.delete_task(task.id)
            (st.success if outcome.ok else st.error)("Task deleted" if outcome.ok else outcome.message)
    with tab_time:
        _time_section(service, task)
        table, cols, cfg = prepare_entries_table([task], jira_server())
        if cols:
            st.dataframe(table[cols], hide_index=True, column_config=apply_column_metadata(cols, cfg))
    with tab_jira:
        _jira_section(service, task)


@register_page("Tasks")
def tasks_page():
    st.title("Tasks")
    service = current_service()
    if service is None:
        return
    _create_section(service)

    c1, c2 = st.columns(2)
    task_filter = c1.selectbox("Filter", [str(f) for f in TaskFilter])
    task_sort = c2.selectbox("Sort by", [str(s) for s in TaskSort])
    result = service.get_view(task_filter, task_sort)
    if not result.ok:
        st.error(result.message)
        return
    tasks = result.value
    if not tasks:
        st.info("No tasks match the current filter.")
    else:
        table, cols, cfg = prepare_task_table(tasks, jira_server())
        st.dataframe(table[cols], hide_index=True, column_config=apply_column_metadata(cols, cfg))
        csv = table[cols].to_csv(index=False).encode("utf-8")
        st.download_button("Download Tasks CSV", data=csv, file_name="tasks.csv", mime="text/csv")
    st.markdown("---")
    _detail_section(service, tasks)
