"""Jira setup page: show the configured connection and test it."""

from __future__ import annotations

import streamlit as st

from task_tracker.app import current_service, register_page


@register_page("Jira Setup")
def setup_page():
    st.title("Jira Setup")
    st.caption("Credentials come from JIRA_BASE_URL, JIRA_EMAIL and JIRA_API_TOKEN (env or Streamlit secrets).")
    service = current_service()
    if service is None:
        return
    status = service.get_tracker_config_status().value
    if not status.configured:
        st.warning(
            "Jira integration not configured. Set JIRA_BASE_URL, JIRA_EMAIL, and JIRA_API_TOKEN to enable."
        )
        return
    st.success("Jira integration configured.")
    st.write({"Base URL": status.base_url, "Account": status.email})

    key = st.text_input("Test with issue key", placeholder="PROJ-123")
    if st.button("Fetch Issue", type="primary") and key:
        result = service.get_remote_issue(key)
        if result.ok:
            issue = result.value
            st.success(f"{issue.key}: {issue.summary} ({issue.status})")
        else:
            st.error(f"{result.error_kind}: {result.message}")
