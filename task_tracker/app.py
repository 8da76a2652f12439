"""Application entry point: page registry and router."""

from __future__ import annotations

import streamlit as st

PAGES = {}

SERVICE_KEY = "task_service"


def register_page(label):
    def decorator(func):
        PAGES[label] = func
        return func

    return decorator


def current_service():
    """Return the session's TaskService, or None when the launcher has not built one."""
    service = st.session_state.get(SERVICE_KEY)
    if service is None:
        st.warning("Task service not initialized. Start the app with `streamlit run run_dashboard.py`.")
    return service


def jira_server() -> str:
    service = st.session_state.get(SERVICE_KEY)
    if service is None or service.gateway is None or not service.gateway.configured:
        return ""
    return service.gateway.server


def main():
    st.sidebar.title("Task Tracker")
    pages = list(PAGES.keys())
    if not pages:
        st.write("No pages registered yet.")
        return
    preferred_order = [
        "Dashboard",
        "Tasks",
        "Calendar",
        "Jira Setup",
    ]

    ordered = [name for name in preferred_order if name in pages]
    trailing = sorted(name for name in pages if name not in preferred_order)
    pages = ordered + trailing
    page = st.sidebar.selectbox("Page", pages, index=0)
    PAGES[page]()


if __name__ == "__main__":
    main()
