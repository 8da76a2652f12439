"""Convenience launcher for the Streamlit app.

Usage:
  streamlit run run_dashboard.py

Automatically imports every module in ``task_tracker/pages`` so each page
decorated with ``@register_page`` registers itself without manual edits here.
"""

import logging
import os
from importlib import import_module
from pathlib import Path

import streamlit as st

from task_tracker.app import SERVICE_KEY, main
from task_tracker.core.config import LOG_LEVEL_ENV, TrackerSettings
from task_tracker.core.service import TaskService

st.set_page_config(layout="wide")

logging.basicConfig(
    level=os.environ.get(LOG_LEVEL_ENV, "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("task_tracker")


def _secrets_or_env() -> dict:
    """Merge a [jira] secrets section (or top-level secrets) over the environment."""
    merged = dict(os.environ)
    try:
        jira_secrets = st.secrets.get("jira", {})
        for name in ("JIRA_BASE_URL", "JIRA_EMAIL", "JIRA_API_TOKEN", "JIRA_TIMEOUT_SECONDS"):
            value = jira_secrets.get(name) or st.secrets.get(name)
            if value:
                merged[name] = value
    except FileNotFoundError:
        logger.debug("No Streamlit secrets file; using environment only")
    return merged


def _auto_init_task_service():
    if SERVICE_KEY in st.session_state:
        return
    settings = TrackerSettings.from_mapping(_secrets_or_env())
    st.session_state[SERVICE_KEY] = TaskService.from_env(settings)
    if settings.configured:
        st.sidebar.success(f"Jira: {settings.base_url}")
    else:
        st.sidebar.info("Jira not configured; tasks stay local.")


_auto_init_task_service()

PAGES_DIR = Path(__file__).parent / "task_tracker" / "pages"
for py in sorted(PAGES_DIR.glob("[!_]*.py")):
    mod_name = f"task_tracker.pages.{py.stem}"
    try:
        import_module(mod_name)
    except ImportError as e:  # pragma: no cover
        logger.error("Failed importing page %s: %s", mod_name, e)

if __name__ == "__main__":
    main()
