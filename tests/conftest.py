"""Test configuration ensuring local package import when editable install not active.

If users invoke `pytest` outside the project's virtualenv, we still add the project
root to sys.path so `import task_tracker` works.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from .fakes import FakeSession  # noqa: E402

from task_tracker.core.config import TrackerSettings  # noqa: E402
from task_tracker.core.jira_client import JiraGateway  # noqa: E402
from task_tracker.core.store import InMemoryTaskStore  # noqa: E402


@pytest.fixture
def store():
    return InMemoryTaskStore()


@pytest.fixture
def settings():
    return TrackerSettings(
        base_url="https://example.atlassian.net/",
        email="dev@example.com",
        api_token="token",
    )


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def gateway(settings, session):
    return JiraGateway(settings, session=session)
