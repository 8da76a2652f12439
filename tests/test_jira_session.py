"""Gateway calls through a real ``jira.JIRA`` session served by a stub transport adapter."""

import json
from datetime import UTC, datetime

import pytest
import requests

from task_tracker.core.config import TrackerSettings
from task_tracker.core.errors import (
    RemoteAuthError,
    RemoteError,
    RemoteNotFoundError,
    RemoteValidationError,
)
from task_tracker.core.jira_client import JiraGateway
from task_tracker.core.service import TaskService
from task_tracker.core.store import InMemoryTaskStore
from task_tracker.core.sync import SyncStatus

from .fakes import StubAdapter, issue_payload

SERVER = "http://jira.test"
NOW = datetime(2024, 1, 9, 12, 0, tzinfo=UTC)


def _settings():
    return TrackerSettings(base_url=SERVER, email="dev@example.com", api_token="token", timeout=7.5)


def _real_gateway():
    """Gateway whose session is built by ``jira.JIRA``; HTTP is answered by the adapter."""
    gateway = JiraGateway(_settings())
    adapter = StubAdapter()
    gateway._require_session().mount(SERVER, adapter)
    return gateway, adapter


def test_real_session_fetch_issue_uses_session_timeout():
    gateway, adapter = _real_gateway()
    adapter.add("GET", "/rest/api/3/issue/PROJ-1", 200, issue_payload())
    issue = gateway.fetch_issue("PROJ-1")
    assert issue.key == "PROJ-1"
    assert issue.project_key == "PROJ"
    assert adapter.sent[0]["timeout"] == 7.5


@pytest.mark.parametrize(
    "status,payload,cls,message",
    [
        (404, {"errorMessages": ["Issue does not exist"]}, RemoteNotFoundError, "Issue does not exist"),
        (401, {"errorMessages": ["Login required", "Token expired"]}, RemoteAuthError, "Login required, Token expired"),
        (400, {"errorMessages": [], "errors": {"summary": "required"}}, RemoteValidationError, "summary: required"),
    ],
)
def test_real_session_error_mapping(status, payload, cls, message):
    gateway, adapter = _real_gateway()
    adapter.add("GET", "/rest/api/3/issue/PROJ-1", status, payload)
    with pytest.raises(cls) as info:
        gateway.fetch_issue("PROJ-1")
    assert info.value.message == message
    assert info.value.status_code == status


def test_real_session_log_work():
    gateway, adapter = _real_gateway()
    adapter.add("POST", "/rest/api/3/issue/PROJ-1/worklog", 201, {"id": "4242"})
    assert gateway.log_work("PROJ-1", 1800, comment="review") == "4242"
    body = json.loads(adapter.sent[0]["body"])
    assert body["timeSpentSeconds"] == 1800
    assert "started" not in body


def test_real_session_failed_worklog_is_degraded_success():
    gateway, adapter = _real_gateway()
    adapter.add("POST", "/rest/api/3/issue/PROJ-2/worklog", 400, {"errorMessages": ["Worklog rejected"]})
    store = InMemoryTaskStore()
    svc = TaskService(store, gateway, clock=lambda: NOW, local_clock=lambda: datetime(2024, 1, 9, 13, 0))
    task = svc.create_task({"title": "Linked", "jiraIssueKey": "PROJ-2"}).value

    outcome = svc.log_time(task.id, 30)
    assert outcome.ok
    assert outcome.sync_status is SyncStatus.FAILED
    assert outcome.remote_error.message == "Worklog rejected"
    assert store.get(task.id).time_spent == 30


def test_plain_session_gets_explicit_timeout_and_status_mapping():
    session = requests.Session()
    adapter = StubAdapter().add("GET", "/rest/api/3/issue/PROJ-1", 500, {"errorMessages": ["Boom"]})
    session.mount(SERVER, adapter)
    gateway = JiraGateway(_settings(), session=session)
    with pytest.raises(RemoteError) as info:
        gateway.fetch_issue("PROJ-1")
    assert type(info.value) is RemoteError
    assert info.value.message == "Boom"
    assert adapter.sent[0]["timeout"] == 7.5
