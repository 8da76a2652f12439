"""Jira gateway (REST v3): issue lookup, subtask creation and worklogs.

The authenticated session comes from ``jira.JIRA``; requests are issued
directly against the REST endpoints through that session so every call gets
the same timeout and error mapping. The gateway never retries.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import requests
from jira import JIRA, JIRAError

from .clock import format_jira_timestamp
from .config import (
    ISSUE_FIELDS,
    JIRA_REST_PREFIX,
    WORKLOG_DEFAULT_COMMENT,
    WORKLOG_UPDATE_DEFAULT_COMMENT,
    TrackerSettings,
)
from .errors import (
    ConfigurationError,
    NoSubtaskTypeError,
    RemoteAuthError,
    RemoteError,
    RemoteNotFoundError,
    RemoteTimeoutError,
    RemoteValidationError,
    ValidationError,
)
from .mappers import adf_document, issue_from_raw, issue_types_from_raw
from .models import IssueType, RemoteIssue, SubtaskResult, TrackerConfigStatus

logger = logging.getLogger(__name__)

_JSON_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}


def _json_or_none(response) -> Any:
    if response is None:
        return None
    try:
        return response.json()
    except ValueError:
        return None


def server_messages(payload: Any) -> list[str]:
    """Collect ``errorMessages`` and field ``errors`` from a Jira error payload."""
    if not isinstance(payload, dict):
        return []
    messages = [str(m) for m in payload.get("errorMessages") or [] if m]
    errors = payload.get("errors")
    if isinstance(errors, dict):
        messages.extend(f"{field}: {text}" for field, text in errors.items() if text)
    return messages


def map_remote_error(status_code: int | None, payload: Any, fallback: str) -> RemoteError:
    messages = server_messages(payload)
    message = ", ".join(messages) if messages else (fallback or f"HTTP {status_code}")
    if status_code in (401, 403):
        cls = RemoteAuthError
    elif status_code == 404:
        cls = RemoteNotFoundError
    elif status_code in (400, 422):
        cls = RemoteValidationError
    else:
        cls = RemoteError
    return cls(message, status_code=status_code, messages=messages)


class JiraGateway:
    def __init__(self, settings: TrackerSettings, session: Any = None):
        self.settings = settings
        self._session = session

    @property
    def configured(self) -> bool:
        return self.settings.configured

    @property
    def server(self) -> str:
        return self.settings.base_url

    def config_status(self) -> TrackerConfigStatus:
        return TrackerConfigStatus(
            configured=self.configured,
            base_url=self.settings.base_url,
            email=self.settings.masked_email,
        )

    def browse_url(self, issue_key: str) -> str:
        return f"{self.server}/browse/{issue_key}"

    # ------------------ Transport ------------------
    def _require_session(self):
        if not self.configured:
            raise ConfigurationError(
                "Jira not configured. Please set JIRA_BASE_URL, JIRA_EMAIL, and JIRA_API_TOKEN"
            )
        if self._session is None:
            client = JIRA(
                server=self.server,
                basic_auth=(self.settings.email, self.settings.api_token),
                options={"rest_api_version": "3"},
                get_server_info=False,
                max_retries=0,
                timeout=self.settings.timeout,
            )
            self._session = client._session
        return self._session

    def _request(self, method: str, path: str, **kwargs) -> Any:
        session = self._require_session()
        url = f"{self.server}{JIRA_REST_PREFIX}{path}"
        # the jira ResilientSession applies its own timeout to every request
        if getattr(session, "timeout", None) is None:
            kwargs["timeout"] = self.settings.timeout
        try:
            resp = getattr(session, method)(url, headers=_JSON_HEADERS, **kwargs)
        except JIRAError as exc:
            error = map_remote_error(exc.status_code, _json_or_none(exc.response), exc.text or str(exc))
            logger.warning("Jira %s %s failed: %s", method.upper(), path, error.message)
            raise error from exc
        except requests.Timeout as exc:
            logger.warning("Jira %s %s timed out after %ss", method.upper(), path, self.settings.timeout)
            raise RemoteTimeoutError(f"Jira request timed out after {self.settings.timeout}s") from exc
        except requests.RequestException as exc:
            logger.warning("Jira %s %s transport failure: %s", method.upper(), path, exc)
            raise RemoteError(str(exc)) from exc
        if resp.status_code >= 400:
            error = map_remote_error(resp.status_code, _json_or_none(resp), (resp.text or "")[:200])
            logger.warning("Jira %s %s failed %s: %s", method.upper(), path, resp.status_code, error.message)
            raise error
        return _json_or_none(resp) or {}

    # ------------------ Issues ------------------
    def fetch_issue(self, issue_key: str) -> RemoteIssue:
        key = (issue_key or "").strip()
        if not key:
            raise ValidationError("Issue key is required")
        raw = self._request("get", f"/issue/{key}", params={"fields": ",".join(ISSUE_FIELDS)})
        return issue_from_raw(raw)

    def list_issue_types(self, project_key: str) -> list[IssueType]:
        raw = self._request("get", f"/project/{project_key}", params={"expand": "issueTypes"})
        return issue_types_from_raw(raw)

    # ------------------ Subtask creation ------------------
    def find_subtask_type(self, project_key: str) -> IssueType:
        for issue_type in self.list_issue_types(project_key):
            if issue_type.subtask:
                return issue_type
        raise NoSubtaskTypeError(f"Subtask issue type not found for project {project_key}")

    def submit_subtask(
        self,
        parent: RemoteIssue,
        issue_type: IssueType,
        summary: str,
        description: str | None = "",
    ) -> SubtaskResult:
        payload = {
            "fields": {
                "project": {"key": parent.project_key},
                "parent": {"key": parent.key},
                "summary": summary,
                "description": adf_document(description or ""),
                "issuetype": {"id": issue_type.id},
            }
        }
        raw = self._request("post", "/issue", data=json.dumps(payload))
        key = str(raw.get("key") or "")
        if not key:
            raise RemoteError("Jira did not return a key for the created subtask")
        logger.info("Created Jira subtask %s under %s", key, parent.key)
        return SubtaskResult(
            issue_key=key,
            issue_id=str(raw["id"]) if raw.get("id") is not None else None,
            url=self.browse_url(key),
        )

    def create_subtask(self, parent_key: str, summary: str, description: str | None = "") -> SubtaskResult:
        """Create a subtask under ``parent_key``.

        Three sequential round trips, each feeding the next: resolve the parent
        (for its project), resolve the project's subtask issue type, submit.
        """
        if not (summary or "").strip():
            raise ValidationError("Subtask summary is required")
        parent = self.fetch_issue(parent_key)
        if not parent.project_key:
            raise RemoteError(f"Issue {parent.key} did not report its project")
        issue_type = self.find_subtask_type(parent.project_key)
        return self.submit_subtask(parent, issue_type, summary.strip(), description)

    # ------------------ Worklogs ------------------
    def log_work(
        self,
        issue_key: str,
        time_spent_seconds: int,
        comment: str | None = None,
        started=None,
    ) -> str:
        """Post a worklog and return its remote id.

        ``started`` (naive local or aware datetime) is omitted from the payload
        when not given, letting Jira apply its own default.
        """
        payload: dict[str, Any] = {
            "timeSpentSeconds": int(time_spent_seconds),
            "comment": adf_document(comment or WORKLOG_DEFAULT_COMMENT),
        }
        if started is not None:
            payload["started"] = format_jira_timestamp(started)
        raw = self._request("post", f"/issue/{issue_key}/worklog", data=json.dumps(payload))
        worklog_id = str(raw.get("id") or "")
        logger.info("Logged %ss to %s (worklog %s)", time_spent_seconds, issue_key, worklog_id)
        return worklog_id

    def update_worklog(
        self,
        issue_key: str,
        worklog_id: str,
        time_spent_seconds: int,
        comment: str | None = None,
    ) -> str:
        payload = {
            "timeSpentSeconds": int(time_spent_seconds),
            "comment": adf_document(comment or WORKLOG_UPDATE_DEFAULT_COMMENT),
        }
        raw = self._request("put", f"/issue/{issue_key}/worklog/{worklog_id}", data=json.dumps(payload))
        return str(raw.get("id") or worklog_id)
