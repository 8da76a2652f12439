"""Tests for the task store (in-memory and JSON document)."""

import json
from dataclasses import replace
from datetime import UTC, datetime

import pytest

from task_tracker.core.errors import NotFoundError, StorageError
from task_tracker.core.models import Task, TimeEntry
from task_tracker.core.store import InMemoryTaskStore, JsonTaskStore


def _sample_task(task_id="t1", title="Write report"):
    created = datetime(2024, 1, 1, 9, 0, tzinfo=UTC)
    return Task(
        id=task_id,
        title=title,
        target_date=datetime(2024, 1, 10, 0, 0),
        created_at=created,
        updated_at=created,
    )


def test_add_get_list_roundtrip():
    store = InMemoryTaskStore()
    store.add(_sample_task("a"))
    store.add(_sample_task("b", "Second"))
    assert [t.id for t in store.list()] == ["a", "b"]
    got = store.get("b")
    assert got.title == "Second"
    assert got.target_date == datetime(2024, 1, 10)


def test_get_unknown_raises():
    with pytest.raises(NotFoundError):
        InMemoryTaskStore().get("missing")


def test_duplicate_id_rejected():
    store = InMemoryTaskStore()
    store.add(_sample_task("a"))
    with pytest.raises(StorageError):
        store.add(_sample_task("a"))


def test_replace_keeps_identity():
    store = InMemoryTaskStore()
    store.add(_sample_task("a"))
    updated = store.replace("a", lambda t: replace(t, id="other", title="Renamed"))
    assert updated.id == "a"
    assert store.get("a").title == "Renamed"
    with pytest.raises(NotFoundError):
        store.get("other")


def test_replace_failure_writes_nothing():
    store = InMemoryTaskStore()
    store.add(_sample_task("a"))

    def _boom(task):
        raise NotFoundError("nope")

    with pytest.raises(NotFoundError):
        store.replace("a", _boom)
    assert store.get("a").title == "Write report"


def test_delete():
    store = InMemoryTaskStore()
    store.add(_sample_task("a"))
    store.delete("a")
    assert store.list() == []
    with pytest.raises(NotFoundError):
        store.delete("a")


def test_json_store_missing_file_is_empty(tmp_path):
    assert JsonTaskStore(tmp_path / "nested" / "tasks.json").list() == []


def test_json_store_persists_camel_case_document(tmp_path):
    path = tmp_path / "tasks.json"
    store = JsonTaskStore(path)
    task = replace(
        _sample_task("a"),
        time_entries=(TimeEntry(id="e1", minutes=30, date=datetime(2024, 1, 9, 10, 0), notes="x"),),
        time_spent=30,
        jira_issue_key="PROJ-7",
    )
    store.add(task)
    doc = json.loads(path.read_text())
    assert doc[0]["jiraIssueKey"] == "PROJ-7"
    assert doc[0]["timeSpent"] == 30
    assert doc[0]["timeEntries"][0]["date"] == "2024-01-09T10:00:00"
    assert not (tmp_path / "tasks.json.tmp").exists()
    # a fresh store over the same file sees the same data
    assert JsonTaskStore(path).get("a").time_entries[0].notes == "x"


def test_json_store_rederives_time_spent(tmp_path):
    path = tmp_path / "tasks.json"
    path.write_text(
        json.dumps(
            [
                {
                    "id": "a",
                    "title": "Hand edited",
                    "timeSpent": 999,
                    "timeEntries": [
                        {"id": "e1", "minutes": 20, "date": "2024-01-09T10:00:00"},
                        {"id": "e2", "minutes": 25, "date": "2024-01-09T11:00:00"},
                    ],
                }
            ]
        )
    )
    assert JsonTaskStore(path).get("a").time_spent == 45


def test_json_store_corrupt_document(tmp_path):
    path = tmp_path / "tasks.json"
    path.write_text("{not json")
    with pytest.raises(StorageError):
        JsonTaskStore(path).list()
