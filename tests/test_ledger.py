"""Tests for the time ledger."""

import threading
from datetime import UTC, datetime

import pytest

from task_tracker.core.errors import NotFoundError, ValidationError
from task_tracker.core.ledger import TimeLedger
from task_tracker.core.models import Task
from task_tracker.core.store import InMemoryTaskStore, JsonTaskStore

NOW = datetime(2024, 1, 9, 12, 0, tzinfo=UTC)
LOCAL_NOW = datetime(2024, 1, 9, 13, 0)


def _ledger():
    store = InMemoryTaskStore()
    store.add(Task(id="t1", title="Ledger", created_at=NOW, updated_at=NOW))
    return store, TimeLedger(store, clock=lambda: NOW, local_clock=lambda: LOCAL_NOW)


def test_appends_accumulate():
    store, ledger = _ledger()
    for minutes in (30, 0, 45, 15):
        ledger.append_entry("t1", minutes)
    task = store.get("t1")
    assert task.time_spent == 90
    assert [e.minutes for e in task.time_entries] == [30, 0, 45, 15]
    assert len({e.id for e in task.time_entries}) == 4


def test_entry_defaults_to_local_now_and_strips_notes():
    store, ledger = _ledger()
    task = ledger.append_entry("t1", 10, "  review  ")
    entry = task.time_entries[-1]
    assert entry.date == LOCAL_NOW
    assert entry.notes == "review"
    assert task.updated_at == NOW


def test_explicit_date_and_string_minutes():
    _, ledger = _ledger()
    task = ledger.append_entry("t1", "25", date="2024-01-08T17:30:00")
    assert task.time_entries[-1].date == datetime(2024, 1, 8, 17, 30)
    assert task.time_spent == 25


def test_negative_minutes_are_recorded():
    _, ledger = _ledger()
    ledger.append_entry("t1", 30)
    task = ledger.append_entry("t1", -10)
    assert task.time_spent == 20


@pytest.mark.parametrize("bad", ["abc", None, True, "1.5"])
def test_invalid_minutes(bad):
    store, ledger = _ledger()
    with pytest.raises(ValidationError):
        ledger.append_entry("t1", bad)
    assert store.get("t1").time_entries == ()


def test_unknown_task_leaves_store_untouched():
    store, ledger = _ledger()
    with pytest.raises(NotFoundError):
        ledger.append_entry("missing", 10)
    assert store.get("t1").time_spent == 0


def _append_concurrently(store, workers=8, per_worker=5, minutes=3):
    store.add(Task(id="t1", title="Busy", created_at=NOW, updated_at=NOW))
    ledger = TimeLedger(store, clock=lambda: NOW, local_clock=lambda: LOCAL_NOW)
    barrier = threading.Barrier(workers)
    errors = []

    def _work():
        barrier.wait()
        try:
            for _ in range(per_worker):
                ledger.append_entry("t1", minutes)
        except Exception as exc:  # noqa: BLE001
            errors.append(exc)

    threads = [threading.Thread(target=_work) for _ in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert errors == []
    return store.get("t1"), workers * per_worker, minutes


def test_concurrent_appends_in_memory_lose_nothing():
    task, count, minutes = _append_concurrently(InMemoryTaskStore())
    assert len(task.time_entries) == count
    assert task.time_spent == count * minutes


def test_concurrent_appends_json_store_lose_nothing(tmp_path):
    path = tmp_path / "tasks.json"
    task, count, minutes = _append_concurrently(JsonTaskStore(path))
    assert len(task.time_entries) == count
    assert task.time_spent == count * minutes
    reloaded = JsonTaskStore(path).get("t1")
    assert reloaded.time_spent == count * minutes
