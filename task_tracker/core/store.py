"""Task store: whole-collection persistence behind a process-wide lock.

Every mutation is an atomic read-modify-write of the entire collection while
holding the store lock. Nothing else (in particular no remote call) may run
under that lock; the sync workflows call the store before or after talking to
the tracker, never around it.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any

from .errors import NotFoundError, StorageError
from .mappers import task_from_record, task_to_record
from .models import Task

logger = logging.getLogger(__name__)

Record = dict[str, Any]


class TaskStore:
    """Base store; subclasses provide ``_load``/``_save`` of the full record list."""

    def __init__(self) -> None:
        self._lock = threading.RLock()

    # ------------------ Persistence hooks ------------------
    def _load(self) -> list[Record]:
        raise NotImplementedError

    def _save(self, records: list[Record]) -> None:
        raise NotImplementedError

    # ------------------ Reads ------------------
    def list(self) -> list[Task]:
        with self._lock:
            records = self._load()
        return [task_from_record(r) for r in records]

    def get(self, task_id: str) -> Task:
        with self._lock:
            records = self._load()
        for record in records:
            if str(record.get("id")) == str(task_id):
                return task_from_record(record)
        raise NotFoundError(f"Task not found: {task_id}")

    # ------------------ Mutations ------------------
    def add(self, task: Task) -> Task:
        with self._lock:
            records = self._load()
            if any(str(r.get("id")) == task.id for r in records):
                raise StorageError(f"Duplicate task id: {task.id}")
            records.append(task_to_record(task))
            self._save(records)
        logger.debug("Added task %s", task.id)
        return task

    def replace(self, task_id: str, change: Callable[[Task], Task]) -> Task:
        """Apply ``change`` to one task and rewrite the collection atomically.

        ``change`` runs under the lock against a freshly loaded copy; if it
        raises, nothing is written.
        """
        with self._lock:
            records = self._load()
            index = self._index_of(records, task_id)
            current = task_from_record(records[index])
            updated = change(current)
            # identity is owned by the store
            if updated.id != current.id:
                updated.id = current.id
            records[index] = task_to_record(updated)
            self._save(records)
        logger.debug("Updated task %s", task_id)
        return updated

    def delete(self, task_id: str) -> None:
        with self._lock:
            records = self._load()
            index = self._index_of(records, task_id)
            del records[index]
            self._save(records)
        logger.debug("Deleted task %s", task_id)

    @staticmethod
    def _index_of(records: list[Record], task_id: str) -> int:
        for idx, record in enumerate(records):
            if str(record.get("id")) == str(task_id):
                return idx
        raise NotFoundError(f"Task not found: {task_id}")


class InMemoryTaskStore(TaskStore):
    def __init__(self, records: list[Record] | None = None) -> None:
        super().__init__()
        self._records: list[Record] = json.loads(json.dumps(records or []))

    def _load(self) -> list[Record]:
        # deep copy so callers of the hooks can never alias stored state
        return json.loads(json.dumps(self._records))

    def _save(self, records: list[Record]) -> None:
        self._records = json.loads(json.dumps(records))


class JsonTaskStore(TaskStore):
    """Single JSON document rewritten wholly on every mutation."""

    def __init__(self, path: str | Path) -> None:
        super().__init__()
        self.path = Path(path)

    def _load(self) -> list[Record]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as exc:
            raise StorageError(f"Failed to read {self.path}: {exc}") from exc
        if not text.strip():
            return []
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise StorageError(f"Corrupt task document {self.path}: {exc}") from exc
        if not isinstance(data, list):
            raise StorageError(f"Task document {self.path} is not a list")
        return [r for r in data if isinstance(r, dict)]

    def _save(self, records: list[Record]) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(records, ensure_ascii=False, indent=2), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as exc:
            raise StorageError(f"Failed to write {self.path}: {exc}") from exc
