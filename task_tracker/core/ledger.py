"""Time ledger: append-only time entries with a running per-task total."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime
from typing import Any

from .clock import local_now, utc_now
from .mappers import parse_minutes, parse_timestamp
from .models import Task, TimeEntry
from .store import TaskStore

logger = logging.getLogger(__name__)


class TimeLedger:
    def __init__(
        self,
        store: TaskStore,
        *,
        clock: Callable[[], datetime] = utc_now,
        local_clock: Callable[[], datetime] = local_now,
    ):
        self.store = store
        self._clock = clock
        self._local_clock = local_clock

    def append_entry(
        self,
        task_id: str,
        minutes: Any,
        notes: str | None = "",
        date: Any = None,
    ) -> Task:
        """Append a time entry and bump ``time_spent`` in one store rewrite.

        Zero and negative minutes are accepted; rejecting them is left to the
        caller. ``date`` defaults to the moment of the call.

        Raises
        ------
        NotFoundError
            Unknown ``task_id``; the store is left untouched.
        ValidationError
            ``minutes`` is not an integer or ``date`` cannot be parsed.
        """
        amount = parse_minutes(minutes)
        when = parse_timestamp(date, strict=True) or self._local_clock()
        entry = TimeEntry(
            id=uuid.uuid4().hex,
            minutes=amount,
            date=when,
            notes=(notes or "").strip(),
        )

        def _append(task: Task) -> Task:
            return replace(
                task,
                time_entries=(*task.time_entries, entry),
                time_spent=task.time_spent + amount,
                updated_at=self._clock(),
            )

        updated = self.store.replace(task_id, _append)
        logger.info("Logged %s min on task %s (total %s)", amount, task_id, updated.time_spent)
        return updated
