"""Status and priority normalization utilities.

Raw values arrive from forms, persisted documents written by older versions,
or API callers, so both vocabularies are matched case-insensitively against
the aliases in config.py.
"""

from __future__ import annotations

from .config import (
    PRIORITY_ALIASES,
    PRIORITY_MAPPING,
    STATUS_ALIASES,
    UNKNOWN_PRIORITY_RANK,
)
from .errors import ValidationError
from .models import TaskPriority, TaskStatus


def normalize_status(value: str | None) -> TaskStatus:
    """Map a raw status to a ``TaskStatus``.

    Parameters
    ----------
    value : str | None
        Raw status string (e.g. ``"In Progress"``, ``"done"``).

    Returns
    -------
    TaskStatus
        Canonical status.

    Raises
    ------
    ValidationError
        If the value is empty or not a known status alias.

    Examples
    --------
    >>> normalize_status("in_progress")
    <TaskStatus.IN_PROGRESS: 'in-progress'>
    >>> normalize_status("Done")
    <TaskStatus.COMPLETED: 'completed'>
    """
    text = str(value or "").strip().lower()
    if text in STATUS_ALIASES:
        return TaskStatus(STATUS_ALIASES[text])
    raise ValidationError(f"Unknown status: {value!r}")


def normalize_priority(value: str | int | None) -> TaskPriority:
    """Map a raw priority (name or 1-3 rank) to a ``TaskPriority``.

    Raises
    ------
    ValidationError
        If the value is empty or not a known priority alias.
    """
    text = str(value if value is not None else "").strip().lower()
    if text in PRIORITY_ALIASES:
        return TaskPriority(PRIORITY_ALIASES[text])
    raise ValidationError(f"Unknown priority: {value!r}")


def coerce_status(value: str | None) -> str:
    """Lenient variant for loading stored records: unknown values are kept as-is."""
    try:
        return normalize_status(value)
    except ValidationError:
        return str(value or TaskStatus.PENDING)


def coerce_priority(value: str | None) -> str:
    try:
        return normalize_priority(value)
    except ValidationError:
        return str(value or TaskPriority.MEDIUM)


def priority_rank(value: str | None) -> int:
    """Sort rank: high=3, medium=2, low=1, anything unrecognized=0."""
    if value is None:
        return UNKNOWN_PRIORITY_RANK
    return PRIORITY_MAPPING.get(str(value).lower(), UNKNOWN_PRIORITY_RANK)


def is_completed_status(value: str | None) -> bool:
    return str(value or "").lower() == TaskStatus.COMPLETED
