"""Error taxonomy shared by the store, ledger, gateway and sync workflows."""

from __future__ import annotations

from collections.abc import Sequence


class TrackerError(Exception):
    """Base class for every failure the operation surface turns into an outcome."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(TrackerError):
    """Unknown task (or entry) id."""


class ValidationError(TrackerError):
    """Missing or malformed input field."""


class StorageError(TrackerError):
    """The task document could not be read or rewritten."""


class ConfigurationError(TrackerError):
    """Tracker credentials absent when a tracker operation is attempted."""


class RemoteError(TrackerError):
    """Failure reported by, or while talking to, the issue tracker."""

    retryable = False

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        messages: Sequence[str] = (),
    ):
        super().__init__(message)
        self.status_code = status_code
        self.messages = list(messages)


class RemoteAuthError(RemoteError):
    pass


class RemoteNotFoundError(RemoteError):
    pass


class RemoteValidationError(RemoteError):
    pass


class RemoteTimeoutError(RemoteError):
    retryable = True


class NoSubtaskTypeError(RemoteError):
    """The parent's project defines no subtask-capable issue type."""
