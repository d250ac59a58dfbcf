"""Relay error kinds.

Every failure of a chat turn is raised as a ``RelayError`` subclass so the
API layer can catch one type and answer uniformly with ``{"error": ...}``.
"""

from __future__ import annotations

GENERIC_ERROR_MESSAGE = "Failed to generate response"


class RelayError(Exception):
    """Base class for relay failures.

    Attributes:
        code: machine-readable error code, logged alongside the message.
        message: human-readable message returned to the caller.
    """

    code = "RELAY_ERROR"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigError(RelayError):
    """API key or assistant id missing."""

    code = "CONFIG_ERROR"


class UpstreamError(RelayError):
    """The assistants API answered with a non-success response (or not at all)."""

    code = "UPSTREAM_ERROR"

    def __init__(self, message: str, *, step: str = "", status_code: int | None = None) -> None:
        super().__init__(message)
        self.step = step
        self.status_code = status_code


class RunFailedError(RelayError):
    """The remote run reported ``failed``."""

    code = "RUN_FAILED"

    def __init__(self, message: str, *, run_id: str = "", last_error: dict | None = None) -> None:
        super().__init__(message)
        self.run_id = run_id
        self.last_error = last_error


class RunTimeoutError(RelayError, TimeoutError):
    """The run did not complete within the polling ceiling."""

    code = "RUN_TIMEOUT"

    def __init__(self, message: str, *, run_id: str = "", attempts: int = 0) -> None:
        super().__init__(message)
        self.run_id = run_id
        self.attempts = attempts
