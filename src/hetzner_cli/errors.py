from __future__ import annotations

from dataclasses import dataclass


class HetznerError(Exception):
    """Base error type for the hetzner-cli SDK."""


class ConfigError(HetznerError):
    """Raised when configuration cannot be loaded or validated."""


class AuthError(HetznerError):
    """Raised when no usable credentials can be resolved."""


class RequestError(HetznerError):
    """Raised when an HTTP request cannot be completed."""


class ResponseError(RequestError):
    """Raised when a successful response does not have the expected shape."""


@dataclass(slots=True)
class APIError(RequestError):
    """Normalized non-success response from a Hetzner API.

    ``code``/``message`` come from an ``{"error": {...}}`` body when one was
    present. Otherwise ``structured`` is false and the text falls back to the
    HTTP status line.
    """

    status_code: int
    status_text: str = ""
    code: str = "ERROR"
    message: str = "Unknown error"
    structured: bool = False
    summary: str | None = None

    def __str__(self) -> str:
        if self.summary:
            return self.summary
        if self.structured:
            return f"{self.code}: {self.message}"
        return f"HTTP {self.status_code}: {self.status_text}"


class ActionError(HetznerError):
    """Base type for errors raised while waiting on a Cloud action."""

    def __init__(self, action_id: int, message: str) -> None:
        super().__init__(message)
        self.action_id = action_id


class ActionFailedError(ActionError):
    """The server reported the action finished with ``status: error``."""

    def __init__(self, action_id: int, *, code: str | None = None, message: str | None = None) -> None:
        self.code = code
        self.reason = message or "Unknown error"
        super().__init__(action_id, f"Action {action_id} failed: {self.reason}")


class ActionTimeoutError(ActionError):
    """The action did not reach a terminal state within the polling budget."""

    def __init__(self, action_id: int, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(action_id, f"Action {action_id} timed out after {round(timeout * 1000)}ms")


class ActionCancelledError(ActionError):
    """Polling was stopped through a cancellation token."""

    def __init__(self, action_id: int) -> None:
        super().__init__(action_id, f"Action {action_id} wait cancelled")
