"""Errors raised by the events client and its collaborators.

Two kinds reach callers:
- `ValidationError`: a required field was missing or falsy (no network I/O happened).
- `HttpError`: the upstream answered with a non-success status or the transport failed.
"""

from __future__ import annotations

from typing import Any, Sequence


class TrackingError(Exception):
    """Base class for every error raised by this package."""


class ValidationError(TrackingError):
    """`missing` names the offending fields, in the order they were checked."""

    def __init__(self, missing: Sequence[str], message: str | None = None) -> None:
        self.missing = list(missing)
        super().__init__(message or f"Required parameters missing: {', '.join(self.missing)}")


class HttpError(TrackingError):
    """Upstream failure.

    `status` is None when no response was received (DNS, timeout, reset...).
    `body` holds the decoded error payload when the upstream sent one.
    """

    def __init__(
        self,
        message: str,
        *,
        url: str,
        status: int | None = None,
        body: Any = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status = status
        self.body = body
