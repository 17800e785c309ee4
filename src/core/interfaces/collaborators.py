"""Contracts for the collaborators injected into `EventsClient`.

Each one is a structural Protocol: any callable with the right signature
(a plain function, a bound method, a test spy) satisfies it.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence, runtime_checkable

from core.domain.models import FetchOptions, ResponseBody


@runtime_checkable
class UrlBuilder(Protocol):
    """Builds an absolute URL from path segments plus a query mapping."""

    def __call__(self, *segments: str, query: Mapping[str, Any] | None = None) -> str:
        ...


@runtime_checkable
class ParameterValidator(Protocol):
    """Checks that every required key is present and truthy.

    Raises `core.errors.ValidationError` otherwise.
    """

    async def __call__(self, fields: Mapping[str, Any], required: Sequence[str]) -> None:
        ...


@runtime_checkable
class AuthenticatedFetch(Protocol):
    """Performs the GET and returns the decoded body.

    Raises `core.errors.HttpError` on a non-success status or transport failure.
    """

    async def __call__(self, url: str, options: FetchOptions) -> ResponseBody:
        ...
