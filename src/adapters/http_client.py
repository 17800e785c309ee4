"""httpx wrapper.

- `build_async_client`: one place for timeouts and default headers.
- `AuthenticatedFetcher`: the fetch collaborator of `EventsClient`. It turns
  non-2xx responses and transport failures into `HttpError` and returns the
  decoded JSON body otherwise.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from core.config import AppSettings
from core.domain.models import FetchOptions, ResponseBody
from core.errors import HttpError

log = logging.getLogger(__name__)


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` with the project defaults."""

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return response.text


class AuthenticatedFetcher:
    """GET a URL with the given `FetchOptions` and return the decoded body."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def __call__(self, url: str, options: FetchOptions) -> ResponseBody:
        request = self._client.build_request("GET", url, headers=options.headers)
        if options.credentials == "omit":
            request.headers.pop("Cookie", None)

        log.debug("GET %s (credentials=%s)", url, options.credentials)
        try:
            response = await self._client.send(request)
        except httpx.HTTPError as exc:
            log.warning("GET %s failed: %s", url, exc)
            raise HttpError(f"Request to {url} failed: {exc}", url=url) from exc

        body = _decode_body(response)
        if not response.is_success:
            log.warning("GET %s -> HTTP %d", url, response.status_code)
            raise HttpError(
                f"HTTP {response.status_code} {response.reason_phrase} for {url}",
                url=url,
                status=response.status_code,
                body=body,
            )

        log.debug("GET %s -> HTTP %d", url, response.status_code)
        if body is None:
            return {}
        if not isinstance(body, (dict, list)):
            raise HttpError(
                f"Expected a JSON body from {url}",
                url=url,
                status=response.status_code,
                body=body,
            )
        return body
