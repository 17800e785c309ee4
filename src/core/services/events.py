"""Events API client.

Four read operations over `GET /events/v3`. Every call follows the same
steps:
1. validate the required fields (no network I/O on failure)
2. build the query mapping from the fields actually supplied
3. build the URL through the injected builder
4. fetch with `credentials=include` and `Authorization: Bearer <token>`

Validation and HTTP failures reach the caller untouched. Nothing is retried
or logged here.

Note the wire layout: `get_by_device` puts the tracking id in the path,
`get_by_rule` and `get_details` send their identifiers as query parameters.
"""

from __future__ import annotations

from typing import Any, Mapping, Union

import httpx
from pydantic import ValidationError as PydanticValidationError

from core.config import AppSettings
from core.domain.models import FetchOptions, RequestOptions, ResponseBody
from core.errors import ValidationError
from core.interfaces.collaborators import AuthenticatedFetch, ParameterValidator, UrlBuilder

Options = Union[RequestOptions, Mapping[str, Any]]

BASE_PATH = ("events", "v3")


def _coerce_options(options: Options) -> RequestOptions:
    if isinstance(options, RequestOptions):
        return options
    try:
        return RequestOptions.model_validate(dict(options))
    except PydanticValidationError as exc:
        fields = [".".join(str(part) for part in err["loc"]) for err in exc.errors()]
        raise ValidationError(fields, f"Invalid parameters: {', '.join(fields)}") from exc


def build_query_parameters(options: RequestOptions, **always: Any) -> dict[str, Any]:
    """Query mapping for one call.

    `always` holds identifiers the operation always sends. `count` and
    `pageToken` are only added when truthy, so `count=0` is not sent.
    """

    query: dict[str, Any] = dict(always)
    if options.count:
        query["count"] = options.count
    if options.page_token:
        query["pageToken"] = options.page_token
    return query


class EventsClient:
    """View events created by devices and rules."""

    def __init__(
        self,
        url_builder: UrlBuilder,
        validate: ParameterValidator,
        fetch: AuthenticatedFetch,
    ) -> None:
        self._url = url_builder
        self._validate = validate
        self._fetch = fetch

    @property
    def url_builder(self) -> UrlBuilder:
        return self._url

    @property
    def validate(self) -> ParameterValidator:
        return self._validate

    @property
    def fetch(self) -> AuthenticatedFetch:
        return self._fetch

    async def _get(self, token: str, *path: str, query: Mapping[str, Any]) -> ResponseBody:
        url = self._url(*BASE_PATH, *path, query=query)
        return await self._fetch(url, FetchOptions.bearer(token))

    async def list(self, options: Options) -> ResponseBody:
        """List all events available to the user."""

        opts = _coerce_options(options)
        await self._validate({"token": opts.token}, ["token"])

        query = build_query_parameters(opts)
        return await self._get(opts.token, query=query)

    async def get_by_device(self, tracking_id: str, options: Options) -> ResponseBody:
        """Get events generated by a specific device.

        The tracking id becomes a path segment: `events/v3/<trackingId>/`.
        """

        opts = _coerce_options(options)
        await self._validate(
            {"trackingId": tracking_id, "token": opts.token},
            ["trackingId", "token"],
        )

        query = build_query_parameters(opts)
        return await self._get(opts.token, tracking_id, query=query)

    async def get_by_rule(self, rule_id: str, options: Options) -> ResponseBody:
        """Get all events generated by a specific rule (`?ruleId=`)."""

        opts = _coerce_options(options)
        await self._validate(
            {"ruleId": rule_id, "token": opts.token},
            ["ruleId", "token"],
        )

        query = build_query_parameters(opts, ruleId=rule_id)
        return await self._get(opts.token, query=query)

    async def get_details(
        self,
        tracking_id: str,
        rule_id: str,
        timestamp: str,
        options: Options,
    ) -> ResponseBody:
        """Get details of a specific event.

        All three identifiers go in the query string, not the path.
        """

        opts = _coerce_options(options)
        await self._validate(
            {"trackingId": tracking_id, "ruleId": rule_id, "timestamp": timestamp, "token": opts.token},
            ["trackingId", "ruleId", "timestamp", "token"],
        )

        query = build_query_parameters(
            opts,
            trackingId=tracking_id,
            ruleId=rule_id,
            timestamp=timestamp,
        )
        return await self._get(opts.token, query=query)


def build_events_client(
    client: httpx.AsyncClient,
    settings: AppSettings | None = None,
) -> EventsClient:
    """Wire `EventsClient` with the default httpx-based adapters.

    The caller owns `client` (typically from
    `adapters.http_client.build_async_client`) and closes it.
    """

    # Adapters import core; keep these local.
    from adapters.http_client import AuthenticatedFetcher  # noqa: PLC0415
    from adapters.url_builder import TrackingUrlBuilder  # noqa: PLC0415
    from adapters.validation import validate_required  # noqa: PLC0415

    settings = settings or AppSettings()
    return EventsClient(
        url_builder=TrackingUrlBuilder(settings.base_url),
        validate=validate_required,
        fetch=AuthenticatedFetcher(client),
    )
