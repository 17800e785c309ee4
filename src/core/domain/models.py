"""Domain models (Pydantic v2).

These models describe *what* goes over the wire, not *how* it is fetched:
- `RequestOptions`: per-call options (token + pagination).
- `FetchOptions`: what the authenticated fetch needs besides the URL.
- `EventsPage` / `Event`: read models for presenting a response body.

The events client never parses responses; `ResponseBody` is handed back as-is.
"""

from __future__ import annotations

from typing import Any, Literal, Union

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

ResponseBody = Union[dict[str, Any], list[Any]]


class RequestOptions(BaseModel):
    """Options shared by every events operation.

    The model does not reject an empty token: presence is checked by the
    injected validator so that a missing token fails the same way as any
    other missing field.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    token: str | None = Field(
        default=None,
        description="Valid user access token.",
    )
    count: Any = Field(
        default=None,
        description="Number of events returned per page (upstream default 100). Sent as given.",
    )
    page_token: Any = Field(
        default=None,
        alias="pageToken",
        description="Page token used for retrieving the next page. Sent as given.",
    )


class FetchOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    credentials: Literal["include", "omit", "same-origin"] = Field(
        default="include",
        description="Whether cookies held by the HTTP client go out with the request.",
    )
    headers: dict[str, str] = Field(
        default_factory=dict,
        description="Extra request headers.",
    )

    @classmethod
    def bearer(cls, token: str) -> "FetchOptions":
        return cls(credentials="include", headers={"Authorization": f"Bearer {token}"})


class Event(BaseModel):
    """A single event as returned by the API.

    Only the fields the CLI shows are declared; everything else is kept.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    tracking_id: str | None = Field(default=None, alias="trackingId")
    rule_id: str | None = Field(default=None, alias="ruleId")
    timestamp: Any = Field(default=None)
    event_type: str | None = Field(default=None, alias="eventType")


class EventsPage(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    data: list[Event] = Field(default_factory=list)
    count: int | None = Field(default=None)
    page_token: str | None = Field(default=None, alias="pageToken")

    @classmethod
    def from_body(cls, body: ResponseBody) -> "EventsPage":
        """Normalize the shapes the API uses (bare list, `data` or `items`)."""

        if isinstance(body, list):
            events = [e for e in body if isinstance(e, dict)]
            return cls(data=events, count=len(events))

        payload = dict(body)
        if "data" not in payload and isinstance(payload.get("items"), list):
            payload["data"] = payload.pop("items")
        if isinstance(payload.get("data"), dict):
            # Event detail comes back as a single object.
            payload["data"] = [payload["data"]]
        elif "data" not in payload and ("trackingId" in payload or "ruleId" in payload):
            return cls(data=[payload], count=1)
        if isinstance(payload.get("data"), list):
            payload["data"] = [e for e in payload["data"] if isinstance(e, dict)]
        return cls.model_validate(payload)
