"""URL construction for the tracking API.

`TrackingUrlBuilder("https://tracking.api.here.com")("events", "v3", query={"count": 5})`
returns `https://tracking.api.here.com/events/v3/?count=5`.

Rules:
- segments are joined with `/` and the path always ends with `/`
- each segment is percent-encoded, so a `/` inside an id cannot add a level
- query keys keep insertion order; `None` values are dropped
"""

from __future__ import annotations

from typing import Any, Mapping
from urllib.parse import quote, urlencode


class TrackingUrlBuilder:
    def __init__(self, base_url: str) -> None:
        if not base_url:
            raise ValueError("base_url is required")
        self.base_url = base_url.rstrip("/")

    def __call__(self, *segments: str, query: Mapping[str, Any] | None = None) -> str:
        path = "/".join(quote(str(s), safe="") for s in segments)
        url = f"{self.base_url}/{path}/" if path else f"{self.base_url}/"

        params = {k: v for k, v in (query or {}).items() if v is not None}
        if params:
            url = f"{url}?{urlencode(params)}"
        return url

    def __repr__(self) -> str:
        return f"TrackingUrlBuilder({self.base_url!r})"
