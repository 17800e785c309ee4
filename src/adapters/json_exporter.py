"""JSON export of a response body."""

from __future__ import annotations

import json
from pathlib import Path

from core.domain.models import ResponseBody


def dumps_body(body: ResponseBody) -> str:
    return json.dumps(body, ensure_ascii=False, indent=2, sort_keys=True) + "\n"


def export_body_json(*, body: ResponseBody, output_path: Path) -> Path:
    """Write `body` to `output_path` as UTF-8 JSON with a stable layout."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(dumps_body(body), encoding="utf-8")
    return output_path
