"""Required-parameter check used before any request goes out."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from core.errors import ValidationError


async def validate_required(fields: Mapping[str, Any], required: Sequence[str]) -> None:
    """Raise `ValidationError` naming every required key that is absent or falsy.

    Missing keys are reported in the order of `required`.
    """

    missing = [key for key in required if not fields.get(key)]
    if missing:
        raise ValidationError(missing)
