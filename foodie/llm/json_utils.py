from __future__ import annotations

import json
import re
from typing import Any

from ..errors import ProviderError

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


def parse_json_object(text: str) -> dict[str, Any]:
    """Parse a model reply into a JSON object, stripping markdown fences.

    Raises ProviderError for empty, malformed or non-object output.
    """
    cleaned = _FENCE_RE.sub("", text or "").strip()
    if not cleaned:
        raise ProviderError("Empty model response")
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise ProviderError(f"Malformed JSON from model: {cleaned[:200]!r}") from exc
    if not isinstance(parsed, dict):
        raise ProviderError("Model response is not a JSON object")
    return parsed
