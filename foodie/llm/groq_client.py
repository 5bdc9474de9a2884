from __future__ import annotations

import logging
from typing import Any

from groq import Groq

from ..errors import ProviderError
from .config import DEFAULT_LLM_CONFIG, LLMConfig
from .json_utils import parse_json_object

logger = logging.getLogger(__name__)


def _ensure_enabled(config: LLMConfig) -> None:
    if not config.enabled or not config.api_key:
        raise ProviderError("Groq is not configured")


def complete_json(
    system_prompt: str,
    user_prompt: str,
    config: LLMConfig = DEFAULT_LLM_CONFIG,
) -> dict[str, Any]:
    """
    Call Groq in JSON mode and return the parsed object.

    Raises ProviderError on any failure (timeout, API error, bad JSON).
    """
    _ensure_enabled(config)

    try:
        client = Groq(api_key=config.api_key, timeout=config.timeout)
        response = client.chat.completions.create(
            model=config.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            max_tokens=config.max_tokens,
            temperature=0,
            response_format={"type": "json_object"},
        )
        content = response.choices[0].message.content or ""
    except Exception as exc:
        raise ProviderError("Groq request failed") from exc

    return parse_json_object(content)


def complete_text(
    system_prompt: str,
    user_prompt: str,
    config: LLMConfig = DEFAULT_LLM_CONFIG,
) -> str:
    """Call Groq for a short plain-text answer."""
    _ensure_enabled(config)

    try:
        client = Groq(api_key=config.api_key, timeout=config.timeout)
        response = client.chat.completions.create(
            model=config.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            max_tokens=64,
            temperature=0.2,
        )
        content = (response.choices[0].message.content or "").strip()
    except Exception as exc:
        raise ProviderError("Groq request failed") from exc

    if not content:
        raise ProviderError("Empty Groq response")
    return content
