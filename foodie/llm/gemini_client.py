from __future__ import annotations

from typing import Any

from google import genai
from google.genai import types as genai_types

from ..errors import ProviderError
from .config import DEFAULT_GEMINI_CONFIG, GeminiConfig
from .json_utils import parse_json_object


def _generate(
    system_prompt: str,
    user_prompt: str,
    config: GeminiConfig,
    json_mode: bool,
) -> str:
    if not config.enabled or not config.api_key:
        raise ProviderError("Gemini is not configured")

    try:
        client = genai.Client(
            api_key=config.api_key,
            http_options=genai_types.HttpOptions(timeout=int(config.timeout * 1000)),
        )
        generation_config = genai_types.GenerateContentConfig(
            system_instruction=system_prompt,
            temperature=0.0 if json_mode else 0.2,
            response_mime_type="application/json" if json_mode else "text/plain",
        )
        response = client.models.generate_content(
            model=config.model,
            contents=[user_prompt],
            config=generation_config,
        )
        return response.text or ""
    except Exception as exc:
        raise ProviderError("Gemini request failed") from exc


def complete_json(
    system_prompt: str,
    user_prompt: str,
    config: GeminiConfig = DEFAULT_GEMINI_CONFIG,
) -> dict[str, Any]:
    return parse_json_object(_generate(system_prompt, user_prompt, config, json_mode=True))


def complete_text(
    system_prompt: str,
    user_prompt: str,
    config: GeminiConfig = DEFAULT_GEMINI_CONFIG,
) -> str:
    text = _generate(system_prompt, user_prompt, config, json_mode=False).strip()
    if not text:
        raise ProviderError("Empty Gemini response")
    return text
