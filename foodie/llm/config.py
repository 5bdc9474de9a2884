from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


def _reset_seconds_from_env() -> float | None:
    raw = os.getenv("LLM_FAILOVER_RESET_SECONDS", "900")
    try:
        value = float(raw)
    except ValueError:
        return 900.0
    # Zero or negative keeps the failover for the whole process lifetime
    return value if value > 0 else None


@dataclass(frozen=True)
class LLMConfig:
    api_key: str = os.getenv("GROQ_API_KEY", "")
    model: str = "llama-3.1-8b-instant"
    timeout: float = 10.0
    max_tokens: int = 1024
    enabled: bool = True


@dataclass(frozen=True)
class GeminiConfig:
    api_key: str = os.getenv("GOOGLE_API_KEY", "")
    model: str = "gemini-2.0-flash"
    timeout: float = 10.0
    enabled: bool = True


@dataclass(frozen=True)
class FailoverConfig:
    reset_after_seconds: float | None = _reset_seconds_from_env()


DEFAULT_LLM_CONFIG = LLMConfig()
DEFAULT_GEMINI_CONFIG = GeminiConfig()
DEFAULT_FAILOVER_CONFIG = FailoverConfig()
