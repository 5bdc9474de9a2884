from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class SerperConfig:
    api_key: str = os.getenv("SERPER_API_KEY", "")
    places_url: str = "https://google.serper.dev/places"
    search_url: str = "https://google.serper.dev/search"
    region: str = "in"
    language: str = "en"
    timeout: float = 10.0
    max_workers: int = 4


DEFAULT_SERPER_CONFIG = SerperConfig()
