from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class EnrichmentConfig:
    serper_api_key: str = os.getenv("SERPER_API_KEY", "")
    search_url: str = "https://google.serper.dev/search"
    region: str = "in"
    snippet_count: int = 5
    reader_base_url: str = "https://r.jina.ai/"
    reader_api_key: str = os.getenv("JINA_API_KEY", "")
    user_agent: str = "FoodieEyes-Agent/1.0"
    top_n: int = 5
    timeout: float = 8.0
    max_content_chars: int = 4000


DEFAULT_ENRICHMENT_CONFIG = EnrichmentConfig()
