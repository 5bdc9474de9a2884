from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from .llm.providers import ProviderStrategy
from .recommendations.models import AgentRequest, AgentResponse
from .recommendations.pipeline import run_pipeline

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Foodie Eyes API", version="1.0.0")

# Shared across requests so a failed primary model is skipped until the
# failover window expires.
provider_strategy = ProviderStrategy()


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/api/agent", response_model=AgentResponse)
def agent(body: AgentRequest):
    try:
        response = run_pipeline(body, provider_strategy)
    except Exception:
        logger.exception("Recommendation pipeline failed for %r", body.query)
        return JSONResponse(
            status_code=500,
            content={"status": "error", "data": [], "message": "Internal Server Error"},
        )

    if response.status == "error":
        return JSONResponse(status_code=400, content=response.model_dump(by_alias=True))
    return response
