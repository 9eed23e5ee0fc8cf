from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pitchgrade.analysis.client import AnalysisClient
from pitchgrade.api.routes.analysis import router as analysis_router
from pitchgrade.api.routes.history import router as history_router
from pitchgrade.api.routes.sessions import router as sessions_router
from pitchgrade.config import Settings, get_settings
from pitchgrade.history.storage import HistoryStore, build_history_store
from pitchgrade.workflow.machine import PitchAnalyzer
from pitchgrade.workflow.registry import SessionRegistry

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    analyzer: PitchAnalyzer | None = None,
    store: HistoryStore | None = None,
) -> FastAPI:
    """Build the API around one session registry.

    Without an explicit ``analyzer``, an AnalysisClient is created when an
    OpenAI API key is configured; otherwise analysis endpoints answer 501.
    """
    settings = settings or get_settings()
    owned_client: AnalysisClient | None = None
    if analyzer is None and settings.openai_api_key:
        owned_client = AnalysisClient.from_settings(settings)
        analyzer = owned_client
    if store is None:
        store = build_history_store(settings)

    registry = SessionRegistry(analyzer, store)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("History backend: %s", store.storage_name)
        yield
        await registry.aclose()
        if owned_client is not None:
            await owned_client.aclose()

    app = FastAPI(
        title="PitchGrade API",
        description="Guided startup pitch capture and LLM-scored feedback",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.registry = registry

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000"],
        allow_origin_regex=r"http://localhost:\d+",
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(sessions_router)
    app.include_router(analysis_router)
    app.include_router(history_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {
            "status": "healthy",
            "storage": store.storage_name,
            "analysis": "configured" if registry.analyzer is not None else "not configured",
        }

    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "pitchgrade.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )
