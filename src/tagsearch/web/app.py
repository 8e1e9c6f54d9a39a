"""FastAPI application backing the TagSearch web UI."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, List

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from tagsearch.config import AppConfig
from tagsearch.embedding.encoder import EmbeddingConfig, EmbeddingModel
from tagsearch.index.client import IndexClientFactory
from tagsearch.index.search import SearchController
from tagsearch.models import ALL, FacetSelection, MediaType
from tagsearch.web.dependencies import get_config, get_controller
from tagsearch.web.frontend import router as frontend_router
from tagsearch.web.render import render_error, render_results
from tagsearch.web.schema import build_rows, columns_for_policy

LOGGER = logging.getLogger(__name__)


class SearchPayload(BaseModel):
    query: str
    db: str | None = None
    media_type: MediaType = MediaType.ALL
    source: str = ALL


def build_embedder(config: AppConfig) -> EmbeddingModel:
    return EmbeddingModel(
        EmbeddingConfig(
            model_name=config.embedding_model,
            dimensions=config.dimensions,
            api_key=config.openai_api_key,
            timeout_seconds=config.timeout_seconds,
        )
    )


def create_app(
    config: AppConfig | None = None,
    embedder: Any | None = None,
    index_factory: Any | None = None,
) -> FastAPI:
    """Build the web app; missing collaborators are created from the environment at startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
        resolved = config or AppConfig.from_env()
        if not resolved.targets:
            LOGGER.warning("No databases configured; set TAGSEARCH_DB_1_URL and TAGSEARCH_DB_1_TOKEN")
        app.state.config = resolved
        app.state.embedder = embedder or build_embedder(resolved)
        app.state.index_factory = index_factory or IndexClientFactory(timeout=resolved.timeout_seconds)
        try:
            yield
        finally:
            if embedder is None:
                await app.state.embedder.close()
            if index_factory is None:
                await app.state.index_factory.close()

    app = FastAPI(title="TagSearch Web", version="0.1.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(frontend_router)
    app.add_api_route("/search", search, methods=["POST"])
    app.add_api_route("/targets", list_targets, methods=["GET"])
    return app


async def search(
    payload: SearchPayload,
    config: AppConfig = Depends(get_config),
    controller: SearchController = Depends(get_controller),
) -> dict[str, Any]:
    if not payload.query.strip():
        raise HTTPException(status_code=400, detail="Empty query")
    if payload.source != ALL and payload.source not in config.sources:
        raise HTTPException(status_code=422, detail=f"Unknown source: {payload.source}")

    facets = FacetSelection(media_type=payload.media_type.value, source=payload.source)
    results = await controller.search(payload.query, payload.db or None, facets)

    columns = columns_for_policy(config.column_policy, results)
    rows = build_rows(columns, results)
    return {
        "results": [result.to_dict() for result in results],
        "columns": [{"id": column.id, "header": column.header} for column in columns],
        "rows": [[cell.to_dict() for cell in row] for row in rows],
        "html": render_results(columns, rows),
        "error": controller.error,
        "error_html": render_error(controller.error),
    }


async def list_targets(config: AppConfig = Depends(get_config)) -> dict[str, List[str]]:
    return {
        "targets": config.target_names,
        "media_types": [media.value for media in MediaType],
        "sources": [ALL, *config.sources],
    }


app = create_app()
