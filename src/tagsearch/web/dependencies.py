"""Dependency providers for the FastAPI endpoints.

Shared clients are created once in the application lifespan and stored on
``app.state``; endpoints receive them through ``Depends`` so tests can swap in
fakes with ``app.dependency_overrides``.
"""

from __future__ import annotations

from fastapi import Request

from tagsearch.config import AppConfig
from tagsearch.embedding.encoder import EmbeddingModel
from tagsearch.index.client import IndexClientFactory
from tagsearch.index.search import SearchController


def get_config(request: Request) -> AppConfig:
    return request.app.state.config


def get_embedder(request: Request) -> EmbeddingModel:
    return request.app.state.embedder


def get_index_factory(request: Request) -> IndexClientFactory:
    return request.app.state.index_factory


def get_controller(request: Request) -> SearchController:
    """A fresh controller per request; page state lives in the browser."""
    state = request.app.state
    return SearchController(state.config, state.embedder, state.index_factory)
