"""Semantic search orchestration."""

from __future__ import annotations

import logging
from typing import Callable, List, Protocol, Sequence

import numpy as np

from tagsearch.config import AppConfig
from tagsearch.errors import TagSearchError
from tagsearch.index.filters import build_filter
from tagsearch.models import DatabaseTarget, FacetSelection, SearchResult

LOGGER = logging.getLogger(__name__)

SEARCH_FAILED = "Search failed"


class Embedder(Protocol):
    async def embed(self, text: str) -> np.ndarray: ...


class IndexClient(Protocol):
    async def query(
        self,
        vector: Sequence[float] | np.ndarray,
        top_k: int,
        *,
        include_vectors: bool = False,
        include_metadata: bool = True,
        filter: str | None = None,
    ) -> List[SearchResult]: ...


IndexFactory = Callable[[DatabaseTarget], IndexClient]


class SearchController:
    """Run a query through the embedding and index clients.

    Holds the state a page needs: the current results, whether a search is in
    flight and the last error. Each search gets a generation number; a search
    that finishes after a newer one was started leaves that state untouched so
    a slow response cannot replace fresher results.
    """

    def __init__(self, config: AppConfig, embedder: Embedder, index_factory: IndexFactory) -> None:
        self.config = config
        self.embedder = embedder
        self.index_factory = index_factory
        self.results: List[SearchResult] = []
        self.error: str | None = None
        self.searching = False
        self._generation = 0

    def can_submit(self, query: str, target_name: str | None = None) -> bool:
        if self.searching or not query.strip():
            return False
        if target_name is None:
            return bool(self.config.targets)
        return target_name in self.config.target_names

    async def search(
        self,
        query: str,
        target_name: str | None = None,
        facets: FacetSelection | None = None,
    ) -> List[SearchResult]:
        if not query.strip():
            return []

        facets = facets or FacetSelection()
        self._generation += 1
        generation = self._generation
        self.searching = True
        try:
            results = await self._run(query, target_name, facets)
        except TagSearchError as exc:
            LOGGER.error("Search error: %s", exc, exc_info=True)
            if generation == self._generation:
                self.results = []
                self.error = SEARCH_FAILED
            return []
        finally:
            if generation == self._generation:
                self.searching = False

        if generation == self._generation:
            self.results = results
            self.error = None
        else:
            LOGGER.info("Discarding stale results for %r", query)
        return results

    async def _run(
        self, query: str, target_name: str | None, facets: FacetSelection
    ) -> List[SearchResult]:
        target = self.config.get_target(target_name)
        embedding = await self.embedder.embed(query)
        filter_expr = build_filter(facets)
        index = self.index_factory(target)
        results = await index.query(
            embedding,
            self.config.top_k,
            include_vectors=False,
            include_metadata=True,
            filter=filter_expr,
        )
        LOGGER.info(
            "Query on %s (filter=%s) returned %d matches", target.name, filter_expr, len(results)
        )
        return list(results)
