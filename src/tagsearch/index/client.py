"""HTTP client for the hosted Upstash Vector query endpoint."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Sequence

import httpx
import numpy as np

from tagsearch.errors import IndexQueryError
from tagsearch.models import DatabaseTarget, SearchResult

LOGGER = logging.getLogger(__name__)


class VectorIndexClient:
    """Query a single vector index over its REST API.

    Results keep the order returned by the service; nothing is re-sorted here.
    """

    def __init__(
        self,
        target: DatabaseTarget,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.target = target
        try:
            self._client = httpx.AsyncClient(
                base_url=target.url,
                headers={"Authorization": f"Bearer {target.token}"},
                timeout=timeout,
                transport=transport,
            )
        except httpx.InvalidURL as exc:
            raise IndexQueryError(f"Index {target.name!r} has an invalid URL: {exc}") from exc

    async def query(
        self,
        vector: Sequence[float] | np.ndarray,
        top_k: int,
        *,
        include_vectors: bool = False,
        include_metadata: bool = True,
        filter: str | None = None,
    ) -> List[SearchResult]:
        payload: Dict[str, Any] = {
            "vector": [float(value) for value in vector],
            "topK": top_k,
            "includeVectors": include_vectors,
            "includeMetadata": include_metadata,
        }
        if filter:
            payload["filter"] = filter

        try:
            response = await self._client.post("/query", json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as exc:
            raise IndexQueryError(
                f"Index {self.target.name!r} returned HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise IndexQueryError(f"Index {self.target.name!r} unreachable: {exc}") from exc
        except ValueError as exc:
            raise IndexQueryError(f"Index {self.target.name!r} returned invalid JSON") from exc

        return self._parse(body)[:top_k]

    def _parse(self, body: Any) -> List[SearchResult]:
        if not isinstance(body, dict):
            raise IndexQueryError("Malformed index response: expected an object")
        if body.get("error"):
            raise IndexQueryError(f"Index error: {body['error']}")
        matches = body.get("result")
        if not isinstance(matches, list):
            raise IndexQueryError("Malformed index response: missing 'result' list")
        try:
            return [SearchResult.from_payload(match) for match in matches]
        except ValueError as exc:
            raise IndexQueryError(f"Malformed index match: {exc}") from exc

    async def close(self) -> None:
        await self._client.aclose()


class IndexClientFactory:
    """Create and cache one ``VectorIndexClient`` per target."""

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.timeout = timeout
        self.transport = transport
        self._clients: Dict[str, VectorIndexClient] = {}

    def __call__(self, target: DatabaseTarget) -> VectorIndexClient:
        client = self._clients.get(target.name)
        if client is None:
            LOGGER.debug("Creating index client for %s", target.name)
            client = VectorIndexClient(target, timeout=self.timeout, transport=self.transport)
            self._clients[target.name] = client
        return client

    async def close(self) -> None:
        for client in self._clients.values():
            await client.close()
        self._clients.clear()
