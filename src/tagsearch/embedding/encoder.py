"""Query embeddings through the hosted OpenAI embeddings API."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
from openai import AsyncOpenAI, OpenAIError

from tagsearch.errors import EmbeddingError

DEFAULT_MODEL = "text-embedding-3-small"
DEFAULT_DIMENSIONS = 512

logger = logging.getLogger(__name__)


def sanitize_query(text: str) -> str:
    """Replace every line break with a single space."""
    return text.replace("\r\n", " ").replace("\n", " ").replace("\r", " ")


@dataclass(slots=True)
class EmbeddingConfig:
    model_name: str = DEFAULT_MODEL
    dimensions: int = DEFAULT_DIMENSIONS
    api_key: str | None = None
    timeout_seconds: float = 30.0


class EmbeddingModel:
    """Thin wrapper around ``AsyncOpenAI.embeddings`` for query embeddings.

    The SDK client is created lazily unless one is passed in, so tests can
    inject a fake exposing ``embeddings.create``. Failed calls are not retried.
    """

    def __init__(
        self, config: EmbeddingConfig | None = None, client: AsyncOpenAI | None = None
    ) -> None:
        self.config = config or EmbeddingConfig()
        self._client = client

    @property
    def dimension(self) -> int:
        return self.config.dimensions

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            try:
                self._client = AsyncOpenAI(
                    api_key=self.config.api_key,
                    timeout=self.config.timeout_seconds,
                    max_retries=0,
                )
            except OpenAIError as exc:
                # Raised by the SDK when no API key is available.
                raise EmbeddingError(f"Unable to create embeddings client: {exc}") from exc
        return self._client

    async def embed(self, text: str) -> np.ndarray:
        """Return a float32 embedding of ``text`` with ``dimension`` entries."""
        try:
            response = await self.client.embeddings.create(
                model=self.config.model_name,
                input=sanitize_query(text),
                dimensions=self.config.dimensions,
            )
        except OpenAIError as exc:
            logger.error("Embedding request failed: %s", exc)
            raise EmbeddingError(f"Embedding request failed: {exc}") from exc

        data = getattr(response, "data", None)
        if not data:
            raise EmbeddingError("Embedding response contained no data")

        vector = np.asarray(data[0].embedding, dtype="float32")
        if vector.ndim != 1 or vector.shape[0] != self.config.dimensions:
            raise EmbeddingError(
                f"Expected {self.config.dimensions} dimensions, got {vector.shape}"
            )
        logger.debug("Embedded query with %s (%d dims)", self.config.model_name, vector.shape[0])
        return vector

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
