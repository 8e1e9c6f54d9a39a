"""Shared fixtures: fake embedding and index clients."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any, Dict, List
from unittest.mock import AsyncMock, MagicMock

import numpy as np
import pytest

from tagsearch.config import AppConfig
from tagsearch.models import DatabaseTarget, SearchResult


def make_result(result_id: str = "1", score: float = 0.9, **metadata: Any) -> SearchResult:
    metadata.setdefault("url", f"https://cdn.example.com/media/{result_id}.mp4")
    metadata.setdefault("job_id", f"job-{result_id}")
    return SearchResult(id=result_id, score=score, metadata=metadata)


def openai_response(vector: List[float]) -> SimpleNamespace:
    return SimpleNamespace(data=[SimpleNamespace(embedding=vector)])


@pytest.fixture
def targets() -> tuple[DatabaseTarget, ...]:
    return (
        DatabaseTarget(name="Combined & Concatenated", url="https://db1.example.com", token="t1"),
        DatabaseTarget(name="Categories Only", url="https://db2.example.com", token="t2"),
    )


@pytest.fixture
def config(targets: tuple[DatabaseTarget, ...]) -> AppConfig:
    return AppConfig(targets=targets, openai_api_key="sk-test", sources=("luke", "archive"))


@pytest.fixture
def embedder() -> MagicMock:
    mock = MagicMock()
    mock.embed = AsyncMock(return_value=np.zeros(512, dtype="float32"))
    return mock


class FakeIndexFactory:
    """Records the target and returns a shared fake index client."""

    def __init__(self, results: List[SearchResult] | None = None) -> None:
        self.index = MagicMock()
        self.index.query = AsyncMock(return_value=list(results or []))
        self.calls: List[DatabaseTarget] = []

    def __call__(self, target: DatabaseTarget) -> MagicMock:
        self.calls.append(target)
        return self.index

    @property
    def query_kwargs(self) -> Dict[str, Any]:
        return self.index.query.call_args.kwargs


@pytest.fixture
def index_factory() -> FakeIndexFactory:
    return FakeIndexFactory([make_result("1", 0.95), make_result("2", 0.8)])
