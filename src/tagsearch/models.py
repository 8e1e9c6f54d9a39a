"""Core TagSearch data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping

ALL = "all"

# Metadata fields written by the tagging pipeline, in display order.
KNOWN_FIELDS: tuple[str, ...] = (
    "url",
    "job_id",
    "categories",
    "actions",
    "participants",
    "tags",
    "media_type",
    "source",
    "labels",
)


class MediaType(str, Enum):
    ALL = ALL
    VIDEO = "video"
    IMAGE = "image"


@dataclass(frozen=True, slots=True)
class DatabaseTarget:
    """A named vector index endpoint."""

    name: str
    url: str
    token: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class FacetSelection:
    """Facet values picked in the UI; ``"all"`` disables a facet."""

    media_type: str = ALL
    source: str = ALL


@dataclass(slots=True)
class SearchResult:
    """Single match returned by the vector index."""

    id: str
    score: float
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "SearchResult":
        """Build a result from one element of the index ``result`` array.

        Raises ``ValueError`` when the element lacks an id or a numeric score.
        """
        if not isinstance(payload, Mapping):
            raise ValueError(f"Expected an object, got {type(payload).__name__}")
        if "id" not in payload or "score" not in payload:
            raise ValueError("Match is missing 'id' or 'score'")
        score = payload["score"]
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            raise ValueError(f"Invalid score: {score!r}")
        metadata = payload.get("metadata") or {}
        if not isinstance(metadata, Mapping):
            raise ValueError("Match metadata must be an object")
        return cls(id=str(payload["id"]), score=float(score), metadata=dict(metadata))

    @property
    def url(self) -> str:
        return str(self.metadata.get("url") or "")

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "score": self.score, "metadata": dict(self.metadata)}
