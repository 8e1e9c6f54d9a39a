"""Translate facet selections into Upstash Vector filter expressions."""

from __future__ import annotations

from enum import Enum
from typing import Any, List

from tagsearch.models import ALL, FacetSelection

MEDIA_TYPE_FIELD = "media_type"
SOURCE_FIELD = "source"


def _clause(field: str, value: Any) -> str:
    if isinstance(value, Enum):
        value = value.value
    # Quotes inside ``value`` are not escaped; callers pass enumerated values only.
    return f'{field} = "{value}"'


def build_filter(facets: FacetSelection) -> str | None:
    """Return an ``AND``-joined filter, or ``None`` when every facet is ``all``."""
    clauses: List[str] = []
    if facets.media_type and facets.media_type != ALL:
        clauses.append(_clause(MEDIA_TYPE_FIELD, facets.media_type))
    if facets.source and facets.source != ALL:
        clauses.append(_clause(SOURCE_FIELD, facets.source))
    if not clauses:
        return None
    return " AND ".join(clauses)
