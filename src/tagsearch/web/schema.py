"""Derive table columns and cell renderers from search result metadata."""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Sequence

from tagsearch.models import KNOWN_FIELDS, SearchResult

VIDEO_PATTERN = re.compile(r"\.(mp4|webm|ogg)$", re.IGNORECASE)
IMAGE_PATTERN = re.compile(r"\.(jpg|jpeg|png|gif|webp)$", re.IGNORECASE)

LIST_SEPARATOR = ", "
NOT_APPLICABLE = "N/A"

_CHIP_VARIANTS = {"categories": "chip-category", "tags": "chip-tag"}


@dataclass(frozen=True, slots=True)
class TextCell:
    text: str
    kind: str = field(default="text", init=False)

    def to_html(self) -> str:
        return html.escape(self.text)

    def to_text(self) -> str:
        return self.text

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "text": self.text}


@dataclass(frozen=True, slots=True)
class NotApplicableCell:
    kind: str = field(default="na", init=False)

    def to_html(self) -> str:
        return f'<span class="na">{NOT_APPLICABLE}</span>'

    def to_text(self) -> str:
        return NOT_APPLICABLE

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "text": NOT_APPLICABLE}


@dataclass(frozen=True, slots=True)
class ChipsCell:
    """Comma-separated metadata shown as one chip per item."""

    items: tuple[str, ...]
    variant: str = "chip-other"
    kind: str = field(default="chips", init=False)

    def to_html(self) -> str:
        chips = "".join(
            f'<span class="chip {self.variant}">{html.escape(item)}</span>' for item in self.items
        )
        return f'<div class="chips">{chips}</div>'

    def to_text(self) -> str:
        return LIST_SEPARATOR.join(self.items)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "items": list(self.items), "variant": self.variant}


@dataclass(frozen=True, slots=True)
class VideoCell:
    url: str
    kind: str = field(default="video", init=False)

    def to_html(self) -> str:
        return (
            f'<video controls class="media" src="{html.escape(self.url, quote=True)}">'
            "Your browser does not support video playback.</video>"
        )

    def to_text(self) -> str:
        return self.url

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "url": self.url}


@dataclass(frozen=True, slots=True)
class ImageCell:
    url: str
    kind: str = field(default="image", init=False)

    def to_html(self) -> str:
        return f'<img class="media" src="{html.escape(self.url, quote=True)}" alt="Result media">'

    def to_text(self) -> str:
        return self.url

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "url": self.url}


Cell = TextCell | NotApplicableCell | ChipsCell | VideoCell | ImageCell
Renderer = Callable[[Any], Cell]
Accessor = Callable[[SearchResult], Any]


@dataclass(frozen=True, slots=True)
class Column:
    id: str
    header: str
    accessor: Accessor
    renderer: Renderer

    def render(self, result: SearchResult) -> Cell:
        return self.renderer(self.accessor(result))


def humanize(name: str) -> str:
    """``job_id`` -> ``Job id``."""
    text = name.replace("_", " ")
    return text[:1].upper() + text[1:]


def classify_media(url: str) -> str | None:
    """Return ``"video"``, ``"image"`` or ``None`` based on the URL extension."""
    if VIDEO_PATTERN.search(url):
        return "video"
    if IMAGE_PATTERN.search(url):
        return "image"
    return None


def render_media(value: Any) -> Cell:
    url = "" if value is None else str(value)
    media = classify_media(url)
    if media == "video":
        return VideoCell(url)
    if media == "image":
        return ImageCell(url)
    return TextCell(url)


def filename_from_url(url: str) -> str:
    return url.split("/")[-1]


def render_filename(value: Any) -> Cell:
    return TextCell(filename_from_url("" if value is None else str(value)))


def render_score(value: Any) -> Cell:
    return TextCell(f"{float(value):.4f}")


def render_value(name: str, value: Any, *, missing: Cell | None = None) -> Cell:
    """Render a metadata value, splitting comma-separated strings into chips."""
    if value is None or value == "":
        return missing if missing is not None else TextCell("")
    variant = _CHIP_VARIANTS.get(name, "chip-other")
    if isinstance(value, str) and "," in value:
        return ChipsCell(tuple(value.split(LIST_SEPARATOR)), variant=variant)
    if isinstance(value, (list, tuple)):
        return ChipsCell(tuple(str(item) for item in value), variant=variant)
    return TextCell(str(value))


def _metadata_column(name: str, *, missing: Cell | None = None) -> Column:
    return Column(
        id=f"metadata.{name}",
        header=humanize(name),
        accessor=lambda result: result.metadata.get(name),
        renderer=lambda value: render_value(name, value, missing=missing),
    )


def _url(result: SearchResult) -> Any:
    return result.metadata.get("url")


def _leading_columns() -> List[Column]:
    return [
        Column(id="media", header="Media", accessor=_url, renderer=render_media),
        Column(id="filename", header="Filename", accessor=_url, renderer=render_filename),
        Column(id="score", header="Score", accessor=lambda r: r.score, renderer=render_score),
    ]


def build_columns(results: Sequence[SearchResult]) -> List[Column]:
    """Columns from the first result's metadata keys, in encounter order.

    The first result decides the layout; keys that only appear on later
    results are not shown.
    """
    if not results:
        return []
    columns = _leading_columns()
    for name in results[0].metadata:
        if name == "url":
            continue
        columns.append(_metadata_column(name))
    return columns


def build_fixed_columns(fields: Iterable[str] = KNOWN_FIELDS) -> List[Column]:
    """Stable columns for a declared field list; absent values show ``N/A``."""
    columns = _leading_columns()
    for name in fields:
        if name == "url":
            continue
        columns.append(_metadata_column(name, missing=NotApplicableCell()))
    return columns


def columns_for_policy(policy: str, results: Sequence[SearchResult]) -> List[Column]:
    if policy == "fixed":
        return build_fixed_columns()
    if policy == "result":
        return build_columns(results)
    raise ValueError(f"Unknown column policy: {policy!r}")


def build_rows(columns: Sequence[Column], results: Sequence[SearchResult]) -> List[List[Cell]]:
    return [[column.render(result) for column in columns] for result in results]
