"""HTML fragments for selectors and the results table."""

from __future__ import annotations

import html
from typing import Iterable, Sequence

from tagsearch.web.schema import Cell, Column


def render_options(
    values: Iterable[str], selected: str | None = None, *, labels: dict[str, str] | None = None
) -> str:
    labels = labels or {}
    options = []
    for value in values:
        attrs = ' selected' if value == selected else ""
        label = labels.get(value, value)
        options.append(
            f'<option value="{html.escape(value, quote=True)}"{attrs}>{html.escape(label)}</option>'
        )
    return "".join(options)


def render_results(columns: Sequence[Column], rows: Sequence[Sequence[Cell]]) -> str:
    """Render the results panel; an empty result set renders nothing."""
    if not rows or not columns:
        return ""

    header = "".join(f"<th>{html.escape(column.header)}</th>" for column in columns)
    body = "".join(
        "<tr>" + "".join(f"<td>{cell.to_html()}</td>" for cell in row) + "</tr>" for row in rows
    )
    count = len(rows)
    return (
        '<section class="results">'
        '<div class="results-header"><h2>Results</h2>'
        f"<p>Found {count} matches</p></div>"
        '<div class="table-wrap"><table>'
        f"<thead><tr>{header}</tr></thead>"
        f"<tbody>{body}</tbody>"
        "</table></div></section>"
    )


def render_error(message: str | None) -> str:
    if not message:
        return ""
    return f'<p class="error" role="alert">{html.escape(message)}</p>'
