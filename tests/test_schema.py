"""Tests for column derivation and cell rendering."""

from __future__ import annotations

import pytest

from conftest import make_result
from tagsearch.models import KNOWN_FIELDS, SearchResult
from tagsearch.web.schema import (
    ChipsCell,
    ImageCell,
    NotApplicableCell,
    TextCell,
    VideoCell,
    build_columns,
    build_fixed_columns,
    build_rows,
    classify_media,
    columns_for_policy,
    filename_from_url,
    humanize,
    render_media,
    render_value,
)


class TestHumanize:
    @pytest.mark.parametrize(
        ("name", "header"),
        [("job_id", "Job id"), ("tags", "Tags"), ("media_type", "Media type"), ("", "")],
    )
    def test_humanize(self, name: str, header: str) -> None:
        assert humanize(name) == header


class TestMedia:
    """Test media detection and rendering."""

    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("https://x/clip.mp4", "video"),
            ("https://x/clip.WEBM", "video"),
            ("https://x/clip.ogg", "video"),
            ("https://x/photo.png", "image"),
            ("https://x/photo.JPEG", "image"),
            ("https://x/photo.webp", "image"),
            ("https://x/notes.txt", None),
            ("https://x/clip.mp4?sig=1", None),
            ("", None),
        ],
    )
    def test_classify_media(self, url: str, expected: str | None) -> None:
        assert classify_media(url) == expected

    def test_render_media_picks_renderer(self) -> None:
        """png -> image, mp4 -> video, txt -> raw URL text."""
        assert render_media("https://x/a.png") == ImageCell("https://x/a.png")
        assert render_media("https://x/a.mp4") == VideoCell("https://x/a.mp4")
        assert render_media("https://x/a.txt") == TextCell("https://x/a.txt")

    def test_render_media_html(self) -> None:
        assert "<video controls" in VideoCell("https://x/a.mp4").to_html()
        assert "<img" in ImageCell("https://x/a.png").to_html()
        assert TextCell("https://x/a.txt").to_html() == "https://x/a.txt"

    def test_media_url_is_escaped(self) -> None:
        html = ImageCell('https://x/"onerror="alert(1).png').to_html()
        assert '"onerror="' not in html

    def test_render_media_missing_url(self) -> None:
        assert render_media(None) == TextCell("")

    def test_filename_from_url(self) -> None:
        assert filename_from_url("https://cdn/a/b/clip.mp4") == "clip.mp4"
        assert filename_from_url("clip.mp4") == "clip.mp4"


class TestRenderValue:
    """Test metadata value rendering."""

    def test_comma_separated_becomes_chips(self) -> None:
        cell = render_value("tags", "a, b, c")
        assert isinstance(cell, ChipsCell)
        assert cell.items == ("a", "b", "c")

    def test_chip_html_has_one_span_per_item(self) -> None:
        html = render_value("tags", "a, b, c").to_html()
        assert html.count('class="chip chip-tag"') == 3
        assert html.index(">a<") < html.index(">b<") < html.index(">c<")

    def test_chip_variants(self) -> None:
        assert render_value("categories", "x, y").variant == "chip-category"
        assert render_value("tags", "x, y").variant == "chip-tag"
        assert render_value("actions", "x, y").variant == "chip-other"

    def test_plain_value(self) -> None:
        assert render_value("job_id", "job-1") == TextCell("job-1")
        assert render_value("count", 3) == TextCell("3")

    def test_list_value_becomes_chips(self) -> None:
        assert render_value("labels", ["x", "y"]).items == ("x", "y")

    def test_missing_value(self) -> None:
        assert render_value("tags", None) == TextCell("")
        assert render_value("tags", None, missing=NotApplicableCell()) == NotApplicableCell()

    def test_chip_text_is_escaped(self) -> None:
        assert "<script>" not in render_value("tags", "<script>, b").to_html()


class TestBuildColumns:
    """Test the result-driven column policy."""

    def test_empty_results_have_no_columns(self) -> None:
        assert build_columns([]) == []

    def test_column_order(self) -> None:
        """Media, filename, score, then metadata keys in encounter order without url."""
        result = SearchResult(
            id="1",
            score=0.123456,
            metadata={"job_id": "j", "url": "https://x/a.png", "tags": "a, b", "source": "luke"},
        )
        columns = build_columns([result])

        assert [column.id for column in columns] == [
            "media",
            "filename",
            "score",
            "metadata.job_id",
            "metadata.tags",
            "metadata.source",
        ]
        assert [column.header for column in columns] == [
            "Media",
            "Filename",
            "Score",
            "Job id",
            "Tags",
            "Source",
        ]

    def test_first_result_decides_columns(self) -> None:
        first = SearchResult(id="1", score=0.5, metadata={"url": "u.png", "tags": "a"})
        second = SearchResult(id="2", score=0.4, metadata={"url": "v.png", "labels": "x"})
        headers = [column.header for column in build_columns([first, second])]
        assert "Labels" not in headers

    def test_rows(self) -> None:
        result = make_result("7", 0.123456, tags="a, b, c")
        columns = build_columns([result])
        [row] = build_rows(columns, [result])

        assert row[0] == VideoCell("https://cdn.example.com/media/7.mp4")
        assert row[1] == TextCell("7.mp4")
        assert row[2] == TextCell("0.1235")
        assert row[3] == ChipsCell(("a", "b", "c"), variant="chip-tag")
        assert row[4] == TextCell("job-7")

    def test_missing_key_on_later_row(self) -> None:
        first = SearchResult(id="1", score=0.5, metadata={"url": "u.png", "tags": "a"})
        second = SearchResult(id="2", score=0.4, metadata={"url": "v.png"})
        rows = build_rows(build_columns([first, second]), [first, second])
        assert rows[1][3] == TextCell("")


class TestFixedColumns:
    """Test the schema-driven column policy."""

    def test_columns_are_stable(self) -> None:
        columns = build_fixed_columns()
        expected = [humanize(name) for name in KNOWN_FIELDS if name != "url"]
        assert [column.header for column in columns][3:] == expected

    def test_missing_values_are_not_applicable(self) -> None:
        result = SearchResult(id="1", score=0.5, metadata={"url": "u.png"})
        [row] = build_rows(build_fixed_columns(), [result])
        assert row[3:] == [NotApplicableCell()] * (len(KNOWN_FIELDS) - 1)
        assert row[3].to_text() == "N/A"

    def test_policy_selection(self) -> None:
        assert columns_for_policy("result", []) == []
        assert len(columns_for_policy("fixed", [])) == len(KNOWN_FIELDS) + 2
        with pytest.raises(ValueError):
            columns_for_policy("mixed", [])
