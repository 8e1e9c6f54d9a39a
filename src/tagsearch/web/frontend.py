"""HTML frontend for the TagSearch web UI."""

from __future__ import annotations

from importlib.resources import files

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from tagsearch.config import AppConfig
from tagsearch.models import ALL, MediaType
from tagsearch.web.dependencies import get_config
from tagsearch.web.render import render_options

router = APIRouter()

MEDIA_LABELS = {ALL: "All media", MediaType.VIDEO.value: "Video", MediaType.IMAGE.value: "Image"}


def _load_template() -> str:
    template = files("tagsearch.web").joinpath("templates", "index.html")
    return template.read_text(encoding="utf-8")


def render_page(config: AppConfig) -> str:
    names = config.target_names
    return (
        _load_template()
        .replace("{{TARGET_OPTIONS}}", render_options(names, names[0] if names else None))
        .replace(
            "{{MEDIA_OPTIONS}}",
            render_options([media.value for media in MediaType], ALL, labels=MEDIA_LABELS),
        )
        .replace(
            "{{SOURCE_OPTIONS}}",
            render_options([ALL, *config.sources], ALL, labels={ALL: "All sources"}),
        )
    )


@router.get("/", response_class=HTMLResponse)
async def index(config: AppConfig = Depends(get_config)) -> HTMLResponse:
    return HTMLResponse(content=render_page(config))
