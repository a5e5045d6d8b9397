# preview_mode/web/renderer.py
# Página única renderizada on-demand (la "serverless page" del sitio estático).
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Mapping

from fastapi.templating import Jinja2Templates

from preview_mode.core.settings import PreviewSettings
from preview_mode.schemas.preview import FunctionResponse, PreviewRequest
from preview_mode.schemas.wordpress import PostRecord
from preview_mode.services.wordpress_gateway import WordPressGateway

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
PAGE_TEMPLATE = "preview.html"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def _rendered(post: Mapping[str, Any], key: str) -> str:
    val = post.get(key)
    if isinstance(val, dict):
        return str(val.get("rendered") or "")
    return str(val or "")


def page_context(post: PostRecord) -> Dict[str, Any]:
    """PostRecord de WordPress -> variables de la plantilla."""
    embedded = post.get("_embedded") or {}
    media = embedded.get("wp:featuredmedia") or []
    authors = embedded.get("author") or []
    return {
        "title": _rendered(post, "title"),
        "content": _rendered(post, "content"),
        "date": post.get("date") or "",
        "modified": post.get("modified") or "",
        "featured_image": (media[0] or {}).get("source_url") if media else None,
        "author": (authors[0] or {}).get("name") if authors else None,
        "post": post,
    }


class PreviewPage:
    def __init__(self, settings: PreviewSettings, gateway: WordPressGateway):
        self.settings = settings
        self.gateway = gateway

    def render_post(self, post: PostRecord) -> str:
        return templates.get_template(PAGE_TEMPLATE).render(**page_context(post))

    async def render(self, query: Mapping[str, Any]) -> FunctionResponse:
        request = PreviewRequest.from_query(query, original_path=self.settings.page_path)
        post = await self.gateway.resolve_post(request)
        return FunctionResponse(
            status_code=200,
            headers={"Content-Type": "text/html; charset=utf-8"},
            body=self.render_post(post),
        )
