# preview_mode/routing/router.py
from __future__ import annotations

import logging
import re
from typing import Optional

from preview_mode.core.errors import ProxyNotConfigured
from preview_mode.core.settings import PreviewSettings
from preview_mode.routing.outcome import (
    ErrorOutcome,
    LookupSlug,
    Outcome,
    ProxyResource,
    Redirect,
    RenderDigest,
    RenderSingle,
)
from preview_mode.schemas.preview import PreviewRequest
from preview_mode.services.wordpress_gateway import WordPressGateway

logger = logging.getLogger(__name__)

SLUG_SEGMENT_RE = re.compile(r"[A-Za-z0-9|-]+")


def normalize_path(original_path: Optional[str]) -> str | None:
    """Quita query string y fragmento. None si no vino el header."""
    if original_path is None:
        return None
    path = original_path.split("?", 1)[0].split("#", 1)[0]
    return path or "/"


def first_path_segment(original_path: Optional[str]) -> str:
    """'/my-post/foo?x=1' -> 'my-post'"""
    path = normalize_path(original_path) or ""
    return path.lstrip("/").split("/", 1)[0]


def is_slug_candidate(segment: str) -> bool:
    return bool(segment) and SLUG_SEGMENT_RE.fullmatch(segment) is not None


def fallback_outcome(path: str, settings: PreviewSettings) -> Outcome:
    """Nada que previsualizar: se manda al sitio live (proxy o 301) o 405."""
    if not settings.live_resource_base_url:
        return ErrorOutcome(ProxyNotConfigured.status_code, str(ProxyNotConfigured()))
    if settings.proxy_strategy == "redirect":
        return Redirect(path)
    return ProxyResource(path)


def plan_route(request: PreviewRequest, settings: PreviewSettings) -> Outcome:
    """
    Decisión pura (sin I/O), gana la regla más específica:

    1. postid / postslug en la query -> RenderSingle (el path se ignora)
    2. sin header o path "/"          -> RenderDigest
    3. primer segmento con forma de slug -> LookupSlug
    4. resto                          -> fallback_outcome
    """
    if request.post_id or request.post_slug:
        return RenderSingle(post_id=request.post_id, post_slug=request.post_slug)

    path = normalize_path(request.original_path)
    if path is None or path == "/":
        return RenderDigest()

    segment = first_path_segment(path)
    if is_slug_candidate(segment):
        return LookupSlug(slug=segment, path=request.original_path or path)

    return fallback_outcome(request.original_path or path, settings)


async def route(request: PreviewRequest, settings: PreviewSettings, gateway: WordPressGateway) -> Outcome:
    outcome = plan_route(request, settings)
    if not isinstance(outcome, LookupSlug):
        return outcome

    post = await gateway.find_post_by_slug(outcome.slug)
    # fila sin id: no hay a qué post renderizar
    if post is None or post.get("id") is None:
        logger.info("no post with slug %r, falling back for %s", outcome.slug, outcome.path)
        return fallback_outcome(outcome.path, settings)

    return RenderSingle(post_id=str(post.get("id")), post_slug=post.get("slug") or outcome.slug)
