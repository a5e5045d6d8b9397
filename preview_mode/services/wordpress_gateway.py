# preview_mode/services/wordpress_gateway.py
from __future__ import annotations

import copy
import json
import logging
import random
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from preview_mode.core.errors import SlugNotFound, TagNotFound
from preview_mode.core.settings import PreviewSettings
from preview_mode.schemas.preview import PreviewRequest
from preview_mode.schemas.wordpress import PostRecord, PostSummary, TagRow
from preview_mode.services.fetch import Fetcher

logger = logging.getLogger(__name__)

API_PREFIX = "/wp-json/wp/v2"
DIGEST_PAGE_SIZE = 100
NO_CONTENT_TEXT = "No content to preview"
DIGEST_TEMPLATE_PATH = Path(__file__).resolve().parent.parent / "data" / "digest_page.json"


@lru_cache(maxsize=1)
def _digest_template() -> PostRecord:
    with DIGEST_TEMPLATE_PATH.open(encoding="utf-8") as fh:
        return json.load(fh)


def _cachebust() -> str:
    return str(random.random())


# ===================== Digest =====================

def digest_list_item(post: PostSummary) -> str:
    return f'<li>{post.modified} - <a href="?postid={post.id}&postslug={post.slug}">{post.title.rendered}</a></li>'


def build_digest_record(posts: List[PostSummary], template: Optional[PostRecord] = None) -> PostRecord:
    """
    Arma el DigestRecord: copia profunda de la plantilla + lista de links.
    El orden es el de la API (orderby=modified), no se reordena.
    Sin posts, `content.rendered` es el texto fijo y las fechas quedan como en la plantilla.
    """
    record = copy.deepcopy(template if template is not None else _digest_template())
    content = record.setdefault("content", {})

    if not posts:
        content["rendered"] = NO_CONTENT_TEXT
        return record

    content["rendered"] = "<ul>" + "".join(digest_list_item(p) for p in posts) + "</ul>"
    record["date"] = posts[0].modified
    record["modified"] = posts[0].modified
    return record


# ===================== Gateway =====================

class WordPressGateway:
    def __init__(self, settings: PreviewSettings, fetcher: Fetcher):
        self.settings = settings
        self.fetcher = fetcher

    @property
    def api_base(self) -> str:
        return f"{self.settings.cms_base_url}{API_PREFIX}"

    # ---- URLs ----
    def post_by_id_url(self, post_id: str | int) -> str:
        return f"{self.api_base}/posts/{quote(str(post_id), safe='')}?_embed&cachebust={_cachebust()}"

    def posts_by_slug_url(self, slug: str) -> str:
        return f"{self.api_base}/posts?slug={quote(slug, safe='')}&_embed&cachebust={_cachebust()}"

    def tag_by_slug_url(self, tag_slug: str) -> str:
        return f"{self.api_base}/tags?slug={quote(tag_slug, safe='')}&_fields=id&cachebust={_cachebust()}"

    def digest_posts_url(self, tag_id: int | None) -> str:
        tag_part = f"tags={tag_id}&" if tag_id is not None else ""
        return (
            f"{self.api_base}/posts?{tag_part}per_page={DIGEST_PAGE_SIZE}"
            f"&orderby=modified&_fields=title,modified,id,slug&cachebust={_cachebust()}"
        )

    # ---- Lookups ----
    async def get_post_by_id(self, post_id: str | int) -> PostRecord:
        return await self.fetcher.get_json(self.post_by_id_url(post_id))

    async def find_post_by_slug(self, slug: str) -> PostRecord | None:
        rows = await self.fetcher.get_json(self.posts_by_slug_url(slug))
        if not rows:
            return None
        return rows[0]

    async def get_post_by_slug(self, slug: str) -> PostRecord:
        post = await self.find_post_by_slug(slug)
        if post is None:
            raise SlugNotFound(slug)
        return post

    async def resolve_tag_id(self) -> int | None:
        tag = self.settings.preview_tag
        if tag is None:
            return None
        if isinstance(tag, int):
            return tag

        rows = await self.fetcher.get_json(self.tag_by_slug_url(tag))
        if not rows:
            raise TagNotFound(tag)
        return TagRow.model_validate(rows[0]).id

    async def get_digest(self) -> PostRecord:
        tag_id = await self.resolve_tag_id()
        rows: List[Dict[str, Any]] = await self.fetcher.get_json(self.digest_posts_url(tag_id))
        posts = [PostSummary.model_validate(r) for r in rows or []]
        logger.info("digest: %s previewable posts (tag=%s)", len(posts), tag_id)
        return build_digest_record(posts)

    async def resolve_post(self, request: PreviewRequest) -> PostRecord:
        """postid gana sobre postslug; sin ninguno se arma el digest."""
        if request.post_id:
            return await self.get_post_by_id(request.post_id)
        if request.post_slug:
            return await self.get_post_by_slug(request.post_slug)
        return await self.get_digest()
