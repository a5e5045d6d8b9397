# tests/test_router.py
from __future__ import annotations

import pytest

from conftest import CMS, LIVE, WP, run
from preview_mode.core.settings import PreviewSettings
from preview_mode.routing import (
    ErrorOutcome,
    LookupSlug,
    ProxyResource,
    Redirect,
    RenderDigest,
    RenderSingle,
    first_path_segment,
    is_slug_candidate,
    plan_route,
    route,
)
from preview_mode.schemas.preview import PreviewRequest
from preview_mode.services.fetch import Fetcher
from preview_mode.services.wordpress_gateway import WordPressGateway

BARE = PreviewSettings(cms_base_url=CMS)
WITH_LIVE = PreviewSettings(cms_base_url=CMS, live_resource_base_url=LIVE)
WITH_REDIRECT = PreviewSettings(cms_base_url=CMS, live_resource_base_url=LIVE, proxy_strategy="redirect")


@pytest.mark.parametrize("path", [None, "/", "/my-post", "/styles.css", "/a/b/c?x=1"])
def test_postid_always_wins(path):
    req = PreviewRequest(original_path=path, post_id="42", post_slug="other")
    assert plan_route(req, WITH_LIVE) == RenderSingle(post_id="42", post_slug="other")


def test_postslug_alone_renders_single():
    req = PreviewRequest(original_path="/styles.css", post_slug="hello")
    assert plan_route(req, BARE) == RenderSingle(post_id=None, post_slug="hello")


@pytest.mark.parametrize("path", [None, "/", "/?utm=1", ""])
def test_root_or_missing_header_is_digest(path):
    assert plan_route(PreviewRequest(original_path=path), BARE) == RenderDigest()


@pytest.mark.parametrize(
    "path,segment",
    [
        ("/my-post", "my-post"),
        ("/my-post/", "my-post"),
        ("/my-post/deeper/page", "my-post"),
        ("/my-post?x=1", "my-post"),
        ("/styles.css", "styles.css"),
        ("my-post", "my-post"),
    ],
)
def test_first_path_segment(path, segment):
    assert first_path_segment(path) == segment


@pytest.mark.parametrize("segment", ["my-post", "Post123", "a|b", "2021-news"])
def test_slug_candidates(segment):
    assert is_slug_candidate(segment)


@pytest.mark.parametrize("segment", ["styles.css", "my_post", "caf%C3%A9", "", "a b"])
def test_non_slug_segments(segment):
    assert not is_slug_candidate(segment)


def test_slug_shaped_path_needs_lookup():
    outcome = plan_route(PreviewRequest(original_path="/my-post"), BARE)
    assert outcome == LookupSlug(slug="my-post", path="/my-post")


@pytest.mark.parametrize("path", ["/styles.css", "/logo.png", "/my_post", "/a.b/c.png"])
def test_non_slug_path_skips_lookup(path):
    assert plan_route(PreviewRequest(original_path=path), WITH_LIVE) == ProxyResource(path)
    assert plan_route(PreviewRequest(original_path=path), WITH_REDIRECT) == Redirect(path)
    assert plan_route(PreviewRequest(original_path=path), BARE) == ErrorOutcome(405, "resourceUrl not defined")


def test_route_resolves_slug_to_post(upstream, gateway):
    upstream.add_json(f"{WP}/posts?slug=my-post&_embed", [{"id": 7, "slug": "my-post"}])

    outcome = run(route(PreviewRequest(original_path="/my-post"), gateway.settings, gateway))

    assert outcome == RenderSingle(post_id="7", post_slug="my-post")


def test_route_without_match_falls_back(upstream, gateway):
    upstream.add_json(f"{WP}/posts?slug=my-post&_embed", [])

    outcome = run(route(PreviewRequest(original_path="/my-post"), gateway.settings, gateway))

    assert outcome == ErrorOutcome(405, "resourceUrl not defined")


def test_route_non_slug_makes_no_cms_call(upstream, gateway):
    outcome = run(route(PreviewRequest(original_path="/styles.css"), gateway.settings, gateway))

    assert isinstance(outcome, ErrorOutcome)
    assert upstream.calls == []


def test_nested_asset_path_is_still_a_slug_candidate():
    # solo cuenta el primer segmento: /img/logo.png pregunta por "img"
    assert plan_route(PreviewRequest(original_path="/img/logo.png"), WITH_LIVE) == LookupSlug(
        slug="img", path="/img/logo.png"
    )


def test_slug_row_without_id_falls_back(upstream):
    gw = WordPressGateway(WITH_LIVE, Fetcher(retries=1, retry_delay_seconds=0, transport=upstream.transport))
    upstream.add_json(f"{WP}/posts?slug=my-post&_embed", [{"slug": "my-post"}])

    outcome = run(route(PreviewRequest(original_path="/my-post"), gw.settings, gw))

    assert outcome == ProxyResource("/my-post")
    assert all("/posts/None" not in str(r.url) for r in upstream.calls)
