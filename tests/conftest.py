# tests/conftest.py
from __future__ import annotations

import asyncio
import json
import os

# La app lee WORDPRESS_SITE al importarse; lo fijamos antes de cualquier import
os.environ.setdefault("WORDPRESS_SITE", "https://cms.example")

from typing import Any, Dict, List, Tuple

import httpx
import pytest
from fastapi.testclient import TestClient

from preview_mode.core.config import create_app
from preview_mode.core.settings import PreviewSettings, Settings
from preview_mode.services.fetch import Fetcher
from preview_mode.services.wordpress_gateway import WordPressGateway

CMS = "https://cms.example"
LIVE = "https://live.example"
WP = f"{CMS}/wp-json/wp/v2"
DIGEST_FIELDS = "per_page=100&orderby=modified&_fields=title,modified,id,slug"


def url_key(url: httpx.URL | str) -> str:
    """scheme://host/path?query sin `cachebust` (es aleatorio en cada llamada)."""
    u = httpx.URL(str(url))
    params = [f"{k}={v}" for k, v in u.params.multi_items() if k != "cachebust"]
    return f"{u.scheme}://{u.host}{u.path}?{'&'.join(params)}"


class FakeUpstream:
    """Doble de WordPress y del sitio live sobre httpx.MockTransport."""

    def __init__(self):
        self.routes: Dict[str, Tuple[int, bytes, Dict[str, str]]] = {}
        self.calls: List[httpx.Request] = []

    def add_json(self, url: str, payload: Any, status: int = 200) -> None:
        self.routes[url_key(url)] = (status, json.dumps(payload).encode("utf-8"), {"content-type": "application/json"})

    def add_bytes(self, url: str, content: bytes, content_type: str, status: int = 200) -> None:
        self.routes[url_key(url)] = (status, content, {"content-type": content_type})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        status, content, headers = self.routes.get(url_key(request.url), (404, b"[]", {"content-type": "application/json"}))
        return httpx.Response(status, content=content, headers=headers)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def called_keys(self) -> List[str]:
        return [url_key(r.url) for r in self.calls]


def run(coro):
    return asyncio.run(coro)


@pytest.fixture()
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture()
def preview_settings() -> PreviewSettings:
    return PreviewSettings(cms_base_url=CMS)


@pytest.fixture()
def gateway(upstream: FakeUpstream, preview_settings: PreviewSettings) -> WordPressGateway:
    return WordPressGateway(preview_settings, Fetcher(retries=1, retry_delay_seconds=0, transport=upstream.transport))


@pytest.fixture()
def make_client(upstream: FakeUpstream):
    """Cliente contra una app nueva con los settings que pida el test."""

    def _make(**overrides) -> TestClient:
        ps = PreviewSettings(cms_base_url=CMS, **overrides)
        app = create_app(ps, app_settings=Settings(FETCH_RETRY_DELAY_SECONDS=0), transport=upstream.transport)
        return TestClient(app)

    return _make
