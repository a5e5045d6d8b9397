# preview_mode/services/proxy_service.py
from __future__ import annotations

import logging

from preview_mode.core.errors import ProxyNotConfigured
from preview_mode.core.settings import PreviewSettings
from preview_mode.schemas.preview import FunctionResponse
from preview_mode.services.fetch import Fetcher

logger = logging.getLogger(__name__)


def live_url(settings: PreviewSettings, path: str) -> str:
    if not settings.live_resource_base_url:
        raise ProxyNotConfigured()
    if not path.startswith("/"):
        path = "/" + path
    return f"{settings.live_resource_base_url}{path}"


async def proxy_resource(settings: PreviewSettings, fetcher: Fetcher, path: str) -> FunctionResponse:
    """Trae el recurso del sitio live y lo devuelve tal cual (content-type + bytes)."""
    url = live_url(settings, path)
    resp = await fetcher.get_ok(url)
    headers = {}
    content_type = resp.headers.get("content-type")
    if content_type:
        headers["Content-Type"] = content_type
    logger.debug("proxied %s (%s, %s bytes)", url, content_type, len(resp.content))
    return FunctionResponse(status_code=resp.status_code, headers=headers, body=resp.content, is_raw=True)


def redirect_resource(settings: PreviewSettings, path: str) -> FunctionResponse:
    return FunctionResponse(status_code=301, headers={"Location": live_url(settings, path)}, body="")
