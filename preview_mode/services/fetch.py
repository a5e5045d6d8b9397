# preview_mode/services/fetch.py
from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from preview_mode.core.errors import UpstreamHttpError

logger = logging.getLogger(__name__)


class Fetcher:
    """
    GET saliente con reintentos fijos ante fallos de red (no ante status HTTP).
    Se abre un AsyncClient por llamada; `transport` permite inyectar un
    httpx.MockTransport en tests.
    """

    def __init__(
        self,
        *,
        retries: int = 3,
        retry_delay_seconds: float = 1.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.retries = max(1, int(retries))
        self.retry_delay_seconds = float(retry_delay_seconds)
        self._transport = transport

    async def _get_once(self, url: str) -> httpx.Response:
        async with httpx.AsyncClient(transport=self._transport, follow_redirects=True) as client:
            return await client.get(url)

    async def get(self, url: str) -> httpx.Response:
        for attempt in range(1, self.retries + 1):
            try:
                return await self._get_once(url)
            except httpx.TransportError as e:
                if attempt >= self.retries:
                    raise
                logger.warning("fetch %s failed (attempt %s/%s): %s", url, attempt, self.retries, e)
                await asyncio.sleep(self.retry_delay_seconds)
        raise RuntimeError("unreachable")  # pragma: no cover

    async def get_ok(self, url: str) -> httpx.Response:
        resp = await self.get(url)
        if not resp.is_success:
            raise UpstreamHttpError(resp.status_code, resp.reason_phrase, str(resp.url))
        return resp

    async def get_json(self, url: str) -> Any:
        resp = await self.get_ok(url)
        return resp.json()
