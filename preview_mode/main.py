from __future__ import annotations

from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from preview_mode.core.config import create_app
from preview_mode.core.logging import configure_logging

configure_logging()

app = create_app()

app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")
