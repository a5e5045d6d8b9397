# preview_mode/core/config.py
from __future__ import annotations

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from preview_mode.api import function, health
from preview_mode.api.function import PreviewContext
from preview_mode.core.settings import PreviewSettings, Settings, settings as default_settings
from preview_mode.services.fetch import Fetcher


def create_app(
    preview_settings: PreviewSettings | None = None,
    *,
    app_settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """
    Arma la app de la función. La configuración se valida aquí: si falta
    WORDPRESS_SITE, ConfigurationMissing corta el arranque.
    """
    app_settings = app_settings or default_settings
    preview_settings = preview_settings or app_settings.preview_settings()

    app = FastAPI(title=app_settings.APP_NAME, docs_url=None, redoc_url=None, openapi_url=None)

    if app_settings.BACKEND_CORS_ORIGINS:
        origins = app_settings.CORS_ORIGINS
        allow_credentials = True
        if "*" in origins:
            origins = ["*"]
            allow_credentials = False
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=allow_credentials,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    fetcher = Fetcher(
        retries=app_settings.FETCH_RETRIES,
        retry_delay_seconds=app_settings.FETCH_RETRY_DELAY_SECONDS,
        transport=transport,
    )
    app.state.preview = PreviewContext.build(preview_settings, fetcher)

    # health antes del catch-all, si no se lo come la función
    app.include_router(health.router, prefix=app_settings.HEALTH_PATH, tags=["health"])
    app.include_router(function.router)
    return app
