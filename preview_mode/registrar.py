# preview_mode/registrar.py
# Registro de la página serverless en el generador estático + pasada de build.
from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Protocol, Union

from preview_mode.core.errors import ConfigurationMissing
from preview_mode.core.settings import PreviewSettings
from preview_mode.schemas.preview import PreviewRequest
from preview_mode.schemas.wordpress import PostRecord
from preview_mode.services.fetch import Fetcher
from preview_mode.services.wordpress_gateway import WordPressGateway

logger = logging.getLogger(__name__)

SERVERLESS_BUNDLER_PLUGIN = "serverless-bundler"
PREFETCH_COLLECTION = "previewModeServerlessItems"

# Sin páginas estáticas: solo se copian includes/data
COPY_FILTER = ["**/*", "!**"]


@dataclass
class RenderCandidate:
    """Ítem de la colección del sitio (página candidata a render)."""

    input_path: str
    output_path: str | None = None
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def serverless_query(self) -> Optional[Dict[str, Any]]:
        serverless = self.data.get("serverless")
        if not isinstance(serverless, dict):
            return None
        query = serverless.get("query")
        return query if isinstance(query, dict) else None


ItemMapper = Callable[[RenderCandidate, PostRecord], Union[None, Awaitable[None]]]
SettingsProvider = Callable[[], PreviewSettings]


class PluginHost(Protocol):
    """Lo que necesitamos del sistema de plugins del generador."""

    def add_plugin(self, name: str, options: Dict[str, Any]) -> None: ...

    def add_collection(self, name: str, callback: Callable[..., Any]) -> None: ...


@dataclass(frozen=True)
class ServerlessPageRegistration:
    name: str
    page_path: str
    input_dir: str = ""
    functions_dir: str = ""
    redirects: str = ""
    copy_options: Dict[str, List[str]] = field(default_factory=lambda: {"filter": list(COPY_FILTER)})

    def plugin_options(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "inputDir": self.input_dir,
            "functionsDir": self.functions_dir,
            "redirects": self.redirects,
            "copyOptions": {k: list(v) for k, v in self.copy_options.items()},
        }


def preview_data_elements(settings: PreviewSettings) -> Dict[str, Any]:
    """
    Permalink que la plantilla de preview agrega a su `data()`:
        {**otros_datos, **preview_data_elements(settings)}
    """
    return {"permalink": {settings.function_name: settings.page_path}}


async def prefetch_serverless_items(
    items: Iterable[RenderCandidate],
    gateway: WordPressGateway,
    mapper: ItemMapper,
) -> int:
    """
    Pasada de build: por cada ítem sin salida estática y con query serverless,
    resuelve el post y llama `mapper(item, post)` una sola vez. Devuelve cuántos.
    """
    count = 0
    for item in items:
        query = item.serverless_query
        if item.output_path or query is None:
            continue
        post = await gateway.resolve_post(PreviewRequest.from_query(query, original_path=item.input_path))
        result = mapper(item, post)
        if inspect.isawaitable(result):
            await result
        count += 1
    logger.info("prefetched %s serverless items", count)
    return count


def _default_gateway(settings: PreviewSettings) -> WordPressGateway:
    return WordPressGateway(settings, Fetcher())


def add_preview_mode(
    host: PluginHost,
    settings_provider: SettingsProvider,
    item_mapper: ItemMapper | None = None,
    *,
    gateway_factory: Callable[[PreviewSettings], WordPressGateway] | None = None,
) -> ServerlessPageRegistration:
    """
    Registra la página serverless en el host. Con `item_mapper` además registra
    la colección que precarga los datos de WordPress en build.

    Falla en el momento (ConfigurationMissing) si falta host o settings.
    """
    if host is None:
        raise ConfigurationMissing("A plugin host (site config) is required")
    if settings_provider is None or not callable(settings_provider):
        raise ConfigurationMissing("A settings function is required")

    preview_settings = settings_provider()
    if preview_settings is None:
        raise ConfigurationMissing("The settings function returned no settings")

    registration = ServerlessPageRegistration(
        name=preview_settings.function_name,
        page_path=preview_settings.page_path,
    )
    host.add_plugin(SERVERLESS_BUNDLER_PLUGIN, registration.plugin_options())

    if item_mapper is not None:
        gateway = (gateway_factory or _default_gateway)(preview_settings)

        async def _collection(items: Iterable[RenderCandidate]) -> List[RenderCandidate]:
            items = list(items)
            await prefetch_serverless_items(items, gateway, item_mapper)
            return items

        host.add_collection(PREFETCH_COLLECTION, _collection)

    logger.info("preview mode registered: %s -> %s", registration.name, registration.page_path)
    return registration
