# preview_mode/core/errors.py
from __future__ import annotations


class PreviewModeError(Exception):
    """Base de los errores del modo preview. `status_code` es el HTTP a devolver."""

    status_code: int = 500


class ConfigurationMissing(PreviewModeError):
    # Se lanza en el arranque (settings o callback ausente), nunca por request
    pass


class UpstreamHttpError(PreviewModeError):
    """Respuesta no-2xx de WordPress o del sitio live."""

    def __init__(self, status: int, status_text: str, url: str):
        self.status = status
        self.status_text = status_text
        self.url = url
        self.status_code = status
        super().__init__(f"{status} - {status_text} - {url}")


class SlugNotFound(PreviewModeError):
    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"No post found with slug '{slug}'")


class TagNotFound(PreviewModeError):
    def __init__(self, tag: str):
        self.tag = tag
        super().__init__(f"No tag found with slug '{tag}'")


class ProxyNotConfigured(PreviewModeError):
    status_code = 405

    def __init__(self, message: str = "resourceUrl not defined"):
        super().__init__(message)
