# preview_mode/core/settings.py
from __future__ import annotations

import json
from typing import List, Literal, Union

from pydantic import AnyHttpUrl, BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from preview_mode.core.errors import ConfigurationMissing

ProxyStrategy = Literal["proxy", "redirect"]


class PreviewSettings(BaseModel):
    """
    Configuración inmutable del modo preview. Se construye una sola vez y se
    comparte por referencia con el router, el gateway y el renderer.
    """

    model_config = ConfigDict(frozen=True)

    cms_base_url: str
    live_resource_base_url: str | None = None
    # slug del tag de preview, o su id numérico (se salta el lookup)
    preview_tag: Union[int, str, None] = None
    proxy_strategy: ProxyStrategy = "proxy"
    function_name: str = "possum"
    page_path: str = "/GeneratePreviewModePath"

    @field_validator("cms_base_url", "live_resource_base_url", mode="before")
    @classmethod
    def _strip_trailing_slash(cls, v):
        if isinstance(v, str):
            v = v.strip().rstrip("/")
            return v or None
        return v

    @field_validator("preview_tag", mode="before")
    @classmethod
    def _normalize_tag(cls, v):
        # "12" desde env -> 12; "" -> None
        if isinstance(v, str):
            s = v.strip()
            if not s:
                return None
            return int(s) if s.isdigit() else s
        return v


class Settings(BaseSettings):
    # ============== App ==============
    APP_NAME: str = "WordPress Preview Mode"
    ENV: str = "dev"
    DEBUG: bool = False
    HEALTH_PATH: str = "/__preview/health"

    # ============== WordPress / live site ==============
    WORDPRESS_SITE: str | None = None
    RESOURCE_URL: str | None = None
    PREVIEW_WORDPRESS_TAG: str | None = None
    PROXY_STRATEGY: ProxyStrategy = "proxy"

    # ============== Serverless page ==============
    SERVERLESS_FUNCTION_NAME: str = "possum"
    PREVIEW_PAGE_PATH: str = "/GeneratePreviewModePath"

    # ============== Fetch retries ==============
    FETCH_RETRIES: int = Field(3, ge=1)
    FETCH_RETRY_DELAY_SECONDS: float = Field(1.0, ge=0)

    # ================= CORS =================
    BACKEND_CORS_ORIGINS: List[Union[str, AnyHttpUrl]] = []

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def _parse_cors(cls, v):
        """
        Acepta:
        - JSON list válido: '["https://a","http://b"]'
        - Lista con corchetes sin comillas: [https://a,http://b]
        - CSV sin corchetes: 'https://a,http://b'
        - Vacío / None -> []
        """
        if v in (None, "", [], ()):
            return []
        if isinstance(v, (list, tuple)):
            return list(v)

        if isinstance(v, str):
            s = v.strip()
            if not s:
                return []

            if s.startswith("[") and s.endswith("]"):
                try:
                    parsed = json.loads(s)
                    if isinstance(parsed, list):
                        return parsed
                except ValueError:
                    inner = s[1:-1].strip()
                    if not inner:
                        return []
                    return [item.strip().strip('"').strip("'") for item in inner.split(",") if item.strip()]

            return [item.strip() for item in s.split(",") if item.strip()]

        return v

    @property
    def CORS_ORIGINS(self) -> List[str]:
        return [str(x) for x in (self.BACKEND_CORS_ORIGINS or [])]

    def preview_settings(self) -> PreviewSettings:
        """
        Construye la configuración inmutable. Sin WORDPRESS_SITE no hay nada
        que previsualizar: falla en el arranque, nunca en una request.
        """
        if not self.WORDPRESS_SITE:
            raise ConfigurationMissing("WORDPRESS_SITE is not configured")
        return PreviewSettings(
            cms_base_url=self.WORDPRESS_SITE,
            live_resource_base_url=self.RESOURCE_URL,
            preview_tag=self.PREVIEW_WORDPRESS_TAG,
            proxy_strategy=self.PROXY_STRATEGY,
            function_name=self.SERVERLESS_FUNCTION_NAME,
            page_path=self.PREVIEW_PAGE_PATH,
        )

    # ============== Pydantic v2 ==============
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()
