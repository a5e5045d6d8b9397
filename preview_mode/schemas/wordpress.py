# preview_mode/schemas/wordpress.py
# Forma mínima de las filas de WordPress que usa el digest.
# Los posts completos (PostRecord) viajan como dict sin normalizar.
from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict

PostRecord = Dict[str, Any]


class Rendered(BaseModel):
    rendered: str = ""


class PostSummary(BaseModel):
    """Fila de `/posts?_fields=title,modified,id,slug`."""

    model_config = ConfigDict(extra="ignore")

    id: int
    slug: str = ""
    modified: str = ""
    title: Rendered = Rendered()


class TagRow(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
