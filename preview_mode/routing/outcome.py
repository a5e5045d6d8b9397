# preview_mode/routing/outcome.py
# Resultados posibles del ruteo de una request. Conjunto cerrado.
from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class RenderSingle:
    post_id: str | None = None
    post_slug: str | None = None


@dataclass(frozen=True)
class RenderDigest:
    pass


@dataclass(frozen=True)
class LookupSlug:
    """Primer segmento con forma de slug: hay que preguntarle a WordPress."""

    slug: str
    path: str


@dataclass(frozen=True)
class ProxyResource:
    path: str


@dataclass(frozen=True)
class Redirect:
    path: str


@dataclass(frozen=True)
class ErrorOutcome:
    status: int
    message: str


Outcome = Union[RenderSingle, RenderDigest, LookupSlug, ProxyResource, Redirect, ErrorOutcome]
