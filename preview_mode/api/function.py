# preview_mode/api/function.py
# Handler único de la función: todo el tráfico del sitio entra por aquí.
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping

from fastapi import APIRouter, Request
from fastapi.responses import Response

from preview_mode.core.errors import PreviewModeError
from preview_mode.core.settings import PreviewSettings
from preview_mode.routing import (
    ErrorOutcome,
    Outcome,
    ProxyResource,
    Redirect,
    RenderDigest,
    RenderSingle,
    route,
)
from preview_mode.schemas.preview import FunctionRequest, FunctionResponse, PreviewRequest
from preview_mode.services.fetch import Fetcher
from preview_mode.services.proxy_service import proxy_resource, redirect_resource
from preview_mode.services.wordpress_gateway import WordPressGateway
from preview_mode.web.renderer import PreviewPage

logger = logging.getLogger(__name__)

router = APIRouter(include_in_schema=False)


@dataclass(frozen=True)
class PreviewContext:
    settings: PreviewSettings
    fetcher: Fetcher
    gateway: WordPressGateway
    page: PreviewPage

    @classmethod
    def build(cls, settings: PreviewSettings, fetcher: Fetcher) -> "PreviewContext":
        gateway = WordPressGateway(settings, fetcher)
        return cls(settings=settings, fetcher=fetcher, gateway=gateway, page=PreviewPage(settings, gateway))


async def execute_outcome(outcome: Outcome, ctx: PreviewContext) -> FunctionResponse:
    if isinstance(outcome, RenderSingle):
        query = PreviewRequest(post_id=outcome.post_id, post_slug=outcome.post_slug).to_query()
        return await ctx.page.render(query)
    if isinstance(outcome, RenderDigest):
        return await ctx.page.render({})
    if isinstance(outcome, ProxyResource):
        return await proxy_resource(ctx.settings, ctx.fetcher, outcome.path)
    if isinstance(outcome, Redirect):
        return redirect_resource(ctx.settings, outcome.path)
    if isinstance(outcome, ErrorOutcome):
        return FunctionResponse(
            status_code=outcome.status,
            headers={"Content-Type": "text/plain; charset=utf-8"},
            body=outcome.message,
        )
    raise TypeError(f"Unexpected outcome: {outcome!r}")


async def handle_function_request(req: FunctionRequest, ctx: PreviewContext) -> FunctionResponse:
    """
    Punto de entrada independiente del host. Cualquier error de WordPress o del
    sitio live se devuelve como JSON `{"error": ...}` con el status upstream (o 500).
    """
    try:
        preview_request = req.to_preview_request()
        outcome = await route(preview_request, ctx.settings, ctx.gateway)
        logger.info("%s -> %s", preview_request.original_path, type(outcome).__name__)
        return await execute_outcome(outcome, ctx)
    except PreviewModeError as e:
        logger.exception("preview request failed: %s", e)
        return FunctionResponse.error(e.status_code, str(e))
    except Exception as e:
        logger.exception("preview request failed: %s", e)
        return FunctionResponse.error(500, str(e))


# ===================== Adapter Starlette / FastAPI =====================

def function_request_from_starlette(request: Request) -> FunctionRequest:
    return FunctionRequest(headers=dict(request.headers), query=dict(request.query_params))


def to_starlette_response(resp: FunctionResponse) -> Response:
    # content-type va tal cual en headers para que Starlette no le agregue charset
    return Response(content=resp.body, status_code=resp.status_code, headers=dict(resp.headers))


def get_preview_context(request: Request) -> PreviewContext:
    return request.app.state.preview


@router.get("/{full_path:path}")
async def preview_function(request: Request, full_path: str = ""):
    ctx = get_preview_context(request)
    resp = await handle_function_request(function_request_from_starlette(request), ctx)
    return to_starlette_response(resp)


# ===================== Adapter dict (estilo Azure Functions) =====================

async def handle_invocation(event: Mapping[str, Any], ctx: PreviewContext) -> Dict[str, Any]:
    """`{"headers": {...}, "query": {...}}` -> `context.res`."""
    try:
        req = FunctionRequest(headers=dict(event.get("headers") or {}), query=dict(event.get("query") or {}))
    except (TypeError, ValueError) as e:
        logger.exception("malformed invocation: %s", e)
        return FunctionResponse.error(500, str(e)).as_dict()
    resp = await handle_function_request(req, ctx)
    return resp.as_dict()
