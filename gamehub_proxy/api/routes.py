from __future__ import annotations

import httpx
from fastapi import APIRouter, Request, Response

from ..service.rewriter import InboundRequest
from .pipeline import Pipeline
from .responses import preflight_response

router = APIRouter()

_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


@router.api_route("/{path:path}", methods=_METHODS, include_in_schema=False)
async def mediate(path: str, request: Request) -> Response:
    """Entry point for every proxied path."""
    if request.method == "OPTIONS":
        return preflight_response()

    # The body stream can only be consumed once; everything downstream reuses these bytes.
    body = await request.body()
    inbound = InboundRequest(
        method=request.method,
        path=request.url.path,
        query=httpx.QueryParams(request.url.query),
        headers=httpx.Headers(request.headers.items()),
        body=body,
    )
    pipeline: Pipeline = request.app.state.pipeline
    return await pipeline.handle(inbound)
