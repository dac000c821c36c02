from __future__ import annotations

from fastapi import Response

from ..logging_conf import get_logger
from ..service.rewriter import InboundRequest, RequestRewriter
from .dispatch import Dispatcher
from .responses import envelope, json_response

__all__ = ["Pipeline"]

logger = get_logger("api.pipeline")


class Pipeline:
    """Rewrite, then dispatch. The single place unexpected faults are turned into a 500."""

    def __init__(self, rewriter: RequestRewriter, dispatcher: Dispatcher) -> None:
        self.rewriter = rewriter
        self.dispatcher = dispatcher

    async def handle(self, request: InboundRequest) -> Response:
        try:
            rewritten = await self.rewriter.rewrite(request)
            return await self.dispatcher.dispatch(rewritten)
        except Exception as exc:
            logger.exception(
                "pipeline.fault",
                extra={"event": "pipeline_fault", "path": request.path, "method": request.method},
            )
            body = envelope(500, f"Error: {exc}")
            return json_response(body, status_code=500)
