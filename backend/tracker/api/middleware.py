"""Request Correlation — stamps, propagates, and logs one id per request.

Invariants:
    - Every request gets an id: the inbound x-request-id if well formed, else a new UUID4
    - The id is in scope["state"] before any handler runs (request.state.request_id)
    - Every response carries the id header, on success and on failure
    - "request started" / "request finished" logged once each per request

Design Decisions:
    - Pure ASGI middleware over BaseHTTPMiddleware: wraps send() to set the header
      on http.response.start, so streaming and error responses get it too
    - Request-scoped state over a ContextVar: concurrent requests never share the id
    - Exceptions that escape every handler are answered here with the generic
      500 envelope; ServerErrorMiddleware would drop the header
"""

import logging
import re
import time
import uuid

from starlette.datastructures import Headers, MutableHeaders
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from tracker.core.errors import GENERIC_ERROR_MESSAGE

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "x-request-id"

# Visible ASCII only, bounded length
_REQUEST_ID_PATTERN = re.compile(r"[\x21-\x7e]{1,128}")


def resolve_request_id(inbound: str | None) -> str:
    """Keep a well-formed client id, otherwise generate one."""
    if inbound and _REQUEST_ID_PATTERN.fullmatch(inbound):
        return inbound
    return str(uuid.uuid4())


class RequestCorrelationMiddleware:
    """Outermost wrapper around handler dispatch."""

    def __init__(self, app: ASGIApp, header_name: str = REQUEST_ID_HEADER):
        self.app = app
        self.header_name = header_name.lower()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = resolve_request_id(Headers(scope=scope).get(self.header_name))
        scope = {
            **scope,
            "state": {**scope.get("state", {}), "request_id": request_id},
        }
        span = {
            "request_id": request_id,
            "method": scope["method"],
            "path": scope["path"],
        }
        logger.info("request started", extra=span)
        started = time.perf_counter()
        outcome = {"status_code": 500, "response_started": False}

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                outcome["response_started"] = True
                outcome["status_code"] = message["status"]
                MutableHeaders(scope=message)[self.header_name] = request_id
            await send(message)

        try:
            await self.app(scope, receive, send_with_request_id)
        except Exception:
            logger.error("unhandled error", exc_info=True, extra=span)
            if outcome["response_started"]:
                raise
            response = JSONResponse(
                {"message": GENERIC_ERROR_MESSAGE},
                status_code=500,
                headers={self.header_name: request_id},
            )
            await response(scope, receive, send)
        finally:
            logger.info(
                "request finished",
                extra={
                    **span,
                    "status_code": outcome["status_code"],
                    "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                },
            )
