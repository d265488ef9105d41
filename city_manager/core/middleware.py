"""Shared FastAPI middleware."""

from __future__ import annotations

from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response, JSONResponse

from city_manager.core.config import get_settings


class MaxBodySizeMiddleware(BaseHTTPMiddleware):
    """Reject request bodies larger than MAX_REQUEST_BODY_BYTES with 413."""

    async def dispatch(self, request: Request, call_next: Callable[[Request], Response]) -> Response:
        limit = get_settings().MAX_REQUEST_BODY_BYTES

        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > limit:
            return JSONResponse({"error": "Payload too large."}, status_code=413)

        # Chunked uploads carry no content-length; Starlette caches the body
        # so the route can still read it.
        if request.method in ("POST", "PUT", "PATCH"):
            body = await request.body()
            if len(body) > limit:
                return JSONResponse({"error": "Payload too large."}, status_code=413)

        return await call_next(request)
