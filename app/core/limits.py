# app/core/limits.py
import logging

from fastapi import HTTPException
from fastapi.responses import JSONResponse
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)

TOO_LARGE = "Request body too large"


class BodySizeLimitMiddleware:
    """
    Reject request bodies over `max_body_bytes` with 413.

    A declared Content-Length over the limit is refused before the app runs.
    Otherwise (chunked uploads included) bytes are counted as the app reads them,
    and the read fails with an HTTPException once the running total goes over.
    """

    def __init__(self, app: ASGIApp, max_body_bytes: int):
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        length = Headers(scope=scope).get("content-length")
        if length and length.isdigit() and int(length) > self.max_body_bytes:
            logger.warning("Rejected %s %s: declared body of %s bytes", scope["method"], scope["path"], length)
            response = JSONResponse(status_code=413, content={"error": TOO_LARGE})
            await response(scope, receive, send)
            return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_bytes:
                    logger.warning("Rejected %s %s: body exceeded %s bytes", scope["method"], scope["path"], self.max_body_bytes)
                    # FastAPI re-raises HTTPException from body parsing, so this reaches the error handler
                    raise HTTPException(status_code=413, detail=TOO_LARGE)
            return message

        await self.app(scope, limited_receive, send)
