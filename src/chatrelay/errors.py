"""Client-input errors raised on the send path.

Every error here is reported synchronously to the caller as a plain text
response; none of them affects other connections.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import PlainTextResponse

logger = logging.getLogger(__name__)


class ChatError(HTTPException):
    """Base class for relay errors with a fixed status and reason."""

    status: int = 400
    reason: str = "bad request"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(status_code=self.status, detail=detail or self.reason)


class RateLimited(ChatError):
    reason = "max 1 message per second per IP!"


class NotAuthenticated(ChatError):
    reason = "not signed in"


class InvalidBody(ChatError):
    reason = "invalid body"


class MethodNotAllowed(ChatError):
    status = 405
    reason = "method not accepted"


async def chat_error_handler(request: Request, exc: ChatError) -> PlainTextResponse:
    """Render a ChatError as ``text/plain`` with its status code."""
    logger.debug(
        "%s %s rejected: %s", request.method, request.url.path, exc.detail
    )
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code)


def register_exception_handlers(app: FastAPI) -> None:
    """Register the relay's exception handlers with the FastAPI app."""
    app.add_exception_handler(ChatError, chat_error_handler)
