"""Publish endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from chatrelay.api.auth import get_user
from chatrelay.ratelimit import rate_limit_key

router = APIRouter(tags=["chat"])


async def send(request: Request) -> PlainTextResponse:
    """Post ``{"body": "..."}`` as the signed-in user."""
    config = request.app.state.config
    publisher = request.app.state.publisher
    await publisher.send(
        key=rate_limit_key(request.headers.get(config.forwarded_header)),
        method=request.method,
        user=get_user(request),
        load_body=request.json,
    )
    return PlainTextResponse("sent message")


# Plain route with no method list: every method, standard or not, reaches the
# handler and is charged against the rate limit before being rejected with 405.
router.add_route("/send", send)
