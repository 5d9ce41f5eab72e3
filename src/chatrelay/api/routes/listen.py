"""Live message stream as newline-delimited JSON."""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse

from chatrelay.listener import ListenSession

router = APIRouter(tags=["chat"])

NDJSON_MEDIA_TYPE = "application/x-ndjson"


async def _stream(session: ListenSession) -> AsyncIterator[bytes]:
    async with session:
        async for chunk in session:
            yield chunk


async def listen(request: Request) -> StreamingResponse:
    """Stream keepalives and chat messages until the client disconnects.

    Each line is ``{"kind":"keepalive"}`` or
    ``{"kind":"msg","data":{"id","ts","user","body"}}``.
    """
    config = request.app.state.config
    session = ListenSession(
        request.app.state.bus,
        config.topic,
        keepalive_interval=config.keepalive_interval,
        queue_size=config.subscriber_queue_size,
    )
    return StreamingResponse(_stream(session), media_type=NDJSON_MEDIA_TYPE)


# The request method is ignored, so the route accepts all of them.
router.add_route("/listen", listen)
