"""FastAPI application factory and server startup."""

from __future__ import annotations

import logging

from fastapi import FastAPI

from chatrelay.api.pubsub import MessageBus
from chatrelay.config import Config
from chatrelay.errors import register_exception_handlers
from chatrelay.publisher import Publisher
from chatrelay.ratelimit import RateLimiter

logger = logging.getLogger(__name__)


def create_api(
    config: Config | None = None,
    bus: MessageBus | None = None,
    limiter: RateLimiter | None = None,
) -> FastAPI:
    """Create the chat relay app.

    The bus and rate limiter are process-wide; they are built once here and
    shared through ``app.state``. Pass your own to substitute them in tests.
    """
    config = config or Config()
    app = FastAPI(title="Chat Relay", docs_url=None, redoc_url=None)

    # Store shared references on app.state
    app.state.config = config
    app.state.bus = bus or MessageBus(queue_size=config.subscriber_queue_size)
    app.state.limiter = limiter or RateLimiter(min_interval=config.rate_limit_interval)
    app.state.publisher = Publisher(app.state.bus, app.state.limiter, config.topic)

    register_exception_handlers(app)

    from chatrelay.api.routes import health, listen, pages, send

    app.include_router(pages.router)
    app.include_router(send.router)
    app.include_router(listen.router)
    app.include_router(health.router)

    return app


async def serve(app: FastAPI, config: Config) -> None:
    """Run uvicorn until the server is stopped."""
    import uvicorn

    cfg = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        log_level="info",
        access_log=False,
    )
    server = uvicorn.Server(cfg)
    logger.info("Chat relay listening on %s:%d", config.host, config.port)
    await server.serve()
