"""Send path: validate a publish request and hand the message to the bus."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from chatrelay.api.pubsub import Message, MessageBus
from chatrelay.errors import InvalidBody, MethodNotAllowed, NotAuthenticated, RateLimited
from chatrelay.ratelimit import RateLimiter

logger = logging.getLogger(__name__)


class Publisher:
    """Gatekeeper between inbound send requests and the message bus."""

    def __init__(self, bus: MessageBus, limiter: RateLimiter, topic: str) -> None:
        self.bus = bus
        self.limiter = limiter
        self.topic = topic

    async def send(
        self,
        key: str,
        method: str,
        user: str | None,
        load_body: Callable[[], Awaitable[object]],
    ) -> Message:
        """Publish one message, or raise the first failing check.

        Checks run in a fixed order: rate limit, method, identity, body.
        The rate-limit slot is charged even if a later check fails.
        ``load_body`` is only awaited once the earlier checks have passed.
        """
        if not self.limiter.try_admit(key):
            raise RateLimited()
        if method.upper() != "POST":
            raise MethodNotAllowed()
        if user is None:
            raise NotAuthenticated()

        try:
            payload = await load_body()
        except ValueError:
            raise InvalidBody() from None
        body = payload.get("body") if isinstance(payload, dict) else None
        if not isinstance(body, str) or not body:
            raise InvalidBody()

        message = Message.create(user, body)
        reached = self.bus.publish(self.topic, message)
        logger.debug("Message %s from %r reached %d listener(s)", message.id, user, reached)
        return message
