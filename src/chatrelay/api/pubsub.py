"""In-process pub/sub for chat messages."""

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 256


def _now_iso() -> str:
    ts = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return ts.replace("+00:00", "Z")


@dataclass(frozen=True)
class Message:
    """A chat message, created once per accepted publish."""

    id: str
    ts: str  # ISO format, UTC
    user: str
    body: str

    @classmethod
    def create(cls, user: str, body: str) -> Message:
        """Build a message with a fresh id and the current timestamp."""
        return cls(id=str(uuid.uuid4()), ts=_now_iso(), user=user, body=body)

    def to_dict(self) -> dict:
        return {"id": self.id, "ts": self.ts, "user": self.user, "body": self.body}


@dataclass(eq=False)
class Subscription:
    """One listener's registration on a topic."""

    topic: str
    queue: asyncio.Queue[Message] = field(repr=False)


class MessageBus:
    """Simple asyncio broadcast hub keyed by topic.

    Listen sessions subscribe; the send path publishes. Publishing never
    waits on a subscriber: when a subscriber's queue is full the message is
    lost for that subscriber only.
    """

    def __init__(self, queue_size: int = DEFAULT_QUEUE_SIZE) -> None:
        self._queue_size = queue_size
        self._subscribers: dict[str, set[Subscription]] = {}

    def subscribe(self, topic: str) -> Subscription:
        """Create a new subscription on ``topic``."""
        sub = Subscription(topic, asyncio.Queue(maxsize=self._queue_size))
        self._subscribers.setdefault(topic, set()).add(sub)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        """Remove a subscription. Unknown subscriptions are ignored."""
        subs = self._subscribers.get(sub.topic)
        if subs is None:
            return
        subs.discard(sub)
        if not subs:
            del self._subscribers[sub.topic]

    def publish(self, topic: str, message: Message) -> int:
        """Broadcast ``message`` to every subscriber of ``topic`` (non-blocking).

        Returns the number of subscribers the message was queued for.
        """
        delivered = 0
        # Snapshot: subscribers may come and go while we iterate.
        for sub in list(self._subscribers.get(topic, ())):
            try:
                sub.queue.put_nowait(message)
            except asyncio.QueueFull:
                logger.debug("Subscriber queue full, dropping message %s", message.id)
                continue
            delivered += 1
        return delivered

    def subscriber_count(self, topic: str | None = None) -> int:
        if topic is not None:
            return len(self._subscribers.get(topic, ()))
        return sum(len(subs) for subs in self._subscribers.values())
