"""Listen path: one long-lived NDJSON stream per connected client.

A session merges two event sources into a single output queue: a keepalive
timer and the bus subscription. Only the consumer of the session (the
streaming response) reads that queue, so the outbound stream has a single
writer.
"""

from __future__ import annotations

import asyncio
import enum
import json
import logging
from collections.abc import AsyncIterator

from chatrelay.api.pubsub import DEFAULT_QUEUE_SIZE, Message, MessageBus, Subscription

logger = logging.getLogger(__name__)


class SessionState(enum.Enum):
    STARTING = "starting"
    STREAMING = "streaming"
    CLOSED = "closed"


def keepalive_frame() -> dict:
    return {"kind": "keepalive"}


def message_frame(message: Message) -> dict:
    return {"kind": "msg", "data": message.to_dict()}


def encode_frame(frame: dict) -> bytes:
    """Serialize a frame as one compact JSON line."""
    return (json.dumps(frame, separators=(",", ":")) + "\n").encode("utf-8")


class ListenSession:
    """A subscriber session: keepalive ticks interleaved with bus messages.

    Use as an async context manager; iterate to get encoded chunks::

        async with ListenSession(bus, "chat") as session:
            async for chunk in session:
                ...

    Leaving the ``async with`` block, by any path, closes the session.
    """

    def __init__(
        self,
        bus: MessageBus,
        topic: str,
        keepalive_interval: float = 1.0,
        queue_size: int = DEFAULT_QUEUE_SIZE,
    ) -> None:
        self.bus = bus
        self.topic = topic
        self.keepalive_interval = keepalive_interval
        self.state = SessionState.STARTING
        # None is the wake-up marker pushed by close().
        self._frames: asyncio.Queue[dict | None] = asyncio.Queue(maxsize=queue_size)
        self._subscription: Subscription | None = None
        self._tasks: set[asyncio.Task] = set()

    async def __aenter__(self) -> ListenSession:
        self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.close()

    def start(self) -> None:
        """Queue the first keepalive, subscribe, and arm the timer."""
        if self.state is not SessionState.STARTING:
            raise RuntimeError(f"cannot start session in state {self.state.value}")
        self._enqueue(keepalive_frame())
        self._subscription = self.bus.subscribe(self.topic)
        self._spawn(self._keepalive_loop(), "listen-keepalive")
        self._spawn(self._forward_loop(self._subscription), "listen-forward")
        self.state = SessionState.STREAMING
        logger.debug("Listen session opened on %r", self.topic)

    def close(self) -> None:
        """Unsubscribe and cancel the timer. Safe to call more than once."""
        if self.state is SessionState.CLOSED:
            return
        self.state = SessionState.CLOSED
        if self._subscription is not None:
            self.bus.unsubscribe(self._subscription)
            self._subscription = None
        for task in self._tasks:
            task.cancel()
        self._tasks.clear()
        try:
            self._frames.put_nowait(None)
        except asyncio.QueueFull:
            pass
        logger.debug("Listen session closed on %r", self.topic)

    @property
    def closed(self) -> bool:
        return self.state is SessionState.CLOSED

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self._iter_chunks()

    async def _iter_chunks(self) -> AsyncIterator[bytes]:
        while self.state is SessionState.STREAMING:
            frame = await self._frames.get()
            if frame is None:
                break
            yield encode_frame(frame)

    def _spawn(self, coro, name: str) -> None:
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _enqueue(self, frame: dict) -> None:
        try:
            self._frames.put_nowait(frame)
        except asyncio.QueueFull:
            logger.debug("Listen session backlog full, dropping %s frame", frame["kind"])

    async def _keepalive_loop(self) -> None:
        while True:
            await asyncio.sleep(self.keepalive_interval)
            self._enqueue(keepalive_frame())

    async def _forward_loop(self, sub: Subscription) -> None:
        while True:
            message = await sub.queue.get()
            self._enqueue(message_frame(message))
