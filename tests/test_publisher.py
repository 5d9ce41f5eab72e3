"""Tests for the send path."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest

from chatrelay.errors import InvalidBody, MethodNotAllowed, NotAuthenticated, RateLimited
from chatrelay.publisher import Publisher


@pytest.fixture
def publisher(bus, limiter) -> Publisher:
    return Publisher(bus, limiter, "chat")


def _body(payload):
    return AsyncMock(return_value=payload)


async def test_send_publishes_message(publisher, bus):
    sub = bus.subscribe("chat")

    msg = await publisher.send("1.2.3.4", "POST", "alice", _body({"body": "hello"}))

    assert msg.user == "alice"
    assert msg.body == "hello"
    assert (await sub.queue.get()) is msg


async def test_rate_limited_within_interval(publisher, clock):
    await publisher.send("1.2.3.4", "POST", "alice", _body({"body": "one"}))
    clock.advance(0.5)
    with pytest.raises(RateLimited):
        await publisher.send("1.2.3.4", "POST", "alice", _body({"body": "two"}))
    clock.advance(0.5)
    await publisher.send("1.2.3.4", "POST", "alice", _body({"body": "three"}))


async def test_rate_limit_checked_before_method(publisher):
    with pytest.raises(MethodNotAllowed):
        await publisher.send("k", "GET", "alice", _body({"body": "x"}))
    # the failed GET still used up the slot
    with pytest.raises(RateLimited):
        await publisher.send("k", "POST", "alice", _body({"body": "x"}))


async def test_method_checked_before_body_is_read(publisher):
    load = _body({"body": "x"})
    with pytest.raises(MethodNotAllowed) as exc_info:
        await publisher.send("k", "PUT", "alice", load)
    assert exc_info.value.status_code == 405
    load.assert_not_awaited()


async def test_not_authenticated(publisher, bus):
    sub = bus.subscribe("chat")
    load = _body({"body": "hi"})
    with pytest.raises(NotAuthenticated) as exc_info:
        await publisher.send("k", "POST", None, load)
    assert exc_info.value.detail == "not signed in"
    load.assert_not_awaited()
    assert sub.queue.empty()


@pytest.mark.parametrize(
    "payload",
    [{"body": 123}, {"body": ""}, {"text": "hi"}, ["hi"], "hi", None],
)
async def test_invalid_body(publisher, bus, payload):
    sub = bus.subscribe("chat")
    with pytest.raises(InvalidBody):
        await publisher.send("k", "POST", "alice", _body(payload))
    assert sub.queue.empty()


async def test_malformed_json_is_invalid_body(publisher):
    load = AsyncMock(side_effect=json.JSONDecodeError("bad", "{", 0))
    with pytest.raises(InvalidBody):
        await publisher.send("k", "POST", "alice", load)


async def test_empty_user_name_is_accepted(publisher):
    msg = await publisher.send("k", "POST", "", _body({"body": "anon"}))
    assert msg.user == ""
