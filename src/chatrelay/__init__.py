"""Chatrelay — a minimal real-time chat relay.

Clients sign in with a display name, post short messages to ``/send`` and
receive every message through the newline-delimited JSON stream at
``/listen``.

Library API::

    from chatrelay import Config, create_api

    app = create_api(Config(port=8080))
"""

from __future__ import annotations

from chatrelay.api.app import create_api
from chatrelay.config import Config

__all__ = ["Config", "create_api"]
