"""Display-name identity carried in a plain cookie.

There is no verification: whatever name the client claims is trusted.
"""

from __future__ import annotations

from fastapi import Request
from fastapi.responses import Response


def get_user(request: Request) -> str | None:
    """Return the signed-in display name, or None."""
    cookie_name = request.app.state.config.cookie_name
    return request.cookies.get(cookie_name)


def set_user(response: Response, cookie_name: str, name: str) -> None:
    response.set_cookie(cookie_name, name)
