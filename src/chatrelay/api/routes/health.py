"""Health and status endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health(request: Request) -> dict:
    """Live listener count and number of tracked rate-limit keys."""
    state = request.app.state
    return {
        "status": "ok",
        "subscribers": state.bus.subscriber_count(state.config.topic),
        "rate_limited_keys": len(state.limiter),
    }
