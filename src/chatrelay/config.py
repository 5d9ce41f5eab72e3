"""Environment configuration loaded from .env, env vars, or programmatic input."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_TOPIC = "chat"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "")
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "")
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass
class Config:
    """Relay configuration. Can be built from env, CLI args, or programmatic input."""

    host: str = "0.0.0.0"
    port: int = 8000
    keepalive_interval: float = 1.0
    rate_limit_interval: float = 1.0
    subscriber_queue_size: int = 256
    topic: str = DEFAULT_TOPIC
    cookie_name: str = "user"
    forwarded_header: str = "x-forwarded-for"

    @classmethod
    def from_env(cls) -> Config:
        """Load config from environment variables and .env file."""
        load_dotenv()
        return cls(
            host=os.getenv("CHAT_HOST", "0.0.0.0"),
            port=_env_int("CHAT_PORT", 8000),
            keepalive_interval=_env_float("CHAT_KEEPALIVE_INTERVAL", 1.0),
            rate_limit_interval=_env_float("CHAT_RATE_LIMIT_INTERVAL", 1.0),
            subscriber_queue_size=_env_int("CHAT_QUEUE_SIZE", 256),
        )

    @classmethod
    def from_args(
        cls,
        host: str | None = None,
        port: int | None = None,
        keepalive: float | None = None,
    ) -> Config:
        """Build config from explicit arguments, falling back to env."""
        env = cls.from_env()
        return cls(
            host=host or env.host,
            port=port if port is not None else env.port,
            keepalive_interval=keepalive if keepalive is not None else env.keepalive_interval,
            rate_limit_interval=env.rate_limit_interval,
            subscriber_queue_size=env.subscriber_queue_size,
        )

    def validate(self) -> list[str]:
        """Return list of validation errors, empty if config is valid."""
        errors = []
        if not 0 < self.port < 65536:
            errors.append(f"CHAT_PORT must be between 1 and 65535, got {self.port}.")
        if self.keepalive_interval <= 0:
            errors.append("CHAT_KEEPALIVE_INTERVAL must be positive.")
        if self.rate_limit_interval <= 0:
            errors.append("CHAT_RATE_LIMIT_INTERVAL must be positive.")
        if self.subscriber_queue_size <= 0:
            errors.append("CHAT_QUEUE_SIZE must be positive.")
        return errors
