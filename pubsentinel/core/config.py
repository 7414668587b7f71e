"""Runtime settings read from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_REGISTRY_URL = "https://pub.dev/api"


def _env_float(key: str, default: float) -> float:
    return float(os.environ.get(key, default))


def _env_int(key: str, default: int) -> int:
    return int(os.environ.get(key, default))


@dataclass(frozen=True)
class Settings:
    registry_url: str = DEFAULT_REGISTRY_URL
    http_timeout: float = 15.0
    fetch_concurrency: int = 10


def load_settings() -> Settings:
    """Build :class:`Settings` from the environment.

    Reads:
        PUBSENTINEL_REGISTRY_URL      — registry API base (default: pub.dev)
        PUBSENTINEL_HTTP_TIMEOUT      — per-request timeout in seconds
        PUBSENTINEL_FETCH_CONCURRENCY — max packages fetched at once
    """
    concurrency = _env_int("PUBSENTINEL_FETCH_CONCURRENCY", 10)
    return Settings(
        registry_url=os.environ.get("PUBSENTINEL_REGISTRY_URL", DEFAULT_REGISTRY_URL).rstrip("/"),
        http_timeout=_env_float("PUBSENTINEL_HTTP_TIMEOUT", 15.0),
        fetch_concurrency=max(concurrency, 1),
    )
