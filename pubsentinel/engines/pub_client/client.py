"""Async pub.dev API client."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx
import structlog

from pubsentinel.core.config import DEFAULT_REGISTRY_URL
from pubsentinel.exceptions import RegistryError

log = structlog.get_logger("pubsentinel.engine")


class PubDevClient:
    """Thin async wrapper around the pub.dev REST API.

    No retries: a failed lookup raises :class:`RegistryError` and the caller
    decides what "unavailable" means.
    """

    def __init__(self, base_url: str = DEFAULT_REGISTRY_URL, timeout: float = 15.0) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"Accept": "application/json"},
            timeout=timeout,
        )

    # ── lifecycle ──────────────────────────────────────────────────────────

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> PubDevClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # ── metadata lookups ──────────────────────────────────────────────────

    async def fetch_latest_version(self, name: str) -> str:
        """Latest published version of *name*."""
        details = await self.get_package_details(name)
        version = (details.get("latest") or {}).get("version")
        if not isinstance(version, str) or not version:
            raise RegistryError(name, "response has no latest.version")
        return version

    async def fetch_tags(self, name: str) -> frozenset[str]:
        """Score tags of *name* (``is:deprecated``, ``platform:web``, ...)."""
        score = await self.get_package_score(name)
        tags = score.get("tags") or []
        if not isinstance(tags, list):
            raise RegistryError(name, "score tags is not a list")
        return frozenset(str(t) for t in tags)

    # ── raw endpoints ─────────────────────────────────────────────────────

    async def get_package_details(self, name: str) -> dict[str, Any]:
        """GET /packages/{name} — package info with all versions."""
        return await self._get_json(name, f"/packages/{quote(name, safe='')}")

    async def get_package_score(self, name: str) -> dict[str, Any]:
        """GET /packages/{name}/score — points, likes, downloads and tags."""
        return await self._get_json(name, f"/packages/{quote(name, safe='')}/score")

    async def search_packages(self, query: str, page: int = 1) -> list[str]:
        """Package names matching *query* on the given result page."""
        return await self._search(query, {"q": query, "page": page})

    async def popular_packages(self, page: int = 1) -> list[str]:
        """Package names ordered by pub.dev popularity."""
        return await self._search("popular", {"sort": "popularity", "page": page})

    async def flutter_packages(self, page: int = 1) -> list[str]:
        """Packages that support the Flutter SDK."""
        return await self.search_packages("sdk:flutter", page)

    # ── command text ──────────────────────────────────────────────────────
    # Only the text is built; running it is up to the caller.

    @staticmethod
    def add_command(name: str, version: str | None = None) -> str:
        """``flutter pub add`` for *name*, pinned to *version* when given."""
        if version:
            return f"flutter pub add {name}:{version}"
        return f"flutter pub add {name}"

    @staticmethod
    def remove_command(name: str) -> str:
        return f"flutter pub remove {name}"

    # ── internal ───────────────────────────────────────────────────────────

    async def _search(self, subject: str, params: dict[str, Any]) -> list[str]:
        data = await self._get_json(subject, "/search", params=params)
        return [p["package"] for p in data.get("packages", []) if "package" in p]

    async def _get_json(
        self,
        subject: str,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        try:
            resp = await self._client.get(path, params=params)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise RegistryError(subject, f"HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            log.debug("pub_client.transport_error", path=path, error=str(exc))
            raise RegistryError(subject, f"{type(exc).__name__}: {exc}") from exc

        try:
            data = resp.json()
        except ValueError as exc:
            raise RegistryError(subject, "invalid JSON") from exc
        if not isinstance(data, dict):
            raise RegistryError(subject, "unexpected JSON payload")
        return data
