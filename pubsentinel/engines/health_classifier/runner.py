"""Health report runner — fan out registry lookups, then classify."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Protocol

import structlog

from pubsentinel.engines.dependency_scanner.models import DeclaredDependency
from pubsentinel.engines.dependency_scanner.parsers.pubspec_yaml import extract_dependencies
from pubsentinel.engines.dependency_scanner.scanner import scan
from pubsentinel.engines.health_classifier.classifier import build_records
from pubsentinel.engines.health_classifier.models import (
    UNAVAILABLE,
    RemoteMetadata,
    Report,
    ReportStatus,
)
from pubsentinel.exceptions import ManifestNotFoundError

log = structlog.get_logger("pubsentinel.engine")

_DEFAULT_CONCURRENCY = 10


class RegistryClient(Protocol):
    async def fetch_latest_version(self, name: str) -> str: ...

    async def fetch_tags(self, name: str) -> frozenset[str]: ...


def _settled(name: str, lookup: str, result: object) -> object | None:
    """Unwrap a gather() result; a failed lookup becomes None."""
    if isinstance(result, Exception):
        log.warning(
            "health.fetch_failed",
            package=name,
            lookup=lookup,
            error=f"{type(result).__name__}: {result}",
        )
        return None
    if isinstance(result, BaseException):
        raise result
    return result


async def fetch_metadata(
    client: RegistryClient,
    name: str,
    sem: asyncio.Semaphore,
) -> RemoteMetadata:
    """Latest version and tags for *name*; never raises on lookup failure.

    The two lookups are independent: a failed tag lookup still leaves the
    latest version usable, and vice versa.  :data:`UNAVAILABLE` is returned
    only when both fail.
    """
    async with sem:
        latest_res, tags_res = await asyncio.gather(
            client.fetch_latest_version(name),
            client.fetch_tags(name),
            return_exceptions=True,
        )

    latest = _settled(name, "latest_version", latest_res)
    tags = _settled(name, "tags", tags_res)
    if latest is None and tags is None:
        return UNAVAILABLE
    return RemoteMetadata(
        latest_version=latest,  # type: ignore[arg-type]
        tags=frozenset(tags or ()),  # type: ignore[arg-type]
    )


class HealthReportRunner:
    """Stateless per call: each run builds a fresh :class:`Report`."""

    def __init__(self, client: RegistryClient, concurrency: int = _DEFAULT_CONCURRENCY) -> None:
        self._client = client
        self._concurrency = concurrency

    async def run(self, project_dir: Path) -> Report:
        """Full cycle: locate + read manifest -> extract -> fetch -> classify."""
        try:
            scanned = await asyncio.to_thread(scan, project_dir)
        except ManifestNotFoundError as exc:
            log.info("health.manifest_not_found", project_dir=exc.project_dir)
            return Report(status=ReportStatus.NOT_FOUND)
        return await self.run_for_dependencies(scanned.dependencies, scanned.manifest_path)

    async def run_for_text(self, content: str, manifest_path: Path | None = None) -> Report:
        """Cycle over manifest text supplied by the caller."""
        return await self.run_for_dependencies(extract_dependencies(content), manifest_path)

    async def run_for_dependencies(
        self,
        deps: list[DeclaredDependency],
        manifest_path: Path | None = None,
    ) -> Report:
        if not deps:
            log.info("health.no_dependencies", path=str(manifest_path))
            return Report(status=ReportStatus.EMPTY, manifest_path=manifest_path)

        metadata = await self.fetch_all([d.name for d in deps])
        records = build_records(deps, metadata)
        failed = tuple(sorted(name for name, meta in metadata.items() if not meta.available))

        log.info(
            "health.report_built",
            total=len(records),
            outdated=sum(1 for r in records if r.is_outdated),
            unavailable=len(failed),
        )
        return Report(
            status=ReportStatus.OK,
            records=tuple(records),
            manifest_path=manifest_path,
            failed=failed,
        )

    async def fetch_all(self, names: list[str]) -> dict[str, RemoteMetadata]:
        """Fetch metadata for every name concurrently and wait for all of them."""
        sem = asyncio.Semaphore(self._concurrency)
        tasks = [fetch_metadata(self._client, name, sem) for name in names]
        results = await asyncio.gather(*tasks)
        return dict(zip(names, results, strict=True))
