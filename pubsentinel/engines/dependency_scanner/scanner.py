"""Manifest scanner — locate, read and extract a project's dependencies."""

from __future__ import annotations

from pathlib import Path

import structlog

# Ensure parsers are registered before any scan runs.
import pubsentinel.engines.dependency_scanner.parsers  # noqa: F401
from pubsentinel.engines.dependency_scanner.models import ScanResult
from pubsentinel.engines.dependency_scanner.registry import ManifestParser, discover_manifest
from pubsentinel.exceptions import ManifestNotFoundError

log = structlog.get_logger("pubsentinel.engine")


def find_manifest(project_dir: Path) -> tuple[ManifestParser, Path]:
    """Locate the manifest in *project_dir*.

    Raises :class:`ManifestNotFoundError` when the directory does not exist
    or contains no recognised manifest.
    """
    if not project_dir.is_dir():
        raise ManifestNotFoundError(str(project_dir))
    match = discover_manifest(project_dir)
    if match is None:
        raise ManifestNotFoundError(str(project_dir))
    return match


def read_manifest(manifest_path: Path) -> str:
    """Read manifest text; an unreadable file counts as a missing manifest."""
    try:
        return manifest_path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        log.warning("scanner.read_failed", path=str(manifest_path), error=str(exc))
        raise ManifestNotFoundError(str(manifest_path.parent)) from exc


def scan(project_dir: Path) -> ScanResult:
    """Find the project manifest and extract its declared dependencies."""
    parser, manifest_path = find_manifest(project_dir)
    log.debug("scanner.manifest_found", path=str(manifest_path), parser=parser.detection_method)
    content = read_manifest(manifest_path)
    deps = parser.parse(content)
    log.info("scanner.extracted", path=str(manifest_path), count=len(deps))
    return ScanResult(
        manifest_path=manifest_path,
        detection_method=parser.detection_method,
        dependencies=deps,
    )
