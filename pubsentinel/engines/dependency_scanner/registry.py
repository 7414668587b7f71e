"""Parser registry — locate manifest files and match them to parsers."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from pubsentinel.engines.dependency_scanner.models import DeclaredDependency


@runtime_checkable
class ManifestParser(Protocol):
    """Interface that every manifest parser must satisfy."""

    detection_method: str
    file_patterns: list[str]

    def parse(self, content: str) -> list[DeclaredDependency]: ...


PARSER_REGISTRY: dict[str, ManifestParser] = {}


def register_parser(parser: ManifestParser) -> None:
    """Register a parser instance by its detection_method."""
    PARSER_REGISTRY[parser.detection_method] = parser


def discover_manifest(project_dir: Path) -> tuple[ManifestParser, Path] | None:
    """Return the first (parser, manifest) pair found directly in *project_dir*.

    Only the project root is searched: a project has a single manifest, and
    nested manifests belong to other packages (examples, plugins).
    """
    for parser in PARSER_REGISTRY.values():
        for pattern in parser.file_patterns:
            for hit in sorted(project_dir.glob(pattern)):
                if hit.is_file():
                    return parser, hit
    return None
