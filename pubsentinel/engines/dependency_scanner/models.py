"""Data models for the dependency scanner engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

# Version expressions that do not name a registry version.
SOURCE_SENTINELS = ("path", "git", "sdk")
ANY_VERSION = "any"


class Section(Enum):
    """Which dependency block of the manifest the scan is currently inside."""

    NONE = "none"
    IN_DEPENDENCIES = "dependencies"
    IN_DEV_DEPENDENCIES = "dev_dependencies"


@dataclass(frozen=True)
class ScannedLine:
    """One physical manifest line, as produced by the tokenizer."""

    index: int
    text: str
    indent: int

    @property
    def is_blank_or_comment(self) -> bool:
        return not self.text or self.text.startswith("#")

    @property
    def is_header(self) -> bool:
        """Zero-indent ``key:`` line that opens or closes a section."""
        return self.indent == 0 and not self.is_blank_or_comment and self.text.endswith(":")

    @property
    def header_name(self) -> str | None:
        return self.text[:-1] if self.is_header else None


@dataclass(frozen=True)
class DeclaredDependency:
    """A dependency declared in the manifest."""

    name: str
    version_expr: str

    @property
    def is_registry_version(self) -> bool:
        """False for ``any`` and for path/git/sdk sources."""
        return self.version_expr != ANY_VERSION and self.version_expr not in SOURCE_SENTINELS


@dataclass
class ScanResult:
    """Dependencies extracted from one manifest file."""

    manifest_path: Path
    detection_method: str
    dependencies: list[DeclaredDependency] = field(default_factory=list)
