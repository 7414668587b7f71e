"""Data models for the health classifier engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

TAG_DEPRECATED = "is:deprecated"
TAG_DISCONTINUED = "is:discontinued"


@dataclass(frozen=True)
class RemoteMetadata:
    """Registry facts about one package.

    ``latest_version`` is None and ``tags`` empty for whichever lookup failed.
    """

    latest_version: str | None = None
    tags: frozenset[str] = frozenset()
    available: bool = True


UNAVAILABLE = RemoteMetadata(available=False)


@dataclass(frozen=True)
class DependencyHealthRecord:
    name: str
    current_version: str
    latest_version: str | None
    is_deprecated: bool = False
    is_discontinued: bool = False
    is_outdated: bool = False

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "current_version": self.current_version,
            "latest_version": self.latest_version,
            "is_deprecated": self.is_deprecated,
            "is_discontinued": self.is_discontinued,
            "is_outdated": self.is_outdated,
        }


class ReportStatus(str, Enum):
    OK = "ok"
    EMPTY = "empty"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class Report:
    """Outcome of one extraction + classification cycle.

    ``records`` is already in display order (riskiest first).
    """

    status: ReportStatus
    records: tuple[DependencyHealthRecord, ...] = ()
    manifest_path: Path | None = None
    failed: tuple[str, ...] = field(default=())

    @property
    def outdated_count(self) -> int:
        return sum(1 for r in self.records if r.is_outdated)

    @property
    def at_risk_count(self) -> int:
        return sum(1 for r in self.records if r.is_deprecated or r.is_discontinued)
