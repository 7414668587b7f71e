"""Health classification and severity ordering — pure, no I/O."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from pubsentinel.engines.dependency_scanner.models import DeclaredDependency
from pubsentinel.engines.health_classifier.models import (
    TAG_DEPRECATED,
    TAG_DISCONTINUED,
    UNAVAILABLE,
    DependencyHealthRecord,
    RemoteMetadata,
)
from pubsentinel.engines.health_classifier.version import is_outdated


def classify(dep: DeclaredDependency, metadata: RemoteMetadata) -> DependencyHealthRecord:
    """Build the health record for one dependency."""
    if not metadata.available:
        return DependencyHealthRecord(
            name=dep.name,
            current_version=dep.version_expr,
            latest_version=None,
        )

    latest = metadata.latest_version
    return DependencyHealthRecord(
        name=dep.name,
        current_version=dep.version_expr,
        latest_version=latest,
        is_deprecated=TAG_DEPRECATED in metadata.tags,
        is_discontinued=TAG_DISCONTINUED in metadata.tags,
        is_outdated=latest is not None and is_outdated(dep.version_expr, latest),
    )


def severity_key(record: DependencyHealthRecord) -> tuple[bool, bool, bool, str]:
    """Sort key: discontinued, then deprecated, then outdated, then name."""
    return (
        not record.is_discontinued,
        not record.is_deprecated,
        not record.is_outdated,
        record.name,
    )


def order_records(records: Iterable[DependencyHealthRecord]) -> list[DependencyHealthRecord]:
    return sorted(records, key=severity_key)


def build_records(
    deps: Iterable[DeclaredDependency],
    metadata: Mapping[str, RemoteMetadata],
) -> list[DependencyHealthRecord]:
    """Classify every dependency and return records riskiest-first.

    A dependency missing from *metadata* is classified as unavailable, so the
    output always has one record per input dependency.
    """
    return order_records(classify(dep, metadata.get(dep.name, UNAVAILABLE)) for dep in deps)
