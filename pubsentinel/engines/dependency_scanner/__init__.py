"""Dependency scanner engine — extract declared dependencies from a manifest."""

from pubsentinel.engines.dependency_scanner.models import DeclaredDependency, ScanResult
from pubsentinel.engines.dependency_scanner.parsers.pubspec_yaml import extract_dependencies
from pubsentinel.engines.dependency_scanner.scanner import find_manifest, read_manifest, scan

__all__ = [
    "DeclaredDependency",
    "ScanResult",
    "extract_dependencies",
    "find_manifest",
    "read_manifest",
    "scan",
]
