"""Manifest parsers — auto-registered on import."""

from pubsentinel.engines.dependency_scanner.parsers import (
    pubspec_yaml,  # noqa: F401
)
