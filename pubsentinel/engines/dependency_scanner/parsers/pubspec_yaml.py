"""Parser for Dart/Flutter pubspec.yaml files.

This is a line-oriented extractor, not a YAML parser.  It only understands
the shapes dependencies are normally written in:

    dependencies:
      http: ^1.2.0
      provider: "6.1.1"
      collection: any
      my_pkg:
        path: ../my_pkg

Anything else (version ranges with two bounds, hosted sources, specs nested
more than one line deep) is skipped.
"""

from __future__ import annotations

import re

import structlog

from pubsentinel.engines.dependency_scanner.models import (
    ANY_VERSION,
    DeclaredDependency,
    ScannedLine,
    Section,
)
from pubsentinel.engines.dependency_scanner.registry import register_parser
from pubsentinel.engines.dependency_scanner.tokenizer import tokenize

log = structlog.get_logger("pubsentinel.engine")

_NAME = r"([a-z_][a-z0-9_]*)"

# name: ^1.2.3 / name: 1.2.3+4
_SEMVER_RE = re.compile(rf"^{_NAME}\s*:\s*[\^~]?(\d+\.\d+\.\d+\S*)\s*$", re.IGNORECASE)

# name: "^1.2.3" / name: '1.2.3'
_QUOTED_SEMVER_RE = re.compile(
    rf"^{_NAME}\s*:\s*[\"']?[\^~]?(\d+\.\d+\.\d+[^\"'\s]*)[\"']?\s*$", re.IGNORECASE
)

_ANY_RE = re.compile(rf"^{_NAME}\s*:\s*any\s*$", re.IGNORECASE)

# name:   (spec continues on the next line)
_BARE_KEY_RE = re.compile(rf"^{_NAME}\s*:\s*$", re.IGNORECASE)

_SOURCE_PREFIXES = (("path:", "path"), ("git:", "git"), ("sdk:", "sdk"))

_SECTION_HEADERS = {
    "dependencies": Section.IN_DEPENDENCIES,
    "dev_dependencies": Section.IN_DEV_DEPENDENCIES,
}

# Packages shipped with the Flutter SDK; never fetched from the registry.
PLATFORM_PACKAGES = frozenset({"flutter", "flutter_test", "flutter_localizations"})


def _next_section(line: ScannedLine, section: Section) -> Section:
    """Section state after *line*; any other top-level key closes the block."""
    if line.is_header:
        return _SECTION_HEADERS.get(line.header_name, Section.NONE)
    return section


def _match_declaration(lines: list[ScannedLine], pos: int) -> DeclaredDependency | None:
    """Apply the match rules to ``lines[pos]``; first matching rule wins."""
    text = lines[pos].text

    for pattern in (_SEMVER_RE, _QUOTED_SEMVER_RE):
        m = pattern.match(text)
        if m:
            return DeclaredDependency(name=m.group(1), version_expr=m.group(2))

    m = _ANY_RE.match(text)
    if m:
        return DeclaredDependency(name=m.group(1), version_expr=ANY_VERSION)

    m = _BARE_KEY_RE.match(text)
    if m:
        next_text = lines[pos + 1].text if pos + 1 < len(lines) else ""
        for prefix, sentinel in _SOURCE_PREFIXES:
            if next_text.startswith(prefix):
                return DeclaredDependency(name=m.group(1), version_expr=sentinel)
        log.debug("pubspec.nested_spec_skipped", package=m.group(1), line=lines[pos].index)

    return None


def extract_dependencies(content: str) -> list[DeclaredDependency]:
    """Extract declared dependencies from pubspec.yaml text.

    Later declarations of the same name (compared case-insensitively)
    overwrite earlier ones; the result keeps the position where each name
    first appeared.  SDK packages and ``sdk:`` sources are dropped.
    """
    lines = tokenize(content)
    found: dict[str, DeclaredDependency] = {}
    section = Section.NONE

    for pos, line in enumerate(lines):
        if line.is_blank_or_comment:
            continue
        section = _next_section(line, section)
        if line.is_header or section is Section.NONE:
            continue

        dep = _match_declaration(lines, pos)
        if dep is not None:
            found[dep.name.lower()] = dep

    return [
        dep
        for dep in found.values()
        if dep.name not in PLATFORM_PACKAGES and dep.version_expr != "sdk"
    ]


class PubspecYamlParser:
    detection_method = "pubspec-yaml"
    file_patterns = ["pubspec.yaml"]

    def parse(self, content: str) -> list[DeclaredDependency]:
        return extract_dependencies(content)


register_parser(PubspecYamlParser())
