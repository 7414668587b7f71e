"""Line scanner for pubspec-style manifests."""

from __future__ import annotations

from pubsentinel.engines.dependency_scanner.models import ScannedLine


def _physical_lines(content: str) -> list[str]:
    """Split on ``\\n`` only; form feeds and other separators stay in the line."""
    lines = [line.rstrip("\r") for line in content.split("\n")]
    # A trailing newline ends the last line rather than starting a new one.
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def tokenize(content: str) -> list[ScannedLine]:
    """Split manifest text into :class:`ScannedLine` records.

    Every physical line gets a record, blank lines and comments included,
    so that ``lines[i + 1]`` is always the next physical line.  Indices are
    1-based.
    """
    lines: list[ScannedLine] = []
    for index, raw_line in enumerate(_physical_lines(content), start=1):
        stripped = raw_line.lstrip(" \t")
        lines.append(
            ScannedLine(
                index=index,
                text=raw_line.strip(),
                indent=len(raw_line) - len(stripped),
            )
        )
    return lines
