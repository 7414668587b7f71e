"""Numeric major.minor.patch comparison between declared and latest versions."""

from __future__ import annotations

import re

# Operators, quotes and whitespace that may surround a declared version.
_NOISE_RE = re.compile(r"[\^~>=<\s\"']")
_LEADING_INT_RE = re.compile(r"\d+")

# Version expressions with no concrete pinned version to compare.
_UNCOMPARABLE = frozenset({"any", "path", "git"})


def _components(version: str) -> tuple[int, int, int]:
    """First three dot-separated components as ints.

    A component is read from its leading digits ("3-beta" -> 3); missing or
    non-numeric components count as 0.
    """
    parts = _NOISE_RE.sub("", version).split(".")
    numbers = []
    for part in parts[:3]:
        m = _LEADING_INT_RE.match(part)
        numbers.append(int(m.group()) if m else 0)
    numbers.extend([0] * (3 - len(numbers)))
    return numbers[0], numbers[1], numbers[2]


def is_outdated(current: str, latest: str) -> bool:
    """True when *latest* is strictly newer than *current*.

    Only major.minor.patch are compared; pre-release and build suffixes are
    ignored, so ``1.2.3-dev`` and ``1.2.3`` compare equal.
    """
    if not current or not latest or current in _UNCOMPARABLE:
        return False
    return _components(latest) > _components(current)
