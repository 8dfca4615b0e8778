"""Semantic version parsing and selection of the latest version tag."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field

VERSION_PREFIX = "v"
_VERSION_SEPARATOR = "."

# vX[.Y[.Z]] or X[.Y[.Z]]; anything after the matched prefix is ignored.
VERSION_PATTERN = re.compile(r"^v?[0-9]+(?:\.[0-9]+){0,2}")


@dataclass(frozen=True)
class Version:
    """Numeric representation of a semantic version tag."""

    prefix: str = ""
    major: int = 0
    minor: int = 0
    patch: int = 0
    raw: str = field(default="", compare=False)

    @property
    def has_prefix(self) -> bool:
        return self.prefix == VERSION_PREFIX

    @property
    def sort_key(self) -> tuple[int, int, int, str]:
        # Equal numeric triples fall back to the tag text so the order is stable.
        return (self.major, self.minor, self.patch, self.raw)

    def __str__(self) -> str:
        return f"{self.prefix}{self.major}.{self.minor}.{self.patch}"


def _to_int(part: str) -> int:
    if part.isascii() and part.isdigit():
        return int(part)
    return 0


def parse_version(s: str) -> Version:
    """Parse *s* into a :class:`Version`.

    Never fails: missing or non-numeric components become 0 and components
    beyond the third are ignored.  For tags such as ``v1.2.3-rc1`` only the
    matched ``v1.2.3`` part is parsed.
    """
    raw = s
    matched = VERSION_PATTERN.match(s)
    if matched:
        s = matched.group(0)

    prefix = ""
    if s.startswith(VERSION_PREFIX):
        s = s[len(VERSION_PREFIX) :]
        prefix = VERSION_PREFIX

    parts = s.split(_VERSION_SEPARATOR)
    numbers = [_to_int(p) for p in parts[:3]]
    numbers += [0] * (3 - len(numbers))
    return Version(prefix=prefix, major=numbers[0], minor=numbers[1], patch=numbers[2], raw=raw)


def compare_versions(a: Version, b: Version) -> int:
    """Compare by major, then minor, then patch.  Returns -1, 0 or 1."""
    left = (a.major, a.minor, a.patch)
    right = (b.major, b.minor, b.patch)
    return (left > right) - (left < right)


def is_version_tag(name: str) -> bool:
    return VERSION_PATTERN.match(name) is not None


def versions_from_tags(tags: Iterable[str]) -> list[Version]:
    """Return the versions among *tags*, sorted newest first."""
    versions = [parse_version(t) for t in tags if is_version_tag(t)]
    versions.sort(key=lambda v: v.sort_key, reverse=True)
    return versions


def latest_version(tags: Iterable[str]) -> str:
    """Return the highest version among *tags*, or ``""`` if none match."""
    versions = versions_from_tags(tags)
    return str(versions[0]) if versions else ""
