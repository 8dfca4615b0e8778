"""Data models shared by the scanner, resolver and flag assembler."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class GeneratorKind(str, Enum):
    """Kind of value injected into a target variable."""

    VERSION = "version"  # highest vX[.Y[.Z]] / X[.Y[.Z]] tag
    TAG = "tag"  # most recently created tag
    HASH_SHORT = "hash-short"
    HASH_LONG = "hash-long"
    HASH = "hash"  # generic form, same value as hash-long
    TIME = "time"  # YYYY-MM-DD_HH:MM:SS_Z07:00

    @classmethod
    def parse(cls, name: str) -> GeneratorKind:
        """Parse a generator name, accepting ``_`` or ``-`` and any case.

        Raises ``ValueError`` for unknown names.
        """
        normalized = name.strip().lower().replace("_", "-")
        return cls(normalized)


@dataclass
class Target:
    """A string variable to push version info into.

    ``pkg`` starts as a filesystem anchor path and is rewritten once to the
    logical package path by :func:`ldstamp.packages.resolve_target_packages`.
    """

    var: str
    pkg: str
    gen: GeneratorKind


@dataclass(frozen=True)
class ScanError:
    """A failure recorded for one file or directory during the tree walk."""

    name: str | None
    message: str

    def __str__(self) -> str:
        if self.name:
            return f"failed to scan {self.name}: {self.message}"
        return self.message
