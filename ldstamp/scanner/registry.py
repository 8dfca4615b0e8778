"""Extractor registry: match source files to declaration extractors."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class Declaration:
    """One declared variable name as seen by an extractor."""

    name: str
    type_name: str | None  # None when the declaration has no explicit type
    top_level: bool


@dataclass
class SourceDeclarations:
    """Everything an extractor reports for one source file."""

    package: str
    declarations: list[Declaration] = field(default_factory=list)


@runtime_checkable
class DeclarationExtractor(Protocol):
    """Interface that every declaration extractor must satisfy."""

    language: str
    file_suffix: str
    test_suffix: str
    string_type: str

    def extract(self, file_path: Path, content: bytes) -> SourceDeclarations: ...


EXTRACTOR_REGISTRY: dict[str, DeclarationExtractor] = {}


def register_extractor(extractor: DeclarationExtractor) -> None:
    """Register an extractor instance by the file suffix it handles."""
    EXTRACTOR_REGISTRY[extractor.file_suffix] = extractor


def extractor_for(file_name: str) -> DeclarationExtractor | None:
    """Return the extractor for *file_name*, or None if it should not be scanned.

    Test files (``*_test.go`` for Go) are never scanned.
    """
    extractor = EXTRACTOR_REGISTRY.get(Path(file_name).suffix)
    if extractor is None or file_name.endswith(extractor.test_suffix):
        return None
    return extractor
