"""Scan a single source file for target variables."""

from __future__ import annotations

import os
from pathlib import Path

from ldstamp.config import TargetDictionary
from ldstamp.exceptions import ParseError
from ldstamp.models import Target
from ldstamp.scanner.registry import extractor_for


def scan_file(path: str | Path, targets: TargetDictionary) -> list[Target]:
    """Return the targets declared at the top level of one source file.

    Only variables explicitly typed as ``string`` qualify.  Each target's
    ``pkg`` is the file's grandparent directory joined with the declared
    package name; the package path resolver rewrites it later.

    Raises ``ParseError`` if the file cannot be read or parsed.
    """
    file_path = Path(path)
    extractor = extractor_for(file_path.name)
    if extractor is None:
        return []

    try:
        content = file_path.read_bytes()
    except OSError as e:
        raise ParseError(str(file_path), e.strerror or str(e)) from e

    source = extractor.extract(file_path, content)

    found: list[Target] = []
    for decl in source.declarations:
        if not decl.top_level or decl.type_name != extractor.string_type:
            continue
        gen = targets.lookup(decl.name)
        if gen is None:
            continue
        # Replace the file's own directory name with the package name.
        anchor = os.path.join(os.path.dirname(file_path.parent), source.package)
        found.append(Target(var=decl.name, pkg=anchor, gen=gen))
    return found
