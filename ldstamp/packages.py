"""Root package discovery and target package path resolution."""

from __future__ import annotations

import os
import re
from pathlib import Path, PurePath

import structlog

from ldstamp.config import gopath_src
from ldstamp.exceptions import RootPackageError
from ldstamp.models import Target

log = structlog.get_logger("ldstamp.packages")

GO_MOD_NAME = "go.mod"

# module example.com/app  (optionally quoted, optionally followed by a comment)
_MODULE_RE = re.compile(r"^module\s+(.+)$")


def read_module_path(project_dir: str | Path) -> str:
    """Read the module path from ``go.mod``.  Returns ``""`` if there is none."""
    go_mod = Path(project_dir) / GO_MOD_NAME
    try:
        content = go_mod.read_text(encoding="utf-8")
    except FileNotFoundError:
        return ""
    except (OSError, UnicodeDecodeError) as e:
        raise RootPackageError(f"failed to read {go_mod}: {e}") from e

    for raw_line in content.splitlines():
        m = _MODULE_RE.match(raw_line.strip())
        if not m:
            continue
        module = m.group(1).split("//", 1)[0].strip()
        return module.strip('"`')
    return ""


def package_from_gopath(project_dir: str | Path, src_dir: str | Path | None = None) -> str:
    """Derive the package path from the project's location under ``$GOPATH/src``.

    Returns ``""`` if the project lives outside of it.
    """
    src = Path(src_dir) if src_dir is not None else gopath_src()
    # Compare real paths on both sides; GOPATH may be a symlink.
    rel = strip_head_path(Path(project_dir).resolve(), src.resolve())
    return rel or ""


def root_package(project_dir: str | Path) -> str:
    """Find the root package of the project.

    Lookup order:
      1. the module path declared in ``go.mod``
      2. the project path relative to ``$GOPATH/src``

    Raises ``RootPackageError`` if neither yields a package.
    """
    pkg = read_module_path(project_dir)
    if pkg:
        log.debug("packages.from_go_mod", package=pkg)
        return pkg

    pkg = package_from_gopath(project_dir)
    if pkg:
        log.debug("packages.from_gopath", package=pkg)
        return pkg

    raise RootPackageError(f"failed to find root package of {project_dir}")


def strip_head_path(path: str | PurePath, head: str | PurePath) -> str | None:
    """Return *path* relative to *head* using ``/`` separators.

    Returns ``""`` when both are the same directory and None when *path*
    is not inside *head*.
    """
    try:
        rel = PurePath(path).relative_to(PurePath(head))
    except ValueError:
        return None
    if rel == PurePath("."):
        return ""
    return rel.as_posix()


def resolve_package(anchor: str, project_dir: str | Path, root_pkg: str) -> str:
    """Turn a target's directory anchor into its logical package path.

    A target living directly in the project root has an anchor outside of
    the root (its grandparent directory), so it resolves to *root_pkg*
    just like an anchor equal to the root.
    """
    root_pkg = root_pkg.replace(os.sep, "/")
    suffix = strip_head_path(anchor, project_dir)
    if not suffix:
        return root_pkg
    return f"{root_pkg}/{suffix}"


def resolve_target_packages(targets: list[Target], project_dir: str | Path, root_pkg: str) -> None:
    """Rewrite every target's ``pkg`` in place."""
    for target in targets:
        target.pkg = resolve_package(target.pkg, project_dir, root_pkg)
