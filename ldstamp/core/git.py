"""Read-only access to a local git repository through the ``git`` CLI."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Protocol

import structlog

from ldstamp.exceptions import RepositoryError

log = structlog.get_logger("ldstamp.git")

GIT_DIR_NAME = ".git"

_GIT_TIMEOUT = 30


class Repository(Protocol):
    """What the metadata resolver needs from a repository."""

    def tags(self) -> list[str]:
        """Tag short names, most recently created first."""
        ...

    def head(self) -> str:
        """Full hash of the current HEAD revision."""
        ...


def has_git_dir(path: str | Path) -> bool:
    return (Path(path) / GIT_DIR_NAME).exists()


class GitRepository:
    """A git work tree queried with ``git -C <path> ...``."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    @classmethod
    def open(cls, path: str | Path) -> GitRepository:
        """Open the repository at *path*, raising ``RepositoryError`` if it is not one."""
        repo = cls(path)
        repo._run("rev-parse", "--git-dir")
        return repo

    def tags(self) -> list[str]:
        out = self._run(
            "for-each-ref",
            "--sort=-creatordate",
            "--format=%(refname:lstrip=2)",
            "refs/tags",
        )
        return [line for line in out.splitlines() if line]

    def head(self) -> str:
        return self._run("rev-parse", "HEAD").strip()

    def _run(self, *args: str) -> str:
        """Run a git command, raising RepositoryError on failure."""
        cmd = ["git", "-C", str(self.path), *args]
        log.debug("git.run", cmd=" ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=_GIT_TIMEOUT,
            )
        except (OSError, subprocess.SubprocessError) as e:
            raise RepositoryError(f"git {args[0]} failed: {e}") from e
        if result.returncode != 0:
            raise RepositoryError(
                f"git {args[0]} failed (exit {result.returncode}): {result.stderr.strip()}"
            )
        return result.stdout
