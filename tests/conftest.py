"""Shared pytest fixtures for ldstamp tests."""

from __future__ import annotations

import os
import shutil
import subprocess
from collections.abc import Callable
from pathlib import Path

import pytest

from ldstamp.config import DEFAULT_TARGETS, TargetDictionary
from ldstamp.models import GeneratorKind

_GIT_IDENTITY = [
    "-c",
    "user.name=ldstamp tests",
    "-c",
    "user.email=tests@example.com",
    "-c",
    "commit.gpgsign=false",
    "-c",
    "tag.gpgsign=false",
]


def run_git(repo: Path, *args: str, env: dict[str, str] | None = None) -> str:
    """Run a git command in *repo* for test setup."""
    full_env = dict(os.environ)
    if env:
        full_env.update(env)
    result = subprocess.run(
        ["git", *_GIT_IDENTITY, *args],
        cwd=repo,
        check=True,
        capture_output=True,
        text=True,
        env=full_env,
    )
    return result.stdout


@pytest.fixture
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep config discovery away from the real cwd and GOPATH."""
    home = tmp_path / "_home"
    home.mkdir()
    monkeypatch.chdir(home)
    monkeypatch.setenv("GOPATH", str(home / "gopath"))
    monkeypatch.delenv("LDSTAMP_CONFIG", raising=False)
    monkeypatch.delenv("LDSTAMP_MAP", raising=False)
    return home


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write *content* to ``tmp_path / rel`` creating parent directories."""

    def _write(rel: str, content: str) -> Path:
        path = tmp_path / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    return _write


@pytest.fixture
def default_targets() -> TargetDictionary:
    return TargetDictionary(DEFAULT_TARGETS.items())


@pytest.fixture
def version_targets() -> TargetDictionary:
    return TargetDictionary(
        [
            ("BuildVersion", GeneratorKind.VERSION),
            ("BuildTag", GeneratorKind.TAG),
            ("BuildHash", GeneratorKind.HASH_SHORT),
        ]
    )


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """A git work tree with one empty commit."""
    if shutil.which("git") is None:
        pytest.skip("git binary not available")
    repo = tmp_path / "repo"
    repo.mkdir()
    run_git(repo, "init", "-q")
    run_git(repo, "commit", "-q", "--allow-empty", "-m", "initial")
    return repo


@pytest.fixture
def git() -> Callable[..., str]:
    """Expose :func:`run_git` to tests."""
    return run_git
