"""Target dictionary: which variable names receive which generated values.

Sources, applied in order (later ones override earlier ones per name):
    1. built-in defaults
    2. the configuration file (``.ldstamp``)
    3. the ``-m`` command line mapping

Variable names are compared case-insensitively.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from types import MappingProxyType

import structlog

from ldstamp.exceptions import ConfigError
from ldstamp.models import GeneratorKind

log = structlog.get_logger("ldstamp.config")

CONFIG_FILE_NAME = ".ldstamp"

_MAP_SEPARATOR = ","
_MAP_ASSIGNMENT = "="
_COMMENT_PREFIX = "#"

DEFAULT_TARGETS: Mapping[str, GeneratorKind] = MappingProxyType(
    {
        "version": GeneratorKind.VERSION,
        "buildversion": GeneratorKind.VERSION,
        "tag": GeneratorKind.TAG,
        "buildtag": GeneratorKind.TAG,
        "commit": GeneratorKind.HASH_SHORT,
        "buildcommit": GeneratorKind.HASH_SHORT,
        "hash": GeneratorKind.HASH_SHORT,
        "buildhash": GeneratorKind.HASH_SHORT,
        "revision": GeneratorKind.HASH_LONG,
        "buildtime": GeneratorKind.TIME,
        "buildtimestamp": GeneratorKind.TIME,
    }
)


class TargetDictionary(Mapping[str, GeneratorKind]):
    """Read-only, case-insensitive mapping of variable name to generator.

    Built once before scanning starts and shared by every scan task.
    The original spelling of the last-applied key is kept for display.
    """

    def __init__(self, *sources: Iterable[tuple[str, GeneratorKind]]) -> None:
        entries: dict[str, tuple[str, GeneratorKind]] = {}
        for source in sources:
            for name, gen in source:
                entries[name.lower()] = (name, gen)
        self._entries = MappingProxyType(entries)

    def lookup(self, name: str) -> GeneratorKind | None:
        """Return the generator for *name*, or None if the name is not a target."""
        entry = self._entries.get(name.lower())
        return entry[1] if entry else None

    def __getitem__(self, name: str) -> GeneratorKind:
        gen = self.lookup(name)
        if gen is None:
            raise KeyError(name)
        return gen

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._entries

    def __repr__(self) -> str:
        body = ", ".join(f"{n}={g.value}" for n, g in self._entries.values())
        return f"TargetDictionary({body})"


def parse_target_mapping(text: str) -> list[tuple[str, GeneratorKind]]:
    """Parse ``var=gen[,var=gen...]`` into (name, generator) pairs.

    Raises ``ConfigError`` on a malformed item or an unknown generator.
    """
    pairs: list[tuple[str, GeneratorKind]] = []
    for item in text.split(_MAP_SEPARATOR):
        parts = item.split(_MAP_ASSIGNMENT)
        if len(parts) != 2 or not parts[0].strip():
            raise ConfigError(f"invalid mapping {item.strip()!r}")
        name, gen_name = parts[0].strip(), parts[1].strip()
        try:
            gen = GeneratorKind.parse(gen_name)
        except ValueError:
            raise ConfigError(f"invalid generator in {item.strip()!r}") from None
        pairs.append((name, gen))
    return pairs


def read_config_file(path: str | Path) -> list[tuple[str, GeneratorKind]]:
    """Read a configuration file, one mapping per line.

    Blank lines and ``#`` comments are skipped.
    """
    pairs: list[tuple[str, GeneratorKind]] = []
    config_path = Path(path)
    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"failed to read configuration file {config_path}: {e}") from e

    for lineno, raw_line in enumerate(content.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith(_COMMENT_PREFIX):
            continue
        try:
            pairs.extend(parse_target_mapping(line))
        except ConfigError as e:
            raise ConfigError(f"{config_path}:{lineno}: {e}") from e
    return pairs


def gopath_src() -> Path:
    """Return ``$GOPATH/src``, using Go's default ``~/go`` when GOPATH is unset."""
    gopath = os.environ.get("GOPATH", "")
    first = gopath.split(os.pathsep)[0] if gopath else ""
    base = Path(first) if first else Path.home() / "go"
    return base / "src"


def find_config_file(project_dir: str | Path) -> Path | None:
    """Search for the config file.

    Search order:
      1. the current directory
      2. the project directory
      3. ``$GOPATH/src``
    """
    for directory in (Path.cwd(), Path(project_dir), gopath_src()):
        candidate = directory / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
    return None


def build_target_dictionary(
    *,
    project_dir: str | Path,
    config_path: str | Path | None = None,
    mapping: str | None = None,
    use_defaults: bool = True,
) -> TargetDictionary:
    """Build the target dictionary from defaults, config file and mapping."""
    sources: list[Iterable[tuple[str, GeneratorKind]]] = []
    if use_defaults:
        sources.append(DEFAULT_TARGETS.items())

    path = Path(config_path) if config_path else find_config_file(project_dir)
    if path is not None:
        log.debug("config.loading", path=str(path))
        sources.append(read_config_file(path))
    else:
        log.debug("config.no_file")

    if mapping:
        sources.append(parse_target_mapping(mapping))

    targets = TargetDictionary(*sources)
    for name, gen in targets.items():
        log.debug("config.target", name=name, generator=gen.value)
    return targets
