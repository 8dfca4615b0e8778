"""Repository metadata resolver: compute the value for each generator kind."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta

import structlog

from ldstamp.core.git import Repository
from ldstamp.models import GeneratorKind
from ldstamp.version import latest_version

log = structlog.get_logger("ldstamp.resolver")

SHORT_HASH_LENGTH = 7


def format_time(moment: datetime) -> str:
    """Format *moment* as ``YYYY-MM-DD_HH:MM:SS_Z07:00``.

    A zero UTC offset renders as ``Z``; naive datetimes are taken as local time.
    """
    if moment.tzinfo is None:
        moment = moment.astimezone()
    offset = moment.utcoffset() or timedelta(0)
    if offset == timedelta(0):
        zone = "Z"
    else:
        sign = "-" if offset < timedelta(0) else "+"
        minutes = abs(int(offset.total_seconds())) // 60
        zone = f"{sign}{minutes // 60:02d}:{minutes % 60:02d}"
    return moment.strftime("%Y-%m-%d_%H:%M:%S_") + zone


def quote_value(value: str, double_quote: bool = False) -> str:
    """Wrap *value* in single quotes, or double quotes when requested."""
    if double_quote:
        return f'"{value}"'
    return f"'{value}'"


def _local_now() -> datetime:
    return datetime.now().astimezone()


class MetadataResolver:
    """Generate values for targets from a repository.

    Repository answers are fetched lazily and cached, so each git query runs
    at most once per resolver no matter how many targets use it.
    """

    def __init__(
        self,
        repo: Repository,
        *,
        double_quote: bool = False,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._repo = repo
        self._double_quote = double_quote
        self._clock = clock or _local_now
        self._tags: list[str] | None = None
        self._head: str | None = None

    def generate(self, kind: GeneratorKind) -> str:
        if kind is GeneratorKind.VERSION:
            return self.version()
        if kind is GeneratorKind.TAG:
            return self.tag()
        if kind is GeneratorKind.HASH_SHORT:
            return self.hash_short()
        if kind in (GeneratorKind.HASH_LONG, GeneratorKind.HASH):
            return self.hash_long()
        if kind is GeneratorKind.TIME:
            return self.time()
        raise ValueError(f"unknown generator {kind!r}")

    def version(self) -> str:
        """Highest version among the tags, or ``""``."""
        return latest_version(self._all_tags())

    def tag(self) -> str:
        """Most recently created tag, quoted, or ``""``."""
        tags = self._all_tags()
        if not tags:
            return ""
        return quote_value(tags[0], self._double_quote)

    def hash_long(self) -> str:
        return self._head_hash()

    def hash_short(self) -> str:
        return self._head_hash()[:SHORT_HASH_LENGTH]

    def time(self) -> str:
        return format_time(self._clock())

    def _all_tags(self) -> list[str]:
        if self._tags is None:
            self._tags = self._repo.tags()
            log.debug("resolver.tags", count=len(self._tags))
        return self._tags

    def _head_hash(self) -> str:
        if self._head is None:
            self._head = self._repo.head()
            log.debug("resolver.head", hash=self._head)
        return self._head
