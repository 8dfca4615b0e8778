"""Concurrent source tree walker.

Every directory is scanned by its own asyncio task.  Directory listings are
read in fixed-size batches and files are parsed in worker threads, so a
slow directory never holds up its siblings.  Failures are recorded per node
and the walk always runs to completion.
"""

from __future__ import annotations

import asyncio
import itertools
import os
import threading
from collections.abc import Coroutine, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog

from ldstamp.config import TargetDictionary
from ldstamp.exceptions import ParseError, TreeScanError
from ldstamp.models import ScanError, Target
from ldstamp.scanner.registry import extractor_for
from ldstamp.scanner.source import scan_file

log = structlog.get_logger("ldstamp.scanner")

DIR_BATCH_SIZE = 100


@dataclass
class WalkResult:
    """Targets and errors collected by one walk."""

    targets: list[Target] = field(default_factory=list)
    errors: list[ScanError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> None:
        """Raise ``TreeScanError`` listing every recorded error, if any."""
        if self.errors:
            raise TreeScanError(self.errors)


class ScanAccumulator:
    """Lock-protected target and error lists shared by all scan tasks."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._targets: list[Target] = []
        self._errors: list[ScanError] = []

    def push_targets(self, targets: list[Target]) -> None:
        with self._lock:
            self._targets.extend(targets)

    def push_error(self, error: ScanError) -> None:
        with self._lock:
            self._errors.append(error)

    def result(self) -> WalkResult:
        with self._lock:
            return WalkResult(targets=list(self._targets), errors=list(self._errors))


class TaskTracker:
    """Join barrier for tasks that may spawn further tasks."""

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[None]] = set()

    def spawn(self, coro: Coroutine[Any, Any, None], name: str | None = None) -> None:
        self._tasks.add(asyncio.create_task(coro, name=name))

    async def join(self) -> None:
        """Wait until every spawned task, including ones spawned meanwhile, is done."""
        while True:
            pending = [t for t in self._tasks if not t.done()]
            if not pending:
                break
            await asyncio.gather(*pending)
        # Re-raise anything a task leaked instead of recording it.
        for task in self._tasks:
            task.result()


def _next_batch(entries: Iterator[os.DirEntry[str]], size: int) -> list[os.DirEntry[str]]:
    return list(itertools.islice(entries, size))


class TreeWalker:
    """Walk a directory tree and collect targets from every source file."""

    def __init__(self, targets: TargetDictionary, batch_size: int = DIR_BATCH_SIZE) -> None:
        self._targets = targets
        self._batch_size = batch_size

    async def walk(self, root: str | Path) -> WalkResult:
        acc = ScanAccumulator()
        tracker = TaskTracker()
        tracker.spawn(self._scan_dir(str(root), None, acc, tracker), name="scan-root")
        await tracker.join()

        result = acc.result()
        log.debug(
            "walker.done",
            root=str(root),
            targets=len(result.targets),
            errors=len(result.errors),
        )
        return result

    async def _scan_dir(
        self,
        path: str,
        name: str | None,
        acc: ScanAccumulator,
        tracker: TaskTracker,
    ) -> None:
        try:
            entries = await asyncio.to_thread(os.scandir, path)
        except OSError as e:
            log.debug("walker.dir_failed", path=path, error=str(e))
            acc.push_error(ScanError(name, str(e)))
            return

        try:
            while True:
                batch = await asyncio.to_thread(_next_batch, entries, self._batch_size)
                if not batch:
                    break
                for entry in batch:
                    await self._process_entry(entry, acc, tracker)
        except OSError as e:
            log.debug("walker.dir_failed", path=path, error=str(e))
            acc.push_error(ScanError(name, str(e)))
        finally:
            entries.close()

    async def _process_entry(
        self,
        entry: os.DirEntry[str],
        acc: ScanAccumulator,
        tracker: TaskTracker,
    ) -> None:
        if entry.is_dir(follow_symlinks=False):
            if entry.name.startswith("."):
                return
            tracker.spawn(
                self._scan_dir(entry.path, entry.name, acc, tracker),
                name=f"scan-{entry.name}",
            )
            return

        if extractor_for(entry.name) is None:
            return

        try:
            found = await asyncio.to_thread(scan_file, entry.path, self._targets)
        except (ParseError, UnicodeDecodeError) as e:
            reason = e.reason if isinstance(e, ParseError) else str(e)
            log.debug("walker.file_failed", path=entry.path, error=reason)
            acc.push_error(ScanError(entry.name, reason))
            return

        if found:
            log.debug("walker.targets_found", path=entry.path, count=len(found))
            acc.push_targets(found)


async def find_all_targets(root: str | Path, targets: TargetDictionary) -> WalkResult:
    """Scan the file tree under *root* and return every target found."""
    return await TreeWalker(targets).walk(root)


def scan_tree(root: str | Path, targets: TargetDictionary) -> WalkResult:
    """Synchronous wrapper around :func:`find_all_targets`."""
    return asyncio.run(find_all_targets(root, targets))
