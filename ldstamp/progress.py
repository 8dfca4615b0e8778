"""Phase bookkeeping for the stamping pipeline."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

import structlog

log = structlog.get_logger("ldstamp.progress")


@dataclass
class PhaseRecord:
    name: str
    status: str = "running"  # "running" | "completed" | "failed" | "skipped"
    started: float | None = None
    finished: float | None = None
    detail: str = ""
    error: str | None = None

    @property
    def duration(self) -> float | None:
        if self.started is None or self.finished is None:
            return None
        return round(self.finished - self.started, 4)

    def as_dict(self) -> dict[str, Any]:
        return {
            "phase": self.name,
            "status": self.status,
            "duration": self.duration,
            "detail": self.detail,
            "error": self.error,
        }


class ProgressTracker:
    """Ordered record of the phases of one pipeline run.

    *on_change* is called with the record each time a phase starts, ends
    or is skipped.
    """

    def __init__(self, on_change: Callable[[PhaseRecord], None] | None = None) -> None:
        self.phases: list[PhaseRecord] = []
        self._on_change = on_change

    @contextmanager
    def track(self, name: str) -> Iterator[PhaseRecord]:
        """Run a block as phase *name*; an exception marks it failed and propagates.

        The block may set ``detail`` on the yielded record.
        """
        record = PhaseRecord(name=name, started=time.monotonic())
        self._record(record)
        try:
            yield record
        except Exception as e:
            record.status = "failed"
            record.error = str(e)
            record.finished = time.monotonic()
            self._notify(record)
            raise
        record.status = "completed"
        record.finished = time.monotonic()
        self._notify(record)

    def skip(self, name: str, reason: str) -> None:
        self._record(PhaseRecord(name=name, status="skipped", detail=reason))

    def summary(self) -> list[dict[str, Any]]:
        return [p.as_dict() for p in self.phases]

    def _record(self, record: PhaseRecord) -> None:
        self.phases.append(record)
        self._notify(record)

    def _notify(self, record: PhaseRecord) -> None:
        if self._on_change is not None:
            self._on_change(record)


def log_phase(record: PhaseRecord) -> None:
    """Write a phase transition to the diagnostic log."""
    log.debug(
        "pipeline.phase",
        phase=record.name,
        status=record.status,
        duration=record.duration,
        detail=record.detail or None,
        error=record.error,
    )
