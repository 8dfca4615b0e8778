"""Tests for ProgressTracker."""

from __future__ import annotations

import time

import pytest

from ldstamp.progress import ProgressTracker, log_phase


class TestProgressTracker:
    def test_track_success(self):
        tracker = ProgressTracker()
        with tracker.track("root-package") as p:
            p.detail = "example.com/app"

        summary = tracker.summary()
        assert len(summary) == 1
        assert summary[0]["phase"] == "root-package"
        assert summary[0]["status"] == "completed"
        assert summary[0]["detail"] == "example.com/app"
        assert summary[0]["error"] is None

    def test_track_failure_propagates(self):
        tracker = ProgressTracker()
        with pytest.raises(ValueError):
            with tracker.track("ldflags"):
                raise ValueError("no HEAD")

        assert tracker.phases[0].status == "failed"
        assert tracker.phases[0].error == "no HEAD"
        assert tracker.phases[0].duration is not None

    def test_skip(self):
        tracker = ProgressTracker()
        tracker.skip("ldflags", "no targets found")

        summary = tracker.summary()
        assert summary[0]["status"] == "skipped"
        assert summary[0]["detail"] == "no targets found"
        assert summary[0]["duration"] is None

    def test_duration(self):
        tracker = ProgressTracker()
        with tracker.track("config"):
            time.sleep(0.01)

        p = tracker.phases[0]
        assert p.duration is not None
        assert p.duration >= 0.01

    def test_phases_in_order(self):
        tracker = ProgressTracker()
        for name in ("config", "scan", "packages"):
            with tracker.track(name):
                pass
        tracker.skip("ldflags", "no targets found")
        assert [p["phase"] for p in tracker.summary()] == ["config", "scan", "packages", "ldflags"]

    def test_on_change(self):
        events = []
        tracker = ProgressTracker(on_change=lambda p: events.append((p.name, p.status)))

        with tracker.track("scan"):
            pass
        tracker.skip("ldflags", "no targets found")

        assert events == [("scan", "running"), ("scan", "completed"), ("ldflags", "skipped")]

    def test_log_phase_callback(self):
        tracker = ProgressTracker(on_change=log_phase)
        with tracker.track("scan") as p:
            p.detail = "1 targets, 0 errors"
        assert tracker.phases[0].status == "completed"
