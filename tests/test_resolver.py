"""Tests for the repository metadata resolver and the flag assembler."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from ldstamp.exceptions import RepositoryError
from ldstamp.ldflags import assemble_ldflags
from ldstamp.models import GeneratorKind, Target
from ldstamp.resolver import MetadataResolver, format_time, quote_value
from ldstamp.testing import FAKE_HEAD, FakeRepository

FIXED = datetime(2024, 3, 9, 7, 5, 1, tzinfo=timezone.utc)


def _resolver(tags=None, **kwargs) -> MetadataResolver:
    return MetadataResolver(FakeRepository(tags=tags), clock=lambda: FIXED, **kwargs)


# ── Generators ───────────────────────────────────────────────────────────


class TestGenerators:
    def test_version(self):
        assert _resolver(["v1.9.9", "v1.10.0", "v1.2.0"]).version() == "v1.10.0"

    def test_version_ignores_non_version_tags(self):
        assert _resolver(["release-candidate", "v0.3"]).version() == "v0.3.0"

    def test_tag_is_most_recent_and_quoted(self):
        r = _resolver(["release-candidate", "v2.0.0"])
        assert r.tag() == "'release-candidate'"

    def test_tag_double_quoted(self):
        r = _resolver(["v2.0.0"], double_quote=True)
        assert r.tag() == '"v2.0.0"'

    def test_no_tags(self):
        r = _resolver([])
        assert r.tag() == ""
        assert r.version() == ""

    def test_hashes(self):
        r = _resolver()
        assert r.hash_long() == FAKE_HEAD
        assert r.hash_short() == FAKE_HEAD[:7]
        assert r.generate(GeneratorKind.HASH) == FAKE_HEAD

    def test_time(self):
        assert _resolver().time() == "2024-03-09_07:05:01_Z"

    @pytest.mark.parametrize("kind", list(GeneratorKind))
    def test_generate_dispatches_every_kind(self, kind):
        assert _resolver(["v1.0.0"]).generate(kind)

    def test_repository_queried_once(self):
        repo = FakeRepository(tags=["v1.0.0"])
        r = MetadataResolver(repo)
        for _ in range(3):
            r.version()
            r.tag()
            r.hash_short()
            r.hash_long()
        assert repo.calls == ["tags", "head"]

    def test_repository_failure_propagates(self):
        r = MetadataResolver(FakeRepository(fail="reference not found"))
        with pytest.raises(RepositoryError, match="reference not found"):
            r.hash_long()


class TestFormatting:
    def test_positive_offset(self):
        moment = datetime(2023, 12, 31, 23, 59, 59, tzinfo=timezone(timedelta(hours=3)))
        assert format_time(moment) == "2023-12-31_23:59:59_+03:00"

    def test_negative_fractional_offset(self):
        moment = datetime(2023, 1, 2, 3, 4, 5, tzinfo=timezone(-timedelta(hours=5, minutes=30)))
        assert format_time(moment) == "2023-01-02_03:04:05_-05:30"

    def test_naive_is_local(self):
        rendered = format_time(datetime(2023, 1, 2, 3, 4, 5))
        assert rendered.startswith("2023-01-02_03:04:05_")

    def test_quote_value(self):
        assert quote_value("v1") == "'v1'"
        assert quote_value("v1", double_quote=True) == '"v1"'


# ── Flag assembly ────────────────────────────────────────────────────────


class TestAssembleLdflags:
    def test_tokens_in_target_order(self):
        targets = [
            Target(var="Commit", pkg="example.com/app/internal/build", gen=GeneratorKind.HASH_SHORT),
            Target(var="BuildVersion", pkg="example.com/app", gen=GeneratorKind.VERSION),
        ]
        flags = assemble_ldflags(targets, _resolver(["v2.0.0"]))
        assert flags == (
            f"-X example.com/app/internal/build.Commit={FAKE_HEAD[:7]} "
            "-X example.com/app.BuildVersion=v2.0.0"
        )

    def test_empty_values_contribute_nothing(self):
        targets = [
            Target(var="BuildVersion", pkg="example.com/app", gen=GeneratorKind.VERSION),
            Target(var="BuildTag", pkg="example.com/app", gen=GeneratorKind.TAG),
            Target(var="BuildTime", pkg="example.com/app", gen=GeneratorKind.TIME),
        ]
        flags = assemble_ldflags(targets, _resolver([]))
        assert flags == "-X example.com/app.BuildTime=2024-03-09_07:05:01_Z"

    def test_tag_token_quoted(self):
        targets = [Target(var="BuildTag", pkg="example.com/app", gen=GeneratorKind.TAG)]
        flags = assemble_ldflags(targets, _resolver(["v2.0.0"], double_quote=True))
        assert flags == '-X example.com/app.BuildTag="v2.0.0"'

    def test_no_targets(self):
        assert assemble_ldflags([], _resolver(["v1.0.0"])) == ""

    def test_failure_aborts_assembly(self):
        targets = [
            Target(var="BuildTime", pkg="example.com/app", gen=GeneratorKind.TIME),
            Target(var="Commit", pkg="example.com/app", gen=GeneratorKind.HASH_SHORT),
        ]
        resolver = MetadataResolver(FakeRepository(fail="HEAD is detached from nothing"))
        with pytest.raises(RepositoryError):
            assemble_ldflags(targets, resolver)
