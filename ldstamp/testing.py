"""Test doubles for ldstamp.

Usage::

    from ldstamp.testing import FakeRepository

    repo = FakeRepository(tags=["v1.1.0", "v1.0.0"], head="0123abcd...")
    resolver = MetadataResolver(repo)
"""

from __future__ import annotations

from ldstamp.exceptions import RepositoryError

FAKE_HEAD = "9fceb02d0ae598e95dc970b74767f19372d61af8"


class FakeRepository:
    """In-memory stand-in for :class:`ldstamp.core.git.GitRepository`.

    Parameters
    ----------
    tags:
        Tag names, most recently created first.
    head:
        Hash returned by ``head()``.
    fail:
        If set, every query raises ``RepositoryError`` with this message.
    """

    def __init__(
        self,
        tags: list[str] | None = None,
        head: str = FAKE_HEAD,
        *,
        fail: str | None = None,
    ) -> None:
        self._tags = list(tags or [])
        self._head = head
        self._fail = fail
        self.calls: list[str] = []

    def tags(self) -> list[str]:
        self.calls.append("tags")
        if self._fail:
            raise RepositoryError(self._fail)
        return list(self._tags)

    def head(self) -> str:
        self.calls.append("head")
        if self._fail:
            raise RepositoryError(self._fail)
        return self._head
