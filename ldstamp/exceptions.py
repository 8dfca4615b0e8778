"""Custom exceptions for ldstamp."""

from __future__ import annotations

from ldstamp.models import ScanError


class LdstampError(Exception):
    """Base exception for all ldstamp errors."""


class ConfigError(LdstampError):
    """Raised when a target mapping or a configuration file is malformed."""


class ParseError(LdstampError):
    """Raised when a source file cannot be parsed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class TreeScanError(LdstampError):
    """Raised when one or more nodes of the source tree failed to scan."""

    def __init__(self, errors: list[ScanError]):
        self.errors = list(errors)
        lines = "\n".join(str(e) for e in self.errors)
        super().__init__(f"failed to scan file tree\n{lines}")


class RootPackageError(LdstampError):
    """Raised when the root package of the project cannot be determined."""


class RepositoryError(LdstampError):
    """Raised when the git repository cannot be opened or queried."""
