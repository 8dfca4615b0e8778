"""Source tree scanner: locate target variables in Go sources."""

# Ensure extractors are registered before any scan runs.
from ldstamp.scanner import golang  # noqa: F401
from ldstamp.scanner.source import scan_file
from ldstamp.scanner.walker import WalkResult, find_all_targets, scan_tree

__all__ = ["WalkResult", "find_all_targets", "scan_file", "scan_tree"]
