"""Stamping pipeline: from a project directory to an ``-ldflags`` value.

Phases:
    config        build the target dictionary
    root-package  find the project's root package
    scan          walk the source tree for target variables
    packages      rewrite target packages to logical package paths
    ldflags       query git and assemble the flag string
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import structlog

from ldstamp.config import build_target_dictionary
from ldstamp.core.git import GitRepository, Repository, has_git_dir
from ldstamp.exceptions import LdstampError
from ldstamp.ldflags import assemble_ldflags
from ldstamp.models import ScanError, Target
from ldstamp.packages import resolve_target_packages, root_package
from ldstamp.progress import ProgressTracker, log_phase
from ldstamp.resolver import MetadataResolver
from ldstamp.scanner import scan_tree

log = structlog.get_logger("ldstamp.pipeline")


@dataclass
class StampOptions:
    """Inputs of one pipeline run."""

    project_dir: str | Path = "."
    config_path: str | Path | None = None
    mapping: str | None = None
    double_quote: bool = False
    use_defaults: bool = True


@dataclass
class StampOutput:
    """Pipeline return value."""

    ldflags: str = ""
    root_package: str | None = None
    targets: list[Target] = field(default_factory=list)
    scan_errors: list[ScanError] = field(default_factory=list)
    skipped: str | None = None  # reason the run stopped early, if it did


class StampPipeline:
    """Run every phase in order; only the scan phase is concurrent."""

    def __init__(
        self,
        repo_factory: Callable[[Path], Repository] = GitRepository.open,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._repo_factory = repo_factory
        self._clock = clock
        self.progress = ProgressTracker()

    def run(self, options: StampOptions) -> StampOutput:
        progress = ProgressTracker(on_change=log_phase)
        self.progress = progress

        root = Path(options.project_dir).resolve()
        if not root.is_dir():
            raise LdstampError(f"path does not exist: {root}")

        # Nothing to stamp outside of a git work tree.
        if not has_git_dir(root):
            log.debug("pipeline.no_git_repository", root=str(root))
            progress.skip("ldflags", "no git repository found")
            return StampOutput(skipped="no git repository found")

        with progress.track("config") as p:
            targets_dict = build_target_dictionary(
                project_dir=root,
                config_path=options.config_path,
                mapping=options.mapping,
                use_defaults=options.use_defaults,
            )
            p.detail = f"{len(targets_dict)} target names"

        with progress.track("root-package") as p:
            pkg = root_package(root)
            p.detail = pkg

        with progress.track("scan") as p:
            walk = scan_tree(root, targets_dict)
            p.detail = f"{len(walk.targets)} targets, {len(walk.errors)} errors"
        if walk.errors:
            # Files that fail to parse may be excluded from the build (e.g. by
            # build constraints), so scan failures are reported but not fatal.
            log.warning(
                "pipeline.scan_errors",
                count=len(walk.errors),
                errors=[str(e) for e in walk.errors],
            )

        targets = walk.targets
        with progress.track("packages"):
            resolve_target_packages(targets, root, pkg)
        for t in targets:
            log.debug("pipeline.target", package=t.pkg, var=t.var, generator=t.gen.value)

        output = StampOutput(root_package=pkg, targets=targets, scan_errors=walk.errors)
        if not targets:
            log.debug("pipeline.no_targets", root=str(root))
            progress.skip("ldflags", "no targets found")
            output.skipped = "no targets found"
            return output

        with progress.track("ldflags") as p:
            repo = self._repo_factory(root)
            resolver = MetadataResolver(repo, double_quote=options.double_quote, clock=self._clock)
            output.ldflags = assemble_ldflags(targets, resolver)
            p.detail = output.ldflags
        return output


def stamp(options: StampOptions) -> str:
    """Run the pipeline and return only the flag string."""
    return StampPipeline().run(options).ldflags
