"""ldstamp: stamp Go binaries with version info from git via -ldflags."""

__version__ = "0.1.0"

from ldstamp.config import TargetDictionary, build_target_dictionary
from ldstamp.exceptions import (
    ConfigError,
    LdstampError,
    ParseError,
    RepositoryError,
    RootPackageError,
    TreeScanError,
)
from ldstamp.ldflags import assemble_ldflags
from ldstamp.models import GeneratorKind, ScanError, Target
from ldstamp.pipeline import StampOptions, StampOutput, StampPipeline, stamp
from ldstamp.resolver import MetadataResolver
from ldstamp.version import Version, latest_version, parse_version

__all__ = [
    "ConfigError",
    "GeneratorKind",
    "LdstampError",
    "MetadataResolver",
    "ParseError",
    "RepositoryError",
    "RootPackageError",
    "ScanError",
    "StampOptions",
    "StampOutput",
    "StampPipeline",
    "Target",
    "TargetDictionary",
    "TreeScanError",
    "Version",
    "assemble_ldflags",
    "build_target_dictionary",
    "latest_version",
    "parse_version",
    "stamp",
]
