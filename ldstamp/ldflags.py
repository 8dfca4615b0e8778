"""Assemble the ``-ldflags`` value from targets and generated values."""

from __future__ import annotations

from ldstamp.models import Target
from ldstamp.resolver import MetadataResolver


def format_flag(target: Target, value: str) -> str:
    return f"-X {target.pkg}.{target.var}={value}"


def assemble_ldflags(targets: list[Target], resolver: MetadataResolver) -> str:
    """Return one ``-X pkg.Var=value`` token per target, space separated.

    Targets whose generator yields an empty value are left out.  Any
    generator failure propagates, so a partial flag string is never returned.
    """
    flags: list[str] = []
    for target in targets:
        value = resolver.generate(target.gen)
        if value:
            flags.append(format_flag(target, value))
    return " ".join(flags)
