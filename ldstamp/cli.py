"""CLI entry point: ldstamp.

Prints the value for ``go build -ldflags``:

    go build -ldflags "$(ldstamp)" .
    ldstamp -d ./myproject -m AppVersion=version,GitCommit=hash-short -v
"""

from __future__ import annotations

import sys

import click
import structlog

from ldstamp import __version__
from ldstamp.core.logging import setup_logging
from ldstamp.exceptions import LdstampError
from ldstamp.pipeline import StampOptions, StampPipeline

EXIT_OK = 0
EXIT_FAIL = 1


@click.command()
@click.option(
    "-d",
    "--dir",
    "project_dir",
    default=".",
    show_default=True,
    help="The root directory of the project",
)
@click.option(
    "-c",
    "--config",
    "config_path",
    default=None,
    envvar="LDSTAMP_CONFIG",
    help="The path to the configuration file",
)
@click.option(
    "-m",
    "--map",
    "mapping",
    default=None,
    envvar="LDSTAMP_MAP",
    help="Target mapping: var=generator[,var=generator...]",
)
@click.option("--qq", "double_quote", is_flag=True, help="Double quote tag values")
@click.option("--no-defaults", is_flag=True, help="Do not use the built-in target names")
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging to stderr")
@click.version_option(version=__version__, prog_name="ldstamp")
def main(
    project_dir: str,
    config_path: str | None,
    mapping: str | None,
    double_quote: bool,
    no_defaults: bool,
    verbose: bool,
) -> None:
    """Generate Go -ldflags that stamp version info from git."""
    setup_logging(verbose)
    log = structlog.get_logger("ldstamp.cli")

    options = StampOptions(
        project_dir=project_dir,
        config_path=config_path,
        mapping=mapping,
        double_quote=double_quote,
        use_defaults=not no_defaults,
    )
    pipeline = StampPipeline()
    try:
        output = pipeline.run(options)
    except LdstampError as e:
        log.debug("cli.failed", error=str(e), summary=pipeline.progress.summary())
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_FAIL)

    if output.skipped:
        log.info("cli.skipped", reason=output.skipped)
    click.echo(output.ldflags, nl=False)
    sys.exit(EXIT_OK)


if __name__ == "__main__":
    main()
