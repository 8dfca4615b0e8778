"""Structured logging configuration: structlog + stdlib logging.

All diagnostics go to stderr; stdout is reserved for the flag string.
"""

from __future__ import annotations

import logging
import logging.config
import os

import structlog

# Quiet unless verbose mode is requested or a level is set explicitly.
_DEFAULT_LEVEL = "CRITICAL"


def setup_logging(verbose: bool = False) -> None:
    """Configure structlog and stdlib logging.

    Reads from environment variables:
        LDSTAMP_LOG_LEVEL  : log level when not verbose (default: CRITICAL)
        LDSTAMP_LOG_FORMAT : console | json (default: console)
    """
    if verbose:
        log_level = "DEBUG"
    else:
        log_level = os.environ.get("LDSTAMP_LOG_LEVEL", _DEFAULT_LEVEL).upper()
    log_format = os.environ.get("LDSTAMP_LOG_FORMAT", "console").lower()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=shared_processors
        + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structlog": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": shared_processors,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        renderer,
                    ],
                },
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "structlog",
                },
            },
            "root": {
                "handlers": ["default"],
                "level": log_level,
            },
            "loggers": {
                "ldstamp": {"level": log_level},
            },
        }
    )
