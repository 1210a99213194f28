"""structlog configuration for gamestats.

All log output goes to stderr so CSV piped from ``gamestats export`` stays
clean. Stdlib loggers (``logging.getLogger(__name__)`` in every module) are
routed through structlog's ProcessorFormatter.

Levels for the ``gamestats`` logger:
- ``--verbose``: DEBUG
- default: WARNING (skipped documents are reported)
- ``--quiet``: ERROR
"""

from __future__ import annotations

import logging
import sys

import structlog

APP_LOGGER = "gamestats"

# Third-party loggers kept at WARNING regardless of --verbose.
_QUIET_LIBRARIES = ("markdown_it",)


def resolve_level(*, verbose: bool = False, quiet: bool = False) -> int:
    """Level for the application logger. ``verbose`` wins over ``quiet``."""
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    return logging.WARNING


def _build_renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_json: bool = False,
) -> None:
    """Configure structlog processors and route stdlib logging to stderr.

    Safe to call more than once: the root handler is replaced, not stacked.

    Args:
        verbose: Enable DEBUG-level application logs.
        quiet: Only ERROR-level application logs.
        log_json: One JSON object per line instead of console output.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _build_renderer(log_json),
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger(APP_LOGGER).setLevel(resolve_level(verbose=verbose, quiet=quiet))
    for name in _QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)
