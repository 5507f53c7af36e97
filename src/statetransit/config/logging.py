"""structlog configuration for statetransit.

Two output modes:
- Human (default): console renderer to stderr, colored on a TTY
- JSON (log_json=True): Structured JSON lines to stderr

statetransit never configures logging on import. Applications call
:func:`configure_logging` (or their own setup) explicitly.
"""

from __future__ import annotations

import logging
import sys

import structlog

from statetransit.config.settings import get_settings


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
) -> None:
    """Configure structlog processors and output routing.

    Args:
        verbose: Enable DEBUG-level output for ``statetransit``. When
            False, only WARNING+.
        log_json: Use JSON renderer instead of console renderer.
    """
    transit_level = logging.DEBUG if verbose else logging.WARNING

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    transit_logger = logging.getLogger("statetransit")
    transit_logger.setLevel(transit_level)
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)


def configure_from_settings() -> None:
    """Configure logging from the cached :class:`TransitSettings`."""
    settings = get_settings()
    configure_logging(verbose=settings.verbose, log_json=settings.log_json)
