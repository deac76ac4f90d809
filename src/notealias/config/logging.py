"""Route notealias log events through structlog to stderr.

Services emit dotted event names (``alias.added``, ``store.write_conflict``)
with keyword context. Stdlib records from SQLAlchemy pass through the same
formatter so every line on stderr has one shape. Stdout stays reserved for
command results.
"""

from __future__ import annotations

import logging
import sys

import structlog

# Level for third-party loggers regardless of --verbose.
_LIBRARY_LEVEL = logging.WARNING


def _event_processors() -> list[structlog.types.Processor]:
    """Enrichment applied to both structlog events and stdlib records."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _final_renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
) -> None:
    """Install the stderr handler and set notealias's log level.

    Args:
        verbose: Let DEBUG events from ``notealias.*`` through; otherwise
            only WARNING and above.
        log_json: One JSON object per line instead of console formatting.
    """
    processors = _event_processors()

    structlog.configure(
        processors=[*processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _final_renderer(log_json),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(_LIBRARY_LEVEL)

    logging.getLogger("notealias").setLevel(logging.DEBUG if verbose else logging.WARNING)
    logging.getLogger("sqlalchemy").setLevel(_LIBRARY_LEVEL)
