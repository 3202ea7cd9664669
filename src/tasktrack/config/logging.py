"""Log routing for tasktrack.

Modules log through ``logging.getLogger(__name__)``. A single stderr handler
formats every record, stdlib or structlog, with structlog's
ProcessorFormatter:

- console lines by default (colored only on a TTY)
- one JSON object per line with ``--log-json``
"""

from __future__ import annotations

import logging
import sys

import structlog

APP_LOGGER = "tasktrack"

# Third-party loggers held at WARNING even under --verbose.
_QUIET_LOGGERS = ("sqlalchemy",)


def _pre_chain(*, log_json: bool) -> list[structlog.types.Processor]:
    """Processors applied to both structlog events and foreign stdlib records."""
    chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if log_json:
        # Tracebacks become a plain "exception" string field.
        chain.append(structlog.processors.format_exc_info)
    return chain


def _stderr_handler(
    pre_chain: list[structlog.types.Processor], *, log_json: bool
) -> logging.Handler:
    renderer: structlog.types.Processor
    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )
    return handler


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
) -> None:
    """Install the stderr handler and set logger levels.

    Safe to call repeatedly: the root handler is replaced, never stacked.

    Args:
        verbose: Let tasktrack's own DEBUG records through. Otherwise WARNING+.
        log_json: Render JSON lines instead of console lines.
    """
    pre_chain = _pre_chain(log_json=log_json)

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(_stderr_handler(pre_chain, log_json=log_json))
    root.setLevel(logging.WARNING)

    logging.getLogger(APP_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
