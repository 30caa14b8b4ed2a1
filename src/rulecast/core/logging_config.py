"""structlog rendering for rulecast's stdlib loggers.

Library modules only call ``logging.getLogger(__name__)``.  A hosting
application calls :func:`setup_logging` once at startup to render every
record (rule failures, skipped includes, missing validators) as JSON lines
or as colored console output.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any, TextIO

import structlog

if TYPE_CHECKING:
    from rulecast.core.config import ObservabilityConfig

LIBRARY_LOGGER = "rulecast"


def _pre_chain() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]


def _render_chain(config: ObservabilityConfig, stream: TextIO) -> list[Any]:
    json_logs = config.json_logs
    if json_logs is None:
        json_logs = not stream.isatty()
    if json_logs:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer()]


def setup_logging(config: ObservabilityConfig, *, stream: TextIO | None = None) -> logging.Handler:
    """Install a single structlog-formatted handler on the root logger.

    ``config.json_logs=None`` picks JSON when ``stream`` is not a terminal.
    Returns the installed handler.
    """
    stream = stream or sys.stderr
    level = getattr(logging, config.log_level.upper(), logging.INFO)
    pre_chain = _pre_chain()

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *_render_chain(config, stream),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)
    logging.getLogger(LIBRARY_LOGGER).setLevel(level)
    return handler
