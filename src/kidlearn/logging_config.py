"""structlog setup shared by the CLI, the dashboard and the JSON-lines server.

Engine events such as ``difficulty_adjusted`` and
``adaptive_settings_save_failed`` are emitted as key/value pairs. Unattended
runs render them as one JSON object per line; ``--debug`` switches to the
coloured console renderer. Output defaults to stderr; the JSON-lines server
writes its replies on stdout.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Optional, TextIO

import structlog

_BASE_PROCESSORS: list[Any] = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
]


def _renderers(debug: bool) -> list[Any]:
    if debug:
        return [structlog.dev.ConsoleRenderer(colors=True)]
    return [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]


def configure_logging(
    log_level: str = "INFO", debug: bool = False, stream: Optional[TextIO] = None
) -> None:
    """Route structlog through ``logging`` at ``log_level`` onto ``stream`` (stderr if None)."""
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(
        format="%(message)s", stream=stream or sys.stderr, level=level, force=True
    )

    structlog.configure(
        processors=_BASE_PROCESSORS + _renderers(debug),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
