"""structlog setup for applications embedding food_terms.

Importing the library never touches logging configuration. Library modules
emit snake_case events (``corpus_loaded``, ``csv_parsed``, ...) through
:func:`get_logger`; an application opts into rendering them by calling
:func:`configure_logging` once.
"""

import logging
import sys
from typing import Any

import structlog

from food_terms.config import settings

_CALLSITE = structlog.processors.CallsiteParameterAdder(
    parameters=[
        structlog.processors.CallsiteParameter.FILENAME,
        structlog.processors.CallsiteParameter.FUNC_NAME,
        structlog.processors.CallsiteParameter.LINENO,
    ]
)


def _renderer(json_logs: bool) -> list[Any]:
    if json_logs:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [
        structlog.dev.ConsoleRenderer(
            colors=sys.stdout.isatty(),
            exception_formatter=structlog.dev.plain_traceback,
        )
    ]


def configure_logging(log_level: str | None = None, json_logs: bool | None = None) -> None:
    """Route food_terms events to stdout via stdlib logging.

    Args:
        log_level: Minimum level name; defaults to ``settings.log_level``
        json_logs: One JSON object per event instead of console lines;
            defaults to ``settings.json_logs``
    """
    level = (log_level or settings.log_level).upper()
    if json_logs is None:
        json_logs = settings.json_logs

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level, logging.INFO),
    )

    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _CALLSITE,
            *_renderer(json_logs),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Return a structlog logger named *name* (usually ``__name__``)."""
    return structlog.get_logger(name)
