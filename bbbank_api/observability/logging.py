from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

import structlog


_CONFIGURED = False

# Framework chatter is capped the same way for every deployment; request lines
# only show up when they carry a server error unless ACCESS_LOG_LEVEL lowers it.
FRAMEWORK_LOG_LEVELS: dict[str, int] = {
    "uvicorn": logging.INFO,
    "uvicorn.error": logging.INFO,
    "uvicorn.access": logging.WARNING,
    "fastapi": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "sqlalchemy.pool": logging.WARNING,
}
ACCESS_LOGGER_NAME = "bbbank_api.access"


def configure_logging(
    level: int = logging.INFO,
    access_level: int = logging.WARNING,
    stream: TextIO | None = None,
    force: bool = False,
) -> None:
    """Route structlog and stdlib records through one JSON renderer.

    Fields passed to stdlib loggers via ``extra=`` are lifted into the rendered
    line. No-op after the first call unless ``force`` is set.
    """

    global _CONFIGURED
    if _CONFIGURED and not force:
        return

    pre_chain: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.ExtraAdder(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *pre_chain,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.JSONRenderer(default=str),
        ],
        foreign_pre_chain=pre_chain,
    )

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    for name, framework_level in FRAMEWORK_LOG_LEVELS.items():
        logger = logging.getLogger(name)
        logger.handlers = [handler] if name.startswith("uvicorn") else []
        logger.propagate = not name.startswith("uvicorn")
        logger.setLevel(max(level, framework_level))

    logging.getLogger(ACCESS_LOGGER_NAME).setLevel(max(level, access_level))

    _CONFIGURED = True


def reset_logging() -> None:
    """Undo ``configure_logging`` (used by tests)."""

    global _CONFIGURED
    structlog.reset_defaults()
    root = logging.getLogger()
    root.handlers = []
    root.setLevel(logging.WARNING)
    for name in (*FRAMEWORK_LOG_LEVELS, ACCESS_LOGGER_NAME):
        logger = logging.getLogger(name)
        logger.handlers = []
        logger.propagate = True
        logger.setLevel(logging.NOTSET)
    _CONFIGURED = False
