"""
structlog setup for the match API.

dev renders colored key/value lines; every other environment emits one JSON
object per line. Context bound through ``structlog.contextvars`` (request_id,
path, method from ``app.middleware.request_id``) is merged into each event,
and stdlib loggers (uvicorn, sqlalchemy, the repositories) share the same
formatter.
"""

import logging
import sys
from typing import Union

import structlog

# Loggers that are too chatty outside local development
_QUIET_OUTSIDE_DEV = ("uvicorn.access", "sqlalchemy.engine", "sqlalchemy.pool")


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(app_env: str = "dev", level: Union[int, str] = logging.INFO) -> None:
    """
    Install the structlog pipeline and route the root logger through it.

    Args:
        app_env: "dev" picks ConsoleRenderer, anything else JSONRenderer
        level: Root level, as a logging constant or a name such as "DEBUG"
    """
    pre_chain: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    renderer = (
        structlog.dev.ConsoleRenderer()
        if app_env == "dev"
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(_resolve_level(level))

    if app_env != "dev":
        for name in _QUIET_OUTSIDE_DEV:
            logging.getLogger(name).setLevel(logging.WARNING)
