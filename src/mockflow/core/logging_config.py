"""
Structured logging for mockflow.

Events are snake_case names with key/value context. Work on a project runs
inside `project_context`, so every event it logs carries the project id.
"""

import logging
import sys
from contextlib import AbstractContextManager
from typing import Any

import structlog
from pythonjsonlogger import jsonlogger

LOGGER_NAME = "mockflow"


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """
    Route mockflow events through stdlib logging.

    Args:
        level: Log level for the mockflow logger tree
        json_logs: Emit one JSON object per event
    """
    handler = logging.StreamHandler(sys.stdout)
    if json_logs:
        handler.setFormatter(jsonlogger.JsonFormatter("%(name)s %(message)s"))
    else:
        handler.setFormatter(logging.Formatter("%(name)s - %(message)s"))

    root = logging.getLogger(LOGGER_NAME)
    root.handlers = [handler]
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.propagate = False

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Logger for a mockflow module (pass __name__)."""
    return structlog.get_logger(name)


def project_context(project_id: str, **kwargs: Any) -> AbstractContextManager:
    """Bind a project id (and any extra keys) to every event logged in scope."""
    return structlog.contextvars.bound_contextvars(project_id=project_id, **kwargs)
