"""Structured logging setup shared by the CLI and the library."""

import logging
import sys
from typing import List, Optional

import structlog
from structlog.stdlib import LoggerFactory


def _processors(fmt: str) -> List:
    return [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer() if fmt == "json" else structlog.dev.ConsoleRenderer(colors=False),
    ]


def _configure(fmt: str) -> None:
    structlog.configure(
        processors=_processors(fmt),
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        # module-level loggers are created before the CLI calls setup_logging
        cache_logger_on_first_use=False,
    )


def setup_logging(level: str = "WARNING", fmt: str = "console", log_file: Optional[str] = None) -> None:
    """Route structlog through stdlib logging at `level`, on stderr and optionally a file."""
    _configure(fmt)

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level.upper(), logging.WARNING),
        handlers=handlers,
        force=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


# library use without setup_logging: defer to whatever stdlib logging says
if not structlog.is_configured():
    _configure("console")
