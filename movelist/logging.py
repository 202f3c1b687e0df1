"""structlog setup shared by the API app and library callers.

Development gets the console renderer; any other environment emits JSON lines.
An optional log file receives a copy of every line.
"""

from __future__ import annotations

import logging
import sys
from typing import IO

import structlog

from movelist.config import settings


class _FileTee:
    """Mirror stdout writes into a log file.

    A file that cannot be opened or written is dropped with a warning on stderr;
    stdout logging keeps working either way.
    """

    def __init__(self, file_path: str) -> None:
        self._file: IO[str] | None = None
        try:
            self._file = open(file_path, "a")  # noqa: SIM115
        except OSError as exc:
            # structlog is not configured yet, so report on stderr directly
            print(f"WARNING: cannot open log file {file_path!r}: {exc}", file=sys.stderr)

    def _disable(self, reason: str) -> None:
        self._file = None
        print(f"WARNING: log file {reason} failed, file logging disabled", file=sys.stderr)

    def write(self, data: str) -> None:
        sys.stdout.write(data)
        if self._file is None:
            return
        try:
            self._file.write(data)
            self._file.flush()
        except (OSError, ValueError):
            self._disable("write")

    def flush(self) -> None:
        sys.stdout.flush()
        if self._file is None:
            return
        try:
            self._file.flush()
        except (OSError, ValueError):
            self._disable("flush")


def _resolve_level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(
    level: str | None = None,
    log_file: str | None = None,
    environment: str | None = None,
) -> None:
    """Configure structlog; arguments default to the values in ``settings``."""
    environment = environment or settings.environment
    log_file = settings.log_file if log_file is None else log_file

    renderer = (
        structlog.dev.ConsoleRenderer()
        if environment == "development"
        else structlog.processors.JSONRenderer()
    )

    logger_factory: structlog.PrintLoggerFactory
    if log_file:
        # PrintLoggerFactory only needs write() and flush()
        logger_factory = structlog.PrintLoggerFactory(file=_FileTee(log_file))  # type: ignore[arg-type]
    else:
        logger_factory = structlog.PrintLoggerFactory()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            _resolve_level(level or settings.log_level)
        ),
        context_class=dict,
        logger_factory=logger_factory,
        cache_logger_on_first_use=True,
    )
