"""Logging configuration, reporting and error formatting helpers."""

from __future__ import annotations

from collections.abc import Callable
import logging
from typing import Any, Optional, Protocol, TypeVar

from artifact_viewers.errors import ArtifactViewerError

DEFAULT_LOGGER_NAME = "artifact_viewers"
DEFAULT_LOG_LEVEL = logging.INFO
DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

SEVERITIES = ("debug", "info", "warning", "error")

_T = TypeVar("_T")


class Reporter(Protocol):
    """Sink for diagnostics emitted while resolving viewers."""

    def report(self, severity: str, message: str) -> None:
        ...


class LoggingReporter:
    """Reporter that forwards to a standard library logger."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or logging.getLogger(DEFAULT_LOGGER_NAME)

    def report(self, severity: str, message: str) -> None:
        if severity not in SEVERITIES:
            raise ValueError(
                f"Unknown severity {severity!r}; expected one of {SEVERITIES}."
            )
        self.logger.log(logging.getLevelName(severity.upper()), message)


def resolve_reporter(
    reporter: Optional[Reporter],
    logger_name: str = DEFAULT_LOGGER_NAME,
) -> Reporter:
    if reporter is not None:
        return reporter
    return LoggingReporter(logging.getLogger(logger_name))


def parse_log_level(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        level = logging.getLevelName(value.strip().upper())
        if isinstance(level, int):
            return level
    raise ValueError(f"Invalid log level: {value!r}.")


def configure_logging(
    level: int = DEFAULT_LOG_LEVEL,
    *,
    logger_name: str = DEFAULT_LOGGER_NAME,
    fmt: str = DEFAULT_LOG_FORMAT,
    force: bool = False,
) -> logging.Logger:
    logging.basicConfig(level=level, format=fmt, force=force)
    logger = logging.getLogger(logger_name)
    logger.setLevel(level)
    return logger


def get_user_message(exc: BaseException) -> str:
    if isinstance(exc, ArtifactViewerError):
        return exc.user_message
    return f"Unexpected error: {exc}"


def log_exception(
    logger: logging.Logger,
    exc: BaseException,
    *,
    show_traceback: bool = False,
) -> str:
    user_message = get_user_message(exc)
    logger.error(user_message)
    if show_traceback:
        logger.error("Detailed traceback:", exc_info=exc)
    else:
        logger.debug("Detailed traceback:", exc_info=exc)
    return user_message


def run_with_error_handling(
    func: Callable[..., _T],
    *args: Any,
    logger: logging.Logger,
    show_traceback: bool = False,
    **kwargs: Any,
) -> _T:
    try:
        return func(*args, **kwargs)
    except Exception as exc:
        log_exception(logger, exc, show_traceback=show_traceback)
        raise


__all__ = [
    "DEFAULT_LOGGER_NAME",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_LOG_FORMAT",
    "SEVERITIES",
    "Reporter",
    "LoggingReporter",
    "resolve_reporter",
    "parse_log_level",
    "configure_logging",
    "get_user_message",
    "log_exception",
    "run_with_error_handling",
]
