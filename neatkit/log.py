"""Level-filtered console logging for the algorithm."""

from __future__ import annotations

import enum
import logging
import sys


class LoggerLevel(str, enum.Enum):
    """The logger output levels."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warn"
    ERROR = "error"


_RANK = {
    LoggerLevel.DEBUG: 0,
    LoggerLevel.INFO: 1,
    LoggerLevel.WARNING: 2,
    LoggerLevel.ERROR: 3,
}

# The current log level; unset until init_logger is called.
log_level: LoggerLevel | str = ""


class _ConsoleHandler(logging.Handler):
    """Writes records to the process's current stdout or stderr."""

    def __init__(self, to_stderr: bool) -> None:
        super().__init__(logging.DEBUG)
        self._to_stderr = to_stderr

    def emit(self, record: logging.LogRecord) -> None:
        try:
            stream = sys.stderr if self._to_stderr else sys.stdout
            stream.write(self.format(record) + "\n")
            stream.flush()
        except Exception:
            self.handleError(record)


def _make_logger(suffix: str, prefix: str, to_stderr: bool) -> logging.Logger:
    logger = logging.getLogger(f"neatkit.{suffix}")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    if not any(isinstance(h, _ConsoleHandler) for h in logger.handlers):
        handler = _ConsoleHandler(to_stderr)
        handler.setFormatter(
            logging.Formatter(
                f"{prefix}%(asctime)s %(filename)s:%(lineno)d: %(message)s",
                datefmt="%H:%M:%S",
            )
        )
        logger.addHandler(handler)
    return logger


_debug_logger = _make_logger("debug", "DEBUG: ", to_stderr=False)
_info_logger = _make_logger("info", "INFO: ", to_stderr=False)
_warn_logger = _make_logger("warn", "ALERT: ", to_stderr=False)
_error_logger = _make_logger("error", "ERROR: ", to_stderr=True)


def init_logger(level: str) -> None:
    """Set the current log level; raises ValueError for an unknown level."""
    global log_level
    try:
        log_level = LoggerLevel(level)
    except ValueError:
        raise ValueError(f"unsupported log level: [{level}]") from None


def accept_log_level(current_level: LoggerLevel | str, target_level: LoggerLevel | str) -> bool:
    """Tell whether messages at ``target_level`` pass when ``current_level`` is set."""
    try:
        current = LoggerLevel(current_level)
    except ValueError:
        _error_logger.error(
            "Unsupported NEAT log level was set: '%s'. Please use one of the following: "
            "'debug', 'info', 'warn', and 'error'.",
            current_level,
            stacklevel=2,
        )
        return False
    try:
        target = LoggerLevel(target_level)
    except ValueError:
        return False
    return _RANK[target] >= _RANK[current]


def debug_log(message: str) -> None:
    """Output a message at debug level."""
    if accept_log_level(log_level, LoggerLevel.DEBUG):
        _debug_logger.debug(message, stacklevel=2)


def info_log(message: str) -> None:
    """Output a message at info level."""
    if accept_log_level(log_level, LoggerLevel.INFO):
        _info_logger.info(message, stacklevel=2)


def warn_log(message: str) -> None:
    """Output a message at warning level."""
    if accept_log_level(log_level, LoggerLevel.WARNING):
        _warn_logger.warning(message, stacklevel=2)


def error_log(message: str) -> None:
    """Output a message at error level."""
    if accept_log_level(log_level, LoggerLevel.ERROR):
        _error_logger.error(message, stacklevel=2)