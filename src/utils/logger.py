"""
Structured logging setup using loguru.

Console output plus an optional rotating file sink. Records emitted through
the stdlib `logging` module by requests/urllib3 are forwarded to loguru so
transport diagnostics end up in the same sinks.
"""
import logging
import sys
from pathlib import Path
from loguru import logger as _logger


FORWARDED_LOGGERS = ("urllib3", "requests")


class _ForwardToLoguru(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = _logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        _logger.opt(exception=record.exc_info).log(level, record.getMessage())


def setup_logger(log_dir: Path | None = None, level: str = "INFO") -> None:
    """
    Configure loguru logger with console and optional file sink.

    Args:
        log_dir: Directory to write log files. If None, file logging is skipped.
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR).
    """
    _logger.remove()

    _logger.add(
        sys.stderr,
        level=level,
        format=(
            "<green>{time:HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
    )

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        _logger.add(
            log_dir / "f1_stats_{time:YYYY-MM-DD}.log",
            level=level,
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}",
            rotation="1 day",
            retention="7 days",
            compression="gz",
        )

    handler = _ForwardToLoguru()
    for name in FORWARDED_LOGGERS:
        stdlib_logger = logging.getLogger(name)
        stdlib_logger.handlers = [handler]
        stdlib_logger.setLevel(level)
        stdlib_logger.propagate = False


# Re-export the configured logger
logger = _logger
