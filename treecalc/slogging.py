"""Logging helpers. Errors are appended to a plain text log file which is only
created when the first record is written."""
import datetime
import logging
from pathlib import Path
from typing import Optional, Union

# Every treecalc logger is a child of this one
ROOT_LOGGER = "treecalc"

logging.getLogger(ROOT_LOGGER).addHandler(logging.NullHandler())


def with_logger(cls):
    """Add a logger as static attribute to a class."""
    cls._log = logging.getLogger(f"{ROOT_LOGGER}.{cls.__name__}")
    return cls


class LogFileFormatter(logging.Formatter):
    """
    logging.Formatter that records when and where an error happened, followed
    by the (possibly multi-line) message.
    """

    def formatTime(self, record: logging.LogRecord, datefmt: str = None) -> str:
        created = datetime.datetime.fromtimestamp(record.created).astimezone()
        return created.isoformat(timespec="seconds")

    def formatMessage(self, record: logging.LogRecord) -> str:
        return "[%s] %s %s:%d in %s()\n%s\n" % (
            self.formatTime(record),
            record.levelname,
            record.filename,
            record.lineno,
            record.funcName,
            record.message,
        )


class LogFileHandler(logging.FileHandler):
    """Append-only file handler that opens its file on the first record."""

    def __init__(self, filename: Union[str, Path]):
        super().__init__(str(filename), mode="a", encoding="utf8", delay=True)
        self.setFormatter(LogFileFormatter())


def setup(log_file: Optional[Union[str, Path]], level: Union[str, int] = "ERROR"):
    """
    Route treecalc log records of at least `level` to `log_file`. Calling this
    again replaces the file handler installed by the previous call, and passing
    `None` removes it.

    Args:
        log_file: Path of the append-only log file.
        level: The minimum level of the records written to the file.

    Returns:
        The installed handler, or None.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {level}")

    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        if isinstance(handler, LogFileHandler):
            logger.removeHandler(handler)
            handler.close()

    if log_file is None:
        return None
    handler = LogFileHandler(log_file)
    handler.setLevel(level)
    logger.addHandler(handler)
    logger.setLevel(min(level, logger.level or level))
    return handler
