"""
Process logging for the API, the CLI and the access log.

Every line carries a UTC timestamp and, while a request is being served, the
request id the web middleware bound for it::

    2024-06-10 16:00:00.123Z INFO     [9f1c..] inkpost_blog.service: Created post id=3 slug=hello-1718035200123
"""

import logging
import sys
import time
from contextlib import contextmanager
from contextvars import ContextVar, Token
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterator, Mapping, Optional, Union

request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

LINE_FORMAT = "%(asctime)s %(levelname)-8s %(request_tag)s%(name)s: %(message)s"

# The access middleware already writes one line per request
QUIET_LOGGERS: Mapping[str, int] = {"uvicorn.access": logging.WARNING}


class RequestIdFormatter(logging.Formatter):
    """Adds ``%(request_tag)s`` and writes timestamps in UTC."""

    converter = time.gmtime

    def formatTime(self, record, datefmt=None):  # noqa: N802
        stamp = self.converter(record.created)
        if datefmt:
            return time.strftime(datefmt, stamp)
        return f"{time.strftime('%Y-%m-%d %H:%M:%S', stamp)}.{int(record.msecs):03d}Z"

    def format(self, record: logging.LogRecord) -> str:
        rid = request_id.get()
        record.request_tag = f"[{rid}] " if rid else ""
        return super().format(record)


def _level(value: Union[int, str]) -> int:
    if isinstance(value, int):
        return value
    return logging.getLevelNamesMapping().get(value.upper(), logging.INFO)


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    *,
    logger_name: Optional[str] = None,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> logging.Logger:
    """
    Route log records to stdout and, optionally, a rotating file.

    Configures the root logger unless ``logger_name`` is given, in which case
    only that logger is configured and stops propagating. Calling it again
    replaces the previous handlers.

    Args:
        level: Level name (``"DEBUG"``) or number.
        log_file: Optional path; parent directories are created.
        logger_name: Restrict configuration to one logger tree.

    Returns:
        The configured logger.
    """
    target = logging.getLogger(logger_name)
    for handler in list(target.handlers):
        target.removeHandler(handler)
        handler.close()
    target.setLevel(_level(level))

    formatter = RequestIdFormatter(LINE_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if log_file:
        path = Path(log_file).expanduser().resolve()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(
                RotatingFileHandler(
                    path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
                )
            )
        except OSError as e:
            sys.stderr.write(f"Cannot write log file {path}: {e}\n")

    for handler in handlers:
        handler.setFormatter(formatter)
        target.addHandler(handler)

    if logger_name is None:
        for name, quiet_level in QUIET_LOGGERS.items():
            logging.getLogger(name).setLevel(quiet_level)
    else:
        target.propagate = False
    return target


def bind_request_id(value: str) -> Token:
    """
    >>> token = bind_request_id("req-555")
    >>> unbind_request_id(token)
    """
    return request_id.set(value)


def unbind_request_id(token: Token) -> None:
    request_id.reset(token)


@contextmanager
def request_id_scope(value: str) -> Iterator[None]:
    """
    >>> with request_id_scope("req-123"):
    ...     logger.info("tagged with req-123")
    """
    token = bind_request_id(value)
    try:
        yield
    finally:
        unbind_request_id(token)
