"""Loguru-backed logger used across the storage clients."""

import sys
from typing import Any, Optional

from loguru import logger as _loguru_logger

from deployment_storage.constants import LOG_LEVEL

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> "
    "<level>{level: <8}</level> "
    "<cyan>{extra[logger_name]}</cyan> - <level>{message}</level>"
)

_loggers: dict = {}


class StorageLogger:
    """Minimal logger that forwards .info/.error/.debug to loguru."""

    def __init__(self, name: str) -> None:
        self._name = name
        self._log = _loguru_logger.bind(logger_name=name)

    @property
    def name(self) -> str:
        return self._name

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log.info(msg, *args, **kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log.error(msg, *args, **kwargs)

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log.debug(msg, *args, **kwargs)


def setup_logging(level: Optional[str] = None) -> int:
    """Replace loguru's default sink with a single stderr sink.

    Args:
        level: Minimum level to emit. Defaults to ``LOG_LEVEL``.

    Returns:
        int: The loguru handler id of the installed sink.
    """
    _loguru_logger.remove()
    return _loguru_logger.add(
        sys.stderr,
        level=(level or LOG_LEVEL).upper(),
        format=LOG_FORMAT,
    )


def get_logger(name: Optional[str] = None) -> StorageLogger:
    if name is None:
        name = "deployment_storage"
    if name not in _loggers:
        _loggers[name] = StorageLogger(name)
    return _loggers[name]


_loguru_logger.configure(extra={"logger_name": "deployment_storage"})

default_logger = get_logger()
