"""
Logging for Country Cache.

Every module asks for its logger through ``get_logger(__name__)``. Loggers
write to stdout and, when a log directory is given, to one file per logger
per day (``<name>_<YYYYMMDD>.log``). Level names come from ``LOG_LEVEL``.
"""

import logging
import sys
from datetime import date
from pathlib import Path
from typing import Optional, Union

from country_cache.config import Config

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    # getLevelName returns "Level X" for unknown names
    return resolved if isinstance(resolved, int) else logging.INFO


def log_file_path(name: str, log_dir: Path, day: Optional[date] = None) -> Path:
    """Daily log file for a logger name."""
    day = day or date.today()
    return Path(log_dir) / f"{name}_{day:%Y%m%d}.log"


def _console_handler(level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def _file_handler(path: Path, level: int, formatter: logging.Formatter) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


class Logger:
    """Registry of configured loggers, keyed by name."""

    _loggers = {}

    @classmethod
    def setup(
        cls,
        name: str,
        log_dir: Optional[Path] = None,
        level: Union[int, str] = Config.LOG_LEVEL,
        console: bool = True,
        file: bool = True,
    ) -> logging.Logger:
        """
        Configure a named logger once and remember it.

        Args:
            name: Logger name, normally the calling module's ``__name__``
            log_dir: Where the daily log file goes; no file without it
            level: Numeric level or level name such as "INFO"
            console: Attach a stdout handler
            file: Attach a file handler (needs log_dir)

        Returns:
            The configured logger; a second call with the same name returns
            the first one unchanged
        """
        if name in cls._loggers:
            return cls._loggers[name]

        level = _resolve_level(level)
        logger = logging.getLogger(name)
        logger.setLevel(level)

        # Configured elsewhere (e.g. by uvicorn); leave its handlers alone
        if logger.handlers:
            cls._loggers[name] = logger
            return logger

        formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

        if console:
            logger.addHandler(_console_handler(level, formatter))
            # Records already reach stdout; keep them out of the root logger
            logger.propagate = False

        if file and log_dir:
            logger.addHandler(_file_handler(log_file_path(name, log_dir), level, formatter))

        cls._loggers[name] = logger
        return logger

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Registered logger, or a console-only one."""
        if name not in cls._loggers:
            return cls.setup(name, file=False)
        return cls._loggers[name]


def get_logger(name: str, log_dir: Optional[Path] = None) -> logging.Logger:
    """Logger for ``name``, writing a daily file under ``log_dir`` when given."""
    return Logger.setup(name, log_dir=log_dir)
