"""
Logger Module

Centralized logging for pyprovision.  Every module gets its logger through
``get_module_logger(__name__)``; the CLI calls ``Logger.init_logging()`` once
to attach the handlers.

Log lines look like::

    2026-10-19 10:15:02,118 - [INFO] Decision: install

The log file is opened in append mode and is never rotated or truncated.

Usage:
    from pyprovision.logger import get_module_logger
    logger = get_module_logger(__name__)
    logger.info("Information message")
"""

import logging
import sys
from pathlib import Path
from typing import Dict, Optional

ROOT_LOGGER_NAME = 'pyprovision'
LOG_FORMAT = '%(asctime)s - [%(levelname)s] %(message)s'


class Logger:
    """
    Logger wrapper with centralized configuration.

    Example:
        >>> Logger.init_logging(Path('C:/Temp/pyprovision.log'))
        >>> logger = Logger.get_logger(__name__)
        >>> logger.info("Information message")
    """

    _initialized = False
    _log_file: Optional[Path] = None
    _loggers: Dict[str, logging.Logger] = {}

    @classmethod
    def get_logger(cls, name: str = ROOT_LOGGER_NAME) -> logging.Logger:
        """
        Get or create a logger instance for the specified name.

        Args:
            name: Logger name (typically __name__ for module-specific logging)

        Returns:
            logging.Logger: Logger instance under the ``pyprovision`` hierarchy
        """
        if name not in cls._loggers:
            cls._loggers[name] = logging.getLogger(name)
        return cls._loggers[name]

    @classmethod
    def init_logging(cls, log_file: Path, console: bool = True) -> None:
        """
        Attach the file (and console) handlers to the ``pyprovision`` logger.

        Idempotent for the same *log_file*.  Calling it with a different file
        replaces the previous file handler.

        Args:
            log_file: Append-only UTF-8 log file; parent directories are created.
            console:  Also echo INFO and above to stdout.
        """
        log_file = Path(log_file)
        if cls._initialized and cls._log_file == log_file:
            return

        formatter = logging.Formatter(LOG_FORMAT)
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)

        for handler in root_logger.handlers[:]:
            handler.close()
            root_logger.removeHandler(handler)

        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(log_file), mode='a', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

        if console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(logging.INFO)
            console_handler.setFormatter(formatter)
            root_logger.addHandler(console_handler)

        root_logger.setLevel(logging.DEBUG)
        cls._log_file = log_file
        cls._initialized = True

    @classmethod
    def shutdown(cls) -> None:
        """Close and detach all handlers (used by tests and at exit)."""
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        for handler in root_logger.handlers[:]:
            handler.close()
            root_logger.removeHandler(handler)
        cls._log_file = None
        cls._initialized = False


def get_module_logger(module_name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """
    Get a logger instance for the specified module.

    Example:
        >>> logger = get_module_logger(__name__)
        >>> logger.info("Starting process...")
    """
    return Logger.get_logger(module_name)


def LogSection(title):
    """
    Log a section header surrounded by separator lines.

    Example:
        >>> LogSection("Python provisioning: 3.12.9")
    """
    logger = Logger.get_logger(ROOT_LOGGER_NAME)
    logger.info("=" * 60)
    logger.info(f"  {title}")
    logger.info("=" * 60)


def LogResult(passed, message):
    """
    Log an outcome as pass or fail with a message.

    Example:
        >>> LogResult(True, "Python 3.12.9 install complete")
        >>> LogResult(False, "Download failed")
    """
    logger = Logger.get_logger(ROOT_LOGGER_NAME)
    if passed:
        logger.info(f"[PASS] {message}")
    else:
        logger.error(f"[FAIL] {message}")
