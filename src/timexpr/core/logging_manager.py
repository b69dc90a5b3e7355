"""Centralized Logging Management for timexpr

Handles log configuration, formatting, and output management for the
``timexpr`` package logger. The root logger is never touched, so host
applications keep control of their own logging setup.
"""

import logging
import logging.handlers
import re
import sys
from pathlib import Path
from typing import Dict, Optional

PACKAGE_LOGGER = "timexpr"


class ColoredFormatter(logging.Formatter):
    """Custom formatter that adds colors to console output."""

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m'        # Reset
    }

    def format(self, record):
        """Format log record with colors for console output."""
        log_message = super().format(record)
        return f"{self.COLORS.get(record.levelname, '')}{log_message}{self.COLORS['RESET']}"


def parse_size(size: str) -> int:
    """Convert a size string such as ``10MB`` into bytes."""
    match = re.match(r'^(\d+)([KMG])B$', size.strip().upper())
    if not match:
        raise ValueError(f"Invalid size: {size}")
    multiplier = {'K': 1024, 'M': 1024 ** 2, 'G': 1024 ** 3}[match.group(2)]
    return int(match.group(1)) * multiplier


class LoggingManager:
    """Centralized logging configuration and management."""

    _instance: Optional['LoggingManager'] = None
    _initialized: bool = False

    def __new__(cls) -> 'LoggingManager':
        """Singleton pattern implementation."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize logging manager (only once)."""
        if self._initialized:
            return

        self.loggers: Dict[str, logging.Logger] = {}
        self.package_logger = logging.getLogger(PACKAGE_LOGGER)
        self.package_logger.addHandler(logging.NullHandler())
        self._handlers: list = []
        self._initialized = True

    def configure(self, level: str = "INFO", log_to_console: bool = True,
                  file_path: Optional[Path] = None, max_bytes: int = 10 * 1024 * 1024,
                  backup_count: int = 5):
        """Attach handlers to the package logger.

        Calling this again replaces the handlers installed by the previous call.

        Args:
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_to_console: Emit colored output on stderr
            file_path: Optional rotating log file
            max_bytes: Rotation size for the log file
            backup_count: Number of rotated files to keep
        """
        numeric_level = self._numeric_level(level)

        for handler in self._handlers:
            self.package_logger.removeHandler(handler)
            handler.close()
        self._handlers = []

        self.package_logger.setLevel(numeric_level)

        if log_to_console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(numeric_level)
            console_handler.setFormatter(ColoredFormatter(
                '%(asctime)s | %(name)s | %(levelname)s | %(message)s',
                datefmt='%H:%M:%S'
            ))
            self._add_handler(console_handler)

        if file_path is not None:
            file_path = Path(file_path)
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                file_path,
                maxBytes=max_bytes,
                backupCount=backup_count
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(
                '%(asctime)s | %(name)s | %(levelname)s | %(funcName)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            ))
            self._add_handler(file_handler)

    def configure_from(self, logging_config):
        """Configure handlers from a ``LoggingConfig`` model."""
        self.configure(
            level=logging_config.level,
            log_to_console=logging_config.log_to_console,
            file_path=Path(logging_config.file_path) if logging_config.file_path else None,
            max_bytes=parse_size(logging_config.max_file_size),
            backup_count=logging_config.backup_count
        )

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Class method to get logger instance.

        Args:
            name: Logger name (typically __name__ of the module)

        Returns:
            Logger instance
        """
        manager = cls()
        return manager._get_logger_instance(name)

    def _get_logger_instance(self, name: str) -> logging.Logger:
        """Internal method to get logger instance."""
        if name in self.loggers:
            return self.loggers[name]

        logger = logging.getLogger(name)
        self.loggers[name] = logger
        return logger

    def set_log_level(self, level: str):
        """Set the logging level for the package logger and console handler.

        Args:
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        """
        numeric_level = self._numeric_level(level)
        self.package_logger.setLevel(numeric_level)

        for handler in self._handlers:
            if isinstance(handler, logging.StreamHandler) and handler.stream == sys.stderr:
                handler.setLevel(numeric_level)
                break

    def _add_handler(self, handler: logging.Handler):
        self.package_logger.addHandler(handler)
        self._handlers.append(handler)

    @staticmethod
    def _numeric_level(level: str) -> int:
        numeric_level = getattr(logging, level.upper(), None)
        if not isinstance(numeric_level, int):
            raise ValueError(f'Invalid log level: {level}')
        return numeric_level
