"""Logging configuration for godotpilot.

All output goes to stderr: stdout carries the MCP stream and the stop-hook
decision.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

LOGGER_NAME = "godotpilot"
CONSOLE_FORMAT = "[%(levelname)s] %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class GodotPilotLogger:
    """Process-wide logger with a stderr console and optional log files."""

    _instance: Optional['GodotPilotLogger'] = None
    _logger: Optional[logging.Logger] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if self._logger is None:
            self._logger = logging.getLogger(LOGGER_NAME)
            self._logger.setLevel(logging.DEBUG)
            self._logger.propagate = False
            self._console = logging.StreamHandler(sys.stderr)
            self._console.setLevel(logging.INFO)
            self._console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
            self._logger.addHandler(self._console)

    @property
    def console_level(self) -> int:
        return self._console.level

    def enable_debug(self):
        """Show debug lines (bridge traffic, skipped best-effort calls) on stderr."""
        self._console.setLevel(logging.DEBUG)

    def add_file_handler(self, log_file: str):
        """Also write everything to log_file. Adding the same file twice is a no-op."""
        file_path = Path(log_file).resolve()
        for handler in self._logger.handlers:
            if isinstance(handler, logging.FileHandler) and Path(handler.baseFilename) == file_path:
                return
        file_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(file_path, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        self._logger.addHandler(file_handler)

    def debug(self, msg: str, *args, **kwargs):
        self._logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        self._logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        self._logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        self._logger.error(msg, *args, **kwargs)

    def exception(self, msg: str, *args, **kwargs):
        """Log exception with traceback."""
        self._logger.exception(msg, *args, **kwargs)


def get_logger() -> GodotPilotLogger:
    """Get the global godotpilot logger instance."""
    return GodotPilotLogger()


def setup_logging(debug: bool = False, log_file: Optional[str] = None) -> GodotPilotLogger:
    """
    Setup logging configuration.

    Args:
        debug: Enable debug level logging
        log_file: Optional file path for persistent logging
    """
    logger = get_logger()
    if debug:
        logger.enable_debug()
    if log_file:
        logger.add_file_handler(log_file)
    return logger
