"""
Coloured console logging for applications using gcs_filesystem.

Library modules only create loggers; applications call
``setup_colored_logging`` once at startup to get readable terminal output.
"""

import logging
import os
import sys
from typing import Optional


class Colors:
    """ANSI color codes for terminal output."""
    RESET = '\033[0m'
    BOLD = '\033[1m'
    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    BLUE = '\033[34m'
    CYAN = '\033[36m'


class ColoredFormatter(logging.Formatter):
    """
    Formatter that colours the level name and, for records emitted by the
    storage layer (``gcs_filesystem`` and ``google.cloud.storage``), the logger name.
    """

    LEVEL_COLORS = {
        logging.DEBUG: Colors.CYAN,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    STORAGE_LOGGER_PREFIXES = ('gcs_filesystem', 'google.cloud.storage')

    def __init__(self, fmt: Optional[str] = None, datefmt: Optional[str] = None, use_colors: bool = True):
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors and self._supports_color()

    @staticmethod
    def _supports_color() -> bool:
        if os.environ.get('NO_COLOR'):
            return False
        if os.environ.get('FORCE_COLOR'):
            return True
        if not hasattr(sys.stdout, 'isatty') or not sys.stdout.isatty():
            return False
        if sys.platform == 'win32':
            return bool(os.environ.get('ANSICON') or os.environ.get('WT_SESSION'))
        return True

    def _is_storage_log(self, record: logging.LogRecord) -> bool:
        return record.name.startswith(self.STORAGE_LOGGER_PREFIXES)

    def format(self, record: logging.LogRecord) -> str:
        if not self.use_colors:
            return super().format(record)

        levelname_orig = record.levelname
        name_orig = record.name

        level_color = self.LEVEL_COLORS.get(record.levelno, '')
        record.levelname = f"{level_color}{record.levelname}{Colors.RESET}"
        if self._is_storage_log(record):
            record.name = f"{Colors.BLUE}{record.name}{Colors.RESET}"

        try:
            return super().format(record)
        finally:
            record.levelname = levelname_orig
            record.name = name_orig


def setup_colored_logging(
    level: int = logging.INFO,
    format_string: Optional[str] = None,
    date_format: Optional[str] = None,
    use_colors: bool = True
) -> None:
    """
    Install a coloured stdout handler on the root logger.

    Existing root handlers are removed so repeated calls do not duplicate
    output. The noisy ``google.auth`` and ``urllib3`` loggers are capped at
    WARNING unless ``level`` is DEBUG.

    Example:
        >>> from gcs_filesystem.logging_config import setup_colored_logging
        >>> setup_colored_logging(level=logging.DEBUG)
    """
    if format_string is None:
        format_string = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    if date_format is None:
        date_format = '%Y-%m-%d %H:%M:%S'

    formatter = ColoredFormatter(fmt=format_string, datefmt=date_format, use_colors=use_colors)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if level > logging.DEBUG:
        for name in ('google.auth', 'urllib3'):
            logging.getLogger(name).setLevel(logging.WARNING)
