"""
Centralized logging configuration for the node catalog and response cache.

Features:
- Colored logging with different colors for different log levels
- Structured formatting with timestamps and context
- Optional file output alongside the console
- Configurable log levels and output formats
"""

import logging
import re
import sys
from pathlib import Path
from typing import Optional, Union


# Color codes for terminal output
class Colors:
    """ANSI color codes for terminal output"""
    RESET = "\033[0m"
    BOLD = "\033[1m"
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    MAGENTA = "\033[95m"
    CYAN = "\033[96m"
    WHITE = "\033[97m"
    GRAY = "\033[90m"


class ColoredFormatter(logging.Formatter):
    """Custom formatter that adds colors to log messages"""

    COLORS = {
        logging.DEBUG: Colors.GRAY,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.MAGENTA,
    }

    TIMESTAMP_PATTERN = re.compile(r'(\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2})')

    def format(self, record):
        formatted = super().format(record)

        level_color = self.COLORS.get(record.levelno, Colors.WHITE)
        formatted = formatted.replace(
            record.levelname,
            f"{level_color}{record.levelname}{Colors.RESET}",
            1
        )

        formatted = self.TIMESTAMP_PATTERN.sub(f"{Colors.CYAN}\\1{Colors.RESET}", formatted, count=1)

        if record.name:
            formatted = formatted.replace(
                f"{record.name} - ",
                f"{Colors.BLUE}{record.name}{Colors.RESET} - ",
                1
            )

        return formatted


DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
SIMPLE_FORMAT = "%(levelname)s - %(message)s"
JSON_FORMAT = '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}'
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "detailed",
    log_file: Optional[Union[str, Path]] = None,
    enable_colors: bool = True
) -> logging.Logger:
    """
    Set up centralized logging configuration

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log format style ('simple', 'detailed', 'json')
        log_file: Optional file path for logging
        enable_colors: Whether to enable colored output (terminal only)

    Returns:
        Configured root logger
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)

    use_colors = enable_colors and sys.stdout.isatty()
    if log_format == "simple":
        formatter_class = ColoredFormatter if use_colors else logging.Formatter
        formatter = formatter_class(SIMPLE_FORMAT)
    elif log_format == "json":
        formatter = logging.Formatter(JSON_FORMAT, datefmt=DATE_FORMAT)
    else:  # detailed (default)
        formatter_class = ColoredFormatter if use_colors else logging.Formatter
        formatter = formatter_class(DETAILED_FORMAT, datefmt=DATE_FORMAT)

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        # File handler always uses non-colored format
        file_handler.setFormatter(logging.Formatter(DETAILED_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(file_handler)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the specified name"""
    return logging.getLogger(name)


def configure_logging_from_settings(app_settings=None) -> logging.Logger:
    """Configure logging based on application settings"""
    if app_settings is None:
        from n8n_catalog.config import settings as app_settings

    log_level = app_settings.log_level

    # Override log level if debug mode is enabled
    if app_settings.debug:
        log_level = "DEBUG"

    root_logger = setup_logging(log_level=log_level, log_format="detailed", enable_colors=True)
    get_logger(__name__).info(f"🎨 Logging configured with level: {log_level}")
    return root_logger
