"""
Logging Configuration Module.

This module provides centralized logging configuration for the GRead client.
It sets up console logging, optional file logging and per-module log levels.

Features:
- Configurable log levels per module
- Console and file logging
- Simple, detailed or JSON-shaped line formats
- Quiet defaults for the HTTP and SQL libraries underneath the client
"""

import logging
from pathlib import Path
from typing import Optional


def _get_logging_config():
    """Get logging configuration from the settings model.

    Deferred so that importing this module never forces settings validation.
    """
    from gread_client.core.config import get_settings

    cfg = get_settings().logging
    return {
        "log_level": cfg.level.upper(),
        "log_format": cfg.format,
        "log_file_dir": cfg.file_dir,
        "enable_file_logging": cfg.enable_file,
    }


# Define log formats
SIMPLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"

DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(funcName)s() - %(message)s"

JSON_FORMAT = (
    '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
    '"module": "%(filename)s", "function": "%(funcName)s", "line": %(lineno)d, '
    '"message": "%(message)s"}'
)

LOG_FILE_NAME = "gread_client.log"


# Module-specific log levels
MODULE_LOG_LEVELS = {
    "gread_client.api": "DEBUG",
    "gread_client.auth": "DEBUG",
    "gread_client.managers": "INFO",
    "gread_client.storage": "INFO",
    # Third-party libraries (reduce noise)
    "sqlalchemy": "WARNING",
    "sqlalchemy.engine": "WARNING",
    "sqlalchemy.pool": "WARNING",
    "httpx": "WARNING",
    "httpcore": "WARNING",
    "asyncio": "WARNING",
}


def _format_string(fmt: str) -> str:
    if fmt == "json":
        return JSON_FORMAT
    if fmt == "simple":
        return SIMPLE_FORMAT
    return DETAILED_FORMAT


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    enable_file: Optional[bool] = None,
    log_file_dir: Optional[str] = None,
) -> None:
    """
    Configure logging for the client.

    Any argument left as None falls back to the value from settings.

    Args:
        log_level: Console log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Line format (simple, detailed, json)
        enable_file: Whether to also write DEBUG logs to a file
        log_file_dir: Directory holding the log file
    """
    defaults = _get_logging_config()
    level = (log_level or defaults["log_level"]).upper()
    fmt = log_format or defaults["log_format"]
    file_enabled = defaults["enable_file_logging"] if enable_file is None else enable_file
    file_dir = log_file_dir or defaults["log_file_dir"]

    formatter = logging.Formatter(_format_string(fmt), datefmt="%Y-%m-%d %H:%M:%S")

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Capture all levels, filter at handler level

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if file_enabled:
        Path(file_dir).mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(Path(file_dir) / LOG_FILE_NAME)
        file_handler.setLevel(logging.DEBUG)  # Always log DEBUG to file
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    for module_name, module_level in MODULE_LOG_LEVELS.items():
        logging.getLogger(module_name).setLevel(module_level)

    root_logger.info(f"Logging configured: level={level}, format={fmt}, file_logging={file_enabled}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: The module name (typically __name__)

    Returns:
        A configured logger instance
    """
    return logging.getLogger(name)
