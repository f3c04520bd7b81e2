"""
Core utilities and configuration for the GRead client.

This package provides settings loading and logging configuration shared by
every other subpackage.
"""

from gread_client.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
