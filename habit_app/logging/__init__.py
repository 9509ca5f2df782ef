"""
Logging configuration and utilities for the habit tracking system.
"""
from .config import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
