"""
Common utility functions shared across the application.

This module provides basic utilities for timestamps, logging and
environment handling that are used by the rating engine, the
proctoring hub and the web app.
"""

import logging
import os
from datetime import datetime, timezone
from typing import Optional


def get_timestamp() -> datetime:
    """
    Get current timestamp as a timezone-aware datetime object.
    
    Returns:
        Current UTC datetime with microsecond precision
    """
    return datetime.now(timezone.utc)


def get_timestamp_string(dt: Optional[datetime] = None) -> str:
    """
    Get timestamp as ISO format string.
    
    Args:
        dt: Datetime object to format, uses current time if None
        
    Returns:
        ISO format timestamp string
    """
    if dt is None:
        dt = get_timestamp()
    return dt.isoformat()


def setup_logging(
    name: str,
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    format_string: Optional[str] = None
) -> logging.Logger:
    """
    Set up logging configuration for a component.
    
    Args:
        name: Logger name
        level: Logging level (default: INFO)
        log_file: Optional log file path
        format_string: Optional custom format string
        
    Returns:
        Configured logger instance
    """
    if format_string is None:
        format_string = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    
    logger = logging.getLogger(name)
    logger.setLevel(level)
    
    # Remove existing handlers to avoid duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(format_string))
    logger.addHandler(console_handler)
    
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(format_string))
        logger.addHandler(file_handler)
    
    return logger


def parse_bool(value: str) -> bool:
    """Interpret common truthy strings from the environment."""
    return value.strip().lower() in ('1', 'true', 'yes', 'on')
