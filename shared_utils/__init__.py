"""
Shared Utilities Package - Common utilities for the battle arena core.
"""

from .common import get_timestamp, get_timestamp_string, setup_logging
from .validation import InvalidArgument

__all__ = [
    'get_timestamp',
    'get_timestamp_string',
    'setup_logging',
    'InvalidArgument'
]
