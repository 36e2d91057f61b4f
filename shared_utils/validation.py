"""
Validation utilities for the battle arena core.

This module provides the argument error type and the validation
functions used by the rating engine, the proctoring hub and the
configuration layer.
"""

import math
import numbers
import re
from typing import Any, Dict, List, Tuple


VALID_ACTUAL_SCORES = (0, 0.5, 1)

VALID_SEVERITIES = ('LOW', 'MEDIUM', 'HIGH', 'CRITICAL')

ROOM_ID_PATTERN = re.compile(r'^[A-Za-z0-9][A-Za-z0-9_.-]{0,63}$')


class InvalidArgument(ValueError):
    """Raised when a caller passes a value outside an operation's contract."""


def validate_actual_score(actual_score: Any) -> float:
    """
    Validate a match outcome score.
    
    Args:
        actual_score: 1 for a win, 0.5 for a draw, 0 for a loss
        
    Returns:
        The score as a float
        
    Raises:
        InvalidArgument: If the score is not one of 0, 0.5 or 1
    """
    if isinstance(actual_score, bool) or not isinstance(actual_score, numbers.Real):
        raise InvalidArgument(f"actual_score must be 0, 0.5 or 1, got {actual_score!r}")
    if actual_score not in VALID_ACTUAL_SCORES:
        raise InvalidArgument(f"actual_score must be 0, 0.5 or 1, got {actual_score!r}")
    return float(actual_score)


def validate_rating(rating: Any, name: str = 'rating') -> float:
    """
    Validate a rating value.
    
    Ratings are unbounded, so only the type and finiteness are checked.
    
    Raises:
        InvalidArgument: If the rating is not a finite number
    """
    if isinstance(rating, bool) or not isinstance(rating, numbers.Real):
        raise InvalidArgument(f"{name} must be a number, got {rating!r}")
    if not math.isfinite(rating):
        raise InvalidArgument(f"{name} must be finite, got {rating!r}")
    return rating


def validate_room_id(room_id: Any) -> str:
    """
    Validate an exam room identifier.
    
    Args:
        room_id: Room identifier received from a monitor client
        
    Returns:
        The identifier, unchanged
        
    Raises:
        InvalidArgument: If the identifier is not a short token of
            letters, digits, dots, dashes and underscores
    """
    if not isinstance(room_id, str) or not ROOM_ID_PATTERN.match(room_id):
        raise InvalidArgument(f"Invalid room id: {room_id!r}")
    return room_id


def validate_configuration(config_dict: Dict[str, Any]) -> Tuple[bool, List[str]]:
    """
    Validate platform configuration data.
    
    Args:
        config_dict: Configuration data dictionary
        
    Returns:
        Tuple of (is_valid, list_of_errors)
    """
    errors = []
    
    interval = config_dict.get('emitter_interval_seconds')
    if interval is not None and (not isinstance(interval, (int, float)) or interval <= 0):
        errors.append(f"Invalid emitter_interval_seconds: {interval}")
    
    pool_size = config_dict.get('student_id_pool_size')
    if pool_size is not None and (not isinstance(pool_size, int) or pool_size <= 0):
        errors.append(f"Invalid student_id_pool_size: {pool_size}")
    
    spread = config_dict.get('match_rating_spread')
    if spread is not None and (not isinstance(spread, int) or spread < 0):
        errors.append(f"Invalid match_rating_spread: {spread}")
    
    attempts = config_dict.get('session_code_max_attempts')
    if attempts is not None and (not isinstance(attempts, int) or attempts <= 0):
        errors.append(f"Invalid session_code_max_attempts: {attempts}")
    
    severity = config_dict.get('synthetic_severity')
    if severity is not None and severity not in VALID_SEVERITIES:
        errors.append(f"Invalid synthetic_severity: {severity}")
    
    return len(errors) == 0, errors
