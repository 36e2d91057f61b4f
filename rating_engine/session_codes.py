"""
Session Code Issuer - Join codes for private battles and contests.

Codes are 6-digit numeric strings. The issuer does not remember what it
has handed out; callers that need uniqueness pass an existence check to
``issue_unique_code``.
"""

import logging
from typing import Callable, Optional

import numpy as np


CODE_MIN = 100000
CODE_MAX = 999999


class SessionCodeExhausted(RuntimeError):
    """No free session code was found within the allowed attempts."""


class SessionCodeIssuer:
    """
    Draws uniform random join codes in [100000, 999999].
    """
    
    def __init__(self, rng: Optional[np.random.Generator] = None, max_attempts: int = 10):
        """
        Initialize the issuer.
        
        Args:
            rng: Random generator; a fresh unseeded one is used if None
            max_attempts: Draws ``issue_unique_code`` makes before giving up
        """
        self.rng = rng if rng is not None else np.random.default_rng()
        self.max_attempts = max_attempts
        self.logger = logging.getLogger(__name__)
    
    def issue_code(self) -> str:
        """Return a 6-digit numeric join code."""
        # integers() excludes the upper bound
        return str(int(self.rng.integers(CODE_MIN, CODE_MAX + 1)))
    
    def issue_unique_code(self, exists: Callable[[str], bool]) -> str:
        """
        Return a code for which ``exists`` is false.
        
        Args:
            exists: Caller-owned check against live sessions
            
        Raises:
            SessionCodeExhausted: If every attempt collided
        """
        for attempt in range(1, self.max_attempts + 1):
            code = self.issue_code()
            if not exists(code):
                return code
            self.logger.debug(f"Session code collision on attempt {attempt}")
        
        self.logger.warning(f"No free session code after {self.max_attempts} attempts")
        raise SessionCodeExhausted(f"No free session code after {self.max_attempts} attempts")
