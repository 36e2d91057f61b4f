"""
Rating Engine Package - Skill rating and matchmaking for battles.

This package contains the Elo update, difficulty targeting, join code
issuance and head-to-head settlement used by the battle service.
"""

from .difficulty import (
    ProblemCandidate,
    battle_target_difficulty,
    select_problems,
    target_difficulty
)
from .elo import expected_score, get_k_factor, update_rating
from .matchmaking import (
    InMemoryRatingStore,
    RatingChange,
    RatingStore,
    check_rating_eligibility,
    rating_window,
    settle_head_to_head
)
from .session_codes import SessionCodeExhausted, SessionCodeIssuer

__all__ = [
    'ProblemCandidate',
    'battle_target_difficulty',
    'select_problems',
    'target_difficulty',
    'expected_score',
    'get_k_factor',
    'update_rating',
    'InMemoryRatingStore',
    'RatingChange',
    'RatingStore',
    'check_rating_eligibility',
    'rating_window',
    'settle_head_to_head',
    'SessionCodeExhausted',
    'SessionCodeIssuer'
]
