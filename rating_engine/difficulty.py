"""Difficulty targeting and problem selection for new battles."""

from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from shared_utils.validation import InvalidArgument, validate_rating


MIN_DIFFICULTY = 800
DIFFICULTY_OFFSET = 100
DEFAULT_RATING = 1200


@dataclass(frozen=True)
class ProblemCandidate:
    """A problem that can be assigned to a battle round."""
    problem_id: str
    rating: int


def target_difficulty(user_rating: float) -> int:
    """Recommended problem difficulty for a rating: a notch above, never below 800.

    Raises:
        InvalidArgument: If the rating is not a finite number
    """
    validate_rating(user_rating, 'user_rating')
    return int(max(MIN_DIFFICULTY, user_rating + DIFFICULTY_OFFSET))


def battle_target_difficulty(
    ratings: Sequence[Optional[float]],
    default_rating: int = DEFAULT_RATING
) -> int:
    """
    Target difficulty for a battle from its participants' ratings.
    
    Participants without a rating count as ``default_rating``.
    
    Raises:
        InvalidArgument: If there are no participants
    """
    if len(ratings) == 0:
        raise InvalidArgument("Cannot target a battle with no participants")
    
    values = np.array(
        [default_rating if rating is None else rating for rating in ratings],
        dtype=float
    )
    return target_difficulty(float(values.mean()))


def select_problems(
    candidates: Sequence[ProblemCandidate],
    target: float,
    count: int
) -> List[ProblemCandidate]:
    """
    Pick the problems closest to a target difficulty.
    
    Args:
        candidates: Available problems
        target: Difficulty to aim for
        count: Number of rounds to fill
        
    Returns:
        ``count`` problems ordered by distance from the target. Ties keep
        input order. When there are fewer candidates than rounds the
        chosen problems repeat in the same order.
    """
    if count <= 0 or not candidates:
        return []
    
    distances = np.abs(np.array([c.rating for c in candidates], dtype=float) - target)
    order = np.argsort(distances, kind='stable')
    ranked = [candidates[i] for i in order[:count]]
    return [ranked[i % len(ranked)] for i in range(count)]
