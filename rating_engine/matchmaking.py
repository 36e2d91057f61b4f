"""
Matchmaking - Rating storage, quick-match windows and battle settlement.

The engine never owns ratings. Callers hand in a RatingStore and the
settlement code reads and writes through it.
"""

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from shared_utils.validation import InvalidArgument

from .elo import update_rating


DEFAULT_RATING = 1200
DEFAULT_RATING_SPREAD = 200

logger = logging.getLogger(__name__)


class RatingStore(ABC):
    """
    Abstract base class for participant rating storage.
    """

    @abstractmethod
    def get_rating(self, participant_id: str) -> Optional[int]:
        """Return the stored rating, or None for an unrated participant."""
        pass

    @abstractmethod
    def put_rating(self, participant_id: str, rating: int) -> None:
        """Persist a participant's rating."""
        pass


class InMemoryRatingStore(RatingStore):
    """Dictionary-backed store for tests and single-process deployments."""

    def __init__(self, initial: Optional[Dict[str, int]] = None):
        self._ratings: Dict[str, int] = dict(initial or {})
        self._lock = threading.Lock()

    def get_rating(self, participant_id: str) -> Optional[int]:
        with self._lock:
            return self._ratings.get(participant_id)

    def put_rating(self, participant_id: str, rating: int) -> None:
        with self._lock:
            self._ratings[participant_id] = rating


@dataclass(frozen=True)
class RatingChange:
    """Outcome of a settled battle for one participant."""
    participant_id: str
    old_rating: int
    new_rating: int
    rating_change: int
    rank: int

    def to_dict(self) -> Dict[str, int]:
        """Convert to the camelCase shape battle clients expect."""
        return {
            'participantId': self.participant_id,
            'oldRating': self.old_rating,
            'newRating': self.new_rating,
            'ratingChange': self.rating_change,
            'rank': self.rank
        }


def score_from_points(points: float, opponent_points: float) -> float:
    """Turn battle points into an Elo outcome: 1 win, 0.5 draw, 0 loss."""
    if points > opponent_points:
        return 1.0
    if points < opponent_points:
        return 0.0
    return 0.5


def rating_window(rating: int, spread: int = DEFAULT_RATING_SPREAD) -> Tuple[int, int]:
    """Quick-match bounds around a rating; the lower bound never drops below 0."""
    return max(0, rating - spread), rating + spread


def within_window(rating: int, other_rating: int, spread: int = DEFAULT_RATING_SPREAD) -> bool:
    """Whether ``other_rating`` falls inside ``rating``'s quick-match window."""
    low, high = rating_window(rating, spread)
    return low <= other_rating <= high


def check_rating_eligibility(
    rating: int,
    min_rating: Optional[int] = None,
    max_rating: Optional[int] = None
) -> None:
    """
    Check a participant's rating against a battle's entry bounds.

    Raises:
        InvalidArgument: If the rating falls outside the bounds
    """
    if min_rating is not None and rating < min_rating:
        raise InvalidArgument(f"Rating too low (Min: {min_rating})")
    if max_rating is not None and rating > max_rating:
        raise InvalidArgument(f"Rating too high (Max: {max_rating})")


def settle_head_to_head(
    store: RatingStore,
    first_id: str,
    first_points: float,
    second_id: str,
    second_points: float,
    default_rating: int = DEFAULT_RATING
) -> Tuple[RatingChange, RatingChange]:
    """
    Settle a finished 1v1 battle and write both new ratings.

    Both new ratings are computed from the pre-battle ratings before
    either is written back.

    Args:
        store: Caller-owned rating store
        first_id: First participant
        first_points: Points the first participant scored
        second_id: Second participant
        second_points: Points the second participant scored
        default_rating: Rating used for participants the store does not know

    Returns:
        Tuple of (first participant's change, second participant's change)
    """
    if first_id == second_id:
        raise InvalidArgument(f"Participant {first_id} cannot battle themselves")

    first_old = store.get_rating(first_id)
    second_old = store.get_rating(second_id)
    first_old = default_rating if first_old is None else first_old
    second_old = default_rating if second_old is None else second_old

    first_score = score_from_points(first_points, second_points)
    first_new = update_rating(first_old, second_old, first_score)
    second_new = update_rating(second_old, first_old, 1 - first_score)

    if first_score == 1:
        first_rank, second_rank = 1, 2
    elif first_score == 0:
        first_rank, second_rank = 2, 1
    else:
        first_rank, second_rank = 1, 1

    store.put_rating(first_id, first_new)
    store.put_rating(second_id, second_new)

    logger.info(
        f"Settled battle {first_id} ({first_old}->{first_new}) vs "
        f"{second_id} ({second_old}->{second_new})"
    )

    return (
        RatingChange(first_id, first_old, first_new, first_new - first_old, first_rank),
        RatingChange(second_id, second_old, second_new, second_new - second_old, second_rank),
    )
