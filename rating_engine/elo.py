"""
Elo rating update for head-to-head battles.

The K-factor shrinks as a participant climbs tiers so established
ratings move less per match. Nothing is clamped: extreme inputs can
produce ratings below zero.
"""

import math

from shared_utils.validation import validate_actual_score, validate_rating


# (exclusive lower bound, K) pairs, checked from the top tier down
K_FACTOR_TIERS = (
    (2400, 10),
    (2100, 24),
)
DEFAULT_K_FACTOR = 32


def get_k_factor(current_rating: float) -> int:
    """Return the K-factor for the tier ``current_rating`` falls into."""
    for lower_bound, k_factor in K_FACTOR_TIERS:
        if current_rating > lower_bound:
            return k_factor
    return DEFAULT_K_FACTOR


def expected_score(current_rating: float, opponent_rating: float) -> float:
    """Calculate expected score for a player against an opponent.

    Returns:
        Expected score between 0 and 1
    """
    exponent = (opponent_rating - current_rating) / 400
    try:
        return 1.0 / (1.0 + math.pow(10, exponent))
    except OverflowError:
        # Opponent so far above that the win probability is indistinguishable from 0
        return 0.0


def round_half_up(value: float) -> int:
    """Round to the nearest integer, sending .5 ties toward +infinity.

    ``round()`` uses banker's rounding, which would move 2.5 to 2.
    """
    return int(math.floor(value + 0.5))


def update_rating(current_rating: float, opponent_rating: float, actual_score: float) -> int:
    """Compute a participant's rating after one match.

    Args:
        current_rating: Participant's rating before the match
        opponent_rating: Opponent's rating before the match
        actual_score: 1 for a win, 0.5 for a draw, 0 for a loss

    Returns:
        The new rating, rounded half up

    Raises:
        InvalidArgument: If ``actual_score`` is not 0, 0.5 or 1, or a
            rating is not a finite number
    """
    validate_rating(current_rating, 'current_rating')
    validate_rating(opponent_rating, 'opponent_rating')
    score = validate_actual_score(actual_score)

    k_factor = get_k_factor(current_rating)
    expected = expected_score(current_rating, opponent_rating)
    return round_half_up(current_rating + k_factor * (score - expected))
