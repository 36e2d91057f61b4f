"""Tests for battle settlement and quick-match helpers."""

import pytest

from rating_engine.matchmaking import (
    InMemoryRatingStore, check_rating_eligibility, rating_window,
    score_from_points, settle_head_to_head, within_window
)
from shared_utils.validation import InvalidArgument


class TestScoreFromPoints:
    def test_outcomes(self):
        assert score_from_points(3, 1) == 1.0
        assert score_from_points(1, 3) == 0.0
        assert score_from_points(2, 2) == 0.5


class TestRatingWindow:
    def test_window(self):
        assert rating_window(1200) == (1000, 1400)
        assert rating_window(1200, spread=50) == (1150, 1250)

    def test_lower_bound_floored_at_zero(self):
        assert rating_window(100) == (0, 300)

    def test_within_window(self):
        assert within_window(1200, 1400)
        assert not within_window(1200, 1401)


class TestEligibility:
    def test_inside_bounds(self):
        check_rating_eligibility(1200, 1000, 1400)
        check_rating_eligibility(1200)

    def test_too_low(self):
        with pytest.raises(InvalidArgument, match=r"Rating too low \(Min: 1300\)"):
            check_rating_eligibility(1200, min_rating=1300)

    def test_too_high(self):
        with pytest.raises(InvalidArgument, match=r"Rating too high \(Max: 1100\)"):
            check_rating_eligibility(1200, max_rating=1100)


class TestSettleHeadToHead:
    def test_win_updates_both_ratings(self):
        store = InMemoryRatingStore({"alice": 1000, "bob": 1000})
        first, second = settle_head_to_head(store, "alice", 3, "bob", 1)

        assert (first.new_rating, first.rating_change, first.rank) == (1016, 16, 1)
        assert (second.new_rating, second.rating_change, second.rank) == (984, -16, 2)
        assert store.get_rating("alice") == 1016
        assert store.get_rating("bob") == 984

    def test_both_updates_use_pre_battle_ratings(self):
        store = InMemoryRatingStore({"alice": 1400, "bob": 1000})
        first, second = settle_head_to_head(store, "alice", 0, "bob", 2)

        assert first.new_rating == 1371
        assert first.rank == 2
        assert second.new_rating == 1029
        assert second.rank == 1

    def test_draw_between_unrated_players(self):
        store = InMemoryRatingStore()
        first, second = settle_head_to_head(store, "alice", 1, "bob", 1)

        assert first.old_rating == second.old_rating == 1200
        assert first.new_rating == second.new_rating == 1200
        assert first.rank == second.rank == 1

    def test_custom_default_rating(self):
        store = InMemoryRatingStore()
        first, _ = settle_head_to_head(store, "alice", 2, "bob", 0, default_rating=1500)
        assert first.old_rating == 1500
        assert first.new_rating == 1516

    def test_rejects_self_battle(self):
        with pytest.raises(InvalidArgument):
            settle_head_to_head(InMemoryRatingStore(), "alice", 1, "alice", 0)

    def test_to_dict(self):
        first, _ = settle_head_to_head(InMemoryRatingStore(), "alice", 1, "bob", 0)
        assert first.to_dict() == {
            'participantId': 'alice',
            'oldRating': 1200,
            'newRating': 1216,
            'ratingChange': 16,
            'rank': 1
        }
