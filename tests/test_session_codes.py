"""Tests for join code issuance."""

import re

import numpy as np
import pytest

from rating_engine.session_codes import SessionCodeExhausted, SessionCodeIssuer


CODE_PATTERN = re.compile(r'^\d{6}$')


class TestIssueCode:
    def test_codes_are_six_digits_in_range(self):
        issuer = SessionCodeIssuer(rng=np.random.default_rng(2024))
        for _ in range(5000):
            code = issuer.issue_code()
            assert CODE_PATTERN.match(code)
            assert 100000 <= int(code) <= 999999

    def test_sequence_follows_injected_generator(self):
        issuer = SessionCodeIssuer(rng=np.random.default_rng(42))
        reference = np.random.default_rng(42)
        expected = [str(int(reference.integers(100000, 1000000))) for _ in range(5)]
        assert [issuer.issue_code() for _ in range(5)] == expected

    def test_default_generator(self):
        assert CODE_PATTERN.match(SessionCodeIssuer().issue_code())


class TestIssueUniqueCode:
    def test_retries_past_collisions(self):
        first = SessionCodeIssuer(rng=np.random.default_rng(5)).issue_code()
        issuer = SessionCodeIssuer(rng=np.random.default_rng(5))
        checked = []

        def exists(code):
            checked.append(code)
            return code == first

        code = issuer.issue_unique_code(exists)
        assert code != first
        assert checked[0] == first
        assert len(checked) == 2

    def test_gives_up_after_max_attempts(self):
        issuer = SessionCodeIssuer(rng=np.random.default_rng(5), max_attempts=3)
        calls = []

        def exists(code):
            calls.append(code)
            return True

        with pytest.raises(SessionCodeExhausted, match="3 attempts"):
            issuer.issue_unique_code(exists)
        assert len(calls) == 3
