"""Tests for configuration loading and validation."""

import json

import numpy as np
import pytest

from proctoring_hub.hub import ProctoringHub
from proctoring_hub.models import Severity
from shared_utils.config import ConfigurationService, PlatformConfiguration
from shared_utils.validation import (
    InvalidArgument, validate_configuration, validate_rating, validate_room_id
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for env_var in ConfigurationService.ENV_MAPPINGS:
        monkeypatch.delenv(env_var, raising=False)


class TestConfigurationService:
    def test_missing_file_uses_defaults(self, tmp_path):
        config = ConfigurationService(str(tmp_path / "missing.json")).load_configuration()
        assert config == PlatformConfiguration()
        assert config.emitter_interval_seconds == 5.0
        assert config.fixed_emitter_room is None

    def test_file_values_override_defaults(self, tmp_path):
        path = tmp_path / "arena.json"
        path.write_text(json.dumps({
            "emitter_interval_seconds": 2,
            "fixed_emitter_room": "EXAM-2025-A7",
            "unknown_key": "ignored"
        }))
        config = ConfigurationService(str(path)).load_configuration()
        assert config.emitter_interval_seconds == 2
        assert config.fixed_emitter_room == "EXAM-2025-A7"
        assert config.default_rating == 1200

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "arena.json"
        path.write_text(json.dumps({"student_id_pool_size": 4}))
        monkeypatch.setenv("ARENA_STUDENT_POOL", "12")
        monkeypatch.setenv("ARENA_VALIDATE_ROOM_IDS", "false")

        config = ConfigurationService(str(path)).load_configuration()
        assert config.student_id_pool_size == 12
        assert config.validate_room_ids is False

    def test_invalid_environment_value_is_skipped(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ARENA_DEFAULT_RATING", "not-a-number")
        config = ConfigurationService(str(tmp_path / "missing.json")).load_configuration()
        assert config.default_rating == 1200

    def test_malformed_file_falls_back_to_defaults(self, tmp_path):
        path = tmp_path / "arena.json"
        path.write_text("{not json")
        assert ConfigurationService(str(path)).load_configuration() == PlatformConfiguration()

    def test_invalid_values_fall_back_to_defaults(self, tmp_path):
        path = tmp_path / "arena.json"
        path.write_text(json.dumps({"emitter_interval_seconds": 0}))
        assert ConfigurationService(str(path)).load_configuration() == PlatformConfiguration()

    def test_full_configuration_file_round_trips(self, tmp_path):
        path = tmp_path / "arena.json"
        config = PlatformConfiguration(match_rating_spread=150, synthetic_severity="HIGH", log_level="DEBUG")
        path.write_text(json.dumps(config.to_dict(), indent=4))
        assert ConfigurationService(str(path)).load_configuration() == config

    def test_unknown_severity_falls_back_to_defaults(self, tmp_path):
        path = tmp_path / "arena.json"
        path.write_text(json.dumps({"synthetic_severity": "EXTREME", "student_id_pool_size": 4}))
        config = ConfigurationService(str(path)).load_configuration()
        assert config == PlatformConfiguration()
        assert ProctoringHub(config).event_source.severity == Severity.MEDIUM


class TestValidation:
    def test_validate_configuration_errors(self):
        is_valid, errors = validate_configuration({
            "emitter_interval_seconds": -1,
            "student_id_pool_size": 0,
            "match_rating_spread": -5
        })
        assert not is_valid
        assert len(errors) == 3

    def test_severity_must_be_known(self):
        assert validate_configuration({"synthetic_severity": "CRITICAL"}) == (True, [])
        is_valid, errors = validate_configuration({"synthetic_severity": "EXTREME"})
        assert not is_valid
        assert errors == ["Invalid synthetic_severity: EXTREME"]

    @pytest.mark.parametrize("rating", [np.int64(1500), np.float64(1500.5), np.int32(-20)])
    def test_numpy_ratings_accepted(self, rating):
        assert validate_rating(rating) == rating

    @pytest.mark.parametrize("rating", [True, "1500", None, np.float64('inf')])
    def test_invalid_ratings_rejected(self, rating):
        with pytest.raises(InvalidArgument, match="rating"):
            validate_rating(rating)

    @pytest.mark.parametrize("room_id", ["EXAM-2025-A7", "42", "exam_1.b"])
    def test_valid_room_ids(self, room_id):
        assert validate_room_id(room_id) == room_id

    @pytest.mark.parametrize("room_id", ["", "has space", "-leading", "x" * 65, None, 17])
    def test_invalid_room_ids(self, room_id):
        with pytest.raises(InvalidArgument):
            validate_room_id(room_id)
