"""
Configuration Service - Platform configuration management.

This module provides the PlatformConfiguration dataclass and the
ConfigurationService class that loads it from defaults, a JSON file
and environment variables.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Optional

from .common import parse_bool
from .validation import validate_configuration


@dataclass
class PlatformConfiguration:
    """Tunable settings for the rating engine and the proctoring hub."""
    default_rating: int = 1200
    match_rating_spread: int = 200
    session_code_max_attempts: int = 10
    emitter_interval_seconds: float = 5.0
    student_id_pool_size: int = 8
    synthetic_severity: str = "MEDIUM"
    # When set, every periodic emitter targets this room instead of the
    # room its connection joined.
    fixed_emitter_room: Optional[str] = None
    validate_room_ids: bool = True
    monitor_namespace: str = "/school"
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PlatformConfiguration':
        """Build a configuration from a dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})


class ConfigurationService:
    """
    Service for managing platform configuration.

    Loads configuration from defaults, then a JSON file, then
    environment variables, with later sources taking precedence.
    """

    ENV_MAPPINGS = {
        "ARENA_DEFAULT_RATING": ("default_rating", int),
        "ARENA_MATCH_SPREAD": ("match_rating_spread", int),
        "ARENA_EMITTER_INTERVAL": ("emitter_interval_seconds", float),
        "ARENA_STUDENT_POOL": ("student_id_pool_size", int),
        "ARENA_FIXED_EMITTER_ROOM": ("fixed_emitter_room", str),
        "ARENA_VALIDATE_ROOM_IDS": ("validate_room_ids", parse_bool),
        "ARENA_LOG_LEVEL": ("log_level", str),
    }

    def __init__(self, config_file: str = "config/arena_config.json"):
        """
        Initialize configuration service.

        Args:
            config_file: Path to the configuration file
        """
        self.config_file = config_file
        self.logger = logging.getLogger(__name__)

    def load_configuration(self) -> PlatformConfiguration:
        """Load configuration from file and environment variables."""
        config_data = PlatformConfiguration().to_dict()

        if os.path.exists(self.config_file):
            try:
                with open(self.config_file, 'r') as f:
                    config_data.update(json.load(f))
                self.logger.info(f"Loaded configuration from {self.config_file}")
            except (OSError, json.JSONDecodeError) as e:
                self.logger.error(f"Error loading configuration from {self.config_file}: {e}")
                config_data = PlatformConfiguration().to_dict()
        else:
            self.logger.info(f"Config file {self.config_file} not found, using defaults")

        config_data = self._apply_environment_overrides(config_data)

        is_valid, errors = validate_configuration(config_data)
        if not is_valid:
            for error in errors:
                self.logger.error(f"Configuration error: {error}")
            return PlatformConfiguration()

        return PlatformConfiguration.from_dict(config_data)

    def _apply_environment_overrides(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides to configuration."""
        for env_var, (config_key, converter) in self.ENV_MAPPINGS.items():
            env_value = os.getenv(env_var)
            if env_value is None:
                continue
            try:
                config_data[config_key] = converter(env_value)
                self.logger.info(f"Applied environment override: {config_key} = {config_data[config_key]}")
            except (ValueError, TypeError) as e:
                self.logger.warning(f"Invalid environment variable {env_var}={env_value}: {e}")

        return config_data
