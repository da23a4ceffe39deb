"""
Configuration for the frame-count service and CLI.

Loads a TOML file and validates bounded parameters. Missing sections or
parameters fall back to DEFAULT_CONFIG.
"""

import copy
import functools
import os
import logging
from pathlib import Path
from typing import Dict, Any, Optional

import toml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "FRAMESCAN_CONFIG_PATH"
DEFAULT_CONFIG_PATH = "configs/framescan.toml"


class ConfigError(Exception):
    """Raised when config loading or validation fails."""
    pass


class Config:
    """Configuration loader and validator."""

    PARAM_BOUNDS = {
        "service": {
            "max_body_bytes": (1, 100 * 1024 * 1024),
            "log_level": None,
            "environment": None,
            "version": None,
        },
        "response": {
            "allow_origin": None,
        },
    }

    DEFAULT_CONFIG = {
        "service": {
            "log_level": "INFO",
            "max_body_bytes": 10 * 1024 * 1024,
            "environment": "development",
            "version": "1.0.0",
        },
        "response": {
            "allow_origin": "*",
        },
    }

    def __init__(self, config_dict: Optional[Dict[str, Any]] = None):
        source = config_dict if config_dict is not None else self.DEFAULT_CONFIG
        self.data = copy.deepcopy(source)
        self._validate()

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "Config":
        """
        Load config from a TOML file.

        Args:
            config_path: Path to framescan.toml. If None, uses the
                FRAMESCAN_CONFIG_PATH env var or configs/framescan.toml.

        Raises:
            ConfigError: If the file cannot be parsed or a value is out of bounds.
        """
        explicit = config_path is not None or CONFIG_ENV_VAR in os.environ
        if config_path is None:
            config_path = os.getenv(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH)

        config_path = Path(config_path)

        if not config_path.exists():
            log = logger.warning if explicit else logger.debug
            log(f"Config file not found: {config_path}. Using defaults.")
            return cls()

        try:
            config_dict = toml.load(config_path)
        except (toml.TomlDecodeError, OSError) as e:
            raise ConfigError(f"Failed to load config from {config_path}: {e}") from e
        logger.info(f"Loaded config from {config_path}")
        return cls(config_dict)

    def _validate(self) -> None:
        for section, params in self.PARAM_BOUNDS.items():
            if section not in self.data:
                logger.warning(f"Missing config section: {section}. Using defaults.")
                self.data[section] = dict(self.DEFAULT_CONFIG[section])
                continue

            section_data = self.data[section]
            if not isinstance(section_data, dict):
                raise ConfigError(f"Config section {section} must be a table, got {section_data!r}")

            for param, bounds in params.items():
                if param not in section_data:
                    default_val = self.DEFAULT_CONFIG[section][param]
                    logger.warning(f"Missing param {section}.{param}. Using default: {default_val}")
                    section_data[param] = default_val
                    continue

                if bounds is None:
                    continue

                value = section_data[param]
                min_val, max_val = bounds
                if (isinstance(value, bool) or not isinstance(value, int)
                        or not (min_val <= value <= max_val)):
                    raise ConfigError(
                        f"Parameter {section}.{param}={value!r} out of bounds "
                        f"[{min_val}, {max_val}]"
                    )

        level = self.data["service"]["log_level"]
        if not isinstance(logging.getLevelName(str(level).upper()), int):
            raise ConfigError(f"Unknown log level: {level!r}")

    def get(self, section: str, param: str, default: Any = None) -> Any:
        """Get a config parameter safely."""
        return self.data.get(section, {}).get(param, default)

    def __getitem__(self, section: str) -> Dict[str, Any]:
        return self.data.get(section, {})

    @property
    def log_level(self) -> int:
        return logging.getLevelName(str(self.get("service", "log_level")).upper())

    def __repr__(self) -> str:
        return f"Config(environment={self.get('service', 'environment')})"


@functools.lru_cache(maxsize=None)
def get_config() -> Config:
    """Process-wide config for the request handlers, loaded on first use.

    A failed load is not cached, so the next call retries.
    """
    return Config.load()
