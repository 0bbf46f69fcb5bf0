"""
Configuration management for the query builder engine.
Loads settings from environment variables with sensible defaults.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .constants import DEFAULT_RANGE_FILL, validate_range_fill


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class EngineConfig:
    """
    Rule-tree engine behavior.

    strict_operators: reject operators outside a field's list (raise) instead
        of logging a warning and ignoring the change.
    range_fill: how a scalar becomes a range ("duplicate" or "none").
    allow_empty_groups: when False, validation flags groups with no children.
    require_values: when True, validation flags rules with an empty value.
    """
    strict_operators: bool = True
    range_fill: str = DEFAULT_RANGE_FILL
    allow_empty_groups: bool = True
    require_values: bool = False

    def __post_init__(self):
        self.range_fill = validate_range_fill(self.range_fill)


@dataclass
class LogConfig:
    """Logging configuration."""
    level: str = "INFO"
    log_dir: str = ""  # empty = console only


class Config:
    """
    Central configuration manager.

    Loads configuration from environment variables and provides
    typed access to all settings.
    """

    _instance: Optional['Config'] = None

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, env_file: str = ".env"):
        if self._initialized:
            return

        # Later files override earlier ones
        for env_name in [".env", env_file]:
            env_path = Path(env_name)
            if env_path.exists():
                load_dotenv(env_path, override=True)

        self.engine = self._load_engine_config()
        self.log = self._load_log_config()

        self._initialized = True

    def _load_engine_config(self) -> EngineConfig:
        """Load engine configuration from environment."""
        return EngineConfig(
            strict_operators=_env_flag("QB_STRICT_OPERATORS", "true"),
            range_fill=os.getenv("QB_RANGE_FILL", DEFAULT_RANGE_FILL),
            allow_empty_groups=_env_flag("QB_ALLOW_EMPTY_GROUPS", "true"),
            require_values=_env_flag("QB_REQUIRE_VALUES", "false"),
        )

    def _load_log_config(self) -> LogConfig:
        """Load logging configuration from environment."""
        return LogConfig(
            level=os.getenv("LOG_LEVEL", "INFO"),
            log_dir=os.getenv("LOG_DIR", ""),
        )

    def summary_short(self) -> str:
        """Generate a short one-line configuration summary."""
        e = self.engine
        return (
            f"QueryBuilder | strict_operators={e.strict_operators} | "
            f"range_fill={e.range_fill} | allow_empty_groups={e.allow_empty_groups} | "
            f"require_values={e.require_values}"
        )


def get_config(env_file: str = ".env") -> Config:
    """Get or create the global config instance."""
    return Config(env_file)


def reset_config() -> None:
    """Drop the global config so the next get_config() re-reads the environment."""
    Config._instance = None
