"""
Configuration management.
"""

from .config import (
    Config,
    get_config,
    reset_config,
    EngineConfig,
    LogConfig,
)

from .constants import (
    RANGE_FILL_DUPLICATE,
    RANGE_FILL_NONE,
    RANGE_FILL_MODES,
    DEFAULT_RANGE_FILL,
    validate_range_fill,
    FIELD_REQUIRED_MESSAGE,
    VALUE_REQUIRED_MESSAGE,
    EMPTY_GROUP_MESSAGE,
)

__all__ = [
    # Config classes
    "Config",
    "get_config",
    "reset_config",
    "EngineConfig",
    "LogConfig",
    # Range fill
    "RANGE_FILL_DUPLICATE",
    "RANGE_FILL_NONE",
    "RANGE_FILL_MODES",
    "DEFAULT_RANGE_FILL",
    "validate_range_fill",
    # Messages
    "FIELD_REQUIRED_MESSAGE",
    "VALUE_REQUIRED_MESSAGE",
    "EMPTY_GROUP_MESSAGE",
]
