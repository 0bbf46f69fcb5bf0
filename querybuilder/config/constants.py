"""
Centralized constants for engine configuration.

Range fill modes decide how a scalar is widened into a [low, high] pair
when a rule switches to a range operator.
"""

from typing import List


# ==================== Range Fill Modes ====================

# "duplicate": 5 -> [5, 5]
# "none":      5 -> [5, None]
RANGE_FILL_DUPLICATE = "duplicate"
RANGE_FILL_NONE = "none"

RANGE_FILL_MODES: List[str] = [RANGE_FILL_DUPLICATE, RANGE_FILL_NONE]
DEFAULT_RANGE_FILL = RANGE_FILL_DUPLICATE


def validate_range_fill(mode: str) -> str:
    """
    Validate and normalize a range fill mode.

    Args:
        mode: Mode string (case-insensitive)

    Returns:
        Normalized mode ("duplicate" or "none")

    Raises:
        ValueError: If mode is not recognized
    """
    normalized = (mode or "").strip().lower()
    if normalized not in RANGE_FILL_MODES:
        raise ValueError(
            f"Invalid range fill mode: '{mode}'. Must be one of {RANGE_FILL_MODES}"
        )
    return normalized


# ==================== Messages ====================

FIELD_REQUIRED_MESSAGE = "Field required"
VALUE_REQUIRED_MESSAGE = "Value required"
EMPTY_GROUP_MESSAGE = "Empty groups are not allowed."
