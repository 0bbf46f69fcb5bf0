"""
Operator Registry - Single source of truth for operator arity.

All arity rules are defined here. Used by:
- Value coercion (scalar vs. range vs. set)
- Default operator lists for fields that declare none
- Required-value validation (nullary operators take no value)

Design:
- Arity, not field type, decides the shape of a rule's value
- Operators missing from the registry are treated as single-valued
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

from .types import FieldType


class Arity(Enum):
    """Shape of the value an operator expects."""
    NULLARY = "nullary"   # no value (is null)
    SINGLE = "single"     # one scalar
    RANGE = "range"       # [low, high]
    MULTI = "multi"       # any-length sequence


@dataclass(frozen=True)
class OperatorSpec:
    """
    Specification for a single operator.

    Attributes:
        name: Operator id as stored on a rule (e.g., "=", "in")
        arity: Value shape the operator expects
        label: Human-readable label for rendering layers
    """
    name: str
    arity: Arity
    label: str = ""


# =============================================================================
# OPERATOR REGISTRY
# =============================================================================

OPERATOR_REGISTRY: Dict[str, OperatorSpec] = {
    "=": OperatorSpec("=", Arity.SINGLE, "equals"),
    "!=": OperatorSpec("!=", Arity.SINGLE, "not equals"),
    ">": OperatorSpec(">", Arity.SINGLE, "greater than"),
    ">=": OperatorSpec(">=", Arity.SINGLE, "greater or equal"),
    "<": OperatorSpec("<", Arity.SINGLE, "less than"),
    "<=": OperatorSpec("<=", Arity.SINGLE, "less or equal"),
    "contains": OperatorSpec("contains", Arity.SINGLE, "contains"),
    "like": OperatorSpec("like", Arity.SINGLE, "like"),

    # Set membership
    "in": OperatorSpec("in", Arity.MULTI, "in"),
    "not in": OperatorSpec("not in", Arity.MULTI, "not in"),

    # Ranges
    "between": OperatorSpec("between", Arity.RANGE, "between"),
    "not between": OperatorSpec("not between", Arity.RANGE, "not between"),

    # Presence checks
    "is null": OperatorSpec("is null", Arity.NULLARY, "is empty"),
    "is not null": OperatorSpec("is not null", Arity.NULLARY, "is not empty"),
}

MULTI_OPERATORS = frozenset(
    name for name, spec in OPERATOR_REGISTRY.items() if spec.arity == Arity.MULTI
)
RANGE_OPERATORS = frozenset(
    name for name, spec in OPERATOR_REGISTRY.items() if spec.arity == Arity.RANGE
)
NULLARY_OPERATORS = frozenset(
    name for name, spec in OPERATOR_REGISTRY.items() if spec.arity == Arity.NULLARY
)


# =============================================================================
# Default operators per field type
# =============================================================================
# First entry is always "=" so every type has the same default operator.

_ORDERED = ("=", "!=", ">", ">=", "<", "<=")

DEFAULT_OPERATOR_MAP: Mapping[FieldType, Tuple[str, ...]] = MappingProxyType({
    FieldType.STRING: ("=", "!=", "contains", "like"),
    FieldType.NUMBER: _ORDERED,
    FieldType.DATE: _ORDERED,
    FieldType.TIME: _ORDERED,
    FieldType.CATEGORY: ("=", "!=", "in", "not in"),
    FieldType.BOOLEAN: ("=",),
    FieldType.OTHER: ("=",),
})


def get_operator_spec(operator: str) -> Optional[OperatorSpec]:
    """
    Get operator specification from registry.

    Args:
        operator: Operator id (case-insensitive, surrounding space ignored)

    Returns:
        OperatorSpec if known, None if unknown
    """
    if operator is None:
        return None
    return OPERATOR_REGISTRY.get(str(operator).strip().lower())


def arity_of(operator: Optional[str]) -> Arity:
    """Arity for an operator; unknown and missing operators are single-valued."""
    spec = get_operator_spec(operator)
    return spec.arity if spec is not None else Arity.SINGLE
