"""
Value coercion by operator arity.

The operator, not the field type, decides the shape of a rule's value:

    arity     scalar v        sequence s
    -------   -------------   ------------------------------
    MULTI     [v] (None->[])  s unchanged (as list)
    RANGE     [v, v|None]     first two items, filled the same way
    SINGLE    v unchanged     s[0], unwrapped until scalar (empty -> None)
    NULLARY   None            None

Every branch is idempotent: coercing an already-coerced value returns it
unchanged.
"""

from __future__ import annotations

from typing import Any, Optional, TYPE_CHECKING

from ..config.constants import DEFAULT_RANGE_FILL, RANGE_FILL_DUPLICATE, validate_range_fill
from .operators import Arity, arity_of

if TYPE_CHECKING:
    from .fields import FieldRegistry
    from .nodes import Rule


def is_sequence(value: Any) -> bool:
    """Lists and tuples count as sequences; strings and bytes do not."""
    return isinstance(value, (list, tuple))


def _to_range(value: Any, range_fill: str) -> list:
    if is_sequence(value):
        items = list(value)
        if len(items) >= 2:
            return items[:2]
        if not items:
            return [None, None]
        value = items[0]
    high = value if range_fill == RANGE_FILL_DUPLICATE else None
    return [value, high]


def coerce_by_arity(operator: Optional[str], value: Any, range_fill: str = DEFAULT_RANGE_FILL) -> Any:
    """
    Reshape value for operator using only the arity table.

    Args:
        operator: Operator id (unknown operators are single-valued)
        value: Current value
        range_fill: "duplicate" or "none" for scalar -> range

    Returns:
        Value whose shape matches the operator's arity.
    """
    arity = arity_of(operator)

    if arity == Arity.NULLARY:
        return None

    if arity == Arity.MULTI:
        if is_sequence(value):
            return list(value)
        return [] if value is None else [value]

    if arity == Arity.RANGE:
        return _to_range(value, validate_range_fill(range_fill))

    while is_sequence(value):
        value = value[0] if value else None
    return value


def coerce_value_for_operator(
    operator: Optional[str],
    value: Any,
    rule: "Rule",
    registry: Optional["FieldRegistry"] = None,
    range_fill: str = DEFAULT_RANGE_FILL,
) -> Any:
    """
    Coerce a value for an operator, honoring the rule's field hook.

    If registry knows rule.field and that descriptor has a coerce hook, the
    hook decides; otherwise the arity table does. Pure: rule is not modified.
    """
    if registry is not None:
        descriptor = registry.get_or_none(rule.field)
        if descriptor is not None and descriptor.coerce is not None:
            return descriptor.coerce(operator, value, rule)
    return coerce_by_arity(operator, value, range_fill)
