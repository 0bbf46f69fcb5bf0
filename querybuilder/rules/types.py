"""
Rule-tree type definitions.

Enums and exceptions shared by the registry, mutator and validator.
"""

from enum import Enum
from typing import Optional, Sequence


class FieldType(str, Enum):
    """
    Value types a field can declare.

    Unrecognized type strings are allowed on descriptors (custom widgets);
    they behave like OTHER for operator and default lookups.
    """

    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    DATE = "date"
    TIME = "time"
    CATEGORY = "category"
    OTHER = "other"

    @classmethod
    def coerce(cls, value: "str | FieldType") -> "FieldType":
        """Map a type string to FieldType, falling back to OTHER."""
        if isinstance(value, FieldType):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.OTHER


class Condition(str, Enum):
    """Logical operator joining a group's children."""

    AND = "and"
    OR = "or"


VALID_CONDITIONS = frozenset(c.value for c in Condition)


# =============================================================================
# Errors
# =============================================================================

class QueryBuilderError(Exception):
    """Base class for structural errors raised at the mutation boundary."""


class UnknownFieldError(QueryBuilderError, KeyError):
    """Raised when a field (or entity) id is not present in the registry."""

    def __init__(self, field_id: Optional[str], available: Sequence[str] = (), kind: str = "field"):
        self.field_id = field_id
        self.available = list(available)
        self.kind = kind
        msg = f"Unknown {kind}: '{field_id}'"
        if self.available:
            msg += f". Available: {self.available}"
        super().__init__(msg)

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class InvalidOperatorError(QueryBuilderError, ValueError):
    """Raised when an operator is not permitted for a field."""

    def __init__(self, operator: str, field_id: str, allowed: Sequence[str]):
        self.operator = operator
        self.field_id = field_id
        self.allowed = list(allowed)
        super().__init__(
            f"Operator '{operator}' is not allowed for field '{field_id}'. "
            f"Allowed: {self.allowed}"
        )


class InvalidParentError(QueryBuilderError, ValueError):
    """Raised when a structural mutation targets a group outside the active tree."""

    def __init__(self, message: str = "Target group is not part of the active tree"):
        super().__init__(message)
