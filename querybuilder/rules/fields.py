"""
Field Registry: static description of every field a rule can target.

This module provides a single source of truth for the fields available to
a rule tree. Each field declares a value type and optionally its allowed
operators, a default value, enumerated options and custom hooks.

Key Concepts:
- FieldDescriptor: configuration for one field (type, operators, default, hooks)
- FieldRegistry: ordered, read-only mapping field id -> FieldDescriptor
- Defaults are policies: the first field, first operator and zero values
  are derived by injectable functions, not by accident of dict order

Example configuration:
    registry = FieldRegistry.from_dict({
        "age": {
            "name": "Age",
            "type": "number",
            "operators": ["=", ">="],
            "defaultValue": 18,
        },
        "status": {
            "name": "Status",
            "type": "category",
            "options": [
                {"name": "Active", "value": "active"},
                {"name": "Inactive", "value": "inactive"},
            ],
        },
    })

    registry.operators_for("status")     # ["=", "!=", "in", "not in"]
    registry.default_value_for("status") # "active"
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Iterator, Mapping, Optional, Sequence, TYPE_CHECKING

from .operators import DEFAULT_OPERATOR_MAP
from .types import FieldType, UnknownFieldError

if TYPE_CHECKING:
    from .nodes import Rule


# validator(value, rule) -> message or None
FieldValidator = Callable[[Any, "Rule"], Optional[str]]
# coerce(operator, value, rule) -> value
FieldCoercer = Callable[[str, Any, "Rule"], Any]
# policy(registry field ids in order) -> chosen id
FieldPolicy = Callable[[Sequence[str]], Optional[str]]
# policy(field's operators in order) -> chosen operator
OperatorPolicy = Callable[[Sequence[str]], Optional[str]]


class _Unset:
    """Marker for 'no default declared' (None is a legal default)."""

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


def first_item(items: Sequence[str]) -> Optional[str]:
    """Default policy: the first entry, or None for an empty sequence."""
    return items[0] if items else None


@dataclass(frozen=True)
class FieldOption:
    """One choice of an enumerated (category) field."""
    name: str
    value: Any


@dataclass(frozen=True)
class FieldDescriptor:
    """
    Configuration for a single field.

    Attributes:
        name: Display label
        type: Value type ("number", "string", "category", ... or a custom string)
        operators: Allowed operators in display order (None = type-derived)
        default_value: Default operand; a callable is invoked per lookup
        options: Choices for enumerated types
        validator: Optional hook returning an error message for a rule value
        coerce: Optional hook replacing operator-arity coercion for this field
        entity: Optional entity id (multi-entity registries)
    """
    name: str
    type: str = FieldType.STRING.value
    operators: Optional[tuple[str, ...]] = None
    default_value: Any = UNSET
    options: tuple[FieldOption, ...] = field(default_factory=tuple)
    validator: Optional[FieldValidator] = None
    coerce: Optional[FieldCoercer] = None
    entity: Optional[str] = None

    def __post_init__(self) -> None:
        if isinstance(self.type, FieldType):
            object.__setattr__(self, "type", self.type.value)
        if self.operators is not None:
            object.__setattr__(self, "operators", tuple(self.operators))
        object.__setattr__(self, "options", tuple(self.options))

    @property
    def field_type(self) -> FieldType:
        """Declared type as a FieldType (custom types map to OTHER)."""
        return FieldType.coerce(self.type)

    @property
    def has_default(self) -> bool:
        return self.default_value is not UNSET

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "FieldDescriptor":
        """
        Create a FieldDescriptor from a config dict.

        Accepts both camelCase ("defaultValue") and snake_case ("default_value").
        """
        if "name" not in d:
            raise ValueError("Field config requires 'name'")

        options = tuple(
            opt if isinstance(opt, FieldOption) else FieldOption(name=opt["name"], value=opt["value"])
            for opt in d.get("options", ())
        )
        operators = d.get("operators")

        if "default_value" in d:
            default = d["default_value"]
        else:
            default = d.get("defaultValue", UNSET)

        return cls(
            name=d["name"],
            type=d.get("type", FieldType.STRING.value),
            operators=tuple(operators) if operators is not None else None,
            default_value=default,
            options=options,
            validator=d.get("validator"),
            coerce=d.get("coerce"),
            entity=d.get("entity"),
        )


class FieldRegistry:
    """
    Read-only registry of FieldDescriptors, keyed by field id.

    Provides:
    - O(1) lookup by field id (describe / get_or_none / has)
    - Operator lists with a type-derived fallback
    - Default values with a type-derived zero value
    - Default-field and default-operator policies
    - Entity grouping

    Iteration order is the order fields were supplied; the default field
    policy receives that order explicitly.
    """

    def __init__(
        self,
        fields: Mapping[str, FieldDescriptor | Mapping[str, Any]],
        *,
        operator_map: Optional[Mapping[FieldType, Sequence[str]]] = None,
        default_field_policy: FieldPolicy = first_item,
        default_operator_policy: OperatorPolicy = first_item,
    ):
        """
        Initialize field registry.

        Args:
            fields: Field id -> FieldDescriptor (or config dict).
            operator_map: Type -> operators for fields that declare none.
            default_field_policy: Picks the field for new rules.
            default_operator_policy: Picks the operator for new/changed rules.
        """
        parsed: dict[str, FieldDescriptor] = {}
        for field_id, descriptor in fields.items():
            if not field_id or not isinstance(field_id, str):
                raise ValueError(f"Field id must be a non-empty string, got {field_id!r}")
            if not isinstance(descriptor, FieldDescriptor):
                try:
                    descriptor = FieldDescriptor.from_dict(descriptor)
                except (KeyError, TypeError, ValueError) as e:
                    raise ValueError(f"Field '{field_id}': {e}") from e
            parsed[field_id] = descriptor

        self._fields: Mapping[str, FieldDescriptor] = MappingProxyType(parsed)
        self._operator_map = dict(DEFAULT_OPERATOR_MAP)
        if operator_map:
            self._operator_map.update(
                {FieldType.coerce(k): tuple(v) for k, v in operator_map.items()}
            )
        self._default_field_policy = default_field_policy
        self._default_operator_policy = default_operator_policy

    @classmethod
    def from_dict(cls, fields: Mapping[str, Mapping[str, Any]], **kwargs) -> "FieldRegistry":
        """Create a registry from a {field_id: config} mapping."""
        return cls(fields, **kwargs)

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def describe(self, field_id: Optional[str]) -> FieldDescriptor:
        """
        Get the descriptor for a field.

        Raises:
            UnknownFieldError: If field id is not registered.
        """
        descriptor = self.get_or_none(field_id)
        if descriptor is None:
            raise UnknownFieldError(field_id, list(self._fields))
        return descriptor

    def get_or_none(self, field_id: Optional[str]) -> Optional[FieldDescriptor]:
        """Get descriptor by id, returning None if not found."""
        # Non-string ids are never registered
        if not isinstance(field_id, str):
            return None
        return self._fields.get(field_id)

    def has(self, field_id: Optional[str]) -> bool:
        return isinstance(field_id, str) and field_id in self._fields

    def field_ids(self) -> list[str]:
        """All field ids in registry order."""
        return list(self._fields)

    def items(self):
        return self._fields.items()

    def __contains__(self, field_id: object) -> bool:
        return field_id in self._fields

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    # -------------------------------------------------------------------------
    # Operators and defaults
    # -------------------------------------------------------------------------

    def operators_for(self, field_id: str) -> list[str]:
        """
        Allowed operators for a field, in display order.

        Declared operators win; otherwise the list comes from the type map.
        """
        descriptor = self.describe(field_id)
        if descriptor.operators is not None:
            return list(descriptor.operators)
        return list(self._operator_map.get(descriptor.field_type, ("=",)))

    def default_operator(self, field_id: str) -> Optional[str]:
        """Operator chosen for a freshly (re)assigned field."""
        return self._default_operator_policy(self.operators_for(field_id))

    def default_value_for(self, field_id: str) -> Any:
        """
        Default operand for a field.

        Declared default wins (callables are invoked); otherwise a zero value
        for the field type: 0, "", False, the first option's value, or None.
        """
        descriptor = self.describe(field_id)
        if descriptor.has_default:
            default = descriptor.default_value
            return default() if callable(default) else default

        field_type = descriptor.field_type
        if field_type == FieldType.NUMBER:
            return 0
        if field_type == FieldType.STRING:
            return ""
        if field_type == FieldType.BOOLEAN:
            return False
        if field_type == FieldType.CATEGORY:
            return descriptor.options[0].value if descriptor.options else None
        return None

    def default_field(self, entity: Optional[str] = None) -> Optional[str]:
        """
        Field chosen for a new rule.

        Args:
            entity: Restrict the choice to one entity's fields.

        Returns:
            Field id, or None when no candidate exists.
        """
        if entity is None:
            candidates = self.field_ids()
        else:
            candidates = self.fields_for_entity(entity)
        return self._default_field_policy(candidates)

    def options_for(self, field_id: str) -> list[FieldOption]:
        return list(self.describe(field_id).options)

    # -------------------------------------------------------------------------
    # Entities
    # -------------------------------------------------------------------------

    def entities(self) -> list[str]:
        """Distinct entity ids in first-seen order."""
        seen: list[str] = []
        for descriptor in self._fields.values():
            if descriptor.entity is not None and descriptor.entity not in seen:
                seen.append(descriptor.entity)
        return seen

    def fields_for_entity(self, entity: str) -> list[str]:
        """
        Field ids belonging to an entity.

        Raises:
            UnknownFieldError: If no field declares this entity.
        """
        ids = [fid for fid, d in self._fields.items() if d.entity == entity]
        if not ids:
            raise UnknownFieldError(entity, self.entities(), kind="entity")
        return ids
