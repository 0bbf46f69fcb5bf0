"""
Field registry tests.

Covers descriptor parsing, lookups, type-derived operators and defaults,
default-field/operator policies and entity grouping.
"""

import pytest

from querybuilder.rules import (
    FieldDescriptor,
    FieldOption,
    FieldRegistry,
    FieldType,
    UnknownFieldError,
)


# =============================================================================
# Descriptor parsing
# =============================================================================

class TestFieldDescriptor:
    """Test FieldDescriptor.from_dict and properties."""

    def test_camel_case_default(self):
        d = FieldDescriptor.from_dict({"name": "Age", "type": "number", "defaultValue": 18})
        assert d.default_value == 18
        assert d.has_default is True

    def test_snake_case_default(self):
        d = FieldDescriptor.from_dict({"name": "Age", "type": "number", "default_value": 0})
        assert d.default_value == 0

    def test_none_is_a_declared_default(self):
        d = FieldDescriptor.from_dict({"name": "Note", "defaultValue": None})
        assert d.has_default is True

    def test_missing_name_rejected(self):
        with pytest.raises(ValueError, match="requires 'name'"):
            FieldDescriptor.from_dict({"type": "number"})

    def test_options_parsed(self):
        d = FieldDescriptor.from_dict({
            "name": "Status",
            "type": "category",
            "options": [{"name": "Active", "value": "active"}],
        })
        assert d.options == (FieldOption(name="Active", value="active"),)

    def test_custom_type_maps_to_other(self):
        d = FieldDescriptor(name="Color", type="color-picker")
        assert d.type == "color-picker"
        assert d.field_type == FieldType.OTHER

    def test_enum_type_normalized(self):
        d = FieldDescriptor(name="Age", type=FieldType.NUMBER)
        assert d.type == "number"


# =============================================================================
# Lookups
# =============================================================================

class TestRegistryLookup:
    """Test describe / has / iteration."""

    def test_describe_known(self, age_status_registry: FieldRegistry):
        assert age_status_registry.describe("age").name == "Age"

    def test_describe_unknown_raises(self, age_status_registry: FieldRegistry):
        with pytest.raises(UnknownFieldError, match="Unknown field: 'height'") as exc:
            age_status_registry.describe("height")
        assert exc.value.field_id == "height"
        assert exc.value.available == ["age", "status"]

    def test_unknown_field_is_key_error(self, age_status_registry: FieldRegistry):
        with pytest.raises(KeyError):
            age_status_registry.describe(None)

    def test_unhashable_id_is_unknown(self, age_status_registry: FieldRegistry):
        assert age_status_registry.get_or_none(["age"]) is None
        assert age_status_registry.has(["age"]) is False
        with pytest.raises(UnknownFieldError):
            age_status_registry.describe(["age"])

    def test_non_string_field_id_rejected(self):
        with pytest.raises(ValueError, match="non-empty string"):
            FieldRegistry({1: {"name": "One"}})

    def test_iteration_order(self, age_status_registry: FieldRegistry):
        assert list(age_status_registry) == ["age", "status"]
        assert len(age_status_registry) == 2
        assert "age" in age_status_registry

    def test_bad_field_config_reports_field_id(self):
        with pytest.raises(ValueError, match="Field 'age'"):
            FieldRegistry({"age": {"type": "number"}})

    def test_from_dict_and_options(self):
        registry = FieldRegistry.from_dict({
            "status": {"name": "Status", "type": "category", "options": [{"name": "On", "value": 1}]},
        })
        assert registry.options_for("status") == [FieldOption(name="On", value=1)]
        assert registry.field_ids() == ["status"]

    def test_registry_is_read_only(self, age_status_registry: FieldRegistry):
        with pytest.raises(TypeError):
            age_status_registry._fields["x"] = FieldDescriptor(name="X")  # noqa: SLF001


# =============================================================================
# Operators
# =============================================================================

class TestOperatorsFor:
    """Test declared and type-derived operator lists."""

    def test_declared_operators_win(self, age_status_registry: FieldRegistry):
        assert age_status_registry.operators_for("age") == ["=", "!="]

    def test_string_default_operators(self, age_status_registry: FieldRegistry):
        assert age_status_registry.operators_for("status") == ["=", "!=", "contains", "like"]

    def test_category_default_operators(self, category_registry: FieldRegistry):
        assert category_registry.operators_for("status") == ["=", "!=", "in", "not in"]

    @pytest.mark.parametrize("field_type", ["number", "string", "boolean", "date", "time", "category", "widget"])
    def test_first_default_operator_is_equals(self, field_type: str):
        registry = FieldRegistry({"f": {"name": "F", "type": field_type}})
        assert registry.default_operator("f") == "="

    def test_operator_map_override(self):
        registry = FieldRegistry(
            {"flag": {"name": "Flag", "type": "boolean"}},
            operator_map={"boolean": ["=", "!="]},
        )
        assert registry.operators_for("flag") == ["=", "!="]

    def test_default_operator_policy(self, age_status_registry: FieldRegistry):
        registry = FieldRegistry(
            {"age": age_status_registry.describe("age")},
            default_operator_policy=lambda ops: ops[-1],
        )
        assert registry.default_operator("age") == "!="


# =============================================================================
# Default values
# =============================================================================

class TestDefaultValueFor:
    """Test declared and type-derived default values."""

    def test_declared_default(self, age_status_registry: FieldRegistry):
        assert age_status_registry.default_value_for("age") == 18

    @pytest.mark.parametrize("field_type,expected", [
        ("number", 0),
        ("string", ""),
        ("boolean", False),
        ("date", None),
        ("widget", None),
    ])
    def test_zero_values(self, field_type: str, expected):
        registry = FieldRegistry({"f": {"name": "F", "type": field_type}})
        assert registry.default_value_for("f") == expected

    def test_category_first_option(self, category_registry: FieldRegistry):
        assert category_registry.default_value_for("status") == "active"

    def test_category_without_options(self):
        registry = FieldRegistry({"c": {"name": "C", "type": "category"}})
        assert registry.default_value_for("c") is None

    def test_callable_default_invoked_each_time(self):
        registry = FieldRegistry({"tags": {"name": "Tags", "defaultValue": list}})
        first = registry.default_value_for("tags")
        second = registry.default_value_for("tags")
        assert first == [] and second == []
        assert first is not second


# =============================================================================
# Default field and entities
# =============================================================================

class TestDefaultFieldAndEntities:
    """Test default-field policy and entity grouping."""

    @pytest.fixture
    def entity_registry(self) -> FieldRegistry:
        return FieldRegistry({
            "name": {"name": "Name", "entity": "person"},
            "age": {"name": "Age", "type": "number", "entity": "person"},
            "city": {"name": "City", "entity": "address"},
        })

    def test_first_field(self, age_status_registry: FieldRegistry):
        assert age_status_registry.default_field() == "age"

    def test_empty_registry_has_no_default(self):
        assert FieldRegistry({}).default_field() is None

    def test_custom_field_policy(self, age_status_registry: FieldRegistry):
        registry = FieldRegistry(
            dict(age_status_registry.items()),
            default_field_policy=lambda ids: sorted(ids)[-1],
        )
        assert registry.default_field() == "status"

    def test_entities(self, entity_registry: FieldRegistry):
        assert entity_registry.entities() == ["person", "address"]
        assert entity_registry.fields_for_entity("person") == ["name", "age"]
        assert entity_registry.default_field("address") == "city"

    def test_unknown_entity(self, entity_registry: FieldRegistry):
        with pytest.raises(UnknownFieldError, match="Unknown entity"):
            entity_registry.fields_for_entity("company")
