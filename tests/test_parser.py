"""
Tree parser / serializer tests and tree walker helpers.
"""

import pytest

from querybuilder.rules import (
    Rule,
    RuleGroup,
    contains,
    parse_node,
    parse_tree,
    tree_to_dict,
    walk,
)
from querybuilder.rules.nodes import count_rules, referenced_fields


PAYLOAD = {
    "condition": "and",
    "rules": [
        {"field": "age", "operator": ">=", "value": 18},
        {
            "condition": "or",
            "not": True,
            "rules": [
                {"field": "status", "operator": "in", "value": ["active", "trial"]},
                {"field": "city", "operator": "=", "value": "Oslo", "entity": "address"},
            ],
        },
    ],
}


class TestParseTree:
    """Test dict -> node conversion."""

    def test_structure(self):
        tree = parse_tree(PAYLOAD)

        assert tree.condition == "and"
        assert tree.rules[0] == Rule(field="age", operator=">=", value=18)
        nested = tree.rules[1]
        assert isinstance(nested, RuleGroup)
        assert nested.condition == "or"
        assert nested.negated is True
        assert nested.rules[1].entity == "address"

    def test_round_trip(self):
        assert tree_to_dict(parse_tree(PAYLOAD)) == PAYLOAD

    def test_none_gives_empty_root(self):
        assert parse_tree(None) == RuleGroup(condition="and", rules=[])

    def test_missing_condition_defaults_to_and(self):
        assert parse_tree({"rules": []}).condition == "and"

    def test_rule_without_operator(self):
        tree = parse_tree({"condition": "and", "rules": [{"field": "age", "value": 5}]})
        assert tree.rules[0] == Rule(field="age", value=5)
        assert tree_to_dict(tree) == {"condition": "and", "rules": [{"field": "age", "value": 5}]}

    def test_bad_condition_reports_location(self):
        with pytest.raises(ValueError, match=r"root\.rules\[0\]: condition must be one of"):
            parse_tree({"condition": "and", "rules": [{"condition": "xor", "rules": []}]})

    def test_rule_without_field(self):
        with pytest.raises(ValueError, match=r"root\.rules\[1\]: rule requires 'field'"):
            parse_tree({"condition": "and", "rules": [{"field": "a"}, {"value": 1}]})

    def test_non_string_field_reports_location(self):
        with pytest.raises(ValueError, match=r"root\.rules\[0\]: field must be a string, got list"):
            parse_tree({"rules": [{"field": ["age"], "value": 1}]})

    def test_non_dict_node(self):
        with pytest.raises(ValueError, match="node must be a dict"):
            parse_node(["age", "=", 5])

    def test_root_must_be_group(self):
        with pytest.raises(ValueError, match="root of a tree must be a group"):
            parse_tree({"field": "age"})

    def test_rules_must_be_list(self):
        with pytest.raises(ValueError, match="'rules' must be a list"):
            parse_tree({"condition": "and", "rules": "age"})

    def test_tuple_values_serialized_as_lists(self):
        tree = RuleGroup(rules=[Rule(field="age", operator="between", value=(1, 2))])
        assert tree_to_dict(tree)["rules"][0]["value"] == [1, 2]


class TestNodes:
    """Test node invariants and walkers."""

    def test_group_rejects_not_condition(self):
        with pytest.raises(ValueError, match="condition must be 'and' or 'or'"):
            RuleGroup(condition="not")

    def test_walk_preorder(self):
        tree = parse_tree(PAYLOAD)
        kinds = [type(n).__name__ for n in walk(tree)]
        assert kinds == ["RuleGroup", "Rule", "RuleGroup", "Rule", "Rule"]

    def test_contains_by_identity(self):
        tree = parse_tree(PAYLOAD)
        assert contains(tree, tree.rules[1]) is True
        assert contains(tree, RuleGroup(condition="or")) is False

    def test_referenced_fields_and_count(self):
        tree = parse_tree(PAYLOAD)
        assert referenced_fields(tree) == {"age", "status", "city"}
        assert count_rules(tree) == 3
