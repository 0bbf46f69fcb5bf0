"""
Tree Parser: dict <-> node conversion for rule trees.

Plain-dict schema (JSON compatible):
```
{
  "condition": "and",
  "not": false,            # optional
  "rules": [
    {"field": "age", "operator": ">=", "value": 18},
    {"condition": "or", "rules": [
      {"field": "status", "operator": "in", "value": ["active", "trial"]}
    ]}
  ]
}
```

Discrimination is structural: a dict carrying "rules" is a group, anything
else must carry "field". Field ids are not checked against a registry here;
unknown fields survive a round trip and are reported by the validator.

Usage:
    tree = parse_tree(payload)
    payload = tree_to_dict(tree)
"""

from __future__ import annotations

from typing import Any

from .nodes import Node, Rule, RuleGroup
from .types import VALID_CONDITIONS


# =============================================================================
# Parsing
# =============================================================================

def parse_rule(data: dict, location: str = "rule") -> Rule:
    """
    Parse a Rule from a dict.

    Args:
        data: Rule dict with "field" and optional "operator", "value", "entity".
        location: Path used in error messages.

    Returns:
        Rule node.
    """
    if "field" not in data:
        raise ValueError(f"{location}: rule requires 'field'")
    field_id = data["field"]
    if field_id is not None and not isinstance(field_id, str):
        raise ValueError(
            f"{location}: field must be a string, got {type(field_id).__name__}"
        )
    return Rule(
        field=field_id,
        operator=data.get("operator"),
        value=data.get("value"),
        entity=data.get("entity"),
    )


def parse_group(data: dict, location: str = "root") -> RuleGroup:
    """
    Parse a RuleGroup (recursively) from a dict.

    A missing condition defaults to "and"; an unrecognized one is an error.
    """
    condition = data.get("condition", "and")
    if condition not in VALID_CONDITIONS:
        raise ValueError(
            f"{location}: condition must be one of {sorted(VALID_CONDITIONS)}, "
            f"got {condition!r}"
        )

    items = data.get("rules", [])
    if not isinstance(items, list):
        raise ValueError(f"{location}: 'rules' must be a list")

    children: list[Node] = [
        parse_node(item, f"{location}.rules[{idx}]")
        for idx, item in enumerate(items)
    ]
    return RuleGroup(
        condition=condition,
        rules=children,
        negated=bool(data.get("not", False)),
    )


def parse_node(data: Any, location: str = "root") -> Node:
    """Parse either node kind, dispatching on the presence of 'rules'."""
    if not isinstance(data, dict):
        raise ValueError(
            f"{location}: node must be a dict, got {type(data).__name__}"
        )
    if "rules" in data:
        return parse_group(data, location)
    return parse_rule(data, location)


def parse_tree(data: dict | None) -> RuleGroup:
    """
    Parse a whole tree. The root must be a group; None gives an empty "and" group.
    """
    if data is None:
        return RuleGroup()
    if not isinstance(data, dict):
        raise ValueError(f"root: tree must be a dict, got {type(data).__name__}")
    if "field" in data and "rules" not in data:
        raise ValueError("root: the root of a tree must be a group")
    return parse_group(data, "root")


# =============================================================================
# Serialization
# =============================================================================

def rule_to_dict(rule: Rule) -> dict:
    result: dict = {"field": rule.field}
    if rule.operator is not None:
        result["operator"] = rule.operator
    result["value"] = list(rule.value) if isinstance(rule.value, tuple) else rule.value
    if rule.entity is not None:
        result["entity"] = rule.entity
    return result


def tree_to_dict(node: Node) -> dict:
    """
    Serialize a tree (or subtree) to dict format.

    The result can be passed back to parse_tree().
    """
    if isinstance(node, Rule):
        return rule_to_dict(node)

    result: dict = {
        "condition": node.condition,
        "rules": [tree_to_dict(child) for child in node.rules],
    }
    if node.negated:
        result["not"] = True
    return result
