"""
Rule-tree node types.

This module defines the two node kinds of a filter expression tree:
- Rule: a single leaf condition (field, operator, value)
- RuleGroup: an "and"/"or" group of child rules and nested groups

The root of every tree is a RuleGroup. Nodes are mutable dataclasses:
the tree is edited in place by TreeMutator and read by Validator.
Tree walkers dispatch on the node class with isinstance(); there is no
shared base class.

Usage:
    # age >= 18 AND (status = "active" OR status = "trial")
    tree = RuleGroup(condition="and", rules=[
        Rule(field="age", operator=">=", value=18),
        RuleGroup(condition="or", rules=[
            Rule(field="status", operator="=", value="active"),
            Rule(field="status", operator="=", value="trial"),
        ]),
    ])
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Optional, Union

from .types import Condition


# =============================================================================
# Leaf node
# =============================================================================

@dataclass
class Rule:
    """
    A single condition on one field.

    Attributes:
        field: Field id from the FieldRegistry (None = no field selected)
        operator: Operator id; must belong to the field's operator list
        value: Operand; shape follows the operator's arity
        entity: Optional entity id for multi-entity registries
    """
    field: Optional[str] = None
    operator: Optional[str] = None
    value: Any = None
    entity: Optional[str] = None

    def __repr__(self) -> str:
        return f"Rule({self.field} {self.operator} {self.value!r})"


# =============================================================================
# Group node
# =============================================================================

@dataclass
class RuleGroup:
    """
    A logical group of child nodes.

    Attributes:
        condition: "and" or "or"
        rules: Ordered children (Rule or RuleGroup)
        negated: Sibling "not" flag; does not change the condition
    """
    condition: str = Condition.AND.value
    rules: list["Node"] = field(default_factory=list)
    negated: bool = False

    def __post_init__(self):
        if isinstance(self.condition, Condition):
            self.condition = self.condition.value
        if self.condition not in (Condition.AND.value, Condition.OR.value):
            raise ValueError(
                f"RuleGroup: condition must be 'and' or 'or', got {self.condition!r}"
            )

    @property
    def is_empty(self) -> bool:
        return not self.rules

    def __repr__(self) -> str:
        prefix = "Not" if self.negated else ""
        children = ", ".join(repr(c) for c in self.rules)
        return f"{prefix}{self.condition.capitalize()}({children})"


Node = Union[Rule, RuleGroup]


# =============================================================================
# Tree walkers
# =============================================================================

def walk(group: RuleGroup) -> Iterator[Node]:
    """Yield every node under group (group itself first), depth-first pre-order."""
    yield group
    for child in group.rules:
        if isinstance(child, RuleGroup):
            yield from walk(child)
        else:
            yield child


def contains(root: RuleGroup, node: Node) -> bool:
    """Check whether node is root or one of its descendants (by identity)."""
    return any(candidate is node for candidate in walk(root))


def referenced_fields(group: RuleGroup) -> set[str]:
    """Collect the field ids used by every rule in the tree."""
    return {
        node.field
        for node in walk(group)
        if isinstance(node, Rule) and node.field is not None
    }


def count_rules(group: RuleGroup) -> int:
    """Number of leaf rules in the tree."""
    return sum(1 for node in walk(group) if isinstance(node, Rule))
