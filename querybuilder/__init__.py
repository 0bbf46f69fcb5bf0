"""
querybuilder - rule-tree engine for visual filter builders

Keeps a tree of field/operator/value rules, grouped by "and"/"or",
consistent with a typed field registry: defaults on creation, resets on
field changes, value reshaping on operator changes, and a recursive
validator that reports errors in the shape of the tree.
"""

__version__ = "1.0.0"

from .builder import QueryBuilder
from .rules import (
    FieldDescriptor,
    FieldRegistry,
    Rule,
    RuleGroup,
    TreeMutator,
    ValidationReport,
    Validator,
    coerce_value_for_operator,
)

__all__ = [
    "QueryBuilder",
    "FieldDescriptor",
    "FieldRegistry",
    "Rule",
    "RuleGroup",
    "TreeMutator",
    "ValidationReport",
    "Validator",
    "coerce_value_for_operator",
]
