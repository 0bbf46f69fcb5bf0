"""
Rule-tree engine.

Design principles:
- Tree nodes are plain mutable dataclasses; walkers dispatch on node class
- Operator arity, not field type, decides the shape of a rule's value
- Every mutation is one notification burst (touched, then changed)
- Validation returns data and never raises
"""

from .types import (
    FieldType,
    Condition,
    VALID_CONDITIONS,
    QueryBuilderError,
    UnknownFieldError,
    InvalidOperatorError,
    InvalidParentError,
)
from .operators import (
    Arity,
    OperatorSpec,
    OPERATOR_REGISTRY,
    MULTI_OPERATORS,
    RANGE_OPERATORS,
    NULLARY_OPERATORS,
    DEFAULT_OPERATOR_MAP,
    get_operator_spec,
    arity_of,
)
from .nodes import (
    Rule,
    RuleGroup,
    Node,
    walk,
    contains,
    referenced_fields,
    count_rules,
)
from .fields import (
    UNSET,
    FieldOption,
    FieldDescriptor,
    FieldRegistry,
    first_item,
)
from .coercion import (
    coerce_by_arity,
    coerce_value_for_operator,
)
from .notify import ChangeNotifier
from .mutator import TreeMutator
from .validator import ValidationReport, Validator
from .parser import (
    parse_tree,
    parse_node,
    tree_to_dict,
)

__all__ = [
    # Types
    "FieldType",
    "Condition",
    "VALID_CONDITIONS",
    "QueryBuilderError",
    "UnknownFieldError",
    "InvalidOperatorError",
    "InvalidParentError",
    # Operators
    "Arity",
    "OperatorSpec",
    "OPERATOR_REGISTRY",
    "MULTI_OPERATORS",
    "RANGE_OPERATORS",
    "NULLARY_OPERATORS",
    "DEFAULT_OPERATOR_MAP",
    "get_operator_spec",
    "arity_of",
    # Nodes
    "Rule",
    "RuleGroup",
    "Node",
    "walk",
    "contains",
    "referenced_fields",
    "count_rules",
    # Fields
    "UNSET",
    "FieldOption",
    "FieldDescriptor",
    "FieldRegistry",
    "first_item",
    # Coercion
    "coerce_by_arity",
    "coerce_value_for_operator",
    # Mutation / notification
    "ChangeNotifier",
    "TreeMutator",
    # Validation
    "ValidationReport",
    "Validator",
    # Serialization
    "parse_tree",
    "parse_node",
    "tree_to_dict",
]
