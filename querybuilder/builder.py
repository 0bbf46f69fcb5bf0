"""
QueryBuilder: one registry, one tree, one notifier.

The object a widget binds to. It owns the root group and forwards edits to
TreeMutator and checks to Validator, sharing a single ChangeNotifier so an
external collaborator can subscribe once.

Usage:
    qb = QueryBuilder({
        "age": {"name": "Age", "type": "number", "defaultValue": 18},
    })
    qb.on_change(render)
    rule = qb.add_rule()
    qb.change_operator(">=", rule)
    errors = qb.validate()
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional

from .config import EngineConfig, get_config
from .rules.fields import FieldDescriptor, FieldRegistry
from .rules.mutator import TreeMutator
from .rules.nodes import Rule, RuleGroup
from .rules.notify import ChangeNotifier
from .rules.parser import parse_tree, tree_to_dict
from .rules.validator import ValidationReport, Validator


class QueryBuilder:
    """Facade over the rule-tree engine for a single tree."""

    def __init__(
        self,
        fields: FieldRegistry | Mapping[str, FieldDescriptor | Mapping[str, Any]],
        data: RuleGroup | Mapping[str, Any] | None = None,
        settings: Optional[EngineConfig] = None,
    ):
        self.settings = settings or get_config().engine
        self.notifier = ChangeNotifier()
        self._configure(fields, data)

    def _configure(self, fields, data) -> None:
        self.registry = fields if isinstance(fields, FieldRegistry) else FieldRegistry(fields)
        self.mutator = TreeMutator(self.registry, RuleGroup(), self.notifier, self.settings)
        self.validator = Validator(self.registry, self.settings)
        self.data = data

    @property
    def data(self) -> RuleGroup:
        """Root group of the tree."""
        return self.mutator.root

    @data.setter
    def data(self, value: RuleGroup | Mapping[str, Any] | None) -> None:
        # Replacing the tree is a write from outside; it does not notify
        if value is None:
            value = RuleGroup()
        elif not isinstance(value, RuleGroup):
            value = parse_tree(dict(value))
        self.mutator.root = value

    def reconfigure(self, fields, data: RuleGroup | Mapping[str, Any] | None = None) -> None:
        """
        Replace the registry (and optionally the tree).

        Rules that reference fields the new registry lacks are kept as-is
        and show up as validation errors.
        """
        self._configure(fields, self.data if data is None else data)

    # -------------------------------------------------------------------------
    # Subscriptions
    # -------------------------------------------------------------------------

    def on_change(self, listener: Callable[[], None]) -> Callable[[], None]:
        return self.notifier.on_change(listener)

    def on_touched(self, listener: Callable[[], None]) -> Callable[[], None]:
        return self.notifier.on_touched(listener)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_rule(self, group: Optional[RuleGroup] = None, entity: Optional[str] = None) -> Rule:
        return self.mutator.add_rule(group, entity)

    def remove_rule(self, rule: Rule, parent: Optional[RuleGroup] = None) -> bool:
        return self.mutator.remove_rule(rule, parent)

    def add_group(self, group: Optional[RuleGroup] = None) -> RuleGroup:
        return self.mutator.add_group(group)

    def remove_group(self, group: RuleGroup, parent: Optional[RuleGroup] = None) -> bool:
        return self.mutator.remove_group(group, parent)

    def change_condition(self, condition: str, group: Optional[RuleGroup] = None) -> None:
        self.mutator.change_condition(condition, self.data if group is None else group)

    def set_negated(self, negated: bool = True, group: Optional[RuleGroup] = None) -> None:
        self.mutator.set_negated(negated, self.data if group is None else group)

    def change_field(self, field_id: str, rule: Rule) -> None:
        self.mutator.change_field(field_id, rule)

    def change_entity(self, entity: str, rule: Rule) -> None:
        self.mutator.change_entity(entity, rule)

    def change_operator(self, operator: str, rule: Rule) -> bool:
        return self.mutator.change_operator(operator, rule)

    def change_value(self, value: Any, rule: Rule) -> None:
        self.mutator.change_value(value, rule)

    # -------------------------------------------------------------------------
    # Pure operations
    # -------------------------------------------------------------------------

    def coerce_value_for_operator(self, operator: str, value: Any, rule: Rule) -> Any:
        return self.mutator.coerce(operator, value, rule)

    def operators_for(self, field_id: str) -> list[str]:
        return self.registry.operators_for(field_id)

    def validate(self, context: Any = None) -> Optional[ValidationReport]:
        return self.validator.validate(self.data, context)

    def to_dict(self) -> dict:
        return tree_to_dict(self.data)
