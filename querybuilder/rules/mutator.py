"""
Tree Mutator: every structural and field-driven edit of a rule tree.

Each public method is one logical operation and produces at most one
notification burst (on_touched then on_change), no matter how many
attributes it writes. Operations that turn out to be no-ops (removing a
node that is not there, ignored operators) do not notify.

Error policy:
- UnknownFieldError: raised before any write (change_field, change_entity)
- InvalidOperatorError: raised when EngineConfig.strict_operators is set;
  otherwise logged and ignored
- InvalidParentError: raised when the target group is not in the tree
"""

from __future__ import annotations

from typing import Any, Optional

from ..config import EngineConfig, get_config
from ..utils.logger import get_logger
from .coercion import coerce_value_for_operator
from .fields import FieldRegistry
from .nodes import Node, Rule, RuleGroup, contains
from .notify import ChangeNotifier
from .types import (
    Condition,
    InvalidOperatorError,
    InvalidParentError,
    UnknownFieldError,
    VALID_CONDITIONS,
)


class TreeMutator:
    """
    Applies edits to one rule tree using one FieldRegistry.

    Example:
        mutator = TreeMutator(registry, root)
        rule = mutator.add_rule(root)
        mutator.change_field("status", rule)
        mutator.change_operator("in", rule)
    """

    def __init__(
        self,
        registry: FieldRegistry,
        root: RuleGroup,
        notifier: Optional[ChangeNotifier] = None,
        settings: Optional[EngineConfig] = None,
    ):
        self.registry = registry
        self.root = root
        self.notifier = notifier or ChangeNotifier()
        self.settings = settings or get_config().engine
        self.logger = get_logger()

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _check_parent(self, group: RuleGroup) -> None:
        if not isinstance(group, RuleGroup):
            raise InvalidParentError(
                f"Expected a RuleGroup, got {type(group).__name__}"
            )
        if not contains(self.root, group):
            raise InvalidParentError()

    def coerce(self, operator: Optional[str], value: Any, rule: Rule) -> Any:
        """Arity coercion with this mutator's registry and range fill mode."""
        return coerce_value_for_operator(
            operator, value, rule, self.registry, self.settings.range_fill
        )

    def _reset_rule(self, rule: Rule, field_id: Optional[str]) -> None:
        """
        Point rule at field_id with that field's default operator and value.

        Nothing is written to rule until every registry call and hook has
        returned.
        """
        entity, operator, value = rule.entity, None, None
        if field_id is not None:
            descriptor = self.registry.describe(field_id)
            entity = descriptor.entity
            operator = self.registry.default_operator(field_id)
            draft = Rule(field=field_id, operator=operator, entity=entity)
            value = self.coerce(
                operator, self.registry.default_value_for(field_id), draft
            )
        rule.field = field_id
        rule.entity = entity
        rule.operator = operator
        rule.value = value

    @staticmethod
    def _index_of(node: Node, parent: RuleGroup, kind: type) -> Optional[int]:
        # Identity first, then the first structurally equal sibling
        for idx, child in enumerate(parent.rules):
            if child is node:
                return idx
        for idx, child in enumerate(parent.rules):
            if isinstance(child, kind) and child == node:
                return idx
        return None

    # -------------------------------------------------------------------------
    # Rules
    # -------------------------------------------------------------------------

    def add_rule(self, group: Optional[RuleGroup] = None, entity: Optional[str] = None) -> Rule:
        """
        Append a rule built from the registry defaults.

        Args:
            group: Target group (default: root)
            entity: Pick the default field among this entity's fields

        Returns:
            The created Rule.
        """
        group = self.root if group is None else group
        self._check_parent(group)

        with self.notifier.burst():
            rule = Rule(entity=entity)
            self._reset_rule(rule, self.registry.default_field(entity))
            group.rules.append(rule)
            self.notifier.mark_dirty()

        self.logger.mutation(
            "ADD_RULE", field=rule.field, operator=rule.operator, value=rule.value
        )
        return rule

    def remove_rule(self, rule: Rule, parent: Optional[RuleGroup] = None) -> bool:
        """
        Remove the first matching rule from parent.

        Returns:
            True if a rule was removed, False on a no-op.
        """
        parent = self.root if parent is None else parent
        self._check_parent(parent)

        idx = self._index_of(rule, parent, Rule)
        if idx is None:
            return False

        with self.notifier.burst():
            del parent.rules[idx]
            self.notifier.mark_dirty()

        self.logger.mutation("REMOVE_RULE", field=rule.field, index=idx)
        return True

    # -------------------------------------------------------------------------
    # Groups
    # -------------------------------------------------------------------------

    def add_group(self, group: Optional[RuleGroup] = None) -> RuleGroup:
        """Append an empty "and" group to group (default: root)."""
        group = self.root if group is None else group
        self._check_parent(group)

        with self.notifier.burst():
            child = RuleGroup(condition=Condition.AND.value, rules=[])
            group.rules.append(child)
            self.notifier.mark_dirty()

        self.logger.mutation("ADD_GROUP", parent_condition=group.condition)
        return child

    def remove_group(self, group: RuleGroup, parent: Optional[RuleGroup] = None) -> bool:
        """
        Remove the first matching nested group from parent.

        Raises:
            InvalidParentError: If parent is outside the tree or group is the root.
        """
        if group is self.root:
            raise InvalidParentError("The root group cannot be removed")
        parent = self.root if parent is None else parent
        self._check_parent(parent)

        idx = self._index_of(group, parent, RuleGroup)
        if idx is None:
            return False

        with self.notifier.burst():
            del parent.rules[idx]
            self.notifier.mark_dirty()

        self.logger.mutation("REMOVE_GROUP", index=idx, size=len(group.rules))
        return True

    def change_condition(self, condition: str, group: RuleGroup) -> None:
        """Switch a group between "and" and "or"."""
        if isinstance(condition, Condition):
            condition = condition.value
        if condition not in VALID_CONDITIONS:
            raise ValueError(
                f"Condition must be one of {sorted(VALID_CONDITIONS)}, got {condition!r}"
            )
        self._check_parent(group)

        with self.notifier.burst():
            group.condition = condition
            self.notifier.mark_dirty()

        self.logger.mutation("CHANGE_CONDITION", condition=condition)

    def set_negated(self, negated: bool, group: RuleGroup) -> None:
        """Set the sibling "not" flag on a group."""
        self._check_parent(group)

        with self.notifier.burst():
            group.negated = bool(negated)
            self.notifier.mark_dirty()

        self.logger.mutation("SET_NEGATED", negated=group.negated)

    # -------------------------------------------------------------------------
    # Field-driven resets
    # -------------------------------------------------------------------------

    def change_field(self, field_id: str, rule: Rule) -> None:
        """
        Reassign rule.field and reset operator and value.

        The reset is unconditional: the previous operator and value are
        discarded even when the new field would accept them.

        Raises:
            UnknownFieldError: If field_id is not registered (rule untouched).
        """
        self.registry.describe(field_id)

        with self.notifier.burst():
            self._reset_rule(rule, field_id)
            self.notifier.mark_dirty()

        self.logger.mutation(
            "CHANGE_FIELD", field=field_id, operator=rule.operator, value=rule.value
        )

    def change_entity(self, entity: str, rule: Rule) -> None:
        """
        Move rule to an entity, selecting that entity's default field.

        Raises:
            UnknownFieldError: If no field declares entity (rule untouched).
        """
        field_id = self.registry.default_field(entity)
        if field_id is None:
            raise UnknownFieldError(entity, self.registry.entities(), kind="entity")

        with self.notifier.burst():
            self._reset_rule(rule, field_id)
            self.notifier.mark_dirty()

        self.logger.mutation("CHANGE_ENTITY", entity=entity, field=field_id)

    def change_operator(self, operator: str, rule: Rule) -> bool:
        """
        Set rule.operator and reshape rule.value for the new arity.

        Returns:
            True if applied, False if ignored (non-strict mode).

        Raises:
            InvalidOperatorError: If operator is not allowed and strict mode is on.
            UnknownFieldError: If rule.field is not registered.
        """
        allowed = self.registry.operators_for(rule.field)
        if operator not in allowed:
            if self.settings.strict_operators:
                raise InvalidOperatorError(operator, rule.field, allowed)
            self.logger.rejected(
                "CHANGE_OPERATOR", "operator not allowed",
                field=rule.field, operator=operator,
            )
            return False

        value = self.coerce(operator, rule.value, rule)

        with self.notifier.burst():
            rule.operator = operator
            rule.value = value
            self.notifier.mark_dirty()

        self.logger.mutation(
            "CHANGE_OPERATOR", field=rule.field, operator=operator, value=rule.value
        )
        return True

    def change_value(self, value: Any, rule: Rule) -> None:
        """Direct value edit. Stored as given; validators judge it later."""
        with self.notifier.burst():
            rule.value = value
            self.notifier.mark_dirty()

        self.logger.mutation("CHANGE_VALUE", field=rule.field, value=value)
