"""
Rule-tree Validator: recursive, side-effect free error reporting.

Walks a tree depth-first, pre-order, and builds a ValidationReport that
mirrors the tree shape but only materializes positions with errors:

    tree:   and(age=5, or(status="x"), name="bob")
    report: {"rules": ["Too young"]}            # only age failed

Checks per rule, first hit wins:
1. field missing              -> "Field required"
2. field not in registry      -> "Unknown field '<id>'"
3. descriptor.validator hook  -> its message, verbatim
4. require_values (optional)  -> "Value required"

Checks per group:
- allow_empty_groups=False    -> report.empty = "Empty groups are not allowed."

Validation never raises and never mutates; a failing custom validator is
logged and reported as that rule's error.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from ..config import EngineConfig, get_config
from ..config.constants import (
    EMPTY_GROUP_MESSAGE,
    FIELD_REQUIRED_MESSAGE,
    VALUE_REQUIRED_MESSAGE,
)
from ..utils.logger import get_logger
from .coercion import is_sequence
from .fields import FieldRegistry
from .nodes import Rule, RuleGroup
from .operators import Arity, arity_of


ReportEntry = Union[str, "ValidationReport"]


@dataclass
class ValidationReport:
    """
    Errors for one group.

    Attributes:
        rules: Errors of failing children in tree order; a
            string for a rule, a nested ValidationReport for a group
        empty: Group-level message when the group itself is invalid
        positions: Child index of each entry in rules (for inline display)
    """
    rules: list[ReportEntry] = field(default_factory=list)
    empty: Optional[str] = None
    positions: list[int] = field(default_factory=list, compare=False)

    @property
    def has_errors(self) -> bool:
        return bool(self.rules) or self.empty is not None

    def add(self, position: int, entry: ReportEntry) -> None:
        self.rules.append(entry)
        self.positions.append(position)

    def messages(self) -> list[str]:
        """All messages in the report, flattened pre-order."""
        out: list[str] = []
        if self.empty is not None:
            out.append(self.empty)
        for entry in self.rules:
            if isinstance(entry, ValidationReport):
                out.extend(entry.messages())
            else:
                out.append(entry)
        return out

    def to_dict(self) -> dict:
        result: dict[str, Any] = {
            "rules": [
                e.to_dict() if isinstance(e, ValidationReport) else e
                for e in self.rules
            ]
        }
        if self.empty is not None:
            result["empty"] = self.empty
        return result


def _is_blank(value: Any) -> bool:
    if value is None or value == "":
        return True
    return is_sequence(value) and len(value) == 0


class Validator:
    """
    Validates rule trees against a FieldRegistry.

    Usage:
        validator = Validator(registry)
        report = validator.validate(tree)
        if report is not None:
            print(report.to_dict())
    """

    def __init__(self, registry: FieldRegistry, settings: Optional[EngineConfig] = None):
        self.registry = registry
        self.settings = settings or get_config().engine
        self.logger = get_logger()

    def validate(self, tree: RuleGroup, context: Any = None) -> Optional[ValidationReport]:
        """
        Validate a whole tree.

        Args:
            tree: Root group
            context: Caller's form/submission context; accepted for
                framework hooks and otherwise unused

        Returns:
            ValidationReport if anything is wrong, None otherwise.
        """
        report = self.validate_group(tree)
        if report.has_errors:
            self.logger.debug(
                f"Validation failed: {len(report.messages())} error(s)"
            )
            return report
        return None

    def validate_group(self, group: RuleGroup) -> ValidationReport:
        """Build the (possibly empty) report for one group, recursively."""
        report = ValidationReport()

        if group.is_empty and not self.settings.allow_empty_groups:
            report.empty = EMPTY_GROUP_MESSAGE

        for position, child in enumerate(group.rules):
            if isinstance(child, RuleGroup):
                nested = self.validate_group(child)
                if nested.has_errors:
                    report.add(position, nested)
            elif not isinstance(child, Rule):
                report.add(position, f"Invalid node: {type(child).__name__}")
            else:
                error = self.validate_rule(child)
                if error:
                    report.add(position, error)

        return report

    def validate_rule(self, rule: Rule) -> Optional[str]:
        """Error message for one rule, or None."""
        if not rule.field:
            return FIELD_REQUIRED_MESSAGE

        descriptor = self.registry.get_or_none(rule.field)
        if descriptor is None:
            return f"Unknown field '{rule.field}'"

        if descriptor.validator is not None:
            try:
                error = descriptor.validator(rule.value, rule)
            except Exception as e:
                self.logger.warning(
                    f"Validator for field '{rule.field}' raised {type(e).__name__}: {e}"
                )
                return f"Validator error: {e}"
            if error:
                return error

        if self.settings.require_values:
            if arity_of(rule.operator) != Arity.NULLARY and _is_blank(rule.value):
                return VALUE_REQUIRED_MESSAGE

        return None
