"""
Pytest configuration for rule-tree engine tests.
"""

import pytest

from querybuilder.config import EngineConfig
from querybuilder.rules import ChangeNotifier, FieldRegistry, RuleGroup


class CallCounter:
    """Zero-argument listener that records how often (and in what order) it fired."""

    def __init__(self, name: str = "", log: list | None = None):
        self.name = name
        self.calls = 0
        self._log = log

    def __call__(self) -> None:
        self.calls += 1
        if self._log is not None:
            self._log.append(self.name)


@pytest.fixture
def settings() -> EngineConfig:
    """Default engine settings (independent of the environment)."""
    return EngineConfig()


@pytest.fixture
def age_status_registry() -> FieldRegistry:
    """Number field with declared operators plus a string field with a default."""
    return FieldRegistry({
        "age": {
            "name": "Age",
            "type": "number",
            "defaultValue": 18,
            "operators": ["=", "!="],
        },
        "status": {
            "name": "Status",
            "type": "string",
            "defaultValue": "active",
        },
    })


@pytest.fixture
def category_registry() -> FieldRegistry:
    """Single category field with two options and type-derived operators."""
    return FieldRegistry({
        "status": {
            "name": "Status",
            "type": "category",
            "options": [
                {"name": "Active", "value": "active"},
                {"name": "Inactive", "value": "inactive"},
            ],
        },
    })


@pytest.fixture
def root() -> RuleGroup:
    return RuleGroup()


@pytest.fixture
def notifier() -> ChangeNotifier:
    return ChangeNotifier()


@pytest.fixture
def listeners(notifier: ChangeNotifier):
    """(touched, changed, order) subscribed to the notifier fixture."""
    order: list[str] = []
    touched = CallCounter("touched", order)
    changed = CallCounter("changed", order)
    notifier.on_touched(touched)
    notifier.on_change(changed)
    return touched, changed, order
