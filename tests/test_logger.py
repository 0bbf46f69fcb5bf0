"""
Logger tests: structured mutation and rejection lines.
"""

import logging

import pytest

from querybuilder.utils import get_logger


class _ReprCounter:
    """Counts how often it is rendered into a log line."""

    def __init__(self):
        self.calls = 0

    def __repr__(self):
        self.calls += 1
        return "<counted>"


@pytest.fixture
def logger():
    return get_logger()


class TestMutationLines:
    """mutation() logs at DEBUG, rejected() at WARNING."""

    def test_mutation_line_format(self, logger, caplog):
        caplog.set_level(logging.DEBUG, logger="querybuilder")
        logger.mutation("CHANGE_VALUE", field="age", value=21)
        assert "[CHANGE_VALUE] | field='age' | value=21" in caplog.text

    def test_mutation_skipped_above_debug(self, logger, caplog):
        caplog.set_level(logging.INFO, logger="querybuilder")
        value = _ReprCounter()
        logger.mutation("CHANGE_VALUE", value=value)
        assert value.calls == 0
        assert "CHANGE_VALUE" not in caplog.text

    def test_rejected_line(self, logger, caplog):
        caplog.set_level(logging.INFO, logger="querybuilder")
        logger.rejected("CHANGE_OPERATOR", "operator not allowed", operator=">")
        assert "[CHANGE_OPERATOR:REJECTED] | operator not allowed | operator='>'" in caplog.text
