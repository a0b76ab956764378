"""
Logging tests

Tests that LOG() follows the verbosity of the connected ProgramState and
stays silent when none is connected.
"""

import contextvars

import pytest
from loguru import logger

from mdcstream.lib.log import LOG, state_connectToLogger
from mdcstream.models import ProgramState


@pytest.fixture
def records():
    captured = []
    handler_id = logger.add(lambda message: captured.append(message.record), level="DEBUG")
    yield captured
    logger.remove(handler_id)


def in_fresh_context(func, *args):
    return contextvars.Context().run(func, *args)


class TestVerbosityGate:
    """Test LOG() gating"""

    def test_silent_without_state(self, records):
        in_fresh_context(LOG, "nobody listening", 1)
        assert records == []

    def test_level_at_or_below_verbosity(self, records):
        def run():
            state_connectToLogger(ProgramState(verbosity=2))
            LOG("stage", level=1)
            LOG("transition", level=2)
            LOG("tick", level=3)

        in_fresh_context(run)
        assert [record["message"] for record in records] == ["stage", "transition"]

    def test_record_names_caller(self, records):
        def stage_under_test():
            state_connectToLogger(ProgramState(verbosity=1))
            LOG("from a stage")

        in_fresh_context(stage_under_test)
        assert records[0]["function"] == "stage_under_test"
