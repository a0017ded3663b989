"""Tests for SimplificationStatistics with rule object tracking."""

from unittest import mock

import pytest

from exprsimp.core import stats as stats_module
from exprsimp.core.stats import (
    RuleExecution,
    SimplificationEvent,
    SimplificationStatistics,
)


class MockRule:
    """Mock rule for testing."""

    def __init__(self, name: str):
        self._name = name

    @property
    def name(self) -> str:
        return self._name


class TestRuleExecution:
    """Tests for RuleExecution dataclass."""

    def test_from_rule_with_instance(self):
        rule = MockRule("TestRule")
        execution = RuleExecution.from_rule(rule)

        assert execution.rule is rule
        assert execution.rule_name == "TestRule"
        assert execution.match_count == 1

    def test_from_rule_with_class(self):
        execution = RuleExecution.from_rule(MockRule)

        assert execution.rule is MockRule
        assert execution.rule_name == "MockRule"

    def test_from_rule_with_metadata(self):
        execution = RuleExecution.from_rule(MockRule("TestRule"), statement=0x401000)

        assert execution.metadata["statement"] == 0x401000


class TestSimplificationStatistics:
    """Tests for SimplificationStatistics class."""

    def test_record_rule_fired(self):
        stats = SimplificationStatistics()
        rule = MockRule("BitwiseIdentity")

        stats.record_rule_fired(rule, statement=None)

        assert stats.did_rule_fire(rule)
        assert stats.did_rule_fire("bitwiseidentity")
        assert stats.get_rule_match_count(rule) == 1
        assert stats.rewrites == 1

    def test_multiple_firings(self):
        stats = SimplificationStatistics()
        rule = MockRule("TestRule")

        stats.record_rule_fired(rule)
        stats.record_rule_fired(rule)
        stats.record_rule_fired(rule)

        assert stats.get_rule_match_count(rule) == 3
        assert stats.get_rule_match_count("TestRule") == 3
        assert stats.get_rule_execution("testrule").match_count == 3

    def test_unfired_rule(self):
        stats = SimplificationStatistics()

        assert not stats.did_rule_fire("Nothing")
        assert stats.get_rule_match_count("Nothing") == 0
        assert stats.get_rule_execution("Nothing") is None

    def test_get_fired_rule_names(self):
        stats = SimplificationStatistics()
        stats.record_rule_fired(MockRule("Rule1"))
        stats.record_rule_fired(MockRule("Rule2"))

        names = stats.get_fired_rule_names()
        assert "Rule1" in names
        assert "Rule2" in names

    def test_firing_sequence_order(self):
        stats = SimplificationStatistics()
        for name in ("First", "Second", "First"):
            stats.record_rule_fired(MockRule(name))

        assert stats.get_firing_sequence() == ["First", "Second", "First"]

    def test_record_pass_and_statement(self):
        stats = SimplificationStatistics()
        stats.record_pass("stmt", 2)
        stats.record_pass("stmt", 0)
        stats.record_statement("stmt", 2)

        assert stats.passes == 2
        assert stats.statements == 1
        assert stats.passes_per_statement[2] == 1

    def test_events_are_emitted(self):
        stats = SimplificationStatistics()
        applied = []
        ended = []
        stats.events.on(
            SimplificationEvent.RULE_APPLIED,
            lambda rule, metadata: applied.append((rule.name, metadata)),
        )
        stats.events.on(
            SimplificationEvent.PASS_END,
            lambda statement, nb_rewrites: ended.append(nb_rewrites),
        )

        stats.record_rule_fired(MockRule("R"), statement=0x10)
        stats.record_pass("stmt", 1)

        assert applied == [("R", {"statement": 0x10})]
        assert ended == [1]

    def test_reset_keeps_handlers(self):
        stats = SimplificationStatistics()
        seen = []
        stats.events.on(SimplificationEvent.RULE_APPLIED, lambda *args: seen.append(args))
        stats.record_rule_fired(MockRule("R"))
        stats.record_statement("stmt", 1)

        stats.reset()

        assert stats.rewrites == 0
        assert stats.statements == 0
        assert stats.get_fired_rule_names() == []
        stats.record_rule_fired(MockRule("R"))
        assert len(seen) == 2

    def test_report_logs_every_rule(self):
        stats = SimplificationStatistics()
        stats.record_rule_fired(MockRule("R1"))
        stats.record_rule_fired(MockRule("R2"))

        with mock.patch.object(stats_module.logger, "info") as info:
            stats.report()

        messages = [call.args for call in info.call_args_list]
        assert ("Rule '%s' has been used %d times", "R1", 1) in messages
        assert ("Rule '%s' has been used %d times", "R2", 1) in messages


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
