from __future__ import annotations

import dataclasses
from collections import defaultdict
from enum import Enum, auto
from typing import Any, Dict, List, Optional

from .logging import getLogger
from .registry import EventEmitter

logger = getLogger("ExprSimp")


class SimplificationEvent(Enum):
    """Events emitted while simplifying, for instrumentation and tests."""

    STATEMENT_START = auto()  # run() started on a statement
    STATEMENT_END = auto()  # run() reached a fixed point (or the pass limit)
    PASS_END = auto()  # one full pass over a statement finished
    PASS_LIMIT_REACHED = auto()  # max_passes stopped the loop early
    RULE_APPLIED = auto()  # a rule replaced a node


@dataclasses.dataclass
class RuleExecution:
    """Aggregated record of one rule's firings."""

    rule: type | object
    rule_name: str
    match_count: int = 1
    metadata: Dict[str, Any] = dataclasses.field(default_factory=dict)

    @classmethod
    def from_rule(cls, rule: type | object, **metadata) -> "RuleExecution":
        """Create a RuleExecution from a rule class or instance."""
        if isinstance(rule, type):
            name = getattr(rule, "registrant_name", None) or rule.__name__
        else:
            name = getattr(rule, "name", None) or rule.__class__.__name__
        return cls(rule=rule, rule_name=name, metadata=metadata)


def _rule_key(rule: type | object | str) -> str:
    if isinstance(rule, str):
        return rule.lower()
    if isinstance(rule, type):
        return (getattr(rule, "registrant_name", None) or rule.__name__).lower()
    return (getattr(rule, "name", None) or rule.__class__.__name__).lower()


@dataclasses.dataclass
class SimplificationStatistics:
    """Counters for statements, passes and rule firings.

    Rule firings are tracked by rule object (keyed by lowercase name) and in
    firing order, and every recording also emits a ``SimplificationEvent`` so
    tests and tools can subscribe without touching the simplifier.
    """

    statements: int = 0
    passes: int = 0
    rewrites: int = 0
    rule_executions: Dict[str, RuleExecution] = dataclasses.field(default_factory=dict)
    rule_execution_log: List[RuleExecution] = dataclasses.field(default_factory=list)
    passes_per_statement: Dict[int, int] = dataclasses.field(
        default_factory=lambda: defaultdict(int)
    )
    events: EventEmitter[SimplificationEvent] = dataclasses.field(
        default_factory=lambda: EventEmitter[SimplificationEvent]()
    )

    def reset(self) -> None:
        self.statements = 0
        self.passes = 0
        self.rewrites = 0
        self.rule_executions.clear()
        self.rule_execution_log.clear()
        self.passes_per_statement.clear()
        # Event handlers persist across resets

    # -------------------------------------------------------------------------
    # Recording
    # -------------------------------------------------------------------------

    def record_statement(self, statement: Any, nb_passes: int) -> None:
        self.statements += 1
        self.passes_per_statement[nb_passes] += 1
        self.events.emit(SimplificationEvent.STATEMENT_END, statement, nb_passes)

    def record_pass(self, statement: Any, nb_rewrites: int) -> None:
        self.passes += 1
        self.events.emit(SimplificationEvent.PASS_END, statement, nb_rewrites)

    def record_rule_fired(self, rule: type | object, **metadata) -> None:
        """Record that a rule replaced a node."""
        execution = RuleExecution.from_rule(rule, **metadata)
        key = execution.rule_name.lower()
        if key in self.rule_executions:
            self.rule_executions[key].match_count += 1
        else:
            self.rule_executions[key] = execution
        self.rule_execution_log.append(execution)
        self.rewrites += 1
        self.events.emit(SimplificationEvent.RULE_APPLIED, rule, metadata)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_rule_execution(self, rule_name: str) -> Optional[RuleExecution]:
        return self.rule_executions.get(rule_name.lower())

    def get_fired_rule_names(self) -> List[str]:
        return [ex.rule_name for ex in self.rule_executions.values()]

    def get_firing_sequence(self) -> List[str]:
        """Rule names in the order they fired."""
        return [ex.rule_name for ex in self.rule_execution_log]

    def did_rule_fire(self, rule: type | object | str) -> bool:
        return _rule_key(rule) in self.rule_executions

    def get_rule_match_count(self, rule: type | object | str) -> int:
        execution = self.rule_executions.get(_rule_key(rule))
        return execution.match_count if execution else 0

    def report(self) -> None:
        logger.info(
            "Simplified %d statements in %d passes (%d rewrites)",
            self.statements,
            self.passes,
            self.rewrites,
        )
        for execution in self.rule_executions.values():
            logger.info(
                "Rule '%s' has been used %d times",
                execution.rule_name,
                execution.match_count,
            )
