"""The rewrite driver.

:class:`Simplifier` applies an ordered catalog of rules to every node of a
statement until no rule matches anywhere. One pass visits a snapshot of the
statement's slots in post-order (children before parents) and, at each slot,
tries the rules in catalog order; the first rule returning a replacement
wins and its result is written into the slot. The new subtree is visited on
the next pass.

Passes repeat until one makes no rewrite. Every rule shrinks the tree or
turns a negative literal under ``+``/``-`` into a positive one, so the loop
reaches a fixed point without a pass limit; ``max_passes`` is available as a
safety net and only logs a warning when hit.

Usage:
    >>> from exprsimp.ir import Statement, assign, add, var, val
    >>> stmt = Statement([assign(var("eax", 32), add(var("eax", 32), val(1, 32)))])
    >>> run(stmt)
    >>> str(stmt)
    'eax++'
"""

from __future__ import annotations

from typing import Iterable, Sequence

from exprsimp.core import getLogger
from exprsimp.core.config import SimplifierConfiguration
from exprsimp.core.logging import ExprSimpLogger
from exprsimp.core.stats import SimplificationEvent, SimplificationStatistics
from exprsimp.errors import ConfigurationError, ExprSimpException
from exprsimp.ir.expressions import Expr
from exprsimp.ir.printer import format_expr
from exprsimp.ir.statement import Statement
from exprsimp.rules import DEFAULT_CATALOG, SimplificationRule

main_logger = getLogger("ExprSimp")
simplifier_logger = getLogger("ExprSimp.simplifier")


class Simplifier:
    """Runs rules over statements until they reach a fixed point.

    Args:
        rules: Rule instances in the order they are tried. Defaults to one
            instance of each class of ``DEFAULT_CATALOG``.
        max_passes: Upper bound on the passes spent on one statement, or
            ``None`` to iterate until nothing changes.
        statistics: Where rule firings are recorded. A fresh
            :class:`SimplificationStatistics` is created if not given.
    """

    def __init__(
        self,
        rules: Sequence[SimplificationRule] | None = None,
        *,
        max_passes: int | None = None,
        statistics: SimplificationStatistics | None = None,
    ):
        if rules is None:
            rules = [rule_cls() for rule_cls in DEFAULT_CATALOG]
        if max_passes is not None and max_passes < 1:
            raise ValueError(f"max_passes must be positive, got {max_passes}")
        self.rules: list[SimplificationRule] = list(rules)
        self.max_passes = max_passes
        self.statistics = (
            statistics if statistics is not None else SimplificationStatistics()
        )
        self.rules_usage_info: dict[str, int] = {rule.name: 0 for rule in self.rules}

    @classmethod
    def from_configuration(
        cls,
        config: SimplifierConfiguration,
        statistics: SimplificationStatistics | None = None,
    ) -> Simplifier:
        """Build a simplifier with the activated rules of ``config``.

        Rules keep their catalog order whatever order the configuration lists
        them in.

        Raises:
            ConfigurationError: If the configuration names an unknown rule.
        """
        activated: dict[type[SimplificationRule], dict] = {}
        for rule_conf in config.activated_rules():
            rule_cls = SimplificationRule.find(rule_conf.name or "")
            if rule_cls is None:
                raise ConfigurationError(f"Unknown rule '{rule_conf.name}'")
            activated[rule_cls] = rule_conf.config
        rules: list[SimplificationRule] = []
        for rule_cls in DEFAULT_CATALOG:
            if rule_cls not in activated:
                continue
            rule = rule_cls()
            rule.configure(activated.pop(rule_cls))
            rules.append(rule)
        # Activated rules outside the catalog run after it, in listed order
        for rule_cls, rule_config in activated.items():
            rule = rule_cls()
            rule.configure(rule_config)
            rules.append(rule)
        main_logger.info(
            "Simplifier configured with %d rules from %s",
            len(rules),
            config.path or "<memory>",
        )
        return cls(rules, max_passes=config.max_passes, statistics=statistics)

    # ------------------------------------------------------------------
    # Rule application
    # ------------------------------------------------------------------
    def apply_rules(self, expr: Expr) -> tuple[SimplificationRule, Expr] | None:
        """Return the first rule that matches ``expr`` and its replacement."""
        for rule in self.rules:
            try:
                new_expr = rule.check_and_replace(expr)
            except ExprSimpException as e:
                simplifier_logger.error(
                    "ExprSimpException during rule %s for expression %s: %s",
                    rule,
                    format_expr(expr),
                    e,
                )
                continue
            if new_expr is not None:
                return rule, new_expr
        return None

    def run_pass(self, statement: Statement) -> int:
        """Visit every slot of ``statement`` once; return the number of rewrites."""
        nb_rewrites = 0
        for slot in statement.slots():
            found = self.apply_rules(slot.expr)
            if found is None:
                continue
            rule, new_expr = found
            old_expr = slot.replace(new_expr)
            nb_rewrites += 1
            self.rules_usage_info[rule.name] = self.rules_usage_info.get(rule.name, 0) + 1
            self.statistics.record_rule_fired(rule, statement=statement.address)
            if simplifier_logger.debug_on:
                simplifier_logger.debug("Rule %s matched:", rule.name)
                simplifier_logger.debug("  orig: %s", format_expr(old_expr))
                simplifier_logger.debug("  new : %s", format_expr(new_expr))
        self.statistics.record_pass(statement, nb_rewrites)
        return nb_rewrites

    def run(self, statement: Statement) -> None:
        """Simplify ``statement`` in place until no rule matches."""
        ExprSimpLogger.update_statement(statement.address)
        self.statistics.events.emit(SimplificationEvent.STATEMENT_START, statement)
        try:
            nb_passes = 0
            while True:
                nb_rewrites = self.run_pass(statement)
                nb_passes += 1
                if nb_rewrites == 0:
                    break
                if self.max_passes is not None and nb_passes >= self.max_passes:
                    simplifier_logger.warning(
                        "Stopped after %d passes without reaching a fixed point: %s",
                        nb_passes,
                        statement,
                    )
                    self.statistics.events.emit(
                        SimplificationEvent.PASS_LIMIT_REACHED, statement, nb_passes
                    )
                    break
            self.statistics.record_statement(statement, nb_passes)
        finally:
            ExprSimpLogger.reset_statement()

    def run_all(self, statements: Iterable[Statement]) -> None:
        for statement in statements:
            self.run(statement)

    # ------------------------------------------------------------------
    # Usage statistics
    # ------------------------------------------------------------------
    def reset_rule_usage_statistic(self) -> None:
        self.rules_usage_info = {rule.name: 0 for rule in self.rules}
        self.statistics.reset()

    def show_rule_usage_statistic(self) -> None:
        for rule_name, rule_nb_match in self.rules_usage_info.items():
            if rule_nb_match > 0:
                main_logger.info(
                    "Rule '%s' has been used %d times", rule_name, rule_nb_match
                )


_default_simplifier: Simplifier | None = None


def default_simplifier() -> Simplifier:
    """The shared simplifier behind :func:`run`, created on first use."""
    global _default_simplifier
    if _default_simplifier is None:
        _default_simplifier = Simplifier()
    return _default_simplifier


def run(statement: Statement) -> None:
    """Simplify ``statement`` in place with the default rule catalog."""
    default_simplifier().run(statement)
