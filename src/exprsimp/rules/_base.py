"""Base class for expression rewrite rules.

A rule is a pure function from one node to an optional replacement. It looks
at the node it is given (and that node's operands), and either declines by
returning ``None`` or returns a freshly built subtree that computes the same
value. Rules never mutate their input and never raise for shapes they do not
recognise; installing the replacement is the simplifier's job.

Registry Architecture:
    Rules inherit from Registrant and register themselves under their class
    name (case-insensitive) when their module is imported.

    Usage:
        from exprsimp.rules import SimplificationRule

        rule_cls = SimplificationRule.get("bitwiseidentity")
        replacement = rule_cls()(expr)
"""

from __future__ import annotations

import abc
from typing import Any

from exprsimp.core.registry import Registrant
from exprsimp.ir.expressions import Expr


class SimplificationRule(Registrant, abc.ABC):
    """A local rewrite over one node of the expression tree.

    Class Variables:
        NAME: Display name; defaults to the class name.
        DESCRIPTION: One line describing the rewrites, shown in logs and
            configuration dumps.
    """

    NAME: str | None = None
    DESCRIPTION: str | None = None

    def __init__(self):
        self.config: dict[str, Any] = {}

    @abc.abstractmethod
    def check_and_replace(self, expr: Expr) -> Expr | None:
        """Return a replacement subtree if the rule matches, otherwise None."""

    def __call__(self, expr: Expr) -> Expr | None:
        return self.check_and_replace(expr)

    def configure(self, kwargs: dict[str, Any] | None) -> None:
        self.config = kwargs if kwargs is not None else {}

    @property
    def name(self) -> str:
        if self.NAME is not None:
            return self.NAME
        return self.__class__.__name__

    @property
    def description(self) -> str:
        return self.DESCRIPTION or ""

    def __repr__(self) -> str:
        return f"<{self.name}>"


def isabstract(cls) -> bool:
    """Check if a class is abstract (has unimplemented abstract methods)."""
    return bool(getattr(cls, "__abstractmethods__", None))
