"""Sign corrections: ``x + -c`` => ``x - c`` and ``x - -c`` => ``x + c``.

Only literals stored with a negative value are rewritten. The magnitude is
put in a new literal of the same width; the input literal is left untouched
so the rule stays a pure function of its input.
"""

from __future__ import annotations

from exprsimp.core.bits import normalize_literal
from exprsimp.ir.expressions import Expr, ExprKind, add, sub, val
from exprsimp.rules._base import SimplificationRule


class SignCorrection(SimplificationRule):
    """Simplify: x + (-c) => x - c, x - (-c) => x + c"""

    DESCRIPTION = "Replace addition of a negative literal by a subtraction and vice versa"

    def check_and_replace(self, expr: Expr) -> Expr | None:
        if expr.kind not in (ExprKind.ADD, ExprKind.SUB):
            return None
        left, right = expr.operands
        if right.kind is not ExprKind.VAL or right.value >= 0:
            return None
        if right.size != expr.size or left.size != expr.size:
            return None
        magnitude = val(normalize_literal(-right.value, right.size), right.size)
        if expr.kind is ExprKind.ADD:
            return sub(left, magnitude)
        return add(left, magnitude)
