"""Condition convergence: merge two comparisons of the same operands.

- ``(x > y) || (x == y)`` => ``x >= y``
- ``(x < y) || (x == y)`` => ``x <= y``
- ``(x < y) || (x > y)`` => ``x != y``

Operands must match pairwise and in order: ``(x > y) || (y == x)`` is left
alone, and so are operands that assign or increment anything. ``!(cmp)``
is not inverted into the opposite comparison.
"""

from __future__ import annotations

from exprsimp.ir.expressions import Expr, ExprKind, has_effect, make
from exprsimp.rules._base import SimplificationRule

# (left comparison, right comparison) -> merged comparison
CONVERGED_CONDITIONS: dict[tuple[ExprKind, ExprKind], ExprKind] = {
    (ExprKind.CMP_GT, ExprKind.CMP_EQ): ExprKind.CMP_GE,
    (ExprKind.CMP_LT, ExprKind.CMP_EQ): ExprKind.CMP_LE,
    (ExprKind.CMP_LT, ExprKind.CMP_GT): ExprKind.CMP_NE,
}


class ConditionConvergence(SimplificationRule):
    """Simplify: (x > y) || (x == y) => x >= y, (x < y) || (x == y) => x <= y, (x < y) || (x > y) => x != y"""

    DESCRIPTION = "Merge an or of two comparisons over the same operands"

    def check_and_replace(self, expr: Expr) -> Expr | None:
        if expr.kind is not ExprKind.BOOL_OR:
            return None
        left, right = expr.operands
        merged = CONVERGED_CONDITIONS.get((left.kind, right.kind))
        if merged is None:
            return None
        if not (left.lhs.equals(right.lhs) and left.rhs.equals(right.rhs)):
            return None
        # the merged comparison evaluates its operands once instead of twice
        if has_effect(left):
            return None
        return make(merged, left.lhs, left.rhs, size=expr.size)
