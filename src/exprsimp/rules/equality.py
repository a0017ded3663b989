"""Equality folding: move a literal offset across ``==``.

``(x + c1) == c2`` => ``x == (c2 - c1)`` and ``(x - c1) == c2`` =>
``x == (c2 + c1)``. Both sides wrap modulo ``2**size``, so the fold is exact
as long as every literal and ``x`` share one width. The folded constant
takes the width of ``c2``.
"""

from __future__ import annotations

from exprsimp.core.bits import normalize_literal
from exprsimp.ir.expressions import Expr, ExprKind, cmp_eq, val
from exprsimp.rules._base import SimplificationRule


class EqualityFolding(SimplificationRule):
    """Simplify: (x + c1) == c2 => x == c2 - c1, (x - c1) == c2 => x == c2 + c1"""

    DESCRIPTION = "Fold a constant offset on the left of == into the right-hand literal"

    def check_and_replace(self, expr: Expr) -> Expr | None:
        if expr.kind is not ExprKind.CMP_EQ:
            return None
        left, right = expr.operands
        if right.kind is not ExprKind.VAL:
            return None
        if left.kind not in (ExprKind.ADD, ExprKind.SUB):
            return None
        x, offset = left.operands
        if offset.kind is not ExprKind.VAL:
            return None
        if not (offset.size == right.size == left.size == x.size):
            return None
        if left.kind is ExprKind.ADD:
            folded = right.value - offset.value
        else:
            folded = right.value + offset.value
        return cmp_eq(x, val(normalize_literal(folded, right.size), right.size))
