"""Arithmetic corrections.

Two families of rewrites that undo the verbosity of lifted arithmetic:

- ``x = x + 1`` => ``x++`` and ``x = x - 1`` => ``x--``. The literal must be
  1 at the width of ``x``, and both occurrences of ``x`` must be
  structurally equal (which also works when ``x`` is a memory access).
  ``x`` must not contain an assignment or increment of its own.
- ``x + 0`` => ``x`` and ``x - 0`` => ``x``, with a zero of the width of ``x``.
"""

from __future__ import annotations

from exprsimp.ir.expressions import Expr, ExprKind, dec, has_effect, inc, val, zero_of
from exprsimp.rules._base import SimplificationRule


class ArithmeticCorrection(SimplificationRule):
    """Simplify: x = x + 1 => x++, x = x - 1 => x--, x + 0 => x, x - 0 => x"""

    DESCRIPTION = "Turn self increments into ++/-- and drop additions of zero"

    def check_and_replace(self, expr: Expr) -> Expr | None:
        match expr.kind:
            case ExprKind.ASSIGN:
                return self._check_step(expr)
            case ExprKind.ADD | ExprKind.SUB:
                left, right = expr.operands
                if left.size == expr.size and right.equals(zero_of(left)):
                    return left
        return None

    @staticmethod
    def _check_step(expr: Expr) -> Expr | None:
        target, value = expr.operands
        if value.kind not in (ExprKind.ADD, ExprKind.SUB):
            return None
        one = val(1, target.size)
        if not (value.lhs.equals(target) and value.rhs.equals(one)):
            return None
        if value.size != target.size:
            return None
        # x++ evaluates x once where x = x + 1 evaluates it twice
        if has_effect(target):
            return None
        if value.kind is ExprKind.ADD:
            return inc(target)
        return dec(target)
