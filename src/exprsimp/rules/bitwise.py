"""Bitwise identities.

- ``x ^ 0`` => ``x`` and ``x ^ x`` => ``0``
- ``x & 0`` => ``0`` and ``x & x`` => ``x``
- ``(x >> c) << c`` => ``x & ~((1 << c) - 1)``: shifting right then left by
  the same amount clears the low ``c`` bits.

Zero literals are compared structurally against ``val(0, x.size)``, so a
zero of another width does not match. Folds that would drop an evaluation of
``x`` decline when ``x`` contains an assignment, increment or decrement.
"""

from __future__ import annotations

from exprsimp.core.bits import mask, signed_to_unsigned
from exprsimp.ir.expressions import Expr, ExprKind, and_, has_effect, val, zero_of
from exprsimp.rules._base import SimplificationRule


def low_bits_cleared(amount: int, size: int) -> int:
    """Mask keeping every bit of a ``size``-bit value except the low ``amount``.

    >>> hex(low_bits_cleared(3, 32))
    '0xfffffff8'
    >>> low_bits_cleared(32, 32)
    0
    """
    if amount >= size:
        return 0
    return ~((1 << amount) - 1) & mask(size)


class BitwiseIdentity(SimplificationRule):
    """Simplify: x ^ 0 => x, x ^ x => 0, x & 0 => 0, x & x => x, (x >> c) << c => x & ~((1 << c) - 1)"""

    DESCRIPTION = "Fold xor/and with zero or with itself and the shift-pair masking idiom"

    def check_and_replace(self, expr: Expr) -> Expr | None:
        match expr.kind:
            case ExprKind.XOR:
                left, right = expr.operands
                if left.size != expr.size:
                    return None
                if right.equals(zero_of(left)):
                    return left
                if right.equals(left) and not has_effect(left):
                    return zero_of(left)
            case ExprKind.AND:
                left, right = expr.operands
                if left.size != expr.size:
                    return None
                # both folds drop an evaluation of x
                if has_effect(left):
                    return None
                zero = zero_of(left)
                if right.equals(zero):
                    return zero
                if right.equals(left):
                    return left
            case ExprKind.SHL:
                return self._check_shift_pair(expr)
        return None

    @staticmethod
    def _check_shift_pair(expr: Expr) -> Expr | None:
        inner, count = expr.operands
        if inner.kind is not ExprKind.SHR or count.kind is not ExprKind.VAL:
            return None
        x, inner_count = inner.operands
        if not inner_count.equals(count):
            return None
        if count.value < 0 or inner_count.value < 0:
            return None
        if count.size != x.size or inner.size != x.size or expr.size != x.size:
            return None
        amount = signed_to_unsigned(count.value, count.size)
        return and_(x, val(low_bits_cleared(amount, count.size), count.size))
