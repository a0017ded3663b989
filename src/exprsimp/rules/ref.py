"""Reference cancellation: ``&*x`` => ``x`` and ``*&x`` => ``x``."""

from __future__ import annotations

from exprsimp.ir.expressions import Expr, ExprKind
from exprsimp.rules._base import SimplificationRule

# Operands that designate a storage location.
LVALUE_KINDS = (ExprKind.VAR, ExprKind.DEREF)


class ReferenceCancellation(SimplificationRule):
    """Simplify: &(*x) => x, *(&x) => x"""

    DESCRIPTION = "Cancel an address-of applied to a dereference and the reverse"

    def check_and_replace(self, expr: Expr) -> Expr | None:
        match expr.kind:
            case ExprKind.ADDRESS_OF:
                inner = expr.lhs
                if inner.kind is not ExprKind.DEREF:
                    return None
            case ExprKind.DEREF:
                inner = expr.lhs
                if inner.kind is not ExprKind.ADDRESS_OF:
                    return None
                # &x only exists for locations
                if inner.lhs.kind not in LVALUE_KINDS:
                    return None
            case _:
                return None
        result = inner.lhs
        if result.size != expr.size:
            return None
        return result
