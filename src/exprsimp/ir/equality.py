"""Structural equality of expression trees.

Two trees are equal when they have the same kind and size at every node,
the same name at every ``var``, the same value modulo ``2**size`` at every
``val``, and pairwise-equal operands *in order*. Commutative operators are
not normalized: ``add(x, y)`` and ``add(y, x)`` compare unequal.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from exprsimp.ir.expressions import ExprKind

if TYPE_CHECKING:
    from exprsimp.ir.expressions import Expr


def _same_node(a: Expr, b: Expr) -> bool:
    if a.kind is not b.kind or a.size != b.size:
        return False
    match a.kind:
        case ExprKind.VAL:
            return (a.value - b.value) % (1 << a.size) == 0
        case ExprKind.VAR:
            return a.name == b.name
        case _:
            return len(a.operands) == len(b.operands)


def structurally_equal(a: Expr | None, b: Expr | None) -> bool:
    """Return True if two subtrees are indistinguishable.

    The walk is iterative and never mutates either tree.

    >>> from exprsimp.ir.expressions import add, var, val
    >>> x, y = var("x", 32), var("y", 32)
    >>> structurally_equal(add(x, y), add(var("x", 32), var("y", 32)))
    True
    >>> structurally_equal(add(x, y), add(y, x))
    False
    >>> structurally_equal(val(-1, 8), val(0xFF, 8))
    True
    """
    if a is None or b is None:
        return a is b
    stack = [(a, b)]
    while stack:
        left, right = stack.pop()
        if left is right:
            continue
        if not _same_node(left, right):
            return False
        stack.extend(zip(left.operands, right.operands))
    return True
