"""Expression IR: a tagged tree node with a fixed-arity operand list per kind.

Expressions are deliberately *not* a class hierarchy. Every node is an
:class:`Expr` whose ``kind`` is one member of the closed :class:`ExprKind`
enum, and whose ``operands`` list holds exactly ``ARITY[kind]`` children.
Rules dispatch on ``kind`` with ``match`` statements.

Example:
    >>> x = var("eax", 32)
    >>> e = assign(x, add(var("eax", 32), val(1, 32)))
    >>> repr(e)
    'assign(var(eax:32), add(var(eax:32), val(1:32)))'
    >>> str(e)
    'eax = (eax + 1)'

Nodes hold no reference to their parent. A node's ``operands`` list is the
owner of its children's slots; replacing a child means writing into that list
(see :mod:`exprsimp.ir.statement`).
"""

from __future__ import annotations

import enum
from typing import Iterator

POINTER_SIZE = 64
BOOL_SIZE = 1


class ExprKind(enum.Enum):
    VAL = "val"
    VAR = "var"
    ASSIGN = "assign"
    ADD = "add"
    SUB = "sub"
    XOR = "xor"
    AND = "and"
    SHL = "shl"
    SHR = "shr"
    INC = "inc"
    DEC = "dec"
    ADDRESS_OF = "address_of"
    DEREF = "deref"
    CMP_EQ = "cmp_eq"
    CMP_NE = "cmp_ne"
    CMP_GT = "cmp_gt"
    CMP_GE = "cmp_ge"
    CMP_LT = "cmp_lt"
    CMP_LE = "cmp_le"
    BOOL_OR = "bool_or"
    BOOL_NOT = "bool_not"

    @property
    def arity(self) -> int:
        return ARITY[self]

    def __repr__(self) -> str:
        return f"ExprKind.{self.name}"


LEAF_KINDS = frozenset({ExprKind.VAL, ExprKind.VAR})
UNARY_KINDS = frozenset(
    {
        ExprKind.INC,
        ExprKind.DEC,
        ExprKind.ADDRESS_OF,
        ExprKind.DEREF,
        ExprKind.BOOL_NOT,
    }
)
COMPARISON_KINDS = frozenset(
    {
        ExprKind.CMP_EQ,
        ExprKind.CMP_NE,
        ExprKind.CMP_GT,
        ExprKind.CMP_GE,
        ExprKind.CMP_LT,
        ExprKind.CMP_LE,
    }
)
BINARY_KINDS = frozenset(set(ExprKind) - LEAF_KINDS - UNARY_KINDS)
# Kinds whose evaluation writes to their first operand.
EFFECT_KINDS = frozenset({ExprKind.ASSIGN, ExprKind.INC, ExprKind.DEC})
BOOLEAN_KINDS = COMPARISON_KINDS | {ExprKind.BOOL_OR, ExprKind.BOOL_NOT}

ARITY: dict[ExprKind, int] = {
    **{kind: 0 for kind in LEAF_KINDS},
    **{kind: 1 for kind in UNARY_KINDS},
    **{kind: 2 for kind in BINARY_KINDS},
}


class Expr:
    """One node of the expression tree.

    Attributes:
        kind: The node's tag.
        operands: Children, ``ARITY[kind]`` of them. This list owns the slots.
        size: Width in bits; literal arithmetic wraps modulo ``2**size``.
        value: Integer value (``val`` only). May be negative; it is read
            modulo ``2**size``.
        name: Register or variable name (``var`` only).
    """

    __slots__ = ("kind", "operands", "size", "value", "name")

    def __init__(
        self,
        kind: ExprKind,
        operands: list[Expr] | tuple[Expr, ...] = (),
        size: int = 0,
        value: int | None = None,
        name: str | None = None,
    ):
        if len(operands) != ARITY[kind]:
            raise ValueError(
                f"{kind.value} takes {ARITY[kind]} operands, got {len(operands)}"
            )
        self.kind = kind
        self.operands: list[Expr] = list(operands)
        self.size = size
        self.value = value
        self.name = name

    # Operand shortcuts for unary/binary nodes
    @property
    def lhs(self) -> Expr:
        return self.operands[0]

    @property
    def rhs(self) -> Expr:
        return self.operands[1]

    def is_leaf(self) -> bool:
        return self.kind in LEAF_KINDS

    def equals(self, other: Expr | None) -> bool:
        """Structural equality; see :func:`exprsimp.ir.equality.structurally_equal`."""
        from exprsimp.ir.equality import structurally_equal

        return structurally_equal(self, other)

    def copy(self) -> Expr:
        """Deep copy of the subtree rooted at this node."""
        return Expr(
            self.kind,
            [operand.copy() for operand in self.operands],
            self.size,
            self.value,
            self.name,
        )

    def walk(self) -> Iterator[Expr]:
        """Pre-order iteration over the subtree."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.operands))

    def node_count(self) -> int:
        return sum(1 for _ in self.walk())

    def __repr__(self) -> str:
        match self.kind:
            case ExprKind.VAL:
                return f"val({self.value}:{self.size})"
            case ExprKind.VAR:
                return f"var({self.name}:{self.size})"
            case _:
                args = ", ".join(repr(operand) for operand in self.operands)
                return f"{self.kind.value}({args})"

    def __str__(self) -> str:
        from exprsimp.ir.printer import format_expr

        return format_expr(self)


# =============================================================================
# Constructors
# =============================================================================


def val(value: int, size: int) -> Expr:
    return Expr(ExprKind.VAL, size=size, value=value)


def var(name: str, size: int) -> Expr:
    return Expr(ExprKind.VAR, size=size, name=name)


def make(kind: ExprKind, *operands: Expr, size: int | None = None) -> Expr:
    """Build any non-leaf node, deriving its size when not given.

    Binary arithmetic, bitwise and shift nodes, ``inc``/``dec``, ``deref`` and
    ``assign`` take the size of their first operand; comparisons and boolean
    nodes are one bit wide; ``address_of`` is pointer sized.
    """
    if size is None:
        if kind in BOOLEAN_KINDS:
            size = BOOL_SIZE
        elif kind is ExprKind.ADDRESS_OF:
            size = POINTER_SIZE
        else:
            size = operands[0].size
    return Expr(kind, operands, size)


def assign(lhs: Expr, rhs: Expr) -> Expr:
    return make(ExprKind.ASSIGN, lhs, rhs)


def add(lhs: Expr, rhs: Expr) -> Expr:
    return make(ExprKind.ADD, lhs, rhs)


def sub(lhs: Expr, rhs: Expr) -> Expr:
    return make(ExprKind.SUB, lhs, rhs)


def xor(lhs: Expr, rhs: Expr) -> Expr:
    return make(ExprKind.XOR, lhs, rhs)


def and_(lhs: Expr, rhs: Expr) -> Expr:
    return make(ExprKind.AND, lhs, rhs)


def shl(lhs: Expr, rhs: Expr) -> Expr:
    return make(ExprKind.SHL, lhs, rhs)


def shr(lhs: Expr, rhs: Expr) -> Expr:
    return make(ExprKind.SHR, lhs, rhs)


def inc(operand: Expr) -> Expr:
    return make(ExprKind.INC, operand)


def dec(operand: Expr) -> Expr:
    return make(ExprKind.DEC, operand)


def address_of(operand: Expr, size: int | None = None) -> Expr:
    return make(ExprKind.ADDRESS_OF, operand, size=size)


def deref(operand: Expr, size: int | None = None) -> Expr:
    return make(ExprKind.DEREF, operand, size=size)


def cmp_eq(lhs: Expr, rhs: Expr) -> Expr:
    return make(ExprKind.CMP_EQ, lhs, rhs)


def cmp_ne(lhs: Expr, rhs: Expr) -> Expr:
    return make(ExprKind.CMP_NE, lhs, rhs)


def cmp_gt(lhs: Expr, rhs: Expr) -> Expr:
    return make(ExprKind.CMP_GT, lhs, rhs)


def cmp_ge(lhs: Expr, rhs: Expr) -> Expr:
    return make(ExprKind.CMP_GE, lhs, rhs)


def cmp_lt(lhs: Expr, rhs: Expr) -> Expr:
    return make(ExprKind.CMP_LT, lhs, rhs)


def cmp_le(lhs: Expr, rhs: Expr) -> Expr:
    return make(ExprKind.CMP_LE, lhs, rhs)


def bool_or(lhs: Expr, rhs: Expr) -> Expr:
    return make(ExprKind.BOOL_OR, lhs, rhs)


def bool_not(operand: Expr) -> Expr:
    return make(ExprKind.BOOL_NOT, operand)


# =============================================================================
# Helpers
# =============================================================================


def zero_of(expr: Expr) -> Expr:
    """The zero literal of ``expr``'s size."""
    return val(0, expr.size)


def has_effect(expr: Expr) -> bool:
    """True if evaluating ``expr`` writes a variable or memory."""
    return any(node.kind in EFFECT_KINDS for node in expr.walk())
