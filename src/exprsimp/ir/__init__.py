"""
exprsimp.ir: the expression tree the simplifier rewrites.

Modules:
    expressions - ExprKind, Expr and the node constructors
    equality    - structural equality of subtrees
    statement   - Statement and Slot (index-based tree positions)
    evaluator   - Machine, a concrete fixed-width evaluator
    printer     - C-like rendering for logs
"""

from .equality import structurally_equal
from .evaluator import Machine
from .expressions import (
    ARITY,
    BINARY_KINDS,
    BOOL_SIZE,
    BOOLEAN_KINDS,
    COMPARISON_KINDS,
    EFFECT_KINDS,
    LEAF_KINDS,
    POINTER_SIZE,
    UNARY_KINDS,
    Expr,
    ExprKind,
    add,
    address_of,
    and_,
    assign,
    bool_not,
    bool_or,
    cmp_eq,
    cmp_ge,
    cmp_gt,
    cmp_le,
    cmp_lt,
    cmp_ne,
    dec,
    deref,
    has_effect,
    inc,
    make,
    shl,
    shr,
    sub,
    val,
    var,
    xor,
    zero_of,
)
from .printer import format_expr, format_statement
from .statement import Slot, Statement, iter_slots

__all__ = [
    "ARITY",
    "BINARY_KINDS",
    "BOOL_SIZE",
    "BOOLEAN_KINDS",
    "COMPARISON_KINDS",
    "EFFECT_KINDS",
    "LEAF_KINDS",
    "POINTER_SIZE",
    "UNARY_KINDS",
    "Expr",
    "ExprKind",
    "Machine",
    "Slot",
    "Statement",
    "add",
    "address_of",
    "and_",
    "assign",
    "bool_not",
    "bool_or",
    "cmp_eq",
    "cmp_ge",
    "cmp_gt",
    "cmp_le",
    "cmp_lt",
    "cmp_ne",
    "dec",
    "deref",
    "format_expr",
    "format_statement",
    "has_effect",
    "inc",
    "iter_slots",
    "make",
    "shl",
    "shr",
    "structurally_equal",
    "sub",
    "val",
    "var",
    "xor",
    "zero_of",
]
