from __future__ import annotations

from typing import TYPE_CHECKING

from exprsimp.ir.expressions import ExprKind

if TYPE_CHECKING:
    from exprsimp.ir.expressions import Expr
    from exprsimp.ir.statement import Statement

BINARY_OPERATORS: dict[ExprKind, str] = {
    ExprKind.ADD: "+",
    ExprKind.SUB: "-",
    ExprKind.XOR: "^",
    ExprKind.AND: "&",
    ExprKind.SHL: "<<",
    ExprKind.SHR: ">>",
    ExprKind.CMP_EQ: "==",
    ExprKind.CMP_NE: "!=",
    ExprKind.CMP_GT: ">",
    ExprKind.CMP_GE: ">=",
    ExprKind.CMP_LT: "<",
    ExprKind.CMP_LE: "<=",
    ExprKind.BOOL_OR: "||",
}


def format_literal(value: int) -> str:
    """Small literals in decimal, the rest in hex; negative values keep their sign."""
    if -9 <= value <= 9:
        return str(value)
    if value < 0:
        return f"-{-value:#x}"
    return f"{value:#x}"


def format_expr(expr: Expr) -> str:
    """Render an expression as C-like pseudocode.

    >>> from exprsimp.ir.expressions import var, val, shl, shr, inc, cmp_ge
    >>> x = var("x", 32)
    >>> format_expr(shl(shr(x, val(3, 32)), val(3, 32)))
    '((x >> 3) << 3)'
    >>> format_expr(inc(x))
    'x++'
    >>> format_expr(cmp_ge(x, val(16, 32)))
    '(x >= 0x10)'
    """
    match expr.kind:
        case ExprKind.VAL:
            return format_literal(expr.value)
        case ExprKind.VAR:
            return expr.name or "<?>"
        case ExprKind.ASSIGN:
            return f"{format_expr(expr.lhs)} = {format_expr(expr.rhs)}"
        case ExprKind.INC:
            return f"{format_expr(expr.lhs)}++"
        case ExprKind.DEC:
            return f"{format_expr(expr.lhs)}--"
        case ExprKind.ADDRESS_OF:
            return f"&{format_expr(expr.lhs)}"
        case ExprKind.DEREF:
            return f"*{format_expr(expr.lhs)}"
        case ExprKind.BOOL_NOT:
            return f"!{format_expr(expr.lhs)}"
        case kind:
            op = BINARY_OPERATORS[kind]
            return f"({format_expr(expr.lhs)} {op} {format_expr(expr.rhs)})"


def format_statement(statement: Statement) -> str:
    return "; ".join(format_expr(expr) for expr in statement)
