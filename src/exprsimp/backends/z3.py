"""Z3 backend: prove that a rewrite preserves the value of an expression.

Expressions are translated to Z3 bit-vectors of their own width:

- ``var`` => ``BitVec(name, size)`` (one per name, shared across both sides)
- ``val`` => ``BitVecVal(value mod 2**size, size)``
- ``add``/``sub``/``xor``/``and``/``shl``/``shr`` => the bit-vector
  operation, computed on zero-extended operands and truncated to the node
  width (``shr`` is logical)
- comparisons => signed ``BoolRef``; ``bool_or``/``bool_not`` over booleans
- ``deref(p)`` => ``mem_<size>(p)``, an uninterpreted function of the address
- ``address_of(v)`` => a per-variable address constant ``&v``, with the
  axiom ``mem_<v.size>(&v) == v`` collected in ``axioms``

``assign``, ``inc`` and ``dec`` are compared through their effect: the
location they write and the value they store (see
:meth:`Z3ExpressionTranslator.effect`).

Usage:
    >>> from exprsimp.ir.expressions import var, val, xor
    >>> x = var("x", 32)
    >>> prove_equivalence(xor(x, val(0, 32)), var("x", 32))
    (True, None)
"""

from __future__ import annotations

import functools
import typing

from exprsimp.core import getLogger
from exprsimp.errors import ExprSimpZ3Exception, UnsupportedExpressionError
from exprsimp.ir.expressions import (
    EFFECT_KINDS,
    POINTER_SIZE,
    Expr,
    ExprKind,
)
from exprsimp.ir.printer import format_expr

if typing.TYPE_CHECKING:
    from exprsimp.rules import SimplificationRule

logger = getLogger("ExprSimp.z3")

try:
    import z3

    Z3_INSTALLED = True
except ImportError:
    logger.info("Z3 features disabled. Install z3-solver to enable them")
    Z3_INSTALLED = False


def requires_z3_installed(func: typing.Callable[..., typing.Any]):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        if not Z3_INSTALLED:
            raise ExprSimpZ3Exception("Z3 is not installed")
        return func(*args, **kwargs)

    return wrapper


def _fit(term: z3.BitVecRef, size: int) -> z3.BitVecRef:
    """Zero-extend or truncate ``term`` to ``size`` bits."""
    width = term.size()
    if width == size:
        return term
    if width < size:
        return z3.ZeroExt(size - width, term)
    return z3.Extract(size - 1, 0, term)


def _sign_fit(term: z3.BitVecRef, size: int) -> z3.BitVecRef:
    width = term.size()
    if width >= size:
        return term
    return z3.SignExt(size - width, term)


class Z3ExpressionTranslator:
    """Translate expression trees to Z3 terms.

    Args:
        var_map: Optional pre-created Z3 variables by name. Share one
            translator (or one map) between the two sides of a proof so that
            both see the same variables.
    """

    @requires_z3_installed
    def __init__(self, var_map: dict[str, z3.BitVecRef] | None = None):
        self.var_map: dict[str, z3.BitVecRef] = var_map if var_map is not None else {}
        self.addresses: dict[str, z3.BitVecRef] = {}
        self.memories: dict[int, z3.FuncDeclRef] = {}
        self.axioms: list[z3.BoolRef] = []

    # ------------------------------------------------------------------
    # Leaves and memory
    # ------------------------------------------------------------------
    def variable(self, expr: Expr) -> z3.BitVecRef:
        term = self.var_map.get(expr.name)
        if term is None:
            term = z3.BitVec(expr.name, expr.size)
            self.var_map[expr.name] = term
        elif term.size() != expr.size:
            raise UnsupportedExpressionError(
                f"Variable {expr.name} used with sizes {term.size()} and {expr.size}"
            )
        return term

    def memory(self, size: int) -> z3.FuncDeclRef:
        if size not in self.memories:
            self.memories[size] = z3.Function(
                f"mem_{size}", z3.BitVecSort(POINTER_SIZE), z3.BitVecSort(size)
            )
        return self.memories[size]

    def address(self, expr: Expr) -> z3.BitVecRef:
        """Address constant of a variable, registering its memory axiom."""
        term = self.addresses.get(expr.name)
        if term is None:
            term = z3.BitVec(f"&{expr.name}", POINTER_SIZE)
            self.axioms.append(self.memory(expr.size)(term) == self.variable(expr))
            if self.addresses:
                self.axioms.append(
                    z3.Distinct(term, *self.addresses.values())
                )
            self.addresses[expr.name] = term
        return term

    def location(self, expr: Expr) -> z3.BitVecRef:
        """Address written by a store to the lvalue ``expr``."""
        match expr.kind:
            case ExprKind.VAR:
                return self.address(expr)
            case ExprKind.DEREF:
                return _fit(self.bitvec(expr.lhs), POINTER_SIZE)
        raise UnsupportedExpressionError(
            f"{expr.kind.value} is not an lvalue: {format_expr(expr)}"
        )

    # ------------------------------------------------------------------
    # Translation
    # ------------------------------------------------------------------
    def bitvec(self, expr: Expr) -> z3.BitVecRef:
        """Translate ``expr`` as an ``expr.size``-bit vector."""
        term = self.translate(expr)
        if z3.is_bool(term):
            return z3.If(term, z3.BitVecVal(1, expr.size), z3.BitVecVal(0, expr.size))
        return term

    def boolean(self, expr: Expr) -> z3.BoolRef:
        term = self.translate(expr)
        if z3.is_bool(term):
            return term
        return term != z3.BitVecVal(0, expr.size)

    def translate(self, expr: Expr) -> z3.BitVecRef | z3.BoolRef:
        size = expr.size
        match expr.kind:
            case ExprKind.VAL:
                return z3.BitVecVal(expr.value % (1 << size), size)
            case ExprKind.VAR:
                return self.variable(expr)
            case ExprKind.ADD | ExprKind.SUB | ExprKind.XOR | ExprKind.AND:
                return self._arithmetic(expr)
            case ExprKind.SHL | ExprKind.SHR:
                return self._shift(expr)
            case ExprKind.ADDRESS_OF:
                inner = expr.lhs
                if inner.kind is ExprKind.VAR:
                    return _fit(self.address(inner), size)
                if inner.kind is ExprKind.DEREF:
                    return _fit(self.bitvec(inner.lhs), size)
                raise UnsupportedExpressionError(
                    f"Cannot take the address of {format_expr(inner)}"
                )
            case ExprKind.DEREF:
                return self.memory(size)(_fit(self.bitvec(expr.lhs), POINTER_SIZE))
            case ExprKind.ASSIGN | ExprKind.INC | ExprKind.DEC:
                _, value = self.effect(expr)
                return _fit(value, size)
            case ExprKind.CMP_EQ | ExprKind.CMP_NE:
                width = max(expr.lhs.size, expr.rhs.size)
                left = _fit(self.bitvec(expr.lhs), width)
                right = _fit(self.bitvec(expr.rhs), width)
                if expr.kind is ExprKind.CMP_EQ:
                    return left == right
                return left != right
            case ExprKind.CMP_GT | ExprKind.CMP_GE | ExprKind.CMP_LT | ExprKind.CMP_LE:
                return self._signed_comparison(expr)
            case ExprKind.BOOL_OR:
                return z3.Or(self.boolean(expr.lhs), self.boolean(expr.rhs))
            case ExprKind.BOOL_NOT:
                return z3.Not(self.boolean(expr.lhs))
        raise UnsupportedExpressionError(f"Cannot translate {expr!r}")

    def _arithmetic(self, expr: Expr) -> z3.BitVecRef:
        width = max(expr.size, expr.lhs.size, expr.rhs.size)
        left = _fit(self.bitvec(expr.lhs), width)
        right = _fit(self.bitvec(expr.rhs), width)
        match expr.kind:
            case ExprKind.ADD:
                result = left + right
            case ExprKind.SUB:
                result = left - right
            case ExprKind.XOR:
                result = left ^ right
            case _:
                result = left & right
        return _fit(result, expr.size)

    def _shift(self, expr: Expr) -> z3.BitVecRef:
        # Shift at a width wide enough for both operands so that an amount
        # >= size still clears every bit.
        width = max(expr.size, expr.lhs.size, expr.rhs.size)
        left = _fit(_fit(self.bitvec(expr.lhs), expr.size), width)
        amount = _fit(self.bitvec(expr.rhs), width)
        if expr.kind is ExprKind.SHL:
            result = left << amount
        else:
            result = z3.LShR(left, amount)
        return _fit(result, expr.size)

    def _signed_comparison(self, expr: Expr) -> z3.BoolRef:
        width = max(expr.lhs.size, expr.rhs.size)
        left = _sign_fit(self.bitvec(expr.lhs), width)
        right = _sign_fit(self.bitvec(expr.rhs), width)
        match expr.kind:
            case ExprKind.CMP_GT:
                return left > right
            case ExprKind.CMP_GE:
                return left >= right
            case ExprKind.CMP_LT:
                return left < right
            case _:
                return left <= right

    def effect(self, expr: Expr) -> tuple[z3.BitVecRef, z3.BitVecRef]:
        """Return ``(location, stored value)`` of an ``assign``/``inc``/``dec``."""
        if expr.kind not in EFFECT_KINDS:
            raise UnsupportedExpressionError(f"{expr.kind.value} has no effect")
        target = expr.lhs
        match expr.kind:
            case ExprKind.ASSIGN:
                value = _fit(self.bitvec(expr.rhs), target.size)
            case ExprKind.INC:
                value = self.bitvec(target) + 1
            case _:
                value = self.bitvec(target) - 1
        return self.location(target), value


def _difference(
    translator: Z3ExpressionTranslator, original: Expr, rewritten: Expr
) -> z3.BoolRef:
    """A formula satisfiable exactly when the two expressions can differ."""
    if original.kind in EFFECT_KINDS or rewritten.kind in EFFECT_KINDS:
        if not (original.kind in EFFECT_KINDS and rewritten.kind in EFFECT_KINDS):
            raise UnsupportedExpressionError(
                "Cannot compare a store with a pure expression"
            )
        original_location, original_value = translator.effect(original)
        rewritten_location, rewritten_value = translator.effect(rewritten)
        width = max(original_value.size(), rewritten_value.size())
        return z3.Or(
            original_location != rewritten_location,
            _fit(original_value, width) != _fit(rewritten_value, width),
        )
    width = max(original.size, rewritten.size)
    return _fit(translator.bitvec(original), width) != _fit(
        translator.bitvec(rewritten), width
    )


@requires_z3_installed
def prove_equivalence(
    original: Expr,
    rewritten: Expr,
    z3_vars: dict[str, z3.BitVecRef] | None = None,
) -> tuple[bool, dict[str, int] | None]:
    """Prove that two expressions compute the same value for every input.

    Args:
        original: The expression before the rewrite.
        rewritten: The expression after the rewrite.
        z3_vars: Optional pre-created Z3 variables.

    Returns:
        A tuple of (is_equivalent, counterexample):
        - is_equivalent: True if proven equivalent, False otherwise.
        - counterexample: If not equivalent, variable values that tell the
          two apart. None if equivalent or if no model is available.
    """
    translator = Z3ExpressionTranslator(var_map=z3_vars)
    try:
        difference = _difference(translator, original, rewritten)
    except UnsupportedExpressionError as e:
        logger.warning(
            "Cannot translate %s => %s to Z3: %s",
            format_expr(original),
            format_expr(rewritten),
            e,
        )
        return False, None

    solver = z3.Solver()
    solver.add(*translator.axioms)
    # Equivalent iff no assignment makes them differ
    solver.add(difference)
    result = solver.check()

    if result == z3.unsat:
        logger.debug(
            "Proved %s == %s", format_expr(original), format_expr(rewritten)
        )
        return True, None

    if result == z3.sat:
        model = solver.model()
        counterexample = {}
        for name, z3_var in translator.var_map.items():
            value = model.eval(z3_var, model_completion=True)
            counterexample[name] = value.as_long()
        logger.debug(
            "Refuted %s == %s with %s",
            format_expr(original),
            format_expr(rewritten),
            counterexample,
        )
        return False, counterexample

    # Z3 returned unknown
    return False, None


@requires_z3_installed
def verify_rule(rule: SimplificationRule, expr: Expr) -> bool:
    """Apply ``rule`` to ``expr`` and prove the replacement equivalent.

    Returns:
        True if the rewrite is proven correct.

    Raises:
        ValueError: If the rule does not match ``expr``.
        AssertionError: If the rewrite changes the value, with a detailed
            error message.
    """
    original = expr.copy()
    replacement = rule(expr)
    if replacement is None:
        raise ValueError(f"Rule {rule.name} does not match {format_expr(expr)}")

    is_equivalent, counterexample = prove_equivalence(original, replacement)
    if is_equivalent:
        logger.debug("Rule %s verified on %s", rule.name, format_expr(original))
        return True

    msg = (
        f"\n--- VERIFICATION FAILED ---\n"
        f"Rule:        {rule.name}\n"
        f"Description: {rule.description}\n"
        f"Rewrite:     {format_expr(original)} => {format_expr(replacement)}\n"
    )
    if counterexample:
        msg += f"Counterexample: {counterexample}\n"
    msg += "This rewrite does NOT preserve semantics."
    raise AssertionError(msg)
