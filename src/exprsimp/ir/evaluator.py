"""Concrete evaluation of expression trees.

The evaluator gives every kind a fixed-width, two's-complement meaning so
that a rewrite can be checked against concrete register values:

- arithmetic and bitwise results wrap modulo ``2**size`` of the node,
- ``shr`` is a logical shift, shift amounts >= size yield 0,
- comparisons are signed and yield 0 or 1,
- ``var`` leaves live in memory at synthetic addresses, so
  ``deref(address_of(x))`` reads ``x`` and a store through a pointer to a
  variable updates that variable,
- ``assign``, ``inc`` and ``dec`` store into their first operand.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

from exprsimp.core.bits import mask, signed_to_unsigned, unsigned_to_signed
from exprsimp.errors import EvaluationError
from exprsimp.ir.expressions import EFFECT_KINDS, Expr, ExprKind

if TYPE_CHECKING:
    from exprsimp.ir.statement import Statement

VARIABLE_BASE = 0x10000
VARIABLE_STRIDE = 0x100
# Reads from memory nobody wrote return a value derived from the address.
_UNINITIALIZED_MIX = 0x9E3779B97F4A7C15


class Machine:
    """Variable values plus a sparse memory.

    Args:
        variables: Initial variable values by name (any integer; stored
            unsigned at the width the variable is read with).
        memory: Initial memory contents by address.
    """

    def __init__(
        self,
        variables: dict[str, int] | None = None,
        memory: dict[int, int] | None = None,
    ):
        self.variables: dict[str, int] = dict(variables or {})
        self.memory: dict[int, int] = dict(memory or {})
        self._addresses: dict[str, int] = {}
        for name in sorted(self.variables):
            self.address_of_variable(name)

    @classmethod
    def for_statement(cls, statement: Statement, rng: random.Random) -> Machine:
        """A machine with a random value for every variable of ``statement``."""
        variables: dict[str, int] = {}
        for expr in statement:
            for node in expr.walk():
                if node.kind is ExprKind.VAR and node.name not in variables:
                    variables[node.name] = rng.getrandbits(node.size)
        return cls(variables)

    def copy(self) -> Machine:
        clone = Machine(self.variables, self.memory)
        clone._addresses = dict(self._addresses)
        return clone

    def snapshot(self) -> tuple[dict[str, int], dict[int, int]]:
        return dict(self.variables), dict(self.memory)

    # ------------------------------------------------------------------
    # Memory model
    # ------------------------------------------------------------------
    def address_of_variable(self, name: str) -> int:
        if name not in self._addresses:
            self._addresses[name] = VARIABLE_BASE + VARIABLE_STRIDE * len(
                self._addresses
            )
        return self._addresses[name]

    def _variable_at(self, address: int) -> str | None:
        for name, var_address in self._addresses.items():
            if var_address == address:
                return name
        return None

    def load(self, address: int, size: int) -> int:
        name = self._variable_at(address)
        if name is not None:
            return self.variables.get(name, 0) & mask(size)
        if address in self.memory:
            return self.memory[address] & mask(size)
        return (address * _UNINITIALIZED_MIX) & mask(size)

    def store(self, address: int, value: int) -> None:
        name = self._variable_at(address)
        if name is not None:
            self.variables[name] = value
        else:
            self.memory[address] = value

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------
    def location_of(self, expr: Expr) -> int:
        """Address of an lvalue (``var`` or ``deref``)."""
        match expr.kind:
            case ExprKind.VAR:
                return self.address_of_variable(expr.name)
            case ExprKind.DEREF:
                return self.evaluate(expr.lhs)
            case _:
                raise EvaluationError(f"{expr.kind.value} is not an lvalue: {expr!r}")

    def evaluate(self, expr: Expr) -> int:
        """Value of ``expr`` as an unsigned ``expr.size``-bit integer."""
        size = expr.size
        match expr.kind:
            case ExprKind.VAL:
                return signed_to_unsigned(expr.value, size)
            case ExprKind.VAR:
                return self.load(self.address_of_variable(expr.name), size)
            case ExprKind.ADD:
                return (self.evaluate(expr.lhs) + self.evaluate(expr.rhs)) & mask(size)
            case ExprKind.SUB:
                return (self.evaluate(expr.lhs) - self.evaluate(expr.rhs)) & mask(size)
            case ExprKind.XOR:
                return (self.evaluate(expr.lhs) ^ self.evaluate(expr.rhs)) & mask(size)
            case ExprKind.AND:
                return (self.evaluate(expr.lhs) & self.evaluate(expr.rhs)) & mask(size)
            case ExprKind.SHL:
                left, amount = self.evaluate(expr.lhs), self.evaluate(expr.rhs)
                if amount >= size:
                    return 0
                return (left << amount) & mask(size)
            case ExprKind.SHR:
                left, amount = self.evaluate(expr.lhs), self.evaluate(expr.rhs)
                if amount >= size:
                    return 0
                return (left & mask(size)) >> amount
            case ExprKind.ADDRESS_OF:
                return self.location_of(expr.lhs) & mask(size)
            case ExprKind.DEREF:
                return self.load(self.evaluate(expr.lhs), size)
            case ExprKind.ASSIGN | ExprKind.INC | ExprKind.DEC:
                return self.apply_effect(expr) & mask(size)
            case ExprKind.CMP_EQ:
                return int(self.evaluate(expr.lhs) == self.evaluate(expr.rhs))
            case ExprKind.CMP_NE:
                return int(self.evaluate(expr.lhs) != self.evaluate(expr.rhs))
            case ExprKind.CMP_GT:
                return int(self._signed(expr.lhs) > self._signed(expr.rhs))
            case ExprKind.CMP_GE:
                return int(self._signed(expr.lhs) >= self._signed(expr.rhs))
            case ExprKind.CMP_LT:
                return int(self._signed(expr.lhs) < self._signed(expr.rhs))
            case ExprKind.CMP_LE:
                return int(self._signed(expr.lhs) <= self._signed(expr.rhs))
            case ExprKind.BOOL_OR:
                return int(self.evaluate(expr.lhs) != 0 or self.evaluate(expr.rhs) != 0)
            case ExprKind.BOOL_NOT:
                return int(self.evaluate(expr.lhs) == 0)
        raise EvaluationError(f"Cannot evaluate {expr!r}")

    def _signed(self, expr: Expr) -> int:
        return unsigned_to_signed(self.evaluate(expr), expr.size)

    def apply_effect(self, expr: Expr) -> int:
        """Perform an ``assign``/``inc``/``dec`` and return the stored value."""
        if expr.kind not in EFFECT_KINDS:
            raise EvaluationError(f"{expr.kind.value} has no effect")
        target = expr.lhs
        match expr.kind:
            case ExprKind.ASSIGN:
                value = self.evaluate(expr.rhs)
            case ExprKind.INC:
                value = self.evaluate(target) + 1
            case _:
                value = self.evaluate(target) - 1
        value &= mask(target.size)
        self.store(self.location_of(target), value)
        return value

    def execute(self, statement: Statement) -> list[int | None]:
        """Run every top-level expression in order.

        Returns the value of each non-effect expression, ``None`` for
        ``assign``/``inc``/``dec`` whose result is the state change itself.
        """
        results: list[int | None] = []
        for expr in statement:
            if expr.kind in EFFECT_KINDS:
                self.apply_effect(expr)
                results.append(None)
            else:
                results.append(self.evaluate(expr))
        return results
