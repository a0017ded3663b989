"""Statements and slots.

A :class:`Statement` is the ordered list of top-level expressions one
recovered source line is made of. The statement's expression list and each
node's ``operands`` list are the only owners of tree positions. A
:class:`Slot` names one position as ``(owner, index)``; replacing a subtree
writes into the owner, so whoever holds the owner sees the new subtree on
its next traversal.
"""

from __future__ import annotations

import dataclasses
from typing import Iterable, Iterator

from exprsimp.ir.expressions import Expr


@dataclasses.dataclass(frozen=True, slots=True, eq=False)
class Slot:
    """A position in a tree: ``owner[index]``."""

    owner: list[Expr]
    index: int

    @property
    def expr(self) -> Expr:
        return self.owner[self.index]

    def replace(self, new_expr: Expr) -> Expr:
        """Put ``new_expr`` at this position and return the node it displaced."""
        old = self.owner[self.index]
        self.owner[self.index] = new_expr
        return old


def iter_slots(owner: list[Expr], index: int) -> Iterator[Slot]:
    """Post-order iteration over every slot of the subtree at ``owner[index]``.

    Children are yielded before their parent, so replacing a yielded slot
    never invalidates a slot that comes after it.
    """
    stack: list[tuple[list[Expr], int, bool]] = [(owner, index, False)]
    while stack:
        slot_owner, slot_index, expanded = stack.pop()
        if expanded:
            yield Slot(slot_owner, slot_index)
            continue
        stack.append((slot_owner, slot_index, True))
        operands = slot_owner[slot_index].operands
        for i in reversed(range(len(operands))):
            stack.append((operands, i, False))


class Statement:
    """An ordered, non-empty group of top-level expressions.

    Attributes:
        expressions: The top-level expressions. This list owns their slots.
        address: Address of the instruction the statement was recovered from,
            if known. Only used for log context.
    """

    __slots__ = ("expressions", "address")

    def __init__(self, expressions: Iterable[Expr], address: int | None = None):
        self.expressions: list[Expr] = list(expressions)
        if not self.expressions:
            raise ValueError("A statement holds at least one expression")
        self.address = address

    def slots(self) -> list[Slot]:
        """Every reachable position, post-order, each exactly once."""
        result: list[Slot] = []
        for i in range(len(self.expressions)):
            result.extend(iter_slots(self.expressions, i))
        return result

    def node_count(self) -> int:
        return sum(expr.node_count() for expr in self.expressions)

    def copy(self) -> Statement:
        return Statement([expr.copy() for expr in self.expressions], self.address)

    def equals(self, other: Statement) -> bool:
        return len(self) == len(other) and all(
            a.equals(b) for a, b in zip(self.expressions, other.expressions)
        )

    def __iter__(self) -> Iterator[Expr]:
        return iter(self.expressions)

    def __len__(self) -> int:
        return len(self.expressions)

    def __getitem__(self, index: int) -> Expr:
        return self.expressions[index]

    def __repr__(self) -> str:
        address = "" if self.address is None else f"{self.address:#x}: "
        return f"Statement({address}{self.expressions!r})"

    def __str__(self) -> str:
        from exprsimp.ir.printer import format_statement

        return format_statement(self)
