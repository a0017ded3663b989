import pytest

from exprsimp.ir.expressions import add, assign, cmp_eq, inc, val, var, xor
from exprsimp.ir.statement import Slot, Statement, iter_slots


def test_empty_statement_raises():
    with pytest.raises(ValueError):
        Statement([])


def test_slots_are_post_order():
    x, y, one = var("x", 32), var("y", 32), val(1, 32)
    rhs = add(y, one)
    top = assign(x, rhs)
    stmt = Statement([top])

    assert [slot.expr for slot in stmt.slots()] == [x, y, one, rhs, top]


def test_slots_cover_every_expression_in_order():
    a = inc(var("a", 32))
    b = cmp_eq(var("b", 8), val(0, 8))
    stmt = Statement([a, b])
    nodes = [slot.expr for slot in stmt.slots()]

    assert len(nodes) == stmt.node_count() == 5
    assert nodes[1] is a
    assert nodes[-1] is b


def test_slot_replace_writes_into_owner():
    x = var("x", 32)
    e = xor(x, val(0, 32))
    stmt = Statement([e])
    slot = stmt.slots()[-1]

    old = slot.replace(x)

    assert old is e
    assert stmt[0] is x
    assert slot.expr is x


def test_replacing_a_child_keeps_later_slots_valid():
    x, y = var("x", 32), var("y", 32)
    inner = add(y, val(0, 32))
    top = assign(x, inner)
    stmt = Statement([top])
    slots = stmt.slots()

    # slots: x, y, 0, inner, top
    slots[3].replace(y)

    assert slots[4].expr is top
    assert top.rhs is y
    assert str(stmt) == "x = y"


def test_iter_slots_on_operand_list():
    x = var("x", 32)
    e = add(x, val(2, 32))
    slots = list(iter_slots(e.operands, 0))
    assert len(slots) == 1
    assert isinstance(slots[0], Slot)
    assert slots[0].owner is e.operands


def test_copy_and_equals():
    stmt = Statement([assign(var("x", 32), val(1, 32))], address=0x1000)
    clone = stmt.copy()

    assert clone.equals(stmt)
    assert clone.address == 0x1000
    assert clone[0] is not stmt[0]
    clone.expressions[0].operands[1] = val(2, 32)
    assert not clone.equals(stmt)


def test_equals_checks_length():
    a = Statement([var("x", 32)])
    b = Statement([var("x", 32), var("x", 32)])
    assert not a.equals(b)


def test_sequence_protocol_and_formatting():
    stmt = Statement([inc(var("i", 32)), cmp_eq(var("i", 32), val(10, 32))], 0x401000)
    assert len(stmt) == 2
    assert list(stmt) == stmt.expressions
    assert str(stmt) == "i++; (i == 0xa)"
    assert repr(stmt).startswith("Statement(0x401000: [")
