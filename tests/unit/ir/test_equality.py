import pytest

from exprsimp.ir.equality import structurally_equal
from exprsimp.ir.expressions import (
    add,
    address_of,
    cmp_eq,
    cmp_ne,
    deref,
    sub,
    val,
    var,
    xor,
)


def x32():
    return var("x", 32)


def y32():
    return var("y", 32)


@pytest.mark.parametrize(
    "left, right",
    [
        (x32(), var("x", 32)),
        (val(5, 32), val(5, 32)),
        (val(-1, 8), val(0xFF, 8)),
        (val(0x1_0000_0002, 32), val(2, 32)),
        (add(x32(), val(1, 32)), add(var("x", 32), val(1, 32))),
        (deref(address_of(x32()), 32), deref(address_of(var("x", 32)), 32)),
        (
            cmp_eq(sub(x32(), y32()), val(0, 32)),
            cmp_eq(sub(var("x", 32), var("y", 32)), val(0, 32)),
        ),
    ],
    ids=[
        "var",
        "val",
        "val-modulo-size",
        "val-wraps",
        "binary",
        "nested-unary",
        "comparison",
    ],
)
def test_equal(left, right):
    assert structurally_equal(left, right)
    assert structurally_equal(right, left)
    assert left.equals(right)


@pytest.mark.parametrize(
    "left, right",
    [
        (x32(), y32()),
        (x32(), var("x", 16)),
        (val(1, 32), val(1, 16)),
        (val(1, 32), val(2, 32)),
        (x32(), val(0, 32)),
        (add(x32(), y32()), add(y32(), x32())),
        (add(x32(), y32()), sub(x32(), y32())),
        (cmp_eq(x32(), y32()), cmp_ne(x32(), y32())),
        (xor(x32(), add(y32(), val(1, 32))), xor(x32(), add(y32(), val(2, 32)))),
    ],
    ids=[
        "name",
        "var-size",
        "val-size",
        "value",
        "kind-leaf",
        "operand-order",
        "kind-binary",
        "kind-comparison",
        "deep-difference",
    ],
)
def test_not_equal(left, right):
    assert not structurally_equal(left, right)
    assert not structurally_equal(right, left)


def test_none_handling():
    assert structurally_equal(None, None)
    assert not structurally_equal(x32(), None)
    assert not structurally_equal(None, x32())
    assert not x32().equals(None)


def test_does_not_mutate():
    left = add(x32(), val(-1, 32))
    right = add(x32(), val(0xFFFFFFFF, 32))
    before = (repr(left), repr(right))
    assert structurally_equal(left, right)
    assert (repr(left), repr(right)) == before


def test_same_object():
    e = add(x32(), y32())
    assert structurally_equal(e, e)


def test_deep_trees_do_not_recurse():
    left, right = x32(), x32()
    for i in range(5000):
        left = add(left, val(i, 32))
        right = add(right, val(i, 32))
    assert structurally_equal(left, right)
    right = add(right, val(0, 32))
    left = add(left, val(1, 32))
    assert not structurally_equal(left, right)
