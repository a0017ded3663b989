import pytest

from exprsimp.ir.expressions import add, cmp_eq, cmp_ne, sub, val, var
from exprsimp.rules import EqualityFolding


@pytest.fixture
def rule():
    return EqualityFolding()


def x32():
    return var("x", 32)


def test_add_offset_is_folded(rule):
    x = x32()
    result = rule(cmp_eq(add(x, val(3, 32)), val(10, 32)))
    assert result.equals(cmp_eq(x32(), val(7, 32)))
    assert result.lhs is x


def test_sub_offset_is_folded(rule):
    result = rule(cmp_eq(sub(x32(), val(3, 32)), val(10, 32)))
    assert result.equals(cmp_eq(x32(), val(13, 32)))
    assert result.rhs.value == 13


def test_negative_result_stays_readable(rule):
    result = rule(cmp_eq(add(var("x", 8), val(10, 8)), val(5, 8)))
    assert result.rhs.value == -5
    assert result.rhs.size == 8


def test_fold_wraps_at_literal_width(rule):
    result = rule(cmp_eq(sub(x32(), val(0xFFFFFFFF, 32)), val(2, 32)))
    assert result.rhs.value == 1


def test_folded_literal_takes_right_width(rule):
    result = rule(cmp_eq(add(var("w", 16), val(1, 16)), val(0x10, 16)))
    assert result.rhs.size == 16
    assert result.rhs.value == 0xF


@pytest.mark.parametrize(
    "expr",
    [
        cmp_ne(add(x32(), val(3, 32)), val(10, 32)),
        cmp_eq(add(x32(), val(3, 32)), var("y", 32)),
        cmp_eq(add(x32(), var("y", 32)), val(10, 32)),
        cmp_eq(add(val(3, 32), x32()), val(10, 32)),
        cmp_eq(x32(), val(10, 32)),
        # offset and right-hand literal of different widths
        cmp_eq(add(x32(), val(3, 8)), val(10, 32)),
        cmp_eq(add(x32(), val(3, 32)), val(10, 8)),
    ],
    ids=[
        "not-equal",
        "rhs-variable",
        "offset-variable",
        "offset-on-left",
        "no-offset",
        "offset-width",
        "rhs-width",
    ],
)
def test_declines(rule, expr):
    assert rule(expr) is None
