"""Fixed-width integer helpers.

Every IR node carries its size in bits and literal arithmetic wraps modulo
``2**size`` (two's complement). The tables below cover the widths the IR
builder produces; the functions also accept any other positive width.
"""

import ctypes

# =============================================================================
# Tables (keyed by size in bits)
# =============================================================================

# All-ones mask for each width.
AND_TABLE: dict[int, int] = {
    1: 0x1,
    8: 0xFF,
    16: 0xFFFF,
    32: 0xFFFFFFFF,
    64: 0xFFFFFFFFFFFFFFFF,
    128: 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFF,
}

# Sign bit for each width.
MSB_TABLE: dict[int, int] = {
    1: 0x1,
    8: 0x80,
    16: 0x8000,
    32: 0x80000000,
    64: 0x8000000000000000,
    128: 0x80000000000000000000000000000000,
}

CTYPE_SIGNED_TABLE: dict[int, type] = {
    8: ctypes.c_int8,
    16: ctypes.c_int16,
    32: ctypes.c_int32,
    64: ctypes.c_int64,
}

CTYPE_UNSIGNED_TABLE: dict[int, type] = {
    8: ctypes.c_uint8,
    16: ctypes.c_uint16,
    32: ctypes.c_uint32,
    64: ctypes.c_uint64,
}


def mask(size: int) -> int:
    """Return the all-ones mask of a ``size``-bit value."""
    try:
        return AND_TABLE[size]
    except KeyError:
        return (1 << size) - 1


def msb(size: int) -> int:
    """Return the sign-bit mask of a ``size``-bit value."""
    try:
        return MSB_TABLE[size]
    except KeyError:
        return 1 << (size - 1)


# =============================================================================
# Conversion Functions
# =============================================================================


def signed_to_unsigned(signed_value: int, size: int) -> int:
    """Convert a (possibly negative) integer to its ``size``-bit unsigned form.

    >>> signed_to_unsigned(-1, 8)
    255
    >>> signed_to_unsigned(0x1_0000_0005, 32)
    5
    """
    ctype_class = CTYPE_UNSIGNED_TABLE.get(size)
    if ctype_class is not None:
        return ctype_class(signed_value).value
    return signed_value & mask(size)


def unsigned_to_signed(unsigned_value: int, size: int) -> int:
    """Interpret the low ``size`` bits of a value as two's complement.

    >>> unsigned_to_signed(0xFF, 8)
    -1
    >>> unsigned_to_signed(0x7F, 8)
    127
    """
    ctype_class = CTYPE_SIGNED_TABLE.get(size)
    if ctype_class is not None:
        return ctype_class(unsigned_value).value
    value = unsigned_value & mask(size)
    if value & msb(size):
        value -= 1 << size
    return value


def normalize_literal(value: int, size: int) -> int:
    """Bring a folded constant back into the representable range of ``size`` bits.

    Values that already fit either the signed or the unsigned range are kept
    as they are, so a fold that yields ``-2`` stays readable as ``-2``.
    Anything outside both ranges wraps to its unsigned representation.

    >>> normalize_literal(-2, 32)
    -2
    >>> normalize_literal(0x1_0000_0003, 32)
    3
    >>> normalize_literal(-129, 8)
    127
    """
    if -msb(size) <= value <= mask(size):
        return value
    return signed_to_unsigned(value, size)


__all__ = [
    "mask",
    "msb",
    "signed_to_unsigned",
    "unsigned_to_signed",
    "normalize_literal",
]
