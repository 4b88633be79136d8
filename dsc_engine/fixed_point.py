"""Checked fixed-point arithmetic on plain Python ints.

Quantities use 18 decimals and must fit in an unsigned 256-bit word, which is
the storage width the engine's balances are modelled on. Python ints never
wrap, so every helper checks the bound explicitly and raises ``EngineError``
instead. Division always floors toward zero.
"""
from __future__ import annotations

from .errors import EngineError, ErrorKind

PRECISION: int = 10**18
PERCENT: int = 100
MAX_UINT256: int = 2**256 - 1


def _check_operands(*values: int) -> None:
    for value in values:
        if value < 0:
            raise EngineError(ErrorKind.ARITHMETIC_UNDERFLOW, f"negative operand {value}")
        if value > MAX_UINT256:
            raise EngineError(ErrorKind.ARITHMETIC_OVERFLOW, f"operand {value} out of range")


def checked_add(a: int, b: int) -> int:
    _check_operands(a, b)
    result = a + b
    if result > MAX_UINT256:
        raise EngineError(ErrorKind.ARITHMETIC_OVERFLOW, f"{a} + {b}")
    return result


def checked_sub(a: int, b: int) -> int:
    _check_operands(a, b)
    if b > a:
        raise EngineError(ErrorKind.ARITHMETIC_UNDERFLOW, f"{a} - {b}")
    return a - b


def checked_mul(a: int, b: int) -> int:
    _check_operands(a, b)
    result = a * b
    if result > MAX_UINT256:
        raise EngineError(ErrorKind.ARITHMETIC_OVERFLOW, f"{a} * {b}")
    return result


def mul_div(a: int, b: int, c: int) -> int:
    """Return ``floor(a * b / c)``.

    Raises:
        EngineError: DIVISION_BY_ZERO when ``c == 0``, ARITHMETIC_OVERFLOW when
            the intermediate product leaves the 256-bit range.
    """
    _check_operands(c)
    if c == 0:
        raise EngineError(ErrorKind.DIVISION_BY_ZERO, f"{a} * {b} / 0")
    return checked_mul(a, b) // c


def percent_of(value: int, percent: int) -> int:
    """Return ``floor(value * percent / 100)``."""
    return mul_div(value, percent, PERCENT)


def to_fixed(amount: int, decimals: int) -> int:
    """Rescale an integer with *decimals* decimals to 18 decimals, truncating.

    Signed input is preserved so a negative feed answer stays negative.
    """
    if decimals == 18:
        return amount
    if decimals < 18:
        return amount * 10 ** (18 - decimals)
    scale = 10 ** (decimals - 18)
    if amount < 0:
        return -(-amount // scale)
    return amount // scale
