"""
Fixed Point Math - overflow-checked integer primitives

Python ints are unbounded, so every primitive that mirrors a fixed-width
on-chain operation checks its result against the width the contract would
store it in (the ``limit`` argument, in bits) and raises instead of
silently widening.

References:
- Move integer semantics: u64 / u128 / u256 abort on overflow,
  wrapping_* helpers reduce modulo 2^bits

Core formulas:
    mul_div_floor(a, b, d)   = ⌊a·b / d⌋
    mul_div_ceil(a, b, d)    = ⌈a·b / d⌉
    mul_shift_right(a, b, s) = ⌊a·b / 2^s⌋
    wrapping_sub(a, b)       = (a − b) mod 2^128
"""

from ..constants import IMPLAUSIBLE_GROWTH_DELTA
from ..errors import MathOverflowError


def _check_width(value: int, limit: int, op: str) -> int:
    if value < 0 or value.bit_length() > limit:
        raise MathOverflowError(f"{op}: result {value} does not fit in u{limit}")
    return value


def checked_mul(a: int, b: int, limit: int) -> int:
    """a·b, checked against ``limit`` bits"""
    return _check_width(a * b, limit, "checked_mul")


def checked_sub(a: int, b: int) -> int:
    """Unsigned a − b; a negative result is an overflow, never a clamp"""
    if a < b:
        raise MathOverflowError(f"checked_sub: {a} - {b} underflows")
    return a - b


def mul_div_floor(a: int, b: int, denom: int, limit: int = 128) -> int:
    """⌊a·b / denom⌋ with an unbounded intermediate

    Args:
        a, b: factors (u128 or narrower)
        denom: divisor
        limit: bit width the result must fit in

    Returns:
        floor of the quotient

    Raises:
        ZeroDivisionError: denom == 0
        MathOverflowError: result wider than ``limit`` bits
    """
    if denom == 0:
        raise ZeroDivisionError("mul_div_floor: division by zero")
    return _check_width((a * b) // denom, limit, "mul_div_floor")


def mul_div_ceil(a: int, b: int, denom: int, limit: int = 128) -> int:
    """⌈a·b / denom⌉, otherwise identical to mul_div_floor"""
    if denom == 0:
        raise ZeroDivisionError("mul_div_ceil: division by zero")
    product = a * b
    result = product // denom
    if product % denom > 0:
        result += 1
    return _check_width(result, limit, "mul_div_ceil")


def div_round(num: int, denom: int, round_up: bool) -> int:
    """num / denom, rounded up or down"""
    if denom == 0:
        raise ZeroDivisionError("div_round: division by zero")
    quotient = num // denom
    if round_up and num % denom > 0:
        quotient += 1
    return quotient


def mul_shift_right(a: int, b: int, shift: int, limit: int = 128) -> int:
    """⌊a·b / 2^shift⌋ - Q64.64 multiplication when shift is 64"""
    return _check_width((a * b) >> shift, limit, "mul_shift_right")


def mul_shift_left(a: int, b: int, shift: int, limit: int = 256) -> int:
    """(a·b) << shift, checked against ``limit`` bits"""
    return _check_width((a * b) << shift, limit, "mul_shift_left")


def wrapping_sub(a: int, b: int, bits: int = 128) -> int:
    """(a − b) mod 2^bits

    Unsigned wraparound exactly as the VM performs it. Growth accumulators
    wrap by design, so snapshots are always differenced with this.

    Example:
        >>> wrapping_sub(5, 10)
        340282366920938463463374607431768211451
    """
    return (a - b) % (1 << bits)


def wrapping_add(a: int, b: int, bits: int = 128) -> int:
    """(a + b) mod 2^bits"""
    return (a + b) % (1 << bits)


def clamp_implausible_delta(delta: int) -> int:
    """Replace an implausibly large wrapped growth delta with 1

    A wrapped delta this close to 2^128 almost always comes from stale or
    mismatched snapshots rather than real growth. The replacement value and
    threshold match what position previews have always reported.
    """
    if delta > IMPLAUSIBLE_GROWTH_DELTA:
        return 1
    return delta
