"""
Fixed Point Math tests

Checked fixed-width arithmetic and wrapping accumulator differences.
"""

import pytest

from ..math.fixed_point_math import (
    checked_mul,
    checked_sub,
    mul_div_floor,
    mul_div_ceil,
    div_round,
    mul_shift_right,
    mul_shift_left,
    wrapping_sub,
    wrapping_add,
    clamp_implausible_delta,
)
from ..constants import Q64, U64_MAX, U128_MAX, IMPLAUSIBLE_GROWTH_DELTA
from ..errors import MathOverflowError


class TestMulDiv:
    """mul_div_floor / mul_div_ceil"""

    def test_exact_division(self):
        """No remainder: floor and ceil agree"""
        assert mul_div_floor(10, 20, 5) == 40
        assert mul_div_ceil(10, 20, 5) == 40

    def test_rounding(self):
        """7·3/2 = 10.5"""
        assert mul_div_floor(7, 3, 2) == 10
        assert mul_div_ceil(7, 3, 2) == 11

    def test_fee_split(self):
        """Remaining amount after a 0.3% fee"""
        assert mul_div_floor(100000, 997000, 1000000, 64) == 99700

    def test_wide_intermediate(self):
        """a·b may exceed 128 bits as long as the result fits"""
        assert mul_div_floor(U128_MAX, U128_MAX, U128_MAX) == U128_MAX

    def test_result_overflow(self):
        """Result wider than the limit raises"""
        with pytest.raises(MathOverflowError):
            mul_div_floor(U64_MAX, 2, 1, 64)
        with pytest.raises(MathOverflowError):
            mul_div_ceil(U64_MAX, 2, 1, 64)

    def test_zero_denominator(self):
        with pytest.raises(ZeroDivisionError):
            mul_div_floor(1, 1, 0)
        with pytest.raises(ZeroDivisionError):
            mul_div_ceil(1, 1, 0)


class TestDivRound:
    """div_round"""

    def test_round_down(self):
        assert div_round(7, 2, False) == 3

    def test_round_up(self):
        assert div_round(7, 2, True) == 4

    def test_exact_round_up(self):
        """Exact quotient is not bumped"""
        assert div_round(8, 2, True) == 4


class TestShifts:
    """mul_shift_right / mul_shift_left"""

    def test_q64_multiply(self):
        """Q64.64 decode: 1000 × 5.0 = 5000"""
        assert mul_shift_right(1000, 5 * Q64, 64) == 5000

    def test_small_product_floors_to_zero(self):
        assert mul_shift_right(2, 10000, 64) == 0

    def test_shift_left(self):
        assert mul_shift_left(3, 5, 64) == 15 * Q64

    def test_shift_left_overflow(self):
        with pytest.raises(MathOverflowError):
            mul_shift_left(U128_MAX, U128_MAX, 64)


class TestChecked:
    """checked_mul / checked_sub"""

    def test_checked_mul(self):
        assert checked_mul(U64_MAX, 1, 64) == U64_MAX
        with pytest.raises(MathOverflowError):
            checked_mul(U64_MAX, 2, 64)

    def test_checked_sub(self):
        assert checked_sub(10, 3) == 7
        assert checked_sub(3, 3) == 0

    def test_checked_sub_underflow(self):
        """Negative result raises instead of clamping to 0"""
        with pytest.raises(MathOverflowError):
            checked_sub(3, 10)


class TestWrapping:
    """wrapping_sub / wrapping_add"""

    def test_wrapping_sub_literal(self):
        """wrapping_sub(5, 10) == 2^128 - 5"""
        assert wrapping_sub(5, 10) == 340282366920938463463374607431768211451
        assert wrapping_sub(5, 10) == 2 ** 128 - 5

    def test_wrapping_sub_no_wrap(self):
        assert wrapping_sub(10, 5) == 5

    def test_wrapping_sub_custom_width(self):
        assert wrapping_sub(0, 1, 64) == U64_MAX

    def test_wrapping_add(self):
        assert wrapping_add(U128_MAX, 2) == 1
        assert wrapping_add(1, 2) == 3

    def test_difference_across_wrap(self):
        """A counter that wrapped past zero still differences correctly"""
        before = U128_MAX - 9
        after = wrapping_add(before, 100)
        assert wrapping_sub(after, before) == 100


class TestClampImplausibleDelta:
    """clamp_implausible_delta"""

    def test_plausible_delta_unchanged(self):
        assert clamp_implausible_delta(12345) == 12345

    def test_threshold_itself_unchanged(self):
        assert clamp_implausible_delta(IMPLAUSIBLE_GROWTH_DELTA) == IMPLAUSIBLE_GROWTH_DELTA

    def test_above_threshold_becomes_one(self):
        assert clamp_implausible_delta(IMPLAUSIBLE_GROWTH_DELTA + 1) == 1
        assert clamp_implausible_delta(wrapping_sub(0, 1)) == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
