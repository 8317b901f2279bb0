"""
Position Accrual tests

Fee and reward accrual from growth-inside-range differences, including
accumulators that wrapped past 2^128.
"""

import logging

import pytest

from ..accrual import (
    compute_fee_owed,
    compute_rewards_owed,
    estimate_rewards_owed,
    aggregate_fees_owed,
    aggregate_rewards_owed,
)
from ..math.fee_math import growth_below, growth_above, growth_inside, owed_delta
from ..math.rewarder_math import (
    emissions_per_day,
    next_growth_global,
    update_rewarder_growth_globals,
)
from ..math.fixed_point_math import mul_shift_right, wrapping_sub
from ..data.types import FeeOwed, PoolSnapshot, Position, RewarderInfo, RewardOwed, Tick
from ..constants import Q64, Q128
from ..errors import MalformedTickDataError


def make_pool(current_tick=0, fee_growth_a=0, fee_growth_b=0, rewarders=(), liquidity=1_000_000,
              last_updated=0):
    return PoolSnapshot(
        liquidity=liquidity,
        current_sqrt_price=Q64,
        fee_rate=3000,
        tick_spacing=60,
        current_tick_index=current_tick,
        fee_growth_global_a=fee_growth_a,
        fee_growth_global_b=fee_growth_b,
        rewarder_infos=tuple(rewarders),
        rewarder_last_updated_time=last_updated,
    )


def make_position(liquidity=1000, **kwargs):
    return Position(liquidity=liquidity, tick_lower_index=-60, tick_upper_index=60, **kwargs)


LOWER = Tick(index=-60, liquidity_net=1000)
UPPER = Tick(index=60, liquidity_net=-1000)


class TestGrowthSelection:
    """growth_below / growth_above / growth_inside"""

    def test_below_when_above_tick(self):
        """i_c >= i: g_b = g_o"""
        assert growth_below(100, 150, 1000, 300) == 300
        assert growth_below(100, 100, 1000, 300) == 300

    def test_below_when_below_tick(self):
        """i_c < i: g_b = g_g - g_o"""
        assert growth_below(100, 50, 1000, 300) == 700

    def test_above_when_above_tick(self):
        """i_c >= i: g_a = g_g - g_o"""
        assert growth_above(100, 150, 1000, 300) == 700

    def test_above_when_below_tick(self):
        """i_c < i: g_a = g_o"""
        assert growth_above(100, 50, 1000, 300) == 300

    def test_inside_in_range(self):
        """No growth outside: everything is inside"""
        assert growth_inside(-60, 60, 0, 1000, 0, 0) == 1000

    def test_inside_wraps(self):
        """Below the range the result wraps modulo 2^128"""
        assert growth_inside(-60, 60, -120, 10, 2, 3) == Q128 - 1

    def test_owed_delta(self):
        assert owed_delta(1000, 5 * Q64, 0) == 5000


class TestFeeOwed:
    """compute_fee_owed"""

    def test_in_range(self):
        pool = make_pool(fee_growth_a=5 * Q64, fee_growth_b=2 * Q64)
        owed = compute_fee_owed(pool, make_position(fee_owed_a=7), LOWER, UPPER)
        assert owed == FeeOwed(fee_owed_a=5007, fee_owed_b=2000)

    def test_price_above_range(self):
        """g_r = 10 - 2 - (10 - 3) = 1 per unit liquidity"""
        pool = make_pool(current_tick=120, fee_growth_a=10 * Q64)
        lower = Tick(index=-60, liquidity_net=1000, fee_growth_outside_a=2 * Q64)
        upper = Tick(index=60, liquidity_net=-1000, fee_growth_outside_a=3 * Q64)
        owed = compute_fee_owed(pool, make_position(), lower, upper)
        assert owed.fee_owed_a == 1000
        assert owed.fee_owed_b == 0

    def test_wrapped_growth_inside(self):
        """Growth inside wrapped below zero between snapshots: still one unit of growth"""
        pool = make_pool(current_tick=-120, fee_growth_a=10 * Q64)
        lower = Tick(index=-60, liquidity_net=1000, fee_growth_outside_a=2 * Q64)
        upper = Tick(index=60, liquidity_net=-1000, fee_growth_outside_a=3 * Q64)
        position = make_position(fee_growth_inside_a=Q128 - 2 * Q64)
        owed = compute_fee_owed(pool, position, lower, upper)
        assert owed.fee_owed_a == 1000

    def test_idempotent_at_snapshot(self):
        """Position updated at the current growth owes exactly what it already owed"""
        pool = make_pool(fee_growth_a=5 * Q64, fee_growth_b=2 * Q64)
        position = make_position(
            fee_growth_inside_a=5 * Q64, fee_growth_inside_b=2 * Q64,
            fee_owed_a=11, fee_owed_b=13,
        )
        assert compute_fee_owed(pool, position, LOWER, UPPER) == FeeOwed(11, 13)

    def test_repeated_calls_agree(self):
        """With growth pending, computing twice gives the same owed amounts"""
        pool = make_pool(fee_growth_a=5 * Q64, fee_growth_b=2 * Q64)
        position = make_position(fee_growth_inside_a=Q64, fee_owed_a=3)
        first = compute_fee_owed(pool, position, LOWER, UPPER)
        second = compute_fee_owed(pool, position, LOWER, UPPER)
        assert first == second == FeeOwed(4003, 2000)

    def test_implausible_delta_clamped(self, caplog):
        """Snapshot newer than the pool: the wrapped delta is clamped to 1"""
        pool = make_pool(fee_growth_a=5 * Q64)
        position = make_position(fee_growth_inside_a=5 * Q64 + 1, fee_owed_a=42)
        with caplog.at_level(logging.WARNING, logger="clmm_sim.math.fee_math"):
            owed = compute_fee_owed(pool, position, LOWER, UPPER)
        assert owed.fee_owed_a == 42 + mul_shift_right(1000, 1, 64)
        assert "Implausible growth delta" in caplog.text

    def test_mismatched_ticks(self):
        with pytest.raises(MalformedTickDataError):
            compute_fee_owed(make_pool(), make_position(), Tick(index=-120, liquidity_net=0), UPPER)

    def test_inverted_range(self):
        position = Position(liquidity=1000, tick_lower_index=60, tick_upper_index=-60)
        with pytest.raises(MalformedTickDataError):
            compute_fee_owed(make_pool(), position, UPPER, LOWER)

    def test_inputs_not_mutated(self):
        pool = make_pool(fee_growth_a=5 * Q64)
        position = make_position()
        compute_fee_owed(pool, position, LOWER, UPPER)
        assert position.fee_owed_a == 0
        assert position.fee_growth_inside_a == 0


class TestRewardsOwed:
    """compute_rewards_owed"""

    def test_small_growth(self):
        """2 × 10000 / 2^64 floors to zero"""
        pool = make_pool(rewarders=[RewarderInfo("0x2::sui::SUI", 0, 10000)])
        position = make_position(liquidity=2)
        rewards = compute_rewards_owed(pool, position, LOWER, UPPER)
        assert rewards == [RewardOwed(0, "0x2::sui::SUI", mul_shift_right(2, 10000, 64))]
        assert rewards[0].amount_owed == 0

    def test_explicit_growth_globals(self):
        """Globals passed in take precedence over the pool's stored values"""
        pool = make_pool(rewarders=[RewarderInfo("A", 0, 0), RewarderInfo("B", 0, 0)])
        position = make_position(reward_amount_owed=(1, 2, 0))
        rewards = compute_rewards_owed(pool, position, LOWER, UPPER, [3 * Q64, Q64])
        assert [r.amount_owed for r in rewards] == [3001, 1002]
        assert [r.coin_type for r in rewards] == ["A", "B"]

    def test_no_rewarders(self):
        assert compute_rewards_owed(make_pool(), make_position(), LOWER, UPPER) == []

    def test_missing_tick_entries(self):
        """Ticks without an entry for a rewarder count as zero growth outside"""
        pool = make_pool(current_tick=120, rewarders=[RewarderInfo("A", 0, 10 * Q64)])
        lower = Tick(index=-60, liquidity_net=1000, rewarders_growth_outside=(2 * Q64,))
        upper = Tick(index=60, liquidity_net=-1000)
        rewards = compute_rewards_owed(pool, make_position(), lower, upper)
        # g_r = 10 - 2 - (10 - 0) wraps; the delta from 0 is implausible and clamps to 1
        assert rewards[0].amount_owed == 0

    def test_too_many_globals(self):
        with pytest.raises(ValueError):
            compute_rewards_owed(make_pool(), make_position(), LOWER, UPPER, [0, 0, 0, 0])

    def test_mismatched_ticks(self):
        with pytest.raises(MalformedTickDataError):
            compute_rewards_owed(make_pool(), make_position(), LOWER, Tick(index=120, liquidity_net=0))


class TestRewarderGrowth:
    """Rewarder growth refresh"""

    @pytest.fixture
    def pool(self):
        """1 token/s into 1,000,000 liquidity, last refreshed at t=1000"""
        return make_pool(
            rewarders=[RewarderInfo("A", Q64, 0), RewarderInfo("B", 0, 77)],
            last_updated=1000,
        )

    def test_refresh_with_default_buffer(self, pool):
        """85s elapsed + 15s buffer = 100s"""
        assert update_rewarder_growth_globals(pool, 1085) == (1844674407370955, 77)

    def test_refresh_without_buffer(self, pool):
        assert update_rewarder_growth_globals(pool, 1085, time_buffer=0) == (1567973246265311, 77)

    def test_time_not_advanced(self, pool):
        assert update_rewarder_growth_globals(pool, 1000) == (0, 77)
        assert update_rewarder_growth_globals(pool, 900) == (0, 77)

    def test_zero_liquidity(self):
        pool = make_pool(liquidity=0, rewarders=[RewarderInfo("A", Q64, 5)], last_updated=1000)
        assert update_rewarder_growth_globals(pool, 2000) == (5,)

    def test_growth_wraps(self):
        assert next_growth_global(Q128 - 1, 1, Q64, Q64) == 0

    def test_emissions_per_day(self):
        assert emissions_per_day(Q64) == 86400
        assert emissions_per_day(Q64 // 2) == 43200

    def test_estimate_rewards_owed(self, pool):
        """1,000,000 liquidity holds all of it: ~100 tokens over 100s, floored"""
        position = make_position(liquidity=1_000_000)
        rewards = estimate_rewards_owed(pool, position, LOWER, UPPER, 1085)
        assert rewards[0] == RewardOwed(0, "A", 99)
        assert rewards[1].amount_owed == mul_shift_right(1_000_000, 77, 64)


class TestAggregation:
    """aggregate_fees_owed / aggregate_rewards_owed"""

    def test_fees(self):
        pool = make_pool(fee_growth_a=5 * Q64, fee_growth_b=Q64)
        entries = [
            (make_position(liquidity=1000), LOWER, UPPER),
            (make_position(liquidity=500, fee_owed_b=3), LOWER, UPPER),
        ]
        assert aggregate_fees_owed(pool, entries) == FeeOwed(7500, 1503)

    def test_fees_empty(self):
        assert aggregate_fees_owed(make_pool(), []) == FeeOwed(0, 0)

    def test_rewards(self):
        pool = make_pool(rewarders=[RewarderInfo("A", 0, 2 * Q64)])
        entries = [
            (make_position(liquidity=1000), LOWER, UPPER),
            (make_position(liquidity=10), LOWER, UPPER),
        ]
        assert aggregate_rewards_owed(pool, entries) == [RewardOwed(0, "A", 2020)]

    def test_rewards_with_explicit_globals(self):
        pool = make_pool(rewarders=[RewarderInfo("A", 0, 0)])
        entries = [(make_position(liquidity=1000), LOWER, UPPER)]
        assert aggregate_rewards_owed(pool, entries, [Q64]) == [RewardOwed(0, "A", 1000)]

    def test_wrap_difference_literal(self):
        assert wrapping_sub(5, 10) == 340282366920938463463374607431768211451


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
