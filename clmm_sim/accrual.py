"""
Position Accrual

Fees and rewards a position has earned since its last on-chain update,
computed from the pool snapshot and the position's two boundary ticks.

    owed(t_1) = owed(t_0) + l × (g_r(t_1) - g_r(t_0)) >> 64

Rewarder growth globals are passed in explicitly. Callers that want rewards
up to "now" refresh them first (``estimate_rewards_owed`` does both).
Nothing here mutates its inputs.
"""

import logging
from typing import Iterable, List, Optional, Sequence

from .data.types import FeeOwed, PoolSnapshot, Position, PositionWithTicks, RewardOwed, Tick
from .errors import MalformedTickDataError
from .constants import REWARDER_NUM
from .math.fee_math import growth_inside, owed_delta
from .math.rewarder_math import update_rewarder_growth_globals

logger = logging.getLogger(__name__)


def _check_position_ticks(position: Position, tick_lower: Tick, tick_upper: Tick) -> None:
    if tick_lower.index != position.tick_lower_index or tick_upper.index != position.tick_upper_index:
        raise MalformedTickDataError(
            f"Boundary ticks ({tick_lower.index}, {tick_upper.index}) do not match position range "
            f"({position.tick_lower_index}, {position.tick_upper_index})"
        )
    if tick_lower.index >= tick_upper.index:
        raise MalformedTickDataError(
            f"Lower tick {tick_lower.index} must be below upper tick {tick_upper.index}"
        )


def _nth(values: Sequence[int], i: int) -> int:
    # Ticks and positions created before a rewarder was added carry no entry for it
    return values[i] if i < len(values) else 0


def compute_fee_owed(
    pool: PoolSnapshot,
    position: Position,
    tick_lower: Tick,
    tick_upper: Tick
) -> FeeOwed:
    """Fees owed to a position in both tokens

    Args:
        pool: pool snapshot
        position: position snapshot
        tick_lower: tick at position.tick_lower_index
        tick_upper: tick at position.tick_upper_index

    Returns:
        FeeOwed(previously owed + accrued since the last update)

    Raises:
        MalformedTickDataError: boundary ticks do not match the position
    """
    _check_position_ticks(position, tick_lower, tick_upper)
    current_tick = pool.tick_index

    inside_a = growth_inside(
        tick_lower.index, tick_upper.index, current_tick,
        pool.fee_growth_global_a,
        tick_lower.fee_growth_outside_a, tick_upper.fee_growth_outside_a,
    )
    inside_b = growth_inside(
        tick_lower.index, tick_upper.index, current_tick,
        pool.fee_growth_global_b,
        tick_lower.fee_growth_outside_b, tick_upper.fee_growth_outside_b,
    )

    return FeeOwed(
        fee_owed_a=position.fee_owed_a + owed_delta(position.liquidity, inside_a, position.fee_growth_inside_a),
        fee_owed_b=position.fee_owed_b + owed_delta(position.liquidity, inside_b, position.fee_growth_inside_b),
    )


def compute_rewards_owed(
    pool: PoolSnapshot,
    position: Position,
    tick_lower: Tick,
    tick_upper: Tick,
    rewarder_growth_globals: Optional[Sequence[int]] = None
) -> List[RewardOwed]:
    """Rewards owed to a position, one entry per rewarder

    Args:
        pool: pool snapshot
        position: position snapshot
        tick_lower: tick at position.tick_lower_index
        tick_upper: tick at position.tick_upper_index
        rewarder_growth_globals: up to three growth globals; the pool's
            stored values when None

    Returns:
        list of RewardOwed in rewarder order

    Raises:
        MalformedTickDataError: boundary ticks do not match the position
        ValueError: more than three growth globals
    """
    _check_position_ticks(position, tick_lower, tick_upper)
    if rewarder_growth_globals is None:
        rewarder_growth_globals = pool.rewarder_growth_global
    if len(rewarder_growth_globals) > REWARDER_NUM:
        raise ValueError(
            f"At most {REWARDER_NUM} rewarder growth globals, got {len(rewarder_growth_globals)}"
        )

    current_tick = pool.tick_index
    rewards = []
    for i, growth_global in enumerate(rewarder_growth_globals):
        inside = growth_inside(
            tick_lower.index, tick_upper.index, current_tick,
            growth_global,
            _nth(tick_lower.rewarders_growth_outside, i),
            _nth(tick_upper.rewarders_growth_outside, i),
        )
        accrued = owed_delta(position.liquidity, inside, _nth(position.reward_growth_inside, i))
        coin_type = pool.rewarder_infos[i].coin_type if i < len(pool.rewarder_infos) else ""
        rewards.append(RewardOwed(
            rewarder_index=i,
            coin_type=coin_type,
            amount_owed=_nth(position.reward_amount_owed, i) + accrued,
        ))
    return rewards


def estimate_rewards_owed(
    pool: PoolSnapshot,
    position: Position,
    tick_lower: Tick,
    tick_upper: Tick,
    current_time: int,
    time_buffer: Optional[int] = None
) -> List[RewardOwed]:
    """Rewards owed as of ``current_time`` (unix seconds)

    Refreshes the pool's rewarder growth globals, then accrues against them.
    """
    growth_globals = update_rewarder_growth_globals(pool, current_time, time_buffer)
    return compute_rewards_owed(pool, position, tick_lower, tick_upper, growth_globals)


def aggregate_fees_owed(
    pool: PoolSnapshot,
    entries: Iterable[PositionWithTicks]
) -> FeeOwed:
    """Total fees owed over several positions of one pool

    Args:
        pool: pool snapshot
        entries: (position, tick_lower, tick_upper) triples

    Returns:
        FeeOwed summed over all positions
    """
    total_a = 0
    total_b = 0
    count = 0
    for position, tick_lower, tick_upper in entries:
        fee = compute_fee_owed(pool, position, tick_lower, tick_upper)
        total_a += fee.fee_owed_a
        total_b += fee.fee_owed_b
        count += 1
    logger.debug("aggregated fees over %d positions: a=%d b=%d", count, total_a, total_b)
    return FeeOwed(fee_owed_a=total_a, fee_owed_b=total_b)


def aggregate_rewards_owed(
    pool: PoolSnapshot,
    entries: Iterable[PositionWithTicks],
    rewarder_growth_globals: Optional[Sequence[int]] = None
) -> List[RewardOwed]:
    """Total rewards owed per rewarder over several positions of one pool"""
    if rewarder_growth_globals is None:
        rewarder_growth_globals = pool.rewarder_growth_global

    totals = [0] * len(rewarder_growth_globals)
    for position, tick_lower, tick_upper in entries:
        for reward in compute_rewards_owed(pool, position, tick_lower, tick_upper, rewarder_growth_globals):
            totals[reward.rewarder_index] += reward.amount_owed

    return [
        RewardOwed(
            rewarder_index=i,
            coin_type=pool.rewarder_infos[i].coin_type if i < len(pool.rewarder_infos) else "",
            amount_owed=total,
        )
        for i, total in enumerate(totals)
    ]
