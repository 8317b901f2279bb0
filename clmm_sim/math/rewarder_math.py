"""
Rewarder Math - reward growth emission

Each rewarder emits a fixed Q64.64 amount per second, shared pro rata by
the active liquidity:

    growth_global += ⌊Δt × emissions_per_second / L⌋      (mod 2^128)
    emissions_per_day = ⌊emissions_per_second × 86400 / 2^64⌋

The pool-level refresh pads the elapsed time with a small buffer and leaves
the globals untouched when the pool has no active liquidity.
"""

import logging
from typing import TYPE_CHECKING, Optional, Tuple

from ..config import settings
from ..constants import SECONDS_PER_DAY
from .fixed_point_math import mul_div_floor, wrapping_add

if TYPE_CHECKING:
    from ..data.types import PoolSnapshot

logger = logging.getLogger(__name__)


def rewarder_growth_delta(
    time_delta: int,
    emissions_per_second: int,
    liquidity: int
) -> int:
    """Growth added over ``time_delta`` seconds (Q64.64)"""
    if liquidity == 0 or time_delta <= 0:
        return 0
    return mul_div_floor(time_delta, emissions_per_second, liquidity, 128)


def next_growth_global(
    growth_global: int,
    time_delta: int,
    emissions_per_second: int,
    liquidity: int
) -> int:
    """growth_global after ``time_delta`` seconds of emission"""
    return wrapping_add(
        growth_global,
        rewarder_growth_delta(time_delta, emissions_per_second, liquidity),
    )


def emissions_per_day(emissions_per_second: int) -> int:
    """Whole tokens emitted per day from a Q64.64 per-second rate"""
    return (emissions_per_second * SECONDS_PER_DAY) >> 64


def update_rewarder_growth_globals(
    pool: "PoolSnapshot",
    current_time: int,
    time_buffer: Optional[int] = None
) -> Tuple[int, ...]:
    """Refresh every rewarder's growth global to ``current_time``

    The elapsed time since the pool's last rewarder update is padded by
    ``time_buffer`` seconds to cover the gap until the claim lands on chain.

    Args:
        pool: PoolSnapshot
        current_time: unix seconds
        time_buffer: padding in seconds; settings.REWARDER_TIME_BUFFER
            when None

    Returns:
        growth globals, one per rewarder, in rewarder order
    """
    if time_buffer is None:
        time_buffer = settings.REWARDER_TIME_BUFFER

    stored = tuple(r.growth_global for r in pool.rewarder_infos)
    if current_time <= pool.rewarder_last_updated_time or pool.liquidity == 0:
        return stored

    time_delta = current_time - pool.rewarder_last_updated_time + time_buffer
    updated = tuple(
        next_growth_global(r.growth_global, time_delta, r.emissions_per_second, pool.liquidity)
        for r in pool.rewarder_infos
    )
    logger.debug(
        "rewarder growth refreshed over %ds (pool %s): %s -> %s",
        time_delta, pool.pool_address, stored, updated,
    )
    return updated
