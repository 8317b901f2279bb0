"""
Fee Math - growth-inside-range accounting

Fee and reward growth accumulators are per-unit-liquidity counters that
increase monotonically modulo 2^128. A position's share is the growth
inside its range between two snapshots, times its liquidity.

Core formulas:
    g_b(i) = g_o(i)        if i_c >= i else g_g - g_o(i)   # growth below tick i
    g_a(i) = g_g - g_o(i)  if i_c >= i else g_o(i)         # growth above tick i
    g_r = g_g - g_b(i_l) - g_a(i_u)                        # growth inside range
    owed = l × (g_r(t_1) - g_r(t_0)) >> 64                 # Q64.64 decode

Every subtraction wraps modulo 2^128: accumulators overflow by design.
"""

import logging

from .fixed_point_math import (
    clamp_implausible_delta,
    mul_shift_right,
    wrapping_sub,
)

logger = logging.getLogger(__name__)


def growth_below(
    tick_idx: int,
    current_tick: int,
    growth_global: int,
    growth_outside: int
) -> int:
    """Growth accrued below tick i (g_b)

    Args:
        tick_idx: tick index (i)
        current_tick: pool's current tick (i_c)
        growth_global: global growth (g_g)
        growth_outside: the tick's growth outside (g_o)

    Returns:
        growth below the tick
    """
    if current_tick < tick_idx:
        return wrapping_sub(growth_global, growth_outside)
    return growth_outside


def growth_above(
    tick_idx: int,
    current_tick: int,
    growth_global: int,
    growth_outside: int
) -> int:
    """Growth accrued above tick i (g_a)

    Args:
        tick_idx: tick index (i)
        current_tick: pool's current tick (i_c)
        growth_global: global growth (g_g)
        growth_outside: the tick's growth outside (g_o)

    Returns:
        growth above the tick
    """
    if current_tick < tick_idx:
        return growth_outside
    return wrapping_sub(growth_global, growth_outside)


def growth_inside(
    tick_lower: int,
    tick_upper: int,
    current_tick: int,
    growth_global: int,
    growth_outside_lower: int,
    growth_outside_upper: int
) -> int:
    """Growth inside [tick_lower, tick_upper) (g_r)

    g_r = g_g - g_b(i_l) - g_a(i_u), each subtraction wrapping.

    Args:
        tick_lower: lower tick (i_l)
        tick_upper: upper tick (i_u)
        current_tick: pool's current tick (i_c)
        growth_global: global growth (g_g)
        growth_outside_lower: lower tick's growth outside (g_o(i_l))
        growth_outside_upper: upper tick's growth outside (g_o(i_u))

    Returns:
        growth inside the range, modulo 2^128
    """
    g_b = growth_below(tick_lower, current_tick, growth_global, growth_outside_lower)
    g_a = growth_above(tick_upper, current_tick, growth_global, growth_outside_upper)
    return wrapping_sub(wrapping_sub(growth_global, g_b), g_a)


def owed_delta(
    liquidity: int,
    growth_inside_current: int,
    growth_inside_last: int
) -> int:
    """Amount accrued since the last snapshot

    owed = l × clamp(g_r(t_1) - g_r(t_0)) >> 64

    Args:
        liquidity: position liquidity (l)
        growth_inside_current: current growth inside (g_r(t_1))
        growth_inside_last: growth inside at the last update (g_r(t_0))

    Returns:
        accrued amount in token units
    """
    delta = wrapping_sub(growth_inside_current, growth_inside_last)
    clamped = clamp_implausible_delta(delta)
    if clamped != delta:
        logger.warning(
            "Implausible growth delta %d (inside now=%d, last=%d); using %d",
            delta, growth_inside_current, growth_inside_last, clamped,
        )
    return mul_shift_right(liquidity, clamped, 64)
