"""
Swap Simulator

Predicts the exact outcome of a swap against a pool snapshot without
touching the chain. The pool's initialized ticks are walked in the swap
direction one constant-liquidity step at a time; each crossed tick applies
its liquidity_net to the active liquidity.

Termination:
- the requested amount is filled
- the price reaches the direction's hard limit (MIN/MAX_SQRT_PRICE)
- the next crossing would exceed the cross-tick cap

The last two are partial fills, reported through ``is_exceed_limit``.
"""

import logging
from decimal import Decimal, localcontext
from typing import Optional, Sequence

from .config import settings
from .constants import MAX_TICK, MIN_TICK, U128_MAX, U64_MAX
from .data.types import PoolSnapshot, SwapQuote, SwapResult, Tick
from .errors import InvalidAmountError, MalformedTickDataError, MathOverflowError
from .math.fixed_point_math import checked_sub
from .math.swap_math import compute_swap_step
from .math.tick_math import (
    check_sqrt_price,
    default_sqrt_price_limit,
    sqrt_price_x64_to_price,
)

logger = logging.getLogger(__name__)


def validate_swap_ticks(ticks: Sequence[Tick], a2b: bool, tick_spacing: int) -> None:
    """Reject a tick sequence not ordered for this swap direction

    A→B walks ticks by strictly descending index, B→A by strictly ascending
    index. Every index must be in range and a multiple of the tick spacing.

    Raises:
        MalformedTickDataError: on the first violation
    """
    previous = None
    for tick in ticks:
        if tick.index < MIN_TICK or tick.index > MAX_TICK:
            raise MalformedTickDataError(f"Tick index out of range: {tick.index}")
        if tick.index % tick_spacing != 0:
            raise MalformedTickDataError(
                f"Tick index {tick.index} is not a multiple of tick spacing {tick_spacing}"
            )
        if previous is not None:
            if tick.index == previous:
                raise MalformedTickDataError(f"Duplicate tick index: {tick.index}")
            if (a2b and tick.index > previous) or (not a2b and tick.index < previous):
                order = "descending" if a2b else "ascending"
                raise MalformedTickDataError(
                    f"Ticks must be {order} for a2b={a2b}: {previous} then {tick.index}"
                )
        previous = tick.index


def _cross_tick(liquidity: int, liquidity_net: int, a2b: bool) -> int:
    # Moving down through a tick removes what moving up would add
    next_liquidity = liquidity - liquidity_net if a2b else liquidity + liquidity_net
    if next_liquidity < 0 or next_liquidity > U128_MAX:
        raise MathOverflowError(
            f"Liquidity out of u128 range after crossing: {liquidity} -> {next_liquidity}"
        )
    return next_liquidity


def _run_swap(
    a2b: bool,
    by_amount_in: bool,
    amount: int,
    pool: PoolSnapshot,
    ticks: Sequence[Tick],
    max_cross_tick_count: int
) -> SwapResult:
    """Swap state machine over already validated inputs

    Args:
        a2b: True to swap token A for token B (price moves down)
        by_amount_in: True for exact input, False for exact output
        amount: input (by_amount_in) or output amount
        pool: pool snapshot
        ticks: initialized ticks ordered for the swap direction
        max_cross_tick_count: crossings allowed before stopping

    Returns:
        SwapResult
    """
    current_tick = pool.tick_index
    if a2b:
        swap_ticks = [t for t in ticks if t.index <= current_tick]
    else:
        swap_ticks = [t for t in ticks if t.index > current_tick]

    sqrt_price_limit = default_sqrt_price_limit(a2b)

    remaining_amount = amount
    current_sqrt_price = pool.current_sqrt_price
    current_liquidity = pool.liquidity
    total_amount_in = 0
    total_amount_out = 0
    total_fee = 0
    cross_count = 0
    tick_pos = 0

    while remaining_amount > 0 and current_sqrt_price != sqrt_price_limit:
        tick = swap_ticks[tick_pos] if tick_pos < len(swap_ticks) else None
        if tick is None:
            tick_sqrt_price = None
            target_sqrt_price = sqrt_price_limit
        else:
            tick_sqrt_price = tick.sqrt_price
            if a2b:
                target_sqrt_price = max(tick_sqrt_price, sqrt_price_limit)
            else:
                target_sqrt_price = min(tick_sqrt_price, sqrt_price_limit)

        step = compute_swap_step(
            current_sqrt_price,
            target_sqrt_price,
            current_liquidity,
            remaining_amount,
            pool.fee_rate,
            by_amount_in,
        )

        total_amount_in += step.amount_in
        total_amount_out += step.amount_out
        total_fee += step.fee_amount
        if by_amount_in:
            remaining_amount = checked_sub(remaining_amount, step.amount_in + step.fee_amount)
        else:
            remaining_amount = checked_sub(remaining_amount, step.amount_out)
        current_sqrt_price = step.next_sqrt_price

        logger.debug(
            "swap step: in=%d out=%d fee=%d price=%d liquidity=%d remaining=%d",
            step.amount_in, step.amount_out, step.fee_amount,
            current_sqrt_price, current_liquidity, remaining_amount,
        )

        if tick_sqrt_price is not None and current_sqrt_price == tick_sqrt_price:
            if cross_count >= max_cross_tick_count:
                logger.debug("cross-tick cap %d reached at tick %d", max_cross_tick_count, tick.index)
                break
            current_liquidity = _cross_tick(current_liquidity, tick.liquidity_net, a2b)
            cross_count += 1
            tick_pos += 1
            logger.debug("crossed tick %d, liquidity=%d", tick.index, current_liquidity)

    result = SwapResult(
        amount_in=total_amount_in + total_fee,
        amount_out=total_amount_out,
        fee_amount=total_fee,
        next_sqrt_price=current_sqrt_price,
        cross_tick_count=cross_count,
        is_exceed_limit=remaining_amount > 0,
    )
    logger.debug("swap result: %s", result)
    return result


def simulate_swap(
    a2b: bool,
    by_amount_in: bool,
    amount: int,
    pool: PoolSnapshot,
    ticks: Sequence[Tick],
    max_cross_tick_count: Optional[int] = None
) -> SwapResult:
    """Simulate a swap against a pool snapshot

    Inputs are validated once here, before any computation.

    Args:
        a2b: True to swap token A for token B
        by_amount_in: True for exact input, False for exact output
        amount: input (by_amount_in) or output amount, u64
        pool: pool snapshot
        ticks: initialized ticks, descending by index for A→B and
            ascending for B→A
        max_cross_tick_count: crossing cap; settings.MAX_CROSS_TICK_COUNT
            when None

    Returns:
        SwapResult

    Raises:
        InvalidAmountError: amount is not a positive integer
        MathOverflowError: amount exceeds u64, or an intermediate overflows
        PriceOutOfBoundsError: pool sqrt price outside the supported range
        MalformedTickDataError: ticks not ordered for the direction
    """
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise InvalidAmountError(f"Swap amount must be a positive integer, got {amount!r}")
    if amount > U64_MAX:
        raise MathOverflowError(f"Swap amount {amount} exceeds u64 max")
    check_sqrt_price(pool.current_sqrt_price)
    validate_swap_ticks(ticks, a2b, pool.tick_spacing)

    if max_cross_tick_count is None:
        max_cross_tick_count = settings.MAX_CROSS_TICK_COUNT

    return _run_swap(a2b, by_amount_in, amount, pool, ticks, max_cross_tick_count)


compute_swap = simulate_swap


def calculate_rates(
    a2b: bool,
    by_amount_in: bool,
    amount: int,
    pool: PoolSnapshot,
    ticks: Sequence[Tick],
    decimals_a: int,
    decimals_b: int,
    max_cross_tick_count: Optional[int] = None
) -> SwapQuote:
    """Swap preview with price impact

    price_impact_pct = |price_before - price_after| / price_before × 100,
    both prices in token B per token A.

    Returns:
        SwapQuote
    """
    result = simulate_swap(a2b, by_amount_in, amount, pool, ticks, max_cross_tick_count)

    pre_price = sqrt_price_x64_to_price(pool.current_sqrt_price, decimals_a, decimals_b)
    after_price = sqrt_price_x64_to_price(result.next_sqrt_price, decimals_a, decimals_b)
    with localcontext() as ctx:
        ctx.prec = settings.DECIMAL_PRECISION
        price_impact_pct = abs(pre_price - after_price) / pre_price * Decimal(100)

    return SwapQuote(
        estimated_amount_in=result.amount_in,
        estimated_amount_out=result.amount_out,
        estimated_end_sqrt_price=result.next_sqrt_price,
        estimated_fee_amount=result.fee_amount,
        is_exceed=result.is_exceed_limit,
        amount=amount,
        a2b=a2b,
        by_amount_in=by_amount_in,
        price_impact_pct=price_impact_pct,
    )
