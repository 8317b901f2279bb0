"""
Swap Math - one constant-liquidity swap step

A swap is a sequence of steps; each step moves the price from the
current sqrt price toward a target (the next initialized tick or the
price limit) at constant liquidity.

Fee model (fee on input):
    exact input:  fee is taken off the top of the remaining amount
                  before the price moves
    exact output: fee = ⌈amount_in × fee_rate / (D - fee_rate)⌉
where D = FEE_RATE_DENOMINATOR.
"""

from typing import NamedTuple

from ..constants import FEE_RATE_DENOMINATOR
from .fixed_point_math import checked_sub, mul_div_ceil, mul_div_floor
from .sqrt_price_math import (
    get_delta_down_from_output,
    get_delta_up_from_input,
    get_next_sqrt_price_from_input,
    get_next_sqrt_price_from_output,
)


class SwapStepResult(NamedTuple):
    """Result of one swap step"""
    amount_in: int  # input consumed by the step, excluding fee
    amount_out: int  # output produced by the step
    next_sqrt_price: int  # sqrtPriceX64 after the step
    fee_amount: int  # fee charged on the step's input


def compute_swap_step(
    current_sqrt_price: int,
    target_sqrt_price: int,
    liquidity: int,
    amount: int,
    fee_rate: int,
    by_amount_in: bool
) -> SwapStepResult:
    """Swap within [current_sqrt_price, target_sqrt_price] at constant liquidity

    If the step can absorb the whole remaining amount, the landing price is
    solved inside the interval; otherwise the step runs to the target.

    Args:
        current_sqrt_price: current sqrtPriceX64
        target_sqrt_price: sqrtPriceX64 the step may move to, not past
        liquidity: active liquidity
        amount: remaining input (by_amount_in) or output amount
        fee_rate: fee rate over FEE_RATE_DENOMINATOR
        by_amount_in: True for exact input, False for exact output

    Returns:
        SwapStepResult
    """
    if liquidity == 0:
        return SwapStepResult(
            amount_in=0,
            amount_out=0,
            next_sqrt_price=target_sqrt_price,
            fee_amount=0,
        )

    a2b = current_sqrt_price >= target_sqrt_price

    if by_amount_in:
        amount_remain = mul_div_floor(
            amount,
            checked_sub(FEE_RATE_DENOMINATOR, fee_rate),
            FEE_RATE_DENOMINATOR,
            64,
        )
        max_amount_in = get_delta_up_from_input(
            current_sqrt_price, target_sqrt_price, liquidity, a2b
        )
        if max_amount_in > amount_remain:
            amount_in = amount_remain
            fee_amount = checked_sub(amount, amount_remain)
            next_sqrt_price = get_next_sqrt_price_from_input(
                current_sqrt_price, liquidity, amount_remain, a2b
            )
        else:
            amount_in = max_amount_in
            fee_amount = mul_div_ceil(
                amount_in, fee_rate, FEE_RATE_DENOMINATOR - fee_rate, 64
            )
            next_sqrt_price = target_sqrt_price
        amount_out = get_delta_down_from_output(
            current_sqrt_price, next_sqrt_price, liquidity, a2b
        )
    else:
        max_amount_out = get_delta_down_from_output(
            current_sqrt_price, target_sqrt_price, liquidity, a2b
        )
        if max_amount_out > amount:
            amount_out = amount
            next_sqrt_price = get_next_sqrt_price_from_output(
                current_sqrt_price, liquidity, amount, a2b
            )
        else:
            amount_out = max_amount_out
            next_sqrt_price = target_sqrt_price
        amount_in = get_delta_up_from_input(
            current_sqrt_price, next_sqrt_price, liquidity, a2b
        )
        fee_amount = mul_div_ceil(
            amount_in, fee_rate, FEE_RATE_DENOMINATOR - fee_rate, 64
        )

    return SwapStepResult(
        amount_in=amount_in,
        amount_out=amount_out,
        next_sqrt_price=next_sqrt_price,
        fee_amount=fee_amount,
    )
