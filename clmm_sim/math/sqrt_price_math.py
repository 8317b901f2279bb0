"""
Sqrt Price Math - amount deltas and next sqrtPriceX64

Prices are stored as sqrtPriceX64 = sqrt(price) * 2^64. Within one tick
range liquidity is constant, so token amounts are linear in sqrt price
(token B) or in its reciprocal (token A).

Core formulas:
    Δb = L × |√P_b - √P_a|
    Δa = L × |1/√P_a - 1/√P_b| = L × |√P_b - √P_a| / (√P_a × √P_b)

Rounding is chosen per call site: input owed to the pool rounds up,
output paid out rounds down.
"""

from ..constants import Q64
from ..errors import MathOverflowError
from .fixed_point_math import checked_mul, div_round, mul_shift_left
from .tick_math import check_sqrt_price


def get_delta_up_from_input(
    current_sqrt_price: int,
    target_sqrt_price: int,
    liquidity: int,
    a2b: bool
) -> int:
    """Input amount needed to move the price from current to target (ceil)

    Args:
        current_sqrt_price: current sqrtPriceX64
        target_sqrt_price: target sqrtPriceX64
        liquidity: active liquidity
        a2b: True if token A is the input (price moves down)

    Returns:
        token A (a2b) or token B amount, rounded up
    """
    sqrt_price_diff = abs(current_sqrt_price - target_sqrt_price)
    if liquidity <= 0 or sqrt_price_diff == 0:
        return 0

    if a2b:
        numerator = (liquidity * sqrt_price_diff) << 64
        denominator = target_sqrt_price * current_sqrt_price
        return div_round(numerator, denominator, True)

    product = liquidity * sqrt_price_diff
    return div_round(product, Q64, True)


def get_delta_down_from_output(
    current_sqrt_price: int,
    target_sqrt_price: int,
    liquidity: int,
    a2b: bool
) -> int:
    """Output amount released when the price moves from current to target (floor)

    Args:
        current_sqrt_price: current sqrtPriceX64
        target_sqrt_price: target sqrtPriceX64
        liquidity: active liquidity
        a2b: True if token B is the output (price moves down)

    Returns:
        token B (a2b) or token A amount, rounded down
    """
    sqrt_price_diff = abs(current_sqrt_price - target_sqrt_price)
    if liquidity <= 0 or sqrt_price_diff == 0:
        return 0

    if a2b:
        return (liquidity * sqrt_price_diff) >> 64

    numerator = (liquidity * sqrt_price_diff) << 64
    denominator = target_sqrt_price * current_sqrt_price
    return numerator // denominator


def get_next_sqrt_price_a_up(
    sqrt_price: int,
    liquidity: int,
    amount: int,
    by_amount_in: bool
) -> int:
    """Next sqrtPriceX64 after adding (or removing) token A, rounded up

    √P' = L·√P / (L ± Δa·√P)

    Args:
        sqrt_price: current sqrtPriceX64
        liquidity: active liquidity
        amount: token A amount
        by_amount_in: True if token A is added, False if removed

    Returns:
        next sqrtPriceX64

    Raises:
        MathOverflowError: removing at least as much token A as the range holds
        PriceOutOfBoundsError: result outside the supported price range
    """
    if amount == 0:
        return sqrt_price

    numerator = mul_shift_left(sqrt_price, liquidity, 64)
    liquidity_shl_64 = liquidity << 64
    product = checked_mul(sqrt_price, amount, 256)

    if by_amount_in:
        next_sqrt_price = div_round(numerator, liquidity_shl_64 + product, True)
    else:
        if liquidity_shl_64 <= product:
            raise MathOverflowError(
                "get_next_sqrt_price_a_up: cannot remove more token A than the liquidity holds"
            )
        next_sqrt_price = div_round(numerator, liquidity_shl_64 - product, True)

    return check_sqrt_price(next_sqrt_price)


def get_next_sqrt_price_b_down(
    sqrt_price: int,
    liquidity: int,
    amount: int,
    by_amount_in: bool
) -> int:
    """Next sqrtPriceX64 after adding (or removing) token B, rounded down

    √P' = √P ± Δb / L

    Args:
        sqrt_price: current sqrtPriceX64
        liquidity: active liquidity
        amount: token B amount
        by_amount_in: True if token B is added, False if removed

    Returns:
        next sqrtPriceX64

    Raises:
        PriceOutOfBoundsError: result outside the supported price range
    """
    delta_sqrt_price = div_round(amount << 64, liquidity, not by_amount_in)
    if by_amount_in:
        next_sqrt_price = sqrt_price + delta_sqrt_price
    else:
        next_sqrt_price = sqrt_price - delta_sqrt_price
    return check_sqrt_price(next_sqrt_price)


def get_next_sqrt_price_from_input(
    sqrt_price: int,
    liquidity: int,
    amount: int,
    a2b: bool
) -> int:
    """Next sqrtPriceX64 after swapping ``amount`` in"""
    if a2b:
        return get_next_sqrt_price_a_up(sqrt_price, liquidity, amount, True)
    return get_next_sqrt_price_b_down(sqrt_price, liquidity, amount, True)


def get_next_sqrt_price_from_output(
    sqrt_price: int,
    liquidity: int,
    amount: int,
    a2b: bool
) -> int:
    """Next sqrtPriceX64 after swapping ``amount`` out"""
    if a2b:
        return get_next_sqrt_price_b_down(sqrt_price, liquidity, amount, False)
    return get_next_sqrt_price_a_up(sqrt_price, liquidity, amount, False)
