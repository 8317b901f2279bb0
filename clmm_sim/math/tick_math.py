"""
Tick Math - Tick ↔ sqrt price conversion

Tick math for Q64.64 concentrated-liquidity pools, reproducing the
on-chain integer implementation bit for bit.

Core formulas:
    price = 1.0001^tick
    tick = log₁.₀₀₀₁(price)
    sqrtPriceX64 = sqrt(price) * 2^64
"""

from decimal import Decimal, localcontext
from typing import Union

from ..config import settings
from ..constants import (
    Q64,
    MIN_TICK,
    MAX_TICK,
    MIN_SQRT_PRICE,
    MAX_SQRT_PRICE,
)
from ..errors import PriceOutOfBoundsError


# log_sqrt(1.0001)(2) in Q32
LOG_B_2_X32: int = 59543866431248
# Error bracket for the approximated log
LOG_B_P_ERR_MARGIN_LOWER_X64: int = 184467440737095516
LOG_B_P_ERR_MARGIN_UPPER_X64: int = 15793534762490258745
# Fractional bits computed for log2
BIT_PRECISION: int = 14


def _tick_index_to_sqrt_price_positive(tick: int) -> int:
    # Q96 factors sqrt(1.0001)^(2^i), reduced to Q64 at the end
    ratio = 79232123823359799118286999567 if tick & 0x1 \
        else 79228162514264337593543950336

    if tick & 0x2:
        ratio = (ratio * 79236085330515764027303304731) >> 96
    if tick & 0x4:
        ratio = (ratio * 79244008939048815603706035061) >> 96
    if tick & 0x8:
        ratio = (ratio * 79259858533276714757314932305) >> 96
    if tick & 0x10:
        ratio = (ratio * 79291567232598584799939703904) >> 96
    if tick & 0x20:
        ratio = (ratio * 79355022692464371645785046466) >> 96
    if tick & 0x40:
        ratio = (ratio * 79482085999252804386437311141) >> 96
    if tick & 0x80:
        ratio = (ratio * 79736823300114093921829183326) >> 96
    if tick & 0x100:
        ratio = (ratio * 80248749790819932309965073892) >> 96
    if tick & 0x200:
        ratio = (ratio * 81282483887344747381513967011) >> 96
    if tick & 0x400:
        ratio = (ratio * 83390072131320151908154831281) >> 96
    if tick & 0x800:
        ratio = (ratio * 87770609709833776024991924138) >> 96
    if tick & 0x1000:
        ratio = (ratio * 97234110755111693312479820773) >> 96
    if tick & 0x2000:
        ratio = (ratio * 119332217159966728226237229890) >> 96
    if tick & 0x4000:
        ratio = (ratio * 179736315981702064433883588727) >> 96
    if tick & 0x8000:
        ratio = (ratio * 407748233172238350107850275304) >> 96
    if tick & 0x10000:
        ratio = (ratio * 2098478828474011932436660412517) >> 96
    if tick & 0x20000:
        ratio = (ratio * 55581415166113811149459800483533) >> 96
    if tick & 0x40000:
        ratio = (ratio * 38992368544603139932233054999993551) >> 96

    return ratio >> 32


def _tick_index_to_sqrt_price_negative(tick_index: int) -> int:
    # Q64 factors 1 / sqrt(1.0001)^(2^i)
    tick = abs(tick_index)
    ratio = 18445821805675392311 if tick & 0x1 \
        else 18446744073709551616

    if tick & 0x2:
        ratio = (ratio * 18444899583751176498) >> 64
    if tick & 0x4:
        ratio = (ratio * 18443055278223354162) >> 64
    if tick & 0x8:
        ratio = (ratio * 18439367220385604838) >> 64
    if tick & 0x10:
        ratio = (ratio * 18431993317065449817) >> 64
    if tick & 0x20:
        ratio = (ratio * 18417254355718160513) >> 64
    if tick & 0x40:
        ratio = (ratio * 18387811781193591352) >> 64
    if tick & 0x80:
        ratio = (ratio * 18329067761203520168) >> 64
    if tick & 0x100:
        ratio = (ratio * 18212142134806087854) >> 64
    if tick & 0x200:
        ratio = (ratio * 17980523815641551639) >> 64
    if tick & 0x400:
        ratio = (ratio * 17526086738831147013) >> 64
    if tick & 0x800:
        ratio = (ratio * 16651378430235024244) >> 64
    if tick & 0x1000:
        ratio = (ratio * 15030750278693429944) >> 64
    if tick & 0x2000:
        ratio = (ratio * 12247334978882834399) >> 64
    if tick & 0x4000:
        ratio = (ratio * 8131365268884726200) >> 64
    if tick & 0x8000:
        ratio = (ratio * 3584323654723342297) >> 64
    if tick & 0x10000:
        ratio = (ratio * 696457651847595233) >> 64
    if tick & 0x20000:
        ratio = (ratio * 26294789957452057) >> 64
    if tick & 0x40000:
        ratio = (ratio * 37481735321082) >> 64

    return ratio


def tick_index_to_sqrt_price_x64(tick_index: int) -> int:
    """Tick index to sqrtPriceX64

    Binary exponentiation over a table of sqrt(1.0001)^(2^i) factors,
    integer-only so the result matches the contract exactly.

    Args:
        tick_index: tick index (-443636 ~ 443636)

    Returns:
        sqrtPriceX64 (Q64.64)

    Raises:
        ValueError: tick index out of range
    """
    if tick_index < MIN_TICK or tick_index > MAX_TICK:
        raise ValueError(
            f"Tick index out of range: {tick_index} (range: {MIN_TICK} ~ {MAX_TICK})"
        )
    if tick_index > 0:
        return _tick_index_to_sqrt_price_positive(tick_index)
    return _tick_index_to_sqrt_price_negative(tick_index)


def sqrt_price_x64_to_tick_index(sqrt_price_x64: int) -> int:
    """sqrtPriceX64 to tick index

    Returns the greatest tick whose sqrt price is <= ``sqrt_price_x64``
    (floor toward negative infinity).

    Args:
        sqrt_price_x64: sqrtPriceX64 (Q64.64)

    Returns:
        tick index

    Raises:
        PriceOutOfBoundsError: sqrt price outside [MIN_SQRT_PRICE, MAX_SQRT_PRICE]
    """
    check_sqrt_price(sqrt_price_x64)

    msb = sqrt_price_x64.bit_length() - 1
    log2p_integer_x32 = (msb - 64) << 32

    # log2 fraction by repeated squaring
    bit = 0x8000000000000000
    precision = 0
    log2p_fraction_x64 = 0
    r = sqrt_price_x64 >> (msb - 63) if msb >= 64 else sqrt_price_x64 << (63 - msb)
    while bit > 0 and precision < BIT_PRECISION:
        r *= r
        r_more_than_two = r >> 127
        r >>= 63 + r_more_than_two
        log2p_fraction_x64 += bit * r_more_than_two
        bit >>= 1
        precision += 1

    log2p_x32 = log2p_integer_x32 + (log2p_fraction_x64 >> 32)
    logbp_x64 = log2p_x32 * LOG_B_2_X32

    # >> floors on negative values, matching a signed shift
    tick_low = (logbp_x64 - LOG_B_P_ERR_MARGIN_LOWER_X64) >> 64
    tick_high = (logbp_x64 + LOG_B_P_ERR_MARGIN_UPPER_X64) >> 64

    if tick_low == tick_high:
        return tick_low

    if tick_index_to_sqrt_price_x64(tick_high) <= sqrt_price_x64:
        return tick_high
    return tick_low


def is_valid_sqrt_price(sqrt_price_x64: int) -> bool:
    """True if the sqrt price lies within [MIN_SQRT_PRICE, MAX_SQRT_PRICE]"""
    return MIN_SQRT_PRICE <= sqrt_price_x64 <= MAX_SQRT_PRICE


def check_sqrt_price(sqrt_price_x64: int) -> int:
    """Reject (never clamp) a sqrt price outside the supported range"""
    if not is_valid_sqrt_price(sqrt_price_x64):
        raise PriceOutOfBoundsError(
            f"sqrtPriceX64 out of range: {sqrt_price_x64} "
            f"(range: {MIN_SQRT_PRICE} ~ {MAX_SQRT_PRICE})"
        )
    return sqrt_price_x64


def default_sqrt_price_limit(a2b: bool) -> int:
    """Hard price boundary a swap in this direction may never cross"""
    return MIN_SQRT_PRICE if a2b else MAX_SQRT_PRICE


def sqrt_price_x64_to_price(
    sqrt_price_x64: int,
    decimals_a: int,
    decimals_b: int
) -> Decimal:
    """sqrtPriceX64 to a human-readable price (token B per token A)

    price = (sqrtPriceX64 / 2^64)^2 × 10^(decimals_a - decimals_b)

    Decimal arithmetic throughout; floats drift at extreme ticks.

    Args:
        sqrt_price_x64: sqrtPriceX64
        decimals_a: token A decimals
        decimals_b: token B decimals

    Returns:
        price as Decimal
    """
    with localcontext() as ctx:
        ctx.prec = settings.DECIMAL_PRECISION
        price = Decimal(sqrt_price_x64 * sqrt_price_x64) / Decimal(Q64 * Q64)
        return price.scaleb(decimals_a - decimals_b)


def price_to_sqrt_price_x64(
    price: Union[Decimal, int, str],
    decimals_a: int,
    decimals_b: int
) -> int:
    """Human-readable price to sqrtPriceX64 (floored)

    sqrtPriceX64 = sqrt(price × 10^(decimals_b - decimals_a)) × 2^64

    Raises:
        ValueError: price is not positive
    """
    price = Decimal(price)
    if price <= 0:
        raise ValueError("Price must be positive")

    with localcontext() as ctx:
        ctx.prec = settings.DECIMAL_PRECISION
        sqrt_price = price.scaleb(decimals_b - decimals_a).sqrt()
        return int(sqrt_price * Q64)


def tick_index_to_price(tick_index: int, decimals_a: int, decimals_b: int) -> Decimal:
    """Tick index to a human-readable price"""
    return sqrt_price_x64_to_price(
        tick_index_to_sqrt_price_x64(tick_index), decimals_a, decimals_b
    )


def price_to_tick_index(
    price: Union[Decimal, int, str],
    decimals_a: int,
    decimals_b: int
) -> int:
    """Human-readable price to the tick at or below it"""
    return sqrt_price_x64_to_tick_index(
        price_to_sqrt_price_x64(price, decimals_a, decimals_b)
    )
