"""
Math layer for the CLMM simulator

On-chain precision math:
- fixed_point_math: checked mul/div, shifts, wrapping subtraction
- tick_math: tick ↔ sqrtPriceX64, display prices
- sqrt_price_math: amount deltas and next sqrt price
- swap_math: one constant-liquidity swap step
- fee_math: growth inside range and owed amounts
- rewarder_math: reward growth emission
"""

from .fixed_point_math import (
    mul_div_floor,
    mul_div_ceil,
    mul_shift_right,
    wrapping_sub,
    clamp_implausible_delta,
)
from .tick_math import (
    tick_index_to_sqrt_price_x64,
    sqrt_price_x64_to_tick_index,
    sqrt_price_x64_to_price,
    price_to_sqrt_price_x64,
    default_sqrt_price_limit,
)
from .swap_math import (
    SwapStepResult,
    compute_swap_step,
)
from .fee_math import (
    growth_inside,
    owed_delta,
)
from .rewarder_math import (
    next_growth_global,
    update_rewarder_growth_globals,
    emissions_per_day,
)
