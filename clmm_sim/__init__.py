"""
CLMM Swap & Accrual Simulator

Off-chain simulator for concentrated-liquidity pools with on-chain precision:
swap outcomes over Q64.64 sqrt prices and the fees/rewards a position has
accrued since its last update.
"""

__version__ = "0.1.0"

from .constants import Q64, MIN_TICK, MAX_TICK, MIN_SQRT_PRICE, MAX_SQRT_PRICE, FEE_RATE_DENOMINATOR
from .errors import (
    ClmmError,
    InvalidAmountError,
    PriceOutOfBoundsError,
    MalformedTickDataError,
    MathOverflowError,
)
from .data.types import (
    RewarderInfo,
    PoolSnapshot,
    Tick,
    Position,
    SwapResult,
    SwapQuote,
    FeeOwed,
    RewardOwed,
)
from .simulator import simulate_swap, compute_swap, calculate_rates
from .accrual import (
    compute_fee_owed,
    compute_rewards_owed,
    estimate_rewards_owed,
    aggregate_fees_owed,
    aggregate_rewards_owed,
)
