"""
CLMM constants

Fixed-point and range constants shared by the simulator:
- Q64: sqrt price encoding (2^64)
- FEE_RATE_DENOMINATOR: fee rates are parts per million
- MIN_TICK / MAX_TICK and the matching sqrt price bounds
- IMPLAUSIBLE_GROWTH_DELTA: accrual clamp threshold
"""

# Fixed-point encoding
Q64: int = 2 ** 64
Q128: int = 2 ** 128

U64_MAX: int = 2 ** 64 - 1
U128_MAX: int = 2 ** 128 - 1
U256_MAX: int = 2 ** 256 - 1

# Signed widths: tick indexes are i32, liquidity_net is i128
I32_MIN: int = -2 ** 31
I32_MAX: int = 2 ** 31 - 1
I128_MIN: int = -2 ** 127
I128_MAX: int = 2 ** 127 - 1

# Tick range
MIN_TICK: int = -443636
MAX_TICK: int = 443636

# sqrt price at MIN_TICK / MAX_TICK (Q64.64)
MIN_SQRT_PRICE: int = 4295048016
MAX_SQRT_PRICE: int = 79226673515401279992447579055

# fee_rate / FEE_RATE_DENOMINATOR
# 100 = 0.01%, 500 = 0.05%, 2500 = 0.25%, 10000 = 1.00%
FEE_RATE_DENOMINATOR: int = 1_000_000

# Maximum rewarders per pool
REWARDER_NUM: int = 3

# Wrapped growth deltas above this are treated as a unit delta of 1
IMPLAUSIBLE_GROWTH_DELTA: int = 3402823669209384634633745948738404

DEFAULT_MAX_CROSS_TICK_COUNT: int = 40
DEFAULT_REWARDER_TIME_BUFFER: int = 15
DEFAULT_DECIMAL_PRECISION: int = 80

SECONDS_PER_DAY: int = 60 * 60 * 24
