"""
Simulator errors

Input errors subclass ValueError and arithmetic failures subclass
OverflowError, so callers can catch either the builtin or ClmmError.
A swap that cannot be fully filled is not an error: see
SwapResult.is_exceed_limit.
"""


class ClmmError(Exception):
    """CLMM simulation error"""
    pass


class InvalidAmountError(ClmmError, ValueError):
    """Swap amount is not a positive integer"""
    pass


class PriceOutOfBoundsError(ClmmError, ValueError):
    """sqrt price outside [MIN_SQRT_PRICE, MAX_SQRT_PRICE]"""
    pass


class MalformedTickDataError(ClmmError, ValueError):
    """Tick sequence is unordered, duplicated or out of range"""
    pass


class MathOverflowError(ClmmError, OverflowError):
    """Fixed-point result does not fit the target width"""
    pass
