"""
Configuration settings for the CLMM simulator

Loads environment variables (and a .env file, if present) and provides
the defaults used when callers do not pass explicit overrides.
"""
import os

from dotenv import load_dotenv

from .constants import (
    DEFAULT_MAX_CROSS_TICK_COUNT,
    DEFAULT_REWARDER_TIME_BUFFER,
    DEFAULT_DECIMAL_PRECISION,
)

# Load environment variables from .env file
load_dotenv()


class Settings:
    """Simulator settings"""

    # Swap: ticks crossed before a swap is reported as exceeding its limit
    MAX_CROSS_TICK_COUNT: int = int(
        os.getenv("CLMM_MAX_CROSS_TICK_COUNT", DEFAULT_MAX_CROSS_TICK_COUNT)
    )

    # Rewarder: seconds added to the elapsed time when refreshing growth
    REWARDER_TIME_BUFFER: int = int(
        os.getenv("CLMM_REWARDER_TIME_BUFFER", DEFAULT_REWARDER_TIME_BUFFER)
    )

    # Display prices: significant digits for decimal conversion
    DECIMAL_PRECISION: int = int(
        os.getenv("CLMM_DECIMAL_PRECISION", DEFAULT_DECIMAL_PRECISION)
    )


# Create global settings instance
settings = Settings()


# Validate critical settings on import
if settings.MAX_CROSS_TICK_COUNT < 1:
    raise ValueError(
        f"CLMM_MAX_CROSS_TICK_COUNT must be positive, got {settings.MAX_CROSS_TICK_COUNT}"
    )
if settings.DECIMAL_PRECISION < 28:
    raise ValueError(
        f"CLMM_DECIMAL_PRECISION must be at least 28, got {settings.DECIMAL_PRECISION}"
    )
