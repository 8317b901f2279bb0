"""
Data layer for the CLMM simulator

Pool, tick and position snapshots plus result types
"""

from .types import (
    RewarderInfo,
    PoolSnapshot,
    Tick,
    Position,
    SwapResult,
    SwapQuote,
    FeeOwed,
    RewardOwed,
)
