"""
CLMM data types

Snapshots of pool, tick and position state as returned by chain RPC, and
the results computed from them. Every numeric field is an int for on-chain
precision; chain JSON encodes u64/u128 values as decimal strings, which
``from_dict`` parses.

Inputs are frozen: one snapshot is built per call and never mutated.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import NamedTuple, Optional, Tuple

from ..constants import (
    FEE_RATE_DENOMINATOR,
    I32_MAX,
    I32_MIN,
    I128_MAX,
    I128_MIN,
    REWARDER_NUM,
    U128_MAX,
)
from ..math.tick_math import sqrt_price_x64_to_tick_index, tick_index_to_sqrt_price_x64


def _int_tuple(values) -> Tuple[int, ...]:
    return tuple(int(v) for v in values)


@dataclass(frozen=True)
class RewarderInfo:
    """Pool rewarder

    - coin_type: reward token type
    - emissions_per_second: tokens emitted per second (Q64.64)
    - growth_global: reward growth per unit liquidity (Q64.64, wraps at 2^128)
    """
    coin_type: str
    emissions_per_second: int
    growth_global: int

    @classmethod
    def from_dict(cls, data: dict) -> "RewarderInfo":
        return cls(
            coin_type=data.get("coinAddress", data.get("coin_type", "")),
            emissions_per_second=int(data.get("emissions_per_second", 0)),
            growth_global=int(data.get("growth_global", 0)),
        )


@dataclass(frozen=True)
class PoolSnapshot:
    """Pool global state

    - liquidity: active liquidity at the current price (L)
    - current_sqrt_price: current √price (Q64.64)
    - fee_rate: swap fee over FEE_RATE_DENOMINATOR (3000 = 0.3%)
    - tick_spacing: spacing between initializable ticks
    - current_tick_index: pool's current tick (i_c); derived from the sqrt
      price when the snapshot does not carry it
    - fee_growth_global_a/b: fee growth per unit liquidity (Q64.64)
    - rewarder_infos: up to three rewarders
    - rewarder_last_updated_time: last rewarder refresh (unix seconds)
    """
    liquidity: int
    current_sqrt_price: int
    fee_rate: int
    tick_spacing: int
    current_tick_index: Optional[int] = None
    fee_growth_global_a: int = 0
    fee_growth_global_b: int = 0
    rewarder_infos: Tuple[RewarderInfo, ...] = ()
    rewarder_last_updated_time: int = 0
    pool_address: str = ""

    def __post_init__(self):
        if not 0 <= self.liquidity <= U128_MAX:
            raise ValueError(f"Pool liquidity out of u128 range: {self.liquidity}")
        if not 0 <= self.fee_rate < FEE_RATE_DENOMINATOR:
            raise ValueError(f"Fee rate out of range: {self.fee_rate}")
        if self.tick_spacing <= 0:
            raise ValueError(f"Tick spacing must be positive: {self.tick_spacing}")
        if len(self.rewarder_infos) > REWARDER_NUM:
            raise ValueError(
                f"A pool has at most {REWARDER_NUM} rewarders, got {len(self.rewarder_infos)}"
            )

    @property
    def tick_index(self) -> int:
        """Current tick (i_c)"""
        if self.current_tick_index is not None:
            return self.current_tick_index
        return sqrt_price_x64_to_tick_index(self.current_sqrt_price)

    @property
    def rewarder_growth_global(self) -> Tuple[int, ...]:
        return tuple(r.growth_global for r in self.rewarder_infos)

    @classmethod
    def from_dict(cls, data: dict) -> "PoolSnapshot":
        current_tick = data.get("current_tick_index")
        return cls(
            liquidity=int(data["liquidity"]),
            current_sqrt_price=int(data["current_sqrt_price"]),
            fee_rate=int(data["fee_rate"]),
            tick_spacing=int(data["tickSpacing"]),
            current_tick_index=int(current_tick) if current_tick is not None else None,
            fee_growth_global_a=int(data.get("fee_growth_global_a", 0)),
            fee_growth_global_b=int(data.get("fee_growth_global_b", 0)),
            rewarder_infos=tuple(
                RewarderInfo.from_dict(r) for r in data.get("rewarder_infos", [])
            ),
            rewarder_last_updated_time=int(data.get("rewarder_last_updated_time", 0)),
            pool_address=data.get("poolAddress", ""),
        )


@dataclass(frozen=True)
class Tick:
    """Tick-indexed state

    - index: tick index
    - liquidity_net: signed liquidity change when crossing upward (ΔL)
    - fee_growth_outside_a/b: fee growth on the far side of the tick (g_o)
    - rewarders_growth_outside: reward growth on the far side, per rewarder
    """
    index: int
    liquidity_net: int
    fee_growth_outside_a: int = 0
    fee_growth_outside_b: int = 0
    rewarders_growth_outside: Tuple[int, ...] = ()

    def __post_init__(self):
        if not I32_MIN <= self.index <= I32_MAX:
            raise ValueError(f"Tick index out of i32 range: {self.index}")
        if not I128_MIN <= self.liquidity_net <= I128_MAX:
            raise ValueError(f"Tick liquidity_net out of i128 range: {self.liquidity_net}")

    @property
    def sqrt_price(self) -> int:
        return tick_index_to_sqrt_price_x64(self.index)

    @classmethod
    def from_dict(cls, data: dict) -> "Tick":
        return cls(
            index=int(data["index"]),
            liquidity_net=int(data.get("liquidityNet", 0)),
            fee_growth_outside_a=int(data.get("feeGrowthOutsideA", 0)),
            fee_growth_outside_b=int(data.get("feeGrowthOutsideB", 0)),
            rewarders_growth_outside=_int_tuple(data.get("rewardersGrowthOutside", [])),
        )


@dataclass(frozen=True)
class Position:
    """Position-indexed state

    - liquidity: position liquidity (l)
    - tick_lower_index / tick_upper_index: range bounds (i_l, i_u)
    - fee_growth_inside_a/b: growth inside at the last update (g_r(t_0))
    - fee_owed_a/b: fees accrued up to the last update
    - reward_growth_inside: reward growth inside at the last update, per rewarder
    - reward_amount_owed: rewards accrued up to the last update, per rewarder
    """
    liquidity: int
    tick_lower_index: int
    tick_upper_index: int
    fee_growth_inside_a: int = 0
    fee_growth_inside_b: int = 0
    fee_owed_a: int = 0
    fee_owed_b: int = 0
    reward_growth_inside: Tuple[int, ...] = (0,) * REWARDER_NUM
    reward_amount_owed: Tuple[int, ...] = (0,) * REWARDER_NUM
    pos_object_id: str = ""
    pool_id: str = ""

    def __post_init__(self):
        if not 0 <= self.liquidity <= U128_MAX:
            raise ValueError(f"Position liquidity out of u128 range: {self.liquidity}")
        for tick_index in (self.tick_lower_index, self.tick_upper_index):
            if not I32_MIN <= tick_index <= I32_MAX:
                raise ValueError(f"Position tick index out of i32 range: {tick_index}")

    @classmethod
    def from_dict(cls, data: dict) -> "Position":
        return cls(
            liquidity=int(data["liquidity"]),
            tick_lower_index=int(data["tick_lower_index"]),
            tick_upper_index=int(data["tick_upper_index"]),
            fee_growth_inside_a=int(data.get("fee_growth_inside_a", 0)),
            fee_growth_inside_b=int(data.get("fee_growth_inside_b", 0)),
            fee_owed_a=int(data.get("fee_owed_a", 0)),
            fee_owed_b=int(data.get("fee_owed_b", 0)),
            reward_growth_inside=_int_tuple(
                [data.get(f"reward_growth_inside_{i}", 0) for i in range(REWARDER_NUM)]
            ),
            reward_amount_owed=_int_tuple(
                [data.get(f"reward_amount_owed_{i}", 0) for i in range(REWARDER_NUM)]
            ),
            pos_object_id=data.get("pos_object_id", ""),
            pool_id=data.get("pool", ""),
        )


class SwapResult(NamedTuple):
    """Simulated swap outcome"""
    amount_in: int  # total paid in, fee included
    amount_out: int
    fee_amount: int
    next_sqrt_price: int
    cross_tick_count: int
    is_exceed_limit: bool  # partial fill: price limit or cross-tick cap reached


class SwapQuote(NamedTuple):
    """Swap preview with display-price impact"""
    estimated_amount_in: int
    estimated_amount_out: int
    estimated_end_sqrt_price: int
    estimated_fee_amount: int
    is_exceed: bool
    amount: int
    a2b: bool
    by_amount_in: bool
    price_impact_pct: Decimal


class FeeOwed(NamedTuple):
    """Fees owed to a position (token units)"""
    fee_owed_a: int
    fee_owed_b: int


class RewardOwed(NamedTuple):
    """Rewards owed to a position for one rewarder (token units)"""
    rewarder_index: int
    coin_type: str
    amount_owed: int


PositionWithTicks = Tuple[Position, Tick, Tick]
