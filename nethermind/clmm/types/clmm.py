from dataclasses import dataclass, field
from enum import IntEnum, IntFlag
from typing import Any

from eth_typing import ChecksumAddress

from nethermind.clmm.math.shared import REWARD_NUM, TICK_ARRAY_SIZE

# Disabling naming check that wants enums to use UPPER_CASE
# pylint: disable=invalid-name


class PoolStatus(IntFlag):
    """
    Set of operation categories that are currently enabled on a pool.  Each mutating pool operation checks its
    flag and raises NotApproved if it is missing, allowing selective pausing without halting the whole pool.
    """

    open_position_or_increase_liquidity = 1
    decrease_liquidity = 2
    collect_fee = 4
    collect_reward = 8
    swap = 16

    @classmethod
    def all(cls) -> "PoolStatus":
        """Returns a status with every operation enabled"""
        status = cls(0)
        for member in cls:
            status |= member
        return status


class RewardState(IntEnum):
    """Lifecycle of a reward stream"""

    uninitialized = 0
    initialized = 1
    opening = 2
    ended = 3


@dataclass
class AmmConfig:
    """Fee tier & tick spacing configuration shared by every pool created with it"""

    index: int
    owner: ChecksumAddress
    """Admin address that can change pool status, and collect protocol fees"""
    trade_fee_rate: int
    """Swap fee charged to traders, denominated in FEE_RATE_DENOMINATOR (1_000_000 == 100%)"""
    protocol_fee_rate: int
    """Share of the trade fee owed to the protocol, denominated in FEE_RATE_DENOMINATOR"""
    fund_fee_rate: int
    """Share of the trade fee owed to the fund, denominated in FEE_RATE_DENOMINATOR"""
    tick_spacing: int
    fund_owner: ChecksumAddress


@dataclass
class RewardInfo:
    """Emission parameters and global growth accumulator of one reward token"""

    reward_state: RewardState
    open_time: int
    end_time: int
    last_update_time: int
    emissions_per_second_x64: int
    """Q64.64 number of reward tokens emitted per second"""
    reward_total_emissioned: int
    reward_claimed: int
    token_mint: ChecksumAddress | None
    token_vault: ChecksumAddress | None
    authority: ChecksumAddress | None
    reward_growth_global_x64: int
    """Q64.64 rewards per unit of liquidity.  Wraps on overflow, and is only consumed as differences"""

    @classmethod
    def uninitialized(cls) -> "RewardInfo":
        """Returns an empty reward slot"""
        return RewardInfo(
            reward_state=RewardState.uninitialized,
            open_time=0,
            end_time=0,
            last_update_time=0,
            emissions_per_second_x64=0,
            reward_total_emissioned=0,
            reward_claimed=0,
            token_mint=None,
            token_vault=None,
            authority=None,
            reward_growth_global_x64=0,
        )

    def initialized(self) -> bool:
        """Whether a reward token has been assigned to this slot"""
        return self.reward_state != RewardState.uninitialized

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RewardInfo":
        return RewardInfo(**{**data, "reward_state": RewardState(data["reward_state"])})


@dataclass
class PoolState:  # pylint: disable=too-many-instance-attributes
    """Global state of a single pool"""

    amm_config: ChecksumAddress
    owner: ChecksumAddress
    """Creator of the pool"""
    token_mint_0: ChecksumAddress
    token_mint_1: ChecksumAddress
    token_vault_0: ChecksumAddress
    token_vault_1: ChecksumAddress
    observation_key: ChecksumAddress
    mint_decimals_0: int
    mint_decimals_1: int
    tick_spacing: int

    sqrt_price_x64: int
    """
        Current exchange rate between token_0 and token_1.

        This value is the square root of the token_1 / token_0 ratio as a fixed point Q64.64 Number
    """
    tick_current: int
    """
        Current Tick of the Pool.  The price at the current tick is always less than or equal to the current price,
        and the price at tick_current + 1 is always greater
    """
    liquidity: int = 0
    """Active liquidity, the sum of the net liquidity of every initialized tick at or below tick_current"""

    fee_growth_global_0_x64: int = 0
    fee_growth_global_1_x64: int = 0
    protocol_fees_token_0: int = 0
    protocol_fees_token_1: int = 0
    fund_fees_token_0: int = 0
    fund_fees_token_1: int = 0

    swap_in_amount_token_0: int = 0
    swap_out_amount_token_0: int = 0
    swap_in_amount_token_1: int = 0
    swap_out_amount_token_1: int = 0

    status: PoolStatus = PoolStatus.all()
    reward_infos: list[RewardInfo] = field(
        default_factory=lambda: [RewardInfo.uninitialized() for _ in range(REWARD_NUM)]
    )

    tick_array_start_indexes: list[int] = field(default_factory=list)
    """Sorted start indexes of every tick array containing at least one initialized tick"""

    open_time: int = 0
    recent_epoch: int = 0

    def is_enabled(self, operation: PoolStatus) -> bool:
        """Whether an operation category is enabled on the pool"""
        return operation in self.status

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PoolState":
        return PoolState(
            **{
                **data,
                "status": PoolStatus(data["status"]),
                "reward_infos": [RewardInfo.from_dict(info) for info in data["reward_infos"]],
            }
        )


@dataclass
class TickState:
    """Liquidity and growth snapshots of a single tick"""

    tick: int
    liquidity_net: int = 0
    """Signed liquidity delta applied to the active liquidity when the price crosses this tick upwards"""
    liquidity_gross: int = 0
    """Total liquidity referencing this tick.  The tick is initialized while this value is non-zero"""
    fee_growth_outside_0_x64: int = 0
    fee_growth_outside_1_x64: int = 0
    reward_growths_outside_x64: list[int] = field(default_factory=lambda: [0] * REWARD_NUM)

    def is_initialized(self) -> bool:
        """Whether any position references this tick"""
        return self.liquidity_gross != 0


@dataclass
class TickArrayState:
    """Page of TICK_ARRAY_SIZE consecutive ticks, spaced by the pool tick spacing"""

    pool_id: ChecksumAddress
    start_tick_index: int
    ticks: list[TickState]
    initialized_tick_count: int = 0

    @classmethod
    def empty(cls, pool_id: ChecksumAddress, start_tick_index: int, tick_spacing: int) -> "TickArrayState":
        """Creates a tick array with every tick uninitialized"""
        return TickArrayState(
            pool_id=pool_id,
            start_tick_index=start_tick_index,
            ticks=[TickState(tick=start_tick_index + offset * tick_spacing) for offset in range(TICK_ARRAY_SIZE)],
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TickArrayState":
        return TickArrayState(**{**data, "ticks": [TickState(**tick) for tick in data["ticks"]]})


@dataclass
class ProtocolPositionState:
    """Aggregated liquidity of every personal position sharing one exact (pool, tick_lower, tick_upper) range"""

    pool_id: ChecksumAddress
    tick_lower_index: int
    tick_upper_index: int
    liquidity: int = 0
    fee_growth_inside_0_last_x64: int = 0
    fee_growth_inside_1_last_x64: int = 0
    reward_growth_inside: list[int] = field(default_factory=lambda: [0] * REWARD_NUM)


@dataclass
class PositionRewardInfo:
    """Reward snapshot and owed balance of a personal position for one reward token"""

    growth_inside_last_x64: int = 0
    reward_amount_owed: int = 0


@dataclass
class PersonalPositionState:  # pylint: disable=too-many-instance-attributes
    """Liquidity, fee, and reward bookkeeping of a single owner's position"""

    nft_mint: ChecksumAddress
    """Unique position identifier"""
    owner: ChecksumAddress
    pool_id: ChecksumAddress
    protocol_position: ChecksumAddress
    """Address of the ProtocolPositionState for this range.  The protocol position is looked up, never copied"""
    tick_lower_index: int
    tick_upper_index: int
    liquidity: int = 0
    fee_growth_inside_0_last_x64: int = 0
    fee_growth_inside_1_last_x64: int = 0
    token_fees_owed_0: int = 0
    token_fees_owed_1: int = 0
    reward_infos: list[PositionRewardInfo] = field(
        default_factory=lambda: [PositionRewardInfo() for _ in range(REWARD_NUM)]
    )
    delegate: ChecksumAddress | None = None
    """Address approved by the owner to add & remove liquidity on the owner's behalf"""

    def is_authorized(self, signer: ChecksumAddress) -> bool:
        """Whether signer is the owner or the approved delegate of the position"""
        return signer == self.owner or (self.delegate is not None and signer == self.delegate)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PersonalPositionState":
        return PersonalPositionState(
            **{**data, "reward_infos": [PositionRewardInfo(**info) for info in data["reward_infos"]]}
        )


@dataclass
class ObservationState:
    """Oracle observation account.  Only the bootstrap performed at pool creation is supported"""

    pool_id: ChecksumAddress
    initialized: bool = False
    observation_index: int = 0
    observations: list[dict[str, int]] = field(default_factory=list)


@dataclass
class DecreaseLiquidityResult:
    """Token amounts released by a decrease_liquidity call, for the transfer collaborator to move"""

    amount_0: int
    amount_1: int
    fee_amount_0: int
    fee_amount_1: int
    reward_amounts: list[int]


@dataclass
class SwapResult:
    """Token amounts moved by a swap.  amount_in is paid into the pool, and amount_out is paid out of it"""

    amount_0: int
    amount_1: int
    amount_in: int
    amount_out: int
