from dataclasses import dataclass

from eth_typing import ChecksumAddress


@dataclass
class ConfigChangeEvent:
    """Emitted when an AmmConfig is created"""

    index: int
    owner: ChecksumAddress
    protocol_fee_rate: int
    trade_fee_rate: int
    tick_spacing: int
    fund_fee_rate: int
    fund_owner: ChecksumAddress


@dataclass
class PoolCreatedEvent:
    """Emitted when a pool is created"""

    token_mint_0: ChecksumAddress
    token_mint_1: ChecksumAddress
    tick_spacing: int
    pool_state: ChecksumAddress
    sqrt_price_x64: int
    tick: int
    token_vault_0: ChecksumAddress
    token_vault_1: ChecksumAddress


@dataclass
class CreatePersonalPositionEvent:
    """Emitted when a personal position is opened"""

    pool_state: ChecksumAddress
    minter: ChecksumAddress
    nft_owner: ChecksumAddress
    tick_lower_index: int
    tick_upper_index: int
    liquidity: int
    deposit_amount_0: int
    deposit_amount_1: int


@dataclass
class IncreaseLiquidityEvent:
    """Emitted when liquidity is added to an existing position"""

    position_nft_mint: ChecksumAddress
    liquidity: int
    amount_0: int
    amount_1: int


@dataclass
class DecreaseLiquidityEvent:
    """Emitted when liquidity is removed from a position, or when fees & rewards are harvested"""

    position_nft_mint: ChecksumAddress
    liquidity: int
    decrease_amount_0: int
    decrease_amount_1: int
    fee_amount_0: int
    fee_amount_1: int
    reward_amounts: list[int]


@dataclass
class LiquidityChangeEvent:
    """Emitted when the active liquidity of the pool changes"""

    pool_state: ChecksumAddress
    tick: int
    tick_lower: int
    tick_upper: int
    liquidity_before: int
    liquidity_after: int


@dataclass
class SwapEvent:
    """Emitted after every swap"""

    pool_state: ChecksumAddress
    sender: ChecksumAddress
    amount_0: int
    transfer_fee_0: int
    amount_1: int
    transfer_fee_1: int
    zero_for_one: bool
    sqrt_price_x64: int
    liquidity: int
    tick: int


@dataclass
class CollectProtocolFeeEvent:
    """Emitted when the config owner withdraws protocol fees"""

    pool_state: ChecksumAddress
    recipient: ChecksumAddress
    amount_0: int
    amount_1: int


@dataclass
class UpdateRewardInfosEvent:
    """Emitted whenever reward growth is brought up to date"""

    reward_growth_global_x64: list[int]
