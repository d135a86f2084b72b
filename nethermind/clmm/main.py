import bisect
import logging
from typing import TextIO

import numpy as np
from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address
from pandas import DataFrame

from nethermind.clmm.addresses import (
    amm_config_address,
    observation_address,
    personal_position_address,
    pool_address,
    pool_reward_vault_address,
    pool_vault_address,
    protocol_position_address,
    tick_array_address,
)
from nethermind.clmm.exceptions import (
    ClmmRevert,
    LiquiditySubValueError,
    MaxTokenOverflow,
    NotApproved,
    PriceSlippageExceeded,
)
from nethermind.clmm.liquidity import LiquidityEngine
from nethermind.clmm.math import ClmmMath
from nethermind.clmm.rewards import settle_position, update_reward_infos
from nethermind.clmm.store import AccountStore
from nethermind.clmm.tick_array import (
    cross_tick,
    get_array_start_index,
    get_tick_state,
    next_initialized_tick,
)
from nethermind.clmm.tokens import Token
from nethermind.clmm.types import (
    AmmConfig,
    CollectProtocolFeeEvent,
    ConfigChangeEvent,
    CreatePersonalPositionEvent,
    DecreaseLiquidityEvent,
    DecreaseLiquidityResult,
    IncreaseLiquidityEvent,
    LiquidityChangeEvent,
    ObservationState,
    PersonalPositionState,
    PoolCreatedEvent,
    PoolState,
    PoolStatus,
    PositionRewardInfo,
    ProtocolPositionState,
    RewardInfo,
    RewardState,
    SwapEvent,
    SwapResult,
    TickArrayState,
    TickState,
    UpdateRewardInfosEvent,
)
from nethermind.clmm.utils import address_sort_key, random_address, wrapping_add

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("clmm").getChild("pool")


# pylint: disable=too-many-public-methods
class ClmmPool:
    """
    Concentrated liquidity pool backed by an :class:`~nethermind.clmm.store.AccountStore`.

    Every record of the pool (pool state, tick arrays, protocol & personal positions) lives in the store, and is
    re-read from the store on every access.  Every mutating method runs inside :meth:`AccountStore.atomic`, so an
    operation either commits all of its state changes, or raises and leaves the store unchanged.

    Token transfers are not executed.  Mutating methods return the realized token amounts for the transfer
    collaborator to move, and record notification events in the store.
    """

    math = ClmmMath
    engine = LiquidityEngine

    store: AccountStore
    """
    Store holding every record of the pool
    """

    pool_id: ChecksumAddress
    """
    Derived address of the pool state
    """

    token_0: Token
    token_1: Token

    def __init__(
        self,
        store: AccountStore,
        pool_id: ChecksumAddress | str,
        token_0: Token | None = None,
        token_1: Token | None = None,
    ) -> None:
        self.store = store
        self.pool_id = to_checksum_address(pool_id)

        pool = self.state
        self.token_0 = token_0 or Token("Token 0", "TOKEN0", pool.mint_decimals_0, pool.token_mint_0)
        self.token_1 = token_1 or Token("Token 1", "TOKEN1", pool.mint_decimals_1, pool.token_mint_1)

    @property
    def state(self) -> PoolState:
        """Current PoolState, loaded from the store"""
        return self.store.load(self.pool_id, PoolState)

    @property
    def amm_config(self) -> AmmConfig:
        """AmmConfig referenced by the pool"""
        return self.store.load(self.state.amm_config, AmmConfig)

    @property
    def timestamp(self) -> int:
        """Current unix timestamp of the store"""
        return self.store.timestamp

    def __repr__(self):
        return f"{self.token_0.symbol} <-> {self.token_1.symbol} @ {self.amm_config.trade_fee_rate / 100} bips"

    # -----------------------------------------------------------------------------------------------------------
    #  Pool & Config Creation
    # -----------------------------------------------------------------------------------------------------------

    @classmethod
    def create_amm_config(  # pylint: disable=too-many-arguments
        cls,
        store: AccountStore,
        owner: ChecksumAddress | str,
        index: int = 0,
        tick_spacing: int | None = None,
        trade_fee_rate: int | None = None,
        protocol_fee_rate: int = 120_000,
        fund_fee_rate: int = 40_000,
        fund_owner: ChecksumAddress | str | None = None,
    ) -> ChecksumAddress:
        """
        Creates a fee tier config.  If only one of trade_fee_rate & tick_spacing is supplied, the other is taken from
        the standard fee tiers.

        :param store: store to create the config in
        :param owner: admin of the config, and of every pool created with it
        :param index: config index, used to derive the config address
        :param tick_spacing:
        :param trade_fee_rate: trade fee, denominated in 1_000_000
        :param protocol_fee_rate: share of the trade fee owed to the protocol, denominated in 1_000_000
        :param fund_fee_rate: share of the trade fee owed to the fund, denominated in 1_000_000
        :param fund_owner: recipient of fund fees.  Defaults to owner
        :return: address of the new config
        """
        trade_fee_rate, tick_spacing = cls.math.get_fee_and_spacing(trade_fee_rate, tick_spacing)

        if trade_fee_rate >= cls.math.FEE_RATE_DENOMINATOR:
            raise ClmmRevert("Trade fee rate must be less than 100%")
        if protocol_fee_rate + fund_fee_rate > cls.math.FEE_RATE_DENOMINATOR:
            raise ClmmRevert("Protocol and fund fee rates cannot exceed 100% of the trade fee")
        if tick_spacing <= 0:
            raise ClmmRevert("Tick spacing must be positive")

        config = AmmConfig(
            index=index,
            owner=to_checksum_address(owner),
            trade_fee_rate=trade_fee_rate,
            protocol_fee_rate=protocol_fee_rate,
            fund_fee_rate=fund_fee_rate,
            tick_spacing=tick_spacing,
            fund_owner=to_checksum_address(fund_owner or owner),
        )
        config_id = amm_config_address(index)

        with store.atomic():
            store.init(config_id, config)
            store.emit(
                ConfigChangeEvent(
                    index=index,
                    owner=config.owner,
                    protocol_fee_rate=protocol_fee_rate,
                    trade_fee_rate=trade_fee_rate,
                    tick_spacing=tick_spacing,
                    fund_fee_rate=fund_fee_rate,
                    fund_owner=config.fund_owner,
                )
            )

        logger.info(f"Created AmmConfig {index} with fee rate {trade_fee_rate} and tick spacing {tick_spacing}")
        return config_id

    @classmethod
    def create(  # pylint: disable=too-many-arguments
        cls,
        store: AccountStore,
        amm_config: ChecksumAddress | str,
        creator: ChecksumAddress | str,
        token_0: Token,
        token_1: Token,
        sqrt_price_x64: int,
        open_time: int = 0,
    ) -> "ClmmPool":
        """
        Creates a new pool for a token pair and fee tier, initialized at sqrt_price_x64.

        :param store: store to create the pool in
        :param amm_config: address of the AmmConfig of the pool
        :param creator: address creating the pool
        :param token_0: token 0 of the pair.  Its address must sort before token 1
        :param token_1: token 1 of the pair
        :param sqrt_price_x64: initial sqrt price, encoded as Q64.64
        :param open_time: unix timestamp before which swaps are rejected
        :return: ClmmPool
        """
        if address_sort_key(token_0.address) >= address_sort_key(token_1.address):
            raise ClmmRevert("token_mint_0 must be smaller than token_mint_1")

        with store.atomic():
            config = store.load(amm_config, AmmConfig)
            config_id = to_checksum_address(amm_config)
            cls.math.check_sqrt_price(sqrt_price_x64)
            tick = cls.math.tick_math.get_tick_at_sqrt_price(sqrt_price_x64)

            pool_id = pool_address(config_id, token_0.address, token_1.address)
            pool = PoolState(
                amm_config=config_id,
                owner=to_checksum_address(creator),
                token_mint_0=token_0.address,
                token_mint_1=token_1.address,
                token_vault_0=pool_vault_address(pool_id, token_0.address),
                token_vault_1=pool_vault_address(pool_id, token_1.address),
                observation_key=observation_address(pool_id),
                mint_decimals_0=token_0.decimals,
                mint_decimals_1=token_1.decimals,
                tick_spacing=config.tick_spacing,
                sqrt_price_x64=sqrt_price_x64,
                tick_current=tick,
                open_time=open_time,
            )
            store.init(pool_id, pool)
            store.init(pool.observation_key, ObservationState(pool_id=pool_id))

            store.emit(
                PoolCreatedEvent(
                    token_mint_0=pool.token_mint_0,
                    token_mint_1=pool.token_mint_1,
                    tick_spacing=pool.tick_spacing,
                    pool_state=pool_id,
                    sqrt_price_x64=sqrt_price_x64,
                    tick=tick,
                    token_vault_0=pool.token_vault_0,
                    token_vault_1=pool.token_vault_1,
                )
            )

        logger.info(f"Created Pool {pool_id}, init_price: {sqrt_price_x64}, init_tick: {tick}")
        return cls(store, pool_id, token_0, token_1)

    # -----------------------------------------------------------------------------------------------------------
    #  Record Access
    # -----------------------------------------------------------------------------------------------------------

    def get_tick_array(self, start_tick_index: int) -> TickArrayState | None:
        """Returns the tick array starting at start_tick_index, or None if it was never created"""
        return self.store.load_or_none(tick_array_address(self.pool_id, start_tick_index), TickArrayState)

    def get_tick(self, tick: int) -> TickState | None:
        """Returns the TickState of tick, or None if its tick array was never created"""
        pool = self.state
        tick_array = self.get_tick_array(get_array_start_index(tick, pool.tick_spacing))
        if tick_array is None:
            return None
        return get_tick_state(tick_array, tick, pool.tick_spacing)

    @property
    def ticks(self) -> dict[int, TickState]:
        """Every initialized tick of the pool, sorted by tick index"""
        initialized_ticks = {}
        for start_tick_index in self.state.tick_array_start_indexes:
            tick_array = self.store.load(tick_array_address(self.pool_id, start_tick_index), TickArrayState)
            for tick_state in tick_array.ticks:
                if tick_state.is_initialized():
                    initialized_ticks[tick_state.tick] = tick_state
        return initialized_ticks

    def get_protocol_position(self, tick_lower: int, tick_upper: int) -> ProtocolPositionState | None:
        """Returns the protocol position of a range, or None if liquidity was never added to the range"""
        return self.store.load_or_none(
            protocol_position_address(self.pool_id, tick_lower, tick_upper), ProtocolPositionState
        )

    def get_position(self, nft_mint: ChecksumAddress | str) -> PersonalPositionState:
        """Returns the personal position identified by nft_mint"""
        return self.store.load(personal_position_address(to_checksum_address(nft_mint)), PersonalPositionState)

    def _get_or_create_tick_array(self, pool: PoolState, tick: int) -> TickArrayState:
        start_tick_index = get_array_start_index(tick, pool.tick_spacing)
        address = tick_array_address(self.pool_id, start_tick_index)

        tick_array = self.store.load_or_none(address, TickArrayState)
        if tick_array is None:
            tick_array = self.store.init(
                address, TickArrayState.empty(self.pool_id, start_tick_index, pool.tick_spacing)
            )
        return tick_array

    def _get_or_create_protocol_position(self, tick_lower: int, tick_upper: int) -> ProtocolPositionState:
        address = protocol_position_address(self.pool_id, tick_lower, tick_upper)
        protocol_position = self.store.load_or_none(address, ProtocolPositionState)
        if protocol_position is None:
            protocol_position = self.store.init(
                address,
                ProtocolPositionState(pool_id=self.pool_id, tick_lower_index=tick_lower, tick_upper_index=tick_upper),
            )
        return protocol_position

    def _load_owned_position(
        self,
        signer: ChecksumAddress | str,
        nft_mint: ChecksumAddress | str,
        allow_delegate: bool = True,
    ):
        position = self.get_position(nft_mint)
        if position.pool_id != self.pool_id:
            raise ClmmRevert(f"Position {nft_mint} does not belong to pool {self.pool_id}")

        signer = to_checksum_address(signer)
        if allow_delegate and position.is_authorized(signer):
            return position
        if signer != position.owner:
            raise NotApproved(f"Signer {signer} is not the owner of position {nft_mint}")
        return position

    @staticmethod
    def _require_status(pool: PoolState, operation: PoolStatus):
        if not pool.is_enabled(operation):
            raise NotApproved(f"Operation {operation.name} is disabled on the pool")

    def _require_config_owner(self, signer: ChecksumAddress | str):
        if to_checksum_address(signer) != self.amm_config.owner:
            raise NotApproved(f"Signer {signer} is not the config owner")

    def _emit_liquidity_change(self, pool: PoolState, tick_lower: int, tick_upper: int, liquidity_before: int):
        if pool.liquidity != liquidity_before:
            self.store.emit(
                LiquidityChangeEvent(
                    pool_state=self.pool_id,
                    tick=pool.tick_current,
                    tick_lower=tick_lower,
                    tick_upper=tick_upper,
                    liquidity_before=liquidity_before,
                    liquidity_after=pool.liquidity,
                )
            )

    # -----------------------------------------------------------------------------------------------------------
    #  Position Management
    # -----------------------------------------------------------------------------------------------------------

    def open_position(  # pylint: disable=too-many-arguments,too-many-locals
        self,
        owner: ChecksumAddress | str,
        tick_lower: int,
        tick_upper: int,
        liquidity: int,
        amount_0_max: int,
        amount_1_max: int,
        nft_mint: ChecksumAddress | str | None = None,
    ) -> PersonalPositionState:
        """
        Opens a new personal position over [tick_lower, tick_upper).

        :param owner: owner of the new position
        :param tick_lower: lower tick of the range.  Must be a multiple of the pool tick spacing
        :param tick_upper: upper tick of the range.  Must be a multiple of the pool tick spacing
        :param liquidity: liquidity to add.  If zero, the maximum liquidity affordable with amount_0_max and
            amount_1_max at the current price is added
        :param amount_0_max: maximum token 0 deposit
        :param amount_1_max: maximum token 1 deposit
        :param nft_mint: unique identifier of the position.  A random address is used if not provided
        :return: the new PersonalPositionState
        """
        with self.store.atomic():
            pool = self.state
            self._require_status(pool, PoolStatus.open_position_or_increase_liquidity)
            self.math.check_ticks(tick_lower, tick_upper, pool.tick_spacing)

            if liquidity == 0:
                liquidity = self.math.liquidity_math.get_liquidity_from_amounts(
                    pool.sqrt_price_x64,
                    self.math.tick_math.get_sqrt_price_at_tick(tick_lower),
                    self.math.tick_math.get_sqrt_price_at_tick(tick_upper),
                    amount_0_max,
                    amount_1_max,
                )
                logger.debug(f"Computed liquidity {liquidity} from token budgets {amount_0_max}, {amount_1_max}")
            if liquidity == 0:
                raise ClmmRevert("Cannot open a position with zero liquidity")

            tick_array_lower = self._get_or_create_tick_array(pool, tick_lower)
            tick_array_upper = self._get_or_create_tick_array(pool, tick_upper)
            protocol_position = self._get_or_create_protocol_position(tick_lower, tick_upper)

            liquidity_before = pool.liquidity
            amount_0, amount_1 = self.engine.add_liquidity(
                pool,
                protocol_position,
                tick_array_lower,
                tick_array_upper,
                liquidity,
                amount_0_max,
                amount_1_max,
                self.timestamp,
            )
            self._emit_liquidity_change(pool, tick_lower, tick_upper, liquidity_before)

            nft_mint = to_checksum_address(nft_mint or random_address())
            position = self.store.init(
                personal_position_address(nft_mint),
                PersonalPositionState(
                    nft_mint=nft_mint,
                    owner=to_checksum_address(owner),
                    pool_id=self.pool_id,
                    protocol_position=protocol_position_address(self.pool_id, tick_lower, tick_upper),
                    tick_lower_index=tick_lower,
                    tick_upper_index=tick_upper,
                    liquidity=liquidity,
                    fee_growth_inside_0_last_x64=protocol_position.fee_growth_inside_0_last_x64,
                    fee_growth_inside_1_last_x64=protocol_position.fee_growth_inside_1_last_x64,
                    reward_infos=[
                        PositionRewardInfo(growth_inside_last_x64=growth)
                        for growth in protocol_position.reward_growth_inside
                    ],
                ),
            )

            self.store.emit(
                CreatePersonalPositionEvent(
                    pool_state=self.pool_id,
                    minter=position.owner,
                    nft_owner=position.owner,
                    tick_lower_index=tick_lower,
                    tick_upper_index=tick_upper,
                    liquidity=liquidity,
                    deposit_amount_0=amount_0,
                    deposit_amount_1=amount_1,
                )
            )

        logger.info(f"Opened position {nft_mint} over [{tick_lower}, {tick_upper}) with {liquidity} liquidity")
        return position

    def increase_liquidity(  # pylint: disable=too-many-arguments
        self,
        signer: ChecksumAddress | str,
        nft_mint: ChecksumAddress | str,
        liquidity: int,
        amount_0_max: int,
        amount_1_max: int,
    ) -> tuple[int, int]:
        """
        Adds liquidity to an existing position.  Fees & rewards earned by the position so far are settled into its
        owed balances before its liquidity changes.  A liquidity of zero only settles fees & rewards.

        :param signer: must be the position owner or its delegate
        :param nft_mint: position identifier
        :param liquidity: liquidity to add
        :param amount_0_max: maximum token 0 deposit
        :param amount_1_max: maximum token 1 deposit
        :return: (amount_0, amount_1) deposited
        """
        with self.store.atomic():
            pool = self.state
            self._require_status(pool, PoolStatus.open_position_or_increase_liquidity)
            position = self._load_owned_position(signer, nft_mint)
            protocol_position = self.store.load(position.protocol_position, ProtocolPositionState)

            liquidity_before = pool.liquidity
            amount_0, amount_1 = self.engine.add_liquidity(
                pool,
                protocol_position,
                self._get_or_create_tick_array(pool, position.tick_lower_index),
                self._get_or_create_tick_array(pool, position.tick_upper_index),
                liquidity,
                amount_0_max,
                amount_1_max,
                self.timestamp,
            )
            self._emit_liquidity_change(pool, position.tick_lower_index, position.tick_upper_index, liquidity_before)

            # Settlement uses the liquidity held before this increase
            settle_position(position, protocol_position)
            position.liquidity = self.math.liquidity_math.add_delta(position.liquidity, liquidity)

            self.store.emit(
                IncreaseLiquidityEvent(
                    position_nft_mint=position.nft_mint,
                    liquidity=liquidity,
                    amount_0=amount_0,
                    amount_1=amount_1,
                )
            )

        return amount_0, amount_1

    def decrease_liquidity(  # pylint: disable=too-many-arguments,too-many-locals
        self,
        signer: ChecksumAddress | str,
        nft_mint: ChecksumAddress | str,
        liquidity: int,
        amount_0_min: int = 0,
        amount_1_min: int = 0,
    ) -> DecreaseLiquidityResult:
        """
        Removes liquidity from a position, and collects the fees & rewards owed to it.  A liquidity of zero only
        harvests fees & rewards.

        Owed fees are only collected while collect_fee is enabled on the pool, and owed rewards only while
        collect_reward is enabled.  Uncollected balances stay owed to the position.

        :param signer: must be the position owner or its delegate
        :param nft_mint: position identifier
        :param liquidity: liquidity to remove
        :param amount_0_min: minimum token 0 returned by the removal
        :param amount_1_min: minimum token 1 returned by the removal
        :return: DecreaseLiquidityResult with the removed amounts, collected fees, and collected rewards
        """
        with self.store.atomic():
            pool = self.state
            if liquidity > 0:
                self._require_status(pool, PoolStatus.decrease_liquidity)
            elif not pool.is_enabled(PoolStatus.collect_fee) and not pool.is_enabled(PoolStatus.collect_reward):
                raise NotApproved("Fee and reward collection are disabled on the pool")

            position = self._load_owned_position(signer, nft_mint)
            if liquidity > position.liquidity:
                raise LiquiditySubValueError(
                    f"Cannot remove {liquidity} liquidity from position holding {position.liquidity}"
                )
            protocol_position = self.store.load(position.protocol_position, ProtocolPositionState)

            liquidity_before = pool.liquidity
            amount_0, amount_1 = self.engine.burn_liquidity(
                pool,
                protocol_position,
                self._get_or_create_tick_array(pool, position.tick_lower_index),
                self._get_or_create_tick_array(pool, position.tick_upper_index),
                liquidity,
                amount_0_min,
                amount_1_min,
                self.timestamp,
            )
            self._emit_liquidity_change(pool, position.tick_lower_index, position.tick_upper_index, liquidity_before)

            # Settlement uses the liquidity held before this decrease
            settle_position(position, protocol_position)
            position.liquidity = self.math.liquidity_math.add_delta(position.liquidity, -liquidity)

            fee_amount_0, fee_amount_1 = 0, 0
            if pool.is_enabled(PoolStatus.collect_fee):
                fee_amount_0, fee_amount_1 = position.token_fees_owed_0, position.token_fees_owed_1
                position.token_fees_owed_0, position.token_fees_owed_1 = 0, 0

            reward_amounts = []
            for reward_info, position_reward in zip(pool.reward_infos, position.reward_infos):
                reward_amount = 0
                if reward_info.initialized() and pool.is_enabled(PoolStatus.collect_reward):
                    reward_amount = position_reward.reward_amount_owed
                    position_reward.reward_amount_owed = 0
                    reward_info.reward_claimed += reward_amount
                reward_amounts.append(reward_amount)

            result = DecreaseLiquidityResult(
                amount_0=amount_0,
                amount_1=amount_1,
                fee_amount_0=fee_amount_0,
                fee_amount_1=fee_amount_1,
                reward_amounts=reward_amounts,
            )
            self.store.emit(
                DecreaseLiquidityEvent(
                    position_nft_mint=position.nft_mint,
                    liquidity=liquidity,
                    decrease_amount_0=amount_0,
                    decrease_amount_1=amount_1,
                    fee_amount_0=fee_amount_0,
                    fee_amount_1=fee_amount_1,
                    reward_amounts=reward_amounts,
                )
            )

        return result

    def close_position(self, signer: ChecksumAddress | str, nft_mint: ChecksumAddress | str):
        """
        Deletes a personal position.  The position must hold no liquidity, and have no fees or rewards owed.
        The protocol position of the range is kept, preserving its fee growth history.

        :param signer: must be the position owner
        :param nft_mint: position identifier
        """
        with self.store.atomic():
            position = self._load_owned_position(signer, nft_mint, allow_delegate=False)
            if position.liquidity != 0:
                raise ClmmRevert(f"Cannot close position {nft_mint} holding {position.liquidity} liquidity")
            if position.token_fees_owed_0 != 0 or position.token_fees_owed_1 != 0:
                raise ClmmRevert(f"Cannot close position {nft_mint} with uncollected fees")
            if any(reward.reward_amount_owed != 0 for reward in position.reward_infos):
                raise ClmmRevert(f"Cannot close position {nft_mint} with uncollected rewards")

            self.store.close(personal_position_address(position.nft_mint))

        logger.info(f"Closed position {nft_mint}")

    def set_position_delegate(
        self,
        signer: ChecksumAddress | str,
        nft_mint: ChecksumAddress | str,
        delegate: ChecksumAddress | str | None,
    ):
        """
        Approves delegate to increase & decrease liquidity of a position.  Passing None revokes the current
        delegate.  Only the owner may change the delegate or close the position.

        :param signer: must be the position owner
        :param nft_mint: position identifier
        :param delegate: address to approve, or None
        """
        with self.store.atomic():
            position = self._load_owned_position(signer, nft_mint, allow_delegate=False)
            position.delegate = to_checksum_address(delegate) if delegate is not None else None

        logger.info(f"Delegate of position {nft_mint} set to {delegate}")

    # -----------------------------------------------------------------------------------------------------------
    #  Swaps
    # -----------------------------------------------------------------------------------------------------------

    def _get_next_initialized_tick(self, pool: PoolState, tick_current: int, zero_for_one: bool) -> TickState | None:
        start_indexes = pool.tick_array_start_indexes
        current_start_index = get_array_start_index(tick_current, pool.tick_spacing)
        logger.debug(f"Current Search Tick: {tick_current}\tTick Arrays: {start_indexes}")

        if zero_for_one:
            search_indexes = list(reversed(start_indexes[: bisect.bisect_right(start_indexes, current_start_index)]))
        else:
            search_indexes = start_indexes[bisect.bisect_left(start_indexes, current_start_index) :]

        for start_tick_index in search_indexes:
            tick_array = self.store.load(tick_array_address(self.pool_id, start_tick_index), TickArrayState)
            tick_state = next_initialized_tick(tick_array, tick_current, zero_for_one)
            if tick_state is not None:
                return tick_state
        return None

    # Disable branch & statement checks.  This implementation will be complex regardless
    # pylint: disable=too-many-locals,too-many-branches,too-many-statements,too-many-arguments
    def swap(
        self,
        signer: ChecksumAddress | str,
        amount: int,
        other_amount_threshold: int,
        sqrt_price_limit_x64: int,
        is_base_input: bool,
        zero_for_one: bool,
    ) -> SwapResult:
        """
        Swaps tokens in the pool.

        :param signer:
            Address executing the swap
        :param amount:
            Raw token amount to swap.  If is_base_input, this is the quantity of tokens to sell.  Otherwise, this
            is the quantity of tokens to buy.
        :param other_amount_threshold:
            Minimum output amount if is_base_input, otherwise the maximum input amount.
        :param sqrt_price_limit_x64:
            The minimum (zero_for_one) or maximum price the swap may move the pool to.  If 0, the swap is bounded
            by the global price limits.
        :param is_base_input:
            Whether amount is an exact input or an exact output amount
        :param zero_for_one:
            Which direction to swap tokens.  If True, sell Token 0 and buy Token 1.  If False, sell Token 1
            and buy Token 0.
        :return: SwapResult
        """
        logger.debug(f"------ Swapping Token {0 if zero_for_one else 1} for Token {1 if zero_for_one else 0} -------")
        logger.debug(f"Swap Amount: {amount}\tBase Input: {is_base_input}")

        if amount == 0:
            raise ClmmRevert("Cannot swap 0 tokens")
        if amount > self.math.U64_MAX:
            raise MaxTokenOverflow(f"Swap amount {amount} overflows u64")

        with self.store.atomic():
            pool = self.state
            config = self.amm_config
            self._require_status(pool, PoolStatus.swap)
            if self.timestamp <= pool.open_time:
                raise NotApproved(f"Pool opens at {pool.open_time}")

            if sqrt_price_limit_x64 == 0:
                sqrt_price_limit_x64 = (
                    self.math.MIN_SQRT_PRICE_X64 + 1 if zero_for_one else self.math.MAX_SQRT_PRICE_X64 - 1
                )
            if zero_for_one:
                if sqrt_price_limit_x64 >= pool.sqrt_price_x64:
                    raise ClmmRevert("sqrt_price_limit above current price, cannot swap 0 for 1")
                if sqrt_price_limit_x64 <= self.math.MIN_SQRT_PRICE_X64:
                    raise ClmmRevert("sqrt_price_limit too low")
            else:
                if sqrt_price_limit_x64 <= pool.sqrt_price_x64:
                    raise ClmmRevert("sqrt_price_limit below current price, cannot swap 1 for 0")
                if sqrt_price_limit_x64 >= self.math.MAX_SQRT_PRICE_X64:
                    raise ClmmRevert("sqrt_price_limit too high")

            logger.debug(f"Price Limit: {self.get_price_at_sqrt_price(sqrt_price_limit_x64)}")
            logger.debug(f"Current Price: {self.get_price_at_sqrt_price(pool.sqrt_price_x64)}")

            update_reward_infos(pool, self.timestamp)

            amount_specified_remaining = amount
            amount_calculated = 0
            sqrt_price = pool.sqrt_price_x64
            tick = pool.tick_current
            liquidity = pool.liquidity
            fee_growth_global = pool.fee_growth_global_0_x64 if zero_for_one else pool.fee_growth_global_1_x64
            protocol_fee, fund_fee = 0, 0

            while amount_specified_remaining != 0 and sqrt_price != sqrt_price_limit_x64:
                logger.debug("----- Starting Swap Step -----")
                logger.debug(f"Active Liquidity: {liquidity}\tCurrent Tick: {tick}")

                sqrt_price_start = sqrt_price
                next_tick_state = self._get_next_initialized_tick(pool, tick, zero_for_one)
                if next_tick_state is None:
                    tick_next = self.math.MIN_TICK if zero_for_one else self.math.MAX_TICK
                else:
                    tick_next = min(max(next_tick_state.tick, self.math.MIN_TICK), self.math.MAX_TICK)

                sqrt_price_next = self.math.tick_math.get_sqrt_price_at_tick(tick_next)
                if zero_for_one:
                    sqrt_price_target = max(sqrt_price_next, sqrt_price_limit_x64)
                else:
                    sqrt_price_target = min(sqrt_price_next, sqrt_price_limit_x64)

                step = self.math.compute_swap_step(
                    sqrt_price,
                    sqrt_price_target,
                    liquidity,
                    amount_specified_remaining,
                    config.trade_fee_rate,
                    is_base_input,
                    zero_for_one,
                )
                logger.debug(f"--- Computed Swap Step ---  {step}")
                sqrt_price = step.sqrt_price_next

                if is_base_input:
                    amount_specified_remaining -= step.amount_in + step.fee_amount
                    amount_calculated += step.amount_out
                else:
                    amount_specified_remaining -= step.amount_out
                    amount_calculated += step.amount_in + step.fee_amount

                fee_amount = step.fee_amount
                if config.protocol_fee_rate > 0:
                    delta = step.fee_amount * config.protocol_fee_rate // self.math.FEE_RATE_DENOMINATOR
                    fee_amount -= delta
                    protocol_fee += delta
                if config.fund_fee_rate > 0:
                    delta = step.fee_amount * config.fund_fee_rate // self.math.FEE_RATE_DENOMINATOR
                    fee_amount -= delta
                    fund_fee += delta

                if liquidity > 0:
                    fee_growth_global = wrapping_add(
                        fee_growth_global,
                        self.math.full_math.mul_div_floor(fee_amount, self.math.Q64, liquidity),
                    )

                if sqrt_price == sqrt_price_next:
                    if next_tick_state is not None:
                        liquidity_net = cross_tick(
                            next_tick_state,
                            fee_growth_global if zero_for_one else pool.fee_growth_global_0_x64,
                            pool.fee_growth_global_1_x64 if zero_for_one else fee_growth_global,
                            pool.reward_infos,
                        )
                        if zero_for_one:
                            liquidity_net = -liquidity_net
                        logger.debug(f"Crossing Tick {tick_next} & Adding Liquidity: {liquidity_net}")
                        liquidity = self.math.liquidity_math.add_delta(liquidity, liquidity_net)

                    tick = tick_next - 1 if zero_for_one else tick_next
                elif sqrt_price != sqrt_price_start:
                    tick = self.math.tick_math.get_tick_at_sqrt_price(sqrt_price)

            pool.sqrt_price_x64 = sqrt_price
            pool.tick_current = tick
            pool.liquidity = liquidity

            if zero_for_one:
                pool.fee_growth_global_0_x64 = fee_growth_global
                pool.protocol_fees_token_0 += protocol_fee
                pool.fund_fees_token_0 += fund_fee
            else:
                pool.fee_growth_global_1_x64 = fee_growth_global
                pool.protocol_fees_token_1 += protocol_fee
                pool.fund_fees_token_1 += fund_fee

            if zero_for_one == is_base_input:
                amount_0, amount_1 = amount - amount_specified_remaining, amount_calculated
            else:
                amount_0, amount_1 = amount_calculated, amount - amount_specified_remaining

            if zero_for_one:
                amount_in, amount_out = amount_0, amount_1
                pool.swap_in_amount_token_0 += amount_0
                pool.swap_out_amount_token_1 += amount_1
            else:
                amount_in, amount_out = amount_1, amount_0
                pool.swap_in_amount_token_1 += amount_1
                pool.swap_out_amount_token_0 += amount_0

            if is_base_input and amount_out < other_amount_threshold:
                raise PriceSlippageExceeded(f"Swap output {amount_out} below threshold {other_amount_threshold}")
            if not is_base_input and amount_in > other_amount_threshold:
                raise PriceSlippageExceeded(f"Swap input {amount_in} above threshold {other_amount_threshold}")

            self.store.emit(
                SwapEvent(
                    pool_state=self.pool_id,
                    sender=to_checksum_address(signer),
                    amount_0=amount_0,
                    transfer_fee_0=0,
                    amount_1=amount_1,
                    transfer_fee_1=0,
                    zero_for_one=zero_for_one,
                    sqrt_price_x64=pool.sqrt_price_x64,
                    liquidity=pool.liquidity,
                    tick=pool.tick_current,
                )
            )

        logger.debug("--- Swap Complete ---")
        logger.debug(f"Token 0 Delta: {amount_0} \t Token 1 Delta: {amount_1}")
        logger.debug(f"Current Tick: {tick}\tCurrent Sqrt Price: {sqrt_price}\tCurrent Liquidity: {liquidity}")

        return SwapResult(amount_0=amount_0, amount_1=amount_1, amount_in=amount_in, amount_out=amount_out)

    # pylint: enable=too-many-locals,too-many-branches,too-many-statements,too-many-arguments

    # -----------------------------------------------------------------------------------------------------------
    #  Admin & Rewards
    # -----------------------------------------------------------------------------------------------------------

    def set_status(self, signer: ChecksumAddress | str, status: PoolStatus):
        """
        Replaces the set of enabled operations of the pool.  Only the config owner may change the status.

        :param signer: must be the config owner
        :param status: operations to enable.  Every operation missing from status is disabled
        """
        with self.store.atomic():
            self._require_config_owner(signer)
            self.state.status = PoolStatus(status)

        logger.info(f"Pool status set to {PoolStatus(status)!r}")

    def initialize_reward(  # pylint: disable=too-many-arguments
        self,
        signer: ChecksumAddress | str,
        token_mint: ChecksumAddress | str,
        open_time: int,
        end_time: int,
        emissions_per_second_x64: int,
    ) -> int:
        """
        Starts a reward stream in the first free reward slot of the pool.

        :param signer: must be the config owner or the pool creator
        :param token_mint: reward token mint
        :param open_time: unix timestamp emissions start at.  Cannot be in the past
        :param end_time: unix timestamp emissions stop at
        :param emissions_per_second_x64: Q64.64 reward tokens emitted per second, shared by the active liquidity
        :return: index of the reward slot
        """
        with self.store.atomic():
            pool = self.state
            signer = to_checksum_address(signer)
            if signer not in (self.amm_config.owner, pool.owner):
                raise NotApproved(f"Signer {signer} cannot initialize rewards")
            if open_time < self.timestamp or end_time <= open_time:
                raise ClmmRevert(f"Invalid reward period [{open_time}, {end_time}) at {self.timestamp}")

            token_mint = to_checksum_address(token_mint)
            if any(info.token_mint == token_mint for info in pool.reward_infos if info.initialized()):
                raise ClmmRevert(f"Reward {token_mint} is already initialized")

            update_reward_infos(pool, self.timestamp)

            for index, reward_info in enumerate(pool.reward_infos):
                if not reward_info.initialized():
                    break
            else:
                raise ClmmRevert("Every reward slot of the pool is in use")

            pool.reward_infos[index] = RewardInfo(
                reward_state=RewardState.initialized,
                open_time=open_time,
                end_time=end_time,
                last_update_time=open_time,
                emissions_per_second_x64=emissions_per_second_x64,
                reward_total_emissioned=0,
                reward_claimed=0,
                token_mint=token_mint,
                token_vault=pool_reward_vault_address(self.pool_id, token_mint),
                authority=signer,
                reward_growth_global_x64=0,
            )
            self.store.emit(
                UpdateRewardInfosEvent(
                    reward_growth_global_x64=[info.reward_growth_global_x64 for info in pool.reward_infos]
                )
            )

        logger.info(f"Initialized reward {token_mint} in slot {index}")
        return index

    def collect_protocol_fee(
        self,
        signer: ChecksumAddress | str,
        amount_0_requested: int,
        amount_1_requested: int,
    ) -> tuple[int, int]:
        """
        Withdraws accumulated protocol fees.  Requested amounts are capped at the fees available.

        :param signer: must be the config owner
        :param amount_0_requested:
        :param amount_1_requested:
        :return: (amount_0, amount_1) withdrawn
        """
        with self.store.atomic():
            self._require_config_owner(signer)
            pool = self.state

            amount_0 = min(amount_0_requested, pool.protocol_fees_token_0)
            amount_1 = min(amount_1_requested, pool.protocol_fees_token_1)
            pool.protocol_fees_token_0 -= amount_0
            pool.protocol_fees_token_1 -= amount_1

            self.store.emit(
                CollectProtocolFeeEvent(
                    pool_state=self.pool_id,
                    recipient=to_checksum_address(signer),
                    amount_0=amount_0,
                    amount_1=amount_1,
                )
            )

        return amount_0, amount_1

    # -----------------------------------------------------------------------------------------------------------
    #  Utility Functions
    # -----------------------------------------------------------------------------------------------------------

    def get_price_at_sqrt_price(self, sqrt_price_x64: int, reverse_tokens: bool = False) -> float:
        """
        Converts a sqrt_price to a human-readable price.

        :param sqrt_price_x64:
            sqrt_price encoded as fixed point Q64.64
        :param reverse_tokens:
            Whether to reverse the tokens in the price.  The sqrt_price represents the
            :math:`\\frac{ Token 1 }{ Token 0}`.  If reverse_tokens is True, the price will be represented as
            :math:`\\frac{ Token 0 }{ Token 1}`.
        """
        raw_price_float = (sqrt_price_x64 / self.math.Q64) ** 2
        adjusted_price = raw_price_float / (10 ** (self.token_1.decimals - self.token_0.decimals))

        if reverse_tokens:
            adjusted_price = 1 / adjusted_price

        return adjusted_price

    def get_formatted_price_at_sqrt_price(self, sqrt_price_x64: int, reverse_tokens: bool = False) -> str:
        """
        Converts a sqrt_price to a formatted price string.  Includes rounding to 6 significant figures, and listing
        the Reference Asset, ie SOL: 22.4532 USDC.

        :param sqrt_price_x64:
            sqrt_price encoded as fixed point Q64.64
        :param reverse_tokens:
            Whether to reverse the tokens in the price.
        """
        adjusted_price = self.get_price_at_sqrt_price(sqrt_price_x64, reverse_tokens)
        rounded_price = np.format_float_positional(float(f"{adjusted_price:.6g}"))
        return (
            f"{self.token_0.symbol}: {rounded_price} {self.token_1.symbol}"
            if reverse_tokens
            else f"{self.token_1.symbol}: {rounded_price} {self.token_0.symbol}"
        )

    def get_price_at_tick(self, tick: int, reverse_tokens: bool = False) -> float:
        """
        Converts a tick to a human-readable price.

        :param tick:
            Tick value
        :param reverse_tokens:
            Whether to reverse the tokens in the price.
        """
        return self.get_price_at_sqrt_price(self.math.tick_math.get_sqrt_price_at_tick(tick), reverse_tokens)

    def compute_liquidity_at_price(self, reverse_tokens: bool = False, compress: bool = False) -> DataFrame:
        """
        Computes the active liquidity at each initialized tick of the pool.

        :param reverse_tokens:
            Reverses the reference token in the price.
        :param compress:
            Compresses the output to only include price points where the liquidity changes by more than 10%.
        :return:
            Dataframe with the current token/token price and the active liquidity at that price.
        """
        current_liquidity = 0
        last_liquidity = 1
        liquidity: dict[str, list] = {"price": [], "active_liquidity": []}
        for tick_index, tick_state in self.ticks.items():
            current_liquidity += tick_state.liquidity_net
            current_price = self.get_price_at_tick(tick_index, reverse_tokens)
            if compress:
                if abs((current_liquidity - last_liquidity) / last_liquidity) > 0.1:
                    liquidity["price"].append(current_price)
                    liquidity["active_liquidity"].append(current_liquidity)

                    last_liquidity = current_liquidity or 1
            else:
                liquidity["price"].append(current_price)
                liquidity["active_liquidity"].append(current_liquidity)

        return DataFrame(liquidity).astype(float)

    def advance_time(self, seconds: int = 1):
        """
        Advances the timestamp of the store.  Reward emissions accrue over the elapsed time at the next pool
        operation.

        :param seconds: Number of seconds to advance.  Defaults to 1
        """
        self.store.timestamp += seconds

    # -----------------------------------------------------------------------------------------------------------
    #  Caching Pool State
    # -----------------------------------------------------------------------------------------------------------

    def save_pool(self, file_path: TextIO):
        """
        Saves every record of the store to a JSON file.  This file can later be used to re-initialize the pool
        with :meth:`load_pool`.

        :param file_path: writable text file
        """
        self.store.save(file_path)

    @classmethod
    def load_pool(cls, file_path: TextIO, pool_id: ChecksumAddress | str | None = None) -> "ClmmPool":
        """
        Loads a pool from a JSON File generated by the save_pool() method

        :param file_path: readable text file
        :param pool_id: Pool to load.  May be omitted if the file contains a single pool
        :return: ClmmPool
        """
        store = AccountStore.load_from_file(file_path)
        if pool_id is None:
            pools = list(store.accounts_of_type(PoolState).keys())
            if len(pools) != 1:
                raise ClmmRevert(f"pool_id is required when loading a file containing {len(pools)} pools")
            pool_id = pools[0]

        return cls(store, pool_id)
