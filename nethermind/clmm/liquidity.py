import bisect
import logging

from nethermind.clmm.exceptions import ClmmRevert, PriceSlippageExceeded
from nethermind.clmm.math import ClmmMath
from nethermind.clmm.rewards import update_reward_infos
from nethermind.clmm.tick_array import (
    clear_tick,
    get_fee_growth_inside,
    get_reward_growths_inside,
    get_tick_state,
    update_tick,
)
from nethermind.clmm.types import PoolState, ProtocolPositionState, TickArrayState

logger = logging.getLogger("nethermind").getChild("clmm").getChild("liquidity")


class LiquidityEngine:
    """
    Applies liquidity deltas to a range of a pool.  The engine reads & mutates the pool, the two tick arrays
    holding the range boundaries, and the protocol position of the range.  It does not persist records, and
    callers are expected to run it inside :meth:`AccountStore.atomic`, so a failure anywhere leaves every
    record unchanged.
    """

    math = ClmmMath

    @classmethod
    def _flip_tick_array(cls, pool: PoolState, tick_array: TickArrayState, initialized: bool):
        if initialized:
            tick_array.initialized_tick_count += 1
            if tick_array.initialized_tick_count == 1:
                bisect.insort(pool.tick_array_start_indexes, tick_array.start_tick_index)
        else:
            tick_array.initialized_tick_count -= 1
            if tick_array.initialized_tick_count == 0:
                pool.tick_array_start_indexes.remove(tick_array.start_tick_index)

    @classmethod
    def update_position(  # pylint: disable=too-many-arguments,too-many-locals
        cls,
        pool: PoolState,
        protocol_position: ProtocolPositionState,
        tick_array_lower: TickArrayState,
        tick_array_upper: TickArrayState,
        liquidity_delta: int,
        timestamp: int,
    ) -> tuple[bool, bool]:
        """
        Updates the boundary ticks and the protocol position for a liquidity delta, and snapshots the fee & reward
        growth inside the range into the protocol position.  Reward growth is brought up to date before any tick
        is touched.

        :return: (flipped_lower, flipped_upper)
        """
        reward_infos = update_reward_infos(pool, timestamp)

        tick_lower_state = get_tick_state(tick_array_lower, protocol_position.tick_lower_index, pool.tick_spacing)
        tick_upper_state = get_tick_state(tick_array_upper, protocol_position.tick_upper_index, pool.tick_spacing)

        flipped_lower, flipped_upper = False, False
        if liquidity_delta != 0:
            flipped_lower = update_tick(
                tick_lower_state,
                pool.tick_current,
                liquidity_delta,
                pool.fee_growth_global_0_x64,
                pool.fee_growth_global_1_x64,
                False,
                reward_infos,
            )
            flipped_upper = update_tick(
                tick_upper_state,
                pool.tick_current,
                liquidity_delta,
                pool.fee_growth_global_0_x64,
                pool.fee_growth_global_1_x64,
                True,
                reward_infos,
            )
            if flipped_lower:
                cls._flip_tick_array(pool, tick_array_lower, liquidity_delta > 0)
            if flipped_upper:
                cls._flip_tick_array(pool, tick_array_upper, liquidity_delta > 0)

        fee_growth_inside_0, fee_growth_inside_1 = get_fee_growth_inside(
            tick_lower_state,
            tick_upper_state,
            pool.tick_current,
            pool.fee_growth_global_0_x64,
            pool.fee_growth_global_1_x64,
        )
        reward_growths_inside = get_reward_growths_inside(
            tick_lower_state, tick_upper_state, pool.tick_current, reward_infos
        )

        protocol_position.liquidity = cls.math.liquidity_math.add_delta(protocol_position.liquidity, liquidity_delta)
        protocol_position.fee_growth_inside_0_last_x64 = fee_growth_inside_0
        protocol_position.fee_growth_inside_1_last_x64 = fee_growth_inside_1
        protocol_position.reward_growth_inside = reward_growths_inside

        logger.debug(
            f"Updated Protocol Position [{protocol_position.tick_lower_index}, {protocol_position.tick_upper_index}]"
            f"  Liquidity: {protocol_position.liquidity}, Fee Growth Inside 0: {fee_growth_inside_0}, "
            f"Fee Growth Inside 1: {fee_growth_inside_1}"
        )

        if liquidity_delta < 0:
            if flipped_lower:
                clear_tick(tick_lower_state)
            if flipped_upper:
                clear_tick(tick_upper_state)

        return flipped_lower, flipped_upper

    @classmethod
    def modify_position(  # pylint: disable=too-many-arguments
        cls,
        pool: PoolState,
        protocol_position: ProtocolPositionState,
        tick_array_lower: TickArrayState,
        tick_array_upper: TickArrayState,
        liquidity_delta: int,
        timestamp: int,
    ) -> tuple[int, int]:
        """
        Applies a liquidity delta to a range, and computes the token amounts it moves.  If the range contains the
        current tick, the active liquidity of the pool is adjusted by the delta.

        :return: (amount_0, amount_1).  Amounts owed by the caller when adding liquidity are rounded up, and amounts
            returned to the caller when removing are rounded down.
        """
        cls.update_position(pool, protocol_position, tick_array_lower, tick_array_upper, liquidity_delta, timestamp)

        if liquidity_delta == 0:
            return 0, 0

        tick_lower, tick_upper = protocol_position.tick_lower_index, protocol_position.tick_upper_index
        amount_0, amount_1 = cls.math.get_delta_amounts_signed(
            pool.tick_current,
            pool.sqrt_price_x64,
            tick_lower,
            tick_upper,
            liquidity_delta,
        )

        if tick_lower <= pool.tick_current < tick_upper:
            liquidity_before = pool.liquidity
            pool.liquidity = cls.math.liquidity_math.add_delta(pool.liquidity, liquidity_delta)
            logger.debug(f"Active Liquidity changed from {liquidity_before} to {pool.liquidity}")

        return amount_0, amount_1

    @classmethod
    def add_liquidity(  # pylint: disable=too-many-arguments
        cls,
        pool: PoolState,
        protocol_position: ProtocolPositionState,
        tick_array_lower: TickArrayState,
        tick_array_upper: TickArrayState,
        liquidity: int,
        amount_0_max: int,
        amount_1_max: int,
        timestamp: int,
    ) -> tuple[int, int]:
        """
        Adds liquidity to a range.

        :param liquidity: Liquidity to add.  Zero only refreshes the fee & reward snapshots of the range
        :param amount_0_max: Maximum amount of token 0 the caller is willing to deposit
        :param amount_1_max: Maximum amount of token 1 the caller is willing to deposit
        :return: (amount_0, amount_1) to be transferred from the caller to the pool vaults
        :raises PriceSlippageExceeded: if either amount exceeds its maximum
        """
        if liquidity < 0:
            raise ClmmRevert("Cannot add negative liquidity")

        amount_0, amount_1 = cls.modify_position(
            pool, protocol_position, tick_array_lower, tick_array_upper, liquidity, timestamp
        )
        logger.debug(f"Adding {liquidity} Liquidity requires Token 0: {amount_0}, Token 1: {amount_1}")

        if liquidity > 0 and amount_0 == 0 and amount_1 == 0:
            raise ClmmRevert("Liquidity too small to require any tokens")

        if amount_0 > amount_0_max or amount_1 > amount_1_max:
            raise PriceSlippageExceeded(
                f"Adding liquidity requires Token 0: {amount_0}, Token 1: {amount_1}, exceeding maximums of "
                f"Token 0: {amount_0_max}, Token 1: {amount_1_max}"
            )

        return amount_0, amount_1

    @classmethod
    def burn_liquidity(  # pylint: disable=too-many-arguments
        cls,
        pool: PoolState,
        protocol_position: ProtocolPositionState,
        tick_array_lower: TickArrayState,
        tick_array_upper: TickArrayState,
        liquidity: int,
        amount_0_min: int,
        amount_1_min: int,
        timestamp: int,
    ) -> tuple[int, int]:
        """
        Removes liquidity from a range.

        :param liquidity: Liquidity to remove.  Zero only refreshes the fee & reward snapshots of the range
        :param amount_0_min: Minimum amount of token 0 the caller accepts
        :param amount_1_min: Minimum amount of token 1 the caller accepts
        :return: (amount_0, amount_1) to be transferred from the pool vaults to the caller
        :raises PriceSlippageExceeded: if either amount is below its minimum
        """
        if liquidity < 0:
            raise ClmmRevert("Cannot remove negative liquidity")

        amount_0, amount_1 = cls.modify_position(
            pool, protocol_position, tick_array_lower, tick_array_upper, -liquidity, timestamp
        )
        logger.debug(f"Removing {liquidity} Liquidity returns Token 0: {amount_0}, Token 1: {amount_1}")

        if amount_0 < amount_0_min or amount_1 < amount_1_min:
            raise PriceSlippageExceeded(
                f"Removing liquidity returns Token 0: {amount_0}, Token 1: {amount_1}, below minimums of "
                f"Token 0: {amount_0_min}, Token 1: {amount_1_min}"
            )

        return amount_0, amount_1
