import logging

from nethermind.clmm.exceptions import InvalidTickIndex, LiquidityAddValueError
from nethermind.clmm.math import ClmmMath
from nethermind.clmm.math.shared import I128_MAX, I128_MIN, TICK_ARRAY_SIZE
from nethermind.clmm.types import RewardInfo, TickArrayState, TickState
from nethermind.clmm.utils import wrapping_sub

logger = logging.getLogger("nethermind").getChild("clmm").getChild("tick_array")


def get_array_start_index(tick: int, tick_spacing: int) -> int:
    """
    Returns the start index of the tick array containing tick.  Tick arrays cover TICK_ARRAY_SIZE * tick_spacing
    ticks, and negative ticks are rounded towards negative infinity, so tick -1 lives in the array starting at
    -(TICK_ARRAY_SIZE * tick_spacing).

    :param tick:
    :param tick_spacing:
    :return:
    """
    ticks_in_array = TICK_ARRAY_SIZE * tick_spacing
    return (tick // ticks_in_array) * ticks_in_array


def get_tick_state(tick_array: TickArrayState, tick: int, tick_spacing: int) -> TickState:
    """
    Returns the TickState for tick within tick_array.  The returned TickState is the record stored inside the
    array, so mutations are applied to the array.

    :raises InvalidTickIndex: if tick is not aligned to tick_spacing, or lies outside of the array
    """
    if tick % tick_spacing != 0:
        raise InvalidTickIndex(f"Tick {tick} is not a multiple of tick spacing {tick_spacing}")

    offset = (tick - tick_array.start_tick_index) // tick_spacing
    if not 0 <= offset < TICK_ARRAY_SIZE:
        raise InvalidTickIndex(f"Tick {tick} is outside of tick array starting at {tick_array.start_tick_index}")

    return tick_array.ticks[offset]


def update_tick(  # pylint: disable=too-many-arguments
    tick_state: TickState,
    tick_current: int,
    liquidity_delta: int,
    fee_growth_global_0_x64: int,
    fee_growth_global_1_x64: int,
    upper: bool,
    reward_infos: list[RewardInfo],
) -> bool:
    """
    Applies a liquidity delta to a tick.  When the tick is initialized from zero gross liquidity and lies at or
    below the current tick, all growth is assumed to have happened below the tick, and the outside snapshots
    are set to the global accumulators.

    :return: True if the tick flipped between initialized & uninitialized
    """
    liquidity_gross_before = tick_state.liquidity_gross
    liquidity_gross_after = ClmmMath.liquidity_math.add_delta(liquidity_gross_before, liquidity_delta)

    flipped = (liquidity_gross_after == 0) != (liquidity_gross_before == 0)

    if liquidity_gross_before == 0:
        if tick_state.tick <= tick_current:
            tick_state.fee_growth_outside_0_x64 = fee_growth_global_0_x64
            tick_state.fee_growth_outside_1_x64 = fee_growth_global_1_x64
            tick_state.reward_growths_outside_x64 = [
                info.reward_growth_global_x64 if info.initialized() else 0 for info in reward_infos
            ]

    liquidity_net = tick_state.liquidity_net - liquidity_delta if upper else tick_state.liquidity_net + liquidity_delta
    if not I128_MIN <= liquidity_net <= I128_MAX:
        raise LiquidityAddValueError(f"Net liquidity of tick {tick_state.tick} overflows i128")

    tick_state.liquidity_gross = liquidity_gross_after
    tick_state.liquidity_net = liquidity_net

    return flipped


def cross_tick(
    tick_state: TickState,
    fee_growth_global_0_x64: int,
    fee_growth_global_1_x64: int,
    reward_infos: list[RewardInfo],
) -> int:
    """
    Flips the outside growth snapshots of a tick when the price crosses it.

    :return: net liquidity of the tick
    """
    tick_state.fee_growth_outside_0_x64 = wrapping_sub(fee_growth_global_0_x64, tick_state.fee_growth_outside_0_x64)
    tick_state.fee_growth_outside_1_x64 = wrapping_sub(fee_growth_global_1_x64, tick_state.fee_growth_outside_1_x64)

    for index, info in enumerate(reward_infos):
        if info.initialized():
            tick_state.reward_growths_outside_x64[index] = wrapping_sub(
                info.reward_growth_global_x64, tick_state.reward_growths_outside_x64[index]
            )

    logger.debug(f"Crossed Tick {tick_state.tick} with Net Liquidity {tick_state.liquidity_net}")
    return tick_state.liquidity_net


def clear_tick(tick_state: TickState):
    """Resets a tick to the uninitialized state"""
    tick_state.liquidity_net = 0
    tick_state.liquidity_gross = 0
    tick_state.fee_growth_outside_0_x64 = 0
    tick_state.fee_growth_outside_1_x64 = 0
    tick_state.reward_growths_outside_x64 = [0] * len(tick_state.reward_growths_outside_x64)


def get_fee_growth_inside(
    tick_lower_state: TickState,
    tick_upper_state: TickState,
    tick_current: int,
    fee_growth_global_0_x64: int,
    fee_growth_global_1_x64: int,
) -> tuple[int, int]:
    """
    Computes the fee growth per unit of liquidity inside the range [tick_lower, tick_upper).
    Accumulators are allowed to wrap, so every subtraction is a 128 bit wrapping subtraction.

    :return: (fee_growth_inside_0_x64, fee_growth_inside_1_x64)
    """
    if tick_current >= tick_lower_state.tick:
        fee_growth_below_0 = tick_lower_state.fee_growth_outside_0_x64
        fee_growth_below_1 = tick_lower_state.fee_growth_outside_1_x64
    else:
        fee_growth_below_0 = wrapping_sub(fee_growth_global_0_x64, tick_lower_state.fee_growth_outside_0_x64)
        fee_growth_below_1 = wrapping_sub(fee_growth_global_1_x64, tick_lower_state.fee_growth_outside_1_x64)

    if tick_current < tick_upper_state.tick:
        fee_growth_above_0 = tick_upper_state.fee_growth_outside_0_x64
        fee_growth_above_1 = tick_upper_state.fee_growth_outside_1_x64
    else:
        fee_growth_above_0 = wrapping_sub(fee_growth_global_0_x64, tick_upper_state.fee_growth_outside_0_x64)
        fee_growth_above_1 = wrapping_sub(fee_growth_global_1_x64, tick_upper_state.fee_growth_outside_1_x64)

    return (
        wrapping_sub(wrapping_sub(fee_growth_global_0_x64, fee_growth_below_0), fee_growth_above_0),
        wrapping_sub(wrapping_sub(fee_growth_global_1_x64, fee_growth_below_1), fee_growth_above_1),
    )


def get_reward_growths_inside(
    tick_lower_state: TickState,
    tick_upper_state: TickState,
    tick_current: int,
    reward_infos: list[RewardInfo],
) -> list[int]:
    """
    Computes the reward growth per unit of liquidity inside the range [tick_lower, tick_upper) for every reward.
    Uninitialized rewards report zero growth.
    """
    reward_growths_inside = []
    for index, info in enumerate(reward_infos):
        if not info.initialized():
            reward_growths_inside.append(0)
            continue

        if tick_current >= tick_lower_state.tick:
            reward_growth_below = tick_lower_state.reward_growths_outside_x64[index]
        else:
            reward_growth_below = wrapping_sub(
                info.reward_growth_global_x64, tick_lower_state.reward_growths_outside_x64[index]
            )

        if tick_current < tick_upper_state.tick:
            reward_growth_above = tick_upper_state.reward_growths_outside_x64[index]
        else:
            reward_growth_above = wrapping_sub(
                info.reward_growth_global_x64, tick_upper_state.reward_growths_outside_x64[index]
            )

        reward_growths_inside.append(
            wrapping_sub(wrapping_sub(info.reward_growth_global_x64, reward_growth_below), reward_growth_above)
        )

    return reward_growths_inside


def next_initialized_tick(tick_array: TickArrayState, tick_current: int, zero_for_one: bool) -> TickState | None:
    """
    Searches a tick array for the next initialized tick in the swap direction.

    :param tick_array:
    :param tick_current: current tick of the pool
    :param zero_for_one: If True, returns the greatest initialized tick less than or equal to tick_current.
        If False, returns the smallest initialized tick greater than tick_current.
    :return: TickState, or None if the array has no initialized tick in the swap direction
    """
    if zero_for_one:
        for tick_state in reversed(tick_array.ticks):
            if tick_state.tick <= tick_current and tick_state.is_initialized():
                return tick_state
        return None

    for tick_state in tick_array.ticks:
        if tick_state.tick > tick_current and tick_state.is_initialized():
            return tick_state
    return None
