import logging

from nethermind.clmm.exceptions import FullMathRevert
from nethermind.clmm.math import ClmmMath
from nethermind.clmm.math.shared import Q64, U64_MAX, U256_MAX
from nethermind.clmm.types import (
    PersonalPositionState,
    PoolState,
    ProtocolPositionState,
    RewardInfo,
    RewardState,
)
from nethermind.clmm.utils import wrapping_add, wrapping_sub

logger = logging.getLogger("nethermind").getChild("clmm").getChild("rewards")


def calculate_latest_token_fees(
    last_total_fees: int,
    fee_growth_inside_last_x64: int,
    fee_growth_inside_latest_x64: int,
    liquidity: int,
) -> int:
    """
    Adds the fees earned by liquidity since the last fee growth snapshot to the owed total.

    The growth delta is a 128 bit wrapping subtraction, so a wrapped accumulator still yields the true growth.
    If the earned amount does not fit a u64, it underflows to zero.

    :param last_total_fees: fees owed before this update
    :param fee_growth_inside_last_x64: fee growth inside snapshot taken at the previous update
    :param fee_growth_inside_latest_x64: current fee growth inside the position range
    :param liquidity: liquidity held over the interval between the two snapshots
    :return: updated fees owed
    :raises FullMathRevert: if the owed total overflows a u64
    """
    fee_growth_delta = ClmmMath.full_math.mul_div_floor(
        wrapping_sub(fee_growth_inside_latest_x64, fee_growth_inside_last_x64),
        liquidity,
        Q64,
        max_value=U256_MAX,
    )
    if fee_growth_delta > U64_MAX:
        fee_growth_delta = 0

    logger.debug(
        f"Calculating Latest Fees.  Fee Growth Delta: {fee_growth_delta}, Inside Latest: "
        f"{fee_growth_inside_latest_x64}, Inside Last: {fee_growth_inside_last_x64}, Liquidity: {liquidity}"
    )

    if last_total_fees + fee_growth_delta > U64_MAX:
        raise FullMathRevert(f"Owed amount {last_total_fees} + {fee_growth_delta} overflows u64")
    return last_total_fees + fee_growth_delta


def update_reward_infos(pool: PoolState, timestamp: int) -> list[RewardInfo]:
    """
    Accrues reward emissions into the global reward growth of every initialized reward, up to timestamp.
    Emissions for a period with zero active liquidity are not distributed.

    :param pool: pool to update in place
    :param timestamp: current unix timestamp
    :return: updated reward infos of the pool
    """
    for reward_info in pool.reward_infos:
        if not reward_info.initialized():
            continue
        if timestamp <= reward_info.open_time:
            continue

        latest_update_timestamp = min(timestamp, reward_info.end_time)

        if pool.liquidity != 0 and reward_info.last_update_time < latest_update_timestamp:
            time_delta = latest_update_timestamp - reward_info.last_update_time
            reward_growth_delta = ClmmMath.full_math.mul_div_floor(
                time_delta,
                reward_info.emissions_per_second_x64,
                pool.liquidity,
            )
            reward_info.reward_growth_global_x64 = wrapping_add(
                reward_info.reward_growth_global_x64, reward_growth_delta
            )
            reward_info.reward_total_emissioned += ClmmMath.full_math.mul_div_ceil(
                time_delta,
                reward_info.emissions_per_second_x64,
                Q64,
            )
            logger.debug(
                f"Reward {reward_info.token_mint} grew by {reward_growth_delta} over {time_delta} seconds, "
                f"Total Emissioned: {reward_info.reward_total_emissioned}"
            )

        reward_info.last_update_time = latest_update_timestamp
        if reward_info.reward_state == RewardState.initialized:
            reward_info.reward_state = RewardState.opening
        if timestamp >= reward_info.end_time:
            reward_info.reward_state = RewardState.ended

    return pool.reward_infos


def update_position_rewards(position: PersonalPositionState, reward_growths_inside: list[int]):
    """
    Accrues rewards earned by the position since its last reward snapshot, and refreshes the snapshot.
    Must be applied before the position liquidity is mutated, since the earned amount is computed against the
    liquidity that was held over the interval being closed.

    :param position: personal position to update in place
    :param reward_growths_inside: current reward growth inside the position range, per reward
    """
    for reward_growth_inside, position_reward in zip(reward_growths_inside, position.reward_infos):
        position_reward.reward_amount_owed = calculate_latest_token_fees(
            position_reward.reward_amount_owed,
            position_reward.growth_inside_last_x64,
            reward_growth_inside,
            position.liquidity,
        )
        position_reward.growth_inside_last_x64 = reward_growth_inside


def settle_position(position: PersonalPositionState, protocol_position: ProtocolPositionState):
    """
    Brings the fees & rewards owed to a personal position up to date with its protocol position, using the
    position liquidity held before the current operation.  Callers mutate position.liquidity afterwards.

    :param position: personal position to update in place
    :param protocol_position: protocol position of the same range, already updated by the liquidity engine
    """
    position.token_fees_owed_0 = calculate_latest_token_fees(
        position.token_fees_owed_0,
        position.fee_growth_inside_0_last_x64,
        protocol_position.fee_growth_inside_0_last_x64,
        position.liquidity,
    )
    position.token_fees_owed_1 = calculate_latest_token_fees(
        position.token_fees_owed_1,
        position.fee_growth_inside_1_last_x64,
        protocol_position.fee_growth_inside_1_last_x64,
        position.liquidity,
    )
    position.fee_growth_inside_0_last_x64 = protocol_position.fee_growth_inside_0_last_x64
    position.fee_growth_inside_1_last_x64 = protocol_position.fee_growth_inside_1_last_x64

    update_position_rewards(position, protocol_position.reward_growth_inside)
