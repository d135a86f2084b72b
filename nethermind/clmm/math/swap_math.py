from .full_math import FullMathModule
from .shared import FEE_RATE_DENOMINATOR, SwapComputation
from .sqrt_price_math import SqrtPriceMathModule


class SwapMathModule:
    """Math module for computing a single swap step within one initialized tick range"""

    full_math = FullMathModule
    sqrt_price_math = SqrtPriceMathModule

    @classmethod
    def compute_swap_step(  # pylint: disable=too-many-arguments,too-many-branches
        cls,
        sqrt_price_current_x64: int,
        sqrt_price_target_x64: int,
        liquidity: int,
        amount_remaining: int,
        fee_rate: int,
        is_base_input: bool,
        zero_for_one: bool,
    ) -> SwapComputation:
        """
        Computes the next step in a swap.  Returns the next sqrt price, amount in, amount out, and fee amount.

        :param sqrt_price_current_x64:
        :param sqrt_price_target_x64: sqrt price that cannot be crossed by this step
        :param liquidity: active liquidity within the step
        :param amount_remaining: token amount left to swap.  Is the input amount if is_base_input, otherwise
            the output amount
        :param fee_rate: trade fee rate denominated in FEE_RATE_DENOMINATOR
        :param is_base_input: True if amount_remaining is an exact input amount
        :param zero_for_one: direction of the swap
        :return:
        """
        amount_in, amount_out = 0, 0
        sqrt_price_math = cls.sqrt_price_math

        if is_base_input:
            amount_remaining_less_fee = cls.full_math.mul_div_floor(
                amount_remaining,
                FEE_RATE_DENOMINATOR - fee_rate,
                FEE_RATE_DENOMINATOR,
            )
            if zero_for_one:
                amount_in = sqrt_price_math.get_delta_amount_0_unsigned(
                    sqrt_price_target_x64, sqrt_price_current_x64, liquidity, True
                )
            else:
                amount_in = sqrt_price_math.get_delta_amount_1_unsigned(
                    sqrt_price_current_x64, sqrt_price_target_x64, liquidity, True
                )

            if amount_remaining_less_fee >= amount_in:
                sqrt_price_next = sqrt_price_target_x64
            else:
                sqrt_price_next = sqrt_price_math.get_next_sqrt_price_from_input(
                    sqrt_price_current_x64, liquidity, amount_remaining_less_fee, zero_for_one
                )
        else:
            if zero_for_one:
                amount_out = sqrt_price_math.get_delta_amount_1_unsigned(
                    sqrt_price_target_x64, sqrt_price_current_x64, liquidity, False
                )
            else:
                amount_out = sqrt_price_math.get_delta_amount_0_unsigned(
                    sqrt_price_current_x64, sqrt_price_target_x64, liquidity, False
                )

            if amount_remaining >= amount_out:
                sqrt_price_next = sqrt_price_target_x64
            else:
                sqrt_price_next = sqrt_price_math.get_next_sqrt_price_from_output(
                    sqrt_price_current_x64, liquidity, amount_remaining, zero_for_one
                )

        max_price_reached = sqrt_price_target_x64 == sqrt_price_next

        if zero_for_one:
            if not (max_price_reached and is_base_input):
                amount_in = sqrt_price_math.get_delta_amount_0_unsigned(
                    sqrt_price_next, sqrt_price_current_x64, liquidity, True
                )
            if not (max_price_reached and not is_base_input):
                amount_out = sqrt_price_math.get_delta_amount_1_unsigned(
                    sqrt_price_next, sqrt_price_current_x64, liquidity, False
                )
        else:
            if not (max_price_reached and is_base_input):
                amount_in = sqrt_price_math.get_delta_amount_1_unsigned(
                    sqrt_price_current_x64, sqrt_price_next, liquidity, True
                )
            if not (max_price_reached and not is_base_input):
                amount_out = sqrt_price_math.get_delta_amount_0_unsigned(
                    sqrt_price_current_x64, sqrt_price_next, liquidity, False
                )

        if not is_base_input and amount_out > amount_remaining:
            amount_out = amount_remaining

        if is_base_input and sqrt_price_next != sqrt_price_target_x64:
            # Whatever input is not consumed by the price move is taken as fee
            fee_amount = amount_remaining - amount_in
        else:
            fee_amount = cls.full_math.mul_div_ceil(amount_in, fee_rate, FEE_RATE_DENOMINATOR - fee_rate)

        return SwapComputation(
            sqrt_price_next=sqrt_price_next,
            amount_in=amount_in,
            amount_out=amount_out,
            fee_amount=fee_amount,
        )
