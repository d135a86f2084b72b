from nethermind.clmm.exceptions import FullMathRevert, SqrtPriceMathRevert

from .full_math import FullMathModule
from .shared import Q64, RESOLUTION, U128_MAX, U256_MAX


class SqrtPriceMathModule:
    """
    Math module for calculating sqrt prices & token amounts from Q64.64 sqrt prices and liquidity
    """

    full_math = FullMathModule

    @classmethod
    def get_next_sqrt_price_from_amount_0_rounding_up(
        cls,
        sqrt_price_x64: int,
        liquidity: int,
        amount: int,
        add: bool,
    ) -> int:
        """
        Returns the next sqrt price given a delta of token 0.  Always rounds up, so the price moves
        less when token 0 is added, and more when token 0 is removed.

        :param sqrt_price_x64:
        :param liquidity:
        :param amount:
        :param add: Whether token 0 is added to, or removed from the pool
        :return:
        """
        if amount == 0:
            return sqrt_price_x64

        numerator_1 = liquidity << RESOLUTION
        product = amount * sqrt_price_x64

        if add:
            if product <= U256_MAX:
                denominator = numerator_1 + product
                return cls.full_math.mul_div_ceil(numerator_1, sqrt_price_x64, denominator)

            return cls.full_math.div_rounding_up(numerator_1, (numerator_1 // sqrt_price_x64) + amount)

        if product > U256_MAX or numerator_1 <= product:
            raise SqrtPriceMathRevert("Removing more token 0 than the liquidity can provide")

        try:
            return cls.full_math.mul_div_ceil(numerator_1, sqrt_price_x64, numerator_1 - product)
        except FullMathRevert as exc:
            raise SqrtPriceMathRevert("Next sqrt price overflows u128") from exc

    @classmethod
    def get_next_sqrt_price_from_amount_1_rounding_down(
        cls,
        sqrt_price_x64: int,
        liquidity: int,
        amount: int,
        add: bool,
    ) -> int:
        """
        Returns the next sqrt price given a delta of token 1.  Always rounds down, so the price moves
        less when token 1 is added, and more when token 1 is removed.

        :param sqrt_price_x64:
        :param liquidity:
        :param amount:
        :param add: Whether token 1 is added to, or removed from the pool
        :return:
        """
        if add:
            quotient = (amount << RESOLUTION) // liquidity
            if sqrt_price_x64 + quotient > U128_MAX:
                raise SqrtPriceMathRevert("U128_MAX Overflow")
            return sqrt_price_x64 + quotient

        quotient = cls.full_math.div_rounding_up(amount << RESOLUTION, liquidity)
        if sqrt_price_x64 <= quotient:
            raise SqrtPriceMathRevert("Sqrt Price cannot be less than quotient")
        return sqrt_price_x64 - quotient

    @classmethod
    def get_next_sqrt_price_from_input(
        cls,
        sqrt_price_x64: int,
        liquidity: int,
        amount_in: int,
        zero_for_one: bool,
    ) -> int:
        """
        Returns the next sqrt price given an input amount of token 0 or token 1

        :param sqrt_price_x64:
        :param liquidity:
        :param amount_in:
        :param zero_for_one:
        :return:
        """
        if sqrt_price_x64 <= 0 or liquidity <= 0:
            raise SqrtPriceMathRevert("sqrt_price and liquidity must be greater than 0")

        return (
            cls.get_next_sqrt_price_from_amount_0_rounding_up(sqrt_price_x64, liquidity, amount_in, True)
            if zero_for_one
            else cls.get_next_sqrt_price_from_amount_1_rounding_down(sqrt_price_x64, liquidity, amount_in, True)
        )

    @classmethod
    def get_next_sqrt_price_from_output(
        cls,
        sqrt_price_x64: int,
        liquidity: int,
        amount_out: int,
        zero_for_one: bool,
    ) -> int:
        """
        Returns the next sqrt price given an output amount of token 0 or token 1

        :param sqrt_price_x64:
        :param liquidity:
        :param amount_out:
        :param zero_for_one:
        :return:
        """
        if sqrt_price_x64 <= 0 or liquidity <= 0:
            raise SqrtPriceMathRevert("sqrt_price and liquidity must be greater than 0")

        return (
            cls.get_next_sqrt_price_from_amount_1_rounding_down(sqrt_price_x64, liquidity, amount_out, False)
            if zero_for_one
            else cls.get_next_sqrt_price_from_amount_0_rounding_up(sqrt_price_x64, liquidity, amount_out, False)
        )

    @classmethod
    def get_delta_amount_0_unsigned(
        cls,
        sqrt_price_a_x64: int,
        sqrt_price_b_x64: int,
        liquidity: int,
        round_up: bool,
    ) -> int:
        """
        Returns the amount of token 0 between two sqrt prices for a given liquidity.
        Computes liquidity * (sqrt_b - sqrt_a) / (sqrt_a * sqrt_b)

        :param sqrt_price_a_x64:
        :param sqrt_price_b_x64:
        :param liquidity:
        :param round_up:
        :return:
        """
        if sqrt_price_a_x64 > sqrt_price_b_x64:
            sqrt_price_a_x64, sqrt_price_b_x64 = sqrt_price_b_x64, sqrt_price_a_x64

        if sqrt_price_a_x64 <= 0:
            raise SqrtPriceMathRevert("sqrt_price_a must be greater than 0")

        numerator_1 = liquidity << RESOLUTION
        numerator_2 = sqrt_price_b_x64 - sqrt_price_a_x64

        if round_up:
            return cls.full_math.div_rounding_up(
                cls.full_math.mul_div_ceil(numerator_1, numerator_2, sqrt_price_b_x64, U256_MAX),
                sqrt_price_a_x64,
            )
        return cls.full_math.mul_div_floor(numerator_1, numerator_2, sqrt_price_b_x64, U256_MAX) // sqrt_price_a_x64

    @classmethod
    def get_delta_amount_1_unsigned(
        cls,
        sqrt_price_a_x64: int,
        sqrt_price_b_x64: int,
        liquidity: int,
        round_up: bool,
    ) -> int:
        """
        Returns the amount of token 1 between two sqrt prices for a given liquidity.
        Computes liquidity * (sqrt_b - sqrt_a)

        :param sqrt_price_a_x64:
        :param sqrt_price_b_x64:
        :param liquidity:
        :param round_up:
        :return:
        """
        if sqrt_price_a_x64 > sqrt_price_b_x64:
            sqrt_price_a_x64, sqrt_price_b_x64 = sqrt_price_b_x64, sqrt_price_a_x64

        if round_up:
            return cls.full_math.mul_div_ceil(liquidity, sqrt_price_b_x64 - sqrt_price_a_x64, Q64, U256_MAX)
        return cls.full_math.mul_div_floor(liquidity, sqrt_price_b_x64 - sqrt_price_a_x64, Q64, U256_MAX)
