from nethermind.clmm.exceptions import (
    LiquidityAddValueError,
    LiquiditySubValueError,
    MaxTokenOverflow,
)

from .full_math import FullMathModule
from .shared import Q64, U64_MAX, U128_MAX, overflow_check
from .sqrt_price_math import SqrtPriceMathModule
from .tick_math import TickMathModule


class LiquidityMathModule:
    """
    Math module for applying liquidity deltas, and converting between liquidity and token amounts over a range
    """

    full_math = FullMathModule
    sqrt_price_math = SqrtPriceMathModule
    tick_math = TickMathModule

    @classmethod
    def add_delta(cls, liquidity: int, delta: int) -> int:
        """
        Applies a signed liquidity delta to an unsigned u128 liquidity value

        :param liquidity: current liquidity
        :param delta: signed liquidity delta
        :return: liquidity + delta
        """
        if delta < 0:
            if liquidity < -delta:
                raise LiquiditySubValueError(f"Cannot remove {-delta} liquidity from {liquidity}")
            return liquidity + delta

        if liquidity + delta > U128_MAX:
            raise LiquidityAddValueError(f"Adding {delta} liquidity to {liquidity} overflows u128")
        return liquidity + delta

    @classmethod
    def get_delta_amount_0_signed(cls, sqrt_price_a_x64: int, sqrt_price_b_x64: int, liquidity: int) -> int:
        """
        Returns the magnitude of the token 0 delta for a signed liquidity delta.  Amounts owed to the pool
        (liquidity > 0) are rounded up, amounts returned from the pool (liquidity < 0) are rounded down.
        """
        amount = cls.sqrt_price_math.get_delta_amount_0_unsigned(
            sqrt_price_a_x64, sqrt_price_b_x64, abs(liquidity), liquidity > 0
        )
        return overflow_check(amount, U64_MAX, MaxTokenOverflow)

    @classmethod
    def get_delta_amount_1_signed(cls, sqrt_price_a_x64: int, sqrt_price_b_x64: int, liquidity: int) -> int:
        """
        Returns the magnitude of the token 1 delta for a signed liquidity delta.  Amounts owed to the pool
        (liquidity > 0) are rounded up, amounts returned from the pool (liquidity < 0) are rounded down.
        """
        amount = cls.sqrt_price_math.get_delta_amount_1_unsigned(
            sqrt_price_a_x64, sqrt_price_b_x64, abs(liquidity), liquidity > 0
        )
        return overflow_check(amount, U64_MAX, MaxTokenOverflow)

    @classmethod
    def get_delta_amounts_signed(
        cls,
        tick_current: int,
        sqrt_price_x64: int,
        tick_lower: int,
        tick_upper: int,
        liquidity_delta: int,
    ) -> tuple[int, int]:
        """
        Computes the token amounts required to add (or returned when removing) liquidity_delta over a tick range.

        * If the current tick is below the range, the position is entirely token 0
        * If the current tick is inside the range, both tokens are required
        * If the current tick is at or above tick_upper, the position is entirely token 1

        :param tick_current: current tick of the pool
        :param sqrt_price_x64: current sqrt price of the pool
        :param tick_lower:
        :param tick_upper:
        :param liquidity_delta: signed liquidity delta
        :return: (amount_0, amount_1) as non-negative token amounts
        """
        sqrt_price_lower = cls.tick_math.get_sqrt_price_at_tick(tick_lower)
        sqrt_price_upper = cls.tick_math.get_sqrt_price_at_tick(tick_upper)

        amount_0, amount_1 = 0, 0
        if tick_current < tick_lower:
            amount_0 = cls.get_delta_amount_0_signed(sqrt_price_lower, sqrt_price_upper, liquidity_delta)
        elif tick_current < tick_upper:
            amount_0 = cls.get_delta_amount_0_signed(sqrt_price_x64, sqrt_price_upper, liquidity_delta)
            amount_1 = cls.get_delta_amount_1_signed(sqrt_price_lower, sqrt_price_x64, liquidity_delta)
        else:
            amount_1 = cls.get_delta_amount_1_signed(sqrt_price_lower, sqrt_price_upper, liquidity_delta)

        return amount_0, amount_1

    @classmethod
    def get_liquidity_from_amount_0(cls, sqrt_price_a_x64: int, sqrt_price_b_x64: int, amount_0: int) -> int:
        """Computes the liquidity provided by amount_0 between two sqrt prices, rounded down"""
        if sqrt_price_a_x64 > sqrt_price_b_x64:
            sqrt_price_a_x64, sqrt_price_b_x64 = sqrt_price_b_x64, sqrt_price_a_x64

        intermediate = cls.full_math.mul_div_floor(sqrt_price_a_x64, sqrt_price_b_x64, Q64)
        return cls.full_math.mul_div_floor(amount_0, intermediate, sqrt_price_b_x64 - sqrt_price_a_x64)

    @classmethod
    def get_liquidity_from_amount_1(cls, sqrt_price_a_x64: int, sqrt_price_b_x64: int, amount_1: int) -> int:
        """Computes the liquidity provided by amount_1 between two sqrt prices, rounded down"""
        if sqrt_price_a_x64 > sqrt_price_b_x64:
            sqrt_price_a_x64, sqrt_price_b_x64 = sqrt_price_b_x64, sqrt_price_a_x64

        return cls.full_math.mul_div_floor(amount_1, Q64, sqrt_price_b_x64 - sqrt_price_a_x64)

    @classmethod
    def get_liquidity_from_amounts(
        cls,
        sqrt_price_x64: int,
        sqrt_price_a_x64: int,
        sqrt_price_b_x64: int,
        amount_0: int,
        amount_1: int,
    ) -> int:
        """
        Computes the maximum liquidity that can be added over a price range with the given token budgets

        :param sqrt_price_x64: current sqrt price of the pool
        :param sqrt_price_a_x64: sqrt price of the lower tick
        :param sqrt_price_b_x64: sqrt price of the upper tick
        :param amount_0: token 0 budget
        :param amount_1: token 1 budget
        :return: liquidity
        """
        if sqrt_price_a_x64 > sqrt_price_b_x64:
            sqrt_price_a_x64, sqrt_price_b_x64 = sqrt_price_b_x64, sqrt_price_a_x64

        if sqrt_price_x64 <= sqrt_price_a_x64:
            return cls.get_liquidity_from_amount_0(sqrt_price_a_x64, sqrt_price_b_x64, amount_0)
        if sqrt_price_x64 < sqrt_price_b_x64:
            return min(
                cls.get_liquidity_from_amount_0(sqrt_price_x64, sqrt_price_b_x64, amount_0),
                cls.get_liquidity_from_amount_1(sqrt_price_a_x64, sqrt_price_x64, amount_1),
            )
        return cls.get_liquidity_from_amount_1(sqrt_price_a_x64, sqrt_price_b_x64, amount_1)
