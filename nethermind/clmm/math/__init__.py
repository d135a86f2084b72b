from .full_math import FullMathModule
from .liquidity_math import LiquidityMathModule
from .shared import (
    FEE_RATE_DENOMINATOR,
    MAX_SQRT_PRICE_X64,
    MAX_TICK,
    MIN_SQRT_PRICE_X64,
    MIN_TICK,
    Q64,
    TICK_ARRAY_SIZE,
    U64_MAX,
    U128_MAX,
    SwapComputation,
    check_sqrt_price,
    check_ticks,
    get_fee_and_spacing,
)
from .sqrt_price_math import SqrtPriceMathModule
from .swap_math import SwapMathModule
from .tick_math import TickMathModule


class ClmmMath:
    """
    Class for accessing the CLMM fixed point math modules.  All values are exact integers, with prices encoded
    as Q64.64 fixed point numbers.
    """

    MAX_SQRT_PRICE_X64 = MAX_SQRT_PRICE_X64
    MIN_SQRT_PRICE_X64 = MIN_SQRT_PRICE_X64

    MAX_TICK = MAX_TICK
    MIN_TICK = MIN_TICK

    U64_MAX = U64_MAX
    U128_MAX = U128_MAX
    Q64 = Q64
    FEE_RATE_DENOMINATOR = FEE_RATE_DENOMINATOR
    TICK_ARRAY_SIZE = TICK_ARRAY_SIZE

    # Math Modules

    full_math = FullMathModule
    sqrt_price_math = SqrtPriceMathModule
    tick_math = TickMathModule
    liquidity_math = LiquidityMathModule
    swap_math = SwapMathModule

    # Safety Methods
    check_ticks = staticmethod(check_ticks)
    check_sqrt_price = staticmethod(check_sqrt_price)
    get_fee_and_spacing = staticmethod(get_fee_and_spacing)

    @classmethod
    def get_delta_amounts_signed(
        cls,
        tick_current: int,
        sqrt_price_x64: int,
        tick_lower: int,
        tick_upper: int,
        liquidity_delta: int,
    ) -> tuple[int, int]:
        """Shortcut for :meth:`LiquidityMathModule.get_delta_amounts_signed`"""
        return cls.liquidity_math.get_delta_amounts_signed(
            tick_current, sqrt_price_x64, tick_lower, tick_upper, liquidity_delta
        )

    @classmethod
    def compute_swap_step(  # pylint: disable=too-many-arguments
        cls,
        sqrt_price_current_x64: int,
        sqrt_price_target_x64: int,
        liquidity: int,
        amount_remaining: int,
        fee_rate: int,
        is_base_input: bool,
        zero_for_one: bool,
    ) -> SwapComputation:
        """Shortcut for :meth:`SwapMathModule.compute_swap_step`"""
        return cls.swap_math.compute_swap_step(
            sqrt_price_current_x64,
            sqrt_price_target_x64,
            liquidity,
            amount_remaining,
            fee_rate,
            is_base_input,
            zero_for_one,
        )


__all__ = [
    "ClmmMath",
    "FullMathModule",
    "LiquidityMathModule",
    "SqrtPriceMathModule",
    "SwapMathModule",
    "TickMathModule",
    "SwapComputation",
]
