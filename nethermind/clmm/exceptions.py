class ClmmRevert(Exception):
    """
    ClmmRevert is raised when a pool action breaks one of the pool's rules, and the whole operation is rolled back.
    The following conditions will result in this error (or one of its subclasses) being raised:

        * Creating a pool with unordered mints, or creating the same pool twice
        * Ticks that are not multiples of the pool tick spacing, or tick_lower >= tick_upper
        * Closing a position that still holds liquidity, fees, or rewards
        * Swapping zero tokens, or swapping with a sqrt_price limit on the wrong side of the current price

    """


class NotApproved(ClmmRevert):
    """
    Raised when an operation category is disabled on the pool through its status flags, or when the signer
    of a call does not own the position or config it is trying to modify.
    """


class PriceSlippageExceeded(ClmmRevert):
    """
    Raised when the realized token amounts of an operation violate the bounds supplied by the caller.

    * Adding liquidity requires more than ``amount_0_max`` or ``amount_1_max``
    * Removing liquidity returns less than ``amount_0_min`` or ``amount_1_min``
    * A swap pays out less than (or charges more than) ``other_amount_threshold``

    The operation is safe to retry with adjusted bounds or a refreshed price.
    """


class LiquiditySubValueError(ClmmRevert):
    """Raised when a liquidity delta would drive a tick, position, or pool liquidity value below zero"""


class LiquidityAddValueError(ClmmRevert):
    """Raised when a liquidity delta would overflow the 128 bit liquidity range"""


class InvalidTickIndex(ClmmRevert):
    """Raised when a tick is not aligned to the tick spacing, or is outside the tick array it is looked up in"""


class FullMathRevert(Exception):
    """
    Raised when the result of (a * b) / c overflows its integer width, when the denominator is zero, or when an
    unsigned operand is negative.
    """


class MaxTokenOverflow(FullMathRevert):
    """Raised when a computed token amount does not fit into a u64 token balance"""


class TickMathRevert(Exception):
    """
    Raised when a tick value is out of bounds, or a sqrt_price is outside the supported price range
    """


class TickOutOfBounds(TickMathRevert):
    """Raised when a tick is lower than MIN_TICK or higher than MAX_TICK"""


class PriceOutOfBounds(TickMathRevert):
    """Raised when a sqrt_price_x64 is lower than MIN_SQRT_PRICE_X64 or not lower than MAX_SQRT_PRICE_X64"""


class SqrtPriceMathRevert(Exception):
    """
    Raised when a sqrt_price value is out of bounds, or the inputs to a price calculation are
    invalid, ie moving the price with zero liquidity or removing more tokens than the range holds
    """
