import logging
from dataclasses import dataclass

from nethermind.clmm.exceptions import ClmmRevert, InvalidTickIndex, PriceOutOfBounds

logger = logging.getLogger("nethermind").getChild("clmm").getChild("math")

MAX_TICK = 443636
MIN_TICK = -MAX_TICK
MIN_SQRT_PRICE_X64 = 4295048016
MAX_SQRT_PRICE_X64 = 79226673521066979257578248091

RESOLUTION = 64
Q64 = 0x10000000000000000
U64_MAX = 2**64 - 1
U128_MAX = 2**128 - 1
U256_MAX = 2**256 - 1
I128_MAX = 2**127 - 1
I128_MIN = -(2**127)

FEE_RATE_DENOMINATOR = 1_000_000
REWARD_NUM = 3
TICK_ARRAY_SIZE = 60

FEES_TO_TICK_SPACINGS = {
    100: 1,
    500: 10,
    2500: 60,
    10000: 120,
}

TICK_SPACINGS_TO_FEES = {v: k for k, v in FEES_TO_TICK_SPACINGS.items()}


@dataclass(slots=True)
class SwapComputation:
    """Model to store the results of a swap step computation"""

    sqrt_price_next: int
    amount_in: int
    amount_out: int
    fee_amount: int


def check_ticks(tick_lower: int, tick_upper: int, tick_spacing: int = 1):
    """
    Checks that ticks are ordered, within MIN and MAX ticks, and aligned to the tick spacing.
    Raises InvalidTickIndex if invalid ticks are detected.

    :param tick_lower:
    :param tick_upper:
    :param tick_spacing:
    :return:
    """
    if tick_lower >= tick_upper:
        raise InvalidTickIndex("tick_lower must be smaller than tick_upper")
    if tick_lower < MIN_TICK:
        raise InvalidTickIndex("tick_lower must be greater than MIN_TICK")
    if tick_upper > MAX_TICK:
        raise InvalidTickIndex("tick_upper must be less than MAX_TICK")
    if tick_lower % tick_spacing != 0 or tick_upper % tick_spacing != 0:
        raise InvalidTickIndex(f"Ticks {tick_lower}, {tick_upper} are not multiples of tick spacing {tick_spacing}")


def check_sqrt_price(sqrt_price_x64: int):
    """
    Checks that sqrt_price is within MIN and MAX sqrt_price.

    :raises PriceOutOfBounds: if sqrt_price_x64 is outside of [MIN_SQRT_PRICE_X64, MAX_SQRT_PRICE_X64)

    :param sqrt_price_x64:
    :return:
    """
    if not MIN_SQRT_PRICE_X64 <= sqrt_price_x64 < MAX_SQRT_PRICE_X64:
        raise PriceOutOfBounds(
            f"sqrt_price_x64 {sqrt_price_x64} is outside of [{MIN_SQRT_PRICE_X64}, {MAX_SQRT_PRICE_X64})"
        )


def get_fee_and_spacing(fee: int | None = None, tick_spacing: int | None = None) -> tuple[int, int]:
    """
    Returns the trade fee rate and tick spacing for a config.  If no fee or tick spacing is provided, the default
    values of 2500 and 60 are returned.

    :param fee: trade fee rate, denominated in hundredths of a bip (1_000_000 == 100%)
    :param tick_spacing:
    :return:
    """
    if fee is None and tick_spacing is None:
        return 2500, 60

    if fee is None and tick_spacing is not None and TICK_SPACINGS_TO_FEES.get(tick_spacing) is not None:
        return TICK_SPACINGS_TO_FEES[tick_spacing], tick_spacing

    if fee is not None and tick_spacing is None and FEES_TO_TICK_SPACINGS.get(fee) is not None:
        return fee, FEES_TO_TICK_SPACINGS[fee]

    if fee is not None and tick_spacing is not None:
        if FEES_TO_TICK_SPACINGS.get(fee) != tick_spacing:
            logger.warning(
                f"Tick spacing & Fee were both specified, but do not match typical values"
                f"\tFee: {fee}, Tick Spacing: {tick_spacing}"
            )
        return fee, tick_spacing

    raise ClmmRevert(
        "Nonstandard tick spacing or fee provided. Please provide a standard value, "
        "or both tick_spacing and fee when using nonstandard values"
    )


def overflow_check(number: int, max_value: int, exception_class: type[Exception] = ClmmRevert) -> int:
    """
    Checks that a number is not greater than a max value.  Raises exception_class if the number overflows.

    :param number:
    :param max_value:
    :param exception_class: Exception to raise on overflow.  Defaults to ClmmRevert
    :return:
    """
    if number > max_value:
        raise exception_class(f"{number} Overflowed Max Value of: {max_value}")

    return number
