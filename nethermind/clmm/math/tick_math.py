from nethermind.clmm.exceptions import PriceOutOfBounds, TickOutOfBounds

from .shared import (
    MAX_SQRT_PRICE_X64,
    MAX_TICK,
    MIN_SQRT_PRICE_X64,
    MIN_TICK,
    Q64,
    U128_MAX,
)

# Q64.64 values of sqrt(1.0001) ** -(2 ** i), applied for every bit i set in abs(tick)
SQRT_PRICE_LADDER = (
    0xFFFCB933BD6FB800,
    0xFFF97272373D4000,
    0xFFF2E50F5F657000,
    0xFFE5CACA7E10F000,
    0xFFCB9843D60F7000,
    0xFF973B41FA98E800,
    0xFF2EA16466C9B000,
    0xFE5DEE046A9A3800,
    0xFCBE86C7900BB000,
    0xF987A7253AC65800,
    0xF3392B0822BB6000,
    0xE7159475A2CAF000,
    0xD097F3BDFD2F2000,
    0xA9F746462D9F8000,
    0x70D869A156F31C00,
    0x31BE135F97ED3200,
    0x9AA508B5B85A500,
    0x5D6AF8DEDC582C,
    0x2216E584F5FA,
)

BIT_PRECISION = 16

# log_sqrt(1.0001)(2) as a Q32.32 multiplier, and the error bounds of the 16 bit log2 approximation
LOG_B_2_X32 = 59543866431248
LOG_B_P_ERR_MARGIN_LOWER_X64 = 184467440737095516
LOG_B_P_ERR_MARGIN_UPPER_X64 = 15793534762490258745


class TickMathModule:
    """
    Module for converting between Q64.64 sqrt prices & tick indexes
    """

    @classmethod
    def get_sqrt_price_at_tick(cls, tick: int) -> int:
        """
        Returns the sqrt price as a Q64.64 fixed point number corresponding to the given tick.
        Computes the following formula: sqrt(1.0001^tick) * 2^64

        :param int tick: Tick to get sqrt price at.
        :return: sqrt_price encoded as a Q64.64 fixed point number
        """
        abs_tick = abs(tick)
        if abs_tick > MAX_TICK:
            raise TickOutOfBounds(f"Tick {tick} is outside of [{MIN_TICK}, {MAX_TICK}]")

        ratio = SQRT_PRICE_LADDER[0] if abs_tick & 0x1 else Q64
        for bit, magic in enumerate(SQRT_PRICE_LADDER[1:], start=1):
            if abs_tick & (1 << bit):
                ratio = (ratio * magic) >> 64

        # The ladder computes the price of -abs(tick).  Positive ticks take the reciprocal
        if tick > 0:
            ratio = U128_MAX // ratio

        return ratio

    @classmethod
    def get_tick_at_sqrt_price(cls, sqrt_price_x64: int) -> int:
        """
        Returns the greatest tick whose sqrt price is less than or equal to sqrt_price_x64.

        The base 2 log of the price is computed from the most significant bit and 16 rounds of squaring, converted
        to a log base sqrt(1.0001), and the two candidate ticks around the approximation error are resolved against
        get_sqrt_price_at_tick.

        :param int sqrt_price_x64: sqrt price encoded as a Q64.64 fixed point number
        :return: tick index
        """
        if not MIN_SQRT_PRICE_X64 <= sqrt_price_x64 < MAX_SQRT_PRICE_X64:
            raise PriceOutOfBounds(
                f"sqrt_price_x64 {sqrt_price_x64} is outside of [{MIN_SQRT_PRICE_X64}, {MAX_SQRT_PRICE_X64})"
            )

        msb = sqrt_price_x64.bit_length() - 1
        log2p_integer_x32 = (msb - 64) << 32

        # Normalize to a Q1.63 value in [1, 2)
        r = sqrt_price_x64 >> (msb - 63) if msb >= 64 else sqrt_price_x64 << (63 - msb)

        bit = 0x8000000000000000
        log2p_fraction_x64 = 0
        for _ in range(BIT_PRECISION):
            r *= r
            is_r_more_than_two = r >> 127
            r >>= 63 + is_r_more_than_two
            log2p_fraction_x64 += bit * is_r_more_than_two
            bit >>= 1

        log2p_x32 = log2p_integer_x32 + (log2p_fraction_x64 >> 32)
        log_sqrt_10001_x64 = log2p_x32 * LOG_B_2_X32

        tick_low = (log_sqrt_10001_x64 - LOG_B_P_ERR_MARGIN_LOWER_X64) >> 64
        tick_high = (log_sqrt_10001_x64 + LOG_B_P_ERR_MARGIN_UPPER_X64) >> 64

        if tick_low == tick_high:
            return tick_low
        if cls.get_sqrt_price_at_tick(tick_high) <= sqrt_price_x64:
            return tick_high
        return tick_low
