import math

from nethermind.clmm.math.shared import MAX_TICK as GLOBAL_MAX_TICK
from nethermind.clmm.math.shared import MIN_TICK as GLOBAL_MIN_TICK

MIN_TICK = {spacing: -(-GLOBAL_MIN_TICK // spacing) * spacing for spacing in (1, 10, 60, 120)}
MAX_TICK = {spacing: (GLOBAL_MAX_TICK // spacing) * spacing for spacing in (1, 10, 60, 120)}


def encode_sqrt_price_x64(reserve_1: int, reserve_0: int) -> int:
    """Encodes the price reserve_1 / reserve_0 as a Q64.64 sqrt price"""
    return math.isqrt((reserve_1 << 128) // reserve_0)
