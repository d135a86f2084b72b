import random
from typing import Literal

from eth_typing import ChecksumAddress
from eth_utils import is_hex_address, keccak, to_checksum_address


def random_address() -> ChecksumAddress:
    """
    Generate a random 20 byte ChecksumAddress
    :return: ChecksumAddress
    """
    return to_checksum_address(random.randbytes(20).hex())


def _seed_bytes(seed: str | bytes | int) -> bytes:
    if isinstance(seed, bytes):
        return seed
    if isinstance(seed, int):
        # Tick indexes are encoded as i32
        return seed.to_bytes(4, "big", signed=True)
    if is_hex_address(seed):
        return bytes.fromhex(seed[2:])
    return seed.encode("utf-8")


def derive_address(*seeds: str | bytes | int) -> ChecksumAddress:
    """
    Derives a deterministic record address from a sequence of seeds.  Addresses are seeded the same way the
    on-chain program derives its accounts, ie pool = ("pool", amm_config, mint_0, mint_1).

    Hex addresses are hashed as their 20 raw bytes, integers as signed 4 byte big endian values, and all other
    strings as utf-8.

    :param seeds: Seeds of the address
    :return: ChecksumAddress built from the last 20 bytes of the keccak hash of the concatenated seeds
    """
    return to_checksum_address(keccak(b"".join(_seed_bytes(seed) for seed in seeds))[-20:])


def address_sort_key(address: str) -> bytes:
    """Byte ordering of an address.  Used to enforce token_mint_0 < token_mint_1"""
    return bytes.fromhex(to_checksum_address(address)[2:])


def uint_over_under_flow(value: int, precision: Literal[64, 128]) -> int:
    """
    Handle uint over/underflow.  If value exceeds the max size of the uint, the value will overflow
    and start back at 0.  If value is less than 0, the value will underflow and start back at the max
    :param value: Number to check
    :param precision: bits of precision
    :return: within range uint
    """
    return value % (2**precision)


def wrapping_add(value: int, delta: int, precision: Literal[64, 128] = 128) -> int:
    """
    Adds delta to a wrapping accumulator.  Fee growth and reward growth accumulators are only ever consumed
    as differences, so overflowing past the max value and restarting from 0 is intended behavior.

    :param value: Current accumulator value
    :param delta: Non-negative growth to add
    :param precision: bit width of the accumulator
    """
    return uint_over_under_flow(value + delta, precision)


def wrapping_sub(value: int, delta: int, precision: Literal[64, 128] = 128) -> int:
    """
    Subtracts two wrapping accumulator readings.  When the accumulator has wrapped between the two readings,
    the result still equals the true growth, since both sides are reduced in the same bit width.

    :param value: Latest accumulator reading
    :param delta: Earlier accumulator reading
    :param precision: bit width of the accumulator
    """
    return uint_over_under_flow(value - delta, precision)
