from eth_typing import ChecksumAddress

from nethermind.clmm.utils import derive_address

AMM_CONFIG_SEED = "amm_config"
POOL_SEED = "pool"
POOL_VAULT_SEED = "pool_vault"
POOL_REWARD_VAULT_SEED = "pool_reward_vault"
POSITION_SEED = "position"
TICK_ARRAY_SEED = "tick_array"
OBSERVATION_SEED = "observation"


def amm_config_address(index: int) -> ChecksumAddress:
    return derive_address(AMM_CONFIG_SEED, index)


def pool_address(
    amm_config: ChecksumAddress,
    token_mint_0: ChecksumAddress,
    token_mint_1: ChecksumAddress,
) -> ChecksumAddress:
    return derive_address(POOL_SEED, amm_config, token_mint_0, token_mint_1)


def pool_vault_address(pool_id: ChecksumAddress, token_mint: ChecksumAddress) -> ChecksumAddress:
    return derive_address(POOL_VAULT_SEED, pool_id, token_mint)


def pool_reward_vault_address(pool_id: ChecksumAddress, reward_mint: ChecksumAddress) -> ChecksumAddress:
    return derive_address(POOL_REWARD_VAULT_SEED, pool_id, reward_mint)


def observation_address(pool_id: ChecksumAddress) -> ChecksumAddress:
    return derive_address(OBSERVATION_SEED, pool_id)


def tick_array_address(pool_id: ChecksumAddress, start_tick_index: int) -> ChecksumAddress:
    return derive_address(TICK_ARRAY_SEED, pool_id, start_tick_index)


def protocol_position_address(pool_id: ChecksumAddress, tick_lower: int, tick_upper: int) -> ChecksumAddress:
    return derive_address(POSITION_SEED, pool_id, tick_lower, tick_upper)


def personal_position_address(nft_mint: ChecksumAddress) -> ChecksumAddress:
    return derive_address(POSITION_SEED, nft_mint)
