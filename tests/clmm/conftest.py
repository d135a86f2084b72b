import pytest

from nethermind.clmm import AccountStore, ClmmPool, Token
from nethermind.clmm.math.shared import Q64
from nethermind.clmm.utils import address_sort_key


@pytest.fixture(name="token_pair")
def fixture_token_pair(random_address):
    def _token_pair(decimals_0: int = 6, decimals_1: int = 6) -> tuple[Token, Token]:
        mint_a, mint_b = sorted([random_address(), random_address()], key=address_sort_key)
        return (
            Token("Test Token 0", "TST0", decimals_0, mint_a),
            Token("Test Token 1", "TST1", decimals_1, mint_b),
        )

    return _token_pair


@pytest.fixture(name="initialize_empty_pool")
def fixture_initialize_empty_pool(random_address, token_pair):
    def _initialize_empty_pool(
        tick_spacing: int = 10,
        trade_fee_rate: int = 500,
        sqrt_price_x64: int = Q64,
        protocol_fee_rate: int = 120_000,
        fund_fee_rate: int = 40_000,
        timestamp: int = 1_000,
        **kwargs,
    ) -> ClmmPool:
        store = AccountStore(timestamp=timestamp)
        admin = random_address()
        config_id = ClmmPool.create_amm_config(
            store,
            owner=admin,
            tick_spacing=tick_spacing,
            trade_fee_rate=trade_fee_rate,
            protocol_fee_rate=protocol_fee_rate,
            fund_fee_rate=fund_fee_rate,
        )
        token_0, token_1 = token_pair()
        return ClmmPool.create(store, config_id, admin, token_0, token_1, sqrt_price_x64, **kwargs)

    return _initialize_empty_pool


@pytest.fixture(name="initialize_mint_test_pool")
def fixture_initialize_mint_test_pool(initialize_empty_pool, random_address):
    def _initialize_mint_test_pool(**kwargs):
        """Pool at price 1 with 1_000_000 liquidity over [-100, 100).  Returns (pool, owner, nft_mint)"""
        pool = initialize_empty_pool(**kwargs)
        owner = random_address()
        position = pool.open_position(owner, -100, 100, 1_000_000, 10_000, 10_000)
        return pool, owner, position.nft_mint

    return _initialize_mint_test_pool
