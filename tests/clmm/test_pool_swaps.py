import copy

import pytest

from nethermind.clmm.exceptions import ClmmRevert, NotApproved, PriceSlippageExceeded
from nethermind.clmm.math import ClmmMath
from nethermind.clmm.math.shared import MIN_TICK
from nethermind.clmm.types import SwapEvent


@pytest.fixture(name="initialize_swap_test_pool")
def fixture_initialize_swap_test_pool(initialize_empty_pool, random_address):
    def _initialize_swap_test_pool(**kwargs):
        """Pool at price 1 with 10**12 liquidity over [-100, 100).  Returns (pool, trader)"""
        pool = initialize_empty_pool(**kwargs)
        pool.open_position(random_address(), -100, 100, 10**12, 10**10, 10**10)
        return pool, random_address()

    return _initialize_swap_test_pool


class TestTickCrossing:
    def test_crossing_tick_activates_next_range(self, initialize_empty_pool, random_address):
        pool = initialize_empty_pool()
        owner, trader = random_address(), random_address()
        pool.open_position(owner, -100, 100, 1_000_000, 10**6, 10**6)
        pool.open_position(owner, 100, 300, 2_000_000, 10**6, 10**6)

        liquidity_before = pool.state.liquidity
        tick_net = pool.get_tick(100).liquidity_net

        pool.swap(
            trader,
            1_000_000,
            0,
            sqrt_price_limit_x64=ClmmMath.tick_math.get_sqrt_price_at_tick(100),
            is_base_input=True,
            zero_for_one=False,
        )

        state = pool.state
        assert state.tick_current == 100
        assert state.sqrt_price_x64 == ClmmMath.tick_math.get_sqrt_price_at_tick(100)
        assert state.liquidity == liquidity_before + tick_net == 2_000_000

        crossed_tick = pool.get_tick(100)
        assert state.fee_growth_global_1_x64 > 0
        assert crossed_tick.fee_growth_outside_1_x64 == state.fee_growth_global_1_x64
        assert crossed_tick.fee_growth_outside_0_x64 == 0

    def test_crossing_down_subtracts_net_liquidity(self, initialize_empty_pool, random_address):
        pool = initialize_empty_pool()
        owner, trader = random_address(), random_address()
        pool.open_position(owner, -100, 100, 1_000_000, 10**6, 10**6)
        pool.open_position(owner, -300, -100, 2_000_000, 10**6, 10**6)

        pool.swap(
            trader,
            1_000_000,
            0,
            sqrt_price_limit_x64=ClmmMath.tick_math.get_sqrt_price_at_tick(-200),
            is_base_input=True,
            zero_for_one=True,
        )

        state = pool.state
        assert state.tick_current == -200
        assert state.liquidity == 2_000_000
        # Fees earned after crossing -100 accrue below the tick, so they are excluded from its outside growth
        assert 0 < pool.get_tick(-100).fee_growth_outside_0_x64 < state.fee_growth_global_0_x64

    def test_swap_exhausts_liquidity(self, initialize_mint_test_pool, random_address):
        pool, _, _ = initialize_mint_test_pool()
        result = pool.swap(random_address(), 10**9, 0, 0, is_base_input=True, zero_for_one=True)

        state = pool.state
        assert state.liquidity == 0
        assert state.tick_current == MIN_TICK
        assert 4988 < result.amount_in < 10**9
        assert result.amount_out <= 4988


class TestSwaps:
    def test_exact_input_zero_for_one(self, initialize_swap_test_pool):
        pool, trader = initialize_swap_test_pool()
        result = pool.swap(trader, 10**8, 0, 0, is_base_input=True, zero_for_one=True)

        state = pool.state
        assert result.amount_in == result.amount_0 == 10**8
        assert result.amount_out == result.amount_1
        assert 0 < result.amount_out < 10**8
        assert state.tick_current < 0
        assert state.fee_growth_global_0_x64 > 0
        assert state.fee_growth_global_1_x64 == 0
        assert state.swap_in_amount_token_0 == 10**8
        assert state.swap_out_amount_token_1 == result.amount_out

    def test_fee_is_split_with_protocol_and_fund(self, initialize_swap_test_pool):
        pool, trader = initialize_swap_test_pool()
        pool.swap(trader, 10**8, 0, 0, is_base_input=True, zero_for_one=True)

        # 0.05% of 10**8 is 50_000, of which 12% goes to the protocol & 4% to the fund
        state = pool.state
        assert 5_990 <= state.protocol_fees_token_0 <= 6_010
        assert 1_990 <= state.fund_fees_token_0 <= 2_010
        assert state.protocol_fees_token_1 == state.fund_fees_token_1 == 0

    def test_exact_output_one_for_zero(self, initialize_swap_test_pool):
        pool, trader = initialize_swap_test_pool()
        result = pool.swap(trader, 10**6, 10**7, 0, is_base_input=False, zero_for_one=False)

        assert result.amount_out == result.amount_0 == 10**6
        assert result.amount_in == result.amount_1
        assert result.amount_in > 10**6
        assert pool.state.tick_current >= 0
        assert pool.state.fee_growth_global_1_x64 > 0

    def test_emits_swap_event(self, initialize_swap_test_pool):
        pool, trader = initialize_swap_test_pool()
        result = pool.swap(trader, 10**6, 0, 0, is_base_input=True, zero_for_one=False)

        event = pool.store.events[-1]
        assert isinstance(event, SwapEvent)
        assert event.sender == trader
        assert event.zero_for_one is False
        assert (event.amount_0, event.amount_1) == (result.amount_0, result.amount_1)
        assert event.tick == pool.state.tick_current

    def test_round_trip_does_not_profit_trader(self, initialize_swap_test_pool):
        pool, trader = initialize_swap_test_pool()
        first = pool.swap(trader, 10**7, 0, 0, is_base_input=True, zero_for_one=True)
        second = pool.swap(trader, first.amount_out, 0, 0, is_base_input=True, zero_for_one=False)

        assert second.amount_out < first.amount_in


class TestSwapLimits:
    def test_raises_if_output_below_threshold(self, initialize_swap_test_pool):
        pool, trader = initialize_swap_test_pool()
        accounts_before = copy.deepcopy(pool.store.accounts)

        with pytest.raises(PriceSlippageExceeded):
            pool.swap(trader, 10**6, 10**6, 0, is_base_input=True, zero_for_one=True)

        assert pool.store.accounts == accounts_before

    def test_raises_if_input_above_threshold(self, initialize_swap_test_pool):
        pool, trader = initialize_swap_test_pool()
        with pytest.raises(PriceSlippageExceeded):
            pool.swap(trader, 10**6, 10**6, 0, is_base_input=False, zero_for_one=True)

    def test_raises_if_price_limit_in_wrong_direction(self, initialize_swap_test_pool):
        pool, trader = initialize_swap_test_pool()
        above = ClmmMath.tick_math.get_sqrt_price_at_tick(10)
        with pytest.raises(ClmmRevert):
            pool.swap(trader, 10**6, 0, above, is_base_input=True, zero_for_one=True)

    def test_raises_for_zero_amount(self, initialize_swap_test_pool):
        pool, trader = initialize_swap_test_pool()
        with pytest.raises(ClmmRevert):
            pool.swap(trader, 0, 0, 0, is_base_input=True, zero_for_one=True)

    def test_stops_at_price_limit(self, initialize_swap_test_pool):
        pool, trader = initialize_swap_test_pool()
        limit = ClmmMath.tick_math.get_sqrt_price_at_tick(-50)
        result = pool.swap(trader, 10**10, 0, limit, is_base_input=True, zero_for_one=True)

        assert pool.state.sqrt_price_x64 == limit
        assert result.amount_in < 10**10

    def test_raises_before_open_time(self, initialize_empty_pool, random_address):
        pool = initialize_empty_pool(open_time=2_000)
        pool.open_position(random_address(), -100, 100, 10**12, 10**10, 10**10)

        with pytest.raises(NotApproved):
            pool.swap(random_address(), 10**6, 0, 0, is_base_input=True, zero_for_one=True)

        pool.advance_time(1_001)
        assert pool.swap(random_address(), 10**6, 0, 0, is_base_input=True, zero_for_one=True).amount_in == 10**6
