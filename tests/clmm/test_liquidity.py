import copy

import pytest

from nethermind.clmm.exceptions import (
    ClmmRevert,
    InvalidTickIndex,
    LiquiditySubValueError,
    NotApproved,
    PriceSlippageExceeded,
)
from nethermind.clmm.types import (
    CreatePersonalPositionEvent,
    DecreaseLiquidityEvent,
    IncreaseLiquidityEvent,
    LiquidityChangeEvent,
)


class TestOpenPosition:
    def test_in_range_position_requires_both_tokens(self, initialize_empty_pool, random_address):
        pool = initialize_empty_pool()
        pool.open_position(random_address(), -100, 100, 1_000_000, 10_000, 10_000)

        deposit = [event for event in pool.store.events if isinstance(event, CreatePersonalPositionEvent)][-1]
        assert (deposit.deposit_amount_0, deposit.deposit_amount_1) == (4988, 4988)
        assert pool.state.liquidity == 1_000_000

    def test_initializes_boundary_ticks(self, initialize_mint_test_pool):
        pool, _, _ = initialize_mint_test_pool()

        assert pool.get_tick(-100).liquidity_net == 1_000_000
        assert pool.get_tick(100).liquidity_net == -1_000_000
        assert pool.get_tick(-100).liquidity_gross == pool.get_tick(100).liquidity_gross == 1_000_000
        assert pool.state.tick_array_start_indexes == [-600, 0]
        assert list(pool.ticks.keys()) == [-100, 100]

    def test_creates_protocol_and_personal_position(self, initialize_mint_test_pool):
        pool, owner, nft_mint = initialize_mint_test_pool()

        position = pool.get_position(nft_mint)
        assert position.owner == owner
        assert position.liquidity == 1_000_000
        assert (position.tick_lower_index, position.tick_upper_index) == (-100, 100)
        assert pool.get_protocol_position(-100, 100).liquidity == 1_000_000

    def test_emits_liquidity_change_event(self, initialize_mint_test_pool):
        pool, _, _ = initialize_mint_test_pool()
        event = [event for event in pool.store.events if isinstance(event, LiquidityChangeEvent)][-1]

        assert event.liquidity_before == 0
        assert event.liquidity_after == 1_000_000
        assert (event.tick_lower, event.tick_upper) == (-100, 100)

    def test_out_of_range_position_does_not_change_active_liquidity(self, initialize_empty_pool, random_address):
        pool = initialize_empty_pool()
        pool.open_position(random_address(), 100, 200, 1_000_000, 10_000, 10_000)

        deposit = pool.store.events[-1]
        assert deposit.deposit_amount_0 > 0
        assert deposit.deposit_amount_1 == 0
        assert pool.state.liquidity == 0
        assert not [event for event in pool.store.events if isinstance(event, LiquidityChangeEvent)]

    def test_derives_liquidity_from_amounts(self, initialize_empty_pool, random_address):
        pool = initialize_empty_pool()
        position = pool.open_position(random_address(), -100, 100, 0, 4987, 4987)

        assert 999_000 < position.liquidity < 1_000_000
        assert pool.state.liquidity == position.liquidity

    def test_raises_if_no_liquidity_is_affordable(self, initialize_empty_pool, random_address):
        pool = initialize_empty_pool()
        with pytest.raises(ClmmRevert):
            pool.open_position(random_address(), -100, 100, 0, 0, 0)

    def test_raises_for_unaligned_ticks(self, initialize_empty_pool, random_address):
        pool = initialize_empty_pool()
        with pytest.raises(InvalidTickIndex):
            pool.open_position(random_address(), -105, 100, 1_000, 10_000, 10_000)

    def test_raises_if_lower_tick_is_not_below_upper(self, initialize_empty_pool, random_address):
        pool = initialize_empty_pool()
        with pytest.raises(InvalidTickIndex):
            pool.open_position(random_address(), 100, 100, 1_000, 10_000, 10_000)

    def test_slippage_leaves_store_unchanged(self, initialize_empty_pool, random_address):
        pool = initialize_empty_pool()
        accounts_before = copy.deepcopy(pool.store.accounts)
        event_count = len(pool.store.events)

        with pytest.raises(PriceSlippageExceeded):
            pool.open_position(random_address(), -100, 100, 1_000_000, 4987, 10_000)

        assert pool.store.accounts == accounts_before
        assert len(pool.store.events) == event_count
        assert pool.get_tick(-100) is None


class TestIncreaseLiquidity:
    def test_adds_to_position_and_protocol_position(self, initialize_mint_test_pool):
        pool, owner, nft_mint = initialize_mint_test_pool()
        amount_0, amount_1 = pool.increase_liquidity(owner, nft_mint, 500_000, 10_000, 10_000)

        assert amount_0 > 0 and amount_1 > 0
        assert pool.get_position(nft_mint).liquidity == 1_500_000
        assert pool.get_protocol_position(-100, 100).liquidity == 1_500_000
        assert pool.state.liquidity == 1_500_000
        assert isinstance(pool.store.events[-1], IncreaseLiquidityEvent)

    def test_raises_if_signer_is_not_owner(self, initialize_mint_test_pool, random_address):
        pool, _, nft_mint = initialize_mint_test_pool()
        with pytest.raises(NotApproved):
            pool.increase_liquidity(random_address(), nft_mint, 500_000, 10_000, 10_000)

    def test_zero_delta_only_changes_owed_balances(self, initialize_mint_test_pool):
        pool, owner, nft_mint = initialize_mint_test_pool()
        ticks_before = copy.deepcopy(pool.ticks)
        liquidity_before = pool.state.liquidity

        assert pool.increase_liquidity(owner, nft_mint, 0, 0, 0) == (0, 0)

        assert pool.ticks == ticks_before
        assert pool.state.liquidity == liquidity_before
        assert pool.get_position(nft_mint).liquidity == 1_000_000


class TestDecreaseLiquidity:
    def test_removing_all_liquidity_rounds_down(self, initialize_mint_test_pool):
        pool, owner, nft_mint = initialize_mint_test_pool()
        result = pool.decrease_liquidity(owner, nft_mint, 1_000_000)

        assert (result.amount_0, result.amount_1) == (4987, 4987)
        assert (result.fee_amount_0, result.fee_amount_1) == (0, 0)
        assert result.reward_amounts == [0, 0, 0]
        assert isinstance(pool.store.events[-1], DecreaseLiquidityEvent)

    def test_removing_all_liquidity_clears_ticks(self, initialize_mint_test_pool):
        pool, owner, nft_mint = initialize_mint_test_pool()
        pool.decrease_liquidity(owner, nft_mint, 1_000_000)

        assert pool.state.liquidity == 0
        assert pool.ticks == {}
        assert pool.state.tick_array_start_indexes == []
        assert not pool.get_tick(-100).is_initialized()
        assert pool.get_protocol_position(-100, 100).liquidity == 0

    def test_raises_when_removing_more_than_position(self, initialize_mint_test_pool):
        pool, owner, nft_mint = initialize_mint_test_pool()
        with pytest.raises(LiquiditySubValueError):
            pool.decrease_liquidity(owner, nft_mint, 1_000_001)

    def test_raises_if_amounts_below_minimum(self, initialize_mint_test_pool):
        pool, owner, nft_mint = initialize_mint_test_pool()
        with pytest.raises(PriceSlippageExceeded):
            pool.decrease_liquidity(owner, nft_mint, 1_000_000, 4988, 0)
        assert pool.get_position(nft_mint).liquidity == 1_000_000

    def test_raises_if_signer_is_not_owner(self, initialize_mint_test_pool, random_address):
        pool, _, nft_mint = initialize_mint_test_pool()
        with pytest.raises(NotApproved):
            pool.decrease_liquidity(random_address(), nft_mint, 1)


class TestLiquidityAccounting:
    def test_net_liquidity_sums_to_zero(self, initialize_empty_pool, random_address):
        pool = initialize_empty_pool()
        owner = random_address()
        pool.open_position(owner, -100, 100, 1_000_000, 10**9, 10**9)
        pool.open_position(owner, -700, 50, 3_000_000, 10**9, 10**9)
        pool.open_position(owner, 100, 900, 2_000_000, 10**9, 10**9)
        position = pool.open_position(owner, -1200, -600, 5_000_000, 10**9, 10**9)
        pool.decrease_liquidity(owner, position.nft_mint, 2_000_000)

        assert sum(tick.liquidity_net for tick in pool.ticks.values()) == 0
        assert pool.state.tick_array_start_indexes == [-1200, -600, 0, 600]

    def test_active_liquidity_matches_ticks_below_current(self, initialize_empty_pool, random_address):
        pool = initialize_empty_pool()
        owner = random_address()
        pool.open_position(owner, -100, 100, 1_000_000, 10**9, 10**9)
        pool.open_position(owner, -700, 50, 3_000_000, 10**9, 10**9)
        pool.open_position(owner, 100, 900, 2_000_000, 10**9, 10**9)

        below = [tick.liquidity_net for index, tick in pool.ticks.items() if index <= pool.state.tick_current]
        assert pool.state.liquidity == sum(below) == 4_000_000

    def test_protocol_liquidity_is_sum_of_personal_positions(self, initialize_empty_pool, random_address):
        pool = initialize_empty_pool()
        alice, bob = random_address(), random_address()
        alice_position = pool.open_position(alice, -100, 100, 1_000_000, 10**9, 10**9)
        bob_position = pool.open_position(bob, -100, 100, 250_000, 10**9, 10**9)
        pool.increase_liquidity(bob, bob_position.nft_mint, 50_000, 10**9, 10**9)
        pool.decrease_liquidity(alice, alice_position.nft_mint, 400_000)

        assert pool.get_protocol_position(-100, 100).liquidity == 1_000_000 + 250_000 + 50_000 - 400_000
        assert pool.get_tick(-100).liquidity_gross == 900_000


class TestClosePosition:
    def test_raises_if_position_holds_liquidity(self, initialize_mint_test_pool):
        pool, owner, nft_mint = initialize_mint_test_pool()
        with pytest.raises(ClmmRevert):
            pool.close_position(owner, nft_mint)

    def test_closes_empty_position(self, initialize_mint_test_pool):
        pool, owner, nft_mint = initialize_mint_test_pool()
        pool.decrease_liquidity(owner, nft_mint, 1_000_000)
        pool.close_position(owner, nft_mint)

        with pytest.raises(ClmmRevert):
            pool.get_position(nft_mint)
        assert pool.get_protocol_position(-100, 100) is not None

    def test_raises_if_signer_is_not_owner(self, initialize_mint_test_pool, random_address):
        pool, owner, nft_mint = initialize_mint_test_pool()
        pool.decrease_liquidity(owner, nft_mint, 1_000_000)
        with pytest.raises(NotApproved):
            pool.close_position(random_address(), nft_mint)


class TestPositionDelegate:
    def test_delegate_can_modify_liquidity(self, initialize_mint_test_pool, random_address):
        pool, owner, nft_mint = initialize_mint_test_pool()
        delegate = random_address()
        pool.set_position_delegate(owner, nft_mint, delegate)

        pool.increase_liquidity(delegate, nft_mint, 500_000, 10_000, 10_000)
        pool.decrease_liquidity(delegate, nft_mint, 250_000)

        position = pool.get_position(nft_mint)
        assert position.delegate == delegate
        assert position.liquidity == 1_250_000

    def test_delegate_cannot_close_or_reassign(self, initialize_mint_test_pool, random_address):
        pool, owner, nft_mint = initialize_mint_test_pool()
        delegate = random_address()
        pool.set_position_delegate(owner, nft_mint, delegate)
        pool.decrease_liquidity(delegate, nft_mint, 1_000_000)

        with pytest.raises(NotApproved):
            pool.set_position_delegate(delegate, nft_mint, random_address())
        with pytest.raises(NotApproved):
            pool.close_position(delegate, nft_mint)

        pool.close_position(owner, nft_mint)

    def test_revoked_delegate_is_rejected(self, initialize_mint_test_pool, random_address):
        pool, owner, nft_mint = initialize_mint_test_pool()
        delegate = random_address()
        pool.set_position_delegate(owner, nft_mint, delegate)
        pool.set_position_delegate(owner, nft_mint, None)

        with pytest.raises(NotApproved):
            pool.increase_liquidity(delegate, nft_mint, 500_000, 10_000, 10_000)
        assert pool.get_position(nft_mint).delegate is None
