"""Tests for asset ledgers that call back into the pool.

Pool operations call the asset ledgers before writing reserves. These
tests pin down what happens when an asset re-enters the pool at that
point, with the guard on and with it off.
"""

import pytest

from pairdex.config import PoolConfig
from pairdex.errors import ReentrantCall
from tests.helpers import (
    ALICE,
    BOB,
    STARTING_BALANCE,
    ReentrantAsset,
    fund,
    make_pool_with_assets,
)


def reentrant_pool(chain, guard: bool):
    """Pool over two ReentrantAssets, seeded by ALICE with (100, 200)."""
    _, pool, asset0, asset1 = make_pool_with_assets(
        chain,
        PoolConfig(reentrancy_guard=guard),
        asset_cls0=ReentrantAsset,
        asset_cls1=ReentrantAsset,
    )
    for owner in (ALICE, BOB):
        fund(asset0, owner, STARTING_BALANCE, spender=pool.address)
        fund(asset1, owner, STARTING_BALANCE, spender=pool.address)
    pool.mint(ALICE, ALICE, 100, 200)
    return pool, asset0, asset1


class TestGuardOn:
    def test_nested_mint_rejected(self, chain):
        pool, asset0, asset1 = reentrant_pool(chain, guard=True)
        asset0.callback = lambda: pool.mint(BOB, BOB, 100, 200)

        with pytest.raises(ReentrantCall):
            pool.mint(ALICE, ALICE, 100, 200)

        assert asset0.reentered == 1
        assert pool.get_reserves() == (100, 200)
        assert pool.total_supply() == 141
        assert asset0.balance_of(pool.address) == 100
        assert asset1.balance_of(pool.address) == 200

    def test_nested_swap_rejected(self, chain):
        pool, asset0, _ = reentrant_pool(chain, guard=True)
        asset0.callback = lambda: pool.swap(BOB, BOB, 0, 50)

        with pytest.raises(ReentrantCall):
            pool.swap(ALICE, ALICE, 0, 100)

        assert pool.get_reserves() == (100, 200)

    def test_nested_burn_rejected(self, chain):
        pool, asset0, _ = reentrant_pool(chain, guard=True)
        asset0.callback = lambda: pool.burn(ALICE, ALICE)

        with pytest.raises(ReentrantCall):
            pool.mint(BOB, BOB, 100, 200)

        assert pool.balance_of(ALICE) == 141

    def test_pool_usable_after_rejection(self, chain):
        pool, asset0, _ = reentrant_pool(chain, guard=True)
        asset0.callback = lambda: pool.mint(BOB, BOB, 100, 200)
        with pytest.raises(ReentrantCall):
            pool.mint(ALICE, ALICE, 100, 200)

        assert pool.mint(BOB, BOB, 100, 200) == 141
        assert pool.get_reserves() == (200, 400)


class TestGuardOff:
    """Without the guard, the outer call writes reserves from its stale read."""

    def test_nested_mint_is_overwritten_by_outer_update(self, chain):
        pool, asset0, asset1 = reentrant_pool(chain, guard=False)
        asset0.callback = lambda: pool.mint(BOB, BOB, 100, 200)

        # Outer mint priced against (100, 200) and 141 shares before the nested one ran
        assert pool.mint(ALICE, ALICE, 100, 200) == 141

        assert asset0.reentered == 1
        assert pool.balance_of(BOB) == 141
        assert pool.balance_of(ALICE) == 282
        assert pool.total_supply() == 423
        # Recorded reserves lag the assets actually held
        assert pool.get_reserves() == (200, 400)
        assert asset0.balance_of(pool.address) == 300
        assert asset1.balance_of(pool.address) == 600
