"""Pytest configuration and fixtures."""

import pytest

from pairdex.amm.pool import LiquidityPool
from pairdex.assets import StandardAsset
from pairdex.chain import Chain
from pairdex.pools.registry import PoolRegistry
from tests.helpers import (
    ALICE,
    BOB,
    DEPLOYER,
    STARTING_BALANCE,
    fund,
    make_chain,
    make_pool_with_assets,
)


@pytest.fixture
def chain() -> Chain:
    """A fresh chain at the genesis timestamp."""
    return make_chain()


@pytest.fixture
def registry(chain: Chain) -> PoolRegistry:
    """An empty registry deployed by DEPLOYER."""
    return PoolRegistry.deploy(chain, DEPLOYER)


@pytest.fixture
def pool_setup(chain: Chain) -> tuple[PoolRegistry, LiquidityPool, StandardAsset, StandardAsset]:
    """Registry, empty pool and its two assets (asset0 is the pool's token0)."""
    return make_pool_with_assets(chain)


@pytest.fixture
def pool(pool_setup) -> LiquidityPool:
    return pool_setup[1]


@pytest.fixture
def asset0(pool_setup) -> StandardAsset:
    return pool_setup[2]


@pytest.fixture
def asset1(pool_setup) -> StandardAsset:
    return pool_setup[3]


@pytest.fixture
def funded(pool: LiquidityPool, asset0: StandardAsset, asset1: StandardAsset) -> LiquidityPool:
    """Empty pool; ALICE and BOB hold STARTING_BALANCE of both assets, approved to the pool."""
    for owner in (ALICE, BOB):
        fund(asset0, owner, STARTING_BALANCE, spender=pool.address)
        fund(asset1, owner, STARTING_BALANCE, spender=pool.address)
    return pool


@pytest.fixture
def seeded_pool(funded: LiquidityPool) -> LiquidityPool:
    """Pool seeded by ALICE with (100, 200): 141 shares, reserves (100, 200)."""
    funded.mint(ALICE, ALICE, 100, 200)
    return funded
