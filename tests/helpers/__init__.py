"""Test helpers module for shared test utilities.

- constants: identities, signing keys, genesis timestamp, starting balance
- factories: chain/pool factories and asset collaborator doubles
"""

from tests.helpers.constants import (
    ALICE,
    ALICE_KEY,
    BOB,
    BOB_KEY,
    CAROL,
    DEPLOYER,
    GENESIS_TIMESTAMP,
    MALLORY,
    MALLORY_KEY,
    STARTING_BALANCE,
    TOKEN_HIGH,
    TOKEN_LOW,
)
from tests.helpers.factories import (
    FalseReturningAsset,
    LedgerHost,
    ReentrantAsset,
    deploy_asset,
    fund,
    fund_unlimited,
    make_chain,
    make_pool_with_assets,
    share_sum,
)

__all__ = [
    # Constants
    "ALICE",
    "ALICE_KEY",
    "BOB",
    "BOB_KEY",
    "CAROL",
    "DEPLOYER",
    "GENESIS_TIMESTAMP",
    "MALLORY",
    "MALLORY_KEY",
    "STARTING_BALANCE",
    "TOKEN_HIGH",
    "TOKEN_LOW",
    # Factories
    "make_chain",
    "deploy_asset",
    "make_pool_with_assets",
    "fund",
    "fund_unlimited",
    "share_sum",
    "FalseReturningAsset",
    "ReentrantAsset",
    "LedgerHost",
]
