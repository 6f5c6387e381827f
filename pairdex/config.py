"""Configuration for the chain simulator and pools."""

import os
from dataclasses import dataclass

from pairdex.constants import (
    DEFAULT_CHAIN_ID,
    SHARE_DECIMALS,
    SHARE_NAME,
    SHARE_SYMBOL,
    SHARE_VERSION,
)

_TRUTHY = ("true", "1", "yes")


@dataclass(frozen=True)
class ChainConfig:
    """Host environment settings.

    Attributes:
        chain_id: Network identifier bound into every permit domain separator
    """

    chain_id: int = DEFAULT_CHAIN_ID


@dataclass(frozen=True)
class PoolConfig:
    """Settings applied to every pool a registry creates.

    Attributes:
        share_name: EIP-712 domain name of the share ledger
        share_symbol: Share ledger symbol
        share_decimals: Share ledger decimals (display only)
        share_version: EIP-712 domain version of the share ledger
        reentrancy_guard: If True, a pool rejects mint/burn/swap entered while
            another of its operations is still running. If False, nested calls
            run against the reserves recorded before the outer call.
    """

    share_name: str = SHARE_NAME
    share_symbol: str = SHARE_SYMBOL
    share_decimals: int = SHARE_DECIMALS
    share_version: str = SHARE_VERSION
    reentrancy_guard: bool = True


# Default configuration instances
DEFAULT_CHAIN_CONFIG = ChainConfig()
DEFAULT_POOL_CONFIG = PoolConfig()


def load_chain_config_from_env() -> ChainConfig:
    """Build a ChainConfig from PAIRDEX_CHAIN_ID (default: mainnet)."""
    return ChainConfig(chain_id=int(os.environ.get("PAIRDEX_CHAIN_ID", str(DEFAULT_CHAIN_ID))))


def load_pool_config_from_env() -> PoolConfig:
    """Build a PoolConfig from PAIRDEX_REENTRANCY_GUARD (default: true)."""
    guard = os.environ.get("PAIRDEX_REENTRANCY_GUARD", "true").lower() in _TRUTHY
    return PoolConfig(reentrancy_guard=guard)
