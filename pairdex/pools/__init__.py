"""Pool registry and deterministic pool identities."""

from pairdex.pools.identity import derive_pool_identity, pair_salt, pool_identity_for
from pairdex.pools.registry import PoolRegistry

__all__ = [
    "PoolRegistry",
    "derive_pool_identity",
    "pair_salt",
    "pool_identity_for",
]
