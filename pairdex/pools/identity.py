"""Deterministic pool identities.

A pool's identity is a pure function of the registry identity, the ordered
asset pair and the pool template digest, computed the CREATE2 way:

    salt     = keccak256(token0 || token1)
    identity = keccak256(0xff || registry || salt || POOL_INIT_CODE_HASH)[12:]

Anyone holding the registry identity can therefore predict the identity of
a pool before it is created.
"""

from __future__ import annotations

from eth_utils import keccak

from pairdex.constants import IDENTITY_PREFIX, POOL_INIT_CODE_HASH
from pairdex.models.types import address_bytes, address_from_bytes, sort_tokens


def pair_salt(token0: str, token1: str) -> bytes:
    """Salt of an ordered pair: keccak256 of the packed identities."""
    return keccak(address_bytes(token0) + address_bytes(token1))


def derive_pool_identity(
    registry: str,
    token0: str,
    token1: str,
    init_code_hash: bytes = POOL_INIT_CODE_HASH,
) -> str:
    """Identity of the pool for an already ordered pair."""
    preimage = IDENTITY_PREFIX + address_bytes(registry) + pair_salt(token0, token1) + init_code_hash
    return address_from_bytes(keccak(preimage))


def pool_identity_for(registry: str, token_a: str, token_b: str) -> tuple[str, str, str]:
    """Sort, validate and derive in one step.

    Returns:
        (token0, token1, identity)

    Raises:
        EqualAssets: If both assets are the same
        ZeroAsset: If an asset is the null identity
    """
    token0, token1 = sort_tokens(token_a, token_b)
    return token0, token1, derive_pool_identity(registry, token0, token1)
