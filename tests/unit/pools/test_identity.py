"""Tests for deterministic pool identity derivation."""

import pytest
from eth_utils import keccak

from pairdex.constants import POOL_INIT_CODE_HASH, POOL_TEMPLATE, ZERO_ADDRESS
from pairdex.errors import EqualAssets, InvalidIdentity, ZeroAsset
from pairdex.models.types import is_valid_address
from pairdex.pools.identity import derive_pool_identity, pair_salt, pool_identity_for
from tests.helpers import TOKEN_HIGH, TOKEN_LOW

REGISTRY = "0x" + "ab" * 20


class TestDerivePoolIdentity:
    def test_matches_create2_layout(self):
        preimage = (
            b"\xff"
            + bytes.fromhex(REGISTRY[2:])
            + keccak(bytes.fromhex(TOKEN_LOW[2:]) + bytes.fromhex(TOKEN_HIGH[2:]))
            + keccak(text=POOL_TEMPLATE)
        )
        expected = "0x" + keccak(preimage)[12:].hex()

        assert derive_pool_identity(REGISTRY, TOKEN_LOW, TOKEN_HIGH) == expected

    def test_is_valid_identity(self):
        identity = derive_pool_identity(REGISTRY, TOKEN_LOW, TOKEN_HIGH)

        assert is_valid_address(identity)
        assert identity == identity.lower()

    def test_depends_on_registry(self):
        assert derive_pool_identity(REGISTRY, TOKEN_LOW, TOKEN_HIGH) != derive_pool_identity(
            "0x" + "cd" * 20, TOKEN_LOW, TOKEN_HIGH
        )

    def test_depends_on_template(self):
        assert derive_pool_identity(REGISTRY, TOKEN_LOW, TOKEN_HIGH) != derive_pool_identity(
            REGISTRY, TOKEN_LOW, TOKEN_HIGH, init_code_hash=keccak(text="other")
        )

    def test_salt_is_order_sensitive(self):
        """Only the canonical order is ever hashed; the salt itself is ordered."""
        assert pair_salt(TOKEN_LOW, TOKEN_HIGH) != pair_salt(TOKEN_HIGH, TOKEN_LOW)

    def test_template_digest_constant(self):
        assert POOL_INIT_CODE_HASH == keccak(text=POOL_TEMPLATE)


class TestPoolIdentityFor:
    def test_order_insensitive(self):
        forward = pool_identity_for(REGISTRY, TOKEN_LOW, TOKEN_HIGH)
        backward = pool_identity_for(REGISTRY, TOKEN_HIGH, TOKEN_LOW)

        assert forward == backward
        assert forward[:2] == (TOKEN_LOW, TOKEN_HIGH)

    def test_normalizes_case(self):
        upper = "0x" + TOKEN_HIGH[2:].upper()

        assert pool_identity_for(REGISTRY, TOKEN_LOW, upper) == pool_identity_for(
            REGISTRY, TOKEN_LOW, TOKEN_HIGH
        )

    def test_equal_assets(self):
        with pytest.raises(EqualAssets):
            pool_identity_for(REGISTRY, TOKEN_LOW, TOKEN_LOW)

    def test_null_asset(self):
        with pytest.raises(ZeroAsset):
            pool_identity_for(REGISTRY, ZERO_ADDRESS, TOKEN_LOW)
        with pytest.raises(ZeroAsset):
            pool_identity_for(REGISTRY, TOKEN_HIGH, ZERO_ADDRESS)

    def test_malformed_identity(self):
        with pytest.raises(InvalidIdentity):
            pool_identity_for(REGISTRY, "0x1234", TOKEN_LOW)
