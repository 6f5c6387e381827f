"""Signature recovery collaborator and off-line signing helpers.

The ledger only depends on the SignatureRecovery protocol. The default
implementation recovers secp256k1 signatures with eth-keys and follows
ecrecover semantics: an unrecoverable signature yields the null identity
rather than an exception.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from eth_keys import keys
from eth_keys.exceptions import BadSignature
from eth_keys.exceptions import ValidationError as KeysValidationError
from eth_utils import ValidationError

from pairdex.constants import ZERO_ADDRESS
from pairdex.ledger.eip712 import permit_digest
from pairdex.models.types import normalize_address

# r (32) || s (32) || v (1)
SIGNATURE_LENGTH = 65


@runtime_checkable
class SignatureRecovery(Protocol):
    """Recovers the signing identity of a 32-byte digest."""

    def recover(self, digest: bytes, signature: bytes) -> str:
        """Return the signer identity, or the null identity if unrecoverable."""
        ...


class EthKeysRecovery:
    """secp256k1 recovery accepting v in {0, 1, 27, 28}."""

    def recover(self, digest: bytes, signature: bytes) -> str:
        if len(signature) != SIGNATURE_LENGTH:
            return ZERO_ADDRESS
        r = int.from_bytes(signature[:32], "big")
        s = int.from_bytes(signature[32:64], "big")
        v = signature[64]
        if v >= 27:
            v -= 27
        try:
            sig = keys.Signature(vrs=(v, r, s))
            public_key = sig.recover_public_key_from_msg_hash(digest)
        except (BadSignature, KeysValidationError, ValidationError, ValueError):
            return ZERO_ADDRESS
        return normalize_address(public_key.to_checksum_address())


# Singleton instance
eth_keys_recovery = EthKeysRecovery()


def hex_to_bytes(value: bytes | str) -> bytes:
    """Accept raw bytes or 0x-prefixed hex (signatures, private keys)."""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    text = value[2:] if value.startswith("0x") else value
    return bytes.fromhex(text)


def _private_key(private_key: bytes | str | keys.PrivateKey) -> keys.PrivateKey:
    if isinstance(private_key, keys.PrivateKey):
        return private_key
    return keys.PrivateKey(hex_to_bytes(private_key))


def identity_of(private_key: bytes | str | keys.PrivateKey) -> str:
    """Identity controlled by a private key."""
    return normalize_address(_private_key(private_key).public_key.to_checksum_address())


def sign_digest(private_key: bytes | str | keys.PrivateKey, digest: bytes) -> bytes:
    """Sign a 32-byte digest, returning r || s || v with v in {27, 28}."""
    sig = _private_key(private_key).sign_msg_hash(digest)
    return sig.r.to_bytes(32, "big") + sig.s.to_bytes(32, "big") + bytes([sig.v + 27])


def sign_permit(
    private_key: bytes | str | keys.PrivateKey,
    domain_separator: bytes,
    spender: str,
    value: int,
    nonce: int,
    deadline: int,
) -> bytes:
    """Produce an off-line permit signature for the key's own identity."""
    owner = identity_of(private_key)
    digest = permit_digest(domain_separator, owner, spender, value, nonce, deadline)
    return sign_digest(private_key, digest)
