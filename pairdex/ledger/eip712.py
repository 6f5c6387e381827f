"""EIP-712 hashing for permit authorizations.

Off-line signers and the ledger build the permit digest with the same
functions, so a signature produced against `permit_digest` verifies on the
ledger that owns `domain_separator`.
"""

from __future__ import annotations

from eth_abi import encode  # type: ignore[attr-defined]
from eth_utils import keccak

from pairdex.constants import DOMAIN_TYPEHASH, PERMIT_TYPEHASH
from pairdex.models.types import address_bytes


def compute_domain_separator(name: str, version: str, chain_id: int, verifying_contract: str) -> bytes:
    """Domain separator binding signatures to one ledger on one chain.

    keccak256(abi.encode(DOMAIN_TYPEHASH, keccak256(name), keccak256(version),
    chainId, verifyingContract))
    """
    encoded = encode(
        ["bytes32", "bytes32", "bytes32", "uint256", "address"],
        [
            DOMAIN_TYPEHASH,
            keccak(text=name),
            keccak(text=version),
            chain_id,
            address_bytes(verifying_contract),
        ],
    )
    return keccak(encoded)


def permit_struct_hash(owner: str, spender: str, value: int, nonce: int, deadline: int) -> bytes:
    encoded = encode(
        ["bytes32", "address", "address", "uint256", "uint256", "uint256"],
        [PERMIT_TYPEHASH, address_bytes(owner), address_bytes(spender), value, nonce, deadline],
    )
    return keccak(encoded)


def permit_digest(
    domain_separator: bytes,
    owner: str,
    spender: str,
    value: int,
    nonce: int,
    deadline: int,
) -> bytes:
    """The 32-byte message hash an owner signs to authorize `spender`.

    Args:
        domain_separator: Separator of the ledger the permit is meant for
        owner: Identity granting the allowance
        spender: Identity receiving the allowance
        value: Absolute allowance to set
        nonce: Owner's current nonce on that ledger
        deadline: Last timestamp (inclusive) at which the permit is accepted

    Returns:
        keccak256(0x1901 || domain_separator || struct_hash)
    """
    struct_hash = permit_struct_hash(owner, spender, value, nonce, deadline)
    return keccak(b"\x19\x01" + domain_separator + struct_hash)
