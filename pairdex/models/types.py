"""Shared type definitions for identities and amounts.

Identities are 20-byte values written as lowercase 0x-prefixed hex, so the
lexicographic order of the strings is the byte order of the identities.
"""

from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from pairdex.constants import UINT256_MAX, ZERO_ADDRESS
from pairdex.errors import EqualAssets, InvalidIdentity, ZeroAsset


def validate_uint256(value: Any) -> int:
    """Validate that a value is a uint256, given as int or decimal string.

    Raises:
        ValueError: If value is not a non-negative integer within uint256 range
    """
    if isinstance(value, bool):
        raise ValueError("Uint256 cannot be a boolean")
    if isinstance(value, str):
        try:
            value = int(value)
        except ValueError as err:
            raise ValueError(f"Uint256 must be a decimal integer string: '{value}'") from err
    if not isinstance(value, int):
        raise ValueError(f"Uint256 must be string or int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"Uint256 cannot be negative: {value}")
    if value > UINT256_MAX:
        raise ValueError(f"Uint256 overflow: {value} > 2^256-1")
    return value


# 20-byte identity (40 hex chars after 0x prefix)
Address = Annotated[str, Field(pattern=r"^0x[a-fA-F0-9]{40}$")]

# 256-bit unsigned integer, accepted as int or decimal string
Uint256 = Annotated[
    int,
    BeforeValidator(validate_uint256),
    Field(description="256-bit unsigned integer"),
]

# Arbitrary hex bytes, whole bytes only
Bytes = Annotated[str, Field(pattern=r"^0x([a-fA-F0-9]{2})*$")]


def is_valid_address(address: str) -> bool:
    """Check if a string is a 0x-prefixed 20-byte hex identity."""
    if not isinstance(address, str):
        return False
    if not address.startswith("0x"):
        return False
    if len(address) != 42:
        return False
    try:
        int(address, 16)
        return True
    except ValueError:
        return False


def normalize_address(address: str) -> str:
    """Normalize an identity to lowercase with 0x prefix.

    Raises:
        InvalidIdentity: If the result is not a 20-byte hex identity
    """
    if not isinstance(address, str):
        raise InvalidIdentity(f"Identity must be a string, got {type(address).__name__}")
    addr = address.lower()
    if not addr.startswith("0x"):
        addr = "0x" + addr
    if not is_valid_address(addr):
        raise InvalidIdentity(f"Invalid identity: {address}")
    return addr


def address_bytes(address: str) -> bytes:
    """Raw 20 bytes of an identity."""
    return bytes.fromhex(normalize_address(address)[2:])


def address_from_bytes(raw: bytes) -> str:
    """Identity for the last 20 bytes of raw."""
    return "0x" + raw[-20:].hex()


def sort_tokens(token_a: str, token_b: str) -> tuple[str, str]:
    """Return the canonical (token0, token1) ordering of a pair.

    Raises:
        EqualAssets: If both identities are the same
        ZeroAsset: If the smaller identity is the null identity
    """
    token_a = normalize_address(token_a)
    token_b = normalize_address(token_b)
    if token_a == token_b:
        raise EqualAssets(f"Identical assets: {token_a}")
    token0, token1 = (token_a, token_b) if token_a < token_b else (token_b, token_a)
    # token1 > token0 >= null, so only token0 can be the null identity
    if token0 == ZERO_ADDRESS:
        raise ZeroAsset("Asset identity is the null identity")
    return token0, token1
