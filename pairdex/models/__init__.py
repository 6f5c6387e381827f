"""Identity types and event models."""

from pairdex.models.events import (
    Approval,
    Burn,
    Event,
    Mint,
    PairCreated,
    Swap,
    Sync,
    Transfer,
)
from pairdex.models.types import (
    Address,
    Bytes,
    Uint256,
    address_bytes,
    address_from_bytes,
    is_valid_address,
    normalize_address,
    sort_tokens,
)

__all__ = [
    # Types
    "Address",
    "Bytes",
    "Uint256",
    "address_bytes",
    "address_from_bytes",
    "is_valid_address",
    "normalize_address",
    "sort_tokens",
    # Events
    "Event",
    "Transfer",
    "Approval",
    "PairCreated",
    "Mint",
    "Burn",
    "Swap",
    "Sync",
]
