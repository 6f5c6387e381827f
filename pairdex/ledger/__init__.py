"""Fungible ledgers and permit-style delegated approvals."""

from pairdex.ledger.delegated import DelegatedApprovalLedger
from pairdex.ledger.eip712 import compute_domain_separator, permit_digest
from pairdex.ledger.fungible import FungibleLedger
from pairdex.ledger.signatures import (
    EthKeysRecovery,
    SignatureRecovery,
    eth_keys_recovery,
    identity_of,
    sign_digest,
    sign_permit,
)

__all__ = [
    "FungibleLedger",
    "DelegatedApprovalLedger",
    "compute_domain_separator",
    "permit_digest",
    "SignatureRecovery",
    "EthKeysRecovery",
    "eth_keys_recovery",
    "identity_of",
    "sign_digest",
    "sign_permit",
]
