"""Fungible ledger with signature-based allowance grants (permit)."""

from __future__ import annotations

from typing import ClassVar

import structlog

from pairdex.chain import Chain, transaction
from pairdex.constants import SHARE_VERSION, ZERO_ADDRESS
from pairdex.errors import InvalidSigner, SignatureExpired
from pairdex.ledger.eip712 import compute_domain_separator, permit_digest
from pairdex.ledger.fungible import FungibleLedger
from pairdex.ledger.signatures import SignatureRecovery, eth_keys_recovery, hex_to_bytes
from pairdex.models.types import normalize_address
from pairdex.safe_int import S

logger = structlog.get_logger()


class DelegatedApprovalLedger(FungibleLedger):
    """FungibleLedger whose owners can grant allowances off-line.

    The domain separator is computed once from (name, version, chain id,
    ledger identity) and never changes, so a permit signed for one ledger
    never verifies on another ledger or on another chain.
    """

    _transient: ClassVar[tuple[str, ...]] = ("chain", "address", "recovery")

    def __init__(
        self,
        chain: Chain,
        address: str,
        *,
        name: str,
        symbol: str,
        decimals: int = 18,
        version: str = SHARE_VERSION,
        recovery: SignatureRecovery = eth_keys_recovery,
    ) -> None:
        super().__init__(chain, address, name=name, symbol=symbol, decimals=decimals)
        self.version = version
        self.recovery = recovery
        self._nonces: dict[str, int] = {}
        self.domain_separator = compute_domain_separator(name, version, chain.chain_id, self.address)

    def nonces(self, owner: str) -> int:
        """Nonce the owner's next permit must be signed with."""
        return self._nonces.get(normalize_address(owner), 0)

    def _use_nonce(self, owner: str) -> int:
        current = self.nonces(owner)
        self._nonces[owner] = current + 1
        return current

    @transaction
    def permit(
        self,
        owner: str,
        spender: str,
        value: int,
        deadline: int,
        signature: bytes | str,
    ) -> None:
        """Set allowance[owner][spender] = value on the strength of a signature.

        The owner's nonce is consumed while the digest is built, so every
        nonce value backs at most one digest. A rejected permit rolls the
        nonce back with the rest of the call.

        Raises:
            SignatureExpired: If the block timestamp is past the deadline
            InvalidSigner: If the signature is not hex or does not recover to owner
        """
        owner = normalize_address(owner)
        spender = normalize_address(spender)
        S(value).to_uint256()
        if self.chain.block_timestamp > deadline:
            raise SignatureExpired(
                f"Permit deadline {deadline} passed at {self.chain.block_timestamp}"
            )

        try:
            raw_signature = hex_to_bytes(signature)
        except ValueError as err:
            raise InvalidSigner(f"Signature is not hex encoded: {signature!r}") from err

        nonce = self._use_nonce(owner)
        digest = permit_digest(self.domain_separator, owner, spender, value, nonce, deadline)
        recovered = self.recovery.recover(digest, raw_signature)
        if recovered == ZERO_ADDRESS or recovered != owner:
            raise InvalidSigner(f"Signature recovers to {recovered}, expected {owner}")

        self._approve(owner, spender, value)
        logger.debug(
            "permit_accepted",
            ledger=self.address,
            owner=owner,
            spender=spender,
            value=value,
            nonce=nonce,
        )
