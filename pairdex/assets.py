"""External asset ledgers traded by pools.

A pool only relies on the AssetLedger protocol. Real-world asset ledgers
do not all fail the same way: some raise, some return False. The pool
treats a False result as a failed transfer.
"""

from __future__ import annotations

from typing import ClassVar, Protocol, runtime_checkable

from pairdex.chain import Chain, Contract, transaction
from pairdex.ledger.fungible import FungibleLedger


@runtime_checkable
class AssetLedger(Protocol):
    """Interface the pool uses to move an external asset."""

    address: str

    def balance_of(self, owner: str) -> int: ...

    def transfer(self, sender: str, to: str, value: int) -> bool: ...

    def transfer_from(self, sender: str, owner: str, to: str, value: int) -> bool: ...


class StandardAsset(Contract):
    """Conforming asset contract: raises on failure, returns True otherwise.

    Issuance through `mint` is unrestricted; this contract backs tests and
    the simulator service, not production balances.
    """

    _nested: ClassVar[tuple[str, ...]] = ("ledger",)

    def __init__(self, chain: Chain, address: str, *, name: str, symbol: str, decimals: int = 18) -> None:
        super().__init__(chain, address)
        self.ledger = FungibleLedger(chain, self.address, name=name, symbol=symbol, decimals=decimals)

    @classmethod
    def deploy(
        cls,
        chain: Chain,
        deployer: str,
        *,
        name: str,
        symbol: str,
        decimals: int = 18,
    ) -> StandardAsset:
        asset = cls(chain, chain.next_identity(deployer), name=name, symbol=symbol, decimals=decimals)
        chain.deploy(asset)
        return asset

    @property
    def name(self) -> str:
        return self.ledger.name

    @property
    def symbol(self) -> str:
        return self.ledger.symbol

    def total_supply(self) -> int:
        return self.ledger.total_supply()

    def balance_of(self, owner: str) -> int:
        return self.ledger.balance_of(owner)

    def allowance(self, owner: str, spender: str) -> int:
        return self.ledger.allowance(owner, spender)

    def approve(self, sender: str, spender: str, value: int) -> bool:
        return self.ledger.approve(sender, spender, value)

    def transfer(self, sender: str, to: str, value: int) -> bool:
        return self.ledger.transfer(sender, to, value)

    def transfer_from(self, sender: str, owner: str, to: str, value: int) -> bool:
        return self.ledger.transfer_from(sender, owner, to, value)

    @transaction
    def mint(self, to: str, value: int) -> None:
        self.ledger.mint(to, value)
