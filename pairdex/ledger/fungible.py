"""Balance/allowance ledger for one fungible asset.

FungibleLedger is the capability shared by the pool's share ledger and the
standard asset contract. The `sender` argument of every call is the
identity on whose behalf the call is made.
"""

from __future__ import annotations

from typing import ClassVar

from pairdex.chain import Chain, Stateful, transaction
from pairdex.constants import UINT256_MAX, ZERO_ADDRESS
from pairdex.errors import InsufficientAllowance, InsufficientBalance
from pairdex.models.events import Approval, Transfer
from pairdex.models.types import normalize_address
from pairdex.safe_int import S, Underflow


class FungibleLedger(Stateful):
    """Balances, allowances and total supply of one asset.

    Attributes:
        address: Identity that emits this ledger's events
        name: Human-readable name
        symbol: Ticker symbol
        decimals: Display decimals
    """

    _transient: ClassVar[tuple[str, ...]] = ("chain", "address")

    def __init__(
        self,
        chain: Chain,
        address: str,
        *,
        name: str,
        symbol: str,
        decimals: int = 18,
    ) -> None:
        self.chain = chain
        self.address = normalize_address(address)
        self.name = name
        self.symbol = symbol
        self.decimals = decimals
        self._total_supply = 0
        self._balances: dict[str, int] = {}
        self._allowances: dict[tuple[str, str], int] = {}

    # --- Reads ---

    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, owner: str) -> int:
        return self._balances.get(normalize_address(owner), 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((normalize_address(owner), normalize_address(spender)), 0)

    def holders(self) -> dict[str, int]:
        """Non-zero balances, as a copy."""
        return {holder: balance for holder, balance in self._balances.items() if balance}

    # --- Writes ---

    @transaction
    def approve(self, sender: str, spender: str, value: int) -> bool:
        self._approve(normalize_address(sender), normalize_address(spender), value)
        return True

    @transaction
    def transfer(self, sender: str, to: str, value: int) -> bool:
        self._transfer(normalize_address(sender), normalize_address(to), value)
        return True

    @transaction
    def transfer_from(self, sender: str, owner: str, to: str, value: int) -> bool:
        """Move `value` from owner to `to`, spending sender's allowance.

        An allowance of 2^256-1 is unlimited and is not decremented.

        Raises:
            InsufficientAllowance: If the allowance is below value
            InsufficientBalance: If owner's balance is below value
        """
        sender = normalize_address(sender)
        owner = normalize_address(owner)
        current = self.allowance(owner, sender)
        if current != UINT256_MAX:
            try:
                remaining = (S(current) - S(value)).value
            except Underflow as err:
                raise InsufficientAllowance(
                    f"Allowance of {sender} from {owner} is {current}, needs {value}"
                ) from err
            self._allowances[(owner, sender)] = remaining
        self._transfer(owner, normalize_address(to), value)
        return True

    @transaction
    def mint(self, to: str, value: int) -> None:
        """Create `value` units for `to`."""
        to = normalize_address(to)
        S(value).to_uint256()
        self._total_supply = (S(self._total_supply) + S(value)).to_uint256()
        self._balances[to] = (S(self.balance_of(to)) + S(value)).to_uint256()
        self.chain.emit(Transfer(self.address, ZERO_ADDRESS, to, value))

    @transaction
    def burn(self, owner: str, value: int) -> None:
        """Destroy `value` units held by owner.

        Raises:
            InsufficientBalance: If owner's balance is below value
        """
        owner = normalize_address(owner)
        S(value).to_uint256()
        self._balances[owner] = self._debit(owner, value)
        self._total_supply = (S(self._total_supply) - S(value)).value
        self.chain.emit(Transfer(self.address, owner, ZERO_ADDRESS, value))

    # --- Internals ---

    def _approve(self, owner: str, spender: str, value: int) -> None:
        self._allowances[(owner, spender)] = S(value).to_uint256()
        self.chain.emit(Approval(self.address, owner, spender, value))

    def _transfer(self, sender: str, to: str, value: int) -> None:
        S(value).to_uint256()
        self._balances[sender] = self._debit(sender, value)
        self._balances[to] = (S(self.balance_of(to)) + S(value)).to_uint256()
        self.chain.emit(Transfer(self.address, sender, to, value))

    def _debit(self, owner: str, value: int) -> int:
        balance = self.balance_of(owner)
        try:
            return (S(balance) - S(value)).value
        except Underflow as err:
            raise InsufficientBalance(f"Balance of {owner} is {balance}, needs {value}") from err
