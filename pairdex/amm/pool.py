"""Two-asset liquidity pool.

A LiquidityPool holds reserves of two external assets and owns a
DelegatedApprovalLedger for its shares. Its state machine runs over
(reserve0, reserve1, total shares):

- mint: deposit both assets at the reserve ratio, receive shares
- burn: redeem the caller's entire share balance for both assets
- swap: take exactly one asset out, pay the constant-product input

Call ordering: mint and swap call the asset ledgers (collect and pay)
before the reserves are written; burn burns shares, pays out, then writes
reserves. A malicious asset ledger can therefore call back into the pool
while the recorded reserves are stale. With `PoolConfig.reentrancy_guard`
on (the default) any such nested mint/burn/swap raises ReentrantCall. With
it off the nested call proceeds against the stale reserves and the outer
call overwrites them when it finishes.
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Any, ClassVar, TypeVar, cast

import structlog

from pairdex.amm.math import constant_product
from pairdex.assets import AssetLedger
from pairdex.chain import Chain, Contract, transaction
from pairdex.config import DEFAULT_POOL_CONFIG, PoolConfig
from pairdex.constants import ZERO_ADDRESS
from pairdex.errors import (
    AlreadyInitialized,
    BadOutputSelection,
    EmptyPool,
    InputValidationError,
    NothingToBurn,
    NotRegistry,
    ReentrantCall,
    TransferFailed,
    ZeroAmountIn,
)
from pairdex.ledger.delegated import DelegatedApprovalLedger
from pairdex.ledger.signatures import SignatureRecovery, eth_keys_recovery
from pairdex.models.events import Burn, Mint, Swap, Sync
from pairdex.models.types import normalize_address, sort_tokens
from pairdex.safe_int import S

logger = structlog.get_logger()

F = TypeVar("F", bound=Callable[..., Any])


def lock(method: F) -> F:
    """Reject re-entry into any locked method of the same pool."""

    @functools.wraps(method)
    def wrapper(self: LiquidityPool, *args: Any, **kwargs: Any) -> Any:
        if not self.config.reentrancy_guard:
            return method(self, *args, **kwargs)
        if self._locked:
            raise ReentrantCall(f"{method.__name__} re-entered pool {self.address}")
        self._locked = True
        try:
            return method(self, *args, **kwargs)
        finally:
            self._locked = False

    return wrapper  # type: ignore[return-value]


class LiquidityPool(Contract):
    """Constant-product pool for one canonically ordered asset pair.

    Attributes:
        registry: Identity that constructed the pool; the only allowed initializer
        token0: Smaller asset identity (null until initialized)
        token1: Larger asset identity (null until initialized)
        reserve0: Recorded holding of token0
        reserve1: Recorded holding of token1
        shares: Share ledger, also the target of permit
    """

    _transient: ClassVar[tuple[str, ...]] = ("chain", "address", "registry", "config")
    _nested: ClassVar[tuple[str, ...]] = ("shares",)

    def __init__(
        self,
        chain: Chain,
        address: str,
        *,
        registry: str,
        config: PoolConfig = DEFAULT_POOL_CONFIG,
        recovery: SignatureRecovery = eth_keys_recovery,
    ) -> None:
        super().__init__(chain, address)
        self.registry = normalize_address(registry)
        self.config = config
        self.token0 = ZERO_ADDRESS
        self.token1 = ZERO_ADDRESS
        self.reserve0 = 0
        self.reserve1 = 0
        self._locked = False
        self.shares = DelegatedApprovalLedger(
            chain,
            self.address,
            name=config.share_name,
            symbol=config.share_symbol,
            decimals=config.share_decimals,
            version=config.share_version,
            recovery=recovery,
        )

    # --- Lifecycle ---

    @transaction
    def initialize(self, sender: str, token0: str, token1: str) -> None:
        """Set the pool's assets. Callable once, by the registry only.

        Raises:
            NotRegistry: If sender is not the constructing registry
            AlreadyInitialized: If the assets were already set
        """
        if normalize_address(sender) != self.registry:
            raise NotRegistry(f"{sender} is not the registry of pool {self.address}")
        if self.token0 != ZERO_ADDRESS:
            raise AlreadyInitialized(f"Pool {self.address} already initialized")
        ordered = sort_tokens(token0, token1)
        if ordered != (normalize_address(token0), normalize_address(token1)):
            raise InputValidationError(f"Assets not in canonical order: {token0}, {token1}")
        self.token0, self.token1 = ordered

    def get_reserves(self) -> tuple[int, int]:
        return self.reserve0, self.reserve1

    # --- Liquidity ---

    @transaction
    @lock
    def mint(self, sender: str, recipient: str, amount0_in: int, amount1_in: int) -> int:
        """Deposit both assets and mint shares to recipient.

        An empty pool takes both amounts as given. Otherwise only the
        ratio-preserving part of the offer is collected; allowance covering
        the rest is left unspent.

        Returns:
            Number of shares minted

        Raises:
            ZeroAmountIn: If either amount is zero
            TransferFailed: If an asset ledger reports failure
        """
        sender = normalize_address(sender)
        recipient = normalize_address(recipient)
        if amount0_in == 0 or amount1_in == 0:
            raise ZeroAmountIn(f"Deposit amounts must be non-zero: ({amount0_in}, {amount1_in})")
        S(amount0_in).to_uint256()
        S(amount1_in).to_uint256()

        reserve0, reserve1 = self.reserve0, self.reserve1
        total = self.shares.total_supply()
        if reserve0 == 0 or reserve1 == 0:
            used0, used1 = amount0_in, amount1_in
            minted = constant_product.initial_shares(used0, used1)
        else:
            used0, used1 = constant_product.optimal_deposit(
                amount0_in, amount1_in, reserve0, reserve1
            )
            minted = constant_product.shares_for_deposit(used0, total, reserve0)

        # Collect before writing reserves (see module docstring)
        self._collect(self.token0, sender, used0)
        self._collect(self.token1, sender, used1)
        self.shares.mint(recipient, minted)

        self.chain.emit(Mint(self.address, sender, used0, used1))
        self._update(reserve0 + used0, reserve1 + used1)
        logger.debug(
            "liquidity_added",
            pool=self.address,
            sender=sender,
            recipient=recipient,
            used0=used0,
            used1=used1,
            shares=minted,
        )
        return minted

    @transaction
    @lock
    def burn(self, sender: str, recipient: str) -> tuple[int, int]:
        """Redeem the caller's whole share balance and pay recipient.

        Returns:
            (amount0_out, amount1_out)

        Raises:
            EmptyPool: If no shares exist
            NothingToBurn: If the caller holds no shares
            TransferFailed: If an asset ledger reports failure
        """
        sender = normalize_address(sender)
        recipient = normalize_address(recipient)
        total = self.shares.total_supply()
        if total == 0:
            raise EmptyPool(f"Pool {self.address} has no shares")
        balance = self.shares.balance_of(sender)
        if balance == 0:
            raise NothingToBurn(f"{sender} holds no shares of {self.address}")

        reserve0, reserve1 = self.reserve0, self.reserve1
        amount0_out, amount1_out = constant_product.withdrawal(balance, total, reserve0, reserve1)

        self.shares.burn(sender, balance)
        self._pay(self.token0, recipient, amount0_out)
        self._pay(self.token1, recipient, amount1_out)

        self.chain.emit(Burn(self.address, sender, amount0_out, amount1_out, recipient))
        self._update(
            (S(reserve0) - S(amount0_out)).value,
            (S(reserve1) - S(amount1_out)).value,
        )
        logger.debug(
            "liquidity_removed",
            pool=self.address,
            sender=sender,
            recipient=recipient,
            amount0=amount0_out,
            amount1=amount1_out,
            shares=balance,
        )
        return amount0_out, amount1_out

    # --- Swaps ---

    @transaction
    @lock
    def swap(self, sender: str, recipient: str, amount0_out: int, amount1_out: int) -> tuple[int, int]:
        """Take exactly one asset out, paying the zero-fee constant-product input.

        Returns:
            (amount0_in, amount1_in); the input for the untouched side is zero

        Raises:
            BadOutputSelection: Unless exactly one output is non-zero
            EmptyPool: If either reserve is zero
            InsufficientLiquidity: If the output is at or above its reserve
            TransferFailed: If an asset ledger reports failure
        """
        sender = normalize_address(sender)
        recipient = normalize_address(recipient)
        if (amount0_out == 0) == (amount1_out == 0):
            raise BadOutputSelection(
                f"Exactly one output must be non-zero: ({amount0_out}, {amount1_out})"
            )
        S(amount0_out).to_uint256()
        S(amount1_out).to_uint256()

        reserve0, reserve1 = self.reserve0, self.reserve1
        if reserve0 == 0 or reserve1 == 0:
            raise EmptyPool(f"Pool {self.address} has an empty reserve")

        amount0_in, amount1_in = constant_product.swap_inputs(
            reserve0, reserve1, amount0_out, amount1_out
        )
        # Collect and pay before writing reserves (see module docstring)
        if amount1_out > 0:
            self._collect(self.token0, sender, amount0_in)
            self._pay(self.token1, recipient, amount1_out)
        else:
            self._collect(self.token1, sender, amount1_in)
            self._pay(self.token0, recipient, amount0_out)

        self.chain.emit(
            Swap(self.address, sender, amount0_in, amount1_in, amount0_out, amount1_out, recipient)
        )
        self._update(
            (S(reserve0) + S(amount0_in) - S(amount0_out)).value,
            (S(reserve1) + S(amount1_in) - S(amount1_out)).value,
        )
        logger.debug(
            "swap_executed",
            pool=self.address,
            sender=sender,
            recipient=recipient,
            amount0_in=amount0_in,
            amount1_in=amount1_in,
            amount0_out=amount0_out,
            amount1_out=amount1_out,
        )
        return amount0_in, amount1_in

    # --- Share ledger ---

    @property
    def name(self) -> str:
        return self.shares.name

    @property
    def symbol(self) -> str:
        return self.shares.symbol

    @property
    def decimals(self) -> int:
        return self.shares.decimals

    @property
    def domain_separator(self) -> bytes:
        return self.shares.domain_separator

    def total_supply(self) -> int:
        return self.shares.total_supply()

    def balance_of(self, owner: str) -> int:
        return self.shares.balance_of(owner)

    def allowance(self, owner: str, spender: str) -> int:
        return self.shares.allowance(owner, spender)

    def nonces(self, owner: str) -> int:
        return self.shares.nonces(owner)

    def approve(self, sender: str, spender: str, value: int) -> bool:
        return self.shares.approve(sender, spender, value)

    def transfer(self, sender: str, to: str, value: int) -> bool:
        return self.shares.transfer(sender, to, value)

    def transfer_from(self, sender: str, owner: str, to: str, value: int) -> bool:
        return self.shares.transfer_from(sender, owner, to, value)

    def permit(
        self,
        owner: str,
        spender: str,
        value: int,
        deadline: int,
        signature: bytes | str,
    ) -> None:
        self.shares.permit(owner, spender, value, deadline, signature)

    # --- Internals ---

    def _asset(self, token: str) -> AssetLedger:
        return cast(AssetLedger, self.chain.get_contract(token))

    def _collect(self, token: str, owner: str, amount: int) -> None:
        if not self._asset(token).transfer_from(self.address, owner, self.address, amount):
            raise TransferFailed(f"transfer_from of {amount} {token} from {owner} failed")

    def _pay(self, token: str, to: str, amount: int) -> None:
        if not self._asset(token).transfer(self.address, to, amount):
            raise TransferFailed(f"transfer of {amount} {token} to {to} failed")

    def _update(self, reserve0: int, reserve1: int) -> None:
        self.reserve0 = S(reserve0).to_uint256()
        self.reserve1 = S(reserve1).to_uint256()
        self.chain.emit(Sync(self.address, self.reserve0, self.reserve1))
