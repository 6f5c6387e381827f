"""In-memory contract host.

The Chain stands in for the execution environment the pools run on:
- allocates identities for deployed contracts
- keeps the contract table, the block timestamp and the chain id
- collects events in emission order
- runs every public mutating operation inside a savepoint

A savepoint is a journal: a contract is snapshotted the first time an
operation touches it while the savepoint is open, and deployments and
identity counters are recorded as they happen. If the wrapped operation
raises, the journaled contracts, the contract table, the identity counters
and the event log are restored before the exception propagates, so a failed
operation leaves no trace. Contracts the operation never touched are never
copied. Savepoints nest: a collaborator call that fails inside a
pool operation restores to its own savepoint, and the pool operation
restores to the outer one.
"""

from __future__ import annotations

import copy
import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, ClassVar, TypeVar

import structlog
from eth_utils import keccak

from pairdex.config import DEFAULT_CHAIN_CONFIG, ChainConfig
from pairdex.errors import IdentityCollision, UnknownContract
from pairdex.models.events import Event
from pairdex.models.types import address_bytes, address_from_bytes, normalize_address

logger = structlog.get_logger()

F = TypeVar("F", bound=Callable[..., Any])


class Stateful:
    """Object whose attributes can be snapshotted and restored in place.

    Attributes listed in `_transient` are references (the chain, collaborators,
    immutable config) and are never copied. Attributes listed in `_nested`
    are Stateful sub-objects that snapshot themselves.
    """

    _transient: ClassVar[tuple[str, ...]] = ()
    _nested: ClassVar[tuple[str, ...]] = ()

    def snapshot(self) -> dict[str, Any]:
        skip = set(self._transient) | set(self._nested)
        own = {k: v for k, v in vars(self).items() if k not in skip}
        # Pin transient references so deepcopy never follows them
        memo = {id(getattr(self, name)): getattr(self, name) for name in self._transient}
        return {
            "own": copy.deepcopy(own, memo),
            "nested": {name: getattr(self, name).snapshot() for name in self._nested},
        }

    def restore(self, state: dict[str, Any]) -> None:
        # A snapshot can be shared by nested savepoints, so restore a copy
        vars(self).update(copy.deepcopy(state["own"]))
        for name, nested_state in state["nested"].items():
            getattr(self, name).restore(nested_state)


class Contract(Stateful):
    """A deployed object with an identity on a chain."""

    _transient: ClassVar[tuple[str, ...]] = ("chain", "address")

    def __init__(self, chain: Chain, address: str) -> None:
        self.chain = chain
        self.address = normalize_address(address)


def transaction(method: F) -> F:
    """Run a method of a chain-bound object inside a savepoint."""

    @functools.wraps(method)
    def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
        with self.chain.atomic(method.__qualname__):
            self.chain.journal(self)
            return method(self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]


@dataclass
class _Savepoint:
    """Undo journal for one open savepoint."""

    event_count: int
    # id(contract) -> (contract, state before its first change)
    states: dict[int, tuple[Stateful, dict[str, Any]]] = field(default_factory=dict)
    deployed: list[str] = field(default_factory=list)
    # deployer -> counter before its first allocation, None if unused
    deploy_nonces: dict[str, int | None] = field(default_factory=dict)


class Chain:
    """Execution environment shared by registries, pools and assets."""

    def __init__(
        self,
        config: ChainConfig = DEFAULT_CHAIN_CONFIG,
        *,
        block_timestamp: int | None = None,
    ) -> None:
        """Create an empty chain.

        Args:
            config: Chain settings (chain id)
            block_timestamp: Starting timestamp in seconds. Defaults to now.
        """
        self.config = config
        self.block_timestamp = int(time.time()) if block_timestamp is None else block_timestamp
        self._contracts: dict[str, Contract] = {}
        self._deploy_nonces: dict[str, int] = {}
        self._events: list[Event] = []
        self._savepoints: list[_Savepoint] = []

    @property
    def chain_id(self) -> int:
        return self.config.chain_id

    @property
    def depth(self) -> int:
        """Number of savepoints currently open."""
        return len(self._savepoints)

    def advance_time(self, seconds: int) -> int:
        """Move the block timestamp forward and return the new value."""
        if seconds < 0:
            raise ValueError(f"Cannot move time backwards: {seconds}")
        self.block_timestamp += seconds
        return self.block_timestamp

    # --- Contracts ---

    def next_identity(self, deployer: str) -> str:
        """Allocate a fresh identity for a contract created by deployer.

        Derived from (deployer, per-deployer counter), so allocation is
        deterministic for a given sequence of deployments.
        """
        deployer = normalize_address(deployer)
        for savepoint in self._savepoints:
            savepoint.deploy_nonces.setdefault(deployer, self._deploy_nonces.get(deployer))
        nonce = self._deploy_nonces.get(deployer, 0)
        self._deploy_nonces[deployer] = nonce + 1
        digest = keccak(b"pairdex.create" + address_bytes(deployer) + nonce.to_bytes(32, "big"))
        return address_from_bytes(digest)

    def deploy(self, contract: Contract) -> Contract:
        """Register a contract at its identity.

        Raises:
            IdentityCollision: If the identity is already occupied
        """
        if contract.address in self._contracts:
            raise IdentityCollision(f"Identity already occupied: {contract.address}")
        self._contracts[contract.address] = contract
        for savepoint in self._savepoints:
            savepoint.deployed.append(contract.address)
        logger.debug(
            "contract_deployed",
            address=contract.address,
            kind=type(contract).__name__,
        )
        return contract

    def get_contract(self, address: str) -> Contract:
        """Resolve a deployed contract.

        Raises:
            UnknownContract: If nothing is deployed at the identity
        """
        address = normalize_address(address)
        contract = self._contracts.get(address)
        if contract is None:
            raise UnknownContract(f"No contract at {address}")
        return contract

    def has_contract(self, address: str) -> bool:
        return normalize_address(address) in self._contracts

    # --- Events ---

    def emit(self, event: Event) -> None:
        self._events.append(event)
        fields = event.to_dict()
        logger.debug("event_emitted", kind=fields.pop("event"), **fields)

    @property
    def events(self) -> tuple[Event, ...]:
        return tuple(self._events)

    def events_of(self, kind: type[Event], emitter: str | None = None) -> list[Event]:
        """Events of one type, optionally restricted to one emitter."""
        emitter = normalize_address(emitter) if emitter is not None else None
        return [
            e
            for e in self._events
            if isinstance(e, kind) and (emitter is None or e.emitter == emitter)
        ]

    # --- Savepoints ---

    @contextmanager
    def atomic(self, label: str = "transaction") -> Iterator[None]:
        """Run the block atomically: on any exception, restore and re-raise."""
        savepoint = _Savepoint(event_count=len(self._events))
        self._savepoints.append(savepoint)
        try:
            yield
        except Exception as exc:
            self._rollback(savepoint)
            logger.debug(
                "transaction_reverted",
                operation=label,
                error=type(exc).__name__,
                detail=str(exc),
                depth=len(self._savepoints),
            )
            raise
        finally:
            self._savepoints.pop()

    def journal(self, obj: Stateful) -> None:
        """Record the state of obj's contract in every open savepoint lacking it.

        A ledger nested in a contract shares the contract's identity, so the
        whole contract is journaled. Objects that are not deployed are
        journaled on their own.
        """
        if not self._savepoints:
            return
        address = getattr(obj, "address", None)
        target: Stateful = self._contracts.get(address, obj) if address is not None else obj
        key = id(target)
        if key in self._savepoints[-1].states:
            return
        missing = [sp for sp in self._savepoints if key not in sp.states]
        # Untouched since the outermost missing savepoint opened
        state = target.snapshot()
        for savepoint in missing:
            savepoint.states[key] = (target, state)

    def _rollback(self, savepoint: _Savepoint) -> None:
        for target, state in savepoint.states.values():
            target.restore(state)
        for address in savepoint.deployed:
            self._contracts.pop(address, None)
        for deployer, nonce in savepoint.deploy_nonces.items():
            if nonce is None:
                self._deploy_nonces.pop(deployer, None)
            else:
                self._deploy_nonces[deployer] = nonce
        del self._events[savepoint.event_count :]
