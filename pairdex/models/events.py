"""Observable notifications emitted by pairdex contracts.

Events are appended to the chain log in emission order and are dropped
together with the state changes of a reverted operation.
"""

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class Event:
    """Base event. `emitter` is the identity of the emitting contract."""

    emitter: str

    @property
    def name(self) -> str:
        return type(self).__name__

    def to_dict(self) -> dict[str, Any]:
        return {"event": self.name, **asdict(self)}


@dataclass(frozen=True)
class Transfer(Event):
    sender: str
    recipient: str
    value: int


@dataclass(frozen=True)
class Approval(Event):
    owner: str
    spender: str
    value: int


@dataclass(frozen=True)
class PairCreated(Event):
    token0: str
    token1: str
    pair: str
    # Number of pairs after creation
    index: int


@dataclass(frozen=True)
class Mint(Event):
    sender: str
    amount0: int
    amount1: int


@dataclass(frozen=True)
class Burn(Event):
    sender: str
    amount0: int
    amount1: int
    recipient: str


@dataclass(frozen=True)
class Swap(Event):
    sender: str
    amount0_in: int
    amount1_in: int
    amount0_out: int
    amount1_out: int
    recipient: str


@dataclass(frozen=True)
class Sync(Event):
    reserve0: int
    reserve1: int
