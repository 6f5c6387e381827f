"""Pool registry: creates pools at deterministic identities and resolves them.

The registry owns the pair -> pool mapping. Each created pair is recorded
under both orderings, so lookups are order-insensitive, and entries are
never updated or removed.
"""

from __future__ import annotations

from typing import ClassVar, cast

import structlog

from pairdex.amm.pool import LiquidityPool
from pairdex.chain import Chain, Contract, transaction
from pairdex.config import DEFAULT_POOL_CONFIG, PoolConfig
from pairdex.constants import ZERO_ADDRESS
from pairdex.errors import PairExists
from pairdex.ledger.signatures import SignatureRecovery, eth_keys_recovery
from pairdex.models.events import PairCreated
from pairdex.models.types import normalize_address
from pairdex.pools.identity import pool_identity_for

logger = structlog.get_logger()


class PoolRegistry(Contract):
    """Registry of LiquidityPool instances, one per asset pair."""

    _transient: ClassVar[tuple[str, ...]] = ("chain", "address", "pool_config", "recovery")

    def __init__(
        self,
        chain: Chain,
        address: str,
        *,
        pool_config: PoolConfig = DEFAULT_POOL_CONFIG,
        recovery: SignatureRecovery = eth_keys_recovery,
    ) -> None:
        """Create a registry.

        Args:
            chain: Host chain
            address: Registry identity (input to every derived pool identity)
            pool_config: Settings for the pools this registry creates
            recovery: Signature recovery used by the pools' share ledgers
        """
        super().__init__(chain, address)
        self.pool_config = pool_config
        self.recovery = recovery
        self._pairs: dict[tuple[str, str], str] = {}
        self._all_pairs: list[str] = []

    @classmethod
    def deploy(
        cls,
        chain: Chain,
        deployer: str,
        *,
        pool_config: PoolConfig = DEFAULT_POOL_CONFIG,
        recovery: SignatureRecovery = eth_keys_recovery,
    ) -> PoolRegistry:
        registry = cls(
            chain,
            chain.next_identity(deployer),
            pool_config=pool_config,
            recovery=recovery,
        )
        chain.deploy(registry)
        return registry

    # --- Reads ---

    def get_pair(self, token_a: str, token_b: str) -> str:
        """Pool identity for a pair in either order, or the null identity."""
        key = (normalize_address(token_a), normalize_address(token_b))
        return self._pairs.get(key, ZERO_ADDRESS)

    def calculate_pool_address(self, token_a: str, token_b: str) -> str:
        """Predict the identity create_pair would assign, without creating.

        Raises:
            EqualAssets: If both assets are the same
            ZeroAsset: If an asset is the null identity
        """
        _, _, identity = pool_identity_for(self.address, token_a, token_b)
        return identity

    @property
    def all_pairs(self) -> tuple[str, ...]:
        """Pool identities in creation order."""
        return tuple(self._all_pairs)

    def all_pairs_length(self) -> int:
        return len(self._all_pairs)

    def get_pool(self, token_a: str, token_b: str) -> LiquidityPool | None:
        """Resolve the pool object for a pair, if created."""
        identity = self.get_pair(token_a, token_b)
        if identity == ZERO_ADDRESS:
            return None
        return cast(LiquidityPool, self.chain.get_contract(identity))

    # --- Writes ---

    @transaction
    def create_pair(self, sender: str, token_a: str, token_b: str) -> str:
        """Create the pool for a pair at its derived identity.

        Args:
            sender: Caller identity (any caller may create a pair)
            token_a: One asset identity
            token_b: The other asset identity

        Returns:
            The new pool identity

        Raises:
            EqualAssets: If both assets are the same
            ZeroAsset: If an asset is the null identity
            PairExists: If a pool is already recorded for the pair
            IdentityCollision: If the derived identity is occupied
        """
        token0, token1, identity = pool_identity_for(self.address, token_a, token_b)
        if (token0, token1) in self._pairs:
            raise PairExists(f"Pair already exists: {token0}/{token1} at {self._pairs[(token0, token1)]}")

        pool = LiquidityPool(
            self.chain,
            identity,
            registry=self.address,
            config=self.pool_config,
            recovery=self.recovery,
        )
        self.chain.deploy(pool)
        pool.initialize(self.address, token0, token1)

        self._pairs[(token0, token1)] = identity
        self._pairs[(token1, token0)] = identity
        self._all_pairs.append(identity)

        self.chain.emit(PairCreated(self.address, token0, token1, identity, len(self._all_pairs)))
        logger.info(
            "pair_created",
            registry=self.address,
            creator=normalize_address(sender),
            token0=token0,
            token1=token1,
            pair=identity,
            index=len(self._all_pairs),
        )
        return identity
