"""pairdex - deterministic two-asset exchange pools, simulated in memory."""

from pairdex.amm.pool import LiquidityPool
from pairdex.chain import Chain
from pairdex.pools.registry import PoolRegistry

__version__ = "0.1.0"
__all__ = ["Chain", "LiquidityPool", "PoolRegistry", "__version__"]
