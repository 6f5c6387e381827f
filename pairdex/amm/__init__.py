"""Constant product pool engine."""

from pairdex.amm.math import ConstantProduct, constant_product
from pairdex.amm.pool import LiquidityPool

__all__ = [
    "ConstantProduct",
    "constant_product",
    "LiquidityPool",
]
