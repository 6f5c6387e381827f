"""Zero-fee constant product math.

Reserves obey x * y = k on swaps. Liquidity is added at the current reserve
ratio and withdrawn pro rata to share ownership. All divisions round down.
"""

from __future__ import annotations

from pairdex.errors import InsufficientLiquidity
from pairdex.safe_int import S


class ConstantProduct:
    """Deposit, withdrawal and swap pricing for a two-reserve pool."""

    def initial_shares(self, amount0: int, amount1: int) -> int:
        """Shares minted by the first deposit: floor(sqrt(amount0 * amount1))."""
        return (S(amount0) * S(amount1)).isqrt().to_uint256()

    def optimal_deposit(
        self,
        amount0_desired: int,
        amount1_desired: int,
        reserve0: int,
        reserve1: int,
    ) -> tuple[int, int]:
        """Largest deposit within the offered amounts that keeps the reserve ratio.

        Prefers spending amount1_desired in full:
            opt0 = reserve0 * amount1 / reserve1
        and falls back to spending amount0_desired in full when opt0 exceeds it:
            opt1 = reserve1 * amount0 / reserve0
        The fallback always fits: opt0 > amount0 implies opt1 <= amount1.

        Returns:
            (used0, used1)
        """
        opt0 = (S(reserve0) * S(amount1_desired) // S(reserve1)).value
        if opt0 <= amount0_desired:
            return opt0, amount1_desired
        opt1 = (S(reserve1) * S(amount0_desired) // S(reserve0)).value
        return amount0_desired, opt1

    def shares_for_deposit(self, used0: int, total_shares: int, reserve0: int) -> int:
        """Shares minted for a ratio-preserving deposit: used0 * T / reserve0."""
        return (S(used0) * S(total_shares) // S(reserve0)).to_uint256()

    def withdrawal(
        self,
        shares: int,
        total_shares: int,
        reserve0: int,
        reserve1: int,
    ) -> tuple[int, int]:
        """Pro-rata reserves owed to `shares` out of `total_shares`."""
        amount0 = (S(shares) * S(reserve0) // S(total_shares)).value
        amount1 = (S(shares) * S(reserve1) // S(total_shares)).value
        return amount0, amount1

    def get_amount_in(self, amount_out: int, reserve_in: int, reserve_out: int) -> int:
        """Input needed to take amount_out without a fee.

        Formula: amount_in = reserve_in * amount_out / (reserve_out - amount_out)

        A zero amount_out costs zero input.

        Raises:
            InsufficientLiquidity: If amount_out is at or above reserve_out
        """
        if amount_out >= reserve_out:
            raise InsufficientLiquidity(
                f"Requested output {amount_out} not below reserve {reserve_out}"
            )
        return (S(reserve_in) * S(amount_out) // (S(reserve_out) - S(amount_out))).to_uint256()

    def swap_inputs(
        self,
        reserve0: int,
        reserve1: int,
        amount0_out: int,
        amount1_out: int,
    ) -> tuple[int, int]:
        """Both hypothetical inputs for a single-direction swap.

        Exactly one output is expected to be non-zero; the input matching the
        zero output evaluates to zero.

        Returns:
            (amount0_in, amount1_in)
        """
        amount0_in = self.get_amount_in(amount1_out, reserve0, reserve1)
        amount1_in = self.get_amount_in(amount0_out, reserve1, reserve0)
        return amount0_in, amount1_in


# Singleton instance
constant_product = ConstantProduct()
