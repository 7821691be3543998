from typing import Tuple

from reservoir_amm.common.errors import Overflow
from reservoir_amm.common.math import div_round_half_up, fits_uint112
from reservoir_amm.common.model import LiquidityBalances, PairSnapshot


class LiquidityAccountant:
    """
    Derives the {pool, reservoir, basin} split of a pair's raw balances.

    - pool: active liquidity priced by the curve, kept at the last swap's price ratio
    - reservoir: surplus of one asset over that ratio, only reachable by single-sided operations
    - basin: balance change made outside of swaps (rebase, donation) that is still being admitted
    """

    @staticmethod
    def admitted_total(
        total: int,
        pool_last: int,
        total_last: int,
        elapsed: int,
        min_basin_seconds: int,
        max_basin_seconds: int,
    ) -> int:
        """
        Interpolates linearly between total * pool_last / total_last (at elapsed <= min_basin_seconds)
        and total (at elapsed >= max_basin_seconds).
        """
        if elapsed >= max_basin_seconds:
            return total
        low = total * pool_last // total_last
        if elapsed <= min_basin_seconds:
            return low
        return low + (total - low) * (elapsed - min_basin_seconds) // (max_basin_seconds - min_basin_seconds)

    @staticmethod
    def split(
        total0: int,
        total1: int,
        snapshot: PairSnapshot,
        min_basin_seconds: int,
        max_basin_seconds: int,
        now: int,
    ) -> LiquidityBalances:
        """
        :param total0: raw token0 balance held by the pair
        :param total1: raw token1 balance held by the pair
        :param snapshot: PairSnapshot as of the last swap
        :param min_basin_seconds: elapsed time below which no basin growth is admitted
        :param max_basin_seconds: elapsed time from which all basin growth is admitted
        :param now: current timestamp
        :return: LiquidityBalances
        :raises Overflow: if a derived pool does not fit in 112 bits
        """
        pool0_last = snapshot.pool0_last
        pool1_last = snapshot.pool1_last
        if (
            pool0_last == 0
            or pool1_last == 0
            or total0 == 0
            or total1 == 0
            or snapshot.total0_last == 0
            or snapshot.total1_last == 0
        ):
            return LiquidityBalances()

        elapsed = max(now - snapshot.block_timestamp_last, 0)
        admitted0 = LiquidityAccountant.admitted_total(
            total0, pool0_last, snapshot.total0_last, elapsed, min_basin_seconds, max_basin_seconds
        )
        admitted1 = LiquidityAccountant.admitted_total(
            total1, pool1_last, snapshot.total1_last, elapsed, min_basin_seconds, max_basin_seconds
        )

        reservoir0 = 0
        reservoir1 = 0
        if admitted0 * pool1_last < admitted1 * pool0_last:
            # token0 is the scarce side; token1's surplus becomes reservoir
            pool0 = admitted0
            pool1 = div_round_half_up(pool0 * pool1_last, pool0_last)
            reservoir1 = admitted1 - pool1
        else:
            pool1 = admitted1
            pool0 = div_round_half_up(pool1 * pool0_last, pool1_last)
            reservoir0 = admitted0 - pool0

        if not fits_uint112(pool0) or not fits_uint112(pool1):
            raise Overflow("Derived pool balance exceeds 112 bits.")

        return LiquidityBalances(
            pool0=pool0,
            pool1=pool1,
            reservoir0=reservoir0,
            reservoir1=reservoir1,
            basin0=total0 - admitted0,
            basin1=total1 - admitted1,
        )

    @staticmethod
    def reservoir_side(balances: LiquidityBalances) -> Tuple[int, int]:
        """
        Returns (index, amount) of the non-empty reservoir, or (-1, 0) when both are empty.
        """
        if balances.reservoir0 > 0:
            return 0, balances.reservoir0
        if balances.reservoir1 > 0:
            return 1, balances.reservoir1
        return -1, 0
