from abc import ABC, abstractmethod
from typing import Tuple

from reservoir_amm.common.enums import CurveType
from reservoir_amm.common.math import BPS, Q112


class CurveModel(ABC):
    """Abstract base class defining the pricing capability a pair is built around."""

    curve_type: CurveType

    @abstractmethod
    def price(self, pool_a: int, pool_b: int, price_floor_bps: int) -> int:
        """
        Returns the marginal price of asset B in terms of asset A as a UQ112x112 value.

        :param pool_a: int - active balance of asset A
        :param pool_b: int - active balance of asset B
        :param price_floor_bps: int - curve floor parameter
        :return: int: price scaled by 2**112
        """
        pass

    @abstractmethod
    def invariant(self, pool_a: int, pool_b: int, price_floor_bps: int) -> Tuple[int, int]:
        """
        Returns the curve's conserved quantity as an unreduced (numerator, denominator) pair.
        Two invariants of the same curve and floor always share a denominator.

        :param pool_a: int - active balance of asset A
        :param pool_b: int - active balance of asset B
        :param price_floor_bps: int - curve floor parameter
        :return: (numerator, denominator)
        """
        pass

    def liquidity(self, pool_a: int, pool_b: int, price_floor_bps: int) -> int:
        """Invariant truncated to an integer amount of liquidity."""
        numerator, denominator = self.invariant(pool_a, pool_b, price_floor_bps)
        return numerator // denominator

    def price_bounds(self, price_floor_bps: int) -> Tuple[int, int]:
        """(lowest, highest) UQ112x112 price the curve can quote."""
        if price_floor_bps == 0:
            return 0, 0
        return price_floor_bps * Q112 // BPS, BPS * Q112 // price_floor_bps

    def _check_pools(self, pool_a: int, pool_b: int):
        if pool_a < 0 or pool_b < 0:
            raise ValueError("Pool balances must be non-negative.")
