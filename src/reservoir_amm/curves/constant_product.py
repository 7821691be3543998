from typing import Tuple

from reservoir_amm.common.enums import CurveType
from reservoir_amm.common.math import Q112, isqrt
from reservoir_amm.curves.base import CurveModel


class ConstantProductCurve(CurveModel):
    """
    Plain x * y = k pricing:
      price(a, b) = a / b
      invariant(a, b) = sqrt(a * b)
    Only valid for a zero price floor.
    """

    curve_type = CurveType.CONSTANT_PRODUCT

    def price(self, pool_a: int, pool_b: int, price_floor_bps: int = 0) -> int:
        self._check_floor(price_floor_bps)
        self._check_pools(pool_a, pool_b)
        if pool_b == 0:
            raise ZeroDivisionError("Cannot price against an empty pool.")
        return pool_a * Q112 // pool_b

    def invariant(self, pool_a: int, pool_b: int, price_floor_bps: int = 0) -> Tuple[int, int]:
        self._check_floor(price_floor_bps)
        self._check_pools(pool_a, pool_b)
        return isqrt(pool_a * pool_b), 1

    @staticmethod
    def _check_floor(price_floor_bps: int):
        if price_floor_bps != 0:
            raise ValueError("ConstantProductCurve requires price_floor_bps == 0.")
