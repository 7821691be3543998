from typing import Tuple

from reservoir_amm.common.enums import CurveType
from reservoir_amm.common.math import Q112, isqrt
from reservoir_amm.curves.base import CurveModel
from reservoir_amm.curves.utils.price_floor_curve_helper import PriceFloorCurveHelper as helper


class PriceFloorCurve(CurveModel):
    """
    Constant product blended with a floor: the price of either asset in terms of the
    other never falls below price_floor_bps / 10000, so neither side can be drained
    to a near-zero price. With price_floor_bps == 0 it reduces exactly to the
    constant product curve.
    """

    curve_type = CurveType.PRICE_FLOOR

    def price(self, pool_a: int, pool_b: int, price_floor_bps: int) -> int:
        self._check_pools(pool_a, pool_b)
        virtual_a, virtual_b = helper.virtual_reserves(pool_a, pool_b, price_floor_bps)
        if virtual_b == 0:
            raise ZeroDivisionError("Cannot price against an empty pool.")
        return virtual_a * Q112 // virtual_b

    def invariant(self, pool_a: int, pool_b: int, price_floor_bps: int) -> Tuple[int, int]:
        self._check_pools(pool_a, pool_b)
        virtual_a, virtual_b = helper.virtual_reserves(pool_a, pool_b, price_floor_bps)
        return isqrt(virtual_a * virtual_b), helper.scale(price_floor_bps)
