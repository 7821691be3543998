from reservoir_amm.common.math import Q112
from reservoir_amm.curves.base import CurveModel


class MovingAveragePrice:
    """Linearly interpolated time-weighted reference price."""

    @staticmethod
    def current(
        pool_a: int,
        pool_b: int,
        moving_average_price_last: int,
        window_seconds: int,
        elapsed_seconds: int,
        curve: CurveModel,
        price_floor_bps: int,
    ) -> int:
        """
        Blends the remembered average with the instantaneous curve price of B in terms of A:
          - elapsed == 0 => the last value, unchanged
          - elapsed >= window => the instantaneous price
          - otherwise (last * (window - elapsed) + instantaneous * elapsed) / window
        """
        if elapsed_seconds <= 0:
            return moving_average_price_last
        instantaneous = curve.price(pool_a, pool_b, price_floor_bps)
        if elapsed_seconds >= window_seconds:
            return instantaneous
        return (
            moving_average_price_last * (window_seconds - elapsed_seconds) + instantaneous * elapsed_seconds
        ) // window_seconds

    @staticmethod
    def inverse(price: int) -> int:
        """Converts a UQ112x112 price of A in B into the price of B in A."""
        if price == 0:
            return 0
        return Q112 * Q112 // price
