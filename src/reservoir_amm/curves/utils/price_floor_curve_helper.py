from typing import Tuple

from reservoir_amm.common.math import BPS, isqrt


class PriceFloorCurveHelper:
    """
    Virtual-reserve algebra for the price floor curve.

    The curve is a constant product over virtual reserves that carry an extra
    alpha * L of each asset, where L is the invariant and alpha^2 = F / BPS:

        (a + alpha*L) * (b + alpha*L) = L^2

    Solving the quadratic for the virtual reserves only needs alpha^2, so F stays
    rational. With d = a - b and D = F * (4*BPS*a*b + F*d^2), the virtual reserves
    scaled by 2 * (BPS - F) are:

        A = 2*BPS*a - F*d + sqrt(D)
        B = 2*BPS*b + F*d + sqrt(D)

    and A - B == 2 * (BPS - F) * d exactly. The marginal price A / B is confined
    to [F / BPS, BPS / F].
    """

    @staticmethod
    def discriminant(pool_a: int, pool_b: int, price_floor_bps: int) -> int:
        diff = pool_a - pool_b
        return price_floor_bps * (4 * BPS * pool_a * pool_b + price_floor_bps * diff * diff)

    @staticmethod
    def scale(price_floor_bps: int) -> int:
        """Common denominator of the scaled virtual reserves."""
        if not 0 <= price_floor_bps < BPS:
            raise ValueError("price_floor_bps must be in [0, 10000).")
        return 2 * (BPS - price_floor_bps)

    @staticmethod
    def virtual_reserves(pool_a: int, pool_b: int, price_floor_bps: int) -> Tuple[int, int]:
        """
        Returns the scaled virtual reserves (A, B).

        The larger pool goes through the square-root branch, where every term adds and
        no precision is lost to cancellation; the smaller one is taken from the exact
        difference. Equal pools take the pool_a branch.
        """
        scale = PriceFloorCurveHelper.scale(price_floor_bps)
        root = isqrt(PriceFloorCurveHelper.discriminant(pool_a, pool_b, price_floor_bps))
        if pool_a >= pool_b:
            spread = pool_a - pool_b
            virtual_a = 2 * BPS * pool_a - price_floor_bps * spread + root
            virtual_b = virtual_a - scale * spread
        else:
            spread = pool_b - pool_a
            virtual_b = 2 * BPS * pool_b - price_floor_bps * spread + root
            virtual_a = virtual_b - scale * spread
        return virtual_a, virtual_b
