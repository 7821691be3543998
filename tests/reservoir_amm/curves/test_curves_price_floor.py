import random

import pytest

from reservoir_amm.common.math import BPS, Q112, isqrt
from reservoir_amm.curves.price_floor import PriceFloorCurve


@pytest.fixture
def curve():
    return PriceFloorCurve()


@pytest.mark.parametrize("price_floor_bps", [0, 1, 500, 5000, 9999])
def test_equal_pools_price_at_par(curve, price_floor_bps):
    assert curve.price(1_000_000, 1_000_000, price_floor_bps) == Q112


@pytest.mark.parametrize(
    "pool_a, pool_b",
    [
        (2_000, 1_000),
        (1, 3),
        (123_456_789, 987_654),
        (10 ** 30, 7),
    ]
)
def test_zero_floor_matches_constant_product(curve, pool_a, pool_b):
    """
    With no floor the curve must reproduce the plain ratio exactly, and its
    truncated invariant must equal isqrt(a * b).
    """
    assert curve.price(pool_a, pool_b, 0) == pool_a * Q112 // pool_b
    assert curve.liquidity(pool_a, pool_b, 0) == isqrt(pool_a * pool_b)


@pytest.mark.parametrize("price_floor_bps", [1, 2500, 5000, 9999])
def test_price_reaches_bounds_at_empty_side(curve, price_floor_bps):
    low, high = curve.price_bounds(price_floor_bps)
    assert curve.price(0, 1_000_000, price_floor_bps) == low
    assert curve.price(1_000_000, 0, price_floor_bps) == high
    assert low == price_floor_bps * Q112 // BPS
    assert high == BPS * Q112 // price_floor_bps


def test_zero_floor_cannot_price_against_empty_pool(curve):
    with pytest.raises(ZeroDivisionError):
        curve.price(1_000, 0, 0)


def test_invalid_floor(curve):
    with pytest.raises(ValueError):
        curve.price(1, 1, BPS)
    with pytest.raises(ValueError):
        curve.invariant(1, 1, -1)


def test_floor_flattens_price_impact(curve):
    """
    For the same imbalance a higher floor keeps the price closer to par.
    """
    prices = [curve.price(1_000_000, 4_000_000, floor) for floor in (0, 2500, 5000, 9000)]
    assert prices == sorted(prices)
    assert prices[0] == Q112 // 4
    assert prices[-1] < Q112


def test_randomized_price_bounds_and_monotonicity(curve):
    rng = random.Random(7)
    for _ in range(200):
        floor = rng.randint(0, BPS - 1)
        pool_a = rng.randint(10 ** 6, 10 ** 18)
        pool_b = pool_a * rng.randint(1, 100) // rng.randint(1, 100)
        delta = rng.randint(pool_a // 100, pool_a)

        price = curve.price(pool_a, pool_b, floor)
        if floor > 0:
            low, high = curve.price_bounds(floor)
            assert low <= price <= high

        # more A per B makes B dearer in A
        assert curve.price(pool_a + delta, pool_b, floor) > price
        # invariant grows with either pool
        num, den = curve.invariant(pool_a, pool_b, floor)
        grown_num, grown_den = curve.invariant(pool_a + delta, pool_b, floor)
        assert den == grown_den
        assert grown_num > num


def test_invariant_is_symmetric(curve):
    rng = random.Random(11)
    for _ in range(50):
        floor = rng.randint(0, BPS - 1)
        pool_a = rng.randint(1, 10 ** 12)
        pool_b = rng.randint(1, 10 ** 12)
        assert curve.invariant(pool_a, pool_b, floor) == curve.invariant(pool_b, pool_a, floor)
