import pytest

from reservoir_amm.accounting.timelock import VolatilityTimelock


@pytest.mark.parametrize(
    "new_price, moving_average, expected",
    [
        (1_000_000, 1_000_000, 3_600),
        # 1% deviation against a 7% ceiling: 3600 + 82800 * 100 / 700
        (1_010_000, 1_000_000, 15_428),
        (990_000, 1_000_000, 15_428),
        # deviation beyond max volatility is capped
        (2_000_000, 1_000_000, 86_400),
    ]
)
def test_duration_scales_with_deviation(new_price, moving_average, expected):
    assert VolatilityTimelock.duration(new_price, moving_average, 3_600, 86_400, 700) == expected


def test_duration_degenerate_inputs():
    assert VolatilityTimelock.duration(1_000, 0, 3_600, 86_400, 700) == 86_400
    assert VolatilityTimelock.duration(1_000, 1_000, 3_600, 86_400, 0) == 86_400
    assert VolatilityTimelock.duration(5_000, 1_000, 600, 600, 700) == 600


def test_extend_never_moves_backwards():
    assert VolatilityTimelock.extend(5_000, 1_000, 100) == 5_000
    assert VolatilityTimelock.extend(500, 1_000, 100) == 1_100


def test_is_active():
    assert VolatilityTimelock.is_active(1_001, 1_000)
    assert not VolatilityTimelock.is_active(1_000, 1_000)


def test_rescale():
    assert VolatilityTimelock.rescale(1_000 + 86_000, 1_000, 86_400, 43_200) == 1_000 + 43_000
    assert VolatilityTimelock.rescale(900, 1_000, 86_400, 43_200) == 900
    assert VolatilityTimelock.rescale(2_000, 1_000, 0, 43_200) == 2_000
