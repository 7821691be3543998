import pytest

from reservoir_amm.common.enums import CurveType, PairOperation


@pytest.mark.parametrize(
    "value, expected",
    [
        ("constant_product", CurveType.CONSTANT_PRODUCT),
        ("PRICE_FLOOR", CurveType.PRICE_FLOOR),
        ("Price_Floor", CurveType.PRICE_FLOOR),
    ]
)
def test_curve_type_from_str(value, expected):
    assert CurveType.from_str(value) == expected


def test_curve_type_from_str_unknown():
    with pytest.raises(NotImplementedError):
        CurveType.from_str("stableswap")


@pytest.mark.parametrize(
    "price_floor_bps, expected",
    [
        (0, CurveType.CONSTANT_PRODUCT),
        (1, CurveType.PRICE_FLOOR),
        (9999, CurveType.PRICE_FLOOR),
    ]
)
def test_curve_type_for_price_floor(price_floor_bps, expected):
    assert CurveType.for_price_floor(price_floor_bps) == expected


def test_pair_operation_from_str():
    assert PairOperation.from_str("mint_with_reservoir") == PairOperation.MINT_WITH_RESERVOIR
    assert str(PairOperation.SWAP) == "SWAP"
    with pytest.raises(NotImplementedError):
        PairOperation.from_str("flash_loan")
