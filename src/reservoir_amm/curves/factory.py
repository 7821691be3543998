from typing import Union

from reservoir_amm.common.enums import CurveType
from reservoir_amm.curves.base import CurveModel
from reservoir_amm.curves.constant_product import ConstantProductCurve
from reservoir_amm.curves.price_floor import PriceFloorCurve


def curve_for(selector: Union[int, str, CurveType]) -> CurveModel:
    """
    Returns the curve strategy for a price floor (int), a curve name (str) or a CurveType.
    A zero floor maps to the plain constant product curve.
    """
    if isinstance(selector, bool):
        raise TypeError("Curve selector cannot be a bool.")
    if isinstance(selector, int):
        curve_type = CurveType.for_price_floor(selector)
    elif isinstance(selector, str):
        curve_type = CurveType.from_str(selector)
    else:
        curve_type = selector

    if curve_type == CurveType.CONSTANT_PRODUCT:
        return ConstantProductCurve()
    elif curve_type == CurveType.PRICE_FLOOR:
        return PriceFloorCurve()
    raise NotImplementedError(f"No curve implementation for {curve_type}")
