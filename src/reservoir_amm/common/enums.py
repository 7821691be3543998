from enum import Enum


class CurveType(Enum):
    CONSTANT_PRODUCT = "CONSTANT_PRODUCT"
    PRICE_FLOOR = "PRICE_FLOOR"

    @classmethod
    def from_str(cls, curve_str: str) -> "CurveType":
        """
        Convert a string to a CurveType enum.
        :param curve_str: str
        :return: CurveType or NotImplementedError
        """
        if curve_str.upper() == CurveType.CONSTANT_PRODUCT.name:
            return CurveType.CONSTANT_PRODUCT
        elif curve_str.upper() == CurveType.PRICE_FLOOR.name:
            return CurveType.PRICE_FLOOR
        else:
            raise NotImplementedError(f"No curve type enum for {curve_str}")

    @classmethod
    def for_price_floor(cls, price_floor_bps: int) -> "CurveType":
        return CurveType.CONSTANT_PRODUCT if price_floor_bps == 0 else CurveType.PRICE_FLOOR

    def __hash__(self):
        return hash(self.value)

    def __str__(self):
        return self.name

    def __repr__(self):
        return self.__str__()


class PairOperation(Enum):
    MINT = "MINT"
    MINT_WITH_RESERVOIR = "MINT_WITH_RESERVOIR"
    BURN = "BURN"
    BURN_FROM_RESERVOIR = "BURN_FROM_RESERVOIR"
    SWAP = "SWAP"
    PARAMETER_UPDATE = "PARAMETER_UPDATE"
    PAUSE_UPDATE = "PAUSE_UPDATE"

    @classmethod
    def from_str(cls, op_str: str) -> "PairOperation":
        for member in cls:
            if op_str.upper() == member.name:
                return member
        raise NotImplementedError(f"No pair operation enum for {op_str}")

    def __str__(self):
        return self.name

    def __repr__(self):
        return self.__str__()
