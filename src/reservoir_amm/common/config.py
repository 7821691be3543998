from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from reservoir_amm.common.errors import ParameterOutOfBounds
from reservoir_amm.common.math import BPS, MBPS


MAX_DURATION_SECONDS = 12 * 7 * 24 * 60 * 60
MINIMUM_LIQUIDITY = 1000
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


class PairParameters(BaseModel):
    """
    Per-pair configuration. Every bound is enforced here so that setters can validate
    a candidate parameter set before touching the pair.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    price_floor_bps: int = Field(0, ge=0, lt=BPS, description="Curve floor, minimum price ratio in bps")
    fee_bps: int = Field(30, ge=0, le=BPS, description="Trading fee in bps")
    protocol_fee_mbps: int = Field(0, ge=0, le=MBPS, description="Share of volume paid to the protocol, in mbps")
    moving_average_window_seconds: int = Field(24 * 60 * 60, ge=1, le=MAX_DURATION_SECONDS)
    max_volatility_bps: int = Field(700, ge=0, le=BPS)
    min_timelock_seconds: int = Field(24 * 60 * 60, ge=0, le=MAX_DURATION_SECONDS)
    max_timelock_seconds: int = Field(24 * 60 * 60, ge=0, le=MAX_DURATION_SECONDS)
    max_swappable_reservoir_limit_bps: int = Field(500, ge=0, le=BPS)
    swappable_reservoir_growth_window_seconds: int = Field(24 * 60 * 60, ge=1, le=MAX_DURATION_SECONDS)
    min_basin_seconds: int = Field(0, ge=0, le=MAX_DURATION_SECONDS)
    max_basin_seconds: int = Field(0, ge=0, le=MAX_DURATION_SECONDS)

    @model_validator(mode="after")
    def _check_relations(self) -> "PairParameters":
        if self.protocol_fee_mbps > self.fee_bps * 1000:
            raise ValueError("protocol_fee_mbps cannot exceed fee_bps * 1000.")
        if self.min_timelock_seconds > self.max_timelock_seconds:
            raise ValueError("min_timelock_seconds cannot exceed max_timelock_seconds.")
        if self.min_basin_seconds > self.max_basin_seconds:
            raise ValueError("min_basin_seconds cannot exceed max_basin_seconds.")
        return self

    @classmethod
    def build(cls, **values: Any) -> "PairParameters":
        """Validates `values`, translating pydantic failures into ParameterOutOfBounds."""
        try:
            return cls.model_validate(values)
        except ValidationError as err:
            raise ParameterOutOfBounds(_describe(err)) from err

    def updated(self, **changes: Any) -> "PairParameters":
        """Returns a validated copy with `changes` applied; the receiver is never modified."""
        values: Dict[str, Any] = self.model_dump()
        values.update(changes)
        return PairParameters.build(**values)


def _describe(err: ValidationError) -> str:
    parts = []
    for item in err.errors():
        location = ".".join(str(loc) for loc in item.get("loc", ())) or "parameters"
        parts.append(f"{location}: {item.get('msg')}")
    return "; ".join(parts)
