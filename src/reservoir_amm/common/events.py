from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from reservoir_amm.common.enums import PairOperation


class PairEvent(BaseModel):
    """Structured record of one state-changing pair operation."""
    model_config = ConfigDict(frozen=True)

    operation: PairOperation = Field(description="Operation that produced the event")
    timestamp: int = Field(description="Clock value at settlement")


class MintEvent(PairEvent):
    sender: str
    to: str
    amount_in0: int = Field(description="Measured token0 received")
    amount_in1: int = Field(description="Measured token1 received")
    liquidity_out: int
    total0_before: int
    total1_before: int
    total_supply_before: int


class MintWithReservoirEvent(PairEvent):
    sender: str
    to: str
    amount_in0: int
    amount_in1: int
    swapped_reservoir_amount0: int = Field(description="Reservoir token0 matched against the deposit")
    swapped_reservoir_amount1: int = Field(description="Reservoir token1 matched against the deposit")
    liquidity_out: int
    moving_average_price0: int
    swappable_reservoir_limit_reaches_max_deadline: int
    total0_before: int
    total1_before: int
    total_supply_before: int
    pool0_before: int
    pool1_before: int
    reservoir0_before: int
    reservoir1_before: int


class BurnEvent(PairEvent):
    sender: str
    to: str
    liquidity_in: int
    amount_out0: int
    amount_out1: int
    total0_before: int
    total1_before: int
    total_supply_before: int


class BurnFromReservoirEvent(PairEvent):
    sender: str
    to: str
    liquidity_in: int
    amount_out0: int
    amount_out1: int
    swapped_reservoir_amount0: int
    swapped_reservoir_amount1: int
    moving_average_price0: int
    swappable_reservoir_limit_reaches_max_deadline: int
    total0_before: int
    total1_before: int
    total_supply_before: int
    pool0_before: int
    pool1_before: int
    reservoir0_before: int
    reservoir1_before: int


class SwapEvent(PairEvent):
    sender: str
    to: str
    amount_in0: int = Field(description="Net token0 input implied by the pool delta")
    amount_in1: int = Field(description="Net token1 input implied by the pool delta")
    amount_out0: int
    amount_out1: int
    pool0_before: int
    pool1_before: int
    pool0_after: int
    pool1_after: int
    reservoir0: int
    reservoir1: int
    basin0: int
    basin1: int
    protocol_fee_liquidity: int
    moving_average_price0: int
    single_sided_timelock_deadline: int


class ParameterUpdatedEvent(PairEvent):
    name: str = Field(description="Parameter name")
    old_value: int
    new_value: int
    single_sided_timelock_deadline: Optional[int] = Field(None, description="Timelock deadline after the update")
    swappable_reservoir_limit_reaches_max_deadline: Optional[int] = Field(
        None, description="Reservoir budget deadline after the update"
    )


class PauseUpdatedEvent(PairEvent):
    is_paused: bool
    single_sided_timelock_deadline: Optional[int] = None
