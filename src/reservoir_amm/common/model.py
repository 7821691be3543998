from dataclasses import dataclass, field


@dataclass
class PairSnapshot:
    """Pair accounting as of the end of the last swap (or the first mint)."""
    pool0_last: int = 0
    pool1_last: int = 0
    total0_last: int = 0
    total1_last: int = 0
    block_timestamp_last: int = 0
    price0_cumulative_last: int = 0
    price1_cumulative_last: int = 0
    moving_average_price0_last: int = 0

    @property
    def is_initialized(self) -> bool:
        return self.pool0_last > 0 and self.pool1_last > 0


@dataclass
class ThrottleState:
    """Deadlines gating single-sided operations."""
    single_sided_timelock_deadline: int = 0
    swappable_reservoir_limit_reaches_max_deadline: int = 0


@dataclass(frozen=True)
class LiquidityBalances:
    """Split of the raw balances into active, inactive and in-transition parts. Never stored."""
    pool0: int = 0
    pool1: int = 0
    reservoir0: int = 0
    reservoir1: int = 0
    basin0: int = 0
    basin1: int = 0

    @property
    def total0(self) -> int:
        return self.pool0 + self.reservoir0 + self.basin0

    @property
    def total1(self) -> int:
        return self.pool1 + self.reservoir1 + self.basin1

    def pool(self, index: int) -> int:
        return self.pool0 if index == 0 else self.pool1

    def reservoir(self, index: int) -> int:
        return self.reservoir0 if index == 0 else self.reservoir1


@dataclass
class PairState:
    """The single mutable struct a pair owns; mutated only inside settlements and pause transitions."""
    snapshot: PairSnapshot = field(default_factory=PairSnapshot)
    throttle: ThrottleState = field(default_factory=ThrottleState)
    is_paused: bool = False
