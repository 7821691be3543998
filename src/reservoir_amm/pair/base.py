import copy
import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Callable, Iterator, List, Optional, Tuple

from reservoir_amm.accounting.liquidity_accountant import LiquidityAccountant
from reservoir_amm.accounting.moving_average import MovingAveragePrice
from reservoir_amm.accounting.reservoir_throttle import ReservoirThrottle
from reservoir_amm.accounting.timelock import VolatilityTimelock
from reservoir_amm.collaborators.assets import Asset
from reservoir_amm.collaborators.registry import PairRegistry
from reservoir_amm.collaborators.shares import LiquidityShares
from reservoir_amm.common.config import PairParameters
from reservoir_amm.common.enums import CurveType, PairOperation
from reservoir_amm.common.errors import Forbidden, InsufficientInput, Locked, ParameterOutOfBounds
from reservoir_amm.common.events import ParameterUpdatedEvent, PauseUpdatedEvent, PairEvent
from reservoir_amm.common.model import LiquidityBalances, PairSnapshot, PairState, ThrottleState
from reservoir_amm.curves.base import CurveModel
from reservoir_amm.curves.factory import curve_for


logger = logging.getLogger(__name__)


def _default_clock() -> int:
    return int(datetime.now().timestamp())


class BasePair:
    """
    State, guards, views and administration shared by every pair. Settlement
    operations live in `Pair`.
    """

    def __init__(
        self,
        registry: PairRegistry,
        token0: Asset,
        token1: Asset,
        parameters: Optional[PairParameters] = None,
        curve: Optional[CurveModel] = None,
        address: str = "pair",
        clock: Optional[Callable[[], int]] = None,
    ):
        """
        :param registry: PairRegistry - administering collaborator, handed over once
        :param token0: Asset
        :param token1: Asset
        :param parameters: PairParameters - defaults if omitted
        :param curve: CurveModel - picked from the price floor if omitted
        :param address: str - identity the pair holds balances under
        :param clock: callable returning the current unix timestamp
        """
        if token0.address == token1.address:
            raise ValueError("A pair needs two distinct assets.")
        self._registry = registry
        self.token0 = token0
        self.token1 = token1
        self._params = parameters or PairParameters()
        self.curve = curve or curve_for(self._params.price_floor_bps)
        if self.curve.curve_type != CurveType.for_price_floor(self._params.price_floor_bps):
            raise ParameterOutOfBounds(
                f"{self.curve.curve_type} curve cannot serve price_floor_bps={self._params.price_floor_bps}."
            )
        self.address = address
        self._clock = clock or _default_clock
        self._state = PairState()
        self._unlocked = True
        self.shares = LiquidityShares(
            lambda: self._registry.liquidity_name(self.token0.symbol, self.token1.symbol),
            lambda: self._registry.liquidity_symbol(self.token0.symbol, self.token1.symbol),
        )
        self.events: List[PairEvent] = []
        self._listeners: List[Callable[[PairEvent], None]] = []

    # ------------------------------------------------------------------
    # Guards
    # ------------------------------------------------------------------

    @contextmanager
    def _lock(self) -> Iterator[None]:
        if not self._unlocked:
            raise Locked("Pair is already executing a call.")
        self._unlocked = False
        try:
            yield
        finally:
            self._unlocked = True

    @contextmanager
    def _atomic(self, operation: PairOperation) -> Iterator[None]:
        """Restores the pair, its share ledger and both assets if the body raises."""
        saved = (
            copy.deepcopy(self._state),
            self.shares.checkpoint(),
            self.token0.checkpoint(),
            self.token1.checkpoint(),
        )
        try:
            yield
        except Exception as err:
            state, shares, balances0, balances1 = saved
            self._state = state
            self.shares.rollback(shares)
            self.token0.rollback(balances0)
            self.token1.rollback(balances1)
            logger.warning("%s rolled back: %s: %s", operation, type(err).__name__, err)
            raise

    @contextmanager
    def _settlement(self, operation: PairOperation) -> Iterator[None]:
        with self._lock():
            with self._atomic(operation):
                self._settle_protocol_fee()
                yield

    def _only_registry(self, caller: str):
        if not self._registry.is_param_setter(caller):
            raise Forbidden(f"{caller} is not allowed to administer this pair.")

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def subscribe(self, listener: Callable[[PairEvent], None]):
        self._listeners.append(listener)

    def _emit(self, event: PairEvent):
        self.events.append(event)
        for listener in self._listeners:
            listener(event)

    # ------------------------------------------------------------------
    # Asset movement
    # ------------------------------------------------------------------

    def _balances(self) -> Tuple[int, int]:
        return self.token0.balance_of(self.address), self.token1.balance_of(self.address)

    def _transfer_in(self, token: Asset, sender: str, amount: int) -> int:
        """Pulls `amount` from sender and returns what actually arrived."""
        if amount == 0:
            return 0
        before = token.balance_of(self.address)
        token.transfer(sender, self.address, amount)
        received = token.balance_of(self.address) - before
        if received < 0:
            raise InsufficientInput(f"{token.symbol} balance decreased on transfer in.")
        return received

    def _transfer_out(self, token: Asset, to: str, amount: int):
        if amount > 0:
            token.transfer(self.address, to, amount)

    def _settle_protocol_fee(self):
        """Moves pair-held protocol fee shares to the fee recipient, or burns them."""
        pending = self.shares.balance_of(self.address)
        if pending == 0:
            return
        fee_to = self._registry.fee_to
        if fee_to:
            self.shares.transfer(self.address, fee_to, pending)
            logger.debug("Protocol fee: %s shares sent to %s", pending, fee_to)
        else:
            self.shares.burn(self.address, pending)
            logger.debug("Protocol fee: %s shares burned", pending)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def params(self) -> PairParameters:
        return self._params

    @property
    def registry(self) -> PairRegistry:
        return self._registry

    @property
    def is_paused(self) -> bool:
        return self._state.is_paused

    @property
    def total_supply(self) -> int:
        return self.shares.total_supply

    def now(self) -> int:
        return self._clock()

    def get_snapshot(self) -> PairSnapshot:
        return copy.copy(self._state.snapshot)

    def get_throttle(self) -> ThrottleState:
        return copy.copy(self._state.throttle)

    def _split(self, total0: int, total1: int, now: int) -> LiquidityBalances:
        return LiquidityAccountant.split(
            total0,
            total1,
            self._state.snapshot,
            self._params.min_basin_seconds,
            self._params.max_basin_seconds,
            now,
        )

    def get_liquidity_balances(self) -> LiquidityBalances:
        total0, total1 = self._balances()
        return self._split(total0, total1, self.now())

    def get_price0(self) -> int:
        """Price of token0 in units of token1, UQ112x112 (0 before initialization)."""
        balances = self.get_liquidity_balances()
        if balances.pool0 == 0:
            return 0
        return self.curve.price(balances.pool1, balances.pool0, self._params.price_floor_bps)

    def get_price1(self) -> int:
        """Price of token1 in units of token0, UQ112x112 (0 before initialization)."""
        balances = self.get_liquidity_balances()
        if balances.pool1 == 0:
            return 0
        return self.curve.price(balances.pool0, balances.pool1, self._params.price_floor_bps)

    def get_invariant(self) -> Tuple[int, int]:
        balances = self.get_liquidity_balances()
        return self.curve.invariant(balances.pool0, balances.pool1, self._params.price_floor_bps)

    def _moving_average_price0(self, balances: LiquidityBalances, now: int) -> int:
        snapshot = self._state.snapshot
        if balances.pool0 == 0:
            return snapshot.moving_average_price0_last
        return MovingAveragePrice.current(
            balances.pool1,
            balances.pool0,
            snapshot.moving_average_price0_last,
            self._params.moving_average_window_seconds,
            now - snapshot.block_timestamp_last,
            self.curve,
            self._params.price_floor_bps,
        )

    def get_moving_average_price0(self) -> int:
        return self._moving_average_price0(self.get_liquidity_balances(), self.now())

    def _swappable_reservoir_limit(self, balances: LiquidityBalances, now: int) -> int:
        index, _ = LiquidityAccountant.reservoir_side(balances)
        pool = balances.pool(index) if index >= 0 else 0
        return ReservoirThrottle.limit(
            pool,
            self._params.max_swappable_reservoir_limit_bps,
            self._params.swappable_reservoir_growth_window_seconds,
            self._state.throttle.swappable_reservoir_limit_reaches_max_deadline,
            now,
        )

    def get_swappable_reservoir_limit(self) -> int:
        return self._swappable_reservoir_limit(self.get_liquidity_balances(), self.now())

    def is_single_sided_timelock_active(self) -> bool:
        return VolatilityTimelock.is_active(self._state.throttle.single_sided_timelock_deadline, self.now())

    # ------------------------------------------------------------------
    # Administration
    # ------------------------------------------------------------------

    def set_is_paused(self, caller: str, is_paused: bool):
        """Pauses or unpauses. Unpausing restarts the single-sided timelock at its maximum."""
        self._only_registry(caller)
        if not self._unlocked:
            raise Locked("Pair is already executing a call.")
        now = self.now()
        deadline = None
        self._state.is_paused = is_paused
        if not is_paused:
            deadline = now + self._params.max_timelock_seconds
            self._state.throttle.single_sided_timelock_deadline = deadline
        logger.info("Pair %s paused=%s", self.address, is_paused)
        self._emit(PauseUpdatedEvent(
            operation=PairOperation.PAUSE_UPDATE,
            timestamp=now,
            is_paused=is_paused,
            single_sided_timelock_deadline=deadline,
        ))

    def set_parameters(self, caller: str, **values: int):
        """
        Validates the combined change before touching the pair, then applies it and
        rescales pending deadlines whose governing duration changed.
        """
        self._only_registry(caller)
        if not self._unlocked:
            raise Locked("Pair is already executing a call.")
        immutable = {"price_floor_bps", "fee_bps"} & set(values)
        if immutable:
            raise ParameterOutOfBounds(f"{sorted(immutable)} cannot change after creation.")

        old_params = self._params
        self._params = old_params.updated(**values)
        now = self.now()

        throttle = self._state.throttle
        # a pending deadline is at most max_timelock_seconds away; min only bounds future swaps
        if "max_timelock_seconds" in values:
            throttle.single_sided_timelock_deadline = VolatilityTimelock.rescale(
                throttle.single_sided_timelock_deadline,
                now,
                old_params.max_timelock_seconds,
                self._params.max_timelock_seconds,
            )
        if "swappable_reservoir_growth_window_seconds" in values:
            throttle.swappable_reservoir_limit_reaches_max_deadline = ReservoirThrottle.rescale(
                throttle.swappable_reservoir_limit_reaches_max_deadline,
                now,
                old_params.swappable_reservoir_growth_window_seconds,
                self._params.swappable_reservoir_growth_window_seconds,
            )

        for name, value in values.items():
            old_value = getattr(old_params, name)
            logger.info("Pair %s %s: %s -> %s", self.address, name, old_value, value)
            self._emit(ParameterUpdatedEvent(
                operation=PairOperation.PARAMETER_UPDATE,
                timestamp=now,
                name=name,
                old_value=old_value,
                new_value=value,
                single_sided_timelock_deadline=throttle.single_sided_timelock_deadline,
                swappable_reservoir_limit_reaches_max_deadline=throttle.swappable_reservoir_limit_reaches_max_deadline,
            ))

    def set_protocol_fee_mbps(self, caller: str, value: int):
        self.set_parameters(caller, protocol_fee_mbps=value)

    def set_moving_average_window(self, caller: str, value: int):
        self.set_parameters(caller, moving_average_window_seconds=value)

    def set_max_volatility_bps(self, caller: str, value: int):
        self.set_parameters(caller, max_volatility_bps=value)

    def set_min_timelock_duration(self, caller: str, value: int):
        self.set_parameters(caller, min_timelock_seconds=value)

    def set_max_timelock_duration(self, caller: str, value: int):
        self.set_parameters(caller, max_timelock_seconds=value)

    def set_max_swappable_reservoir_limit_bps(self, caller: str, value: int):
        self.set_parameters(caller, max_swappable_reservoir_limit_bps=value)

    def set_swappable_reservoir_growth_window(self, caller: str, value: int):
        self.set_parameters(caller, swappable_reservoir_growth_window_seconds=value)

    def set_min_basin_duration(self, caller: str, value: int):
        self.set_parameters(caller, min_basin_seconds=value)

    def set_max_basin_duration(self, caller: str, value: int):
        self.set_parameters(caller, max_basin_seconds=value)
