import logging
from typing import Tuple

from reservoir_amm.accounting.liquidity_accountant import LiquidityAccountant
from reservoir_amm.accounting.moving_average import MovingAveragePrice
from reservoir_amm.accounting.reservoir_throttle import ReservoirThrottle
from reservoir_amm.accounting.timelock import VolatilityTimelock
from reservoir_amm.collaborators.assets import Asset
from reservoir_amm.common.config import MINIMUM_LIQUIDITY, ZERO_ADDRESS
from reservoir_amm.common.enums import PairOperation
from reservoir_amm.common.errors import (
    InsufficientInput,
    InsufficientLiquidity,
    InsufficientLiquidityBurned,
    InsufficientLiquidityMinted,
    InsufficientOutput,
    InsufficientReservoir,
    InvalidRecipient,
    InvariantViolation,
    Overflow,
    Paused,
    ReservoirBudgetExceeded,
    TimelockActive,
    Uninitialized,
)
from reservoir_amm.common.events import (
    BurnEvent,
    BurnFromReservoirEvent,
    MintEvent,
    MintWithReservoirEvent,
    SwapEvent,
)
from reservoir_amm.common.math import BPS, fits_uint112, mul_div
from reservoir_amm.common.model import LiquidityBalances, PairSnapshot
from reservoir_amm.pair.base import BasePair
from reservoir_amm.pair.helpers import PairMathHelper as helper


logger = logging.getLogger(__name__)


class Pair(BasePair):
    """
    Two-asset pool with reservoir-aware settlements:
      - mint / burn: dual-sided issuance and pro-rata redemption
      - mint_with_reservoir / burn_from_reservoir: single-sided operations that trade
        against the reservoir at the moving average price, gated by the volatility
        timelock and the swappable reservoir budget
      - swap: optimistic transfer out, re-measured balances, fee-adjusted invariant check

    Every operation runs under the reentrancy guard and rolls back completely on failure.
    """

    def _token(self, index: int) -> Asset:
        return self.token0 if index == 0 else self.token1

    def _check_not_paused(self):
        if self._state.is_paused:
            raise Paused("Pair is paused.")

    @staticmethod
    def _check_amounts(*amounts: int):
        if any(amount < 0 for amount in amounts):
            raise InsufficientInput("Amounts must be non-negative integers.")

    def _check_timelock(self, now: int):
        deadline = self._state.throttle.single_sided_timelock_deadline
        if VolatilityTimelock.is_active(deadline, now):
            raise TimelockActive(f"Single-sided operations are locked until {deadline}.")

    def _initialize(self, total0: int, total1: int, now: int):
        if not fits_uint112(total0) or not fits_uint112(total1):
            raise Overflow("Initial balances exceed 112 bits.")
        self._state.snapshot = PairSnapshot(
            pool0_last=total0,
            pool1_last=total1,
            total0_last=total0,
            total1_last=total1,
            block_timestamp_last=now,
            moving_average_price0_last=self.curve.price(total1, total0, self._params.price_floor_bps),
        )

    def _moving_average_price(self, index: int, balances: LiquidityBalances, now: int) -> Tuple[int, int]:
        """Returns (moving average price0, moving average price of token `index` in the other token)."""
        price0 = self._moving_average_price0(balances, now)
        if index == 0:
            return price0, price0
        return price0, MovingAveragePrice.inverse(price0)

    def _consume_reservoir_budget(self, amount: int, balances: LiquidityBalances, reservoir_index: int, now: int):
        throttle = self._state.throttle
        throttle.swappable_reservoir_limit_reaches_max_deadline = ReservoirThrottle.consume(
            amount,
            balances.pool(reservoir_index),
            self._params.max_swappable_reservoir_limit_bps,
            self._params.swappable_reservoir_growth_window_seconds,
            throttle.swappable_reservoir_limit_reaches_max_deadline,
            now,
        )

    # ------------------------------------------------------------------
    # Dual-sided
    # ------------------------------------------------------------------

    def mint(self, sender: str, amount_in0: int, amount_in1: int, to: str) -> int:
        """
        Deposits both assets and issues shares. The first mint issues
        invariant - MINIMUM_LIQUIDITY and locks MINIMUM_LIQUIDITY to the zero address.

        :return: liquidity issued to `to`
        """
        with self._settlement(PairOperation.MINT):
            self._check_not_paused()
            self._check_amounts(amount_in0, amount_in1)
            now = self.now()
            total0, total1 = self._balances()
            total_supply = self.shares.total_supply

            received0 = self._transfer_in(self.token0, sender, amount_in0)
            received1 = self._transfer_in(self.token1, sender, amount_in1)
            if received0 == 0 or received1 == 0:
                raise InsufficientInput("Dual-sided mint needs a positive amount of both assets.")

            if total_supply == 0:
                liquidity_out = self.curve.liquidity(received0, received1, self._params.price_floor_bps)
                if liquidity_out <= MINIMUM_LIQUIDITY:
                    raise InsufficientLiquidityMinted("Initial deposit does not exceed MINIMUM_LIQUIDITY.")
                liquidity_out -= MINIMUM_LIQUIDITY
                self.shares.mint(ZERO_ADDRESS, MINIMUM_LIQUIDITY)
                balance0, balance1 = self._balances()
                self._initialize(balance0, balance1, now)
            else:
                if total0 == 0 or total1 == 0:
                    raise InsufficientLiquidity("Pair holds no balance of one asset.")
                liquidity_out = helper.dual_sided_mint_liquidity(
                    total_supply, received0, received1, total0, total1
                )
                if liquidity_out == 0:
                    raise InsufficientLiquidityMinted("Deposit too small to issue shares.")

            self.shares.mint(to, liquidity_out)
            logger.debug("mint %s: in=(%s, %s) liquidity=%s", to, received0, received1, liquidity_out)
            event = MintEvent(
                operation=PairOperation.MINT,
                timestamp=now,
                sender=sender,
                to=to,
                amount_in0=received0,
                amount_in1=received1,
                liquidity_out=liquidity_out,
                total0_before=total0,
                total1_before=total1,
                total_supply_before=total_supply,
            )
        self._emit(event)
        return liquidity_out

    def burn(self, sender: str, liquidity_in: int, to: str) -> Tuple[int, int]:
        """
        Redeems shares pro rata against the raw balances. Allowed while paused.

        :return: (amount_out0, amount_out1)
        """
        with self._settlement(PairOperation.BURN):
            if liquidity_in <= 0:
                raise InsufficientLiquidityBurned("Nothing to burn.")
            now = self.now()
            total0, total1 = self._balances()
            total_supply = self.shares.total_supply
            if total_supply == 0:
                raise Uninitialized("Pair has no liquidity.")

            amount_out0, amount_out1 = helper.burn_amounts(total_supply, liquidity_in, total0, total1)
            if amount_out0 == 0 or amount_out1 == 0:
                raise InsufficientLiquidityBurned("Burn too small to redeem both assets.")

            self.shares.burn(sender, liquidity_in)
            self._transfer_out(self.token0, to, amount_out0)
            self._transfer_out(self.token1, to, amount_out1)
            logger.debug("burn %s: liquidity=%s out=(%s, %s)", sender, liquidity_in, amount_out0, amount_out1)
            event = BurnEvent(
                operation=PairOperation.BURN,
                timestamp=now,
                sender=sender,
                to=to,
                liquidity_in=liquidity_in,
                amount_out0=amount_out0,
                amount_out1=amount_out1,
                total0_before=total0,
                total1_before=total1,
                total_supply_before=total_supply,
            )
        self._emit(event)
        return amount_out0, amount_out1

    # ------------------------------------------------------------------
    # Single-sided
    # ------------------------------------------------------------------

    def mint_with_reservoir(self, sender: str, amount_in0: int, amount_in1: int, to: str) -> int:
        """
        Deposits a single asset and matches it against the opposite reservoir at the
        moving average price. Exactly one of amount_in0 / amount_in1 must be positive.

        :return: liquidity issued to `to`
        """
        with self._settlement(PairOperation.MINT_WITH_RESERVOIR):
            self._check_not_paused()
            total_supply = self.shares.total_supply
            if total_supply == 0:
                raise Uninitialized("Single-sided mint needs existing liquidity.")
            self._check_amounts(amount_in0, amount_in1)
            if (amount_in0 > 0) == (amount_in1 > 0):
                raise InsufficientInput("Single-sided mint takes exactly one asset.")

            now = self.now()
            totals = self._balances()
            balances = self._split(totals[0], totals[1], now)
            if balances.pool0 == 0 or balances.pool1 == 0:
                raise InsufficientLiquidity("Pool is empty on one side.")
            self._check_timelock(now)

            index_in = 0 if amount_in0 > 0 else 1
            index_reservoir = 1 - index_in
            reservoir = balances.reservoir(index_reservoir)
            if reservoir == 0:
                raise InsufficientReservoir("No reservoir to match this deposit against.")
            moving_average_price0, price_in = self._moving_average_price(index_in, balances, now)
            limit = self._swappable_reservoir_limit(balances, now)

            requested = amount_in0 if index_in == 0 else amount_in1
            amount_in = self._transfer_in(self._token(index_in), sender, requested)
            if amount_in == 0:
                raise InsufficientInput("Nothing arrived.")

            # the deposit must not push the pool past its reservoir
            if mul_div(amount_in, balances.pool(index_reservoir), balances.pool(index_in)) > reservoir:
                raise InsufficientReservoir("Deposit exceeds the reservoir it is matched against.")
            liquidity_out, swapped = helper.single_sided_mint_liquidity(
                total_supply, amount_in, totals[index_in], totals[index_reservoir], price_in
            )
            if swapped > reservoir:
                raise InsufficientReservoir(f"Swapped amount {swapped} exceeds reservoir {reservoir}.")
            if swapped > limit:
                raise ReservoirBudgetExceeded(f"Swapped amount {swapped} exceeds swappable limit {limit}.")
            if liquidity_out == 0:
                raise InsufficientLiquidityMinted("Deposit too small to issue shares.")

            self._consume_reservoir_budget(swapped, balances, index_reservoir, now)
            self.shares.mint(to, liquidity_out)
            logger.debug(
                "mint_with_reservoir %s: token%s in=%s swapped=%s liquidity=%s",
                to, index_in, amount_in, swapped, liquidity_out,
            )
            event = MintWithReservoirEvent(
                operation=PairOperation.MINT_WITH_RESERVOIR,
                timestamp=now,
                sender=sender,
                to=to,
                amount_in0=amount_in if index_in == 0 else 0,
                amount_in1=amount_in if index_in == 1 else 0,
                swapped_reservoir_amount0=swapped if index_reservoir == 0 else 0,
                swapped_reservoir_amount1=swapped if index_reservoir == 1 else 0,
                liquidity_out=liquidity_out,
                moving_average_price0=moving_average_price0,
                swappable_reservoir_limit_reaches_max_deadline=(
                    self._state.throttle.swappable_reservoir_limit_reaches_max_deadline
                ),
                total0_before=totals[0],
                total1_before=totals[1],
                total_supply_before=total_supply,
                pool0_before=balances.pool0,
                pool1_before=balances.pool1,
                reservoir0_before=balances.reservoir0,
                reservoir1_before=balances.reservoir1,
            )
        self._emit(event)
        return liquidity_out

    def burn_from_reservoir(self, sender: str, liquidity_in: int, to: str) -> Tuple[int, int]:
        """
        Redeems shares entirely in the reservoir asset: the pro-rata share of the other
        asset is converted at the moving average price. Allowed while paused, but
        subject to the single-sided timelock.

        :return: (amount_out0, amount_out1), one of which is zero
        """
        with self._settlement(PairOperation.BURN_FROM_RESERVOIR):
            total_supply = self.shares.total_supply
            if total_supply == 0:
                raise Uninitialized("Pair has no liquidity.")
            if liquidity_in <= 0:
                raise InsufficientLiquidityBurned("Nothing to burn.")

            now = self.now()
            totals = self._balances()
            balances = self._split(totals[0], totals[1], now)
            if balances.pool0 == 0 or balances.pool1 == 0:
                raise InsufficientLiquidity("Pool is empty on one side.")
            self._check_timelock(now)

            index_reservoir, reservoir = LiquidityAccountant.reservoir_side(balances)
            if index_reservoir < 0:
                raise InsufficientReservoir("Pair has no reservoir to redeem from.")
            index_other = 1 - index_reservoir
            moving_average_price0, price_other = self._moving_average_price(index_other, balances, now)

            amount_out, swapped = helper.single_sided_burn_amount(
                total_supply, liquidity_in, totals[index_reservoir], totals[index_other], price_other
            )
            if swapped > reservoir or amount_out > reservoir:
                raise InsufficientReservoir(f"Redemption of {amount_out} exceeds reservoir {reservoir}.")
            limit = self._swappable_reservoir_limit(balances, now)
            if swapped > limit:
                raise ReservoirBudgetExceeded(f"Swapped amount {swapped} exceeds swappable limit {limit}.")
            if amount_out == 0:
                raise InsufficientLiquidityBurned("Burn too small to redeem anything.")

            self._consume_reservoir_budget(swapped, balances, index_reservoir, now)
            self.shares.burn(sender, liquidity_in)
            self._transfer_out(self._token(index_reservoir), to, amount_out)
            amount_out0 = amount_out if index_reservoir == 0 else 0
            amount_out1 = amount_out if index_reservoir == 1 else 0
            logger.debug(
                "burn_from_reservoir %s: liquidity=%s token%s out=%s swapped=%s",
                sender, liquidity_in, index_reservoir, amount_out, swapped,
            )
            event = BurnFromReservoirEvent(
                operation=PairOperation.BURN_FROM_RESERVOIR,
                timestamp=now,
                sender=sender,
                to=to,
                liquidity_in=liquidity_in,
                amount_out0=amount_out0,
                amount_out1=amount_out1,
                swapped_reservoir_amount0=swapped if index_reservoir == 0 else 0,
                swapped_reservoir_amount1=swapped if index_reservoir == 1 else 0,
                moving_average_price0=moving_average_price0,
                swappable_reservoir_limit_reaches_max_deadline=(
                    self._state.throttle.swappable_reservoir_limit_reaches_max_deadline
                ),
                total0_before=totals[0],
                total1_before=totals[1],
                total_supply_before=total_supply,
                pool0_before=balances.pool0,
                pool1_before=balances.pool1,
                reservoir0_before=balances.reservoir0,
                reservoir1_before=balances.reservoir1,
            )
        self._emit(event)
        return amount_out0, amount_out1

    # ------------------------------------------------------------------
    # Swap
    # ------------------------------------------------------------------

    def swap(
        self,
        sender: str,
        amount_in0: int,
        amount_in1: int,
        amount_out0: int,
        amount_out1: int,
        to: str,
    ) -> Tuple[int, int]:
        """
        Pulls the declared inputs, sends the requested outputs before any check, then
        settles on the re-measured balances. The whole balance change of each asset is
        attributed to its pool; reservoir and basin never move in a swap.

        :return: (amount_in0, amount_in1) actually received by the pool
        """
        with self._settlement(PairOperation.SWAP):
            self._check_not_paused()
            self._check_amounts(amount_in0, amount_in1, amount_out0, amount_out1)
            if amount_out0 == 0 and amount_out1 == 0:
                raise InsufficientOutput("Swap requests no output.")
            if to == self.token0.address or to == self.token1.address:
                raise InvalidRecipient("Recipient cannot be one of the pair's assets.")

            now = self.now()
            total0, total1 = self._balances()
            balances = self._split(total0, total1, now)
            if amount_out0 > balances.pool0 - 1 or amount_out1 > balances.pool1 - 1:
                raise InsufficientLiquidity("Requested output would drain the pool.")

            self._transfer_in(self.token0, sender, amount_in0)
            self._transfer_in(self.token1, sender, amount_in1)
            self._transfer_out(self.token0, to, amount_out0)
            self._transfer_out(self.token1, to, amount_out1)

            new_total0, new_total1 = self._balances()
            pool0_new = balances.pool0 + new_total0 - total0
            pool1_new = balances.pool1 + new_total1 - total1
            if pool0_new < 1 or pool1_new < 1:
                raise InsufficientLiquidity("Measured balances would leave an empty pool.")
            if not fits_uint112(pool0_new) or not fits_uint112(pool1_new):
                raise Overflow("Pool balance exceeds 112 bits.")

            actual_in0 = max(pool0_new - balances.pool0, 0)
            actual_in1 = max(pool1_new - balances.pool1, 0)
            actual_out0 = max(balances.pool0 - pool0_new, 0)
            actual_out1 = max(balances.pool1 - pool1_new, 0)
            if actual_in0 == 0 and actual_in1 == 0:
                raise InsufficientInput("Swap received no input.")

            floor = self._params.price_floor_bps
            fee_bps = self._params.fee_bps
            adjusted0 = pool0_new * BPS - actual_in0 * fee_bps
            adjusted1 = pool1_new * BPS - actual_in1 * fee_bps
            before_num, before_den = self.curve.invariant(balances.pool0 * BPS, balances.pool1 * BPS, floor)
            after_num, after_den = self.curve.invariant(adjusted0, adjusted1, floor)
            if after_num * before_den < before_num * after_den:
                raise InvariantViolation("Fee-adjusted invariant decreased.")

            snapshot = self._state.snapshot
            throttle = self._state.throttle
            elapsed = now - snapshot.block_timestamp_last
            moving_average_price0 = self._moving_average_price0(balances, now)

            protocol_fee_liquidity = 0
            if self._params.protocol_fee_mbps > 0:
                protocol_fee_liquidity = helper.protocol_fee_liquidity(
                    self.shares.total_supply,
                    self.curve.invariant(balances.pool0, balances.pool1, floor)[0],
                    self.curve.invariant(pool0_new, pool1_new, floor)[0],
                    self._params.protocol_fee_mbps,
                    fee_bps,
                )
                if protocol_fee_liquidity > 0:
                    self.shares.mint(self.address, protocol_fee_liquidity)

            if elapsed > 0:
                snapshot.price0_cumulative_last += self.curve.price(balances.pool1, balances.pool0, floor) * elapsed
                snapshot.price1_cumulative_last += self.curve.price(balances.pool0, balances.pool1, floor) * elapsed

            new_price0 = self.curve.price(pool1_new, pool0_new, floor)
            duration = VolatilityTimelock.duration(
                new_price0,
                moving_average_price0,
                self._params.min_timelock_seconds,
                self._params.max_timelock_seconds,
                self._params.max_volatility_bps,
            )
            throttle.single_sided_timelock_deadline = VolatilityTimelock.extend(
                throttle.single_sided_timelock_deadline, now, duration
            )

            snapshot.pool0_last = pool0_new
            snapshot.pool1_last = pool1_new
            snapshot.total0_last = new_total0
            snapshot.total1_last = new_total1
            snapshot.block_timestamp_last = now
            snapshot.moving_average_price0_last = moving_average_price0

            logger.debug(
                "swap %s: in=(%s, %s) out=(%s, %s) pools (%s, %s) -> (%s, %s)",
                to, actual_in0, actual_in1, actual_out0, actual_out1,
                balances.pool0, balances.pool1, pool0_new, pool1_new,
            )
            event = SwapEvent(
                operation=PairOperation.SWAP,
                timestamp=now,
                sender=sender,
                to=to,
                amount_in0=actual_in0,
                amount_in1=actual_in1,
                amount_out0=actual_out0,
                amount_out1=actual_out1,
                pool0_before=balances.pool0,
                pool1_before=balances.pool1,
                pool0_after=pool0_new,
                pool1_after=pool1_new,
                reservoir0=balances.reservoir0,
                reservoir1=balances.reservoir1,
                basin0=balances.basin0,
                basin1=balances.basin1,
                protocol_fee_liquidity=protocol_fee_liquidity,
                moving_average_price0=moving_average_price0,
                single_sided_timelock_deadline=throttle.single_sided_timelock_deadline,
            )
        self._emit(event)
        return actual_in0, actual_in1
