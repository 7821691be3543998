from reservoir_amm.common.math import BPS, mul_div, mul_div_up


class ReservoirThrottle:
    """
    Budget for exchanging reservoir liquidity in single-sided operations. The budget
    is a fraction of the active pool on the reservoir's side and regrows linearly
    over the growth window after it is spent.
    """

    @staticmethod
    def max_limit(pool: int, max_swappable_reservoir_limit_bps: int) -> int:
        return pool * max_swappable_reservoir_limit_bps // BPS

    @staticmethod
    def limit(
        pool: int,
        max_swappable_reservoir_limit_bps: int,
        growth_window_seconds: int,
        reaches_max_deadline: int,
        now: int,
    ) -> int:
        """
        Returns the currently available budget:
          - reaches_max_deadline > now => max_limit * (window - (deadline - now)) / window
          - otherwise => max_limit
        """
        maximum = ReservoirThrottle.max_limit(pool, max_swappable_reservoir_limit_bps)
        if reaches_max_deadline > now:
            remaining = reaches_max_deadline - now
            if remaining >= growth_window_seconds:
                return 0
            return mul_div(maximum, growth_window_seconds - remaining, growth_window_seconds)
        return maximum

    @staticmethod
    def consume(
        amount: int,
        pool: int,
        max_swappable_reservoir_limit_bps: int,
        growth_window_seconds: int,
        reaches_max_deadline: int,
        now: int,
    ) -> int:
        """
        Returns the new reaches-max deadline after spending `amount` of the budget.
        Spending costs ceil(window * amount / max_limit) seconds of regrowth, or the
        full window when max_limit is zero.
        """
        maximum = ReservoirThrottle.max_limit(pool, max_swappable_reservoir_limit_bps)
        if maximum == 0:
            progress = growth_window_seconds
        else:
            progress = mul_div_up(growth_window_seconds, amount, maximum)
        if reaches_max_deadline > now:
            return reaches_max_deadline + progress
        return now + progress

    @staticmethod
    def rescale(reaches_max_deadline: int, now: int, old_window: int, new_window: int) -> int:
        """Keeps in-flight regrowth proportional when the growth window changes."""
        if reaches_max_deadline <= now or old_window == 0:
            return reaches_max_deadline
        return now + mul_div(reaches_max_deadline - now, new_window, old_window)
