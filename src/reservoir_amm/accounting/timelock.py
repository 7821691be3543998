from reservoir_amm.common.math import BPS, abs_diff, min_int, max_int, mul_div


class VolatilityTimelock:
    """
    Cool-down before single-sided operations, scaled to how far a swap moved the
    price away from its moving average. The deadline only moves forward.
    """

    @staticmethod
    def duration(
        new_price0: int,
        moving_average_price0: int,
        min_timelock_seconds: int,
        max_timelock_seconds: int,
        max_volatility_bps: int,
    ) -> int:
        """
        min(min_t + deviation * BPS * (max_t - min_t) / (moving_average * max_volatility_bps), max_t)
        """
        if moving_average_price0 == 0 or max_volatility_bps == 0:
            return max_timelock_seconds
        deviation = abs_diff(new_price0, moving_average_price0)
        scaled = mul_div(
            deviation * BPS,
            max_timelock_seconds - min_timelock_seconds,
            moving_average_price0 * max_volatility_bps,
        )
        return min_int(min_timelock_seconds + scaled, max_timelock_seconds)

    @staticmethod
    def extend(deadline: int, now: int, duration: int) -> int:
        return max_int(deadline, now + duration)

    @staticmethod
    def is_active(deadline: int, now: int) -> bool:
        return now < deadline

    @staticmethod
    def rescale(deadline: int, now: int, old_duration: int, new_duration: int) -> int:
        """Stretches the time remaining on a pending deadline by new_duration / old_duration."""
        if deadline <= now or old_duration == 0:
            return deadline
        return now + mul_div(deadline - now, new_duration, old_duration)
