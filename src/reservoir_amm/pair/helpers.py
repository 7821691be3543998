from typing import Tuple

from reservoir_amm.common.math import Q112, min_int, mul_div


class PairMathHelper:
    """Issuance and redemption arithmetic used by the pair settlements. Every division floors."""

    @staticmethod
    def dual_sided_mint_liquidity(
        total_supply: int, amount_in0: int, amount_in1: int, total0: int, total1: int
    ) -> int:
        """
        The less generous of the two ratios; any excess of the other asset is donated.
        """
        return min_int(
            mul_div(total_supply, amount_in0, total0),
            mul_div(total_supply, amount_in1, total1),
        )

    @staticmethod
    def single_sided_mint_liquidity(
        total_supply: int,
        amount_in: int,
        total_in: int,
        total_reservoir: int,
        moving_average_price_in: int,
    ) -> Tuple[int, int]:
        """
        Prices a deposit of one asset as if part of it were swapped into the reservoir
        asset at the moving average price, leaving a deposit in the pair's ratio.

        With a = amount_in, p = moving average price of the deposited asset in units of
        the reservoir asset, T_a / T_b the totals before the deposit:
          swapped = a * p * T_b / (p * (T_a + a) + 2^112 * T_b)
          liquidity = total_supply * swapped / (T_b - swapped)

        :return: (liquidity_out, swapped_reservoir_amount)
        """
        numerator = amount_in * moving_average_price_in * total_reservoir
        denominator = moving_average_price_in * (total_in + amount_in) + Q112 * total_reservoir
        swapped = numerator // denominator
        if swapped >= total_reservoir:
            return 0, swapped
        liquidity_out = mul_div(total_supply, swapped, total_reservoir - swapped)
        return liquidity_out, swapped

    @staticmethod
    def burn_amounts(total_supply: int, liquidity_in: int, total0: int, total1: int) -> Tuple[int, int]:
        return mul_div(total0, liquidity_in, total_supply), mul_div(total1, liquidity_in, total_supply)

    @staticmethod
    def single_sided_burn_amount(
        total_supply: int,
        liquidity_in: int,
        total_reservoir: int,
        total_other: int,
        moving_average_price_other: int,
    ) -> Tuple[int, int]:
        """
        Redeems pro rata, then converts the non-reservoir share into the reservoir asset
        at the moving average price of the non-reservoir asset.

        :return: (amount_out, swapped_reservoir_amount)
        """
        redeemed = mul_div(total_reservoir, liquidity_in, total_supply)
        other_share = mul_div(total_other, liquidity_in, total_supply)
        swapped = mul_div(other_share, moving_average_price_other, Q112)
        return redeemed + swapped, swapped

    @staticmethod
    def protocol_fee_liquidity(
        total_supply: int,
        invariant_before: int,
        invariant_after: int,
        protocol_fee_mbps: int,
        fee_bps: int,
    ) -> int:
        """
        Shares that dilute holders by the protocol's fraction of the invariant growth.
        The protocol's fraction of the fee is phi = protocol_fee_mbps / (fee_bps * 1000):
          total_supply * (K1 - K0) * phi / ((1 - phi) * K1 + phi * K0)
        Both invariants must share a denominator.
        """
        if protocol_fee_mbps == 0 or fee_bps == 0 or invariant_after <= invariant_before:
            return 0
        fee_mbps = fee_bps * 1000
        numerator = total_supply * (invariant_after - invariant_before) * protocol_fee_mbps
        denominator = (fee_mbps - protocol_fee_mbps) * invariant_after + protocol_fee_mbps * invariant_before
        if denominator == 0:
            return 0
        return numerator // denominator
