from typing import Any, Dict, List

from pydantic import ValidationError

from reservoir_amm.common.config import PairParameters
from reservoir_amm.common.math import fits_uint112
from reservoir_amm.pair.base import BasePair


class PairValidator:
    """
    Validator for pairs and their parameters.
      1) Param checks (bounds and cross-field relations, plus configuration smells)
      2) State audit (split invariants of a live pair)

    Each step returns a dict with:
      {
        "errors": [str...],
        "warnings": [str...],
        "info": {...}
      }
    and 'run_all_validations' aggregates them into a single result.
    """

    @staticmethod
    def validate_params(values: Dict[str, Any]) -> Dict[str, Any]:
        """
        Checks a candidate parameter set without raising:
          - every bound and relation PairParameters enforces
          - warnings for legal but degenerate settings
        """
        errors: List[str] = []
        warnings: List[str] = []
        info: Dict[str, Any] = {}

        try:
            params = PairParameters.model_validate(values)
        except ValidationError as err:
            for item in err.errors():
                location = ".".join(str(loc) for loc in item.get("loc", ())) or "parameters"
                errors.append(f"{location}: {item.get('msg')}")
            return {"errors": errors, "warnings": warnings, "info": info}

        if params.min_timelock_seconds == params.max_timelock_seconds:
            warnings.append("Timelock does not scale with volatility (min == max).")
        if params.max_volatility_bps == 0:
            warnings.append("max_volatility_bps is 0; every swap applies the maximum timelock.")
        if params.max_swappable_reservoir_limit_bps == 0:
            warnings.append("Reservoir budget is 0; single-sided operations can never succeed.")
        if params.max_basin_seconds == 0:
            warnings.append("Basin is disabled; rebases are admitted immediately.")
        if params.fee_bps > 0 and params.protocol_fee_mbps == params.fee_bps * 1000:
            warnings.append("Protocol takes the entire trading fee.")

        info["param_summary"] = {name: str(value) for name, value in params.model_dump().items()}
        return {"errors": errors, "warnings": warnings, "info": info}

    @staticmethod
    def audit_state(pair: BasePair) -> Dict[str, Any]:
        """
        Checks the accounting invariants of a live pair:
          - pool + reservoir + basin == raw balance for each asset
          - at most one reservoir is non-zero
          - pools fit in 112 bits
        """
        errors: List[str] = []
        warnings: List[str] = []
        info: Dict[str, Any] = {}

        total0 = pair.token0.balance_of(pair.address)
        total1 = pair.token1.balance_of(pair.address)
        balances = pair.get_liquidity_balances()

        if pair.total_supply > 0:
            if balances.total0 != total0:
                errors.append(f"token0 split {balances.total0} does not add up to balance {total0}.")
            if balances.total1 != total1:
                errors.append(f"token1 split {balances.total1} does not add up to balance {total1}.")
        if balances.reservoir0 > 0 and balances.reservoir1 > 0:
            errors.append("Both reservoirs are non-zero.")
        if not fits_uint112(balances.pool0) or not fits_uint112(balances.pool1):
            errors.append("Pool balance exceeds 112 bits.")
        if pair.is_paused:
            warnings.append("Pair is paused.")
        if balances.basin0 > 0 or balances.basin1 > 0:
            warnings.append("Balance changes are still being admitted from the basin.")

        info["balances"] = {
            "pool0": balances.pool0,
            "pool1": balances.pool1,
            "reservoir0": balances.reservoir0,
            "reservoir1": balances.reservoir1,
            "basin0": balances.basin0,
            "basin1": balances.basin1,
        }
        info["total_supply"] = pair.total_supply
        return {"errors": errors, "warnings": warnings, "info": info}

    @staticmethod
    def run_all_validations(pair: BasePair) -> Dict[str, Any]:
        """
        Aggregates:
          - param check
          - state audit
        Returns a dict with keys: errors, warnings, info
        """
        results = {
            "errors": [],
            "warnings": [],
            "info": {}
        }

        for check in (PairValidator.validate_params(pair.params.model_dump()), PairValidator.audit_state(pair)):
            results["errors"].extend(check["errors"])
            results["warnings"].extend(check["warnings"])
            results["info"].update(check["info"])

        return results
