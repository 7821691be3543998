from dataclasses import dataclass
from typing import Optional


@dataclass
class PairRegistry:
    """
    The registry side of a pair: the only caller allowed to change parameters or pause,
    the source of the protocol fee recipient, and the source of share display metadata.
    Pairs query it on demand and never cache what it returns.
    """
    address: str = "registry"
    fee_to: Optional[str] = None
    param_setter: Optional[str] = None
    name_prefix: str = "Reservoir LP"
    symbol_prefix: str = "RLP"

    def is_param_setter(self, caller: str) -> bool:
        return caller == self.address or (self.param_setter is not None and caller == self.param_setter)

    def liquidity_name(self, symbol0: str, symbol1: str) -> str:
        return f"{self.name_prefix} {symbol0}/{symbol1}"

    def liquidity_symbol(self, symbol0: str, symbol1: str) -> str:
        return f"{self.symbol_prefix}-{symbol0}-{symbol1}"
