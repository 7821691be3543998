import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

from reservoir_amm.common.math import BPS, mul_div


logger = logging.getLogger(__name__)


class Asset(ABC):
    """
    Interface a pair consumes from an asset. `transfer` is best effort: a pair never
    trusts the requested amount and always re-measures balances instead.
    """

    def __init__(self, symbol: str, address: Optional[str] = None, decimals: int = 18):
        self.symbol = symbol
        self.address = address or f"asset:{symbol}"
        self.decimals = decimals

    @abstractmethod
    def balance_of(self, holder: str) -> int:
        pass

    @abstractmethod
    def transfer(self, sender: str, recipient: str, amount: int):
        pass

    @abstractmethod
    def checkpoint(self) -> Any:
        """Returns an opaque copy of the ledger for `rollback`."""
        pass

    @abstractmethod
    def rollback(self, state: Any):
        pass

    def __repr__(self):
        return f"{type(self).__name__}({self.symbol})"


class SimpleToken(Asset):
    """Plain in-memory ledger; transfers move exactly the requested amount."""

    def __init__(self, symbol: str, address: Optional[str] = None, decimals: int = 18):
        super().__init__(symbol, address, decimals)
        self._balances: Dict[str, int] = {}

    def balance_of(self, holder: str) -> int:
        return self._balances.get(holder, 0)

    def mint(self, holder: str, amount: int):
        if amount < 0:
            raise ValueError("Cannot mint a negative amount.")
        self._balances[holder] = self.balance_of(holder) + amount

    def transfer(self, sender: str, recipient: str, amount: int):
        if amount < 0:
            raise ValueError("Cannot transfer a negative amount.")
        balance = self.balance_of(sender)
        if amount > balance:
            raise ValueError(f"{self.symbol}: transfer amount exceeds balance of {sender}.")
        self._move(sender, recipient, amount, amount)

    def _move(self, sender: str, recipient: str, debit: int, credit: int):
        self._balances[sender] = self.balance_of(sender) - debit
        self._balances[recipient] = self.balance_of(recipient) + credit

    def checkpoint(self) -> Any:
        return dict(self._balances)

    def rollback(self, state: Any):
        self._balances = dict(state)


class FeeOnTransferToken(SimpleToken):
    """Burns `fee_bps` of every transfer, so the recipient receives less than was sent."""

    def __init__(self, symbol: str, fee_bps: int, address: Optional[str] = None, decimals: int = 18):
        super().__init__(symbol, address, decimals)
        if not 0 <= fee_bps <= BPS:
            raise ValueError("fee_bps must be in [0, 10000].")
        self.fee_bps = fee_bps

    def transfer(self, sender: str, recipient: str, amount: int):
        if amount < 0:
            raise ValueError("Cannot transfer a negative amount.")
        if amount > self.balance_of(sender):
            raise ValueError(f"{self.symbol}: transfer amount exceeds balance of {sender}.")
        fee = mul_div(amount, self.fee_bps, BPS)
        self._move(sender, recipient, amount, amount - fee)


class RebasingToken(Asset):
    """
    Elastic-supply ledger. Holders own fixed shares and balances are shares scaled by
    a global multiplier, so a rebase changes every balance without a transfer.
    """

    SHARES_PER_UNIT = 10 ** 6

    def __init__(self, symbol: str, address: Optional[str] = None, decimals: int = 18):
        super().__init__(symbol, address, decimals)
        self._shares: Dict[str, int] = {}
        self._total_shares = 0
        self._total_supply = 0

    def balance_of(self, holder: str) -> int:
        if self._total_shares == 0:
            return 0
        return self._shares.get(holder, 0) * self._total_supply // self._total_shares

    def _to_shares(self, amount: int) -> int:
        if self._total_shares == 0:
            return amount * self.SHARES_PER_UNIT
        return amount * self._total_shares // self._total_supply

    def mint(self, holder: str, amount: int):
        shares = self._to_shares(amount)
        self._shares[holder] = self._shares.get(holder, 0) + shares
        self._total_shares += shares
        self._total_supply += amount

    def rebase(self, new_total_supply: int):
        """Rescales every balance by new_total_supply / total_supply."""
        if new_total_supply <= 0:
            raise ValueError("Total supply must stay positive.")
        logger.debug("%s rebase %s -> %s", self.symbol, self._total_supply, new_total_supply)
        self._total_supply = new_total_supply

    def transfer(self, sender: str, recipient: str, amount: int):
        if amount < 0:
            raise ValueError("Cannot transfer a negative amount.")
        if amount > self.balance_of(sender):
            raise ValueError(f"{self.symbol}: transfer amount exceeds balance of {sender}.")
        shares = min(self._to_shares(amount), self._shares.get(sender, 0))
        self._shares[sender] = self._shares.get(sender, 0) - shares
        self._shares[recipient] = self._shares.get(recipient, 0) + shares

    def checkpoint(self) -> Any:
        return dict(self._shares), self._total_shares, self._total_supply

    def rollback(self, state: Any):
        shares, self._total_shares, self._total_supply = state
        self._shares = dict(shares)


class HookedToken(SimpleToken):
    """
    Calls `hook(sender, recipient, amount)` after every transfer, handing control to
    outside code mid-operation the way a token with receive callbacks does.
    """

    def __init__(
        self,
        symbol: str,
        hook: Optional[Callable[[str, str, int], None]] = None,
        address: Optional[str] = None,
        decimals: int = 18,
    ):
        super().__init__(symbol, address, decimals)
        self.hook = hook

    def transfer(self, sender: str, recipient: str, amount: int):
        super().transfer(sender, recipient, amount)
        if self.hook is not None:
            self.hook(sender, recipient, amount)
