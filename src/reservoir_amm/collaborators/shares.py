from typing import Any, Callable, Dict

from reservoir_amm.common.errors import InsufficientLiquidity


class LiquidityShares:
    """
    Fungible claim ledger for one pair: balances, total supply, mint, burn and transfer.
    Display metadata is resolved through the supplied callables on every access.
    """

    def __init__(self, name_source: Callable[[], str], symbol_source: Callable[[], str]):
        self._name_source = name_source
        self._symbol_source = symbol_source
        self._balances: Dict[str, int] = {}
        self._total_supply = 0

    @property
    def name(self) -> str:
        return self._name_source()

    @property
    def symbol(self) -> str:
        return self._symbol_source()

    @property
    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, holder: str) -> int:
        return self._balances.get(holder, 0)

    def mint(self, to: str, amount: int):
        self._balances[to] = self.balance_of(to) + amount
        self._total_supply += amount

    def burn(self, holder: str, amount: int):
        balance = self.balance_of(holder)
        if amount > balance:
            raise InsufficientLiquidity(f"Burn amount {amount} exceeds share balance {balance} of {holder}.")
        self._balances[holder] = balance - amount
        self._total_supply -= amount

    def transfer(self, sender: str, recipient: str, amount: int):
        balance = self.balance_of(sender)
        if amount > balance:
            raise InsufficientLiquidity(f"Transfer amount {amount} exceeds share balance {balance} of {sender}.")
        self._balances[sender] = balance - amount
        self._balances[recipient] = self.balance_of(recipient) + amount

    def checkpoint(self) -> Any:
        return dict(self._balances), self._total_supply

    def rollback(self, state: Any):
        balances, self._total_supply = state
        self._balances = dict(balances)
