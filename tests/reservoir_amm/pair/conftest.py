import pytest

from reservoir_amm.collaborators.assets import SimpleToken
from reservoir_amm.collaborators.registry import PairRegistry
from reservoir_amm.common.config import PairParameters
from reservoir_amm.pair.pair import Pair


START = 1_700_000_000


class FakeClock:
    """Settable clock handed to pairs instead of wall time."""

    def __init__(self, now: int = START):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def registry():
    return PairRegistry()


@pytest.fixture
def make_pair(clock, registry):
    """
    Factory for pairs on the shared clock and registry. Keyword arguments other than
    the tokens are PairParameters fields.
    """
    def _make(token0=None, token1=None, **params) -> Pair:
        return Pair(
            registry,
            token0 or SimpleToken("AAA"),
            token1 or SimpleToken("BBB"),
            parameters=PairParameters.build(**params),
            clock=clock,
        )
    return _make


@pytest.fixture
def funded_pair(make_pair):
    """
    Pair seeded with 1M / 1M by alice; alice and bob hold spare balances of both assets.
    """
    pair = make_pair()
    for holder in ("alice", "bob"):
        pair.token0.mint(holder, 10_000_000)
        pair.token1.mint(holder, 10_000_000)
    pair.mint("alice", 1_000_000, 1_000_000, "alice")
    return pair


@pytest.fixture
def reservoir_pair(funded_pair):
    """
    funded_pair plus a direct 1M donation of token1, which becomes reservoir1.
    """
    funded_pair.token1.mint(funded_pair.address, 1_000_000)
    return funded_pair
