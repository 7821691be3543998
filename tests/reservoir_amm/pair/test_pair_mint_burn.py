import pytest

from reservoir_amm.collaborators.assets import RebasingToken, SimpleToken
from reservoir_amm.common.config import MINIMUM_LIQUIDITY, ZERO_ADDRESS
from reservoir_amm.common.errors import (
    InsufficientInput,
    InsufficientLiquidity,
    InsufficientLiquidityBurned,
    InsufficientLiquidityMinted,
    Paused,
    Uninitialized,
)
from reservoir_amm.common.events import BurnEvent, MintEvent
from reservoir_amm.common.math import Q112, isqrt
from reservoir_amm.common.model import LiquidityBalances


def test_first_mint_locks_minimum_liquidity(funded_pair, clock):
    pair = funded_pair
    assert pair.total_supply == 1_000_000
    assert pair.shares.balance_of("alice") == 1_000_000 - MINIMUM_LIQUIDITY
    assert pair.shares.balance_of(ZERO_ADDRESS) == MINIMUM_LIQUIDITY

    snapshot = pair.get_snapshot()
    assert (snapshot.pool0_last, snapshot.pool1_last) == (1_000_000, 1_000_000)
    assert snapshot.block_timestamp_last == clock.now
    assert snapshot.moving_average_price0_last == Q112
    assert pair.get_price0() == Q112
    assert pair.get_price1() == Q112
    assert pair.get_moving_average_price0() == Q112
    assert pair.get_liquidity_balances() == LiquidityBalances(pool0=1_000_000, pool1=1_000_000)
    assert pair.get_throttle().single_sided_timelock_deadline == 0


def test_first_mint_event(funded_pair):
    event = funded_pair.events[-1]
    assert isinstance(event, MintEvent)
    assert event.liquidity_out == 1_000_000 - MINIMUM_LIQUIDITY
    assert event.total_supply_before == 0


def test_first_mint_below_minimum(make_pair):
    pair = make_pair()
    pair.token0.mint("alice", 1_000)
    pair.token1.mint("alice", 1_000)
    with pytest.raises(InsufficientLiquidityMinted):
        pair.mint("alice", 1_000, 1_000, "alice")
    assert pair.total_supply == 0
    assert pair.token0.balance_of("alice") == 1_000


def test_first_mint_needs_both_assets(make_pair):
    pair = make_pair()
    pair.token0.mint("alice", 10_000)
    with pytest.raises(InsufficientInput):
        pair.mint("alice", 10_000, 0, "alice")


def test_negative_amounts_rejected(funded_pair):
    with pytest.raises(InsufficientInput):
        funded_pair.mint("bob", -1, 1_000, "bob")


def test_proportional_mint_takes_smaller_ratio(funded_pair):
    pair = funded_pair
    liquidity = pair.mint("bob", 1_234, 999, "bob")
    assert liquidity == 999
    assert pair.shares.balance_of("bob") == 999


@pytest.mark.parametrize(
    "amount0, amount1",
    [(1_234, 999), (1, 1), (1_000_000, 3), (7, 5_000_000), (999_999, 1_000_001)],
)
def test_mint_then_burn_never_returns_more(funded_pair, amount0, amount1):
    pair = funded_pair
    liquidity = pair.mint("bob", amount0, amount1, "bob")
    out0, out1 = pair.burn("bob", liquidity, "bob")
    assert out0 <= amount0
    assert out1 <= amount1
    assert pair.shares.balance_of("bob") == 0


def test_mint_too_small(funded_pair):
    pair = funded_pair
    pair.token0.mint("dust", 1)
    pair.token1.mint("dust", 1_000)
    # the donation brings total0 above total_supply, so 1 unit of token0 issues nothing
    pair.token0.mint(pair.address, 500_000)
    with pytest.raises(InsufficientLiquidityMinted):
        pair.mint("dust", 1, 1_000, "dust")
    assert pair.token0.balance_of("dust") == 1


def test_burn_is_pro_rata_over_raw_balances(reservoir_pair):
    """
    Burning redeems against the whole balance, reservoir included.
    """
    pair = reservoir_pair
    out0, out1 = pair.burn("alice", 100_000, "carol")
    assert (out0, out1) == (100_000, 200_000)
    assert pair.token0.balance_of("carol") == 100_000
    assert pair.token1.balance_of("carol") == 200_000
    assert pair.total_supply == 900_000
    assert isinstance(pair.events[-1], BurnEvent)


def test_burn_failures(funded_pair, make_pair):
    with pytest.raises(InsufficientLiquidityBurned):
        funded_pair.burn("alice", 0, "alice")
    with pytest.raises(InsufficientLiquidity):
        funded_pair.burn("bob", 10, "bob")
    with pytest.raises(Uninitialized):
        make_pair().burn("alice", 10, "alice")


def test_burn_too_small(make_pair):
    """
    A lopsided first deposit leaves far more shares than token0 units, so one
    share redeems no token0 at all.
    """
    pair = make_pair()
    pair.token0.mint("alice", 2_000)
    pair.token1.mint("alice", 2 * 10 ** 12)
    pair.mint("alice", 2_000, 2 * 10 ** 12, "alice")
    assert pair.total_supply == isqrt(2_000 * 2 * 10 ** 12)
    with pytest.raises(InsufficientLiquidityBurned):
        pair.burn("alice", 1, "alice")


def test_paused_blocks_mint_but_not_burn(funded_pair, registry):
    pair = funded_pair
    pair.set_is_paused(registry.address, True)
    with pytest.raises(Paused):
        pair.mint("bob", 1_000, 1_000, "bob")
    out0, out1 = pair.burn("alice", 1_000, "alice")
    assert out0 == 1_000 and out1 == 1_000


def test_rebase_becomes_reservoir_not_price(make_pair):
    """
    An upward rebase of token0 leaves the price where the last swap put it and
    shows up as token0 reservoir.
    """
    token0 = RebasingToken("REB")
    pair = make_pair(token0=token0, token1=SimpleToken("BBB"))
    token0.mint("alice", 1_000_000)
    pair.token1.mint("alice", 1_000_000)
    pair.mint("alice", 1_000_000, 1_000_000, "alice")

    token0.rebase(2_000_000)

    balances = pair.get_liquidity_balances()
    assert token0.balance_of(pair.address) == 2_000_000
    assert balances.pool0 == 1_000_000
    assert balances.pool1 == 1_000_000
    assert balances.reservoir0 == 1_000_000
    assert pair.get_price0() == Q112
    assert pair.get_price1() == Q112
    assert pair.get_moving_average_price0() == Q112


def test_liquidity_metadata(funded_pair):
    assert funded_pair.shares.name == "Reservoir LP AAA/BBB"
    assert funded_pair.shares.symbol == "RLP-AAA-BBB"


def test_invariant_view(funded_pair):
    numerator, denominator = funded_pair.get_invariant()
    assert numerator // denominator == isqrt(1_000_000 * 1_000_000)
