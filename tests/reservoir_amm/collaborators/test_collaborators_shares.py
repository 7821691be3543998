import pytest

from reservoir_amm.collaborators.registry import PairRegistry
from reservoir_amm.collaborators.shares import LiquidityShares
from reservoir_amm.common.errors import InsufficientLiquidity


def _make_shares(registry=None) -> LiquidityShares:
    registry = registry or PairRegistry()
    return LiquidityShares(
        lambda: registry.liquidity_name("AAA", "BBB"),
        lambda: registry.liquidity_symbol("AAA", "BBB"),
    )


def test_mint_burn_transfer():
    shares = _make_shares()
    shares.mint("alice", 100)
    shares.transfer("alice", "bob", 30)
    shares.burn("bob", 10)
    assert shares.balance_of("alice") == 70
    assert shares.balance_of("bob") == 20
    assert shares.total_supply == 90


def test_overdraft_raises():
    shares = _make_shares()
    shares.mint("alice", 5)
    with pytest.raises(InsufficientLiquidity):
        shares.burn("alice", 6)
    with pytest.raises(InsufficientLiquidity):
        shares.transfer("alice", "bob", 6)


def test_rollback():
    shares = _make_shares()
    shares.mint("alice", 5)
    saved = shares.checkpoint()
    shares.burn("alice", 5)
    shares.rollback(saved)
    assert shares.total_supply == 5
    assert shares.balance_of("alice") == 5


def test_metadata_follows_registry():
    """
    Name and symbol are looked up on every access, never cached.
    """
    registry = PairRegistry()
    shares = _make_shares(registry)
    assert shares.name == "Reservoir LP AAA/BBB"
    assert shares.symbol == "RLP-AAA-BBB"

    registry.name_prefix = "Pool"
    registry.symbol_prefix = "PL"
    assert shares.name == "Pool AAA/BBB"
    assert shares.symbol == "PL-AAA-BBB"


def test_registry_param_setter():
    registry = PairRegistry(param_setter="governor")
    assert registry.is_param_setter("registry")
    assert registry.is_param_setter("governor")
    assert not registry.is_param_setter("alice")
