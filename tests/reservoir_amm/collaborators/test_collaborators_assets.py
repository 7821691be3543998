import pytest

from reservoir_amm.collaborators.assets import FeeOnTransferToken, HookedToken, RebasingToken, SimpleToken


def test_simple_token_transfer():
    token = SimpleToken("AAA")
    token.mint("alice", 100)
    token.transfer("alice", "bob", 40)
    assert token.balance_of("alice") == 60
    assert token.balance_of("bob") == 40
    assert token.address == "asset:AAA"


def test_simple_token_rejects_overdraft_and_negative():
    token = SimpleToken("AAA")
    token.mint("alice", 10)
    with pytest.raises(ValueError):
        token.transfer("alice", "bob", 11)
    with pytest.raises(ValueError):
        token.transfer("alice", "bob", -1)
    with pytest.raises(ValueError):
        token.mint("alice", -1)


def test_checkpoint_and_rollback():
    token = SimpleToken("AAA")
    token.mint("alice", 10)
    saved = token.checkpoint()
    token.transfer("alice", "bob", 10)
    token.rollback(saved)
    assert token.balance_of("alice") == 10
    assert token.balance_of("bob") == 0


def test_fee_on_transfer_token_delivers_less():
    token = FeeOnTransferToken("FOT", fee_bps=100)
    token.mint("alice", 10_000)
    token.transfer("alice", "bob", 10_000)
    assert token.balance_of("alice") == 0
    assert token.balance_of("bob") == 9_900


def test_fee_on_transfer_token_bounds():
    with pytest.raises(ValueError):
        FeeOnTransferToken("FOT", fee_bps=10_001)


def test_rebasing_token_scales_every_balance():
    token = RebasingToken("REB")
    token.mint("alice", 1_000)
    token.mint("bob", 3_000)
    token.rebase(8_000)
    assert token.balance_of("alice") == 2_000
    assert token.balance_of("bob") == 6_000

    token.transfer("alice", "carol", 500)
    assert token.balance_of("alice") == 1_500
    assert token.balance_of("carol") == 500


def test_rebasing_token_rollback_restores_supply():
    token = RebasingToken("REB")
    token.mint("alice", 1_000)
    saved = token.checkpoint()
    token.rebase(500)
    token.rollback(saved)
    assert token.balance_of("alice") == 1_000
    with pytest.raises(ValueError):
        token.rebase(0)


def test_hooked_token_calls_hook_after_transfer():
    calls = []
    token = HookedToken("HK", hook=lambda sender, recipient, amount: calls.append(
        (sender, recipient, amount, token.balance_of(recipient))
    ))
    token.mint("alice", 10)
    token.transfer("alice", "bob", 4)
    assert calls == [("alice", "bob", 4, 4)]
