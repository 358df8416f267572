"""
Craps Gauntlet - Gold Ledger Tests

Tests for gold transactions, the crap-out penalty and transfers.
"""

from dataclasses import replace

import pytest
from craps_gauntlet.engine.errors import FailureReason
from craps_gauntlet.engine.gold import GoldLedger


class TestAddGold:
    """Tests for GoldLedger.add_gold()."""

    def test_adds(self, make_player):
        result = GoldLedger.add_gold(make_player(gold=4), 3)
        assert result.success is True
        assert result.new_gold == 7
        assert result.amount_changed == 3

    def test_negative_rejected(self, make_player):
        result = GoldLedger.add_gold(make_player(gold=4), -1)
        assert result.success is False
        assert result.new_gold == 4
        assert result.failure == FailureReason.NEGATIVE_AMOUNT

    def test_does_not_mutate_player(self, make_player):
        player = make_player(gold=4)
        GoldLedger.add_gold(player, 10)
        assert player.gold == 4


class TestRemoveGold:
    """Tests for GoldLedger.remove_gold()."""

    @pytest.mark.parametrize("gold,amount", [(10, 0), (10, 4), (10, 10), (0, 0)])
    def test_removes(self, make_player, gold, amount):
        result = GoldLedger.remove_gold(make_player(gold=gold), amount)
        assert result.success is True
        assert result.new_gold == gold - amount

    @pytest.mark.parametrize("gold", [0, 3, 10])
    def test_one_more_than_balance_fails(self, make_player, gold):
        result = GoldLedger.remove_gold(make_player(gold=gold), gold + 1)
        assert result.success is False
        assert result.new_gold == gold
        assert result.amount_changed == 0
        assert result.failure == FailureReason.INSUFFICIENT_FUNDS

    def test_negative_rejected(self, make_player):
        result = GoldLedger.remove_gold(make_player(gold=4), -2)
        assert result.failure == FailureReason.NEGATIVE_AMOUNT


class TestCrapOutPenalty:
    """Tests for the 50% crap-out penalty."""

    @pytest.mark.parametrize("gold,loss", [(0, 0), (1, 0), (7, 3), (8, 4), (13, 6)])
    def test_calculate_loss_is_half_rounded_down(self, gold, loss):
        assert GoldLedger.calculate_crap_out_loss(gold) == loss

    def test_large_balance_is_exact(self):
        gold = 2 ** 60 + 1
        assert GoldLedger.calculate_crap_out_loss(gold) == 2 ** 59
        assert isinstance(GoldLedger.calculate_crap_out_loss(gold), int)

    def test_apply_penalty(self, make_player):
        result = GoldLedger.apply_crap_out_penalty(make_player(gold=7))
        assert result.success is True
        assert result.new_gold == 4
        assert result.amount_changed == 3

    def test_apply_penalty_at_zero(self, make_player):
        result = GoldLedger.apply_crap_out_penalty(make_player(gold=0))
        assert result.success is True
        assert result.new_gold == 0


class TestTransferGold:
    """Tests for GoldLedger.transfer_gold()."""

    def test_transfer(self, make_player):
        alice = make_player("player-0", "Alice", gold=6)
        bob = make_player("player-1", "Bob", gold=2)
        result = GoldLedger.transfer_gold(alice, bob, 5)
        assert result.success is True
        assert result.from_result.new_gold == 1
        assert result.to_result.new_gold == 7

    def test_round_trip_restores_balances(self, make_player):
        alice = make_player("player-0", "Alice", gold=6)
        bob = make_player("player-1", "Bob", gold=2)
        there = GoldLedger.transfer_gold(alice, bob, 4)
        alice = replace(alice, gold=there.from_result.new_gold)
        bob = replace(bob, gold=there.to_result.new_gold)
        back = GoldLedger.transfer_gold(bob, alice, 4)
        assert back.from_result.new_gold == 2
        assert back.to_result.new_gold == 6

    def test_failed_transfer_leaves_receiver(self, make_player):
        alice = make_player("player-0", "Alice", gold=1)
        bob = make_player("player-1", "Bob", gold=2)
        result = GoldLedger.transfer_gold(alice, bob, 5)
        assert result.success is False
        assert result.to_result.new_gold == 2
        assert result.to_result.amount_changed == 0
        assert result.from_result.failure == FailureReason.INSUFFICIENT_FUNDS


class TestHelpers:
    """Tests for affordability and formatting helpers."""

    def test_can_afford(self, make_player):
        assert GoldLedger.can_afford(make_player(gold=3), 3) is True
        assert GoldLedger.can_afford(make_player(gold=2), 3) is False

    def test_zero_cost_always_affordable(self, make_player):
        assert GoldLedger.can_afford(make_player(gold=0), 0) is True

    @pytest.mark.parametrize("amount,expected", [
        (0, True), (5, True), (-1, False), (2.5, False), (True, False), ("3", False),
    ])
    def test_is_valid_gold_amount(self, amount, expected):
        assert GoldLedger.is_valid_gold_amount(amount) is expected

    def test_format_gold_change(self):
        assert GoldLedger.format_gold_change(5) == "+5"
        assert GoldLedger.format_gold_change(-3) == "-3"
        assert GoldLedger.format_gold_change(0) == "+0"
