"""
Craps Gauntlet - Game Reducer Tests

Tests for each reducer action, its rejection paths and the selectors.
"""

import logging
import random
from dataclasses import replace

import pytest
from craps_gauntlet.engine.base import (
    Bet,
    BetType,
    Marketplace,
    PermanentCard,
    PermanentEffect,
    TurnPhase,
)
from craps_gauntlet.engine.betting import BetResolutionResult
from craps_gauntlet.engine.errors import DomainInvariantViolation
from craps_gauntlet.engine.reducer import (
    ActionType,
    GameAction,
    dispatch,
    game_reducer,
    get_active_player,
    get_current_monster,
    get_player_by_id,
)


def _set_player(state, index, **changes):
    players = list(state.players)
    players[index] = replace(players[index], **changes)
    return replace(state, players=tuple(players))


class TestLifecycle:
    """Tests for INITIALIZE, RESET_GAME and dispatch errors."""

    def test_initialize_from_nothing(self):
        state = dispatch(None, ActionType.INITIALIZE, player_names=["Alice", "Bob"],
                         rng=random.Random(1))
        assert [p.name for p in state.players] == ["Alice", "Bob"]
        assert state.turn_state.phase == TurnPhase.MARKETPLACE_REFRESH

    def test_initialize_invalid_names_keeps_state(self, two_player_game, caplog):
        with caplog.at_level(logging.WARNING):
            state = dispatch(two_player_game, ActionType.INITIALIZE, player_names=["Solo"])
        assert state is two_player_game
        assert "Game not started" in caplog.text

    def test_initialize_invalid_names_from_nothing(self):
        assert dispatch(None, ActionType.INITIALIZE, player_names=["", ""]) is None

    def test_reset(self, two_player_game):
        assert dispatch(two_player_game, ActionType.RESET_GAME) is None

    def test_action_without_game_raises(self):
        with pytest.raises(DomainInvariantViolation, match="requires a game"):
            dispatch(None, ActionType.CLEAR_BETS)

    def test_unknown_action_raises(self, two_player_game):
        with pytest.raises(ValueError, match="Unknown action type"):
            game_reducer(two_player_game, GameAction(type="NOT_AN_ACTION"))

    def test_input_not_modified(self, two_player_game):
        before = two_player_game
        dispatch(two_player_game, ActionType.ADD_TURN_DAMAGE, amount=3)
        assert two_player_game.turn_state.turn_damage == 0
        assert two_player_game is before


class TestPhaseAndTurnFields:
    """Tests for the simple turn-state actions."""

    def test_set_phase(self, two_player_game):
        state = dispatch(two_player_game, ActionType.SET_PHASE, phase=TurnPhase.BETTING)
        assert state.turn_state.phase == TurnPhase.BETTING

    def test_set_phase_from_value(self, two_player_game):
        state = dispatch(two_player_game, ActionType.SET_PHASE, phase="point_phase")
        assert state.turn_state.phase == TurnPhase.POINT_PHASE

    def test_set_point(self, two_player_game):
        state = dispatch(two_player_game, ActionType.SET_POINT, point=8)
        assert state.turn_state.point == 8
        assert dispatch(state, ActionType.SET_POINT, point=None).turn_state.point is None

    @pytest.mark.parametrize("point", [7, 11, 2])
    def test_set_invalid_point_raises(self, two_player_game, point):
        with pytest.raises(DomainInvariantViolation):
            dispatch(two_player_game, ActionType.SET_POINT, point=point)

    def test_add_turn_damage(self, two_player_game):
        state = dispatch(two_player_game, ActionType.ADD_TURN_DAMAGE)
        state = dispatch(state, ActionType.ADD_TURN_DAMAGE, amount=2)
        assert state.turn_state.turn_damage == 3

    def test_increment_roll_count(self, two_player_game):
        state = dispatch(two_player_game, ActionType.INCREMENT_ROLL_COUNT)
        state = dispatch(state, ActionType.INCREMENT_ROLL_COUNT)
        assert state.turn_state.roll_count == 2

    def test_set_revive_flag(self, two_player_game):
        state = dispatch(two_player_game, ActionType.SET_REVIVE_FLAG)
        assert state.turn_state.has_used_revive is True
        state = dispatch(state, ActionType.SET_REVIVE_FLAG, value=False)
        assert state.turn_state.has_used_revive is False


class TestNextPlayer:
    """Tests for NEXT_PLAYER."""

    def test_rotates_and_resets_turn(self, two_player_game):
        state = dispatch(two_player_game, ActionType.SET_POINT, point=6)
        state = dispatch(state, ActionType.INCREMENT_ROLL_COUNT)
        state = replace(state, bets=(Bet("player-1", BetType.FOR, 2),))
        state = dispatch(state, ActionType.NEXT_PLAYER)

        assert state.current_player_index == 1
        assert state.bets == ()
        assert state.turn_state.active_player_id == "player-1"
        assert state.turn_state.phase == TurnPhase.MARKETPLACE_REFRESH
        assert state.turn_state.point is None
        assert state.turn_state.roll_count == 0

    def test_wraps_around(self, two_player_game):
        state = dispatch(two_player_game, ActionType.NEXT_PLAYER)
        state = dispatch(state, ActionType.NEXT_PLAYER)
        assert state.current_player_index == 0

    def test_snapshots_current_monster(self, two_player_game):
        state = dispatch(two_player_game, ActionType.HIT_MONSTER_NUMBER, number=4)
        state = dispatch(state, ActionType.NEXT_PLAYER)
        assert state.turn_state.monster_state_before_turn.remaining_numbers == (10,)

    def test_carries_revive_flag(self, two_player_game):
        state = dispatch(two_player_game, ActionType.SET_REVIVE_FLAG)
        state = dispatch(state, ActionType.NEXT_PLAYER)
        assert state.turn_state.has_used_revive is True


class TestPlayerAndMonsterUpdates:
    """Tests for UPDATE_PLAYER and UPDATE_MONSTER."""

    def test_update_player(self, two_player_game):
        state = dispatch(two_player_game, ActionType.UPDATE_PLAYER,
                         player_id="player-1", changes={"gold": 9, "victory_points": 2})
        assert state.players[1].gold == 9
        assert state.players[1].victory_points == 2
        assert state.players[0] == two_player_game.players[0]

    def test_update_unknown_player_keeps_state(self, two_player_game):
        state = dispatch(two_player_game, ActionType.UPDATE_PLAYER,
                         player_id="player-7", changes={"gold": 9})
        assert state is two_player_game

    def test_update_monster(self, two_player_game):
        monster = replace(two_player_game.monsters[2], remaining_numbers=(4,))
        state = dispatch(two_player_game, ActionType.UPDATE_MONSTER, monster=monster)
        assert state.monsters[2].remaining_numbers == (4,)

    def test_update_unknown_monster_keeps_state(self, two_player_game):
        monster = replace(two_player_game.monsters[0], id="monster-99")
        assert dispatch(two_player_game, ActionType.UPDATE_MONSTER, monster=monster) is two_player_game


class TestMarketplaceActions:
    """Tests for REFRESH_MARKETPLACE and PURCHASE_CARD."""

    def test_refresh_charges_active_player(self, two_player_game):
        state = dispatch(two_player_game, ActionType.REFRESH_MARKETPLACE, rng=random.Random(2))
        assert state.players[0].gold == 1
        assert len(state.marketplace) == 8
        assert len(state.card_deck) == 37

    def test_refresh_unaffordable_keeps_state(self, two_player_game, caplog):
        state = _set_player(two_player_game, 0, gold=2)
        with caplog.at_level(logging.WARNING):
            assert dispatch(state, ActionType.REFRESH_MARKETPLACE) is state
        assert "REFRESH_MARKETPLACE rejected" in caplog.text

    def test_purchase_point_card(self, two_player_game, point_card):
        state = replace(two_player_game, marketplace=Marketplace(cards=(point_card,)))
        state = dispatch(state, ActionType.PURCHASE_CARD, card_id="point-1")
        assert state.players[0].gold == 0
        assert state.players[0].victory_points == 2
        assert state.marketplace.cards == ()
        assert state.turn_state.revealed_card_id == "point-1"

    def test_purchase_permanent_card(self, two_player_game, permanent_card):
        state = replace(two_player_game, marketplace=Marketplace(cards=(permanent_card,)))
        state = dispatch(state, ActionType.PURCHASE_CARD, card_id="perm-1")
        assert state.players[0].permanent_cards == (permanent_card,)
        assert state.players[0].gold == 1

    def test_purchase_missing_card_keeps_state(self, two_player_game):
        assert dispatch(two_player_game, ActionType.PURCHASE_CARD, card_id="nope") is two_player_game


class TestBetActions:
    """Tests for PLACE_BET, CLEAR_BETS and APPLY_BET_RESULTS."""

    def test_place_bet_debits(self, two_player_game):
        state = dispatch(two_player_game, ActionType.PLACE_BET,
                         player_id="player-1", bet_type=BetType.FOR, amount=2)
        assert state.players[1].gold == 2
        assert state.bets == (Bet("player-1", BetType.FOR, 2),)

    def test_shooter_bet_rejected(self, two_player_game, caplog):
        with caplog.at_level(logging.WARNING):
            state = dispatch(two_player_game, ActionType.PLACE_BET,
                             player_id="player-0", bet_type=BetType.AGAINST, amount=1)
        assert state is two_player_game
        assert "PLACE_BET rejected" in caplog.text

    def test_unknown_bettor_keeps_state(self, two_player_game):
        state = dispatch(two_player_game, ActionType.PLACE_BET,
                         player_id="player-5", bet_type=BetType.FOR, amount=1)
        assert state is two_player_game

    def test_clear_bets(self, two_player_game):
        state = replace(two_player_game, bets=(Bet("player-1", BetType.FOR, 2),))
        assert dispatch(state, ActionType.CLEAR_BETS).bets == ()

    def test_apply_bet_results(self, three_player_game):
        results = (
            BetResolutionResult("player-1", Bet("player-1", BetType.FOR, 2), 4, "won"),
            BetResolutionResult("player-2", Bet("player-2", BetType.AGAINST, 3), 0, "lost"),
        )
        state = dispatch(three_player_game, ActionType.APPLY_BET_RESULTS,
                         results=results, shooter_winnings=3)
        assert [p.gold for p in state.players] == [7, 8, 4]


class TestMonsterActions:
    """Tests for hits, snapshots, defeat and advancing."""

    def test_hit_monster_number(self, two_player_game):
        state = dispatch(two_player_game, ActionType.HIT_MONSTER_NUMBER, number=4)
        assert state.current_monster.remaining_numbers == (10,)

    def test_hit_missing_number_raises(self, two_player_game):
        with pytest.raises(DomainInvariantViolation, match="not a remaining number"):
            dispatch(two_player_game, ActionType.HIT_MONSTER_NUMBER, number=5)

    def test_reset_to_snapshot(self, two_player_game):
        state = dispatch(two_player_game, ActionType.HIT_MONSTER_NUMBER, number=4)
        state = dispatch(state, ActionType.RESET_MONSTER_TO_SNAPSHOT)
        assert state.current_monster.remaining_numbers == (4, 10)

    def test_store_snapshot(self, two_player_game):
        state = dispatch(two_player_game, ActionType.HIT_MONSTER_NUMBER, number=10)
        state = dispatch(state, ActionType.STORE_MONSTER_SNAPSHOT)
        state = dispatch(state, ActionType.HIT_MONSTER_NUMBER, number=4)
        state = dispatch(state, ActionType.RESET_MONSTER_TO_SNAPSHOT)
        assert state.current_monster.remaining_numbers == (4,)

    def test_reset_without_snapshot_keeps_state(self, two_player_game, caplog):
        state = replace(two_player_game, turn_state=replace(
            two_player_game.turn_state, monster_state_before_turn=None,
        ))
        with caplog.at_level(logging.WARNING):
            assert dispatch(state, ActionType.RESET_MONSTER_TO_SNAPSHOT) is state
        assert "no snapshot" in caplog.text

    def test_defeat_monster(self, two_player_game):
        state = dispatch(two_player_game, ActionType.ADD_TURN_DAMAGE, amount=2)
        state = dispatch(state, ActionType.DEFEAT_MONSTER)
        alice = state.players[0]
        assert state.current_monster.is_defeated
        assert alice.gold == 6
        assert alice.victory_points == 1
        assert alice.damage_count == 2
        assert state.damage_leader_id == "player-0"
        assert state.turn_state.turn_damage == 0

    def test_defeat_without_damage_has_no_leader(self, two_player_game):
        state = dispatch(two_player_game, ActionType.DEFEAT_MONSTER)
        assert state.damage_leader_id is None

    def test_advance_resets_revive(self, two_player_game):
        state = dispatch(two_player_game, ActionType.SET_REVIVE_FLAG)
        state = dispatch(state, ActionType.ADVANCE_MONSTER)
        assert state.current_monster_index == 1
        assert state.turn_state.has_used_revive is False

    def test_advance_on_last_monster_is_noop(self, two_player_game):
        state = replace(two_player_game, current_monster_index=9)
        assert dispatch(state, ActionType.ADVANCE_MONSTER) is state


class TestHandActions:
    """Tests for DRAW_CARD and DISCARD_HAND."""

    def test_draw_card(self, two_player_game, with_deck, permanent_card, point_card):
        state = with_deck(two_player_game, permanent_card, point_card)
        state = dispatch(state, ActionType.DRAW_CARD)
        assert state.players[0].permanent_cards == (permanent_card,)
        assert state.card_deck == (point_card,)

    def test_draw_for_named_player(self, two_player_game, with_deck, point_card):
        state = with_deck(two_player_game, point_card)
        state = dispatch(state, ActionType.DRAW_CARD, player_id="player-1")
        assert state.players[1].victory_points == 2
        assert state.card_deck == ()

    def test_draw_full_hand_goes_to_bottom(self, two_player_game, with_deck, point_card):
        full = tuple(
            PermanentCard(id=f"held-{i}", name="Armor", cost=3, effect=PermanentEffect.ARMOR)
            for i in range(6)
        )
        drawn = PermanentCard(id="perm-9", name="Shield", cost=4, effect=PermanentEffect.SHIELD)
        state = _set_player(with_deck(two_player_game, drawn, point_card), 0, permanent_cards=full)
        state = dispatch(state, ActionType.DRAW_CARD)
        assert state.players[0].permanent_cards == full
        assert state.card_deck == (point_card, drawn)

    def test_draw_from_empty_deck(self, two_player_game, with_deck):
        state = dispatch(with_deck(two_player_game), ActionType.DRAW_CARD)
        assert state.players == two_player_game.players
        assert state.card_deck == ()

    def test_discard_hand(self, two_player_game, permanent_card, single_use_card):
        state = _set_player(two_player_game, 0, permanent_cards=(permanent_card,),
                            single_use_cards=(single_use_card,))
        state = dispatch(state, ActionType.DISCARD_HAND)
        assert state.players[0].card_count == 0


class TestEndGame:
    """Tests for END_GAME."""

    def test_single_winner(self, two_player_game):
        state = dispatch(two_player_game, ActionType.END_GAME, winner_ids=("player-1",))
        assert state.is_game_over is True
        assert state.winner_id == "player-1"
        assert state.winner_ids == ("player-1",)

    def test_shared_victory(self, two_player_game):
        state = dispatch(two_player_game, ActionType.END_GAME, winner_ids=["player-0", "player-1"])
        assert state.winner_id is None
        assert state.winner_ids == ("player-0", "player-1")


class TestSelectors:
    """Tests for the null-safe selectors."""

    def test_with_game(self, two_player_game):
        assert get_active_player(two_player_game).name == "Alice"
        assert get_current_monster(two_player_game).position == 1
        assert get_player_by_id(two_player_game, "player-1").name == "Bob"
        assert get_player_by_id(two_player_game, "ghost") is None

    def test_without_game(self):
        assert get_active_player(None) is None
        assert get_current_monster(None) is None
        assert get_player_by_id(None, "player-0") is None
