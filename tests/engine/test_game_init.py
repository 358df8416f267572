"""
Craps Gauntlet - Game Initialization Tests

Tests for building a new game and the player lookup helpers.
"""

import random

import pytest
from craps_gauntlet.engine.base import TurnPhase
from craps_gauntlet.engine.cards import make_id_factory
from craps_gauntlet.engine.errors import GameSetupError
from craps_gauntlet.engine.game_init import (
    create_initial_turn_state,
    create_player,
    create_players,
    find_player_by_id,
    find_player_index_by_id,
    get_next_player_index,
    initialize_game,
)
from craps_gauntlet.engine.monsters import MonsterGauntlet


class TestCreatePlayer:
    """Tests for player construction."""

    def test_starting_values(self):
        player = create_player("Alice", 0)
        assert player.id == "player-0"
        assert player.gold == 4
        assert player.victory_points == 0
        assert player.damage_count == 0
        assert player.card_count == 0

    def test_name_trimmed(self):
        assert create_player("  Bob ", 1).name == "Bob"

    def test_create_players_in_order(self):
        players = create_players(["Alice", "Bob", "Cara"])
        assert [p.id for p in players] == ["player-0", "player-1", "player-2"]


class TestInitialTurnState:
    """Tests for create_initial_turn_state."""

    def test_defaults(self):
        turn = create_initial_turn_state("player-0")
        assert turn.phase == TurnPhase.MARKETPLACE_REFRESH
        assert turn.point is None
        assert turn.turn_damage == 0
        assert turn.roll_count == 0
        assert turn.monster_state_before_turn is None
        assert turn.has_used_revive is False

    def test_snapshot_taken(self):
        monster = MonsterGauntlet.create_monster(3)
        turn = create_initial_turn_state("player-0", monster, has_used_revive=True)
        assert turn.monster_state_before_turn == monster
        assert turn.has_used_revive is True


class TestInitializeGame:
    """Tests for initialize_game."""

    def test_players(self, two_player_game):
        assert [p.name for p in two_player_game.players] == ["Alice", "Bob"]
        assert all(p.gold == 4 for p in two_player_game.players)

    def test_gauntlet(self, two_player_game):
        assert len(two_player_game.monsters) == 10
        assert two_player_game.current_monster_index == 0
        assert two_player_game.monsters[-1].position == 10

    def test_marketplace_and_deck(self, two_player_game):
        assert len(two_player_game.marketplace) == 8
        assert len(two_player_game.card_deck) == 37

    def test_card_ids_unique(self, two_player_game):
        ids = [c.id for c in two_player_game.marketplace.cards + two_player_game.card_deck]
        assert len(ids) == len(set(ids)) == 45

    def test_turn_state(self, two_player_game):
        turn = two_player_game.turn_state
        assert turn.phase == TurnPhase.MARKETPLACE_REFRESH
        assert turn.active_player_id == "player-0"
        assert turn.monster_state_before_turn == two_player_game.monsters[0]

    def test_game_flags(self, two_player_game):
        assert two_player_game.current_player_index == 0
        assert two_player_game.bets == ()
        assert two_player_game.damage_leader_id is None
        assert two_player_game.is_game_over is False
        assert two_player_game.winner_id is None
        assert two_player_game.winner_ids == ()

    def test_seeded_games_match(self):
        first = initialize_game(["A", "B"], rng=random.Random(3), id_factory=make_id_factory())
        second = initialize_game(["A", "B"], rng=random.Random(3), id_factory=make_id_factory())
        assert first == second

    def test_invalid_names_raise(self):
        with pytest.raises(GameSetupError) as exc_info:
            initialize_game(["Alice", "alice"])
        assert exc_info.value.errors[0].player_index == 1
        assert "Duplicate name" in str(exc_info.value)

    def test_too_few_players_raise(self):
        with pytest.raises(GameSetupError, match="Minimum 2 players"):
            initialize_game(["Solo"])


class TestPlayerHelpers:
    """Tests for seat and lookup helpers."""

    @pytest.mark.parametrize("current,count,expected", [(0, 2, 1), (1, 2, 0), (2, 4, 3), (7, 8, 0)])
    def test_next_player_index(self, current, count, expected):
        assert get_next_player_index(current, count) == expected

    def test_find_player_by_id(self, two_player_game):
        assert find_player_by_id(two_player_game.players, "player-1").name == "Bob"
        assert find_player_by_id(two_player_game.players, "player-9") is None

    def test_find_player_index_by_id(self, two_player_game):
        assert find_player_index_by_id(two_player_game.players, "player-1") == 1
        assert find_player_index_by_id(two_player_game.players, "player-9") == -1
