"""
Craps Gauntlet - Game Initialization

Builds a ready-to-play GameState from a list of player names: players with
starting resources, the ten-monster gauntlet, a shuffled deck and the
opening marketplace window.
"""

import random
from typing import Sequence

from craps_gauntlet.engine.base import (
    Card,
    GameState,
    Marketplace,
    Monster,
    Player,
    TurnPhase,
    TurnState,
)
from craps_gauntlet.engine.cards import CardDeck, IdFactory
from craps_gauntlet.engine.constants import (
    STARTING_DAMAGE,
    STARTING_GOLD,
    STARTING_VICTORY_POINTS,
)
from craps_gauntlet.engine.errors import GameSetupError
from craps_gauntlet.engine.marketplace import MarketplaceEngine
from craps_gauntlet.engine.monsters import MonsterGauntlet
from craps_gauntlet.engine.validators import validate_player_names

__all__ = [
    "create_player",
    "create_players",
    "validate_player_names",
    "create_initial_turn_state",
    "create_initial_marketplace",
    "initialize_game",
    "get_next_player_index",
    "find_player_by_id",
    "find_player_index_by_id",
]


def create_player(name: str, index: int) -> Player:
    """New player with starting gold, no points, no damage and empty hands."""
    return Player(
        id=f"player-{index}",
        name=name.strip(),
        gold=STARTING_GOLD,
        victory_points=STARTING_VICTORY_POINTS,
        damage_count=STARTING_DAMAGE,
    )


def create_players(names: Sequence[str]) -> tuple[Player, ...]:
    return tuple(create_player(name, index) for index, name in enumerate(names))


def create_initial_turn_state(
    first_player_id: str,
    monster: Monster | None = None,
    has_used_revive: bool = False
) -> TurnState:
    """
    Fresh turn record in the MARKETPLACE_REFRESH phase.

    Args:
        first_player_id: Shooter for the turn
        monster: Monster being fought; snapshotted for crap-out rollback
        has_used_revive: Carried over while the monster stays the same
    """
    return TurnState(
        phase=TurnPhase.MARKETPLACE_REFRESH,
        active_player_id=first_player_id,
        monster_state_before_turn=(
            MonsterGauntlet.snapshot_monster(monster) if monster is not None else None
        ),
        has_used_revive=has_used_revive,
    )


def create_initial_marketplace(deck: Sequence[Card]) -> tuple[Marketplace, tuple[Card, ...]]:
    """
    Deal the opening marketplace window.

    Returns:
        Tuple of (marketplace, remaining deck)
    """
    return MarketplaceEngine.create_marketplace(deck)


def initialize_game(
    player_names: Sequence[str],
    rng: random.Random | None = None,
    id_factory: IdFactory | None = None
) -> GameState:
    """
    Create a complete new game.

    Args:
        player_names: Display names in seating order
        rng: Random source for the deck shuffle (default: the random module)
        id_factory: Card id generator (default: a fresh counter)

    Returns:
        GameState ready for the first player's marketplace phase

    Raises:
        GameSetupError: If the names fail validation; every issue is
            attached to the exception's errors tuple
    """
    issues = validate_player_names(player_names)
    if issues:
        raise GameSetupError(issues)

    players = create_players(player_names)
    monsters = MonsterGauntlet.create_monster_gauntlet()
    deck = CardDeck.create_shuffled_deck(rng, id_factory)
    marketplace, remaining_deck = create_initial_marketplace(deck)

    return GameState(
        players=players,
        monsters=monsters,
        turn_state=create_initial_turn_state(players[0].id, monsters[0]),
        marketplace=marketplace,
        card_deck=remaining_deck,
    )


def get_next_player_index(current_index: int, player_count: int) -> int:
    """Seat after current_index, wrapping to 0."""
    return (current_index + 1) % player_count


def find_player_by_id(players: Sequence[Player], player_id: str) -> Player | None:
    return next((p for p in players if p.id == player_id), None)


def find_player_index_by_id(players: Sequence[Player], player_id: str) -> int:
    """Seat index of the player, or -1 when absent."""
    for index, player in enumerate(players):
        if player.id == player_id:
            return index
    return -1
