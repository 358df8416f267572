"""
Craps Gauntlet - Test Configuration and Fixtures

Common fixtures and test data for all test modules.
"""

import random
from dataclasses import replace
from typing import Callable

import pytest

from craps_gauntlet.engine.base import (
    DiceRoll,
    GameState,
    PermanentCard,
    PermanentEffect,
    Player,
    PointCard,
    SingleUseCard,
    SingleUseEffect,
)
from craps_gauntlet.engine.game_init import initialize_game
from craps_gauntlet.engine.turn import TurnEngine


# =============================================================================
# RANDOMNESS
# =============================================================================

@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for reproducible shuffles and rolls."""
    return random.Random(1234)


@pytest.fixture
def dice() -> Callable[[int, int], DiceRoll]:
    """Build a two-dice roll: dice(3, 4) is a 7."""
    def make(first: int, second: int) -> DiceRoll:
        return DiceRoll(values=(first, second))
    return make


# =============================================================================
# PLAYERS AND CARDS
# =============================================================================

@pytest.fixture
def make_player() -> Callable[..., Player]:
    """Player factory with starting defaults; override any field by keyword."""
    def make(player_id: str = "player-0", name: str = "Alice", gold: int = 4, **kwargs) -> Player:
        return Player(id=player_id, name=name, gold=gold, **kwargs)
    return make


@pytest.fixture
def permanent_card() -> PermanentCard:
    return PermanentCard(id="perm-1", name="Reroll", cost=3, effect=PermanentEffect.REROLL)


@pytest.fixture
def single_use_card() -> SingleUseCard:
    return SingleUseCard(id="single-1", name="Stun", cost=2, effect=SingleUseEffect.STUN)


@pytest.fixture
def point_card() -> PointCard:
    return PointCard(id="point-1", name="+2 Points", cost=4, points=2)


# =============================================================================
# GAMES
# =============================================================================

@pytest.fixture
def two_player_game() -> GameState:
    """Fresh Alice vs Bob game with a seeded deck."""
    return initialize_game(["Alice", "Bob"], rng=random.Random(7))


@pytest.fixture
def three_player_game() -> GameState:
    return initialize_game(["Alice", "Bob", "Cara"], rng=random.Random(7))


@pytest.fixture
def to_betting() -> Callable[[GameState], GameState]:
    """Skip the shop: MARKETPLACE_REFRESH -> BETTING."""
    def advance(state: GameState) -> GameState:
        state = TurnEngine.skip_refresh(state)
        return TurnEngine.finish_shopping(state)
    return advance


@pytest.fixture
def to_come_out(to_betting) -> Callable[[GameState], GameState]:
    """Skip shop and betting: MARKETPLACE_REFRESH -> COME_OUT_ROLL."""
    def advance(state: GameState) -> GameState:
        return TurnEngine.finish_betting(to_betting(state))
    return advance


@pytest.fixture
def to_point_phase(to_come_out, dice) -> Callable[..., GameState]:
    """Establish a point (default 8) with no bets on the table."""
    def advance(state: GameState, point_dice: tuple[int, int] = (4, 4)) -> GameState:
        state, _ = TurnEngine.roll_come_out(to_come_out(state), roll=dice(*point_dice))
        return state
    return advance


@pytest.fixture
def with_deck() -> Callable[..., GameState]:
    """Replace a game's draw deck with the given cards."""
    def swap(state: GameState, *cards) -> GameState:
        return replace(state, card_deck=tuple(cards))
    return swap
