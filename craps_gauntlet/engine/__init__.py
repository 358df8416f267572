"""
Craps Gauntlet Game Engine.

Pure Python game logic with zero UI dependencies.
Handles dice, gold, cards, the monster gauntlet, betting, victory and the
turn state machine.
"""

from craps_gauntlet.engine.base import (
    Bet,
    BetType,
    Card,
    CardKind,
    DiceRoll,
    DiceType,
    GameState,
    Marketplace,
    Monster,
    MonsterType,
    PendingDecision,
    PermanentCard,
    Player,
    PointCard,
    SingleUseCard,
    TurnEndReason,
    TurnPhase,
    TurnState,
)
from craps_gauntlet.engine.betting import BettingEngine
from craps_gauntlet.engine.cards import CardDeck, CardHand
from craps_gauntlet.engine.dice import DiceEngine
from craps_gauntlet.engine.errors import (
    DomainInvariantViolation,
    FailureReason,
    GameSetupError,
    ValidationIssue,
)
from craps_gauntlet.engine.game_init import initialize_game
from craps_gauntlet.engine.gold import GoldLedger
from craps_gauntlet.engine.marketplace import MarketplaceEngine
from craps_gauntlet.engine.monsters import MonsterGauntlet
from craps_gauntlet.engine.reducer import ActionType, GameAction, game_reducer
from craps_gauntlet.engine.rolls import RollEvaluator
from craps_gauntlet.engine.turn import TurnEngine, TurnOutcome
from craps_gauntlet.engine.victory import VictoryResolver

__all__ = [
    # Data Classes
    "Bet",
    "Card",
    "DiceRoll",
    "GameState",
    "Marketplace",
    "Monster",
    "PermanentCard",
    "Player",
    "PointCard",
    "SingleUseCard",
    "TurnOutcome",
    "TurnState",
    # Enums
    "BetType",
    "CardKind",
    "DiceType",
    "MonsterType",
    "PendingDecision",
    "TurnEndReason",
    "TurnPhase",
    # Errors
    "DomainInvariantViolation",
    "FailureReason",
    "GameSetupError",
    "ValidationIssue",
    # Engines
    "BettingEngine",
    "CardDeck",
    "CardHand",
    "DiceEngine",
    "GoldLedger",
    "MarketplaceEngine",
    "MonsterGauntlet",
    "RollEvaluator",
    "TurnEngine",
    "VictoryResolver",
    # Reducer
    "ActionType",
    "GameAction",
    "game_reducer",
    "initialize_game",
]
