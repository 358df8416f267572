"""
Craps Gauntlet - Game Session

Stateful driver for a single game. A UI event loop holds one GameSession:
it owns the current GameState (or None before a game starts), the random
source, the cosmetic roll delay, and forwards every turn action to the
stateless TurnEngine.
"""

from __future__ import annotations

import logging
import random
import time
from typing import Callable, Sequence

from craps_gauntlet.config.settings import Settings, get_settings
from craps_gauntlet.engine.base import (
    BetType,
    DiceRoll,
    GameState,
    Monster,
    PendingDecision,
    Player,
    TurnPhase,
)
from craps_gauntlet.engine.betting import BetValidationResult
from craps_gauntlet.engine.errors import DomainInvariantViolation
from craps_gauntlet.engine.game_init import initialize_game
from craps_gauntlet.engine.marketplace import PurchaseValidationResult, RefreshValidationResult
from craps_gauntlet.engine.reducer import (
    ActionType,
    dispatch,
    get_active_player,
    get_current_monster,
    get_player_by_id,
)
from craps_gauntlet.engine.turn import TurnEngine, TurnOutcome

logger = logging.getLogger(__name__)


class GameSession:
    """Holds the live game and applies turn actions to it.

    Every action replaces `state` with the engine's result. Rolls wait
    `roll_delay_seconds` through the injected `sleep` first, so tests can
    pass a no-op and a zero delay.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        rng: random.Random | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._settings = settings or get_settings()
        if rng is None and self._settings.seed is not None:
            rng = random.Random(self._settings.seed)
        self._rng = rng
        self._sleep = sleep
        self._state: GameState | None = None

    @property
    def state(self) -> GameState | None:
        return self._state

    @property
    def active_player(self) -> Player | None:
        return get_active_player(self._state)

    @property
    def current_monster(self) -> Monster | None:
        return get_current_monster(self._state)

    def player(self, player_id: str) -> Player | None:
        return get_player_by_id(self._state, player_id)

    def start(self, player_names: Sequence[str]) -> GameState:
        """Start a new game, replacing any game in progress.

        Raises:
            GameSetupError: If the names are invalid; the session is
                left as it was
        """
        self._state = initialize_game(player_names, rng=self._rng)
        logger.info(
            "Game started with %d players: %s",
            len(self._state.players), ", ".join(p.name for p in self._state.players),
        )
        return self._state

    def reset(self) -> None:
        """Drop the current game."""
        self._state = dispatch(self._state, ActionType.RESET_GAME)
        logger.info("Game reset")

    # -- Shopping ------------------------------------------------------------

    def refresh_marketplace(self) -> RefreshValidationResult:
        self._state, result = TurnEngine.refresh_marketplace(self._state, rng=self._rng)
        return result

    def skip_refresh(self) -> GameState:
        self._state = TurnEngine.skip_refresh(self._state)
        return self._state

    def purchase_card(self, card_id: str) -> PurchaseValidationResult:
        self._state, result = TurnEngine.purchase_card(self._state, card_id)
        return result

    def finish_shopping(self) -> GameState:
        self._state = TurnEngine.finish_shopping(self._state)
        return self._state

    # -- Betting -------------------------------------------------------------

    def place_bet(self, player_id: str, bet_type: BetType, amount: int | float) -> BetValidationResult:
        self._state, result = TurnEngine.place_bet(self._state, player_id, bet_type, amount)
        return result

    def finish_betting(self) -> GameState:
        self._state = TurnEngine.finish_betting(self._state)
        return self._state

    # -- Rolling -------------------------------------------------------------

    def _wait_for_roll(self) -> None:
        if self._settings.roll_delay_seconds > 0:
            self._sleep(self._settings.roll_delay_seconds)

    def roll_come_out(self, roll: DiceRoll | None = None) -> TurnOutcome:
        self._wait_for_roll()
        self._state, outcome = TurnEngine.roll_come_out(self._state, roll=roll, rng=self._rng)
        return outcome

    def roll_point(self, roll: DiceRoll | None = None) -> TurnOutcome:
        self._wait_for_roll()
        self._state, outcome = TurnEngine.roll_point(self._state, roll=roll, rng=self._rng)
        return outcome

    def choose_point_number(self, number: int) -> TurnOutcome:
        self._state, outcome = TurnEngine.choose_point_number(self._state, number)
        return outcome

    def decide_escape(self, escape: bool) -> TurnOutcome:
        self._state, outcome = TurnEngine.decide_escape(self._state, escape)
        return outcome

    def decide_revive(self, revive: bool) -> TurnOutcome:
        self._state, outcome = TurnEngine.decide_revive(self._state, revive)
        return outcome

    def end_turn(self) -> GameState:
        self._state = TurnEngine.end_turn(self._state)
        return self._state

    def play_point_phase(
        self,
        choose_number: Callable[[GameState], int],
        take_escape: Callable[[GameState], bool],
        take_revive: Callable[[GameState], bool],
    ) -> list[TurnOutcome]:
        """Roll until the turn resolves, answering decisions via callbacks.

        Args:
            choose_number: Picks the number to remove after a point hit.
            take_escape: True to escape on snake eyes.
            take_revive: True to revive after a crap-out.

        Returns:
            Every outcome produced, in order.

        Raises:
            DomainInvariantViolation: If the turn is not in the point phase.
        """
        if self._state is None or self._state.turn_state.phase != TurnPhase.POINT_PHASE:
            raise DomainInvariantViolation("play_point_phase requires a turn in the point phase.")

        outcomes: list[TurnOutcome] = []
        while self._state.turn_state.phase == TurnPhase.POINT_PHASE:
            pending = self._state.turn_state.pending_decision
            if pending == PendingDecision.CHOOSE_POINT_NUMBER:
                outcomes.append(self.choose_point_number(choose_number(self._state)))
            elif pending == PendingDecision.ESCAPE_OR_CONTINUE:
                outcomes.append(self.decide_escape(take_escape(self._state)))
            elif pending == PendingDecision.REVIVE_OR_END:
                outcomes.append(self.decide_revive(take_revive(self._state)))
            else:
                outcomes.append(self.roll_point())
        return outcomes
