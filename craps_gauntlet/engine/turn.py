"""
Craps Gauntlet - Turn State Machine

Drives one shooter's turn through its phases:

    MARKETPLACE_REFRESH -> MARKET_PURCHASE -> CARD_REVEAL -> BETTING
        -> COME_OUT_ROLL -> POINT_PHASE -> RESOLUTION

then rotates to the next player. The first three are shop phases: the
shooter may refresh and buy as often as their gold allows, and may finish
shopping from any of them.

Each method validates that the game is in the right phase, asks the component engines what happens, and commits
the result through the reducer. Methods return (new_state, outcome); the
input state is never modified.

Rolls accept an explicit DiceRoll so tests and replays can script the
dice; otherwise two dice are rolled from `rng` (or the random module).
"""

import logging
import random
from dataclasses import dataclass, field, replace
from typing import Sequence

from craps_gauntlet.engine.base import (
    BetType,
    Card,
    ComeOutOutcome,
    ComeOutResult,
    DiceRoll,
    GameState,
    PendingDecision,
    PointPhaseOutcome,
    PointPhaseResult,
    TurnEndReason,
    TurnPhase,
)
from craps_gauntlet.engine.betting import (
    BetResolutionResult,
    BettingEngine,
    BetValidationResult,
)
from craps_gauntlet.engine.dice import DiceEngine
from craps_gauntlet.engine.errors import DomainInvariantViolation
from craps_gauntlet.engine.gold import GoldLedger
from craps_gauntlet.engine.marketplace import (
    MarketplaceEngine,
    PurchaseValidationResult,
    RefreshValidationResult,
)
from craps_gauntlet.engine.reducer import ActionType, dispatch
from craps_gauntlet.engine.rolls import RollEvaluator
from craps_gauntlet.engine.victory import VictoryResolver

logger = logging.getLogger(__name__)

# Phases in which the marketplace is open
SHOP_PHASES = (TurnPhase.MARKETPLACE_REFRESH, TurnPhase.MARKET_PURCHASE, TurnPhase.CARD_REVEAL)


@dataclass(frozen=True)
class TurnOutcome:
    """
    What a turn action did, for the UI to narrate.

    Attributes:
        roll: Dice rolled, if the action rolled
        come_out: Classification of a come-out roll
        point_phase: Classification of a point-phase roll
        bet_results: Bet settlements applied, in bet order
        shooter_winnings: AGAINST pool paid to the shooter on a defeat
        gold_lost: Crap-out penalty taken from the shooter
        number_removed: Monster number crossed off
        monster_defeated: The current monster fell
        card_drawn: Reward card drawn on a defeat
        pending_decision: Choice the turn now waits on
        end_reason: Set when the action finished the turn
    """
    roll: DiceRoll | None = None
    come_out: ComeOutResult | None = None
    point_phase: PointPhaseResult | None = None
    bet_results: tuple[BetResolutionResult, ...] = field(default_factory=tuple)
    shooter_winnings: int = 0
    gold_lost: int = 0
    number_removed: int | None = None
    monster_defeated: bool = False
    card_drawn: Card | None = None
    pending_decision: PendingDecision | None = None
    end_reason: TurnEndReason | None = None


class TurnEngine:
    """
    Stateless orchestrator for a single turn.

    All methods are class methods. State is passed in and returned,
    never stored.
    """

    @classmethod
    def _require_phase(cls, state: GameState | None, *phases: TurnPhase) -> GameState:
        if state is None:
            raise DomainInvariantViolation("No game in progress.")
        if state.is_game_over:
            raise DomainInvariantViolation("The game is over.")
        if state.turn_state.phase not in phases:
            expected = ", ".join(p.name for p in phases)
            raise DomainInvariantViolation(
                f"Action not allowed in phase {state.turn_state.phase.name} (expected {expected})."
            )
        return state

    @classmethod
    def _require_decision(
        cls,
        state: GameState | None,
        decision: PendingDecision | None
    ) -> GameState:
        state = cls._require_phase(state, TurnPhase.POINT_PHASE)
        pending = state.turn_state.pending_decision
        if pending != decision:
            raise DomainInvariantViolation(
                f"Turn is waiting on {pending.name if pending else 'a roll'}, "
                f"not {decision.name if decision else 'a roll'}."
            )
        return state

    @classmethod
    def _set_pending(cls, state: GameState, decision: PendingDecision | None) -> GameState:
        return replace(state, turn_state=replace(state.turn_state, pending_decision=decision))

    @classmethod
    def _finish(cls, state: GameState, reason: TurnEndReason) -> GameState:
        """Move to RESOLUTION. Uncommitted turn damage is dropped."""
        logger.info(
            "Turn over for %s: %s after %d rolls",
            state.active_player.name, reason.value, state.turn_state.roll_count,
        )
        return replace(state, turn_state=replace(
            state.turn_state,
            phase=TurnPhase.RESOLUTION,
            pending_decision=None,
            end_reason=reason,
            turn_damage=0,
        ))

    @classmethod
    def _settle(
        cls,
        state: GameState,
        results: Sequence[BetResolutionResult],
        shooter_winnings: int = 0
    ) -> GameState:
        for result in results:
            logger.debug(
                "Bet settled for %s: %+d (%s)",
                result.player_id, result.gold_change, result.reason,
            )
        return dispatch(
            state,
            ActionType.APPLY_BET_RESULTS,
            results=tuple(results),
            shooter_winnings=shooter_winnings,
        )

    @classmethod
    def _apply_crap_out_penalty(cls, state: GameState) -> tuple[GameState, int]:
        shooter = state.active_player
        penalty = GoldLedger.apply_crap_out_penalty(shooter)
        state = dispatch(
            state,
            ActionType.UPDATE_PLAYER,
            player_id=shooter.id,
            changes={"gold": penalty.new_gold},
        )
        return state, penalty.amount_changed

    @classmethod
    def _defeat_current_monster(
        cls,
        state: GameState,
        bet_results: Sequence[BetResolutionResult],
        shooter_winnings: int = 0
    ) -> tuple[GameState, Card | None]:
        """
        Settle bets, reward the shooter, draw a card and advance.

        Returns:
            Tuple of (state in RESOLUTION, card drawn or None)
        """
        monster = state.current_monster
        shooter_id = state.active_player.id

        state = cls._settle(state, bet_results, shooter_winnings)
        state = dispatch(state, ActionType.CLEAR_BETS)
        state = dispatch(state, ActionType.DEFEAT_MONSTER)

        deck_before = state.card_deck
        state = dispatch(state, ActionType.DRAW_CARD, player_id=shooter_id)
        # A card that found no room went back under the deck
        card_drawn = deck_before[0] if len(state.card_deck) < len(deck_before) else None

        logger.info(
            "%s defeated %s (+%d VP, +%d gold)",
            state.active_player.name, monster.name, monster.points, monster.gold_reward,
        )

        state = dispatch(state, ActionType.ADVANCE_MONSTER)
        return cls._finish(state, TurnEndReason.DEFEATED), card_drawn

    @classmethod
    def _remove_number(
        cls,
        state: GameState,
        number: int
    ) -> tuple[GameState, tuple[BetResolutionResult, ...]]:
        """Land one hit: pay FOR bettors, count damage, cross the number off."""
        results = tuple(BettingEngine.process_point_phase_hit(state.bets))
        state = cls._settle(state, results)
        state = dispatch(state, ActionType.ADD_TURN_DAMAGE, amount=1)
        state = dispatch(state, ActionType.HIT_MONSTER_NUMBER, number=number)
        logger.debug(
            "%s crossed off %d on %s (remaining: %s)",
            state.active_player.name, number,
            state.current_monster.name, state.current_monster.remaining_numbers,
        )
        return state, results

    @classmethod
    def can_revive(cls, state: GameState) -> bool:
        """Revive is unspent for this monster and the shooter holds a card."""
        return (
            not state.turn_state.has_used_revive
            and state.active_player.card_count > 0
        )

    @classmethod
    def refresh_marketplace(
        cls,
        state: GameState | None,
        rng: random.Random | None = None
    ) -> tuple[GameState, RefreshValidationResult]:
        """
        Pay to redeal the marketplace. Allowed as often as the shooter can
        pay while the shop is open; the turn moves on to purchasing.

        An unaffordable refresh leaves the state (and phase) unchanged.
        """
        state = cls._require_phase(state, *SHOP_PHASES)
        check = MarketplaceEngine.can_refresh_marketplace(state.active_player)
        if not check.success:
            return state, check

        state = dispatch(state, ActionType.REFRESH_MARKETPLACE, rng=rng)
        logger.info("%s refreshed the marketplace", state.active_player.name)
        return dispatch(state, ActionType.SET_PHASE, phase=TurnPhase.MARKET_PURCHASE), check

    @classmethod
    def skip_refresh(cls, state: GameState | None) -> GameState:
        state = cls._require_phase(state, TurnPhase.MARKETPLACE_REFRESH)
        return dispatch(state, ActionType.SET_PHASE, phase=TurnPhase.MARKET_PURCHASE)

    @classmethod
    def purchase_card(
        cls,
        state: GameState | None,
        card_id: str
    ) -> tuple[GameState, PurchaseValidationResult]:
        """
        Buy a marketplace card and reveal it.

        Any number of cards may be bought while the shop is open. A
        rejected purchase leaves the state unchanged so the player can
        pick again or finish shopping.
        """
        state = cls._require_phase(state, *SHOP_PHASES)
        validation = MarketplaceEngine.validate_card_purchase(
            state.active_player, state.marketplace, card_id
        )
        if not validation.success:
            return state, validation

        state = dispatch(state, ActionType.PURCHASE_CARD, card_id=card_id)
        logger.info(
            "%s bought %s for %d gold",
            state.active_player.name, validation.card.name, validation.card.cost,
        )
        return dispatch(state, ActionType.SET_PHASE, phase=TurnPhase.CARD_REVEAL), validation

    @classmethod
    def finish_shopping(cls, state: GameState | None) -> GameState:
        state = cls._require_phase(state, *SHOP_PHASES)
        return dispatch(state, ActionType.SET_PHASE, phase=TurnPhase.BETTING)

    @classmethod
    def place_bet(
        cls,
        state: GameState | None,
        player_id: str,
        bet_type: BetType,
        amount: int | float
    ) -> tuple[GameState, BetValidationResult]:
        """
        Place a non-shooter's bet, debiting the amount immediately.

        Returns:
            Tuple of (new_state, validation); the state is unchanged when
            validation fails or the player does not exist
        """
        state = cls._require_phase(state, TurnPhase.BETTING)
        player = next((p for p in state.players if p.id == player_id), None)
        if player is None:
            raise DomainInvariantViolation(f"Unknown player: {player_id}")

        validation = BettingEngine.validate_bet(
            player, bet_type, amount, state.turn_state.active_player_id, state.bets
        )
        if not validation.success:
            return state, validation

        state = dispatch(
            state, ActionType.PLACE_BET,
            player_id=player_id, bet_type=bet_type, amount=amount,
        )
        logger.debug("%s bets %s %s", player.name, amount, bet_type.value)
        return state, validation

    @classmethod
    def finish_betting(cls, state: GameState | None) -> GameState:
        state = cls._require_phase(state, TurnPhase.BETTING)
        return dispatch(state, ActionType.SET_PHASE, phase=TurnPhase.COME_OUT_ROLL)

    @classmethod
    def roll_come_out(
        cls,
        state: GameState | None,
        roll: DiceRoll | None = None,
        rng: random.Random | None = None
    ) -> tuple[GameState, TurnOutcome]:
        """
        Make the come-out roll.

        Natural defeats the monster outright, craps ends the turn with the
        gold penalty, a point number starts the point phase.
        """
        state = cls._require_phase(state, TurnPhase.COME_OUT_ROLL)
        if roll is None:
            roll = DiceEngine.roll_dice(rng=rng)

        state = dispatch(state, ActionType.INCREMENT_ROLL_COUNT)
        result = RollEvaluator.evaluate_come_out_roll(roll.total)
        logger.debug("%s come-out roll %s = %d", state.active_player.name, roll.values, roll.total)

        if result.outcome == ComeOutOutcome.NATURAL:
            bet_results = tuple(BettingEngine.process_come_out_natural(state.bets))
            state, card_drawn = cls._defeat_current_monster(state, bet_results)
            return state, TurnOutcome(
                roll=roll,
                come_out=result,
                bet_results=bet_results,
                monster_defeated=True,
                card_drawn=card_drawn,
                end_reason=TurnEndReason.DEFEATED,
            )

        if result.outcome == ComeOutOutcome.CRAPS:
            bet_results = tuple(BettingEngine.process_come_out_craps(state.bets))
            state = cls._settle(state, bet_results)
            state = dispatch(state, ActionType.CLEAR_BETS)
            state, gold_lost = cls._apply_crap_out_penalty(state)
            return cls._finish(state, TurnEndReason.CRAPPED_OUT), TurnOutcome(
                roll=roll,
                come_out=result,
                bet_results=bet_results,
                gold_lost=gold_lost,
                end_reason=TurnEndReason.CRAPPED_OUT,
            )

        state = dispatch(state, ActionType.SET_POINT, point=result.point_value)
        state = dispatch(state, ActionType.SET_PHASE, phase=TurnPhase.POINT_PHASE)
        logger.info("%s established point %d", state.active_player.name, result.point_value)
        return state, TurnOutcome(roll=roll, come_out=result)

    @classmethod
    def roll_point(
        cls,
        state: GameState | None,
        roll: DiceRoll | None = None,
        rng: random.Random | None = None
    ) -> tuple[GameState, TurnOutcome]:
        """
        Make one point-phase roll.

        Hits cross numbers off immediately. A point hit or snake eyes
        leaves a pending decision; a crap-out rolls the monster back and
        either offers a revive or ends the turn.
        """
        state = cls._require_decision(state, None)
        if roll is None:
            roll = DiceEngine.roll_dice(rng=rng)

        state = dispatch(state, ActionType.INCREMENT_ROLL_COUNT)
        result = RollEvaluator.evaluate_point_phase_roll(
            roll.total,
            state.turn_state.point,
            state.current_monster.remaining_numbers,
        )
        logger.debug(
            "%s point roll %s = %d: %s",
            state.active_player.name, roll.values, roll.total, result.outcome.value,
        )

        if result.outcome == PointPhaseOutcome.CRAP_OUT:
            bet_results = tuple(BettingEngine.process_crap_out(state.bets))
            state = cls._settle(state, bet_results)
            state = dispatch(state, ActionType.CLEAR_BETS)
            state, gold_lost = cls._apply_crap_out_penalty(state)
            state = dispatch(state, ActionType.RESET_MONSTER_TO_SNAPSHOT)
            state = replace(state, turn_state=replace(state.turn_state, turn_damage=0))

            if cls.can_revive(state):
                state = cls._set_pending(state, PendingDecision.REVIVE_OR_END)
                return state, TurnOutcome(
                    roll=roll,
                    point_phase=result,
                    bet_results=bet_results,
                    gold_lost=gold_lost,
                    pending_decision=PendingDecision.REVIVE_OR_END,
                )

            return cls._finish(state, TurnEndReason.CRAPPED_OUT), TurnOutcome(
                roll=roll,
                point_phase=result,
                bet_results=bet_results,
                gold_lost=gold_lost,
                end_reason=TurnEndReason.CRAPPED_OUT,
            )

        if result.outcome == PointPhaseOutcome.POINT_HIT:
            state = cls._set_pending(state, PendingDecision.CHOOSE_POINT_NUMBER)
            return state, TurnOutcome(
                roll=roll,
                point_phase=result,
                pending_decision=PendingDecision.CHOOSE_POINT_NUMBER,
            )

        if result.outcome == PointPhaseOutcome.HIT:
            state, hit_results = cls._remove_number(state, result.hit_number)
            if not state.current_monster.is_defeated:
                return state, TurnOutcome(
                    roll=roll,
                    point_phase=result,
                    bet_results=hit_results,
                    number_removed=result.hit_number,
                )
            return cls._defeat_after_hit(state, roll, result, hit_results, result.hit_number)

        if result.outcome == PointPhaseOutcome.ESCAPE_OFFERED:
            state = cls._set_pending(state, PendingDecision.ESCAPE_OR_CONTINUE)
            return state, TurnOutcome(
                roll=roll,
                point_phase=result,
                pending_decision=PendingDecision.ESCAPE_OR_CONTINUE,
            )

        return state, TurnOutcome(roll=roll, point_phase=result)

    @classmethod
    def _defeat_after_hit(
        cls,
        state: GameState,
        roll: DiceRoll | None,
        result: PointPhaseResult | None,
        hit_results: tuple[BetResolutionResult, ...],
        number: int
    ) -> tuple[GameState, TurnOutcome]:
        defeat_results = tuple(
            BettingEngine.process_monster_defeated(state.bets, state.turn_state.turn_damage)
        )
        winnings = BettingEngine.calculate_shooter_winnings(state.bets)
        state, card_drawn = cls._defeat_current_monster(state, defeat_results, winnings)
        return state, TurnOutcome(
            roll=roll,
            point_phase=result,
            bet_results=hit_results + defeat_results,
            shooter_winnings=winnings,
            number_removed=number,
            monster_defeated=True,
            card_drawn=card_drawn,
            end_reason=TurnEndReason.DEFEATED,
        )

    @classmethod
    def choose_point_number(
        cls,
        state: GameState | None,
        number: int
    ) -> tuple[GameState, TurnOutcome]:
        """
        Cross off a number of the shooter's choice after a point hit.

        Counts as a hit: one turn damage and +1 to each FOR bettor. The
        point stays active.

        Raises:
            DomainInvariantViolation: If no point hit is pending or the
                number is not one of the monster's remaining numbers
        """
        state = cls._require_decision(state, PendingDecision.CHOOSE_POINT_NUMBER)
        if number not in state.current_monster.remaining_numbers:
            raise DomainInvariantViolation(
                f"Cannot remove {number}: remaining numbers are "
                f"{state.current_monster.remaining_numbers}."
            )

        state = cls._set_pending(state, None)
        state, hit_results = cls._remove_number(state, number)
        if not state.current_monster.is_defeated:
            return state, TurnOutcome(bet_results=hit_results, number_removed=number)
        return cls._defeat_after_hit(state, None, None, hit_results, number)

    @classmethod
    def decide_escape(cls, state: GameState | None, escape: bool) -> tuple[GameState, TurnOutcome]:
        """
        Answer a snake-eyes escape offer.

        Escaping returns every bet and throws away this turn's damage;
        hits already landed stay on the monster.
        """
        state = cls._require_decision(state, PendingDecision.ESCAPE_OR_CONTINUE)
        if not escape:
            return cls._set_pending(state, None), TurnOutcome()

        bet_results = tuple(BettingEngine.process_escape(state.bets))
        state = cls._settle(state, bet_results)
        state = dispatch(state, ActionType.CLEAR_BETS)
        return cls._finish(state, TurnEndReason.ESCAPED), TurnOutcome(
            bet_results=bet_results,
            end_reason=TurnEndReason.ESCAPED,
        )

    @classmethod
    def decide_revive(cls, state: GameState | None, revive: bool) -> tuple[GameState, TurnOutcome]:
        """
        Answer a revive offer after a crap-out.

        Reviving discards the whole hand and keeps rolling for the same
        point with turn damage reset; it can be used once per monster.
        """
        state = cls._require_decision(state, PendingDecision.REVIVE_OR_END)
        if not revive:
            return cls._finish(state, TurnEndReason.CRAPPED_OUT), TurnOutcome(
                end_reason=TurnEndReason.CRAPPED_OUT,
            )

        state = dispatch(state, ActionType.DISCARD_HAND, player_id=state.active_player.id)
        state = dispatch(state, ActionType.SET_REVIVE_FLAG, value=True)
        logger.info("%s revived against %s", state.active_player.name, state.current_monster.name)
        return cls._set_pending(state, None), TurnOutcome()

    @classmethod
    def end_turn(cls, state: GameState | None) -> GameState:
        """
        Close a resolved turn.

        Recomputes the damage leader, then either ends the game (a player
        reached the victory threshold, or the boss fell) or clears the bets
        and hands the dice to the next player.
        """
        state = cls._require_phase(state, TurnPhase.RESOLUTION)
        state = replace(
            state,
            damage_leader_id=VictoryResolver.calculate_damage_leader(state.players),
        )

        candidates = VictoryResolver.get_winners(state.players, state.damage_leader_id)
        boss_defeated = state.is_last_monster and state.current_monster.is_defeated
        if boss_defeated and not candidates:
            candidates = state.players

        if candidates:
            winners = VictoryResolver.get_tied_leaders(candidates, state.damage_leader_id)
            winner_ids = tuple(p.id for p in winners)
            logger.info(
                "Game over: %s",
                "shared victory " + ", ".join(winner_ids) if len(winner_ids) > 1 else winner_ids[0],
            )
            return dispatch(state, ActionType.END_GAME, winner_ids=winner_ids)

        state = dispatch(state, ActionType.NEXT_PLAYER)
        logger.info(
            "Turn start: %s vs %s",
            state.active_player.name, state.current_monster.name,
        )
        return state
