"""
Craps Gauntlet - Game Reducer

The action surface a UI drives the game through. Every action is a pure
transform: game_reducer(state, action) returns a new GameState (or None
after a reset) and never mutates its input.

Recoverable failures (bad bet, unaffordable purchase, unknown player) are
logged and leave the state as it was. Programming errors (unknown action,
invalid point, acting with no game) raise.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Any, Callable, Mapping, Sequence

from craps_gauntlet.engine.base import GameState, Monster, Player, TurnPhase
from craps_gauntlet.engine.betting import BetResolutionResult, BettingEngine
from craps_gauntlet.engine.cards import CardHand
from craps_gauntlet.engine.errors import DomainInvariantViolation, GameSetupError
from craps_gauntlet.engine.game_init import (
    create_initial_turn_state,
    find_player_by_id,
    get_next_player_index,
    initialize_game,
)
from craps_gauntlet.engine.gold import GoldLedger
from craps_gauntlet.engine.marketplace import MarketplaceEngine
from craps_gauntlet.engine.monsters import MonsterGauntlet
from craps_gauntlet.engine.validators import validate_point_value
from craps_gauntlet.engine.victory import VictoryResolver

logger = logging.getLogger(__name__)


class ActionType(Enum):
    """Every transform the reducer understands."""

    INITIALIZE = auto()
    SET_PHASE = auto()
    NEXT_PLAYER = auto()
    UPDATE_PLAYER = auto()
    UPDATE_MONSTER = auto()
    REFRESH_MARKETPLACE = auto()
    PURCHASE_CARD = auto()
    PLACE_BET = auto()
    CLEAR_BETS = auto()
    SET_POINT = auto()
    ADD_TURN_DAMAGE = auto()
    STORE_MONSTER_SNAPSHOT = auto()
    RESET_MONSTER_TO_SNAPSHOT = auto()
    SET_REVIVE_FLAG = auto()
    INCREMENT_ROLL_COUNT = auto()
    HIT_MONSTER_NUMBER = auto()
    DEFEAT_MONSTER = auto()
    ADVANCE_MONSTER = auto()
    DRAW_CARD = auto()
    APPLY_BET_RESULTS = auto()
    DISCARD_HAND = auto()
    END_GAME = auto()
    RESET_GAME = auto()


@dataclass(frozen=True)
class GameAction:
    """An action type plus its payload."""

    type: ActionType
    payload: Mapping[str, Any] = field(default_factory=dict)


def _replace_player(state: GameState, player: Player) -> GameState:
    return replace(
        state,
        players=tuple(player if p.id == player.id else p for p in state.players),
    )


def _replace_current_monster(state: GameState, monster: Monster) -> GameState:
    monsters = list(state.monsters)
    monsters[state.current_monster_index] = monster
    return replace(state, monsters=tuple(monsters))


def _initialize(state: GameState | None, payload: Mapping[str, Any]) -> GameState | None:
    try:
        return initialize_game(
            payload["player_names"],
            rng=payload.get("rng"),
            id_factory=payload.get("id_factory"),
        )
    except GameSetupError as exc:
        logger.warning("Game not started: %s", exc)
        return state


def _set_phase(state: GameState, payload: Mapping[str, Any]) -> GameState:
    phase = TurnPhase(payload["phase"])
    return replace(state, turn_state=replace(state.turn_state, phase=phase))


def _next_player(state: GameState, payload: Mapping[str, Any]) -> GameState:
    next_index = get_next_player_index(state.current_player_index, len(state.players))
    return replace(
        state,
        current_player_index=next_index,
        bets=tuple(),
        turn_state=create_initial_turn_state(
            state.players[next_index].id,
            state.current_monster,
            has_used_revive=state.turn_state.has_used_revive,
        ),
    )


def _update_player(state: GameState, payload: Mapping[str, Any]) -> GameState:
    player = find_player_by_id(state.players, payload["player_id"])
    if player is None:
        logger.warning("UPDATE_PLAYER: unknown player %s", payload["player_id"])
        return state
    return _replace_player(state, replace(player, **payload["changes"]))


def _update_monster(state: GameState, payload: Mapping[str, Any]) -> GameState:
    monster = payload["monster"]
    if not any(m.id == monster.id for m in state.monsters):
        logger.warning("UPDATE_MONSTER: unknown monster %s", monster.id)
        return state
    return replace(
        state,
        monsters=tuple(monster if m.id == monster.id else m for m in state.monsters),
    )


def _refresh_marketplace(state: GameState, payload: Mapping[str, Any]) -> GameState:
    player = state.active_player
    check = MarketplaceEngine.can_refresh_marketplace(player)
    if not check.success:
        logger.warning("REFRESH_MARKETPLACE rejected for %s: %s", player.id, check.error)
        return state

    debit = GoldLedger.remove_gold(player, check.cost)
    marketplace, deck = MarketplaceEngine.refresh_marketplace(
        state.marketplace, state.card_deck, payload.get("rng")
    )
    state = _replace_player(state, replace(player, gold=debit.new_gold))
    return replace(state, marketplace=marketplace, card_deck=deck)


def _purchase_card(state: GameState, payload: Mapping[str, Any]) -> GameState:
    player = state.active_player
    result = MarketplaceEngine.purchase_card(player, state.marketplace, payload["card_id"])
    if not result.success:
        logger.warning("PURCHASE_CARD rejected for %s: %s", player.id, result.error)
        return state

    state = _replace_player(state, result.player)
    return replace(
        state,
        marketplace=result.marketplace,
        turn_state=replace(state.turn_state, revealed_card_id=result.card.id),
    )


def _place_bet(state: GameState, payload: Mapping[str, Any]) -> GameState:
    player = find_player_by_id(state.players, payload["player_id"])
    if player is None:
        logger.warning("PLACE_BET: unknown player %s", payload["player_id"])
        return state

    validation = BettingEngine.validate_bet(
        player,
        payload["bet_type"],
        payload["amount"],
        state.turn_state.active_player_id,
        state.bets,
    )
    if not validation.success:
        logger.warning("PLACE_BET rejected for %s: %s", player.id, validation.error)
        return state

    bet = BettingEngine.create_bet(player.id, payload["bet_type"], payload["amount"])
    debit = GoldLedger.remove_gold(player, bet.amount)
    state = _replace_player(state, replace(player, gold=debit.new_gold))
    return replace(state, bets=state.bets + (bet,))


def _clear_bets(state: GameState, payload: Mapping[str, Any]) -> GameState:
    return replace(state, bets=tuple())


def _set_point(state: GameState, payload: Mapping[str, Any]) -> GameState:
    point = payload["point"]
    if point is not None:
        validate_point_value(point)
    return replace(state, turn_state=replace(state.turn_state, point=point))


def _add_turn_damage(state: GameState, payload: Mapping[str, Any]) -> GameState:
    amount = payload.get("amount", 1)
    turn_state = state.turn_state
    return replace(state, turn_state=replace(turn_state, turn_damage=turn_state.turn_damage + amount))


def _store_monster_snapshot(state: GameState, payload: Mapping[str, Any]) -> GameState:
    snapshot = MonsterGauntlet.snapshot_monster(state.current_monster)
    return replace(state, turn_state=replace(state.turn_state, monster_state_before_turn=snapshot))


def _reset_monster_to_snapshot(state: GameState, payload: Mapping[str, Any]) -> GameState:
    snapshot = state.turn_state.monster_state_before_turn
    if snapshot is None:
        logger.warning("RESET_MONSTER_TO_SNAPSHOT: no snapshot stored this turn")
        return state
    return _replace_current_monster(state, MonsterGauntlet.restore_monster(snapshot))


def _set_revive_flag(state: GameState, payload: Mapping[str, Any]) -> GameState:
    value = bool(payload.get("value", True))
    return replace(state, turn_state=replace(state.turn_state, has_used_revive=value))


def _increment_roll_count(state: GameState, payload: Mapping[str, Any]) -> GameState:
    turn_state = state.turn_state
    return replace(state, turn_state=replace(turn_state, roll_count=turn_state.roll_count + 1))


def _hit_monster_number(state: GameState, payload: Mapping[str, Any]) -> GameState:
    number = payload["number"]
    monster = state.current_monster
    if number not in monster.remaining_numbers:
        raise DomainInvariantViolation(
            f"{number} is not a remaining number on {monster.name} "
            f"(remaining: {monster.remaining_numbers})"
        )
    return _replace_current_monster(state, MonsterGauntlet.hit_monster_number(monster, number))


def _defeat_monster(state: GameState, payload: Mapping[str, Any]) -> GameState:
    """Clear the monster, reward the shooter and commit turn damage."""
    monster = state.current_monster
    shooter = state.active_player
    turn_damage = state.turn_state.turn_damage

    state = _replace_current_monster(state, MonsterGauntlet.clear_monster(monster))
    state = _replace_player(state, replace(
        shooter,
        gold=GoldLedger.add_gold(shooter, monster.gold_reward).new_gold,
        victory_points=VictoryResolver.add_victory_points(shooter, monster.points).new_points,
        damage_count=shooter.damage_count + turn_damage,
    ))
    return replace(
        state,
        damage_leader_id=VictoryResolver.calculate_damage_leader(state.players),
        turn_state=replace(state.turn_state, turn_damage=0),
    )


def _advance_monster(state: GameState, payload: Mapping[str, Any]) -> GameState:
    if state.is_last_monster:
        return state
    return replace(
        state,
        current_monster_index=MonsterGauntlet.next_monster_index(
            state.current_monster_index, len(state.monsters)
        ),
        turn_state=replace(state.turn_state, has_used_revive=False),
    )


def _draw_card(state: GameState, payload: Mapping[str, Any]) -> GameState:
    player = find_player_by_id(state.players, payload.get("player_id", state.active_player.id))
    if player is None:
        logger.warning("DRAW_CARD: unknown player %s", payload.get("player_id"))
        return state

    draw = MarketplaceEngine.draw_card_for_player(player, state.card_deck)
    if draw.card is None:
        logger.debug("DRAW_CARD: deck empty, %s draws nothing", player.id)
    elif not draw.placed:
        logger.debug("DRAW_CARD: %s hand full, %s returned to deck", player.id, draw.card.id)
    return replace(_replace_player(state, draw.player), card_deck=draw.deck)


def _apply_bet_results(state: GameState, payload: Mapping[str, Any]) -> GameState:
    """Credit each bettor's gold_change and pay the shooter any winnings."""
    results: Sequence[BetResolutionResult] = payload.get("results", ())
    for result in results:
        player = find_player_by_id(state.players, result.player_id)
        if player is None:
            logger.warning("APPLY_BET_RESULTS: unknown player %s", result.player_id)
            continue
        credit = GoldLedger.add_gold(player, result.gold_change)
        state = _replace_player(state, replace(player, gold=credit.new_gold))

    winnings = payload.get("shooter_winnings", 0)
    if winnings:
        shooter = state.active_player
        credit = GoldLedger.add_gold(shooter, winnings)
        state = _replace_player(state, replace(shooter, gold=credit.new_gold))
    return state


def _discard_hand(state: GameState, payload: Mapping[str, Any]) -> GameState:
    player = find_player_by_id(state.players, payload.get("player_id", state.active_player.id))
    if player is None:
        logger.warning("DISCARD_HAND: unknown player %s", payload.get("player_id"))
        return state

    discard = CardHand.discard_hand(player)
    return _replace_player(state, replace(
        player,
        permanent_cards=discard.permanent_cards,
        single_use_cards=discard.single_use_cards,
    ))


def _end_game(state: GameState, payload: Mapping[str, Any]) -> GameState:
    winner_ids = tuple(payload.get("winner_ids", ()))
    return replace(
        state,
        is_game_over=True,
        winner_id=winner_ids[0] if len(winner_ids) == 1 else None,
        winner_ids=winner_ids,
    )


_HANDLERS: dict[ActionType, Callable[[GameState, Mapping[str, Any]], GameState]] = {
    ActionType.SET_PHASE: _set_phase,
    ActionType.NEXT_PLAYER: _next_player,
    ActionType.UPDATE_PLAYER: _update_player,
    ActionType.UPDATE_MONSTER: _update_monster,
    ActionType.REFRESH_MARKETPLACE: _refresh_marketplace,
    ActionType.PURCHASE_CARD: _purchase_card,
    ActionType.PLACE_BET: _place_bet,
    ActionType.CLEAR_BETS: _clear_bets,
    ActionType.SET_POINT: _set_point,
    ActionType.ADD_TURN_DAMAGE: _add_turn_damage,
    ActionType.STORE_MONSTER_SNAPSHOT: _store_monster_snapshot,
    ActionType.RESET_MONSTER_TO_SNAPSHOT: _reset_monster_to_snapshot,
    ActionType.SET_REVIVE_FLAG: _set_revive_flag,
    ActionType.INCREMENT_ROLL_COUNT: _increment_roll_count,
    ActionType.HIT_MONSTER_NUMBER: _hit_monster_number,
    ActionType.DEFEAT_MONSTER: _defeat_monster,
    ActionType.ADVANCE_MONSTER: _advance_monster,
    ActionType.DRAW_CARD: _draw_card,
    ActionType.APPLY_BET_RESULTS: _apply_bet_results,
    ActionType.DISCARD_HAND: _discard_hand,
    ActionType.END_GAME: _end_game,
}


def game_reducer(state: GameState | None, action: GameAction) -> GameState | None:
    """
    Apply one action to the game.

    Args:
        state: Current game, or None before initialization
        action: The action to apply

    Returns:
        The new game state; None after RESET_GAME

    Raises:
        DomainInvariantViolation: For an action that needs a game when
            there is none, or one that breaks a game invariant
        ValueError: For an action type with no handler
    """
    if action.type == ActionType.INITIALIZE:
        return _initialize(state, action.payload)

    if action.type == ActionType.RESET_GAME:
        return None

    handler = _HANDLERS.get(action.type)
    if handler is None:
        raise ValueError(f"Unknown action type: {action.type}")

    if state is None:
        raise DomainInvariantViolation(f"{action.type.name} requires a game in progress")

    return handler(state, action.payload)


def dispatch(state: GameState | None, action_type: ActionType, **payload: Any) -> GameState | None:
    """Shorthand for game_reducer(state, GameAction(action_type, payload))."""
    return game_reducer(state, GameAction(type=action_type, payload=payload))


def get_active_player(state: GameState | None) -> Player | None:
    if state is None or not state.players:
        return None
    return state.players[state.current_player_index]


def get_current_monster(state: GameState | None) -> Monster | None:
    if state is None or not state.monsters:
        return None
    return state.monsters[state.current_monster_index]


def get_player_by_id(state: GameState | None, player_id: str) -> Player | None:
    if state is None:
        return None
    return find_player_by_id(state.players, player_id)
