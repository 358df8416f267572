"""
Craps Gauntlet - Game Engine Base Classes

This module defines the foundational data structures and enums used throughout
the game engine. All classes are immutable (frozen dataclasses): engines never
mutate a record, they return a replacement built with dataclasses.replace.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import ClassVar, Sequence, Union


class DiceType(Enum):
    """Type of dice used in the game."""
    D6 = 6


class TurnPhase(Enum):
    """Phases of a single player's turn, in play order."""
    MARKETPLACE_REFRESH = "marketplace_refresh"
    MARKET_PURCHASE = "market_purchase"
    CARD_REVEAL = "card_reveal"
    BETTING = "betting"
    COME_OUT_ROLL = "come_out_roll"
    POINT_PHASE = "point_phase"
    RESOLUTION = "resolution"


class BetType(Enum):
    """Side a bettor takes relative to the active shooter."""
    FOR = "FOR"
    AGAINST = "AGAINST"


class CardKind(Enum):
    """Card variants. Order matters for type-then-cost sorting."""
    PERMANENT = "permanent"
    SINGLE_USE = "single_use"
    POINT = "point"


class PermanentEffect(Enum):
    """Effects carried by permanent cards."""
    PLUS_ONE_DIE = "PLUS_ONE_DIE"
    REROLL = "REROLL"
    SHIELD = "SHIELD"
    LUCKY = "LUCKY"
    ARMOR = "ARMOR"
    POINT_BONUS = "POINT_BONUS"
    DOUBLE = "DOUBLE"


class SingleUseEffect(Enum):
    """Effects carried by single-use cards."""
    STUN = "STUN"
    RAPID_FIRE = "RAPID_FIRE"
    MOMENTUM = "MOMENTUM"
    CHARM = "CHARM"
    CURSE = "CURSE"
    HEAL = "HEAL"


class MonsterType(Enum):
    """Flavor type of a gauntlet monster."""
    GOBLIN = "GOBLIN"
    SKELETON = "SKELETON"
    ORC = "ORC"
    TROLL = "TROLL"
    WRAITH = "WRAITH"
    GOLEM = "GOLEM"
    DEMON = "DEMON"
    DRAGON = "DRAGON"
    LICH = "LICH"
    BOSS = "BOSS"


class ComeOutOutcome(Enum):
    """Classification of a come-out roll."""
    NATURAL = "natural"
    CRAPS = "craps"
    POINT = "point"


class PointPhaseOutcome(Enum):
    """Classification of a point-phase roll, highest priority first."""
    CRAP_OUT = "crap_out"
    POINT_HIT = "point_hit"
    HIT = "hit"
    ESCAPE_OFFERED = "escape_offered"
    MISS = "miss"


class PendingDecision(Enum):
    """Player choice the turn is waiting on during the point phase."""
    CHOOSE_POINT_NUMBER = auto()
    ESCAPE_OR_CONTINUE = auto()
    REVIVE_OR_END = auto()


class TurnEndReason(Enum):
    """Why a turn finished."""
    DEFEATED = "defeated"
    ESCAPED = "escaped"
    CRAPPED_OUT = "crapped_out"


@dataclass(frozen=True)
class DiceRoll:
    """
    Immutable representation of a dice roll.

    Attributes:
        values: Tuple of dice face values
        dice_type: Type of dice
    """
    values: tuple[int, ...]
    dice_type: DiceType = DiceType.D6

    def __post_init__(self) -> None:
        """Validate dice values are within valid range."""
        max_value = self.dice_type.value
        for value in self.values:
            if not (1 <= value <= max_value):
                raise ValueError(
                    f"Invalid die value {value} for {self.dice_type.name}. "
                    f"Must be between 1 and {max_value}."
                )

    def __len__(self) -> int:
        return len(self.values)

    def __getitem__(self, index: int) -> int:
        return self.values[index]

    @property
    def total(self) -> int:
        """Sum of all faces."""
        return sum(self.values)

    @classmethod
    def from_sequence(
        cls,
        values: Sequence[int],
        dice_type: DiceType = DiceType.D6
    ) -> "DiceRoll":
        """Create a DiceRoll from any sequence type."""
        return cls(values=tuple(values), dice_type=dice_type)


@dataclass(frozen=True)
class PermanentCard:
    """A card that stays in hand and occupies a permanent slot."""
    kind: ClassVar[CardKind] = CardKind.PERMANENT

    id: str
    name: str
    cost: int
    effect: PermanentEffect
    description: str = ""


@dataclass(frozen=True)
class SingleUseCard:
    """A consumable card, removed from hand when used."""
    kind: ClassVar[CardKind] = CardKind.SINGLE_USE

    id: str
    name: str
    cost: int
    effect: SingleUseEffect
    description: str = ""


@dataclass(frozen=True)
class PointCard:
    """A card that converts straight into victory points on purchase."""
    kind: ClassVar[CardKind] = CardKind.POINT

    id: str
    name: str
    cost: int
    points: int


Card = Union[PermanentCard, SingleUseCard, PointCard]


@dataclass(frozen=True)
class Player:
    """
    A participant in the gauntlet.

    Attributes:
        id: Stable player identifier
        name: Display name (trimmed)
        gold: Current gold, never negative
        victory_points: Banked victory points (no damage-leader bonus)
        damage_count: Damage committed across the whole game
        permanent_cards: Permanent hand, at most MAX_PERMANENT_CARDS
        single_use_cards: Single-use hand, at most MAX_SINGLE_USE_CARDS
    """
    id: str
    name: str
    gold: int
    victory_points: int = 0
    damage_count: int = 0
    permanent_cards: tuple[PermanentCard, ...] = field(default_factory=tuple)
    single_use_cards: tuple[SingleUseCard, ...] = field(default_factory=tuple)

    @property
    def card_count(self) -> int:
        """Cards held across both hands."""
        return len(self.permanent_cards) + len(self.single_use_cards)


@dataclass(frozen=True)
class Monster:
    """
    A monster in the gauntlet.

    Attributes:
        id: Monster identifier
        name: Display name
        type: Flavor type (BOSS for position 10)
        position: 1-10, the monster's place in the gauntlet
        numbers_to_hit: Point numbers assigned at creation
        remaining_numbers: Numbers not yet crossed off
        points: Victory points awarded on defeat
        gold_reward: Gold awarded on defeat
    """
    id: str
    name: str
    type: MonsterType
    position: int
    numbers_to_hit: tuple[int, ...]
    remaining_numbers: tuple[int, ...]
    points: int
    gold_reward: int

    @property
    def is_defeated(self) -> bool:
        """A monster is defeated exactly when no numbers remain."""
        return len(self.remaining_numbers) == 0


@dataclass(frozen=True)
class Bet:
    """
    A wager on the active shooter. The amount is already debited.

    Attributes:
        player_id: Bettor
        type: FOR or AGAINST the shooter
        amount: Positive whole gold, at most MAX_BET_AMOUNT
    """
    player_id: str
    type: BetType
    amount: int


@dataclass(frozen=True)
class Marketplace:
    """Face-up cards available to buy."""
    cards: tuple[Card, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.cards)


@dataclass(frozen=True)
class TurnState:
    """
    Ephemeral state of the active player's turn.

    Attributes:
        phase: Current turn phase
        active_player_id: Shooter for this turn
        point: Established point, None before the come-out roll sets it
        turn_damage: Hits landed this turn, committed only on defeat
        monster_state_before_turn: Snapshot used for crap-out rollback
        has_used_revive: Revive spent against the current monster
        roll_count: Rolls taken this turn
        pending_decision: Choice the point phase is waiting on
        end_reason: Set once the turn reaches RESOLUTION
        revealed_card_id: Card bought this turn (CARD_REVEAL phase)
    """
    phase: TurnPhase
    active_player_id: str
    point: int | None = None
    turn_damage: int = 0
    monster_state_before_turn: Monster | None = None
    has_used_revive: bool = False
    roll_count: int = 0
    pending_decision: PendingDecision | None = None
    end_reason: TurnEndReason | None = None
    revealed_card_id: str | None = None


@dataclass(frozen=True)
class GameState:
    """
    Aggregate root of a game in progress.

    Attributes:
        players: Seating order, fixed after initialization
        monsters: The ten-monster gauntlet
        current_monster_index: Index of the monster being fought
        current_player_index: Index of the shooter
        turn_state: Ephemeral turn record
        bets: Bets in play this turn, in placement order
        marketplace: Face-up shop cards
        card_deck: Undealt cards
        damage_leader_id: Player holding the damage-leader bonus
        is_game_over: True once a winner (or shared victory) is declared
        winner_id: Single winner, None while playing or on a shared victory
        winner_ids: Every winner; several ids mean a shared victory
    """
    players: tuple[Player, ...]
    monsters: tuple[Monster, ...]
    turn_state: TurnState
    marketplace: Marketplace
    card_deck: tuple[Card, ...]
    current_monster_index: int = 0
    current_player_index: int = 0
    bets: tuple[Bet, ...] = field(default_factory=tuple)
    damage_leader_id: str | None = None
    is_game_over: bool = False
    winner_id: str | None = None
    winner_ids: tuple[str, ...] = field(default_factory=tuple)

    @property
    def active_player(self) -> Player:
        """The shooter."""
        return self.players[self.current_player_index]

    @property
    def current_monster(self) -> Monster:
        """The monster being fought."""
        return self.monsters[self.current_monster_index]

    @property
    def is_last_monster(self) -> bool:
        """True while fighting the final (boss) monster."""
        return self.current_monster_index >= len(self.monsters) - 1


@dataclass(frozen=True)
class ComeOutResult:
    """
    Classification of a come-out roll.

    Attributes:
        outcome: natural, craps or point
        sum: Dice total
        point_value: The established point (POINT outcome only)
    """
    outcome: ComeOutOutcome
    sum: int
    point_value: int | None = None


@dataclass(frozen=True)
class PointPhaseResult:
    """
    Classification of a point-phase roll.

    Attributes:
        outcome: crap_out, point_hit, hit, escape_offered or miss
        sum: Dice total
        point_value: The active point (POINT_HIT outcome only)
        hit_number: Monster number struck (HIT outcome only)
    """
    outcome: PointPhaseOutcome
    sum: int
    point_value: int | None = None
    hit_number: int | None = None
