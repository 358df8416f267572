"""
Craps Gauntlet - Card Deck and Hand

Deck construction from a fixed catalog, Fisher-Yates shuffling, and the
capacity-checked hand operations for permanent and single-use cards.
Point cards never enter a hand.

Catalog (45 cards):
    - 7 permanent templates, 15 copies
    - 6 single-use templates, 10 copies
    - 4 point templates, 20 copies
"""

import itertools
import random
from dataclasses import dataclass, field
from typing import Callable, Sequence, TypeVar

from craps_gauntlet.engine.base import (
    Card,
    CardKind,
    PermanentCard,
    PermanentEffect,
    Player,
    PointCard,
    SingleUseCard,
    SingleUseEffect,
)
from craps_gauntlet.engine.constants import MAX_PERMANENT_CARDS, MAX_SINGLE_USE_CARDS
from craps_gauntlet.engine.errors import FailureReason

T = TypeVar("T")

IdFactory = Callable[[str], str]


@dataclass(frozen=True)
class PermanentCardTemplate:
    name: str
    effect: PermanentEffect
    cost: int
    description: str
    copies: int


@dataclass(frozen=True)
class SingleUseCardTemplate:
    name: str
    effect: SingleUseEffect
    cost: int
    description: str
    copies: int


@dataclass(frozen=True)
class PointCardTemplate:
    name: str
    points: int
    cost: int
    copies: int


PERMANENT_CARD_TEMPLATES = (
    PermanentCardTemplate("+1 Die", PermanentEffect.PLUS_ONE_DIE, 5,
                          "Roll 3 dice and keep the best 2", 2),
    PermanentCardTemplate("Reroll", PermanentEffect.REROLL, 3,
                          "Reroll one die after seeing the result", 3),
    PermanentCardTemplate("Shield", PermanentEffect.SHIELD, 4,
                          "Block one 7 (negate crap-out once per turn)", 2),
    PermanentCardTemplate("Lucky Charm", PermanentEffect.LUCKY, 4,
                          "Guarantee non-7 on next roll", 2),
    PermanentCardTemplate("Armor", PermanentEffect.ARMOR, 3,
                          "Next crap-out doesn't lose gold", 2),
    PermanentCardTemplate("Point Bonus", PermanentEffect.POINT_BONUS, 4,
                          "Point hit removes 2 numbers instead of 1", 2),
    PermanentCardTemplate("Double Strike", PermanentEffect.DOUBLE, 5,
                          "Next monster hit counts as 2 hits", 2),
)

SINGLE_USE_CARD_TEMPLATES = (
    SingleUseCardTemplate("Stun", SingleUseEffect.STUN, 2,
                          "Skip your rolling phase this turn (avoid risky fights)", 2),
    SingleUseCardTemplate("Rapid Fire", SingleUseEffect.RAPID_FIRE, 3,
                          "Roll twice this turn", 2),
    SingleUseCardTemplate("Momentum", SingleUseEffect.MOMENTUM, 3,
                          "After 2 hits, gain +1 die for your next roll", 2),
    SingleUseCardTemplate("Charm", SingleUseEffect.CHARM, 4,
                          "Take 2 consecutive turns", 1),
    SingleUseCardTemplate("Curse", SingleUseEffect.CURSE, 3,
                          "Target player's next roll is treated as 7", 2),
    SingleUseCardTemplate("Heal", SingleUseEffect.HEAL, 2,
                          "Un-cross one number from the current monster", 1),
)

POINT_CARD_TEMPLATES = (
    PointCardTemplate("+1 Point", 1, 2, 8),
    PointCardTemplate("+2 Points", 2, 4, 6),
    PointCardTemplate("+3 Points", 3, 6, 4),
    PointCardTemplate("+5 Points", 5, 10, 2),
)


def make_id_factory() -> IdFactory:
    """Return a fresh counter-backed id generator ('perm-1', 'point-2', ...)."""
    counter = itertools.count(1)

    def next_id(prefix: str) -> str:
        return f"{prefix}-{next(counter)}"

    return next_id


class CardDeck:
    """Stateless deck construction, shuffling and drawing."""

    @classmethod
    def create_card_deck(cls, id_factory: IdFactory | None = None) -> list[Card]:
        """
        Build the full, unshuffled deck in catalog order.

        Args:
            id_factory: Generates card ids from a kind prefix. Each call
                without one gets its own counter, so ids never depend on
                earlier decks.

        Returns:
            Permanent cards, then single-use, then point cards
        """
        next_id = id_factory or make_id_factory()
        deck: list[Card] = []

        for template in PERMANENT_CARD_TEMPLATES:
            for _ in range(template.copies):
                deck.append(PermanentCard(
                    id=next_id("perm"),
                    name=template.name,
                    cost=template.cost,
                    effect=template.effect,
                    description=template.description,
                ))

        for template in SINGLE_USE_CARD_TEMPLATES:
            for _ in range(template.copies):
                deck.append(SingleUseCard(
                    id=next_id("single"),
                    name=template.name,
                    cost=template.cost,
                    effect=template.effect,
                    description=template.description,
                ))

        for template in POINT_CARD_TEMPLATES:
            for _ in range(template.copies):
                deck.append(PointCard(
                    id=next_id("point"),
                    name=template.name,
                    cost=template.cost,
                    points=template.points,
                ))

        return deck

    @classmethod
    def shuffle(cls, items: Sequence[T], rng: random.Random | None = None) -> list[T]:
        """
        Fisher-Yates shuffle into a new list; the input is left as is.

        Args:
            items: Items to shuffle
            rng: Random source (default: the random module)
        """
        source = rng if rng is not None else random
        shuffled = list(items)
        for i in range(len(shuffled) - 1, 0, -1):
            j = source.randint(0, i)
            shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
        return shuffled

    @classmethod
    def create_shuffled_deck(
        cls,
        rng: random.Random | None = None,
        id_factory: IdFactory | None = None
    ) -> list[Card]:
        """Build and shuffle a full deck."""
        return cls.shuffle(cls.create_card_deck(id_factory), rng)

    @classmethod
    def draw_cards(
        cls,
        deck: Sequence[Card],
        count: int
    ) -> tuple[tuple[Card, ...], tuple[Card, ...]]:
        """
        Draw from the top of the deck.

        Returns:
            Tuple of (drawn, remaining); draws fewer if the deck runs out
        """
        return tuple(deck[:count]), tuple(deck[count:])

    @classmethod
    def get_total_card_count(cls) -> int:
        """Size of a full deck."""
        return sum(cls.get_card_counts_by_kind().values())

    @classmethod
    def get_card_counts_by_kind(cls) -> dict[CardKind, int]:
        """Copies per card kind in a full deck."""
        return {
            CardKind.PERMANENT: sum(t.copies for t in PERMANENT_CARD_TEMPLATES),
            CardKind.SINGLE_USE: sum(t.copies for t in SINGLE_USE_CARD_TEMPLATES),
            CardKind.POINT: sum(t.copies for t in POINT_CARD_TEMPLATES),
        }


def is_permanent_card(card: Card) -> bool:
    return card.kind == CardKind.PERMANENT


def is_single_use_card(card: Card) -> bool:
    return card.kind == CardKind.SINGLE_USE


def is_point_card(card: Card) -> bool:
    return card.kind == CardKind.POINT


@dataclass(frozen=True)
class AddCardResult:
    """
    Result of adding or removing a hand card.

    Only the hand that changed is filled in on success.
    """
    success: bool
    permanent_cards: tuple[PermanentCard, ...] | None = None
    single_use_cards: tuple[SingleUseCard, ...] | None = None
    error: str | None = None
    failure: FailureReason | None = None


@dataclass(frozen=True)
class UseCardResult:
    """Result of consuming a single-use card."""
    success: bool
    card: SingleUseCard | None = None
    single_use_cards: tuple[SingleUseCard, ...] | None = None
    error: str | None = None
    failure: FailureReason | None = None


@dataclass(frozen=True)
class DiscardHandResult:
    """Empty hands plus everything that was thrown away."""
    permanent_cards: tuple[PermanentCard, ...] = field(default_factory=tuple)
    single_use_cards: tuple[SingleUseCard, ...] = field(default_factory=tuple)
    discarded_permanent: tuple[PermanentCard, ...] = field(default_factory=tuple)
    discarded_single_use: tuple[SingleUseCard, ...] = field(default_factory=tuple)


class CardHand:
    """
    Stateless hand management.

    Every operation returns new hand tuples; the player is never modified.
    """

    @classmethod
    def can_hold_permanent(cls, player: Player) -> bool:
        return len(player.permanent_cards) < MAX_PERMANENT_CARDS

    @classmethod
    def can_hold_single_use(cls, player: Player) -> bool:
        return len(player.single_use_cards) < MAX_SINGLE_USE_CARDS

    @classmethod
    def get_remaining_permanent_slots(cls, player: Player) -> int:
        return MAX_PERMANENT_CARDS - len(player.permanent_cards)

    @classmethod
    def get_remaining_single_use_slots(cls, player: Player) -> int:
        return MAX_SINGLE_USE_CARDS - len(player.single_use_cards)

    @classmethod
    def add_permanent_card(cls, player: Player, card: PermanentCard) -> AddCardResult:
        """
        Append a permanent card to the player's hand.

        Fails with HAND_FULL at capacity, DUPLICATE_CARD if the id is
        already held.
        """
        if not cls.can_hold_permanent(player):
            return AddCardResult(
                success=False,
                error=(
                    "Cannot add permanent card. Player already has "
                    f"maximum ({MAX_PERMANENT_CARDS})."
                ),
                failure=FailureReason.HAND_FULL,
            )

        if any(c.id == card.id for c in player.permanent_cards):
            return AddCardResult(
                success=False,
                error="Cannot add duplicate card (same ID already in hand).",
                failure=FailureReason.DUPLICATE_CARD,
            )

        return AddCardResult(
            success=True,
            permanent_cards=player.permanent_cards + (card,),
        )

    @classmethod
    def add_single_use_card(cls, player: Player, card: SingleUseCard) -> AddCardResult:
        """
        Append a single-use card to the player's hand.

        Fails with HAND_FULL at capacity, DUPLICATE_CARD if the id is
        already held.
        """
        if not cls.can_hold_single_use(player):
            return AddCardResult(
                success=False,
                error=(
                    "Cannot add single-use card. Player already has "
                    f"maximum ({MAX_SINGLE_USE_CARDS})."
                ),
                failure=FailureReason.HAND_FULL,
            )

        if any(c.id == card.id for c in player.single_use_cards):
            return AddCardResult(
                success=False,
                error="Cannot add duplicate card (same ID already in hand).",
                failure=FailureReason.DUPLICATE_CARD,
            )

        return AddCardResult(
            success=True,
            single_use_cards=player.single_use_cards + (card,),
        )

    @classmethod
    def use_single_use_card(cls, player: Player, card_id: str) -> UseCardResult:
        """Consume a single-use card, returning it and the remaining hand."""
        card = cls.find_single_use_card(player, card_id)
        if card is None:
            return UseCardResult(
                success=False,
                error=f'Card with ID "{card_id}" not found in player\'s hand.',
                failure=FailureReason.CARD_NOT_FOUND,
            )

        return UseCardResult(
            success=True,
            card=card,
            single_use_cards=tuple(c for c in player.single_use_cards if c.id != card_id),
        )

    @classmethod
    def remove_permanent_card(cls, player: Player, card_id: str) -> AddCardResult:
        """Strip a permanent card from the player's hand."""
        if cls.find_permanent_card(player, card_id) is None:
            return AddCardResult(
                success=False,
                error=f'Permanent card with ID "{card_id}" not found in player\'s hand.',
                failure=FailureReason.CARD_NOT_FOUND,
            )

        return AddCardResult(
            success=True,
            permanent_cards=tuple(c for c in player.permanent_cards if c.id != card_id),
        )

    @classmethod
    def discard_hand(cls, player: Player) -> DiscardHandResult:
        """Throw away every card in both hands (the revive cost)."""
        return DiscardHandResult(
            discarded_permanent=player.permanent_cards,
            discarded_single_use=player.single_use_cards,
        )

    @classmethod
    def discard_single_use_cards(
        cls,
        player: Player
    ) -> tuple[tuple[SingleUseCard, ...], tuple[SingleUseCard, ...]]:
        """
        Throw away single-use cards only.

        Returns:
            Tuple of (new single-use hand, discarded cards)
        """
        return tuple(), player.single_use_cards

    @classmethod
    def find_permanent_card(cls, player: Player, card_id: str) -> PermanentCard | None:
        return next((c for c in player.permanent_cards if c.id == card_id), None)

    @classmethod
    def find_single_use_card(cls, player: Player, card_id: str) -> SingleUseCard | None:
        return next((c for c in player.single_use_cards if c.id == card_id), None)

    @classmethod
    def has_permanent_effect(cls, player: Player, effect: PermanentEffect) -> bool:
        return any(c.effect == effect for c in player.permanent_cards)

    @classmethod
    def has_single_use_effect(cls, player: Player, effect: SingleUseEffect) -> bool:
        return any(c.effect == effect for c in player.single_use_cards)

    @classmethod
    def get_permanent_cards_with_effect(
        cls,
        player: Player,
        effect: PermanentEffect
    ) -> tuple[PermanentCard, ...]:
        return tuple(c for c in player.permanent_cards if c.effect == effect)

    @classmethod
    def get_single_use_cards_with_effect(
        cls,
        player: Player,
        effect: SingleUseEffect
    ) -> tuple[SingleUseCard, ...]:
        return tuple(c for c in player.single_use_cards if c.effect == effect)

    @classmethod
    def get_total_hand_count(cls, player: Player) -> int:
        return player.card_count

    @classmethod
    def is_hand_empty(cls, player: Player) -> bool:
        return player.card_count == 0
