"""
Craps Gauntlet - Marketplace

A fixed-size window of face-up cards drawn from the deck. The active
player may pay to refresh it (all shop cards go back into the deck, the
deck is reshuffled and a new window is dealt) and buy cards from it.

Purchases route by card kind: permanent and single-use cards enter the
matching hand, point cards turn straight into victory points.
"""

import random
from dataclasses import dataclass, replace
from typing import Sequence

from craps_gauntlet.engine.base import Card, CardKind, Marketplace, Player
from craps_gauntlet.engine.cards import CardDeck, CardHand
from craps_gauntlet.engine.constants import (
    MARKETPLACE_LOW_THRESHOLD,
    MARKETPLACE_REFRESH_COST,
    MARKETPLACE_SIZE,
)
from craps_gauntlet.engine.errors import FailureReason
from craps_gauntlet.engine.gold import GoldLedger

# Type-then-cost sort order
_KIND_ORDER = {CardKind.PERMANENT: 0, CardKind.SINGLE_USE: 1, CardKind.POINT: 2}


@dataclass(frozen=True)
class RefreshValidationResult:
    """Whether the player can pay for a refresh."""
    success: bool
    cost: int
    current_gold: int
    error: str | None = None
    failure: FailureReason | None = None


@dataclass(frozen=True)
class PurchaseValidationResult:
    """
    Whether a card can be bought.

    Attributes:
        success: All checks passed
        card: The marketplace card, if it exists
        can_hold: Hand has room (always True for point cards)
        can_afford_card: Player has the gold
        error: Human-readable failure message
        failure: CARD_NOT_FOUND, NOT_ENOUGH_GOLD, HAND_FULL or DUPLICATE_CARD
    """
    success: bool
    card: Card | None = None
    can_hold: bool | None = None
    can_afford_card: bool | None = None
    error: str | None = None
    failure: FailureReason | None = None


@dataclass(frozen=True)
class PurchaseResult:
    """Outcome of a completed (or rejected) purchase."""
    success: bool
    player: Player
    marketplace: Marketplace
    card: Card | None = None
    error: str | None = None
    failure: FailureReason | None = None


@dataclass(frozen=True)
class CardPlacement:
    """Where a card landed when given to a player."""
    player: Player
    placed: bool
    points_gained: int = 0


@dataclass(frozen=True)
class DrawResult:
    """
    Outcome of drawing the top deck card as a reward.

    Attributes:
        player: The player after the draw
        deck: Deck after the draw
        card: Card drawn, None when the deck was empty
        placed: False when the card went back under the deck
    """
    player: Player
    deck: tuple[Card, ...]
    card: Card | None = None
    placed: bool = False


class MarketplaceEngine:
    """Stateless shop validation, refresh and purchase."""

    REFRESH_COST = MARKETPLACE_REFRESH_COST
    SIZE = MARKETPLACE_SIZE

    @classmethod
    def create_marketplace(
        cls,
        deck: Sequence[Card]
    ) -> tuple[Marketplace, tuple[Card, ...]]:
        """
        Deal the opening window.

        Returns:
            Tuple of (marketplace, remaining deck)
        """
        drawn, remaining = CardDeck.draw_cards(deck, cls.SIZE)
        return Marketplace(cards=drawn), remaining

    @classmethod
    def can_refresh_marketplace(cls, player: Player) -> RefreshValidationResult:
        """Affordability check against the refresh cost."""
        if not GoldLedger.can_afford(player, cls.REFRESH_COST):
            return RefreshValidationResult(
                success=False,
                cost=cls.REFRESH_COST,
                current_gold=player.gold,
                error=(
                    f"Not enough gold. Refresh costs {cls.REFRESH_COST}, "
                    f"you have {player.gold}."
                ),
                failure=FailureReason.NOT_ENOUGH_GOLD,
            )

        return RefreshValidationResult(
            success=True,
            cost=cls.REFRESH_COST,
            current_gold=player.gold,
        )

    @classmethod
    def refresh_marketplace(
        cls,
        marketplace: Marketplace,
        deck: Sequence[Card],
        rng: random.Random | None = None
    ) -> tuple[Marketplace, tuple[Card, ...]]:
        """
        Return the shop cards to the deck, reshuffle everything, redeal.

        Payment is handled by the caller.

        Returns:
            Tuple of (new marketplace, new deck)
        """
        pool = CardDeck.shuffle(tuple(deck) + marketplace.cards, rng)
        return cls.create_marketplace(pool)

    @classmethod
    def validate_card_purchase(
        cls,
        player: Player,
        marketplace: Marketplace,
        card_id: str
    ) -> PurchaseValidationResult:
        """
        Check existence, then affordability, then hand capacity, then
        that the same card id is not already held.

        Point cards skip the capacity check; they never enter a hand.
        """
        card = cls.get_marketplace_card(marketplace, card_id)

        if card is None:
            return PurchaseValidationResult(
                success=False,
                error="Card not found in marketplace.",
                failure=FailureReason.CARD_NOT_FOUND,
            )

        if not GoldLedger.can_afford(player, card.cost):
            return PurchaseValidationResult(
                success=False,
                card=card,
                can_hold=True,
                can_afford_card=False,
                error=f"Not enough gold. Card costs {card.cost}, you have {player.gold}.",
                failure=FailureReason.NOT_ENOUGH_GOLD,
            )

        if card.kind == CardKind.PERMANENT and not CardHand.can_hold_permanent(player):
            return PurchaseValidationResult(
                success=False,
                card=card,
                can_hold=False,
                can_afford_card=True,
                error="Cannot hold more permanent cards. Max limit reached.",
                failure=FailureReason.HAND_FULL,
            )

        if card.kind == CardKind.SINGLE_USE and not CardHand.can_hold_single_use(player):
            return PurchaseValidationResult(
                success=False,
                card=card,
                can_hold=False,
                can_afford_card=True,
                error="Cannot hold more single-use cards. Max limit reached.",
                failure=FailureReason.HAND_FULL,
            )

        if cls._holds_card(player, card):
            return PurchaseValidationResult(
                success=False,
                card=card,
                can_hold=False,
                can_afford_card=True,
                error=f"{card.name} ({card.id}) is already in hand.",
                failure=FailureReason.DUPLICATE_CARD,
            )

        return PurchaseValidationResult(
            success=True,
            card=card,
            can_hold=True,
            can_afford_card=True,
        )

    @classmethod
    def _holds_card(cls, player: Player, card: Card) -> bool:
        if card.kind == CardKind.PERMANENT:
            return CardHand.find_permanent_card(player, card.id) is not None
        if card.kind == CardKind.SINGLE_USE:
            return CardHand.find_single_use_card(player, card.id) is not None
        return False

    @classmethod
    def give_card(cls, player: Player, card: Card) -> CardPlacement:
        """
        Route a card into the player's holdings without charging for it.

        Returns:
            CardPlacement; placed is False when the matching hand is full
        """
        if card.kind == CardKind.POINT:
            return CardPlacement(
                player=replace(player, victory_points=player.victory_points + card.points),
                placed=True,
                points_gained=card.points,
            )

        if card.kind == CardKind.PERMANENT:
            result = CardHand.add_permanent_card(player, card)
            if not result.success:
                return CardPlacement(player=player, placed=False)
            return CardPlacement(
                player=replace(player, permanent_cards=result.permanent_cards),
                placed=True,
            )

        result = CardHand.add_single_use_card(player, card)
        if not result.success:
            return CardPlacement(player=player, placed=False)
        return CardPlacement(
            player=replace(player, single_use_cards=result.single_use_cards),
            placed=True,
        )

    @classmethod
    def draw_card_for_player(cls, player: Player, deck: Sequence[Card]) -> DrawResult:
        """
        Give the top deck card to a player for free.

        A card whose hand is full goes to the bottom of the deck; an empty
        deck draws nothing.
        """
        if not deck:
            return DrawResult(player=player, deck=tuple())

        (card,), remaining = CardDeck.draw_cards(deck, 1)
        placement = cls.give_card(player, card)
        if not placement.placed:
            return DrawResult(player=player, deck=remaining + (card,), card=card)

        return DrawResult(player=placement.player, deck=remaining, card=card, placed=True)

    @classmethod
    def purchase_card(
        cls,
        player: Player,
        marketplace: Marketplace,
        card_id: str
    ) -> PurchaseResult:
        """
        Buy a card: remove it from the shop, debit the cost, route it.

        Nothing changes when validation fails.
        """
        validation = cls.validate_card_purchase(player, marketplace, card_id)
        if not validation.success:
            return PurchaseResult(
                success=False,
                player=player,
                marketplace=marketplace,
                card=validation.card,
                error=validation.error,
                failure=validation.failure,
            )

        card = validation.card
        debit = GoldLedger.remove_gold(player, card.cost)
        placement = cls.give_card(replace(player, gold=debit.new_gold), card)
        if not placement.placed:
            return PurchaseResult(
                success=False,
                player=player,
                marketplace=marketplace,
                card=card,
                error=f"{card.name} could not be added to the hand.",
                failure=FailureReason.HAND_FULL,
            )

        return PurchaseResult(
            success=True,
            player=placement.player,
            marketplace=Marketplace(
                cards=tuple(c for c in marketplace.cards if c.id != card_id)
            ),
            card=card,
        )

    @classmethod
    def get_marketplace_card(cls, marketplace: Marketplace, card_id: str) -> Card | None:
        return next((c for c in marketplace.cards if c.id == card_id), None)

    @classmethod
    def get_affordable_cards(cls, player: Player, marketplace: Marketplace) -> tuple[Card, ...]:
        """Cards the player could buy right now (gold and hand room)."""
        return tuple(
            card for card in marketplace.cards
            if cls.validate_card_purchase(player, marketplace, card.id).success
        )

    @classmethod
    def get_marketplace_by_type(cls, marketplace: Marketplace) -> dict[CardKind, tuple[Card, ...]]:
        """Shop cards grouped by kind, keeping shop order within a group."""
        return {
            kind: tuple(c for c in marketplace.cards if c.kind == kind)
            for kind in CardKind
        }

    @classmethod
    def is_marketplace_low(
        cls,
        marketplace: Marketplace,
        threshold: int = MARKETPLACE_LOW_THRESHOLD
    ) -> bool:
        return len(marketplace.cards) < threshold

    @classmethod
    def is_marketplace_full(cls, marketplace: Marketplace) -> bool:
        return len(marketplace.cards) >= cls.SIZE

    @classmethod
    def sort_cards_by_cost(cls, cards: Sequence[Card], ascending: bool = True) -> list[Card]:
        return sorted(cards, key=lambda c: c.cost, reverse=not ascending)

    @classmethod
    def sort_cards_by_type_and_cost(cls, cards: Sequence[Card]) -> list[Card]:
        """Permanent < single-use < point, then ascending cost."""
        return sorted(cards, key=lambda c: (_KIND_ORDER[c.kind], c.cost))
