"""
Craps Gauntlet - Betting Engine

Non-shooting players may bet FOR or AGAINST the shooter. A bet's amount is
debited when it is placed; settlement only says how much gold each bettor
gets back (goldChange), in the same order as the bet list.

Settlement table:
    Event               FOR                     AGAINST
    natural             returned                returned
    come-out craps      lost                    doubled
    point-phase hit     +1 flat per hit         (no entry)
    monster defeated    returned                lost to shooter
    crap-out            lost                    doubled
    escape              returned                returned
"""

from dataclasses import dataclass
from typing import Sequence

from craps_gauntlet.engine.base import Bet, BetType, Player
from craps_gauntlet.engine.constants import MAX_BET_AMOUNT, POINT_PHASE_HIT_BONUS
from craps_gauntlet.engine.errors import FailureReason
from craps_gauntlet.engine.gold import GoldLedger


@dataclass(frozen=True)
class BetValidationResult:
    success: bool
    error: str | None = None
    failure: FailureReason | None = None


@dataclass(frozen=True)
class BetResolutionResult:
    """
    Settlement of one bet.

    Attributes:
        player_id: Bettor
        original_bet: The bet being settled
        gold_change: Gold credited back to the bettor (never negative)
        reason: Human-readable explanation
    """
    player_id: str
    original_bet: Bet
    gold_change: int
    reason: str


@dataclass(frozen=True)
class BetSummary:
    """Totals for display."""
    for_bets: tuple[Bet, ...]
    against_bets: tuple[Bet, ...]
    total_for: int
    total_against: int
    total_bettors: int


class BettingEngine:
    """Stateless bet validation and settlement."""

    MAX_BET = MAX_BET_AMOUNT

    @classmethod
    def validate_bet(
        cls,
        player: Player,
        bet_type: BetType,
        amount: int | float,
        active_player_id: str,
        existing_bets: Sequence[Bet]
    ) -> BetValidationResult:
        """
        Check a bet, first failure wins.

        Order: not the shooter, positive, whole number, within the cap,
        affordable, no earlier bet this turn.
        """
        if player.id == active_player_id:
            return BetValidationResult(
                success=False,
                error="You cannot bet on your own turn.",
                failure=FailureReason.SELF_BET,
            )

        if amount <= 0:
            return BetValidationResult(
                success=False,
                error="Bet amount must be greater than 0.",
                failure=FailureReason.INVALID_AMOUNT,
            )

        if not float(amount).is_integer():
            return BetValidationResult(
                success=False,
                error="Bet amount must be a whole number.",
                failure=FailureReason.NON_INTEGER_AMOUNT,
            )

        if amount > cls.MAX_BET:
            return BetValidationResult(
                success=False,
                error=f"Maximum bet is {cls.MAX_BET} gold.",
                failure=FailureReason.BET_LIMIT_EXCEEDED,
            )

        if not GoldLedger.can_afford(player, amount):
            return BetValidationResult(
                success=False,
                error=f"Not enough gold. You have {player.gold}, trying to bet {int(amount)}.",
                failure=FailureReason.NOT_ENOUGH_GOLD,
            )

        if cls.has_player_bet(existing_bets, player.id):
            return BetValidationResult(
                success=False,
                error="You have already placed a bet this turn.",
                failure=FailureReason.ALREADY_BET,
            )

        return BetValidationResult(success=True)

    @classmethod
    def create_bet(cls, player_id: str, bet_type: BetType, amount: int | float) -> Bet:
        return Bet(player_id=player_id, type=bet_type, amount=int(amount))

    @classmethod
    def get_bet_summary(cls, bets: Sequence[Bet]) -> BetSummary:
        for_bets = cls.get_bets_by_type(bets, BetType.FOR)
        against_bets = cls.get_bets_by_type(bets, BetType.AGAINST)
        return BetSummary(
            for_bets=for_bets,
            against_bets=against_bets,
            total_for=sum(b.amount for b in for_bets),
            total_against=sum(b.amount for b in against_bets),
            total_bettors=len(bets),
        )

    @classmethod
    def get_bets_by_type(cls, bets: Sequence[Bet], bet_type: BetType) -> tuple[Bet, ...]:
        return tuple(b for b in bets if b.type == bet_type)

    @classmethod
    def get_player_bet(cls, bets: Sequence[Bet], player_id: str) -> Bet | None:
        return next((b for b in bets if b.player_id == player_id), None)

    @classmethod
    def has_player_bet(cls, bets: Sequence[Bet], player_id: str) -> bool:
        return any(b.player_id == player_id for b in bets)

    @classmethod
    def process_come_out_natural(cls, bets: Sequence[Bet]) -> list[BetResolutionResult]:
        """Natural: every bet comes back."""
        return [
            BetResolutionResult(
                player_id=bet.player_id,
                original_bet=bet,
                gold_change=bet.amount,
                reason="Natural rolled - bet returned",
            )
            for bet in bets
        ]

    @classmethod
    def process_come_out_craps(cls, bets: Sequence[Bet]) -> list[BetResolutionResult]:
        """Craps: FOR loses, AGAINST is paid double."""
        results = []
        for bet in bets:
            if bet.type == BetType.FOR:
                results.append(BetResolutionResult(
                    player_id=bet.player_id,
                    original_bet=bet,
                    gold_change=0,
                    reason="Craps rolled - FOR bet lost",
                ))
            else:
                results.append(BetResolutionResult(
                    player_id=bet.player_id,
                    original_bet=bet,
                    gold_change=bet.amount * 2,
                    reason="Craps rolled - AGAINST bet doubled",
                ))
        return results

    @classmethod
    def process_point_phase_hit(cls, bets: Sequence[Bet]) -> list[BetResolutionResult]:
        """A hit pays every FOR bettor a flat bonus; AGAINST gets no entry."""
        return [
            BetResolutionResult(
                player_id=bet.player_id,
                original_bet=bet,
                gold_change=POINT_PHASE_HIT_BONUS,
                reason=f"Monster hit - FOR bettor gains +{POINT_PHASE_HIT_BONUS}",
            )
            for bet in cls.get_bets_by_type(bets, BetType.FOR)
        ]

    @classmethod
    def process_monster_defeated(
        cls,
        bets: Sequence[Bet],
        hits_count: int = 0
    ) -> list[BetResolutionResult]:
        """
        Monster defeated: FOR bets come back, AGAINST bets go to the shooter.

        Per-hit bonuses were already paid as they landed and are not
        repeated here. The shooter's share is calculate_shooter_winnings.
        """
        results = []
        for bet in bets:
            if bet.type == BetType.FOR:
                results.append(BetResolutionResult(
                    player_id=bet.player_id,
                    original_bet=bet,
                    gold_change=bet.amount,
                    reason=(
                        "Monster defeated - FOR bet returned "
                        f"(already earned {hits_count} from hits)"
                    ),
                ))
            else:
                results.append(BetResolutionResult(
                    player_id=bet.player_id,
                    original_bet=bet,
                    gold_change=0,
                    reason="Monster defeated - AGAINST bet lost to shooter",
                ))
        return results

    @classmethod
    def calculate_shooter_winnings(cls, bets: Sequence[Bet]) -> int:
        """AGAINST pool the shooter collects on a defeat."""
        return sum(b.amount for b in cls.get_bets_by_type(bets, BetType.AGAINST))

    @classmethod
    def process_crap_out(cls, bets: Sequence[Bet]) -> list[BetResolutionResult]:
        """Point-phase 7: FOR loses, AGAINST is paid double."""
        results = []
        for bet in bets:
            if bet.type == BetType.FOR:
                results.append(BetResolutionResult(
                    player_id=bet.player_id,
                    original_bet=bet,
                    gold_change=0,
                    reason="Shooter crapped out - FOR bet lost",
                ))
            else:
                results.append(BetResolutionResult(
                    player_id=bet.player_id,
                    original_bet=bet,
                    gold_change=bet.amount * 2,
                    reason="Shooter crapped out - AGAINST bet doubled",
                ))
        return results

    @classmethod
    def process_escape(cls, bets: Sequence[Bet]) -> list[BetResolutionResult]:
        """Escape: every bet comes back."""
        return [
            BetResolutionResult(
                player_id=bet.player_id,
                original_bet=bet,
                gold_change=bet.amount,
                reason="Shooter escaped - bet returned",
            )
            for bet in bets
        ]

    @classmethod
    def format_bet_display(cls, bet: Bet, player_name: str) -> str:
        return f"{player_name} bets {bet.amount}g {bet.type.value}"
