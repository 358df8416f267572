"""
Craps Gauntlet - Gold Ledger

Pure gold transactions. Nothing here touches a Player: every function
returns a GoldTransactionResult describing the new balance, and the caller
commits it into the game state.
"""

from dataclasses import dataclass

from craps_gauntlet.engine.base import Player
from craps_gauntlet.engine.constants import CRAP_OUT_GOLD_PENALTY_PERCENT
from craps_gauntlet.engine.errors import FailureReason


@dataclass(frozen=True)
class GoldTransactionResult:
    """
    Outcome of a single gold change.

    Attributes:
        success: Whether the change may be applied
        new_gold: Balance after the change (unchanged on failure)
        amount_changed: Gold moved, always non-negative
        error: Human-readable failure message
        failure: Typed failure reason
    """
    success: bool
    new_gold: int
    amount_changed: int
    error: str | None = None
    failure: FailureReason | None = None


@dataclass(frozen=True)
class GoldTransferResult:
    """Both sides of a transfer. On failure the receiver is untouched."""
    success: bool
    from_result: GoldTransactionResult
    to_result: GoldTransactionResult


class GoldLedger:
    """Stateless gold arithmetic with insufficient-funds checks."""

    @classmethod
    def add_gold(cls, player: Player, amount: int) -> GoldTransactionResult:
        """
        Add gold to a player.

        Args:
            player: The player receiving gold
            amount: Gold to add (must not be negative)

        Returns:
            Transaction result with the new balance
        """
        if amount < 0:
            return GoldTransactionResult(
                success=False,
                new_gold=player.gold,
                amount_changed=0,
                error="Cannot add negative gold. Use remove_gold instead.",
                failure=FailureReason.NEGATIVE_AMOUNT,
            )

        return GoldTransactionResult(
            success=True,
            new_gold=player.gold + amount,
            amount_changed=amount,
        )

    @classmethod
    def remove_gold(cls, player: Player, amount: int) -> GoldTransactionResult:
        """
        Remove gold from a player.

        Args:
            player: The player losing gold
            amount: Gold to remove (must not be negative or exceed the balance)

        Returns:
            Transaction result with the new balance
        """
        if amount < 0:
            return GoldTransactionResult(
                success=False,
                new_gold=player.gold,
                amount_changed=0,
                error="Cannot remove negative gold. Use add_gold instead.",
                failure=FailureReason.NEGATIVE_AMOUNT,
            )

        if player.gold < amount:
            return GoldTransactionResult(
                success=False,
                new_gold=player.gold,
                amount_changed=0,
                error=f"Insufficient gold. Player has {player.gold} but needs {amount}.",
                failure=FailureReason.INSUFFICIENT_FUNDS,
            )

        return GoldTransactionResult(
            success=True,
            new_gold=player.gold - amount,
            amount_changed=amount,
        )

    @classmethod
    def calculate_crap_out_loss(cls, current_gold: int) -> int:
        """Gold lost on a crap-out: half, rounded down."""
        return current_gold * CRAP_OUT_GOLD_PENALTY_PERCENT // 100

    @classmethod
    def apply_crap_out_penalty(cls, player: Player) -> GoldTransactionResult:
        """Halve the player's gold. Always succeeds, even at zero."""
        loss = cls.calculate_crap_out_loss(player.gold)
        return GoldTransactionResult(
            success=True,
            new_gold=player.gold - loss,
            amount_changed=loss,
        )

    @classmethod
    def transfer_gold(
        cls,
        from_player: Player,
        to_player: Player,
        amount: int
    ) -> GoldTransferResult:
        """
        Move gold between players, all or nothing.

        Returns:
            GoldTransferResult; when the debit fails the receiver's
            result is a failure that leaves their balance as it was
        """
        from_result = cls.remove_gold(from_player, amount)

        if not from_result.success:
            return GoldTransferResult(
                success=False,
                from_result=from_result,
                to_result=GoldTransactionResult(
                    success=False,
                    new_gold=to_player.gold,
                    amount_changed=0,
                    error="Transfer failed due to insufficient sender gold.",
                    failure=from_result.failure,
                ),
            )

        return GoldTransferResult(
            success=True,
            from_result=from_result,
            to_result=cls.add_gold(to_player, amount),
        )

    @classmethod
    def can_afford(cls, player: Player, cost: int) -> bool:
        """True if the player holds at least `cost` gold."""
        return player.gold >= cost

    @classmethod
    def is_valid_gold_amount(cls, amount: object) -> bool:
        """Non-negative whole number (bools excluded)."""
        return isinstance(amount, int) and not isinstance(amount, bool) and amount >= 0

    @classmethod
    def format_gold_change(cls, amount: int) -> str:
        """Signed display string, e.g. '+5' or '-3'."""
        if amount >= 0:
            return f"+{amount}"
        return str(amount)
