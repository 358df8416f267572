"""
Craps Gauntlet - Error Types

Programming errors are raised as ValueError subclasses. Recoverable
failures (not enough gold, full hand, bad bet) are never raised: engines
return a result descriptor carrying a FailureReason instead.
"""

from dataclasses import dataclass
from enum import Enum


class FailureReason(Enum):
    """Typed reason attached to a failed result descriptor."""
    NEGATIVE_AMOUNT = "negative_amount"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    HAND_FULL = "hand_full"
    DUPLICATE_CARD = "duplicate_card"
    CARD_NOT_FOUND = "card_not_found"
    NOT_ENOUGH_GOLD = "not_enough_gold"
    SELF_BET = "self_bet"
    INVALID_AMOUNT = "invalid_amount"
    NON_INTEGER_AMOUNT = "non_integer_amount"
    BET_LIMIT_EXCEEDED = "bet_limit_exceeded"
    ALREADY_BET = "already_bet"


class DomainInvariantViolation(ValueError):
    """Raised when a caller breaks a rule that correct usage never reaches."""


@dataclass(frozen=True)
class ValidationIssue:
    """
    A single user-facing validation problem.

    Attributes:
        message: Human-readable description
        player_index: Index of the offending player name, if any
    """
    message: str
    player_index: int | None = None


class GameSetupError(ValueError):
    """Raised when a game cannot be created from the given player names."""

    def __init__(self, errors: tuple[ValidationIssue, ...]) -> None:
        self.errors = errors
        super().__init__("; ".join(issue.message for issue in errors))
