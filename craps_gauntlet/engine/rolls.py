"""
Craps Gauntlet - Roll Evaluation

Classifies a two-dice total into a come-out or point-phase outcome.

Come-out roll:
    - Natural (7, 11): the shooter defeats the monster outright
    - Craps (2, 3, 12): the turn ends, monster untouched
    - Point (4, 5, 6, 8, 9, 10): establishes the point

Point phase, checked in priority order:
    1. Crap-out (7)
    2. Point hit (total == point)
    3. Monster hit (total in remaining numbers)
    4. Escape offered (2)
    5. Miss
A 2 that is still on the monster is therefore a hit, not an escape.
"""

from typing import Iterable

from craps_gauntlet.engine.base import (
    ComeOutOutcome,
    ComeOutResult,
    PointPhaseOutcome,
    PointPhaseResult,
)
from craps_gauntlet.engine.dice import DiceEngine
from craps_gauntlet.engine.errors import DomainInvariantViolation
from craps_gauntlet.engine.validators import validate_dice_sum, validate_point_value


class RollEvaluator:
    """Stateless classification of come-out and point-phase rolls."""

    @classmethod
    def evaluate_come_out_roll(cls, total: int) -> ComeOutResult:
        """
        Evaluate a come-out roll.

        Args:
            total: Sum of the two dice

        Returns:
            ComeOutResult (natural, craps, or point with its value)

        Raises:
            DomainInvariantViolation: If total is outside 2-12
        """
        validate_dice_sum(total)

        if DiceEngine.is_natural(total):
            return ComeOutResult(outcome=ComeOutOutcome.NATURAL, sum=total)

        if DiceEngine.is_craps(total):
            return ComeOutResult(outcome=ComeOutOutcome.CRAPS, sum=total)

        if DiceEngine.is_point(total):
            return ComeOutResult(
                outcome=ComeOutOutcome.POINT,
                sum=total,
                point_value=total,
            )

        raise DomainInvariantViolation(f"Unexpected dice sum: {total}")

    @classmethod
    def evaluate_point_phase_roll(
        cls,
        total: int,
        point: int,
        monster_numbers: Iterable[int]
    ) -> PointPhaseResult:
        """
        Evaluate a point-phase roll.

        Args:
            total: Sum of the two dice
            point: The established point
            monster_numbers: The current monster's remaining numbers

        Returns:
            PointPhaseResult for the highest-priority matching outcome

        Raises:
            DomainInvariantViolation: If total or point is invalid
        """
        validate_dice_sum(total)
        validate_point_value(point)
        remaining = tuple(monster_numbers)

        if DiceEngine.is_crap_out(total):
            return PointPhaseResult(outcome=PointPhaseOutcome.CRAP_OUT, sum=total)

        if DiceEngine.is_point_hit(total, point):
            return PointPhaseResult(
                outcome=PointPhaseOutcome.POINT_HIT,
                sum=total,
                point_value=point,
            )

        if DiceEngine.is_monster_hit(total, remaining):
            return PointPhaseResult(
                outcome=PointPhaseOutcome.HIT,
                sum=total,
                hit_number=total,
            )

        # After the hit check: a 2 still on the monster is a hit
        if DiceEngine.is_escape_roll(total):
            return PointPhaseResult(outcome=PointPhaseOutcome.ESCAPE_OFFERED, sum=total)

        return PointPhaseResult(outcome=PointPhaseOutcome.MISS, sum=total)

    @classmethod
    def describe_come_out_result(cls, result: ComeOutResult) -> str:
        """Human-readable summary of a come-out roll."""
        if result.outcome == ComeOutOutcome.NATURAL:
            return f"Natural {result.sum}! Instant win!"
        if result.outcome == ComeOutOutcome.CRAPS:
            return f"Craps {result.sum}! Turn ends."
        return f"Point established: {result.point_value}"

    @classmethod
    def describe_point_phase_result(cls, result: PointPhaseResult) -> str:
        """Human-readable summary of a point-phase roll."""
        if result.outcome == PointPhaseOutcome.CRAP_OUT:
            return "Crap out! Seven rolled - turn ends with penalty."
        if result.outcome == PointPhaseOutcome.POINT_HIT:
            return f"Point {result.point_value} hit! Choose a number to remove."
        if result.outcome == PointPhaseOutcome.HIT:
            return f"Hit! Rolled {result.hit_number} - damage dealt to monster."
        if result.outcome == PointPhaseOutcome.ESCAPE_OFFERED:
            return "Snake eyes! You may escape or continue."
        return f"Rolled {result.sum} - no effect. Continue rolling."

    @classmethod
    def is_turn_ending(cls, result: PointPhaseResult) -> bool:
        """Crap-out and point hit interrupt normal rolling."""
        return result.outcome in (PointPhaseOutcome.CRAP_OUT, PointPhaseOutcome.POINT_HIT)

    @classmethod
    def is_positive_outcome(cls, result: PointPhaseResult) -> bool:
        """Point hits and monster hits help the shooter."""
        return result.outcome in (PointPhaseOutcome.POINT_HIT, PointPhaseOutcome.HIT)
