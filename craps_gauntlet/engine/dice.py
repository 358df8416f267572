"""
Craps Gauntlet - Dice Engine

Rolls two D6 and classifies the total in craps terms. All methods are
stateless class methods. The random source is injectable so tests (and
replays) can pass a seeded random.Random or skip rolling entirely by
handing a DiceRoll to the turn engine.

Craps numbers:
    - Natural: 7 or 11
    - Craps: 2, 3 or 12
    - Point: 4, 5, 6, 8, 9 or 10
    - Crap-out (point phase): 7
    - Escape roll (point phase): 2
"""

import random
from typing import Iterable

from craps_gauntlet.engine.base import DiceRoll, DiceType
from craps_gauntlet.engine.constants import (
    CRAP_OUT_NUMBER,
    CRAPS_NUMBERS,
    DEFAULT_DICE_COUNT,
    DICE_SIDES,
    ESCAPE_NUMBER,
    NATURAL_NUMBERS,
    POINT_NUMBERS,
)
from craps_gauntlet.engine.validators import validate_dice_sum


class DiceEngine:
    """
    Stateless dice roller and craps classifier.

    Classifiers take the total of exactly two dice and raise
    DomainInvariantViolation for totals outside 2-12.
    """

    NUM_DICE = DEFAULT_DICE_COUNT
    DICE_TYPE = DiceType.D6

    # Ways to roll each total with 2d6
    COMBINATIONS = {
        2: 1, 3: 2, 4: 3, 5: 4, 6: 5, 7: 6,
        8: 5, 9: 4, 10: 3, 11: 2, 12: 1,
    }

    @classmethod
    def roll_dice(
        cls,
        count: int = NUM_DICE,
        rng: random.Random | None = None
    ) -> DiceRoll:
        """
        Roll the specified number of D6 dice.

        Args:
            count: Number of dice to roll (default: 2)
            rng: Random source (default: the random module)

        Returns:
            DiceRoll with uniform values in 1-6
        """
        source = rng if rng is not None else random
        values = tuple(source.randint(1, DICE_SIDES) for _ in range(count))
        return DiceRoll(values=values, dice_type=cls.DICE_TYPE)

    @classmethod
    def sum_dice(cls, dice: Iterable[int] | DiceRoll) -> int:
        """Total of all dice values."""
        if isinstance(dice, DiceRoll):
            return dice.total
        return sum(dice)

    @classmethod
    def is_natural(cls, total: int) -> bool:
        """7 or 11: instant defeat on the come-out roll."""
        return validate_dice_sum(total) in NATURAL_NUMBERS

    @classmethod
    def is_craps(cls, total: int) -> bool:
        """2, 3 or 12: loss on the come-out roll."""
        return validate_dice_sum(total) in CRAPS_NUMBERS

    @classmethod
    def is_point(cls, total: int) -> bool:
        """4, 5, 6, 8, 9 or 10: establishes the point."""
        return validate_dice_sum(total) in POINT_NUMBERS

    @classmethod
    def is_crap_out(cls, total: int) -> bool:
        """7 during the point phase."""
        return validate_dice_sum(total) == CRAP_OUT_NUMBER

    @classmethod
    def is_escape_roll(cls, total: int) -> bool:
        """2 during the point phase offers an escape."""
        return validate_dice_sum(total) == ESCAPE_NUMBER

    @classmethod
    def is_point_hit(cls, total: int, point: int) -> bool:
        """The roll repeats the established point."""
        return validate_dice_sum(total) == point

    @classmethod
    def is_monster_hit(cls, total: int, monster_numbers: Iterable[int]) -> bool:
        """The roll matches one of the monster's remaining numbers."""
        return validate_dice_sum(total) in tuple(monster_numbers)

    @classmethod
    def get_possible_sums(cls, dice_count: int = NUM_DICE) -> list[int]:
        """All totals reachable with the given number of dice."""
        return list(range(dice_count, dice_count * DICE_SIDES + 1))

    @classmethod
    def get_combinations(cls, total: int) -> int:
        """Number of 2d6 combinations producing the total (0 if impossible)."""
        return cls.COMBINATIONS.get(total, 0)

    @classmethod
    def get_probability(cls, total: int) -> float:
        """Probability of rolling the total with 2d6."""
        return cls.get_combinations(total) / 36
