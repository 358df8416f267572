"""
Craps Gauntlet - Input Validation Utilities

Provides validation functions for game engine inputs. Invariant validators
either return the validated value or raise DomainInvariantViolation; the
player-name validator collects every issue instead, since bad names are a
user mistake the setup screen must be able to highlight.
"""

from typing import Sequence

from craps_gauntlet.engine.base import DiceType
from craps_gauntlet.engine.constants import (
    MAX_PLAYERS,
    MAX_TWO_DICE_SUM,
    MIN_PLAYERS,
    MIN_TWO_DICE_SUM,
    MONSTER_COUNT,
    POINT_NUMBERS,
)
from craps_gauntlet.engine.errors import DomainInvariantViolation, ValidationIssue


def validate_dice_values(
    values: Sequence[int],
    dice_type: DiceType = DiceType.D6,
    min_count: int = 1,
    max_count: int | None = None
) -> tuple[int, ...]:
    """
    Validate and normalize dice values.

    Args:
        values: Sequence of dice values to validate
        dice_type: Type of dice (determines valid range)
        min_count: Minimum number of dice required
        max_count: Maximum number of dice allowed (None = no limit)

    Returns:
        Validated values as a tuple

    Raises:
        ValueError: If validation fails
    """
    if not values:
        if min_count > 0:
            raise ValueError(f"At least {min_count} dice required.")
        return tuple()

    values_tuple = tuple(values)
    count = len(values_tuple)

    if count < min_count:
        raise ValueError(f"At least {min_count} dice required, got {count}.")

    if max_count is not None and count > max_count:
        raise ValueError(f"At most {max_count} dice allowed, got {count}.")

    max_value = dice_type.value
    for i, value in enumerate(values_tuple):
        if not isinstance(value, int):
            raise ValueError(f"Die value at index {i} must be an integer, got {type(value).__name__}.")
        if not (1 <= value <= max_value):
            raise ValueError(
                f"Die value at index {i} is {value}, must be between 1 and {max_value} for {dice_type.name}."
            )

    return values_tuple


def validate_dice_sum(total: int) -> int:
    """
    Validate a two-dice total.

    Raises:
        DomainInvariantViolation: If the total is outside 2-12
    """
    if not isinstance(total, int) or not (MIN_TWO_DICE_SUM <= total <= MAX_TWO_DICE_SUM):
        raise DomainInvariantViolation(
            f"Invalid dice sum: {total}. Sum must be between "
            f"{MIN_TWO_DICE_SUM} and {MAX_TWO_DICE_SUM}."
        )
    return total


def validate_point_value(point: int) -> int:
    """
    Validate an established point.

    Raises:
        DomainInvariantViolation: If point is not 4, 5, 6, 8, 9 or 10
    """
    if point not in POINT_NUMBERS:
        raise DomainInvariantViolation(
            f"Invalid point value: {point}. Point must be 4, 5, 6, 8, 9, or 10."
        )
    return point


def validate_monster_position(position: int) -> int:
    """
    Validate a gauntlet position.

    Raises:
        DomainInvariantViolation: If position is outside 1-10
    """
    if not isinstance(position, int) or not (1 <= position <= MONSTER_COUNT):
        raise DomainInvariantViolation(
            f"Monster position must be between 1 and {MONSTER_COUNT}, got {position}."
        )
    return position


def validate_player_names(names: Sequence[str]) -> tuple[ValidationIssue, ...]:
    """
    Check player names for game initialization.

    Rules: 2-8 names, none blank after trimming, no case-insensitive
    duplicates. Every problem is reported, not just the first.

    Args:
        names: Raw names as typed

    Returns:
        Tuple of issues; empty when the names are valid
    """
    issues: list[ValidationIssue] = []

    if len(names) < MIN_PLAYERS:
        issues.append(ValidationIssue(f"Minimum {MIN_PLAYERS} players required"))

    if len(names) > MAX_PLAYERS:
        issues.append(ValidationIssue(f"Maximum {MAX_PLAYERS} players allowed"))

    trimmed = [name.strip() for name in names]
    for index, name in enumerate(trimmed):
        if not name:
            issues.append(ValidationIssue("Name cannot be empty", player_index=index))

    seen: dict[str, int] = {}
    for index, name in enumerate(trimmed):
        if not name:
            continue
        key = name.lower()
        if key in seen:
            issues.append(ValidationIssue(
                f"Duplicate name (same as Player {seen[key] + 1})",
                player_index=index,
            ))
        else:
            seen[key] = index

    return tuple(issues)
