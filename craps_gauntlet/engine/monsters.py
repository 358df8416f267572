"""
Craps Gauntlet - Monster Gauntlet

The ten monsters, fought in order. Each monster carries a set of point
numbers to cross off; it is defeated exactly when none remain. Position 10
is always the boss with all six point numbers.

Turn-scoped rollback is a plain snapshot: the turn stores a copy of the
monster when it starts and restores it on a crap-out, voiding every hit
landed during that turn.
"""

import copy
from dataclasses import dataclass, replace

from craps_gauntlet.engine.base import Monster, MonsterType
from craps_gauntlet.engine.constants import MONSTER_COUNT
from craps_gauntlet.engine.validators import validate_monster_position


@dataclass(frozen=True)
class MonsterTemplate:
    name: str
    type: MonsterType
    numbers_to_hit: tuple[int, ...]
    points: int
    gold_reward: int


MONSTER_TEMPLATES = (
    MonsterTemplate("Cave Goblin", MonsterType.GOBLIN, (4, 10), 1, 2),
    MonsterTemplate("Skeletal Warrior", MonsterType.SKELETON, (5, 9), 1, 2),
    MonsterTemplate("Orc Berserker", MonsterType.ORC, (4, 6, 10), 1, 3),
    MonsterTemplate("Mountain Troll", MonsterType.TROLL, (5, 8, 9), 2, 3),
    MonsterTemplate("Vengeful Wraith", MonsterType.WRAITH, (4, 6, 8, 10), 2, 4),
    MonsterTemplate("Stone Golem", MonsterType.GOLEM, (4, 5, 9, 10), 2, 4),
    MonsterTemplate("Infernal Demon", MonsterType.DEMON, (4, 5, 6, 8, 9), 3, 5),
    MonsterTemplate("Ancient Dragon", MonsterType.DRAGON, (4, 5, 6, 9, 10), 3, 5),
    MonsterTemplate("Dread Lich", MonsterType.LICH, (4, 5, 6, 8, 9, 10), 4, 6),
    MonsterTemplate("The Abyssal Tyrant", MonsterType.BOSS, (4, 5, 6, 8, 9, 10), 5, 8),
)


class MonsterGauntlet:
    """Stateless monster creation, hit bookkeeping and snapshots."""

    @classmethod
    def get_monster_template(cls, position: int) -> MonsterTemplate:
        """
        Template for a gauntlet position.

        Raises:
            DomainInvariantViolation: If position is outside 1-10
        """
        validate_monster_position(position)
        return MONSTER_TEMPLATES[position - 1]

    @classmethod
    def create_monster(cls, position: int) -> Monster:
        """
        Instantiate the monster at a gauntlet position.

        Raises:
            DomainInvariantViolation: If position is outside 1-10
        """
        template = cls.get_monster_template(position)
        return Monster(
            id=f"monster-{position}",
            name=template.name,
            type=template.type,
            position=position,
            numbers_to_hit=template.numbers_to_hit,
            remaining_numbers=template.numbers_to_hit,
            points=template.points,
            gold_reward=template.gold_reward,
        )

    @classmethod
    def create_monster_gauntlet(cls) -> tuple[Monster, ...]:
        """All ten monsters in position order."""
        return tuple(cls.create_monster(position) for position in range(1, MONSTER_COUNT + 1))

    @classmethod
    def is_monster_defeated(cls, monster: Monster) -> bool:
        return len(monster.remaining_numbers) == 0

    @classmethod
    def is_boss_monster(cls, monster: Monster) -> bool:
        return monster.type == MonsterType.BOSS

    @classmethod
    def hit_monster_number(cls, monster: Monster, number: int) -> Monster:
        """Cross a number off. Numbers not remaining leave the monster as is."""
        return replace(
            monster,
            remaining_numbers=tuple(n for n in monster.remaining_numbers if n != number),
        )

    @classmethod
    def clear_monster(cls, monster: Monster) -> Monster:
        """Cross off every remaining number (natural-roll defeat)."""
        return replace(monster, remaining_numbers=tuple())

    @classmethod
    def snapshot_monster(cls, monster: Monster) -> Monster:
        """Independent copy taken at turn start."""
        return copy.deepcopy(monster)

    @classmethod
    def restore_monster(cls, snapshot: Monster) -> Monster:
        """Monster as it was when the snapshot was taken."""
        return copy.deepcopy(snapshot)

    @classmethod
    def next_monster_index(cls, current_index: int, monster_count: int = MONSTER_COUNT) -> int:
        """Index of the next monster; stays put on the last one."""
        if current_index >= monster_count - 1:
            return current_index
        return current_index + 1

    @classmethod
    def get_hit_numbers(cls, monster: Monster) -> tuple[int, ...]:
        """Numbers already crossed off."""
        return tuple(n for n in monster.numbers_to_hit if n not in monster.remaining_numbers)

    @classmethod
    def get_remaining_hit_count(cls, monster: Monster) -> int:
        return len(monster.remaining_numbers)

    @classmethod
    def get_monster_difficulty(cls, monster: Monster) -> str:
        """'Boss', or Easy / Medium / Hard by how many numbers it carries."""
        if cls.is_boss_monster(monster):
            return "Boss"
        count = len(monster.numbers_to_hit)
        if count <= 2:
            return "Easy"
        if count <= 4:
            return "Medium"
        return "Hard"

    @classmethod
    def get_total_gauntlet_points(cls) -> int:
        return sum(t.points for t in MONSTER_TEMPLATES)

    @classmethod
    def get_total_gauntlet_gold(cls) -> int:
        return sum(t.gold_reward for t in MONSTER_TEMPLATES)
