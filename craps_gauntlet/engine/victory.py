"""
Craps Gauntlet - Victory and Tie-Break Resolver

Victory points are banked on the player; the damage-leader bonus is not.
It is always derived from whichever player id is currently the damage
leader, so every function here takes that id (or a flag) explicitly.

Tie-break order between candidates:
    1. Effective victory points
    2. Gold
    3. Permanent card count
Candidates equal on all three share the victory.
"""

from dataclasses import dataclass
from typing import Sequence

from craps_gauntlet.engine.base import Player
from craps_gauntlet.engine.constants import DAMAGE_LEADER_BONUS, VICTORY_POINTS_TO_WIN


@dataclass(frozen=True)
class VictoryPointResult:
    """
    Result of adding victory points.

    Attributes:
        new_points: Banked points after the change
        points_added: Points actually added (0 for a negative request)
        has_won: Whether the banked total reaches the threshold
    """
    new_points: int
    points_added: int
    has_won: bool


class VictoryResolver:
    """Stateless victory-point bookkeeping, winner detection and ranking."""

    THRESHOLD = VICTORY_POINTS_TO_WIN

    @classmethod
    def get_effective_victory_points(cls, player: Player, is_damage_leader: bool) -> int:
        """Banked points plus the damage-leader bonus when it applies."""
        bonus = DAMAGE_LEADER_BONUS if is_damage_leader else 0
        return player.victory_points + bonus

    @classmethod
    def add_victory_points(cls, player: Player, points: int) -> VictoryPointResult:
        """
        Add banked victory points.

        Negative amounts are ignored rather than subtracted.
        """
        if points < 0:
            return VictoryPointResult(
                new_points=player.victory_points,
                points_added=0,
                has_won=cls.check_victory(player),
            )

        new_points = player.victory_points + points
        return VictoryPointResult(
            new_points=new_points,
            points_added=points,
            has_won=new_points >= cls.THRESHOLD,
        )

    @classmethod
    def check_victory(cls, player: Player) -> bool:
        """Banked points alone reach the threshold."""
        return player.victory_points >= cls.THRESHOLD

    @classmethod
    def check_victory_with_bonus(cls, player: Player, is_damage_leader: bool) -> bool:
        return cls.get_effective_victory_points(player, is_damage_leader) >= cls.THRESHOLD

    @classmethod
    def get_winner(
        cls,
        players: Sequence[Player],
        damage_leader_id: str | None
    ) -> Player | None:
        """First player, in seating order, at or over the threshold."""
        for player in players:
            if cls.check_victory_with_bonus(player, player.id == damage_leader_id):
                return player
        return None

    @classmethod
    def get_winners(
        cls,
        players: Sequence[Player],
        damage_leader_id: str | None
    ) -> tuple[Player, ...]:
        """Every player at or over the threshold, in seating order."""
        return tuple(
            player for player in players
            if cls.check_victory_with_bonus(player, player.id == damage_leader_id)
        )

    @classmethod
    def _tie_break_key(cls, player: Player, damage_leader_id: str | None) -> tuple[int, int, int]:
        return (
            cls.get_effective_victory_points(player, player.id == damage_leader_id),
            player.gold,
            len(player.permanent_cards),
        )

    @classmethod
    def resolve_tie_breaker(
        cls,
        candidates: Sequence[Player],
        damage_leader_id: str | None
    ) -> Player | None:
        """
        Pick a single winner among candidates.

        Args:
            candidates: Players who reached the threshold (or, after a
                boss defeat, everyone)
            damage_leader_id: Current damage leader

        Returns:
            The winner, or None when there are no candidates or the top
            candidates are equal on every criterion (shared victory)
        """
        if not candidates:
            return None
        if len(candidates) == 1:
            return candidates[0]

        tied = cls.get_tied_leaders(candidates, damage_leader_id)
        if len(tied) > 1:
            return None
        return tied[0]

    @classmethod
    def get_tied_leaders(
        cls,
        candidates: Sequence[Player],
        damage_leader_id: str | None
    ) -> tuple[Player, ...]:
        """
        Candidates sharing the best tie-break key, in seating order.

        One player means an outright winner; several mean a shared victory.
        """
        if not candidates:
            return tuple()
        best = max(cls._tie_break_key(p, damage_leader_id) for p in candidates)
        return tuple(p for p in candidates if cls._tie_break_key(p, damage_leader_id) == best)

    @classmethod
    def get_player_rankings(
        cls,
        players: Sequence[Player],
        damage_leader_id: str | None
    ) -> list[Player]:
        """Players by effective victory points, highest first (stable)."""
        return sorted(
            players,
            key=lambda p: cls.get_effective_victory_points(p, p.id == damage_leader_id),
            reverse=True,
        )

    @classmethod
    def points_to_win(cls, player: Player, is_damage_leader: bool) -> int:
        """Points still needed; 0 once the threshold is reached."""
        return max(0, cls.THRESHOLD - cls.get_effective_victory_points(player, is_damage_leader))

    @classmethod
    def calculate_damage_leader(cls, players: Sequence[Player]) -> str | None:
        """
        Player with strictly the most damage, if anyone has dealt any.

        Ties keep the earliest player in seating order.
        """
        leader_id = None
        best = 0
        for player in players:
            if player.damage_count > best:
                best = player.damage_count
                leader_id = player.id
        return leader_id

    @classmethod
    def format_victory_points(cls, player: Player, is_damage_leader: bool) -> str:
        """'7 VP', or '7 VP (+3)' for the damage leader."""
        if is_damage_leader:
            return f"{player.victory_points} VP (+{DAMAGE_LEADER_BONUS})"
        return f"{player.victory_points} VP"
