"""
Leaderboard data models.

Provides immutable data transfer objects for aggregated war totals and the
ranked leaderboard rows derived from them. None of these are persisted.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class PlayerTotals:
    """Lifetime totals across every war slot of one player."""
    attack_stars: int = 0
    attack_pct: int = 0
    defense_stars: int = 0
    defense_pct: int = 0
    net_stars: int = 0
    net_pct: int = 0


@dataclass(frozen=True)
class LeaderboardRow:
    """Single leaderboard row."""
    player_id: int
    name: str
    attack_stars: int
    attack_pct: int
    defense_stars: int
    defense_pct: int
    net_stars: int
    net_pct: int
    rank: int
