"""
Ranking utilities for the clan war leaderboard.

Provides one ordering used by both the owner's leaderboard and the public
leaderboard so the two can never disagree.
"""

from dataclasses import replace
from typing import Iterable, List

from warboard.data_models.leaderboard import LeaderboardRow
from warboard.data_models.war import PlayerRecord
from warboard.utils.war_stats import WarStatsCalculator


class RankingUtility:
    """Shared ranking logic for leaderboard projections."""
    
    @staticmethod
    def sort_key(row: LeaderboardRow):
        """
        Net stars desc, then net percent desc, then name asc.
        
        Names compare case-insensitively first; names equal ignoring case put
        the lowercase form first ("alice" < "Bob", "ava" < "Ava").
        """
        return (-row.net_stars, -row.net_pct, row.name.casefold(), row.name.swapcase())
    
    @staticmethod
    def build_leaderboard(players: Iterable[PlayerRecord]) -> List[LeaderboardRow]:
        """
        Project players to leaderboard rows and rank them.
        
        The input order has no influence on the result: the three sort keys
        form a total order because names are unique within a clan.
        """
        rows = []
        for player in players:
            totals = WarStatsCalculator.compute_totals(player.wars)
            rows.append(LeaderboardRow(
                player_id=player.id,
                name=player.name,
                attack_stars=totals.attack_stars,
                attack_pct=totals.attack_pct,
                defense_stars=totals.defense_stars,
                defense_pct=totals.defense_pct,
                net_stars=totals.net_stars,
                net_pct=totals.net_pct,
                rank=0,
            ))
        
        rows.sort(key=RankingUtility.sort_key)
        return [
            replace(row, rank=position + 1)
            for position, row in enumerate(rows)
        ]
