"""
Clan war leaderboard.

Tracks a clan's attack/defense results across a fixed run of wars and ranks
its players by net stars and net destruction percentage.
"""

__version__ = "1.0.0"
