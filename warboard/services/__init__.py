"""
Services package for the clan war leaderboard.
"""

from .base import BaseService
from .leaderboard import LeaderboardService
from .war_board import WarBoardCoordinator

__all__ = ['BaseService', 'LeaderboardService', 'WarBoardCoordinator']
