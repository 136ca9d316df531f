"""
Operations layer for the clan war leaderboard.

This package is the store the war board talks to. Each module composes
database access with the validation and uniqueness rules of its domain:
- ClanOperations: clan creation, ownership lookup and public clan reads
- PlayerOperations: player lifecycle, war slot commits and bulk war resets

Domain errors (ValidationError, ConflictError, NotFoundError) propagate
unchanged; unexpected SQLAlchemy failures are wrapped in DatabaseError.
"""

from .clan_operations import ClanOperations
from .player_operations import PlayerOperations

__all__ = ['ClanOperations', 'PlayerOperations']
