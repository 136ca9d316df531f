"""
Leaderboard service for the clan war leaderboard.

Builds the owner's and the public leaderboards from the store and renders the
CSV export. Rows are computed fresh on every call and never cached, so a
leaderboard always reflects the latest committed war slots.
"""

import csv
import io
from typing import Iterable, List, Tuple, TYPE_CHECKING

from warboard.constants import ExportConstants
from warboard.data_models.leaderboard import LeaderboardRow
from warboard.data_models.war import ClanSummary
from warboard.utils.logger import setup_logger
from warboard.utils.ranking import RankingUtility

if TYPE_CHECKING:
    from warboard.operations.clan_operations import ClanOperations
    from warboard.operations.player_operations import PlayerOperations

logger = setup_logger(__name__)


class LeaderboardService:
    """Service for admin and public leaderboard reads and CSV export."""
    
    def __init__(self, clan_operations: "ClanOperations", player_operations: "PlayerOperations"):
        self.clan_operations = clan_operations
        self.player_operations = player_operations
    
    async def get_admin_leaderboard(self, clan_id: int) -> List[LeaderboardRow]:
        """Ranked rows for the owner's clan from committed data."""
        players = await self.player_operations.list_players(clan_id)
        return RankingUtility.build_leaderboard(players)
    
    async def get_public_leaderboard(self, slug: str) -> Tuple[ClanSummary, List[LeaderboardRow]]:
        """Ranked rows for any clan by slug; no authentication involved."""
        clan, players = await self.clan_operations.get_clan_by_slug(slug)
        logger.debug(f"Building public leaderboard for '{slug}' ({len(players)} players)")
        return clan, RankingUtility.build_leaderboard(players)
    
    async def search_clans(self, query: str = "") -> List[ClanSummary]:
        """Public clan list filtered by a case-insensitive name substring."""
        clans = await self.clan_operations.list_clans()
        needle = (query or "").strip().casefold()
        if not needle:
            return clans
        return [clan for clan in clans if needle in clan.name.casefold()]
    
    @staticmethod
    def export_csv(rows: Iterable[LeaderboardRow]) -> str:
        """
        Render leaderboard rows as CSV.
        
        Columns are Rank, Player, Total Net Stars, Total Net %, in that order.
        """
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator=ExportConstants.CSV_LINE_TERMINATOR)
        writer.writerow(ExportConstants.CSV_HEADERS)
        for row in rows:
            writer.writerow([row.rank, row.name, row.net_stars, row.net_pct])
        return buffer.getvalue()
