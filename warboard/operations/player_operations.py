"""
Player Operations Module

Business logic for a clan's players and their war slots. This is the store
behind the war board: every method is scoped to one clan, so a stale or
foreign player id surfaces as NotFoundError rather than touching another
clan's data.

Key functionality:
- list/create/rename/delete players with case-insensitive name uniqueness
- update_war_slot(): strict commit-time validation, then upsert of one slot
- reset_war_slot_for_clan(): one bulk UPDATE zeroing a war for the whole clan
"""

from typing import Any, List, Mapping

from sqlalchemy import select, update, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from warboard.data_models.war import PlayerRecord
from warboard.database.models import Player, WarSlotRecord
from warboard.services.base import BaseService
from warboard.utils.exceptions import (
    ConflictError, DatabaseError, NotFoundError, WarboardException
)
from warboard.utils.logger import setup_logger
from warboard.utils.validation import normalize_name, validate_war_index, validate_war_payload

logger = setup_logger(__name__)


class PlayerOperations(BaseService):
    """
    Business logic operations for clan players and their war records.
    
    Each call runs in its own transaction, so concurrent calls for different
    players commit independently of one another.
    """
    
    async def _get_clan_player(self, session: AsyncSession, clan_id: int, player_id: int) -> Player:
        """Load a player belonging to the clan or raise NotFoundError."""
        player = await session.scalar(
            select(Player).where(Player.id == player_id, Player.clan_id == clan_id)
        )
        if player is None:
            raise NotFoundError("Player", player_id)
        return player
    
    async def _ensure_name_available(
        self, session: AsyncSession, clan_id: int, name: str, exclude_player_id: int = None
    ):
        query = select(Player.id).where(
            Player.clan_id == clan_id,
            func.lower(Player.name) == name.lower()
        )
        if exclude_player_id is not None:
            query = query.where(Player.id != exclude_player_id)
        if await session.scalar(query) is not None:
            raise ConflictError("Player name already exists.")
    
    async def list_players(self, clan_id: int) -> List[PlayerRecord]:
        """All players of a clan in creation order."""
        async with self.get_session() as session:
            result = await session.execute(
                select(Player)
                .where(Player.clan_id == clan_id)
                .order_by(Player.created_at, Player.id)
            )
            return [player.to_record() for player in result.scalars().all()]
    
    async def create_player(self, clan_id: int, name: str) -> PlayerRecord:
        """
        Add a player to the clan with seven zero war slots.
        
        Raises:
            ValidationError: If the name is empty
            ConflictError: If the clan already has a player with this name (any case)
        """
        name = normalize_name(name)
        try:
            async with self.get_session() as session:
                await self._ensure_name_available(session, clan_id, name)
                player = Player(clan_id=clan_id, name=name, war_slots=[])
                session.add(player)
                await session.flush()
                record = player.to_record()
        except WarboardException:
            raise
        except IntegrityError as e:
            logger.warning(f"Integrity error creating player '{name}' in clan {clan_id}: {e}")
            raise ConflictError("Player name already exists.")
        except SQLAlchemyError as e:
            logger.error(f"Failed to create player '{name}' in clan {clan_id}: {e}")
            raise DatabaseError("create_player", str(e))
        
        logger.info(f"Created player {record.id} '{record.name}' in clan {clan_id}")
        return record
    
    async def rename_player(self, clan_id: int, player_id: int, name: str) -> PlayerRecord:
        """Rename a player; the new name must still be unique within the clan."""
        name = normalize_name(name)
        try:
            async with self.get_session() as session:
                await self._ensure_name_available(session, clan_id, name, exclude_player_id=player_id)
                player = await self._get_clan_player(session, clan_id, player_id)
                player.name = name
                await session.flush()
                record = player.to_record()
        except WarboardException:
            raise
        except IntegrityError as e:
            logger.warning(f"Integrity error renaming player {player_id} in clan {clan_id}: {e}")
            raise ConflictError("Player name already exists.")
        except SQLAlchemyError as e:
            logger.error(f"Failed to rename player {player_id} in clan {clan_id}: {e}")
            raise DatabaseError("rename_player", str(e))
        
        logger.info(f"Renamed player {player_id} in clan {clan_id} to '{name}'")
        return record
    
    async def delete_player(self, clan_id: int, player_id: int) -> None:
        """
        Remove a player and their war slots.
        
        Raises:
            NotFoundError: If the player does not exist in this clan
        """
        try:
            async with self.get_session() as session:
                player = await self._get_clan_player(session, clan_id, player_id)
                await session.delete(player)
        except WarboardException:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete player {player_id} in clan {clan_id}: {e}")
            raise DatabaseError("delete_player", str(e))
        
        logger.info(f"Deleted player {player_id} from clan {clan_id}")
    
    async def update_war_slot(
        self, clan_id: int, player_id: int, war_index: int, payload: Mapping[str, Any]
    ) -> PlayerRecord:
        """
        Commit one player's full war slot.
        
        The payload is validated strictly: out-of-range or non-numeric values
        are rejected, never clamped. Resending the same payload is idempotent.
        
        Args:
            clan_id: Clan the player must belong to
            player_id: Player to update
            war_index: War slot index in [0, WAR_COUNT)
            payload: Wire-keyed mapping or WarSlot with all four fields
            
        Returns:
            PlayerRecord: The player's authoritative state after the commit
            
        Raises:
            ValidationError: If the index or any field is invalid
            NotFoundError: If the player does not exist in this clan
        """
        validate_war_index(war_index)
        slot = validate_war_payload(payload)
        
        try:
            async with self.get_session() as session:
                player = await self._get_clan_player(session, clan_id, player_id)
                record = next(
                    (existing for existing in player.war_slots if existing.war_index == war_index),
                    None
                )
                if record is None:
                    record = WarSlotRecord(war_index=war_index)
                    player.war_slots.append(record)
                record.apply_slot(slot)
                await session.flush()
                result = player.to_record()
        except WarboardException:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Failed to update war {war_index} for player {player_id} in clan {clan_id}: {e}")
            raise DatabaseError("update_war_slot", str(e))
        
        logger.debug(f"Saved war {war_index} for player {player_id}: {slot.to_dict()}")
        return result
    
    async def reset_war_slot_for_clan(self, clan_id: int, war_index: int) -> int:
        """
        Zero one war slot for every player in the clan in a single statement.
        
        Players without a stored row for the war already read as zero, so only
        existing rows need rewriting. Either every row is cleared or none is.
        
        Returns:
            Number of stored war rows that were cleared
        """
        validate_war_index(war_index)
        clan_player_ids = select(Player.id).where(Player.clan_id == clan_id)
        
        try:
            async with self.get_session() as session:
                result = await session.execute(
                    update(WarSlotRecord)
                    .where(
                        WarSlotRecord.war_index == war_index,
                        WarSlotRecord.player_id.in_(clan_player_ids)
                    )
                    .values(attack_stars=0, attack_pct=0, defense_stars=0, defense_pct=0)
                    .execution_options(synchronize_session=False)
                )
                cleared = result.rowcount
        except SQLAlchemyError as e:
            logger.error(f"Failed to reset war {war_index} for clan {clan_id}: {e}")
            raise DatabaseError("reset_war_slot_for_clan", str(e))
        
        logger.info(f"Reset war {war_index} for clan {clan_id} ({cleared} stored slots cleared)")
        return cleared
