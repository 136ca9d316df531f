"""
Clan Operations Module

Business logic for clan ownership and the public, read-only clan views.

Key rules:
- An owner has at most one clan
- Clan names are unique regardless of case
- The slug is derived from the name and must be unique and non-empty
"""

from typing import List, Optional, Tuple

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from warboard.data_models.war import ClanRecord, ClanSummary, PlayerRecord
from warboard.database.models import Clan, Player
from warboard.services.base import BaseService
from warboard.utils.exceptions import (
    ConflictError, DatabaseError, NotFoundError, ValidationError, WarboardException
)
from warboard.utils.logger import setup_logger
from warboard.utils.validation import normalize_name, slugify

logger = setup_logger(__name__)


class ClanOperations(BaseService):
    """
    Clan lifecycle and lookup operations.
    
    Clans are immutable once created; there is no rename or delete here.
    """
    
    async def create_clan(self, owner_id: str, name: str) -> ClanRecord:
        """
        Create the owner's clan.
        
        Args:
            owner_id: Opaque id of the authenticated owner
            name: Requested clan name (trimmed before use)
            
        Returns:
            ClanRecord: The newly created clan
            
        Raises:
            ValidationError: If the name is empty or yields an empty slug
            ConflictError: If the owner already has a clan, or the name or slug is taken
        """
        name = normalize_name(name, kind="Clan")
        slug = slugify(name)
        
        try:
            async with self.get_session() as session:
                owned = await session.scalar(select(Clan.id).where(Clan.owner_id == owner_id))
                if owned is not None:
                    raise ConflictError("You already have a clan.")
                
                existing = await session.scalar(
                    select(Clan.id).where(func.lower(Clan.name) == name.lower())
                )
                if existing is not None:
                    raise ConflictError("Clan name already exists.")
                
                if not slug:
                    raise ValidationError("Clan name is invalid.", f"name '{name}' has no slug characters")
                
                slug_taken = await session.scalar(select(Clan.id).where(Clan.slug == slug))
                if slug_taken is not None:
                    raise ConflictError("Clan slug already exists.")
                
                clan = Clan(name=name, slug=slug, owner_id=owner_id)
                session.add(clan)
                await session.flush()
                record = clan.to_record()
        except WarboardException:
            raise
        except IntegrityError as e:
            # Lost a race against a concurrent create with the same owner/slug
            logger.warning(f"Integrity error creating clan '{name}' for owner {owner_id}: {e}")
            raise ConflictError("Clan name already exists.")
        except SQLAlchemyError as e:
            logger.error(f"Failed to create clan '{name}' for owner {owner_id}: {e}")
            raise DatabaseError("create_clan", str(e))
        
        logger.info(f"Created clan {record.id} '{record.name}' ({record.slug}) for owner {owner_id}")
        return record
    
    async def find_owned_clan(self, owner_id: str) -> Optional[ClanRecord]:
        """Get the owner's clan, or None if they have not created one yet."""
        async with self.get_session() as session:
            clan = await session.scalar(select(Clan).where(Clan.owner_id == owner_id))
            return clan.to_record() if clan else None
    
    async def get_owned_clan(self, owner_id: str) -> ClanRecord:
        """Get the owner's clan; every player operation is scoped to it."""
        clan = await self.find_owned_clan(owner_id)
        if clan is None:
            raise NotFoundError("Clan", owner_id, user_message="Create a clan first.")
        return clan
    
    async def list_clans(self) -> List[ClanSummary]:
        """Public: every clan's name and slug, oldest first."""
        async with self.get_session() as session:
            result = await session.execute(
                select(Clan.name, Clan.slug).order_by(Clan.created_at, Clan.id)
            )
            return [ClanSummary(name=row.name, slug=row.slug) for row in result]
    
    async def get_clan_by_slug(self, slug: str) -> Tuple[ClanSummary, List[PlayerRecord]]:
        """
        Public: a clan and its players, looked up by slug.
        
        Raises:
            NotFoundError: If no clan has this slug
        """
        async with self.get_session() as session:
            clan = await session.scalar(select(Clan).where(Clan.slug == slug))
            if clan is None:
                raise NotFoundError("Clan", slug)
            
            result = await session.execute(
                select(Player)
                .where(Player.clan_id == clan.id)
                .order_by(Player.created_at, Player.id)
            )
            players = [player.to_record() for player in result.scalars().all()]
            return ClanSummary(name=clan.name, slug=clan.slug), players
