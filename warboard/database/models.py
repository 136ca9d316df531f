from sqlalchemy import (
    Column, Integer, String, DateTime, ForeignKey, UniqueConstraint, CheckConstraint
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

from warboard.constants import StoreConstants, WarConstants
from warboard.data_models.war import ClanRecord, PlayerRecord, WarSlot

Base = declarative_base()

class Clan(Base):
    __tablename__ = 'clans'
    
    id = Column(Integer, primary_key=True)
    name = Column(String(StoreConstants.MAX_NAME_LENGTH), nullable=False)
    slug = Column(String(StoreConstants.MAX_SLUG_LENGTH), nullable=False, unique=True, index=True)
    owner_id = Column(String(StoreConstants.MAX_OWNER_ID_LENGTH), nullable=False, unique=True)  # One clan per owner
    
    # Metadata
    created_at = Column(DateTime, default=func.now())
    
    # Relationships
    players = relationship("Player", back_populates="clan", cascade="all, delete-orphan")
    
    def to_record(self) -> ClanRecord:
        return ClanRecord(id=self.id, name=self.name, slug=self.slug, owner_id=self.owner_id)
    
    def __repr__(self):
        return f"<Clan(slug='{self.slug}', name='{self.name}')>"

class Player(Base):
    __tablename__ = 'players'
    
    id = Column(Integer, primary_key=True)
    clan_id = Column(Integer, ForeignKey('clans.id'), nullable=False, index=True)
    name = Column(String(StoreConstants.MAX_NAME_LENGTH), nullable=False)
    
    # Metadata
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())
    
    # Relationships
    clan = relationship("Clan", back_populates="players")
    war_slots = relationship(
        "WarSlotRecord",
        back_populates="player",
        cascade="all, delete-orphan",
        order_by="WarSlotRecord.war_index",
        lazy="selectin"
    )
    
    # Case-insensitive uniqueness is checked in PlayerOperations
    __table_args__ = (UniqueConstraint('clan_id', 'name'),)
    
    def to_record(self) -> PlayerRecord:
        """Convert to a PlayerRecord; wars without a row are the zero record."""
        wars = [None] * WarConstants.WAR_COUNT
        for slot in self.war_slots:
            if 0 <= slot.war_index < WarConstants.WAR_COUNT:
                wars[slot.war_index] = slot.to_slot()
        return PlayerRecord(id=self.id, clan_id=self.clan_id, name=self.name, wars=tuple(wars))
    
    def __repr__(self):
        return f"<Player(id={self.id}, clan_id={self.clan_id}, name='{self.name}')>"

class WarSlotRecord(Base):
    __tablename__ = 'war_slots'
    
    id = Column(Integer, primary_key=True)
    player_id = Column(Integer, ForeignKey('players.id'), nullable=False, index=True)
    war_index = Column(Integer, nullable=False, index=True)
    
    attack_stars = Column(Integer, nullable=False, default=0)
    attack_pct = Column(Integer, nullable=False, default=0)
    defense_stars = Column(Integer, nullable=False, default=0)
    defense_pct = Column(Integer, nullable=False, default=0)
    
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())
    
    # Relationships
    player = relationship("Player", back_populates="war_slots")
    
    # Ranges are enforced again here, independent of the validation layer
    __table_args__ = (
        UniqueConstraint('player_id', 'war_index'),
        CheckConstraint(f'war_index >= 0 AND war_index < {WarConstants.WAR_COUNT}', name='ck_war_index_range'),
        CheckConstraint(f'attack_stars >= 0 AND attack_stars <= {WarConstants.MAX_STARS}', name='ck_attack_stars_range'),
        CheckConstraint(f'attack_pct >= 0 AND attack_pct <= {WarConstants.MAX_PCT}', name='ck_attack_pct_range'),
        CheckConstraint(f'defense_stars >= 0 AND defense_stars <= {WarConstants.MAX_STARS}', name='ck_defense_stars_range'),
        CheckConstraint(f'defense_pct >= 0 AND defense_pct <= {WarConstants.MAX_PCT}', name='ck_defense_pct_range'),
    )
    
    def to_slot(self) -> WarSlot:
        return WarSlot(
            attack_stars=self.attack_stars,
            attack_pct=self.attack_pct,
            defense_stars=self.defense_stars,
            defense_pct=self.defense_pct,
        )
    
    def apply_slot(self, slot: WarSlot):
        self.attack_stars = slot.attack_stars
        self.attack_pct = slot.attack_pct
        self.defense_stars = slot.defense_stars
        self.defense_pct = slot.defense_pct
    
    def __repr__(self):
        return f"<WarSlotRecord(player_id={self.player_id}, war_index={self.war_index})>"
