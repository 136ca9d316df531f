"""
War data models.

Immutable data transfer objects passed between the store, the working state
and the aggregation/ranking utilities. ORM rows never leave the operations
layer; they are converted to these records first.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from warboard.constants import WarConstants


@dataclass(frozen=True)
class WarSlot:
    """One war's attack and defense result for a single player."""
    attack_stars: int = 0
    attack_pct: int = 0
    defense_stars: int = 0
    defense_pct: int = 0
    
    # Maps wire names (attackStars) to attribute names (attack_stars)
    FIELD_ATTRS = {
        WarConstants.ATTACK_STARS: "attack_stars",
        WarConstants.ATTACK_PCT: "attack_pct",
        WarConstants.DEFENSE_STARS: "defense_stars",
        WarConstants.DEFENSE_PCT: "defense_pct",
    }
    
    def get(self, field_name: str) -> int:
        return getattr(self, self.FIELD_ATTRS[field_name])
    
    def with_field(self, field_name: str, value: int) -> "WarSlot":
        return replace(self, **{self.FIELD_ATTRS[field_name]: value})
    
    def to_dict(self) -> Dict[str, int]:
        return {name: self.get(name) for name in WarConstants.FIELDS}
    
    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "WarSlot":
        """Build a slot from wire-keyed data; absent keys default to zero."""
        if not data:
            return cls.ZERO
        return cls(**{
            attr: data.get(name, 0)
            for name, attr in cls.FIELD_ATTRS.items()
        })


WarSlot.ZERO = WarSlot()


def normalize_wars(wars: Optional[Iterable[Optional[WarSlot]]]) -> Tuple[WarSlot, ...]:
    """Pad or trim a war sequence to exactly WAR_COUNT slots, None becoming zero."""
    slots = list(wars or ())[:WarConstants.WAR_COUNT]
    slots += [None] * (WarConstants.WAR_COUNT - len(slots))
    return tuple(slot if slot is not None else WarSlot.ZERO for slot in slots)


@dataclass(frozen=True)
class PlayerRecord:
    """A clan member and their fixed sequence of war slots."""
    id: int
    clan_id: int
    name: str
    wars: Tuple[WarSlot, ...] = field(default_factory=tuple)
    
    def __post_init__(self):
        object.__setattr__(self, "wars", normalize_wars(self.wars))
    
    def slot(self, war_index: int) -> WarSlot:
        return self.wars[war_index]
    
    def with_slot(self, war_index: int, slot: WarSlot) -> "PlayerRecord":
        wars = list(self.wars)
        wars[war_index] = slot
        return replace(self, wars=tuple(wars))


@dataclass(frozen=True)
class ClanRecord:
    """A clan as seen by its owner."""
    id: int
    name: str
    slug: str
    owner_id: str


@dataclass(frozen=True)
class ClanSummary:
    """Public view of a clan."""
    name: str
    slug: str
