from typing import Iterable, Optional

from warboard.data_models.leaderboard import PlayerTotals
from warboard.data_models.war import WarSlot, normalize_wars


class WarStatsCalculator:
    """Aggregates a player's war slots into lifetime totals"""
    
    @staticmethod
    def slot_net(slot: Optional[WarSlot]):
        """
        Net result of a single war
        
        Args:
            slot: War slot, or None for an unplayed war
            
        Returns:
            (net_stars, net_pct) for that war
        """
        slot = slot or WarSlot.ZERO
        return (
            slot.attack_stars - slot.defense_stars,
            slot.attack_pct - slot.defense_pct,
        )
    
    @staticmethod
    def compute_totals(wars: Optional[Iterable[Optional[WarSlot]]]) -> PlayerTotals:
        """
        Sum every war slot of a player
        
        Missing slots count as the zero record. Net values are accumulated
        per war (attack minus defense) rather than derived from the totals.
        
        Args:
            wars: The player's war sequence, possibly short or holding None
            
        Returns:
            PlayerTotals with raw sums and net stars/percent
        """
        attack_stars = attack_pct = defense_stars = defense_pct = 0
        net_stars = net_pct = 0
        
        for slot in normalize_wars(wars):
            attack_stars += slot.attack_stars
            attack_pct += slot.attack_pct
            defense_stars += slot.defense_stars
            defense_pct += slot.defense_pct
            
            slot_stars, slot_pct = WarStatsCalculator.slot_net(slot)
            net_stars += slot_stars
            net_pct += slot_pct
        
        return PlayerTotals(
            attack_stars=attack_stars,
            attack_pct=attack_pct,
            defense_stars=defense_stars,
            defense_pct=defense_pct,
            net_stars=net_stars,
            net_pct=net_pct,
        )
