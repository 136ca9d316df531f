"""
Application-wide constants for the clan war leaderboard.

Every war slot, clamp bound and export column used across the codebase is
defined here so the limits only live in one place.
"""

class WarConstants:
    """Constants describing the fixed war sequence and its field bounds."""
    
    # Number of wars tracked per player (one league season)
    WAR_COUNT = 7
    
    MIN_VALUE = 0
    MAX_STARS = 3
    MAX_PCT = 100
    
    # Wire names of the four war fields, in display order
    ATTACK_STARS = "attackStars"
    ATTACK_PCT = "attackPct"
    DEFENSE_STARS = "defenseStars"
    DEFENSE_PCT = "defensePct"
    FIELDS = (ATTACK_STARS, ATTACK_PCT, DEFENSE_STARS, DEFENSE_PCT)
    
    # Upper bound for each field
    FIELD_MAXIMUMS = {
        ATTACK_STARS: MAX_STARS,
        ATTACK_PCT: MAX_PCT,
        DEFENSE_STARS: MAX_STARS,
        DEFENSE_PCT: MAX_PCT,
    }

class ExportConstants:
    """Constants for the CSV leaderboard export."""
    
    # Column order and names are relied on by spreadsheets built from older exports
    CSV_HEADERS = ("Rank", "Player", "Total Net Stars", "Total Net %")
    CSV_LINE_TERMINATOR = "\n"

class StoreConstants:
    """Constants for the persistence layer."""
    
    MAX_NAME_LENGTH = 100
    MAX_SLUG_LENGTH = 120
    MAX_OWNER_ID_LENGTH = 64
