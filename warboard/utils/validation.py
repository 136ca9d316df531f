"""
Input shaping and validation for war values, names and slugs.

Two modes exist on purpose:
- edit-time (clamp_number / clamp_war_field) never rejects; anything unusable
  becomes the range minimum so the editor always holds a well-formed value.
- commit-time (validate_war_payload) rejects anything out of range or
  non-numeric instead of correcting it, so the stored value is always the one
  the client asked for.
"""

import math
import re
from typing import Any, Mapping

from warboard.constants import WarConstants
from warboard.data_models.war import WarSlot
from warboard.utils.exceptions import ValidationError

_SLUG_INVALID_CHARS = re.compile(r"[^a-z0-9]+")


def _to_number(value: Any):
    """Coerce a raw value to a float, or None when it is not a finite number."""
    if isinstance(value, bool):
        return float(value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def clamp_number(value: Any, minimum: int, maximum: int) -> int:
    """Bound a raw value to [minimum, maximum]; unusable input becomes minimum."""
    number = _to_number(value)
    if number is None:
        return minimum
    return int(min(max(number, minimum), maximum))


def clamp_war_field(field_name: str, value: Any) -> int:
    """Clamp a raw editor value for one of the four war fields."""
    maximum = WarConstants.FIELD_MAXIMUMS.get(field_name)
    if maximum is None:
        raise ValidationError("Unknown war field.", f"unknown war field '{field_name}'")
    return clamp_number(value, WarConstants.MIN_VALUE, maximum)


def validate_war_index(war_index: Any) -> int:
    """Require an integer war index inside [0, WAR_COUNT)."""
    if isinstance(war_index, bool) or not isinstance(war_index, int):
        raise ValidationError("Invalid war index.", f"war index {war_index!r} is not an integer")
    if not 0 <= war_index < WarConstants.WAR_COUNT:
        raise ValidationError("Invalid war index.", f"war index {war_index} out of range")
    return war_index


def validate_war_payload(payload: Mapping[str, Any]) -> WarSlot:
    """
    Strictly validate a full war slot before it is persisted.
    
    Args:
        payload: Mapping keyed by attackStars/attackPct/defenseStars/defensePct
        
    Returns:
        WarSlot built from the validated values
        
    Raises:
        ValidationError: If any field is missing, non-numeric, non-finite,
            fractional or outside its range
    """
    if isinstance(payload, WarSlot):
        payload = payload.to_dict()
    payload = payload or {}
    
    numbers = {}
    for field_name in WarConstants.FIELDS:
        number = _to_number(payload.get(field_name))
        if number is None:
            raise ValidationError(
                "All war values must be numbers.",
                f"{field_name}={payload.get(field_name)!r}"
            )
        numbers[field_name] = number
    
    for field_name, number in numbers.items():
        maximum = WarConstants.FIELD_MAXIMUMS[field_name]
        if number < WarConstants.MIN_VALUE or number > maximum or not number.is_integer():
            raise ValidationError("War values out of range.", f"{field_name}={number}")
    
    return WarSlot.from_mapping({name: int(number) for name, number in numbers.items()})


def normalize_name(raw: Any, kind: str = "Player") -> str:
    """Trim a clan or player name; empty names are rejected."""
    name = str(raw if raw is not None else "").strip()
    if not name:
        raise ValidationError(f"{kind} name is required.")
    return name


def slugify(text: str) -> str:
    """Derive a URL slug from a clan name (may be empty for symbol-only names)."""
    return _SLUG_INVALID_CHARS.sub("-", text.lower().strip()).strip("-")
