"""
Equipment Classification

Maps free-text equipment labels onto the small set of classes the analysis
passes care about. Classification is keyword matching at the boundary:
anything unrecognised degrades to OTHER and is never rejected.

NOTE: Keywords are loaded from equipment_patterns.yaml via the patterns
module. Do NOT hardcode keywords here - update the YAML configuration instead.
"""

from enum import Enum
from typing import Iterable, Optional

from .patterns import EquipmentPatterns, get_patterns
from .scene.abstraction import PlacedObject


class PowerRole(Enum):
    """Inferred role in the power distribution chain."""
    SOURCE = "source"              # Transformer
    DISTRIBUTION = "distribution"  # PDU / distribution skid / switchboard
    LOAD = "load"                  # Container drawing power
    OTHER = "other"


def contains_any(text: str, keywords: Iterable[str]) -> bool:
    """Case-insensitive substring match against any keyword."""
    text = (text or "").lower()
    return any(k in text for k in keywords)


def is_container_like(category: str,
                      patterns: Optional[EquipmentPatterns] = None) -> bool:
    patterns = patterns or get_patterns()
    return contains_any(category, patterns.container_like)


def is_transformer_like(category: str,
                        patterns: Optional[EquipmentPatterns] = None) -> bool:
    patterns = patterns or get_patterns()
    return (contains_any(category, patterns.transformer_like) and
            not contains_any(category, patterns.transformer_exclusions))


def is_row_eligible(obj: PlacedObject,
                    patterns: Optional[EquipmentPatterns] = None) -> bool:
    """Objects that are expected to stand in rows (containers and the like)."""
    patterns = patterns or get_patterns()
    return (contains_any(obj.category, patterns.container_like) or
            contains_any(obj.name, patterns.container_like))


def power_role(obj: PlacedObject,
               patterns: Optional[EquipmentPatterns] = None) -> PowerRole:
    """
    Infer an object's electrical role from its category and name.

    Roles are exclusive, checked in chain order: a label matching both a
    source and a distribution keyword (e.g. "transformer skid") is a source.
    """
    patterns = patterns or get_patterns()
    label = obj.label

    if (contains_any(label, patterns.source) and
            not contains_any(label, patterns.source_exclusions)):
        return PowerRole.SOURCE
    if contains_any(label, patterns.distribution):
        return PowerRole.DISTRIBUTION
    if contains_any(label, patterns.load):
        return PowerRole.LOAD
    return PowerRole.OTHER


def is_cooling(obj: PlacedObject,
               patterns: Optional[EquipmentPatterns] = None) -> bool:
    patterns = patterns or get_patterns()
    return contains_any(obj.label, patterns.cooling)
