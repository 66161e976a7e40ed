"""
Alignment Grouper

Buckets row-eligible objects (containers and the units mounted on them)
into rows and columns by snapping their centers to a coarse grid. The result
only drives alignment guide lines in the viewer; it has no compliance
consequence.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple
import logging
import math

from ..classification import is_row_eligible
from ..patterns import EquipmentPatterns
from ..rules.profiles import RuleProfile, SITE_STANDARD
from ..scene.abstraction import PlacedObject, bounding_extent

logger = logging.getLogger(__name__)


def snap_to_grid(value: float, grid: float = 1.0) -> float:
    """Round a coordinate to the nearest grid line (halves round up)."""
    if grid <= 0:
        return value
    return math.floor(value / grid + 0.5) * grid


@dataclass
class AlignmentGroup:
    """Objects sharing a snapped coordinate.

    axis "x" is a column (same X), axis "z" is a row (same Z).
    """
    axis: str
    coordinate: float
    member_ids: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "axis": self.axis,
            "coordinate": self.coordinate,
            "member_ids": list(self.member_ids),
        }


@dataclass
class AlignmentResult:
    """Alignment groups plus the extent of the guide-line grid."""
    groups: List[AlignmentGroup] = field(default_factory=list)
    # (min_x, min_z, max_x, max_z), None for an empty scene
    extent: Optional[Tuple[float, float, float, float]] = None

    @property
    def rows(self) -> List[AlignmentGroup]:
        return [g for g in self.groups if g.axis == "z"]

    @property
    def columns(self) -> List[AlignmentGroup]:
        return [g for g in self.groups if g.axis == "x"]

    def to_dict(self) -> Dict:
        return {
            "groups": [g.to_dict() for g in self.groups],
            "extent": list(self.extent) if self.extent else None,
        }


def group_alignments(objects: Sequence[PlacedObject],
                     profile: Optional[RuleProfile] = None,
                     eligible_only: bool = True,
                     patterns: Optional[EquipmentPatterns] = None) -> AlignmentResult:
    """
    Detect rows and columns of aligned objects.

    Args:
        objects: Scene snapshot, in input order
        profile: Rule profile supplying grid size and extent margin
        eligible_only: Only group row-eligible objects (containers and the like)
        patterns: Optional custom keyword tables

    Returns:
        AlignmentResult with groups of two or more members
    """
    profile = profile or SITE_STANDARD
    grid = profile.alignment_grid

    result = AlignmentResult(
        extent=bounding_extent(objects, profile.alignment_margin),
    )

    if eligible_only:
        candidates = [o for o in objects if is_row_eligible(o, patterns)]
    else:
        candidates = list(objects)

    if len(candidates) < 2:
        return result

    columns: Dict[float, List[str]] = {}
    rows: Dict[float, List[str]] = {}

    for obj in candidates:
        columns.setdefault(snap_to_grid(obj.x, grid), []).append(obj.id)
        rows.setdefault(snap_to_grid(obj.z, grid), []).append(obj.id)

    for axis, buckets in (("x", columns), ("z", rows)):
        for coordinate in sorted(buckets):
            members = buckets[coordinate]
            if len(members) >= 2:
                result.groups.append(AlignmentGroup(
                    axis=axis,
                    coordinate=coordinate,
                    member_ids=members,
                ))

    logger.debug(
        f"Alignment: {len(result.columns)} columns, {len(result.rows)} rows "
        f"from {len(candidates)} eligible objects"
    )
    return result
