"""
Spacing Extraction

Measures the clear gaps between placed objects:

- Adjacency gaps: between footprints that face each other, i.e. overlap on
  one ground axis, measured edge-to-edge along the other axis.
- Nearest-neighbour fallback: objects without any adjacency gap get a
  center-to-center distance to their closest neighbour.

Both passes are O(n^2) over object pairs, which is fine for the tens to low
hundreds of objects a site layout holds.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Set, Tuple
import logging

from ..rules.profiles import RuleProfile, SITE_STANDARD
from ..scene.abstraction import Footprint, PlacedObject

logger = logging.getLogger(__name__)

Point2 = Tuple[float, float]  # (x, z)


@dataclass(frozen=True)
class SpacingMeasurement:
    """A measured gap between two objects.

    axis is "x" or "z" for adjacency gaps and None for center-to-center
    fallback distances. start/end are the measured endpoints on the
    ground plane.
    """
    object_a: str
    object_b: str
    axis: Optional[str]
    distance: float
    midpoint: Point2
    start: Point2
    end: Point2

    @property
    def pair(self) -> Tuple[str, str]:
        return (self.object_a, self.object_b)

    def same_pair(self, a: str, b: str) -> bool:
        """Check for the same id pair in either order."""
        return {self.object_a, self.object_b} == {a, b}

    def to_dict(self) -> Dict:
        return {
            "object_a": self.object_a,
            "object_b": self.object_b,
            "axis": self.axis,
            "distance": self.distance,
            "midpoint": list(self.midpoint),
            "start": list(self.start),
            "end": list(self.end),
        }


def _x_gap(a: PlacedObject, fa: Footprint,
           b: PlacedObject, fb: Footprint) -> SpacingMeasurement:
    """Gap along X between two footprints that share a Z span."""
    if a.x <= b.x:
        left, fl, right, fr = a, fa, b, fb
    else:
        left, fl, right, fr = b, fb, a, fa

    gap = fr.min_x - fl.max_x
    z_mid = (max(fl.min_z, fr.min_z) + min(fl.max_z, fr.max_z)) / 2
    start = (fl.max_x, z_mid)
    end = (fr.min_x, z_mid)
    return SpacingMeasurement(
        object_a=left.id,
        object_b=right.id,
        axis="x",
        distance=gap,
        midpoint=((start[0] + end[0]) / 2, z_mid),
        start=start,
        end=end,
    )


def _z_gap(a: PlacedObject, fa: Footprint,
           b: PlacedObject, fb: Footprint) -> SpacingMeasurement:
    """Gap along Z between two footprints that share an X span."""
    if a.z <= b.z:
        near, fn, far, ff = a, fa, b, fb
    else:
        near, fn, far, ff = b, fb, a, fa

    gap = ff.min_z - fn.max_z
    x_mid = (max(fn.min_x, ff.min_x) + min(fn.max_x, ff.max_x)) / 2
    start = (x_mid, fn.max_z)
    end = (x_mid, ff.min_z)
    return SpacingMeasurement(
        object_a=near.id,
        object_b=far.id,
        axis="z",
        distance=gap,
        midpoint=(x_mid, (start[1] + end[1]) / 2),
        start=start,
        end=end,
    )


def _points_close(p: Point2, q: Point2, tolerance: float) -> bool:
    return abs(p[0] - q[0]) < tolerance and abs(p[1] - q[1]) < tolerance


def is_duplicate(m1: SpacingMeasurement, m2: SpacingMeasurement,
                 profile: Optional[RuleProfile] = None) -> bool:
    """
    Check whether two measurements describe the same gap.

    Duplicates either sit at nearly the same midpoint with nearly the same
    length, or share both endpoints (in either orientation).
    """
    profile = profile or SITE_STANDARD

    if (_points_close(m1.midpoint, m2.midpoint, profile.dedup_midpoint_tolerance) and
            abs(m1.distance - m2.distance) < profile.dedup_distance_tolerance):
        return True

    tol = profile.dedup_endpoint_tolerance
    same_direction = (_points_close(m1.start, m2.start, tol) and
                      _points_close(m1.end, m2.end, tol))
    reversed_direction = (_points_close(m1.start, m2.end, tol) and
                          _points_close(m1.end, m2.start, tol))
    return same_direction or reversed_direction


def deduplicate_measurements(measurements: Sequence[SpacingMeasurement],
                             profile: Optional[RuleProfile] = None) -> List[SpacingMeasurement]:
    """Drop duplicate measurements, keeping the first one found."""
    kept: List[SpacingMeasurement] = []
    for m in measurements:
        if not any(is_duplicate(m, k, profile) for k in kept):
            kept.append(m)
    return kept


def extract_adjacent_spacing(objects: Sequence[PlacedObject],
                             profile: Optional[RuleProfile] = None) -> List[SpacingMeasurement]:
    """
    Measure gaps between footprints that face each other.

    For every unordered pair, a Z-span overlap yields an X gap and an X-span
    overlap yields a Z gap. Only gaps strictly above the minimum are kept;
    diagonal neighbours are never measured. Results are deduplicated,
    long-range gaps dropped, and the rest sorted by distance.

    Args:
        objects: Scene snapshot, in input order
        profile: Rule profile supplying the thresholds

    Returns:
        List of SpacingMeasurement sorted ascending by distance
    """
    profile = profile or SITE_STANDARD

    footprints = [(obj, obj.footprint()) for obj in objects]
    # Zero-area footprints never face anything
    footprints = [(obj, fp) for obj, fp in footprints if not fp.is_degenerate]

    raw: List[SpacingMeasurement] = []
    for i, (a, fa) in enumerate(footprints):
        for b, fb in footprints[i + 1:]:
            if fa.overlaps_z(fb):
                m = _x_gap(a, fa, b, fb)
                if m.distance > profile.min_reported_gap:
                    raw.append(m)
            if fa.overlaps_x(fb):
                m = _z_gap(a, fa, b, fb)
                if m.distance > profile.min_reported_gap:
                    raw.append(m)

    unique = deduplicate_measurements(raw, profile)
    measurements = [m for m in unique if m.distance < profile.max_reported_gap]
    measurements.sort(key=lambda m: m.distance)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            f"Adjacency spacing: {len(raw)} raw, {len(unique)} unique, "
            f"{len(measurements)} within {profile.max_reported_gap}m"
        )
    return measurements


def find_nearest_fallbacks(objects: Sequence[PlacedObject],
                           adjacent: Sequence[SpacingMeasurement],
                           profile: Optional[RuleProfile] = None) -> List[SpacingMeasurement]:
    """
    Pair objects without an adjacency gap with their closest neighbour.

    The distance is center-to-center on the ground plane and must be below
    the fallback limit. A pair already covered by an adjacency gap or an
    earlier fallback (in either order) is not added again.

    Args:
        objects: Scene snapshot, in input order
        adjacent: Result of extract_adjacent_spacing for the same snapshot
        profile: Rule profile supplying the distance limit

    Returns:
        List of center-to-center SpacingMeasurement (axis None)
    """
    profile = profile or SITE_STANDARD

    covered: Set[str] = set()
    for m in adjacent:
        covered.update(m.pair)

    fallbacks: List[SpacingMeasurement] = []
    for obj in objects:
        if obj.id in covered:
            continue

        nearest: Optional[PlacedObject] = None
        min_dist = float('inf')
        for other in objects:
            if other is obj or other.id == obj.id:
                continue
            dist = obj.distance_to(other)
            if dist < min_dist:
                min_dist = dist
                nearest = other

        if nearest is None or min_dist >= profile.fallback_max_distance:
            continue

        already_paired = (
            any(m.same_pair(obj.id, nearest.id) for m in adjacent) or
            any(m.same_pair(obj.id, nearest.id) for m in fallbacks)
        )
        if already_paired:
            continue

        start = (obj.x, obj.z)
        end = (nearest.x, nearest.z)
        fallbacks.append(SpacingMeasurement(
            object_a=obj.id,
            object_b=nearest.id,
            axis=None,
            distance=min_dist,
            midpoint=((start[0] + end[0]) / 2, (start[1] + end[1]) / 2),
            start=start,
            end=end,
        ))

    logger.debug(f"Nearest-neighbour fallback: {len(fallbacks)} pairs")
    return fallbacks
