"""Alignment grouping and spacing extraction."""

from .alignment import AlignmentGroup, AlignmentResult, group_alignments, snap_to_grid
from .spacing import (
    SpacingMeasurement,
    extract_adjacent_spacing,
    deduplicate_measurements,
    find_nearest_fallbacks,
)

__all__ = [
    "AlignmentGroup",
    "AlignmentResult",
    "group_alignments",
    "snap_to_grid",
    "SpacingMeasurement",
    "extract_adjacent_spacing",
    "deduplicate_measurements",
    "find_nearest_fallbacks",
]
