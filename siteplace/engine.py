"""
Layout Annotation Engine

Single entry point that runs every analysis pass over one scene snapshot.
Call it again whenever the caller's object collection changes; nothing is
cached between calls, so concurrent calls on different snapshots are safe.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence
import logging

from .electrical.topology import ElectricalTopology, infer_topology
from .layout.alignment import AlignmentResult, group_alignments
from .layout.spacing import (
    SpacingMeasurement,
    extract_adjacent_spacing,
    find_nearest_fallbacks,
)
from .patterns import EquipmentPatterns
from .rules.profiles import RuleProfile, SITE_STANDARD
from .scene.abstraction import PlacedObject
from .validation.compliance import ComplianceStatus, ComplianceVerdict, classify

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SpacingAnnotation:
    """An adjacency gap together with its compliance verdict."""
    measurement: SpacingMeasurement
    verdict: ComplianceVerdict

    def to_dict(self) -> Dict:
        d = self.measurement.to_dict()
        d["verdict"] = self.verdict.to_dict()
        return d


@dataclass
class LayoutAnnotations:
    """Everything a renderer needs to annotate one snapshot."""
    alignment: AlignmentResult = field(default_factory=AlignmentResult)
    spacing: List[SpacingAnnotation] = field(default_factory=list)
    # Center-to-center distances, labelled but not classified
    fallback_spacing: List[SpacingMeasurement] = field(default_factory=list)
    topology: ElectricalTopology = field(default_factory=ElectricalTopology)

    def get_spacing_by_status(self, status: ComplianceStatus) -> List[SpacingAnnotation]:
        return [s for s in self.spacing if s.verdict.status == status]

    def summary(self) -> str:
        """Generate human-readable summary."""
        lines = [
            f"Alignment: {len(self.alignment.rows)} rows, {len(self.alignment.columns)} columns",
        ]
        for group in self.alignment.groups:
            kind = "row" if group.axis == "z" else "column"
            lines.append(f"  {kind} {group.axis}={group.coordinate:g}: {', '.join(group.member_ids)}")

        lines.append("")
        lines.append(f"Spacing: {len(self.spacing)} adjacency gaps")
        for s in self.spacing:
            m = s.measurement
            lines.append(
                f"  [{s.verdict.status.value}] {m.object_a} <-> {m.object_b} "
                f"{m.distance:.2f}m along {m.axis} - {s.verdict.description}"
            )

        if self.fallback_spacing:
            lines.append("")
            lines.append(f"Nearest neighbours: {len(self.fallback_spacing)}")
            for m in self.fallback_spacing:
                lines.append(f"  {m.object_a} <-> {m.object_b} {m.distance:.2f}m")

        lines.append("")
        lines.append(self.topology.summary())
        return "\n".join(lines)

    def to_dict(self) -> Dict:
        return {
            "alignment": self.alignment.to_dict(),
            "spacing": [s.to_dict() for s in self.spacing],
            "fallback_spacing": [m.to_dict() for m in self.fallback_spacing],
            "topology": self.topology.to_dict(),
        }


def annotate_spacing(objects: Sequence[PlacedObject],
                     measurements: Sequence[SpacingMeasurement],
                     profile: Optional[RuleProfile] = None,
                     patterns: Optional[EquipmentPatterns] = None) -> List[SpacingAnnotation]:
    """Attach a compliance verdict to each adjacency measurement."""
    by_id = {o.id: o for o in objects}
    annotations = []
    for m in measurements:
        verdict = classify(
            m.distance,
            by_id[m.object_a].category,
            by_id[m.object_b].category,
            profile,
            patterns,
        )
        annotations.append(SpacingAnnotation(measurement=m, verdict=verdict))
    return annotations


def recompute(objects: Sequence[PlacedObject],
              profile: Optional[RuleProfile] = None,
              patterns: Optional[EquipmentPatterns] = None) -> LayoutAnnotations:
    """
    Run all analysis passes over a scene snapshot.

    Args:
        objects: Scene snapshot, in input order; never modified
        profile: Rule profile supplying all thresholds
        patterns: Optional custom keyword tables

    Returns:
        LayoutAnnotations; empty collections for an empty snapshot
    """
    profile = profile or SITE_STANDARD
    objects = list(objects)

    alignment = group_alignments(objects, profile, patterns=patterns)
    adjacent = extract_adjacent_spacing(objects, profile)
    fallbacks = find_nearest_fallbacks(objects, adjacent, profile)
    topology = infer_topology(objects, profile, patterns)

    annotations = LayoutAnnotations(
        alignment=alignment,
        spacing=annotate_spacing(objects, adjacent, profile, patterns),
        fallback_spacing=fallbacks,
        topology=topology,
    )

    logger.debug(
        f"Recomputed {len(objects)} objects: {len(alignment.groups)} alignment groups, "
        f"{len(adjacent)} gaps, {len(fallbacks)} fallbacks, "
        f"{len(topology.connections)} connections"
    )
    return annotations
