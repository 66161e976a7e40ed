"""
Site Advisor

Reviews a site layout and flags the problems an engineer should look at:
collisions, containers without power, equipment too far from its supply,
containers packed too tightly, spacing gaps that fail compliance and
implausible inferred wiring.

Only real problems are flagged; minor misalignments are left to the
alignment guides.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence
from enum import Enum
import logging

from ..classification import PowerRole, is_cooling, power_role
from ..electrical.topology import ElectricalTopology, infer_topology
from ..layout.spacing import extract_adjacent_spacing
from ..patterns import EquipmentPatterns
from ..rules.profiles import RuleProfile, SITE_STANDARD
from ..scene.abstraction import PlacedObject
from .compliance import ComplianceStatus, classify

logger = logging.getLogger(__name__)


class Severity(Enum):
    """Severity levels for advisor flags."""
    INFO = "info"           # Informational note
    WARNING = "warning"     # Should be reviewed
    ERROR = "error"         # Likely problem


class Priority(Enum):
    """Display priority of a flag."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


PRIORITY_ORDER = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}


@dataclass
class AdvisorFlag:
    """A flagged issue in the site layout."""
    severity: Severity
    priority: Priority
    rule: str
    title: str
    message: str
    object_ids: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        """Convert to dictionary for serialization."""
        return {
            "severity": self.severity.value,
            "priority": self.priority.value,
            "rule": self.rule,
            "title": self.title,
            "message": self.message,
            "object_ids": list(self.object_ids),
        }


@dataclass
class SiteReport:
    """Complete advisor assessment for a layout."""
    flags: List[AdvisorFlag] = field(default_factory=list)

    # Statistics
    object_count: int = 0
    measurement_count: int = 0
    connection_count: int = 0

    def has_errors(self) -> bool:
        return any(f.severity == Severity.ERROR for f in self.flags)

    def get_flags_by_severity(self, severity: Severity) -> List[AdvisorFlag]:
        """Get all flags of a specific severity."""
        return [f for f in self.flags if f.severity == severity]

    def get_flags_by_rule(self, rule: str) -> List[AdvisorFlag]:
        """Get all flags raised by a specific rule."""
        return [f for f in self.flags if f.rule == rule]

    def summary(self) -> str:
        """Generate human-readable summary."""
        lines = [
            f"Objects: {self.object_count}",
            f"Spacing measurements: {self.measurement_count}",
            f"Electrical connections: {self.connection_count}",
            "",
        ]

        if self.flags:
            lines.append("Flags:")
            for flag in self.flags:
                icon = {
                    Severity.ERROR: "[ERROR]",
                    Severity.WARNING: "[WARNING]",
                    Severity.INFO: "[INFO]",
                }[flag.severity]
                lines.append(f"  {icon} [{flag.rule}] {flag.title}: {flag.message}")
        else:
            lines.append("No issues found.")

        if self.has_errors():
            lines.append("")
            lines.append("*** LAYOUT REVIEW REQUIRED ***")

        return "\n".join(lines)

    def to_markdown(self) -> str:
        """Generate markdown report."""
        lines = [
            "# Site Layout Report",
            "",
            "## Statistics",
            "",
            f"- Objects: {self.object_count}",
            f"- Spacing measurements: {self.measurement_count}",
            f"- Electrical connections: {self.connection_count}",
            "",
        ]

        if self.flags:
            lines.extend([
                "## Issues",
                "",
            ])

            for severity in [Severity.ERROR, Severity.WARNING, Severity.INFO]:
                severity_flags = self.get_flags_by_severity(severity)
                if severity_flags:
                    lines.append(f"### {severity.value.title()}")
                    lines.append("")
                    for flag in severity_flags:
                        lines.append(f"- **[{flag.rule}]** {flag.title}: {flag.message}")
                        if flag.object_ids:
                            lines.append(f"  - Objects: {', '.join(flag.object_ids)}")
                    lines.append("")

        if self.has_errors():
            lines.extend([
                "---",
                "",
                "> **Note:** This layout has errors that must be reviewed.",
                "",
            ])

        return "\n".join(lines)

    def to_dict(self) -> Dict:
        return {
            "flags": [f.to_dict() for f in self.flags],
            "object_count": self.object_count,
            "measurement_count": self.measurement_count,
            "connection_count": self.connection_count,
        }


class SiteAdvisor:
    """
    Flag layout problems using spacing, electrical and collision rules.
    """

    def __init__(self, profile: Optional[RuleProfile] = None,
                 patterns: Optional[EquipmentPatterns] = None):
        """
        Initialize advisor.

        Args:
            profile: Rule profile supplying the thresholds
            patterns: Optional custom keyword tables
        """
        self.profile = profile or SITE_STANDARD
        self.patterns = patterns

    def assess(self, objects: Sequence[PlacedObject],
               topology: Optional[ElectricalTopology] = None) -> SiteReport:
        """
        Generate a report for a scene snapshot.

        Args:
            objects: Scene snapshot, in input order
            topology: Precomputed topology for the same snapshot, if available

        Returns:
            SiteReport with flags sorted by priority
        """
        objects = list(objects)
        if topology is None:
            topology = infer_topology(objects, self.profile, self.patterns)

        measurements = extract_adjacent_spacing(objects, self.profile)

        report = SiteReport(
            object_count=len(objects),
            measurement_count=len(measurements),
            connection_count=len(topology.connections),
        )

        roles = {o.id: power_role(o, self.patterns) for o in objects}
        loads = [o for o in objects if roles[o.id] == PowerRole.LOAD]
        sources = [o for o in objects if roles[o.id] == PowerRole.SOURCE]
        distributions = [o for o in objects if roles[o.id] == PowerRole.DISTRIBUTION]

        report.flags.extend(self._check_collisions(objects, roles))
        report.flags.extend(self._check_power_supply(loads, sources))
        report.flags.extend(self._check_distribution_reach(distributions, loads))
        report.flags.extend(self._check_container_spacing(loads))
        report.flags.extend(self._check_spacing_compliance(objects, measurements))
        report.flags.extend(self._check_topology(topology))

        # Stable sort keeps rule order within a priority
        report.flags.sort(key=lambda f: PRIORITY_ORDER[f.priority])

        logger.debug(f"Advisor: {len(report.flags)} flags for {len(objects)} objects")
        return report

    def _check_collisions(self, objects: List[PlacedObject],
                          roles: Dict[str, PowerRole]) -> List[AdvisorFlag]:
        """Flag objects whose footprints overlap."""
        flags = []
        footprints = [o.footprint() for o in objects]

        for i, a in enumerate(objects):
            for j in range(i + 1, len(objects)):
                b = objects[j]

                # Cooling units sit on top of containers
                a_cooling = is_cooling(a, self.patterns)
                b_cooling = is_cooling(b, self.patterns)
                if ((a_cooling and roles[b.id] == PowerRole.LOAD) or
                        (b_cooling and roles[a.id] == PowerRole.LOAD)):
                    continue

                if footprints[i].intersects(footprints[j]):
                    flags.append(AdvisorFlag(
                        severity=Severity.ERROR,
                        priority=Priority.HIGH,
                        rule="collision",
                        title="Collision detected",
                        message=f"{_display(a)} and {_display(b)} overlap",
                        object_ids=[a.id, b.id],
                    ))
        return flags

    def _check_power_supply(self, loads: List[PlacedObject],
                            sources: List[PlacedObject]) -> List[AdvisorFlag]:
        """Flag loads with no source at all, or none within reach."""
        flags = []

        if loads and not sources:
            flags.append(AdvisorFlag(
                severity=Severity.WARNING,
                priority=Priority.HIGH,
                rule="no-power",
                title="No transformer",
                message=f"{len(loads)} containers without a power source",
            ))
            return flags

        limit = self.profile.load_to_source_max
        for load in loads:
            dist = min(load.distance_to(s) for s in sources)
            if dist > limit:
                nearest = min(sources, key=load.distance_to)
                flags.append(AdvisorFlag(
                    severity=Severity.WARNING,
                    priority=Priority.HIGH,
                    rule="far-from-power",
                    title="Too far from transformer",
                    message=f"{_display(load)} is {dist:.0f}m away (max: {limit:.0f}m)",
                    object_ids=[load.id, nearest.id],
                ))
        return flags

    def _check_distribution_reach(self, distributions: List[PlacedObject],
                                  loads: List[PlacedObject]) -> List[AdvisorFlag]:
        """Flag distribution units too far from every load (voltage drop)."""
        flags = []
        if not loads:
            return flags

        limit = self.profile.distribution_to_load_max
        for unit in distributions:
            nearest = min(loads, key=unit.distance_to)
            dist = unit.distance_to(nearest)
            if dist > limit:
                flags.append(AdvisorFlag(
                    severity=Severity.WARNING,
                    priority=Priority.HIGH,
                    rule="distribution-distance",
                    title="Distribution unit too far",
                    message=f"{_display(unit)} is {dist:.0f}m from the nearest container (max: {limit:.0f}m)",
                    object_ids=[unit.id, nearest.id],
                ))
        return flags

    def _check_container_spacing(self, loads: List[PlacedObject]) -> List[AdvisorFlag]:
        """Flag container pairs packed closer than the maintenance minimum.

        The gap is estimated from center distance minus half widths, so only
        side-by-side containers are judged accurately.
        """
        flags = []
        minimum = self.profile.container_min_spacing
        floor = self.profile.container_overlap_floor

        for i, a in enumerate(loads):
            for b in loads[i + 1:]:
                gap = a.distance_to(b) - (a.effective_width + b.effective_width) / 2
                if floor < gap < minimum:
                    flags.append(AdvisorFlag(
                        severity=Severity.WARNING,
                        priority=Priority.MEDIUM,
                        rule="too-close",
                        title="Reduced spacing",
                        message=f"{gap:.1f}m between {_display(a)} and {_display(b)} (min: {minimum:.0f}m)",
                        object_ids=[a.id, b.id],
                    ))
        return flags

    def _check_spacing_compliance(self, objects: List[PlacedObject],
                                  measurements) -> List[AdvisorFlag]:
        """Flag adjacency gaps that fail the spacing rules."""
        flags = []
        by_id = {o.id: o for o in objects}

        for m in measurements:
            a = by_id[m.object_a]
            b = by_id[m.object_b]
            verdict = classify(m.distance, a.category, b.category,
                               self.profile, self.patterns)
            if verdict.status == ComplianceStatus.OK:
                continue

            is_error = verdict.status == ComplianceStatus.ERROR
            flags.append(AdvisorFlag(
                severity=Severity.ERROR if is_error else Severity.WARNING,
                priority=Priority.HIGH if is_error else Priority.MEDIUM,
                rule=f"spacing-{verdict.status.value}",
                title=verdict.rule.capitalize(),
                message=f"{_display(a)} / {_display(b)}: {verdict.description}",
                object_ids=[a.id, b.id],
            ))
        return flags

    def _check_topology(self, topology: ElectricalTopology) -> List[AdvisorFlag]:
        """Flag distribution units that the greedy assignment overloaded."""
        flags = []
        for unit_id in topology.overloaded_distribution_ids:
            feeders = [c.source_id for c in topology.get_connections_to(unit_id)]
            flags.append(AdvisorFlag(
                severity=Severity.WARNING,
                priority=Priority.MEDIUM,
                rule="topology-plausibility",
                title="Shared distribution unit",
                message=f"{unit_id} is the nearest distribution unit of {len(feeders)} transformers ({', '.join(feeders)})",
                object_ids=[unit_id] + feeders,
            ))
        return flags


def _display(obj: PlacedObject) -> str:
    return obj.name or obj.id
