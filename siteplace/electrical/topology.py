"""
Electrical Topology Inference

Infers a power distribution chain (transformer -> distribution unit ->
load) from object positions alone. Roles come from keyword matching on
category and name; connections are assigned greedily to the nearest
candidates.

The assignment is not a global matching: each source picks its nearest
distribution unit independently, so several sources may land on the same
unit. Such layouts are reported through ElectricalTopology.is_plausible
rather than corrected. Compliance colours on each connection are
informational and never change the assignment.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple
import logging

from ..classification import PowerRole, power_role
from ..patterns import EquipmentPatterns
from ..rules.profiles import LinkRule, RuleProfile, SITE_STANDARD
from ..scene.abstraction import PlacedObject

logger = logging.getLogger(__name__)


class LinkType(Enum):
    """Kinds of inferred electrical connections."""
    SOURCE_TO_DISTRIBUTION = "source-to-distribution"
    DISTRIBUTION_TO_LOAD = "distribution-to-load"
    SOURCE_TO_LOAD = "source-to-load"


class LinkStatus(Enum):
    """Presentational rating of a connection length."""
    OPTIMAL = "optimal"        # green
    ACCEPTABLE = "acceptable"  # amber
    EXCESSIVE = "excessive"    # red


@dataclass(frozen=True)
class ElectricalConnection:
    """A directed connection from a supplying object to a supplied one."""
    source_id: str
    target_id: str
    link_type: LinkType
    distance: float
    rule: LinkRule

    @property
    def is_optimal(self) -> bool:
        return self.distance <= self.rule.optimal_distance

    @property
    def is_acceptable(self) -> bool:
        return self.distance <= self.rule.max_distance

    @property
    def status(self) -> LinkStatus:
        if self.is_optimal:
            return LinkStatus.OPTIMAL
        if self.is_acceptable:
            return LinkStatus.ACCEPTABLE
        return LinkStatus.EXCESSIVE

    def to_dict(self) -> Dict:
        return {
            "from": self.source_id,
            "to": self.target_id,
            "link_type": self.link_type.value,
            "distance": self.distance,
            "rule": self.rule.to_dict(),
            "status": self.status.value,
        }


@dataclass
class ElectricalTopology:
    """Inferred connections plus a plausibility assessment."""
    connections: List[ElectricalConnection] = field(default_factory=list)
    roles: Dict[str, PowerRole] = field(default_factory=dict)

    def get_connections_from(self, object_id: str) -> List[ElectricalConnection]:
        return [c for c in self.connections if c.source_id == object_id]

    def get_connections_to(self, object_id: str) -> List[ElectricalConnection]:
        return [c for c in self.connections if c.target_id == object_id]

    def get_connections_by_type(self, link_type: LinkType) -> List[ElectricalConnection]:
        return [c for c in self.connections if c.link_type == link_type]

    def ids_with_role(self, role: PowerRole) -> List[str]:
        return [oid for oid, r in self.roles.items() if r == role]

    @property
    def overloaded_distribution_ids(self) -> List[str]:
        """Distribution units fed by more than one source."""
        feeds: Dict[str, int] = {}
        for conn in self.get_connections_by_type(LinkType.SOURCE_TO_DISTRIBUTION):
            feeds[conn.target_id] = feeds.get(conn.target_id, 0) + 1
        return [oid for oid, count in feeds.items() if count > 1]

    @property
    def is_plausible(self) -> bool:
        """False when the greedy assignment shares a distribution unit between sources."""
        return not self.overloaded_distribution_ids

    def summary(self) -> str:
        """Generate human-readable summary."""
        if not self.connections:
            return "No electrical connections inferred."

        lines = [f"Electrical topology: {len(self.connections)} connections"]
        for conn in self.connections:
            lines.append(
                f"  [{conn.status.value}] {conn.source_id} -> {conn.target_id} "
                f"({conn.link_type.value}, {conn.distance:.1f}m, "
                f"optimal <= {conn.rule.optimal_distance}m, max {conn.rule.max_distance}m)"
            )
        if not self.is_plausible:
            lines.append("")
            lines.append(
                "Implausible: distribution units fed by several sources: "
                + ", ".join(self.overloaded_distribution_ids)
            )
        return "\n".join(lines)

    def to_dict(self) -> Dict:
        return {
            "connections": [c.to_dict() for c in self.connections],
            "is_plausible": self.is_plausible,
            "overloaded_distribution_ids": self.overloaded_distribution_ids,
        }


def _nearest(obj: PlacedObject,
             candidates: Sequence[PlacedObject]) -> Tuple[Optional[PlacedObject], float]:
    """Closest candidate by center distance; ties go to the first found."""
    nearest = None
    min_dist = float('inf')
    for candidate in candidates:
        dist = obj.distance_to(candidate)
        if dist < min_dist:
            min_dist = dist
            nearest = candidate
    return nearest, min_dist


def _nearest_n(obj: PlacedObject, candidates: Sequence[PlacedObject],
               count: int) -> List[Tuple[PlacedObject, float]]:
    """The count closest candidates, ascending; stable for equal distances."""
    ranked = sorted(
        ((c, obj.distance_to(c)) for c in candidates),
        key=lambda item: item[1],
    )
    return ranked[:count]


def infer_topology(objects: Sequence[PlacedObject],
                   profile: Optional[RuleProfile] = None,
                   patterns: Optional[EquipmentPatterns] = None) -> ElectricalTopology:
    """
    Infer the power distribution topology of a scene.

    1. Each source connects to its nearest distribution unit, if one is
       within the search radius.
    2. Each distribution unit feeds its nearest loads, however far.
    3. Each source left without a distribution unit feeds its nearest
       loads directly, however far.

    Args:
        objects: Scene snapshot, in input order
        profile: Rule profile supplying search radius and link rules
        patterns: Optional custom keyword tables

    Returns:
        ElectricalTopology with connections in assignment order
    """
    profile = profile or SITE_STANDARD
    topology = ElectricalTopology()

    sources: List[PlacedObject] = []
    distributions: List[PlacedObject] = []
    loads: List[PlacedObject] = []

    for obj in objects:
        role = power_role(obj, patterns)
        topology.roles[obj.id] = role
        if role == PowerRole.SOURCE:
            sources.append(obj)
        elif role == PowerRole.DISTRIBUTION:
            distributions.append(obj)
        elif role == PowerRole.LOAD:
            loads.append(obj)

    # 1. Source -> distribution
    fed_sources = set()
    for source in sources:
        unit, dist = _nearest(source, distributions)
        if unit is not None and dist < profile.source_search_radius:
            topology.connections.append(ElectricalConnection(
                source_id=source.id,
                target_id=unit.id,
                link_type=LinkType.SOURCE_TO_DISTRIBUTION,
                distance=dist,
                rule=profile.source_to_distribution,
            ))
            fed_sources.add(source.id)

    # 2. Distribution -> load
    for unit in distributions:
        for load, dist in _nearest_n(unit, loads, profile.loads_per_feeder):
            topology.connections.append(ElectricalConnection(
                source_id=unit.id,
                target_id=load.id,
                link_type=LinkType.DISTRIBUTION_TO_LOAD,
                distance=dist,
                rule=profile.distribution_to_load,
            ))

    # 3. Source -> load for sources without a distribution unit
    for source in sources:
        if source.id in fed_sources:
            continue
        for load, dist in _nearest_n(source, loads, profile.loads_per_feeder):
            topology.connections.append(ElectricalConnection(
                source_id=source.id,
                target_id=load.id,
                link_type=LinkType.SOURCE_TO_LOAD,
                distance=dist,
                rule=profile.source_to_load,
            ))

    logger.debug(
        f"Topology: {len(sources)} sources, {len(distributions)} distribution units, "
        f"{len(loads)} loads -> {len(topology.connections)} connections"
    )
    if not topology.is_plausible:
        logger.info(
            f"Distribution units fed by several sources: {topology.overloaded_distribution_ids}"
        )
    return topology
