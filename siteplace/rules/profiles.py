"""
Site Rule Profiles

Defines the numeric thresholds used by the spacing, compliance and
electrical topology passes. Distances are in metres, measured on the
ground plane.
"""

from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class LinkRule:
    """Distance rule for one kind of electrical link (metres)."""
    optimal_distance: float
    max_distance: float

    def to_dict(self) -> Dict:
        return {
            "optimal_distance": self.optimal_distance,
            "max_distance": self.max_distance,
        }


@dataclass(frozen=True)
class RuleProfile:
    """Spacing and electrical rules for a site."""

    name: str
    description: str = ""

    # Alignment guides
    alignment_grid: float = 0.5
    alignment_margin: float = 5.0

    # Adjacency spacing extraction
    min_reported_gap: float = 0.2        # gaps must be strictly larger
    max_reported_gap: float = 30.0       # gaps at or above are dropped
    dedup_midpoint_tolerance: float = 2.0   # per axis, strictly less than
    dedup_distance_tolerance: float = 0.5
    dedup_endpoint_tolerance: float = 0.5

    # Nearest-neighbour fallback
    fallback_max_distance: float = 25.0  # strictly less than

    # Compliance thresholds
    main_aisle: float = 15.0
    container_ok: float = 3.9
    container_warning: float = 2.0
    transformer_ok: float = 5.0
    transformer_warning: float = 3.0
    default_ok: float = 3.0
    default_warning: float = 1.0

    # Electrical topology
    source_search_radius: float = 20.0   # strictly less than
    loads_per_feeder: int = 2
    source_to_distribution: LinkRule = LinkRule(5.0, 8.0)
    distribution_to_load: LinkRule = LinkRule(10.0, 15.0)
    source_to_load: LinkRule = LinkRule(15.0, 20.0)

    # Site advisor
    load_to_source_max: float = 50.0
    distribution_to_load_max: float = 30.0
    container_min_spacing: float = 2.0
    container_overlap_floor: float = -1.0


SITE_STANDARD = RuleProfile(
    name="Site Standard",
    description="Container farm spacing and LV distribution rules",
)

# Profile registry
PROFILES: Dict[str, RuleProfile] = {
    "site_standard": SITE_STANDARD,
}

DEFAULT_PROFILE = "site_standard"


def get_profile(name: str = DEFAULT_PROFILE) -> RuleProfile:
    """
    Get rule profile by name.

    Args:
        name: Profile identifier (e.g., "site_standard")

    Returns:
        RuleProfile instance

    Raises:
        ValueError: If profile name is not found
    """
    if name not in PROFILES:
        available = ", ".join(sorted(PROFILES.keys()))
        raise ValueError(f"Unknown rule profile '{name}'. Available: {available}")
    return PROFILES[name]


def list_profiles() -> List[str]:
    """List all available rule profile names."""
    return sorted(PROFILES.keys())
