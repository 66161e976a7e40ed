"""
Spacing Compliance Classifier

Maps a measured gap and the categories of the two objects on either side of
it to a verdict. Rules are evaluated in order, first match wins:

1. Main aisle - wide gaps satisfy vehicle and fire access for any pair
2. Container to container - maintenance access and thermal spacing
3. Anything next to a transformer - electrical safety distance
4. Everything else - standard spacing
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from ..classification import is_container_like, is_transformer_like
from ..patterns import EquipmentPatterns
from ..rules.profiles import RuleProfile, SITE_STANDARD


class ComplianceStatus(Enum):
    """Verdict levels, in increasing order of concern."""
    OK = "ok"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class ComplianceVerdict:
    """Outcome of classifying one measured gap."""
    rule: str
    description: str
    status: ComplianceStatus

    @property
    def is_ok(self) -> bool:
        return self.status == ComplianceStatus.OK

    def to_dict(self) -> Dict:
        return {
            "rule": self.rule,
            "description": self.description,
            "status": self.status.value,
        }


def classify(distance: float, category_a: str, category_b: str,
             profile: Optional[RuleProfile] = None,
             patterns: Optional[EquipmentPatterns] = None) -> ComplianceVerdict:
    """
    Classify a gap between two objects.

    Args:
        distance: Measured gap in metres
        category_a: Free-text category of one object
        category_b: Free-text category of the other object
        profile: Rule profile supplying the thresholds
        patterns: Optional custom keyword tables

    Returns:
        ComplianceVerdict; unknown categories use the default rule
    """
    p = profile or SITE_STANDARD

    if distance >= p.main_aisle:
        return ComplianceVerdict(
            rule="main aisle",
            description=f"Main aisle ({distance:.1f}m) - vehicle and fire access clear",
            status=ComplianceStatus.OK,
        )

    if (is_container_like(category_a, patterns) and
            is_container_like(category_b, patterns)):
        if distance >= p.container_ok:
            return ComplianceVerdict(
                rule="container spacing",
                description=f"Container spacing OK ({distance:.2f}m >= {p.container_ok}m)",
                status=ComplianceStatus.OK,
            )
        if distance >= p.container_warning:
            return ComplianceVerdict(
                rule="reduced spacing",
                description=f"Reduced spacing ({distance:.2f}m) - maintenance access limited",
                status=ComplianceStatus.WARNING,
            )
        return ComplianceVerdict(
            rule="insufficient spacing",
            description=f"Insufficient spacing ({distance:.2f}m < {p.container_warning}m) - thermal/access risk",
            status=ComplianceStatus.ERROR,
        )

    if (is_transformer_like(category_a, patterns) or
            is_transformer_like(category_b, patterns)):
        if distance >= p.transformer_ok:
            return ComplianceVerdict(
                rule="electrical safety distance",
                description=f"Electrical safety distance OK ({distance:.2f}m >= {p.transformer_ok}m)",
                status=ComplianceStatus.OK,
            )
        if distance >= p.transformer_warning:
            return ComplianceVerdict(
                rule="borderline electrical distance",
                description=f"Borderline ({distance:.2f}m) - verify local electrical code",
                status=ComplianceStatus.WARNING,
            )
        return ComplianceVerdict(
            rule="critical electrical distance",
            description=f"Critical ({distance:.2f}m < {p.transformer_warning}m) - increase distance",
            status=ComplianceStatus.ERROR,
        )

    if distance >= p.default_ok:
        return ComplianceVerdict(
            rule="standard spacing",
            description=f"Standard spacing ({distance:.2f}m)",
            status=ComplianceStatus.OK,
        )
    if distance >= p.default_warning:
        return ComplianceVerdict(
            rule="minimal spacing",
            description=f"Minimal spacing ({distance:.2f}m) - limited maintenance",
            status=ComplianceStatus.WARNING,
        )
    # NOTE: unlike the container and transformer rules, the default rule
    # never escalates to ERROR, even for very tight gaps.
    return ComplianceVerdict(
        rule="very tight spacing",
        description=f"Very tight ({distance:.2f}m) - confirm intentional adjacency",
        status=ComplianceStatus.WARNING,
    )
