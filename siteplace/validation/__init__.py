"""Spacing compliance and site advisor."""

from .compliance import ComplianceStatus, ComplianceVerdict, classify
from .advisor import AdvisorFlag, SiteAdvisor, SiteReport, Severity, Priority

__all__ = [
    "ComplianceStatus",
    "ComplianceVerdict",
    "classify",
    "AdvisorFlag",
    "SiteAdvisor",
    "SiteReport",
    "Severity",
    "Priority",
]
