"""Site rule profiles."""

from .profiles import RuleProfile, LinkRule, SITE_STANDARD, get_profile, list_profiles

__all__ = ["RuleProfile", "LinkRule", "SITE_STANDARD", "get_profile", "list_profiles"]
