"""
Equipment Classification Patterns

Loads and manages the keyword tables used to classify equipment from its
free-text category and name. Allows users to customize classification
without modifying code.
"""

from typing import List, Dict, Any, Optional
from pathlib import Path
import logging

import yaml

logger = logging.getLogger(__name__)


class EquipmentPatterns:
    """
    Manager for equipment classification keywords.

    Loads keywords from equipment_patterns.yaml by default, but allows
    users to provide custom configuration files.
    """

    REQUIRED_SECTIONS = [
        # Spacing compliance
        'container_like',
        'transformer_like',
        'transformer_exclusions',
        # Electrical roles
        'source',
        'source_exclusions',
        'distribution',
        'load',
        # Site advisor
        'cooling',
    ]

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize pattern manager.

        Args:
            config_path: Optional path to custom patterns YAML file.
                        If None, uses default equipment_patterns.yaml.
        """
        if config_path is None:
            config_path = Path(__file__).parent / "equipment_patterns.yaml"

        self.config_path = Path(config_path)
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self):
        """Load keywords from YAML configuration file."""
        if not self.config_path.exists():
            raise FileNotFoundError(
                f"Pattern configuration file not found: {self.config_path}"
            )

        # Security: Check for symlinks to prevent reading unintended files
        if self.config_path.is_symlink():
            raise ValueError(
                f"Pattern configuration file cannot be a symlink: {self.config_path}"
            )

        with open(self.config_path, 'r') as f:
            config = yaml.safe_load(f) or {}

        if not isinstance(config, dict):
            raise ValueError(
                f"Pattern configuration must be a mapping of sections, "
                f"got {type(config).__name__}: {self.config_path}"
            )

        missing = [s for s in self.REQUIRED_SECTIONS if s not in config]
        if missing:
            raise ValueError(
                f"Configuration file missing required sections: {missing}"
            )

        for section in self.REQUIRED_SECTIONS:
            keywords = config[section]
            if keywords is None:
                keywords = []
            if not isinstance(keywords, list):
                raise ValueError(
                    f"Section '{section}' must be a list of keywords, "
                    f"got {type(keywords).__name__}"
                )
            # Keywords are matched against lowercased text
            config[section] = [str(k).lower() for k in keywords]

        self._config = config
        logger.debug(f"Loaded equipment patterns from {self.config_path}")

    # ==========================================================================
    # Spacing Compliance Keywords (used by validation/compliance.py)
    # ==========================================================================

    @property
    def container_like(self) -> List[str]:
        """Keywords for containers and container-mounted units."""
        return self._config.get('container_like', [])

    @property
    def transformer_like(self) -> List[str]:
        """Keywords for transformers in spacing rules."""
        return self._config.get('transformer_like', [])

    @property
    def transformer_exclusions(self) -> List[str]:
        """Keywords that veto a transformer match."""
        return self._config.get('transformer_exclusions', [])

    # ==========================================================================
    # Electrical Role Keywords (used by electrical/topology.py)
    # ==========================================================================

    @property
    def source(self) -> List[str]:
        """Keywords for power sources (transformers)."""
        return self._config.get('source', [])

    @property
    def source_exclusions(self) -> List[str]:
        """Keywords that veto a source match."""
        return self._config.get('source_exclusions', [])

    @property
    def distribution(self) -> List[str]:
        """Keywords for distribution units (PDU, skid, switchboard)."""
        return self._config.get('distribution', [])

    @property
    def load(self) -> List[str]:
        """Keywords for electrical loads (containers)."""
        return self._config.get('load', [])

    # ==========================================================================
    # Advisor Keywords (used by validation/advisor.py)
    # ==========================================================================

    @property
    def cooling(self) -> List[str]:
        """Keywords for cooling units."""
        return self._config.get('cooling', [])

    def reload(self):
        """Reload configuration from file (useful during development)."""
        self._load_config()


# Global instance for convenience
_default_patterns: Optional[EquipmentPatterns] = None


def get_patterns(config_path: Optional[str] = None) -> EquipmentPatterns:
    """
    Get equipment patterns instance.

    Args:
        config_path: Optional path to custom patterns file.
                    If None, uses cached default instance.

    Returns:
        EquipmentPatterns instance
    """
    global _default_patterns

    if config_path is not None:
        # Custom config path - create new instance
        return EquipmentPatterns(config_path)

    if _default_patterns is None:
        _default_patterns = EquipmentPatterns()

    return _default_patterns


def reload_patterns():
    """Reload default patterns from configuration file."""
    global _default_patterns
    if _default_patterns is not None:
        _default_patterns.reload()
