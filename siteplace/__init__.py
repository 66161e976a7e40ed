"""
SitePlace - Site Layout Compliance and Electrical Topology Inference

Analyses a snapshot of equipment placed on a site (containers, cooling
units, transformers, distribution units) and produces alignment guides,
spacing compliance verdicts and an inferred power distribution topology.
"""

__version__ = "0.1.0"
__author__ = "SitePlace Team"

from .scene.abstraction import PlacedObject, Scene, Vector3, Extents, Footprint
from .engine import LayoutAnnotations, recompute
from .validation.compliance import classify
from .validation.advisor import SiteAdvisor, SiteReport
from .electrical.topology import infer_topology
from .rules.profiles import RuleProfile, get_profile

__all__ = [
    "PlacedObject",
    "Scene",
    "Vector3",
    "Extents",
    "Footprint",
    "LayoutAnnotations",
    "recompute",
    "classify",
    "SiteAdvisor",
    "SiteReport",
    "infer_topology",
    "RuleProfile",
    "get_profile",
]
