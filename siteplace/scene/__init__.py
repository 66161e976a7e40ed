"""Scene snapshot model and loading."""

from .abstraction import (
    Vector3,
    Extents,
    Footprint,
    PlacedObject,
    Scene,
    compute_footprint,
    center_distance,
    bounding_extent,
)
from .loader import SceneFormatError, load_scene, scene_from_data, object_from_dict

__all__ = [
    # Core abstractions
    "Vector3",
    "Extents",
    "Footprint",
    "PlacedObject",
    "Scene",
    "compute_footprint",
    "center_distance",
    "bounding_extent",
    # Snapshot loading
    "SceneFormatError",
    "load_scene",
    "scene_from_data",
    "object_from_dict",
]
