"""
Scene Abstraction Layer

Provides the read-only view of a site layout that the analysis passes work
on. Objects are owned by the external scene editor; everything here is a
plain snapshot that the engine reads but never mutates.

Dimensions arrive in millimetres, all footprint math is done in metres on
the ground plane (X/Z). The vertical axis (Y) is carried for completeness
but ignored by every analysis pass.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple
import math


# Dimensions are stored in millimetres
MM_PER_M = 1000.0


@dataclass(frozen=True)
class Vector3:
    """A 3D point or per-axis multiplier."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass(frozen=True)
class Extents:
    """Nominal object dimensions (mm)."""
    width: float = 0.0   # along X
    height: float = 0.0  # along Y, unused by the engine
    depth: float = 0.0   # along Z


@dataclass(frozen=True)
class Footprint:
    """Axis-aligned rectangle on the ground plane (metres)."""
    min_x: float
    max_x: float
    min_z: float
    max_z: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def depth(self) -> float:
        return self.max_z - self.min_z

    @property
    def center(self) -> Tuple[float, float]:
        return ((self.min_x + self.max_x) / 2, (self.min_z + self.max_z) / 2)

    @property
    def is_degenerate(self) -> bool:
        """True for zero-area footprints (zero or negative dimensions)."""
        return self.width <= 0 or self.depth <= 0

    def overlaps_x(self, other: 'Footprint') -> bool:
        """Check if the X spans share any coordinate (touching counts)."""
        return not (self.max_x < other.min_x or other.max_x < self.min_x)

    def overlaps_z(self, other: 'Footprint') -> bool:
        """Check if the Z spans share any coordinate (touching counts)."""
        return not (self.max_z < other.min_z or other.max_z < self.min_z)

    def intersects(self, other: 'Footprint') -> bool:
        """Check for a strictly positive-area intersection."""
        return (self.min_x < other.max_x and other.min_x < self.max_x and
                self.min_z < other.max_z and other.min_z < self.max_z)


@dataclass(frozen=True)
class PlacedObject:
    """A piece of equipment placed in the site layout.

    ``category`` and ``name`` are free text; roles are inferred from them by
    keyword matching (see ``siteplace.patterns``), never from a closed enum.
    """
    id: str
    category: str
    position: Vector3 = field(default_factory=Vector3)
    extents: Extents = field(default_factory=Extents)
    scale: Vector3 = field(default_factory=lambda: Vector3(1.0, 1.0, 1.0))
    name: str = ""

    @property
    def x(self) -> float:
        return self.position.x

    @property
    def z(self) -> float:
        return self.position.z

    @property
    def effective_width(self) -> float:
        """Footprint size along X in metres."""
        return self.extents.width * self.scale.x / MM_PER_M

    @property
    def effective_depth(self) -> float:
        """Footprint size along Z in metres."""
        return self.extents.depth * self.scale.z / MM_PER_M

    @property
    def label(self) -> str:
        """Category and name joined, for keyword matching on both fields."""
        return f"{self.category} {self.name}".strip()

    def footprint(self) -> Footprint:
        """Compute the ground-plane footprint of this object."""
        return compute_footprint(self)

    def distance_to(self, other: 'PlacedObject') -> float:
        """Calculate center-to-center distance on the ground plane."""
        dx = self.x - other.x
        dz = self.z - other.z
        return math.sqrt(dx * dx + dz * dz)


def compute_footprint(obj: PlacedObject) -> Footprint:
    """
    Convert an object's center, dimensions and scale into a footprint.

    Zero or negative effective dimensions collapse to a zero-area footprint
    centred on the object.
    """
    half_w = max(obj.effective_width, 0.0) / 2
    half_d = max(obj.effective_depth, 0.0) / 2
    return Footprint(
        min_x=obj.x - half_w,
        max_x=obj.x + half_w,
        min_z=obj.z - half_d,
        max_z=obj.z + half_d,
    )


def center_distance(a: PlacedObject, b: PlacedObject) -> float:
    """Euclidean distance between object centers (X/Z only)."""
    return a.distance_to(b)


@dataclass
class Scene:
    """
    Ordered snapshot of placed objects.

    Input order is preserved because several passes break ties by the
    first-found object.
    """
    name: str = ""
    objects: List[PlacedObject] = field(default_factory=list)

    def __post_init__(self):
        self._by_id: Dict[str, PlacedObject] = {o.id: o for o in self.objects}

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self):
        return iter(self.objects)

    def add_object(self, obj: PlacedObject):
        """Append an object to the snapshot."""
        self.objects.append(obj)
        self._by_id[obj.id] = obj

    def get_object(self, object_id: str) -> Optional[PlacedObject]:
        """Get an object by id."""
        return self._by_id.get(object_id)

    def get_bounding_box(self) -> Optional[Tuple[float, float, float, float]]:
        """Get (min_x, min_z, max_x, max_z) over all object centers."""
        return bounding_extent(self.objects)


def bounding_extent(objects: Iterable[PlacedObject],
                    margin: float = 0.0) -> Optional[Tuple[float, float, float, float]]:
    """
    Get (min_x, min_z, max_x, max_z) over object centers, padded by margin.

    Returns None for an empty collection.
    """
    xs = []
    zs = []
    for obj in objects:
        xs.append(obj.x)
        zs.append(obj.z)
    if not xs:
        return None
    return (min(xs) - margin, min(zs) - margin,
            max(xs) + margin, max(zs) + margin)
