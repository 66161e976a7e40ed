"""
Shared test fixtures for SitePlace tests.

Provides reusable placed objects and scene snapshots for testing
the spacing, compliance, topology and advisor passes.
"""

import pytest
from typing import List

from siteplace.scene.abstraction import Extents, PlacedObject, Scene, Vector3


# Standard 40ft container footprint (mm)
CONTAINER_DIMS = Extents(width=12192, height=2896, depth=2438)


def build_object(object_id: str, category: str, x: float, z: float,
                 width: float = 2000, depth: float = 2000,
                 name: str = "", scale: Vector3 = Vector3(1.0, 1.0, 1.0)) -> PlacedObject:
    """Build a placed object with a footprint of width x depth (mm)."""
    return PlacedObject(
        id=object_id,
        category=category,
        name=name,
        position=Vector3(x, 0.0, z),
        extents=Extents(width=width, height=2500, depth=depth),
        scale=scale,
    )


def build_container(object_id: str, x: float, z: float, name: str = "") -> PlacedObject:
    """Build a standard 40ft container."""
    return PlacedObject(
        id=object_id,
        category="container",
        name=name,
        position=Vector3(x, 1.45, z),
        extents=CONTAINER_DIMS,
    )


@pytest.fixture
def single_container() -> PlacedObject:
    """A lone container at the origin."""
    return build_container("C1", 0.0, 0.0)


@pytest.fixture
def four_containers() -> List[PlacedObject]:
    """Two rows of two containers, 20m apart center-to-center along X."""
    return [
        build_container("C1", -10.0, 0.0),
        build_container("C2", -10.0, 10.0),
        build_container("C3", 10.0, 0.0),
        build_container("C4", 10.0, 10.0),
    ]


@pytest.fixture
def transformer_and_pdu() -> List[PlacedObject]:
    """A transformer 4.5m from a single distribution unit."""
    return [
        build_object("T1", "transformer", 0.0, 0.0, width=2500, depth=2000),
        build_object("P1", "pdu", 4.5, 0.0, width=1000, depth=800),
    ]


@pytest.fixture
def power_chain() -> List[PlacedObject]:
    """One transformer, one distribution skid and three containers."""
    return [
        build_object("T1", "transformer", 0.0, -10.0, width=2500, depth=2000,
                     name="Transformer 2.5MVA"),
        build_object("P1", "distribution", 0.0, -4.0, width=2000, depth=800,
                     name="LV Skid"),
        build_container("C1", 0.0, 4.0),
        build_container("C2", 0.0, 12.0),
        build_container("C3", 0.0, 40.0),
    ]


@pytest.fixture
def farm_scene(power_chain) -> Scene:
    """A named scene wrapping the power chain."""
    return Scene(name="farm", objects=list(power_chain))


@pytest.fixture
def make_object():
    """Factory for placed objects with arbitrary category and size."""
    return build_object


@pytest.fixture
def make_container():
    """Factory for standard containers."""
    return build_container
