"""Electrical topology inference."""

from .topology import (
    ElectricalConnection,
    ElectricalTopology,
    LinkStatus,
    LinkType,
    infer_topology,
)

__all__ = [
    "ElectricalConnection",
    "ElectricalTopology",
    "LinkStatus",
    "LinkType",
    "infer_topology",
]
