"""
Projection module for CityJSON Mesher.

Provides a pluggable projection interface and the planar projector used
to flatten 3D surfaces into 2D before triangulation.
"""

from typing import Sequence

from ..models.geometry import Point3D
from .base import IProjector
from .planar import PlanarProjector, estimate_normal, plane_basis, project


def create_projector(points: Sequence[Point3D]) -> IProjector:
    """
    Factory function to create the default projector for a surface.

    Currently uses a planar projection onto the Newell best-fit plane
    of the given points.

    Args:
        points: All vertices of the surface (exterior ring and holes)

    Returns:
        IProjector implementation
    """
    return PlanarProjector.for_loop(points)


__all__ = [
    'IProjector',
    'PlanarProjector',
    'create_projector',
    'estimate_normal',
    'plane_basis',
    'project',
]
