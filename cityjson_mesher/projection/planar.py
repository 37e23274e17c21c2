"""
Planar projection for CityJSON Mesher.

Flattens a (possibly non-planar) 3D polygon loop onto its best-fit plane
so it can be triangulated in 2D.

The plane normal is estimated with Newell's method, which sums edge
contributions over the whole loop and so tolerates noisy, slightly
non-planar and partly collinear input where a three-point cross product
would be unstable.

The in-plane basis is derived from a fixed reference vector, so the
exterior ring and every hole of one surface are projected with exactly
the same basis as long as they share the normal.
"""

from typing import Sequence, Tuple

from ..config import (
    PROJECTION_REFERENCE,
    PROJECTION_REFERENCE_PERTURBATION,
    PROJECTION_DEGENERATE_DISTANCE,
)
from ..models.geometry import Point3D
from .base import IProjector


def estimate_normal(points: Sequence[Point3D]) -> Point3D:
    """
    Estimate the unit normal of a polygon loop using Newell's method.

    For each edge (p_i, p_i+1), with wrap-around:
        nx += (p_i.y - p_i+1.y) * (p_i.z + p_i+1.z)
        ny += (p_i.z - p_i+1.z) * (p_i.x + p_i+1.x)
        nz += (p_i.x - p_i+1.x) * (p_i.y + p_i+1.y)

    Args:
        points: Loop vertices in order (no repeated closing vertex)

    Returns:
        Normalized normal; the zero vector for degenerate loops
    """
    nx = 0.0
    ny = 0.0
    nz = 0.0

    n = len(points)
    for i in range(n):
        p = points[i]
        q = points[(i + 1) % n]
        nx += (p.y - q.y) * (p.z + q.z)
        ny += (p.z - q.z) * (p.x + q.x)
        nz += (p.x - q.x) * (p.y + q.y)

    return Point3D(nx, ny, nz).normalized()


def plane_basis(normal: Point3D) -> Tuple[Point3D, Point3D]:
    """
    Build an in-plane orthonormal basis (x3, y3) for a unit normal.

    Starts from the reference vector (1.1, 1.1, 1.1), perturbed to
    (2.1, 3.1, 4.1) when it lies within 0.01 of the normal, removes its
    component along the normal and normalizes it to get x3;
    y3 = normal x x3.
    """
    reference = Point3D(*PROJECTION_REFERENCE)

    if reference.distance_to(normal) < PROJECTION_DEGENERATE_DISTANCE:
        reference = reference + Point3D(*PROJECTION_REFERENCE_PERTURBATION)

    x3 = (reference - normal.scaled(reference.dot(normal))).normalized()
    y3 = normal.cross(x3)
    return x3, y3


def project(point: Point3D, normal: Point3D) -> Tuple[float, float]:
    """
    Project a 3D point into the 2D coordinate system of a plane.

    Args:
        point: Point to project
        normal: Unit plane normal

    Returns:
        (x, y) coordinates in the plane basis
    """
    x3, y3 = plane_basis(normal)
    return (point.dot(x3), point.dot(y3))


class PlanarProjector(IProjector):
    """
    Projector bound to one plane normal.

    Computes the basis once so all loops of a surface are projected
    consistently.

    Attributes:
        normal: Unit plane normal
        x_axis: First in-plane basis vector
        y_axis: Second in-plane basis vector
    """

    def __init__(self, normal: Point3D):
        self.normal = normal
        self.x_axis, self.y_axis = plane_basis(normal)

    @classmethod
    def for_loop(cls, points: Sequence[Point3D]) -> 'PlanarProjector':
        """Create a projector for the best-fit plane of the given points."""
        return cls(estimate_normal(points))

    def project(self, point: Point3D) -> Tuple[float, float]:
        """Project one point to (x, y)."""
        return (point.dot(self.x_axis), point.dot(self.y_axis))
