"""
Boundary traversal for CityJSON Mesher.

Walks the primitive-specific nesting of CityJSON boundaries and
triangulates each surface into an in-progress mesh.

Nesting by primitive type:
    MultiSurface / CompositeSurface: Surface[]
    Solid:                           Shell[]  (Shell = Surface[])
    MultiSolid / CompositeSolid:     Solid[]  (Solid = Shell[])
    MultiPoint / MultiLineString / GeometryInstance: no surfaces

Each surface is reported with its path into the boundaries, e.g. (3,)
for the 4th surface of a MultiSurface or (0, 1, 5) for solid 0, shell 1,
surface 5 of a MultiSolid. Material values use the same nesting.
"""

from typing import Iterator, List, Tuple
import logging

from ..models.citymodel import Geometry, GeometryType, Surface
from ..models.mesh import MeshData
from ..projection import create_projector
from ..models.geometry import Point3D
from ..utils.triangulation import triangulate_surface

logger = logging.getLogger(__name__)

SurfacePath = Tuple[int, ...]


def iter_surface_lists(geometry: Geometry) -> Iterator[Tuple[SurfacePath, List[Surface]]]:
    """
    Yield every list of surfaces in a geometry, in traversal order.

    Args:
        geometry: Geometry to walk

    Yields:
        (prefix, surfaces) where prefix is the path of the list itself:
        () for surface-based types, (shell,) for Solid and
        (solid, shell) for MultiSolid / CompositeSolid
    """
    geom_type = geometry.type
    boundaries = geometry.boundaries

    if not geom_type.is_surface_based:
        logger.debug(f"Skipping {geom_type.value} geometry (no surfaces)")
        return

    if geom_type in (GeometryType.MULTI_SURFACE, GeometryType.COMPOSITE_SURFACE):
        yield (), boundaries

    elif geom_type == GeometryType.SOLID:
        for j, shell in enumerate(boundaries):
            yield (j,), shell

    elif geom_type in (GeometryType.MULTI_SOLID, GeometryType.COMPOSITE_SOLID):
        for j, solid in enumerate(boundaries):
            for k, shell in enumerate(solid):
                yield (j, k), shell

    else:
        raise ValueError(f"Unhandled geometry type: {geom_type}")


def iter_surfaces(geometry: Geometry) -> Iterator[Tuple[SurfacePath, Surface]]:
    """
    Yield every surface of a geometry with its boundary path.

    Args:
        geometry: Geometry to walk

    Yields:
        (path, surface) in traversal order
    """
    for prefix, surfaces in iter_surface_lists(geometry):
        for i, surface in enumerate(surfaces):
            yield prefix + (i,), surface


def flatten_surface(mesh: MeshData, surface: Surface) -> Tuple[List[int], List[int]]:
    """
    Remap all loops of a surface into one local index array.

    Args:
        mesh: Mesh whose remapper receives the surface's vertices
        surface: [exterior_ring, hole1, hole2, ...] of global indices

    Returns:
        (face, hole_starts): face is the concatenated local indices,
        hole_starts the offset of each loop after the first
    """
    face: List[int] = []
    hole_starts: List[int] = []

    for loop in surface:
        if len(face) > 0:
            hole_starts.append(len(face))
        face.extend(mesh.remapper.remap_loop(loop))

    return face, hole_starts


def triangulate_surface_into(mesh: MeshData, surface: Surface) -> int:
    """
    Triangulate one surface and append its triangles to a mesh.

    Triangles are emitted directly; larger polygons are projected onto
    their best-fit plane and ear-clipped with their holes.

    Args:
        mesh: Target in-progress mesh
        surface: Surface loops of global vertex indices

    Returns:
        Number of triangles added
    """
    face, hole_starts = flatten_surface(mesh, surface)

    if len(face) < 3:
        return 0

    if len(face) == 3:
        indices = triangulate_surface(face, None)
    else:
        points = [Point3D.from_sequence(mesh.position(i)) for i in face]
        projector = create_projector(points)
        coords = []
        for point in points:
            x, y = projector.project(point)
            coords.append(x)
            coords.append(y)
        indices = triangulate_surface(face, coords, hole_starts)

    mesh.add_triangles(indices)
    return len(indices) // 3
