"""
Triangulation utilities for CityJSON Mesher.

Triangulates projected surfaces (exterior ring plus holes) with the
earcut ear-clipping algorithm from mapbox_earcut, and maps the result
back onto the surface's local vertex indices.
"""

from typing import List, Optional, Sequence
import logging

import numpy as np
import mapbox_earcut

logger = logging.getLogger(__name__)


def earcut(coords: Sequence[float], hole_starts: Sequence[int] = ()) -> List[int]:
    """
    Triangulate a flattened 2D polygon with holes.

    Args:
        coords: Interleaved [x0, y0, x1, y1, ...] of the exterior ring
                followed by every hole
        hole_starts: Vertex offset at which each hole starts

    Returns:
        Flat list of vertex positions (indices into the point list),
        three per triangle. Empty if nothing could be triangulated.
    """
    n = len(coords) // 2
    if n < 3:
        return []

    # earcut wants ring end offsets; drop empty/out-of-order rings
    ring_ends = []
    last = 0
    for start in hole_starts:
        if last < start < n:
            ring_ends.append(start)
            last = start
    ring_ends.append(n)

    vertices = np.asarray(coords[:n * 2], dtype=np.float64).reshape(n, 2)
    rings = np.asarray(ring_ends, dtype=np.uint32)

    try:
        result = mapbox_earcut.triangulate_float64(vertices, rings)
    except ValueError as e:
        logger.warning(f"Earcut rejected polygon with {n} vertices: {e}")
        return []

    return [int(i) for i in result]


def triangulate_surface(
    face: Sequence[int],
    coords: Optional[Sequence[float]],
    hole_starts: Sequence[int] = ()
) -> List[int]:
    """
    Triangulate one surface into local mesh indices.

    Args:
        face: Local mesh indices of the surface, exterior ring first,
              holes appended in order
        coords: Projected [x, y, ...] for each entry of face (may be None
                when face is a single triangle)
        hole_starts: Offsets into face where each hole begins

    Returns:
        Flat list of local indices, three per triangle, in emission order
        face[tr[k]], face[tr[k + 1]], face[tr[k + 2]]
    """
    if len(face) < 3:
        return []

    if len(face) == 3:
        return [face[0], face[1], face[2]]

    tr = earcut(coords, hole_starts)

    if logger.isEnabledFor(logging.DEBUG):
        expected = polygon_area(coords, hole_starts)
        for issue in validate_triangulation(coords, tr, expected):
            logger.debug(f"Surface triangulation: {issue}")

    indices = []
    for k in range(0, len(tr) - 2, 3):
        indices.append(face[tr[k]])
        indices.append(face[tr[k + 1]])
        indices.append(face[tr[k + 2]])
    return indices


def triangle_area_2d(
    ax: float, ay: float,
    bx: float, by: float,
    cx: float, cy: float
) -> float:
    """Compute signed area of triangle (positive = CCW)."""
    return 0.5 * ((bx - ax) * (cy - ay) - (cx - ax) * (by - ay))


def ring_signed_area(coords: Sequence[float], start: int = 0, end: Optional[int] = None) -> float:
    """
    Compute signed area of a ring using shoelace formula.

    Args:
        coords: Interleaved [x, y, ...]
        start: First vertex of the ring
        end: One past the last vertex (defaults to the end of coords)

    Returns:
        Signed area; positive = CCW, negative = CW
    """
    if end is None:
        end = len(coords) // 2

    n = end - start
    if n < 3:
        return 0.0

    area = 0.0
    for i in range(start, end):
        j = start + (i - start + 1) % n
        area += coords[2 * i] * coords[2 * j + 1]
        area -= coords[2 * j] * coords[2 * i + 1]

    return area / 2.0


def polygon_area(coords: Sequence[float], hole_starts: Sequence[int] = ()) -> float:
    """
    Unsigned area of the exterior ring minus its holes.

    Hole offsets are filtered the same way earcut() filters them.
    """
    n = len(coords) // 2
    bounds = [0]
    for start in hole_starts:
        if bounds[-1] < start < n:
            bounds.append(start)
    bounds.append(n)

    area = abs(ring_signed_area(coords, bounds[0], bounds[1]))
    for start, end in zip(bounds[1:], bounds[2:]):
        area -= abs(ring_signed_area(coords, start, end))
    return area


def validate_triangulation(
    coords: Sequence[float],
    triangles: Sequence[int],
    expected_area: Optional[float] = None
) -> List[str]:
    """
    Validate triangulation result.

    Args:
        coords: Interleaved [x, y, ...] that triangles index into
        triangles: Flat triangle indices
        expected_area: Expected polygon area (optional)

    Returns:
        List of error messages (empty if valid)
    """
    errors = []

    if not triangles:
        errors.append("No triangles generated")
        return errors

    if len(triangles) % 3 != 0:
        errors.append("Triangle index count is not a multiple of 3")
        return errors

    n = len(coords) // 2

    # Check index validity
    for i, idx in enumerate(triangles):
        if idx < 0 or idx >= n:
            errors.append(f"Triangle {i // 3} has invalid index {idx}")

    if errors:
        return errors

    total_area = 0.0
    for t in range(0, len(triangles), 3):
        a, b, c = triangles[t], triangles[t + 1], triangles[t + 2]
        area = triangle_area_2d(
            coords[2 * a], coords[2 * a + 1],
            coords[2 * b], coords[2 * b + 1],
            coords[2 * c], coords[2 * c + 1],
        )
        if abs(area) < 1e-10:
            errors.append(f"Triangle {t // 3} is degenerate (zero area)")
        total_area += abs(area)

    # Check total area
    if expected_area is not None:
        if abs(total_area - expected_area) > expected_area * 0.01:  # 1% tolerance
            errors.append(
                f"Total triangulated area {total_area:.2f} differs from "
                f"expected {expected_area:.2f}"
            )

    return errors
