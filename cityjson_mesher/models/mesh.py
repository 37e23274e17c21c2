"""
Mesh data model for CityJSON Mesher.

Provides MeshData, the in-progress mesh that accumulates a deduplicated
position buffer and a triangle index buffer while surfaces are
triangulated, and MeshRecord, the finalized form handed to a sink.

Note on indexing:
    - Indices are 0-based local indices into the mesh's own positions
    - positions is flat: [x0, y0, z0, x1, y1, z1, ...]
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from ..config import MESH_PRIMITIVE
from .index_remapper import LocalIndexRemapper
from .citymodel import Vertex


@dataclass
class MeshRecord:
    """
    Finalized triangle mesh, ready for a model sink.

    Attributes:
        id: Unique mesh id within the conversion run
        positions: Flat vertex positions
        indices: Flat triangle indices (3 per triangle)
        color: Diffuse (r, g, b)
        opacity: 0 = invisible, 1 = opaque
        primitive: Always "triangles"
    """
    id: str
    positions: List[float]
    indices: List[int]
    color: Tuple[float, float, float]
    opacity: float
    primitive: str = MESH_PRIMITIVE

    def vertex_count(self) -> int:
        """Get number of vertices."""
        return len(self.positions) // 3

    def triangle_count(self) -> int:
        """Get number of triangles."""
        return len(self.indices) // 3


@dataclass
class MeshData:
    """
    In-progress mesh for one material group.

    Owns exactly one LocalIndexRemapper; the remapper appends to this
    mesh's positions and is discarded with it.

    Attributes:
        positions: Flat deduplicated vertex positions
        indices: Flat triangle indices into positions
        remapper: Global -> local index map scoped to this mesh
    """
    vertices: Sequence[Vertex] = field(default_factory=list, repr=False)
    positions: List[float] = field(default_factory=list)
    indices: List[int] = field(default_factory=list)
    remapper: Optional[LocalIndexRemapper] = field(default=None, repr=False)

    def __post_init__(self):
        if self.remapper is None:
            self.remapper = LocalIndexRemapper(self.vertices, self.positions)

    def vertex_count(self) -> int:
        """Get number of vertices."""
        return len(self.positions) // 3

    def triangle_count(self) -> int:
        """Get number of triangles."""
        return len(self.indices) // 3

    def add_triangle(self, v1: int, v2: int, v3: int) -> None:
        """
        Add a triangle.

        Args:
            v1, v2, v3: Local vertex indices (0-based)
        """
        self.indices.append(v1)
        self.indices.append(v2)
        self.indices.append(v3)

    def add_triangles(self, indices: Sequence[int]) -> None:
        """Append a flat list of triangle indices."""
        self.indices.extend(indices)

    def position(self, local_index: int) -> Tuple[float, float, float]:
        """Position of a local vertex."""
        i = local_index * 3
        return (self.positions[i], self.positions[i + 1], self.positions[i + 2])

    def is_empty(self) -> bool:
        """Check if mesh has no renderable geometry."""
        return len(self.positions) == 0 or len(self.indices) == 0

    def finalize(
        self,
        mesh_id: str,
        color: Tuple[float, float, float],
        opacity: float
    ) -> MeshRecord:
        """
        Freeze this mesh into a MeshRecord.

        Args:
            mesh_id: Unique mesh id
            color: Diffuse color
            opacity: Opacity in [0, 1]

        Returns:
            MeshRecord sharing this mesh's buffers
        """
        return MeshRecord(
            id=mesh_id,
            positions=self.positions,
            indices=self.indices,
            color=tuple(color),
            opacity=opacity,
        )

    def validate(self) -> List[str]:
        """
        Validate mesh integrity.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if len(self.positions) % 3 != 0:
            errors.append("Position buffer length is not a multiple of 3")

        if len(self.indices) % 3 != 0:
            errors.append("Index buffer length is not a multiple of 3")

        max_idx = self.vertex_count()

        for i, idx in enumerate(self.indices):
            if idx < 0 or idx >= max_idx:
                errors.append(
                    f"Index {i} has invalid vertex index {idx} "
                    f"(valid range: 0-{max_idx - 1})"
                )

        if len(self.remapper) != max_idx:
            errors.append(
                f"Remapper tracks {len(self.remapper)} vertices but "
                f"mesh has {max_idx}"
            )

        return errors

    def compute_bounds(self) -> Optional[Tuple[Tuple[float, float, float],
                                                 Tuple[float, float, float]]]:
        """
        Compute bounding box of the mesh.

        Returns:
            ((min_x, min_y, min_z), (max_x, max_y, max_z)) or None if empty
        """
        if not self.positions:
            return None

        xs = self.positions[0::3]
        ys = self.positions[1::3]
        zs = self.positions[2::3]

        return (
            (min(xs), min(ys), min(zs)),
            (max(xs), max(ys), max(zs))
        )

    def __repr__(self) -> str:
        return f"MeshData(vertices={self.vertex_count()}, triangles={self.triangle_count()})"
