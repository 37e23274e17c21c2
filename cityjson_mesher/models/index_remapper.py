"""
Local index remapping for CityJSON Mesher.

Maps global vertex indices (into the city model's vertex store) to
compact per-mesh indices, appending each newly seen vertex's position
to the mesh's position buffer exactly once.
"""

from typing import Dict, List, Sequence

from .citymodel import Vertex


class LocalIndexRemapper:
    """
    Global -> local vertex index map for a single mesh.

    shared_indices holds the global indices in the order they were first
    seen, so local index i always refers to shared_indices[i] and to the
    i-th position triple in the output buffer.

    One remapper belongs to one mesh; never share it between meshes.
    """

    def __init__(self, vertices: Sequence[Vertex], positions: List[float]):
        """
        Initialize remapper.

        Args:
            vertices: Vertex store (global positions)
            positions: Flat position buffer of the owning mesh; appended to
        """
        self.vertices = vertices
        self.positions = positions
        self.shared_indices: List[int] = []
        self._lookup: Dict[int, int] = {}

    def remap(self, global_index: int) -> int:
        """
        Return the local index for a global vertex index.

        On first sight the vertex position is appended to the position
        buffer and the next local index is assigned.
        """
        local_index = self._lookup.get(global_index)
        if local_index is not None:
            return local_index

        x, y, z = self.vertices[global_index]
        self.positions.append(x)
        self.positions.append(y)
        self.positions.append(z)

        local_index = len(self.shared_indices)
        self.shared_indices.append(global_index)
        self._lookup[global_index] = local_index
        return local_index

    def remap_loop(self, loop: Sequence[int]) -> List[int]:
        """Remap every vertex index of a loop, preserving order."""
        return [self.remap(index) for index in loop]

    def global_index(self, local_index: int) -> int:
        """Global vertex index behind a local index."""
        return self.shared_indices[local_index]

    def __len__(self) -> int:
        return len(self.shared_indices)
