"""
In-memory model sink for CityJSON Mesher.

Collects meshes, entities and metadata objects in insertion order so
they can be inspected, exported to OBJ, or handed on to a renderer.
"""

from typing import Dict, List, Optional
import logging

from ..models.citymodel import CityObjectResult, MetaObject
from ..models.mesh import MeshRecord
from .base import IModelSink

logger = logging.getLogger(__name__)


class MemoryModelSink(IModelSink):
    """
    Sink that keeps everything it receives.

    Attributes:
        meshes: Mesh id -> MeshRecord, in creation order
        entities: Entity id -> CityObjectResult, in creation order
        meta_objects: Metadata objects in creation order
    """

    def __init__(self):
        self.meshes: Dict[str, MeshRecord] = {}
        self.entities: Dict[str, CityObjectResult] = {}
        self.meta_objects: List[MetaObject] = []

    def create_mesh(self, mesh: MeshRecord) -> None:
        """Store a mesh; mesh ids must be unique."""
        if mesh.id in self.meshes:
            raise ValueError(f"Duplicate mesh id: {mesh.id}")
        self.meshes[mesh.id] = mesh

    def create_entity(self, entity: CityObjectResult) -> None:
        """
        Store an entity.

        Raises:
            ValueError: If the id is already used or a mesh id is unknown
        """
        if entity.id in self.entities:
            raise ValueError(f"Duplicate entity id: {entity.id}")

        missing = [mesh_id for mesh_id in entity.mesh_ids if mesh_id not in self.meshes]
        if missing:
            raise ValueError(
                f"Entity {entity.id} references unknown meshes: {missing}"
            )

        self.entities[entity.id] = entity

    def create_meta_object(self, meta_object: MetaObject) -> None:
        """Store a metadata object."""
        self.meta_objects.append(meta_object)

    def entity_meshes(self, entity_id: str) -> List[MeshRecord]:
        """Meshes of one entity, in mesh id order of the entity."""
        entity = self.entities[entity_id]
        return [self.meshes[mesh_id] for mesh_id in entity.mesh_ids]

    def get_meta_object(self, object_id: str) -> Optional[MetaObject]:
        """Find a metadata object by id."""
        for meta_object in self.meta_objects:
            if meta_object.id == object_id:
                return meta_object
        return None

    def total_vertices(self) -> int:
        """Sum of vertices over all meshes."""
        return sum(mesh.vertex_count() for mesh in self.meshes.values())

    def total_triangles(self) -> int:
        """Sum of triangles over all meshes."""
        return sum(mesh.triangle_count() for mesh in self.meshes.values())

    def is_empty(self) -> bool:
        """Check if no mesh was received."""
        return len(self.meshes) == 0

    def get_stats_summary(self) -> str:
        """Get a human-readable summary of the received model."""
        lines = [
            f"meshes: {len(self.meshes)}",
            f"entities: {len(self.entities)}",
            f"meta objects: {len(self.meta_objects)}",
            f"vertices: {self.total_vertices()}",
            f"triangles: {self.total_triangles()}",
        ]
        return "\n".join(lines)
