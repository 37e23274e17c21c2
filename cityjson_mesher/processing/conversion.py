"""
Conversion context for CityJSON Mesher.

Drives the conversion of a whole city model: for every city object and
each of its geometries it resolves materials, triangulates the
boundaries into one or more meshes, hands the meshes to the sink and
finally emits one entity per city object that produced geometry.

Mesh grouping:
    - shared-material path: one mesh per geometry (all surfaces)
    - per-surface path:     one mesh per surface
Meshes without positions or triangles are never emitted.
"""

from typing import List, Optional
import logging
import uuid

from ..config import (
    ConversionConfig,
    DEFAULT_CONFIG,
    ROOT_META_OBJECT_NAME,
    ROOT_META_OBJECT_TYPE,
)
from ..models.citymodel import (
    CityModel,
    CityObject,
    CityObjectResult,
    ConversionStatistics,
    Geometry,
    MetaObject,
)
from ..models.mesh import MeshData
from ..sinks.base import IModelSink
from .boundary_traversal import iter_surfaces, triangulate_surface_into
from .material_resolver import (
    MaterialAssignment,
    resolve_materials,
    shared_color_and_opacity,
    surface_color_and_opacity,
)

logger = logging.getLogger(__name__)


class ConversionError(Exception):
    """Raised when a city model cannot be converted."""
    pass


class ConversionContext:
    """
    State of one conversion run.

    Owns the mesh id counter and the statistics; both live for exactly
    one call to convert().

    Attributes:
        model: City model being converted
        sink: Receiver of meshes, entities and metadata
        config: Conversion configuration
        next_id: Next mesh id to hand out
        stats: Running statistics
    """

    def __init__(
        self,
        model: CityModel,
        sink: IModelSink,
        config: ConversionConfig = DEFAULT_CONFIG
    ):
        self.model = model
        self.sink = sink
        self.config = config
        self.next_id = 0
        self.stats = ConversionStatistics()
        self.root_meta_object: Optional[MetaObject] = None

    def convert(self) -> ConversionStatistics:
        """
        Convert every city object of the model.

        Returns:
            Statistics of this run

        Raises:
            ConversionError: If the model has no vertices or no city
                objects; nothing is sent to the sink in that case
        """
        if not self.model.vertices:
            raise ConversionError("City model has no vertices")

        if not self.model.city_objects:
            raise ConversionError("City model has no CityObjects")

        self.next_id = 0
        self.stats = ConversionStatistics(
            source_format=self.model.source_format,
            schema_version=self.model.version,
        )

        if self.config.load_metadata:
            self.root_meta_object = MetaObject(
                id=str(uuid.uuid4()),
                name=ROOT_META_OBJECT_NAME,
                type=ROOT_META_OBJECT_TYPE,
            )
            self.sink.create_meta_object(self.root_meta_object)

        logger.info(
            f"Converting {len(self.model.city_objects)} city objects, "
            f"{len(self.model.vertices)} vertices"
        )

        for city_object in self.model.city_objects.values():
            self.convert_city_object(city_object)

        logger.info(
            f"Converted {self.stats.num_objects} objects: "
            f"{self.stats.num_geometries} geometries, "
            f"{self.stats.num_vertices} vertices, "
            f"{self.stats.num_triangles} triangles"
        )

        return self.stats

    def convert_city_object(self, city_object: CityObject) -> Optional[CityObjectResult]:
        """
        Convert one city object.

        Args:
            city_object: Object to convert

        Returns:
            The emitted entity, or None if the object produced no mesh
        """
        if self.config.load_metadata:
            parent = city_object.parents[0] if city_object.parents else None
            if parent is None and self.root_meta_object is not None:
                parent = self.root_meta_object.id
            self.sink.create_meta_object(MetaObject(
                id=city_object.id,
                name=f"{city_object.type} : {city_object.id}",
                type=city_object.type,
                parent=parent,
            ))

        self.stats.num_meta_objects += 1

        if not city_object.geometry:
            return None

        mesh_ids: List[str] = []

        for i, geometry in enumerate(city_object.geometry):
            self.stats.num_geometries += 1

            assignment = resolve_materials(geometry, self.model, i, self.config)

            if assignment.per_surface:
                mesh_ids.extend(self._convert_with_surface_materials(geometry, assignment))
            else:
                mesh_id = self._convert_with_shared_material(geometry, assignment)
                if mesh_id is not None:
                    mesh_ids.append(mesh_id)

        if not mesh_ids:
            logger.debug(f"City object {city_object.id} produced no meshes")
            return None

        entity = CityObjectResult(id=city_object.id, mesh_ids=mesh_ids)
        self.sink.create_entity(entity)
        self.stats.num_objects += 1
        return entity

    def _convert_with_shared_material(
        self,
        geometry: Geometry,
        assignment: MaterialAssignment
    ) -> Optional[str]:
        """Triangulate all surfaces into one mesh. Returns its id, if emitted."""
        mesh = MeshData(vertices=self.model.vertices)

        for _, surface in iter_surfaces(geometry):
            triangulate_surface_into(mesh, surface)

        color, opacity = shared_color_and_opacity(assignment.shared, self.config)
        return self._emit_mesh(mesh, color, opacity)

    def _convert_with_surface_materials(
        self,
        geometry: Geometry,
        assignment: MaterialAssignment
    ) -> List[str]:
        """Triangulate every surface into its own mesh. Returns emitted ids."""
        mesh_ids = []

        for path, surface in iter_surfaces(geometry):
            mesh = MeshData(vertices=self.model.vertices)
            triangulate_surface_into(mesh, surface)

            material = assignment.surface_material(path)
            color, opacity = surface_color_and_opacity(material, self.config)

            mesh_id = self._emit_mesh(mesh, color, opacity)
            if mesh_id is not None:
                mesh_ids.append(mesh_id)

        return mesh_ids

    def _emit_mesh(self, mesh: MeshData, color: tuple, opacity: float) -> Optional[str]:
        """
        Finalize a mesh, send it to the sink and update statistics.

        Returns:
            Mesh id, or None for an empty mesh (nothing emitted)
        """
        if mesh.is_empty():
            return None

        mesh_id = str(self.next_id)
        self.next_id += 1

        if logger.isEnabledFor(logging.DEBUG):
            for issue in mesh.validate():
                logger.debug(f"Mesh {mesh_id}: {issue}")
            logger.debug(
                f"Mesh {mesh_id}: {mesh.vertex_count()} vertices, "
                f"{mesh.triangle_count()} triangles, bounds {mesh.compute_bounds()}"
            )

        record = mesh.finalize(mesh_id, color, opacity)
        self.sink.create_mesh(record)

        self.stats.num_vertices += record.vertex_count()
        self.stats.num_triangles += record.triangle_count()
        return mesh_id


def convert_city_model(
    model: CityModel,
    sink: IModelSink,
    config: ConversionConfig = DEFAULT_CONFIG
) -> ConversionStatistics:
    """
    Convert a city model into meshes and entities on a sink.

    Args:
        model: City model with transformed vertices
        sink: Receiver of meshes and entities
        config: Conversion configuration

    Returns:
        ConversionStatistics for the run

    Raises:
        ConversionError: If the model is missing vertices or city objects
    """
    return ConversionContext(model, sink, config).convert()
