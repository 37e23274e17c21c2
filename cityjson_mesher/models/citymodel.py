"""
City model data types for CityJSON Mesher.

Provides the in-memory representation of a parsed CityJSON document:
geometry primitive types, geometries, city objects, materials, and the
metadata objects and statistics produced while converting them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..config import DEFAULT_DIFFUSE_COLOR, DEFAULT_TRANSPARENCY


# Boundary nesting aliases
Loop = List[int]
Surface = List[Loop]
Shell = List[Surface]
SolidBoundary = List[Shell]

Vertex = Tuple[float, float, float]


class GeometryType(Enum):
    """
    CityJSON geometry primitive types.

    Closed set; an unknown "type" string is an error rather than a
    silently skipped geometry.
    """
    MULTI_POINT = "MultiPoint"
    MULTI_LINE_STRING = "MultiLineString"
    MULTI_SURFACE = "MultiSurface"
    COMPOSITE_SURFACE = "CompositeSurface"
    SOLID = "Solid"
    MULTI_SOLID = "MultiSolid"
    COMPOSITE_SOLID = "CompositeSolid"
    GEOMETRY_INSTANCE = "GeometryInstance"

    @classmethod
    def from_cityjson(cls, type_name: str) -> 'GeometryType':
        """
        Look up a primitive type from its CityJSON "type" string.

        Args:
            type_name: Value of the geometry's "type" member

        Returns:
            Matching GeometryType

        Raises:
            ValueError: If the type is not a CityJSON geometry type
        """
        try:
            return cls(type_name)
        except ValueError:
            raise ValueError(f"Unknown CityJSON geometry type: {type_name!r}")

    @property
    def is_surface_based(self) -> bool:
        """True for types whose boundaries contain surfaces."""
        return self not in (
            GeometryType.MULTI_POINT,
            GeometryType.MULTI_LINE_STRING,
            GeometryType.GEOMETRY_INSTANCE,
        )


@dataclass(frozen=True)
class Material:
    """
    Appearance material as far as mesh coloring is concerned.

    Attributes:
        diffuse_color: (r, g, b) in [0, 1]
        transparency: 0 = opaque, 1 = fully transparent; None if the
                      source material did not specify it
    """
    diffuse_color: Tuple[float, float, float] = DEFAULT_DIFFUSE_COLOR
    transparency: Optional[float] = DEFAULT_TRANSPARENCY

    @property
    def opacity(self) -> float:
        """Opacity derived from transparency (1.0 when unspecified)."""
        if self.transparency is None:
            return 1.0
        return 1.0 - self.transparency

    @classmethod
    def from_cityjson(cls, data: Dict[str, Any]) -> 'Material':
        """
        Build a Material from a CityJSON appearance.materials entry.

        Missing diffuseColor falls back to the default color; missing
        transparency is kept as None.
        """
        color = data.get('diffuseColor')
        if color and len(color) >= 3:
            diffuse = (float(color[0]), float(color[1]), float(color[2]))
        else:
            diffuse = DEFAULT_DIFFUSE_COLOR

        transparency = data.get('transparency')
        if transparency is not None:
            transparency = float(transparency)

        return cls(diffuse_color=diffuse, transparency=transparency)


@dataclass
class Geometry:
    """
    One geometry of a city object.

    Attributes:
        type: Primitive type
        boundaries: Nested vertex index arrays; depth depends on type
        material: Raw "material" member, theme name -> {value|values}
        lod: Level of detail string, if given
    """
    type: GeometryType
    boundaries: List[Any] = field(default_factory=list)
    material: Optional[Dict[str, Dict[str, Any]]] = None
    lod: Optional[str] = None

    @classmethod
    def from_cityjson(cls, data: Dict[str, Any]) -> 'Geometry':
        """Build a Geometry from a CityJSON geometry object."""
        lod = data.get('lod')
        return cls(
            type=GeometryType.from_cityjson(data.get('type')),
            boundaries=data.get('boundaries') or [],
            material=data.get('material'),
            lod=str(lod) if lod is not None else None,
        )


@dataclass
class CityObject:
    """
    A CityJSON city object.

    Attributes:
        id: Key in the CityObjects map
        type: City object type (e.g. "Building", "BuildingPart")
        geometry: Geometries in document order
        parents: Parent object ids (first one is used for metadata)
    """
    id: str
    type: str
    geometry: List[Geometry] = field(default_factory=list)
    parents: List[str] = field(default_factory=list)

    @classmethod
    def from_cityjson(cls, object_id: str, data: Dict[str, Any]) -> 'CityObject':
        """Build a CityObject from its CityJSON dict."""
        return cls(
            id=object_id,
            type=data.get('type', ''),
            geometry=[Geometry.from_cityjson(g) for g in data.get('geometry') or []],
            parents=list(data.get('parents') or []),
        )


@dataclass
class CityModel:
    """
    A CityJSON document ready for conversion.

    Attributes:
        city_objects: City objects keyed by id, in document order
        vertices: Transformed (x, y, z) vertex positions (the vertex store)
        materials: appearance.materials in index order
        source_format: Document "type" (normally "CityJSON")
        version: Document "version"
    """
    city_objects: Dict[str, CityObject]
    vertices: List[Vertex]
    materials: Optional[List[Material]] = None
    source_format: str = "CityJSON"
    version: str = ""

    def material_at(self, index: Any) -> Optional[Material]:
        """
        Look up appearance material by index.

        Returns None for missing materials, non-integer or negative
        indices and out-of-range indices.
        """
        if not self.materials:
            return None
        if isinstance(index, bool) or not isinstance(index, int):
            return None
        if index < 0 or index >= len(self.materials):
            return None
        return self.materials[index]


@dataclass
class MetaObject:
    """Metadata entry describing one node of the object hierarchy."""
    id: str
    name: str
    type: str
    parent: Optional[str] = None


@dataclass
class CityObjectResult:
    """
    Entity emitted for a city object that produced at least one mesh.

    Attributes:
        id: City object id
        mesh_ids: Ids of all meshes created for the object's geometries
        is_object: Always True; marks the entity as a selectable object
    """
    id: str
    mesh_ids: List[str] = field(default_factory=list)
    is_object: bool = True


@dataclass
class ConversionStatistics:
    """Running counters for one conversion run."""
    source_format: str = ""
    schema_version: str = ""
    num_meta_objects: int = 0
    num_objects: int = 0
    num_geometries: int = 0
    num_triangles: int = 0
    num_vertices: int = 0
