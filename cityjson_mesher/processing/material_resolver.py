"""
Material resolution for CityJSON Mesher.

Decides whether a geometry is drawn with one material for all of its
surfaces (shared-material path, one mesh per geometry) or with a
material per surface (per-surface path, one mesh per surface), and
resolves the concrete materials with fallbacks.

Lookup rules:
    - Only the first theme of geometry.material is used (insertion order)
    - theme has "value":  shared material appearance.materials[value]
    - theme has "values": per-surface materials
    - anything else, or no appearance.materials: shared default material
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence
import logging

from ..config import (
    ConversionConfig,
    DEFAULT_CONFIG,
    OpacityPolicy,
    SurfaceMaterialIndexing,
)
from ..models.citymodel import CityModel, Geometry, Material

logger = logging.getLogger(__name__)


@dataclass
class MaterialAssignment:
    """
    Resolved materials for one geometry.

    Attributes:
        per_surface: True for the per-surface-material path
        theme: Theme the materials came from (None if no theme)
        shared: Shared material (shared path; None = use fallback)
        values: Raw "values" member (per-surface path)
        indexing: How values are matched to surfaces
        legacy_materials: Per-slot materials for LEGACY indexing
    """
    per_surface: bool = False
    theme: Optional[str] = None
    shared: Optional[Material] = None
    values: Any = None
    indexing: SurfaceMaterialIndexing = SurfaceMaterialIndexing.BY_SURFACE
    legacy_materials: List[Optional[Material]] = field(default_factory=list)
    _model: Optional[CityModel] = field(default=None, repr=False)

    def surface_material(self, path: Sequence[int]) -> Optional[Material]:
        """
        Material for the surface at a boundary path.

        Args:
            path: Surface path from boundary traversal

        Returns:
            Resolved Material, or None when the values have no usable
            entry for this surface (caller applies the fallback)
        """
        if not self.per_surface:
            return self.shared

        if self.indexing == SurfaceMaterialIndexing.LEGACY:
            slot = path[-1]
            if slot < len(self.legacy_materials):
                return self.legacy_materials[slot]
            return None

        value = self.values
        for index in path:
            if isinstance(value, list) and 0 <= index < len(value):
                value = value[index]
            else:
                return None

        if self._model is None:
            return None
        return self._model.material_at(value)


def fallback_material(config: ConversionConfig = DEFAULT_CONFIG) -> Material:
    """Material used when nothing else resolves."""
    return Material(config.default_color, config.default_transparency)


def resolve_materials(
    geometry: Geometry,
    model: CityModel,
    geometry_index: int,
    config: ConversionConfig = DEFAULT_CONFIG
) -> MaterialAssignment:
    """
    Resolve the material assignment of a geometry.

    Args:
        geometry: Geometry being converted
        model: City model providing appearance.materials
        geometry_index: Position of the geometry in its city object
                        (used by LEGACY indexing only)
        config: Conversion configuration

    Returns:
        MaterialAssignment describing the path and materials
    """
    if model.materials is None or not geometry.material:
        return MaterialAssignment()

    theme_id = next(iter(geometry.material))
    theme = geometry.material[theme_id]
    if not isinstance(theme, dict):
        logger.debug(f"Ignoring malformed material theme {theme_id!r}")
        return MaterialAssignment(theme=theme_id)

    if 'value' in theme:
        return MaterialAssignment(
            theme=theme_id,
            shared=model.material_at(theme['value']),
        )

    values = theme.get('values')
    if not isinstance(values, list):
        return MaterialAssignment(theme=theme_id)

    assignment = MaterialAssignment(
        per_surface=True,
        theme=theme_id,
        values=values,
        indexing=config.surface_material_indexing,
        _model=model,
    )

    if config.surface_material_indexing == SurfaceMaterialIndexing.LEGACY:
        value = values[geometry_index] if geometry_index < len(values) else None
        material = model.material_at(value)
        assignment.legacy_materials = [material] * len(values)

    return assignment


def surface_color_and_opacity(
    material: Optional[Material],
    config: ConversionConfig = DEFAULT_CONFIG
) -> tuple:
    """
    Color and opacity for a per-surface mesh.

    Opacity is 1 - transparency (1.0 when transparency is unspecified).
    """
    if material is None:
        material = fallback_material(config)
    return material.diffuse_color, material.opacity


def shared_color_and_opacity(
    material: Optional[Material],
    config: ConversionConfig = DEFAULT_CONFIG
) -> tuple:
    """
    Color and opacity for a shared-material mesh.

    With OpacityPolicy.OPAQUE the opacity is always 1.0.
    """
    if material is None:
        material = fallback_material(config)

    if config.shared_opacity == OpacityPolicy.FROM_TRANSPARENCY:
        return material.diffuse_color, material.opacity

    return material.diffuse_color, 1.0
