"""
Processing modules for CityJSON Mesher.

Contains boundary traversal, material resolution and the conversion
context that ties them together.
"""

from .boundary_traversal import (
    iter_surfaces,
    iter_surface_lists,
    flatten_surface,
    triangulate_surface_into,
)
from .material_resolver import (
    MaterialAssignment,
    resolve_materials,
    fallback_material,
    surface_color_and_opacity,
    shared_color_and_opacity,
)
from .conversion import (
    ConversionContext,
    ConversionError,
    convert_city_model,
)

__all__ = [
    'iter_surfaces',
    'iter_surface_lists',
    'flatten_surface',
    'triangulate_surface_into',
    'MaterialAssignment',
    'resolve_materials',
    'fallback_material',
    'surface_color_and_opacity',
    'shared_color_and_opacity',
    'ConversionContext',
    'ConversionError',
    'convert_city_model',
]
