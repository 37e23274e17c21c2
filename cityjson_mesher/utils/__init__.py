"""
Utility functions for CityJSON Mesher.
"""

from .triangulation import (
    earcut,
    triangulate_surface,
    triangle_area_2d,
    ring_signed_area,
    polygon_area,
    validate_triangulation,
)

__all__ = [
    'earcut',
    'triangulate_surface',
    'triangle_area_2d',
    'ring_signed_area',
    'polygon_area',
    'validate_triangulation',
]
