"""
Data models for CityJSON Mesher.
"""

from .geometry import Point3D
from .citymodel import (
    GeometryType,
    Geometry,
    CityObject,
    CityModel,
    Material,
    MetaObject,
    CityObjectResult,
    ConversionStatistics,
)
from .index_remapper import LocalIndexRemapper
from .mesh import MeshData, MeshRecord

__all__ = [
    'Point3D',
    'GeometryType', 'Geometry', 'CityObject', 'CityModel',
    'Material',
    'MetaObject', 'CityObjectResult', 'ConversionStatistics',
    'LocalIndexRemapper',
    'MeshData', 'MeshRecord',
]
