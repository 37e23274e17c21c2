"""
Input/Output modules for CityJSON Mesher.
"""

from .cityjson_loader import (
    CityJSONLoadError,
    load_cityjson,
    parse_cityjson,
    parse_materials,
    transform_vertices,
)
from .obj_exporter import (
    ExportStats,
    collect_materials,
    export_model_obj,
    validate_obj_file,
    write_mtl,
)

__all__ = [
    # CityJSON loading
    'CityJSONLoadError',
    'load_cityjson',
    'parse_cityjson',
    'parse_materials',
    'transform_vertices',
    # OBJ export
    'ExportStats',
    'collect_materials',
    'export_model_obj',
    'validate_obj_file',
    'write_mtl',
]
