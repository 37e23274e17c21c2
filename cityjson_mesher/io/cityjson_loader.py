"""
CityJSON loader for CityJSON Mesher.

Reads a CityJSON document and prepares it for conversion:
    - applies the optional "transform" (scale, then translate)
    - optionally rotates the model about X (swaps Y and Z) so that
      Z-up city data becomes Y-up
    - parses appearance.materials and the CityObjects map
"""

from pathlib import Path
from typing import Any, Dict, List, Optional
import json
import logging

import numpy as np

from ..models.citymodel import CityModel, CityObject, Material, Vertex

logger = logging.getLogger(__name__)


class CityJSONLoadError(Exception):
    """Raised when a CityJSON document cannot be loaded."""
    pass


def transform_vertices(
    vertices: List[List[float]],
    transform: Optional[Dict[str, Any]] = None,
    rotate_x: bool = False
) -> List[Vertex]:
    """
    Apply the CityJSON transform to integer vertices.

        x' = x * scale[0] + translate[0]   (same for y, z)

    Args:
        vertices: Raw "vertices" array
        transform: Optional {"scale": [...], "translate": [...]}
        rotate_x: Swap Y and Z after transforming

    Returns:
        List of (x, y, z) float tuples

    Raises:
        CityJSONLoadError: If the array is not N x 3 numbers
    """
    try:
        coords = np.asarray(vertices, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise CityJSONLoadError(f"Invalid vertices array: {e}") from e

    if coords.ndim != 2 or coords.shape[1] != 3:
        raise CityJSONLoadError(
            f"Vertices must be an N x 3 array, got shape {coords.shape}"
        )

    if transform:
        if not isinstance(transform, dict):
            raise CityJSONLoadError("transform must be a JSON object")
        try:
            scale = np.asarray(transform.get('scale', (1.0, 1.0, 1.0)), dtype=np.float64)
            translate = np.asarray(transform.get('translate', (0.0, 0.0, 0.0)), dtype=np.float64)
            coords = coords * scale + translate
        except (TypeError, ValueError) as e:
            raise CityJSONLoadError(f"Invalid transform: {e}") from e

    if rotate_x:
        coords = coords[:, [0, 2, 1]]

    return [tuple(v) for v in coords.tolist()]


def parse_materials(appearance: Optional[Dict[str, Any]]) -> Optional[List[Material]]:
    """Parse appearance.materials; None when the document has none."""
    if not isinstance(appearance, dict):
        return None

    materials = appearance.get('materials')
    if not isinstance(materials, list):
        return None

    return [Material.from_cityjson(m if isinstance(m, dict) else {}) for m in materials]


def parse_cityjson(data: Dict[str, Any], rotate_x: bool = False) -> CityModel:
    """
    Build a CityModel from a decoded CityJSON document.

    Args:
        data: Decoded JSON document
        rotate_x: Swap Y and Z of every vertex

    Returns:
        CityModel with transformed vertices

    Raises:
        CityJSONLoadError: If CityObjects or vertices are missing or
            empty, or a geometry has an unknown type
    """
    if not isinstance(data, dict):
        raise CityJSONLoadError("CityJSON document must be a JSON object")

    raw_objects = data.get('CityObjects')
    if not raw_objects or not isinstance(raw_objects, dict):
        raise CityJSONLoadError("Document has no CityObjects")

    raw_vertices = data.get('vertices')
    if not raw_vertices or not isinstance(raw_vertices, list):
        raise CityJSONLoadError("Document has no vertices")

    vertices = transform_vertices(raw_vertices, data.get('transform'), rotate_x)

    city_objects: Dict[str, CityObject] = {}
    for object_id, object_data in raw_objects.items():
        if not isinstance(object_data, dict):
            raise CityJSONLoadError(f"City object {object_id} must be a JSON object")
        try:
            city_objects[object_id] = CityObject.from_cityjson(object_id, object_data)
        except (AttributeError, TypeError, ValueError) as e:
            raise CityJSONLoadError(f"City object {object_id}: {e}") from e

    try:
        materials = parse_materials(data.get('appearance'))
    except (TypeError, ValueError) as e:
        raise CityJSONLoadError(f"Invalid appearance materials: {e}") from e

    logger.debug(
        f"Parsed {len(city_objects)} city objects, {len(vertices)} vertices, "
        f"{len(materials) if materials is not None else 0} materials"
    )

    return CityModel(
        city_objects=city_objects,
        vertices=vertices,
        materials=materials,
        source_format=data.get('type', 'CityJSON'),
        version=str(data.get('version', '')),
    )


def load_cityjson(filepath: str, rotate_x: bool = False) -> CityModel:
    """
    Load a CityJSON file.

    Args:
        filepath: Path to a .json / .city.json file
        rotate_x: Swap Y and Z of every vertex

    Returns:
        CityModel ready for conversion

    Raises:
        FileNotFoundError: If file doesn't exist
        CityJSONLoadError: If the file is not valid CityJSON
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"CityJSON file not found: {filepath}")

    logger.info(f"Loading CityJSON from {filepath}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise CityJSONLoadError(f"Invalid JSON in {filepath}: {e}") from e

    model = parse_cityjson(data, rotate_x=rotate_x)

    logger.info(
        f"Loaded {model.source_format} {model.version}: "
        f"{len(model.city_objects)} city objects, {len(model.vertices)} vertices"
    )

    return model
