"""
OBJ mesh exporter for CityJSON Mesher.

Exports the contents of a MemoryModelSink to Wavefront OBJ with a
companion MTL file:
- One 'o' object per entity (city object id)
- One 'usemtl' per mesh; meshes with equal color and opacity share
  a material
- Mesh-local 0-based indices become global 1-based OBJ indices
"""

import os
from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass
import logging

from ..config import OBJ_VERTEX_PRECISION
from ..sinks.memory import MemoryModelSink

logger = logging.getLogger(__name__)


@dataclass
class ExportStats:
    """Statistics from OBJ export."""
    total_vertices: int = 0
    total_faces: int = 0
    total_objects: int = 0
    total_materials: int = 0
    file_size_bytes: int = 0


MaterialKey = Tuple[Tuple[float, float, float], float]


def collect_materials(sink: MemoryModelSink) -> Dict[MaterialKey, str]:
    """
    Assign a material name to every distinct (color, opacity) pair.

    Names are assigned in mesh creation order: material_0, material_1, ...
    """
    names: Dict[MaterialKey, str] = {}
    for mesh in sink.meshes.values():
        key = (tuple(mesh.color), float(mesh.opacity))
        if key not in names:
            names[key] = f"material_{len(names)}"
    return names


def write_mtl(materials: Dict[MaterialKey, str], filepath: str) -> None:
    """
    Write an MTL file.

    Each material gets its diffuse color (Kd) and dissolve (d = opacity).
    """
    os.makedirs(os.path.dirname(filepath) or '.', exist_ok=True)

    with open(filepath, 'w', encoding='utf-8') as f:
        f.write("# CityJSON Mesher MTL Export\n")
        f.write(f"# Materials: {len(materials)}\n")

        for (color, opacity), name in materials.items():
            r, g, b = color
            f.write(f"\nnewmtl {name}\n")
            f.write(f"Kd {r:.6f} {g:.6f} {b:.6f}\n")
            f.write(f"d {opacity:.6f}\n")


def export_model_obj(
    sink: MemoryModelSink,
    filepath: str,
    mtl_filename: Optional[str] = None,
    comment: Optional[str] = None
) -> ExportStats:
    """
    Export all entities of a sink to a single OBJ file.

    Args:
        sink: Sink filled by a conversion run
        filepath: Output file path (.obj)
        mtl_filename: Name of the MTL file to write next to the OBJ;
                      defaults to the OBJ name with a .mtl extension
        comment: Optional comment to include in file header

    Returns:
        ExportStats with export statistics
    """
    stats = ExportStats()

    if mtl_filename is None:
        mtl_filename = os.path.splitext(os.path.basename(filepath))[0] + ".mtl"

    materials = collect_materials(sink)
    stats.total_materials = len(materials)

    os.makedirs(os.path.dirname(filepath) or '.', exist_ok=True)

    precision = OBJ_VERTEX_PRECISION
    vertex_offset = 0

    with open(filepath, 'w', encoding='utf-8') as f:
        # Header comment
        f.write("# CityJSON Mesher OBJ Export\n")
        f.write(f"# Objects: {len(sink.entities)}\n")
        f.write(f"# Meshes: {len(sink.meshes)}\n")

        if comment:
            f.write(f"# {comment}\n")

        f.write(f"\nmtllib {mtl_filename}\n")

        for entity in sink.entities.values():
            f.write(f"\no {entity.id}\n")
            stats.total_objects += 1

            for mesh in sink.entity_meshes(entity.id):
                positions = mesh.positions
                for i in range(0, len(positions), 3):
                    f.write(
                        f"v {positions[i]:.{precision}f} "
                        f"{positions[i + 1]:.{precision}f} "
                        f"{positions[i + 2]:.{precision}f}\n"
                    )

                key = (tuple(mesh.color), float(mesh.opacity))
                f.write(f"usemtl {materials[key]}\n")

                indices = mesh.indices
                for i in range(0, len(indices), 3):
                    # OBJ uses 1-based indices
                    a = indices[i] + vertex_offset + 1
                    b = indices[i + 1] + vertex_offset + 1
                    c = indices[i + 2] + vertex_offset + 1
                    f.write(f"f {a} {b} {c}\n")

                vertex_offset += mesh.vertex_count()
                stats.total_vertices += mesh.vertex_count()
                stats.total_faces += mesh.triangle_count()

    mtl_path = os.path.join(os.path.dirname(filepath), mtl_filename)
    write_mtl(materials, mtl_path)

    stats.file_size_bytes = os.path.getsize(filepath)

    logger.info(
        f"Exported {stats.total_objects} objects to {filepath}: "
        f"{stats.total_vertices} vertices, {stats.total_faces} faces, "
        f"{stats.total_materials} materials"
    )

    return stats


def validate_obj_file(filepath: str) -> List[str]:
    """
    Validate an OBJ file for common issues.

    Args:
        filepath: Path to OBJ file

    Returns:
        List of error messages (empty if valid)
    """
    errors = []

    if not os.path.exists(filepath):
        errors.append(f"File does not exist: {filepath}")
        return errors

    vertex_count = 0
    face_count = 0
    max_vertex_ref = 0

    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            for line_num, line in enumerate(f, 1):
                parts = line.split()
                if not parts or parts[0].startswith('#'):
                    continue

                if parts[0] == 'v':
                    vertex_count += 1
                    if len(parts) < 4:
                        errors.append(f"Line {line_num}: Vertex has < 3 coordinates")

                elif parts[0] == 'f':
                    face_count += 1
                    if len(parts) < 4:
                        errors.append(f"Line {line_num}: Face has < 3 vertices")

                    for part in parts[1:]:
                        idx_str = part.split('/')[0]
                        try:
                            idx = int(idx_str)
                        except ValueError:
                            errors.append(
                                f"Line {line_num}: Invalid vertex index '{idx_str}'"
                            )
                            continue
                        if idx < 1:
                            errors.append(f"Line {line_num}: Invalid index {idx}")
                        max_vertex_ref = max(max_vertex_ref, idx)

    except OSError as e:
        errors.append(f"Failed to read file: {e}")
        return errors

    if max_vertex_ref > vertex_count:
        errors.append(
            f"Face references vertex {max_vertex_ref} but only {vertex_count} vertices exist"
        )

    if vertex_count == 0:
        errors.append("File contains no vertices")

    if face_count == 0:
        errors.append("File contains no faces")

    return errors
