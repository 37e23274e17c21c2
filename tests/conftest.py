"""
Shared fixtures for CityJSON Mesher tests.
"""

import json
import math

import pytest

from cityjson_mesher.models.citymodel import (
    CityModel,
    CityObject,
    Geometry,
    GeometryType,
    Material,
)


# ============================================================================
# Helpers
# ============================================================================

def triangle_area_3d(positions, a, b, c):
    """Unsigned area of a triangle given flat positions and local indices."""
    ax, ay, az = positions[3 * a:3 * a + 3]
    bx, by, bz = positions[3 * b:3 * b + 3]
    cx, cy, cz = positions[3 * c:3 * c + 3]
    ux, uy, uz = bx - ax, by - ay, bz - az
    vx, vy, vz = cx - ax, cy - ay, cz - az
    nx = uy * vz - uz * vy
    ny = uz * vx - ux * vz
    nz = ux * vy - uy * vx
    return 0.5 * math.sqrt(nx * nx + ny * ny + nz * nz)


def mesh_area(mesh):
    """Total area of a MeshRecord or MeshData."""
    total = 0.0
    for t in range(0, len(mesh.indices), 3):
        total += triangle_area_3d(
            mesh.positions,
            mesh.indices[t], mesh.indices[t + 1], mesh.indices[t + 2]
        )
    return total


def make_model(geometries, vertices, materials=None, object_type="Building",
               object_id="b1", parents=None):
    """Build a CityModel with one city object."""
    city_object = CityObject(
        id=object_id,
        type=object_type,
        geometry=list(geometries),
        parents=list(parents or []),
    )
    return CityModel(
        city_objects={object_id: city_object},
        vertices=[tuple(float(c) for c in v) for v in vertices],
        materials=materials,
        version="2.0",
    )


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def square_vertices():
    """Unit square in the XY plane, counter-clockwise."""
    return [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.0), (0.0, 1.0, 0.0)]


@pytest.fixture
def square_with_hole_vertices():
    """4x4 square with a 2x2 hole in the middle, in the XY plane."""
    return [
        (0.0, 0.0, 0.0), (4.0, 0.0, 0.0), (4.0, 4.0, 0.0), (0.0, 4.0, 0.0),
        (1.0, 1.0, 0.0), (1.0, 3.0, 0.0), (3.0, 3.0, 0.0), (3.0, 1.0, 0.0),
    ]


@pytest.fixture
def cube_vertices():
    """Unit cube corners."""
    return [
        (0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.0), (0.0, 1.0, 0.0),
        (0.0, 0.0, 1.0), (1.0, 0.0, 1.0), (1.0, 1.0, 1.0), (0.0, 1.0, 1.0),
    ]


@pytest.fixture
def cube_shell():
    """Outward-facing shell of the unit cube (6 quads)."""
    return [
        [[0, 3, 2, 1]],  # bottom
        [[4, 5, 6, 7]],  # top
        [[0, 1, 5, 4]],  # front
        [[1, 2, 6, 5]],  # right
        [[2, 3, 7, 6]],  # back
        [[3, 0, 4, 7]],  # left
    ]


@pytest.fixture
def square_model(square_vertices):
    """One building with one MultiSurface made of the unit square."""
    geometry = Geometry(type=GeometryType.MULTI_SURFACE, boundaries=[[[0, 1, 2, 3]]])
    return make_model([geometry], square_vertices)


@pytest.fixture
def two_materials():
    """A red half-transparent and an opaque blue material."""
    return [
        Material(diffuse_color=(1.0, 0.0, 0.0), transparency=0.5),
        Material(diffuse_color=(0.0, 0.0, 1.0), transparency=None),
    ]


@pytest.fixture
def cityjson_document():
    """Minimal CityJSON document with a transform and materials."""
    return {
        "type": "CityJSON",
        "version": "2.0",
        "transform": {
            "scale": [0.5, 0.5, 0.5],
            "translate": [10.0, 20.0, 30.0],
        },
        "CityObjects": {
            "building-1": {
                "type": "Building",
                "geometry": [{
                    "type": "MultiSurface",
                    "lod": "1",
                    "boundaries": [[[0, 1, 2, 3]]],
                    "material": {"visual": {"value": 0}},
                }],
            },
            "part-1": {
                "type": "BuildingPart",
                "parents": ["building-1"],
                "geometry": [{
                    "type": "MultiSurface",
                    "boundaries": [[[0, 1, 4]]],
                }],
            },
        },
        "vertices": [
            [0, 0, 0], [2, 0, 0], [2, 2, 0], [0, 2, 0], [0, 0, 2],
        ],
        "appearance": {
            "materials": [
                {"name": "roof", "diffuseColor": [0.9, 0.1, 0.1], "transparency": 0.25},
            ],
        },
    }


@pytest.fixture
def cityjson_file(tmp_path, cityjson_document):
    """CityJSON document written to a temporary file."""
    path = tmp_path / "model.city.json"
    path.write_text(json.dumps(cityjson_document), encoding="utf-8")
    return str(path)
