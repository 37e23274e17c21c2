"""
Configuration constants for CityJSON Mesher.

Contains the fallback material, planar projection constants, mesh id
and export settings, and the runtime configuration dataclass.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


# =============================================================================
# MATERIAL POLICIES
# =============================================================================

class OpacityPolicy(Enum):
    """
    How the shared-material path derives mesh opacity.

    OPAQUE: (Default) Always emit opacity 1.0, ignoring the material's
            transparency. Matches the per-object behaviour of the original
            CityJSON loader.

    FROM_TRANSPARENCY: Emit 1.0 - transparency, the same rule the
                       per-surface path uses.
    """
    OPAQUE = "opaque"
    FROM_TRANSPARENCY = "from_transparency"


class SurfaceMaterialIndexing(Enum):
    """
    How per-surface material values are matched to surfaces.

    BY_SURFACE: (Default) Walk material values with the same nesting as
                the geometry boundaries and pick the entry for each surface.

    LEGACY: Reproduce the original loader: every surface slot reads
            values[geometry_index], indexed by the surface position within
            its own surface list.
    """
    BY_SURFACE = "by_surface"
    LEGACY = "legacy"


# =============================================================================
# FALLBACK MATERIAL
# =============================================================================

# Used when a geometry (or a surface) has no resolvable material
DEFAULT_DIFFUSE_COLOR: Tuple[float, float, float] = (0.8, 0.8, 0.8)
DEFAULT_TRANSPARENCY = 0.0

# =============================================================================
# PLANAR PROJECTION
# =============================================================================

# Reference vector for building an in-plane basis
PROJECTION_REFERENCE = (1.1, 1.1, 1.1)

# Added to the reference vector when it lies too close to the normal
PROJECTION_REFERENCE_PERTURBATION = (1.0, 2.0, 3.0)

# Minimum distance between reference vector and normal
PROJECTION_DEGENERATE_DISTANCE = 0.01

# =============================================================================
# MESH OUTPUT
# =============================================================================

MESH_PRIMITIVE = "triangles"

# Synthetic root of the metadata hierarchy
ROOT_META_OBJECT_NAME = "Model"
ROOT_META_OBJECT_TYPE = "Model"

# =============================================================================
# EXPORT SETTINGS
# =============================================================================

# OBJ export precision (decimal places)
OBJ_VERTEX_PRECISION = 6

# Default output base name for CLI runs
DEFAULT_OUTPUT_NAME = "model"


# =============================================================================
# RUNTIME CONFIGURATION
# =============================================================================

@dataclass
class ConversionConfig:
    """
    Runtime configuration for a CityJSON conversion run.

    Holds the parameters that can be adjusted per run via CLI
    arguments or programmatically.
    """

    # Input
    input_path: str = ""

    # Swap Y and Z of every vertex after applying the transform
    rotate_x: bool = False

    # Emit metadata objects for the city object hierarchy
    load_metadata: bool = True

    # Material policies
    shared_opacity: OpacityPolicy = OpacityPolicy.OPAQUE
    surface_material_indexing: SurfaceMaterialIndexing = SurfaceMaterialIndexing.BY_SURFACE

    # Fallback material
    default_color: Tuple[float, float, float] = DEFAULT_DIFFUSE_COLOR
    default_transparency: float = DEFAULT_TRANSPARENCY

    # Export
    output_dir: str = "./output"
    output_name: str = DEFAULT_OUTPUT_NAME

    # Debug/report
    verbose: bool = False

    def __post_init__(self):
        """Validate configuration values."""
        if len(self.default_color) != 3:
            raise ValueError("default_color must have exactly 3 components")

        for component in self.default_color:
            if not (0.0 <= component <= 1.0):
                raise ValueError("default_color components must be between 0 and 1")

        if not (0.0 <= self.default_transparency <= 1.0):
            raise ValueError("default_transparency must be between 0 and 1")

        if not self.output_name:
            raise ValueError("output_name must not be empty")


# Default configuration instance
DEFAULT_CONFIG = ConversionConfig()
