"""
CityJSON Mesher - Main CLI

Converts the B-Rep geometry of a CityJSON file into indexed triangle
meshes and writes them as OBJ/MTL together with a JSON report.

Usage:
    python -m cityjson_mesher.main --input <file.city.json>

Example:
    python -m cityjson_mesher.main --input ./data/buildings.city.json --rotate-x
"""

import argparse
import json
import logging
import os
import sys
import time
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional

from . import __version__
from .config import (
    ConversionConfig,
    OpacityPolicy,
    SurfaceMaterialIndexing,
    DEFAULT_OUTPUT_NAME,
)
from .io.cityjson_loader import load_cityjson
from .io.obj_exporter import export_model_obj, validate_obj_file
from .models.citymodel import ConversionStatistics
from .processing.conversion import convert_city_model
from .sinks.memory import MemoryModelSink


@dataclass
class PipelineStats:
    """Statistics from the pipeline run."""
    city_objects_loaded: int = 0
    vertices_loaded: int = 0
    materials_loaded: int = 0
    conversion: ConversionStatistics = field(default_factory=ConversionStatistics)
    meshes_created: int = 0
    obj_vertices: int = 0
    obj_faces: int = 0
    obj_materials: int = 0
    processing_time_ms: int = 0
    warnings: List[str] = field(default_factory=list)


@dataclass
class PipelineReport:
    """Report from pipeline run."""
    input_path: str
    version: str
    success: bool
    stats: PipelineStats
    output_files: List[str]
    errors: List[str] = field(default_factory=list)
    config_used: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PipelineResult:
    """
    Complete result of pipeline execution.

    Supports two output modes:
    - 'file': Writes OBJ/MTL and the report to disk (CLI mode)
    - 'memory': Returns the filled sink

    Attributes:
        success: Whether pipeline completed without errors
        report: Detailed statistics and metadata
        obj_path: Path to the OBJ file (file mode only)
        mtl_path: Path to the MTL file (file mode only)
        sink: Sink holding meshes, entities and metadata
    """
    success: bool
    report: PipelineReport
    obj_path: Optional[str] = None
    mtl_path: Optional[str] = None
    sink: Optional[MemoryModelSink] = None


def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """
    Configure logging to console and optionally to file.

    Args:
        verbose: If True, use DEBUG level; otherwise INFO
        log_file: Optional path to log file
    """
    level = logging.DEBUG if verbose else logging.INFO

    formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)  # Always log DEBUG to file
        file_formatter = logging.Formatter(
            '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        file_handler.setFormatter(file_formatter)
        root_logger.addHandler(file_handler)


def run_pipeline(
    config: ConversionConfig,
    output_mode: str = "file"
) -> PipelineResult:
    """
    Run the complete conversion pipeline.

    Steps:
    1. Load the CityJSON file (transform, optional X rotation)
    2. Convert every city object into meshes on a memory sink
    3. Export OBJ/MTL (file mode) or return the sink (memory mode)
    4. Generate report

    Args:
        config: Conversion configuration
        output_mode: "file" to write OBJ/MTL (default), "memory" to return the sink

    Returns:
        PipelineResult with report and either file paths or the sink
    """
    logger = logging.getLogger(__name__)

    start_time = time.time()
    stats = PipelineStats()
    errors: List[str] = []
    output_files: List[str] = []
    sink = MemoryModelSink()
    obj_path = None
    mtl_path = None

    if output_mode == "file":
        os.makedirs(config.output_dir, exist_ok=True)

    # Step 1: Load CityJSON
    model = None
    try:
        model = load_cityjson(config.input_path, rotate_x=config.rotate_x)
        stats.city_objects_loaded = len(model.city_objects)
        stats.vertices_loaded = len(model.vertices)
        stats.materials_loaded = len(model.materials) if model.materials else 0
    except Exception as e:
        errors.append(f"Failed to load CityJSON: {e}")

    # Step 2: Convert
    if model is not None:
        try:
            stats.conversion = convert_city_model(model, sink, config)
            stats.meshes_created = len(sink.meshes)
            logger.info(sink.get_stats_summary())
        except Exception as e:
            errors.append(f"Conversion failed: {e}")

        if model.city_objects and not sink.entities and not errors:
            warning = "No city object produced any triangles"
            stats.warnings.append(warning)
            logger.warning(warning)

    # Step 3: Export
    if output_mode == "file" and not errors:
        obj_path = os.path.join(config.output_dir, f"{config.output_name}.obj")
        mtl_filename = f"{config.output_name}.mtl"
        try:
            export_stats = export_model_obj(
                sink,
                obj_path,
                mtl_filename=mtl_filename,
                comment=f"Source: {os.path.basename(config.input_path)}",
            )
            mtl_path = os.path.join(config.output_dir, mtl_filename)
            output_files.extend([obj_path, mtl_path])

            stats.obj_vertices = export_stats.total_vertices
            stats.obj_faces = export_stats.total_faces
            stats.obj_materials = export_stats.total_materials

            if sink.entities:
                for issue in validate_obj_file(obj_path):
                    stats.warnings.append(f"OBJ validation: {issue}")
                    logger.warning(f"OBJ validation: {issue}")

        except Exception as e:
            errors.append(f"Failed to export OBJ: {e}")

    # Step 4: Generate report
    elapsed_ms = int((time.time() - start_time) * 1000)
    stats.processing_time_ms = elapsed_ms

    config_used = {
        'rotate_x': config.rotate_x,
        'load_metadata': config.load_metadata,
        'shared_opacity': config.shared_opacity.value,
        'surface_material_indexing': config.surface_material_indexing.value,
        'default_color': list(config.default_color),
        'default_transparency': config.default_transparency,
    }

    report = PipelineReport(
        input_path=config.input_path,
        version=__version__,
        success=len(errors) == 0,
        stats=stats,
        output_files=output_files,
        errors=errors,
        config_used=config_used,
    )

    if output_mode == "file":
        report_path = os.path.join(
            config.output_dir,
            f"{config.output_name}_report.json"
        )
        output_files.append(report_path)
        with open(report_path, 'w', encoding='utf-8') as f:
            json.dump(asdict(report), f, indent=2)
        logger.info(f"Report saved to {report_path}")

    logger.info(f"Pipeline completed in {elapsed_ms}ms")

    return PipelineResult(
        success=report.success,
        report=report,
        obj_path=obj_path if report.success else None,
        mtl_path=mtl_path if report.success else None,
        sink=sink,
    )


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='CityJSON Mesher - Triangulate CityJSON geometry into meshes'
    )

    parser.add_argument(
        '--input', '-i',
        required=True,
        help='CityJSON file to convert'
    )

    parser.add_argument(
        '--output-dir',
        default='./output',
        help='Output directory for generated files (default: ./output)'
    )

    parser.add_argument(
        '--name',
        default=DEFAULT_OUTPUT_NAME,
        help=f'Base name of the output files (default: {DEFAULT_OUTPUT_NAME})'
    )

    parser.add_argument(
        '--rotate-x',
        action='store_true',
        help='Swap Y and Z of all vertices (Z-up to Y-up)'
    )

    parser.add_argument(
        '--shared-opacity',
        type=str,
        choices=[p.value for p in OpacityPolicy],
        default=OpacityPolicy.OPAQUE.value,
        help='Opacity of shared-material meshes: "opaque" (default) always 1.0, '
             '"from_transparency" uses 1 - material transparency'
    )

    parser.add_argument(
        '--surface-material-indexing',
        type=str,
        choices=[m.value for m in SurfaceMaterialIndexing],
        default=SurfaceMaterialIndexing.BY_SURFACE.value,
        help='How per-surface material values are matched to surfaces '
             '(default: by_surface)'
    )

    parser.add_argument(
        '--no-metadata',
        action='store_true',
        help='Do not emit metadata objects for the city object hierarchy'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    parser.add_argument(
        '--no-log-file',
        action='store_true',
        help='Disable log file output (only console)'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    args = parser.parse_args(argv)

    # Create output directory early so we can put log file there
    os.makedirs(args.output_dir, exist_ok=True)

    log_file = None
    if not args.no_log_file:
        log_file = os.path.join(args.output_dir, f"{args.name}.log")

    setup_logging(args.verbose, log_file)

    try:
        config = ConversionConfig(
            input_path=args.input,
            rotate_x=args.rotate_x,
            load_metadata=not args.no_metadata,
            shared_opacity=OpacityPolicy(args.shared_opacity),
            surface_material_indexing=SurfaceMaterialIndexing(args.surface_material_indexing),
            output_dir=args.output_dir,
            output_name=args.name,
            verbose=args.verbose,
        )
    except ValueError as e:
        print(f"Invalid configuration: {e}")
        return 2

    try:
        result = run_pipeline(config, output_mode="file")
    except Exception as e:
        logging.exception(f"Pipeline failed: {e}")
        if log_file:
            print(f"See log file for details: {log_file}")
        return 1

    report = result.report
    conversion = report.stats.conversion

    if result.success:
        print(f"\nSuccess! Converted {conversion.num_objects} city objects")
        print(f"Loaded: {report.stats.city_objects_loaded} objects, "
              f"{report.stats.vertices_loaded} vertices, "
              f"{report.stats.materials_loaded} materials")
        print(f"Geometries: {conversion.num_geometries}, meshes: {report.stats.meshes_created}")
        print(f"Triangles: {conversion.num_triangles}, vertices: {conversion.num_vertices}")
        for warning in report.stats.warnings:
            print(f"Warning: {warning}")
        print(f"Output files: {', '.join(report.output_files)}")
        if log_file:
            print(f"Log file: {log_file}")
        return 0

    print(f"\nPipeline failed with errors:")
    for error in report.errors:
        print(f"  - {error}")
    if log_file:
        print(f"See log file for details: {log_file}")
    return 1


if __name__ == '__main__':
    sys.exit(main())
