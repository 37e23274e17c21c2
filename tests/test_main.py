"""
Tests for the pipeline and CLI entry point.
"""

import json
import logging
import os

import pytest

from cityjson_mesher import __version__
from cityjson_mesher.config import ConversionConfig, OpacityPolicy
from cityjson_mesher.main import main, run_pipeline


@pytest.fixture(autouse=True)
def restore_root_logger():
    """main() replaces the root logger's handlers; put them back."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    for handler in root_logger.handlers:
        if handler not in handlers:
            handler.close()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


class TestRunPipeline:
    """Tests for run_pipeline."""

    def test_file_mode(self, tmp_path, cityjson_file):
        config = ConversionConfig(
            input_path=cityjson_file,
            output_dir=str(tmp_path / "out"),
            output_name="city",
        )

        result = run_pipeline(config, output_mode="file")

        assert result.success
        assert result.obj_path.endswith("city.obj")
        assert os.path.exists(result.obj_path)
        assert os.path.exists(result.mtl_path)

        report_path = tmp_path / "out" / "city_report.json"
        report = json.loads(report_path.read_text(encoding="utf-8"))
        assert report["success"] is True
        assert report["version"] == __version__
        assert report["stats"]["conversion"]["num_objects"] == 2
        assert report["stats"]["conversion"]["num_triangles"] == 3
        assert report["config_used"]["shared_opacity"] == "opaque"

    def test_memory_mode(self, tmp_path, cityjson_file):
        config = ConversionConfig(
            input_path=cityjson_file,
            output_dir=str(tmp_path / "unused"),
        )

        result = run_pipeline(config, output_mode="memory")

        assert result.success
        assert result.obj_path is None
        assert not (tmp_path / "unused").exists()
        assert set(result.sink.entities) == {"building-1", "part-1"}

    def test_shared_opacity_policy(self, tmp_path, cityjson_file):
        config = ConversionConfig(
            input_path=cityjson_file,
            shared_opacity=OpacityPolicy.FROM_TRANSPARENCY,
        )

        result = run_pipeline(config, output_mode="memory")

        mesh_id = result.sink.entities["building-1"].mesh_ids[0]
        mesh = result.sink.meshes[mesh_id]
        assert mesh.color == (0.9, 0.1, 0.1)
        assert mesh.opacity == pytest.approx(0.75)

    def test_missing_input(self, tmp_path):
        config = ConversionConfig(
            input_path=str(tmp_path / "missing.json"),
            output_dir=str(tmp_path / "out"),
        )

        result = run_pipeline(config)

        assert not result.success
        assert result.obj_path is None
        assert "Failed to load CityJSON" in result.report.errors[0]
        assert (tmp_path / "out" / "model_report.json").exists()


def _write_malformed(tmp_path, kind, document):
    path = tmp_path / f"{kind}.json"
    if kind == "latin1":
        path.write_bytes(b'{"type": "CityJSON", "name": "Z\xfcrich"}')
        return str(path)

    if kind == "material":
        document["appearance"]["materials"][0]["diffuseColor"] = ["red", "g", "b"]
    elif kind == "city_object":
        document["CityObjects"]["part-1"] = [0, 1, 2]
    path.write_text(json.dumps(document), encoding="utf-8")
    return str(path)


MALFORMED_KINDS = ["latin1", "material", "city_object"]


class TestMalformedInput:
    """Malformed documents produce a failed result, not an exception."""

    @pytest.mark.parametrize("kind", MALFORMED_KINDS)
    def test_memory_mode(self, tmp_path, cityjson_document, kind):
        config = ConversionConfig(
            input_path=_write_malformed(tmp_path, kind, cityjson_document),
        )

        result = run_pipeline(config, output_mode="memory")

        assert not result.success
        assert result.sink.is_empty()
        assert result.report.errors[0].startswith("Failed to load CityJSON")

    @pytest.mark.parametrize("kind", MALFORMED_KINDS)
    def test_file_mode_writes_report(self, tmp_path, cityjson_document, kind):
        out_dir = tmp_path / "out"
        config = ConversionConfig(
            input_path=_write_malformed(tmp_path, kind, cityjson_document),
            output_dir=str(out_dir),
        )

        result = run_pipeline(config)

        assert not result.success
        assert result.obj_path is None
        assert not (out_dir / "model.obj").exists()
        report = json.loads((out_dir / "model_report.json").read_text(encoding="utf-8"))
        assert report["success"] is False

    @pytest.mark.parametrize("kind", MALFORMED_KINDS)
    def test_cli_exit_code(self, tmp_path, cityjson_document, kind):
        code = main([
            "--input", _write_malformed(tmp_path, kind, cityjson_document),
            "--output-dir", str(tmp_path / "cli"),
            "--no-log-file",
        ])

        assert code == 1


class TestMain:
    """Tests for the argparse entry point."""

    def test_success(self, tmp_path, cityjson_file):
        out_dir = tmp_path / "cli"

        code = main([
            "--input", cityjson_file,
            "--output-dir", str(out_dir),
            "--name", "city",
            "--rotate-x",
            "--no-log-file",
        ])

        assert code == 0
        assert (out_dir / "city.obj").exists()
        assert (out_dir / "city.mtl").exists()
        assert (out_dir / "city_report.json").exists()

    def test_log_file(self, tmp_path, cityjson_file):
        out_dir = tmp_path / "cli"

        main(["--input", cityjson_file, "--output-dir", str(out_dir)])

        assert (out_dir / "model.log").exists()

    def test_failure_exit_code(self, tmp_path):
        code = main([
            "--input", str(tmp_path / "missing.json"),
            "--output-dir", str(tmp_path / "cli"),
            "--no-log-file",
        ])

        assert code == 1

    def test_invalid_choice(self, tmp_path, cityjson_file):
        with pytest.raises(SystemExit):
            main(["--input", cityjson_file, "--shared-opacity", "translucent"])
