"""
Unit tests for model sinks.
"""

import pytest

from cityjson_mesher.models.citymodel import CityObjectResult, MetaObject
from cityjson_mesher.models.mesh import MeshRecord
from cityjson_mesher.sinks import IModelSink, MemoryModelSink


def _mesh(mesh_id, triangles=1):
    return MeshRecord(
        id=mesh_id,
        positions=[0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 1.0, 0.0],
        indices=[0, 1, 2] * triangles,
        color=(0.8, 0.8, 0.8),
        opacity=1.0,
    )


class TestMemoryModelSink:
    """Tests for the in-memory sink."""

    def test_stores_meshes_in_order(self):
        sink = MemoryModelSink()
        sink.create_mesh(_mesh("1"))
        sink.create_mesh(_mesh("0"))

        assert list(sink.meshes) == ["1", "0"]
        assert not sink.is_empty()

    def test_duplicate_mesh_id(self):
        sink = MemoryModelSink()
        sink.create_mesh(_mesh("0"))

        with pytest.raises(ValueError):
            sink.create_mesh(_mesh("0"))

    def test_entity_with_unknown_mesh(self):
        sink = MemoryModelSink()

        with pytest.raises(ValueError):
            sink.create_entity(CityObjectResult(id="b1", mesh_ids=["0"]))

    def test_duplicate_entity(self):
        sink = MemoryModelSink()
        sink.create_mesh(_mesh("0"))
        sink.create_entity(CityObjectResult(id="b1", mesh_ids=["0"]))

        with pytest.raises(ValueError):
            sink.create_entity(CityObjectResult(id="b1", mesh_ids=["0"]))

    def test_entity_meshes(self):
        sink = MemoryModelSink()
        sink.create_mesh(_mesh("0"))
        sink.create_mesh(_mesh("1", triangles=2))
        sink.create_entity(CityObjectResult(id="b1", mesh_ids=["1", "0"]))

        assert [m.id for m in sink.entity_meshes("b1")] == ["1", "0"]
        assert sink.total_vertices() == 6
        assert sink.total_triangles() == 3

    def test_meta_objects(self):
        sink = MemoryModelSink()
        sink.create_meta_object(MetaObject(id="root", name="Model", type="Model"))

        assert sink.get_meta_object("root").name == "Model"
        assert sink.get_meta_object("missing") is None

    def test_stats_summary(self):
        sink = MemoryModelSink()
        sink.create_mesh(_mesh("0"))

        summary = sink.get_stats_summary()

        assert "meshes: 1" in summary
        assert "triangles: 1" in summary


class TestIModelSink:
    """Tests for the sink interface."""

    def test_cannot_instantiate_abstract(self):
        with pytest.raises(TypeError):
            IModelSink()

    def test_meta_objects_ignored_by_default(self):
        class MeshOnlySink(IModelSink):
            def create_mesh(self, mesh):
                pass

            def create_entity(self, entity):
                pass

        sink = MeshOnlySink()
        assert sink.create_meta_object(MetaObject(id="x", name="x", type="x")) is None
