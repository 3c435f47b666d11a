"""Tests for GraphBuilder serialize(), build() and save()."""

import json

import pytest

from riviere.builder import GraphBuilder
from riviere.errors import GraphValidationError
from riviere.graph.schema import is_graph
from tests.graph_helpers import LOCATION


class TestSerialize:
    def test_resume_round_trip_is_stable(self, checkout_builder):
        checkout_builder.define_custom_type("Queue")
        text = checkout_builder.serialize()

        resumed = GraphBuilder.resume(json.loads(text))

        assert resumed.serialize() == text

    def test_keeps_empty_collections_for_resume(self, builder):
        data = json.loads(builder.serialize())
        assert data["metadata"]["customTypes"] == {}
        assert data["externalLinks"] == []

    def test_two_space_indent(self, builder):
        assert builder.serialize().startswith('{\n  "version": "1.0"')


class TestBuild:
    def test_omits_empty_collections(self, checkout_builder):
        graph = checkout_builder.build()
        assert graph.metadata.custom_types is None
        assert graph.external_links is None

    def test_result_is_independent(self, checkout_builder):
        graph = checkout_builder.build()
        checkout_builder.add_use_case(
            name="Late", domain="orders", module="core", source_location=LOCATION
        )
        assert len(graph.components) == 7

    def test_lists_every_error(self, builder):
        use_case = builder.add_use_case(
            name="Place Order", domain="orders", module="checkout", source_location=LOCATION
        )
        builder.link(use_case.id, "orders:x:usecase:a")
        builder.link(use_case.id, "orders:x:usecase:b")

        with pytest.raises(GraphValidationError) as exc_info:
            builder.build()

        assert len(exc_info.value.errors) == 2
        assert str(exc_info.value) == (
            "Validation failed: "
            "/links/0/target: Link references non-existent target: orders:x:usecase:a; "
            "/links/1/target: Link references non-existent target: orders:x:usecase:b"
        )


class TestSave:
    def test_writes_schema_valid_json(self, checkout_builder, tmp_path):
        path = checkout_builder.save(tmp_path / "graph.json")

        data = json.loads(path.read_text(encoding="utf-8"))

        assert is_graph(data)
        assert "customTypes" not in data["metadata"]
        assert "externalLinks" not in data
        assert len(data["components"]) == 7

    def test_missing_directory(self, checkout_builder, tmp_path):
        target = tmp_path / "nope" / "graph.json"

        with pytest.raises(FileNotFoundError, match="Directory does not exist"):
            checkout_builder.save(target)

        assert not target.exists()

    def test_invalid_graph_not_written(self, builder, tmp_path):
        use_case = builder.add_use_case(
            name="Place Order", domain="orders", module="checkout", source_location=LOCATION
        )
        builder.link(use_case.id, "orders:x:usecase:missing")

        with pytest.raises(GraphValidationError):
            builder.save(tmp_path / "graph.json")

        assert not (tmp_path / "graph.json").exists()


class TestResumeFinalized:
    def test_can_add_external_links_and_custom_types(self, checkout_builder, tmp_path):
        path = checkout_builder.save(tmp_path / "graph.json")

        resumed = GraphBuilder.resume(path.read_text(encoding="utf-8"))
        resumed.link_external(
            "shipping:planning:usecase:schedule-shipment",
            {"name": "Carrier API"},
            link_type="sync",
        )
        resumed.define_custom_type("Queue")

        graph = resumed.build()
        assert [link.target.name for link in graph.external_links] == ["Carrier API"]
        assert list(graph.metadata.custom_types) == ["Queue"]
