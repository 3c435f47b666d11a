"""Tests for GraphBuilder construction and component creation."""

import pytest

from riviere.builder import GraphBuilder
from riviere.errors import (
    DomainNotFoundError,
    DuplicateComponentError,
    DuplicateDomainError,
    InvalidGraphError,
)
from riviere.graph import (
    APIComponent,
    ApiType,
    ComponentType,
    HttpMethod,
    SourceLocation,
    SystemType,
)
from tests.graph_helpers import LOCATION, REPOSITORY, make_builder


class TestNew:
    """Tests for GraphBuilder.new()."""

    def test_requires_a_source(self):
        with pytest.raises(ValueError, match="At least one source required"):
            GraphBuilder.new(
                sources=[], domains={"orders": {"description": "x", "systemType": "domain"}}
            )

    def test_requires_a_domain(self):
        with pytest.raises(ValueError, match="At least one domain required"):
            GraphBuilder.new(sources=[{"repository": REPOSITORY}], domains={})

    def test_initial_graph(self, builder):
        graph = builder.graph
        assert graph.version == "1.0"
        assert graph.metadata.name == "Shop"
        assert [s.repository for s in graph.metadata.sources] == [REPOSITORY]
        assert list(graph.metadata.domains) == ["orders", "shipping", "web"]
        assert graph.metadata.custom_types == {}
        assert graph.external_links == []
        assert graph.components == []


class TestResume:
    def test_requires_sources(self):
        with pytest.raises(InvalidGraphError, match="missing sources"):
            GraphBuilder.resume(
                {
                    "version": "1.0",
                    "metadata": {"sources": [], "domains": {}},
                    "components": [],
                    "links": [],
                }
            )

    def test_rejects_malformed_graph(self):
        with pytest.raises(ValueError):
            GraphBuilder.resume({"version": "1.0"})

    def test_rejects_text_that_is_not_json(self):
        with pytest.raises(InvalidGraphError, match="not valid JSON"):
            GraphBuilder.resume("{not json")

    def test_resumed_builder_can_continue(self, checkout_builder):
        resumed = GraphBuilder.resume(checkout_builder.serialize())
        resumed.add_use_case(
            name="Refund", domain="orders", module="checkout", source_location=LOCATION
        )
        assert len(resumed.graph.components) == 8
        assert len(checkout_builder.graph.components) == 7


class TestDomainsAndSources:
    def test_add_domain(self, builder):
        builder.add_domain("billing", "Invoices", "domain")
        assert builder.graph.metadata.domains["billing"].system_type is SystemType.DOMAIN

    def test_duplicate_domain(self, builder):
        with pytest.raises(DuplicateDomainError, match="Domain 'orders' already exists"):
            builder.add_domain("orders", "Again", "domain")

    def test_invalid_system_type(self, builder):
        with pytest.raises(ValueError):
            builder.add_domain("billing", "Invoices", "microservice")

    def test_add_source(self, builder):
        builder.add_source({"repository": "acme/payments", "commit": "deadbeef"})
        assert [s.commit for s in builder.graph.metadata.sources] == [None, "deadbeef"]


class TestAddComponents:
    """Tests for the add_* component methods."""

    def test_api_id_is_deterministic(self, builder):
        api = builder.add_api(
            name="Create Order",
            domain="orders",
            module="api",
            api_type="REST",
            http_method="POST",
            path="/orders",
            source_location=LOCATION,
        )

        assert isinstance(api, APIComponent)
        assert api.id == "orders:api:api:create-order"
        assert api.api_type is ApiType.REST
        assert api.http_method is HttpMethod.POST
        assert api.source_location == SourceLocation(
            repository=REPOSITORY, file_path="src/app.ts", line_number=1
        )

    def test_same_input_twice_is_duplicate(self, builder):
        kwargs = dict(
            name="Create Order",
            domain="orders",
            module="api",
            api_type="REST",
            source_location=LOCATION,
        )
        builder.add_api(**kwargs)

        with pytest.raises(DuplicateComponentError) as exc_info:
            builder.add_api(**kwargs)

        assert str(exc_info.value) == (
            "Component with ID 'orders:api:api:create-order' already exists"
        )
        assert len(builder.graph.components) == 1

    def test_unknown_domain_fails_fast(self, builder):
        with pytest.raises(DomainNotFoundError, match="Domain 'billing' does not exist"):
            builder.add_use_case(
                name="Invoice", domain="billing", module="core", source_location=LOCATION
            )
        assert builder.graph.components == []

    @pytest.mark.parametrize(
        "method,kwargs,type_tag,component_type",
        [
            ("add_ui", {"route": "/cart"}, "ui", ComponentType.UI),
            ("add_use_case", {}, "usecase", ComponentType.USE_CASE),
            ("add_domain_op", {"operation_name": "begin"}, "domainop", ComponentType.DOMAIN_OP),
            ("add_event", {"event_name": "CartSaved"}, "event", ComponentType.EVENT),
            (
                "add_event_handler",
                {"subscribed_events": ["CartSaved"]},
                "eventhandler",
                ComponentType.EVENT_HANDLER,
            ),
        ],
    )
    def test_type_tag_in_id(self, builder, method, kwargs, type_tag, component_type):
        component = getattr(builder, method)(
            name="Save Cart", domain="web", module="cart", source_location=LOCATION, **kwargs
        )
        assert component.id == f"web:cart:{type_tag}:save-cart"
        assert component.type is component_type

    def test_optional_fields_preserved(self, builder):
        op = builder.add_domain_op(
            name="Order Begin",
            domain="orders",
            module="domain",
            operation_name="begin",
            entity="Order",
            signature={"parameters": [{"name": "items", "type": "Item[]"}], "returnType": "Order"},
            behavior={"modifies": ["Order.status"], "emits": ["OrderPlaced"]},
            description="Starts an order",
            metadata={"team": "orders"},
            source_location=LOCATION,
        )

        data = op.to_dict()

        assert data["signature"]["returnType"] == "Order"
        assert data["behavior"]["emits"] == ["OrderPlaced"]
        assert data["description"] == "Starts an order"
        assert data["metadata"] == {"team": "orders"}

    def test_metadata_copied_from_caller(self, builder):
        metadata = {"team": "orders"}
        use_case = builder.add_use_case(
            name="Place Order",
            domain="orders",
            module="checkout",
            metadata=metadata,
            source_location=LOCATION,
        )

        metadata["team"] = "billing"

        assert use_case.metadata == {"team": "orders"}
        assert builder.graph.components[0].metadata == {"team": "orders"}

    def test_returns_component_stored_in_graph(self, builder):
        event = builder.add_event(
            name="Order Placed",
            domain="orders",
            module="events",
            event_name="OrderPlaced",
            event_schema="{ orderId: string }",
            source_location=LOCATION,
        )
        assert builder.graph.find_by_id(event.id) is event
