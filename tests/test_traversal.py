"""Tests for query/traversal.py - entry points, flows, traces and depths."""

import pytest

from riviere.errors import ComponentNotFoundError
from riviere.graph.relations import LinkType
from riviere.query import GraphQuery
from tests.graph_helpers import LOCATION, make_builder

UI = "web:pages:ui:checkout-page"
API = "orders:api:api:place-order"
USE_CASE = "orders:checkout:usecase:place-order"
DOMAIN_OP = "orders:domain:domainop:order-begin"
EVENT = "orders:events:event:order-placed"
HANDLER = "shipping:handlers:eventhandler:on-order-placed"
SHIPMENT = "shipping:planning:usecase:schedule-shipment"

CHECKOUT_ORDER = [UI, API, USE_CASE, DOMAIN_OP, EVENT, HANDLER, SHIPMENT]


def _use_case(builder, name, domain="orders"):
    return builder.add_use_case(name=name, domain=domain, module="core", source_location=LOCATION)


def _ui(builder, name):
    return builder.add_ui(
        name=name, domain="web", module="pages", route=f"/{name}", source_location=LOCATION
    )


class TestEntryPoints:
    """Tests for entry point detection."""

    def test_single_ui_without_links(self, builder):
        ui = _ui(builder, "Home")
        assert [c.id for c in builder.query().entry_points()] == [ui.id]

    def test_use_case_without_links_is_not_entry_point(self, builder):
        ui = _ui(builder, "Home")
        _use_case(builder, "Browse")
        assert [c.id for c in builder.query().entry_points()] == [ui.id]

    def test_link_target_is_not_entry_point(self, checkout_query):
        assert [c.id for c in checkout_query.entry_points()] == [UI]

    def test_handler_and_custom_qualify(self, builder):
        builder.define_custom_type("Cron")
        handler = builder.add_event_handler(
            name="Nightly",
            domain="orders",
            module="jobs",
            subscribed_events=[],
            source_location=LOCATION,
        )
        cron = builder.add_custom(
            custom_type_name="Cron",
            name="Midnight",
            domain="orders",
            module="jobs",
            source_location=LOCATION,
        )
        ids = [c.id for c in builder.query().entry_points()]
        assert ids == [handler.id, cron.id]


class TestFlows:
    """Tests for forward flow enumeration."""

    def test_checkout_flow_steps(self, checkout_query):
        flows = checkout_query.flows()

        assert len(flows) == 1
        steps = flows[0].steps
        assert flows[0].entry_point.id == UI
        assert [s.component.id for s in steps] == CHECKOUT_ORDER
        assert [s.depth for s in steps] == [0, 1, 2, 3, 4, 5, 6]
        assert [s.link_type for s in steps] == [
            LinkType.SYNC,
            LinkType.SYNC,
            LinkType.SYNC,
            LinkType.ASYNC,
            LinkType.ASYNC,
            LinkType.SYNC,
            None,
        ]

    def test_cycle_terminates(self, builder):
        ui = _ui(builder, "Home")
        first = _use_case(builder, "First")
        second = _use_case(builder, "Second")
        builder.link(ui.id, first.id)
        builder.link(first.id, second.id)
        builder.link(second.id, first.id)

        steps = builder.query().flows()[0].steps

        assert [s.component.id for s in steps] == [ui.id, first.id, second.id]

    def test_depth_follows_discovered_path(self, builder):
        ui = _ui(builder, "Home")
        a = _use_case(builder, "A")
        b = _use_case(builder, "B")
        builder.link(ui.id, a.id)
        builder.link(a.id, b.id)
        builder.link(ui.id, b.id)

        steps = builder.query().flows()[0].steps

        # b is reached through a first, so its depth is 2 in the flow
        assert [(s.component.id, s.depth) for s in steps] == [(ui.id, 0), (a.id, 1), (b.id, 2)]

    def test_component_in_multiple_flows(self, builder):
        home = _ui(builder, "Home")
        cart = _ui(builder, "Cart")
        shared = _use_case(builder, "Load Session")
        builder.link(home.id, shared.id)
        builder.link(cart.id, shared.id)

        flows = builder.query().flows()

        assert [[s.component.id for s in f.steps] for f in flows] == [
            [home.id, shared.id],
            [cart.id, shared.id],
        ]

    def test_external_links_attached_to_step(self, builder):
        ui = _ui(builder, "Pay")
        builder.link_external(ui.id, {"name": "Stripe"}, link_type="sync")

        step = builder.query().flows()[0].steps[0]

        assert [e.target.name for e in step.external_links] == ["Stripe"]
        assert step.to_dict()["externalLinks"][0]["target"] == {"name": "Stripe"}

    def test_unresolved_target_is_skipped(self, builder):
        ui = _ui(builder, "Home")
        builder.link(ui.id, "orders:core:usecase:not-yet")

        steps = builder.query().flows()[0].steps

        assert [s.component.id for s in steps] == [ui.id]


class TestTraceFlow:
    """Tests for bidirectional tracing."""

    def test_trace_from_middle_reaches_everything(self, checkout_query):
        result = checkout_query.trace_flow(USE_CASE)

        assert result.component_ids[0] == USE_CASE
        assert set(result.component_ids) == set(CHECKOUT_ORDER)
        assert len(result.link_ids) == 6

    def test_trace_uses_link_keys(self, checkout_query):
        result = checkout_query.trace_flow(UI)
        assert f"{UI}->{API}" in result.link_ids

    def test_trace_stays_within_connected_part(self, builder):
        ui = _ui(builder, "Home")
        a = _use_case(builder, "A")
        lone = _use_case(builder, "Lonely")
        builder.link(ui.id, a.id)

        result = builder.query().trace_flow(a.id)

        assert result.component_ids == [a.id, ui.id]
        assert lone.id not in result.component_ids

    def test_unknown_component_raises_with_suggestions(self, checkout_query):
        with pytest.raises(ComponentNotFoundError) as exc_info:
            checkout_query.trace_flow("orders:checkout:usecase:place-ordr")

        assert USE_CASE in exc_info.value.suggestions
        assert str(exc_info.value).startswith(
            "Component 'orders:checkout:usecase:place-ordr' not found. Did you mean:"
        )


class TestNodeDepths:
    """Tests for minimum depth computation."""

    def test_checkout_depths(self, checkout_query):
        assert checkout_query.node_depths() == {cid: i for i, cid in enumerate(CHECKOUT_ORDER)}

    def test_shortest_path_wins(self, builder):
        ui = _ui(builder, "Home")
        a = _use_case(builder, "A")
        b = _use_case(builder, "B")
        c = _use_case(builder, "C")
        builder.link(ui.id, a.id)
        builder.link(a.id, b.id)
        builder.link(b.id, c.id)
        builder.link(ui.id, c.id)

        assert builder.query().node_depths() == {ui.id: 0, a.id: 1, b.id: 2, c.id: 1}

    def test_nearest_entry_point_wins(self, builder):
        home = _ui(builder, "Home")
        admin = _ui(builder, "Admin")
        a = _use_case(builder, "A")
        b = _use_case(builder, "B")
        builder.link(home.id, a.id)
        builder.link(a.id, b.id)
        builder.link(admin.id, b.id)

        depths = builder.query().node_depths()

        assert depths[b.id] == 1

    def test_unreachable_components_absent(self, builder):
        ui = _ui(builder, "Home")
        lone = _use_case(builder, "Lonely")

        depths = builder.query().node_depths()

        assert depths == {ui.id: 0}
        assert lone.id not in depths

    def test_no_entry_points(self, builder):
        _use_case(builder, "Lonely")
        assert builder.query().node_depths() == {}


class TestOrphans:
    def test_connected_graph_has_no_orphans(self, checkout_query):
        assert checkout_query.detect_orphans() == []

    def test_unlinked_component_is_orphan(self, builder):
        ui = _ui(builder, "Home")
        a = _use_case(builder, "A")
        lone = _use_case(builder, "Lonely")
        builder.link(ui.id, a.id)

        assert builder.query().detect_orphans() == [lone.id]

    def test_external_link_source_is_not_orphan(self, builder):
        payments = _use_case(builder, "Charge Card")
        builder.link_external(payments.id, {"name": "Stripe"})

        assert builder.query().detect_orphans() == []


class TestSearch:
    """Tests for search and search_with_flow."""

    def test_search_matches_name_domain_and_type(self, checkout_query):
        by_name = {c.id for c in checkout_query.search("begin")}
        by_type = {c.id for c in checkout_query.search("eventhandler")}
        by_domain = {c.id for c in checkout_query.search("SHIPPING")}

        assert by_name == {DOMAIN_OP}
        assert by_type == {HANDLER}
        assert by_domain == {HANDLER, SHIPMENT}

    def test_empty_search(self, checkout_query):
        assert checkout_query.search("") == []

    def test_search_with_flow_widens_to_connected(self, checkout_query):
        result = checkout_query.search_with_flow("checkout page")

        assert result.matching_ids == [UI]
        assert set(result.visible_ids) == set(CHECKOUT_ORDER)

    def test_blank_query(self, checkout_query):
        assert checkout_query.search_with_flow("   ").to_dict() == {
            "matchingIds": [],
            "visibleIds": [],
        }

    def test_blank_query_can_return_everything(self, checkout_query):
        result = checkout_query.search_with_flow("", return_all_on_empty_query=True)
        assert result.matching_ids == CHECKOUT_ORDER
        assert result.visible_ids == CHECKOUT_ORDER


class TestQueryFacade:
    def test_from_json(self, checkout_builder):
        import json

        query = GraphQuery.from_json(json.loads(checkout_builder.serialize()))
        assert [c.id for c in query.components()] == CHECKOUT_ORDER

    def test_components_by_type_accepts_strings(self, checkout_query):
        assert [c.id for c in checkout_query.components_by_type("UseCase")] == [USE_CASE, SHIPMENT]

    def test_components_in_domain(self, checkout_query):
        shipping = checkout_query.components_in_domain("shipping")
        assert [c.id for c in shipping] == [HANDLER, SHIPMENT]

    def test_find_and_find_all(self, checkout_query):
        assert checkout_query.find(lambda c: c.domain == "orders").id == API
        assert checkout_query.find(lambda c: c.domain == "billing") is None
        assert len(checkout_query.find_all(lambda c: c.domain == "orders")) == 4

    def test_component_by_id(self, checkout_query):
        assert checkout_query.component_by_id(EVENT).name == "Order Placed"
        assert checkout_query.component_by_id("nope") is None

    def test_links_returns_copy(self, checkout_query):
        checkout_query.links().clear()
        assert len(checkout_query.links()) == 6
