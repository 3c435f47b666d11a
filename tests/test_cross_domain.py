"""Tests for query/cross_domain.py - links between domains."""

from riviere.graph.relations import LinkType
from riviere.query import ConnectionDirection, CrossDomainLink
from tests.graph_helpers import LOCATION, make_builder

DOMAINS = {
    "test": {"description": "Test harness", "systemType": "other"},
    "orders": {"description": "Orders", "systemType": "domain"},
    "billing": {"description": "Billing", "systemType": "domain"},
}


def _api(builder, name, domain):
    return builder.add_api(
        name=name, domain=domain, module="api", api_type="REST", source_location=LOCATION
    )


def _use_case(builder, name, domain):
    return builder.add_use_case(name=name, domain=domain, module="core", source_location=LOCATION)


class TestCrossDomainLinks:
    """Tests for cross_domain_links()."""

    def test_same_target_and_type_collapse(self):
        builder = make_builder(DOMAINS)
        first = _use_case(builder, "Smoke", "test")
        second = _use_case(builder, "Soak", "test")
        target = _api(builder, "Create Order", "orders")
        builder.link(first.id, target.id, "sync")
        builder.link(second.id, target.id, "sync")

        links = builder.query().cross_domain_links("test")

        assert links == [CrossDomainLink(target_domain="orders", link_type=LinkType.SYNC)]

    def test_untyped_link_is_distinct_and_sorts_first(self):
        builder = make_builder(DOMAINS)
        source = _use_case(builder, "Smoke", "test")
        orders = _api(builder, "Create Order", "orders")
        billing = _api(builder, "Charge", "billing")
        builder.link(source.id, orders.id, "async")
        builder.link(source.id, orders.id, "sync")
        builder.link(source.id, orders.id)
        builder.link(source.id, billing.id, "sync")

        links = builder.query().cross_domain_links("test")

        assert [link.to_dict() for link in links] == [
            {"targetDomain": "billing", "linkType": "sync"},
            {"targetDomain": "orders", "linkType": None},
            {"targetDomain": "orders", "linkType": "async"},
            {"targetDomain": "orders", "linkType": "sync"},
        ]

    def test_same_domain_links_ignored(self):
        builder = make_builder(DOMAINS)
        a = _use_case(builder, "A", "orders")
        b = _use_case(builder, "B", "orders")
        builder.link(a.id, b.id, "sync")

        assert builder.query().cross_domain_links("orders") == []

    def test_dangling_target_ignored(self):
        builder = make_builder(DOMAINS)
        a = _use_case(builder, "A", "test")
        builder.link(a.id, "orders:api:api:later", "sync")

        assert builder.query().cross_domain_links("test") == []

    def test_checkout_graph(self, checkout_query):
        assert [link.to_dict() for link in checkout_query.cross_domain_links("orders")] == [
            {"targetDomain": "shipping", "linkType": "async"}
        ]


class TestDomainConnections:
    """Tests for domain_connections()."""

    def test_checkout_orders_connections(self, checkout_query):
        connections = checkout_query.domain_connections("orders")

        assert [c.to_dict() for c in connections] == [
            {"targetDomain": "shipping", "direction": "outgoing", "apiCount": 0, "eventCount": 1},
            {"targetDomain": "web", "direction": "incoming", "apiCount": 1, "eventCount": 0},
        ]

    def test_counts_accumulate(self):
        builder = make_builder(DOMAINS)
        source = _use_case(builder, "Smoke", "test")
        create = _api(builder, "Create Order", "orders")
        cancel = _api(builder, "Cancel Order", "orders")
        plain = _use_case(builder, "Audit", "orders")
        builder.link(source.id, create.id)
        builder.link(source.id, cancel.id)
        builder.link(source.id, plain.id)

        (connection,) = builder.query().domain_connections("test")

        assert connection.direction is ConnectionDirection.OUTGOING
        assert connection.api_count == 2
        assert connection.event_count == 0

    def test_both_directions_with_same_domain(self):
        builder = make_builder(DOMAINS)
        test_api = _api(builder, "Health Check", "test")
        orders_api = _api(builder, "Create Order", "orders")
        builder.link(test_api.id, orders_api.id)
        builder.link(orders_api.id, test_api.id)

        connections = builder.query().domain_connections("test")

        assert [(c.target_domain, c.direction) for c in connections] == [
            ("orders", ConnectionDirection.OUTGOING),
            ("orders", ConnectionDirection.INCOMING),
        ]
