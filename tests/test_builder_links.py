"""Tests for GraphBuilder linking with deferred target checks."""

import pytest

from riviere.errors import ComponentNotFoundError, GraphValidationError
from riviere.graph.relations import ExternalTarget, LinkType
from tests.graph_helpers import LOCATION


@pytest.fixture
def use_case(builder):
    return builder.add_use_case(
        name="Place Order", domain="orders", module="checkout", source_location=LOCATION
    )


class TestLink:
    """Tests for GraphBuilder.link()."""

    def test_link_to_missing_target_is_deferred(self, builder, use_case):
        link = builder.link(use_case.id, "missing:id")

        assert link.source == use_case.id
        assert link.target == "missing:id"
        assert link.type is None
        assert builder.graph.links == [link]

    def test_build_reports_missing_target(self, builder, use_case):
        builder.link(use_case.id, "missing:id")

        with pytest.raises(GraphValidationError) as exc_info:
            builder.build()

        assert exc_info.value.errors[0].path == "/links/0/target"
        assert "/links/0/target" in str(exc_info.value)
        assert str(exc_info.value) == (
            "Validation failed: /links/0/target: Link references non-existent target: missing:id"
        )

    def test_target_added_later_validates(self, builder, use_case):
        builder.link(use_case.id, "orders:domain:domainop:order-begin", LinkType.SYNC)
        builder.add_domain_op(
            name="Order Begin",
            domain="orders",
            module="domain",
            operation_name="begin",
            source_location=LOCATION,
        )
        assert builder.validate().valid

    def test_missing_source_fails_with_suggestions(self, builder, use_case):
        with pytest.raises(ComponentNotFoundError) as exc_info:
            builder.link("orders:checkout:usecase:place-ordr", use_case.id)

        assert exc_info.value.suggestions == [use_case.id]
        assert str(exc_info.value) == (
            "Source component 'orders:checkout:usecase:place-ordr' not found. "
            f"Did you mean: {use_case.id}?"
        )
        assert builder.graph.links == []

    def test_invalid_link_type(self, builder, use_case):
        with pytest.raises(ValueError):
            builder.link(use_case.id, use_case.id, "eventually")


class TestLinkExternal:
    def test_adds_external_link(self, builder, use_case):
        external = builder.link_external(
            use_case.id,
            {"name": "Stripe", "url": "https://stripe.com"},
            link_type="sync",
            description="Charge card",
            source_location=LOCATION,
        )

        assert external.target == ExternalTarget(name="Stripe", url="https://stripe.com")
        assert external.type is LinkType.SYNC
        assert builder.graph.external_links == [external]

    def test_missing_source(self, builder):
        with pytest.raises(ComponentNotFoundError):
            builder.link_external("orders:x:usecase:nope", ExternalTarget(name="Stripe"))
