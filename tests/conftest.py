"""Shared fixtures for riviere tests."""

import pytest


@pytest.fixture
def builder():
    """Empty builder with the orders, shipping and web domains."""
    from tests.graph_helpers import make_builder

    return make_builder()


@pytest.fixture
def checkout_builder():
    """Builder holding the cross-domain checkout flow."""
    from tests.graph_helpers import build_checkout_flow

    return build_checkout_flow()


@pytest.fixture
def checkout_query(checkout_builder):
    """GraphQuery over the finished checkout graph."""
    from riviere.query import GraphQuery

    return GraphQuery(checkout_builder.build())


@pytest.fixture(autouse=True)
def _clear_riviere_env(monkeypatch):
    """Keep RIVIERE_* variables from the developer's shell out of tests."""
    import os

    for name in list(os.environ):
        if name.startswith("RIVIERE_"):
            monkeypatch.delenv(name)
