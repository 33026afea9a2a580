import os

import pytest


@pytest.fixture(scope="session")
def _storefront_domain(request):
    """Initialize the storefront domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from storefront.domain import storefront

    storefront.init()
    return storefront


@pytest.fixture(scope="session", autouse=True)
def setup_db(_storefront_domain):
    from storefront.utils.db import drop_db, setup_db

    setup_db(_storefront_domain)

    yield

    drop_db(_storefront_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_storefront_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _storefront_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    for _, broker in current_domain.brokers.items():
        broker._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()

