import itertools
import os
import threading
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the config overlay before the domain is imported and initialized."""
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    """Run every test inside the domain context and wipe all data afterwards."""
    with storefront_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()


@pytest.fixture(autouse=True)
def _fresh_settings():
    from storefront.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ---------------------------------------------------------------------------
# Shared builders
# ---------------------------------------------------------------------------
_sequence = itertools.count(1)


@pytest.fixture
def make_user():
    """Register a shopper, optionally funding the wallet, and return the user id."""
    from protean import current_domain
    from storefront.identity.registration import RegisterUser
    from storefront.wallet.operations import deposit

    def _make(balance=0.0, name="Test Shopper"):
        n = next(_sequence)
        user_id = current_domain.process(
            RegisterUser(
                name=name,
                email=f"shopper{n}@example.com",
                username=f"shopper{n}",
                credential="hashed-secret",
            ),
            asynchronous=False,
        )
        if balance:
            deposit(user_id, balance)
        return user_id

    return _make


@pytest.fixture
def make_product():
    from protean import current_domain
    from storefront.catalogue.management import AddProduct

    def _make(price, name="Widget"):
        return current_domain.process(AddProduct(name=name, price=price), asynchronous=False)

    return _make


@pytest.fixture
def shop_id():
    from protean import current_domain
    from storefront.catalogue.management import RegisterShop

    return current_domain.process(RegisterShop(name="Corner Shop", location="Springfield"), asynchronous=False)


@pytest.fixture
def fill_cart(shop_id):
    """Add ``(product_id, quantity)`` pairs to a user's cart; returns the line ids."""
    from protean import current_domain
    from storefront.cart.items import AddToCart

    def _fill(user_id, *items, size=None):
        return [
            current_domain.process(
                AddToCart(user_id=user_id, product_id=product_id, shop_id=shop_id, quantity=quantity, size=size),
                asynchronous=False,
            )
            for product_id, quantity in items
        ]

    return _fill


@pytest.fixture
def place_order(make_user, make_product, fill_cart):
    """Check out a single-line cart and return ``(user_id, order)``."""
    from storefront.order.checkout import checkout

    def _place(price=20.0, quantity=1, balance=None):
        user_id = make_user(balance=price * quantity if balance is None else balance)
        fill_cart(user_id, (make_product(price), quantity))
        (order,) = checkout(user_id)
        return user_id, order

    return _place


@pytest.fixture
def run_concurrently():
    """Start every callable on its own thread at the same moment.

    Each thread runs inside the current domain's context. Returns one entry
    per callable, in order: its return value or the exception it raised.
    """
    from protean import current_domain

    def _run(*calls):
        domain = current_domain._get_current_object()
        barrier = threading.Barrier(len(calls))
        results = [None] * len(calls)

        def worker(index, call):
            with domain.domain_context():
                barrier.wait()
                try:
                    results[index] = call()
                except Exception as exc:
                    results[index] = exc

        threads = [threading.Thread(target=worker, args=(i, call)) for i, call in enumerate(calls)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=30)
        return results

    return _run
