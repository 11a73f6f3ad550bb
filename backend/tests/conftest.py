"""
Pytest fixtures for QuickPOS backend tests.

Provides application setup (memory and SQLite storage), a test client, a
standalone repository and sample catalog products.
"""

from datetime import datetime, timezone

import pytest
from quickpos import create_app
from quickpos.extensions import db, REPOSITORY_EXTENSION_KEY
from quickpos.models import PriceTier, Product, Variation
from quickpos.storage import MemoryKeyValueStore, ShopRepository


def ts(year: int, month: int, day: int, hour: int = 12, minute: int = 0) -> int:
    """Epoch milliseconds for a UTC wall-clock time."""
    return int(datetime(year, month, day, hour, minute, tzinfo=timezone.utc).timestamp() * 1000)


@pytest.fixture(scope='function')
def app():
    """Create application for testing (in-memory collections)."""
    app = create_app({
        'TESTING': True,
        'STORAGE_BACKEND': 'memory',
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SHOP_TIMEZONE': 'UTC',
    })

    with app.app_context():
        yield app


@pytest.fixture(scope='function')
def sql_app():
    """Create application backed by the kv_entries table in SQLite."""
    app = create_app({
        'TESTING': True,
        'STORAGE_BACKEND': 'sql',
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SHOP_TIMEZONE': 'UTC',
    })

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def app_repo(app):
    """Repository the app's routes read and write."""
    return app.extensions[REPOSITORY_EXTENSION_KEY]


@pytest.fixture(scope='function')
def repo():
    """Standalone repository over a fresh memory store."""
    return ShopRepository(MemoryKeyValueStore())


@pytest.fixture(scope='function')
def soap():
    """Product sold by 1, 3 and 10."""
    return Product(
        id="PRD_SOAP01",
        name="Savon",
        price=100,
        cost_price=60,
        price_tiers=[PriceTier(1, 100), PriceTier(3, 270), PriceTier(10, 800)],
        cost_tiers=[PriceTier(1, 60), PriceTier(10, 500)],
        stock=40,
        barcode="6001234567890",
    )


@pytest.fixture(scope='function')
def rice():
    """Product without tiers (flat price only)."""
    return Product(id="PRD_RICE01", name="Riz 1kg", price=150, cost_price=110, stock=3)


@pytest.fixture(scope='function')
def tshirt():
    """Product with size variations."""
    return Product(
        id="PRD_TSHIRT",
        name="T-shirt",
        price=2500,
        cost_price=1500,
        price_tiers=[PriceTier(1, 2500)],
        cost_tiers=[PriceTier(1, 1500)],
        stock=7,
        has_variations=True,
        variations=[Variation(id="V1", label="M", stock=4), Variation(id="V2", label="XL", stock=3)],
    )


@pytest.fixture(scope='function')
def stocked_repo(repo, soap, rice, tshirt):
    """Repository with the sample catalog saved."""
    repo.save_products([soap, rice, tshirt])
    return repo
