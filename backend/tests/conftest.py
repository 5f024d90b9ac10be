"""
Root pytest configuration for backend tests.

Provides:
- Shared fixtures (app, client, store, seeded)
- A small month-spanning transaction dataset
"""

import sys
from pathlib import Path

# Add backend directory to Python path so imports like
# `from db.store import ...` and `from utils.normalize import ...` work
backend_dir = Path(__file__).parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

import pytest


# March 2022 holds ids 1-4; the others sit just outside that month.
SAMPLE_PAYLOAD = [
    {"id": 1, "title": "Mens Casual Shirt", "description": "Slim fit cotton shirt",
     "price": 250, "category": "men's clothing", "image": "https://example.com/1.jpg",
     "sold": True, "dateOfSale": "2022-03-05T10:00:00.000Z"},
    {"id": 2, "title": "Gold Ring", "description": "Solid gold band",
     "price": 100.0, "category": "jewelery",
     "sold": False, "dateOfSale": "2022-03-31T23:59:59.000Z"},
    {"id": 3, "title": "Backpack", "description": "Fits 15 inch laptops",
     "price": 905, "category": "men's clothing",
     "sold": True, "dateOfSale": "2022-03-01T00:00:00.000Z"},
    {"id": 4, "title": "Portable SSD", "description": "1TB external drive",
     "price": 25, "category": "electronics",
     "sold": False, "dateOfSale": "2022-03-15T12:00:00+00:00"},
    {"id": 5, "title": "Womens Rain Jacket", "description": "Waterproof",
     "price": 56.99, "category": "women's clothing",
     "sold": True, "dateOfSale": "2022-04-01T00:00:00.000Z"},
    {"id": 6, "title": "Monitor", "description": "27 inch display",
     "price": 599, "category": "electronics",
     "sold": True, "dateOfSale": "2022-02-28T23:59:59.000Z"},
    {"id": 7, "title": "Old Shirt", "description": "Vintage",
     "price": 250, "category": "men's clothing",
     "sold": True, "dateOfSale": "2021-03-10T00:00:00.000Z"},
]


@pytest.fixture
def sample_payload():
    return [dict(item) for item in SAMPLE_PAYLOAD]


@pytest.fixture
def app(tmp_path, monkeypatch):
    """Create test Flask application on a file-backed SQLite database."""
    monkeypatch.setenv("REQUEST_LOG_ENABLED", "false")
    from app import create_app

    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'test.db'}",
        "SQLALCHEMY_ENGINE_OPTIONS": {},
        "DEFAULT_SALES_YEAR": 2022,
        "SEED_SOURCE_URL": "https://seed.example.com/product_transaction.json",
        "SEED_MAX_RETRIES": 1,
    })
    yield app

    from models.database import db
    with app.app_context():
        db.engine.dispose()


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def store(app):
    from db.store import SqlTransactionStore

    with app.app_context():
        yield SqlTransactionStore()


@pytest.fixture
def seeded(app, sample_payload):
    """Load SAMPLE_PAYLOAD through the store; returns the payload."""
    from db.store import SqlTransactionStore
    from services.seed_loader import parse_payload

    with app.app_context():
        SqlTransactionStore().replace_all(parse_payload(sample_payload))
    return sample_payload
