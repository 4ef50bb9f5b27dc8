# tests/conftest.py
import os, sys
# project root (the folder holding app.py) first on sys.path
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

os.environ["QUOTEDESK_ENV"] = "testing"

from types import SimpleNamespace

import pytest

from core import db as core_db
from core.db import session_scope
from core.models import BusinessIdentity, Category, Product


@pytest.fixture(autouse=True)
def database(tmp_path):
    """Fresh SQLite file database per test."""
    engine = core_db.configure_engine(f"sqlite:///{tmp_path / 'quotedesk-test.db'}")
    core_db.init_db()
    yield engine
    engine.dispose()


@pytest.fixture
def catalog():
    """One category with an active and an inactive product."""
    with session_scope() as session:
        category = Category(name="Steel", type="material")
        session.add(category)
        session.flush()
        bar = Product(
            name="TMT Bar 12mm", unit="kg", unit_price=62.5, sku="TMT-12", category_id=category.id
        )
        wire = Product(
            name="Binding Wire", unit="bundle", unit_price=450.0, sku="BW-01",
            category_id=category.id, is_active=False,
        )
        session.add_all([bar, wire])
        session.flush()
        return SimpleNamespace(category_id=category.id, bar_id=bar.id, wire_id=wire.id)


@pytest.fixture
def make_identity():
    def _make(name, is_default=False, is_active=True):
        with session_scope() as session:
            identity = BusinessIdentity(name=name, is_default=is_default, is_active=is_active)
            session.add(identity)
            session.flush()
            return identity.id
    return _make


@pytest.fixture
def quotation_payload(catalog):
    """Builder for a balanced create request: 10 kg bar + 2 custom cutting jobs."""
    def _build(**overrides):
        payload = {
            "customerInfo": {
                "name": "Acme Builders",
                "email": "buy@acme.test",
                "phone": "+91 98000 00000",
            },
            "saveCustomer": True,
            "items": [
                {
                    "isCustom": False,
                    "productId": catalog.bar_id,
                    "quantity": 10,
                    "unitPrice": 62.5,
                    "lineTotal": 625.0,
                },
                {
                    "isCustom": True,
                    "customName": "Cutting and bending",
                    "customUnit": "job",
                    "quantity": 2,
                    "unitPrice": 150.0,
                    "lineTotal": 300.0,
                },
            ],
            "subtotal": 925.0,
            "taxRate": 18.0,
            "taxAmount": 166.5,
            "totalAmount": 1091.5,
            "title": "Site 4 rebar",
        }
        payload.update(overrides)
        return payload
    return _build


@pytest.fixture
def client():
    from fastapi.testclient import TestClient
    from app import app

    return TestClient(app)
