from __future__ import annotations

from decimal import Decimal

import pytest

from api import create_app
from models import storage
from models.product import Product
from models.schemas.auth import SignupInput, LoginInput


@pytest.fixture()
def app(tmp_path):
    app = create_app(
        "testing",
        overrides={"DATABASE_URL": f"sqlite:///{tmp_path / 'shop-test.db'}"},
    )
    yield app
    storage.close()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def flow(app):
    return app.extensions["auth_flow"]


@pytest.fixture()
def alice(flow):
    """A registered user; returns (user_id, email, password)."""
    user_id = flow.signup(SignupInput(name="Alice", email="a@x.com", password="pw123"))
    return user_id, "a@x.com", "pw123"


@pytest.fixture()
def alice_tokens(flow, alice):
    _, email, password = alice
    return flow.login(LoginInput(email=email, password=password))


@pytest.fixture()
def products(app):
    rows = [
        Product(name="Keyboard", price=Decimal("10.50")),
        Product(name="Mouse", price=Decimal("3.00")),
    ]
    for row in rows:
        storage.new(row)
    storage.save()
    return {row.name: row.id for row in rows}
