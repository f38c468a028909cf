from __future__ import annotations


def _session(client, email="a@x.com", name="Alice"):
    r = client.post("/signup", json={"name": name, "email": email, "password": "pw123"})
    user_id = r.get_json()["user_id"]
    tokens = client.post("/login", json={"email": email, "password": "pw123"}).get_json()
    return user_id, {"access_token": tokens["access_token"]}


def test_list_products(client, products) -> None:
    r = client.get("/products?limit=1")
    assert r.status_code == 200
    body = r.get_json()
    assert body["meta"] == {"page": 1, "limit": 1, "total": 2}
    assert body["data"][0]["name"] == "Keyboard"
    assert body["data"][0]["price"] == "10.50"


def test_add_to_cart_and_read_it_back(client, products) -> None:
    user_id, headers = _session(client)
    r = client.post("/cart", json={"product_id": products["Keyboard"], "qty": 2}, headers=headers)
    assert r.status_code == 201

    r = client.get(f"/cart/{user_id}", headers=headers)
    assert r.status_code == 200
    data = r.get_json()["data"]
    assert len(data) == 1
    assert data[0]["product_id"] == products["Keyboard"]
    assert data[0]["qty"] == 2


def test_add_to_cart_requires_access_token(client, products) -> None:
    r = client.post("/cart", json={"product_id": products["Mouse"], "qty": 1})
    assert r.status_code == 401


def test_add_to_cart_validation(client, products) -> None:
    _, headers = _session(client)
    assert client.post("/cart", json={"product_id": products["Mouse"], "qty": 0}, headers=headers).status_code == 422
    assert client.post("/cart", json={"qty": 1}, headers=headers).status_code == 422
    missing = client.post("/cart", json={"product_id": "does-not-exist", "qty": 1}, headers=headers)
    assert missing.status_code == 404


def test_cannot_read_someone_elses_cart(client, products) -> None:
    alice_id, _ = _session(client)
    _, bob_headers = _session(client, email="b@x.com", name="Bob")
    assert client.get(f"/cart/{alice_id}", headers=bob_headers).status_code == 403


def test_checkout_totals_the_cart(client, products) -> None:
    _, headers = _session(client)
    client.post("/cart", json={"product_id": products["Keyboard"], "qty": 2}, headers=headers)
    client.post("/cart", json={"product_id": products["Mouse"], "qty": 1}, headers=headers)

    r = client.post("/checkout", headers=headers)
    assert r.status_code == 200
    assert r.get_json()["total_price"] == "24.00"


def test_checkout_with_empty_cart_is_422(client, products) -> None:
    _, headers = _session(client)
    r = client.post("/checkout", headers=headers)
    assert r.status_code == 422
    assert r.get_json()["message"] == "Your cart is empty."
