import pytest
from sqlalchemy import text

WIDGET = {"name": "widget", "type": "hardware", "count": 10, "price": 2.5}


def _create(client, payload=None):
    r = client.post("/products", json=payload or WIDGET)
    assert r.status_code == 201, r.text
    return r.json()["data"]["id"]


def test_create_returns_envelope_with_assigned_id(client):
    r = client.post("/products", json=WIDGET)

    assert r.status_code == 201, r.text
    body = r.json()
    assert body["message"] == "success"
    assert body["error"] is False
    data = body["data"]
    assert isinstance(data.pop("id"), int)
    assert data == WIDGET


def test_create_then_get_round_trip(client):
    product_id = _create(client)

    r = client.get(f"/products/{product_id}")

    assert r.status_code == 200, r.text
    assert r.json() == {"message": "success", "data": WIDGET, "error": False}


def test_get_missing_returns_404(client):
    r = client.get("/products/999")
    assert r.status_code == 404
    assert r.json() == {"message": "product not found", "data": None, "error": True}


@pytest.mark.parametrize("method", ["get", "delete"])
def test_non_integer_id_returns_400(client, method):
    r = getattr(client, method)("/products/abc")
    assert r.status_code == 400
    assert r.json() == {"message": "parameter must be int", "data": None, "error": True}


@pytest.mark.parametrize("method", ["put", "patch"])
def test_update_non_integer_id_returns_400(client, method):
    r = client.request(method.upper(), "/products/abc", json={"count": 1})
    assert r.status_code == 400
    assert r.json()["message"] == "parameter must be int"


@pytest.mark.parametrize("method", ["GET", "PUT", "PATCH", "DELETE"])
def test_missing_id_returns_400(client, method):
    r = client.request(method, "/products/")
    assert r.status_code == 400
    assert r.json() == {"message": "invalid path param", "data": None, "error": True}


def test_create_duplicate_name_returns_400_and_creates_nothing(client, engine):
    _create(client)

    r = client.post("/products", json={**WIDGET, "count": 99})

    assert r.status_code == 400
    assert r.json() == {"message": "product not unique", "data": None, "error": True}
    with engine.connect() as conn:
        assert conn.execute(text("SELECT COUNT(*) FROM products")).scalar_one() == 1


@pytest.mark.parametrize("raw", ["{not json", "[]", '{"count": "many"}', '{"name": 12}', ""])
def test_create_malformed_body_returns_400(client, raw):
    r = client.post("/products", content=raw, headers={"Content-Type": "application/json"})
    assert r.status_code == 400
    assert r.json() == {"message": "invalid json", "data": None, "error": True}


def test_update_empty_body_leaves_product_unchanged(client):
    product_id = _create(client)
    before = client.get(f"/products/{product_id}").json()

    r = client.put(f"/products/{product_id}", json={})

    assert r.status_code == 200, r.text
    assert r.json()["data"] == {"id": product_id, **WIDGET}
    assert client.get(f"/products/{product_id}").json() == before


def test_update_count_only_keeps_other_fields(client):
    product_id = _create(client)

    r = client.patch(f"/products/{product_id}", json={"count": 5})

    assert r.status_code == 200, r.text
    assert client.get(f"/products/{product_id}").json()["data"] == {**WIDGET, "count": 5}


def test_update_missing_returns_404(client):
    r = client.put("/products/999", json={"count": 5})
    assert r.status_code == 404
    assert r.json()["message"] == "product not found"


def test_update_to_taken_name_returns_400(client):
    _create(client)
    other_id = _create(client, {**WIDGET, "name": "gadget"})

    r = client.put(f"/products/{other_id}", json={"name": "widget"})

    assert r.status_code == 400
    assert r.json()["message"] == "product not unique"
    assert client.get(f"/products/{other_id}").json()["data"]["name"] == "gadget"


def test_update_malformed_body_returns_400(client):
    product_id = _create(client)
    r = client.put(f"/products/{product_id}", content="{", headers={"Content-Type": "application/json"})
    assert r.status_code == 400
    assert r.json()["message"] == "invalid json"


def test_delete_then_get_returns_404(client):
    product_id = _create(client)

    r = client.delete(f"/products/{product_id}")

    assert r.status_code == 200
    assert r.json() == {"message": "success", "data": None, "error": False}
    assert client.get(f"/products/{product_id}").status_code == 404


def test_delete_missing_returns_404(client):
    r = client.delete("/products/999")
    assert r.status_code == 404
    assert r.json()["message"] == "product not found"


def test_storage_failure_returns_500(client, engine):
    with engine.begin() as conn:
        conn.execute(text("DROP TABLE products"))

    r = client.get("/products/1")

    assert r.status_code == 500
    assert r.json() == {"message": "internal error", "data": None, "error": True}


def test_unknown_route_uses_envelope(client):
    r = client.get("/nothing-here")
    assert r.status_code == 404
    assert r.json()["error"] is True
    assert r.json()["data"] is None


def test_request_id_is_echoed(client):
    r = client.get("/products/999", headers={"X-Request-Id": "req-123"})
    assert r.headers["X-Request-Id"] == "req-123"


def test_request_id_is_generated(client):
    r = client.get("/health")
    assert r.headers.get("X-Request-Id")


@pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity"])
def test_create_non_finite_price_returns_400_and_creates_nothing(client, engine, literal):
    raw = '{"name": "nanny", "price": %s}' % literal
    r = client.post("/products", content=raw, headers={"Content-Type": "application/json"})

    assert r.status_code == 400
    assert r.json() == {"message": "invalid json", "data": None, "error": True}
    with engine.connect() as conn:
        assert conn.execute(text("SELECT COUNT(*) FROM products")).scalar_one() == 0


@pytest.mark.parametrize("literal", ["NaN", "Infinity"])
def test_update_non_finite_price_returns_400_and_keeps_row(client, literal):
    product_id = _create(client)

    r = client.put(
        f"/products/{product_id}",
        content='{"price": %s}' % literal,
        headers={"Content-Type": "application/json"},
    )

    assert r.status_code == 400
    assert r.json()["message"] == "invalid json"
    assert client.get(f"/products/{product_id}").json()["data"] == WIDGET


def test_create_count_beyond_column_range_returns_400(client, engine):
    r = client.post("/products", json={**WIDGET, "count": 10**30})

    assert r.status_code == 400
    assert r.json()["message"] == "invalid json"
    with engine.connect() as conn:
        assert conn.execute(text("SELECT COUNT(*) FROM products")).scalar_one() == 0


def test_update_count_beyond_column_range_returns_400(client):
    product_id = _create(client)

    r = client.patch(f"/products/{product_id}", json={"count": 2**31})

    assert r.status_code == 400
    assert client.get(f"/products/{product_id}").json()["data"]["count"] == WIDGET["count"]


@pytest.mark.parametrize("method", ["GET", "DELETE"])
@pytest.mark.parametrize("raw_id", ["9" * 30, str(2**63), "٣"])
def test_id_outside_int64_or_non_ascii_returns_400(client, method, raw_id):
    r = client.request(method, f"/products/{raw_id}")
    assert r.status_code == 400
    assert r.json() == {"message": "parameter must be int", "data": None, "error": True}


def test_update_missing_with_bad_body_returns_404(client):
    r = client.put("/products/999", content="{not json", headers={"Content-Type": "application/json"})
    assert r.status_code == 404
    assert r.json()["message"] == "product not found"


def test_create_with_trailing_slash(client):
    r = client.post("/products/", json=WIDGET)

    assert r.status_code == 201, r.text
    product_id = r.json()["data"]["id"]
    assert client.get(f"/products/{product_id}").json()["data"] == WIDGET
