# -*- coding: utf-8 -*-
"""
Tests de la API Flask: sesión, rutas protegidas y traducción de errores.
"""
import pytest


def _create_product(client, **overrides):
    data = {"name": "Agua Mineral", "price": 50, "stock": 10}
    data.update(overrides)
    r = client.post("/api/products", json=data)
    assert r.status_code == 201, r.get_json()
    return r.get_json()["id"]


def _currency_id(client, code):
    r = client.get("/api/currencies?all=1")
    return next(c["id"] for c in r.get_json()["currencies"] if c["code"] == code)


@pytest.mark.parametrize("method, path", [
    ("get", "/me"),
    ("get", "/api/products"),
    ("post", "/api/products"),
    ("get", "/api/currencies"),
    ("get", "/api/sales"),
    ("post", "/api/sales"),
    ("get", "/api/sales/summary/day"),
])
def test_routes_require_login(client, method, path):
    r = getattr(client, method)(path)
    assert r.status_code == 401
    assert r.get_json()["ok"] is False


def test_login_and_logout(client):
    r = client.post("/login", json={"username": "admin", "password": "mala"})
    assert r.status_code == 401

    r = client.post("/login", json={"username": "admin"})
    assert r.status_code == 400

    r = client.post("/login", data={"user": "admin", "password": "admin123"})
    assert r.status_code == 200
    assert r.get_json()["user"] == {"id": 1, "username": "admin"}

    assert client.get("/me").get_json()["user"]["username"] == "admin"

    client.post("/logout")
    assert client.get("/me").status_code == 401


def test_product_crud(auth_client):
    pid = _create_product(auth_client)

    r = auth_client.get("/api/products")
    assert [p["name"] for p in r.get_json()["products"]] == ["Agua Mineral"]

    r = auth_client.patch(f"/api/products/{pid}", json={"stock": 0})
    assert r.status_code == 200
    assert r.get_json()["product"]["stock"] == 0
    assert r.get_json()["product"]["price"] == 50.0

    r = auth_client.get("/api/products?available=1")
    assert r.get_json()["products"] == []

    assert auth_client.delete(f"/api/products/{pid}").status_code == 200
    assert auth_client.get(f"/api/products/{pid}").status_code == 404


def test_product_validation_errors(auth_client):
    r = auth_client.post("/api/products", json={"name": "X", "price": -1})
    assert r.status_code == 400
    body = r.get_json()
    assert body["ok"] is False
    assert body["field"] == "price"

    r = auth_client.post("/api/products", json=[1, 2])
    assert r.status_code == 400

    r = auth_client.patch("/api/products/999", json={"price": 10})
    assert r.status_code == 404

    r = auth_client.post("/api/products", json={"name": "X", "price": 0.001})
    assert r.status_code == 400
    assert r.get_json()["field"] == "price"

    r = auth_client.get("/api/products/99999999999999999999999")
    assert r.status_code == 400
    assert r.get_json()["ok"] is False

    r = auth_client.post("/api/sales", json={"product_id": 10 ** 30, "quantity": 1, "currency_id": 1})
    assert r.status_code == 400
    assert r.get_json()["field"] == "product_id"


def test_currency_routes(auth_client):
    r = auth_client.get("/api/currencies")
    assert [c["code"] for c in r.get_json()["currencies"]] == ["CUP", "MLC", "USD"]

    r = auth_client.post("/api/currencies", json={"code": "EUR", "name": "Euro", "exchange_rate": 130})
    assert r.status_code == 201
    eur_id = r.get_json()["id"]

    r = auth_client.post("/api/currencies", json={"code": "cup", "name": "Otro", "exchange_rate": 1})
    assert r.status_code == 409

    r = auth_client.post(f"/api/currencies/{eur_id}/toggle")
    assert r.get_json()["currency"]["active"] is False
    codes = [c["code"] for c in auth_client.get("/api/currencies").get_json()["currencies"]]
    assert "EUR" not in codes

    r = auth_client.patch(f"/api/currencies/{eur_id}", json={"exchange_rate": 135})
    assert r.get_json()["currency"]["exchange_rate"] == 135.0

    assert auth_client.delete(f"/api/currencies/{eur_id}").status_code == 200


def test_base_currency_protected_over_http(auth_client):
    cup_id = _currency_id(auth_client, "CUP")

    r = auth_client.patch(f"/api/currencies/{cup_id}", json={"active": False})
    assert r.status_code == 409
    r = auth_client.delete(f"/api/currencies/{cup_id}")
    assert r.status_code == 409


def test_sale_flow(auth_client):
    pid = _create_product(auth_client, name="Water", price=50, stock=10)
    cup_id = _currency_id(auth_client, "CUP")

    r = auth_client.post("/api/sales", json={"product_id": pid, "quantity": 3, "currency_id": cup_id})
    assert r.status_code == 201
    sale = r.get_json()["sale"]
    assert sale["total_base"] == 150.0
    assert sale["product_name"] == "Water"

    r = auth_client.post("/api/sales", json={"product_id": pid, "quantity": 11, "currency_id": cup_id})
    assert r.status_code == 409
    assert "Stock insuficiente" in r.get_json()["error"]

    r = auth_client.post("/api/sales", json={"product_id": 999, "quantity": 1, "currency_id": cup_id})
    assert r.status_code == 404

    r = auth_client.post("/api/sales", json={"product_id": pid, "quantity": 0, "currency_id": cup_id})
    assert r.status_code == 400

    assert auth_client.get(f"/api/products/{pid}").get_json()["product"]["stock"] == 7

    r = auth_client.get("/api/sales/summary/day")
    assert r.get_json()["summary"] == {
        "period": "day",
        "start_date": "2024-05-15",
        "end_date": "2024-05-15",
        "count": 1,
        "total_revenue_base": 150.0,
        "total_units_sold": 3,
    }

    r = auth_client.get("/api/sales?start=2024-05-15&end=2024-05-15")
    assert len(r.get_json()["sales"]) == 1
    r = auth_client.get("/api/sales?start=2024-05-16")
    assert r.get_json()["sales"] == []


def test_sale_detail_in_foreign_currency(auth_client):
    pid = _create_product(auth_client, name="Ron", price=240, stock=5)
    usd_id = _currency_id(auth_client, "USD")

    r = auth_client.post("/api/sales", json={"product_id": pid, "quantity": 1, "currency_id": usd_id})
    sale_id = r.get_json()["id"]

    sale = auth_client.get(f"/api/sales/{sale_id}").get_json()["sale"]
    assert sale["total_base"] == 240.0
    assert sale["total_in_currency"] == 2.0

    auth_client.delete(f"/api/currencies/{usd_id}")
    sale = auth_client.get(f"/api/sales/{sale_id}").get_json()["sale"]
    assert sale["currency_code"] == "Moneda eliminada"
    assert sale["total_in_currency"] is None


def test_summary_bad_period(auth_client):
    r = auth_client.get("/api/sales/summary/anual")
    assert r.status_code == 400
    assert r.get_json()["field"] == "period"


def test_bad_date_filter(auth_client):
    r = auth_client.get("/api/sales?start=ayer")
    assert r.status_code == 400
