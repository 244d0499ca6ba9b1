# -*- coding: utf-8 -*-
"""
Tests del catálogo de productos (InventoryService).
"""
import pytest

from kiosquito.errors import NotFoundError, ValidationError


@pytest.fixture
def inventory(container):
    return container.inventory_service


def test_create_and_get_product(inventory):
    pid = inventory.create_product({
        "name": "  Agua  ", "price": 50, "stock": 10,
        "description": "Agua natural", "category": "Bebidas",
    })
    product = inventory.get_product(pid)

    assert product.name == "Agua"
    assert product.price == 50.0
    assert product.stock == 10
    assert product.category == "Bebidas"
    assert product.created_at == "2024-05-15 10:30:00"


def test_stock_defaults_to_zero(inventory):
    pid = inventory.create_product({"name": "Pan", "price": 60})
    assert inventory.get_product(pid).stock == 0


def test_list_products_sorted_by_name(inventory):
    for name in ("zanahoria", "Arroz", "leche"):
        inventory.create_product({"name": name, "price": 10, "stock": 1})
    assert [p.name for p in inventory.list_products()] == ["Arroz", "leche", "zanahoria"]


def test_list_available_products_excludes_empty_stock(inventory):
    inventory.create_product({"name": "Con stock", "price": 10, "stock": 3})
    inventory.create_product({"name": "Agotado", "price": 10, "stock": 0})
    assert [p.name for p in inventory.list_available_products()] == ["Con stock"]


@pytest.mark.parametrize("data, field", [
    ({"name": "", "price": 10, "stock": 1}, "name"),
    ({"name": "   ", "price": 10, "stock": 1}, "name"),
    ({"price": 10, "stock": 1}, "name"),
    ({"name": "X", "price": 0, "stock": 1}, "price"),
    ({"name": "X", "price": -5, "stock": 1}, "price"),
    ({"name": "X", "price": "abc", "stock": 1}, "price"),
    ({"name": "X", "stock": 1}, "price"),
    ({"name": "X", "price": 10, "stock": -1}, "stock"),
    ({"name": "X", "price": 10, "stock": 1.5}, "stock"),
    ({"name": "X", "price": 0.001, "stock": 1}, "price"),
    ({"name": "X", "price": 10, "stock": 10 ** 30}, "stock"),
])
def test_create_rejects_invalid_input(inventory, data, field):
    with pytest.raises(ValidationError) as exc:
        inventory.create_product(data)
    assert exc.value.field == field
    assert inventory.list_products() == []


def test_update_only_touches_present_fields(inventory):
    pid = inventory.create_product({
        "name": "Galletas", "price": 90, "stock": 35, "description": "Dulces",
    })
    updated = inventory.update_product(pid, {"price": 95.5})

    assert updated.price == 95.5
    assert updated.name == "Galletas"
    assert updated.stock == 35
    assert updated.description == "Dulces"


def test_update_ignores_id_field(inventory):
    pid = inventory.create_product({"name": "Jugo", "price": 100, "stock": 20})
    updated = inventory.update_product(pid, {"id": 999, "stock": 25})
    assert updated.id == pid
    assert updated.stock == 25


@pytest.mark.parametrize("patch", [
    {"price": None},
    {"name": None},
    {"stock": None},
    {"stock": -3},
    {"price": 0},
    {"color": "rojo"},
    {},
])
def test_update_rejects_invalid_patch(inventory, patch):
    pid = inventory.create_product({"name": "Chocolate", "price": 120, "stock": 25})
    with pytest.raises(ValidationError):
        inventory.update_product(pid, patch)

    product = inventory.get_product(pid)
    assert (product.name, product.price, product.stock) == ("Chocolate", 120.0, 25)


def test_update_missing_product(inventory):
    with pytest.raises(NotFoundError):
        inventory.update_product(404, {"price": 10})


def test_delete_product(inventory):
    pid = inventory.create_product({"name": "Café", "price": 200, "stock": 15})
    inventory.delete_product(pid)

    assert not inventory.product_exists(pid)
    with pytest.raises(NotFoundError):
        inventory.get_product(pid)
    with pytest.raises(NotFoundError):
        inventory.delete_product(pid)
