# -*- coding: utf-8 -*-
"""
Tests de monedas: CRUD, protección de la moneda base y conversión.
"""
import pytest

from kiosquito.errors import (
    DuplicateCurrencyError,
    NotFoundError,
    ProtectedCurrencyError,
    ValidationError,
)


@pytest.fixture
def currencies(container):
    return container.currency_service


def test_list_currencies_base_first(currencies):
    codes = [c.code for c in currencies.list_currencies()]
    assert codes == ["CUP", "MLC", "USD"]
    assert currencies.list_currencies()[0].is_base


def test_create_currency_normalizes_code(currencies):
    cid = currencies.create_currency({"code": " eur ", "name": "Euro", "exchange_rate": 130})
    eur = currencies.get_currency(cid)

    assert eur.code == "EUR"
    assert eur.active
    assert [c.code for c in currencies.list_all_currencies()] == ["CUP", "EUR", "MLC", "USD"]


def test_duplicate_code_rejected(currencies):
    with pytest.raises(DuplicateCurrencyError):
        currencies.create_currency({"code": "usd", "name": "Otro dólar", "exchange_rate": 1})


def test_second_base_currency_rejected(currencies, container):
    with pytest.raises(DuplicateCurrencyError) as exc:
        currencies.create_currency({"code": "CUP", "name": "Peso", "exchange_rate": 1})
    # Es también un error de validación para el llamador
    assert isinstance(exc.value, ValidationError)
    assert container.currency_repo.count_by_code("CUP") == 1


@pytest.mark.parametrize("data", [
    {"code": "", "name": "Vacío", "exchange_rate": 1},
    {"code": "EUR", "name": "", "exchange_rate": 1},
    {"code": "EUR", "name": "Euro", "exchange_rate": 0},
    {"code": "EUR", "name": "Euro", "exchange_rate": -2},
    {"code": "E-U", "name": "Euro", "exchange_rate": 2},
    {"code": "DEMASIADOLARGO", "name": "Euro", "exchange_rate": 2},
])
def test_create_rejects_invalid_currency(currencies, data):
    with pytest.raises(ValidationError):
        currencies.create_currency(data)


def test_base_currency_is_protected(currencies, cup):
    with pytest.raises(ProtectedCurrencyError):
        currencies.update_currency(cup.id, {"active": False})
    with pytest.raises(ProtectedCurrencyError):
        currencies.update_currency(cup.id, {"code": "CUC"})
    with pytest.raises(ProtectedCurrencyError):
        currencies.update_currency(cup.id, {"exchange_rate": 2})
    with pytest.raises(ProtectedCurrencyError):
        currencies.toggle_active(cup.id)
    with pytest.raises(ProtectedCurrencyError):
        currencies.delete_currency(cup.id)

    base = currencies.get_base_currency()
    assert (base.code, base.active, base.exchange_rate) == ("CUP", True, 1.0)


def test_base_currency_name_can_change(currencies, cup):
    updated = currencies.update_currency(cup.id, {"name": "Peso cubano (CUP)"})
    assert updated.name == "Peso cubano (CUP)"
    assert updated.is_base


def test_update_rate_partial(currencies, usd):
    updated = currencies.update_currency(usd.id, {"exchange_rate": 330})
    assert updated.exchange_rate == 330.0
    assert updated.name == usd.name
    assert updated.active


def test_update_code_to_existing_rejected(currencies, usd):
    with pytest.raises(DuplicateCurrencyError):
        currencies.update_currency(usd.id, {"code": "MLC"})


def test_toggle_active(currencies, usd):
    assert currencies.toggle_active(usd.id).active is False
    assert "USD" not in [c.code for c in currencies.list_currencies()]
    assert "USD" in [c.code for c in currencies.list_all_currencies()]

    assert currencies.toggle_active(usd.id).active is True


def test_delete_currency(currencies, usd):
    currencies.delete_currency(usd.id)
    with pytest.raises(NotFoundError):
        currencies.get_currency(usd.id)


def test_missing_currency(currencies):
    with pytest.raises(NotFoundError):
        currencies.update_currency(404, {"name": "Nada"})
    with pytest.raises(NotFoundError):
        currencies.delete_currency(404)


def test_conversion(currencies, usd, cup):
    # 150 CUP con USD a 120 CUP por dólar
    assert currencies.convert_from_base(150, usd.id) == 1.25
    assert currencies.convert_to_base(2, usd.id) == 240.0
    assert currencies.convert_from_base(150, cup.id) == 150.0
