# -*- coding: utf-8 -*-
"""
Tests de las funciones puras de validación.
"""
from datetime import date, datetime

import pytest

from kiosquito.errors import ValidationError
from kiosquito.models import (
    FieldMask,
    SummaryPeriod,
    parse_date,
    parse_period,
    validate_currency,
    validate_currency_patch,
    validate_product,
    validate_product_patch,
    validate_sale,
)


def test_validate_product_normalizes():
    product = validate_product({"name": " Papas ", "price": "80", "stock": "30"})
    assert product.name == "Papas"
    assert product.price == 80.0
    assert product.stock == 30
    assert product.description == ""
    assert product.category == ""


def test_price_is_rounded_to_cents():
    assert validate_product({"name": "X", "price": 10.129}).price == 10.13


def test_price_below_one_cent_is_rejected():
    with pytest.raises(ValidationError) as exc:
        validate_product({"name": "X", "price": 0.004})
    assert exc.value.field == "price"
    assert validate_product({"name": "X", "price": 0.006}).price == 0.01


@pytest.mark.parametrize("stock", [2 ** 63, -(2 ** 63) - 1, 10 ** 30, "1e30"])
def test_integers_outside_sqlite_range_are_rejected(stock):
    with pytest.raises(ValidationError) as exc:
        validate_product({"name": "X", "price": 1, "stock": stock})
    assert exc.value.field == "stock"


def test_largest_sqlite_integer_is_accepted():
    assert validate_product({"name": "X", "price": 1, "stock": 2 ** 63 - 1}).stock == 2 ** 63 - 1


@pytest.mark.parametrize("price", [True, float("nan"), float("inf"), [], "1,5"])
def test_price_rejects_non_numbers(price):
    with pytest.raises(ValidationError):
        validate_product({"name": "X", "price": price})


def test_validate_product_requires_mapping():
    with pytest.raises(ValidationError):
        validate_product(["Agua", 50])


def test_product_patch_mask_contains_only_present_fields():
    mask = validate_product_patch({"stock": 4, "category": " Snacks "})
    assert isinstance(mask, FieldMask)
    assert dict(mask) == {"stock": 4, "category": "Snacks"}
    assert "price" not in mask
    assert len(mask) == 2


def test_product_patch_description_can_be_cleared():
    mask = validate_product_patch({"description": None})
    assert mask.get("description") == ""


def test_product_patch_rejects_unknown_fields():
    with pytest.raises(ValidationError) as exc:
        validate_product_patch({"precio": 10})
    assert exc.value.field == "precio"


def test_validate_currency():
    currency = validate_currency({"code": "usd", "name": "Dólar", "exchange_rate": "0.0083"})
    assert currency.code == "USD"
    assert currency.exchange_rate == 0.0083
    assert currency.active is True


@pytest.mark.parametrize("value, expected", [
    (False, False), (0, False), ("false", False), ("1", True), (True, True),
])
def test_currency_patch_active_values(value, expected):
    assert validate_currency_patch({"active": value}).get("active") is expected


def test_currency_patch_rejects_bad_active():
    with pytest.raises(ValidationError):
        validate_currency_patch({"active": "quizás"})


def test_validate_sale():
    sale = validate_sale("3", 2, 1)
    assert (sale.product_id, sale.quantity, sale.currency_id, sale.unit_price) == (3, 2, 1, None)
    assert validate_sale(1, 1, 1, "12.5").unit_price == 12.5

    with pytest.raises(ValidationError):
        validate_sale(0, 1, 1)
    with pytest.raises(ValidationError):
        validate_sale(1, 1, 1, unit_price=0)


def test_parse_date():
    assert parse_date("2024-05-15") == date(2024, 5, 15)
    assert parse_date("2024-05-15 10:30:00") == date(2024, 5, 15)
    assert parse_date(datetime(2024, 5, 15, 8)) == date(2024, 5, 15)
    assert parse_date(date(2024, 5, 15)) == date(2024, 5, 15)
    assert parse_date(None) is None
    assert parse_date("") is None
    with pytest.raises(ValidationError):
        parse_date("2024-13-01")
    with pytest.raises(ValidationError):
        parse_date(20240515)


def test_parse_period():
    assert parse_period("week") is SummaryPeriod.WEEK
    assert parse_period(SummaryPeriod.MONTH) is SummaryPeriod.MONTH
    assert parse_period("día") is SummaryPeriod.DAY
    assert SummaryPeriod.MONTH.days_back == 30
    with pytest.raises(ValidationError):
        parse_period(7)
