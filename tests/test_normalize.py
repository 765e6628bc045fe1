import pytest

from normalize import normalize_order
from schema import COLUMNS


def make_order(**overrides):
    order = {
        "name": "#1042",
        "created_at": "2024-03-10T08:15:00+03:00",
        "email": "ayse@example.com",
        "phone": None,
        "customer": {
            "first_name": "Ayşe",
            "last_name": "Yılmaz",
            "phone": None,
            "default_address": {"phone": "+90 532 111 22 33"},
        },
        "shipping_address": {
            "address1": "Bağdat Cd. 12",
            "city": "Istanbul",
            "zip": "34710",
            "country": "Türkiye",
            "phone": "+90 555 999 88 77",
        },
        "line_items": [{"name": "Ceramic Mug"}, {"name": "Tea Set"}],
        "total_price": "1299.00",
        "currency": "TRY",
        "total_shipping_price_set": {"shop_money": {"amount": "49.00", "currency_code": "TRY"}},
        "tags": "COD, wholesale",
        "financial_status": "pending",
        "fulfillment_status": None,
    }
    order.update(overrides)
    return order


def test_normalize_full_order():
    row = normalize_order(make_order())
    assert row == {
        "Order": "#1042",
        "Date": "2024-03-10 08:15",
        "Customer": "Ayşe Yılmaz",
        "Email": "ayse@example.com",
        "Phone": "+90 532 111 22 33",
        "Country": "Türkiye",
        "Products": "Ceramic Mug, Tea Set",
        "Total": "1299 TRY",
        "Shipping": "49 TRY",
        "Address": "Bağdat Cd. 12, Istanbul, 34710, Türkiye",
        "Status": "pending",
    }
    assert list(row) == COLUMNS


@pytest.mark.parametrize("order", [
    {},
    {"customer": None, "shipping_address": None, "line_items": None},
    {"customer": "guest", "shipping_address": [], "total_shipping_price_set": {"shop_money": None}},
    {"line_items": [None, {"title": "no name"}]},
])
def test_normalize_is_total(order):
    row = normalize_order(order)
    assert list(row) == COLUMNS
    assert all(isinstance(v, str) for v in row.values())
    assert all(v == "" for v in row.values())


def test_phone_priority():
    order = make_order(phone="+90 500 000 00 00")
    assert normalize_order(order)["Phone"] == "+90 500 000 00 00"

    order = make_order()
    order["customer"]["phone"] = "+90 501 000 00 00"
    assert normalize_order(order)["Phone"] == "+90 501 000 00 00"

    order = make_order()
    order["customer"]["default_address"] = None
    assert normalize_order(order)["Phone"] == "+90 555 999 88 77"

    order = make_order(phone="  ")
    order["customer"] = None
    order["shipping_address"]["phone"] = None
    assert normalize_order(order)["Phone"] == ""


def test_status_prefers_fulfillment():
    assert normalize_order(make_order(fulfillment_status="fulfilled"))["Status"] == "fulfilled"
    assert normalize_order(make_order(financial_status=None))["Status"] == ""


def test_shipping_without_shop_money():
    assert normalize_order(make_order(total_shipping_price_set=None))["Shipping"] == ""
    free = {"shop_money": {"amount": "0.00", "currency_code": "TRY"}}
    assert normalize_order(make_order(total_shipping_price_set=free))["Shipping"] == ""


def test_products_keep_item_order():
    items = [{"name": "B"}, {"name": "A"}, {"name": "C"}]
    assert normalize_order(make_order(line_items=items))["Products"] == "B, A, C"
    assert normalize_order(make_order(line_items=[]))["Products"] == ""


def test_timezone_is_applied():
    row = normalize_order(make_order(created_at="2024-03-10T05:15:00Z"), tz="UTC")
    assert row["Date"] == "2024-03-10 05:15"
