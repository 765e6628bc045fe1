# normalize.py
from typing import Any, Dict, Optional

from fields import Field, first_text
from formatters import format_address, format_date, format_money, full_name
from schema import COLUMNS


def _products(order: Field) -> str:
    names = [item.text("name") for item in order.items("line_items")]
    return ", ".join(n for n in names if n)


def _shipping(order: Field) -> str:
    shop_money = order.get("total_shipping_price_set").get("shop_money")
    if not shop_money.present:
        return ""
    return format_money(shop_money.raw("amount"), shop_money.raw("currency_code"))


def _status(order: Field) -> str:
    return first_text([order.get("fulfillment_status"), order.get("financial_status")])


def normalize_order(order: Any, tz: Optional[str] = None) -> Dict[str, str]:
    """
    Flatten one Shopify order into a row keyed by COLUMNS.

    Every column is always present and always a string; missing source data
    gives "". Phone falls back from the order to the customer, the customer's
    default address and finally the shipping address.
    """
    o = Field(order)
    customer = o.get("customer")
    shipping_address = o.get("shipping_address")

    values = {
        "Order": o.text("name"),
        "Date": format_date(o.raw("created_at"), tz),
        "Customer": full_name(customer.raw("first_name"), customer.raw("last_name")),
        "Email": o.text("email"),
        "Phone": first_text([
            o.get("phone"),
            customer.get("phone"),
            customer.get("default_address").get("phone"),
            shipping_address.get("phone"),
        ]),
        "Country": shipping_address.text("country"),
        "Products": _products(o),
        "Total": format_money(o.raw("total_price"), o.raw("currency")),
        "Shipping": _shipping(o),
        "Address": format_address(shipping_address.value),
        "Status": _status(o),
    }
    # build in schema order so dict iteration matches the sheet columns
    return {col: values[col] for col in COLUMNS}
