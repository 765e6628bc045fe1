# schema.py
# Fixed column layout shared by the normalizer, the sheet writer and the filters.

COLUMNS = [
    "Order",
    "Date",
    "Customer",
    "Email",
    "Phone",
    "Country",
    "Products",
    "Total",
    "Shipping",
    "Address",
    "Status",
]

COD_TAG = "COD"

# Fields requested from the Shopify orders endpoint (everything the normalizer reads)
ORDER_FIELDS = [
    "name",
    "created_at",
    "email",
    "phone",
    "customer",
    "shipping_address",
    "line_items",
    "total_price",
    "currency",
    "total_shipping_price_set",
    "tags",
    "financial_status",
    "fulfillment_status",
]

ORDER_FIELD_PROJECTION = ",".join(ORDER_FIELDS)


def row_values(rows, columns=COLUMNS):
    """Rows (dicts) -> list of cell lists in column order, for writing to a sheet."""
    return [[row.get(col, "") for col in columns] for row in rows]
