# ingest.py
"""
Fetch COD-tagged Shopify orders and write them to the Google Sheet.

    python ingest.py                        # fetch + write to GOOGLE_SHEETS_TAB
    python ingest.py --filter Country=Türkiye --filter Status=paid
    python ingest.py --clear-filters
    python ingest.py --dry-run              # print the table, do not touch the sheet

Without SHOPIFY_DOMAIN / SHOPIFY_ACCESS_TOKEN the two sample rows are used, so
the sheet layout can be checked before the store is connected.
"""

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import pandas as pd

from config import ShopifyCredentials, load_credentials, load_sheet_settings, load_timezone
from filters import TabularSink, apply_filters, clear_filters
from formatters import has_tag
from normalize import normalize_order
from schema import COD_TAG, COLUMNS, row_values
from sheets import open_sheet_sink
from shopify_client import ShopifyAPIError, ShopifyClient

FETCH_ERROR_MESSAGE = "Could not load orders from Shopify. Please try again later."
NO_ORDERS_MESSAGE = "No COD orders found."

SAMPLE_ROWS: Tuple[Dict[str, str], ...] = (
    {
        "Order": "#1001",
        "Date": "2024-01-15 14:30",
        "Customer": "Ayşe Yılmaz",
        "Email": "ayse@example.com",
        "Phone": "+90 532 000 00 01",
        "Country": "Türkiye",
        "Products": "Ceramic Mug, Tea Set",
        "Total": "1299 TRY",
        "Shipping": "49 TRY",
        "Address": "Bağdat Cd. 12, Kadıköy, Istanbul, 34710, Türkiye",
        "Status": "pending",
    },
    {
        "Order": "#1002",
        "Date": "2024-01-16 09:05",
        "Customer": "Mehmet Demir",
        "Email": "mehmet@example.com",
        "Phone": "+90 533 000 00 02",
        "Country": "Türkiye",
        "Products": "Linen Tablecloth",
        "Total": "649.9 TRY",
        "Shipping": "",
        "Address": "Atatürk Blv. 5, Çankaya, Ankara, 06420, Türkiye",
        "Status": "fulfilled",
    },
)


@dataclass(frozen=True)
class FetchResult:
    rows: Tuple[Dict[str, str], ...] = ()
    message: Optional[str] = None
    sample: bool = False


def fetch_cod_orders(
    credentials: ShopifyCredentials,
    client: Optional[ShopifyClient] = None,
    tz: Optional[str] = None,
) -> FetchResult:
    """
    Rows for every COD-tagged order, in the order Shopify returned them.

    Never raises: a failed fetch is logged and reported through
    FetchResult.message with no rows.
    """
    if not credentials.is_configured:
        logging.warning("Shopify credentials not set (SHOPIFY_DOMAIN / SHOPIFY_ACCESS_TOKEN); using sample data")
        return FetchResult(rows=SAMPLE_ROWS, sample=True)

    try:
        client = client or ShopifyClient(credentials)
        orders = client.get_orders(tag=COD_TAG)
        # Shopify's tagged_with is trusted only as a pre-filter
        rows = tuple(
            normalize_order(order, tz)
            for order in orders
            if isinstance(order, dict) and has_tag(order.get("tags"), COD_TAG)
        )
    except ShopifyAPIError as e:
        logging.error("Shopify orders request failed: status=%s body=%s", e.status_code, e.body)
        return FetchResult(message=FETCH_ERROR_MESSAGE)
    except Exception:
        logging.exception("Failed to fetch orders from %s", credentials.domain)
        return FetchResult(message=FETCH_ERROR_MESSAGE)

    logging.info("Fetched %d COD orders (%d returned by Shopify)", len(rows), len(orders))
    if not rows:
        return FetchResult(message=NO_ORDERS_MESSAGE)
    return FetchResult(rows=rows)


def sync_to_sheet(result: FetchResult, sink: TabularSink) -> int:
    """Replace the sink's contents with header + rows. Returns rows written."""
    sink.write_table(COLUMNS, row_values(result.rows))
    return len(result.rows)


def _parse_filters(pairs) -> Dict[str, str]:
    spec = {}
    for pair in pairs or []:
        if "=" not in pair:
            raise argparse.ArgumentTypeError(f"--filter expects COLUMN=TEXT, got {pair!r}")
        col, text = pair.split("=", 1)
        col = col.strip()
        if col not in COLUMNS:
            raise argparse.ArgumentTypeError(f"Unknown column {col!r}; choose from {', '.join(COLUMNS)}")
        spec[col] = text
    return spec


def main(argv=None):
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")

    settings = load_sheet_settings()
    parser = argparse.ArgumentParser(description="Sync COD-tagged Shopify orders to a Google Sheet")
    parser.add_argument("--doc-id", default=settings.doc_id, help="Spreadsheet ID or URL (default: GOOGLE_SHEETS_DOC_ID)")
    parser.add_argument("--tab", default=settings.tab, help=f"Worksheet name (default: {settings.tab})")
    parser.add_argument("--filter", action="append", metavar="COLUMN=TEXT",
                        help="Show only rows whose COLUMN contains TEXT (repeatable)")
    parser.add_argument("--clear-filters", action="store_true", help="Remove the sheet filter after writing")
    parser.add_argument("--dry-run", action="store_true", help="Print rows instead of writing to the sheet")
    args = parser.parse_args(argv)

    try:
        spec = _parse_filters(args.filter)
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))

    result = fetch_cod_orders(load_credentials(), tz=load_timezone())
    if result.message:
        logging.info(result.message)

    if args.dry_run:
        df = pd.DataFrame(row_values(result.rows), columns=COLUMNS)
        print(df.to_string(index=False) if not df.empty else "(no rows)")
        return 0

    if not args.doc_id:
        logging.error("GOOGLE_SHEETS_DOC_ID not set in .env (or pass --doc-id)")
        return 1

    try:
        sink = open_sheet_sink(args.doc_id, args.tab, settings.creds_file)
        written = sync_to_sheet(result, sink)
        logging.info("Synced %d rows to '%s'", written, args.tab)
        if args.clear_filters:
            clear_filters(sink)
            logging.info("Filters cleared")
        elif spec:
            applied = apply_filters(sink, spec)
            logging.info("Filtered %d column(s)", applied)
    except Exception as e:
        logging.exception("Failed to write to Google Sheets: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
