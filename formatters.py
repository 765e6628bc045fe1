# formatters.py
"""
Display helpers for Shopify order fields.

Pure functions only: same input, same string out, empty string for missing
data. Nothing here raises on bad input.
"""

import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import pandas as pd

DEFAULT_TIMEZONE = "Europe/Istanbul"
DATE_FORMAT = "%Y-%m-%d %H:%M"

# YYYY-MM-DD, optionally followed by a time part
ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}($|[T ]\d)")

# Order matters: this is how the address reads on a shipping label
ADDRESS_FIELDS = ["address1", "address2", "city", "province", "zip", "country"]


def has_tag(tags: Any, target: str) -> bool:
    """
    True if `target` is one of the comma separated tags (trimmed, case-insensitive).
    Partial matches do not count: "COD-like" is not "COD".
    """
    if not tags or not target:
        return False
    if isinstance(tags, str):
        tokens = tags.split(",")
    elif isinstance(tags, (list, tuple)):
        tokens = [str(t) for t in tags]
    else:
        return False
    wanted = target.strip().casefold()
    return any(token.strip().casefold() == wanted for token in tokens)


def resolve_timezone(name: Optional[str]) -> ZoneInfo:
    """IANA zone for `name`; unknown or malformed names fall back to DEFAULT_TIMEZONE."""
    if name:
        try:
            return ZoneInfo(str(name).strip())
        except (ZoneInfoNotFoundError, ValueError, OSError):
            logging.warning("Unknown time zone %r, using %s", name, DEFAULT_TIMEZONE)
    return ZoneInfo(DEFAULT_TIMEZONE)


def format_date(value: Any, tz: Optional[str] = None) -> str:
    """ISO-8601 timestamp -> 'YYYY-MM-DD HH:MM' in `tz` (naive input is taken as UTC)."""
    if value is None:
        return ""
    raw = str(value).strip()
    # pandas also accepts words like "now" and "today"; only ISO dates are timestamps here
    if not ISO_DATE_RE.match(raw):
        if raw:
            logging.debug("Unparseable timestamp: %r", raw)
        return ""
    ts = pd.to_datetime(raw, format="ISO8601", errors="coerce", utc=True)
    if pd.isna(ts):
        logging.debug("Unparseable timestamp: %r", raw)
        return ""
    return ts.tz_convert(resolve_timezone(tz)).strftime(DATE_FORMAT)


def full_name(first: Any, last: Any) -> str:
    parts = [str(p).strip() for p in (first, last) if p is not None]
    return " ".join(p for p in parts if p)


def _amount_text(amount: Any) -> str:
    # bool is an int subclass; True is not an amount
    if amount is None or isinstance(amount, bool):
        return ""
    raw = str(amount).strip()
    if not raw:
        return ""
    try:
        number = Decimal(raw)
    except InvalidOperation:
        # non-numeric text is shown as the shop sent it
        return raw if isinstance(amount, str) else ""
    if not number.is_finite() or number == 0:
        return ""
    if number == number.to_integral_value():
        return str(int(number))
    return format(number.normalize(), "f")


def format_money(amount: Any, currency: Any) -> str:
    """
    '<amount> <currency>', or '' when either side is missing or the amount is zero.
    Whole amounts drop the fraction: 1299.00 -> '1299'.
    """
    code = str(currency).strip() if currency else ""
    if not code:
        return ""
    text = _amount_text(amount)
    if not text:
        return ""
    return f"{text} {code}"


def format_address(address: Any) -> str:
    if not isinstance(address, dict):
        return ""
    parts = []
    for key in ADDRESS_FIELDS:
        value = address.get(key)
        if value is None:
            continue
        value = str(value).strip()
        if value:
            parts.append(value)
    return ", ".join(parts)
