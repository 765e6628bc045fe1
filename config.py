# config.py
"""
Settings for the Shopify order source and the Google Sheet sink.

Values come from environment variables; a .env file in the project root is
loaded first (python-dotenv does not override variables already set). Blank
values count as missing. Missing Shopify credentials are not an error: the
fetch pipeline switches to sample data instead.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from formatters import DEFAULT_TIMEZONE, resolve_timezone

BASE_DIR = Path(__file__).resolve().parent

load_dotenv(BASE_DIR / ".env")

DEFAULT_API_VERSION = "2024-01"
DEFAULT_TAB = "COD Orders"
DEFAULT_CREDS_FILE = "service_account.json"


@dataclass(frozen=True)
class ShopifyCredentials:
    domain: Optional[str] = None
    access_token: Optional[str] = None
    api_version: str = DEFAULT_API_VERSION

    @property
    def is_configured(self) -> bool:
        return bool(self.domain and self.access_token)

    def __repr__(self):
        # never print the token
        token = "***" if self.access_token else None
        return (f"ShopifyCredentials(domain={self.domain!r}, access_token={token!r}, "
                f"api_version={self.api_version!r})")


@dataclass(frozen=True)
class SheetSettings:
    doc_id: Optional[str]
    tab: str
    creds_file: str

    @property
    def is_configured(self) -> bool:
        return bool(self.doc_id)


def _env(env: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    return os.environ if env is None else env


def _setting(env: Mapping[str, str], name: str) -> Optional[str]:
    value = env.get(name)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def load_credentials(env: Optional[Mapping[str, str]] = None) -> ShopifyCredentials:
    env = _env(env)
    return ShopifyCredentials(
        domain=_setting(env, "SHOPIFY_DOMAIN"),
        access_token=_setting(env, "SHOPIFY_ACCESS_TOKEN"),
        api_version=_setting(env, "SHOPIFY_API_VERSION") or DEFAULT_API_VERSION,
    )


def load_timezone(env: Optional[Mapping[str, str]] = None) -> str:
    """SHOP_TIMEZONE if it names a known IANA zone, else DEFAULT_TIMEZONE (with a warning)."""
    name = _setting(_env(env), "SHOP_TIMEZONE")
    if not name:
        return DEFAULT_TIMEZONE
    return resolve_timezone(name).key


def load_sheet_settings(env: Optional[Mapping[str, str]] = None) -> SheetSettings:
    env = _env(env)
    creds_file = _setting(env, "GOOGLE_APPLICATION_CREDENTIALS") or DEFAULT_CREDS_FILE
    # resolve relative creds file path against the project root
    if not os.path.isabs(creds_file):
        creds_file = str((BASE_DIR / creds_file).resolve())
    return SheetSettings(
        doc_id=_setting(env, "GOOGLE_SHEETS_DOC_ID"),
        tab=_setting(env, "GOOGLE_SHEETS_TAB") or DEFAULT_TAB,
        creds_file=creds_file,
    )
