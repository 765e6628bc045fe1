# shopify_client.py
"""
Minimal Shopify Admin REST client: one authenticated GET for the orders list.
No retries and no pagination; callers get the first page only.
"""

import re
from typing import Any, Dict, List, Optional

import requests

from config import ShopifyCredentials
from schema import COD_TAG, ORDER_FIELD_PROJECTION


class ShopifyAPIError(Exception):
    """Non-200 response from the Shopify API."""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"Shopify API error: {status_code} - {body}")
        self.status_code = status_code
        self.body = body


def _shop_host(domain: str) -> str:
    """Accept 'shop.myshopify.com', 'https://shop.myshopify.com/' or a full admin URL."""
    s = str(domain or "").strip()
    s = re.sub(r"^[a-zA-Z][a-zA-Z0-9+.-]*://", "", s)
    return s.split("/", 1)[0]


class ShopifyClient:
    def __init__(self, credentials: ShopifyCredentials, session: Optional[Any] = None):
        if not credentials.is_configured:
            raise ValueError("Shopify domain and access token must be configured")
        self.credentials = credentials
        self.session = session or requests
        self.base_url = f"https://{_shop_host(credentials.domain)}/admin/api/{credentials.api_version}"

    def _headers(self) -> Dict[str, str]:
        return {
            "X-Shopify-Access-Token": self.credentials.access_token,
            "Accept": "application/json",
        }

    def _make_api_request(self, endpoint: str, params: Optional[Dict] = None) -> Dict:
        """GET `endpoint` and return the decoded JSON body; non-200 raises ShopifyAPIError."""
        url = f"{self.base_url}/{endpoint}"
        response = self.session.get(url, headers=self._headers(), params=params)
        if response.status_code != 200:
            raise ShopifyAPIError(response.status_code, response.text)
        return response.json()

    def get_orders(self, tag: str = COD_TAG, fields: str = ORDER_FIELD_PROJECTION) -> List[Dict]:
        """Orders of any status carrying `tag` (Shopify matches the tag server side)."""
        params = {
            "status": "any",
            "tagged_with": tag,
            "fields": fields,
        }
        data = self._make_api_request("orders.json", params)
        if not isinstance(data, dict):
            raise ValueError(f"Unexpected orders payload: {type(data).__name__}")
        orders = data.get("orders") or []
        if not isinstance(orders, list):
            raise ValueError(f"Unexpected 'orders' value: {type(orders).__name__}")
        return orders
