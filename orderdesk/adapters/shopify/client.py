"""Shopify Admin API client (async httpx)."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from orderdesk.application.ports.order_source_port import OrderSourcePort
from orderdesk.config import settings
from orderdesk.domain.errors import OrderSourceError

logger = logging.getLogger(__name__)


class ShopifyClient(OrderSourcePort):
    """Pulls orders and products from the Shopify Admin REST API."""

    def __init__(
        self,
        store_url: str | None = None,
        access_token: str | None = None,
        api_version: str | None = None,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        store = (store_url if store_url is not None else settings.shopify_store_url).strip()
        store = store.removeprefix("https://").removeprefix("http://").rstrip("/")
        self._base_url = (
            f"https://{store}/admin/api/"
            f"{api_version or settings.shopify_api_version}"
        )
        self._token = access_token if access_token is not None else settings.shopify_access_token
        self._timeout = timeout
        self._transport = transport
        self._configured = bool(store)

    async def fetch_orders(self) -> list[dict[str, Any]]:
        data = await self._get("orders.json", params={"status": "any"})
        orders = data.get("orders", [])
        logger.info("Fetched %d orders from Shopify", len(orders))
        return orders

    async def fetch_products(self) -> list[dict[str, Any]]:
        data = await self._get("products.json")
        products = data.get("products", [])
        logger.info("Fetched %d products from Shopify", len(products))
        return products

    async def _get(self, path: str, params: dict[str, str] | None = None) -> dict[str, Any]:
        if not self._configured:
            raise OrderSourceError("SHOPIFY_STORE_URL is not configured")

        headers = {
            "X-Shopify-Access-Token": self._token,
            "Content-Type": "application/json",
        }
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                resp = await client.get(f"{self._base_url}/{path}", params=params, headers=headers)
                resp.raise_for_status()
                return resp.json()
        except httpx.HTTPStatusError as e:
            logger.warning("Shopify %s returned HTTP %d", path, e.response.status_code)
            raise OrderSourceError(f"Shopify {path} returned HTTP {e.response.status_code}") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Shopify %s request failed: %s", path, e)
            raise OrderSourceError(f"Shopify {path} request failed: {e}") from e
