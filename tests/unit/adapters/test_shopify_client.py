"""Tests for the Shopify client using httpx.MockTransport."""

import httpx
import pytest

from orderdesk.adapters.shopify.client import ShopifyClient
from orderdesk.domain.errors import OrderSourceError


def _client(handler, store_url="https://demo-shop.myshopify.com/") -> ShopifyClient:
    return ShopifyClient(
        store_url=store_url,
        access_token="shpat_test",
        api_version="2026-01",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_fetch_orders_hits_admin_api():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"orders": [{"order_number": 1001}]})

    orders = await _client(handler).fetch_orders()

    assert orders == [{"order_number": 1001}]
    req = seen[0]
    assert req.url.host == "demo-shop.myshopify.com"
    assert req.url.path == "/admin/api/2026-01/orders.json"
    assert req.url.params["status"] == "any"
    assert req.headers["X-Shopify-Access-Token"] == "shpat_test"


@pytest.mark.asyncio
async def test_fetch_products():
    def handler(request):
        assert request.url.path.endswith("/products.json")
        return httpx.Response(200, json={"products": [{"id": 1, "title": "Widget"}]})

    assert await _client(handler).fetch_products() == [{"id": 1, "title": "Widget"}]


@pytest.mark.asyncio
async def test_missing_key_returns_empty_list():
    client = _client(lambda request: httpx.Response(200, json={}))
    assert await client.fetch_orders() == []


@pytest.mark.asyncio
async def test_http_error_wrapped():
    client = _client(lambda request: httpx.Response(401, json={"errors": "Invalid API key"}))
    with pytest.raises(OrderSourceError, match="401"):
        await client.fetch_orders()


@pytest.mark.asyncio
async def test_transport_error_wrapped():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(OrderSourceError):
        await _client(handler).fetch_products()


@pytest.mark.asyncio
async def test_invalid_json_wrapped():
    client = _client(lambda request: httpx.Response(200, content=b"<html>"))
    with pytest.raises(OrderSourceError):
        await client.fetch_orders()


@pytest.mark.asyncio
async def test_unconfigured_store():
    client = _client(lambda request: httpx.Response(200, json={}), store_url="")
    with pytest.raises(OrderSourceError, match="not configured"):
        await client.fetch_orders()
