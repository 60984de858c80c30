"""Tests for product catalog use cases."""

from __future__ import annotations

import pytest

from fakes import FakeProductRepo
from orderdesk.adapters.shopify.normalizer import ShopifyPayloadParser
from orderdesk.application.use_cases.sync_products import (
    SyncProductsUseCase,
    UpdateProductAgentsUseCase,
)
from orderdesk.domain.entities.product import Product
from orderdesk.domain.errors import NotFoundError

PARSER = ShopifyPayloadParser()


@pytest.mark.asyncio
async def test_sync_inserts_new_products():
    repo = FakeProductRepo()
    count = await SyncProductsUseCase(repo, PARSER).execute([
        {"id": 8123456789, "title": "Widget", "variants": [{"price": "19.90"}]},
        {"id": 8123456790, "title": "Gadget", "variants": []},
    ])

    assert count == 2
    by_ext = {p.external_id: p for p in repo.products.values()}
    assert by_ext["8123456789"].price == 19.9
    assert by_ext["8123456790"].price == 0.0


@pytest.mark.asyncio
async def test_sync_keeps_agent_rules_of_existing_product():
    repo = FakeProductRepo([
        Product(id=1, external_id="100", title="Old", assigned_agent_ids={2}, hidden_for_agent_ids={5}),
    ])

    await SyncProductsUseCase(repo, PARSER).execute([{"id": 100, "title": "New", "variants": [{"price": 5}]}])

    p = repo.products[1]
    assert p.title == "New"
    assert p.price == 5.0
    assert p.assigned_agent_ids == {2}
    assert p.hidden_for_agent_ids == {5}


@pytest.mark.asyncio
async def test_sync_skips_malformed():
    repo = FakeProductRepo()
    count = await SyncProductsUseCase(repo, PARSER).execute([{"title": "no id"}, {"id": 1, "title": "ok"}])
    assert count == 1


@pytest.mark.asyncio
async def test_update_agents_partial():
    repo = FakeProductRepo([Product(id=1, external_id="100", title="W", hidden_for_agent_ids={4})])

    p = await UpdateProductAgentsUseCase(repo).execute(1, assigned_agent_ids={1, 2})

    assert p.assigned_agent_ids == {1, 2}
    assert p.hidden_for_agent_ids == {4}


@pytest.mark.asyncio
async def test_update_agents_unknown_product():
    with pytest.raises(NotFoundError):
        await UpdateProductAgentsUseCase(FakeProductRepo()).execute(7, hidden_for_agent_ids=set())
