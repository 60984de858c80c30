"""Product endpoints — catalog sync and per-product agent rules."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.adapters.persistence.database import get_session
from orderdesk.application.ports.order_source_port import OrderSourcePort
from orderdesk.application.use_cases.sync_products import (
    SyncProductsUseCase,
    UpdateProductAgentsUseCase,
)
from orderdesk.domain.errors import OrderDeskError
from orderdesk.infrastructure.api.dependencies import (
    get_order_source,
    get_sync_products_uc,
    get_update_product_agents_uc,
)
from orderdesk.infrastructure.api.errors import to_http_exception

router = APIRouter(prefix="/products", tags=["products"])


class ProductAgentsRequest(BaseModel):
    assigned_agent_ids: list[int] | None = None
    hidden_for_agent_ids: list[int] | None = None


@router.post("/sync")
async def sync_products(
    raw_products: list[dict[str, Any]] | None = Body(default=None),
    source: OrderSourcePort = Depends(get_order_source),
    sync_uc: SyncProductsUseCase = Depends(get_sync_products_uc),
    session: AsyncSession = Depends(get_session),
):
    """Upsert products from the request body, or pull them from Shopify."""
    if raw_products is None:
        try:
            raw_products = await source.fetch_products()
        except OrderDeskError as e:
            raise to_http_exception(e) from e

    upserted = await sync_uc.execute(raw_products)
    await session.commit()
    return {"status": "ok", "received": len(raw_products), "upserted": upserted}


@router.patch("/{product_id}/agents")
async def update_product_agents(
    product_id: int,
    body: ProductAgentsRequest,
    update_uc: UpdateProductAgentsUseCase = Depends(get_update_product_agents_uc),
    session: AsyncSession = Depends(get_session),
):
    """Replace a product's agent whitelist and/or blacklist."""
    try:
        product = await update_uc.execute(
            product_id,
            set(body.assigned_agent_ids) if body.assigned_agent_ids is not None else None,
            set(body.hidden_for_agent_ids) if body.hidden_for_agent_ids is not None else None,
        )
    except OrderDeskError as e:
        await session.rollback()
        raise to_http_exception(e) from e
    await session.commit()

    return {
        "id": product.id,
        "external_id": product.external_id,
        "title": product.title,
        "assigned_agent_ids": sorted(product.assigned_agent_ids),
        "hidden_for_agent_ids": sorted(product.hidden_for_agent_ids),
        "specialized": product.is_specialized(),
    }
