"""Order endpoints — ingestion, status changes, manual actions."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Body, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.adapters.persistence.database import get_session
from orderdesk.application.ports.order_source_port import OrderSourcePort
from orderdesk.application.use_cases.change_order_status import ChangeOrderStatusUseCase
from orderdesk.application.use_cases.ingest_orders import IngestOrdersUseCase, IngestionResult
from orderdesk.application.use_cases.manage_orders import ReassignOrderUseCase, SetRecallUseCase
from orderdesk.domain.entities.order import Order
from orderdesk.domain.errors import DatastoreError, OrderDeskError, OrderSourceError
from orderdesk.infrastructure.api.dependencies import (
    get_change_status_uc,
    get_ingest_orders_uc,
    get_order_source,
    get_reassign_order_uc,
    get_set_recall_uc,
)
from orderdesk.infrastructure.api.errors import to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["orders"])


class StatusChangeRequest(BaseModel):
    status_id: int | None = None


class RecallRequest(BaseModel):
    recall_at: datetime | None = None


class AgentRequest(BaseModel):
    agent_id: int


@router.post("/ingest")
async def ingest_orders(
    raw_orders: list[dict[str, Any]] = Body(...),
    ingest_uc: IngestOrdersUseCase = Depends(get_ingest_orders_uc),
    session: AsyncSession = Depends(get_session),
):
    """Insert new shop orders (idempotent) and assign them to agents."""
    result = await ingest_uc.execute(raw_orders)
    await session.commit()
    return {"status": "ok", **ingestion_to_dict(result)}


@router.post("/sync")
async def sync_orders(
    source: OrderSourcePort = Depends(get_order_source),
    ingest_uc: IngestOrdersUseCase = Depends(get_ingest_orders_uc),
    session: AsyncSession = Depends(get_session),
):
    """Pull orders from Shopify and ingest the ones we don't have yet."""
    try:
        raw_orders = await source.fetch_orders()
    except OrderSourceError as e:
        raise to_http_exception(e) from e

    result = await ingest_uc.execute(raw_orders)
    await session.commit()
    return {"status": "ok", "fetched": len(raw_orders), **ingestion_to_dict(result)}


@router.patch("/{order_id}/status")
async def change_status(
    order_id: int,
    body: StatusChangeRequest,
    status_uc: ChangeOrderStatusUseCase = Depends(get_change_status_uc),
    session: AsyncSession = Depends(get_session),
):
    """Change an order's status; may schedule a recall."""
    try:
        result = await status_uc.execute(order_id, body.status_id)
    except DatastoreError as e:
        await session.rollback()
        logger.exception("Status change failed for order %d", order_id)
        raise to_http_exception(e) from e
    except OrderDeskError as e:
        raise to_http_exception(e) from e
    await session.commit()

    return {
        "order_id": result.order_id,
        "status": (
            {"id": result.status.id, "name": result.status.name, "color": result.status.color}
            if result.status else None
        ),
        "recall_at": _iso(result.recall_at),
        "recall_attempts": result.recall_attempts,
        "processing_time_min": result.processing_time_min,
        "first_processed_at": _iso(result.first_processed_at),
    }


@router.patch("/{order_id}/recall")
async def set_recall(
    order_id: int,
    body: RecallRequest,
    recall_uc: SetRecallUseCase = Depends(get_set_recall_uc),
    session: AsyncSession = Depends(get_session),
):
    """Manually schedule or clear a recall."""
    try:
        order = await recall_uc.execute(order_id, body.recall_at)
    except OrderDeskError as e:
        await session.rollback()
        raise to_http_exception(e) from e
    await session.commit()
    return serialize_order(order)


@router.patch("/{order_id}/agent")
async def reassign_order(
    order_id: int,
    body: AgentRequest,
    reassign_uc: ReassignOrderUseCase = Depends(get_reassign_order_uc),
    session: AsyncSession = Depends(get_session),
):
    """Hand an order over to another agent."""
    try:
        order = await reassign_uc.execute(order_id, body.agent_id)
    except OrderDeskError as e:
        await session.rollback()
        raise to_http_exception(e) from e
    await session.commit()
    return serialize_order(order)


def ingestion_to_dict(r: IngestionResult) -> dict:
    return {
        "inserted_count": r.inserted_count,
        "assigned_count": r.assigned_count,
        "skipped_count": r.skipped_count,
        "failed_count": r.failed_count,
    }


def serialize_order(o: Order) -> dict:
    """Convert a domain Order to an API response dict."""
    return {
        "id": o.id,
        "external_number": o.external_number,
        "customer_name": o.customer_name,
        "customer_phone": o.customer_phone,
        "product_note": o.product_note,
        "order_date": _iso(o.order_date),
        "total_price": o.total_price,
        "agent_id": o.agent_id,
        "status_id": o.status_id,
        "recall_at": _iso(o.recall_at),
        "recall_attempts": o.recall_attempts,
        "first_processed_at": _iso(o.first_processed_at),
        "processing_time_min": o.processing_time_min,
    }


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None
