"""Shopify webhook endpoint — one new order per call."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.adapters.persistence.database import get_session
from orderdesk.adapters.shopify.signature import verify_signature
from orderdesk.application.use_cases.ingest_orders import IngestOrdersUseCase
from orderdesk.config import settings
from orderdesk.infrastructure.api.dependencies import get_ingest_orders_uc
from orderdesk.infrastructure.api.routes_orders import ingestion_to_dict

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@router.post("/shopify/orders")
async def shopify_order_webhook(
    request: Request,
    ingest_uc: IngestOrdersUseCase = Depends(get_ingest_orders_uc),
    session: AsyncSession = Depends(get_session),
):
    """Verify the HMAC signature, then ingest the order synchronously."""
    secret = settings.shopify_webhook_secret
    if not secret:
        logger.error("SHOPIFY_WEBHOOK_SECRET is not configured")
        raise HTTPException(status_code=500, detail="Configuration error")

    body = await request.body()
    header = request.headers.get("x-shopify-hmac-sha256")
    if not header:
        logger.warning("Shopify webhook without signature header")
        raise HTTPException(status_code=401, detail="Missing signature")
    if not verify_signature(body, secret, header):
        logger.warning("Shopify webhook with invalid signature")
        raise HTTPException(status_code=401, detail="Invalid signature")

    try:
        payload = json.loads(body)
    except ValueError:
        raise HTTPException(status_code=400, detail="Body is not valid JSON")
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Expected a single order object")

    logger.info("Shopify webhook: order #%s received", payload.get("order_number"))
    result = await ingest_uc.execute([payload])
    await session.commit()

    if result.failed_count:
        raise HTTPException(status_code=422, detail=f"Order #{payload.get('order_number')} rejected")
    return {"success": True, **ingestion_to_dict(result)}
