"""Recall endpoints — what needs a follow-up call now."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query

from orderdesk.application.use_cases.list_due_recalls import ListDueRecallsUseCase
from orderdesk.infrastructure.api.dependencies import get_due_recalls_uc
from orderdesk.infrastructure.api.routes_orders import serialize_order

router = APIRouter(prefix="/recalls", tags=["recalls"])


@router.get("/due")
async def list_due_recalls(
    since: datetime | None = Query(default=None, description="Only recalls due after this instant"),
    recalls_uc: ListDueRecallsUseCase = Depends(get_due_recalls_uc),
):
    """Orders whose recall time has passed, oldest due first."""
    orders = await recalls_uc.execute(since)
    return {
        "total": len(orders),
        "orders": [serialize_order(o) for o in orders],
    }
