"""ChangeOrderStatusUseCase — status transition with recall scheduling."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from orderdesk.application.ports.order_repo import OrderRepository
from orderdesk.application.ports.status_repo import StatusRepository
from orderdesk.domain.clock import Clock, utc_now
from orderdesk.domain.entities.status import Status
from orderdesk.domain.errors import NotFoundError
from orderdesk.domain.policies.status_transition import plan_status_change

logger = logging.getLogger(__name__)


@dataclass
class StatusChangeResult:
    order_id: int
    status: Status | None
    recall_at: datetime | None
    recall_attempts: int
    processing_time_min: int | None
    first_processed_at: datetime | None


class ChangeOrderStatusUseCase:
    """Moves an order to a new status (or back to none)."""

    def __init__(
        self,
        order_repo: OrderRepository,
        status_repo: StatusRepository,
        clock: Clock = utc_now,
    ):
        self._orders = order_repo
        self._statuses = status_repo
        self._clock = clock

    async def execute(self, order_id: int, status_id: int | None) -> StatusChangeResult:
        """Apply the status change atomically.

        Raises:
            NotFoundError: unknown order or status id.
        """
        status = None
        if status_id is not None:
            status = await self._statuses.get_by_id(status_id)
            if status is None:
                raise NotFoundError("Status", status_id)

        order = await self._orders.get_by_id(order_id)
        if order is None:
            raise NotFoundError("Order", order_id)

        now = self._clock()
        change = plan_status_change(order.order_date, order.is_processed(), status, now)
        updated = await self._orders.apply_status_change(order_id, change)
        if updated is None:
            raise NotFoundError("Order", order_id)

        logger.info(
            "Order #%d: status → %s (recall_at=%s, attempts=%d, processing=%s min)",
            updated.external_number,
            status.name if status else None,
            updated.recall_at.isoformat() if updated.recall_at else None,
            updated.recall_attempts,
            updated.processing_time_min,
        )

        return StatusChangeResult(
            order_id=updated.id,
            status=status,
            recall_at=updated.recall_at,
            recall_attempts=updated.recall_attempts,
            processing_time_min=updated.processing_time_min,
            first_processed_at=updated.first_processed_at,
        )
