"""ListDueRecallsUseCase — orders whose follow-up call is due."""

from __future__ import annotations

from datetime import datetime, timezone

from orderdesk.application.ports.order_repo import OrderRepository
from orderdesk.domain.clock import Clock, utc_now
from orderdesk.domain.entities.order import Order


class ListDueRecallsUseCase:
    """Read-only: no state is kept between polls."""

    def __init__(self, order_repo: OrderRepository, clock: Clock = utc_now):
        self._orders = order_repo
        self._clock = clock

    async def execute(self, since: datetime | None = None) -> list[Order]:
        """Return due recalls, oldest due first.

        Args:
            since: optional watermark (typically the caller's previous poll
                time); only recalls that became due after it are returned. A naive
                value is taken as UTC.
        """
        if since is not None and since.tzinfo is None:
            since = since.replace(tzinfo=timezone.utc)
        now = self._clock()
        if since is not None and since >= now:
            return []
        return await self._orders.get_due_recalls(now, since)
