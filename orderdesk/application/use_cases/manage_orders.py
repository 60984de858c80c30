"""Manual order actions taken by supervisors: reassignment and recall override."""

from __future__ import annotations

import logging
from datetime import datetime

from orderdesk.application.ports.agent_repo import AgentRepository
from orderdesk.application.ports.order_repo import OrderRepository
from orderdesk.domain.entities.order import Order
from orderdesk.domain.errors import NotFoundError

logger = logging.getLogger(__name__)


class ReassignOrderUseCase:
    def __init__(self, order_repo: OrderRepository, agent_repo: AgentRepository):
        self._orders = order_repo
        self._agents = agent_repo

    async def execute(self, order_id: int, agent_id: int) -> Order:
        agent = await self._agents.get_by_id(agent_id)
        if agent is None:
            raise NotFoundError("Agent", agent_id)

        order = await self._orders.reassign_agent(order_id, agent_id)
        if order is None:
            raise NotFoundError("Order", order_id)

        logger.info("Order #%d reassigned → Agent %s (id=%d)", order.external_number, agent.name, agent_id)
        return order


class SetRecallUseCase:
    """Manually schedule (or clear, with None) an order's recall time.

    The attempt counter is only driven by status changes and stays as is.
    """

    def __init__(self, order_repo: OrderRepository):
        self._orders = order_repo

    async def execute(self, order_id: int, recall_at: datetime | None) -> Order:
        order = await self._orders.set_recall_at(order_id, recall_at)
        if order is None:
            raise NotFoundError("Order", order_id)

        logger.info(
            "Order #%d: recall manually set to %s",
            order.external_number, recall_at.isoformat() if recall_at else None,
        )
        return order
