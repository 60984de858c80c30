"""Port interface for order persistence."""

from abc import ABC, abstractmethod
from datetime import datetime

from orderdesk.domain.entities.order import Order
from orderdesk.domain.policies.status_transition import StatusChange


class OrderRepository(ABC):
    @abstractmethod
    async def create(self, order: Order) -> Order:
        """Insert the order with links to ``order.products``.

        Raises ConflictError if the external number is already taken.
        """
        ...

    @abstractmethod
    async def get_by_id(self, order_id: int) -> Order | None:
        ...

    @abstractmethod
    async def get_by_external_number(self, number: int) -> Order | None:
        ...

    @abstractmethod
    async def assign_agent(self, order_id: int, agent_id: int) -> None:
        """Set the agent only if the order is still unassigned.

        Raises ConflictError if another process assigned it first.
        """
        ...

    @abstractmethod
    async def reassign_agent(self, order_id: int, agent_id: int) -> Order | None:
        """Unconditionally set the agent. Returns None for an unknown order."""
        ...

    @abstractmethod
    async def apply_status_change(self, order_id: int, change: StatusChange) -> Order | None:
        """Persist a status change as one atomic update.

        Must increment recall_attempts in the datastore and write the
        first-processing fields only where first_processed_at IS NULL.
        Returns the updated order, or None for an unknown order.
        """
        ...

    @abstractmethod
    async def set_recall_at(self, order_id: int, recall_at: datetime | None) -> Order | None:
        ...

    @abstractmethod
    async def get_due_recalls(
        self, now: datetime, since: datetime | None = None
    ) -> list[Order]:
        """Orders with since < recall_at <= now, oldest due first."""
        ...
