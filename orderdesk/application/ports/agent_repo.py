"""Port interface for agent roster lookups."""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from orderdesk.domain.entities.agent import Agent


class AgentRepository(ABC):
    @abstractmethod
    async def save(self, agent: Agent) -> Agent:
        ...

    @abstractmethod
    async def get_by_id(self, agent_id: int) -> Agent | None:
        ...

    @abstractmethod
    async def get_active(self, roles: Iterable[str]) -> list[Agent]:
        """Active agents with order visibility whose role is in *roles*, by id."""
        ...

    @abstractmethod
    async def count_outstanding_per_agent(self) -> dict[int, int]:
        """Assigned orders that have no status yet, grouped by agent."""
        ...
