"""Port interface for configured statuses."""

from abc import ABC, abstractmethod

from orderdesk.domain.entities.status import Status


class StatusRepository(ABC):
    @abstractmethod
    async def save(self, status: Status) -> Status:
        ...

    @abstractmethod
    async def get_by_id(self, status_id: int) -> Status | None:
        ...

    @abstractmethod
    async def get_by_name(self, name: str) -> Status | None:
        ...
