"""Port interface for product catalog persistence."""

from abc import ABC, abstractmethod

from orderdesk.domain.entities.product import Product


class ProductRepository(ABC):
    @abstractmethod
    async def get_by_id(self, product_id: int) -> Product | None:
        ...

    @abstractmethod
    async def get_by_external_ids(self, external_ids: list[str]) -> list[Product]:
        ...

    @abstractmethod
    async def upsert(self, product: Product) -> Product:
        """Insert or update by external_id. Agent rule lists of an existing row are kept."""
        ...

    @abstractmethod
    async def update_agents(
        self,
        product_id: int,
        assigned_agent_ids: set[int] | None = None,
        hidden_for_agent_ids: set[int] | None = None,
    ) -> Product | None:
        ...
