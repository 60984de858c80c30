"""Port interface for the shop that orders come from."""

from abc import ABC, abstractmethod
from typing import Any


class OrderSourcePort(ABC):
    @abstractmethod
    async def fetch_orders(self) -> list[dict[str, Any]]:
        """Return raw order payloads, as the shop sends them."""
        ...

    @abstractmethod
    async def fetch_products(self) -> list[dict[str, Any]]:
        ...
