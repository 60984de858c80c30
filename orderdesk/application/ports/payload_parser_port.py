"""Port interface for turning raw shop payloads into domain objects."""

from abc import ABC, abstractmethod
from typing import Any

from orderdesk.domain.entities.product import Product
from orderdesk.domain.value_objects.external_order import ExternalOrder


class PayloadParserPort(ABC):
    @abstractmethod
    def parse_order(self, raw: dict[str, Any]) -> ExternalOrder:
        """Raises ValidationError for a malformed payload."""
        ...

    @abstractmethod
    def parse_product(self, raw: dict[str, Any]) -> Product:
        """Raises ValidationError for a malformed payload."""
        ...
