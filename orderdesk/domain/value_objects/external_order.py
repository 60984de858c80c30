"""ExternalOrder — a shop order as received, before it becomes an Order."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class ExternalLineItem:
    title: str
    product_external_id: str | None = None


@dataclass(frozen=True)
class ExternalOrder:
    number: int
    customer_name: str
    customer_phone: str | None
    order_date: datetime
    total_price: float
    line_items: tuple[ExternalLineItem, ...] = field(default_factory=tuple)

    def product_external_ids(self) -> list[str]:
        """Distinct referenced product ids, in line-item order."""
        seen: list[str] = []
        for item in self.line_items:
            if item.product_external_id and item.product_external_id not in seen:
                seen.append(item.product_external_id)
        return seen

    def line_item_titles(self) -> list[str]:
        return [item.title for item in self.line_items if item.title]
