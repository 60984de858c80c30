"""Order entity — a customer order the call center must confirm."""

from dataclasses import dataclass, field
from datetime import datetime

from orderdesk.domain.entities.product import Product


@dataclass
class Order:
    id: int | None
    external_number: int
    customer_name: str
    customer_phone: str | None
    product_note: str | None
    order_date: datetime
    total_price: float
    agent_id: int | None = None
    status_id: int | None = None
    recall_at: datetime | None = None
    first_processed_at: datetime | None = None
    processing_time_min: int | None = None
    recall_attempts: int = 0
    products: list[Product] = field(default_factory=list)
    created_at: datetime | None = None

    def is_assigned(self) -> bool:
        return self.agent_id is not None

    def is_processed(self) -> bool:
        return self.first_processed_at is not None

    def is_recall_due(self, now: datetime) -> bool:
        return self.recall_at is not None and self.recall_at <= now

    def product_ids(self) -> list[int]:
        return [p.id for p in self.products if p.id is not None]
