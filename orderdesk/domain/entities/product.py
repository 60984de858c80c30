"""Product entity — a catalog item mirrored from the shop."""

from dataclasses import dataclass, field


@dataclass
class Product:
    id: int | None
    external_id: str
    title: str
    price: float = 0.0
    assigned_agent_ids: set[int] = field(default_factory=set)
    hidden_for_agent_ids: set[int] = field(default_factory=set)

    def is_specialized(self) -> bool:
        """A non-empty whitelist restricts the product to those agents."""
        return bool(self.assigned_agent_ids)

    def is_hidden_for(self, agent_id: int) -> bool:
        return agent_id in self.hidden_for_agent_ids
