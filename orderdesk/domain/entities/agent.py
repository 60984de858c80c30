"""Agent entity — a call-center employee who handles orders."""

from dataclasses import dataclass

from orderdesk.domain.value_objects.enums import AgentRole


@dataclass
class Agent:
    id: int | None
    name: str
    role: AgentRole = AgentRole.AGENT
    phone: str | None = None
    is_active: bool = True
    can_view_orders: bool = True

    def is_assignable(self) -> bool:
        return self.is_active and self.can_view_orders
