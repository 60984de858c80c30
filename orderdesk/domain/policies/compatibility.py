"""CompatibilityFilter — which agents may take an order, given its products."""

from __future__ import annotations

from collections.abc import Iterable

from orderdesk.domain.entities.agent import Agent
from orderdesk.domain.entities.product import Product


def agent_satisfies(agent_id: int, products: Iterable[Product]) -> bool:
    """Check whether one agent may handle an order made of *products*.

    Business rules:
      1. Any product listing the agent in hidden_for_agent_ids  →  excluded.
      2. Every specialized product (non-empty assigned_agent_ids) must list
         the agent in its whitelist.
      3. No specialized product  →  every non-hidden agent qualifies.

    Rules are *conjunctive*: an order with two specialized products needs an
    agent present on both whitelists.
    """
    for product in products:
        if product.is_hidden_for(agent_id):
            return False
        if product.is_specialized() and agent_id not in product.assigned_agent_ids:
            return False
    return True


def eligible_agents(products: list[Product], agents: list[Agent]) -> list[Agent]:
    """Pure function: filter the roster down to agents allowed on this order.

    Roster order is preserved. An empty result is not an error, the order
    simply stays unassigned.
    """
    return [
        a for a in agents
        if a.id is not None and a.is_assignable() and agent_satisfies(a.id, products)
    ]
