"""LeastLoadedPolicy — load-balanced agent selection with a random tie-break."""

from __future__ import annotations

import random

from orderdesk.domain.entities.agent import Agent
from orderdesk.domain.policies.agent_load import AgentLoadIndex


def pick_least_loaded(
    candidates: list[Agent],
    loads: AgentLoadIndex,
    rng: random.Random,
) -> Agent:
    """Pick the least-loaded candidate, ties broken uniformly at random.

    1. Sort candidates by (load ASC, id ASC) for a stable order.
    2. Keep the agents sharing the minimum load.
    3. Let *rng* choose among them.

    The caller must bump *loads* for the returned agent once the assignment
    is persisted.

    Args:
        candidates: non-empty list of eligible agents.
        loads: outstanding-order counts for the current batch.
        rng: injected random source, seed it for reproducible picks.

    Raises:
        ValueError: if candidates list is empty.
    """
    if not candidates:
        raise ValueError("Cannot pick from an empty candidate list")

    sorted_candidates = sorted(candidates, key=lambda a: (loads.load(a.id), a.id))
    min_load = loads.load(sorted_candidates[0].id)
    tied = [a for a in sorted_candidates if loads.load(a.id) == min_load]

    if len(tied) == 1:
        return tied[0]
    return rng.choice(tied)
