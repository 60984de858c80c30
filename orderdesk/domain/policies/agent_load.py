"""AgentLoadIndex — per-agent outstanding-order counts for one ingestion batch."""

from __future__ import annotations

from collections.abc import Iterable, Mapping


class AgentLoadIndex:
    """Outstanding-order count per agent.

    Seeded once per batch from persisted aggregate counts and then bumped in
    memory after every assignment, so later orders in the same batch see the
    load created by earlier ones. Counts only go up.
    """

    def __init__(self, counts: Mapping[int, int] | None = None):
        self._counts: dict[int, int] = {}
        for agent_id, count in (counts or {}).items():
            if count < 0:
                raise ValueError(f"Negative load for agent {agent_id}: {count}")
            self._counts[agent_id] = count

    @classmethod
    def from_counts(
        cls, counts: Mapping[int, int], agent_ids: Iterable[int] = ()
    ) -> AgentLoadIndex:
        """Build an index where every roster agent has an entry (0 if idle)."""
        merged = {agent_id: 0 for agent_id in agent_ids}
        merged.update(counts)
        return cls(merged)

    def load(self, agent_id: int) -> int:
        return self._counts.get(agent_id, 0)

    def increment(self, agent_id: int) -> int:
        """Record one more outstanding order for the agent; returns the new load."""
        self._counts[agent_id] = self._counts.get(agent_id, 0) + 1
        return self._counts[agent_id]

    def snapshot(self) -> dict[int, int]:
        return dict(self._counts)

    def __len__(self) -> int:
        return len(self._counts)

    def __repr__(self) -> str:
        return f"AgentLoadIndex({self._counts!r})"
