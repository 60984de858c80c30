"""Status entity — a configurable call outcome, optionally scheduling a recall."""

from dataclasses import dataclass


@dataclass
class Status:
    id: int | None
    name: str
    recall_after_h: int | None = None
    color: str = "#6366f1"
    is_archived: bool = False

    def schedules_recall(self) -> bool:
        return self.recall_after_h is not None
