"""StatusTransitionPolicy — derive the field updates for a status change."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from orderdesk.domain.entities.status import Status


@dataclass(frozen=True)
class StatusChange:
    """Fields to write in one atomic update.

    ``recall_at`` set  →  overwrite recall_at and bump recall_attempts by one.
    ``first_processed_at`` set  →  write it and ``processing_time_min`` only if
    the stored first_processed_at is still NULL.
    """

    status_id: int | None
    recall_at: datetime | None = None
    first_processed_at: datetime | None = None
    processing_time_min: int | None = None

    @property
    def schedules_recall(self) -> bool:
        return self.recall_at is not None

    @property
    def claims_first_processing(self) -> bool:
        return self.first_processed_at is not None


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from *start* to *end*, half a minute rounds up."""
    return math.floor((end - start).total_seconds() / 60 + 0.5)


def plan_status_change(
    order_date: datetime,
    already_processed: bool,
    status: Status | None,
    now: datetime,
) -> StatusChange:
    """Pure function: given the order and the target status, plan the update.

    Business rules:
      1. First non-null status  →  first_processed_at = now,
         processing_time_min = minutes(order_date, now).
      2. Status with recall_after_h  →  recall_at = now + recall_after_h hours
         (the counter bump happens in the datastore).
      3. Status without recall_after_h, or clearing the status  →  recall_at
         is left as it is.

    ``already_processed`` only avoids a pointless conditional write; the
    datastore still guards first_processed_at with "set only if NULL".
    """
    status_id = status.id if status is not None else None

    first_processed_at = None
    processing_time_min = None
    if status_id is not None and not already_processed:
        first_processed_at = now
        processing_time_min = minutes_between(order_date, now)

    recall_at = None
    if status is not None and status.recall_after_h is not None:
        recall_at = now + timedelta(hours=status.recall_after_h)

    return StatusChange(
        status_id=status_id,
        recall_at=recall_at,
        first_processed_at=first_processed_at,
        processing_time_min=processing_time_min,
    )
