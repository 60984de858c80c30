"""Tests for StatusTransitionPolicy."""

from datetime import datetime, timedelta, timezone

from orderdesk.domain.entities.status import Status
from orderdesk.domain.policies.status_transition import minutes_between, plan_status_change

ORDER_DATE = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
NOW = datetime(2026, 3, 1, 10, 30, tzinfo=timezone.utc)

CONFIRMED = Status(id=1, name="Confirmed", recall_after_h=24)
CANCELLED = Status(id=2, name="Cancelled")


def test_minutes_between_rounds_to_nearest():
    assert minutes_between(ORDER_DATE, ORDER_DATE + timedelta(seconds=29)) == 0
    assert minutes_between(ORDER_DATE, ORDER_DATE + timedelta(seconds=89)) == 1
    assert minutes_between(ORDER_DATE, ORDER_DATE + timedelta(seconds=91)) == 2
    assert minutes_between(ORDER_DATE, NOW) == 90


def test_minutes_between_half_minute_rounds_up():
    assert minutes_between(ORDER_DATE, ORDER_DATE + timedelta(seconds=30)) == 1
    assert minutes_between(ORDER_DATE, ORDER_DATE + timedelta(seconds=90)) == 2
    assert minutes_between(ORDER_DATE, ORDER_DATE + timedelta(seconds=150)) == 3


def test_first_status_claims_processing_and_schedules_recall():
    change = plan_status_change(ORDER_DATE, False, CONFIRMED, NOW)
    assert change.status_id == 1
    assert change.recall_at == NOW + timedelta(hours=24)
    assert change.first_processed_at == NOW
    assert change.processing_time_min == 90
    assert change.schedules_recall
    assert change.claims_first_processing


def test_already_processed_order_keeps_first_processing():
    change = plan_status_change(ORDER_DATE, True, CONFIRMED, NOW)
    assert change.first_processed_at is None
    assert change.processing_time_min is None
    assert change.schedules_recall


def test_status_without_recall_leaves_recall_alone():
    change = plan_status_change(ORDER_DATE, False, CANCELLED, NOW)
    assert change.recall_at is None
    assert not change.schedules_recall
    assert change.claims_first_processing


def test_clearing_status_touches_nothing_else():
    change = plan_status_change(ORDER_DATE, False, None, NOW)
    assert change.status_id is None
    assert not change.schedules_recall
    assert not change.claims_first_processing
