"""Tests for domain entities."""

from datetime import datetime, timedelta, timezone

from orderdesk.domain.entities.agent import Agent
from orderdesk.domain.entities.order import Order
from orderdesk.domain.entities.product import Product
from orderdesk.domain.entities.status import Status
from orderdesk.domain.value_objects.external_order import ExternalLineItem, ExternalOrder

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _order(**kwargs) -> Order:
    defaults = dict(
        id=1, external_number=1001, customer_name="Amina B.", customer_phone=None,
        product_note=None, order_date=NOW - timedelta(hours=2), total_price=49.9,
    )
    defaults.update(kwargs)
    return Order(**defaults)


def test_agent_assignable_when_active_and_visible():
    assert Agent(id=1, name="A").is_assignable()


def test_inactive_agent_not_assignable():
    assert not Agent(id=1, name="A", is_active=False).is_assignable()


def test_agent_without_order_visibility_not_assignable():
    assert not Agent(id=1, name="A", can_view_orders=False).is_assignable()


def test_product_specialized_only_with_whitelist():
    assert not Product(id=1, external_id="10", title="Widget").is_specialized()
    assert Product(id=1, external_id="10", title="Widget", assigned_agent_ids={3}).is_specialized()


def test_product_hidden_for():
    p = Product(id=1, external_id="10", title="Widget", hidden_for_agent_ids={4})
    assert p.is_hidden_for(4)
    assert not p.is_hidden_for(5)


def test_status_schedules_recall():
    assert Status(id=1, name="No answer", recall_after_h=2).schedules_recall()
    assert not Status(id=2, name="Confirmed").schedules_recall()


def test_order_defaults():
    o = _order()
    assert not o.is_assigned()
    assert not o.is_processed()
    assert o.recall_attempts == 0
    assert o.products == []


def test_order_recall_due_boundaries():
    assert not _order().is_recall_due(NOW)
    assert _order(recall_at=NOW).is_recall_due(NOW)
    assert not _order(recall_at=NOW + timedelta(seconds=1)).is_recall_due(NOW)


def test_order_product_ids_skip_unsaved():
    o = _order(products=[
        Product(id=7, external_id="10", title="A"),
        Product(id=None, external_id="11", title="B"),
    ])
    assert o.product_ids() == [7]


def test_external_order_distinct_product_ids_in_order():
    ext = ExternalOrder(
        number=1001, customer_name="X", customer_phone=None, order_date=NOW, total_price=0.0,
        line_items=(
            ExternalLineItem("Widget", "20"),
            ExternalLineItem("Gadget", "10"),
            ExternalLineItem("Widget again", "20"),
            ExternalLineItem("Custom engraving", None),
        ),
    )
    assert ext.product_external_ids() == ["20", "10"]
    assert ext.line_item_titles() == ["Widget", "Gadget", "Widget again", "Custom engraving"]
