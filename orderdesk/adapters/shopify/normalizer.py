"""Shopify payload normalization — raw JSON dicts to domain value objects."""

from __future__ import annotations

from datetime import timezone
from typing import Any

import pydantic

from orderdesk.adapters.shopify.schemas import ShopifyOrderPayload, ShopifyProductPayload
from orderdesk.application.ports.payload_parser_port import PayloadParserPort
from orderdesk.domain.entities.product import Product
from orderdesk.domain.errors import ValidationError
from orderdesk.domain.value_objects.external_order import ExternalLineItem, ExternalOrder


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def parse_order(raw: dict[str, Any]) -> ExternalOrder:
    """Validate a Shopify order payload and convert it.

    Customer name falls back to the order name (``#1001``) and the phone to
    the billing address phone. Naive timestamps are taken as UTC.

    Raises:
        ValidationError: if required fields are missing or malformed.
    """
    try:
        payload = ShopifyOrderPayload.model_validate(raw)
    except pydantic.ValidationError as e:
        number = raw.get("order_number") if isinstance(raw, dict) else None
        raise ValidationError(f"Malformed order {number!r}: {e.error_count()} error(s)") from e

    customer_name = None
    if payload.customer:
        parts = (_clean(payload.customer.first_name), _clean(payload.customer.last_name))
        customer_name = " ".join(p for p in parts if p) or None
    customer_name = customer_name or payload.name

    customer_phone = None
    if payload.customer:
        customer_phone = _clean(payload.customer.phone)
    if customer_phone is None and payload.billing_address:
        customer_phone = _clean(payload.billing_address.phone)

    order_date = payload.created_at
    if order_date.tzinfo is None:
        order_date = order_date.replace(tzinfo=timezone.utc)

    line_items = tuple(
        ExternalLineItem(
            title=item.title.strip(),
            product_external_id=str(item.product_id) if item.product_id is not None else None,
        )
        for item in payload.line_items
    )

    return ExternalOrder(
        number=payload.order_number,
        customer_name=customer_name,
        customer_phone=customer_phone,
        order_date=order_date,
        total_price=payload.total_price,
        line_items=line_items,
    )


def parse_product(raw: dict[str, Any]) -> Product:
    """Convert a Shopify product payload; price comes from the first variant."""
    try:
        payload = ShopifyProductPayload.model_validate(raw)
    except pydantic.ValidationError as e:
        raise ValidationError(f"Malformed product {raw.get('id')!r}") from e

    price = payload.variants[0].price if payload.variants else None
    return Product(
        id=None,
        external_id=str(payload.id),
        title=payload.title.strip(),
        price=price or 0.0,
    )


class ShopifyPayloadParser(PayloadParserPort):
    """Shopify flavour of the payload parser port."""

    def parse_order(self, raw: dict[str, Any]) -> ExternalOrder:
        return parse_order(raw)

    def parse_product(self, raw: dict[str, Any]) -> Product:
        return parse_product(raw)
