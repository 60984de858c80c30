"""Pydantic models for the parts of Shopify payloads we read."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class _ShopifyModel(BaseModel):
    # Shopify sends far more than we need
    model_config = ConfigDict(extra="ignore")


class ShopifyCustomer(_ShopifyModel):
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None


class ShopifyAddress(_ShopifyModel):
    phone: str | None = None


class ShopifyLineItem(_ShopifyModel):
    title: str = ""
    product_id: int | str | None = None


class ShopifyOrderPayload(_ShopifyModel):
    order_number: int
    name: str = ""
    note: str | None = None
    created_at: datetime
    total_price: float = 0.0
    customer: ShopifyCustomer | None = None
    billing_address: ShopifyAddress | None = None
    line_items: list[ShopifyLineItem] = Field(default_factory=list)


class ShopifyVariant(_ShopifyModel):
    price: float | None = None


class ShopifyProductPayload(_ShopifyModel):
    id: int | str
    title: str
    variants: list[ShopifyVariant] = Field(default_factory=list)
