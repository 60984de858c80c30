"""Product catalog use cases — mirror the shop catalog, edit agent rules."""

from __future__ import annotations

import logging
from typing import Any

from orderdesk.application.ports.payload_parser_port import PayloadParserPort
from orderdesk.application.ports.product_repo import ProductRepository
from orderdesk.domain.entities.product import Product
from orderdesk.domain.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class SyncProductsUseCase:
    """Upsert shop products by external id.

    Titles and prices follow the shop; the agent whitelist/blacklist of an
    existing product is never touched by a sync.
    """

    def __init__(self, product_repo: ProductRepository, parser: PayloadParserPort):
        self._products = product_repo
        self._parser = parser

    async def execute(self, raw_products: list[dict[str, Any]]) -> int:
        upserted = 0
        for raw in raw_products:
            try:
                product = self._parser.parse_product(raw)
            except ValidationError as e:
                logger.warning("Skipping malformed product: %s", e)
                continue
            await self._products.upsert(product)
            upserted += 1

        logger.info("Product sync: %d/%d upserted", upserted, len(raw_products))
        return upserted


class UpdateProductAgentsUseCase:
    def __init__(self, product_repo: ProductRepository):
        self._products = product_repo

    async def execute(
        self,
        product_id: int,
        assigned_agent_ids: set[int] | None = None,
        hidden_for_agent_ids: set[int] | None = None,
    ) -> Product:
        product = await self._products.update_agents(
            product_id, assigned_agent_ids, hidden_for_agent_ids
        )
        if product is None:
            raise NotFoundError("Product", product_id)

        logger.info(
            "Product %s: assigned=%s hidden=%s",
            product.title, sorted(product.assigned_agent_ids), sorted(product.hidden_for_agent_ids),
        )
        return product
