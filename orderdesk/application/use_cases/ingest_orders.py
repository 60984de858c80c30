"""IngestOrdersUseCase — full pipeline: parse → dedup → persist → assign."""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from orderdesk.application.ports.agent_repo import AgentRepository
from orderdesk.application.ports.order_repo import OrderRepository
from orderdesk.application.ports.payload_parser_port import PayloadParserPort
from orderdesk.application.ports.product_repo import ProductRepository
from orderdesk.domain.entities.agent import Agent
from orderdesk.domain.entities.order import Order
from orderdesk.domain.entities.product import Product
from orderdesk.domain.errors import ConflictError, DatastoreError, ValidationError
from orderdesk.domain.policies.agent_load import AgentLoadIndex
from orderdesk.domain.policies.compatibility import eligible_agents
from orderdesk.domain.policies.least_loaded import pick_least_loaded
from orderdesk.domain.value_objects.enums import AgentRole
from orderdesk.domain.value_objects.external_order import ExternalOrder

logger = logging.getLogger(__name__)

DEFAULT_ASSIGNABLE_ROLES = (AgentRole.AGENT.value, AgentRole.AGENT_TEST.value, AgentRole.SUPERVISOR.value)


@dataclass
class IngestionResult:
    """Summary of one ingestion batch."""

    inserted_count: int = 0
    assigned_count: int = 0
    skipped_count: int = 0
    failed_count: int = 0


def build_product_note(resolved: list[Product], external: ExternalOrder) -> str | None:
    """Resolved product titles, falling back to the raw line-item titles."""
    titles = [p.title for p in resolved if p.title] or external.line_item_titles()
    return ", ".join(titles) if titles else None


class IngestOrdersUseCase:
    """Inserts new shop orders and spreads them across eligible agents."""

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        agent_repo: AgentRepository,
        parser: PayloadParserPort,
        rng: random.Random | None = None,
        assignable_roles: Iterable[str] = DEFAULT_ASSIGNABLE_ROLES,
    ):
        self._orders = order_repo
        self._products = product_repo
        self._agents = agent_repo
        self._parser = parser
        self._rng = rng or random.Random()
        self._roles = tuple(assignable_roles)

    async def execute(self, raw_orders: list[dict[str, Any]]) -> IngestionResult:
        """Ingest one batch of raw shop orders.

        Pipeline:
        1. Parse and validate each raw order
        2. Skip external numbers that already exist
        3. Resolve products, build the product note, persist
        4. Seed the load index once, then assign new orders in insertion order
        """
        result = IngestionResult()
        inserted: list[Order] = []

        for raw in raw_orders:
            try:
                order = await self._insert_one(raw)
            except ValidationError as e:
                result.failed_count += 1
                logger.warning("Rejected malformed order: %s", e)
                continue
            except DatastoreError:
                result.failed_count += 1
                logger.exception("Could not persist order %r", raw.get("order_number"))
                continue

            if order is None:
                result.skipped_count += 1
            else:
                result.inserted_count += 1
                inserted.append(order)

        if inserted:
            result.assigned_count = await self._assign_batch(inserted)

        logger.info(
            "Ingestion batch complete: %d inserted, %d assigned, %d skipped, %d failed",
            result.inserted_count, result.assigned_count,
            result.skipped_count, result.failed_count,
        )
        return result

    async def _insert_one(self, raw: dict[str, Any]) -> Order | None:
        """Persist one raw order. Returns None when it is a duplicate."""
        external = self._parser.parse_order(raw)

        if await self._orders.get_by_external_number(external.number):
            logger.info("Order #%d already exists → skip", external.number)
            return None

        external_ids = external.product_external_ids()
        products = await self._products.get_by_external_ids(external_ids)
        products.sort(key=lambda p: external_ids.index(p.external_id))
        order = Order(
            id=None,
            external_number=external.number,
            customer_name=external.customer_name,
            customer_phone=external.customer_phone,
            product_note=build_product_note(products, external),
            order_date=external.order_date,
            total_price=external.total_price,
            products=products,
        )

        try:
            order = await self._orders.create(order)
        except ConflictError:
            # A concurrent batch inserted the same number between lookup and insert
            logger.info("Order #%d inserted concurrently → skip", external.number)
            return None

        logger.info(
            "Order #%d saved (id=%s, %d product(s) resolved)",
            order.external_number, order.id, len(products),
        )
        return order

    async def _assign_batch(self, orders: list[Order]) -> int:
        roster = await self._agents.get_active(self._roles)
        counts = await self._agents.count_outstanding_per_agent()
        loads = AgentLoadIndex.from_counts(counts, (a.id for a in roster))
        logger.info("Assigning %d orders across %d agents (loads: %s)", len(orders), len(roster), loads.snapshot())

        assigned = 0
        for order in orders:
            try:
                if await self._assign_one(order, roster, loads):
                    assigned += 1
            except DatastoreError:
                logger.exception("Could not assign order #%d", order.external_number)
        return assigned

    async def _assign_one(self, order: Order, roster: list[Agent], loads: AgentLoadIndex) -> bool:
        eligible = eligible_agents(order.products, roster)
        if not eligible:
            logger.warning("Order #%d: no eligible agent → left unassigned", order.external_number)
            return False

        chosen = pick_least_loaded(eligible, loads, self._rng)
        try:
            await self._orders.assign_agent(order.id, chosen.id)
        except ConflictError:
            logger.info("Order #%d was assigned by another process → skip", order.external_number)
            return False

        order.agent_id = chosen.id
        new_load = loads.increment(chosen.id)
        logger.info(
            "Order #%d → Agent %s (id=%d, load now %d, %d eligible)",
            order.external_number, chosen.name, chosen.id, new_load, len(eligible),
        )
        return True
