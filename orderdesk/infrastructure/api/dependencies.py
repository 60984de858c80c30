"""FastAPI dependency injection — wires adapters into use cases."""

from __future__ import annotations

import random

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.adapters.persistence.database import get_session
from orderdesk.adapters.persistence.repositories import (
    SqlAgentRepository,
    SqlOrderRepository,
    SqlProductRepository,
    SqlStatusRepository,
)
from orderdesk.adapters.shopify.client import ShopifyClient
from orderdesk.adapters.shopify.normalizer import ShopifyPayloadParser
from orderdesk.application.ports.order_source_port import OrderSourcePort
from orderdesk.application.ports.payload_parser_port import PayloadParserPort
from orderdesk.application.use_cases.change_order_status import ChangeOrderStatusUseCase
from orderdesk.application.use_cases.ingest_orders import IngestOrdersUseCase
from orderdesk.application.use_cases.list_due_recalls import ListDueRecallsUseCase
from orderdesk.application.use_cases.manage_orders import ReassignOrderUseCase, SetRecallUseCase
from orderdesk.application.use_cases.sync_products import (
    SyncProductsUseCase,
    UpdateProductAgentsUseCase,
)
from orderdesk.config import settings


def get_order_source() -> OrderSourcePort:
    return ShopifyClient()


def get_payload_parser() -> PayloadParserPort:
    return ShopifyPayloadParser()


def get_ingest_orders_uc(
    session: AsyncSession = Depends(get_session),
    parser: PayloadParserPort = Depends(get_payload_parser),
) -> IngestOrdersUseCase:
    # Fresh RNG per batch; seeded only when ASSIGNMENT_SEED is set
    return IngestOrdersUseCase(
        order_repo=SqlOrderRepository(session),
        product_repo=SqlProductRepository(session),
        agent_repo=SqlAgentRepository(session),
        parser=parser,
        rng=random.Random(settings.assignment_seed),
        assignable_roles=settings.assignable_roles,
    )


def get_change_status_uc(
    session: AsyncSession = Depends(get_session),
) -> ChangeOrderStatusUseCase:
    return ChangeOrderStatusUseCase(
        order_repo=SqlOrderRepository(session),
        status_repo=SqlStatusRepository(session),
    )


def get_due_recalls_uc(
    session: AsyncSession = Depends(get_session),
) -> ListDueRecallsUseCase:
    return ListDueRecallsUseCase(order_repo=SqlOrderRepository(session))


def get_reassign_order_uc(
    session: AsyncSession = Depends(get_session),
) -> ReassignOrderUseCase:
    return ReassignOrderUseCase(
        order_repo=SqlOrderRepository(session),
        agent_repo=SqlAgentRepository(session),
    )


def get_set_recall_uc(
    session: AsyncSession = Depends(get_session),
) -> SetRecallUseCase:
    return SetRecallUseCase(order_repo=SqlOrderRepository(session))


def get_sync_products_uc(
    session: AsyncSession = Depends(get_session),
    parser: PayloadParserPort = Depends(get_payload_parser),
) -> SyncProductsUseCase:
    return SyncProductsUseCase(product_repo=SqlProductRepository(session), parser=parser)


def get_update_product_agents_uc(
    session: AsyncSession = Depends(get_session),
) -> UpdateProductAgentsUseCase:
    return UpdateProductAgentsUseCase(product_repo=SqlProductRepository(session))
