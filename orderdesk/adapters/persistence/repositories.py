"""SQLAlchemy repository implementations."""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from datetime import datetime

from sqlalchemy import case, func, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from orderdesk.adapters.persistence.models import (
    AgentModel,
    OrderModel,
    ProductModel,
    StatusModel,
    order_products,
)
from orderdesk.application.ports.agent_repo import AgentRepository
from orderdesk.application.ports.order_repo import OrderRepository
from orderdesk.application.ports.product_repo import ProductRepository
from orderdesk.application.ports.status_repo import StatusRepository
from orderdesk.domain.entities.agent import Agent
from orderdesk.domain.entities.order import Order
from orderdesk.domain.entities.product import Product
from orderdesk.domain.entities.status import Status
from orderdesk.domain.errors import ConflictError, DatastoreError
from orderdesk.domain.policies.status_transition import StatusChange
from orderdesk.domain.value_objects.enums import AgentRole

# ─── Mappers ─────────────────────────────────────────────────────────


def _agent_to_domain(m: AgentModel) -> Agent:
    return Agent(
        id=m.id,
        name=m.name,
        role=AgentRole(m.role),
        phone=m.phone,
        is_active=m.is_active,
        can_view_orders=m.can_view_orders,
    )


def _product_to_domain(m: ProductModel) -> Product:
    return Product(
        id=m.id,
        external_id=m.external_id,
        title=m.title,
        price=m.price,
        assigned_agent_ids=set(m.assigned_agent_ids or []),
        hidden_for_agent_ids=set(m.hidden_for_agent_ids or []),
    )


def _status_to_domain(m: StatusModel) -> Status:
    return Status(
        id=m.id,
        name=m.name,
        recall_after_h=m.recall_after_h,
        color=m.color,
        is_archived=m.is_archived,
    )


def _order_to_domain(m: OrderModel, products: list[Product] | None = None) -> Order:
    return Order(
        id=m.id,
        external_number=m.external_number,
        customer_name=m.customer_name,
        customer_phone=m.customer_phone,
        product_note=m.product_note,
        order_date=m.order_date,
        total_price=m.total_price,
        agent_id=m.agent_id,
        status_id=m.status_id,
        recall_at=m.recall_at,
        first_processed_at=m.first_processed_at,
        processing_time_min=m.processing_time_min,
        recall_attempts=m.recall_attempts,
        products=products or [],
        created_at=m.created_at,
    )


@asynccontextmanager
async def _datastore_errors(action: str) -> AsyncIterator[None]:
    """Re-raise driver failures as DatastoreError."""
    try:
        yield
    except SQLAlchemyError as e:
        raise DatastoreError(f"{action} failed: {e}") from e


# ─── Repositories ────────────────────────────────────────────────────


class SqlOrderRepository(OrderRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def create(self, order: Order) -> Order:
        m = OrderModel(
            external_number=order.external_number,
            customer_name=order.customer_name,
            customer_phone=order.customer_phone,
            product_note=order.product_note,
            order_date=order.order_date,
            total_price=order.total_price,
            agent_id=order.agent_id,
            status_id=order.status_id,
            recall_attempts=order.recall_attempts,
        )
        try:
            # Savepoint: a failed insert must not roll back the rest of the batch
            async with self._s.begin_nested():
                self._s.add(m)
                await self._s.flush()
                product_ids = order.product_ids()
                if product_ids:
                    await self._s.execute(
                        insert(order_products),
                        [{"order_id": m.id, "product_id": pid} for pid in product_ids],
                    )
        except IntegrityError as e:
            raise ConflictError(
                f"Order #{order.external_number} already exists"
            ) from e
        except SQLAlchemyError as e:
            raise DatastoreError(f"Insert of order #{order.external_number} failed: {e}") from e

        order.id = m.id
        return order

    async def get_by_id(self, order_id: int) -> Order | None:
        async with _datastore_errors("Order lookup"):
            result = await self._s.execute(
                select(OrderModel)
                .options(selectinload(OrderModel.products))
                .where(OrderModel.id == order_id)
            )
            m = result.scalar_one_or_none()
            if m is None:
                return None
            return _order_to_domain(m, [_product_to_domain(p) for p in m.products])

    async def get_by_external_number(self, number: int) -> Order | None:
        # Runs mid-batch: a failed lookup must not abort the batch transaction
        async with _datastore_errors("Order lookup"), self._s.begin_nested():
            result = await self._s.execute(
                select(OrderModel).where(OrderModel.external_number == number)
            )
            m = result.scalar_one_or_none()
        return _order_to_domain(m) if m else None

    async def assign_agent(self, order_id: int, agent_id: int) -> None:
        async with _datastore_errors("Agent assignment"), self._s.begin_nested():
            result = await self._s.execute(
                update(OrderModel)
                .where(OrderModel.id == order_id, OrderModel.agent_id.is_(None))
                .values(agent_id=agent_id)
                .execution_options(synchronize_session=False)
            )
        if result.rowcount == 0:
            raise ConflictError(f"Order {order_id} is already assigned")

    async def reassign_agent(self, order_id: int, agent_id: int) -> Order | None:
        return await self._update_returning(order_id, {"agent_id": agent_id}, "Reassignment")

    async def apply_status_change(self, order_id: int, change: StatusChange) -> Order | None:
        values: dict = {"status_id": change.status_id}

        if change.schedules_recall:
            values["recall_at"] = change.recall_at
            values["recall_attempts"] = OrderModel.recall_attempts + 1

        if change.claims_first_processing:
            # Set-once: only the writer that still sees NULL wins
            unset = OrderModel.first_processed_at.is_(None)
            values["first_processed_at"] = case(
                (unset, change.first_processed_at), else_=OrderModel.first_processed_at
            )
            values["processing_time_min"] = case(
                (unset, change.processing_time_min), else_=OrderModel.processing_time_min
            )

        return await self._update_returning(order_id, values, "Status change")

    async def set_recall_at(self, order_id: int, recall_at: datetime | None) -> Order | None:
        return await self._update_returning(order_id, {"recall_at": recall_at}, "Recall update")

    async def get_due_recalls(
        self, now: datetime, since: datetime | None = None
    ) -> list[Order]:
        stmt = select(OrderModel).where(
            OrderModel.recall_at.is_not(None),
            OrderModel.recall_at <= now,
        )
        if since is not None:
            stmt = stmt.where(OrderModel.recall_at > since)
        stmt = stmt.order_by(OrderModel.recall_at, OrderModel.id)

        async with _datastore_errors("Due recall query"):
            result = await self._s.execute(stmt)
            return [_order_to_domain(m) for m in result.scalars()]

    async def _update_returning(self, order_id: int, values: dict, action: str) -> Order | None:
        async with _datastore_errors(action):
            result = await self._s.execute(
                update(OrderModel)
                .where(OrderModel.id == order_id)
                .values(**values)
                .returning(OrderModel)
                .execution_options(synchronize_session=False, populate_existing=True)
            )
            m = result.scalar_one_or_none()
            await self._s.flush()
            return _order_to_domain(m) if m else None


class SqlAgentRepository(AgentRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, agent: Agent) -> Agent:
        m = AgentModel(
            name=agent.name,
            phone=agent.phone,
            role=agent.role.value,
            is_active=agent.is_active,
            can_view_orders=agent.can_view_orders,
        )
        async with _datastore_errors("Agent insert"):
            self._s.add(m)
            await self._s.flush()
        agent.id = m.id
        return agent

    async def get_by_id(self, agent_id: int) -> Agent | None:
        async with _datastore_errors("Agent lookup"):
            m = await self._s.get(AgentModel, agent_id)
        return _agent_to_domain(m) if m else None

    async def get_active(self, roles: Iterable[str]) -> list[Agent]:
        async with _datastore_errors("Roster query"):
            result = await self._s.execute(
                select(AgentModel)
                .where(
                    AgentModel.is_active.is_(True),
                    AgentModel.can_view_orders.is_(True),
                    AgentModel.role.in_(list(roles)),
                )
                .order_by(AgentModel.id)
            )
            return [_agent_to_domain(m) for m in result.scalars()]

    async def count_outstanding_per_agent(self) -> dict[int, int]:
        async with _datastore_errors("Load aggregation"):
            result = await self._s.execute(
                select(OrderModel.agent_id, func.count(OrderModel.id))
                .where(OrderModel.agent_id.is_not(None), OrderModel.status_id.is_(None))
                .group_by(OrderModel.agent_id)
            )
            return {agent_id: count for agent_id, count in result.all()}


class SqlProductRepository(ProductRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def get_by_id(self, product_id: int) -> Product | None:
        async with _datastore_errors("Product lookup"):
            m = await self._s.get(ProductModel, product_id)
        return _product_to_domain(m) if m else None

    async def get_by_external_ids(self, external_ids: list[str]) -> list[Product]:
        if not external_ids:
            return []
        async with _datastore_errors("Product lookup"), self._s.begin_nested():
            result = await self._s.execute(
                select(ProductModel).where(ProductModel.external_id.in_(external_ids))
            )
            return [_product_to_domain(m) for m in result.scalars()]

    async def upsert(self, product: Product) -> Product:
        async with _datastore_errors("Product upsert"):
            result = await self._s.execute(
                select(ProductModel).where(ProductModel.external_id == product.external_id)
            )
            m = result.scalar_one_or_none()
            if m is None:
                m = ProductModel(
                    external_id=product.external_id,
                    title=product.title,
                    price=product.price,
                    assigned_agent_ids=sorted(product.assigned_agent_ids),
                    hidden_for_agent_ids=sorted(product.hidden_for_agent_ids),
                )
                self._s.add(m)
            else:
                m.title = product.title
                m.price = product.price
            await self._s.flush()
        return _product_to_domain(m)

    async def update_agents(
        self,
        product_id: int,
        assigned_agent_ids: set[int] | None = None,
        hidden_for_agent_ids: set[int] | None = None,
    ) -> Product | None:
        async with _datastore_errors("Product agents update"):
            m = await self._s.get(ProductModel, product_id)
            if m is None:
                return None
            if assigned_agent_ids is not None:
                m.assigned_agent_ids = sorted(assigned_agent_ids)
            if hidden_for_agent_ids is not None:
                m.hidden_for_agent_ids = sorted(hidden_for_agent_ids)
            await self._s.flush()
        return _product_to_domain(m)


class SqlStatusRepository(StatusRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, status: Status) -> Status:
        m = StatusModel(
            name=status.name,
            color=status.color,
            recall_after_h=status.recall_after_h,
            is_archived=status.is_archived,
        )
        async with _datastore_errors("Status insert"):
            self._s.add(m)
            await self._s.flush()
        status.id = m.id
        return status

    async def get_by_id(self, status_id: int) -> Status | None:
        async with _datastore_errors("Status lookup"):
            m = await self._s.get(StatusModel, status_id)
        return _status_to_domain(m) if m else None

    async def get_by_name(self, name: str) -> Status | None:
        async with _datastore_errors("Status lookup"):
            result = await self._s.execute(select(StatusModel).where(StatusModel.name == name))
            m = result.scalar_one_or_none()
        return _status_to_domain(m) if m else None
