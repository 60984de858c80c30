"""Seed agents, statuses and products from CSV exports.

Usage:
    python -m orderdesk.tools.seed_db
    python -m orderdesk.tools.seed_db --data-dir exports
    python -m orderdesk.tools.seed_db --drop  # drop existing data first
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.adapters.csv_loader.loader import load_agents, load_products, load_statuses
from orderdesk.adapters.persistence.database import async_session_factory
from orderdesk.adapters.persistence.models import (
    AgentModel,
    OrderModel,
    ProductModel,
    StatusModel,
    order_products,
)
from orderdesk.config import settings
from orderdesk.domain.value_objects.enums import AgentRole

logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(message)s")
logger = logging.getLogger(__name__)


def _normalize_role(raw: str) -> str:
    """Map a free-form role to an AgentRole value (unknown → AGENT)."""
    key = raw.strip().upper().replace(" ", "_").replace("-", "_")
    try:
        return AgentRole(key).value
    except ValueError:
        logger.warning("Unknown role %r, defaulting to AGENT", raw)
        return AgentRole.AGENT.value


async def _drop_data(session: AsyncSession) -> None:
    """Delete all data in correct order (respecting FK constraints)."""
    await session.execute(delete(order_products))
    for model in [OrderModel, ProductModel, StatusModel, AgentModel]:
        await session.execute(delete(model))
    await session.commit()
    logger.info("Dropped all existing data")


async def seed(data_dir: Path, drop: bool = False) -> dict[str, int]:
    """Main seed function. Returns counts of seeded records."""
    counts = {"agents": 0, "statuses": 0, "products": 0}

    agent_csv = _find_csv(data_dir, ["agents", "users", "utilisateurs"])
    status_csv = _find_csv(data_dir, ["statuses", "status", "statuts"])
    product_csv = _find_csv(data_dir, ["products", "produits"])

    if not agent_csv:
        raise FileNotFoundError(
            f"No agents CSV found in {data_dir}. Expected something like agents.csv"
        )

    async with async_session_factory() as session:
        if drop:
            await _drop_data(session)

        # 1. Seed agents (phone is the natural key, name when phone is missing)
        for ad in load_agents(agent_csv):
            if ad["phone"]:
                clause = AgentModel.phone == ad["phone"]
            else:
                clause = AgentModel.name == ad["name"]
            existing = await session.execute(select(AgentModel).where(clause))
            if existing.scalar_one_or_none():
                logger.debug("Agent '%s' already exists, skipping", ad["name"])
                continue

            session.add(AgentModel(
                name=ad["name"],
                phone=ad["phone"],
                role=_normalize_role(ad["role"]),
                is_active=ad["is_active"],
                can_view_orders=ad["can_view_orders"],
            ))
            counts["agents"] += 1
        await session.commit()

        # 2. Seed statuses
        if status_csv:
            for sd in load_statuses(status_csv):
                existing = await session.execute(
                    select(StatusModel).where(StatusModel.name == sd["name"])
                )
                if existing.scalar_one_or_none():
                    logger.debug("Status '%s' already exists, skipping", sd["name"])
                    continue
                session.add(StatusModel(
                    name=sd["name"],
                    recall_after_h=sd["recall_after_h"],
                    color=sd["color"],
                ))
                counts["statuses"] += 1
            await session.commit()
        else:
            logger.info("No statuses CSV found — skipping status import")

        # 3. Seed products with their agent rules
        if product_csv:
            known_agents = set((await session.execute(select(AgentModel.id))).scalars().all())
            for pd in load_products(product_csv):
                unknown = (pd["assigned_agent_ids"] | pd["hidden_for_agent_ids"]) - known_agents
                if unknown:
                    logger.warning(
                        "Product '%s' references unknown agent ids %s",
                        pd["title"], sorted(unknown),
                    )
                existing = await session.execute(
                    select(ProductModel).where(ProductModel.external_id == pd["external_id"])
                )
                if existing.scalar_one_or_none():
                    logger.debug("Product '%s' already exists, skipping", pd["external_id"])
                    continue
                session.add(ProductModel(
                    external_id=pd["external_id"],
                    title=pd["title"],
                    price=pd["price"],
                    assigned_agent_ids=sorted(pd["assigned_agent_ids"]),
                    hidden_for_agent_ids=sorted(pd["hidden_for_agent_ids"]),
                ))
                counts["products"] += 1
            await session.commit()
        else:
            logger.info("No products CSV found — skipping product import")

    logger.info(
        "Seed complete: %d agents, %d statuses, %d products",
        counts["agents"], counts["statuses"], counts["products"],
    )
    return counts


def _find_csv(data_dir: Path, name_hints: list[str]) -> Path | None:
    """Find a CSV file matching any of the name hints."""
    for f in sorted(data_dir.glob("*.csv")):
        fname_lower = f.stem.lower()
        for hint in name_hints:
            if hint in fname_lower:
                logger.info("Found CSV: %s (matched hint '%s')", f.name, hint)
                return f
    return None


async def _verify_data() -> None:
    """Print sanity checks after seeding."""
    async with async_session_factory() as session:
        agents = (await session.execute(select(AgentModel))).scalars().all()
        statuses = (await session.execute(select(StatusModel))).scalars().all()
        products = (await session.execute(select(ProductModel))).scalars().all()
        orders = (await session.execute(select(func.count(OrderModel.id)))).scalar_one()

        print(f"\n{'='*50}")
        print("SEED VERIFICATION")
        print(f"{'='*50}")
        print(f"Agents:   {len(agents)} ({sum(1 for a in agents if a.is_active)} active)")
        print(f"Statuses: {len(statuses)}")
        print(f"Products: {len(products)}")
        print(f"Orders:   {orders}")

        roles: dict[str, int] = {}
        for a in agents:
            roles[a.role] = roles.get(a.role, 0) + 1
        print(f"Role distribution: {roles}")

        with_recall = [s.name for s in statuses if s.recall_after_h]
        print(f"Statuses scheduling a recall: {with_recall}")

        specialized = sum(1 for p in products if p.assigned_agent_ids)
        restricted = sum(1 for p in products if p.hidden_for_agent_ids)
        print(f"Specialized products: {specialized}, with hidden agents: {restricted}")
        print(f"{'='*50}\n")


def main():
    parser = argparse.ArgumentParser(description="Seed the order desk database from CSV files")
    parser.add_argument(
        "--data-dir", type=str, default=settings.csv_data_path,
        help="Directory containing CSV files (default: CSV_DATA_PATH)",
    )
    parser.add_argument(
        "--drop", action="store_true",
        help="Drop existing data before seeding",
    )
    parser.add_argument(
        "--verify-only", action="store_true",
        help="Only run verification, don't seed",
    )
    args = parser.parse_args()

    data_dir = Path(args.data_dir)
    if not args.verify_only and not data_dir.exists():
        logger.error("Data directory not found: %s", data_dir)
        sys.exit(1)

    if args.verify_only:
        asyncio.run(_verify_data())
    else:
        async def run_all():
            await seed(data_dir, drop=args.drop)
            await _verify_data()
        asyncio.run(run_all())


if __name__ == "__main__":
    main()
