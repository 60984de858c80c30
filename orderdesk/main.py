"""Order desk — FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy.exc import SQLAlchemyError

from orderdesk.adapters.persistence.database import engine
from orderdesk.config import settings
from orderdesk.infrastructure.api.routes_health import router as health_router
from orderdesk.infrastructure.api.routes_orders import router as orders_router
from orderdesk.infrastructure.api.routes_products import router as products_router
from orderdesk.infrastructure.api.routes_recalls import router as recalls_router
from orderdesk.infrastructure.api.routes_webhooks import router as webhooks_router

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    try:
        async with engine.begin():
            pass  # Connection pool warmed up
        logger.info("Database connection established")
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Database not available on startup: %s", e)
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Order desk",
        description="Call-center order assignment and recall scheduling",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.include_router(health_router, prefix="/api")
    app.include_router(orders_router, prefix="/api")
    app.include_router(recalls_router, prefix="/api")
    app.include_router(products_router, prefix="/api")
    app.include_router(webhooks_router, prefix="/api")

    return app


app = create_app()
