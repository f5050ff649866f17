import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Optional

from fastapi import FastAPI

from src.contract_service.api.errors import register_exception_handlers
from src.contract_service.api.v1 import clients, contracts
from src.contract_service.containers import Container
from src.contract_service.logging import configure_logging

# Configure logging at module load time
configure_logging()

logger = logging.getLogger(__name__)

# Type alias for lifespan context manager
LifespanType = Callable[[FastAPI], AsyncIterator[None]]

API_MODULES = [
    "src.contract_service.api.v1.clients",
    "src.contract_service.api.v1.contracts",
]


@asynccontextmanager
async def default_lifespan(app: FastAPI):
    """Default application lifespan manager - creates the schema on startup, disposes the pool on shutdown."""
    container: Container = app.state.container
    logger.info("Starting %s...", container.config().app_name)

    db = container.database()
    await db.create_all()
    logger.info("Database initialized successfully")

    yield

    logger.info("Shutting down...")
    await db.dispose()


def create_app(container: Container, lifespan: Optional[LifespanType] = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        container: DI container providing settings, database and services.
        lifespan: Optional lifespan context manager. If not provided, uses default_lifespan.

    Returns:
        Configured FastAPI application.
    """
    container.wire(modules=API_MODULES)

    config = container.config()

    app = FastAPI(
        title=config.app_name,
        version=config.app_version,
        lifespan=lifespan or default_lifespan,
    )

    # Attach container to app state for access in lifespan and routes
    app.state.container = container

    register_exception_handlers(app)

    app.include_router(clients.router, prefix="/api/v1")
    app.include_router(contracts.router, prefix="/api/v1")

    @app.get("/")
    async def root():
        return {"message": f"Welcome to {config.app_name}"}

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    return app


container = Container()
app = create_app(container=container)
