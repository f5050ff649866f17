"""Shared test fixtures and utilities for all tests."""
import asyncio
import os
from contextlib import asynccontextmanager

import pytest
import pytest_asyncio
from dependency_injector import providers
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from testcontainers.postgres import PostgresContainer

from src.contract_service.containers import Container
from src.contract_service.main import create_app
from src.service_client import ContractServiceClient
from src.shared.database.database import Base, Database, DatabaseSettings
from src.shared.database.unit_of_work import UnitOfWork

# Database tests run on SQLite by default; TEST_POSTGRES=1 runs them against a PostgreSQL container
USE_POSTGRES = os.environ.get("TEST_POSTGRES") == "1"


@pytest.fixture(scope="session")
def postgres_container():
    """Start a PostgreSQL container for testing. Session-scoped for reuse."""
    with PostgresContainer("postgres:16-alpine") as postgres:
        yield postgres


@pytest.fixture(scope="function")
def async_db_url(request, tmp_path):
    """
    Get the async database URL for the selected backend.

    SQLite gets a fresh file per test; PostgreSQL is shared and cleaned by clean_database.
    """
    if USE_POSTGRES:
        postgres = request.getfixturevalue("postgres_container")
        connection_url = postgres.get_connection_url()
        return connection_url.replace("postgresql+psycopg2://", "postgresql+asyncpg://")
    return f"sqlite+aiosqlite:///{tmp_path / 'contracts.db'}"


async def wait_till_db_ready(db: Database, max_attempts: int = 20):
    """
    Wait for database to be ready.

    Args:
        db: Database instance to test
        max_attempts: Maximum number of connection attempts

    Raises:
        Exception: If database is not ready after max_attempts
    """
    for attempt in range(max_attempts):
        try:
            async with db.engine.begin():
                return
        except Exception:
            await asyncio.sleep(0.2)
    raise Exception(f"Database not ready after {max_attempts} attempts")


@pytest_asyncio.fixture(scope="function")
async def db(async_db_url):
    """
    Create database instance with test database.
    Function-scoped for test isolation.
    """
    db = Database(DatabaseSettings(db_url=async_db_url))
    await wait_till_db_ready(db)
    yield db
    await db.dispose()


@pytest_asyncio.fixture(scope="function")
async def clean_database(db):
    """
    Clean the database before each test.
    Drops and recreates all tables.
    """
    async with db.engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield db


@pytest.fixture(scope="function")
def test_container(clean_database):
    """
    Create a test container with database override for proper test isolation.
    Function-scoped to ensure each test gets a fresh container.
    """
    container = Container()
    container.database.override(providers.Object(clean_database))
    yield container
    container.database.reset_override()
    container.unwire()


@pytest_asyncio.fixture(scope="function")
async def test_app(test_container):
    """
    Create test application with container.
    Tables are already created by clean_database, so the lifespan does nothing.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield

    yield create_app(test_container, lifespan=lifespan)


@pytest_asyncio.fixture
async def service_client(test_app):
    """SDK client talking to the test app in-process."""
    transport = ASGITransport(app=test_app)
    http_client = AsyncClient(transport=transport, base_url="http://test")
    client = ContractServiceClient(base_url="http://test", client=http_client)

    async with client:
        yield client
    await http_client.aclose()


@pytest.fixture
def http_client(service_client):
    """Raw httpx client for asserting status codes and error bodies."""
    return service_client.client


# =========================================================================
# Persistence fixtures
# =========================================================================

@pytest.fixture
def unit_of_work(test_container) -> UnitOfWork:
    """A unit of work shared by the client_repository and contract_repository fixtures."""
    return test_container.unit_of_work()


@pytest.fixture
def client_repository(test_container, unit_of_work):
    """Client repository bound to the unit_of_work fixture."""
    return test_container.client_repository(unit_of_work=unit_of_work)


@pytest.fixture
def contract_repository(test_container, unit_of_work):
    """Contract repository bound to the unit_of_work fixture."""
    return test_container.contract_repository(unit_of_work=unit_of_work)


# =========================================================================
# Service fixtures from container (for direct service testing)
# =========================================================================

@pytest.fixture
def client_service(test_container):
    """Get client service from container."""
    return test_container.client_service()


@pytest.fixture
def contract_service(test_container):
    """Get contract service from container."""
    return test_container.contract_service()
