import logging

from pydantic import BaseModel
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import declarative_base

logger = logging.getLogger(__name__)

Base = declarative_base()


class DatabaseSettings(BaseModel):
    db_url: str
    echo: bool = False
    pool_size: int = 10
    max_overflow: int = 20


class Database:
    def __init__(self, db_settings: DatabaseSettings) -> None:
        url = make_url(db_settings.db_url)
        engine_kwargs: dict = {"echo": db_settings.echo}
        # SQLite (used for local runs and tests) has no connection pool to size
        if not url.drivername.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=db_settings.pool_size,
                max_overflow=db_settings.max_overflow,
                pool_pre_ping=True,
            )
        self._engine: AsyncEngine = create_async_engine(db_settings.db_url, **engine_kwargs)
        self.session_maker: async_sessionmaker[AsyncSession] = async_sessionmaker(self._engine, expire_on_commit=False)
        logger.info("Database engine created for %s", url.render_as_string(hide_password=True))

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    async def create_all(self) -> None:
        """Create every table registered on the declarative Base."""
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self._engine.dispose()
