import abc
from contextlib import asynccontextmanager
from typing import AsyncIterator, Generic, TypeVar, Optional

from sqlalchemy import Executable
from sqlalchemy.ext.asyncio import AsyncSession

from src.shared.database.base_mapper import BaseEntityMapper
from src.shared.database.database import Database
from src.shared.database.unit_of_work import UnitOfWork


TEntity = TypeVar("TEntity")
TModel = TypeVar("TModel")


class BaseRepository(abc.ABC, Generic[TEntity, TModel]):
    def __init__(
        self,
        db: Database,
        mapper: BaseEntityMapper[TModel, TEntity],
        unit_of_work: Optional[UnitOfWork] = None,
    ):
        self.db = db
        self.mapper = mapper
        self.unit_of_work = unit_of_work

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        """Yield the open unit of work's session, or a short-lived read session."""
        if self.unit_of_work is not None and self.unit_of_work.in_transaction:
            yield self.unit_of_work.session
            return
        async with self.db.session_maker() as session:
            yield session

    def _transaction(self) -> UnitOfWork:
        """Return the active unit of work; writes are only allowed inside one."""
        if self.unit_of_work is None or not self.unit_of_work.in_transaction:
            raise RuntimeError(
                f"{type(self).__name__} writes must run inside an active unit of work"
            )
        return self.unit_of_work

    async def find_one(self, statement: Executable) -> Optional[TModel]:
        async with self._session() as session:
            result = await session.execute(statement)
            entity = result.unique().scalar_one_or_none()
            if entity is None:
                return None
            return self.mapper.to_model(entity)

    async def find_all(self, statement: Executable) -> list[TModel]:
        async with self._session() as session:
            result = await session.execute(statement)
            return self.mapper.to_models(result.unique().scalars().all())

    async def scalar(self, statement: Executable):
        """Execute a statement returning a single scalar (count, sum, exists)."""
        async with self._session() as session:
            result = await session.execute(statement)
            return result.scalar_one()
