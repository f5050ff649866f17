from typing import Any, Optional

from sqlalchemy import Executable, Result
from sqlalchemy.ext.asyncio import AsyncSession

from src.shared.database.database import Database
from src.shared.database.entity_mapper import EntityMapper


class UnitOfWork:
    """
    A single database transaction spanning one use case.

    Entering the context opens a session; a clean exit commits, an exception
    rolls back and propagates. Repositories constructed with the same unit of
    work run their reads and writes on its session while it is open.
    """

    def __init__(
        self,
        db: Database,
        entity_mapper: EntityMapper,
    ) -> None:
        self.db = db
        self.session: Optional[AsyncSession] = None
        self.entity_mapper = entity_mapper

    async def __aenter__(self):
        if self.session is not None:
            raise RuntimeError("Unit of work is already active")
        self.session = self.db.session_maker()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type is None:
                await self.commit()
            else:
                await self.rollback()
        finally:
            if self.session:
                await self.session.close()
            self.session = None

    @property
    def in_transaction(self) -> bool:
        return self.session is not None

    def _require_session(self) -> AsyncSession:
        if self.session is None:
            raise RuntimeError("Unit of work is not active; use 'async with unit_of_work'")
        return self.session

    def _map_to_entity(self, model_instance: Any):
        return self.entity_mapper.map_to_entity(model_instance)

    def add(self, model_instance: Any):
        entity = self._map_to_entity(model_instance)
        self._require_session().add(entity)
        return entity

    async def execute(self, statement: Executable) -> Result:
        """Run a set-based statement (bulk UPDATE, versioned UPDATE) in this transaction."""
        return await self._require_session().execute(statement)

    async def flush(self):
        await self._require_session().flush()

    async def commit(self):
        session = self._require_session()
        try:
            await session.commit()
        except Exception as e:
            await self.rollback()
            raise e

    async def rollback(self):
        await self._require_session().rollback()
