from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import exists, select, update

from src.shared.database.base_repo import BaseRepository
from src.shared.database.database import Database
from src.shared.database.unit_of_work import UnitOfWork
from src.shared.exceptions import ConcurrentModification
from src.contract_service.domain.client import Client
from src.contract_service.domain.clock import utc_now
from src.contract_service.domain.exceptions import ClientNotFound
from src.contract_service.infrastructure.entities.client_entity import ClientEntity
from src.contract_service.infrastructure.mappers.client_mapper import ClientMapper

_LIVE = ClientEntity.deleted_at.is_(None)


class ClientRepository(BaseRepository[ClientEntity, Client]):
    """SQLAlchemy adapter for the ClientRepository port. Deleted clients are invisible."""

    def __init__(self, db: Database, mapper: ClientMapper, unit_of_work: Optional[UnitOfWork] = None):
        super().__init__(db, mapper, unit_of_work)

    async def find_by_id(self, client_id: UUID) -> Optional[Client]:
        """Get a live client by ID."""
        return await self.find_one(
            select(ClientEntity).where(ClientEntity.id == client_id, _LIVE)
        )

    async def exists_by_id(self, client_id: UUID) -> bool:
        return await self.scalar(
            select(exists().where(ClientEntity.id == client_id, _LIVE))
        )

    async def exists_by_email(self, email: str) -> bool:
        return await self.scalar(
            select(exists().where(ClientEntity.email == email, _LIVE))
        )

    async def exists_by_company_identifier(self, identifier: str) -> bool:
        return await self.scalar(
            select(exists().where(ClientEntity.company_identifier == identifier, _LIVE))
        )

    async def save(self, client: Client) -> Client:
        """
        Insert a new client or update an existing one.

        New clients get their ID and version 1 here. Updates are conditioned on
        the version the client was read at and bump it by one.

        Raises:
            ConcurrentModification: If the stored version moved on since the read
            ClientNotFound: If the client no longer exists
        """
        uow = self._transaction()
        if client.id is None:
            created = client.with_identity(uuid4(), 1)
            uow.add(created)
            await uow.flush()
            return created

        result = await uow.execute(
            update(ClientEntity)
            .where(
                ClientEntity.id == client.id,
                ClientEntity.version == client.version,
                _LIVE,
            )
            .values(
                name=client.name.value,
                email=client.email.value,
                phone=client.phone.value,
                version=ClientEntity.version + 1,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self._raise_for_missing_row(client)
        return client.with_identity(client.id, client.version + 1)

    async def delete_by_id(self, client_id: UUID, deleted_at: Optional[datetime] = None) -> None:
        """Tombstone the client; its contracts keep resolving their owner."""
        uow = self._transaction()
        result = await uow.execute(
            update(ClientEntity)
            .where(ClientEntity.id == client_id, _LIVE)
            .values(deleted_at=deleted_at or utc_now(), version=ClientEntity.version + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise ClientNotFound(client_id)

    async def _raise_for_missing_row(self, client: Client) -> None:
        if await self.exists_by_id(client.id):
            raise ConcurrentModification("Client", client.id, client.version)
        raise ClientNotFound(client.id)
