from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import ColumnElement, func, or_, select, update

from src.shared.database.base_repo import BaseRepository
from src.shared.database.database import Database
from src.shared.database.unit_of_work import UnitOfWork
from src.shared.exceptions import ConcurrentModification
from src.contract_service.domain.contract import Contract
from src.contract_service.domain.exceptions import ContractNotFound
from src.contract_service.domain.pagination import ContractSortField, Page, PageRequest
from src.contract_service.infrastructure.entities.contract_entity import ContractEntity
from src.contract_service.infrastructure.mappers.contract_mapper import ContractMapper

_SORT_COLUMNS = {
    ContractSortField.LAST_MODIFIED: ContractEntity.last_modified,
    ContractSortField.START_DATE: ContractEntity.start_date,
    ContractSortField.END_DATE: ContractEntity.end_date,
    ContractSortField.COST_AMOUNT: ContractEntity.cost_amount,
}


def _active_for(client_id: UUID, now: datetime) -> list[ColumnElement[bool]]:
    """Contracts of the client whose period has no end or ends after ``now``."""
    return [
        ContractEntity.client_id == client_id,
        or_(ContractEntity.end_date.is_(None), ContractEntity.end_date > now),
    ]


class ContractRepository(BaseRepository[ContractEntity, Contract]):
    """SQLAlchemy adapter for the ContractRepository port."""

    def __init__(self, db: Database, mapper: ContractMapper, unit_of_work: Optional[UnitOfWork] = None):
        super().__init__(db, mapper, unit_of_work)

    async def find_by_id(self, contract_id: UUID) -> Optional[Contract]:
        """Get a contract, with its owning client, by ID."""
        return await self.find_one(
            select(ContractEntity).where(ContractEntity.id == contract_id)
        )

    async def save(self, contract: Contract) -> Contract:
        """
        Insert a new contract or apply a versioned update to an existing one.

        The owner is never rewritten: client_id is not part of the update.

        Raises:
            ConcurrentModification: If the stored version moved on since the read
            ContractNotFound: If the contract does not exist
        """
        uow = self._transaction()
        if contract.id is None:
            created = contract.with_identity(uuid4(), 1)
            uow.add(created)
            await uow.flush()
            return created

        result = await uow.execute(
            update(ContractEntity)
            .where(ContractEntity.id == contract.id, ContractEntity.version == contract.version)
            .values(
                start_date=contract.period.start,
                end_date=contract.period.end,
                cost_amount=contract.cost_amount.value,
                last_modified=contract.last_modified,
                version=ContractEntity.version + 1,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            if await self.find_by_id(contract.id) is None:
                raise ContractNotFound(contract.id)
            raise ConcurrentModification("Contract", contract.id, contract.version)
        return contract.with_identity(contract.id, contract.version + 1)

    async def find_active_by_client_id(
        self,
        client_id: UUID,
        now: datetime,
        updated_since: Optional[datetime],
        page: PageRequest,
    ) -> Page[Contract]:
        """
        Get one page of the client's contracts active at ``now``.

        Args:
            client_id: Owner of the contracts
            now: Reference time for the activity predicate
            updated_since: When given, only contracts with last_modified >= updated_since
            page: Page number, size and ordering

        Returns:
            The requested page plus the total number of matching contracts
        """
        conditions = _active_for(client_id, now)
        if updated_since is not None:
            conditions.append(ContractEntity.last_modified >= updated_since)

        total = await self.scalar(
            select(func.count()).select_from(ContractEntity).where(*conditions)
        )

        sort_column = _SORT_COLUMNS[page.sort]
        ordering = sort_column.desc() if page.descending else sort_column.asc()
        items = await self.find_all(
            select(ContractEntity)
            .where(*conditions)
            # id breaks ties so pages never overlap
            .order_by(ordering, ContractEntity.id)
            .offset(page.offset)
            .limit(page.size)
        )
        return Page.of(items, page, total)

    async def close_all_active_by_client_id(self, client_id: UUID, now: datetime) -> int:
        """Close every active contract of the client in one statement; returns how many."""
        uow = self._transaction()
        result = await uow.execute(
            update(ContractEntity)
            .where(*_active_for(client_id, now))
            .values(end_date=now, last_modified=now, version=ContractEntity.version + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def sum_active_by_client_id(self, client_id: UUID, now: datetime) -> Decimal:
        """Sum of cost over the client's contracts active at ``now``, computed by the database."""
        total = await self.scalar(
            select(func.coalesce(func.sum(ContractEntity.cost_amount), 0))
            .where(*_active_for(client_id, now))
        )
        return Decimal(str(total)).quantize(Decimal("0.01"))
