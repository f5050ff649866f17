"""Contract use cases: create, cost change, closure, active-set queries and sums."""
import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from src.shared.database.unit_of_work import UnitOfWork
from src.contract_service.domain.clock import ensure_utc, utc_now
from src.contract_service.domain.contract import Contract
from src.contract_service.domain.exceptions import ClientNotFound, ContractNotFound
from src.contract_service.domain.pagination import Page, PageRequest
from src.contract_service.domain.repositories import ClientRepository, ContractRepository
from src.contract_service.domain.services import ContractOwnership
from src.contract_service.domain.value_objects import ContractCost, ContractPeriod

logger = logging.getLogger(__name__)


class ContractService:
    """Service for handling Contract business logic."""

    def __init__(
        self,
        contract_repository: ContractRepository,
        client_repository: ClientRepository,
        ownership: ContractOwnership,
        unit_of_work: UnitOfWork,
    ):
        """
        Initialize the contract service.

        Args:
            contract_repository: Port for contract persistence and aggregates
            client_repository: Port used to resolve the owning client
            ownership: Ownership guard for client-scoped contract access
            unit_of_work: Unit of work for database transactions
        """
        self.contract_repository = contract_repository
        self.client_repository = client_repository
        self.ownership = ownership
        self.unit_of_work = unit_of_work

    async def create_contract_for_client(
        self,
        client_id: UUID,
        amount: Decimal | int | str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Contract:
        """
        Create a contract for an existing client.

        Args:
            client_id: Owner of the new contract
            amount: Cost amount, at most two decimals
            start: Period start, defaults to now
            end: Optional period end, strictly after start

        Returns:
            The persisted Contract

        Raises:
            ClientNotFound: If the client does not exist
            ValidationError: If the period or cost is invalid
        """
        period = ContractPeriod.of(start, end)
        cost = ContractCost.of(amount)
        async with self.unit_of_work:
            client = await self.client_repository.find_by_id(client_id)
            if client is None:
                raise ClientNotFound(client_id)
            contract = await self.contract_repository.save(Contract.create(client, period, cost))

        logger.info("Created contract %s for client %s (cost %s)", contract.id, client_id, cost)
        return contract

    async def get_contract(self, contract_id: UUID) -> Contract:
        contract = await self.contract_repository.find_by_id(contract_id)
        if contract is None:
            raise ContractNotFound(contract_id)
        return contract

    async def get_contract_for_client(self, client_id: UUID, contract_id: UUID) -> Contract:
        """Get a contract addressed through its owner; a foreign owner is rejected."""
        contract = await self.get_contract(contract_id)
        self.ownership.ensure_belongs_to(contract, client_id)
        return contract

    async def update_cost(
        self,
        contract_id: UUID,
        new_amount: Decimal | int | str,
        client_id: Optional[UUID] = None,
    ) -> Contract:
        """
        Replace a contract's cost and refresh its last-modified timestamp.

        When ``client_id`` is given the contract must belong to that client.

        Raises:
            ContractNotFound: If the contract does not exist
            ContractNotOwnedByClient: If it belongs to another client
            ConcurrentModification: If the contract changed since it was loaded
        """
        new_cost = ContractCost.of(new_amount)
        async with self.unit_of_work:
            contract = await self.get_contract(contract_id)
            if client_id is not None:
                self.ownership.ensure_belongs_to(contract, client_id)
            saved = await self.contract_repository.save(contract.change_cost(new_cost))

        logger.info("Changed cost of contract %s to %s", contract_id, new_cost)
        return saved

    async def close_contract(self, contract_id: UUID, client_id: Optional[UUID] = None) -> Contract:
        """End a single contract now, keeping its start."""
        async with self.unit_of_work:
            contract = await self.get_contract(contract_id)
            if client_id is not None:
                self.ownership.ensure_belongs_to(contract, client_id)
            saved = await self.contract_repository.save(contract.close_now())

        logger.info("Closed contract %s at %s", contract_id, saved.period.end)
        return saved

    async def close_active_contracts(self, client_id: UUID) -> int:
        """Close every active contract of a client without deleting the client."""
        now = utc_now()
        async with self.unit_of_work:
            await self._ensure_client_exists(client_id)
            closed = await self.contract_repository.close_all_active_by_client_id(client_id, now)

        logger.info("Closed %d active contracts of client %s", closed, client_id)
        return closed

    async def get_active_contracts(
        self,
        client_id: UUID,
        updated_since: Optional[datetime] = None,
        page: Optional[PageRequest] = None,
    ) -> Page[Contract]:
        """One page of the client's contracts active now, optionally modified since a time."""
        await self._ensure_client_exists(client_id)
        return await self.contract_repository.find_active_by_client_id(
            client_id,
            utc_now(),
            ensure_utc(updated_since) if updated_since is not None else None,
            page or PageRequest(),
        )

    async def sum_active_contracts(self, client_id: UUID) -> Decimal:
        """Total cost of the client's active contracts, aggregated by the database."""
        await self._ensure_client_exists(client_id)
        return await self.contract_repository.sum_active_by_client_id(client_id, utc_now())

    async def _ensure_client_exists(self, client_id: UUID) -> None:
        if not await self.client_repository.exists_by_id(client_id):
            raise ClientNotFound(client_id)
