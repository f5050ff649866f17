"""Persistence ports consumed by the domain and application layers.

Mutating saves are conditioned on the version the caller last read; a stale
version raises ConcurrentModification.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional, Protocol
from uuid import UUID

from src.contract_service.domain.client import Client
from src.contract_service.domain.contract import Contract
from src.contract_service.domain.pagination import Page, PageRequest


class ClientRepository(Protocol):
    async def find_by_id(self, client_id: UUID) -> Optional[Client]: ...

    async def save(self, client: Client) -> Client:
        """Insert when ``client.id`` is None (assigning one), else versioned update."""
        ...

    async def delete_by_id(self, client_id: UUID) -> None: ...

    async def exists_by_id(self, client_id: UUID) -> bool: ...

    async def exists_by_email(self, email: str) -> bool: ...

    async def exists_by_company_identifier(self, identifier: str) -> bool: ...


class ContractRepository(Protocol):
    async def find_by_id(self, contract_id: UUID) -> Optional[Contract]: ...

    async def save(self, contract: Contract) -> Contract: ...

    async def find_active_by_client_id(
        self,
        client_id: UUID,
        now: datetime,
        updated_since: Optional[datetime],
        page: PageRequest,
    ) -> Page[Contract]:
        """Contracts with ``end is null or end > now``, optionally ``last_modified >= updated_since``."""
        ...

    async def close_all_active_by_client_id(self, client_id: UUID, now: datetime) -> int:
        """Set ``end = now`` on every contract of the client active at ``now``, in one statement."""
        ...

    async def sum_active_by_client_id(self, client_id: UUID, now: datetime) -> Decimal:
        """Sum of cost over contracts active at ``now``; 0 when there are none."""
        ...
