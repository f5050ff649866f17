"""HTTP client for consuming the Contract Service API."""
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from httpx import AsyncClient, Response

from src.service_client.schemas import (
    ClientResponse,
    ClosedContractsResponse,
    ContractResponse,
    ContractSortEnum,
    ContractSumResponse,
    CreateCompanyRequest,
    CreateContractRequest,
    CreatePersonRequest,
    PagedContractResponse,
    PatchClientRequest,
    UpdateClientRequest,
    UpdateCostRequest,
)

API_PREFIX = "/api/v1"


class ContractServiceClient:
    """HTTP client for interacting with the Contract Service API."""

    def __init__(self, base_url: str, client: Optional[AsyncClient] = None):
        """
        Initialize the client.

        Args:
            base_url: Base URL of the API (e.g., "http://localhost:8000")
            client: Optional httpx.AsyncClient instance. If not provided, a new one will be created.
        """
        self.base_url = base_url.rstrip("/")
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self):
        if self._owns_client:
            self._client = AsyncClient(base_url=self.base_url)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self._owns_client and self._client:
            await self._client.aclose()

    @property
    def client(self) -> AsyncClient:
        """Get the underlying httpx client."""
        if self._client is None:
            raise RuntimeError("Client not initialized. Use async context manager.")
        return self._client

    # =========================================================================
    # Clients
    # =========================================================================

    async def create_person(self, request: CreatePersonRequest) -> ClientResponse:
        """
        Create a new person.

        Raises:
            httpx.HTTPStatusError: 422 on invalid fields, 409 if the email is taken
        """
        response: Response = await self.client.post(
            f"{API_PREFIX}/clients/persons",
            json=request.model_dump(mode="json"),
        )
        response.raise_for_status()
        return ClientResponse(**response.json())

    async def create_company(self, request: CreateCompanyRequest) -> ClientResponse:
        """
        Create a new company.

        Raises:
            httpx.HTTPStatusError: 422 on invalid fields, 409 if the email or identifier is taken
        """
        response: Response = await self.client.post(
            f"{API_PREFIX}/clients/companies",
            json=request.model_dump(mode="json"),
        )
        response.raise_for_status()
        return ClientResponse(**response.json())

    async def get_client(self, client_id: UUID) -> ClientResponse:
        response: Response = await self.client.get(f"{API_PREFIX}/clients/{client_id}")
        response.raise_for_status()
        return ClientResponse(**response.json())

    async def update_client(self, client_id: UUID, request: UpdateClientRequest) -> ClientResponse:
        """Replace name, email and phone of a client."""
        response: Response = await self.client.put(
            f"{API_PREFIX}/clients/{client_id}",
            json=request.model_dump(mode="json"),
        )
        response.raise_for_status()
        return ClientResponse(**response.json())

    async def patch_client(self, client_id: UUID, request: PatchClientRequest) -> ClientResponse:
        """Replace only the fields set on the request."""
        response: Response = await self.client.patch(
            f"{API_PREFIX}/clients/{client_id}",
            json=request.model_dump(mode="json", exclude_none=True),
        )
        response.raise_for_status()
        return ClientResponse(**response.json())

    async def delete_client(self, client_id: UUID) -> None:
        """Delete a client; its active contracts are closed first."""
        response: Response = await self.client.delete(f"{API_PREFIX}/clients/{client_id}")
        response.raise_for_status()

    # =========================================================================
    # Contracts
    # =========================================================================

    async def create_contract(self, client_id: UUID, request: CreateContractRequest) -> ContractResponse:
        """
        Create a contract for a client.

        Args:
            client_id: UUID of the owning client
            request: Cost and optional period bounds

        Returns:
            Created contract response

        Raises:
            httpx.HTTPStatusError: 404 if the client does not exist, 422 on an invalid period or cost
        """
        response: Response = await self.client.post(
            f"{API_PREFIX}/clients/{client_id}/contracts",
            json=request.model_dump(mode="json"),
        )
        response.raise_for_status()
        return ContractResponse(**response.json())

    async def get_contract(self, client_id: UUID, contract_id: UUID) -> ContractResponse:
        """
        Get a contract through its owner.

        Raises:
            httpx.HTTPStatusError: 404 if missing, 403 if it belongs to another client
        """
        response: Response = await self.client.get(
            f"{API_PREFIX}/clients/{client_id}/contracts/{contract_id}"
        )
        response.raise_for_status()
        return ContractResponse(**response.json())

    async def list_active_contracts(
        self,
        client_id: UUID,
        updated_since: Optional[datetime] = None,
        page: int = 0,
        size: Optional[int] = None,
        sort: ContractSortEnum = ContractSortEnum.LAST_MODIFIED,
        descending: bool = True,
    ) -> PagedContractResponse:
        """
        List one page of the client's active contracts.

        Args:
            client_id: UUID of the client
            updated_since: Only contracts modified at or after this time
            page: Zero-based page number
            size: Page size; the server default applies when omitted
            sort: Field to order by
            descending: Sort direction

        Returns:
            The requested page with totals
        """
        params: dict = {"page": page, "sort": sort.value, "descending": descending}
        if size is not None:
            params["size"] = size
        if updated_since is not None:
            params["updated_since"] = updated_since.isoformat()
        response: Response = await self.client.get(
            f"{API_PREFIX}/clients/{client_id}/contracts", params=params
        )
        response.raise_for_status()
        return PagedContractResponse(**response.json())

    async def sum_active_contracts(self, client_id: UUID) -> Decimal:
        response: Response = await self.client.get(
            f"{API_PREFIX}/clients/{client_id}/contracts/sum-active"
        )
        response.raise_for_status()
        return ContractSumResponse(**response.json()).total

    async def update_cost(self, client_id: UUID, contract_id: UUID, cost_amount: Decimal) -> None:
        """
        Change the cost of a contract.

        Raises:
            httpx.HTTPStatusError: 404 if missing, 403 if foreign, 409 on a concurrent change
        """
        response: Response = await self.client.patch(
            f"{API_PREFIX}/clients/{client_id}/contracts/{contract_id}/cost",
            json=UpdateCostRequest(cost_amount=cost_amount).model_dump(mode="json"),
        )
        response.raise_for_status()

    async def close_contract(self, client_id: UUID, contract_id: UUID) -> ContractResponse:
        response: Response = await self.client.post(
            f"{API_PREFIX}/clients/{client_id}/contracts/{contract_id}/close"
        )
        response.raise_for_status()
        return ContractResponse(**response.json())

    async def close_active_contracts(self, client_id: UUID) -> int:
        """Close every active contract of the client; returns how many were closed."""
        response: Response = await self.client.post(
            f"{API_PREFIX}/clients/{client_id}/contracts/close-active"
        )
        response.raise_for_status()
        return ClosedContractsResponse(**response.json()).closed
