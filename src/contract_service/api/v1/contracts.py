from datetime import datetime
from typing import Optional
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from src.contract_service.api.mappers import (
    to_contract_response,
    to_contract_sum_response,
    to_paged_contract_response,
)
from src.contract_service.config import Settings
from src.contract_service.containers import Container
from src.contract_service.core.services.contract_service import ContractService
from src.contract_service.domain.clock import utc_now
from src.contract_service.domain.pagination import ContractSortField, PageRequest
from src.contract_service.logging import get_logger
from src.service_client.schemas import (
    ClosedContractsResponse,
    ContractResponse,
    ContractSortEnum,
    ContractSumResponse,
    CreateContractRequest,
    PagedContractResponse,
    UpdateCostRequest,
)

router = APIRouter(prefix="/clients/{client_id}/contracts", tags=["contracts"])
logger = get_logger(__name__)


@router.post("", response_model=ContractResponse, status_code=status.HTTP_201_CREATED)
@inject
async def create_contract(
    client_id: UUID,
    request: CreateContractRequest,
    service: ContractService = Depends(Provide[Container.contract_service]),
) -> ContractResponse:
    """
    Create a contract for a client.

    Args:
        client_id: UUID of the client who owns the contract
        request: Cost, plus optional start (defaults to now) and end
        service: Contract service (injected)

    Returns:
        ContractResponse with the created contract

    Raises:
        404: If the client does not exist
        422: If the period or the cost is invalid
    """
    contract = await service.create_contract_for_client(
        client_id,
        request.cost_amount,
        start=request.start_date,
        end=request.end_date,
    )
    return to_contract_response(contract)


@router.get("", response_model=PagedContractResponse)
@inject
async def list_active_contracts(
    client_id: UUID,
    updated_since: Optional[datetime] = Query(default=None, description="Only contracts modified at or after"),
    page: int = Query(default=0, ge=0),
    size: Optional[int] = Query(default=None, gt=0),
    sort: ContractSortEnum = Query(default=ContractSortEnum.LAST_MODIFIED),
    descending: bool = Query(default=True),
    service: ContractService = Depends(Provide[Container.contract_service]),
    settings: Settings = Depends(Provide[Container.config]),
) -> PagedContractResponse:
    """
    List one page of the client's currently active contracts.

    Raises:
        404: If the client does not exist
        422: If the page size exceeds the configured maximum
    """
    pagination = settings.pagination
    if size is not None and size > pagination.max_page_size:
        logger.error(f"Page size {size} above maximum {pagination.max_page_size}")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Page size must not exceed {pagination.max_page_size}",
        )
    page_request = PageRequest(
        page=page,
        size=size or pagination.default_page_size,
        sort=ContractSortField(sort.value),
        descending=descending,
    )
    now = utc_now()
    result = await service.get_active_contracts(client_id, updated_since, page_request)
    return to_paged_contract_response(result, now)


@router.get("/sum-active", response_model=ContractSumResponse)
@inject
async def sum_active_contracts(
    client_id: UUID,
    service: ContractService = Depends(Provide[Container.contract_service]),
) -> ContractSumResponse:
    """Total cost of the client's active contracts."""
    total = await service.sum_active_contracts(client_id)
    return to_contract_sum_response(client_id, total)


@router.post("/close-active", response_model=ClosedContractsResponse)
@inject
async def close_active_contracts(
    client_id: UUID,
    service: ContractService = Depends(Provide[Container.contract_service]),
) -> ClosedContractsResponse:
    """Close every active contract of the client; the client itself is kept."""
    closed = await service.close_active_contracts(client_id)
    return ClosedContractsResponse(client_id=client_id, closed=closed)


@router.get("/{contract_id}", response_model=ContractResponse)
@inject
async def get_contract(
    client_id: UUID,
    contract_id: UUID,
    service: ContractService = Depends(Provide[Container.contract_service]),
) -> ContractResponse:
    """
    Get a contract through its owner.

    Raises:
        403: If the contract belongs to another client
        404: If the contract does not exist
    """
    contract = await service.get_contract_for_client(client_id, contract_id)
    return to_contract_response(contract)


@router.patch("/{contract_id}/cost", status_code=status.HTTP_204_NO_CONTENT)
@inject
async def update_cost(
    client_id: UUID,
    contract_id: UUID,
    request: UpdateCostRequest,
    service: ContractService = Depends(Provide[Container.contract_service]),
) -> Response:
    """Replace the cost of a contract owned by the client."""
    await service.update_cost(contract_id, request.cost_amount, client_id=client_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{contract_id}/close", response_model=ContractResponse)
@inject
async def close_contract(
    client_id: UUID,
    contract_id: UUID,
    service: ContractService = Depends(Provide[Container.contract_service]),
) -> ContractResponse:
    """End a contract now."""
    contract = await service.close_contract(contract_id, client_id=client_id)
    return to_contract_response(contract)
