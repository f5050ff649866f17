from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Response, status

from src.contract_service.api.mappers import to_client_response
from src.contract_service.containers import Container
from src.contract_service.core.services.client_service import ClientService
from src.contract_service.logging import get_logger
from src.service_client.schemas import (
    ClientResponse,
    CreateCompanyRequest,
    CreatePersonRequest,
    PatchClientRequest,
    UpdateClientRequest,
)

router = APIRouter(prefix="/clients", tags=["clients"])
logger = get_logger(__name__)


@router.post("/persons", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
@inject
async def create_person(
    request: CreatePersonRequest,
    service: ClientService = Depends(Provide[Container.client_service]),
) -> ClientResponse:
    """
    Create a new person.

    Raises:
        409: If a live client already uses the email
        422: If a field fails validation
    """
    person = await service.create_person(
        name=request.name,
        email=request.email,
        phone=request.phone,
        birth_date=request.birth_date,
    )
    return to_client_response(person)


@router.post("/companies", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
@inject
async def create_company(
    request: CreateCompanyRequest,
    service: ClientService = Depends(Provide[Container.client_service]),
) -> ClientResponse:
    """
    Create a new company.

    Raises:
        409: If the email or the company identifier is already taken
        422: If a field fails validation
    """
    company = await service.create_company(
        name=request.name,
        email=request.email,
        phone=request.phone,
        company_identifier=request.company_identifier,
    )
    return to_client_response(company)


@router.get("/{client_id}", response_model=ClientResponse)
@inject
async def get_client(
    client_id: UUID,
    service: ClientService = Depends(Provide[Container.client_service]),
) -> ClientResponse:
    """Get a client by ID."""
    client = await service.get_client(client_id)
    return to_client_response(client)


@router.put("/{client_id}", response_model=ClientResponse)
@inject
async def update_client(
    client_id: UUID,
    request: UpdateClientRequest,
    service: ClientService = Depends(Provide[Container.client_service]),
) -> ClientResponse:
    """Replace the name, email and phone of a client."""
    client = await service.update_common_fields(
        client_id, name=request.name, email=request.email, phone=request.phone
    )
    return to_client_response(client)


@router.patch("/{client_id}", response_model=ClientResponse)
@inject
async def patch_client(
    client_id: UUID,
    request: PatchClientRequest,
    service: ClientService = Depends(Provide[Container.client_service]),
) -> ClientResponse:
    """Replace only the supplied fields. An empty body returns the client unchanged."""
    client = await service.patch_client(
        client_id, name=request.name, email=request.email, phone=request.phone
    )
    return to_client_response(client)


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
@inject
async def delete_client(
    client_id: UUID,
    service: ClientService = Depends(Provide[Container.client_service]),
) -> Response:
    """Close the client's active contracts and delete the client."""
    closed = await service.delete_client_and_close_contracts(client_id)
    logger.info(f"Client {client_id} deleted, {closed} contracts closed")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
