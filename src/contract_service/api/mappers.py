"""Mappers for converting between domain models and API schemas."""
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from src.contract_service.domain.client import Client, Company, Person
from src.contract_service.domain.contract import Contract
from src.contract_service.domain.pagination import Page
from src.service_client.schemas import (
    ClientResponse,
    ClientTypeEnum,
    ContractResponse,
    ContractSumResponse,
    PagedContractResponse,
)


def to_client_response(client: Client) -> ClientResponse:
    """
    Convert a Person or Company domain model to ClientResponse API schema.

    Args:
        client: Domain model

    Returns:
        API response schema with the variant field set
    """
    match client:
        case Person(birth_date=birth_date):
            variant = {"type": ClientTypeEnum.PERSON, "birth_date": birth_date.value}
        case Company(company_identifier=identifier):
            variant = {"type": ClientTypeEnum.COMPANY, "company_identifier": identifier.value}
    return ClientResponse(
        id=client.id,
        name=client.name.value,
        email=client.email.value,
        phone=client.phone.value,
        version=client.version,
        **variant,
    )


def to_contract_response(contract: Contract, now: datetime | None = None) -> ContractResponse:
    """
    Convert a Contract domain model to ContractResponse API schema.

    Args:
        contract: Domain model
        now: Reference time for the ``active`` flag; defaults to the current time

    Returns:
        API response schema
    """
    return ContractResponse(
        id=contract.id,
        client_id=contract.client_id,
        start_date=contract.period.start,
        end_date=contract.period.end,
        cost_amount=contract.cost_amount.value,
        last_modified=contract.last_modified,
        active=contract.is_active_at(now) if now is not None else contract.is_active(),
        version=contract.version,
    )


def to_paged_contract_response(page: Page[Contract], now: datetime | None = None) -> PagedContractResponse:
    return PagedContractResponse(
        items=[to_contract_response(contract, now) for contract in page.items],
        page=page.page,
        size=page.size,
        total_elements=page.total_elements,
        total_pages=page.total_pages,
    )


def to_contract_sum_response(client_id: UUID, total: Decimal) -> ContractSumResponse:
    return ContractSumResponse(client_id=client_id, total=total)
