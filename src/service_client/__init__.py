"""Async HTTP client and schemas for the Contract Service API."""
from src.service_client.contract_client import ContractServiceClient
from src.service_client.schemas import (
    ClientResponse,
    ClientTypeEnum,
    ClosedContractsResponse,
    ContractResponse,
    ContractSortEnum,
    ContractSumResponse,
    CreateCompanyRequest,
    CreateContractRequest,
    CreatePersonRequest,
    ErrorResponse,
    PagedContractResponse,
    PatchClientRequest,
    UpdateClientRequest,
    UpdateCostRequest,
)

__all__ = [
    "ClientResponse",
    "ClientTypeEnum",
    "ClosedContractsResponse",
    "ContractResponse",
    "ContractServiceClient",
    "ContractSortEnum",
    "ContractSumResponse",
    "CreateCompanyRequest",
    "CreateContractRequest",
    "CreatePersonRequest",
    "ErrorResponse",
    "PagedContractResponse",
    "PatchClientRequest",
    "UpdateClientRequest",
    "UpdateCostRequest",
]
