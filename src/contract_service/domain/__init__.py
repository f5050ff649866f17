"""Domain model: value objects, the Client union, Contract, ports and domain services."""
from src.contract_service.domain.client import Client, ClientProfile, Company, Person
from src.contract_service.domain.contract import Contract
from src.contract_service.domain.exceptions import (
    ClientAlreadyExists,
    ClientNotFound,
    CompanyIdentifierAlreadyExists,
    ConcurrentModification,
    ContractNotFound,
    ContractNotOwnedByClient,
    DomainError,
    InvalidContract,
    ValidationError,
    ValidationErrorKind,
)
from src.contract_service.domain.pagination import ContractSortField, Page, PageRequest
from src.contract_service.domain.services import ClientUniquenessChecker, ContractOwnership
from src.contract_service.domain.value_objects import (
    BirthDate,
    ClientName,
    CompanyIdentifier,
    ContractCost,
    ContractPeriod,
    Email,
    PhoneNumber,
)

__all__ = [
    "BirthDate",
    "Client",
    "ClientAlreadyExists",
    "ClientName",
    "ClientNotFound",
    "ClientProfile",
    "ClientUniquenessChecker",
    "Company",
    "CompanyIdentifier",
    "CompanyIdentifierAlreadyExists",
    "ConcurrentModification",
    "Contract",
    "ContractCost",
    "ContractNotFound",
    "ContractNotOwnedByClient",
    "ContractOwnership",
    "ContractPeriod",
    "ContractSortField",
    "DomainError",
    "Email",
    "InvalidContract",
    "Page",
    "PageRequest",
    "Person",
    "PhoneNumber",
    "ValidationError",
    "ValidationErrorKind",
]
