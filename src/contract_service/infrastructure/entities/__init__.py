"""Database entities for the infrastructure layer."""
from src.contract_service.infrastructure.entities.client_entity import ClientEntity, ClientType
from src.contract_service.infrastructure.entities.contract_entity import ContractEntity

__all__ = [
    "ClientEntity",
    "ClientType",
    "ContractEntity",
]
