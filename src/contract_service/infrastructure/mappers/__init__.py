"""Infrastructure mappers for converting between domain models and database entities."""
from src.contract_service.infrastructure.mappers.client_mapper import ClientMapper
from src.contract_service.infrastructure.mappers.contract_mapper import ContractMapper

__all__ = [
    "ClientMapper",
    "ContractMapper",
]
