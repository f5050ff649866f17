"""Dependency injection container using dependency-injector library."""
from dependency_injector import containers, providers

from src.contract_service.config import Settings
from src.shared.database.database import Database, DatabaseSettings
from src.shared.database.unit_of_work import UnitOfWork
from src.shared.database.entity_mapper import EntityMapper

from src.contract_service.infrastructure.mappers.client_mapper import ClientMapper
from src.contract_service.infrastructure.mappers.contract_mapper import ContractMapper

from src.contract_service.infrastructure.client_repository import ClientRepository
from src.contract_service.infrastructure.contract_repository import ContractRepository

from src.contract_service.core.services.client_service import ClientService
from src.contract_service.core.services.contract_service import ContractService

from src.contract_service.domain.client import Company, Person
from src.contract_service.domain.contract import Contract
from src.contract_service.domain.services import ClientUniquenessChecker, ContractOwnership


def create_entity_mapper(
    client_mapper: ClientMapper,
    contract_mapper: ContractMapper,
) -> EntityMapper:
    """Factory function to create EntityMapper with proper mappings."""
    return EntityMapper(
        entity_mappings={
            Person: client_mapper.to_entity,
            Company: client_mapper.to_entity,
            Contract: contract_mapper.to_entity,
        }
    )


def create_client_service(
    db: Database,
    entity_mapper: EntityMapper,
    client_mapper: ClientMapper,
    contract_mapper: ContractMapper,
) -> ClientService:
    """
    Factory function to create ClientService.

    The repositories and the service share one UnitOfWork, so every read and
    write of a use case runs in the same transaction.
    """
    unit_of_work = UnitOfWork(db, entity_mapper)
    client_repository = ClientRepository(db, client_mapper, unit_of_work)
    return ClientService(
        client_repository=client_repository,
        contract_repository=ContractRepository(db, contract_mapper, unit_of_work),
        uniqueness_checker=ClientUniquenessChecker(client_repository),
        unit_of_work=unit_of_work,
    )


def create_contract_service(
    db: Database,
    entity_mapper: EntityMapper,
    client_mapper: ClientMapper,
    contract_mapper: ContractMapper,
    ownership: ContractOwnership,
) -> ContractService:
    """Factory function to create ContractService over a shared UnitOfWork."""
    unit_of_work = UnitOfWork(db, entity_mapper)
    return ContractService(
        contract_repository=ContractRepository(db, contract_mapper, unit_of_work),
        client_repository=ClientRepository(db, client_mapper, unit_of_work),
        ownership=ownership,
        unit_of_work=unit_of_work,
    )


class Container(containers.DeclarativeContainer):
    """Main application dependency injection container."""

    wiring_config = containers.WiringConfiguration(
        modules=[
            "src.contract_service.api.v1.clients",
            "src.contract_service.api.v1.contracts",
        ]
    )

    # =========================================================================
    # CONFIGURATION - Singleton (loaded once, cached)
    # =========================================================================
    config = providers.Singleton(Settings)

    # =========================================================================
    # SINGLETONS - Stateless Mappers (reusable across all requests)
    # =========================================================================
    client_mapper = providers.Singleton(ClientMapper)
    contract_mapper = providers.Singleton(ContractMapper)

    entity_mapper = providers.Singleton(
        create_entity_mapper,
        client_mapper=client_mapper,
        contract_mapper=contract_mapper,
    )

    contract_ownership = providers.Singleton(ContractOwnership)

    # =========================================================================
    # SINGLETON - Database (shared connection pool)
    # =========================================================================
    database_settings = providers.Singleton(
        DatabaseSettings,
        db_url=config.provided.database_url,
        echo=config.provided.database.echo,
        pool_size=config.provided.database.pool_size,
        max_overflow=config.provided.database.max_overflow,
    )

    database = providers.Singleton(
        Database,
        db_settings=database_settings,
    )

    # =========================================================================
    # FACTORY - Unit of Work (per-request)
    # =========================================================================
    unit_of_work = providers.Factory(
        UnitOfWork,
        db=database,
        entity_mapper=entity_mapper,
    )

    # =========================================================================
    # FACTORIES - Repositories (standalone reads; services build their own
    # transactional instances)
    # =========================================================================
    client_repository = providers.Factory(
        ClientRepository,
        db=database,
        mapper=client_mapper,
    )

    contract_repository = providers.Factory(
        ContractRepository,
        db=database,
        mapper=contract_mapper,
    )

    # =========================================================================
    # FACTORIES - Services (per-request, each with its own UnitOfWork)
    # =========================================================================
    client_service = providers.Factory(
        create_client_service,
        db=database,
        entity_mapper=entity_mapper,
        client_mapper=client_mapper,
        contract_mapper=contract_mapper,
    )

    contract_service = providers.Factory(
        create_contract_service,
        db=database,
        entity_mapper=entity_mapper,
        client_mapper=client_mapper,
        contract_mapper=contract_mapper,
        ownership=contract_ownership,
    )
