from src.shared.database.base_mapper import BaseEntityMapper
from src.contract_service.domain.clock import ensure_utc
from src.contract_service.domain.contract import Contract
from src.contract_service.domain.value_objects import ContractCost, ContractPeriod
from src.contract_service.infrastructure.entities.contract_entity import ContractEntity
from src.contract_service.infrastructure.mappers.client_mapper import ClientMapper


class ContractMapper(BaseEntityMapper[Contract, ContractEntity]):
    """Mapper for converting between Contract domain model and ContractEntity."""

    @staticmethod
    def to_entity(model_instance: Contract) -> ContractEntity:
        """Convert a Contract (domain model) to ContractEntity (database entity)."""
        return ContractEntity(
            id=model_instance.id,
            client_id=model_instance.client_id,
            start_date=model_instance.period.start,
            end_date=model_instance.period.end,
            cost_amount=model_instance.cost_amount.value,
            last_modified=model_instance.last_modified,
            version=model_instance.version,
        )

    @staticmethod
    def to_model(entity: ContractEntity) -> Contract:
        """Convert a ContractEntity (database entity) to Contract (domain model)."""
        # SQLite hands timestamps back naive; every stored timestamp is UTC
        return Contract.reconstitute(
            entity.id,
            ClientMapper.to_model(entity.client),
            ContractPeriod.restore(
                ensure_utc(entity.start_date),
                ensure_utc(entity.end_date) if entity.end_date is not None else None,
            ),
            ContractCost.of(entity.cost_amount),
            ensure_utc(entity.last_modified),
            version=entity.version,
        )
