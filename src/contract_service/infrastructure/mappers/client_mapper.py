from src.shared.database.base_mapper import BaseEntityMapper
from src.contract_service.domain.client import Client, Company, Person
from src.contract_service.infrastructure.entities.client_entity import ClientEntity, ClientType


class ClientMapper(BaseEntityMapper[Client, ClientEntity]):
    """Mapper for converting between the Person/Company union and ClientEntity."""

    @staticmethod
    def to_entity(model_instance: Client) -> ClientEntity:
        """Convert a Person or Company (domain model) to ClientEntity (database entity)."""
        entity = ClientEntity(
            id=model_instance.id,
            name=model_instance.name.value,
            email=model_instance.email.value,
            phone=model_instance.phone.value,
            version=model_instance.version,
        )
        match model_instance:
            case Person(birth_date=birth_date):
                entity.client_type = ClientType.PERSON
                entity.birth_date = birth_date.value
            case Company(company_identifier=identifier):
                entity.client_type = ClientType.COMPANY
                entity.company_identifier = identifier.value
        return entity

    @staticmethod
    def to_model(entity: ClientEntity) -> Client:
        """Convert a ClientEntity (database entity) to Person or Company (domain model)."""
        match entity.client_type:
            case ClientType.PERSON:
                return Person.reconstitute(
                    entity.id,
                    entity.name,
                    entity.email,
                    entity.phone,
                    entity.birth_date,
                    version=entity.version,
                )
            case ClientType.COMPANY:
                return Company.reconstitute(
                    entity.id,
                    entity.name,
                    entity.email,
                    entity.phone,
                    entity.company_identifier,
                    version=entity.version,
                )
        raise ValueError(f"Unknown client type: {entity.client_type}")
