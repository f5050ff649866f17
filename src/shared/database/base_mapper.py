import abc
from typing import Generic, Iterable, TypeVar


TModel = TypeVar("TModel")
TEntity = TypeVar("TEntity")


class BaseEntityMapper(abc.ABC, Generic[TModel, TEntity]):
    """
    Two-way conversion between a domain model and its SQLAlchemy entity.

    Mappers are stateless; both directions are static so they can be
    registered directly in an EntityMapper.
    """

    @staticmethod
    @abc.abstractmethod
    def to_entity(model_instance: TModel) -> TEntity: ...

    @staticmethod
    @abc.abstractmethod
    def to_model(entity: TEntity) -> TModel: ...

    @classmethod
    def to_models(cls, entities: Iterable[TEntity]) -> list[TModel]:
        return [cls.to_model(entity) for entity in entities]
