from typing import Any, Callable, Mapping


class EntityMapper:
    """Dispatches a domain model to the mapper function registered for its type."""

    def __init__(self, entity_mappings: Mapping[type, Callable[[Any], Any]]):
        self.entity_mappings = dict(entity_mappings)

    def map_to_entity(self, model_instance: Any):
        # Walk the MRO so a mapping registered for a base model covers its variants
        for model_type in type(model_instance).__mro__:
            mapping = self.entity_mappings.get(model_type)
            if mapping is not None:
                return mapping(model_instance)
        raise ValueError(f"No entity mapping found for model type: {type(model_instance).__name__}")
