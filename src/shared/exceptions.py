"""Persistence-level errors shared by the repositories and the application layer."""
from typing import Any


class EntityError(Exception):
    """Base for errors about one stored entity, identified by its type name."""

    def __init__(self, entity_name: str, message: str):
        super().__init__(message)
        self.entity_name = entity_name


class EntityNotFound(EntityError):
    """No live row exists for the requested ID."""

    def __init__(self, entity_name: str, entity_id: Any):
        super().__init__(entity_name, f"{entity_name} with ID {entity_id} not found")
        self.entity_id = entity_id


class ConflictingEntityFound(EntityError):
    """
    A unique field is already taken by another live row.

    Args:
        entity_name: Type of the entity being written
        field_name: Human-readable name of the unique field
        field_value: The value that collided
    """

    def __init__(self, entity_name: str, field_name: str, field_value: Any):
        super().__init__(entity_name, f"{entity_name} with {field_name} '{field_value}' already exists")
        self.field_name = field_name
        self.field_value = field_value


class ConcurrentModification(EntityError):
    """
    Raised when a versioned save started from a stale version.

    The caller may reload the entity and retry; nothing is retried internally.
    """

    def __init__(self, entity_name: str, entity_id: Any, expected_version: int):
        super().__init__(
            entity_name,
            f"{entity_name} with ID {entity_id} was modified concurrently "
            f"(expected version {expected_version})",
        )
        self.entity_id = entity_id
        self.expected_version = expected_version
