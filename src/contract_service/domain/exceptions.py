"""Domain error taxonomy.

None of these subclass ValueError: pydantic only wraps ValueError/AssertionError
raised inside validators, so a value object constructor surfaces the domain
error itself instead of a pydantic.ValidationError.
"""
from enum import StrEnum
from typing import Any
from uuid import UUID

from src.shared.exceptions import ConcurrentModification, ConflictingEntityFound, EntityNotFound


class DomainError(Exception):
    """Base class for every error raised by the domain model."""


class ValidationErrorKind(StrEnum):
    """Which rule a value object or entity rejected."""
    REQUIRED = "required"
    BLANK = "blank"
    TOO_LONG = "too_long"
    INVALID_FORMAT = "invalid_format"
    NEGATIVE = "negative"
    INVALID_SCALE = "invalid_scale"
    END_NOT_AFTER_START = "end_not_after_start"
    IN_FUTURE = "in_future"


class ValidationError(DomainError):
    """A value object factory or entity constructor rejected its input."""

    def __init__(self, kind: ValidationErrorKind, message: str, field: str | None = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.field = field

    def __repr__(self) -> str:
        return f"ValidationError(kind={self.kind.value!r}, field={self.field!r}, message={self.message!r})"


class InvalidContract(ValidationError):
    """Contract construction or mutation was given a missing argument."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(ValidationErrorKind.REQUIRED, message, field)


class ClientNotFound(EntityNotFound, DomainError):
    def __init__(self, client_id: Any):
        super().__init__("Client", client_id)
        self.client_id = client_id


class ContractNotFound(EntityNotFound, DomainError):
    def __init__(self, contract_id: Any):
        super().__init__("Contract", contract_id)
        self.contract_id = contract_id


class ClientAlreadyExists(ConflictingEntityFound, DomainError):
    """Email collision, whether caught by the pre-check or the storage constraint."""

    def __init__(self, email: str):
        super().__init__("Client", "email", email)
        self.email = email


class CompanyIdentifierAlreadyExists(ConflictingEntityFound, DomainError):
    def __init__(self, identifier: str):
        super().__init__("Company", "company identifier", identifier)
        self.identifier = identifier


class ContractNotOwnedByClient(DomainError):
    def __init__(self, contract_id: UUID | None, client_id: UUID):
        super().__init__(f"Contract {contract_id} does not belong to client {client_id}")
        self.contract_id = contract_id
        self.client_id = client_id


__all__ = [
    "ClientAlreadyExists",
    "ClientNotFound",
    "CompanyIdentifierAlreadyExists",
    "ConcurrentModification",
    "ContractNotFound",
    "ContractNotOwnedByClient",
    "DomainError",
    "InvalidContract",
    "ValidationError",
    "ValidationErrorKind",
]
