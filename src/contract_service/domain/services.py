"""Domain services: client uniqueness and contract ownership."""
import logging
from uuid import UUID

from src.contract_service.domain.contract import Contract
from src.contract_service.domain.exceptions import (
    ClientAlreadyExists,
    CompanyIdentifierAlreadyExists,
    ContractNotOwnedByClient,
)
from src.contract_service.domain.repositories import ClientRepository
from src.contract_service.domain.value_objects import CompanyIdentifier, Email

logger = logging.getLogger(__name__)


class ClientUniquenessChecker:
    """
    Fast-fail uniqueness checks run before a client is created or re-addressed.

    This is check-then-act: a concurrent create can slip between the check and
    the insert. The storage unique indexes are the real guarantee; the
    application layer reports their violations as the same error kinds.
    """

    def __init__(self, client_repository: ClientRepository):
        self.client_repository = client_repository

    async def ensure_email_unique(self, email: Email) -> None:
        if await self.client_repository.exists_by_email(email.value):
            logger.warning("Rejected client with duplicate email %s", email.value)
            raise ClientAlreadyExists(email.value)

    async def ensure_company_identifier_unique(self, identifier: CompanyIdentifier) -> None:
        if await self.client_repository.exists_by_company_identifier(identifier.value):
            logger.warning("Rejected company with duplicate identifier %s", identifier.value)
            raise CompanyIdentifierAlreadyExists(identifier.value)


class ContractOwnership:
    """Guards client-scoped contract access against guessed contract identifiers."""

    @staticmethod
    def ensure_belongs_to(contract: Contract, client_id: UUID) -> None:
        if not contract.belongs_to(client_id):
            logger.warning("Contract %s accessed through foreign client %s", contract.id, client_id)
            raise ContractNotOwnedByClient(contract.id, client_id)
