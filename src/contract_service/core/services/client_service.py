"""Client use cases: create, read, update, patch, delete with contract closure."""
import logging
from datetime import date
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from src.shared.database.unit_of_work import UnitOfWork
from src.contract_service.domain.client import Client, Company, Person
from src.contract_service.domain.clock import utc_now
from src.contract_service.domain.exceptions import (
    ClientAlreadyExists,
    ClientNotFound,
    CompanyIdentifierAlreadyExists,
)
from src.contract_service.domain.repositories import ClientRepository, ContractRepository
from src.contract_service.domain.services import ClientUniquenessChecker
from src.contract_service.domain.value_objects import ClientName, Email, PhoneNumber

logger = logging.getLogger(__name__)


def conflict_from_integrity_error(error: IntegrityError, client: Client) -> Exception:
    """
    Translate a unique-index violation into the domain conflict it stands for.

    The storage indexes are the real uniqueness guarantee; a race the pre-check
    missed must surface exactly like the pre-check failure.
    """
    message = str(error.orig).lower()
    match client:
        case Company(company_identifier=identifier) if "company_identifier" in message:
            return CompanyIdentifierAlreadyExists(identifier.value)
    if "email" in message:
        return ClientAlreadyExists(client.email.value)
    return error


class ClientService:
    """Service for handling Client business logic."""

    def __init__(
        self,
        client_repository: ClientRepository,
        contract_repository: ContractRepository,
        uniqueness_checker: ClientUniquenessChecker,
        unit_of_work: UnitOfWork,
    ):
        self.client_repository = client_repository
        self.contract_repository = contract_repository
        self.uniqueness_checker = uniqueness_checker
        self.unit_of_work = unit_of_work

    async def create_person(
        self,
        name: str,
        email: str,
        phone: str,
        birth_date: date,
    ) -> Person:
        """Create a new person after checking that the email is free."""
        person = Person.create(name, email, phone, birth_date)
        return await self._create(person)

    async def create_company(
        self,
        name: str,
        email: str,
        phone: str,
        company_identifier: str,
    ) -> Company:
        """Create a new company after checking that the email and identifier are free."""
        company = Company.create(name, email, phone, company_identifier)
        return await self._create(company)

    async def _create(self, client: Client) -> Client:
        try:
            async with self.unit_of_work:
                await self.uniqueness_checker.ensure_email_unique(client.email)
                match client:
                    case Company(company_identifier=identifier):
                        await self.uniqueness_checker.ensure_company_identifier_unique(identifier)
                    case Person():
                        pass
                saved = await self.client_repository.save(client)
        except IntegrityError as e:
            raise conflict_from_integrity_error(e, client) from e

        logger.info("Created %s client %s", saved.type.lower(), saved.id)
        return saved

    async def get_client(self, client_id: UUID) -> Client:
        """Get a client by ID."""
        client = await self.client_repository.find_by_id(client_id)
        if client is None:
            raise ClientNotFound(client_id)
        return client

    async def update_common_fields(
        self,
        client_id: UUID,
        name: ClientName | str,
        email: Email | str,
        phone: PhoneNumber | str,
    ) -> Client:
        """
        Load, replace name, email and phone, and save, in one transaction.

        Raises:
            ClientNotFound: If no live client has this ID
            ClientAlreadyExists: If the new email belongs to another client
            ConcurrentModification: If the client changed since it was loaded
        """
        try:
            async with self.unit_of_work:
                current = await self.get_client(client_id)
                updated = current.with_common_fields(name, email, phone)
                saved = await self._save_changes(current, updated)
        except IntegrityError as e:
            raise conflict_from_integrity_error(e, updated) from e

        logger.info("Updated client %s to version %d", saved.id, saved.version)
        return saved

    async def patch_client(
        self,
        client_id: UUID,
        name: ClientName | str | None = None,
        email: Email | str | None = None,
        phone: PhoneNumber | str | None = None,
    ) -> Client:
        """Replace only the supplied fields; nothing is written when nothing changes."""
        try:
            async with self.unit_of_work:
                current = await self.get_client(client_id)
                updated = current.update_partial(name=name, email=email, phone=phone)
                if updated.has_same_profile(current):
                    logger.info("Patch of client %s changed nothing, skipping save", client_id)
                    return current
                saved = await self._save_changes(current, updated)
        except IntegrityError as e:
            raise conflict_from_integrity_error(e, updated) from e

        logger.info("Patched client %s to version %d", saved.id, saved.version)
        return saved

    async def _save_changes(self, current: Client, updated: Client) -> Client:
        if updated.email != current.email:
            await self.uniqueness_checker.ensure_email_unique(updated.email)
        return await self.client_repository.save(updated)

    async def delete_client_and_close_contracts(self, client_id: UUID) -> int:
        """
        Close the client's active contracts, then delete the client, atomically.

        Returns:
            Number of contracts that were closed

        Raises:
            ClientNotFound: If no live client has this ID
        """
        now = utc_now()
        async with self.unit_of_work:
            if not await self.client_repository.exists_by_id(client_id):
                raise ClientNotFound(client_id)
            closed = await self.contract_repository.close_all_active_by_client_id(client_id, now)
            await self.client_repository.delete_by_id(client_id)

        logger.info("Deleted client %s and closed %d active contracts", client_id, closed)
        return closed
