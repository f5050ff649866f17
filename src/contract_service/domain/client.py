"""Client aggregate: a closed union of two variants over a shared profile.

``Client`` is ``Person | Company`` discriminated by ``type``. Variant-specific
behaviour lives at the consumers, which ``match`` on the two cases; the
variants themselves only share the record shape of ``_ClientRecord``.
"""
from typing import Annotated, Any, Literal, Self, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.contract_service.domain.exceptions import ValidationError, ValidationErrorKind
from src.contract_service.domain.value_objects import (
    BirthDate,
    ClientName,
    CompanyIdentifier,
    Email,
    PhoneNumber,
)


class ClientProfile(BaseModel):
    """The common, mutable fields of every client."""

    name: ClientName
    email: Email
    phone: PhoneNumber

    model_config = ConfigDict(frozen=True)

    @classmethod
    def of(cls, name: ClientName | str, email: Email | str, phone: PhoneNumber | str) -> "ClientProfile":
        return cls(name=ClientName.of(name), email=Email.of(email), phone=PhoneNumber.of(phone))


class _ClientRecord(BaseModel):
    """Identity, profile and optimistic-lock version shared by both variants."""

    id: UUID | None = Field(default=None, description="Assigned on first save")
    profile: ClientProfile
    version: int = Field(default=0, ge=0, description="0 until persisted")

    model_config = ConfigDict(frozen=True)

    @property
    def name(self) -> ClientName:
        return self.profile.name

    @property
    def email(self) -> Email:
        return self.profile.email

    @property
    def phone(self) -> PhoneNumber:
        return self.profile.phone

    @property
    def is_persisted(self) -> bool:
        return self.id is not None

    @staticmethod
    def _require_id(client_id: UUID | None) -> UUID:
        if client_id is None:
            raise ValidationError(
                ValidationErrorKind.REQUIRED,
                "ID must not be null when reconstituting a client",
                field="id",
            )
        return client_id

    def with_common_fields(
        self,
        name: ClientName | str,
        email: Email | str,
        phone: PhoneNumber | str,
    ) -> Self:
        """Replace all three common fields; id, version and variant field are carried over."""
        missing = [
            label for label, value in (("name", name), ("email", email), ("phone", phone))
            if value is None
        ]
        if missing:
            raise ValidationError(
                ValidationErrorKind.REQUIRED,
                "Cannot update client: the following required fields are null: " + ", ".join(missing),
                field=missing[0],
            )
        return self.model_copy(update={"profile": ClientProfile.of(name, email, phone)})

    def update_partial(
        self,
        name: ClientName | str | None = None,
        email: Email | str | None = None,
        phone: PhoneNumber | str | None = None,
    ) -> Self:
        """Replace only the supplied fields; passing nothing is a valid no-op."""
        profile = self.profile
        return self.with_common_fields(
            name if name is not None else profile.name,
            email if email is not None else profile.email,
            phone if phone is not None else profile.phone,
        )

    def has_same_profile(self, other: "_ClientRecord") -> bool:
        return self.profile == other.profile

    def with_identity(self, client_id: UUID, version: int) -> Self:
        """State after a successful save."""
        return self.model_copy(update={"id": client_id, "version": version})


class Person(_ClientRecord):
    type: Literal["PERSON"] = "PERSON"
    birth_date: BirthDate

    @classmethod
    def create(
        cls,
        name: ClientName | str,
        email: Email | str,
        phone: PhoneNumber | str,
        birth_date: Any,
    ) -> "Person":
        """Build a new, unpersisted person. Uniqueness is the caller's concern."""
        return cls(profile=ClientProfile.of(name, email, phone), birth_date=BirthDate.of(birth_date))

    @classmethod
    def reconstitute(
        cls,
        client_id: UUID | None,
        name: ClientName | str,
        email: Email | str,
        phone: PhoneNumber | str,
        birth_date: Any,
        version: int = 1,
    ) -> "Person":
        return cls(
            id=cls._require_id(client_id),
            profile=ClientProfile.of(name, email, phone),
            birth_date=BirthDate.of(birth_date),
            version=version,
        )


class Company(_ClientRecord):
    type: Literal["COMPANY"] = "COMPANY"
    company_identifier: CompanyIdentifier

    @classmethod
    def create(
        cls,
        name: ClientName | str,
        email: Email | str,
        phone: PhoneNumber | str,
        company_identifier: CompanyIdentifier | str,
    ) -> "Company":
        """Build a new, unpersisted company. Uniqueness is the caller's concern."""
        return cls(
            profile=ClientProfile.of(name, email, phone),
            company_identifier=CompanyIdentifier.of(company_identifier),
        )

    @classmethod
    def reconstitute(
        cls,
        client_id: UUID | None,
        name: ClientName | str,
        email: Email | str,
        phone: PhoneNumber | str,
        company_identifier: CompanyIdentifier | str,
        version: int = 1,
    ) -> "Company":
        return cls(
            id=cls._require_id(client_id),
            profile=ClientProfile.of(name, email, phone),
            company_identifier=CompanyIdentifier.of(company_identifier),
            version=version,
        )


Client = Annotated[Union[Person, Company], Field(discriminator="type")]
