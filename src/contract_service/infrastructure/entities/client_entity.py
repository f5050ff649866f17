from datetime import date, datetime
from enum import Enum as PyEnum
from uuid import UUID, uuid4

from sqlalchemy import Date, DateTime, Enum, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from src.shared.database.database import Base


class ClientType(str, PyEnum):
    """Discriminator for the two client variants stored in one table."""
    PERSON = "PERSON"
    COMPANY = "COMPANY"


class ClientEntity(Base):
    """SQLAlchemy model for the clients table (persons and companies)."""
    __tablename__ = "clients"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    client_type: Mapped[ClientType] = mapped_column(
        Enum(ClientType, name="client_type", values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(254), nullable=False, index=True)
    phone: Mapped[str] = mapped_column(String(32), nullable=False)
    birth_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    company_identifier: Mapped[str | None] = mapped_column(String(64), nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )
    # Tombstone: deleted clients keep their row so closed contracts still resolve their owner
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


# Uniqueness only applies to live clients; a deleted client's email can be reused.
# The index names are matched when translating IntegrityError into domain conflicts.
EMAIL_UNIQUE_INDEX = "uq_clients_email_live"
COMPANY_IDENTIFIER_UNIQUE_INDEX = "uq_clients_company_identifier_live"

Index(
    EMAIL_UNIQUE_INDEX,
    ClientEntity.email,
    unique=True,
    postgresql_where=ClientEntity.deleted_at.is_(None),
    sqlite_where=ClientEntity.deleted_at.is_(None),
)

Index(
    COMPANY_IDENTIFIER_UNIQUE_INDEX,
    ClientEntity.company_identifier,
    unique=True,
    postgresql_where=ClientEntity.deleted_at.is_(None) & ClientEntity.company_identifier.is_not(None),
    sqlite_where=ClientEntity.deleted_at.is_(None) & ClientEntity.company_identifier.is_not(None),
)
