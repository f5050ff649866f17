from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.shared.database.database import Base
from src.contract_service.infrastructure.entities.client_entity import ClientEntity


class ContractEntity(Base):
    """SQLAlchemy model for the contracts table."""
    __tablename__ = "contracts"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    client_id: Mapped[UUID] = mapped_column(ForeignKey("clients.id"), nullable=False, index=True)
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    cost_amount: Mapped[Decimal] = mapped_column(Numeric(19, 2), nullable=False)
    last_modified: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    # Contracts never change owner; the owner is always loaded with the contract
    client: Mapped[ClientEntity] = relationship(ClientEntity, lazy="joined", viewonly=True)


# Serves the active-set, bulk-close and sum queries, which all filter on client then end date
Index("ix_contracts_client_id_end_date", ContractEntity.client_id, ContractEntity.end_date)
