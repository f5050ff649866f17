"""Contract entity."""
from datetime import datetime, timedelta
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.contract_service.domain.client import Client
from src.contract_service.domain.clock import ensure_utc, utc_now
from src.contract_service.domain.exceptions import InvalidContract, ValidationError, ValidationErrorKind
from src.contract_service.domain.value_objects import ContractCost, ContractPeriod

_TICK = timedelta(microseconds=1)


def _next_modification(previous: datetime | None) -> datetime:
    """Current time, bumped past ``previous`` so last_modified never stalls or goes back."""
    now = utc_now()
    if previous is not None and now <= previous:
        return previous + _TICK
    return now


class Contract(BaseModel):
    """
    A contract owned by exactly one client.

    Immutable: ``change_cost`` and ``close_now`` return the new state, which the
    application layer persists. Activity is derived from the period, never stored.
    """

    id: UUID | None = None
    client: Client
    period: ContractPeriod
    cost_amount: ContractCost
    last_modified: datetime = Field(default_factory=utc_now)
    version: int = Field(default=0, ge=0)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _require_parts(cls, data: Any) -> Any:
        if isinstance(data, dict):
            for field, label in (("client", "Client"), ("period", "Period"), ("cost_amount", "Cost amount")):
                if data.get(field) is None:
                    raise InvalidContract(f"{label} must not be null", field=field)
            if data.get("last_modified") is not None:
                data = {**data, "last_modified": ensure_utc(data["last_modified"])}
        return data

    @classmethod
    def create(cls, client: Client, period: ContractPeriod, cost: ContractCost) -> "Contract":
        return cls(client=client, period=period, cost_amount=cost, last_modified=utc_now())

    @classmethod
    def reconstitute(
        cls,
        contract_id: UUID | None,
        client: Client,
        period: ContractPeriod,
        cost: ContractCost,
        last_modified: datetime,
        version: int = 1,
    ) -> "Contract":
        if contract_id is None:
            raise ValidationError(
                ValidationErrorKind.REQUIRED,
                "ID must not be null when reconstituting a contract",
                field="id",
            )
        return cls(
            id=contract_id,
            client=client,
            period=period,
            cost_amount=cost,
            last_modified=last_modified,
            version=version,
        )

    @property
    def client_id(self) -> UUID | None:
        return self.client.id

    def is_active_at(self, reference: datetime) -> bool:
        return self.period.is_active_at(reference)

    def is_active(self) -> bool:
        return self.period.is_active()

    def belongs_to(self, client_id: UUID) -> bool:
        return self.client.id == client_id

    def change_cost(self, new_cost: ContractCost | None) -> "Contract":
        """Replace the cost. Allowed whether or not the contract is still active."""
        if new_cost is None:
            raise InvalidContract("New cost amount must not be null", field="cost_amount")
        return self.model_copy(
            update={"cost_amount": new_cost, "last_modified": _next_modification(self.last_modified)}
        )

    def close_now(self) -> "Contract":
        """Pin the period end to now, keeping its start; succeeds even if already expired."""
        moment = _next_modification(self.last_modified)
        return self.model_copy(
            update={"period": self.period.closed_at(moment), "last_modified": moment}
        )

    def with_identity(self, contract_id: UUID, version: int) -> "Contract":
        """State after a successful save."""
        return self.model_copy(update={"id": contract_id, "version": version})
