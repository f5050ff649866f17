"""API schemas for client and contract requests and responses."""
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field


class ClientTypeEnum(str, Enum):
    """Client variant enum for API."""
    PERSON = "PERSON"
    COMPANY = "COMPANY"


class ContractSortEnum(str, Enum):
    """Orderings accepted by the active-contracts listing."""
    LAST_MODIFIED = "last_modified"
    START_DATE = "start_date"
    END_DATE = "end_date"
    COST_AMOUNT = "cost_amount"


class CreatePersonRequest(BaseModel):
    """Request schema for creating a person. Field rules are enforced by the service."""
    name: str = Field(..., description="Full name, at most 200 characters")
    email: str = Field(..., description="Email address, stored lower-cased")
    phone: str = Field(..., description="Phone number, 7 to 20 digits and separators")
    birth_date: date = Field(..., description="Birth date, not in the future")


class CreateCompanyRequest(BaseModel):
    """Request schema for creating a company."""
    name: str
    email: str
    phone: str
    company_identifier: str = Field(..., description="Registration identifier, unique among companies")


class UpdateClientRequest(BaseModel):
    """Full replacement of the common client fields."""
    name: str
    email: str
    phone: str


class PatchClientRequest(BaseModel):
    """Partial update; omitted fields are left unchanged."""
    name: str | None = None
    email: str | None = None
    phone: str | None = None


class ClientResponse(BaseModel):
    """Response schema for client data returned by the API."""
    id: UUID
    type: ClientTypeEnum
    name: str
    email: str
    phone: str
    birth_date: date | None = Field(default=None, description="Set for persons only")
    company_identifier: str | None = Field(default=None, description="Set for companies only")
    version: int

    model_config = {"from_attributes": True}


class CreateContractRequest(BaseModel):
    """Request schema for creating a contract. The start defaults to now."""
    cost_amount: Decimal = Field(..., description="Non-negative amount with at most two decimals")
    start_date: datetime | None = None
    end_date: datetime | None = None


class UpdateCostRequest(BaseModel):
    cost_amount: Decimal


class ContractResponse(BaseModel):
    """Response schema for contract data returned by the API."""
    id: UUID
    client_id: UUID
    start_date: datetime
    end_date: datetime | None = None
    cost_amount: Decimal
    last_modified: datetime
    active: bool
    version: int

    model_config = {"from_attributes": True}


class PagedContractResponse(BaseModel):
    """One page of active contracts."""
    items: list[ContractResponse]
    page: int
    size: int
    total_elements: int
    total_pages: int


class ContractSumResponse(BaseModel):
    client_id: UUID
    total: Decimal


class ClosedContractsResponse(BaseModel):
    client_id: UUID
    closed: int = Field(..., description="Number of contracts that were active and are now closed")


class ErrorResponse(BaseModel):
    """Body of every error the API returns."""
    detail: str
    kind: str | None = Field(default=None, description="Validation rule that failed, for 422 responses")
    field: str | None = None
