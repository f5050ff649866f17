from datetime import UTC, datetime, timedelta
from decimal import Decimal
from uuid import uuid4

import pytest
import pytest_asyncio

from src.contract_service.domain.exceptions import (
    ClientNotFound,
    ContractNotFound,
    ContractNotOwnedByClient,
    ValidationError,
    ValidationErrorKind,
)
from src.contract_service.domain.pagination import PageRequest


@pytest_asyncio.fixture
async def person(client_service):
    return await client_service.create_person(
        name="John Doe", email="john@x.com", phone="+33123456789", birth_date="1990-01-15"
    )


@pytest_asyncio.fixture
async def company(client_service):
    return await client_service.create_company(
        name="Acme", email="info@acme.ch", phone="+41441234567", company_identifier="CHE-1"
    )


@pytest.mark.asyncio
async def test_create_contract_defaults_start_to_now(contract_service, person):
    # Arrange
    before = datetime.now(UTC)

    # Act
    contract = await contract_service.create_contract_for_client(person.id, Decimal("100.00"))

    # Assert
    assert contract.id is not None
    assert contract.client == person
    assert contract.period.start >= before
    assert contract.period.end is None
    assert contract.is_active()


@pytest.mark.asyncio
async def test_create_contract_for_unknown_client(contract_service):
    with pytest.raises(ClientNotFound):
        await contract_service.create_contract_for_client(uuid4(), "10.00")


@pytest.mark.asyncio
async def test_create_contract_rejects_invalid_period(contract_service, person):
    start = datetime.now(UTC)

    with pytest.raises(ValidationError) as exc_info:
        await contract_service.create_contract_for_client(person.id, "10.00", start, start - timedelta(days=1))

    assert exc_info.value.kind == ValidationErrorKind.END_NOT_AFTER_START


@pytest.mark.asyncio
async def test_update_cost(contract_service, person):
    # Arrange
    contract = await contract_service.create_contract_for_client(person.id, "100.00")

    # Act
    updated = await contract_service.update_cost(contract.id, "250.75")

    # Assert
    assert updated.cost_amount.value == Decimal("250.75")
    assert updated.last_modified > contract.last_modified
    stored = await contract_service.get_contract(contract.id)
    assert stored.cost_amount.value == Decimal("250.75")
    assert stored.version == 2


@pytest.mark.asyncio
async def test_update_cost_unknown_contract(contract_service):
    with pytest.raises(ContractNotFound):
        await contract_service.update_cost(uuid4(), "1.00")


@pytest.mark.asyncio
async def test_update_cost_through_foreign_client_is_rejected(contract_service, person, company):
    # Arrange
    contract = await contract_service.create_contract_for_client(person.id, "100.00")

    # Act & Assert
    with pytest.raises(ContractNotOwnedByClient):
        await contract_service.update_cost(contract.id, "1.00", client_id=company.id)

    stored = await contract_service.get_contract(contract.id)
    assert stored.cost_amount.value == Decimal("100.00")


@pytest.mark.asyncio
async def test_get_contract_for_client_checks_ownership(contract_service, person, company):
    # Arrange
    contract = await contract_service.create_contract_for_client(person.id, "100.00")

    # Act & Assert
    assert (await contract_service.get_contract_for_client(person.id, contract.id)).id == contract.id
    with pytest.raises(ContractNotOwnedByClient):
        await contract_service.get_contract_for_client(company.id, contract.id)


@pytest.mark.asyncio
async def test_close_contract(contract_service, person):
    # Arrange
    contract = await contract_service.create_contract_for_client(person.id, "100.00")

    # Act
    closed = await contract_service.close_contract(contract.id, client_id=person.id)

    # Assert
    assert not closed.is_active()
    page = await contract_service.get_active_contracts(person.id)
    assert page.total_elements == 0


@pytest.mark.asyncio
async def test_active_contracts_and_sum(contract_service, person):
    """Open-ended 1500.50 plus future-ending 2500.00 are active; the expired 1000.00 is not."""
    # Arrange
    now = datetime.now(UTC)
    await contract_service.create_contract_for_client(person.id, "1500.50")
    await contract_service.create_contract_for_client(person.id, "2500.00", now - timedelta(days=1), now + timedelta(days=30))
    await contract_service.create_contract_for_client(
        person.id, "1000.00", now - timedelta(days=30), now - timedelta(days=1)
    )

    # Act
    page = await contract_service.get_active_contracts(person.id, page=PageRequest(size=10))
    total = await contract_service.sum_active_contracts(person.id)

    # Assert
    assert page.total_elements == 2
    assert total == Decimal("4000.50")


@pytest.mark.asyncio
async def test_active_contracts_updated_since(contract_service, person):
    # Arrange
    first = await contract_service.create_contract_for_client(person.id, "10.00")
    second = await contract_service.create_contract_for_client(person.id, "20.00")
    await contract_service.update_cost(first.id, "11.00")
    cutoff = second.last_modified + timedelta(microseconds=1)

    # Act
    page = await contract_service.get_active_contracts(person.id, updated_since=cutoff)

    # Assert
    assert [contract.id for contract in page.items] == [first.id]


@pytest.mark.asyncio
async def test_queries_for_unknown_client_fail(contract_service):
    with pytest.raises(ClientNotFound):
        await contract_service.get_active_contracts(uuid4())
    with pytest.raises(ClientNotFound):
        await contract_service.sum_active_contracts(uuid4())
    with pytest.raises(ClientNotFound):
        await contract_service.close_active_contracts(uuid4())


@pytest.mark.asyncio
async def test_close_active_contracts_keeps_client(contract_service, client_service, person):
    # Arrange
    await contract_service.create_contract_for_client(person.id, "10.00")
    await contract_service.create_contract_for_client(person.id, "20.00")

    # Act
    closed = await contract_service.close_active_contracts(person.id)

    # Assert
    assert closed == 2
    assert await contract_service.sum_active_contracts(person.id) == Decimal("0.00")
    assert (await client_service.get_client(person.id)).id == person.id
