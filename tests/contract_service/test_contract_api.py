from datetime import UTC, date, datetime, timedelta
from decimal import Decimal
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import HTTPStatusError

from src.service_client import (
    ContractSortEnum,
    CreateCompanyRequest,
    CreateContractRequest,
    CreatePersonRequest,
)


@pytest_asyncio.fixture
async def person(service_client):
    return await service_client.create_person(
        CreatePersonRequest(name="John Doe", email="john@x.com", phone="+33123456789", birth_date=date(1990, 1, 15))
    )


@pytest_asyncio.fixture
async def company(service_client):
    return await service_client.create_company(
        CreateCompanyRequest(name="Acme", email="info@acme.ch", phone="+41441234567", company_identifier="CHE-1")
    )


@pytest.mark.asyncio
async def test_create_and_get_contract(service_client, person):
    # Act
    created = await service_client.create_contract(
        person.id, CreateContractRequest(cost_amount=Decimal("1500.50"))
    )
    fetched = await service_client.get_contract(person.id, created.id)

    # Assert
    assert created.client_id == person.id
    assert created.cost_amount == Decimal("1500.50")
    assert created.end_date is None
    assert created.active
    assert fetched.id == created.id
    assert fetched.cost_amount == Decimal("1500.50")


@pytest.mark.asyncio
async def test_create_contract_for_missing_client(service_client):
    with pytest.raises(HTTPStatusError) as exc_info:
        await service_client.create_contract(uuid4(), CreateContractRequest(cost_amount=Decimal("1.00")))

    assert exc_info.value.response.status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize("amount, kind", [("-1.00", "negative"), ("1.001", "invalid_scale")])
async def test_create_contract_with_invalid_cost(service_client, person, amount, kind):
    with pytest.raises(HTTPStatusError) as exc_info:
        await service_client.create_contract(person.id, CreateContractRequest(cost_amount=Decimal(amount)))

    assert exc_info.value.response.status_code == 422
    assert exc_info.value.response.json()["kind"] == kind


@pytest.mark.asyncio
async def test_contract_of_other_client_is_forbidden(service_client, person, company):
    # Arrange
    contract = await service_client.create_contract(person.id, CreateContractRequest(cost_amount=Decimal("10.00")))

    # Act & Assert
    with pytest.raises(HTTPStatusError) as exc_info:
        await service_client.get_contract(company.id, contract.id)
    assert exc_info.value.response.status_code == 403

    with pytest.raises(HTTPStatusError) as exc_info:
        await service_client.update_cost(company.id, contract.id, Decimal("1.00"))
    assert exc_info.value.response.status_code == 403


@pytest.mark.asyncio
async def test_update_cost(service_client, person):
    # Arrange
    contract = await service_client.create_contract(person.id, CreateContractRequest(cost_amount=Decimal("100.00")))

    # Act
    await service_client.update_cost(person.id, contract.id, Decimal("250.75"))

    # Assert
    fetched = await service_client.get_contract(person.id, contract.id)
    assert fetched.cost_amount == Decimal("250.75")
    assert fetched.last_modified > contract.last_modified
    assert fetched.version == contract.version + 1


@pytest.mark.asyncio
async def test_list_active_contracts_and_sum(service_client, person):
    # Arrange
    now = datetime.now(UTC)
    await service_client.create_contract(person.id, CreateContractRequest(cost_amount=Decimal("1500.50")))
    await service_client.create_contract(
        person.id,
        CreateContractRequest(cost_amount=Decimal("2500.00"), start_date=now - timedelta(days=1), end_date=now + timedelta(days=30)),
    )
    await service_client.create_contract(
        person.id,
        CreateContractRequest(cost_amount=Decimal("1000.00"), start_date=now - timedelta(days=30), end_date=now - timedelta(days=1)),
    )

    # Act
    page = await service_client.list_active_contracts(person.id, size=1, sort=ContractSortEnum.COST_AMOUNT)
    total = await service_client.sum_active_contracts(person.id)

    # Assert
    assert page.total_elements == 2
    assert page.total_pages == 2
    assert [item.cost_amount for item in page.items] == [Decimal("2500.00")]
    assert all(item.active for item in page.items)
    assert total == Decimal("4000.50")


@pytest.mark.asyncio
async def test_list_active_contracts_updated_since(service_client, person):
    # Arrange
    first = await service_client.create_contract(person.id, CreateContractRequest(cost_amount=Decimal("1.00")))
    second = await service_client.create_contract(person.id, CreateContractRequest(cost_amount=Decimal("2.00")))

    # Act
    page = await service_client.list_active_contracts(person.id, updated_since=second.last_modified)

    # Assert
    assert [item.id for item in page.items] == [second.id]
    assert first.id not in {item.id for item in page.items}


@pytest.mark.asyncio
async def test_page_size_above_maximum_is_rejected(http_client, person):
    response = await http_client.get(f"/api/v1/clients/{person.id}/contracts", params={"size": 101})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_list_for_missing_client_returns_404(http_client):
    response = await http_client.get(f"/api/v1/clients/{uuid4()}/contracts")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_close_contract_and_close_active(service_client, person):
    # Arrange
    first = await service_client.create_contract(person.id, CreateContractRequest(cost_amount=Decimal("1.00")))
    await service_client.create_contract(person.id, CreateContractRequest(cost_amount=Decimal("2.00")))
    await service_client.create_contract(person.id, CreateContractRequest(cost_amount=Decimal("3.00")))

    # Act
    closed = await service_client.close_contract(person.id, first.id)
    closed_count = await service_client.close_active_contracts(person.id)

    # Assert
    assert not closed.active
    assert closed.end_date is not None
    assert closed_count == 2
    assert await service_client.sum_active_contracts(person.id) == Decimal("0.00")
