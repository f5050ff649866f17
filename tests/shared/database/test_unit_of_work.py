from uuid import uuid4

import pytest

from src.shared.database.unit_of_work import UnitOfWork
from tests.shared.database.ledger_fixtures import (
    LedgerEntry,
    LedgerEntryMapper,
    LedgerRepository,
    get_test_entity_mapper,
)


@pytest.fixture
def unit_of_work(clean_database):
    """Create a unit of work."""
    return UnitOfWork(clean_database, get_test_entity_mapper())


@pytest.fixture
def ledger_repository(clean_database, unit_of_work):
    return LedgerRepository(clean_database, LedgerEntryMapper(), unit_of_work)


def entry(label: str, amount: int = 10) -> LedgerEntry:
    return LedgerEntry(id=uuid4(), label=label, amount=amount)


@pytest.mark.asyncio
async def test_commit_on_clean_exit(unit_of_work, ledger_repository):
    """Test persisting an entry via unit of work."""
    # Arrange
    rent = entry("rent", 1200)

    # Act
    async with unit_of_work:
        await ledger_repository.add(rent)

    # Assert
    assert not unit_of_work.in_transaction
    assert await ledger_repository.get_by_id(rent.id) == rent


@pytest.mark.asyncio
async def test_rollback_on_error(unit_of_work, ledger_repository):
    """Test that changes are rolled back when an error occurs."""
    # Arrange
    lost = entry("lost")

    # Act
    with pytest.raises(ValueError, match="Simulated error"):
        async with unit_of_work:
            await ledger_repository.add(lost)
            raise ValueError("Simulated error")

    # Assert
    assert not unit_of_work.in_transaction
    assert await ledger_repository.get_by_id(lost.id) is None


@pytest.mark.asyncio
async def test_reads_inside_transaction_see_pending_writes(unit_of_work, ledger_repository):
    # Arrange
    pending = entry("pending")

    # Act & Assert
    async with unit_of_work:
        await ledger_repository.add(pending)
        await unit_of_work.flush()
        assert await ledger_repository.get_by_id(pending.id) == pending


@pytest.mark.asyncio
async def test_set_based_update_through_execute(unit_of_work, ledger_repository):
    # Arrange
    async with unit_of_work:
        await ledger_repository.add(entry("a", 1))
        await ledger_repository.add(entry("b", 2))

    # Act
    async with unit_of_work:
        changed = await ledger_repository.add_to_all(10)

    # Assert
    assert changed == 2
    assert [e.amount for e in await ledger_repository.get_all()] == [11, 12]


@pytest.mark.asyncio
async def test_writes_outside_transaction_are_refused(unit_of_work, ledger_repository):
    with pytest.raises(RuntimeError):
        await ledger_repository.add(entry("orphan"))
    with pytest.raises(RuntimeError):
        unit_of_work.add(entry("orphan"))


@pytest.mark.asyncio
async def test_nested_enter_is_refused(unit_of_work):
    async with unit_of_work:
        with pytest.raises(RuntimeError, match="already active"):
            async with unit_of_work:
                pass


def test_entity_mapper_rejects_unknown_type():
    with pytest.raises(ValueError, match="No entity mapping"):
        get_test_entity_mapper().map_to_entity(object())
