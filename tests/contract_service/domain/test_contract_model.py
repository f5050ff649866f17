"""Tests for the Contract entity."""
from datetime import UTC, date, datetime, timedelta
from decimal import Decimal
from uuid import uuid4

import pytest

from src.contract_service.domain.client import Person
from src.contract_service.domain.contract import Contract
from src.contract_service.domain.exceptions import InvalidContract, ValidationError, ValidationErrorKind
from src.contract_service.domain.value_objects import ContractCost, ContractPeriod

FIXED_NOW = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


def create_client() -> Person:
    """Helper to create a persisted Person for testing."""
    return Person.reconstitute(uuid4(), "John Doe", "john@x.com", "+33123456789", date(1990, 1, 15))


def create_contract(amount="100.00", start=None, end=None) -> Contract:
    return Contract.create(create_client(), ContractPeriod.of(start, end), ContractCost.of(amount))


class TestContractCreation:
    def test_create_is_active_and_unpersisted(self):
        before = datetime.now(UTC)
        contract = create_contract()

        assert contract.id is None
        assert contract.version == 0
        assert contract.is_active()
        assert contract.last_modified >= before
        assert contract.client_id == contract.client.id

    @pytest.mark.parametrize("missing", ["client", "period", "cost"])
    def test_create_requires_every_part(self, missing):
        parts = {
            "client": create_client(),
            "period": ContractPeriod.of(),
            "cost": ContractCost.of("1.00"),
        }
        parts[missing] = None

        with pytest.raises(InvalidContract) as exc_info:
            Contract.create(parts["client"], parts["period"], parts["cost"])

        assert exc_info.value.kind == ValidationErrorKind.REQUIRED

    def test_reconstitute_requires_id(self):
        with pytest.raises(ValidationError) as exc_info:
            Contract.reconstitute(None, create_client(), ContractPeriod.of(), ContractCost.of(1), FIXED_NOW)
        assert exc_info.value.field == "id"

    def test_reconstitute_makes_last_modified_utc(self):
        contract = Contract.reconstitute(
            uuid4(), create_client(), ContractPeriod.of(), ContractCost.of(1), datetime(2024, 3, 1, 12, 0)
        )
        assert contract.last_modified == FIXED_NOW


class TestContractMutation:
    def test_change_cost_replaces_amount_and_advances_last_modified(self):
        """Scenario: cost 100.00 changed to 250.75."""
        contract = create_contract("100.00")

        changed = contract.change_cost(ContractCost.of("250.75"))

        assert changed.cost_amount.value == Decimal("250.75")
        assert changed.last_modified > contract.last_modified
        assert contract.cost_amount.value == Decimal("100.00")

    def test_last_modified_strictly_increases_when_clock_stands_still(self, monkeypatch):
        monkeypatch.setattr("src.contract_service.domain.contract.utc_now", lambda: FIXED_NOW)
        contract = create_contract(start=FIXED_NOW)

        first = contract.change_cost(ContractCost.of("1.00"))
        second = first.change_cost(ContractCost.of("2.00"))

        assert contract.last_modified == FIXED_NOW
        assert first.last_modified == FIXED_NOW + timedelta(microseconds=1)
        assert second.last_modified == FIXED_NOW + timedelta(microseconds=2)

    def test_change_cost_requires_value(self):
        with pytest.raises(InvalidContract):
            create_contract().change_cost(None)

    def test_change_cost_allowed_on_expired_contract(self):
        start = datetime.now(UTC) - timedelta(days=30)
        expired = create_contract(start=start, end=start + timedelta(days=1))

        changed = expired.change_cost(ContractCost.of("9.99"))

        assert not changed.is_active()
        assert changed.cost_amount.value == Decimal("9.99")

    def test_close_now_pins_end_and_keeps_start(self):
        contract = create_contract(start=datetime.now(UTC) - timedelta(days=1))

        closed = contract.close_now()

        assert closed.period.start == contract.period.start
        assert closed.period.end == closed.last_modified
        assert not closed.is_active()
        assert contract.is_active()

    def test_close_now_on_future_contract(self):
        """A contract that has not started yet can still be closed."""
        start = datetime.now(UTC) + timedelta(days=7)
        contract = create_contract(start=start)

        closed = contract.close_now()

        assert closed.period.start == start
        assert closed.period.end < start
        assert not closed.is_active()

    def test_close_now_on_expired_contract_moves_end(self):
        start = datetime.now(UTC) - timedelta(days=30)
        expired = create_contract(start=start, end=start + timedelta(days=1))

        closed = expired.close_now()

        assert closed.period.end > expired.period.end

    def test_is_active_at_follows_period(self):
        start = datetime(2024, 1, 1, tzinfo=UTC)
        end = datetime(2024, 6, 1, tzinfo=UTC)
        contract = create_contract(start=start, end=end)

        assert contract.is_active_at(end - timedelta(seconds=1))
        assert not contract.is_active_at(end)

    def test_belongs_to(self):
        contract = create_contract()

        assert contract.belongs_to(contract.client.id)
        assert not contract.belongs_to(uuid4())
