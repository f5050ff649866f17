"""Self-validating, normalizing value objects.

Each value object is a frozen pydantic model whose only field(s) pass through
a ``mode="before"`` validator. ``Model.of(raw)`` and ``Model(value=raw)`` both
run that validator, so an instance always holds normalized, valid content.
Equality and hashing are value based.
"""
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, ClassVar, Self

from pydantic import BaseModel, ConfigDict, ValidationInfo, model_validator

from src.contract_service.domain.clock import ensure_utc, utc_now
from src.contract_service.domain.exceptions import ValidationError, ValidationErrorKind

EMAIL_MAX_LENGTH = 254
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PHONE_PATTERN = re.compile(r"\+?[0-9 .()/-]{7,20}")
CLIENT_NAME_MAX_LENGTH = 200
COMPANY_IDENTIFIER_MAX_LENGTH = 64
COST_MAX_SCALE = 2

# Validation context flag used when rebuilding a period from stored facts
RESTORE_CONTEXT = "restore"


def _raw_value(data: Any) -> Any:
    if isinstance(data, dict):
        return data.get("value")
    return data


class ValueObject(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class SingleValueObject(ValueObject):
    """A value object wrapping one normalized primitive in ``value``."""

    field_name: ClassVar[str] = "value"

    @classmethod
    def of(cls, raw: Any) -> Self:
        if isinstance(raw, cls):
            return raw
        return cls(value=raw)

    @model_validator(mode="before")
    @classmethod
    def _validate_raw(cls, data: Any) -> dict:
        return {"value": cls.normalize(_raw_value(data))}

    @classmethod
    def normalize(cls, raw: Any) -> Any:
        raise NotImplementedError

    @classmethod
    def _fail(cls, kind: ValidationErrorKind, message: str) -> ValidationError:
        return ValidationError(kind, message, field=cls.field_name)

    @classmethod
    def _required_text(cls, raw: Any, label: str) -> str:
        """Reject None, non-strings and blank strings; return the trimmed text."""
        if raw is None:
            raise cls._fail(ValidationErrorKind.REQUIRED, f"{label} must not be null")
        if not isinstance(raw, str):
            raise cls._fail(ValidationErrorKind.INVALID_FORMAT, f"{label} must be a string")
        trimmed = raw.strip()
        if not trimmed:
            raise cls._fail(ValidationErrorKind.BLANK, f"{label} must not be blank")
        return trimmed

    def __str__(self) -> str:
        return str(self.value)  # type: ignore[attr-defined]


class Email(SingleValueObject):
    """Trimmed, lower-cased email address."""

    field_name: ClassVar[str] = "email"
    value: str

    @classmethod
    def normalize(cls, raw: Any) -> str:
        normalized = cls._required_text(raw, "Email").lower()
        if len(normalized) > EMAIL_MAX_LENGTH:
            raise cls._fail(
                ValidationErrorKind.TOO_LONG,
                f"Email too long (max {EMAIL_MAX_LENGTH} characters)",
            )
        if not EMAIL_PATTERN.fullmatch(normalized):
            raise cls._fail(ValidationErrorKind.INVALID_FORMAT, f"Invalid email format: {raw}")
        return normalized


class PhoneNumber(SingleValueObject):
    field_name: ClassVar[str] = "phone"
    value: str

    @classmethod
    def normalize(cls, raw: Any) -> str:
        normalized = cls._required_text(raw, "Phone number")
        if not PHONE_PATTERN.fullmatch(normalized):
            raise cls._fail(ValidationErrorKind.INVALID_FORMAT, f"Invalid phone number format: {raw}")
        return normalized


class ClientName(SingleValueObject):
    field_name: ClassVar[str] = "name"
    value: str

    @classmethod
    def normalize(cls, raw: Any) -> str:
        normalized = cls._required_text(raw, "Client name")
        if len(normalized) > CLIENT_NAME_MAX_LENGTH:
            raise cls._fail(
                ValidationErrorKind.TOO_LONG,
                f"Client name too long (max {CLIENT_NAME_MAX_LENGTH} characters)",
            )
        return normalized


class CompanyIdentifier(SingleValueObject):
    """Registration identifier of a company; uniqueness is enforced by ClientUniquenessChecker."""

    field_name: ClassVar[str] = "company_identifier"
    value: str

    @classmethod
    def normalize(cls, raw: Any) -> str:
        normalized = cls._required_text(raw, "Company identifier")
        if len(normalized) > COMPANY_IDENTIFIER_MAX_LENGTH:
            raise cls._fail(
                ValidationErrorKind.TOO_LONG,
                f"Company identifier too long (max {COMPANY_IDENTIFIER_MAX_LENGTH} characters)",
            )
        return normalized


class ContractCost(SingleValueObject):
    """Non-negative decimal amount with at most two fractional digits."""

    field_name: ClassVar[str] = "cost"
    value: Decimal

    @classmethod
    def normalize(cls, raw: Any) -> Decimal:
        if raw is None:
            raise cls._fail(ValidationErrorKind.REQUIRED, "Contract cost amount must not be null")
        if isinstance(raw, bool):
            raise cls._fail(ValidationErrorKind.INVALID_FORMAT, "Contract cost amount must be a number")
        if isinstance(raw, float):
            raw = str(raw)
        try:
            amount = raw if isinstance(raw, Decimal) else Decimal(str(raw).strip())
        except InvalidOperation:
            raise cls._fail(ValidationErrorKind.INVALID_FORMAT, f"Invalid contract cost amount: {raw}")
        if not amount.is_finite():
            raise cls._fail(ValidationErrorKind.INVALID_FORMAT, f"Invalid contract cost amount: {raw}")
        if amount < 0:
            raise cls._fail(
                ValidationErrorKind.NEGATIVE,
                f"Contract cost amount must not be negative: {amount}",
            )
        if -amount.as_tuple().exponent > COST_MAX_SCALE:
            raise cls._fail(
                ValidationErrorKind.INVALID_SCALE,
                f"Contract cost amount must have at most {COST_MAX_SCALE} decimal places: {amount}",
            )
        return amount

    @classmethod
    def zero(cls) -> "ContractCost":
        return cls.of(Decimal("0"))


class BirthDate(SingleValueObject):
    field_name: ClassVar[str] = "birth_date"
    value: date

    @classmethod
    def normalize(cls, raw: Any) -> date:
        if raw is None:
            raise cls._fail(ValidationErrorKind.REQUIRED, "Birth date must not be null")
        if isinstance(raw, datetime):
            raw = raw.date()
        elif isinstance(raw, str):
            try:
                raw = date.fromisoformat(raw.strip())
            except ValueError:
                raise cls._fail(ValidationErrorKind.INVALID_FORMAT, f"Invalid birth date: {raw}")
        if not isinstance(raw, date):
            raise cls._fail(ValidationErrorKind.INVALID_FORMAT, "Birth date must be a date")
        if raw > utc_now().date():
            raise cls._fail(ValidationErrorKind.IN_FUTURE, "Birth date cannot be in the future")
        return raw

    def __str__(self) -> str:
        return self.value.isoformat()


class ContractPeriod(ValueObject):
    """
    Validity window of a contract.

    ``start`` defaults to now, ``end`` is optional (open-ended contract) and,
    when given, must be strictly after ``start``. All datetimes are UTC.
    """

    start: datetime
    end: datetime | None = None

    @classmethod
    def of(cls, start: datetime | None = None, end: datetime | None = None) -> "ContractPeriod":
        return cls(start=start, end=end)

    @classmethod
    def restore(cls, start: datetime, end: datetime | None) -> "ContractPeriod":
        """Rebuild a stored period; a closed period may legitimately end before it started."""
        return cls.model_validate({"start": start, "end": end}, context={RESTORE_CONTEXT: True})

    @model_validator(mode="before")
    @classmethod
    def _validate_bounds(cls, data: Any, info: ValidationInfo) -> dict:
        if not isinstance(data, dict):
            raise ValidationError(
                ValidationErrorKind.INVALID_FORMAT, "Contract period must be a mapping", field="period"
            )
        start = data.get("start")
        end = data.get("end")
        for label, value in (("start", start), ("end", end)):
            if value is not None and not isinstance(value, datetime):
                raise ValidationError(
                    ValidationErrorKind.INVALID_FORMAT,
                    f"Contract period {label} must be a datetime",
                    field="period",
                )
        start = ensure_utc(start) if start is not None else utc_now()
        end = ensure_utc(end) if end is not None else None

        restoring = bool(info.context and info.context.get(RESTORE_CONTEXT))
        if end is not None and end <= start and not restoring:
            raise ValidationError(
                ValidationErrorKind.END_NOT_AFTER_START,
                f"Contract end date must be after start date. Start: {start.isoformat()}, End: {end.isoformat()}",
                field="period",
            )
        return {"start": start, "end": end}

    def is_active_at(self, reference: datetime) -> bool:
        return self.end is None or ensure_utc(reference) < self.end

    def is_active(self) -> bool:
        return self.is_active_at(utc_now())

    def closed_at(self, moment: datetime) -> "ContractPeriod":
        """Same start, ``end`` pinned to ``moment``."""
        return ContractPeriod.restore(self.start, moment)

    def __str__(self) -> str:
        end = self.end.isoformat() if self.end else "open"
        return f"{self.start.isoformat()} -> {end}"
