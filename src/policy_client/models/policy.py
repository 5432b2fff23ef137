# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Policy domain models with validation rules and human-readable messages.

The aggregate is Policy → PolicyHolder → Driver[] → Vehicle[] → Coverage[].
Three policy shapes share the same value objects:

* ``PolicyDraft``: what a creation form submits; every writable field
  required, at least one driver, vehicle and coverage per vehicle.
* ``PolicyUpdate``: a partial form; only the supplied keys are checked.
* ``Policy``: a record as returned by the remote system, carrying the
  server-assigned identifiers and timestamps.
"""

from collections.abc import Callable, Mapping
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any

from beartype import beartype
from pydantic import AfterValidator, Field, PlainSerializer, model_validator
from pydantic_core import PydanticCustomError

from .base import BaseModelConfig


class PolicyStatus(str, Enum):
    """Enumeration of policy lifecycle states."""

    ACTIVE = "Active"
    INACTIVE = "Inactive"
    CANCELLED = "Cancelled"
    EXPIRED = "Expired"
    PENDING = "Pending"


class Gender(str, Enum):
    """Driver gender as recorded on the license."""

    MALE = "Male"
    FEMALE = "Female"


class MaritalStatus(str, Enum):
    """Driver marital status."""

    SINGLE = "Single"
    MARRIED = "Married"
    DIVORCED = "Divorced"
    WIDOWED = "Widowed"


class LicenseStatus(str, Enum):
    """State of a driver's license."""

    VALID = "Valid"
    EXPIRED = "Expired"
    SUSPENDED = "Suspended"
    REVOKED = "Revoked"


class CoverageType(str, Enum):
    """Coverage kinds attachable to a vehicle."""

    LIABILITY = "Liability"
    COLLISION = "Collision"
    COMPREHENSIVE = "Comprehensive"


class VehicleUsage(str, Enum):
    """How the vehicle is used."""

    PLEASURE = "Pleasure"
    COMMUTING = "Commuting"
    BUSINESS = "Business"
    FARM = "Farm"


class Ownership(str, Enum):
    """Ownership arrangement for a vehicle."""

    OWNED = "Owned"
    LEASED = "Leased"
    FINANCED = "Financed"


VIN_LENGTH = 17
MIN_DRIVER_AGE = 16
MAX_DRIVER_AGE = 100
MIN_VEHICLE_YEAR = 1900
MAX_ANNUAL_MILEAGE = 200_000


# Reusable field rules


@beartype
def _required(label: str) -> Callable[[str], str]:
    def check(value: str) -> str:
        if not value:
            raise PydanticCustomError(
                "required", "{label} is required", {"label": label}
            )
        return value

    return check


@beartype
def _non_negative(label: str) -> Callable[[Decimal], Decimal]:
    def check(value: Decimal) -> Decimal:
        if value < 0:
            raise PydanticCustomError(
                "non_negative",
                "{label} must be a positive number",
                {"label": label},
            )
        return value

    return check


@beartype
def _iso_date(label: str) -> Callable[[str], str]:
    """Accept ``YYYY-MM-DD`` (or a full ISO timestamp) and keep the string."""

    def check(value: str) -> str:
        try:
            date.fromisoformat(value)
        except ValueError:
            try:
                datetime.fromisoformat(value)
            except ValueError:
                raise PydanticCustomError(
                    "iso_date",
                    "{label} must be a valid date (YYYY-MM-DD)",
                    {"label": label},
                ) from None
        return value

    return check


@beartype
def _at_least_one(noun: str) -> Callable[[list], list]:
    def check(value: list) -> list:
        if len(value) < 1:
            raise PydanticCustomError(
                "too_short", "At least one {noun} is required", {"noun": noun}
            )
        return value

    return check


def _text(label: str, max_length: int) -> Any:
    return Annotated[str, Field(max_length=max_length), AfterValidator(_required(label))]


def _amount(label: str) -> Any:
    # Decimal in memory, a JSON number on the wire.
    return Annotated[
        Decimal,
        Field(allow_inf_nan=False),
        AfterValidator(_non_negative(label)),
        PlainSerializer(float, return_type=float, when_used="json"),
    ]


def _date_text(label: str) -> Any:
    return Annotated[str, AfterValidator(_iso_date(label))]


def _check_driver_age(value: int) -> int:
    if value < MIN_DRIVER_AGE:
        raise PydanticCustomError(
            "driver_age",
            "Driver must be at least {minimum} years old",
            {"minimum": MIN_DRIVER_AGE},
        )
    if value > MAX_DRIVER_AGE:
        raise PydanticCustomError(
            "driver_age",
            "Driver must be at most {maximum} years old",
            {"maximum": MAX_DRIVER_AGE},
        )
    return value


def _check_annual_mileage(value: int) -> int:
    if value < 0 or value > MAX_ANNUAL_MILEAGE:
        raise PydanticCustomError(
            "annual_mileage",
            "Annual mileage must be between 0 and {maximum}",
            {"maximum": MAX_ANNUAL_MILEAGE},
        )
    return value


def _check_vehicle_year(value: int) -> int:
    # Upper bound moves with the calendar: next year's models are accepted.
    latest = datetime.now().year + 1
    if value < MIN_VEHICLE_YEAR or value > latest:
        raise PydanticCustomError(
            "vehicle_year",
            "Year must be between {earliest} and {latest}",
            {"earliest": MIN_VEHICLE_YEAR, "latest": latest},
        )
    return value


def _check_vin(value: str) -> str:
    if len(value) != VIN_LENGTH:
        raise PydanticCustomError(
            "vin_length",
            "VIN must be exactly {length} characters",
            {"length": VIN_LENGTH},
        )
    return value


# Value objects


@beartype
class Address(BaseModelConfig):
    """Postal address used for policy holders and vehicle garaging."""

    street: _text("Street", 255)
    city: _text("City", 100)
    state: _text("State", 50)
    zip: _text("ZIP code", 10)


@beartype
class PolicyHolder(BaseModelConfig):
    """The person the policy is issued to."""

    first_name: _text("First name", 100)
    last_name: _text("Last name", 100)
    address: Address


@beartype
class Driver(BaseModelConfig):
    """A driver listed on the policy."""

    first_name: _text("First name", 100)
    last_name: _text("Last name", 100)
    age: Annotated[int, AfterValidator(_check_driver_age)]
    gender: Gender
    marital_status: MaritalStatus
    license_number: _text("License number", 50)
    license_state: _text("License state", 10)
    license_status: LicenseStatus
    license_effective_date: _date_text("License effective date")
    license_expiration_date: _date_text("License expiration date")
    license_class: _text("License class", 10)

    @property
    def full_name(self) -> str:
        """Display name for the driver."""
        return f"{self.first_name} {self.last_name}"


@beartype
class Coverage(BaseModelConfig):
    """A coverage line attached to one vehicle."""

    type: CoverageType
    limit: _amount("Limit")
    deductible: _amount("Deductible")


Coverages = Annotated[list[Coverage], AfterValidator(_at_least_one("coverage"))]


@beartype
class Vehicle(BaseModelConfig):
    """An insured vehicle with its coverages."""

    year: Annotated[int, AfterValidator(_check_vehicle_year)]
    make: _text("Make", 50)
    model: _text("Model", 50)
    vin: Annotated[str, AfterValidator(_check_vin)]
    usage: VehicleUsage
    primary_use: _text("Primary use", 100)
    annual_mileage: Annotated[int, AfterValidator(_check_annual_mileage)]
    ownership: Ownership
    garaging_address: Address
    coverages: Coverages


Drivers = Annotated[list[Driver], AfterValidator(_at_least_one("driver"))]
Vehicles = Annotated[list[Vehicle], AfterValidator(_at_least_one("vehicle"))]
PolicyTypeText = _text("Policy type", 50)
EffectiveDate = _date_text("Policy effective date")
ExpirationDate = _date_text("Policy expiration date")

# Top-level keys a client may write, in internal (camelCase) form.
WRITABLE_POLICY_FIELDS: tuple[str, ...] = (
    "policyStatus",
    "policyType",
    "policyEffectiveDate",
    "policyExpirationDate",
    "policyHolder",
    "drivers",
    "vehicles",
)


# Policy shapes


@beartype
class PolicyDraft(BaseModelConfig):
    """A complete policy as submitted by a creation form."""

    policy_status: PolicyStatus
    policy_type: PolicyTypeText
    policy_effective_date: EffectiveDate
    policy_expiration_date: ExpirationDate
    policy_holder: PolicyHolder
    drivers: Drivers
    vehicles: Vehicles


@beartype
class PolicyUpdate(BaseModelConfig):
    """Model for updating an existing policy.

    All fields are optional to support partial updates. A key that is
    absent or explicitly ``None`` counts as "not supplied" and is never
    sent to the remote system.
    """

    policy_status: PolicyStatus | None = None
    policy_type: PolicyTypeText | None = None
    policy_effective_date: EffectiveDate | None = None
    policy_expiration_date: ExpirationDate | None = None
    policy_holder: PolicyHolder | None = None
    drivers: Drivers | None = None
    vehicles: Vehicles | None = None

    @model_validator(mode="before")
    @classmethod
    def drop_unsupplied(cls, data: Any) -> Any:
        """Treat ``None`` values as omitted keys."""
        if isinstance(data, Mapping):
            return {key: value for key, value in data.items() if value is not None}
        return data


@beartype
class Policy(BaseModelConfig):
    """Complete policy entity as held by the remote system.

    The remote system is the source of truth for stored records, so the
    minimum-count rules of ``PolicyDraft`` are not re-applied when reading.
    """

    id: int | None = None
    policy_no: str | None = None
    policy_status: PolicyStatus
    policy_type: str = ""
    policy_effective_date: str = ""
    policy_expiration_date: str = ""
    policy_holder: PolicyHolder | None = None
    drivers: list[Driver] = Field(default_factory=list)
    vehicles: list[Vehicle] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    policy_holder_name: str | None = None

    @property
    def is_persisted(self) -> bool:
        """Whether the remote system has assigned an identity."""
        return self.id is not None

    @property
    def holder_display_name(self) -> str:
        """Server-derived holder name, falling back to the nested holder."""
        if self.policy_holder_name:
            return self.policy_holder_name
        if self.policy_holder is not None:
            return f"{self.policy_holder.first_name} {self.policy_holder.last_name}"
        return ""
