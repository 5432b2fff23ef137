"""Unit tests for record validation and field-path error reporting."""

from typing import Any

import pytest

from policy_client.core.errors import ROOT_FIELD, format_field_path
from policy_client.core.result_types import Err, Ok
from policy_client.models.policy import Policy, PolicyDraft, PolicyStatus, PolicyUpdate
from policy_client.schemas.validation import ShapeKind, is_valid, validate
from tests.fixtures.policy_data import (
    VALID_ADDRESS,
    VALID_DRIVER,
    VALID_VIN,
    make_policy_record,
    make_stored_policy,
    make_vehicle,
)


def _errors(record: Any, kind: ShapeKind | str) -> dict[str, list[str]]:
    result = validate(record, kind)
    assert isinstance(result, Err), f"expected failure, got {result}"
    return result.unwrap_err()


class TestFieldPaths:
    """Test rendering of nested error locations."""

    def test_indices_render_in_brackets(self) -> None:
        """List indices attach to the preceding key."""
        assert (
            format_field_path(("vehicles", 0, "coverages", 1, "limit"))
            == "vehicles[0].coverages[1].limit"
        )

    def test_empty_location_is_root(self) -> None:
        """Whole-record errors land on the root path."""
        assert format_field_path(()) == ROOT_FIELD


class TestPolicyDraftValidation:
    """Test validation of complete creation-form records."""

    def test_valid_record_passes(self, valid_policy_record: dict[str, Any]) -> None:
        """A complete record validates into a draft."""
        result = validate(valid_policy_record, ShapeKind.POLICY)

        assert isinstance(result, Ok)
        draft = result.unwrap()
        assert isinstance(draft, PolicyDraft)
        assert draft.policy_status is PolicyStatus.ACTIVE
        assert draft.vehicles[0].coverages[0].limit == 100000

    def test_kind_accepts_plain_string(self, valid_policy_record: dict[str, Any]) -> None:
        """Shape kinds may be given by value."""
        assert is_valid(valid_policy_record, "policy")

    def test_unknown_kind_raises(self, valid_policy_record: dict[str, Any]) -> None:
        """Asking for a shape that does not exist is a programming error."""
        with pytest.raises(ValueError):
            validate(valid_policy_record, "invoice")

    def test_empty_drivers_fails_at_drivers(self) -> None:
        """A policy needs at least one driver."""
        errors = _errors(make_policy_record(drivers=[]), ShapeKind.POLICY)
        assert errors == {"drivers": ["At least one driver is required"]}

    def test_empty_vehicles_fails_at_vehicles(self) -> None:
        """A policy needs at least one vehicle."""
        errors = _errors(make_policy_record(vehicles=[]), ShapeKind.POLICY)
        assert errors == {"vehicles": ["At least one vehicle is required"]}

    def test_empty_coverages_fails_at_that_vehicle(self) -> None:
        """Each vehicle needs at least one coverage."""
        record = make_policy_record(vehicles=[make_vehicle(), make_vehicle(coverages=[])])
        errors = _errors(record, ShapeKind.POLICY)
        assert errors == {"vehicles[1].coverages": ["At least one coverage is required"]}

    @pytest.mark.parametrize("vin", [VALID_VIN[:16], VALID_VIN + "X"])
    def test_vin_must_be_seventeen_characters(self, vin: str) -> None:
        """VINs of 16 or 18 characters are rejected."""
        record = make_policy_record(vehicles=[make_vehicle(vin=vin)])
        errors = _errors(record, ShapeKind.POLICY)
        assert errors == {"vehicles[0].vin": ["VIN must be exactly 17 characters"]}

    @pytest.mark.parametrize("age", [16, 100])
    def test_driver_age_bounds_accepted(self, age: int) -> None:
        """Ages at either bound are allowed."""
        record = make_policy_record(drivers=[{**VALID_DRIVER, "age": age}])
        assert is_valid(record, ShapeKind.POLICY)

    def test_underage_driver_rejected(self) -> None:
        """Drivers younger than 16 are rejected with a readable message."""
        record = make_policy_record(drivers=[{**VALID_DRIVER, "age": 15}])
        errors = _errors(record, ShapeKind.POLICY)
        assert errors == {"drivers[0].age": ["Driver must be at least 16 years old"]}

    def test_driver_over_maximum_age_rejected(self) -> None:
        """Drivers older than 100 are rejected with a readable message."""
        record = make_policy_record(drivers=[{**VALID_DRIVER, "age": 101}])
        errors = _errors(record, ShapeKind.POLICY)
        assert errors == {"drivers[0].age": ["Driver must be at most 100 years old"]}

    @pytest.mark.parametrize("limit", [float("inf"), float("nan"), -1])
    def test_coverage_limit_must_be_finite_and_non_negative(self, limit: float) -> None:
        """Infinite, NaN and negative limits are rejected at the limit's path."""
        vehicle = make_vehicle(
            coverages=[{"type": "Liability", "limit": limit, "deductible": 500}]
        )
        errors = _errors(make_policy_record(vehicles=[vehicle]), ShapeKind.POLICY)
        assert list(errors) == ["vehicles[0].coverages[0].limit"]

    def test_negative_limit_message(self) -> None:
        """A negative limit names the field."""
        vehicle = make_vehicle(
            coverages=[{"type": "Liability", "limit": -1, "deductible": 500}]
        )
        errors = _errors(make_policy_record(vehicles=[vehicle]), ShapeKind.POLICY)
        assert errors == {
            "vehicles[0].coverages[0].limit": ["Limit must be a positive number"]
        }

    @pytest.mark.parametrize("deductible", [float("-inf"), float("nan")])
    def test_coverage_deductible_must_be_finite(self, deductible: float) -> None:
        """Non-finite deductibles are rejected at the deductible's path."""
        vehicle = make_vehicle(
            coverages=[{"type": "Liability", "limit": 100000, "deductible": deductible}]
        )
        errors = _errors(make_policy_record(vehicles=[vehicle]), ShapeKind.POLICY)
        assert list(errors) == ["vehicles[0].coverages[0].deductible"]

    def test_nested_messages_are_human_readable(self) -> None:
        """Errors deep in the aggregate keep their full path and message."""
        vehicle = make_vehicle(
            coverages=[
                {"type": "Liability", "limit": 100000, "deductible": 500},
                {"type": "Collision", "limit": -1, "deductible": 250},
            ]
        )
        record = make_policy_record(
            policyHolder={
                "firstName": "Jane",
                "lastName": "Doe",
                "address": {**VALID_ADDRESS, "street": ""},
            },
            vehicles=[vehicle],
        )

        errors = _errors(record, ShapeKind.POLICY)

        assert errors == {
            "policyHolder.address.street": ["Street is required"],
            "vehicles[0].coverages[1].limit": ["Limit must be a positive number"],
        }

    def test_missing_field_reported_by_its_name(self) -> None:
        """An absent required key is reported at its camelCase path."""
        record = make_policy_record()
        del record["policyType"]

        errors = _errors(record, ShapeKind.POLICY)

        assert list(errors) == ["policyType"]

    def test_invalid_date_rejected(self) -> None:
        """Dates must parse as ISO calendar dates."""
        record = make_policy_record(policyEffectiveDate="2025-13-40")
        errors = _errors(record, ShapeKind.POLICY)
        assert errors == {
            "policyEffectiveDate": [
                "Policy effective date must be a valid date (YYYY-MM-DD)"
            ]
        }

    def test_expiration_before_effective_date_is_allowed(self) -> None:
        """Date ordering is not cross-checked."""
        record = make_policy_record(
            policyEffectiveDate="2026-01-01", policyExpirationDate="2025-01-01"
        )
        assert is_valid(record, ShapeKind.POLICY)

    def test_unknown_keys_ignored(self, valid_policy_record: dict[str, Any]) -> None:
        """Keys the client does not model are dropped, not rejected."""
        record = {**valid_policy_record, "brokerNotes": "call back"}
        assert is_valid(record, ShapeKind.POLICY)

    @pytest.mark.parametrize("record", [None, [1, 2], "policy", 42])
    def test_non_mapping_fails_at_root(self, record: Any) -> None:
        """Anything that is not an object fails with a single root error."""
        errors = _errors(record, ShapeKind.POLICY)
        assert list(errors) == [ROOT_FIELD]
        assert errors[ROOT_FIELD][0].startswith("Expected an object")


class TestPolicyUpdateValidation:
    """Test validation of partial update forms."""

    def test_only_supplied_fields_checked(self) -> None:
        """A partial form does not need the other required keys."""
        result = validate({"policyStatus": "Cancelled"}, ShapeKind.POLICY_UPDATE)

        assert isinstance(result, Ok)
        update = result.unwrap()
        assert isinstance(update, PolicyUpdate)
        assert update.model_fields_set == {"policy_status"}

    def test_supplied_fields_still_validated(self) -> None:
        """Rules apply to whatever is supplied."""
        errors = _errors({"drivers": []}, ShapeKind.POLICY_UPDATE)
        assert errors == {"drivers": ["At least one driver is required"]}

    def test_none_counts_as_omitted(self) -> None:
        """Explicit nulls are treated as absent keys."""
        result = validate(
            {"policyType": None, "policyStatus": "Active"}, ShapeKind.POLICY_UPDATE
        )

        assert isinstance(result, Ok)
        assert result.unwrap().model_fields_set == {"policy_status"}

    def test_empty_partial_is_valid(self) -> None:
        """An update with nothing supplied passes."""
        assert is_valid({}, ShapeKind.POLICY_UPDATE)


class TestNestedShapes:
    """Test validation of the value objects on their own."""

    def test_address(self) -> None:
        """ZIP code has a readable label."""
        errors = _errors({**VALID_ADDRESS, "zip": ""}, ShapeKind.ADDRESS)
        assert errors == {"zip": ["ZIP code is required"]}

    def test_vehicle_year_range(self) -> None:
        """Vehicles older than 1900 are rejected."""
        errors = _errors(make_vehicle(year=1899), ShapeKind.VEHICLE)
        assert list(errors) == ["year"]
        assert errors["year"][0].startswith("Year must be between 1900 and")

    @pytest.mark.parametrize("mileage", [250_000, -1])
    def test_annual_mileage_bounds(self, mileage: int) -> None:
        """Annual mileage outside 0..200000 gets a readable message."""
        errors = _errors(make_vehicle(annualMileage=mileage), ShapeKind.VEHICLE)
        assert errors == {
            "annualMileage": ["Annual mileage must be between 0 and 200000"]
        }

    @pytest.mark.parametrize("mileage", [0, 200_000])
    def test_annual_mileage_bounds_accepted(self, mileage: int) -> None:
        """Mileage at either bound is allowed."""
        assert is_valid(make_vehicle(annualMileage=mileage), ShapeKind.VEHICLE)

    def test_unknown_enum_value(self) -> None:
        """Enumerated fields reject values outside their set."""
        errors = _errors({**VALID_DRIVER, "gender": "Unknown"}, ShapeKind.DRIVER)
        assert list(errors) == ["gender"]


class TestPolicyRecordValidation:
    """Test the read model for records returned by the remote system."""

    def test_stored_policy_parses(self) -> None:
        """Server-assigned fields are kept."""
        result = validate(make_stored_policy(7), ShapeKind.POLICY_RECORD)

        assert isinstance(result, Ok)
        policy = result.unwrap()
        assert isinstance(policy, Policy)
        assert policy.id == 7
        assert policy.policy_no == "POL-2025-000007"
        assert policy.is_persisted
        assert policy.holder_display_name == "Jane Doe"

    def test_minimum_counts_not_enforced_on_read(self) -> None:
        """Stored records are trusted even when their lists are empty."""
        assert is_valid(make_stored_policy(7, drivers=[]), ShapeKind.POLICY_RECORD)


class TestCredentialValidation:
    """Test login and registration forms."""

    def test_login_requires_valid_email(self) -> None:
        """Email must be a real address."""
        errors = _errors({"email": "not-an-email", "password": "x"}, ShapeKind.LOGIN)
        assert list(errors) == ["email"]

    def test_login_requires_password(self) -> None:
        """Password may not be empty."""
        errors = _errors({"email": "jane@example.com", "password": ""}, ShapeKind.LOGIN)
        assert errors == {"password": ["Password is required"]}

    def test_password_confirmation_mismatch(self) -> None:
        """A mismatched confirmation fails exactly at the confirmation field."""
        errors = _errors(
            {
                "name": "Jane Doe",
                "email": "jane@example.com",
                "password": "abcdefgh",
                "password_confirmation": "abcdefg1",
            },
            ShapeKind.REGISTRATION,
        )
        assert errors == {"password_confirmation": ["Passwords don't match"]}

    def test_password_confirmation_match(self) -> None:
        """Equal values pass."""
        assert is_valid(
            {
                "name": "Jane Doe",
                "email": "jane@example.com",
                "password": "abcdefgh",
                "password_confirmation": "abcdefgh",
            },
            ShapeKind.REGISTRATION,
        )

    def test_short_password(self) -> None:
        """Passwords need eight characters."""
        errors = _errors(
            {
                "name": "Jane Doe",
                "email": "jane@example.com",
                "password": "short",
                "password_confirmation": "short",
            },
            ShapeKind.REGISTRATION,
        )
        assert errors == {"password": ["Password must be at least 8 characters"]}

    def test_short_password_and_mismatch_both_reported(self) -> None:
        """A rejected password does not hide a mismatched confirmation."""
        errors = _errors(
            {
                "name": "Jane Doe",
                "email": "jane@example.com",
                "password": "short",
                "password_confirmation": "other",
            },
            ShapeKind.REGISTRATION,
        )
        assert errors == {
            "password": ["Password must be at least 8 characters"],
            "password_confirmation": ["Passwords don't match"],
        }

    def test_mismatch_reported_alongside_other_field_errors(self) -> None:
        """Errors on unrelated fields are kept next to the mismatch."""
        errors = _errors(
            {
                "name": "",
                "email": "jane@example.com",
                "password": "abcdefgh",
                "password_confirmation": "abcdefg1",
            },
            ShapeKind.REGISTRATION,
        )
        assert errors == {
            "name": ["Name is required"],
            "password_confirmation": ["Passwords don't match"],
        }
