"""Unit tests for the internal/wire field mapping."""

from decimal import Decimal
from typing import Any

from policy_client.core.result_types import Ok
from policy_client.models.policy import WRITABLE_POLICY_FIELDS
from policy_client.schemas.validation import ShapeKind, validate
from policy_client.schemas.wire import (
    WIRE_FIELD_NAMES,
    draft_to_wire,
    from_wire,
    to_wire,
    update_to_wire,
)
from tests.fixtures.policy_data import make_stored_policy


class TestToWire:
    """Test renaming of top-level policy keys."""

    def test_partial_carries_only_supplied_keys(self) -> None:
        """Exactly the supplied keys are renamed and nothing else appears."""
        assert to_wire({"policyStatus": "Active", "policyType": "Auto"}) == {
            "policy_status": "Active",
            "policy_type": "Auto",
        }

    def test_empty_input(self) -> None:
        """No keys in, no keys out."""
        assert to_wire({}) == {}

    def test_read_only_and_unknown_keys_dropped(self) -> None:
        """Server-assigned and unknown keys never reach the wire."""
        record = make_stored_policy(7, somethingElse=True)

        wire = to_wire(record)

        assert set(wire) == set(WIRE_FIELD_NAMES.values())
        assert "id" not in wire
        assert "policy_no" not in wire

    def test_none_values_not_emitted(self) -> None:
        """A null value is the same as an absent key."""
        assert to_wire({"policyStatus": None, "policyType": "Auto"}) == {
            "policy_type": "Auto"
        }

    def test_nested_records_pass_through(self, valid_policy_record: dict[str, Any]) -> None:
        """Nested holder and vehicle keys keep their camelCase names."""
        wire = to_wire(valid_policy_record)

        assert wire["policy_holder"] is valid_policy_record["policyHolder"]
        assert "firstName" in wire["policy_holder"]
        assert "garagingAddress" in wire["vehicles"][0]

    def test_mapping_covers_every_writable_field(self) -> None:
        """The mapping and the writable field list agree."""
        assert tuple(WIRE_FIELD_NAMES) == WRITABLE_POLICY_FIELDS


class TestFromWire:
    """Test the inverse mapping."""

    def test_round_trip(self, valid_policy_record: dict[str, Any]) -> None:
        """Mapping to the wire and back restores the writable keys."""
        assert from_wire(to_wire(valid_policy_record)) == valid_policy_record

    def test_partial_round_trip(self) -> None:
        """Partial records survive the round trip without gaining keys."""
        partial = {"policyExpirationDate": "2027-01-01"}
        assert from_wire(to_wire(partial)) == partial


class TestModelSerialization:
    """Test wire payloads built from validated models."""

    def test_draft_payload(self, valid_policy_record: dict[str, Any]) -> None:
        """A draft serializes to all seven wire keys."""
        result = validate(valid_policy_record, ShapeKind.POLICY)
        assert isinstance(result, Ok)

        payload = draft_to_wire(result.unwrap())

        assert set(payload) == set(WIRE_FIELD_NAMES.values())
        assert payload["policy_status"] == "Active"
        assert payload["vehicles"][0]["coverages"][0]["type"] == "Liability"

    def test_update_payload_only_has_supplied_fields(self) -> None:
        """Unsupplied fields stay off the update payload."""
        result = validate(
            {"policyStatus": "Cancelled", "policyType": None}, ShapeKind.POLICY_UPDATE
        )
        assert isinstance(result, Ok)

        assert update_to_wire(result.unwrap()) == {"policy_status": "Cancelled"}

    def test_amounts_are_json_numbers(self, valid_policy_record: dict[str, Any]) -> None:
        """Decimal amounts go out as numbers, not strings."""
        draft = validate(valid_policy_record, ShapeKind.POLICY).unwrap()
        assert isinstance(draft.vehicles[0].coverages[0].limit, Decimal)

        coverage = draft_to_wire(draft)["vehicles"][0]["coverages"][0]

        assert coverage["limit"] == 100000
        assert isinstance(coverage["limit"], float)
        assert isinstance(coverage["deductible"], float)
