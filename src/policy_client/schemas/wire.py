# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Mapping between internal policy records and the backend's wire format.

Only the Policy's own writable top-level keys are renamed to snake_case;
nested holder/driver/vehicle/coverage records keep their camelCase keys
and are passed through untouched. Reads need no mapping because the
backend already returns camelCase policy objects.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Final

from beartype import beartype

from ..models.policy import PolicyDraft, PolicyUpdate

WIRE_FIELD_NAMES: Final[Mapping[str, str]] = MappingProxyType(
    {
        "policyStatus": "policy_status",
        "policyType": "policy_type",
        "policyEffectiveDate": "policy_effective_date",
        "policyExpirationDate": "policy_expiration_date",
        "policyHolder": "policy_holder",
        "drivers": "drivers",
        "vehicles": "vehicles",
    }
)

INTERNAL_FIELD_NAMES: Final[Mapping[str, str]] = MappingProxyType(
    {wire: internal for internal, wire in WIRE_FIELD_NAMES.items()}
)


@beartype
def to_wire(partial: Mapping[str, Any]) -> dict[str, Any]:
    """Rename the writable keys present in ``partial`` to their wire names.

    Keys that are absent stay absent, so a partial update only carries what
    the caller supplied. Read-only and unknown keys are dropped.
    """
    return {
        wire: partial[internal]
        for internal, wire in WIRE_FIELD_NAMES.items()
        if internal in partial and partial[internal] is not None
    }


@beartype
def from_wire(record: Mapping[str, Any]) -> dict[str, Any]:
    """Inverse of :func:`to_wire` over the writable keys."""
    return {
        internal: record[wire]
        for wire, internal in INTERNAL_FIELD_NAMES.items()
        if wire in record and record[wire] is not None
    }


@beartype
def draft_to_wire(draft: PolicyDraft) -> dict[str, Any]:
    """Wire payload for ``POST /policies``."""
    return to_wire(draft.to_record())


@beartype
def update_to_wire(update: PolicyUpdate) -> dict[str, Any]:
    """Wire payload for ``PUT /policies/{id}`` carrying only supplied fields."""
    return to_wire(update.to_record(exclude_unset=True))
