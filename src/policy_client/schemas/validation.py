# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Record validation returning field-path-indexed messages.

``validate(record, kind)`` checks a plain mapping (as produced by a form or
decoded from JSON) against one of the domain shapes and returns either the
validated model or a ``FieldErrors`` mapping such as::

    {"vehicles[0].coverages[1].limit": ["Limit must be a positive number"]}

Validation never raises: malformed input of any kind comes back as data.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any

from beartype import beartype
from pydantic import BaseModel, ValidationError

from ..core.errors import ROOT_FIELD, FieldErrors, format_field_path
from ..core.result_types import Err, Ok, Result
from ..models.auth import LoginCredentials, RegistrationData
from ..models.policy import (
    Address,
    Coverage,
    Driver,
    Policy,
    PolicyDraft,
    PolicyHolder,
    PolicyUpdate,
    Vehicle,
)


class ShapeKind(str, Enum):
    """Shapes a record can be validated against."""

    ADDRESS = "address"
    POLICY_HOLDER = "policy_holder"
    DRIVER = "driver"
    COVERAGE = "coverage"
    VEHICLE = "vehicle"
    POLICY = "policy"
    POLICY_UPDATE = "policy_update"
    POLICY_RECORD = "policy_record"
    LOGIN = "login"
    REGISTRATION = "registration"


SHAPES: dict[ShapeKind, type[BaseModel]] = {
    ShapeKind.ADDRESS: Address,
    ShapeKind.POLICY_HOLDER: PolicyHolder,
    ShapeKind.DRIVER: Driver,
    ShapeKind.COVERAGE: Coverage,
    ShapeKind.VEHICLE: Vehicle,
    ShapeKind.POLICY: PolicyDraft,
    ShapeKind.POLICY_UPDATE: PolicyUpdate,
    ShapeKind.POLICY_RECORD: Policy,
    ShapeKind.LOGIN: LoginCredentials,
    ShapeKind.REGISTRATION: RegistrationData,
}


@beartype
def field_errors_from(exc: ValidationError) -> FieldErrors:
    """Group pydantic errors by dotted field path, keeping their order."""
    errors: FieldErrors = {}
    for error in exc.errors(include_url=False):
        path = format_field_path(tuple(error["loc"]))
        errors.setdefault(path, []).append(error["msg"])
    return errors


@beartype
def validate(record: Any, kind: ShapeKind | str) -> Result[BaseModel, FieldErrors]:
    """Validate ``record`` against the shape named by ``kind``."""
    shape = SHAPES[ShapeKind(kind)]
    if not isinstance(record, Mapping):
        return Err({ROOT_FIELD: [f"Expected an object, got {type(record).__name__}"]})
    try:
        return Ok(shape.model_validate(dict(record)))
    except ValidationError as e:
        return Err(field_errors_from(e))


@beartype
def is_valid(record: Any, kind: ShapeKind | str) -> bool:
    """Whether ``record`` satisfies the shape named by ``kind``."""
    return validate(record, kind).is_ok()
